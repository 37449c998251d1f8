"""Client settings, read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

API_BASE_URL = os.getenv("CAMPUS_FIXIT_API_URL", "http://localhost:8000")
CONFIG_DIR = Path(os.getenv("CAMPUS_FIXIT_HOME", str(Path.home() / ".campus_fixit")))
CREDENTIALS_FILE = CONFIG_DIR / "credentials.json"
REQUEST_TIMEOUT_SECONDS = float(os.getenv("CAMPUS_FIXIT_TIMEOUT", "30"))

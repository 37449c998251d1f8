import json
import logging
from pathlib import Path

from client import config

logger = logging.getLogger(__name__)


class TokenStore:
    """Keeps the bearer token and signed-in user on disk between runs."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path or config.CREDENTIALS_FILE)

    def load(self) -> dict | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable credentials file %s", self.path)
            return None
        if not data.get("token") or not data.get("user"):
            return None
        return data

    def get_token(self) -> str | None:
        data = self.load()
        return data["token"] if data else None

    def save(self, token: str, user: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}, indent=2), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

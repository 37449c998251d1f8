from client.api import ApiClient
from client.models import AuthResponse, User


class AuthSession:
    """The signed-in user and their token.

    Logging out only forgets the token locally; the server keeps no session
    and the token stays valid until it expires.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.user: User | None = None
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def load(self) -> User | None:
        stored = self.api.store.load()
        if stored:
            self.token = stored["token"]
            self.user = User.model_validate(stored["user"])
        return self.user

    def _remember(self, payload: dict) -> User:
        auth = AuthResponse.model_validate(payload)
        self.api.store.save(auth.token, auth.user.model_dump())
        self.token = auth.token
        self.user = auth.user
        return auth.user

    def login(self, email: str, password: str) -> User:
        return self._remember(self.api.post("/api/auth/login", json={"email": email, "password": password}))

    def register(self, name: str, email: str, password: str, role: str = "student") -> User:
        payload = {"name": name, "email": email, "password": password, "role": role}
        return self._remember(self.api.post("/api/auth/register", json=payload))

    def refresh(self) -> User:
        """Re-read the current user from the server, confirming the token still works."""
        self.user = User.model_validate(self.api.get("/api/auth/me")["user"])
        return self.user

    def logout(self) -> None:
        self.api.store.clear()
        self.token = None
        self.user = None

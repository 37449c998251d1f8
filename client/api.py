"""HTTP access to the Campus FixIt API.

Every request picks up the stored bearer token, and every failure surfaces as
an ``ApiError`` carrying the server's own message when it sent one.
"""

import httpx

from client import config
from client.storage import TokenStore


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "An error occurred"

    if isinstance(body, dict):
        if body.get("error"):
            return str(body["error"])
        if body.get("message"):
            return str(body["message"])
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])
    return "An error occurred"


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        store: TokenStore | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.store = store or TokenStore()
        self._http = httpx.Client(
            base_url=base_url or config.API_BASE_URL,
            timeout=timeout or config.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict:
        token = self.store.get_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def request(self, method: str, path: str, **kwargs) -> dict:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            raise ApiError("Network error. Please check your connection.") from exc

        if response.is_error:
            raise ApiError(extract_error_message(response), response.status_code)

        if not response.content:
            return {}
        return response.json()

    def get(self, path: str, params: dict | None = None) -> dict:
        if params:
            params = {key: value for key, value in params.items() if value}
        return self.request("GET", path, params=params or None)

    def post(self, path: str, json: dict | None = None, data: dict | None = None, files: dict | None = None) -> dict:
        return self.request("POST", path, json=json, data=data, files=files)

    def put(self, path: str, json: dict | None = None) -> dict:
        return self.request("PUT", path, json=json)

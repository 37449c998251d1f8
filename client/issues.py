"""Client-side issue collection.

The local list is only ever replaced by a server response; mutations are
followed by a re-fetch instead of being applied locally.
"""

import mimetypes
from pathlib import Path

from client.api import ApiClient, ApiError
from client.models import Issue, IssueEnvelope, IssuesResponse


def guess_image_type(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    if content_type and content_type.startswith("image/"):
        return content_type
    return "image/jpeg"


class IssueState:
    def __init__(self, api: ApiClient):
        self.api = api
        self.issues: list[Issue] = []
        self.loading = False
        self.error: str | None = None

    def _run(self, fallback_error: str, action):
        self.loading = True
        self.error = None
        try:
            return action()
        except ApiError as exc:
            self.error = exc.message or fallback_error
            raise
        finally:
            self.loading = False

    def _replace(self, payload: dict) -> list[Issue]:
        self.issues = IssuesResponse.model_validate(payload).issues
        return self.issues

    def fetch_issues(self, category: str | None = None, status: str | None = None) -> list[Issue]:
        params = {"category": category, "status": status}
        return self._run(
            "Failed to fetch issues",
            lambda: self._replace(self.api.get("/api/issues", params=params)),
        )

    def fetch_my_issues(self) -> list[Issue]:
        return self._run(
            "Failed to fetch issues",
            lambda: self._replace(self.api.get("/api/issues/my-issues")),
        )

    def fetch_admin_issues(self, category: str | None = None, status: str | None = None) -> list[Issue]:
        params = {"category": category, "status": status}
        return self._run(
            "Failed to fetch admin issues",
            lambda: self._replace(self.api.get("/api/admin/issues", params=params)),
        )

    def fetch_issue_by_id(self, issue_id: str) -> Issue:
        return self._run(
            "Failed to fetch issue",
            lambda: IssueEnvelope.model_validate(self.api.get(f"/api/issues/{issue_id}")).issue,
        )

    def create_issue(
        self,
        title: str,
        description: str,
        category: str,
        image_path: str | Path | None = None,
    ) -> list[Issue]:
        def action():
            data = {"title": title, "description": description, "category": category}
            if image_path is None:
                self.api.post("/api/issues", data=data)
            else:
                path = Path(image_path)
                with path.open("rb") as handle:
                    files = {"image": (path.name, handle, guess_image_type(path))}
                    self.api.post("/api/issues", data=data, files=files)
            return self._replace(self.api.get("/api/issues/my-issues"))

        return self._run("Failed to create issue", action)

    def update_issue(self, issue_id: str, status: str | None = None, remark: str | None = None) -> list[Issue]:
        def action():
            body = {}
            if status:
                body["status"] = status
            if remark:
                body["remark"] = remark
            self.api.put(f"/api/admin/issues/{issue_id}", json=body)
            return self._replace(self.api.get("/api/admin/issues"))

        return self._run("Failed to update issue", action)

    def resolve_issue(self, issue_id: str) -> list[Issue]:
        def action():
            self.api.put(f"/api/admin/issues/{issue_id}/resolve")
            return self._replace(self.api.get("/api/admin/issues"))

        return self._run("Failed to resolve issue", action)

"""Response shapes shared by the student and admin routers."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from backend.models.issue import Issue, Remark
from backend.models.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def to_utc_iso(value: datetime) -> str:
    # Naive values are UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class UserSummary(CamelModel):
    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class UserRef(CamelModel):
    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User | None, fallback_id: str) -> "UserRef":
        if user is None:
            return cls(id=fallback_id, name="", email="")
        return cls(id=user.id, name=user.name, email=user.email)


class RemarkResponse(CamelModel):
    id: int
    text: str
    added_by: UserRef
    added_at: datetime

    @field_serializer("added_at")
    def serialize_added_at(self, value: datetime) -> str:
        return to_utc_iso(value)

    @classmethod
    def from_remark(cls, remark: Remark) -> "RemarkResponse":
        return cls(
            id=remark.id,
            text=remark.text,
            added_by=UserRef.from_user(remark.author, remark.added_by),
            added_at=remark.added_at,
        )


class IssueResponse(CamelModel):
    id: str
    title: str
    description: str
    category: str
    status: str
    image_url: str | None = None
    created_by: UserRef
    remarks: list[RemarkResponse]
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, value: datetime) -> str:
        return to_utc_iso(value)

    @classmethod
    def from_issue(cls, issue: Issue) -> "IssueResponse":
        return cls(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            category=issue.category,
            status=issue.status,
            image_url=issue.image_url,
            created_by=UserRef.from_user(issue.creator, issue.created_by),
            remarks=[RemarkResponse.from_remark(remark) for remark in issue.remarks],
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )


class IssueEnvelope(CamelModel):
    message: str | None = None
    issue: IssueResponse


class IssueFiltersResponse(CamelModel):
    category: str | None = None
    status: str | None = None


class IssueListResponse(CamelModel):
    count: int
    issues: list[IssueResponse]

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> "IssueListResponse":
        return cls(count=len(issues), issues=[IssueResponse.from_issue(issue) for issue in issues])


class FilteredIssueListResponse(IssueListResponse):
    filters: IssueFiltersResponse

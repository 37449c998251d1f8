from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CATEGORIES = ("Electrical", "Water", "Internet", "Infrastructure")
STATUSES = ("Open", "In Progress", "Resolved")


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class User(ApiModel):
    id: str
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserRef(ApiModel):
    id: str
    name: str = ""
    email: str = ""


class Remark(ApiModel):
    id: int
    text: str
    added_by: UserRef
    added_at: datetime


class Issue(ApiModel):
    id: str
    title: str
    description: str
    category: str
    status: str
    image_url: str | None = None
    created_by: UserRef
    remarks: list[Remark] = []
    created_at: datetime
    updated_at: datetime


class AuthResponse(ApiModel):
    message: str | None = None
    token: str
    user: User


class IssueEnvelope(ApiModel):
    message: str | None = None
    issue: Issue


class IssuesResponse(ApiModel):
    count: int
    issues: list[Issue]
    filters: dict | None = None

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusUpdateEvent:
    """An admin change to an issue that the reporting student should hear about."""

    issue_id: str
    student_name: str
    student_email: str
    issue_title: str
    issue_category: str
    old_status: str | None
    new_status: str
    remark: str | None = None
    admin_name: str | None = None

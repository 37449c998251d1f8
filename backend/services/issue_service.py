"""Issue lifecycle: who may create, read and change an issue.

Statuses carry no transition guards; an admin may set any of them at any
time. Remarks are stored as rows in ``issue_remarks`` and are only ever
inserted, so two admins commenting at once cannot overwrite each other.
Status writes are last-write-wins.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backend.core.errors import ForbiddenError, NotFoundError
from backend.models.clock import utcnow
from backend.models.issue import STATUS_OPEN, STATUS_RESOLVED, Issue, Remark
from backend.models.user import User
from backend.notifications.events import StatusUpdateEvent
from backend.services.image_uploader import ImageUploader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueFilters:
    category: str | None = None
    status: str | None = None

    def as_dict(self) -> dict:
        return {"category": self.category, "status": self.status}


def _apply_filters(query, filters: IssueFilters | None):
    if filters is None:
        return query
    if filters.category:
        query = query.filter(Issue.category == filters.category)
    if filters.status:
        query = query.filter(Issue.status == filters.status)
    return query


def _newest_first(query):
    return query.order_by(Issue.created_at.desc(), Issue.id.desc())


def _get_issue(db: Session, issue_id: str) -> Issue:
    issue = db.get(Issue, issue_id)
    if issue is None:
        raise NotFoundError("Issue not found")
    return issue


def create_issue(
    db: Session,
    owner_id: str,
    title: str,
    description: str,
    category: str,
    image_bytes: bytes | None = None,
    image_filename: str | None = None,
    uploader: ImageUploader | None = None,
) -> Issue:
    image_url = None
    if image_bytes:
        if uploader is None:
            raise ValueError("An image uploader is required when image bytes are given")
        # Upload before touching the database so a failure leaves nothing behind.
        image_url = uploader.upload(image_bytes, filename=image_filename)

    now = utcnow()
    issue = Issue(
        title=title,
        description=description,
        category=category,
        status=STATUS_OPEN,
        image_url=image_url,
        created_by=owner_id,
        created_at=now,
        updated_at=now,
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s created by %s in %s", issue.id, owner_id, category)
    return issue


def list_own(db: Session, owner_id: str, filters: IssueFilters | None = None) -> list[Issue]:
    query = db.query(Issue).filter(Issue.created_by == owner_id)
    return _newest_first(_apply_filters(query, filters)).all()


def get_own(db: Session, owner_id: str, issue_id: str) -> Issue:
    issue = _get_issue(db, issue_id)
    if issue.created_by != owner_id:
        raise ForbiddenError("Access denied. You can only view your own issues.")
    return issue


def list_all(db: Session, filters: IssueFilters | None = None) -> list[Issue]:
    return _newest_first(_apply_filters(db.query(Issue), filters)).all()


def _touch(db: Session, issue: Issue, values: dict) -> None:
    now = utcnow()
    # Clock skew between workers must not move updated_at backwards.
    values["updated_at"] = max(now, issue.updated_at)
    db.query(Issue).filter(Issue.id == issue.id).update(values, synchronize_session=False)


def _build_event(
    db: Session,
    issue: Issue,
    admin_id: str,
    old_status: str,
    remark: str | None,
) -> StatusUpdateEvent:
    admin = db.get(User, admin_id)
    student = issue.creator
    return StatusUpdateEvent(
        issue_id=issue.id,
        student_name=student.name if student else "",
        student_email=student.email if student else "",
        issue_title=issue.title,
        issue_category=issue.category,
        old_status=old_status,
        new_status=issue.status,
        remark=remark,
        admin_name=admin.name if admin else None,
    )


def update_issue(
    db: Session,
    admin_id: str,
    issue_id: str,
    status: str | None = None,
    remark: str | None = None,
) -> tuple[Issue, StatusUpdateEvent | None]:
    """Apply an admin update.

    Returns the refreshed issue and, when the status changed or a remark was
    added, the event the caller should hand to the notification dispatcher.
    An update with neither field only refreshes ``updated_at``.
    """
    issue = _get_issue(db, issue_id)
    old_status = issue.status

    values = {}
    if status is not None:
        values["status"] = status
    _touch(db, issue, values)

    if remark:
        db.add(Remark(issue_id=issue.id, text=remark, added_by=admin_id, added_at=utcnow()))

    db.commit()
    db.refresh(issue)

    event = None
    if issue.status != old_status or remark:
        event = _build_event(db, issue, admin_id, old_status, remark)

    logger.info(
        "Issue %s updated by %s (status %s -> %s, remark=%s)",
        issue.id,
        admin_id,
        old_status,
        issue.status,
        bool(remark),
    )
    return issue, event


def resolve_issue(db: Session, admin_id: str, issue_id: str) -> tuple[Issue, StatusUpdateEvent]:
    issue = _get_issue(db, issue_id)
    old_status = issue.status

    _touch(db, issue, {"status": STATUS_RESOLVED})
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s resolved by %s", issue.id, admin_id)
    return issue, _build_event(db, issue, admin_id, old_status, None)

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin
from backend.database import get_db
from backend.models.issue import STATUSES
from backend.notifications.dispatcher import NotificationDispatcher, get_notification_dispatcher
from backend.schemas import FilteredIssueListResponse, IssueEnvelope, IssueFiltersResponse, IssueListResponse, IssueResponse
from backend.services import issue_service
from backend.services.auth_service import CallerIdentity
from backend.services.issue_service import IssueFilters

router = APIRouter(tags=['admin'])


class UpdateIssueRequest(BaseModel):
    status: str | None = None
    remark: str | None = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value not in STATUSES:
            raise ValueError('Invalid status')
        return value

    @field_validator('remark')
    @classmethod
    def validate_remark(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError('Remark cannot be empty')
        return normalized


@router.get('/issues', response_model=FilteredIssueListResponse)
def list_all_issues(
    category: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias='status'),
    caller: CallerIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    filters = IssueFilters(category=category or None, status=status_filter or None)
    listing = IssueListResponse.from_issues(issue_service.list_all(db, filters))
    return FilteredIssueListResponse(
        count=listing.count,
        issues=listing.issues,
        filters=IssueFiltersResponse(**filters.as_dict()),
    )


@router.put('/issues/{issue_id}', response_model=IssueEnvelope)
def update_issue(
    issue_id: str,
    background_tasks: BackgroundTasks,
    data: UpdateIssueRequest | None = None,
    caller: CallerIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    data = data or UpdateIssueRequest()
    issue, event = issue_service.update_issue(db, caller.id, issue_id, status=data.status, remark=data.remark)
    if event is not None:
        background_tasks.add_task(dispatcher.dispatch, event)
    return IssueEnvelope(message='Issue updated successfully', issue=IssueResponse.from_issue(issue))


@router.put('/issues/{issue_id}/resolve', response_model=IssueEnvelope)
def resolve_issue(
    issue_id: str,
    background_tasks: BackgroundTasks,
    caller: CallerIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    issue, event = issue_service.resolve_issue(db, caller.id, issue_id)
    background_tasks.add_task(dispatcher.dispatch, event)
    return IssueEnvelope(message='Issue marked as resolved', issue=IssueResponse.from_issue(issue))

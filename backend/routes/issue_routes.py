from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_student
from backend.core import config
from backend.core.errors import ValidationError
from backend.database import get_db
from backend.models.issue import CATEGORIES
from backend.schemas import (
    FilteredIssueListResponse,
    IssueEnvelope,
    IssueFiltersResponse,
    IssueListResponse,
    IssueResponse,
)
from backend.services import issue_service
from backend.services.auth_service import CallerIdentity
from backend.services.image_uploader import ImageUploader, get_image_uploader
from backend.services.issue_service import IssueFilters

router = APIRouter(tags=['issues'])


class CreateIssueRequest(BaseModel):
    title: str
    description: str
    category: str

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Title is required')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Description is required')
        return normalized

    @field_validator('category')
    @classmethod
    def validate_category(cls, value: str) -> str:
        if value not in CATEGORIES:
            raise ValueError('Invalid category')
        return value


def read_image(image: UploadFile | None) -> tuple[bytes | None, str | None]:
    if image is None or not image.filename:
        return None, None

    if not (image.content_type or '').startswith('image/'):
        raise ValidationError.for_field('image', 'Only image files are allowed')

    data = image.file.read(config.MAX_IMAGE_BYTES + 1)
    if len(data) > config.MAX_IMAGE_BYTES:
        max_mb = config.MAX_IMAGE_BYTES // (1024 * 1024)
        raise ValidationError.for_field('image', f'File size too large. Maximum {max_mb}MB allowed.')
    if not data:
        return None, None

    return data, image.filename


@router.post('', response_model=IssueEnvelope, status_code=status.HTTP_201_CREATED)
def create_issue(
    title: str = Form(''),
    description: str = Form(''),
    category: str = Form(''),
    image: UploadFile | None = File(None),
    caller: CallerIdentity = Depends(require_student),
    db: Session = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    try:
        data = CreateIssueRequest(title=title, description=description, category=category)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    image_bytes, image_filename = read_image(image)

    issue = issue_service.create_issue(
        db,
        owner_id=caller.id,
        title=data.title,
        description=data.description,
        category=data.category,
        image_bytes=image_bytes,
        image_filename=image_filename,
        uploader=uploader,
    )
    return IssueEnvelope(message='Issue created successfully', issue=IssueResponse.from_issue(issue))


@router.get('/my-issues', response_model=IssueListResponse)
def list_my_issues(
    caller: CallerIdentity = Depends(require_student),
    db: Session = Depends(get_db),
):
    return IssueListResponse.from_issues(issue_service.list_own(db, caller.id))


@router.get('', response_model=FilteredIssueListResponse)
def list_filtered_issues(
    category: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias='status'),
    caller: CallerIdentity = Depends(require_student),
    db: Session = Depends(get_db),
):
    filters = IssueFilters(category=category or None, status=status_filter or None)
    issues = issue_service.list_own(db, caller.id, filters)
    listing = IssueListResponse.from_issues(issues)
    return FilteredIssueListResponse(
        count=listing.count,
        issues=listing.issues,
        filters=IssueFiltersResponse(**filters.as_dict()),
    )


@router.get('/{issue_id}', response_model=IssueEnvelope)
def get_issue(
    issue_id: str,
    caller: CallerIdentity = Depends(require_student),
    db: Session = Depends(get_db),
):
    issue = issue_service.get_own(db, caller.id, issue_id)
    return IssueEnvelope(issue=IssueResponse.from_issue(issue))

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.jwt_handler import TokenIdentity
from backend.database import get_db
from backend.models.report import ReportStatus, ReportType
from backend.models.user import Role
from backend.services import comments, report_lifecycle

router = APIRouter(tags=['reports'])

# Field names shadow the type inside the request models below.
ReportDate = date


class CreateReportRequest(BaseModel):
    date: ReportDate
    type: ReportType | None = None
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('Content is required.')
        return value


class UpdateReportRequest(BaseModel):
    content: str | None = None
    date: ReportDate | None = None
    type: ReportType | None = None


class CommentRequest(BaseModel):
    text: str | None = None


class ReportSummaryResponse(BaseModel):
    id: int
    date: ReportDate
    type: ReportType
    status: ReportStatus

    class Config:
        from_attributes = True


class ReportEnvelopeResponse(BaseModel):
    report: ReportSummaryResponse


class ReportListResponse(BaseModel):
    reports: list[ReportSummaryResponse]


class AuthorResponse(BaseModel):
    id: int
    email: str
    role: Role
    name: str | None = None

    class Config:
        from_attributes = True


class CommentResponse(BaseModel):
    id: int
    text: str
    author: AuthorResponse
    created_at: datetime = Field(serialization_alias='createdAt')

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite drops the offset; stored values are always UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    class Config:
        from_attributes = True


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]


class CommentEnvelopeResponse(BaseModel):
    comment: CommentResponse


class ReportDetailResponse(BaseModel):
    id: int
    date: ReportDate
    type: ReportType
    content: str
    status: ReportStatus
    comments: list[CommentResponse]

    class Config:
        from_attributes = True


class ReportStatusResponse(BaseModel):
    id: int
    status: ReportStatus


@router.get('', response_model=ReportListResponse)
def list_reports(
    report_date: date | None = Query(default=None, alias='date'),
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return {'reports': report_lifecycle.list_reports(db, identity, report_date)}


@router.post('', response_model=ReportEnvelopeResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    data: CreateReportRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    report = report_lifecycle.create_report(
        db,
        identity,
        report_date=data.date,
        content=data.content,
        report_type=data.type,
    )
    return {'report': report}


@router.get('/{report_id}', response_model=ReportDetailResponse)
def get_report(
    report_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return report_lifecycle.get_report_detail(db, identity, report_id)


@router.put('/{report_id}', response_model=ReportSummaryResponse)
def update_report(
    report_id: int,
    data: UpdateReportRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return report_lifecycle.update_report(
        db,
        identity,
        report_id,
        content=data.content,
        report_date=data.date,
        report_type=data.type,
    )


@router.post('/{report_id}/submit', response_model=ReportSummaryResponse)
def submit_report(
    report_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return report_lifecycle.submit_report(db, identity, report_id)


@router.post('/{report_id}/approve', response_model=ReportSummaryResponse)
def approve_report(
    report_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return report_lifecycle.approve_report(db, identity, report_id)


@router.post('/{report_id}/request-changes', response_model=ReportStatusResponse)
def request_changes(
    report_id: int,
    data: CommentRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    report = report_lifecycle.request_changes(db, identity, report_id, data.text)
    return {'id': report.id, 'status': report.status}


@router.get('/{report_id}/comments', response_model=CommentListResponse)
def list_comments(
    report_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return {'comments': comments.list_comments(db, identity, report_id)}


@router.post('/{report_id}/comments', response_model=CommentEnvelopeResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    report_id: int,
    data: CommentRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return {'comment': comments.add_comment(db, identity, report_id, data.text)}

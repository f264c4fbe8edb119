"""Report state machine.

ENTWURF -> EINGEREICHT -> GEPRUEFT, with AENDERUNGSBEDARF as the
"changes requested" detour back to EINGEREICHT. Trainees own creation,
editing and submission; instructors approve or request changes.
"""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from backend.auth.jwt_handler import TokenIdentity
from backend.auth.permissions import (
    Capability,
    ensure_can_view_report,
    ensure_report_owner,
    require_capability,
    visible_reports,
)
from backend.core.errors import InternalError, InvalidInput, InvalidTransition, NotFound
from backend.models.comment import Comment
from backend.models.report import Report, ReportStatus, ReportType
from backend.services.comments import append_comment, get_report_or_404, normalize_comment_text

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = frozenset({ReportStatus.ENTWURF, ReportStatus.AENDERUNGSBEDARF})

# action -> (allowed source statuses, target status)
TRANSITIONS: dict[str, tuple[frozenset[ReportStatus], ReportStatus]] = {
    "submit": (EDITABLE_STATUSES, ReportStatus.EINGEREICHT),
    "approve": (frozenset({ReportStatus.EINGEREICHT}), ReportStatus.GEPRUEFT),
    "request changes on": (
        frozenset({ReportStatus.ENTWURF, ReportStatus.EINGEREICHT, ReportStatus.AENDERUNGSBEDARF}),
        ReportStatus.AENDERUNGSBEDARF,
    ),
}


def next_status(action: str, current: ReportStatus) -> ReportStatus:
    allowed, target = TRANSITIONS[action]
    if current not in allowed:
        raise InvalidTransition(action, current)
    return target


def _commit(db: Session, report: Report, action: str) -> Report:
    report_id = report.id
    try:
        db.commit()
        db.refresh(report)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s report %s", action, report_id)
        raise InternalError("Could not save report.") from exc
    return report


def create_report(
    db: Session,
    identity: TokenIdentity,
    report_date: date | None,
    content: str | None,
    report_type: ReportType | None = None,
) -> Report:
    require_capability(identity, Capability.WRITE_OWN_REPORTS, "Only trainees can create reports.")
    if report_date is None or not content or not content.strip():
        raise InvalidInput("Date and content are required.")

    report = Report(
        trainee_id=identity.id,
        date=report_date,
        type=report_type or ReportType.TAG,
        content=content,
        status=ReportStatus.ENTWURF,
    )
    db.add(report)
    _commit(db, report, "create")
    logger.info("Trainee %s created report %s for %s", identity.id, report.id, report.date)
    return report


def list_reports(db: Session, identity: TokenIdentity, report_date: date | None = None) -> list[Report]:
    query = visible_reports(identity, db.query(Report))
    if report_date is not None:
        query = query.filter(Report.date == report_date)
    return query.order_by(Report.date.asc(), Report.id.asc()).all()


def get_report_detail(db: Session, identity: TokenIdentity, report_id: int) -> Report:
    report = (
        db.query(Report)
        .options(selectinload(Report.comments).joinedload(Comment.author))
        .filter(Report.id == report_id)
        .first()
    )
    if report is None:
        raise NotFound("Report not found.")
    ensure_can_view_report(identity, report)
    return report


def update_report(
    db: Session,
    identity: TokenIdentity,
    report_id: int,
    content: str | None = None,
    report_date: date | None = None,
    report_type: ReportType | None = None,
) -> Report:
    report = get_report_or_404(db, report_id)
    ensure_report_owner(identity, report, "Only the owning trainee can edit this report.")
    if report.status not in EDITABLE_STATUSES:
        raise InvalidTransition("edit", report.status)
    if content is not None and not content.strip():
        raise InvalidInput("Content must not be blank.")

    if content:
        report.content = content
    if report_date:
        report.date = report_date
    if report_type:
        report.type = report_type
    return _commit(db, report, "edit")


def submit_report(db: Session, identity: TokenIdentity, report_id: int) -> Report:
    report = get_report_or_404(db, report_id)
    ensure_report_owner(identity, report, "Only the owning trainee can submit this report.")
    report.status = next_status("submit", report.status)
    _commit(db, report, "submit")
    logger.info("Trainee %s submitted report %s", identity.id, report.id)
    return report


def approve_report(db: Session, identity: TokenIdentity, report_id: int) -> Report:
    require_capability(identity, Capability.REVIEW_REPORTS, "Only instructors can approve reports.")
    report = get_report_or_404(db, report_id)
    report.status = next_status("approve", report.status)
    _commit(db, report, "approve")
    logger.info("Instructor %s approved report %s", identity.id, report.id)
    return report


def request_changes(db: Session, identity: TokenIdentity, report_id: int, text: str | None) -> Report:
    """Flag a report as needing changes and attach the instructor's remark.

    The status update and the comment insert share one transaction: if
    either fails the session is rolled back and the report keeps its
    previous status.
    """
    require_capability(identity, Capability.REVIEW_REPORTS, "Only instructors can request changes.")
    report = get_report_or_404(db, report_id)
    target = next_status("request changes on", report.status)
    text = normalize_comment_text(text)

    try:
        report.status = target
        db.flush()
        append_comment(db, report, identity.id, text)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to request changes on report %s", report_id)
        raise InternalError("Could not save report.") from exc

    db.refresh(report)
    logger.info("Instructor %s requested changes on report %s", identity.id, report.id)
    return report

"""Comment thread attached to a report."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from backend.auth.jwt_handler import TokenIdentity
from backend.auth.permissions import ensure_can_view_report
from backend.core.errors import InternalError, InvalidInput, NotFound
from backend.models.comment import Comment
from backend.models.report import Report

logger = logging.getLogger(__name__)


def get_report_or_404(db: Session, report_id: int) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise NotFound("Report not found.")
    return report


def normalize_comment_text(text: str | None) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInput("Comment text is required.")
    return text


def append_comment(db: Session, report: Report, author_id: int, text: str) -> Comment:
    """Stage a comment on ``report`` without committing."""
    comment = Comment(report_id=report.id, author_id=author_id, text=text)
    db.add(comment)
    db.flush()
    return comment


def list_comments(db: Session, identity: TokenIdentity, report_id: int) -> list[Comment]:
    report = get_report_or_404(db, report_id)
    ensure_can_view_report(identity, report)

    return (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.report_id == report.id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def add_comment(db: Session, identity: TokenIdentity, report_id: int, text: str | None) -> Comment:
    report = get_report_or_404(db, report_id)
    ensure_can_view_report(identity, report)
    text = normalize_comment_text(text)

    try:
        comment = append_comment(db, report, identity.id, text)
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to add comment to report %s", report_id)
        raise InternalError("Could not save comment.") from exc

    logger.info("User %s commented on report %s", identity.id, report_id)
    return comment

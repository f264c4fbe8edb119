"""Per-day status summary for the calendar view."""

import enum
from collections.abc import Iterable

from sqlalchemy.orm import Session

from backend.auth.jwt_handler import TokenIdentity
from backend.auth.permissions import visible_reports
from backend.models.report import Report, ReportStatus


class Severity(enum.IntEnum):
    NONE = 0
    GREEN = 1
    YELLOW = 2
    RED = 3


STATUS_SEVERITY = {
    ReportStatus.AENDERUNGSBEDARF: Severity.RED,
    ReportStatus.EINGEREICHT: Severity.YELLOW,
    ReportStatus.GEPRUEFT: Severity.GREEN,
    ReportStatus.ENTWURF: Severity.GREEN,
}


def status_to_severity(status) -> Severity:
    try:
        return STATUS_SEVERITY.get(ReportStatus(status), Severity.NONE)
    except ValueError:
        return Severity.NONE


def aggregate_statuses(reports: Iterable) -> dict[str, dict[str, str]]:
    """Reduce reports to the most severe status per ISO date.

    Accepts anything with ``date`` and ``status`` attributes. Dates without
    reports are left out of the result.
    """
    worst: dict[str, Severity] = {}
    for report in reports:
        day = report.date.isoformat()
        severity = status_to_severity(report.status)
        worst[day] = max(severity, worst.get(day, Severity.NONE))
    return {day: {"status": severity.name} for day, severity in worst.items()}


def calendar_for(db: Session, identity: TokenIdentity) -> dict[str, dict[str, str]]:
    reports = visible_reports(identity, db.query(Report.date, Report.status)).all()
    return aggregate_statuses(reports)

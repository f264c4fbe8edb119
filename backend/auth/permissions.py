"""Role capabilities and report ownership checks.

Roles never get compared as strings outside this module; callers ask for a
capability and the role table answers.
"""

import enum

from backend.auth.jwt_handler import TokenIdentity
from backend.core.errors import Forbidden
from backend.models.report import Report
from backend.models.user import Role


class Capability(str, enum.Enum):
    WRITE_OWN_REPORTS = "write_own_reports"
    VIEW_ALL_REPORTS = "view_all_reports"
    REVIEW_REPORTS = "review_reports"


_INSTRUCTOR_CAPABILITIES = frozenset({Capability.VIEW_ALL_REPORTS, Capability.REVIEW_REPORTS})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.AZUBI: frozenset({Capability.WRITE_OWN_REPORTS}),
    Role.AUSBILDER: _INSTRUCTOR_CAPABILITIES,
    # ADMIN has no capabilities of its own yet.
    Role.ADMIN: _INSTRUCTOR_CAPABILITIES,
}


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


def require_capability(identity: TokenIdentity, capability: Capability, detail: str) -> None:
    if not has_capability(identity.role, capability):
        raise Forbidden(detail)


def can_view_report(identity: TokenIdentity, report: Report) -> bool:
    if has_capability(identity.role, Capability.VIEW_ALL_REPORTS):
        return True
    return report.trainee_id == identity.id


def ensure_can_view_report(identity: TokenIdentity, report: Report) -> None:
    if not can_view_report(identity, report):
        raise Forbidden("Access denied.")


def ensure_report_owner(identity: TokenIdentity, report: Report, detail: str) -> None:
    if not has_capability(identity.role, Capability.WRITE_OWN_REPORTS) or report.trainee_id != identity.id:
        raise Forbidden(detail)


def visible_reports(identity: TokenIdentity, query):
    """Restrict a Report query to the rows the caller may see."""
    if has_capability(identity.role, Capability.VIEW_ALL_REPORTS):
        return query
    return query.filter(Report.trainee_id == identity.id)

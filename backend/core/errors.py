"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to and a human-readable
``detail``. The handlers registered in ``backend.main`` render them as
``{"error": detail}``.
"""


class BerichtsheftError(Exception):
    status_code = 500
    default_detail = "Internal server error."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(BerichtsheftError):
    status_code = 401
    default_detail = "Not authenticated."


class Forbidden(BerichtsheftError):
    status_code = 403
    default_detail = "Access denied."


class NotFound(BerichtsheftError):
    status_code = 404
    default_detail = "Not found."


class InvalidInput(BerichtsheftError):
    status_code = 400
    default_detail = "Invalid input."


class InvalidTransition(BerichtsheftError):
    status_code = 400

    def __init__(self, action: str, current_status):
        self.action = action
        self.current_status = current_status
        status_value = getattr(current_status, "value", current_status)
        super().__init__(f"Cannot {action} a report with status {status_value}.")


class InternalError(BerichtsheftError):
    status_code = 500

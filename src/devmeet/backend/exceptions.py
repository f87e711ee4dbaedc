"""Custom exceptions

Every business failure carries an HTTP status code and a stable,
machine-checkable error code. The global exception handler in ``main``
turns them into ``{"detail": ..., "code": ...}`` responses.
"""


class DevMeetException(Exception):
    """Base DevMeet exception"""

    code = "ERROR"

    def __init__(self, message: str, status_code: int = 400, code: str | None = None):
        self.message = message
        self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationError(DevMeetException):
    """Malformed input"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, status_code=422)


class AuthenticationError(DevMeetException):
    """Authentication error"""

    code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class AuthorizationError(DevMeetException):
    """Caller is not an authorized participant"""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403)


class NotFoundError(DevMeetException):
    """Resource not found (or not visible to the caller)"""

    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ConflictError(DevMeetException):
    """Uniqueness invariant would be violated"""

    code = "CONFLICT"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message, status_code=409)


class ExpiredError(DevMeetException):
    """Time-bounded passcode elapsed"""

    code = "EXPIRED"

    def __init__(self, message: str = "OTP has expired. Please request a new one."):
        super().__init__(message, status_code=410)


class InvalidCodeError(DevMeetException):
    """Passcode mismatch"""

    code = "INVALID_CODE"

    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message, status_code=400)


class AlreadyVerifiedError(DevMeetException):
    """Account email already verified"""

    code = "ALREADY_VERIFIED"

    def __init__(self, message: str = "Email already verified"):
        super().__init__(message, status_code=400)


class InvalidOrExpiredTokenError(DevMeetException):
    """Password reset token unknown or elapsed"""

    code = "INVALID_OR_EXPIRED_TOKEN"

    def __init__(self, message: str = "Invalid or expired reset token"):
        super().__init__(message, status_code=400)


class UpstreamUnavailableError(DevMeetException):
    """Notification collaborator failed"""

    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str = "Notification service unavailable"):
        super().__init__(message, status_code=503)

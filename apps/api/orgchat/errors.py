"""Application exception types."""

from orgchat.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class NotAuthenticatedError(ApiError):
    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(status_code=401, code="UNAUTHORIZED", message=message)


class NotFoundError(ApiError):
    """No-leak 404: missing and foreign resources share one payload."""

    def __init__(self) -> None:
        super().__init__(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")


class NotConfiguredError(ApiError):
    def __init__(self, message: str = "Azure AI credentials not configured for this organization") -> None:
        super().__init__(status_code=409, code="CREDENTIALS_NOT_CONFIGURED", message=message)


class PermissionDeniedError(ApiError):
    def __init__(self, message: str = "Only administrators can perform this action") -> None:
        super().__init__(status_code=403, code="PERMISSION_DENIED", message=message)


class DecodeError(ApiError):
    """Stored token or document could not be decoded."""

    def __init__(self, message: str = "Failed to decode stored data") -> None:
        super().__init__(status_code=500, code="DECODE_FAILED", message=message)


class BootstrapError(ApiError):
    def __init__(self, message: str = "Failed to create or verify user data") -> None:
        super().__init__(status_code=500, code="BOOTSTRAP_FAILED", message=message)


class UpstreamError(ApiError):
    """Completion endpoint answered with a failure status or could not be reached."""

    def __init__(self, *, status: int | None, body: str, message: str | None = None) -> None:
        self.status = status
        self.body = body
        if message is None:
            message = f"Azure AI API error: {status} - {body}" if status is not None else f"Azure AI request failed: {body}"
        super().__init__(
            status_code=502,
            code="UPSTREAM_ERROR",
            message=message,
            details={"status": status, "body": body},
        )


class InvalidResponseFormatError(ApiError):
    def __init__(self, message: str = "Invalid response format from Azure AI") -> None:
        super().__init__(status_code=502, code="INVALID_UPSTREAM_RESPONSE", message=message)


class ValidationFailedError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=400, code="VALIDATION_ERROR", message=message)


__all__ = [
    "ApiError",
    "BootstrapError",
    "DecodeError",
    "InvalidResponseFormatError",
    "NotAuthenticatedError",
    "NotConfiguredError",
    "NotFoundError",
    "PermissionDeniedError",
    "UpstreamError",
    "ValidationFailedError",
]

"""
Error hierarchy shared by every module.

Each error carries a stable ``code`` and the HTTP status the API layer
should answer with. The application exception handler turns any
``WorkKrdError`` into the uniform ``{"error": ...}`` JSON body.
"""

from typing import Any


class WorkKrdError(Exception):
    """Base class for all service errors."""

    code = "internal_error"
    http_status = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


# =============================================================================
# REQUEST ERRORS
# =============================================================================

class ValidationError(WorkKrdError):
    code = "validation_error"
    http_status = 400


class UnauthorizedError(WorkKrdError):
    code = "unauthorized"
    http_status = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(WorkKrdError):
    code = "forbidden"
    http_status = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class CsrfError(ForbiddenError):
    code = "csrf_invalid"

    def __init__(self, message: str = "Invalid or expired CSRF token") -> None:
        super().__init__(message)


class NotFoundError(WorkKrdError):
    code = "not_found"
    http_status = 404


class ConflictError(WorkKrdError):
    code = "conflict"
    http_status = 409


class TemplateNotFoundError(NotFoundError):
    code = "template_not_found"

    def __init__(self, template_id: str) -> None:
        super().__init__(
            f"Template not found: {template_id}",
            details={"template": template_id},
        )
        self.template_id = template_id


class RateLimitedError(WorkKrdError):
    code = "rate_limited"
    http_status = 429

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            "Too many requests. Please try again later.",
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(WorkKrdError):
    """Deployment defect. Never retried."""

    code = "configuration_error"


class FontLoadError(ConfigurationError):
    code = "font_load_error"

    def __init__(self, filename: str, expected_path: str) -> None:
        super().__init__(
            f"Failed to read font file: {filename}. Expected at: {expected_path}. "
            "Ensure the font file exists in the configured fonts directory.",
            details={"file": filename, "path": expected_path},
        )
        self.filename = filename
        self.expected_path = expected_path


class NoBrowserFoundError(ConfigurationError):
    code = "no_browser_found"

    def __init__(
        self,
        message: str = "No Chrome/Chromium found. Set WORKKRD_CHROME_PATH or install Chrome.",
    ) -> None:
        super().__init__(message)


# =============================================================================
# RENDER ERRORS
# =============================================================================

class RenderError(WorkKrdError):
    code = "render_failed"


class RenderTimeoutError(RenderError):
    code = "render_timeout"


class InvalidPdfError(RenderError):
    code = "invalid_pdf"

    def __init__(self, head: bytes) -> None:
        super().__init__(
            "Rendered output is not a valid PDF",
            details={"signature": head[:5].hex()},
        )


class RenderQueueFullError(WorkKrdError):
    code = "render_queue_full"
    http_status = 503

    def __init__(self, limit: int) -> None:
        super().__init__(
            "PDF renderer is at capacity. Please retry shortly.",
            details={"queue_limit": limit},
        )

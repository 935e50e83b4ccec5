"""Error taxonomy shared by the engine, the HTTP layer and the CLI."""


class PointsEngineError(Exception):
    """Base error. `message` is safe to show to users; `status_code` maps to HTTP."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None, details: str | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class ValidationError(PointsEngineError):
    """Malformed email or profile URL. User-correctable."""

    status_code = 400


class NotEnrolledError(PointsEngineError):
    """Syntax is valid but the registry has no usable match."""

    status_code = 403


class UpstreamFetchError(PointsEngineError):
    """Profile content could not be fetched. Retryable by the caller."""

    status_code = 502


class InternalError(PointsEngineError):
    """Unexpected fault."""

    status_code = 500

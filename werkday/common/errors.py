"""Exception types mapped onto HTTP status codes at the router boundary."""


class InputError(ValueError):
    """Missing or malformed request input (HTTP 400)."""


class NotAuthenticatedError(RuntimeError):
    """No stored credential for the requested integration (HTTP 401)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class UpstreamError(RuntimeError):
    """Non-2xx or transport failure from GitHub, Jira or the language model."""

    def __init__(self, message: str, status: int = 0) -> None:
        super().__init__(message)
        self.status = status

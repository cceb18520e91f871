"""Error taxonomy shared by the engine, the store and the HTTP layer."""


class MenuboardError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(MenuboardError, ValueError):
    """Malformed input to a pure computation (negative price, bad HH:MM...)."""
    status_code = 400


class NotFound(MenuboardError, LookupError):
    status_code = 404


class Conflict(MenuboardError):
    status_code = 409


class UpstreamFailure(MenuboardError):
    """The persistence layer failed; never retried here."""
    status_code = 502

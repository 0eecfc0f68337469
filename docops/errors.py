"""Error types mapped onto HTTP status codes by the HTTP server."""


class ServiceError(Exception):
    """Failure surfaced to the client with a plain-text message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(ServiceError, ValueError):
    """Missing or invalid request input."""

    status_code = 400


class AuthError(ServiceError):
    """Wrong or missing password for an encrypted document."""

    status_code = 401

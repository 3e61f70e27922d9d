"""Domain exceptions raised by services and mapped to HTTP responses in app.core.errors."""


class AppError(Exception):
    """Base class for expected, request-terminal failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    """Entity absent by id or unique key."""

    status_code = 404

    def __init__(self, resource: str, field: str, value: object) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: '{value}'")


class ConflictError(AppError):
    """Uniqueness violation or an illegal order state transition."""

    status_code = 409


class ForbiddenError(AppError):
    """Authenticated, but lacking the role or ownership the operation needs."""

    status_code = 403


class UnauthorizedError(AppError):
    """Missing or unusable authentication."""

    status_code = 401


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class InvalidTokenError(UnauthorizedError):
    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ExpiredTokenError(UnauthorizedError):
    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class ValidationFailedError(AppError):
    """Malformed input; details holds one 'field: message' entry per problem."""

    status_code = 400

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.details = details or []
        super().__init__(message)

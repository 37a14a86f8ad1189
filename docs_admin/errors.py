"""Failure taxonomy shared by services and the HTTP layer.

Each error carries the status code the HTTP layer answers with and a message
that is safe to show to the caller.
"""


class ServiceError(Exception):
    status_code = 500
    default_message = "An error occurred. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request."


class AuthenticationError(ServiceError):
    status_code = 401
    default_message = "Authentication required."


class AuthorizationError(ServiceError):
    status_code = 403
    default_message = "Admin access required."


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "User not found."


class ConflictError(ServiceError):
    status_code = 409
    default_message = "User with this email already exists."


class TransientError(ServiceError):
    status_code = 500


class StorageError(TransientError):
    default_message = "Storage is temporarily unavailable. Please try again."


class EmailSendError(TransientError):
    default_message = "Failed to send email. Please try again."

"""
GraphQL Errors

Errors raised by resolvers. Their messages reach the caller unchanged;
any other exception is masked by the schema.
"""

from graphql import GraphQLError

from src.core.document_store import InvalidDocumentId

AUTHENTICATION_ERROR_MESSAGE = "Authentication Error. Please sign in."
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials!"
UNEXPECTED_ERROR_MESSAGE = "Unexpected error."


class TaskGraphError(Exception):
    """Base class for errors whose message is safe to show to callers"""


class AuthenticationError(TaskGraphError):
    """The operation requires a signed-in user and the session is anonymous"""

    def __init__(self):
        super().__init__(AUTHENTICATION_ERROR_MESSAGE)


class InvalidCredentialsError(TaskGraphError):
    """Unknown email or wrong password; both produce the same message"""

    def __init__(self):
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


PUBLIC_ERRORS = (TaskGraphError, InvalidDocumentId)


def should_mask_error(error: GraphQLError) -> bool:
    """
    Mask everything except known errors.

    Parse/validation errors carry no original error and are left alone.
    """
    original = getattr(error, "original_error", None)
    if original is None:
        return False
    return not isinstance(original, PUBLIC_ERRORS)

"""
Error types shared by the service and GraphQL layers.

Services raise the plain exceptions defined here (or pydantic's
``ValidationError``); resolvers translate them into ``GraphQLError``
instances carrying an ``extensions.code`` that clients can switch on.
"""

from typing import Any, Optional

from graphql import GraphQLError

UNAUTHENTICATED = "UNAUTHENTICATED"
BAD_USER_INPUT = "BAD_USER_INPUT"

USER_ERROR_CODES = frozenset({UNAUTHENTICATED, BAD_USER_INPUT})


class UserInputError(ValueError):
    """Base class for write failures caused by the values a client sent.

    ``invalid_args`` holds the offending value, if there is a single one.
    """

    def __init__(self, message: str, invalid_args: Optional[Any] = None) -> None:
        super().__init__(message)
        self.invalid_args = invalid_args


class ValidationFailed(UserInputError):
    """A record could not be written because one of its fields is invalid."""


class DuplicateRecord(UserInputError):
    """A record with the same unique key already exists."""


def unauthenticated_error(message: str = "Log in first") -> GraphQLError:
    return GraphQLError(message, extensions={"code": UNAUTHENTICATED})


def bad_user_input_error(message: str, invalid_args: Optional[Any] = None) -> GraphQLError:
    """Build a ``BAD_USER_INPUT`` error, attaching the offending value if given."""
    extensions = {"code": BAD_USER_INPUT}
    if invalid_args is not None:
        extensions["invalidArgs"] = invalid_args
    return GraphQLError(message, extensions=extensions)

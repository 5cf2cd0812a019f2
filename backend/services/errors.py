"""Service-layer exceptions; routes translate them to HTTP status codes."""

from sqlalchemy.exc import SQLAlchemyError


class NotFoundError(LookupError):
    """A referenced entity does not exist (HTTP 404)."""


class InvalidInputError(ValueError):
    """The request cannot be processed as given (HTTP 400)."""


# Failures of a single spreadsheet row; the batch records them and moves on.
# OverflowError comes from the driver when an integer does not fit a column.
ROW_ERRORS = (InvalidInputError, NotFoundError, ValueError, OverflowError, SQLAlchemyError)

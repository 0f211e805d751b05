class LedgerError(Exception):
    """Base for errors the caller is expected to recover from.

    The operation that raised it has left stored state unchanged.
    """

    status_code = 400


class ValidationError(LedgerError):
    """Bad input shape or a quantity out of range."""

    status_code = 422


class NotFoundError(LedgerError):
    """A referenced asset, borrower, loan or maintenance record is absent."""

    status_code = 404


class StateError(LedgerError):
    """The operation is invalid for the record's current lifecycle state."""

    status_code = 409

"""
Core exceptions - errors raised by the balance and report engine.
"""


class LedgerbookError(Exception):
    """Base class for all ledgerbook errors."""

    pass


class NotFoundError(LedgerbookError):
    """A single record required by a report does not exist."""

    def __init__(self, entity: str, identifier: object = None):
        self.entity = entity
        self.identifier = identifier
        if identifier is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} not found: {identifier}"
        super().__init__(message)


class InvalidInputError(LedgerbookError, ValueError):
    """Request parameters that cannot be turned into a report query."""

    pass


class DataIntegrityError(LedgerbookError):
    """Stored bookkeeping data violates a double-entry invariant."""

    def __init__(self, message: str, voucher_number: str | None = None):
        self.voucher_number = voucher_number
        super().__init__(message)

# inventory/services/exceptions.py

"""
INVENTORY LEDGER ERRORS

Centralized domain errors for the ledger services (inventory, purchases, sales).

Each error carries the HTTP status the API layer answers with, and the message
that is safe to show to the end user. Business errors show their own message;
infrastructure-class errors show a generic one (full detail goes to the log).
"""


class LedgerError(Exception):
    """Base exception for all ledger failures."""

    status_code = 400
    public_message = None

    @property
    def user_message(self) -> str:
        return self.public_message or str(self)


class LedgerValidationError(LedgerError):
    """Malformed input: rejected before any transaction opens."""


class NotFoundError(LedgerError):
    """Referenced product / supplier / customer is absent, inactive or in another shop."""

    status_code = 404


class InsufficientStockError(LedgerError):
    """An OUT-direction operation would drive quantity below zero."""

    def __init__(self, message="Insufficient stock", *, product_id=None, available=None, requested=None):
        super().__init__(message)
        self.product_id = product_id
        self.available = available
        self.requested = requested


class RaceConditionDetected(LedgerError):
    """
    Internal re-check failed after the pre-check passed (or a versioned write
    lost). Indicates an isolation problem; logged CRITICAL by the raiser.
    """

    status_code = 409
    public_message = "Stock changed while the request was processed. Please retry."


class LedgerTimeoutError(LedgerError):
    """Lock or connection could not be acquired in time; nothing was committed."""

    status_code = 503
    public_message = "The inventory is busy right now. Please retry."


class InfrastructureError(LedgerError):
    """Database / transaction failure; not business-recoverable, retryable."""

    status_code = 503
    public_message = "Temporary server problem. Please retry."

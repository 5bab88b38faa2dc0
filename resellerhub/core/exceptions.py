"""Typed failures raised by the order and commission ledger.

Every ledger operation either returns its result or raises one of these.
The HTTP layer maps them to status codes in ``resellerhub.main``.
"""


class LedgerError(Exception):
    """Base class for all ledger failures."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Input is malformed or breaks a business rule (inactive package, bad role...)."""

    status_code = 400


class AuthorizationError(LedgerError):
    """The acting user's role may not perform this mutation."""

    status_code = 403


class NotFoundError(LedgerError):
    """A referenced entity does not exist."""

    status_code = 404


class InvalidTransitionError(LedgerError):
    """Requested status change is not an edge of the transition table."""

    status_code = 409

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")
        self.entity = entity
        self.current = current
        self.target = target


class ConflictError(LedgerError):
    """The row changed underneath us, or a unique pairing already exists."""

    status_code = 409


class GatewayError(LedgerError):
    """The persistence layer failed. Transient; the caller may retry."""

    status_code = 503


class CommissionWriteError(GatewayError):
    """The commission write failed, so the paired order was rolled back too."""

    def __init__(self, message: str, *, stage: str = "commission"):
        super().__init__(message)
        self.stage = stage

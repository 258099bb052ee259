"""
Error taxonomy for POS operations.

Service code raises these; boundary functions and views turn them into
typed results / HTTP responses. Raw storage exceptions never leave the
inventory store unwrapped.
"""


class POSError(Exception):
    """Base class for all POS domain errors."""

    error_type = 'pos_error'
    http_status = 400

    def __init__(self, message=''):
        super().__init__(message)
        self.message = message

    def details(self):
        """Extra structured fields for API consumers."""
        return {}

    def to_dict(self):
        data = {'error': self.message, 'error_type': self.error_type}
        data.update(self.details())
        return data


class InvalidInputError(POSError, ValueError):
    """Caller-supplied values are unusable (bad quantity, overpaid sale...)."""

    error_type = 'invalid_input'
    http_status = 400


class NotFoundError(POSError):
    """Product (or other referenced entity) does not exist."""

    error_type = 'not_found'
    http_status = 404


class InsufficientStockError(POSError):
    """Requested quantity exceeds quantity on hand."""

    error_type = 'insufficient_stock'
    http_status = 409

    def __init__(self, available, requested, product_name=''):
        self.available = available
        self.requested = requested
        self.product_name = product_name
        label = f' for {product_name}' if product_name else ''
        super().__init__(
            f'Insufficient stock{label}. Available: {available}, Requested: {requested}'
        )

    def details(self):
        return {'available': self.available, 'requested': self.requested}


class ConfigurationError(POSError):
    """Price data anomaly, e.g. wholesale price above retail price."""

    error_type = 'configuration'
    http_status = 422


class PersistenceError(POSError):
    """A storage write failed; nothing was committed for the failing step."""

    error_type = 'persistence'
    http_status = 500


class ConflictError(POSError):
    """
    Optimistic concurrency precondition failed on a stock update.

    The only error that is safe to retry automatically: re-run the whole
    fetch-decide-write sequence.
    """

    error_type = 'conflict'
    http_status = 409


class PartialFailureError(POSError):
    """
    The sale record was committed but the stock deduction or the ledger
    entry that follows it was not.
    """

    error_type = 'partial_failure'
    http_status = 500

    def __init__(self, sale, cause):
        self.sale = sale
        self.cause = cause
        super().__init__(
            f'Sale {sale.id} recorded but stock/audit update failed: {cause}'
        )

    def details(self):
        return {
            'sale_id': str(self.sale.id),
            'cause_type': getattr(self.cause, 'error_type', type(self.cause).__name__),
        }

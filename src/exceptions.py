class BillingError(Exception):
    """Base class for errors raised by the billing services."""
    status_code = 500


class ValidationError(BillingError):
    status_code = 400


class ConflictError(BillingError):
    status_code = 409


class NotFoundError(BillingError):
    status_code = 404


class StorageError(BillingError):
    status_code = 500

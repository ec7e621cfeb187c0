class SaleHooksError(Exception):
    """Common base class for django-salehooks exceptions"""

    pass


class TenantResolutionError(SaleHooksError):
    pass


class PushTransportError(SaleHooksError):
    """
    Raised when a push batch cannot be delivered.

    results holds the per-token results of the batches that were delivered
    before the failure.
    """

    def __init__(self, message, results=None):
        super().__init__(message)
        self.results = list(results or [])

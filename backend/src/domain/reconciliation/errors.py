"""Reconciliation errors"""

from typing import Optional


class ReconciliationError(Exception):
    """Base class for errors that fail a reconciliation wholesale"""

    error_code = "RECONCILIATION_FAILED"

    def __init__(self, message: str, store_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.store_code = store_code


class CatalogUnavailableError(ReconciliationError):
    """Catalog snapshot could not be resolved (transport, storage or timeout).

    Never treated as "all products missing": the whole call fails.
    """

    error_code = "CATALOG_UNAVAILABLE"

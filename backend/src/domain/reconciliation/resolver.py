"""Catalog Snapshot Resolver.

Fetches the live catalog state for every product code in a cart with one
batched lookup. Each call produces a fresh snapshot; nothing is cached
between reconciliations.
"""

import asyncio
import logging
from typing import Iterable, Optional

from .errors import CatalogUnavailableError
from .models import CatalogRecord
from .port import CatalogLookupPort


logger = logging.getLogger(__name__)


def distinct_codes(product_codes: Iterable[str]) -> list[str]:
    """Deduplicate product codes, keeping first-seen order"""
    return list(dict.fromkeys(product_codes))


class CatalogSnapshotResolver:
    """Resolves a set of product codes against the catalog lookup.

    Args:
        lookup: Catalog lookup collaborator
        timeout_seconds: Upper bound for the batched fetch (None = no bound)
    """

    def __init__(self, lookup: CatalogLookupPort, timeout_seconds: Optional[float] = None):
        self.lookup = lookup
        self.timeout_seconds = timeout_seconds

    async def resolve(self, store_code: str, product_codes: Iterable[str]) -> dict[str, CatalogRecord]:
        """Resolve product codes to catalog records.

        Args:
            store_code: Store whose catalog is queried
            product_codes: Product codes referenced by the cart (duplicates allowed)

        Returns:
            Mapping of product code to CatalogRecord; unknown codes are omitted

        Raises:
            CatalogUnavailableError: If the lookup fails or times out
        """
        codes = distinct_codes(product_codes)
        if not codes:
            return {}

        try:
            if self.timeout_seconds is not None:
                records = await asyncio.wait_for(
                    self.lookup.resolve_many(store_code, codes),
                    timeout=self.timeout_seconds
                )
            else:
                records = await self.lookup.resolve_many(store_code, codes)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Catalog lookup timed out after {self.timeout_seconds}s for store {store_code}"
            )
            raise CatalogUnavailableError(
                f"Catalog lookup timed out after {self.timeout_seconds}s",
                store_code=store_code
            ) from e
        except Exception as e:
            logger.error(f"Catalog lookup failed for store {store_code}: {e}", exc_info=True)
            raise CatalogUnavailableError(
                f"Catalog lookup failed: {e}",
                store_code=store_code
            ) from e

        requested = set(codes)
        snapshot = {code: record for code, record in records.items() if code in requested}

        logger.debug(
            f"Resolved {len(snapshot)}/{len(codes)} product codes for store {store_code}"
        )
        return snapshot

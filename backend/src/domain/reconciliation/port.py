"""Collaborator ports consumed by the reconciliation engine.

The cart store and the catalog lookup live outside the engine. These
interfaces keep the domain logic independent from how either is backed.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .models import CartLineItem, CatalogRecord


class CartStorePort(ABC):
    """Port interface for reading persisted carts."""

    @abstractmethod
    def load_cart(
        self,
        shopper_key: str,
        store_code: str,
        project_code: str
    ) -> Optional[list[CartLineItem]]:
        """Load the persisted line items for a shopper/store/project key.

        Args:
            shopper_key: Shopper identifier (mobile number)
            store_code: Store the cart belongs to
            project_code: Project the cart belongs to

        Returns:
            Line items in cart order, an empty list for a cart without
            items, or None when no cart has been saved for the key
        """
        pass


class CatalogLookupPort(ABC):
    """Port interface for resolving product codes to live catalog state."""

    @abstractmethod
    async def resolve_many(
        self,
        store_code: str,
        product_codes: Iterable[str]
    ) -> dict[str, CatalogRecord]:
        """Resolve product codes in a single batched lookup.

        Inactive products must be returned (with is_active=False); codes
        that do not exist are omitted from the mapping.

        Args:
            store_code: Store whose catalog is queried
            product_codes: Distinct product codes

        Returns:
            Mapping of product code to CatalogRecord

        Raises:
            Any transport/storage error; the resolver wraps it.
        """
        pass

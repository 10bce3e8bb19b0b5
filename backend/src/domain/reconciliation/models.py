"""Cart reconciliation models and enums.

Inputs (CartLineItem, CatalogRecord), the derived per-line facts and
issues, and the ValidationReport returned to callers. Everything here is
created fresh for one reconciliation pass and never persisted.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Optional


class IssueKind(str, Enum):
    """Closed set of divergences a cart line can carry"""
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PRODUCT_INACTIVE = "PRODUCT_INACTIVE"
    PRICE_CHANGED = "PRICE_CHANGED"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    QUANTITY_EXCEEDS_MAX = "QUANTITY_EXCEEDS_MAX"


class ActionType(str, Enum):
    """Severity tag of an issue"""
    BLOCKING = "blocking"
    ADVISORY = "advisory"


class IssueAction(str, Enum):
    """Action verb the client is asked to perform"""
    REMOVE_ITEM = "remove_item"
    REDUCE_QUANTITY = "reduce_quantity"
    UPDATE_PRICE = "update_price"


class OptionAction(str, Enum):
    """Action id of a selectable suggestion option"""
    REMOVE_ITEM = "remove_item"
    REDUCE_QUANTITY = "reduce_quantity"
    ACCEPT_NEW_PRICE = "accept_new_price"


class StockStatus(str, Enum):
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    OUT_OF_STOCK = "out_of_stock"


class ReportStatus(str, Enum):
    """Overall status of a validation report"""
    VALID = "valid"
    INVALID = "invalid"
    PRICE_UPDATED = "price_updated"


class CartStatus(str, Enum):
    """Terminal outcome of loading the cart"""
    OK = "OK"
    CART_NOT_FOUND = "CART_NOT_FOUND"
    CART_EMPTY = "CART_EMPTY"


# Fixed, request-independent mappings
ISSUE_ACTION_TYPES: dict[IssueKind, ActionType] = {
    IssueKind.PRODUCT_NOT_FOUND: ActionType.BLOCKING,
    IssueKind.PRODUCT_INACTIVE: ActionType.BLOCKING,
    IssueKind.OUT_OF_STOCK: ActionType.BLOCKING,
    IssueKind.INSUFFICIENT_STOCK: ActionType.BLOCKING,
    IssueKind.QUANTITY_EXCEEDS_MAX: ActionType.BLOCKING,
    IssueKind.PRICE_CHANGED: ActionType.ADVISORY,
}

ISSUE_ACTIONS: dict[IssueKind, IssueAction] = {
    IssueKind.PRODUCT_NOT_FOUND: IssueAction.REMOVE_ITEM,
    IssueKind.PRODUCT_INACTIVE: IssueAction.REMOVE_ITEM,
    IssueKind.OUT_OF_STOCK: IssueAction.REMOVE_ITEM,
    IssueKind.INSUFFICIENT_STOCK: IssueAction.REDUCE_QUANTITY,
    IssueKind.QUANTITY_EXCEEDS_MAX: IssueAction.REDUCE_QUANTITY,
    IssueKind.PRICE_CHANGED: IssueAction.UPDATE_PRICE,
}

STOCK_ISSUE_KINDS = frozenset({IssueKind.OUT_OF_STOCK, IssueKind.INSUFFICIENT_STOCK})


@dataclass(frozen=True)
class CartLineItem:
    """One persisted cart line, with the price captured at add-time.

    Owned by the cart store; the engine only reads it.
    """
    p_code: str
    quantity: int
    unit_price: Decimal
    product_name: Optional[str] = None
    store_code: Optional[str] = None
    package_size: Optional[Decimal] = None
    package_unit: Optional[str] = None
    brand_name: Optional[str] = None
    pcode_img: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "p_code": self.p_code,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": float(self.unit_price),
            "total_price": float(self.unit_price * self.quantity),
            "package_size": float(self.package_size) if self.package_size is not None else None,
            "package_unit": self.package_unit,
            "brand_name": self.brand_name,
            "pcode_img": self.pcode_img,
            "store_code": self.store_code,
        }


@dataclass(frozen=True)
class CatalogRecord:
    """Live catalog state of a product at fetch time"""
    p_code: str
    our_price: Decimal
    is_active: bool
    store_quantity: int
    max_quantity_allowed: Optional[int] = None
    product_mrp: Optional[Decimal] = None
    product_name: Optional[str] = None
    product_description: Optional[str] = None
    brand_name: Optional[str] = None
    package_size: Optional[Decimal] = None
    package_unit: Optional[str] = None
    pcode_img: Optional[str] = None
    barcode: Optional[str] = None
    store_code: Optional[str] = None

    @property
    def max_allowed(self) -> Optional[int]:
        """Per-order limit, or None when the product has no limit (NULL or 0)"""
        return self.max_quantity_allowed or None

    def to_dict(self) -> dict[str, Any]:
        return {
            "p_code": self.p_code,
            "product_name": self.product_name,
            "product_description": self.product_description,
            "package_size": float(self.package_size) if self.package_size is not None else None,
            "package_unit": self.package_unit,
            "product_mrp": float(self.product_mrp) if self.product_mrp is not None else None,
            "our_price": float(self.our_price),
            "brand_name": self.brand_name,
            "store_code": self.store_code,
            "pcode_status": "Y" if self.is_active else "N",
            "store_quantity": self.store_quantity,
            "max_quantity_allowed": self.max_quantity_allowed,
            "pcode_img": self.pcode_img,
            "barcode": self.barcode,
        }


@dataclass(frozen=True)
class PriceDelta:
    """Captured vs. current unit price.

    percentage_change is None when the captured price is zero.
    """
    old: Decimal
    new: Decimal
    difference: Decimal
    percentage_change: Optional[Decimal]

    @property
    def changed(self) -> bool:
        return self.difference != 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "old": float(self.old),
            "new": float(self.new),
            "difference": float(self.difference),
            "percentageChange": (
                float(self.percentage_change) if self.percentage_change is not None else None
            ),
            "changed": self.changed,
        }


@dataclass(frozen=True)
class StockFacts:
    status: StockStatus
    available: int
    requested: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "available": self.available,
            "requested": self.requested,
        }


@dataclass(frozen=True)
class LineFacts:
    """Raw divergence facts for one line, before classification.

    When the product does not exist only `exists` is meaningful and every
    other dimension is None.
    """
    exists: bool
    is_active: Optional[bool] = None
    price: Optional[PriceDelta] = None
    stock: Optional[StockFacts] = None
    exceeds_max_allowed: bool = False
    max_allowed: Optional[int] = None

    @property
    def price_changed(self) -> bool:
        return self.price is not None and self.price.changed


@dataclass(frozen=True)
class SuggestedOption:
    action: OptionAction
    label: str
    quantity: Optional[int] = None
    new_price: Optional[Decimal] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"action": self.action.value, "label": self.label}
        if self.quantity is not None:
            data["quantity"] = self.quantity
        if self.new_price is not None:
            data["newPrice"] = float(self.new_price)
        return data


@dataclass(frozen=True)
class SuggestedAction:
    type: IssueAction
    message: str
    options: tuple[SuggestedOption, ...] = ()
    new_quantity: Optional[int] = None
    new_total_price: Optional[Decimal] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "message": self.message,
            "options": [option.to_dict() for option in self.options],
        }
        if self.new_quantity is not None:
            data["newQuantity"] = self.new_quantity
        if self.new_total_price is not None:
            data["newTotalPrice"] = float(self.new_total_price)
        return data


class Issue:
    """Base of the issue variants.

    Each subclass binds one IssueKind and carries only the fields relevant
    to it. Action verb and severity follow from the kind.
    """
    kind: ClassVar[IssueKind]
    message: str
    suggested_action: Optional[SuggestedAction]

    @property
    def action(self) -> IssueAction:
        return ISSUE_ACTIONS[self.kind]

    @property
    def action_type(self) -> ActionType:
        return ISSUE_ACTION_TYPES[self.kind]

    @property
    def is_blocking(self) -> bool:
        return self.action_type == ActionType.BLOCKING

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "action": self.action.value,
            "actionType": self.action_type.value,
        }
        data.update(self.details())
        data["suggestedAction"] = (
            self.suggested_action.to_dict() if self.suggested_action is not None else None
        )
        return data


@dataclass(frozen=True)
class ProductNotFoundIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.PRODUCT_NOT_FOUND
    message: str
    suggested_action: Optional[SuggestedAction] = None


@dataclass(frozen=True)
class ProductInactiveIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.PRODUCT_INACTIVE
    message: str
    suggested_action: Optional[SuggestedAction] = None


@dataclass(frozen=True)
class OutOfStockIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.OUT_OF_STOCK
    message: str
    requested: int
    available: int = 0
    suggested_action: Optional[SuggestedAction] = None

    def details(self) -> dict[str, Any]:
        return {"available": self.available, "requested": self.requested}


@dataclass(frozen=True)
class InsufficientStockIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.INSUFFICIENT_STOCK
    message: str
    requested: int
    available: int
    suggested_action: Optional[SuggestedAction] = None

    def details(self) -> dict[str, Any]:
        return {"available": self.available, "requested": self.requested}


@dataclass(frozen=True)
class QuantityExceedsMaxIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.QUANTITY_EXCEEDS_MAX
    message: str
    requested: int
    max_allowed: int
    suggested_action: Optional[SuggestedAction] = None

    def details(self) -> dict[str, Any]:
        return {"requested": self.requested, "maxAllowed": self.max_allowed}


@dataclass(frozen=True)
class PriceChangedIssue(Issue):
    kind: ClassVar[IssueKind] = IssueKind.PRICE_CHANGED
    message: str
    price: PriceDelta
    suggested_action: Optional[SuggestedAction] = None

    def details(self) -> dict[str, Any]:
        return {"price": self.price.to_dict()}


@dataclass(frozen=True)
class LineResult:
    """Reconciliation outcome for one cart line"""
    index: int
    item: CartLineItem
    record: Optional[CatalogRecord]
    facts: LineFacts
    issues: tuple[Issue, ...] = ()

    @property
    def valid(self) -> bool:
        return not any(issue.is_blocking for issue in self.issues)

    @property
    def issue_kinds(self) -> frozenset[IssueKind]:
        return frozenset(issue.kind for issue in self.issues)

    @property
    def price_update(self) -> Optional[PriceDelta]:
        """Price delta annotation, set only on usable lines whose price moved"""
        if self.valid and self.facts.price_changed:
            return self.facts.price
        return None

    @property
    def display_name(self) -> Optional[str]:
        if self.record is not None and self.record.product_name:
            return self.record.product_name
        return self.item.product_name

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "index": self.index,
            "p_code": self.item.p_code,
            "product_name": self.display_name,
            "valid": self.valid,
            "issues": [issue.to_dict() for issue in self.issues],
            "cartItem": self.item.to_dict(),
            "product": self.record.to_dict() if self.record is not None else None,
        }
        if self.facts.price is not None:
            data["price"] = self.facts.price.to_dict()
        if self.facts.stock is not None:
            data["stock"] = self.facts.stock.to_dict()
        return data


@dataclass(frozen=True)
class ReportSummary:
    has_price_changes: bool = False
    has_stock_issues: bool = False
    has_out_of_stock: bool = False
    requires_action: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "hasPriceChanges": self.has_price_changes,
            "hasStockIssues": self.has_stock_issues,
            "hasOutOfStock": self.has_out_of_stock,
            "requiresAction": self.requires_action,
        }


@dataclass(frozen=True)
class ValidationReport:
    """The sole artifact of a reconciliation.

    Invariant: total_items == valid_items + total_invalid_items.
    """
    valid: bool
    total_items: int
    valid_items: int
    total_invalid_items: int
    invalid_items: tuple[LineResult, ...] = ()
    updated_items: tuple[LineResult, ...] = ()
    summary: ReportSummary = field(default_factory=ReportSummary)
    status: ReportStatus = ReportStatus.VALID
    message: str = "Cart validation successful"

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "totalItems": self.total_items,
            "validItems": self.valid_items,
            "totalInvalidItems": self.total_invalid_items,
            "invalidItems": [line.to_dict() for line in self.invalid_items],
            "updatedItems": [line.to_dict() for line in self.updated_items],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of one validate() call.

    For CART_NOT_FOUND / CART_EMPTY the report is the empty, valid report.
    """
    status: CartStatus
    report: ValidationReport

    @property
    def message(self) -> str:
        return self.report.message

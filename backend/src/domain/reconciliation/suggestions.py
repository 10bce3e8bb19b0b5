"""Suggestion Builder: turns classified divergences into typed issues.

One builder per IssueKind. Each produces the human-readable message and
the suggested action with its selectable options.
"""

from decimal import Decimal
from typing import Callable

from .models import (
    CartLineItem,
    InsufficientStockIssue,
    Issue,
    IssueAction,
    IssueKind,
    LineFacts,
    OptionAction,
    OutOfStockIssue,
    PriceChangedIssue,
    ProductInactiveIssue,
    ProductNotFoundIssue,
    QuantityExceedsMaxIssue,
    SuggestedAction,
    SuggestedOption
)


DEFAULT_CURRENCY_SYMBOL = "₹"

REMOVE_OPTION = SuggestedOption(action=OptionAction.REMOVE_ITEM, label="Remove from cart")


def format_amount(value: Decimal, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format a price for display: 120 -> "₹120", 18.5 -> "₹18.50" """
    if value == value.to_integral_value():
        return f"{currency_symbol}{int(value)}"
    return f"{currency_symbol}{value:.2f}"


def _reduce_option(quantity: int) -> SuggestedOption:
    return SuggestedOption(
        action=OptionAction.REDUCE_QUANTITY,
        label=f"Update to {quantity}",
        quantity=quantity
    )


def build_product_not_found(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    return ProductNotFoundIssue(
        message="Product not found",
        suggested_action=SuggestedAction(
            type=IssueAction.REMOVE_ITEM,
            message="This product is no longer available. Please remove it from your cart.",
            options=(REMOVE_OPTION,)
        )
    )


def build_product_inactive(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    return ProductInactiveIssue(
        message="Product is inactive",
        suggested_action=SuggestedAction(
            type=IssueAction.REMOVE_ITEM,
            message="This product is no longer available. Please remove it from your cart.",
            options=(REMOVE_OPTION,)
        )
    )


def build_out_of_stock(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    return OutOfStockIssue(
        message="Product is out of stock",
        requested=facts.stock.requested,
        available=0,
        suggested_action=SuggestedAction(
            type=IssueAction.REMOVE_ITEM,
            message="This product is out of stock. Please remove it from your cart.",
            options=(REMOVE_OPTION,)
        )
    )


def build_insufficient_stock(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    available = facts.stock.available
    requested = facts.stock.requested
    return InsufficientStockIssue(
        message=f"Only {available} item(s) available. You requested {requested}.",
        requested=requested,
        available=available,
        suggested_action=SuggestedAction(
            type=IssueAction.REDUCE_QUANTITY,
            message=f"Only {available} item(s) available. Update quantity to {available}?",
            new_quantity=available,
            options=(_reduce_option(available), REMOVE_OPTION)
        )
    )


def build_quantity_exceeds_max(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    max_allowed = facts.max_allowed
    return QuantityExceedsMaxIssue(
        message=(
            f"Maximum {max_allowed} item(s) allowed per order. "
            f"You requested {item.quantity}."
        ),
        requested=item.quantity,
        max_allowed=max_allowed,
        suggested_action=SuggestedAction(
            type=IssueAction.REDUCE_QUANTITY,
            message=f"Maximum {max_allowed} item(s) allowed. Update quantity to {max_allowed}?",
            new_quantity=max_allowed,
            options=(_reduce_option(max_allowed),)
        )
    )


def build_price_changed(item: CartLineItem, facts: LineFacts, currency_symbol: str) -> Issue:
    price = facts.price
    new_price = format_amount(price.new, currency_symbol)
    return PriceChangedIssue(
        message=f"Price updated from {format_amount(price.old, currency_symbol)} to {new_price}",
        price=price,
        suggested_action=SuggestedAction(
            type=IssueAction.UPDATE_PRICE,
            message=f"Price has changed. Update cart with new price {new_price}?",
            new_total_price=price.new * item.quantity,
            options=(
                SuggestedOption(
                    action=OptionAction.ACCEPT_NEW_PRICE,
                    label="Update price",
                    new_price=price.new
                ),
                REMOVE_OPTION,
            )
        )
    )


IssueBuilder = Callable[[CartLineItem, LineFacts, str], Issue]

ISSUE_BUILDERS: dict[IssueKind, IssueBuilder] = {
    IssueKind.PRODUCT_NOT_FOUND: build_product_not_found,
    IssueKind.PRODUCT_INACTIVE: build_product_inactive,
    IssueKind.OUT_OF_STOCK: build_out_of_stock,
    IssueKind.INSUFFICIENT_STOCK: build_insufficient_stock,
    IssueKind.QUANTITY_EXCEEDS_MAX: build_quantity_exceeds_max,
    IssueKind.PRICE_CHANGED: build_price_changed,
}


def build_issue(
    kind: IssueKind,
    item: CartLineItem,
    facts: LineFacts,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> Issue:
    """Build the typed issue for a classified divergence"""
    return ISSUE_BUILDERS[kind](item, facts, currency_symbol)

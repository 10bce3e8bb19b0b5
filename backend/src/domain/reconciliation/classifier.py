"""Issue Classifier: maps divergence facts to issue kinds.

Precedence is an explicit rule table rather than code order. Rules are
grouped by dimension; within a dimension the first matching rule wins,
across dimensions issues are additive. A terminal rule stops evaluation
for the line.

    dimension   rule                          kind                  terminal
    existence   record missing                PRODUCT_NOT_FOUND     yes
    activity    record inactive               PRODUCT_INACTIVE      yes
    stock       stock status out of stock     OUT_OF_STOCK
    stock       stock status insufficient     INSUFFICIENT_STOCK
    limit       requested > max allowed       QUANTITY_EXCEEDS_MAX
    price       current != captured           PRICE_CHANGED
"""

from dataclasses import dataclass
from typing import Callable

from .models import CartLineItem, Issue, IssueKind, LineFacts, StockStatus
from .suggestions import DEFAULT_CURRENCY_SYMBOL, build_issue


@dataclass(frozen=True)
class ClassificationRule:
    dimension: str
    kind: IssueKind
    applies: Callable[[LineFacts], bool]
    terminal: bool = False


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        dimension="existence",
        kind=IssueKind.PRODUCT_NOT_FOUND,
        applies=lambda facts: not facts.exists,
        terminal=True
    ),
    ClassificationRule(
        dimension="activity",
        kind=IssueKind.PRODUCT_INACTIVE,
        applies=lambda facts: facts.is_active is False,
        terminal=True
    ),
    ClassificationRule(
        dimension="stock",
        kind=IssueKind.OUT_OF_STOCK,
        applies=lambda facts: (
            facts.stock is not None and facts.stock.status is StockStatus.OUT_OF_STOCK
        )
    ),
    ClassificationRule(
        dimension="stock",
        kind=IssueKind.INSUFFICIENT_STOCK,
        applies=lambda facts: (
            facts.stock is not None and facts.stock.status is StockStatus.INSUFFICIENT
        )
    ),
    ClassificationRule(
        dimension="limit",
        kind=IssueKind.QUANTITY_EXCEEDS_MAX,
        applies=lambda facts: facts.exceeds_max_allowed
    ),
    ClassificationRule(
        dimension="price",
        kind=IssueKind.PRICE_CHANGED,
        applies=lambda facts: facts.price_changed
    ),
)


def classify_kinds(facts: LineFacts) -> list[IssueKind]:
    """Apply the rule table to one line's facts.

    Args:
        facts: Divergence facts from the comparator

    Returns:
        Issue kinds in rule-table order
    """
    kinds = []
    matched_dimensions = set()

    for rule in CLASSIFICATION_RULES:
        if rule.dimension in matched_dimensions:
            continue
        if not rule.applies(facts):
            continue
        kinds.append(rule.kind)
        matched_dimensions.add(rule.dimension)
        if rule.terminal:
            break

    return kinds


def classify_line(
    item: CartLineItem,
    facts: LineFacts,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> list[Issue]:
    """Classify one line's facts into typed issues with suggestions"""
    return [
        build_issue(kind, item, facts, currency_symbol)
        for kind in classify_kinds(facts)
    ]

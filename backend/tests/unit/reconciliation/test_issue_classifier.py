"""Unit tests for the issue classifier and suggestion builder

Tests cover:
- The precedence rule table (first match per dimension, additive across)
- Fixed kind -> actionType / action mappings
- Suggested actions and options per issue kind
"""

from decimal import Decimal

import pytest

from domain.reconciliation.classifier import (
    CLASSIFICATION_RULES,
    classify_kinds,
    classify_line
)
from domain.reconciliation.comparator import compare_line
from domain.reconciliation.models import (
    ActionType,
    ISSUE_ACTION_TYPES,
    IssueAction,
    IssueKind,
    LineFacts,
    OptionAction,
    StockFacts,
    StockStatus
)
from domain.reconciliation.suggestions import format_amount

from fixtures.reconciliation import catalog_record, line_item


def _classify(item, record):
    return classify_line(item, compare_line(item, record))


class TestRuleTable:
    """Test the explicit precedence policy"""

    def test_every_kind_has_a_rule(self):
        assert {rule.kind for rule in CLASSIFICATION_RULES} == set(IssueKind)

    def test_missing_record_yields_only_not_found(self):
        assert classify_kinds(LineFacts(exists=False)) == [IssueKind.PRODUCT_NOT_FOUND]

    def test_out_of_stock_wins_over_insufficient(self):
        facts = LineFacts(
            exists=True,
            is_active=True,
            stock=StockFacts(status=StockStatus.OUT_OF_STOCK, available=0, requested=3)
        )

        assert classify_kinds(facts) == [IssueKind.OUT_OF_STOCK]

    @pytest.mark.parametrize("status,expected", [
        (StockStatus.OUT_OF_STOCK, [IssueKind.OUT_OF_STOCK]),
        (StockStatus.INSUFFICIENT, [IssueKind.INSUFFICIENT_STOCK]),
        (StockStatus.SUFFICIENT, []),
    ])
    def test_stock_rules_follow_stock_status(self, status, expected):
        facts = LineFacts(
            exists=True,
            is_active=True,
            stock=StockFacts(status=status, available=2, requested=5)
        )

        assert classify_kinds(facts) == expected

    def test_stock_and_max_are_additive(self):
        facts = compare_line(
            line_item(quantity=10),
            catalog_record(store_quantity=2, max_quantity_allowed=5)
        )

        assert classify_kinds(facts) == [
            IssueKind.INSUFFICIENT_STOCK,
            IssueKind.QUANTITY_EXCEEDS_MAX,
        ]

    def test_out_of_stock_and_max_are_additive(self):
        facts = compare_line(
            line_item(quantity=10),
            catalog_record(store_quantity=0, max_quantity_allowed=5)
        )

        assert classify_kinds(facts) == [IssueKind.OUT_OF_STOCK, IssueKind.QUANTITY_EXCEEDS_MAX]

    def test_price_change_alongside_blocking_issue(self):
        facts = compare_line(
            line_item(quantity=5, unit_price="100"),
            catalog_record(store_quantity=2, our_price="90")
        )

        assert classify_kinds(facts) == [IssueKind.INSUFFICIENT_STOCK, IssueKind.PRICE_CHANGED]

    def test_inactive_is_terminal(self):
        facts = compare_line(
            line_item(quantity=10, unit_price="100"),
            catalog_record(is_active=False, store_quantity=0, our_price="120", max_quantity_allowed=2)
        )

        assert classify_kinds(facts) == [IssueKind.PRODUCT_INACTIVE]

    def test_clean_line_has_no_issues(self):
        facts = compare_line(line_item(quantity=2), catalog_record(store_quantity=10))

        assert classify_kinds(facts) == []


class TestActionMappings:
    """Every kind maps to a fixed severity and action"""

    def test_only_price_changed_is_advisory(self):
        advisory = {kind for kind, tag in ISSUE_ACTION_TYPES.items() if tag == ActionType.ADVISORY}

        assert advisory == {IssueKind.PRICE_CHANGED}
        assert set(ISSUE_ACTION_TYPES) == set(IssueKind)

    def test_issue_properties_follow_kind(self):
        issues = _classify(
            line_item(quantity=5, unit_price="100"),
            catalog_record(store_quantity=2, our_price="90")
        )
        stock_issue, price_issue = issues

        assert stock_issue.action == IssueAction.REDUCE_QUANTITY
        assert stock_issue.action_type == ActionType.BLOCKING
        assert stock_issue.is_blocking is True
        assert price_issue.action == IssueAction.UPDATE_PRICE
        assert price_issue.action_type == ActionType.ADVISORY
        assert price_issue.is_blocking is False


class TestSuggestions:
    """Test suggested actions per kind"""

    def test_not_found_suggests_remove(self):
        [issue] = _classify(line_item(), None)

        assert issue.kind == IssueKind.PRODUCT_NOT_FOUND
        assert issue.action == IssueAction.REMOVE_ITEM
        assert [o.action for o in issue.suggested_action.options] == [OptionAction.REMOVE_ITEM]

    def test_inactive_suggests_remove(self):
        [issue] = _classify(line_item(), catalog_record(is_active=False))

        assert issue.kind == IssueKind.PRODUCT_INACTIVE
        assert issue.action == IssueAction.REMOVE_ITEM

    def test_out_of_stock_suggests_remove_only(self):
        [issue] = _classify(line_item(quantity=3), catalog_record(store_quantity=0))

        assert issue.kind == IssueKind.OUT_OF_STOCK
        assert issue.requested == 3
        assert issue.available == 0
        assert [o.action for o in issue.suggested_action.options] == [OptionAction.REMOVE_ITEM]

    def test_insufficient_stock_suggests_reduce_or_remove(self):
        [issue] = _classify(line_item(quantity=5), catalog_record(store_quantity=2))

        assert issue.kind == IssueKind.INSUFFICIENT_STOCK
        assert issue.message == "Only 2 item(s) available. You requested 5."
        reduce, remove = issue.suggested_action.options
        assert reduce.action == OptionAction.REDUCE_QUANTITY
        assert reduce.quantity == 2
        assert remove.action == OptionAction.REMOVE_ITEM
        assert issue.suggested_action.new_quantity == 2

    def test_exceeds_max_suggests_reduce_to_max(self):
        [issue] = _classify(
            line_item(quantity=10),
            catalog_record(store_quantity=100, max_quantity_allowed=5)
        )

        assert issue.kind == IssueKind.QUANTITY_EXCEEDS_MAX
        assert issue.max_allowed == 5
        assert issue.requested == 10
        [option] = issue.suggested_action.options
        assert option.action == OptionAction.REDUCE_QUANTITY
        assert option.quantity == 5

    def test_price_changed_suggests_accept_or_remove(self):
        [issue] = _classify(line_item(quantity=2, unit_price="100"), catalog_record(our_price="120"))

        assert issue.kind == IssueKind.PRICE_CHANGED
        assert issue.message == "Price updated from ₹100 to ₹120"
        accept, remove = issue.suggested_action.options
        assert accept.action == OptionAction.ACCEPT_NEW_PRICE
        assert accept.new_price == Decimal("120")
        assert remove.action == OptionAction.REMOVE_ITEM
        assert issue.suggested_action.new_total_price == Decimal("240")

    def test_custom_currency_symbol(self):
        item = line_item(unit_price="10")
        facts = compare_line(item, catalog_record(our_price="12.5"))

        [issue] = classify_line(item, facts, currency_symbol="$")

        assert issue.message == "Price updated from $10 to $12.50"


class TestIssueSerialization:
    """Variants only carry their own fields"""

    def test_stock_variant_fields(self):
        [issue] = _classify(line_item(quantity=5), catalog_record(store_quantity=2))
        data = issue.to_dict()

        assert data["kind"] == "INSUFFICIENT_STOCK"
        assert data["actionType"] == "blocking"
        assert data["action"] == "reduce_quantity"
        assert data["available"] == 2
        assert data["requested"] == 5
        assert "price" not in data

    def test_price_variant_fields(self):
        [issue] = _classify(line_item(unit_price="100"), catalog_record(our_price="120"))
        data = issue.to_dict()

        assert data["actionType"] == "advisory"
        assert data["price"]["percentageChange"] == 20.0
        assert "available" not in data

    def test_not_found_variant_fields(self):
        [issue] = _classify(line_item(), None)

        assert set(issue.to_dict()) == {"kind", "message", "action", "actionType", "suggestedAction"}


@pytest.mark.parametrize("value,expected", [
    (Decimal("120"), "₹120"),
    (Decimal("120.00"), "₹120"),
    (Decimal("18.5"), "₹18.50"),
])
def test_format_amount(value, expected):
    assert format_amount(value) == expected

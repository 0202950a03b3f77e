"""Tests for parsing and serializing the target DSL."""

import itertools

import pytest
from pricing.conditions.enums import (
    ConditionApplication,
    ConditionFilterOperator,
    ConditionPhase,
    ConditionScope,
)
from pricing.conditions.exceptions import ConditionConfigurationError, TargetParseError
from pricing.conditions.grouping import ConditionGrouping
from pricing.conditions.selector import ConditionSelector
from pricing.conditions.target import ConditionTarget, parse_target, serialize_target

SELLER_DSL = "items:attributes.category=electronics;quantity>=2@item_discount/per-item#seller"


class TestParseTarget:
    def test_parse_simple_target(self):
        target = parse_target("cart@cart_subtotal/aggregate")
        assert target.scope is ConditionScope.CART
        assert target.phase is ConditionPhase.CART_SUBTOTAL
        assert target.application is ConditionApplication.AGGREGATE
        assert target.selector is None

    def test_parse_filters_and_preset(self):
        target = parse_target(SELLER_DSL)

        assert target.scope is ConditionScope.ITEMS
        assert target.phase is ConditionPhase.ITEM_DISCOUNT
        assert target.application is ConditionApplication.PER_ITEM

        filters = target.selector.filters
        assert len(filters) == 2
        assert filters[0].field == "attributes.category"
        assert filters[0].operator is ConditionFilterOperator.EQ
        assert filters[0].value == "electronics"
        assert filters[1].field == "quantity"
        assert filters[1].operator is ConditionFilterOperator.GTE
        assert filters[1].value == 2
        assert target.selector.grouping.preset == "seller"

    def test_to_dsl_reproduces_input(self):
        assert parse_target(SELLER_DSL).to_dsl() == SELLER_DSL

    def test_str_is_dsl(self):
        assert str(parse_target(SELLER_DSL)) == SELLER_DSL
        assert serialize_target(parse_target(SELLER_DSL)) == SELLER_DSL

    def test_surrounding_whitespace_is_ignored(self):
        target = parse_target("  items : quantity >= 3 @ item_discount / per_item ")
        assert target.to_dsl() == "items:quantity>=3@item_discount/per-item"

    def test_tokens_are_case_insensitive(self):
        target = parse_target("CART@Grand_Total/AGGREGATE")
        assert target.to_dsl() == "cart@grand_total/aggregate"

    def test_preset_without_filters(self):
        target = parse_target("shipments@shipping/per-group#carrier")
        assert target.selector.filters == ()
        assert target.selector.grouping.preset == "carrier"

    def test_empty_filter_segment_yields_no_selector(self):
        assert parse_target("items:@item_discount/per-item").selector is None


class TestFilterValues:
    def test_array_values(self):
        target = parse_target("items:sku in [A1,B2,'C 3']@item_discount/per-item")
        condition_filter = target.selector.filters[0]
        assert condition_filter.operator is ConditionFilterOperator.IN
        assert condition_filter.value == ("A1", "B2", "C 3")

    def test_empty_array(self):
        target = parse_target("items:sku not-in []@item_discount/per-item")
        assert target.selector.filters[0].value == ()

    def test_not_in_underscore_alias(self):
        target = parse_target("items:sku not_in [x]@item_discount/per-item")
        assert target.selector.filters[0].operator is ConditionFilterOperator.NOT_IN

    def test_scalar_casting(self):
        target = parse_target("items:a=true;b=false;c=null;d=3;e=1.5;f=\"quoted\"@item_discount/per-item")
        values = [condition_filter.value for condition_filter in target.selector.filters]
        assert values == [True, False, None, 3, 1.5, "quoted"]

    def test_quoted_value_may_contain_delimiters(self):
        target = parse_target("items:name=\"a;b@c/d\"@item_discount/per-item")
        assert target.selector.filters[0].value == "a;b@c/d"
        assert target.phase is ConditionPhase.ITEM_DISCOUNT

    def test_escaped_quotes(self):
        target = parse_target(r'items:name="say \"hi\""@item_discount/per-item')
        assert target.selector.filters[0].value == 'say "hi"'

    def test_string_operators(self):
        target = parse_target("items:name starts_with Pro;sku ends_with X;title~phone;title!~case@item_discount/per-item")
        operators = [condition_filter.operator for condition_filter in target.selector.filters]
        assert operators == [
            ConditionFilterOperator.STARTS_WITH,
            ConditionFilterOperator.ENDS_WITH,
            ConditionFilterOperator.CONTAINS,
            ConditionFilterOperator.NOT_CONTAINS,
        ]


class TestSerialization:
    @pytest.mark.parametrize(
        "scope, phase, application",
        list(itertools.product(ConditionScope, ConditionPhase, ConditionApplication)),
    )
    @pytest.mark.parametrize("preset", [None, "seller"])
    def test_every_target_survives_round_trip(self, scope, phase, application, preset):
        selector = ConditionSelector((), ConditionGrouping.for_preset(preset)) if preset else None
        target = ConditionTarget(scope, phase, application, selector)

        assert parse_target(target.to_dsl()) == target

    def test_exponent_string_value_is_quoted(self):
        target = ConditionTarget.from_dict(
            {
                "scope": "items",
                "phase": "item_discount",
                "application": "per-item",
                "selector": {"filters": [{"field": "code", "operator": "=", "value": "1e400"}]},
            }
        )
        assert target.to_dsl() == 'items:code="1e400"@item_discount/per-item'
        assert parse_target(target.to_dsl()).selector.filters[0].value == "1e400"

    def test_targets_are_hashable(self):
        first = parse_target(SELLER_DSL)
        second = parse_target(SELLER_DSL).with_meta({"source": "import"})
        assert hash(first) == hash(second)
        assert len({first, parse_target(SELLER_DSL)}) == 1

    def test_strings_needing_quotes_are_quoted(self):
        target = parse_target('items:name="two words"@item_discount/per-item')
        assert target.to_dsl() == 'items:name="two words"@item_discount/per-item'

    def test_numeric_looking_string_survives_round_trip(self):
        target = ConditionTarget.from_dict(
            {
                "scope": "items",
                "phase": "item_discount",
                "application": "per-item",
                "selector": {"filters": [{"field": "sku", "operator": "=", "value": "007"}]},
            }
        )
        reparsed = parse_target(target.to_dsl())
        assert reparsed.selector.filters[0].value == "007"

    def test_empty_string_value(self):
        target = ConditionTarget.from_dict(
            {
                "scope": "items",
                "phase": "item_discount",
                "application": "per-item",
                "selector": {"filters": [{"field": "note", "operator": "=", "value": ""}]},
            }
        )
        assert target.to_dsl() == "items:note=''@item_discount/per-item"
        assert parse_target(target.to_dsl()).selector.filters[0].value == ""

    def test_array_and_literal_serialization(self):
        dsl = "items:sku in [A1,2,true];flag=null@item_discount/per-item"
        assert parse_target(dsl).to_dsl() == dsl

    def test_explicit_grouping_has_no_dsl_form(self):
        target = ConditionTarget.from_dict(
            {
                "scope": "shipments",
                "phase": "shipping",
                "application": "per-group",
                "selector": {"filters": [], "grouping": {"group_by": "carrier", "limit": 2}},
            }
        )
        assert target.to_dsl() == "shipments@shipping/per-group"
        assert target.selector.grouping.group_by == "carrier"


class TestParseErrors:
    @pytest.mark.parametrize(
        "dsl",
        [
            "subtotal",
            "",
            "   ",
            "cart@cart_subtotal",
            "basket@cart_subtotal/aggregate",
            "cart@checkout/aggregate",
            "cart@cart_subtotal/per-basket",
            "@cart_subtotal/aggregate",
            "items:quantity@item_discount/per-item",
            "items:sku in A1@item_discount/per-item",
            "items:price>1e400@item_discount/per-item",
            "items:price>1.5e400@item_discount/per-item",
            "items:sku in [1,2e999]@item_discount/per-item",
        ],
    )
    def test_malformed_dsl_raises(self, dsl):
        with pytest.raises(TargetParseError):
            parse_target(dsl)

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_target("subtotal")


class TestStructuredForm:
    def test_to_dict_shape(self):
        data = parse_target(SELLER_DSL).to_dict()
        assert data["scope"] == "items"
        assert data["phase"] == "item_discount"
        assert data["application"] == "per-item"
        assert data["meta"] == {}
        assert data["selector"]["filters"][0] == {
            "field": "attributes.category",
            "operator": "=",
            "value": "electronics",
        }
        assert data["selector"]["grouping"]["preset"] == "seller"

    def test_from_dict_round_trip(self):
        target = parse_target(SELLER_DSL)
        assert ConditionTarget.from_dict(target.to_dict()) == target

    def test_array_values_come_back_as_lists(self):
        data = parse_target("items:sku in [A,B]@item_discount/per-item").to_dict()
        assert data["selector"]["filters"][0]["value"] == ["A", "B"]

    def test_from_dict_requires_core_fields(self):
        with pytest.raises(ConditionConfigurationError):
            ConditionTarget.from_dict({"scope": "cart", "phase": "tax"})

    def test_from_any_accepts_all_forms(self):
        target = parse_target(SELLER_DSL)
        assert ConditionTarget.from_any(target) is target
        assert ConditionTarget.from_any(SELLER_DSL) == target
        assert ConditionTarget.from_any(target.to_dict()) == target

    def test_from_any_rejects_other_types(self):
        with pytest.raises(ConditionConfigurationError):
            ConditionTarget.from_any(42)

    def test_with_meta_merges_and_returns_new_target(self):
        target = parse_target("cart@tax/aggregate").with_meta({"source": "promo"})
        updated = target.with_meta({"priority": 1})

        assert target.meta == {"source": "promo"}
        assert updated.meta == {"source": "promo", "priority": 1}
        assert updated.to_dsl() == "cart@tax/aggregate"

"""Tests for the scope resolvers."""

import pytest
from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.enums import ConditionPhase, ConditionScope
from pricing.pipeline.context import PhaseContext, PipelineContext
from pricing.pipeline.resolvers import (
    CartScopeResolver,
    DefaultScopeResolver,
    FulfillmentsScopeResolver,
    PaymentsScopeResolver,
    ShipmentsScopeResolver,
    default_resolvers,
)


def _resolve(resolver, cart, scope, phase, conditions, amount):
    collection = CartConditionCollection(conditions)
    phase_context = PhaseContext(phase, amount, collection, PipelineContext(cart))
    return resolver.resolve(phase_context, scope, collection, amount)


class TestDefaultScopeResolver:
    def test_folds_conditions_over_running_amount(self, cart, make_condition):
        conditions = [
            make_condition("sale", "-10%", target="items@item_discount/per-item", order=1),
            make_condition("fee", "+5", target="items@item_discount/per-item", order=2),
        ]
        result = _resolve(
            DefaultScopeResolver(ConditionScope.ITEMS),
            cart,
            ConditionScope.ITEMS,
            ConditionPhase.ITEM_DISCOUNT,
            conditions,
            100.0,
        )
        assert result == pytest.approx(95.0)

    def test_supports_only_its_scope(self):
        resolver = DefaultScopeResolver(ConditionScope.CUSTOM)
        assert resolver.supports(ConditionScope.CUSTOM)
        assert not resolver.supports(ConditionScope.ITEMS)


class TestCartScopeResolver:
    def test_aggregate_on_phase_base(self, cart, make_condition):
        result = _resolve(
            CartScopeResolver(),
            cart,
            ConditionScope.CART,
            ConditionPhase.CART_SUBTOTAL,
            [make_condition("sale", "-10%")],
            100.0,
        )
        assert result == pytest.approx(90.0)

    def test_per_entry_applies_once_to_single_cart_entry(self, cart, make_condition):
        result = _resolve(
            CartScopeResolver(),
            cart,
            ConditionScope.CART,
            ConditionPhase.CART_SUBTOTAL,
            [make_condition("fee", "+3", target="cart@cart_subtotal/per-item")],
            100.0,
        )
        assert result == pytest.approx(103.0)


class TestShipmentsScopeResolver:
    def test_without_shipments_falls_back_to_aggregate(self, cart, make_condition):
        result = _resolve(
            ShipmentsScopeResolver(),
            cart,
            ConditionScope.SHIPMENTS,
            ConditionPhase.SHIPPING,
            [make_condition("ship", "+5", target="shipments@shipping/per-group")],
            100.0,
        )
        assert result == pytest.approx(105.0)

    def test_shipment_costs_are_added(self, cart, make_condition):
        cart.resolve_shipments_using(lambda c: [{"base_amount": 10}, {"base_amount": 5}])
        result = _resolve(
            ShipmentsScopeResolver(),
            cart,
            ConditionScope.SHIPMENTS,
            ConditionPhase.SHIPPING,
            [make_condition("ship", "0", target="shipments@shipping/aggregate")],
            100.0,
        )
        assert result == pytest.approx(115.0)

    def test_per_group_applies_to_each_shipment(self, cart, make_condition):
        cart.resolve_shipments_using(lambda c: [{"base_amount": 10}, {"base_amount": 5}])
        result = _resolve(
            ShipmentsScopeResolver(),
            cart,
            ConditionScope.SHIPMENTS,
            ConditionPhase.SHIPPING,
            [make_condition("handling", "+2", target="shipments@shipping/per-group")],
            100.0,
        )
        assert result == pytest.approx(119.0)

    def test_aggregate_adds_net_delta_only(self, cart, make_condition):
        cart.resolve_shipments_using(lambda c: [{"base_amount": 10}, {"base_amount": 5}])
        result = _resolve(
            ShipmentsScopeResolver(),
            cart,
            ConditionScope.SHIPMENTS,
            ConditionPhase.SHIPPING,
            [make_condition("ship_sale", "-10%", target="shipments@shipping/aggregate")],
            100.0,
        )
        assert result == pytest.approx(113.5)

    def test_aggregate_and_per_entry_are_not_double_applied(self, cart, make_condition):
        cart.resolve_shipments_using(lambda c: [{"base_amount": 10}, {"base_amount": 20}])
        result = _resolve(
            ShipmentsScopeResolver(),
            cart,
            ConditionScope.SHIPMENTS,
            ConditionPhase.SHIPPING,
            [
                make_condition("flat", "+6", target="shipments@shipping/aggregate"),
                make_condition("each", "-10%", target="shipments@shipping/per-group"),
            ],
            0.0,
        )
        # 30 shipped + 6 once + (-1) + (-2)
        assert result == pytest.approx(33.0)


class TestPaymentsScopeResolver:
    def test_only_excess_over_running_amount_is_added(self, cart, make_condition):
        cart.resolve_payments_using(lambda c: [{"amount": 100}, {"amount": 25}])
        result = _resolve(
            PaymentsScopeResolver(),
            cart,
            ConditionScope.PAYMENTS,
            ConditionPhase.PAYMENT,
            [make_condition("card_fee", "+2%", target="payments@payment/per-payment")],
            100.0,
        )
        assert result == pytest.approx(127.5)

    def test_payments_below_running_amount_add_nothing(self, cart, make_condition):
        cart.resolve_payments_using(lambda c: [{"amount": 50}])
        result = _resolve(
            PaymentsScopeResolver(),
            cart,
            ConditionScope.PAYMENTS,
            ConditionPhase.PAYMENT,
            [make_condition("card_fee", "+2%", target="payments@payment/per-payment")],
            100.0,
        )
        assert result == pytest.approx(101.0)


class TestFulfillmentsScopeResolver:
    def test_fulfillment_costs_are_added(self, cart, make_condition):
        cart.resolve_fulfillments_using(lambda c: [{"amount": 7}])
        result = _resolve(
            FulfillmentsScopeResolver(),
            cart,
            ConditionScope.FULFILLMENTS,
            ConditionPhase.SHIPPING,
            [make_condition("pack", "+1", target="fulfillments@shipping/per-group")],
            50.0,
        )
        assert result == pytest.approx(58.0)


class TestRegistry:
    def test_every_scope_has_a_resolver(self):
        resolvers = default_resolvers()
        assert set(resolvers) == set(ConditionScope)
        assert isinstance(resolvers[ConditionScope.CART], CartScopeResolver)
        assert isinstance(resolvers[ConditionScope.PAYMENTS], PaymentsScopeResolver)
        assert isinstance(resolvers[ConditionScope.ITEMS], DefaultScopeResolver)
        assert resolvers[ConditionScope.CUSTOM].supports(ConditionScope.CUSTOM)

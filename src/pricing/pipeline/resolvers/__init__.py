"""Scope resolvers shipped with the pricing pipeline.

``default_resolvers()`` maps every scope to its resolver: dataset resolvers
for cart, shipments, payments and fulfillments, and a ``DefaultScopeResolver``
for the rest.
"""

from pricing.conditions.enums import ConditionScope
from pricing.pipeline.resolvers.base import ConditionScopeResolver
from pricing.pipeline.resolvers.cart import CartScopeResolver
from pricing.pipeline.resolvers.dataset import DatasetScopeResolver
from pricing.pipeline.resolvers.default import DefaultScopeResolver
from pricing.pipeline.resolvers.fulfillments import FulfillmentsScopeResolver
from pricing.pipeline.resolvers.payments import PaymentsScopeResolver
from pricing.pipeline.resolvers.shipments import ShipmentsScopeResolver

__all__ = [
    "CartScopeResolver",
    "ConditionScopeResolver",
    "DatasetScopeResolver",
    "DefaultScopeResolver",
    "FulfillmentsScopeResolver",
    "PaymentsScopeResolver",
    "ShipmentsScopeResolver",
    "default_resolvers",
]


def default_resolvers() -> dict[ConditionScope, ConditionScopeResolver]:
    resolvers: dict[ConditionScope, ConditionScopeResolver] = {
        ConditionScope.CART: CartScopeResolver(),
        ConditionScope.SHIPMENTS: ShipmentsScopeResolver(),
        ConditionScope.PAYMENTS: PaymentsScopeResolver(),
        ConditionScope.FULFILLMENTS: FulfillmentsScopeResolver(),
    }
    for scope in ConditionScope:
        resolvers.setdefault(scope, DefaultScopeResolver(scope))
    return resolvers

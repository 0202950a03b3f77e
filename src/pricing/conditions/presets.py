"""Ready-made targets for the most common scope/phase combinations."""

from pricing.conditions.builder import Target
from pricing.conditions.enums import ConditionPhase
from pricing.conditions.target import ConditionTarget


class TargetPresets:
    @staticmethod
    def cart_subtotal() -> ConditionTarget:
        return Target.cart().phase(ConditionPhase.CART_SUBTOTAL).apply_aggregate().build()

    @staticmethod
    def cart_grand_total() -> ConditionTarget:
        return Target.cart().phase(ConditionPhase.GRAND_TOTAL).apply_aggregate().build()

    @staticmethod
    def cart_shipping() -> ConditionTarget:
        return Target.cart().phase(ConditionPhase.SHIPPING).apply_aggregate().build()

    @staticmethod
    def cart_taxable() -> ConditionTarget:
        return Target.cart().phase(ConditionPhase.TAXABLE).apply_aggregate().build()

    @staticmethod
    def cart_tax() -> ConditionTarget:
        return Target.cart().phase(ConditionPhase.TAX).apply_aggregate().build()

    @staticmethod
    def items_per_item() -> ConditionTarget:
        return Target.items().phase(ConditionPhase.ITEM_DISCOUNT).apply_per_item().build()

    @staticmethod
    def items_pre_item() -> ConditionTarget:
        return Target.items().phase(ConditionPhase.PRE_ITEM).apply_aggregate().build()

    @staticmethod
    def shipments_per_group() -> ConditionTarget:
        return Target.shipments().phase(ConditionPhase.SHIPPING).apply_per_group().build()

    @staticmethod
    def payments_per_payment() -> ConditionTarget:
        return Target.payments().build()

    @staticmethod
    def fulfillments_per_group() -> ConditionTarget:
        return Target.fulfillments().phase(ConditionPhase.SHIPPING).apply_per_group().build()

    @staticmethod
    def custom_aggregate() -> ConditionTarget:
        return Target.custom().build()

"""Loading the active condition catalogue for pricing."""

from protean.utils.globals import current_domain

from pricing.conditions.collection import CartConditionCollection
from pricing.definition.definition import ConditionDefinition


def load_active_conditions(global_only: bool = False) -> CartConditionCollection:
    """Active definitions as runtime conditions, in ``order``."""
    criteria = {"is_active": True}
    if global_only:
        criteria["is_global"] = True

    definitions = current_domain.repository_for(ConditionDefinition)._dao.query.filter(**criteria).all().items
    return CartConditionCollection(definition.to_condition() for definition in definitions).sort_by_order()

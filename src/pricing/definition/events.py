"""Domain events for the ConditionDefinition aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from pricing.domain import pricing


@pricing.event(part_of="ConditionDefinition")
class ConditionDefined:
    """A new pricing condition was added to the catalogue, inactive."""

    __version__ = 1

    definition_id: Identifier(required=True)
    name: String(required=True)
    condition_type: String(required=True)
    target: String(required=True)
    value: String(required=True)
    order: Integer(default=0)
    is_global: Boolean(default=False)
    defined_at: DateTime(required=True)


@pricing.event(part_of="ConditionDefinition")
class ConditionActivated:
    """A condition definition became available for pricing."""

    __version__ = 1

    definition_id: Identifier(required=True)
    name: String(required=True)
    activated_at: DateTime(required=True)


@pricing.event(part_of="ConditionDefinition")
class ConditionDeactivated:
    __version__ = 1

    definition_id: Identifier(required=True)
    name: String(required=True)
    deactivated_at: DateTime(required=True)

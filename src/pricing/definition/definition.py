"""ConditionDefinition aggregate: a persisted, authorable pricing condition.

The structured ``target_definition`` (JSON) is authoritative; the DSL
``target`` is kept alongside it for search and display and must describe the
same target. Derived flags (``is_discount``, ``parsed_value``...) are
recomputed from ``value`` whenever the definition is created.
"""

import json
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from pricing.conditions.condition import CartCondition
from pricing.conditions.exceptions import ConditionConfigurationError, TargetParseError
from pricing.conditions.target import ConditionTarget
from pricing.conditions.values import ConditionValue
from pricing.domain import pricing


@pricing.aggregate
class ConditionDefinition:
    """Condition catalogue entry."""

    name: String(required=True, max_length=100)
    display_name: String(max_length=255)
    description: Text()
    condition_type: String(required=True, max_length=50)
    target: String(required=True, max_length=500)
    target_definition: Text(required=True)
    value: String(required=True, max_length=50)
    operator: String(max_length=1)
    is_charge: Boolean(default=False)
    is_discount: Boolean(default=False)
    is_percentage: Boolean(default=False)
    is_dynamic: Boolean(default=False)
    parsed_value: Float()
    order: Integer(default=0)
    attributes: Text()
    rules: Text()
    is_global: Boolean(default=False)
    is_active: Boolean(default=False)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def target_must_match_definition(self):
        try:
            structured = ConditionTarget.from_dict(json.loads(self.target_definition))
            textual = ConditionTarget.from_dsl(self.target)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"target_definition": ["Target definition must be valid JSON"]}) from None
        except (TargetParseError, ConditionConfigurationError) as exc:
            raise ValidationError({"target": [str(exc)]}) from None

        # explicit groupings have no DSL form, so compare DSL renderings
        if structured.to_dsl() != textual.to_dsl():
            raise ValidationError(
                {"target": [f"Target '{self.target}' does not match its definition '{structured.to_dsl()}'"]}
            )

    @invariant.post
    def value_must_be_valid(self):
        try:
            ConditionValue.parse(self.value)
        except ConditionConfigurationError as exc:
            raise ValidationError({"value": [str(exc)]}) from None

    @classmethod
    def define(
        cls,
        name,
        condition_type,
        target,
        value,
        display_name=None,
        description=None,
        order=0,
        attributes=None,
        rules=None,
        is_global=False,
    ):
        from pricing.definition.events import ConditionDefined

        try:
            target_vo = ConditionTarget.from_any(target)
        except (TargetParseError, ConditionConfigurationError) as exc:
            raise ValidationError({"target": [str(exc)]}) from None

        try:
            parsed = ConditionValue.parse(value)
        except ConditionConfigurationError as exc:
            raise ValidationError({"value": [str(exc)]}) from None

        now = datetime.now()
        definition = cls(
            name=name,
            display_name=display_name or name,
            description=description,
            condition_type=condition_type,
            target=target_vo.to_dsl(),
            target_definition=json.dumps(target_vo.to_dict()),
            value=str(value),
            operator=parsed.sign.value,
            is_charge=parsed.is_charge,
            is_discount=parsed.is_discount,
            is_percentage=parsed.is_percentage,
            is_dynamic=bool(rules),
            parsed_value=parsed.signed_magnitude,
            order=order or 0,
            attributes=json.dumps(attributes) if attributes and isinstance(attributes, dict) else attributes,
            rules=json.dumps(rules) if rules and not isinstance(rules, str) else rules,
            is_global=is_global,
            created_at=now,
            updated_at=now,
        )
        definition.raise_(
            ConditionDefined(
                definition_id=definition.id,
                name=name,
                condition_type=condition_type,
                target=definition.target,
                value=definition.value,
                order=definition.order,
                is_global=is_global,
                defined_at=now,
            )
        )
        return definition

    def activate(self):
        from pricing.definition.events import ConditionActivated

        if self.is_active:
            raise ValidationError({"status": ["Condition is already active"]})

        self.is_active = True
        now = datetime.now()
        self.updated_at = now

        self.raise_(ConditionActivated(definition_id=self.id, name=self.name, activated_at=now))

    def deactivate(self):
        from pricing.definition.events import ConditionDeactivated

        if not self.is_active:
            raise ValidationError({"status": ["Condition is already inactive"]})

        self.is_active = False
        now = datetime.now()
        self.updated_at = now

        self.raise_(ConditionDeactivated(definition_id=self.id, name=self.name, deactivated_at=now))

    def to_condition(self) -> CartCondition:
        """Runtime condition built from the structured target definition.

        Stored rules are descriptive only; the runtime condition is static.
        """
        return CartCondition(
            name=self.name,
            condition_type=self.condition_type,
            target=json.loads(self.target_definition),
            value=self.value,
            attributes=json.loads(self.attributes) if self.attributes else {},
            order=self.order or 0,
        )

"""Condition catalogue management: commands and handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from pricing.definition.definition import ConditionDefinition
from pricing.domain import pricing

logger = structlog.get_logger(__name__)


@pricing.command(part_of="ConditionDefinition")
class DefineCondition:
    name: String(required=True, max_length=100)
    condition_type: String(required=True, max_length=50)
    target: String(required=True, max_length=500)
    value: String(required=True, max_length=50)
    display_name: String(max_length=255)
    description: Text()
    order: Integer(default=0)
    attributes: Text()
    rules: Text()
    is_global: Boolean(default=False)


@pricing.command(part_of="ConditionDefinition")
class ActivateCondition:
    definition_id: Identifier(required=True)


@pricing.command(part_of="ConditionDefinition")
class DeactivateCondition:
    definition_id: Identifier(required=True)


@pricing.command_handler(part_of=ConditionDefinition)
class ManageConditionsHandler:
    @handle(DefineCondition)
    def define_condition(self, command):
        attributes = json.loads(command.attributes) if command.attributes else None

        definition = ConditionDefinition.define(
            name=command.name,
            condition_type=command.condition_type,
            target=command.target,
            value=command.value,
            display_name=command.display_name,
            description=command.description,
            order=command.order,
            attributes=attributes,
            rules=command.rules,
            is_global=command.is_global,
        )
        current_domain.repository_for(ConditionDefinition).add(definition)

        logger.info(
            "Condition defined",
            definition_id=str(definition.id),
            name=definition.name,
            target=definition.target,
            value=definition.value,
        )
        return str(definition.id)

    @handle(ActivateCondition)
    def activate_condition(self, command):
        repo = current_domain.repository_for(ConditionDefinition)
        definition = repo.get(command.definition_id)
        definition.activate()
        repo.add(definition)

        logger.info("Condition activated", definition_id=str(definition.id), name=definition.name)

    @handle(DeactivateCondition)
    def deactivate_condition(self, command):
        repo = current_domain.repository_for(ConditionDefinition)
        definition = repo.get(command.definition_id)
        definition.deactivate()
        repo.add(definition)

        logger.info("Condition deactivated", definition_id=str(definition.id), name=definition.name)

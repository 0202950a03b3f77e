"""The condition pipeline.

Every phase runs, lowest ``order`` first, with the previous phase's final
amount as its base. Inside a phase, a registered processor takes over
completely; otherwise the phase's conditions are resolved scope by scope in
``ConditionScope`` declaration order, threading the running amount.

Exceptions raised by processors and resolvers propagate out of ``process``.
"""

from collections.abc import Callable

from pricing.conditions.enums import ConditionPhase, ConditionScope
from pricing.pipeline.context import PhaseContext, PipelineContext
from pricing.pipeline.resolvers import ConditionScopeResolver, default_resolvers
from pricing.pipeline.results import PhaseResult, PipelineResult
from pricing.utils.logging import get_logger

logger = get_logger(__name__)

PhaseProcessor = Callable[[PhaseContext], float]


class ConditionPipeline:
    def __init__(self) -> None:
        self._processors: dict[ConditionPhase, PhaseProcessor] = {}
        self._resolvers: dict[ConditionScope, ConditionScopeResolver] = default_resolvers()

    def register_phase_processor(self, phase: ConditionPhase | str, processor: PhaseProcessor) -> "ConditionPipeline":
        self._processors[ConditionPhase.from_string(phase)] = processor
        return self

    def register_scope_resolver(
        self, scope: ConditionScope | str, resolver: ConditionScopeResolver
    ) -> "ConditionPipeline":
        self._resolvers[ConditionScope.from_string(scope)] = resolver
        return self

    def resolver_for(self, scope: ConditionScope | str) -> ConditionScopeResolver:
        return self._resolvers[ConditionScope.from_string(scope)]

    def process(self, context: PipelineContext) -> PipelineResult:
        conditions = context.conditions()
        initial_amount = context.initial_amount()
        running_amount = initial_amount
        phases: dict[str, PhaseResult] = {}

        for phase in ConditionPhase.in_order():
            phase_conditions = conditions.by_phase(phase)
            phase_context = PhaseContext(phase, running_amount, phase_conditions, context)

            processor = self._processors.get(phase)
            if processor is not None:
                final_amount = float(processor(phase_context))
            elif phase_context.is_empty():
                final_amount = running_amount
            else:
                final_amount = self._resolve_scopes(phase_context)

            result = PhaseResult(
                phase=phase,
                base_amount=running_amount,
                final_amount=final_amount,
                adjustment=final_amount - running_amount,
                applied_conditions=phase_conditions.count(),
            )
            phases[phase.value] = result
            logger.debug(
                "Pricing phase processed",
                phase=phase.value,
                base_amount=result.base_amount,
                final_amount=result.final_amount,
                adjustment=result.adjustment,
                conditions=result.applied_conditions,
                processor=processor is not None,
            )
            running_amount = final_amount

        logger.debug(
            "Pricing pipeline complete",
            initial_amount=initial_amount,
            final_amount=running_amount,
        )
        return PipelineResult(initial_amount, running_amount, phases)

    def _resolve_scopes(self, phase_context: PhaseContext) -> float:
        amount = phase_context.base_amount
        for scope in ConditionScope:
            scoped = phase_context.conditions.by_scope(scope)
            if scoped.is_empty():
                continue
            amount = self._resolvers[scope].resolve(phase_context, scope, scoped, amount)
        return amount

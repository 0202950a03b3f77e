"""Audit records produced by a pipeline run."""

from dataclasses import dataclass, field

from pricing.conditions.enums import ConditionPhase


@dataclass(frozen=True)
class PhaseResult:
    phase: ConditionPhase
    base_amount: float
    final_amount: float
    adjustment: float
    applied_conditions: int

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "base_amount": self.base_amount,
            "final_amount": self.final_amount,
            "adjustment": self.adjustment,
            "applied_conditions": self.applied_conditions,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a run: the starting amount, the final amount and one
    ``PhaseResult`` per phase keyed by phase value, in pipeline order.
    """

    initial_amount: float
    final_amount: float
    phases: dict[str, PhaseResult] = field(default_factory=dict)

    def phase(self, phase: ConditionPhase | str) -> PhaseResult | None:
        key = phase.value if isinstance(phase, ConditionPhase) else str(phase)
        return self.phases.get(key)

    def subtotal(self) -> float:
        result = self.phase(ConditionPhase.CART_SUBTOTAL)
        return result.final_amount if result is not None else self.initial_amount

    def total(self) -> float:
        result = self.phase(ConditionPhase.GRAND_TOTAL)
        return result.final_amount if result is not None else self.final_amount

    def to_dict(self) -> dict:
        return {
            "initial_amount": self.initial_amount,
            "final_amount": self.final_amount,
            "phases": {key: result.to_dict() for key, result in self.phases.items()},
        }

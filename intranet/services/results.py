"""
Result types for multi-step sync operations.

The canonical write is the primary outcome. Best-effort writes that follow
it (phones, cross-references, storefront status updates) are reported as
side effects instead of being raised or silently dropped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class SideEffectOutcome(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class SideEffect:
    """
    Outcome of one best-effort write.

    Attributes:
        name: Short identifier, e.g. "person_phones" or "cross_reference:woo_moraleja"
        outcome: ok, failed or skipped
        error: Error description when failed
    """

    name: str
    outcome: SideEffectOutcome
    error: Optional[str] = None

    @classmethod
    def ok(cls, name: str) -> "SideEffect":
        return cls(name=name, outcome=SideEffectOutcome.OK)

    @classmethod
    def failed(cls, name: str, error: str) -> "SideEffect":
        return cls(name=name, outcome=SideEffectOutcome.FAILED, error=error)

    @classmethod
    def skipped(cls, name: str, reason: Optional[str] = None) -> "SideEffect":
        return cls(name=name, outcome=SideEffectOutcome.SKIPPED, error=reason)

    @property
    def succeeded(self) -> bool:
        return self.outcome is SideEffectOutcome.OK

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "outcome": self.outcome.value}
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class PlatformResult:
    """Per-platform fan-out outcome: ``{success, data | error}``."""

    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def external_id(self) -> Optional[int]:
        if self.success and self.data:
            return self.data.get("id")
        return None

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


@dataclass
class OperationResult(Generic[T]):
    """Primary outcome plus the side effects recorded along the way."""

    primary: T
    side_effects: list[SideEffect] = field(default_factory=list)
    platform_results: dict[str, PlatformResult] = field(default_factory=dict)

    def add(self, effect: SideEffect) -> SideEffect:
        self.side_effects.append(effect)
        return effect

    def extend(self, effects: list[SideEffect]) -> None:
        self.side_effects.extend(effects)

    @property
    def failed_side_effects(self) -> list[SideEffect]:
        return [effect for effect in self.side_effects if effect.outcome is SideEffectOutcome.FAILED]

    def side_effects_dict(self) -> list[dict[str, Any]]:
        return [effect.to_dict() for effect in self.side_effects]

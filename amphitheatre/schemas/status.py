"""
Actor status schema - the lifecycle condition ledger.

The controller records an actor's lifecycle as conditions, one per phase:

    Pending -> Building -> Running
                  \\           \\
                   +-> Failed <-+

Each Condition asserts (status "True") or retracts (status "False") one
phase. ActorStatus keeps at most one condition per phase: writing a
condition of an existing type replaces it in place, so queries stay
idempotent however many times the controller updates the ledger.

The condition layout follows the declarative-resource convention:
{type, status, reason, message, lastTransitionTime, observedGeneration}.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from amphitheatre.errors import ValidationError
from amphitheatre.schemas.source import optional_int, optional_str

logger = logging.getLogger(__name__)

TRUE = "True"
FALSE = "False"

_SEPARATORS = re.compile(r"[\W_]+")


def _split_case(chunk: str) -> list[str]:
    """Split a separator-free chunk on lower->upper, letter<->digit and acronym boundaries."""
    words = []
    current = chunk[0]
    for i in range(1, len(chunk)):
        prev, ch = chunk[i - 1], chunk[i]
        nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
        if (
            (prev.islower() and ch.isupper())
            or prev.isdigit() != ch.isdigit()
            or (prev.isupper() and ch.isupper() and nxt.islower())
        ):
            words.append(current)
            current = ch
        else:
            current += ch
    words.append(current)
    return words


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def pascal_case(value: str) -> str:
    """
    Canonicalize a reason string to PascalCase.

    Words are split on separators and case changes:
    "image not found", "image_not_found" and "imageNotFound"
    all become "ImageNotFound". Letters of any script are kept,
    "échec réseau" becomes "ÉchecRéseau".
    """
    return "".join(
        word.capitalize()
        for chunk in _SEPARATORS.split(value) if chunk
        for word in _split_case(chunk)
    )


def status_string(status: bool) -> str:
    """Canonical string form of a condition status."""
    return TRUE if status else FALSE


def format_time(value: datetime) -> str:
    """Format a timestamp as RFC 3339 UTC with second precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_time(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting a trailing 'Z'."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ActorState(str, Enum):
    """Lifecycle phase of an actor, valued by its condition type string."""
    PENDING = "Pending"
    BUILDING = "Building"
    RUNNING = "Running"
    FAILED = "Failed"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "ActorState":
        """Parse an ActorState from its condition type string."""
        for state in cls:
            if state.value == value:
                return state
        raise ValidationError(f"Unknown condition type: {value!r}")

    def condition(self, status: bool, reason: str, message: Optional[str] = None) -> "Condition":
        """
        Build a condition for this phase, stamped with the current time.

        Never fails: reason is PascalCased, a missing message becomes "",
        observed_generation is left for the controller to fill.
        """
        return Condition(
            type=self,
            status=status_string(status),
            reason=pascal_case(reason),
            message=message if message is not None else "",
            last_transition_time=_utcnow(),
        )

    @staticmethod
    def pending() -> "Condition":
        return ActorState.PENDING.condition(True, "Created")

    @staticmethod
    def building() -> "Condition":
        return ActorState.BUILDING.condition(True, "Build")

    @staticmethod
    def running(status: bool, reason: str, message: Optional[str] = None) -> "Condition":
        return ActorState.RUNNING.condition(status, reason, message)

    @staticmethod
    def failed(status: bool, reason: str, message: Optional[str] = None) -> "Condition":
        return ActorState.FAILED.condition(status, reason, message)


# Highest precedence first
PHASE_PRECEDENCE = (
    ActorState.FAILED,
    ActorState.RUNNING,
    ActorState.BUILDING,
    ActorState.PENDING,
)


@dataclass(frozen=True)
class Condition:
    """
    One timestamped, reasoned assertion about an actor's lifecycle.

    Attributes:
        type: The lifecycle phase this condition is about
        status: "True" or "False"
        reason: PascalCase machine-readable reason
        message: Human-readable detail, "" when absent
        last_transition_time: When the status last changed
        observed_generation: Resource generation the controller observed, if known
    """
    type: ActorState
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: datetime = field(default_factory=_utcnow)
    observed_generation: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.type, ActorState):
            raise ValidationError(f"Condition: type must be an ActorState, got {self.type!r}")
        if self.status not in (TRUE, FALSE):
            raise ValidationError(
                f"Condition {self.type}: status must be '{TRUE}' or '{FALSE}', got {self.status!r}"
            )

    @property
    def is_true(self) -> bool:
        return self.status == TRUE

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the condition wire layout."""
        result: dict[str, Any] = {
            "type": self.type.value,
            "status": self.status,
            "reason": self.reason,
            "message": self.message,
            "lastTransitionTime": format_time(self.last_transition_time),
        }
        if self.observed_generation is not None:
            result["observedGeneration"] = self.observed_generation
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Condition":
        """Deserialize from the condition wire layout."""
        if not isinstance(data, dict):
            raise ValidationError("Condition: expected a mapping")
        for key in ("type", "status", "lastTransitionTime"):
            if key not in data:
                raise ValidationError(f"Condition: '{key}' is required")
        try:
            last_transition_time = parse_time(str(data["lastTransitionTime"]))
        except ValueError as e:
            raise ValidationError(f"Condition: invalid lastTransitionTime: {e}") from e
        return cls(
            type=ActorState.from_string(data["type"]),
            status=data["status"],
            reason=optional_str(data, "reason", "Condition") or "",
            message=optional_str(data, "message", "Condition") or "",
            last_transition_time=last_transition_time,
            observed_generation=optional_int(data, "observedGeneration", "Condition"),
        )


class ActorStatus:
    """
    Ordered condition ledger with one condition per lifecycle phase.

    Conditions are keyed by type internally and serialized as an ordered
    list. Only the controller writes to a status, through set_condition().
    """

    def __init__(self, conditions: Optional[Iterable[Condition]] = None):
        self._conditions: dict[ActorState, Condition] = {}
        for condition in conditions or ():
            self.set_condition(condition)

    @property
    def conditions(self) -> tuple[Condition, ...]:
        """Conditions in first-written order."""
        return tuple(self._conditions.values())

    def __len__(self) -> int:
        return len(self._conditions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActorStatus):
            return NotImplemented
        return self.conditions == other.conditions

    def __repr__(self) -> str:
        return f"ActorStatus(conditions={list(self.conditions)!r})"

    def set_condition(self, condition: Condition) -> Condition:
        """
        Upsert a condition by type.

        An existing condition of the same type is replaced in place, keeping
        its position. When the status string is unchanged the earlier
        last_transition_time is kept, since no transition happened.

        Returns:
            The condition as stored
        """
        existing = self._conditions.get(condition.type)
        if existing is not None and existing.status == condition.status:
            condition = replace(condition, last_transition_time=existing.last_transition_time)
        self._conditions[condition.type] = condition
        logger.debug(
            f"Set condition {condition.type}={condition.status} reason={condition.reason}"
        )
        return condition

    def get_condition(self, state: ActorState) -> Optional[Condition]:
        """Get the condition recorded for a phase, if any."""
        return self._conditions.get(state)

    def remove_condition(self, state: ActorState) -> Optional[Condition]:
        """Remove and return the condition recorded for a phase, if any."""
        return self._conditions.pop(state, None)

    def is_asserted(self, state: ActorState) -> bool:
        """Check whether the phase has a condition with status "True"."""
        condition = self._conditions.get(state)
        return condition is not None and condition.is_true

    def pending(self) -> bool:
        return self.is_asserted(ActorState.PENDING)

    def building(self) -> bool:
        return self.is_asserted(ActorState.BUILDING)

    def running(self) -> bool:
        return self.is_asserted(ActorState.RUNNING)

    def failed(self) -> bool:
        return self.is_asserted(ActorState.FAILED)

    def phase(self) -> Optional[ActorState]:
        """
        Classify the current lifecycle phase.

        Failed outranks Running, which outranks Building, which outranks
        Pending. Returns None when no phase is asserted.
        """
        for state in PHASE_PRECEDENCE:
            if self.is_asserted(state):
                return state
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary; an empty ledger has no conditions key."""
        if not self._conditions:
            return {}
        return {"conditions": [c.to_dict() for c in self.conditions]}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ActorStatus":
        """
        Deserialize from dictionary.

        Duplicate condition types written by other tools collapse onto the
        first position, with the later entry winning.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError("ActorStatus: expected a mapping")
        conditions = data.get("conditions") or []
        if not isinstance(conditions, list):
            raise ValidationError("ActorStatus: 'conditions' must be a list")
        return cls(Condition.from_dict(c) for c in conditions)

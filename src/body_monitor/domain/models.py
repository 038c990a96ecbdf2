"""Domain models for body measurements."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

MEASUREMENT_WINDOW = 10


def append_to_window(weights: list[float], weight: float, window: int) -> None:
    """Append a sample in place, evicting the oldest ones beyond the window."""
    if window < 1:
        raise ValueError("window must be at least 1")
    weights.append(weight)
    overflow = len(weights) - window
    if overflow > 0:
        del weights[:overflow]


@dataclass
class BodyRecord:
    """A user's profile and recent weight history."""

    age: int | None = None
    height: int | None = None
    weights: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if (self.age is None) != (self.height is None):
            raise ValueError("age and height must be set together")
        if self.age is None and self.weights:
            raise ValueError("unregistered record cannot hold weights")

    @classmethod
    def empty(cls) -> "BodyRecord":
        """Return an unregistered record."""
        return cls()

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "BodyRecord":
        """Build a record from a remote store payload."""
        age = payload.get("age")
        height = payload.get("height")
        raw_weights = payload.get("weights") or []
        if not isinstance(raw_weights, Sequence):
            raise ValueError("weights must be a sequence")
        return cls(
            age=int(age) if age is not None else None,
            height=int(height) if height is not None else None,
            weights=[float(value) for value in raw_weights],
        )

    @property
    def is_registered(self) -> bool:
        return self.age is not None

    @property
    def current_weight(self) -> float | None:
        return self.weights[-1] if self.weights else None

    def add_weight(self, weight: float, window: int = MEASUREMENT_WINDOW) -> None:
        """Record a new sample, keeping at most ``window`` of them."""
        if not self.is_registered:
            raise ValueError("cannot add weight to an unregistered record")
        append_to_window(self.weights, weight, window)

    def to_payload(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {"age": self.age, "height": self.height, "weights": list(self.weights)}


@dataclass(frozen=True)
class SeriesPoint:
    """One plotted weight sample."""

    sequence_index: int
    value: float

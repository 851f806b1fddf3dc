from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CarConfig:
    """Serviceable floor range for a car, both ends inclusive."""

    min_floor: int = 0
    max_floor: int = 5

    def __post_init__(self) -> None:
        if self.min_floor > self.max_floor:
            raise ValueError(
                f"min_floor ({self.min_floor}) must not exceed max_floor ({self.max_floor})"
            )

    def contains(self, floor: int) -> bool:
        return self.min_floor <= floor <= self.max_floor

    @property
    def floors(self) -> range:
        return range(self.min_floor, self.max_floor + 1)

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Tuple

from .config import CarConfig
from .errors import (
    CannotMoveDoorsOpen,
    CannotOpenWhileMoving,
    DoorsAlreadyClosed,
    DoorsAlreadyOpen,
    EmptyQueue,
    InvalidFloor,
)

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    IDLE = "idle"
    MOVING_UP = "moving_up"
    MOVING_DOWN = "moving_down"
    DOORS_OPEN = "doors_open"

    @property
    def is_moving(self) -> bool:
        return self in (Mode.MOVING_UP, Mode.MOVING_DOWN)


@dataclass(frozen=True)
class CarStatus:
    """Immutable view of a car at one point in time."""

    position: int
    mode: Mode
    pending_calls: Tuple[int, ...]

    def as_dict(self) -> dict:
        return {
            "position": self.position,
            "mode": self.mode.value,
            "pending_calls": list(self.pending_calls),
        }


@dataclass(repr=False)
class Car:
    """A single elevator car driven one discrete step at a time.

    Calls are served strictly first come, first served. The car travels one
    floor per :meth:`step` and opens its doors automatically on the step that
    reaches the call at the front of the queue.
    """

    start_floor: int
    config: CarConfig = field(default_factory=CarConfig)
    _position: int = field(init=False, repr=False)
    _mode: Mode = field(init=False, default=Mode.IDLE, repr=False)
    _pending: Deque[int] = field(init=False, default_factory=deque, repr=False)

    def __post_init__(self) -> None:
        self._check_floor(self.start_floor)
        self._position = self.start_floor

    def __repr__(self) -> str:
        return (
            f"Car(position={self._position}, mode={self._mode.value}, "
            f"pending_calls={list(self._pending)})"
        )

    @property
    def position(self) -> int:
        return self._position

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def pending_calls(self) -> Tuple[int, ...]:
        return tuple(self._pending)

    def status(self) -> CarStatus:
        return CarStatus(
            position=self._position,
            mode=self._mode,
            pending_calls=tuple(self._pending),
        )

    def request_floor(self, floor: int) -> None:
        """Queue a call for ``floor``.

        Requests for the current floor or for a floor already queued are
        accepted without changing anything. Direction is only chosen here when
        the car is idle; a moving or open car picks it up later.
        """
        self._check_floor(floor)
        if floor == self._position or floor in self._pending:
            return

        self._pending.append(floor)
        logger.debug("Call for floor %s queued: %s", floor, list(self._pending))

        if self._mode is Mode.IDLE:
            self._set_mode(self._heading_for(floor))

    def step(self) -> None:
        """Advance one floor toward the oldest pending call."""
        if self._mode is Mode.DOORS_OPEN:
            raise CannotMoveDoorsOpen()

        if not self._pending:
            self._set_mode(Mode.IDLE)
            raise EmptyQueue()

        target = self._pending[0]
        if target > self._position:
            self._position += 1
            self._set_mode(Mode.MOVING_UP)
        elif target < self._position:
            self._position -= 1
            self._set_mode(Mode.MOVING_DOWN)

        if self._position == target:
            self._pending.popleft()
            self._set_mode(Mode.DOORS_OPEN)
            logger.info("Arrived at floor %s", target)

    def open_doors(self) -> None:
        if self._mode is Mode.DOORS_OPEN:
            raise DoorsAlreadyOpen()
        if self._mode.is_moving:
            raise CannotOpenWhileMoving()
        self._set_mode(Mode.DOORS_OPEN)

    def close_doors(self) -> None:
        if self._mode is not Mode.DOORS_OPEN:
            raise DoorsAlreadyClosed()
        if self._pending:
            self._set_mode(self._heading_for(self._pending[0]))
        else:
            self._set_mode(Mode.IDLE)

    def _heading_for(self, floor: int) -> Mode:
        return Mode.MOVING_UP if floor > self._position else Mode.MOVING_DOWN

    def _set_mode(self, mode: Mode) -> None:
        if mode is not self._mode:
            logger.debug(
                "Car at floor %s: %s -> %s", self._position, self._mode.value, mode.value
            )
        self._mode = mode

    def _check_floor(self, floor: int) -> None:
        # Fractional floors would never compare equal to the position.
        if isinstance(floor, bool) or not isinstance(floor, int):
            raise InvalidFloor(floor)
        if not self.config.contains(floor):
            raise InvalidFloor(floor)

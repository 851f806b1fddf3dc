"""Single-car elevator controller for LiftCar."""

from .car import Car, CarStatus, Mode
from .config import CarConfig
from .errors import (
    CannotMoveDoorsOpen,
    CannotOpenWhileMoving,
    CarError,
    DoorsAlreadyClosed,
    DoorsAlreadyOpen,
    EmptyQueue,
    InvalidFloor,
)

__all__ = [
    "Car",
    "CarConfig",
    "CarStatus",
    "Mode",
    "CarError",
    "CannotMoveDoorsOpen",
    "CannotOpenWhileMoving",
    "DoorsAlreadyClosed",
    "DoorsAlreadyOpen",
    "EmptyQueue",
    "InvalidFloor",
]

"""Errors raised by the car controller.

Every error leaves the car usable. Only :class:`EmptyQueue` is paired with a
state change: the car is forced back to idle before it is raised.
"""
from __future__ import annotations


class CarError(Exception):
    """Base class for rejected car operations."""

    code = "car_error"
    message = "car operation rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidFloor(CarError):
    code = "invalid_floor"

    def __init__(self, floor: int) -> None:
        self.floor = floor
        super().__init__(f"Floor {floor} is outside the serviceable range")


class DoorsAlreadyOpen(CarError):
    code = "doors_already_open"
    message = "doors are already open"


class DoorsAlreadyClosed(CarError):
    code = "doors_already_closed"
    message = "doors are already closed"


class CannotOpenWhileMoving(CarError):
    code = "cannot_open_while_moving"
    message = "cannot open doors while the car is moving"


class CannotMoveDoorsOpen(CarError):
    code = "cannot_move_doors_open"
    message = "cannot move while the doors are open"


class EmptyQueue(CarError):
    code = "empty_queue"
    message = "no pending calls to serve"

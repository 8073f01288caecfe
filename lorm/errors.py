"""Exceptions raised by the package."""

from __future__ import annotations

__all__ = ["LormError", "NilValueError", "EmptySliceError", "NoPkOrUniqueError"]


class LormError(Exception):
    """Base class for all errors raised here."""


class NilValueError(LormError):
    """A value that must be present was None."""

    def __init__(self, message: str = "nil") -> None:
        super().__init__(message)


class EmptySliceError(LormError):
    """A collection that must hold items was empty."""

    def __init__(self, message: str = "slice empty") -> None:
        super().__init__(message)


class NoPkOrUniqueError(LormError):
    """ON CONFLICT used without a matching unique constraint."""

    def __init__(
        self,
        message: str = (
            " ERROR: there is no unique or exclusion constraint matching the "
            "ON CONFLICT specification (SQLSTATE 42P10) "
        ),
    ) -> None:
        super().__init__(message)
"""Enumerations shared across statement generation."""

from __future__ import annotations

import enum

__all__ = ["InsertType", "ClauseType", "ReturnType"]


class InsertType(enum.IntEnum):
    """Behaviour of an INSERT on a unique-key conflict."""

    ERR = 0  # fail
    IGNORE = 1  # skip the row
    UPDATE = 2  # update the existing row
    REPLACE = 3  # delete then insert


class ClauseType(enum.IntEnum):
    """Kinds of where-clause comparisons."""

    EQ = 0
    NEQ = 1
    LESS = 2
    LESS_EQ = 3
    GREATER = 4
    GREATER_EQ = 5
    LIKE = 6
    NOT_LIKE = 7
    IN = 8
    NOT_IN = 9
    BETWEEN = 10
    NOT_BETWEEN = 11
    IS_NULL = 12
    IS_NOT_NULL = 13
    IS_FALSE = 14
    # PostgreSQL only: array containment
    CONTAINS = 15


class ReturnType(enum.IntEnum):
    """Which columns an INSERT returns."""

    NONE = 0
    PRIMARY_KEY = 1
    ZERO_FIELD = 2
    ALL_FIELD = 3
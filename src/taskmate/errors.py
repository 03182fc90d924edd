# src/taskmate/errors.py

from __future__ import annotations


class TaskMateError(Exception):
    """Base class for taskmate errors."""


class ValidationFailure(TaskMateError, ValueError):
    """
    User input was rejected (empty title, duplicate category, ...).

    The message is meant to be shown to the user as-is.
    The operation that raised it has not changed any state.
    """


class PersistenceFailure(TaskMateError):
    """
    Storage medium or serialization error.

    Raised by key-value backends only. TaskStore/CategoryStore catch it at their
    boundary, log it and degrade (empty load, no-op save/clear).
    """

"""
Self-Command Errors
===================

Validation failures raised inside command handlers.

None of these are fatal. Each Command catches them in execute() and
turns them into a CommandResult with ``error`` set, so a bad command
line never escapes the dispatcher. The handler simply reports
"not handled" and the caller moves on.

Taxonomy
--------
    MissingParameter   required token absent
    UnknownField       field name not in the registry, and no extension
                       resolver claims it
    InvalidModeValue   value is not a member of the field's ordered list
    InvalidNumber      numeric parse failure (set distance)

Diagnostics reach the chat sink only when debug mode is on. The one
exception is InvalidNumber, which always notifies the user.
"""

from __future__ import annotations


class SelfCommandError(ValueError):
    """Base class for handler validation failures."""

    reason = "invalid"
    always_notify = False


class MissingParameter(SelfCommandError):
    reason = "missing_parameter"


class UnknownField(SelfCommandError):
    reason = "unknown_field"


class InvalidModeValue(SelfCommandError):
    reason = "invalid_mode_value"


class InvalidNumber(SelfCommandError):
    reason = "invalid_number"
    always_notify = True

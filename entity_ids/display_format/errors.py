"""
Entity IDs - Display Format Errors
====================================
Two families live here:

- Validation issues: frozen, serializable descriptions of one problem in
  a candidate format. They are collected, never raised.
- Exceptions: raised for failures that end an operation (unparseable
  stored document, unresolvable preview, rejected save).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


# ══════════════════════════════════════════════════════════════
# VALIDATION ISSUES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationError:
    """
    One problem found while validating a display format.

    Fields:
        code:    Machine-readable code (e.g. 'MISSING_TOKEN_CONFIG').
        message: Human-readable explanation.
        token:   The offending token name, if the issue concerns a token.
        fields:  Names of the offending or missing fields.
    """

    code: str
    message: str
    token: Optional[str] = None
    fields: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "token": self.token,
            "fields": list(self.fields),
        }


@dataclass(frozen=True)
class MissingTokenConfigError(ValidationError):
    """A token referenced in the format has no entry in the token list."""


@dataclass(frozen=True)
class IncompleteTokenConfigError(ValidationError):
    """A token entry lacks fields required by its kind."""


@dataclass(frozen=True)
class DuplicateTokenConfigError(ValidationError):
    """The same token name is configured more than once."""


@dataclass(frozen=True)
class InvalidResetPolicyError(ValidationError):
    """Fiscal month missing or out of range, or reset group is not a lookup token."""


@dataclass(frozen=True)
class InvalidDisplayFormatError(ValidationError):
    """A top-level format field (template, date field, padding) is invalid."""


class ErrorCode:
    MISSING_TOKEN_CONFIG = "MISSING_TOKEN_CONFIG"
    INCOMPLETE_TOKEN_CONFIG = "INCOMPLETE_TOKEN_CONFIG"
    DUPLICATE_TOKEN_CONFIG = "DUPLICATE_TOKEN_CONFIG"
    INVALID_RESET_POLICY = "INVALID_RESET_POLICY"
    INVALID_DISPLAY_FORMAT = "INVALID_DISPLAY_FORMAT"


# ══════════════════════════════════════════════════════════════
# EXCEPTIONS
# ══════════════════════════════════════════════════════════════

class DisplayFormatError(Exception):
    """Base error for display format operations."""
    pass


class DisplayFormatParseError(DisplayFormatError, ValueError):
    """A stored display_format document cannot be read."""


class PreviewError(DisplayFormatError):
    """
    One or more tokens could not be resolved from the sample data.

    `tokens` carries the per-placeholder resolutions, resolved ones
    included, when the renderer produced them.
    """

    def __init__(self, problems: tuple[str, ...], *, tokens: tuple = ()):
        self.problems = tuple(problems)
        self.tokens = tuple(tokens)
        super().__init__(
            "Preview could not be rendered: " + "; ".join(self.problems)
        )


class PersistenceError(DisplayFormatError):
    """The catalog store rejected a save. Never retried here."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class EntityNotFoundError(DisplayFormatError):
    """No entity with this id exists for the business."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"Entity '{entity_id}' was not found.")

"""
Entity IDs - Display Format Validators
========================================
Consistency checks run before a display format is persisted.

Doctrine:
- Collect, never fail fast. Every validator walks the whole input and
  returns all issues in one ValidationResult, so the editor can mark
  every problem at once.
- Validators never raise for a problem in the data.
- Tokens declared but not used in the template are allowed; they are
  reported as warnings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from entity_ids.display_format.errors import (
    DuplicateTokenConfigError,
    ErrorCode,
    IncompleteTokenConfigError,
    InvalidDisplayFormatError,
    InvalidResetPolicyError,
    MissingTokenConfigError,
    ValidationError,
)
from entity_ids.display_format.models import (
    MAX_COUNTER_PADDING,
    MAX_FISCAL_MONTH,
    MIN_COUNTER_PADDING,
    MIN_FISCAL_MONTH,
    PERIOD_FINANCIAL_YEAR,
    CounterResetPolicy,
    DatePartToken,
    EntityDisplayFormat,
    LookupToken,
    TokenConfig,
)
from entity_ids.display_format.tokens import extract_tokens, normalize_token_name

logger = logging.getLogger("entity_ids.display_format")


# ══════════════════════════════════════════════════════════════
# RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )

    def errors_of(self, error_type: type) -> tuple[ValidationError, ...]:
        return tuple(e for e in self.errors if type(e) is error_type)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


# ══════════════════════════════════════════════════════════════
# TOKEN CONFIG VALIDATOR
# ══════════════════════════════════════════════════════════════

_LOOKUP_REQUIRED = (
    ("source_field", "entity_field"),
    ("lookup_schema", "lookup_schema"),
    ("lookup_table", "lookup_table"),
    ("lookup_value_field", "lookup_value_field"),
)


def _missing_fields(token: TokenConfig) -> tuple[str, ...]:
    """Persisted names of required fields left blank for this token's kind."""
    if isinstance(token, LookupToken):
        return tuple(
            stored
            for attr, stored in _LOOKUP_REQUIRED
            if not getattr(token, attr).strip()
        )
    if isinstance(token, DatePartToken):
        return () if token.date_format.strip() else ("date_format",)
    return ()


def validate_tokens(
    format_string: str,
    tokens: Iterable[TokenConfig],
) -> ValidationResult:
    """
    Check that the token list covers the template.

    - one MissingTokenConfigError per placeholder with no entry
    - one IncompleteTokenConfigError per entry, listing all blank fields
    - one DuplicateTokenConfigError per name configured more than once
    """
    tokens = tuple(tokens)
    errors: list[ValidationError] = []
    warnings: list[str] = []

    configured: dict[str, int] = {}
    for token in tokens:
        name = normalize_token_name(token.token)
        if name:
            configured[name] = configured.get(name, 0) + 1

    referenced = extract_tokens(format_string)
    for name in referenced:
        if name not in configured:
            errors.append(
                MissingTokenConfigError(
                    code=ErrorCode.MISSING_TOKEN_CONFIG,
                    message=f"Token '{{{name}}}' is used in the format but has no configuration.",
                    token=name,
                )
            )

    for name, count in configured.items():
        if count > 1:
            errors.append(
                DuplicateTokenConfigError(
                    code=ErrorCode.DUPLICATE_TOKEN_CONFIG,
                    message=f"Token '{{{name}}}' is configured {count} times.",
                    token=name,
                )
            )

    for token in tokens:
        name = normalize_token_name(token.token)
        if not name:
            errors.append(
                IncompleteTokenConfigError(
                    code=ErrorCode.INCOMPLETE_TOKEN_CONFIG,
                    message=f"A {token.token_type} token has no name.",
                    fields=("token",),
                )
            )
            continue
        missing = _missing_fields(token)
        if missing:
            errors.append(
                IncompleteTokenConfigError(
                    code=ErrorCode.INCOMPLETE_TOKEN_CONFIG,
                    message=(
                        f"Token '{{{name}}}' ({token.token_type}) is missing: "
                        f"{', '.join(missing)}."
                    ),
                    token=name,
                    fields=missing,
                )
            )
        if name not in referenced:
            warnings.append(f"Token '{{{name}}}' is configured but not used in the format.")

    for warning in warnings:
        logger.warning(warning)

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))


# ══════════════════════════════════════════════════════════════
# COUNTER RESET POLICY VALIDATOR
# ══════════════════════════════════════════════════════════════

def validate_reset_policy(
    policy: CounterResetPolicy,
    tokens: Iterable[TokenConfig],
) -> ValidationResult:
    """
    Cross-field rules of the reset policy.

    FINANCIAL_YEAR needs a start month in 1..12 and CALENDAR_YEAR takes
    none. A reset group must name a lookup token; pointing it at a date
    part, the counter or nothing is an error.
    """
    errors: list[ValidationError] = []
    month = policy.fiscal_year_start_month

    if policy.period == PERIOD_FINANCIAL_YEAR and month is None:
        errors.append(
            InvalidResetPolicyError(
                code=ErrorCode.INVALID_RESET_POLICY,
                message="Financial year start month is required for FINANCIAL_YEAR.",
                fields=("fy_start_month",),
            )
        )
    elif policy.period != PERIOD_FINANCIAL_YEAR and month is not None:
        errors.append(
            InvalidResetPolicyError(
                code=ErrorCode.INVALID_RESET_POLICY,
                message=f"Financial year start month is only used with FINANCIAL_YEAR, got {month}.",
                fields=("fy_start_month",),
            )
        )
    elif month is not None and not MIN_FISCAL_MONTH <= month <= MAX_FISCAL_MONTH:
        errors.append(
            InvalidResetPolicyError(
                code=ErrorCode.INVALID_RESET_POLICY,
                message=(
                    f"Financial year start month must be between "
                    f"{MIN_FISCAL_MONTH} and {MAX_FISCAL_MONTH}, got {month}."
                ),
                fields=("fy_start_month",),
            )
        )

    if policy.reset_group:
        group = normalize_token_name(policy.reset_group)
        matches = [t for t in tokens if normalize_token_name(t.token) == group]
        if not matches:
            errors.append(
                InvalidResetPolicyError(
                    code=ErrorCode.INVALID_RESET_POLICY,
                    message=f"Reset group '{{{group}}}' does not match any configured token.",
                    token=group,
                    fields=("reset_group",),
                )
            )
        elif not any(isinstance(t, LookupToken) for t in matches):
            errors.append(
                InvalidResetPolicyError(
                    code=ErrorCode.INVALID_RESET_POLICY,
                    message=(
                        f"Reset group '{{{group}}}' must be a lookup token, "
                        f"not {matches[0].token_type}."
                    ),
                    token=group,
                    fields=("reset_group",),
                )
            )

    return ValidationResult(errors=tuple(errors))


# ══════════════════════════════════════════════════════════════
# WHOLE FORMAT
# ══════════════════════════════════════════════════════════════

def _validate_top_level(fmt: EntityDisplayFormat) -> ValidationResult:
    errors: list[ValidationError] = []

    if not fmt.format.strip():
        errors.append(
            InvalidDisplayFormatError(
                code=ErrorCode.INVALID_DISPLAY_FORMAT,
                message="Format string is required.",
                fields=("format",),
            )
        )
    if not fmt.date_field.strip():
        uses_dates = any(isinstance(t, DatePartToken) for t in fmt.tokens)
        errors.append(
            InvalidDisplayFormatError(
                code=ErrorCode.INVALID_DISPLAY_FORMAT,
                message=(
                    "Date field is required to resolve date tokens."
                    if uses_dates
                    else "Date field is required."
                ),
                fields=("date_field",),
            )
        )
    if not MIN_COUNTER_PADDING <= fmt.counter_padding <= MAX_COUNTER_PADDING:
        errors.append(
            InvalidDisplayFormatError(
                code=ErrorCode.INVALID_DISPLAY_FORMAT,
                message=(
                    f"counter_padding must be an integer between "
                    f"{MIN_COUNTER_PADDING} and {MAX_COUNTER_PADDING}."
                ),
                fields=("counter_padding",),
            )
        )
    return ValidationResult(errors=tuple(errors))


def validate_display_format(fmt: EntityDisplayFormat) -> ValidationResult:
    """Run every check on a candidate format and return all issues."""
    return (
        _validate_top_level(fmt)
        .merge(validate_tokens(fmt.format, fmt.tokens))
        .merge(validate_reset_policy(fmt.counter_reset_policy, fmt.tokens))
    )

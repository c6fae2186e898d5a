"""
Entity IDs - Display Format Public API
========================================
"""

from entity_ids.display_format.errors import (
    DisplayFormatError,
    DisplayFormatParseError,
    DuplicateTokenConfigError,
    EntityNotFoundError,
    ErrorCode,
    IncompleteTokenConfigError,
    InvalidDisplayFormatError,
    InvalidResetPolicyError,
    MissingTokenConfigError,
    PersistenceError,
    PreviewError,
    ValidationError,
)
from entity_ids.display_format.models import (
    DEFAULT_COUNTER_PADDING,
    PERIOD_CALENDAR_YEAR,
    PERIOD_FINANCIAL_YEAR,
    TOKEN_COUNTER,
    TOKEN_DATE_PART,
    TOKEN_LOOKUP,
    VALID_RESET_PERIODS,
    VALID_TOKEN_TYPES,
    CounterResetPolicy,
    CounterToken,
    DatePartToken,
    EntityDisplayFormat,
    LookupToken,
    TokenConfig,
)
from entity_ids.display_format.preview import (
    InMemoryLookupResolver,
    LookupResolver,
    TokenResolution,
    can_generate,
    counter_state_key,
    preview,
    required_fields,
    resolve_tokens,
)
from entity_ids.display_format.serialization import (
    build_display_format,
    filter_token_entries,
    parse_display_format,
    serialize_display_format,
    to_form_values,
)
from entity_ids.display_format.tokens import (
    extract_tokens,
    normalize_token_name,
    substitute_tokens,
)
from entity_ids.display_format.validation import (
    ValidationResult,
    validate_display_format,
    validate_reset_policy,
    validate_tokens,
)

__all__ = [
    "EntityDisplayFormat",
    "LookupToken",
    "DatePartToken",
    "CounterToken",
    "TokenConfig",
    "CounterResetPolicy",
    "TOKEN_LOOKUP",
    "TOKEN_DATE_PART",
    "TOKEN_COUNTER",
    "VALID_TOKEN_TYPES",
    "PERIOD_CALENDAR_YEAR",
    "PERIOD_FINANCIAL_YEAR",
    "VALID_RESET_PERIODS",
    "DEFAULT_COUNTER_PADDING",
    "extract_tokens",
    "normalize_token_name",
    "substitute_tokens",
    "filter_token_entries",
    "parse_display_format",
    "serialize_display_format",
    "build_display_format",
    "to_form_values",
    "ValidationResult",
    "validate_tokens",
    "validate_reset_policy",
    "validate_display_format",
    "LookupResolver",
    "InMemoryLookupResolver",
    "TokenResolution",
    "preview",
    "resolve_tokens",
    "required_fields",
    "can_generate",
    "counter_state_key",
    "ValidationError",
    "MissingTokenConfigError",
    "IncompleteTokenConfigError",
    "DuplicateTokenConfigError",
    "InvalidResetPolicyError",
    "InvalidDisplayFormatError",
    "ErrorCode",
    "DisplayFormatError",
    "DisplayFormatParseError",
    "PreviewError",
    "PersistenceError",
    "EntityNotFoundError",
]

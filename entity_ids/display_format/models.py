"""
Entity IDs - Display Format Models
====================================
Defines the display-ID format configuration of one entity type: the
template string, its token definitions and the counter reset policy.

Doctrine:
- Models are immutable. The editor builds a new format on every save.
- Models do not validate cross-field consistency; the validators do,
  so that every problem can be reported at once.
- The counter itself is never represented here. MaxCounterState belongs
  to the issuance trigger and is only ever read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


# ---------------------------------------------------------------------------
# Token kinds (persisted "type" values)
# ---------------------------------------------------------------------------

TOKEN_LOOKUP = "lookup"
TOKEN_DATE_PART = "date_part"
TOKEN_COUNTER = "counter"

VALID_TOKEN_TYPES = frozenset({TOKEN_LOOKUP, TOKEN_DATE_PART, TOKEN_COUNTER})

# ---------------------------------------------------------------------------
# Reset periods
# ---------------------------------------------------------------------------

PERIOD_CALENDAR_YEAR = "CALENDAR_YEAR"
PERIOD_FINANCIAL_YEAR = "FINANCIAL_YEAR"

VALID_RESET_PERIODS = frozenset({PERIOD_CALENDAR_YEAR, PERIOD_FINANCIAL_YEAR})

# ---------------------------------------------------------------------------
# Editor defaults and bounds
# ---------------------------------------------------------------------------

DEFAULT_COUNTER_PADDING = 4
MIN_COUNTER_PADDING = 1
MAX_COUNTER_PADDING = 10

MIN_FISCAL_MONTH = 1
MAX_FISCAL_MONTH = 12


# ---------------------------------------------------------------------------
# Token configs (closed variant)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LookupToken:
    """
    Resolved by reading `source_field` from the entity row, finding the
    matching row in `lookup_schema.lookup_table` and taking its
    `lookup_value_field`.
    """
    token: str
    source_field: str = ""
    lookup_schema: str = ""
    lookup_table: str = ""
    lookup_value_field: str = ""

    @property
    def token_type(self) -> str:
        return TOKEN_LOOKUP


@dataclass(frozen=True)
class DatePartToken:
    """Resolved by formatting the entity's date field with `date_format`."""
    token: str
    date_format: str = ""

    @property
    def token_type(self) -> str:
        return TOKEN_DATE_PART


@dataclass(frozen=True)
class CounterToken:
    """The zero-padded sequence value. Needs no configuration."""
    token: str

    @property
    def token_type(self) -> str:
        return TOKEN_COUNTER


TokenConfig = Union[LookupToken, DatePartToken, CounterToken]


# ---------------------------------------------------------------------------
# Counter reset policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CounterResetPolicy:
    """
    When the issuance counter restarts.

    Fields:
        period: CALENDAR_YEAR or FINANCIAL_YEAR
        fiscal_year_start_month: 1..12, set for FINANCIAL_YEAR only
        reset_group: name of a lookup token; the counter is tracked
            separately for every resolved value of that token
    """
    period: str = PERIOD_CALENDAR_YEAR
    fiscal_year_start_month: Optional[int] = None
    reset_group: Optional[str] = None

    def __post_init__(self):
        if self.period not in VALID_RESET_PERIODS:
            raise ValueError(
                f"period '{self.period}' is not valid. "
                f"Must be one of: {sorted(VALID_RESET_PERIODS)}"
            )


# ---------------------------------------------------------------------------
# EntityDisplayFormat
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EntityDisplayFormat:
    """
    The display-ID configuration for one entity type.

    `extras` holds keys of the stored document this editor does not own
    (e.g. "table_name"). They are carried through unchanged on save.
    They take part in equality but not in the hash.
    """
    format: str = ""
    date_field: str = ""
    counter_padding: int = DEFAULT_COUNTER_PADDING
    tokens: tuple[TokenConfig, ...] = ()
    counter_reset_policy: CounterResetPolicy = field(default_factory=CounterResetPolicy)
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not isinstance(self.format, str):
            raise ValueError("format must be a string.")
        if not isinstance(self.date_field, str):
            raise ValueError("date_field must be a string.")
        if isinstance(self.counter_padding, bool) or not isinstance(self.counter_padding, int):
            raise ValueError("counter_padding must be int.")
        if not isinstance(self.tokens, tuple):
            raise ValueError("tokens must be a tuple.")
        if not isinstance(self.counter_reset_policy, CounterResetPolicy):
            raise ValueError("counter_reset_policy must be CounterResetPolicy.")

    def lookup_tokens(self) -> tuple[LookupToken, ...]:
        return tuple(t for t in self.tokens if isinstance(t, LookupToken))

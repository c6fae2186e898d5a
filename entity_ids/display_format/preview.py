"""
Entity IDs - Format Preview
=============================
Renders the display ID a record would receive, for operator review
before saving a format.

Doctrine:
- Side-effect free. The counter value is supplied by the caller and the
  live MaxCounterState is never read or written.
- Same inputs, same output.
- Every unresolvable token is reported together in one PreviewError.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Protocol

from entity_ids.display_format.dates import coerce_date, format_date_part, period_identifier
from entity_ids.display_format.errors import PreviewError
from entity_ids.display_format.models import (
    CounterToken,
    DatePartToken,
    EntityDisplayFormat,
    LookupToken,
    TokenConfig,
)
from entity_ids.display_format.tokens import (
    extract_tokens,
    normalize_token_name,
    substitute_tokens,
)

COUNTER_KEY_SEPARATOR = "|"


# ---------------------------------------------------------------------------
# Lookup resolution
# ---------------------------------------------------------------------------

class LookupResolver(Protocol):
    def resolve(
        self,
        *,
        lookup_schema: str,
        lookup_table: str,
        lookup_value_field: str,
        key_value: Any,
    ) -> Optional[str]:
        """Return the display value for key_value, or None if no row matches."""
        ...


class InMemoryLookupResolver:
    """
    Lookup rows held in memory, keyed by (schema, table).
    Used in tests and for previews without a database.
    """

    def __init__(
        self,
        tables: Optional[Mapping[tuple[str, str], Mapping[Any, Mapping[str, Any]]]] = None,
    ):
        self._lock = threading.Lock()
        self._tables: dict[tuple[str, str], dict[Any, dict[str, Any]]] = {}
        for key, rows in (tables or {}).items():
            self._tables[key] = {row_key: dict(row) for row_key, row in rows.items()}

    def add_row(self, lookup_schema: str, lookup_table: str, key_value: Any, row: Mapping[str, Any]) -> None:
        with self._lock:
            self._tables.setdefault((lookup_schema, lookup_table), {})[key_value] = dict(row)

    def resolve(
        self,
        *,
        lookup_schema: str,
        lookup_table: str,
        lookup_value_field: str,
        key_value: Any,
    ) -> Optional[str]:
        with self._lock:
            row = self._tables.get((lookup_schema, lookup_table), {}).get(key_value)
        if row is None or row.get(lookup_value_field) is None:
            return None
        return str(row[lookup_value_field])


# ---------------------------------------------------------------------------
# Token resolution
# ---------------------------------------------------------------------------

def _record_date(
    fmt: EntityDisplayFormat,
    sample_record: Mapping[str, Any],
    sample_date: Optional[date],
) -> Optional[date]:
    if sample_date is not None:
        return coerce_date(sample_date)
    if not fmt.date_field:
        return None
    return coerce_date(sample_record.get(fmt.date_field))


def _resolve_lookup(
    token: LookupToken,
    sample_record: Mapping[str, Any],
    lookup_resolver: Optional[LookupResolver],
    problems: list[str],
) -> Optional[str]:
    name = normalize_token_name(token.token)
    key_value = sample_record.get(token.source_field)
    if key_value is None or key_value == "":
        problems.append(f"{{{name}}}: sample record has no value for '{token.source_field}'")
        return None
    if lookup_resolver is None:
        problems.append(f"{{{name}}}: no lookup resolver available")
        return None
    resolved = lookup_resolver.resolve(
        lookup_schema=token.lookup_schema,
        lookup_table=token.lookup_table,
        lookup_value_field=token.lookup_value_field,
        key_value=key_value,
    )
    if resolved is None:
        problems.append(
            f"{{{name}}}: no {token.lookup_schema}.{token.lookup_table} row for '{key_value}'"
        )
    return resolved


def _check_counter(simulated_counter: Any) -> None:
    if isinstance(simulated_counter, bool) or not isinstance(simulated_counter, int):
        raise ValueError("simulated_counter must be int >= 1.")
    if simulated_counter < 1:
        raise ValueError("simulated_counter must be int >= 1.")


@dataclass(frozen=True)
class TokenResolution:
    """What one template placeholder resolved to; value is None if it did not."""
    token: str
    token_type: Optional[str] = None
    value: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.value is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "token_type": self.token_type,
            "value": self.value,
            "available": self.available,
        }


def _resolve_all(
    fmt: EntityDisplayFormat,
    record: Mapping[str, Any],
    simulated_counter: int,
    lookup_resolver: Optional[LookupResolver],
    sample_date: Optional[date],
) -> tuple[tuple[TokenResolution, ...], tuple[str, ...]]:
    configured: dict[str, TokenConfig] = {}
    for token in fmt.tokens:
        configured.setdefault(normalize_token_name(token.token), token)

    record_date = _record_date(fmt, record, sample_date)
    problems: list[str] = []
    resolutions: list[TokenResolution] = []

    for name in extract_tokens(fmt.format):
        token = configured.get(name)
        value: Optional[str] = None
        if token is None:
            problems.append(f"{{{name}}}: token is not configured")
        elif isinstance(token, LookupToken):
            value = _resolve_lookup(token, record, lookup_resolver, problems)
        elif isinstance(token, DatePartToken):
            if record_date is None:
                problems.append(f"{{{name}}}: sample record has no date in '{fmt.date_field}'")
            else:
                value = format_date_part(record_date, token.date_format)
        elif isinstance(token, CounterToken):
            value = str(simulated_counter).zfill(fmt.counter_padding)
        resolutions.append(
            TokenResolution(
                token=name,
                token_type=None if token is None else token.token_type,
                value=value,
            )
        )
    return tuple(resolutions), tuple(problems)


def resolve_tokens(
    fmt: EntityDisplayFormat,
    sample_record: Mapping[str, Any],
    simulated_counter: int,
    *,
    lookup_resolver: Optional[LookupResolver] = None,
    sample_date: Optional[date] = None,
) -> tuple[TokenResolution, ...]:
    """
    Resolve every placeholder of the template, in template order, without
    failing on missing sample data. Unresolved tokens have available=False.
    """
    _check_counter(simulated_counter)
    resolutions, _ = _resolve_all(
        fmt, sample_record or {}, simulated_counter, lookup_resolver, sample_date
    )
    return resolutions


def preview(
    fmt: EntityDisplayFormat,
    sample_record: Mapping[str, Any],
    simulated_counter: int,
    *,
    lookup_resolver: Optional[LookupResolver] = None,
    sample_date: Optional[date] = None,
) -> str:
    """
    Render the display ID for `sample_record` using `simulated_counter`.

    Args:
        fmt: the (validated) display format
        sample_record: entity field values, e.g. {"location_id": "loc-1"}
        simulated_counter: the counter value to show (>= 1)
        lookup_resolver: resolves lookup tokens; required if any are used
        sample_date: overrides the record's date field

    Raises:
        PreviewError: listing every token that could not be resolved
    """
    _check_counter(simulated_counter)
    resolutions, problems = _resolve_all(
        fmt, sample_record or {}, simulated_counter, lookup_resolver, sample_date
    )
    if problems:
        raise PreviewError(problems, tokens=resolutions)
    return substitute_tokens(fmt.format, {r.token: r.value for r in resolutions})


def required_fields(fmt: EntityDisplayFormat) -> tuple[str, ...]:
    """Record fields the lookup tokens read, first-seen order, no repeats."""
    seen: dict[str, None] = {}
    for token in fmt.lookup_tokens():
        if token.source_field:
            seen.setdefault(token.source_field, None)
    return tuple(seen)


def can_generate(fmt: EntityDisplayFormat, record: Mapping[str, Any]) -> bool:
    """True when `record` has a value for every field in required_fields."""
    record = record or {}
    return all(
        record.get(name) is not None and record.get(name) != ""
        for name in required_fields(fmt)
    )


def counter_state_key(
    fmt: EntityDisplayFormat,
    sample_record: Mapping[str, Any],
    *,
    lookup_resolver: Optional[LookupResolver] = None,
    sample_date: Optional[date] = None,
) -> str:
    """
    Name the MaxCounterState slot a record would draw from: the period
    identifier, joined with the reset-group value when one is set.

    Read-only. Raises PreviewError when the date or group value cannot be
    resolved.
    """
    record = sample_record or {}
    problems: list[str] = []
    record_date = _record_date(fmt, record, sample_date)
    if record_date is None:
        problems.append(f"sample record has no date in '{fmt.date_field}'")

    group_value: Optional[str] = None
    group = fmt.counter_reset_policy.reset_group
    if group:
        name = normalize_token_name(group)
        lookup = next(
            (t for t in fmt.lookup_tokens() if normalize_token_name(t.token) == name),
            None,
        )
        if lookup is None:
            problems.append(f"reset group '{{{name}}}' is not a configured lookup token")
        else:
            group_value = _resolve_lookup(lookup, record, lookup_resolver, problems)

    if problems:
        raise PreviewError(tuple(problems))

    period = period_identifier(fmt.counter_reset_policy, record_date)
    if group_value is None:
        return period
    return f"{period}{COUNTER_KEY_SEPARATOR}{group_value}"

"""
Entity IDs - Display Format Serialization
===========================================
Maps between the stored `display_format` JSON document, the editor's
flat form values and the immutable EntityDisplayFormat model.

Stored shape (the contract with the issuance trigger):

    {
        "format": "AST-{LOCATION_CODE}-{DATE}-{COUNTER}",
        "date_field": "request_date",
        "counter_padding": 4,
        "token_config": [
            {"type": "lookup", "token": "LOCATION_CODE", "entity_field": "location_id",
             "lookup_schema": "identity", "lookup_table": "locations",
             "lookup_value_field": "short_code"},
            {"type": "date_part", "token": "DATE", "date_format": "YYYY"},
            {"type": "counter", "token": "COUNTER"}
        ],
        "counter_config": {"reset_period": "FINANCIAL_YEAR", "fy_start_month": 4,
                           "reset_group": "LOCATION_CODE"}
    }

Keys this module does not own are kept in `EntityDisplayFormat.extras`
and written back unchanged.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from entity_ids.display_format.errors import DisplayFormatParseError
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

OWNED_KEYS = frozenset(
    {"format", "date_field", "counter_padding", "token_config", "counter_config"}
)


# ---------------------------------------------------------------------------
# Scalar coercion helpers
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        return str(value)
    return value


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise DisplayFormatParseError(f"{field_name} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise DisplayFormatParseError(f"{field_name} must be an integer.")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = _text(value).strip()
    return text or None


# ---------------------------------------------------------------------------
# Token entries
# ---------------------------------------------------------------------------

def filter_token_entries(raw_entries: Optional[Iterable[Any]]) -> tuple[dict, ...]:
    """
    Drop token entries that lack a `token` or a `type`.

    Both validation and persistence go through this filter so a
    half-filled row in the editor never reaches storage unnoticed.
    """
    if not raw_entries:
        return ()
    kept = []
    for entry in raw_entries:
        if not isinstance(entry, Mapping):
            continue
        if entry.get("token") and entry.get("type"):
            kept.append(dict(entry))
    return tuple(kept)


def parse_token_entry(raw: Mapping[str, Any]) -> TokenConfig:
    token_type = raw.get("type")
    token = _text(raw.get("token"))
    if token_type == TOKEN_LOOKUP:
        return LookupToken(
            token=token,
            source_field=_text(raw.get("entity_field")),
            lookup_schema=_text(raw.get("lookup_schema")),
            lookup_table=_text(raw.get("lookup_table")),
            lookup_value_field=_text(raw.get("lookup_value_field")),
        )
    if token_type == TOKEN_DATE_PART:
        return DatePartToken(token=token, date_format=_text(raw.get("date_format")))
    if token_type == TOKEN_COUNTER:
        return CounterToken(token=token)
    raise DisplayFormatParseError(
        f"token type '{token_type}' is not valid. "
        f"Must be one of: {sorted(VALID_TOKEN_TYPES)}"
    )


def serialize_token(token: TokenConfig) -> dict[str, Any]:
    if isinstance(token, LookupToken):
        return {
            "type": TOKEN_LOOKUP,
            "token": token.token,
            "entity_field": token.source_field,
            "lookup_schema": token.lookup_schema,
            "lookup_table": token.lookup_table,
            "lookup_value_field": token.lookup_value_field,
        }
    if isinstance(token, DatePartToken):
        return {
            "type": TOKEN_DATE_PART,
            "token": token.token,
            "date_format": token.date_format,
        }
    if isinstance(token, CounterToken):
        return {"type": TOKEN_COUNTER, "token": token.token}
    raise TypeError(f"Unsupported token config: {type(token).__name__}")


def parse_tokens(raw_entries: Optional[Iterable[Any]]) -> tuple[TokenConfig, ...]:
    return tuple(parse_token_entry(entry) for entry in filter_token_entries(raw_entries))


# ---------------------------------------------------------------------------
# Counter reset policy
# ---------------------------------------------------------------------------

def _parse_reset_policy(raw: Any) -> CounterResetPolicy:
    if raw is None:
        return CounterResetPolicy()
    if not isinstance(raw, Mapping):
        raise DisplayFormatParseError("counter_config must be an object.")
    period = raw.get("reset_period") or PERIOD_CALENDAR_YEAR
    if period not in VALID_RESET_PERIODS:
        raise DisplayFormatParseError(
            f"reset_period '{period}' is not valid. "
            f"Must be one of: {sorted(VALID_RESET_PERIODS)}"
        )
    fy_start_month = None
    if period == PERIOD_FINANCIAL_YEAR:
        fy_start_month = _optional_int(raw.get("fy_start_month"), "fy_start_month")
    # Stored spelling is kept; validators compare normalized names.
    return CounterResetPolicy(
        period=period,
        fiscal_year_start_month=fy_start_month,
        reset_group=_text(raw.get("reset_group")) or None,
    )


def _serialize_reset_policy(policy: CounterResetPolicy) -> dict[str, Any]:
    payload: dict[str, Any] = {"reset_period": policy.period}
    if policy.period == PERIOD_FINANCIAL_YEAR and policy.fiscal_year_start_month is not None:
        payload["fy_start_month"] = policy.fiscal_year_start_month
    if policy.reset_group:
        payload["reset_group"] = policy.reset_group
    return payload


# ---------------------------------------------------------------------------
# Whole document
# ---------------------------------------------------------------------------

def parse_display_format(document: Optional[Mapping[str, Any]]) -> EntityDisplayFormat:
    """
    Read a stored display_format document.

    A missing or empty document yields the default (empty) format, which
    is how an entity type looks before it is first configured.
    """
    if document is None:
        return EntityDisplayFormat()
    if not isinstance(document, Mapping):
        raise DisplayFormatParseError("display_format must be an object.")

    raw_tokens = document.get("token_config")
    if raw_tokens is not None and not isinstance(raw_tokens, (list, tuple)):
        raise DisplayFormatParseError("token_config must be a list.")

    padding = _optional_int(document.get("counter_padding"), "counter_padding")
    return EntityDisplayFormat(
        format=_text(document.get("format")),
        date_field=_text(document.get("date_field")),
        counter_padding=padding or DEFAULT_COUNTER_PADDING,
        tokens=parse_tokens(raw_tokens),
        counter_reset_policy=_parse_reset_policy(document.get("counter_config")),
        extras={k: v for k, v in document.items() if k not in OWNED_KEYS},
    )


def serialize_display_format(fmt: EntityDisplayFormat) -> dict[str, Any]:
    document = dict(fmt.extras)
    document.update(
        {
            "format": fmt.format,
            "date_field": fmt.date_field,
            "counter_padding": fmt.counter_padding,
            "token_config": [serialize_token(t) for t in fmt.tokens],
            "counter_config": _serialize_reset_policy(fmt.counter_reset_policy),
        }
    )
    return document


# ---------------------------------------------------------------------------
# Editor form values
# ---------------------------------------------------------------------------

def build_display_format(
    values: Mapping[str, Any],
    *,
    extras: Optional[Mapping[str, Any]] = None,
) -> EntityDisplayFormat:
    """
    Build a candidate format from flat editor values.

    `fy_start_month` is kept only for FINANCIAL_YEAR and an empty
    `reset_group` means no grouping. Incomplete token rows are dropped
    by filter_token_entries. A missing padding becomes 0 so the
    validator reports it instead of a default hiding it.
    """
    period = values.get("reset_period") or PERIOD_CALENDAR_YEAR
    if period not in VALID_RESET_PERIODS:
        raise DisplayFormatParseError(
            f"reset_period '{period}' is not valid. "
            f"Must be one of: {sorted(VALID_RESET_PERIODS)}"
        )
    fy_start_month = None
    if period == PERIOD_FINANCIAL_YEAR:
        fy_start_month = _optional_int(values.get("fy_start_month"), "fy_start_month")

    raw_tokens = values.get("token_config")
    if raw_tokens is not None and not isinstance(raw_tokens, (list, tuple)):
        raise DisplayFormatParseError("token_config must be a list.")

    padding = _optional_int(values.get("counter_padding"), "counter_padding")
    return EntityDisplayFormat(
        format=_text(values.get("format")).strip(),
        date_field=_text(values.get("date_field")).strip(),
        counter_padding=0 if padding is None else padding,
        tokens=parse_tokens(raw_tokens),
        counter_reset_policy=CounterResetPolicy(
            period=period,
            fiscal_year_start_month=fy_start_month,
            reset_group=_optional_text(values.get("reset_group")),
        ),
        extras=dict(extras or {}),
    )


def to_form_values(fmt: EntityDisplayFormat) -> dict[str, Any]:
    """Flatten a format into the editor's field layout."""
    policy = fmt.counter_reset_policy
    return {
        "format": fmt.format,
        "date_field": fmt.date_field,
        "counter_padding": fmt.counter_padding,
        "token_config": [serialize_token(t) for t in fmt.tokens],
        "reset_period": policy.period,
        "fy_start_month": policy.fiscal_year_start_month,
        "reset_group": policy.reset_group,
    }

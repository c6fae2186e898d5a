"""
Entity IDs - Display Format Validation Tests
==============================================
Collect-all validation of tokens, reset policy and top-level fields.
"""

from __future__ import annotations

import logging

from entity_ids.display_format import (
    PERIOD_CALENDAR_YEAR,
    PERIOD_FINANCIAL_YEAR,
    CounterResetPolicy,
    CounterToken,
    DatePartToken,
    DuplicateTokenConfigError,
    EntityDisplayFormat,
    IncompleteTokenConfigError,
    InvalidDisplayFormatError,
    InvalidResetPolicyError,
    LookupToken,
    MissingTokenConfigError,
    validate_display_format,
    validate_reset_policy,
    validate_tokens,
)

LOCATION = LookupToken(
    token="LOCATION_CODE",
    source_field="location_id",
    lookup_schema="identity",
    lookup_table="locations",
    lookup_value_field="short_code",
)
DATE = DatePartToken(token="DATE", date_format="YYYY")
COUNTER = CounterToken(token="COUNTER")


class TestValidateTokens:
    def test_complete_configuration_is_valid(self):
        result = validate_tokens("AST-{LOCATION_CODE}-{DATE}-{COUNTER}", (LOCATION, DATE, COUNTER))
        assert result.ok
        assert result.errors == ()

    def test_every_missing_token_reported(self):
        result = validate_tokens("{A}-{B}-{C}", (CounterToken(token="A"),))
        missing = result.errors_of(MissingTokenConfigError)
        assert len(result.errors) == 2
        assert len(missing) == 2
        assert {e.token for e in missing} == {"B", "C"}

    def test_lookup_missing_table_is_incomplete(self):
        lookup = LookupToken(
            token="LOCATION_CODE",
            source_field="location_id",
            lookup_schema="identity",
            lookup_table="",
            lookup_value_field="short_code",
        )
        result = validate_tokens("{LOCATION_CODE}", (lookup,))
        incomplete = result.errors_of(IncompleteTokenConfigError)
        assert len(incomplete) == 1
        assert incomplete[0].fields == ("lookup_table",)

    def test_incomplete_lists_all_missing_fields_in_one_error(self):
        result = validate_tokens("{L}", (LookupToken(token="L"),))
        incomplete = result.errors_of(IncompleteTokenConfigError)
        assert len(incomplete) == 1
        assert incomplete[0].fields == (
            "entity_field",
            "lookup_schema",
            "lookup_table",
            "lookup_value_field",
        )

    def test_date_part_without_format_is_incomplete(self):
        result = validate_tokens("{DATE}", (DatePartToken(token="DATE", date_format=" "),))
        assert result.errors_of(IncompleteTokenConfigError)[0].fields == ("date_format",)

    def test_counter_needs_no_fields(self):
        assert validate_tokens("{COUNTER}", (COUNTER,)).ok

    def test_braced_token_names_match(self):
        result = validate_tokens("{LOCATION_CODE}", (LookupToken(
            token="{LOCATION_CODE}",
            source_field="location_id",
            lookup_schema="identity",
            lookup_table="locations",
            lookup_value_field="short_code",
        ),))
        assert result.ok

    def test_repeated_placeholder_needs_one_entry(self):
        assert validate_tokens("{A}-{A}", (CounterToken(token="A"),)).ok

    def test_duplicate_entries_reported(self):
        result = validate_tokens("{A}", (CounterToken(token="A"), CounterToken(token="{A}")))
        assert len(result.errors_of(DuplicateTokenConfigError)) == 1

    def test_unreferenced_token_warns_not_fails(self, caplog):
        with caplog.at_level(logging.WARNING, logger="entity_ids.display_format"):
            result = validate_tokens("{COUNTER}", (COUNTER, DATE))
        assert result.ok
        assert len(result.warnings) == 1
        assert "DATE" in result.warnings[0]
        assert "DATE" in caplog.text

    def test_issues_of_different_kinds_collected_together(self):
        result = validate_tokens("{A}-{L}-{D}", (LookupToken(token="L"), DatePartToken(token="D")))
        assert len(result.errors_of(MissingTokenConfigError)) == 1
        assert len(result.errors_of(IncompleteTokenConfigError)) == 2

    def test_blank_token_name_is_incomplete(self):
        result = validate_tokens("{COUNTER}", (COUNTER, CounterToken(token=" {} ")))
        incomplete = result.errors_of(IncompleteTokenConfigError)
        assert len(incomplete) == 1
        assert incomplete[0].fields == ("token",)
        assert not result.errors_of(DuplicateTokenConfigError)


class TestValidateResetPolicy:
    def test_calendar_year_without_month_is_valid(self):
        assert validate_reset_policy(CounterResetPolicy(period=PERIOD_CALENDAR_YEAR), ()).ok

    def test_financial_year_without_month_is_invalid(self):
        result = validate_reset_policy(CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR), ())
        assert not result.ok
        assert isinstance(result.errors[0], InvalidResetPolicyError)
        assert result.errors[0].fields == ("fy_start_month",)

    def test_month_thirteen_is_invalid(self):
        policy = CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR, fiscal_year_start_month=13)
        assert not validate_reset_policy(policy, ()).ok

    def test_month_zero_is_invalid(self):
        policy = CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR, fiscal_year_start_month=0)
        assert not validate_reset_policy(policy, ()).ok

    def test_financial_year_with_month_is_valid(self):
        policy = CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR, fiscal_year_start_month=4)
        assert validate_reset_policy(policy, ()).ok

    def test_calendar_year_with_month_is_invalid(self):
        policy = CounterResetPolicy(period=PERIOD_CALENDAR_YEAR, fiscal_year_start_month=4)
        result = validate_reset_policy(policy, ())
        assert len(result.errors_of(InvalidResetPolicyError)) == 1
        assert result.errors[0].fields == ("fy_start_month",)

    def test_reset_group_on_lookup_is_valid(self):
        policy = CounterResetPolicy(reset_group="LOCATION_CODE")
        assert validate_reset_policy(policy, (LOCATION, DATE, COUNTER)).ok

    def test_reset_group_braced_spelling_is_valid(self):
        policy = CounterResetPolicy(reset_group="{LOCATION_CODE}")
        assert validate_reset_policy(policy, (LOCATION,)).ok

    def test_reset_group_on_counter_is_invalid(self):
        policy = CounterResetPolicy(reset_group="COUNTER")
        result = validate_reset_policy(policy, (LOCATION, COUNTER))
        assert len(result.errors_of(InvalidResetPolicyError)) == 1
        assert "lookup" in result.errors[0].message

    def test_reset_group_on_date_part_is_invalid(self):
        policy = CounterResetPolicy(reset_group="DATE")
        assert not validate_reset_policy(policy, (DATE,)).ok

    def test_reset_group_on_unknown_token_is_invalid(self):
        policy = CounterResetPolicy(reset_group="REGION")
        result = validate_reset_policy(policy, (LOCATION,))
        assert result.errors[0].token == "REGION"

    def test_month_and_group_problems_reported_together(self):
        policy = CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR, reset_group="COUNTER")
        assert len(validate_reset_policy(policy, (COUNTER,)).errors) == 2


class TestValidateDisplayFormat:
    def test_valid_format(self):
        fmt = EntityDisplayFormat(
            format="AST-{LOCATION_CODE}-{DATE}-{COUNTER}",
            date_field="request_date",
            counter_padding=4,
            tokens=(LOCATION, DATE, COUNTER),
            counter_reset_policy=CounterResetPolicy(reset_group="LOCATION_CODE"),
        )
        assert validate_display_format(fmt).ok

    def test_top_level_problems(self):
        fmt = EntityDisplayFormat(format=" ", date_field="", counter_padding=0)
        result = validate_display_format(fmt)
        fields = sorted(e.fields[0] for e in result.errors_of(InvalidDisplayFormatError))
        assert fields == ["counter_padding", "date_field", "format"]

    def test_padding_above_editor_bound(self):
        fmt = EntityDisplayFormat(format="{C}", date_field="d", counter_padding=11, tokens=(CounterToken(token="C"),))
        assert not validate_display_format(fmt).ok

    def test_all_layers_collected(self):
        fmt = EntityDisplayFormat(
            format="{A}-{DATE}",
            date_field="",
            counter_padding=4,
            tokens=(DatePartToken(token="DATE"),),
            counter_reset_policy=CounterResetPolicy(period=PERIOD_FINANCIAL_YEAR),
        )
        result = validate_display_format(fmt)
        assert result.errors_of(InvalidDisplayFormatError)
        assert result.errors_of(MissingTokenConfigError)
        assert result.errors_of(IncompleteTokenConfigError)
        assert result.errors_of(InvalidResetPolicyError)
        assert "date tokens" in result.errors_of(InvalidDisplayFormatError)[0].message

    def test_result_serializes(self):
        result = validate_tokens("{A}", ())
        payload = result.to_dict()
        assert payload["ok"] is False
        assert payload["errors"][0]["code"] == "MISSING_TOKEN_CONFIG"
        assert payload["errors"][0]["token"] == "A"

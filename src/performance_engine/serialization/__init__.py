"""Serialization module: running-plan export, record dicts and form parsing."""

from performance_engine.serialization.forms import (
    estimate_from_form,
    parse_number,
    parse_profile,
    parse_run_test,
)
from performance_engine.serialization.records import record_from_dict, record_to_dict
from performance_engine.serialization.running_plan import (
    estimate_to_json_string,
    format_metric,
    to_running_plan,
    to_running_plan_fields,
)

__all__ = [
    "estimate_from_form",
    "estimate_to_json_string",
    "format_metric",
    "parse_number",
    "parse_profile",
    "parse_run_test",
    "record_from_dict",
    "record_to_dict",
    "to_running_plan",
    "to_running_plan_fields",
]

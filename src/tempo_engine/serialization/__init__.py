"""Serialization module — plan files in and out."""

from tempo_engine.serialization.plan_json import (
    from_plan_json,
    load_plan_file,
    loads_plan,
    save_plan_file,
    to_plan_json,
    to_plan_json_string,
)

__all__ = [
    "from_plan_json",
    "load_plan_file",
    "loads_plan",
    "save_plan_file",
    "to_plan_json",
    "to_plan_json_string",
]

"""
rules package for prtscan

This package contains the checks that decide whether a workflow declares the
pull_request_target trigger.
"""

from .triggers import (
    get_trigger_check,
    get_triggers,
    has_target_trigger,
    has_target_trigger_strict,
    load_workflow,
)

__all__ = [
    "get_trigger_check",
    "get_triggers",
    "has_target_trigger",
    "has_target_trigger_strict",
    "load_workflow",
]

"""
triggers.py - Workflow trigger detection

This module decides whether a workflow file declares the pull_request_target
trigger.

Two checks are available. The default check serializes the ``on`` field to
JSON and looks for the trigger name anywhere in it, so it handles every shape
GitHub accepts (a bare string, a list or a mapping of events) without
modelling the trigger grammar. It also matches names that merely contain
``pull_request_target``. The strict check only accepts the exact event name.
"""

from typing import Any, Callable, List

import yaml

from ..core.config import TARGET_TRIGGER
from ..core.errors import MalformedDocument
from ..utils.yaml_handler import get_element_at_path, load_yaml, to_json

TriggerCheck = Callable[[bytes], bool]


def load_workflow(content: bytes) -> Any:
    """
    Load raw workflow bytes

    Args:
        content: Raw file content

    Returns:
        The loaded document

    Raises:
        MalformedDocument: If the content is not a YAML document
    """
    try:
        return load_yaml(content)
    except yaml.YAMLError as e:
        raise MalformedDocument(str(e)) from e


def get_trigger_section(workflow: Any) -> Any:
    """Return the ``on`` field of a workflow, or None when it has none"""
    if not isinstance(workflow, dict):
        return None
    return get_element_at_path(workflow, ["on"])


def get_triggers(workflow: Any) -> List[str]:
    """
    Get the event names a workflow declares

    Args:
        workflow: Loaded workflow document

    Returns:
        Event names, in declaration order
    """
    on_section = get_trigger_section(workflow)

    if isinstance(on_section, str):
        return [on_section]
    if isinstance(on_section, list):
        return [trigger for trigger in on_section if isinstance(trigger, str)]
    if isinstance(on_section, dict):
        return [trigger for trigger in on_section if isinstance(trigger, str)]

    return []


def has_target_trigger(content: bytes, trigger: str = TARGET_TRIGGER) -> bool:
    """
    Check whether the trigger name appears in the workflow ``on`` field

    Args:
        content: Raw workflow file content
        trigger: Event name to look for

    Returns:
        True if the serialized ``on`` field contains the trigger name

    Raises:
        MalformedDocument: If the content is not a YAML document
    """
    on_section = get_trigger_section(load_workflow(content))
    if on_section is None:
        return False

    try:
        serialized = to_json(on_section)
    except (TypeError, ValueError) as e:
        raise MalformedDocument(f"Cannot serialize trigger declaration: {e}") from e

    return trigger in serialized


def has_target_trigger_strict(content: bytes, trigger: str = TARGET_TRIGGER) -> bool:
    """
    Check whether the workflow declares exactly the trigger event

    Args:
        content: Raw workflow file content
        trigger: Event name to look for

    Returns:
        True if the trigger is the ``on`` string, a list item or a mapping key

    Raises:
        MalformedDocument: If the content is not a YAML document
    """
    return trigger in get_triggers(load_workflow(content))


def get_trigger_check(strict: bool = False) -> TriggerCheck:
    """Select the trigger check used by a scan"""
    return has_target_trigger_strict if strict else has_target_trigger

"""
yaml_handler.py - Utilities for YAML processing

This module loads workflow documents the way GitHub reads them and exposes
small helpers for querying and serializing the resulting tree.
"""

import json
from typing import Any, Sequence, Union

import yaml


class WorkflowLoader(yaml.SafeLoader):
    """SafeLoader variant that keeps plain scalars such as ``on`` as strings"""


# PyYAML follows the YAML 1.1 specification which treats plain strings such
# as ``on``, ``off``, ``yes`` and ``no`` as booleans. In a workflow the key
# ``on`` declares the triggers, so with the default resolver it would come
# back as ``True`` and ``doc["on"]`` would miss it.
#
# Dropping the implicit boolean resolver gives YAML 1.2 style resolution for
# those words. Timestamps are left as strings too, which keeps every loaded
# document serializable to JSON.
_UNRESOLVED_TAGS = {"tag:yaml.org,2002:bool", "tag:yaml.org,2002:timestamp"}

for first_char, resolvers in list(WorkflowLoader.yaml_implicit_resolvers.items()):
    WorkflowLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp) for tag, regexp in resolvers if tag not in _UNRESOLVED_TAGS
    ]


def load_yaml(content: Union[bytes, str]) -> Any:
    """
    Load a single YAML document

    Args:
        content: YAML content as bytes or string

    Returns:
        The loaded document (None for an empty document)

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    return yaml.load(content, Loader=WorkflowLoader)


def to_json(obj: Any) -> str:
    """
    Serialize a loaded YAML value to its canonical JSON form

    Args:
        obj: Value produced by load_yaml

    Returns:
        JSON text

    Raises:
        TypeError: If the value holds something JSON cannot represent
        ValueError: If the value is circular (YAML anchors referencing themselves)
    """
    return json.dumps(obj, default=str)


def get_element_at_path(yaml_content: Any, path: Sequence[Union[str, int]]) -> Any:
    """
    Get element at a specific path in a YAML object

    Args:
        yaml_content: YAML content as a dictionary
        path: List of keys/indices in the path

    Returns:
        Value at the specified path, or None if not found
    """
    element = yaml_content

    for key in path:
        if isinstance(element, dict) and key in element:
            element = element[key]
        elif isinstance(element, list) and isinstance(key, int) and 0 <= key < len(element):
            element = element[key]
        else:
            return None

    return element


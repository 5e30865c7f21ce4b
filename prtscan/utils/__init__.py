"""
utils package for prtscan

File listing helpers live in utils.file_handler and are imported from there
directly.
"""

from .hashing import fingerprint
from .version import __version__, get_version, get_version_info
from .yaml_handler import get_element_at_path, load_yaml, to_json

__all__ = [
    "fingerprint",
    "__version__",
    "get_version",
    "get_version_info",
    "get_element_at_path",
    "load_yaml",
    "to_json",
]

"""
Namespace Naming
================

Bounded Context: Channel Naming Convention

Pure string transforms shared by channel names and event ids.

Wire convention (must stay bit-exact for consumers):
    channel  = "{Namespace}::{Suffix}"
    event_id = "{Namespace}::{Suffix}-{token}"

Example:
    >>> normalize("my_app")
    'MyApp'
    >>> channel_name("MyApp", "Debug")
    'MyApp::Debug'
"""

import re

CHANNEL_SEPARATOR = "::"

# Start of string or an underscore, plus exactly one following character.
# No MULTILINE: only the very beginning of the string is a boundary.
_BOUNDARY_PATTERN = re.compile(r"(_|^).")

_ANSI_PATTERN = re.compile(r"\x1b\[.*?m")


def normalize(value: str) -> str:
    """
    Normalize a namespace string.

    The character after each boundary (start of string, or "_") is
    uppercased and the underscore is dropped. Matching is left to right
    and non-overlapping, so "__" collapses to a single "_".

    Args:
        value: Raw namespace (e.g., "test_namespace")

    Returns:
        Normalized namespace (e.g., "TestNamespace")

    Example:
        >>> normalize("test__thing")
        'Test_thing'
        >>> normalize("Test-_thing")
        'Test-Thing'
    """
    return _BOUNDARY_PATTERN.sub(lambda match: match.group(0)[-1].upper(), value)


def channel_name(namespace: str, suffix: str) -> str:
    """Join a namespace and a suffix into a channel name."""
    return f"{namespace}{CHANNEL_SEPARATOR}{suffix}"


def strip_ansi(text: str) -> str:
    """Remove ANSI color escape sequences (ESC [ ... m) from text."""
    return _ANSI_PATTERN.sub("", text)

##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Utility functions for backends in the IPC-KeyVal application.

These utilities convert values to and from the JSON text stored in the value
column, and translate glob-style key filters into the regular expressions the
database evaluates with its `REGEXP` operator.
"""

import json
import logging
from typing import Any

from ipc_keyval.exceptions import SerializationError


LOG = logging.getLogger(__name__)

# Everything a regular expression treats specially, except "*" which is the glob wildcard
REGEX_METACHARACTERS = frozenset("\\.^$+?{}[]()|")


def serialize_value(value: Any) -> str:
    """
    Encode a value into its canonical JSON text form.

    Object keys are sorted so that equal structures always produce the same text.

    Args:
        value: Any JSON-serializable value (dict, list, str, int, float, bool, None).

    Returns:
        The JSON text to store in the value column.

    Raises:
        SerializationError: If the value can't be represented as JSON.
    """
    try:
        return json.dumps(value, sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Value of type '{type(value).__name__}' can't be serialized: {exc}") from exc


def deserialize_value(text: str) -> Any:
    """
    Decode JSON text read from the value column.

    Args:
        text: The stored JSON text.

    Returns:
        The decoded structural value.

    Raises:
        SerializationError: If the stored text is not valid JSON.
    """
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        LOG.error(f"Failed to deserialize stored value: {text!r}")
        raise SerializationError(f"Stored value is not valid JSON: {exc}") from exc


def glob_to_regex(pattern: str) -> str:
    """
    Translate a glob-style key filter into an anchored regular expression.

    Every "*" matches one or more arbitrary characters; every other character
    matches itself, with regex metacharacters escaped.

    Args:
        pattern: The glob pattern, e.g. "worker-*".

    Returns:
        A regular expression matching whole keys, e.g. "^worker-.+$".
    """
    translated = []
    for char in pattern:
        if char == "*":
            translated.append(".+")
        elif char in REGEX_METACHARACTERS:
            translated.append("\\" + char)
        else:
            translated.append(char)
    return "^" + "".join(translated) + "$"


def regex_literal(regex: str, backslash_escapes: bool = False) -> str:
    """
    Quote a regular expression as an SQL string literal.

    Args:
        regex: The regular expression to embed into a statement.
        backslash_escapes: True if the dialect treats backslashes inside string
            literals as escape characters (MySQL does, SQLite does not).

    Returns:
        The quoted literal, including the surrounding single quotes.
    """
    if backslash_escapes:
        regex = regex.replace("\\", "\\\\")
    return "'" + regex.replace("'", "''") + "'"

"""
Helper functions for parsing request input.

Both chat membership lookups receive lists of user ids through the query
string, in two different encodings:

    ?users=[1,2,3]          JSON array (strict, malformed input is an error)
    ?member_ids=1,2,3       comma separated (lenient, junk tokens are dropped)

Single ids (?channel_id=, ?user_id=, URL pks) go through parse_id.

Ids must fit a signed 64-bit database column.

Usage:
    from core.helpers import parse_id, parse_id_list, parse_json_id_list

    parse_id("42")                 # 42
    parse_id("²")                  # None
    parse_id_list("1, 2,x,-3,2")   # [1, 2]
    parse_json_id_list("[3, 1]")   # [3, 1]
"""

from __future__ import annotations

import json

MAX_ID = 2**63 - 1
MIN_ID = -(2**63)


def parse_id(raw) -> int | None:
    """
    Parse a single non-negative integer id.

    Only ASCII digits are accepted; str.isdigit() alone also matches
    characters such as "²" that int() rejects.

    Returns:
        The id, or None if raw is not a non-negative integer within MAX_ID
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw if 0 <= raw <= MAX_ID else None
    if not isinstance(raw, str):
        return None

    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    if value > MAX_ID:
        return None
    return value


def parse_id_list(raw: str | None) -> list[int]:
    """
    Parse a comma-separated list of ids.

    Tokens that are not non-negative integers (or exceed MAX_ID) are
    ignored. Duplicates are removed while keeping the first-seen order.

    Args:
        raw: Raw query string value (may be None or empty)

    Returns:
        List of unique non-negative integer ids
    """
    if not raw:
        return []

    ids: list[int] = []
    for token in raw.split(","):
        value = parse_id(token)
        if value is None:
            continue
        if value not in ids:
            ids.append(value)
    return ids


def parse_json_id_list(raw: str | None) -> list[int]:
    """
    Parse a JSON array of integer ids.

    Args:
        raw: Raw query string value, e.g. "[1, 2]"

    Returns:
        List of unique integer ids in first-seen order

    Raises:
        ValueError: If the value is missing, not valid JSON, not an array,
            or contains anything other than 64-bit integers
    """
    if raw is None:
        raise ValueError("A JSON array of ids is required")

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc.msg}") from exc

    if not isinstance(parsed, list):
        raise ValueError("Expected a JSON array of ids")

    ids: list[int] = []
    for value in parsed:
        # bool is a subclass of int, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Invalid id: {value!r}")
        if not MIN_ID <= value <= MAX_ID:
            raise ValueError(f"Id out of range: {value}")
        if value not in ids:
            ids.append(value)
    return ids

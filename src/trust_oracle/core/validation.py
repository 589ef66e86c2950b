"""Shape checks for decoded oracle responses.

The oracle is an untrusted boundary. Each response type has a rule table;
a response that breaks any rule is rejected whole, never repaired.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ResponseValidationError
from .models import MAX_HOPS, is_identity

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


def _is_int(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass.
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_hops(value: Any) -> bool:
    """None, or an integer in [0, 100]."""
    return value is None or (_is_int(value) and 0 <= value <= MAX_HOPS)


def is_valid_paths(value: Any) -> bool:
    """None, or a non-negative integer."""
    return value is None or (_is_int(value) and value >= 0)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _is_list_or_none(value: Any) -> bool:
    return value is None or isinstance(value, list)


@dataclass(frozen=True)
class FieldRule:
    """One field of an object response.

    ``check`` applies to the field value, ``each`` (if set) to every element
    of a list value. A field absent from the response reads as None unless
    ``required`` is set.
    """

    field: str
    check: Predicate
    message: str
    each: Optional[Predicate] = None
    required: bool = False


@dataclass(frozen=True)
class MappingRule:
    """Every key and value of an object response."""

    key: Predicate
    value: Predicate
    key_message: str
    value_message: str


DISTANCE_RULES: tuple[FieldRule, ...] = (
    FieldRule("hops", is_valid_hops, "Invalid hops in distance response"),
    FieldRule("paths", is_valid_paths, "Invalid paths in distance response"),
)

BATCH_RULE = MappingRule(
    key=is_identity,
    value=is_valid_hops,
    key_message="Invalid pubkey in batch response",
    value_message="Invalid hops in batch response",
)

FOLLOWS_RULES: tuple[FieldRule, ...] = (
    FieldRule("follows", _is_list, "Invalid follows response", each=is_identity, required=True),
)

COMMON_FOLLOWS_RULES: tuple[FieldRule, ...] = (
    FieldRule("common", _is_list, "Invalid common-follows response", each=is_identity, required=True),
)

PATH_RULES: tuple[FieldRule, ...] = (
    FieldRule("path", _is_list_or_none, "Invalid path response", each=is_identity),
)


def _reject(field: str, value: Any, message: str) -> None:
    logger.warning("Rejected oracle response: %s (%s=%r)", message, field, value)
    raise ResponseValidationError(field, value, message)


def _require_object(data: Any, message: str) -> None:
    if not isinstance(data, dict):
        _reject("<response>", data, f"{message}: expected a JSON object")


def check_fields(data: Any, rules: tuple[FieldRule, ...], message: str) -> dict:
    """Apply a field rule table to an object response and return it unchanged."""
    _require_object(data, message)
    for rule in rules:
        if rule.required and rule.field not in data:
            _reject(rule.field, None, f"{rule.message}: missing field")
        value = data.get(rule.field)
        if not rule.check(value):
            _reject(rule.field, value, rule.message)
        if rule.each is not None and value is not None:
            for index, item in enumerate(value):
                if not rule.each(item):
                    _reject(f"{rule.field}[{index}]", item, rule.message)
    return data


def check_mapping(data: Any, rule: MappingRule, message: str) -> dict:
    """Apply a mapping rule to every entry of an object response and return it unchanged."""
    _require_object(data, message)
    for key, value in data.items():
        if not rule.key(key):
            _reject(str(key), key, rule.key_message)
        if not rule.value(value):
            _reject(str(key), value, rule.value_message)
    return data


def validate_distance_info(data: Any) -> dict:
    return check_fields(data, DISTANCE_RULES, "Invalid distance response")


def validate_batch(data: Any) -> dict:
    return check_mapping(data, BATCH_RULE, "Invalid batch response")


def validate_follows(data: Any) -> dict:
    return check_fields(data, FOLLOWS_RULES, "Invalid follows response")


def validate_common_follows(data: Any) -> dict:
    return check_fields(data, COMMON_FOLLOWS_RULES, "Invalid common-follows response")


def validate_path(data: Any) -> dict:
    return check_fields(data, PATH_RULES, "Invalid path response")

"""Compile an entity's attribute settings into validation rules.

Compilation is lenient: settings that are missing or do not fit fall back to
their defaults (string type, max size 150, not required) instead of failing.
"""

from typing import Any, Mapping

from entityschema.models.attribute import DEFAULT_MAX_SIZE, AttributeSpec
from entityschema.models.enums import AttributeType
from entityschema.models.rules import ValidationRuleSet

AttributeSettings = AttributeSpec | Mapping[str, Any]


def compile_rules(attributes: Mapping[str, AttributeSettings]) -> ValidationRuleSet:
    """Group attribute names by the validations they need.

    Args:
        attributes: Attribute name to settings, in declaration order. Settings
            may be AttributeSpec instances or raw configuration mappings.

    Returns:
        ValidationRuleSet with required, integer and per-length groups, and
        every attribute name marked safe for search.
    """
    required: list[str] = []
    integers: list[str] = []
    length_buckets: dict[int, list[str]] = {}

    for name, settings in attributes.items():
        spec = resolve_attribute(settings)
        if spec.required:
            required.append(name)
        if spec.type is AttributeType.INTEGER:
            integers.append(name)
        elif spec.type is AttributeType.STRING:
            length_buckets.setdefault(spec.max_size, []).append(name)

    return ValidationRuleSet(
        required_names=required,
        integer_names=integers,
        length_buckets=length_buckets,
        search_safe_names=list(attributes),
    )


def resolve_attribute(settings: Any) -> AttributeSpec:
    """Apply attribute defaults to raw settings, ignoring values that do not fit."""
    if isinstance(settings, AttributeSpec):
        return settings
    if not isinstance(settings, Mapping):
        return AttributeSpec()
    return AttributeSpec(
        type=_resolve_type(settings.get("type")),
        max_size=_resolve_max_size(settings.get("max_size", settings.get("maxSize"))),
        required=settings.get("required") is True,
    )


def _resolve_type(value: Any) -> AttributeType:
    if isinstance(value, AttributeType):
        return value
    if isinstance(value, str):
        try:
            return AttributeType(value.strip().lower())
        except ValueError:
            pass
    return AttributeType.STRING


def _resolve_max_size(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_MAX_SIZE

"""Build search criteria from filter values keyed by attribute name.

Only the entity's declared attributes are considered, in declaration order;
other keys in the filter values are ignored. Empty values (None or "") do not
constrain the search.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping

from entityschema.errors import SearchValueError
from entityschema.models.entity import EntityMetadata
from entityschema.models.enums import AttributeType
from entityschema.models.search import SearchCondition, SearchCriteria, SearchValue

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def compile_search_criteria(entity: EntityMetadata, values: Mapping[str, Any]) -> SearchCriteria:
    """Turn filter values into typed equality conditions.

    Args:
        entity: Entity whose attributes may be filtered on.
        values: Filter values keyed by attribute name.

    Returns:
        SearchCriteria with one condition per non-empty attribute value.

    Raises:
        SearchValueError: If a value cannot be converted to its attribute's type.
    """
    conditions: list[SearchCondition] = []
    for name, attribute in entity.attributes.items():
        value = values.get(name)
        if value is None or (isinstance(value, str) and value == ""):
            continue
        comparator = _COMPARATORS[attribute.type]
        try:
            coerced = comparator(value)
        except (TypeError, ValueError, InvalidOperation) as e:
            raise SearchValueError(name, value) from e
        conditions.append(SearchCondition(attribute=name, value=coerced))
    return SearchCriteria(conditions=conditions)


def _to_text(value: Any) -> str:
    if isinstance(value, (bool, bytes)):
        raise TypeError("expected a text value")
    return str(value)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("expected a whole number")
    if isinstance(value, str):
        value = value.strip()
    return int(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError("expected a boolean value")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("booleans are not decimals")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip())


_COMPARATORS: dict[AttributeType, Callable[[Any], SearchValue]] = {
    AttributeType.STRING: _to_text,
    AttributeType.TEXT: _to_text,
    AttributeType.INTEGER: _to_int,
    AttributeType.BOOLEAN: _to_bool,
    AttributeType.DECIMAL: _to_decimal,
}

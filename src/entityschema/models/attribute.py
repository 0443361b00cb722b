from pydantic import Field

from entityschema.models.base import SpecModel
from entityschema.models.enums import AttributeType

DEFAULT_MAX_SIZE = 150


class AttributeSpec(SpecModel):
    """Type and constraints of a single entity attribute.

    ``max_size`` only matters for string attributes; other types ignore it.
    """

    type: AttributeType = AttributeType.STRING
    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0, alias="maxSize")
    required: bool = False


__all__ = ["AttributeSpec", "DEFAULT_MAX_SIZE"]

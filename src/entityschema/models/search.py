from decimal import Decimal

from pydantic import Field
from sqlalchemy import and_, true
from sqlalchemy.sql.expression import ColumnElement, TableClause

from entityschema.models.base import SpecModel

SearchValue = bool | int | Decimal | str


class SearchCondition(SpecModel):
    attribute: str
    value: SearchValue


class SearchCriteria(SpecModel):
    """Equality filters over an entity's attributes, in declaration order."""

    conditions: list[SearchCondition] = Field(default_factory=list)

    def has_conditions(self) -> bool:
        return bool(self.conditions)

    def where_clause(self, table: TableClause) -> ColumnElement[bool]:
        """Combine the conditions into one SQLAlchemy filter for ``table``."""
        if not self.conditions:
            return true()
        return and_(*(table.c[condition.attribute] == condition.value for condition in self.conditions))


__all__ = ["SearchCondition", "SearchCriteria", "SearchValue"]

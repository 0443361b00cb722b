from entityschema.models.attribute import AttributeSpec
from entityschema.models.descriptor import JoinCondition, RelationDescriptor
from entityschema.models.entity import EntityMetadata
from entityschema.models.enums import AttributeType, RelationKind, RuleKind
from entityschema.models.relation import BelongsTo, HasMany, HasOne, JoinThrough
from entityschema.models.rules import ValidationRule, ValidationRuleSet
from entityschema.models.search import SearchCondition, SearchCriteria
from entityschema.models.table import ForeignKeyReference, TableColumn, TableDefinition

__all__ = [
    "AttributeSpec",
    "AttributeType",
    "BelongsTo",
    "EntityMetadata",
    "ForeignKeyReference",
    "HasMany",
    "HasOne",
    "JoinCondition",
    "JoinThrough",
    "RelationDescriptor",
    "RelationKind",
    "RuleKind",
    "SearchCondition",
    "SearchCriteria",
    "TableColumn",
    "TableDefinition",
    "ValidationRule",
    "ValidationRuleSet",
]

from entityschema.models.attribute import AttributeSpec
from entityschema.models.base import SpecModel, foreign_key_column
from entityschema.models.entity import EntityMetadata
from entityschema.models.enums import AttributeType

UID_LENGTH = 36


class TableColumn(SpecModel):
    name: str
    attribute: AttributeSpec
    primary_key: bool = False


class ForeignKeyReference(SpecModel):
    """A foreign key from one column of an entity table to another table."""

    constraint_name: str
    table_name: str
    column: str
    ref_table: str
    ref_column: str = "id"


class TableDefinition(SpecModel):
    """Ordered column layout of an entity's table."""

    table_name: str
    columns: list[TableColumn]

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    @classmethod
    def for_entity(cls, entity: EntityMetadata) -> "TableDefinition":
        """Build the table layout for an entity.

        Columns are the primary key, one integer key column per belongs-to
        relation, the entity's attributes, then the audit columns.
        """
        columns = [
            TableColumn(
                name="id",
                attribute=AttributeSpec(type=AttributeType.INTEGER, required=True),
                primary_key=True,
            )
        ]
        for name, relation in entity.belongs_to.items():
            columns.append(
                TableColumn(
                    name=foreign_key_column(name),
                    attribute=AttributeSpec(type=AttributeType.INTEGER, required=relation.required),
                )
            )
        for name, attribute in entity.attributes.items():
            columns.append(TableColumn(name=name, attribute=attribute))
        columns.extend(_audit_columns())
        return cls(table_name=entity.table_name, columns=columns)


def _audit_columns() -> list[TableColumn]:
    timestamp = AttributeSpec(type=AttributeType.INTEGER, required=True)
    return [
        TableColumn(name="date_created", attribute=timestamp),
        TableColumn(name="date_updated", attribute=timestamp),
        TableColumn(
            name="uid",
            attribute=AttributeSpec(type=AttributeType.STRING, max_size=UID_LENGTH, required=True),
        ),
    ]


__all__ = ["ForeignKeyReference", "TableColumn", "TableDefinition", "UID_LENGTH"]

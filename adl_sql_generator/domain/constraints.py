"""
Constraint domain logic for the ADL SQL generator.

Turns DbTable annotation directives and detected foreign keys into named
constraint objects. The SQL text itself is laid out by the schema template.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from adl_sql_generator.constants import SchemaLayout
from adl_sql_generator.domain.annotations import DbTableAnnotation
from adl_sql_generator.domain.models import Field, ForeignKeyRef
from adl_sql_generator.domain.naming import find_column_name


logger = logging.getLogger(__name__)


@dataclass
class ForeignKeyConstraint:
    """alter table ... add constraint <table>_<column>_fk foreign key ..."""

    table: str
    column: str
    target_table: str
    target_column: str

    @property
    def name(self) -> str:
        return f"{self.table}_{self.column}{SchemaLayout.FOREIGN_KEY_SUFFIX}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'table': self.table,
            'column': self.column,
            'target_table': self.target_table,
            'target_column': self.target_column,
        }


@dataclass
class IndexInfo:
    """create index <table>_<ordinal>_idx on <table>(...)"""

    table: str
    ordinal: int
    columns: List[str]

    @property
    def name(self) -> str:
        return f"{self.table}_{self.ordinal}{SchemaLayout.INDEX_SUFFIX}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {'name': self.name, 'table': self.table, 'columns': self.columns}


@dataclass
class UniqueConstraint:
    """alter table ... add constraint <table>_<ordinal>_con unique (...)"""

    table: str
    ordinal: int
    columns: List[str]

    @property
    def name(self) -> str:
        return f"{self.table}_{self.ordinal}{SchemaLayout.UNIQUE_SUFFIX}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {'name': self.name, 'table': self.table, 'columns': self.columns}


class ConstraintAnalyzer:
    """
    Builds the constraints of one table from its DbTable annotation.

    Column names in the annotation are ADL field names; they are translated
    to SQL column names through the struct's fields.
    """

    def __init__(self, table_name: str, fields: Sequence[Field], annotation: DbTableAnnotation):
        self.table_name = table_name
        self.fields = fields
        self.annotation = annotation

    def _columns(self, names: Sequence[str]) -> List[str]:
        return [find_column_name(self.fields, n) for n in names]

    def primary_key_columns(self) -> List[str]:
        """
        Columns of the primary key, in order.

        The synthetic id wins when both it and an explicit key are requested.
        """
        if self.annotation.with_id_primary_key:
            if self.annotation.with_primary_key:
                logger.warning(
                    f"Table {self.table_name} requests both withIdPrimaryKey and withPrimaryKey; "
                    "using the synthetic id"
                )
            return [SchemaLayout.SYNTHETIC_ID_COLUMN]
        return self._columns(self.annotation.with_primary_key)

    def indexes(self) -> List[IndexInfo]:
        return [
            IndexInfo(table=self.table_name, ordinal=i, columns=self._columns(cols))
            for i, cols in enumerate(self.annotation.indexes, start=1)
        ]

    def uniqueness_constraints(self) -> List[UniqueConstraint]:
        return [
            UniqueConstraint(table=self.table_name, ordinal=i, columns=self._columns(cols))
            for i, cols in enumerate(self.annotation.uniqueness_constraints, start=1)
        ]

    def foreign_key(self, column_name: str, fkey: ForeignKeyRef) -> ForeignKeyConstraint:
        return ForeignKeyConstraint(
            table=self.table_name,
            column=column_name,
            target_table=fkey.table,
            target_column=fkey.column,
        )

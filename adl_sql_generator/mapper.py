"""
Builds the intermediate table representation from a loaded ADL graph.

Every struct carrying a DbTable annotation becomes one TableSchema. Tables
are ordered by SQL name so the generated file does not depend on the order
declarations appear in the source modules.

Example:
    >>> resolver = DeclResolver(modules)
    >>> tables = build_table_schemas(resolver, POSTGRES)
    >>> [t.name for t in tables]
    ['address', 'person']
"""

import logging
from dataclasses import dataclass
from typing import List

from adl_sql_generator.constants import SchemaLayout
from adl_sql_generator.domain.annotations import DbTableAnnotation, get_table_annotation
from adl_sql_generator.domain.constraints import ConstraintAnalyzer
from adl_sql_generator.domain.dialects import DialectProfile
from adl_sql_generator.domain.field_mapping import ColumnMapper
from adl_sql_generator.domain.models import ColumnLine, ScopedDecl, Struct, TableSchema
from adl_sql_generator.domain.naming import get_column_name, get_table_name
from adl_sql_generator.domain.resolver import DeclResolver
from adl_sql_generator.domain.type_exprs import type_expr_to_string


logger = logging.getLogger(__name__)


@dataclass
class DbTableDecl:
    """A struct declaration selected for table generation."""

    scoped_decl: ScopedDecl
    struct: Struct
    annotation: DbTableAnnotation
    name: str


def find_db_tables(resolver: DeclResolver) -> List[DbTableDecl]:
    """
    Find all struct declarations that have a DbTable annotation.

    Returns:
        The selected declarations sorted by table name
    """
    db_tables: List[DbTableDecl] = []
    for scoped_decl in resolver.scoped_decls():
        decl = scoped_decl.decl
        ann = get_table_annotation(decl)
        if ann is None:
            continue
        if not isinstance(decl.type_, Struct):
            logger.warning(f"Ignoring DbTable annotation on {decl.kind} {scoped_decl.scoped_name}")
            continue
        db_tables.append(
            DbTableDecl(
                scoped_decl=scoped_decl,
                struct=decl.type_,
                annotation=ann,
                name=get_table_name(decl),
            )
        )
    db_tables.sort(key=lambda t: t.name)
    return db_tables


def build_table_schema(table: DbTableDecl, mapper: ColumnMapper) -> TableSchema:
    """Map one table declaration to its column lines and constraints."""
    fields = table.struct.fields
    analyzer = ConstraintAnalyzer(table.name, fields, table.annotation)
    schema = TableSchema(
        name=table.name,
        module_name=table.scoped_decl.module_name,
        decl_name=table.scoped_decl.decl.name,
    )

    column_names = [get_column_name(f) for f in fields]
    id_column = f"{SchemaLayout.SYNTHETIC_ID_COLUMN} {mapper.profile.id_column_type} not null"
    # A field mapping to the id column takes the place of the synthetic one
    field_is_id = (
        table.annotation.with_id_primary_key
        and SchemaLayout.SYNTHETIC_ID_COLUMN in column_names
    )
    if field_is_id:
        logger.debug(f"Table {table.name} declares its own id column, using it as the primary key")
    elif table.annotation.with_id_primary_key:
        schema.lines.append(ColumnLine(code=id_column))

    for f, column_name in zip(fields, column_names):
        column = mapper.column_spec(f.type_expr)
        code = f"{column_name} {column.sql_type}"
        if field_is_id and column_name == SchemaLayout.SYNTHETIC_ID_COLUMN:
            code = id_column
        schema.lines.append(
            ColumnLine(
                code=code,
                comment=type_expr_to_string(f.type_expr, qualify=True),
            )
        )
        if column.foreign_key:
            schema.foreign_keys.append(analyzer.foreign_key(column_name, column.foreign_key))

    schema.primary_key_columns = analyzer.primary_key_columns()
    if schema.primary_key_columns:
        schema.lines.append(ColumnLine(code=f"primary key({','.join(schema.primary_key_columns)})"))

    schema.indexes = analyzer.indexes()
    schema.uniqueness_constraints = analyzer.uniqueness_constraints()
    schema.extra_sql = list(table.annotation.extra_sql)
    return schema


def build_table_schemas(resolver: DeclResolver, profile: DialectProfile) -> List[TableSchema]:
    """
    Build the table representation for every DbTable struct in the graph.

    Any fatal mapping error propagates; no partial result is returned.
    """
    mapper = ColumnMapper(resolver, profile)
    tables = []
    for table in find_db_tables(resolver):
        logger.debug(f"Mapping {table.scoped_decl.scoped_name} to table {table.name}")
        schema = build_table_schema(table, mapper)
        logger.debug(f"Table {schema.name}: {schema.to_dict()}")
        tables.append(schema)
    logger.info(f"Mapped {len(tables)} table(s) using the {profile.name} dialect")
    return tables

"""
Domain module for the ADL SQL generator.

This module contains the declaration model, the type expression decoder and
expander, the column mapper and the dialect profiles. None of it touches the
filesystem; loading and file emission live in the outer modules.
"""

from .models import (
    ScopedName,
    TypeExpr,
    PrimitiveRef,
    TypeParamRef,
    ReferenceRef,
    Field,
    Struct,
    Union,
    Newtype,
    TypeAlias,
    Declaration,
    ScopedDecl,
    Module,
    ColumnSpec,
    ForeignKeyRef,
    ColumnLine,
    TableSchema,
)

from .resolver import DeclResolver

from .type_exprs import (
    DecodedPrimitive,
    DecodedNullable,
    DecodedReference,
    decode_type_expr,
    expand_type_alias,
    expand_newtype,
    expand_type_expr,
    type_expr_to_string,
)

from .dialects import (
    DialectProfile,
    POSTGRES,
    POSTGRES_V2,
    MSSQL,
    DIALECTS,
    get_dialect,
)

from .field_mapping import ColumnMapper

from .annotations import DbTableAnnotation

from .naming import (
    to_snake_case,
    get_table_name,
    get_column_name,
)

__all__ = [
    # Core models
    'ScopedName',
    'TypeExpr',
    'PrimitiveRef',
    'TypeParamRef',
    'ReferenceRef',
    'Field',
    'Struct',
    'Union',
    'Newtype',
    'TypeAlias',
    'Declaration',
    'ScopedDecl',
    'Module',
    'ColumnSpec',
    'ForeignKeyRef',
    'ColumnLine',
    'TableSchema',

    # Resolution and decoding
    'DeclResolver',
    'DecodedPrimitive',
    'DecodedNullable',
    'DecodedReference',
    'decode_type_expr',
    'expand_type_alias',
    'expand_newtype',
    'expand_type_expr',
    'type_expr_to_string',

    # Dialects
    'DialectProfile',
    'POSTGRES',
    'POSTGRES_V2',
    'MSSQL',
    'DIALECTS',
    'get_dialect',

    # Mapping
    'ColumnMapper',
    'DbTableAnnotation',

    # Naming
    'to_snake_case',
    'get_table_name',
    'get_column_name',
]

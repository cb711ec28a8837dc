"""
Standard ADL declarations the generator depends on.

When the sys.types, common or common.db modules are not part of the loaded
input these definitions stand in for them, so a schema can reference Maybe,
DbKey and the temporal types without shipping the standard library.
"""

from typing import Dict

from adl_sql_generator.constants import Primitives
from adl_sql_generator.domain.models import (
    Declaration,
    Field,
    Module,
    Newtype,
    Struct,
    TypeAlias,
    TypeExpr,
    Union,
)

_STRING = TypeExpr.primitive(Primitives.STRING)
_BOOL = TypeExpr.primitive(Primitives.BOOL)
_STRINGS = TypeExpr.primitive(Primitives.VECTOR, _STRING)


def _sys_types() -> Module:
    maybe = Declaration(
        name="Maybe",
        type_=Union(
            type_params=("T",),
            fields=(
                Field("nothing", TypeExpr.primitive(Primitives.VOID)),
                Field("just", TypeExpr.type_param("T")),
            ),
        ),
    )
    return Module(name="sys.types", decls={maybe.name: maybe})


def _common() -> Module:
    decls = [
        Declaration("Instant", Newtype((), TypeExpr.primitive(Primitives.INT64))),
        Declaration("LocalDate", Newtype((), _STRING)),
        Declaration("LocalDateTime", Newtype((), _STRING)),
    ]
    return Module(name="common", decls={d.name: d for d in decls})


def _common_db() -> Module:
    db_table = Declaration(
        name="DbTable",
        type_=Struct(
            type_params=(),
            fields=(
                Field("tableName", _STRING),
                Field("withIdPrimaryKey", _BOOL),
                Field("withPrimaryKey", _STRINGS),
                Field("indexes", TypeExpr.primitive(Primitives.VECTOR, _STRINGS)),
                Field("uniquenessConstraints", TypeExpr.primitive(Primitives.VECTOR, _STRINGS)),
                Field("extraSql", _STRINGS),
            ),
        ),
    )
    decls = [
        Declaration("DbKey", Newtype(("T",), _STRING)),
        db_table,
        Declaration("DbColumnName", TypeAlias((), _STRING)),
    ]
    return Module(name="common.db", decls={d.name: d for d in decls})


def prelude_modules() -> Dict[str, Module]:
    """Fresh copies of the standard modules, keyed by module name."""
    modules = [_sys_types(), _common(), _common_db()]
    return {m.name: m for m in modules}

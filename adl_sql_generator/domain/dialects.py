"""
Dialect profiles: target-specific column type spellings.

A profile is plain data. Every dialect is an instance of the same
DialectProfile schema; nothing is inherited between them.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping

from adl_sql_generator.constants import Primitives, SupportedDialects
from adl_sql_generator.exceptions import ConfigurationError


@dataclass(frozen=True)
class DialectProfile:
    """Column type spellings for one SQL dialect."""

    name: str
    id_column_type: str
    enum_column_type: str
    default_column_type: str
    primitive_column_types: Mapping[str, str] = field(default_factory=dict)
    timestamp_column_type: str = "timestamp"
    date_column_type: str = "date"
    local_timestamp_column_type: str = "timestamp"

    def prim_column_type(self, kind: str) -> str:
        """
        Look up the column type for a primitive kind tag.

        Unknown kinds (Void, Vector, StringMap, references to structs)
        degrade to the opaque default rather than failing.
        """
        return self.primitive_column_types.get(kind, self.default_column_type)


_POSTGRES_TYPES: Dict[str, str] = {
    Primitives.STRING: "text",
    Primitives.BOOL: "boolean",
    Primitives.JSON: "json",
    Primitives.INT8: "smallint",
    Primitives.INT16: "smallint",
    Primitives.INT32: "integer",
    Primitives.INT64: "bigint",
    Primitives.WORD8: "smallint",
    Primitives.WORD16: "smallint",
    Primitives.WORD32: "integer",
    Primitives.WORD64: "bigint",
    Primitives.FLOAT: "real",
    Primitives.DOUBLE: "double precision",
}

POSTGRES = DialectProfile(
    name=SupportedDialects.POSTGRES,
    id_column_type="text",
    enum_column_type="text",
    default_column_type="json",
    primitive_column_types=_POSTGRES_TYPES,
)

# Same as POSTGRES except that opaque payloads are stored as jsonb
POSTGRES_V2 = DialectProfile(
    name=SupportedDialects.POSTGRES_V2,
    id_column_type="text",
    enum_column_type="text",
    default_column_type="jsonb",
    primitive_column_types={**_POSTGRES_TYPES, Primitives.JSON: "jsonb"},
)

MSSQL = DialectProfile(
    name=SupportedDialects.MSSQL,
    id_column_type="nvarchar(64)",
    enum_column_type="nvarchar(64)",
    default_column_type="nvarchar(max)",
    primitive_column_types={
        Primitives.STRING: "nvarchar(max)",
        Primitives.INT8: "smallint",
        Primitives.INT16: "smallint",
        Primitives.INT32: "int",
        Primitives.INT64: "bigint",
        Primitives.WORD8: "smallint",
        Primitives.WORD16: "smallint",
        Primitives.WORD32: "int",
        Primitives.WORD64: "bigint",
        Primitives.FLOAT: "float(24)",
        Primitives.DOUBLE: "float(53)",
        Primitives.BOOL: "bit",
    },
)

DIALECTS: Dict[str, DialectProfile] = {
    profile.name: profile for profile in (POSTGRES, POSTGRES_V2, MSSQL)
}


def get_dialect(name: str) -> DialectProfile:
    """Return the profile registered under name."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown SQL dialect: {name}",
            context={"supported_dialects": SupportedDialects.ALL},
        ) from None

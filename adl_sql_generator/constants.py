"""
Centralized constants for the ADL SQL generator.

Primitive names, configuration defaults and emitter layout
settings live here so the mapping and emission code never hard-codes them.
"""

from typing import List


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    OUTFILE = "create.sql"
    OUTPUT_FILENAME = "create.sql"
    DIALECT = "postgres"


class SupportedDialects:
    """Dialect names accepted on the command line and in config files."""

    POSTGRES = "postgres"
    POSTGRES_V2 = "postgres-v2"
    MSSQL = "mssql"

    ALL = [POSTGRES, POSTGRES_V2, MSSQL]


# =============================================================================
# ADL PRIMITIVES
# =============================================================================

class Primitives:
    """ADL primitive type names."""

    VOID = "Void"
    BOOL = "Bool"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    WORD8 = "Word8"
    WORD16 = "Word16"
    WORD32 = "Word32"
    WORD64 = "Word64"
    FLOAT = "Float"
    DOUBLE = "Double"
    JSON = "Json"
    BYTE_VECTOR = "ByteVector"
    STRING = "String"
    VECTOR = "Vector"
    STRING_MAP = "StringMap"
    NULLABLE = "Nullable"


# Kind tag reported by the decoder for references to declarations
REFERENCE_KIND = "Reference"


# =============================================================================
# EMITTER LAYOUT
# =============================================================================

class SchemaLayout:
    """Formatting settings for the generated schema file."""

    INDENT = "  "
    COMMENT_COLUMN = 36
    COMMENT_PREFIX = " -- "

    HEADER_LINES: List[str] = [
        "-- Schema auto-generated from adl modules: {modules}",
        "--",
        "-- column comments show original ADL types",
    ]

    FOREIGN_KEY_SUFFIX = "_fk"
    INDEX_SUFFIX = "_idx"
    UNIQUE_SUFFIX = "_con"

    SYNTHETIC_ID_COLUMN = "id"


class FileExtensions:
    """Extensions the loader accepts for ADL AST files."""

    JSON = ".json"
    YAML = ".yaml"
    YML = ".yml"

    ALL = [JSON, YAML, YML]

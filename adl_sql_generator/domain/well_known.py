"""
Well-known ADL declarations and annotation keys.

These names come from the ADL standard library (sys.types, common,
common.db) and are the only places the generator attaches special meaning
to a particular declaration.
"""

from typing import Dict

from adl_sql_generator.domain.models import ScopedName


class WellKnownTypes:
    """Scoped names the column mapper treats specially."""

    MAYBE = ScopedName("sys.types", "Maybe")

    INSTANT = ScopedName("common", "Instant")
    LOCAL_DATE = ScopedName("common", "LocalDate")
    LOCAL_DATETIME = ScopedName("common", "LocalDateTime")

    DB_KEY = ScopedName("common.db", "DbKey")


class WellKnownAnnotations:
    """Annotation keys consumed by the generator."""

    DB_TABLE = ScopedName("common.db", "DbTable")
    DB_COLUMN_NAME = ScopedName("common.db", "DbColumnName")


# Type names rendered module-qualified inside column comments
QUALIFIED_COMMENT_TYPES: Dict[ScopedName, str] = {
    WellKnownTypes.DB_KEY: "common.db.DbKey",
    WellKnownTypes.INSTANT: "common.Instant",
}

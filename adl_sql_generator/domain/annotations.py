"""
Typed views of the annotations the generator consumes.

The loader parses raw annotation payloads into these models once, so the
mapping code reads attributes instead of poking at untyped dictionaries.
"""

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from adl_sql_generator.domain.models import Declaration
from adl_sql_generator.domain.models import Field as AdlField
from adl_sql_generator.domain.well_known import WellKnownAnnotations
from adl_sql_generator.exceptions import AnnotationError


logger = logging.getLogger(__name__)


class DbTableAnnotation(BaseModel):
    """Payload of the common.db.DbTable annotation."""

    table_name: Optional[str] = Field(default=None, alias="tableName")
    with_id_primary_key: bool = Field(default=False, alias="withIdPrimaryKey")
    with_primary_key: List[str] = Field(default_factory=list, alias="withPrimaryKey")
    indexes: List[List[str]] = Field(default_factory=list)
    uniqueness_constraints: List[List[str]] = Field(
        default_factory=list, alias="uniquenessConstraints"
    )
    extra_sql: List[str] = Field(default_factory=list, alias="extraSql")

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @field_validator("table_name")
    @classmethod
    def blank_table_name_is_unset(cls, v: Optional[str]) -> Optional[str]:
        """ADL writes the DbTable default as an empty string."""
        if v is not None and not v.strip():
            return None
        return v


def parse_db_table(value: Any, decl_name: str) -> DbTableAnnotation:
    """
    Validate a raw DbTable payload.

    Raises:
        AnnotationError: if the payload does not match the DbTable schema
    """
    if isinstance(value, DbTableAnnotation):
        return value
    if value is None:
        return DbTableAnnotation()
    try:
        return DbTableAnnotation.model_validate(value)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in e.errors()
        )
        raise AnnotationError(
            f"Invalid DbTable annotation on '{decl_name}': {details}",
            declaration=decl_name,
            annotation=str(WellKnownAnnotations.DB_TABLE),
        ) from e


def parse_db_column_name(value: Any, owner: str) -> str:
    """Validate a raw DbColumnName payload, which must be a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise AnnotationError(
            f"DbColumnName annotation on '{owner}' must be a non-empty string, got {value!r}",
            declaration=owner,
            annotation=str(WellKnownAnnotations.DB_COLUMN_NAME),
        )
    return value


def get_table_annotation(decl: Declaration) -> Optional[DbTableAnnotation]:
    """Return the DbTable annotation of a declaration, if it has one."""
    if WellKnownAnnotations.DB_TABLE not in decl.annotations:
        return None
    return parse_db_table(decl.annotations[WellKnownAnnotations.DB_TABLE], decl.name)


def get_column_name_annotation(field: AdlField) -> Optional[str]:
    """Return the DbColumnName override of a field, if it has one."""
    if WellKnownAnnotations.DB_COLUMN_NAME not in field.annotations:
        return None
    return parse_db_column_name(field.annotations[WellKnownAnnotations.DB_COLUMN_NAME], field.name)

"""
Naming convention utilities for the ADL SQL generator.

Table and column identifiers come from an explicit annotation when one is
present and otherwise from the ADL name converted to snake_case.
"""

import re
from typing import Iterable

from adl_sql_generator.domain.annotations import get_column_name_annotation, get_table_annotation
from adl_sql_generator.domain.models import Declaration, Field


def to_snake_case(name: str) -> str:
    """
    Convert CamelCase or PascalCase to snake_case.

    Args:
        name: The string to convert to snake_case

    Returns:
        The converted snake_case string

    Example:
        >>> to_snake_case("UserAccount")
        'user_account'
        >>> to_snake_case("XMLHttpRequest")
        'xml_http_request'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    name = re.sub("__([A-Z])", r"_\1", name)
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def get_table_name(decl: Declaration) -> str:
    """
    Returns the SQL name for the table of a declaration.

    Example:
        A struct UserAccount without a tableName override maps to user_account.
    """
    ann = get_table_annotation(decl)
    if ann is not None and ann.table_name:
        return ann.table_name
    return to_snake_case(decl.name)


def get_column_name(field: Field) -> str:
    """Returns the SQL name for the column of a field."""
    override = get_column_name_annotation(field)
    if override is not None:
        return override
    return to_snake_case(field.name)


def find_column_name(fields: Iterable[Field], name: str) -> str:
    """
    Map a field name used in a table annotation to its column name.

    Names that match no field are passed through, so annotations may also
    refer to columns directly (e.g. the synthetic id).
    """
    for f in fields:
        if f.name == name:
            return get_column_name(f)
    return name

"""
Type expression decoding, expansion and rendering.

decode_type_expr classifies a raw TypeExpr into one of three shapes,
hiding the two equivalent spellings of an optional value
(the Nullable<T> primitive and sys.types.Maybe<T>). The expand_* helpers
substitute type arguments into the body of a newtype or type alias.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union as TypingUnion

from adl_sql_generator.constants import Primitives
from adl_sql_generator.domain.models import (
    Newtype,
    PrimitiveRef,
    ReferenceRef,
    ScopedName,
    TypeAlias,
    TypeExpr,
    TypeParamRef,
)
from adl_sql_generator.domain.resolver import DeclResolver
from adl_sql_generator.domain.well_known import QUALIFIED_COMMENT_TYPES, WellKnownTypes
from adl_sql_generator.exceptions import UnsupportedTypeShapeError


@dataclass(frozen=True)
class DecodedPrimitive:
    kind: str
    parameters: Tuple[TypeExpr, ...] = ()


@dataclass(frozen=True)
class DecodedNullable:
    inner: TypeExpr


@dataclass(frozen=True)
class DecodedReference:
    scoped_name: ScopedName
    parameters: Tuple[TypeExpr, ...] = ()


DecodedTypeExpr = TypingUnion[DecodedPrimitive, DecodedNullable, DecodedReference]


def decode_type_expr(type_expr: TypeExpr) -> DecodedTypeExpr:
    """
    Classify a type expression by its semantic shape.

    Args:
        type_expr: Raw type expression from the declaration graph

    Returns:
        DecodedNullable for either optional spelling, DecodedReference for
        any other declaration reference, DecodedPrimitive otherwise

    Raises:
        UnsupportedTypeShapeError: for an unbound type parameter or an
            optional wrapper without exactly one argument
    """
    type_ref = type_expr.type_ref

    if isinstance(type_ref, PrimitiveRef):
        if type_ref.name == Primitives.NULLABLE:
            return DecodedNullable(_single_parameter(type_expr))
        return DecodedPrimitive(type_ref.name, type_expr.parameters)

    if isinstance(type_ref, ReferenceRef):
        if type_ref.scoped_name == WellKnownTypes.MAYBE:
            return DecodedNullable(_single_parameter(type_expr))
        return DecodedReference(type_ref.scoped_name, type_expr.parameters)

    if isinstance(type_ref, TypeParamRef):
        raise UnsupportedTypeShapeError(
            f"Type parameter '{type_ref.name}' is not bound to a concrete type",
            type_expr=type_expr_to_string(type_expr),
        )

    raise UnsupportedTypeShapeError(
        f"Unknown type reference {type_ref!r}",
        type_expr=repr(type_expr),
    )


def _single_parameter(type_expr: TypeExpr) -> TypeExpr:
    if len(type_expr.parameters) != 1:
        raise UnsupportedTypeShapeError(
            f"Optional wrapper takes exactly one type argument, got {len(type_expr.parameters)}",
            type_expr=type_expr_to_string(type_expr),
        )
    return type_expr.parameters[0]


def substitute_type_params(type_expr: TypeExpr, bindings: Dict[str, TypeExpr]) -> TypeExpr:
    """Replace every bound type parameter inside type_expr."""
    type_ref = type_expr.type_ref
    if isinstance(type_ref, TypeParamRef) and type_ref.name in bindings:
        return bindings[type_ref.name]
    return TypeExpr(
        type_ref,
        tuple(substitute_type_params(p, bindings) for p in type_expr.parameters),
    )


def _expand(resolver: DeclResolver, type_expr: TypeExpr, decl_kind) -> Optional[TypeExpr]:
    type_ref = type_expr.type_ref
    if not isinstance(type_ref, ReferenceRef):
        return None

    decl = resolver(type_ref.scoped_name).decl
    if not isinstance(decl.type_, decl_kind):
        return None

    type_params = decl.type_.type_params
    if len(type_params) != len(type_expr.parameters):
        raise UnsupportedTypeShapeError(
            f"{type_ref.scoped_name} expects {len(type_params)} type argument(s), "
            f"got {len(type_expr.parameters)}",
            type_expr=type_expr_to_string(type_expr),
        )
    bindings = dict(zip(type_params, type_expr.parameters))
    return substitute_type_params(decl.type_.type_expr, bindings)


def expand_type_alias(resolver: DeclResolver, type_expr: TypeExpr) -> Optional[TypeExpr]:
    """Return the aliased type with arguments substituted, or None if not an alias."""
    return _expand(resolver, type_expr, TypeAlias)


def expand_newtype(resolver: DeclResolver, type_expr: TypeExpr) -> Optional[TypeExpr]:
    """Return the wrapped type with arguments substituted, or None if not a newtype."""
    return _expand(resolver, type_expr, Newtype)


def expand_type_expr(resolver: DeclResolver, type_expr: TypeExpr) -> Optional[TypeExpr]:
    """Expand one layer of alias or newtype indirection."""
    expanded = expand_type_alias(resolver, type_expr)
    if expanded is None:
        expanded = expand_newtype(resolver, type_expr)
    return expanded


def _type_ref_to_string(type_ref, qualify: bool) -> str:
    if isinstance(type_ref, ReferenceRef):
        if qualify and type_ref.scoped_name in QUALIFIED_COMMENT_TYPES:
            return QUALIFIED_COMMENT_TYPES[type_ref.scoped_name]
        return type_ref.scoped_name.name
    return type_ref.name


def type_expr_to_string(type_expr: TypeExpr, qualify: bool = False) -> str:
    """
    Render a type expression without module prefixes, e.g. Maybe<String>.

    With qualify=True the well-known DbKey and Instant types are written
    with their module, matching the comments of older generated schemas.
    """
    name = _type_ref_to_string(type_expr.type_ref, qualify)
    if not type_expr.parameters:
        return name
    args = ",".join(type_expr_to_string(p, qualify) for p in type_expr.parameters)
    return f"{name}<{args}>"

"""
Field mapping domain logic for the ADL SQL generator.

This module contains the core business logic for reducing an ADL type
expression to a column type, nullability flag and optional foreign key
for a given dialect.
"""

import logging
from typing import List, Optional, Set

from adl_sql_generator.constants import REFERENCE_KIND, Primitives
from adl_sql_generator.domain.annotations import get_table_annotation
from adl_sql_generator.domain.dialects import DialectProfile
from adl_sql_generator.domain.models import (
    ColumnSpec,
    ForeignKeyRef,
    Newtype,
    Struct,
    TypeAlias,
    TypeExpr,
    Union,
)
from adl_sql_generator.domain.naming import get_table_name
from adl_sql_generator.domain.resolver import DeclResolver
from adl_sql_generator.domain.type_exprs import (
    DecodedNullable,
    DecodedPrimitive,
    DecodedReference,
    decode_type_expr,
    expand_type_expr,
    type_expr_to_string,
)
from adl_sql_generator.domain.well_known import WellKnownTypes
from adl_sql_generator.exceptions import AliasExpansionError, UnsupportedTypeShapeError


logger = logging.getLogger(__name__)

NOT_NULL = " not null"


class ColumnMapper:
    """
    Maps ADL type expressions to column specifications.

    The mapper is read-only over the resolver and profile, so one instance
    can be shared across every table of a run.
    """

    def __init__(self, resolver: DeclResolver, profile: DialectProfile):
        self.resolver = resolver
        self.profile = profile

    def column_spec(self, type_expr: TypeExpr) -> ColumnSpec:
        """
        Map the type of a field to its column specification.

        Maybe<T> and Nullable<T> give a nullable column of T's type; every
        other type gives a 'not null' column. Foreign keys are detected on
        the unwrapped type, so a nullable key is still a key.

        Raises:
            UnsupportedTypeShapeError: for nested optional wrappers
            AliasExpansionError: for cyclic alias/newtype chains
            UnresolvedReferenceError: for references outside the graph
        """
        decoded = decode_type_expr(type_expr)
        if isinstance(decoded, DecodedNullable):
            inner = decoded.inner
            if isinstance(decode_type_expr(inner), DecodedNullable):
                raise UnsupportedTypeShapeError(
                    "Nested optional types have no column mapping",
                    type_expr=type_expr_to_string(type_expr),
                )
            return ColumnSpec(
                sql_type=self.base_column_type(inner),
                nullable=True,
                foreign_key=self.foreign_key_ref(inner),
            )

        return ColumnSpec(
            sql_type=self.base_column_type(type_expr) + NOT_NULL,
            nullable=False,
            foreign_key=self.foreign_key_ref(type_expr),
        )

    def base_column_type(self, type_expr: TypeExpr) -> str:
        """
        Reduce a type expression to its column type, ignoring nullability.

        Newtypes and type aliases are expanded one layer at a time. Each
        expanded expression is remembered; meeting one again, or running
        past the expansion budget, means the chain cannot terminate.
        """
        expanded: Set[TypeExpr] = set()
        chain: List[str] = []
        budget = self.resolver.expandable_count * (type_expr.size + 1)
        current = type_expr

        while True:
            decoded = decode_type_expr(current)

            if isinstance(decoded, DecodedPrimitive):
                return self.profile.prim_column_type(decoded.kind)

            if isinstance(decoded, DecodedNullable):
                # Optional types behind an alias keep their opaque representation
                return self.profile.prim_column_type(Primitives.NULLABLE)

            if not isinstance(decoded, DecodedReference):
                raise UnsupportedTypeShapeError(
                    f"Unhandled decoded type {decoded!r}",
                    type_expr=type_expr_to_string(current),
                )

            scoped_name = decoded.scoped_name
            if scoped_name == WellKnownTypes.INSTANT:
                return self.profile.timestamp_column_type
            if scoped_name == WellKnownTypes.LOCAL_DATE:
                return self.profile.date_column_type
            if scoped_name == WellKnownTypes.LOCAL_DATETIME:
                return self.profile.local_timestamp_column_type

            decl_type = self.resolver(scoped_name).decl.type_
            if isinstance(decl_type, Union) and decl_type.is_enum:
                return self.profile.enum_column_type

            if isinstance(decl_type, (Newtype, TypeAlias)):
                chain.append(type_expr_to_string(current))
                if current in expanded or len(chain) > budget:
                    raise AliasExpansionError(
                        f"Expansion of {type_expr_to_string(type_expr)} does not terminate",
                        type_expr=type_expr_to_string(type_expr),
                        chain=chain,
                    )
                expanded.add(current)
                current = expand_type_expr(self.resolver, current)
                logger.debug(f"Expanded {chain[-1]} to {type_expr_to_string(current)}")
                continue

            if isinstance(decl_type, (Struct, Union)):
                return self.profile.prim_column_type(REFERENCE_KIND)

            raise UnsupportedTypeShapeError(
                f"Unhandled declaration kind for {scoped_name}",
                type_expr=type_expr_to_string(current),
            )

    def foreign_key_ref(self, type_expr: TypeExpr) -> Optional[ForeignKeyRef]:
        """
        Detect a DbKey<T> reference to a table-mapped declaration.

        Returns:
            The referenced table's id column, or None when type_expr is not a
            key or T carries no DbTable annotation
        """
        decoded = decode_type_expr(type_expr)
        if not isinstance(decoded, DecodedReference) or decoded.scoped_name != WellKnownTypes.DB_KEY:
            return None

        if len(decoded.parameters) != 1:
            raise UnsupportedTypeShapeError(
                f"DbKey takes exactly one type argument, got {len(decoded.parameters)}",
                type_expr=type_expr_to_string(type_expr),
            )

        target = decode_type_expr(decoded.parameters[0])
        if isinstance(target, DecodedNullable):
            raise UnsupportedTypeShapeError(
                "DbKey cannot wrap an optional type",
                type_expr=type_expr_to_string(type_expr),
            )
        if not isinstance(target, DecodedReference):
            logger.warning(f"{type_expr_to_string(type_expr)} does not reference a declaration, no foreign key")
            return None

        target_decl = self.resolver(target.scoped_name).decl
        if get_table_annotation(target_decl) is None:
            logger.warning(
                f"{type_expr_to_string(type_expr)} references {target.scoped_name}, "
                "which has no DbTable annotation, no foreign key"
            )
            return None

        return ForeignKeyRef(table=get_table_name(target_decl))

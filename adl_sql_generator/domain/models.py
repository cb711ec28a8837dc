"""
Core domain models for the ADL SQL generator.

These models mirror the ADL abstract syntax: modules hold declarations,
declarations are one of a closed set of kinds, and type expressions are
trees of references with ordered type parameters. Declarations and type
expressions are frozen so a loaded graph cannot change once mapping starts.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union as TypingUnion


@dataclass(frozen=True, order=True)
class ScopedName:
    """A declaration identity: (module name, unqualified name)."""

    module_name: str
    name: str

    def __str__(self) -> str:
        return f"{self.module_name}.{self.name}"


# --- Type references ---


@dataclass(frozen=True)
class PrimitiveRef:
    """Reference to a built-in ADL primitive such as String or Int32."""

    name: str


@dataclass(frozen=True)
class TypeParamRef:
    """Reference to a type parameter of the enclosing generic declaration."""

    name: str


@dataclass(frozen=True)
class ReferenceRef:
    """Reference to a declaration anywhere in the loaded graph."""

    scoped_name: ScopedName


TypeRef = TypingUnion[PrimitiveRef, TypeParamRef, ReferenceRef]


@dataclass(frozen=True)
class TypeExpr:
    """A type reference applied to an ordered tuple of type arguments."""

    type_ref: TypeRef
    parameters: Tuple["TypeExpr", ...] = ()

    @classmethod
    def primitive(cls, name: str, *parameters: "TypeExpr") -> "TypeExpr":
        return cls(PrimitiveRef(name), tuple(parameters))

    @classmethod
    def type_param(cls, name: str) -> "TypeExpr":
        return cls(TypeParamRef(name))

    @classmethod
    def reference(cls, scoped_name: ScopedName, *parameters: "TypeExpr") -> "TypeExpr":
        return cls(ReferenceRef(scoped_name), tuple(parameters))

    @property
    def size(self) -> int:
        """Number of nodes in the expression tree."""
        return 1 + sum(p.size for p in self.parameters)


# --- Declarations ---

Annotations = Mapping[ScopedName, Any]


@dataclass(frozen=True)
class Field:
    """A named, typed member of a struct or union."""

    name: str
    type_expr: TypeExpr
    annotations: Annotations = field(default_factory=dict)


@dataclass(frozen=True)
class Struct:
    type_params: Tuple[str, ...]
    fields: Tuple[Field, ...]


@dataclass(frozen=True)
class Union:
    type_params: Tuple[str, ...]
    fields: Tuple[Field, ...]

    @property
    def is_enum(self) -> bool:
        """True when no variant carries a payload."""
        return all(
            isinstance(f.type_expr.type_ref, PrimitiveRef)
            and f.type_expr.type_ref.name == "Void"
            for f in self.fields
        )


@dataclass(frozen=True)
class Newtype:
    type_params: Tuple[str, ...]
    type_expr: TypeExpr


@dataclass(frozen=True)
class TypeAlias:
    type_params: Tuple[str, ...]
    type_expr: TypeExpr


DeclType = TypingUnion[Struct, Union, Newtype, TypeAlias]


@dataclass(frozen=True)
class Declaration:
    """A named struct, union, newtype or type alias with its annotations."""

    name: str
    type_: DeclType
    annotations: Annotations = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return type(self.type_).__name__.lower()


@dataclass(frozen=True)
class ScopedDecl:
    """A declaration together with the name of the module that owns it."""

    module_name: str
    decl: Declaration

    @property
    def scoped_name(self) -> ScopedName:
        return ScopedName(self.module_name, self.decl.name)


@dataclass
class Module:
    """A named collection of declarations."""

    name: str
    decls: Dict[str, Declaration] = field(default_factory=dict)
    imports: Tuple[str, ...] = ()
    annotations: Annotations = field(default_factory=dict)


# --- Derived column information ---


@dataclass(frozen=True)
class ForeignKeyRef:
    """Target of a foreign key: always the id column of a mapped table."""

    table: str
    column: str = "id"


@dataclass(frozen=True)
class ColumnSpec:
    """
    The result of mapping a field's type expression.

    sql_type already carries the ' not null' qualifier for non-nullable
    columns so it can be written out verbatim.
    """

    sql_type: str
    nullable: bool
    foreign_key: Optional[ForeignKeyRef] = None


@dataclass
class ColumnLine:
    """A single line inside a create table body."""

    code: str
    comment: Optional[str] = None


@dataclass
class TableSchema:
    """
    Everything the emitter needs for one table.

    Built by mapper.build_table_schemas and consumed by codegen.
    """

    name: str
    module_name: str
    decl_name: str
    lines: list = field(default_factory=list)
    foreign_keys: list = field(default_factory=list)
    indexes: list = field(default_factory=list)
    uniqueness_constraints: list = field(default_factory=list)
    extra_sql: list = field(default_factory=list)
    primary_key_columns: list = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'module_name': self.module_name,
            'decl_name': self.decl_name,
            'lines': [{'code': line.code, 'comment': line.comment} for line in self.lines],
            'foreign_keys': [fk.to_dict() for fk in self.foreign_keys],
            'indexes': [index.to_dict() for index in self.indexes],
            'uniqueness_constraints': [c.to_dict() for c in self.uniqueness_constraints],
            'extra_sql': self.extra_sql,
            'primary_key_columns': self.primary_key_columns,
        }

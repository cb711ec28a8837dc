"""
Tests for type expression decoding, expansion and rendering.
"""

from unittest import TestCase

from adl_sql_generator.domain.models import ScopedName, TypeExpr
from adl_sql_generator.domain.type_exprs import (
    DecodedNullable,
    DecodedPrimitive,
    DecodedReference,
    decode_type_expr,
    expand_newtype,
    expand_type_alias,
    expand_type_expr,
    substitute_type_params,
    type_expr_to_string,
)
from adl_sql_generator.domain.well_known import WellKnownTypes
from adl_sql_generator.exceptions import UnresolvedReferenceError, UnsupportedTypeShapeError

from builders import (
    INT32,
    STRING,
    alias,
    db_key,
    maybe,
    newtype,
    nullable,
    ref,
    resolver_for,
    struct,
)


class TestDecodeTypeExpr(TestCase):
    """Test cases for decode_type_expr."""

    def test_primitive(self):
        """Test decoding a primitive."""
        assert decode_type_expr(STRING) == DecodedPrimitive("String")

    def test_primitive_keeps_parameters(self):
        """Test a primitive keeps its type parameters."""
        vector = TypeExpr.primitive("Vector", INT32)
        assert decode_type_expr(vector) == DecodedPrimitive("Vector", (INT32,))

    def test_nullable_primitive(self):
        """Test Nullable<T> decodes as optional."""
        assert decode_type_expr(nullable(STRING)) == DecodedNullable(STRING)

    def test_maybe_reference_is_nullable(self):
        """Both optional spellings decode to the same shape."""
        assert decode_type_expr(maybe(STRING)) == decode_type_expr(nullable(STRING))

    def test_reference(self):
        """Test decoding a declaration reference."""
        decoded = decode_type_expr(ref("Person"))
        assert isinstance(decoded, DecodedReference)
        assert decoded.scoped_name == ScopedName("test", "Person")
        assert decoded.parameters == ()

    def test_maybe_without_argument(self):
        """Test Maybe with no argument is rejected."""
        with self.assertRaises(UnsupportedTypeShapeError):
            decode_type_expr(TypeExpr.reference(WellKnownTypes.MAYBE))

    def test_nullable_with_two_arguments(self):
        """Test Nullable with two arguments is rejected."""
        with self.assertRaises(UnsupportedTypeShapeError):
            decode_type_expr(TypeExpr.primitive("Nullable", STRING, INT32))

    def test_unbound_type_param(self):
        """Test a free type parameter is rejected."""
        with self.assertRaises(UnsupportedTypeShapeError) as ctx:
            decode_type_expr(TypeExpr.type_param("T"))
        assert "'T'" in ctx.exception.message


class TestSubstitution(TestCase):
    """Test cases for type parameter substitution."""

    def test_replaces_nested_params(self):
        """Test parameters are replaced at any depth."""
        te = TypeExpr.primitive("Vector", TypeExpr.type_param("T"))
        result = substitute_type_params(te, {"T": STRING})
        assert result == TypeExpr.primitive("Vector", STRING)

    def test_unbound_params_are_left(self):
        """Test parameters without a binding are left in place."""
        te = TypeExpr.type_param("U")
        assert substitute_type_params(te, {"T": STRING}) == te


class TestExpansion(TestCase):
    """Test cases for alias and newtype expansion."""

    def setUp(self):
        self.resolver = resolver_for(
            alias("Name", STRING),
            newtype("UserId", STRING),
            newtype("Wrapper", TypeExpr.primitive("Vector", TypeExpr.type_param("T")), ["T"]),
            alias("Pair", TypeExpr.primitive("StringMap", TypeExpr.type_param("B")), ["A", "B"]),
            struct("Person", []),
        )

    def test_expand_alias(self):
        """Test a type alias expands to its target."""
        assert expand_type_alias(self.resolver, ref("Name")) == STRING

    def test_expand_alias_ignores_newtype(self):
        """Test expand_type_alias leaves newtypes alone."""
        assert expand_type_alias(self.resolver, ref("UserId")) is None

    def test_expand_newtype(self):
        """Test a newtype expands to its wrapped type."""
        assert expand_newtype(self.resolver, ref("UserId")) == STRING

    def test_expand_generic_newtype(self):
        """Test a generic newtype expands with its argument substituted."""
        expanded = expand_newtype(self.resolver, ref("Wrapper", INT32))
        assert expanded == TypeExpr.primitive("Vector", INT32)

    def test_params_bind_by_position(self):
        """Test type arguments bind to parameters by position."""
        expanded = expand_type_expr(self.resolver, ref("Pair", STRING, INT32))
        assert expanded == TypeExpr.primitive("StringMap", INT32)

    def test_struct_is_not_expandable(self):
        """Test a struct reference does not expand."""
        assert expand_type_expr(self.resolver, ref("Person")) is None

    def test_primitive_is_not_expandable(self):
        """Test a primitive does not expand."""
        assert expand_type_expr(self.resolver, STRING) is None

    def test_arity_mismatch(self):
        """Test the wrong number of type arguments is rejected."""
        with self.assertRaises(UnsupportedTypeShapeError):
            expand_type_expr(self.resolver, ref("Wrapper"))

    def test_unresolved_reference(self):
        """Test a reference to a missing declaration is reported."""
        with self.assertRaises(UnresolvedReferenceError):
            expand_type_expr(self.resolver, ref("Missing"))


class TestTypeExprToString(TestCase):
    """Test cases for type_expr_to_string."""

    def test_primitive(self):
        """Test a primitive prints as its name."""
        assert type_expr_to_string(STRING) == "String"

    def test_drops_module_names(self):
        """Test references print without their module."""
        assert type_expr_to_string(maybe(STRING)) == "Maybe<String>"

    def test_parameters_are_comma_joined(self):
        """Test parameters print comma separated in angle brackets."""
        te = ref("Pair", STRING, TypeExpr.primitive("Vector", INT32))
        assert type_expr_to_string(te) == "Pair<String,Vector<Int32>>"

    def test_qualified_well_known_types(self):
        """Test well-known types keep their module when qualified."""
        assert type_expr_to_string(db_key(ref("Person")), qualify=True) == "common.db.DbKey<Person>"
        assert type_expr_to_string(TypeExpr.reference(WellKnownTypes.INSTANT), qualify=True) == "common.Instant"

    def test_unqualified_well_known_types(self):
        """Test well-known types drop their module when not qualified."""
        assert type_expr_to_string(db_key(ref("Person"))) == "DbKey<Person>"

"""
Tests for table and column naming.
"""

from unittest import TestCase

from adl_sql_generator.domain.naming import (
    find_column_name,
    get_column_name,
    get_table_name,
    to_snake_case,
)

from builders import STRING, field, struct


class TestToSnakeCase(TestCase):
    """Test cases for to_snake_case."""

    def test_pascal_case(self):
        """Test PascalCase names."""
        assert to_snake_case("Person") == "person"
        assert to_snake_case("UserAccount") == "user_account"

    def test_camel_case(self):
        """Test camelCase names."""
        assert to_snake_case("createdAt") == "created_at"
        assert to_snake_case("userId") == "user_id"

    def test_acronyms(self):
        """Test runs of capitals are kept together."""
        assert to_snake_case("XMLHttpRequest") == "xml_http_request"

    def test_digits(self):
        """Test names containing digits."""
        assert to_snake_case("address2Line") == "address2_line"

    def test_already_snake_case(self):
        """Test snake_case names are unchanged."""
        assert to_snake_case("first_name") == "first_name"

    def test_non_string(self):
        """Test a non-string argument raises TypeError."""
        with self.assertRaises(TypeError):
            to_snake_case(None)


class TestTableNames(TestCase):
    """Test cases for get_table_name."""

    def test_derived_from_declaration_name(self):
        """Test the table name is the snake_case declaration name."""
        assert get_table_name(struct("UserAccount", [], table={})) == "user_account"

    def test_table_name_override(self):
        """Test tableName replaces the derived name."""
        decl = struct("UserAccount", [], table={"tableName": "accounts"})
        assert get_table_name(decl) == "accounts"

    def test_blank_override_is_ignored(self):
        """Test a blank tableName falls back to the derived name."""
        decl = struct("UserAccount", [], table={"tableName": ""})
        assert get_table_name(decl) == "user_account"


class TestColumnNames(TestCase):
    """Test cases for column name derivation."""

    def test_derived_from_field_name(self):
        """Test the column name is the snake_case field name."""
        assert get_column_name(field("createdAt", STRING)) == "created_at"

    def test_column_name_override(self):
        """Test DbColumnName replaces the derived name."""
        assert get_column_name(field("createdAt", STRING, column_name="ts")) == "ts"

    def test_find_column_name(self):
        """Test looking up a column name by field name."""
        fields = [field("firstName", STRING), field("lastName", STRING, column_name="surname")]
        assert find_column_name(fields, "firstName") == "first_name"
        assert find_column_name(fields, "lastName") == "surname"

    def test_unknown_names_pass_through(self):
        """Test a name with no matching field is returned unchanged."""
        assert find_column_name([field("firstName", STRING)], "id") == "id"

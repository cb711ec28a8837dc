"""
End-to-end tests for the adl-sql command line.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from adl_sql_generator.cli import build_parser, main

from builders import ast_field, ast_module, ast_prim, ast_ref, ast_struct


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the root logger as pytest configured it."""
    with patch("adl_sql_generator.cli.setup_colored_logging") as mock_setup:
        yield mock_setup


def test_parser_options():
    """Test the argument parser accepts every option."""
    args = build_parser().parse_args(
        ["a.json", "b.json", "-I", "adl", "-I", "lib", "--outfile", "out.sql", "--mssql"]
    )
    assert args.adl_files == ["a.json", "b.json"]
    assert args.search_dirs == ["adl", "lib"]
    assert args.outfile == "out.sql"
    assert args.dialect == "mssql"


def test_dialect_flags_are_exclusive():
    """Test only one dialect flag may be given."""
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["--postgres", "--mssql"])
    assert exc_info.value.code == 2


def test_postgres_v2_flag():
    """Test --postgres-v2 selects the postgres-v2 dialect."""
    assert build_parser().parse_args(["--postgres-v2"]).dialect == "postgres-v2"


def test_generates_schema(person_file: Path, tmp_path: Path, no_logging_setup):
    """Test a run writes the schema to the output file."""
    out = tmp_path / "create.sql"
    main([str(person_file), "--outfile", str(out), "--no-color"])
    sql = out.read_text(encoding="utf-8")
    assert sql.startswith("-- Schema auto-generated from adl modules: test\n")
    assert "create table person(" in sql
    assert sql.endswith(
        "alter table person add constraint person_id_fk foreign key (id) references person(id);\n"
    )
    no_logging_setup.assert_called_once_with(level=20, use_colors=False)


def test_mssql(person_file: Path, tmp_path: Path):
    """Test --mssql output uses the mssql column types."""
    out = tmp_path / "create.sql"
    main([str(person_file), "--outfile", str(out), "--mssql"])
    assert "id nvarchar(64) not null," in out.read_text(encoding="utf-8")


def test_output_dir(person_file: Path, tmp_path: Path):
    """Test the deprecated output directory option."""
    main([str(person_file), "--outputdir", str(tmp_path / "sql")])
    assert (tmp_path / "sql" / "create.sql").is_file()


def test_search_dir(tmp_path: Path, write_ast):
    """Test imports are resolved from --searchdir."""
    write_ast("adl/lib/places.json", ast_module(
        "lib.places", [ast_struct("Address", [ast_field("street", ast_prim("String"))], {})]
    ))
    app = write_ast("app.json", ast_module(
        "app",
        [ast_struct("Shop", [ast_field("address", ast_ref("lib.places", "Address"))], {})],
        imports=("lib.places",),
    ))
    out = tmp_path / "create.sql"
    main([str(app), "-I", str(tmp_path / "adl"), "--outfile", str(out)])
    sql = out.read_text(encoding="utf-8")
    # Tables come from every loaded module, in name order
    assert sql.index("create table address(") < sql.index("create table shop(")
    assert "-- Schema auto-generated from adl modules: lib.places, app\n" in sql


def test_config_file(person_file: Path, tmp_path: Path):
    """Test options can come from a YAML config file."""
    out = tmp_path / "create.sql"
    config_file = tmp_path / "adl-sql.yaml"
    config_file.write_text(
        f"adl_files: ['{person_file}']\noutfile: '{out}'\ndialect: postgres-v2\n",
        encoding="utf-8",
    )
    main(["-c", str(config_file)])
    assert "create table person(" in out.read_text(encoding="utf-8")


def test_missing_input_exits(tmp_path: Path):
    """Test a missing input file exits with an error."""
    out = tmp_path / "create.sql"
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "missing.json"), "--outfile", str(out)])
    assert exc_info.value.code == 1
    assert not out.exists()


def test_mapping_error_exits(tmp_path: Path, write_ast):
    """Test a mapping error exits with an error."""
    nested = ast_ref("sys.types", "Maybe", ast_ref("sys.types", "Maybe", ast_prim("String")))
    app = write_ast("app.json", ast_module("app", [ast_struct("T", [ast_field("x", nested)], {})]))
    with pytest.raises(SystemExit) as exc_info:
        main([str(app), "--outfile", str(tmp_path / "create.sql")])
    assert exc_info.value.code == 1


def test_unexpected_error_exits(person_file: Path, tmp_path: Path):
    """Test an unexpected exception exits with an error."""
    with patch("adl_sql_generator.cli.build_table_schemas", side_effect=RuntimeError("boom")):
        with pytest.raises(SystemExit) as exc_info:
            main([str(person_file), "--outfile", str(tmp_path / "create.sql")])
    assert exc_info.value.code == 1

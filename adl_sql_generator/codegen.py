import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from adl_sql_generator.constants import SchemaLayout
from adl_sql_generator.domain.models import ColumnLine, TableSchema
from adl_sql_generator.exceptions import CodeGenerationError


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"

SCHEMA_TEMPLATE = "create_sql.sql.j2"


def setup_jinja_env() -> Environment:
    """Sets up and returns the Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        # SQL output: type comments such as Maybe<String> must stay unescaped
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,  # Remove first newline after a block tag
        lstrip_blocks=True,  # Strip leading whitespace from lines with block tags
    )
    return env


def format_column_lines(lines: List[ColumnLine]) -> List[str]:
    """
    Lay out the body of a create table statement.

    Every line but the last gets a trailing comma; lines with a type comment
    are padded so the comments line up.
    """
    formatted = []
    for i, line in enumerate(lines):
        text = line.code
        if i < len(lines) - 1:
            text += ","
        if line.comment:
            text = text.ljust(SchemaLayout.COMMENT_COLUMN) + SchemaLayout.COMMENT_PREFIX + line.comment
        formatted.append(SchemaLayout.INDENT + text)
    return formatted


def build_template_context(tables: List[TableSchema]) -> Dict[str, Any]:
    """
    Collect the template context for a list of tables.

    Constraints are gathered across all tables so every foreign key,
    index and uniqueness constraint comes after the last create table.
    """
    module_names: List[str] = []
    for table in tables:
        if table.module_name not in module_names:
            module_names.append(table.module_name)

    header = [
        line.format(modules=", ".join(module_names))
        for line in SchemaLayout.HEADER_LINES
    ]
    return {
        "header": header,
        "tables": [
            {"name": table.name, "formatted_lines": format_column_lines(table.lines)}
            for table in tables
        ],
        "foreign_keys": [fk for table in tables for fk in table.foreign_keys],
        "indexes": [index for table in tables for index in table.indexes],
        "uniqueness_constraints": [c for table in tables for c in table.uniqueness_constraints],
        "extra_sql": [sql for table in tables for sql in table.extra_sql],
    }


def render_sql_schema(tables: List[TableSchema], env: Environment = None) -> str:
    """Renders the schema template for the given tables."""
    env = env or setup_jinja_env()
    try:
        template = env.get_template(SCHEMA_TEMPLATE)
        return template.render(build_template_context(tables))
    except TemplateError as e:
        raise CodeGenerationError(f"Error rendering template '{SCHEMA_TEMPLATE}': {e}") from e


def write_sql_schema(content: str, output_path: Path) -> None:
    """
    Write the schema file in one step.

    The content goes to a temporary file next to the target first, so a
    failed run never leaves a truncated schema behind.
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, output_path)
        except BaseException:
            os.unlink(tmp_name)
            raise
    except OSError as e:
        raise CodeGenerationError(
            f"Could not write schema file: {e}", output_path=str(output_path)
        ) from e
    logger.debug(f"Generated file: {output_path}")


def generate_sql_schema(tables: List[TableSchema], output_path: Path) -> str:
    """Render the tables and write them to output_path. Returns the SQL text."""
    content = render_sql_schema(tables)
    write_sql_schema(content, output_path)
    return content

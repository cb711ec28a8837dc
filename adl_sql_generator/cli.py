import argparse
import logging
import sys
from typing import List, Optional

from adl_sql_generator.codegen import generate_sql_schema
from adl_sql_generator.config_validation import load_config
from adl_sql_generator.constants import SupportedDialects
from adl_sql_generator.domain.dialects import get_dialect
from adl_sql_generator.exceptions import AdlSqlGeneratorError
from adl_sql_generator.loader import load_adl
from adl_sql_generator.mapper import build_table_schemas

from adl_sql_generator.colored_logging import (
    setup_colored_logging,
    log_success,
    log_progress,
    log_highlight,
    log_section,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adl-sql",
        description="Generate SQL create table statements from ADL struct declarations annotated with DbTable.",
    )
    parser.add_argument(
        "adl_files",
        nargs="*",
        metavar="ADLFILE",
        help="ADL AST files (.json, .yaml) to generate tables from. Overrides config file setting.",
    )
    parser.add_argument(
        "-I",
        "--searchdir",
        dest="search_dirs",
        action="append",
        metavar="DIR",
        help="Add a directory to the ADL module search path. May be repeated.",
    )
    parser.add_argument(
        "--outfile",
        help="Path of the generated SQL file (default: create.sql).",
    )
    parser.add_argument(
        "--outputdir",
        dest="output_dir",
        help="(deprecated) Write <DIR>/create.sql. Use --outfile instead.",
    )
    dialects = parser.add_mutually_exclusive_group()
    dialects.add_argument(
        "--postgres",
        dest="dialect",
        action="store_const",
        const=SupportedDialects.POSTGRES,
        help="Generate PostgreSQL (the default).",
    )
    dialects.add_argument(
        "--postgres-v2",
        dest="dialect",
        action="store_const",
        const=SupportedDialects.POSTGRES_V2,
        help="Generate PostgreSQL, storing opaque values as jsonb.",
    )
    dialects.add_argument(
        "--mssql",
        dest="dialect",
        action="store_const",
        const=SupportedDialects.MSSQL,
        help="Generate Microsoft SQL Server.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a YAML configuration file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    # --- Logging Setup ---
    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_colored_logging(level=log_level, use_colors=not args.no_color)

    if args.verbose:
        logger.debug("Verbose mode enabled. DEBUG level logging activated.")

    # --- Main Execution Pipeline ---
    try:
        # 1. Load Configuration
        config = load_config(args.config, args)
        profile = get_dialect(config.dialect)
        logger.debug(f"Effective configuration: {config}")
        if not config.adl_files:
            logger.warning("No ADL files given; the schema will contain no tables.")

        # 2. Load declarations
        log_section(logger, "ADL loading")
        log_progress(logger, f"Loading {len(config.adl_files)} ADL file(s)...")
        loaded = load_adl(config.adl_files, config.search_dirs)
        log_highlight(logger, f"Modules: {', '.join(loaded.requested_modules) or '(none)'}")

        # 3. Map tables
        log_section(logger, "Table mapping")
        tables = build_table_schemas(loaded.resolver, profile)
        for table in tables:
            log_highlight(logger, f"{table.decl_name} -> {table.name}")

        # 4. Emit
        log_section(logger, "SQL generation")
        generate_sql_schema(tables, config.output_path)
        log_success(logger, f"Wrote {len(tables)} table(s) to {config.output_path}")

    # --- Error Handling ---
    except AdlSqlGeneratorError as e:
        logger.error(str(e), exc_info=args.verbose)
        sys.exit(1)
    except Exception as e:
        logger.error(
            f"An unexpected error occurred during generation: {e}", exc_info=True
        )
        sys.exit(1)


# --- Script Entry Point ---
if __name__ == "__main__":
    main()

from argparse import Namespace
import sys
import logging
from typing import List, Optional, Dict, Any, Literal, Self
import yaml
from pathlib import Path

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
    ConfigDict,
)

from adl_sql_generator.constants import DefaultConfig, SupportedDialects

logger = logging.getLogger(__name__)


# --- Pydantic Model for Configuration Schema ---
class ToolConfigSchema(BaseModel):
    """Pydantic schema defining the expected structure and types for the configuration."""

    adl_files: List[str] = Field(
        default_factory=list,
        description="ADL AST files (.json, .yaml) whose DbTable structs become tables.",
    )
    search_dirs: List[str] = Field(
        default_factory=list,
        description="Directories searched for imported modules.",
    )
    outfile: str = Field(
        DefaultConfig.OUTFILE,
        min_length=1,
        description="Path of the generated SQL schema file.",
    )
    output_dir: Optional[str] = Field(
        default=None,
        description="Deprecated. Writes <output_dir>/create.sql instead of outfile.",
    )
    dialect: Literal["postgres", "postgres-v2", "mssql"] = Field(
        default=DefaultConfig.DIALECT,
        description=f"SQL dialect, one of {', '.join(SupportedDialects.ALL)}.",
    )

    @field_validator("adl_files", "search_dirs", mode="before")
    @classmethod
    def check_path_list(cls, v: Any) -> List[str]:
        """Accept a single path or a list of non-empty path strings."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            raise TypeError("Expected a list of paths.")
        processed_list = []
        for index, item in enumerate(v):
            if not isinstance(item, str):
                raise TypeError(
                    f"Item at index {index} must be a string, found: {type(item).__name__}"
                )
            stripped_item = item.strip()
            if not stripped_item:
                raise ValueError(
                    f"Item at index {index} cannot be empty or just whitespace."
                )
            processed_list.append(stripped_item)
        return processed_list

    @model_validator(mode="after")
    def apply_output_dir(self) -> Self:
        """The deprecated output_dir setting wins over outfile."""
        if self.output_dir:
            logger.warning(
                "'output_dir' is deprecated, use 'outfile' instead."
            )
            self.outfile = str(Path(self.output_dir) / DefaultConfig.OUTPUT_FILENAME)
        return self

    @property
    def output_path(self) -> Path:
        return Path(self.outfile)

    model_config = ConfigDict(
        extra="ignore",  # Allow and ignore extra fields from input dict
    )


# --- Validation Function ---
def validate_and_parse_config(config_dict: Dict[str, Any]) -> ToolConfigSchema:
    """
    Validates a raw configuration dictionary against the ToolConfigSchema.
    Exits with error messages if validation fails.
    """
    try:
        validated_config = ToolConfigSchema.model_validate(config_dict)
        logger.debug(
            "Configuration dictionary parsed and validated successfully against schema."
        )
        return validated_config
    except ValidationError as e:
        logger.critical(
            "Configuration validation failed! Please check your config file or arguments."
        )
        print("\n--- Configuration Errors ---", file=sys.stderr)
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "Model Level"
            msg = error.get("msg", "Unknown validation error")

            print(f"  - Location: '{loc_str}'", file=sys.stderr)
            print(f"    Error:    {msg}", file=sys.stderr)

            if "dialect" in loc_parts:
                print(
                    f"    Hint:     Use one of: {', '.join(SupportedDialects.ALL)}.",
                    file=sys.stderr,
                )

        print("----------------------------", file=sys.stderr)
        sys.exit(1)


def load_config(config_path: Optional[str], cli_args: Namespace) -> ToolConfigSchema:
    """
    Loads configuration from YAML file, merges with CLI arguments,
    validates the result, and returns a validated Pydantic model instance.
    Exits with error messages if validation fails.
    """
    raw_config: Dict[str, Any] = {}

    # 1. Load from YAML file if path is provided
    if config_path:
        config_file = Path(config_path)
        if config_file.is_file():
            try:
                with open(config_file, "r", encoding="utf-8") as f:
                    yaml_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error reading config file {config_path}: {e}")
                logger.warning("Proceeding with defaults and CLI arguments only.")
                yaml_config = None
            if yaml_config and isinstance(yaml_config, dict):
                raw_config.update(yaml_config)
                logger.debug(f"Loaded configuration from {config_path}")
            elif yaml_config:
                logger.warning(
                    f"Content in config file {config_path} is not a dictionary. Ignoring file content."
                )
        else:
            logger.warning(
                f"Config file not found at {config_path}. Using defaults and CLI arguments."
            )

    # 2. Override with CLI arguments (only those explicitly provided)
    cli_dict = vars(cli_args)
    overridden_keys = set()
    for key, value in cli_dict.items():
        # Empty lists come from append/nargs options that were not given
        if value is None or value == []:
            continue
        if key in ToolConfigSchema.model_fields:
            raw_config[key] = value
            overridden_keys.add(key)
    if overridden_keys:
        logger.debug(f"Overridden config keys from CLI arguments: {sorted(overridden_keys)}")

    # 3. Validate
    logger.debug("Validating final configuration...")
    validated_config: ToolConfigSchema = validate_and_parse_config(raw_config)

    logger.debug("Configuration loaded and validated successfully.")
    return validated_config

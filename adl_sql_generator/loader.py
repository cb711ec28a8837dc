"""
Loads ADL modules from their JSON AST into the domain model.

The input is the abstract syntax tree the ADL compiler writes with
`adlc ast`, either as JSON or as the same structure in YAML. Parsing the
ADL language itself is left to the compiler.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

from adl_sql_generator.constants import FileExtensions
from adl_sql_generator.domain.annotations import parse_db_column_name, parse_db_table
from adl_sql_generator.domain.models import (
    Declaration,
    Field,
    Module,
    Newtype,
    PrimitiveRef,
    ReferenceRef,
    ScopedName,
    Struct,
    TypeAlias,
    TypeExpr,
    TypeParamRef,
    Union,
)
from adl_sql_generator.domain.prelude import prelude_modules
from adl_sql_generator.domain.resolver import DeclResolver
from adl_sql_generator.domain.well_known import WellKnownAnnotations
from adl_sql_generator.exceptions import DeclarationLoadError


logger = logging.getLogger(__name__)


@dataclass
class LoadedAdl:
    """The module graph of one run plus the modules named on the command line."""

    modules: Dict[str, Module]
    requested_modules: List[str] = field(default_factory=list)

    @cached_property
    def resolver(self) -> DeclResolver:
        return DeclResolver(self.modules.values())


# --- AST decoding ---


def parse_scoped_name(value: Any) -> ScopedName:
    if isinstance(value, str):
        module_name, _, name = value.rpartition(".")
        if not module_name:
            raise DeclarationLoadError(f"Scoped name '{value}' has no module part")
        return ScopedName(module_name, name)
    try:
        return ScopedName(value["moduleName"], value["name"])
    except (KeyError, TypeError):
        raise DeclarationLoadError(f"Invalid scoped name: {value!r}") from None


def parse_union(value: Any) -> Tuple[str, Any]:
    """
    Split an ADL union value into its branch name and payload.

    adlc writes a union as a single-key object ({"struct_": {...}}) and a
    void branch as a bare string; the TypeScript runtime form
    {"kind": ..., "value": ...} is accepted as well.
    """
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict):
        if "kind" in value:
            return value["kind"], value.get("value")
        if len(value) == 1:
            ((kind, payload),) = value.items()
            return kind, payload
    raise DeclarationLoadError(f"Invalid union value: {value!r}")


def parse_type_expr(value: Dict[str, Any]) -> TypeExpr:
    """Decode a sys.adlast.TypeExpr JSON value."""
    try:
        kind, ref_value = parse_union(value["typeRef"])
        parameters = tuple(parse_type_expr(p) for p in value.get("parameters", []))
    except (KeyError, TypeError):
        raise DeclarationLoadError(f"Invalid type expression: {value!r}") from None

    if kind == "primitive":
        return TypeExpr(PrimitiveRef(ref_value), parameters)
    if kind == "typeParam":
        return TypeExpr(TypeParamRef(ref_value), parameters)
    if kind == "reference":
        return TypeExpr(ReferenceRef(parse_scoped_name(ref_value)), parameters)
    raise DeclarationLoadError(f"Unknown type reference kind '{kind}'")


def parse_annotations(value: Any) -> Dict[ScopedName, Any]:
    """
    Decode an annotation map.

    sys.types.Map serializes as a list of {k, v} entries; older compilers
    wrote {v1, v2} pairs or {key, value}. A plain mapping keyed by 'module.Name' is accepted
    for hand-written YAML.
    """
    if not value:
        return {}
    if isinstance(value, dict):
        return {parse_scoped_name(k): v for k, v in value.items()}

    annotations: Dict[ScopedName, Any] = {}
    for entry in value:
        if "v1" in entry:
            annotations[parse_scoped_name(entry["v1"])] = entry.get("v2")
        elif "k" in entry:
            annotations[parse_scoped_name(entry["k"])] = entry.get("v")
        elif "key" in entry:
            annotations[parse_scoped_name(entry["key"])] = entry.get("value")
        else:
            raise DeclarationLoadError(f"Invalid annotation entry: {entry!r}")
    return annotations


def _parse_field(value: Dict[str, Any], owner: str) -> Field:
    annotations = parse_annotations(value.get("annotations"))
    name = value["name"]
    if WellKnownAnnotations.DB_COLUMN_NAME in annotations:
        annotations[WellKnownAnnotations.DB_COLUMN_NAME] = parse_db_column_name(
            annotations[WellKnownAnnotations.DB_COLUMN_NAME], f"{owner}.{name}"
        )
    return Field(name=name, type_expr=parse_type_expr(value["typeExpr"]), annotations=annotations)


def parse_decl(value: Dict[str, Any]) -> Declaration:
    """Decode a sys.adlast.Decl JSON value, parsing known annotations."""
    try:
        name = value["name"]
        kind, body = parse_union(value["type_"])
        type_params = tuple(body.get("typeParams", []))

        if kind in ("struct_", "union_"):
            fields = tuple(_parse_field(f, name) for f in body["fields"])
            type_ = Struct(type_params, fields) if kind == "struct_" else Union(type_params, fields)
        elif kind == "newtype_":
            type_ = Newtype(type_params, parse_type_expr(body["typeExpr"]))
        elif kind == "type_":
            type_ = TypeAlias(type_params, parse_type_expr(body["typeExpr"]))
        else:
            raise DeclarationLoadError(f"Unknown declaration kind '{kind}' for '{name}'")
    except (KeyError, TypeError, AttributeError) as e:
        raise DeclarationLoadError(f"Invalid declaration {value.get('name', '?')!r}: missing {e}") from None

    annotations = parse_annotations(value.get("annotations"))
    if WellKnownAnnotations.DB_TABLE in annotations:
        annotations[WellKnownAnnotations.DB_TABLE] = parse_db_table(
            annotations[WellKnownAnnotations.DB_TABLE], name
        )
    return Declaration(name=name, type_=type_, annotations=annotations)


def _parse_import(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    kind, payload = parse_union(value)
    if kind == "moduleName":
        return payload
    if kind == "scopedName":
        return parse_scoped_name(payload).module_name
    return None


def parse_module(value: Dict[str, Any]) -> Module:
    """Decode a sys.adlast.Module JSON value."""
    try:
        name = value["name"]
        decls = {d_name: parse_decl(d) for d_name, d in value.get("decls", {}).items()}
    except (KeyError, TypeError, AttributeError):
        raise DeclarationLoadError(f"Invalid module: {str(value)[:80]}") from None
    imports = tuple(i for i in (_parse_import(v) for v in value.get("imports", [])) if i)
    return Module(
        name=name,
        decls=decls,
        imports=imports,
        annotations=parse_annotations(value.get("annotations")),
    )


# --- Files and search path ---


def read_ast_file(path: Path) -> Any:
    """Read a JSON or YAML AST file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == FileExtensions.JSON:
                return json.load(f)
            return yaml.safe_load(f)
    except FileNotFoundError:
        raise DeclarationLoadError("ADL file not found", path=str(path)) from None
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise DeclarationLoadError(f"Could not read ADL file: {e}", path=str(path)) from e


def modules_from_file(path: Path) -> List[Module]:
    """A file holds a single module or a mapping of module name to module."""
    content = read_ast_file(path)
    if not isinstance(content, dict):
        raise DeclarationLoadError("ADL file does not contain a module object", path=str(path))
    if "decls" in content:
        return [parse_module(content)]
    modules = []
    for module_name, module_value in content.items():
        if isinstance(module_value, dict):
            module_value.setdefault("name", module_name)
        modules.append(parse_module(module_value))
    return modules


def find_module_file(module_name: str, search_dirs: Sequence[Path]) -> Optional[Path]:
    """Look for a.b.c as a/b/c.<ext> or a.b.c.<ext> in each search directory."""
    for search_dir in search_dirs:
        for ext in FileExtensions.ALL:
            for candidate in (
                Path(search_dir, *module_name.split(".")).with_suffix(ext),
                Path(search_dir) / f"{module_name}{ext}",
            ):
                if candidate.is_file():
                    return candidate
    return None


def load_adl(adl_files: Iterable[str], search_dirs: Iterable[str] = ()) -> LoadedAdl:
    """
    Load the requested ADL files and everything they import.

    Imports that are neither loaded nor found on the search path fall back
    to the built-in prelude for the standard modules.

    Raises:
        DeclarationLoadError: when a file or an imported module is missing
    """
    search_paths = [Path(d) for d in search_dirs]
    modules: Dict[str, Module] = {}
    requested: List[str] = []

    for adl_file in adl_files:
        for module in modules_from_file(Path(adl_file)):
            logger.debug(f"Loaded module {module.name} from {adl_file}")
            modules[module.name] = module
            if module.name not in requested:
                requested.append(module.name)

    prelude = prelude_modules()
    pending = [imp for m in modules.values() for imp in m.imports]
    while pending:
        module_name = pending.pop()
        if module_name in modules:
            continue
        path = find_module_file(module_name, search_paths)
        if path is not None:
            for module in modules_from_file(path):
                if module.name not in modules:
                    logger.debug(f"Loaded imported module {module.name} from {path}")
                    modules[module.name] = module
                    pending.extend(module.imports)
        elif module_name in prelude:
            modules[module_name] = prelude[module_name]
        else:
            raise DeclarationLoadError(
                f"Imported module '{module_name}' was not found on the search path",
                module=module_name,
                context={"search_dirs": [str(p) for p in search_paths]},
            )

    for module_name, module in prelude.items():
        if module_name not in modules:
            modules[module_name] = module

    logger.info(f"Loaded {len(requested)} requested module(s), {len(modules)} in total")
    return LoadedAdl(modules=modules, requested_modules=requested)

"""
Custom exception hierarchy for the ADL SQL generator.

Every fatal condition in the pipeline is raised as a subclass of
AdlSqlGeneratorError, carrying enough context to find the offending
declaration and a few hints on how to fix the input.
"""

from typing import Dict, Any, Optional, List


class AdlSqlGeneratorError(Exception):
    """
    Base exception for all ADL SQL generator errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [self.message]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


class ConfigurationError(AdlSqlGeneratorError):
    """Raised when tool configuration is invalid or missing."""

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the configuration file syntax",
                "Check the dialect name (postgres, postgres-v2, mssql)",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CONFIG_ERROR"
        )


class DeclarationLoadError(AdlSqlGeneratorError):
    """Raised when an ADL module cannot be found or read."""

    def __init__(self, message: str, path: str = None, module: str = None, **kwargs):
        context = kwargs.get('context', {})
        if path:
            context['path'] = path
        if module:
            context['module'] = module

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the file exists and contains an ADL AST in JSON or YAML form",
                "Add the directory holding imported modules with -I/--searchdir",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="LOAD_ERROR"
        )


class UnresolvedReferenceError(AdlSqlGeneratorError):
    """Raised when a scoped name does not resolve to any loaded declaration."""

    def __init__(self, message: str, scoped_name: Any = None, **kwargs):
        context = kwargs.get('context', {})
        if scoped_name is not None:
            context['scoped_name'] = str(scoped_name)

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the module declaring the type was loaded",
                "Check the search path passed with -I/--searchdir",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="UNRESOLVED_REFERENCE"
        )


class AnnotationError(AdlSqlGeneratorError):
    """Raised when table-mapping metadata is missing or malformed."""

    def __init__(self, message: str, declaration: str = None, annotation: str = None, **kwargs):
        context = kwargs.get('context', {})
        if declaration:
            context['declaration'] = declaration
        if annotation:
            context['annotation'] = annotation

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the annotation value matches the common.db declaration",
                "DbColumnName takes a plain string",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="ANNOTATION_ERROR"
        )


class AliasExpansionError(AdlSqlGeneratorError):
    """Raised when newtype/type alias expansion does not terminate."""

    def __init__(self, message: str, type_expr: str = None, chain: List[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if type_expr:
            context['type_expr'] = type_expr
        if chain:
            context['expansion_chain'] = " -> ".join(chain)

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Look for a type alias or newtype that refers back to itself",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="ALIAS_EXPANSION_ERROR"
        )


class UnsupportedTypeShapeError(AdlSqlGeneratorError):
    """Raised for type expressions that have no column mapping."""

    def __init__(self, message: str, type_expr: str = None, **kwargs):
        context = kwargs.get('context', {})
        if type_expr:
            context['type_expr'] = type_expr

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Nullable wrappers cannot be nested",
                "DbKey<T> must name a table declaration directly",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="UNSUPPORTED_TYPE_SHAPE"
        )


class CodeGenerationError(AdlSqlGeneratorError):
    """Raised when the schema file cannot be rendered or written."""

    def __init__(self, message: str, output_path: str = None, table: str = None, **kwargs):
        context = kwargs.get('context', {})
        if output_path:
            context['output_path'] = output_path
        if table:
            context['table'] = table

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the output directory exists and is writable",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CODE_GENERATION_ERROR"
        )

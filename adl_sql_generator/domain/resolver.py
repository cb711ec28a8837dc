"""
Declaration lookup over a loaded module graph.
"""

import logging
from typing import Dict, Iterable, Iterator

from adl_sql_generator.domain.models import (
    Module,
    Newtype,
    ScopedDecl,
    ScopedName,
    TypeAlias,
)
from adl_sql_generator.exceptions import UnresolvedReferenceError


logger = logging.getLogger(__name__)


class DeclResolver:
    """
    Total lookup from ScopedName to ScopedDecl.

    The graph is assumed closed: a name that does not resolve is an
    upstream loading bug, so it raises rather than returning None.
    """

    def __init__(self, modules: Iterable[Module]):
        self.modules: Dict[str, Module] = {m.name: m for m in modules}
        self._expandable_count = sum(
            1
            for module in self.modules.values()
            for decl in module.decls.values()
            if isinstance(decl.type_, (Newtype, TypeAlias))
        )

    def __call__(self, scoped_name: ScopedName) -> ScopedDecl:
        return self.resolve(scoped_name)

    def resolve(self, scoped_name: ScopedName) -> ScopedDecl:
        module = self.modules.get(scoped_name.module_name)
        if module is None:
            raise UnresolvedReferenceError(
                f"Module '{scoped_name.module_name}' is not loaded",
                scoped_name=scoped_name,
            )
        decl = module.decls.get(scoped_name.name)
        if decl is None:
            raise UnresolvedReferenceError(
                f"Module '{scoped_name.module_name}' has no declaration '{scoped_name.name}'",
                scoped_name=scoped_name,
            )
        return ScopedDecl(module_name=module.name, decl=decl)

    def __contains__(self, scoped_name: ScopedName) -> bool:
        module = self.modules.get(scoped_name.module_name)
        return module is not None and scoped_name.name in module.decls

    @property
    def expandable_count(self) -> int:
        """Number of newtype and type alias declarations in the graph."""
        return self._expandable_count

    def scoped_decls(self) -> Iterator[ScopedDecl]:
        """Iterate every declaration, modules and declarations in name order."""
        for module_name in sorted(self.modules):
            module = self.modules[module_name]
            for decl_name in sorted(module.decls):
                yield ScopedDecl(module_name=module_name, decl=module.decls[decl_name])

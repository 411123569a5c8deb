"""Import collection for generated modules.

Collects the names generated code needs and turns them into sorted
``from module import ...`` statements, so two runs over the same input emit
the same imports in the same order.
"""

import ast

from routestub.codegen.ast_utils import _import


class ImportCollector:
    """Collects and deduplicates ``from`` imports.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_imports({'routestub.runtime': {'HttpxRequest'}})
        >>> collector.add_imports({'routestub.runtime': {'FetchRequest'}})
        >>> imports = collector.to_ast()
        >>> # [ImportFrom(module='routestub.runtime', names=['FetchRequest', 'HttpxRequest'])]
    """

    def __init__(self):
        self._imports: dict[str, set[str]] = {}

    def add_imports(self, imports: dict[str, set[str]]) -> None:
        """Add imports from a dictionary mapping modules to sets of names."""
        for module, names in imports.items():
            self._imports.setdefault(module, set()).update(names)

    def discard_existing(self, module: ast.Module) -> None:
        """Drop names that ``module`` already imports from the same source."""
        for stmt in module.body:
            if isinstance(stmt, ast.ImportFrom) and stmt.level == 0:
                names = self._imports.get(stmt.module)
                if names:
                    names.difference_update(
                        alias.name for alias in stmt.names if alias.asname is None
                    )

    def to_ast(self) -> list[ast.ImportFrom]:
        """Convert collected imports to sorted ``ImportFrom`` statements."""
        return [
            _import(module, names)
            for module, names in sorted(self._imports.items())
            if names
        ]

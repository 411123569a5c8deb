import ast
import py_compile
import tempfile
from collections.abc import Iterator
from pathlib import Path

from upath import UPath

__all__ = ('iter_sources', 'render_module', 'validate_python_syntax', 'write_mod')

SKIPPED_DIRECTORIES = frozenset({'__pycache__', '.git', '.venv', 'venv'})


def render_module(module: ast.Module) -> str:
    """Unparse ``module`` into source text ending with a newline."""
    ast.fix_missing_locations(module)
    return ast.unparse(module) + '\n'


def validate_python_syntax(content: str) -> None:
    """Validate that the content is valid Python code.

    Args:
        content: Python source code as a string.

    Raises:
        py_compile.PyCompileError: If the code is not valid Python.
    """
    with tempfile.NamedTemporaryFile(mode='w', suffix='.py', delete=False) as f:
        f.write(content)
        f.flush()
        temp_path = f.name

    try:
        py_compile.compile(temp_path, doraise=True)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def write_mod(content: str, path: UPath | Path | str) -> None:
    """Validate generated source and write it to ``path``.

    Args:
        content: The rendered module source.
        path: Path where the file should be written.

    Raises:
        py_compile.PyCompileError: If the generated code is not valid Python.
        OSError: If the file cannot be written.
    """
    path = UPath(path)

    validate_python_syntax(content)

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        f.write(content)


def iter_sources(source: UPath | Path | str) -> Iterator[tuple[UPath, str]]:
    """Yield ``(path, relative_name)`` for every handler module under ``source``.

    A file yields itself; a directory yields its ``.py`` files recursively in
    sorted order.
    """
    source = UPath(source)

    if source.is_file():
        yield source, source.name
        return

    for path in sorted(source.rglob('*.py'), key=str):
        relative = path.relative_to(source)
        if any(part in SKIPPED_DIRECTORIES for part in relative.parts):
            continue
        yield path, relative.as_posix()

"""Filesystem discovery of route files.

Walks each routes directory and yields its ``.py`` files in a fixed
order: the files of a directory (sorted by name) come before any of its
subdirectories, and subdirectories are visited depth-first in name
order. Each subdirectory adds one ``name/`` segment to the route prefix.

Files and directories whose name starts with ``_`` or ``.`` are
skipped (``__init__.py``, ``__pycache__``, editor files).
"""

import importlib.machinery
import importlib.util
import itertools
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

_counter = itertools.count()


@dataclass(frozen=True, slots=True)
class RouteFile:
    """A discovered route file.

    Attributes:
        path: Absolute path of the file.
        prefix: Route prefix from the directory structure (``/`` or ``/a/b/``).
        name: File name without the ``.py`` suffix.
    """

    path: Path
    prefix: str
    name: str


def _visible(item: Path) -> bool:
    return not (item.name.startswith("_") or item.name.startswith("."))


def iter_route_files(roots: Iterable[str | Path]) -> Iterator[RouteFile]:
    """Yield the route files under *roots*, in discovery order.

    Missing roots are skipped without error. The ``.py`` suffix matches in
    any case, and a directory reached again through a symlink is skipped.
    """
    for root in roots:
        root_path = Path(root).resolve()
        if not root_path.is_dir():
            continue

        # Explicit worklist; pushed in reverse so pops come out in name order
        stack: list[tuple[Path, str]] = [(root_path, "/")]
        visited: set[Path] = set()
        while stack:
            directory, prefix = stack.pop()
            # Symlinked directories can lead back to an ancestor
            real = directory.resolve()
            if real in visited:
                continue
            visited.add(real)

            entries = sorted(item for item in directory.iterdir() if _visible(item))

            for item in entries:
                if item.suffix.lower() == ".py" and item.is_file():
                    yield RouteFile(path=item, prefix=prefix, name=item.stem)

            subdirs = [item for item in entries if item.is_dir()]
            for item in reversed(subdirs):
                stack.append((item, f"{prefix}{item.name}/"))


def load_module(path: str | Path) -> ModuleType:
    """Execute a route file as a fresh module and return it.

    Each call produces a new module object, so decorators run again and
    stage fresh metadata for every build.
    """
    path = Path(path)
    module_name = f"_autoroute_{path.stem}_{next(_counter)}"
    # Explicit loader so upper-case suffixes (".PY") load too
    loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None or spec.loader is None:
        msg = f"Cannot load route file {path}"
        raise ImportError(msg)

    module = importlib.util.module_from_spec(spec)
    # Registered while executing so dataclasses and typing can resolve the module
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return module

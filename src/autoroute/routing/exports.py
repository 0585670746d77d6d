"""Classification of what a route file exports.

Every loaded value is classified once into a closed set of shapes, each
carrying exactly what the walker needs:

- :class:`NamespaceExport` — a Python module: the classes and functions
  named in its ``__all__``, or else its own public ones.
- :class:`ClassExport` — a class: static routes on the class, instance
  routes on one fresh instance.
- :class:`FunctionExport` — a bare function, walked for the functions
  attached to it.
- :class:`PlainObjectExport` — any other object, walked for its
  attributes and the methods of its class.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import Any, TypeAlias

from autoroute.errors import RouteExportError

# Values that can never hold routes
_PRIMITIVES = (bool, int, float, complex, str, bytes, bytearray)


@dataclass(frozen=True, slots=True)
class ClassExport:
    value: type


@dataclass(frozen=True, slots=True)
class FunctionExport:
    value: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class PlainObjectExport:
    value: Any


@dataclass(frozen=True, slots=True)
class NamespaceExport:
    """A module's own public classes and functions, in definition order."""

    module: ModuleType
    classes: tuple[type, ...]
    functions: tuple[tuple[str, Callable[..., Any]], ...]


Export: TypeAlias = ClassExport | FunctionExport | PlainObjectExport | NamespaceExport


def _defined_in(value: Any, module: ModuleType) -> bool:
    return getattr(value, "__module__", None) == module.__name__


def _named_exports(module: ModuleType) -> list[tuple[str, Any]]:
    """The names listed in ``__all__``, or else the module's own public members."""
    names = getattr(module, "__all__", None)
    if names is not None:
        return [(name, getattr(module, name)) for name in names if hasattr(module, name)]
    # Imported helpers belong to other modules and never become routes
    return [
        (name, member)
        for name, member in vars(module).items()
        if not name.startswith("_") and _defined_in(member, module)
    ]


def classify(value: Any, source: str) -> Export:
    """Classify the value loaded from *source*.

    Raises:
        RouteExportError: *value* is ``None`` or a primitive.
    """
    if value is None:
        msg = f"File {source} does not export a valid object/class/function"
        raise RouteExportError(msg, file=source)

    if isinstance(value, _PRIMITIVES):
        msg = f"File {source} exports a value of type {type(value).__name__} which is not supported"
        raise RouteExportError(msg, file=source)

    if isinstance(value, ModuleType):
        classes: list[type] = []
        functions: list[tuple[str, Callable[..., Any]]] = []
        for name, member in _named_exports(value):
            if inspect.isclass(member):
                classes.append(member)
            elif inspect.isfunction(member):
                functions.append((name, member))
        return NamespaceExport(module=value, classes=tuple(classes), functions=tuple(functions))

    if inspect.isclass(value):
        return ClassExport(value)

    if inspect.isroutine(value):
        return FunctionExport(value)

    return PlainObjectExport(value)

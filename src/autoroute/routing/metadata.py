"""Routing metadata staged on functions and classes by decorators.

Decorators attach facts to the decorated object through ``stage()``;
the build session reads them back exactly once through a
:class:`MetadataStore`, which erases them from the object so nothing
lingers after startup.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Attribute holding the staged bag on a function or class
_ATTR = "__autoroute__"


@dataclass(frozen=True, slots=True)
class ClassMetadata:
    """Facts staged on a class (or any exported entity).

    Attributes:
        full_route: Explicit route prefix replacing the derived one.
            ``""`` is a valid override meaning the site root.
        name: Display name used instead of the class or file name.
    """

    full_route: str | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class MethodMetadata:
    """Facts staged on a route function.

    Attributes:
        full_route: Explicit route replacing the class prefix entirely.
        name: Route segment used instead of the function name.
        verbs: HTTP verbs in declaration order (may repeat).
        hidden: Never expose this function as a route.
        middleware: Explicit middleware, run after any body parser.
        file_upload_limit: Byte limit of the upload parser; ``None`` when
            the function does not accept uploads.
    """

    full_route: str | None = None
    name: str | None = None
    verbs: tuple[str, ...] = ()
    hidden: bool = False
    middleware: tuple[Callable[..., Any], ...] = ()
    file_upload_limit: int | None = None


def unwrap(target: Any) -> Any:
    """Return the object that carries metadata for *target*.

    ``staticmethod``/``classmethod`` wrappers and bound methods stage
    their facts on the underlying function, so decorator order does not
    matter.
    """
    while isinstance(target, (staticmethod, classmethod)) or hasattr(target, "__self__"):
        inner = getattr(target, "__func__", None)
        if inner is None:
            break
        target = inner
    return target


def _bag(target: Any, *, create: bool) -> dict[str, Any] | None:
    owner = unwrap(target)
    # vars() so a subclass never sees the bag of its base class
    bag = vars(owner).get(_ATTR) if hasattr(owner, "__dict__") else None
    if bag is None and create:
        bag = {}
        setattr(owner, _ATTR, bag)
    return bag


def stage(target: Any, key: str, value: Any) -> None:
    """Set a single fact on *target*, replacing any previous value."""
    bag = _bag(target, create=True)
    assert bag is not None
    bag[key] = value


def stage_append(target: Any, key: str, *values: Any) -> None:
    """Append facts to a list-valued key on *target*."""
    bag = _bag(target, create=True)
    assert bag is not None
    bag.setdefault(key, []).extend(values)


def _take(target: Any, keys: tuple[str, ...]) -> dict[str, Any]:
    """Pop *keys* from the bag of *target*, dropping the bag once empty."""
    owner = unwrap(target)
    bag = _bag(owner, create=False)
    if bag is None:
        return {}
    taken = {key: bag.pop(key) for key in keys if key in bag}
    if not bag:
        delattr(owner, _ATTR)
    return taken


_METHOD_KEYS = ("full_route", "name", "verbs", "hidden", "middleware", "file_upload_limit")
_CLASS_KEYS = ("class_full_route", "class_name")


class MetadataStore:
    """Consumes staged metadata for one build session.

    The first read of an object erases its facts and remembers the parsed
    result, so a base class shared by several exported subclasses yields
    the same facts each time it is walked during the session. Call
    :meth:`clear` when the session ends.
    """

    __slots__ = ("_classes", "_methods")

    def __init__(self) -> None:
        # Values keep the owner alive next to its id so the key cannot be reused
        self._methods: dict[int, tuple[Any, MethodMetadata]] = {}
        self._classes: dict[int, tuple[Any, ClassMetadata]] = {}

    def method(self, func: Any) -> MethodMetadata:
        """Read and erase the method metadata staged on *func*."""
        owner = unwrap(func)
        cached = self._methods.get(id(owner))
        if cached is not None:
            return cached[1]

        bag = _take(owner, _METHOD_KEYS)
        metadata = MethodMetadata(
            full_route=bag.get("full_route"),
            name=bag.get("name"),
            verbs=tuple(bag.get("verbs", ())),
            hidden=bool(bag.get("hidden", False)),
            middleware=tuple(bag.get("middleware", ())),
            file_upload_limit=bag.get("file_upload_limit"),
        )
        self._methods[id(owner)] = (owner, metadata)
        return metadata

    def entity(self, entity: Any) -> ClassMetadata:
        """Read and erase the class-level metadata staged on *entity*."""
        cached = self._classes.get(id(entity))
        if cached is not None:
            return cached[1]

        bag = _take(entity, _CLASS_KEYS)
        metadata = ClassMetadata(
            full_route=bag.get("class_full_route"),
            name=bag.get("class_name"),
        )
        self._classes[id(entity)] = (entity, metadata)
        return metadata

    def clear(self) -> None:
        """Forget everything consumed during the session."""
        self._methods.clear()
        self._classes.clear()

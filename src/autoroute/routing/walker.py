"""Entity walking — turn exported classes, objects and functions into routes.

For every routable member the walker consumes the staged metadata,
validates the handler, canonicalizes its verbs, synthesizes its route
and picks the body middleware, then emits one
:class:`~autoroute.routing.route.RouteDefinition` per verb (a single
one for ``all``).

Members whose name starts with ``_`` are never routes. Classes are
walked from the most-derived class to the least-derived one, stopping at
``object``; a name defined on a subclass shadows the base definition.
"""

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from autoroute._internal.signature import positional_arity
from autoroute.errors import RouteDefinitionError, RouteExportError
from autoroute.routing.exports import (
    ClassExport,
    Export,
    FunctionExport,
    NamespaceExport,
    PlainObjectExport,
)
from autoroute.routing.metadata import unwrap
from autoroute.routing.paths import class_prefix, method_route
from autoroute.routing.route import RouteDefinition
from autoroute.routing.session import BuildSession
from autoroute.routing.verbs import BODY_VERBS, WILDCARD, InvalidVerb, VerbSet

# request, response, next
MAX_HANDLER_ARITY = 3


@dataclass(frozen=True, slots=True)
class Member:
    """A candidate route function.

    Attributes:
        name: Attribute name, used as the default route segment.
        raw: The value as stored on its owner (carries the metadata).
        handler: The callable to register, bound where applicable.
    """

    name: str
    raw: Any
    handler: Callable[..., Any]


def walk_export(
    session: BuildSession,
    export: Export,
    *,
    source: str,
    directory_prefix: str,
    file_name: str,
) -> None:
    """Walk every entity of one classified export."""
    match export:
        case NamespaceExport(classes=classes, functions=functions):
            if functions:
                prefix = class_prefix(directory_prefix, file_name)
                members = [Member(name, func, func) for name, func in functions]
                walk_members(session, members, source=source, prefix=prefix)
            for klass in classes:
                _walk_entity(session, klass, source, directory_prefix, file_name)
        case ClassExport(value=value) | FunctionExport(value=value) | PlainObjectExport(value=value):
            _walk_entity(session, value, source, directory_prefix, file_name)


def entity_prefix(
    session: BuildSession,
    entity: Any,
    *,
    directory_prefix: str,
    file_name: str,
) -> str:
    """Compute the route prefix of *entity* from its staged class metadata.

    An explicit full route always wins; otherwise the display name is the
    staged name, the class/function name when ``use_class_names_as_routes``
    is on, or the file name.
    """
    metadata = session.metadata.entity(entity)
    if metadata.full_route is not None:
        return class_prefix(directory_prefix, None, full_route=metadata.full_route)

    name: str | None = file_name
    if metadata.name is not None:
        name = metadata.name
    elif session.config.use_class_names_as_routes and (
        inspect.isclass(entity) or inspect.isroutine(entity)
    ):
        name = getattr(entity, "__name__", None) or file_name
    return class_prefix(directory_prefix, name)


def _walk_entity(
    session: BuildSession,
    entity: Any,
    source: str,
    directory_prefix: str,
    file_name: str,
) -> None:
    prefix = entity_prefix(
        session, entity, directory_prefix=directory_prefix, file_name=file_name
    )
    if inspect.isclass(entity):
        walk_members(session, static_members(entity), source=source, prefix=prefix)
        instance = _instantiate(entity, source)
        walk_members(session, object_members(instance), source=source, prefix=prefix)
    elif inspect.isroutine(entity):
        walk_members(session, attribute_members(entity), source=source, prefix=prefix)
    else:
        members = object_members(entity, include_static=True)
        walk_members(session, members, source=source, prefix=prefix)


def _instantiate(cls: type, source: str) -> Any:
    try:
        return cls()
    except TypeError as exc:
        msg = (
            f"Class {cls.__qualname__}, in file {source}, "
            f"cannot be instantiated without arguments: {exc}"
        )
        raise RouteExportError(msg, file=source) from exc


def _chain(cls: type) -> Iterator[type]:
    """Classes from most-derived to least-derived, ``object`` excluded."""
    for klass in cls.__mro__:
        if klass is object:
            return
        yield klass


def static_members(cls: type) -> list[Member]:
    """``staticmethod`` and ``classmethod`` members of *cls* and its bases."""
    members: list[Member] = []
    seen: set[str] = set()
    for klass in _chain(cls):
        for name, raw in vars(klass).items():
            if name.startswith("_") or name in seen:
                continue
            seen.add(name)
            if isinstance(raw, (staticmethod, classmethod)):
                members.append(Member(name, raw, getattr(cls, name)))
    return members


def object_members(obj: Any, *, include_static: bool = False) -> list[Member]:
    """Functions stored on *obj* itself, then the methods of its class chain.

    Methods are bound to *obj*. Static and class methods are included only
    when *include_static* is set (plain objects get no separate static pass).
    """
    members: list[Member] = []
    seen: set[str] = set()
    for name, value in getattr(obj, "__dict__", {}).items():
        if name.startswith("_"):
            continue
        seen.add(name)
        if inspect.isroutine(value):
            members.append(Member(name, value, value))

    for klass in _chain(type(obj)):
        for name, raw in vars(klass).items():
            if name.startswith("_") or name in seen:
                continue
            seen.add(name)
            is_static = isinstance(raw, (staticmethod, classmethod))
            if inspect.isfunction(raw) or (include_static and is_static):
                members.append(Member(name, raw, getattr(obj, name)))
    return members


def attribute_members(func: Callable[..., Any]) -> list[Member]:
    """Functions attached as attributes of a bare function."""
    return [
        Member(name, value, value)
        for name, value in getattr(func, "__dict__", {}).items()
        if not name.startswith("_") and inspect.isroutine(value)
    ]


def walk_members(
    session: BuildSession,
    members: list[Member],
    *,
    source: str,
    prefix: str,
) -> None:
    """Emit the route definitions of every routable member."""
    config = session.config
    for member in members:
        metadata = session.metadata.method(member.raw)
        if metadata.hidden or (config.all_methods_routes_hidden_by_default and not metadata.verbs):
            continue

        function = getattr(unwrap(member.raw), "__qualname__", member.name)
        arity = positional_arity(member.handler)
        if arity is not None and arity > MAX_HANDLER_ARITY:
            msg = (
                f'Function "{function}", in file {source}, '
                f"should have {MAX_HANDLER_ARITY} parameters at most"
            )
            raise RouteDefinitionError(msg, file=source, function=function)

        uploads = metadata.file_upload_limit is not None
        if uploads and config.disable_file_upload:
            msg = (
                "config.disable_file_upload is True and route.file_upload() is being "
                f'used on function "{function}", in file {source}'
            )
            raise RouteDefinitionError(msg, file=source, function=function)

        try:
            verbs = VerbSet.resolve(
                metadata.verbs,
                all_by_default=config.all_methods_routes_all_by_default,
                hidden_by_default=config.all_methods_routes_hidden_by_default,
            )
        except InvalidVerb as exc:
            msg = (
                f'Invalid http method "{exc.verb}" used for the class method '
                f'"{member.name}" in file {source}'
            )
            raise RouteDefinitionError(msg, file=source, function=function, verb=exc.verb) from None
        if verbs.hidden:
            continue

        path = method_route(
            prefix, member.name, name=metadata.name, full_route=metadata.full_route
        )

        explicit = metadata.middleware
        if verbs.can_handle_body:
            if uploads:
                body = (session.uploads.upload(metadata.file_upload_limit),)
            else:
                body = session.body_parsers
            with_body = (*body, *explicit)
        elif uploads:
            msg = (
                f'route.file_upload() is being used on function "{function}", in file '
                f"{source}, without at least one of the required http decorators: "
                "all, delete, patch, post or put"
            )
            raise RouteDefinitionError(msg, file=source, function=function, route=path)
        else:
            with_body = explicit

        if verbs.is_wildcard:
            session.add(RouteDefinition(source, path, WILDCARD, with_body, member.handler))
            continue

        for verb in verbs.verbs:
            middleware = with_body if verb in BODY_VERBS else explicit
            session.add(RouteDefinition(source, path, verb, middleware, member.handler))

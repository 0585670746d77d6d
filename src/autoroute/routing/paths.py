"""Route path synthesis.

A route is the directory prefix accumulated by the scanner, plus one
segment for the class (or file), plus one segment for the function.
``index`` at either level contributes nothing, and explicit overrides
replace the derived parts.

Examples::

    class_prefix("/api/sales/", "order")         -> "/api/sales/order/"
    class_prefix("/api/sales/", "Index")         -> "/api/sales/"
    method_route("/api/sales/order/", "m1")      -> "/api/sales/order/m1"
    method_route("/api/sales/order/", "index")   -> "/api/sales/order"
    method_route("/x/", "m1", full_route="a/b")  -> "/a/b"
"""


def full_class_prefix(full_route: str) -> str:
    """Normalise an explicit class prefix to ``/.../``, or ``/`` when empty."""
    if not full_route:
        return "/"
    if not full_route.startswith("/"):
        full_route = "/" + full_route
    if not full_route.endswith("/"):
        full_route += "/"
    return full_route


def class_prefix(
    directory_prefix: str,
    name: str | None,
    *,
    full_route: str | None = None,
) -> str:
    """Compute the prefix shared by every route of one class.

    Args:
        directory_prefix: ``/`` plus one ``segment/`` per nested directory.
        name: Display name of the class (override, class name, or file stem).
        full_route: Explicit prefix; wins over everything else when not ``None``.

    Returns:
        A prefix that starts and ends with ``/``.
    """
    if full_route is not None:
        return full_class_prefix(full_route)

    if name:
        name = name.removeprefix("/")
        if not name.endswith("/"):
            name += "/"
        if len(name) > 1 and name.lower() != "index/":
            return directory_prefix + name
    return directory_prefix


def method_route(
    prefix: str,
    symbol: str,
    *,
    name: str | None = None,
    full_route: str | None = None,
) -> str:
    """Compute the final route of one function.

    Args:
        prefix: The class prefix from :func:`class_prefix`.
        symbol: The function's own attribute name.
        name: Segment override; ``""`` is honoured and means no segment.
        full_route: Explicit route; the class prefix is ignored.

    Returns:
        A route starting with ``/`` that never ends with ``/`` unless it is
        exactly ``/``.
    """
    if full_route:
        route = full_route if full_route.startswith("/") else "/" + full_route
    else:
        segment = symbol if name is None else name
        segment = segment.removeprefix("/")
        if segment.lower() == "index":
            segment = ""
        route = prefix + segment if segment else prefix

    if len(route) > 1 and route.endswith("/"):
        route = route[:-1]
    return route

"""HTTP verb decorators plus the request, response, header, query and form types.

Route files use this package for its decorators::

    from autoroute import http

    class Order:
        @http.post()
        def save(self, request, response): ...

The types live in the submodules (``autoroute.http.request`` and so on).
"""

from autoroute.routing.decorators import (
    all,
    delete,
    get,
    head,
    hidden,
    options,
    patch,
    post,
    put,
)

__all__ = ["all", "delete", "get", "head", "hidden", "options", "patch", "post", "put"]

"""Tests for autoroute.routing.exports — export classification."""

import types

import pytest

from autoroute.errors import RouteExportError
from autoroute.routing.exports import (
    ClassExport,
    FunctionExport,
    NamespaceExport,
    PlainObjectExport,
    classify,
)


def _module(source: str) -> types.ModuleType:
    module = types.ModuleType("orders_module")
    exec(source, module.__dict__)
    return module


class TestClassify:
    def test_none_is_fatal(self) -> None:
        with pytest.raises(RouteExportError) as exc_info:
            classify(None, "/routes/a.py")
        assert "does not export a valid object/class/function" in str(exc_info.value)
        assert exc_info.value.file == "/routes/a.py"

    @pytest.mark.parametrize("value", [42, 1.5, "text", b"raw", True])
    def test_primitives_are_fatal(self, value: object) -> None:
        with pytest.raises(RouteExportError) as exc_info:
            classify(value, "/routes/a.py")
        assert f"type {type(value).__name__} which is not supported" in str(exc_info.value)

    def test_class(self) -> None:
        class Orders: ...

        assert classify(Orders, "a.py") == ClassExport(Orders)

    def test_function(self) -> None:
        def orders(): ...

        assert classify(orders, "a.py") == FunctionExport(orders)

    def test_plain_object(self) -> None:
        obj = types.SimpleNamespace(m1=lambda: None)
        assert isinstance(classify(obj, "a.py"), PlainObjectExport)

    def test_module_own_members_only(self) -> None:
        module = _module(
            "from pathlib import Path\n"
            "from os.path import join\n"
            "class Orders: ...\n"
            "class _Hidden: ...\n"
            "def m1(request, response): ...\n"
            "def _helper(): ...\n"
            "LIMIT = 10\n"
        )
        export = classify(module, "a.py")
        assert isinstance(export, NamespaceExport)
        assert [c.__name__ for c in export.classes] == ["Orders"]
        assert [name for name, _ in export.functions] == ["m1"]

    def test_module_all_limits_exports(self) -> None:
        module = _module(
            "from pathlib import Path\n"
            "__all__ = ['Order', 'm1', 'Path']\n"
            "class OrderIn:\n"
            "    def __init__(self, id): self.id = id\n"
            "class Order: ...\n"
            "def m1(request, response): ...\n"
            "def format_total(a, b, c, d): ...\n"
        )
        export = classify(module, "a.py")
        assert isinstance(export, NamespaceExport)
        assert [c.__name__ for c in export.classes] == ["Order", "Path"]
        assert [name for name, _ in export.functions] == ["m1"]

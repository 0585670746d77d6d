"""Tests for autoroute.routing.walker — entity walking into route definitions."""

import pytest

from autoroute import http, route
from autoroute.config import RoutingConfig
from autoroute.errors import RouteDefinitionError, RouteExportError
from autoroute.routing.exports import classify
from autoroute.routing.session import BuildSession
from autoroute.routing.walker import entity_prefix, object_members, static_members, walk_export


def _walk(value: object, config: RoutingConfig | None = None, *, prefix: str = "/", name: str = "order"):
    session = BuildSession(config or RoutingConfig())
    walk_export(
        session,
        classify(value, "order.py"),
        source="order.py",
        directory_prefix=prefix,
        file_name=name,
    )
    return session.routes


def _pairs(routes) -> list[tuple[str, str]]:
    return [(r.verb, r.path) for r in routes]


def _mw(request, response, next):
    next()


class TestClassWalk:
    def test_basic_class(self) -> None:
        class Order:
            def m1(self, request, response): ...

            def index(self, request, response): ...

        routes = _walk(Order, prefix="/api/sales/")
        assert sorted(_pairs(routes)) == [
            ("get", "/api/sales/order"),
            ("get", "/api/sales/order/m1"),
        ]

    def test_handlers_are_bound_to_one_instance(self) -> None:
        class Order:
            def a(self): ...

            def b(self): ...

        routes = _walk(Order)
        assert routes[0].handler.__self__ is routes[1].handler.__self__

    def test_static_members_come_first(self) -> None:
        class Order:
            def instance(self): ...

            @staticmethod
            def static(request, response): ...

            @classmethod
            def klass(cls, request): ...

        routes = _walk(Order)
        assert [r.path for r in routes] == ["/order/static", "/order/klass", "/order/instance"]

    def test_private_names_skipped(self) -> None:
        class Order:
            def _helper(self): ...

            def __call__(self): ...

            def visible(self): ...

        assert _pairs(_walk(Order)) == [("get", "/order/visible")]

    def test_inherited_methods(self) -> None:
        class Base:
            def shared(self): ...

            def overridden(self): ...

        class Order(Base):
            @http.post()
            def overridden(self): ...

        assert sorted(_pairs(_walk(Order))) == [
            ("get", "/order/shared"),
            ("post", "/order/overridden"),
        ]

    def test_class_requiring_arguments(self) -> None:
        class Order:
            def __init__(self, db): ...

            def m1(self): ...

        with pytest.raises(RouteExportError) as exc_info:
            _walk(Order)
        assert "cannot be instantiated" in str(exc_info.value)

    def test_class_name_override(self) -> None:
        @route.class_name("orders")
        class Order:
            def m1(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/api/orders/m1")]

    def test_full_class_route(self) -> None:
        @route.full_class_route("/shop")
        class Order:
            def m1(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/shop/m1")]

    def test_full_method_route(self) -> None:
        class Order:
            @route.full_method_route("/health")
            def m1(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/health")]

    def test_use_class_names(self) -> None:
        class Order:
            def m1(self): ...

        config = RoutingConfig(use_class_names_as_routes=True)
        assert _pairs(_walk(Order, config, name="file")) == [("get", "/Order/m1")]

    def test_index_file_name(self) -> None:
        class Order:
            def index(self): ...

        assert _pairs(_walk(Order, prefix="/api/", name="index")) == [("get", "/api")]


class TestVerbs:
    def test_one_route_per_verb(self) -> None:
        class Order:
            @http.get()
            @http.post()
            def save(self): ...

        assert _pairs(_walk(Order)) == [("get", "/order/save"), ("post", "/order/save")]

    def test_wildcard_is_one_route(self) -> None:
        class Order:
            @http.all()
            @http.get()
            def save(self): ...

        assert _pairs(_walk(Order)) == [("all", "/order/save")]

    def test_hidden(self) -> None:
        class Order:
            @http.hidden()
            def secret(self): ...

            def m1(self): ...

        assert _pairs(_walk(Order)) == [("get", "/order/m1")]

    def test_hidden_by_default(self) -> None:
        class Order:
            def plain(self): ...

            @http.put()
            def save(self): ...

        config = RoutingConfig(all_methods_routes_hidden_by_default=True)
        assert _pairs(_walk(Order, config)) == [("put", "/order/save")]

    def test_all_by_default(self) -> None:
        class Order:
            def plain(self): ...

        config = RoutingConfig(all_methods_routes_all_by_default=True)
        assert _pairs(_walk(Order, config)) == [("all", "/order/plain")]

    def test_invalid_verb(self) -> None:
        from autoroute.routing.metadata import stage_append

        class Order:
            def save(self): ...

        stage_append(vars(Order)["save"], "verbs", "fetch")
        with pytest.raises(RouteDefinitionError) as exc_info:
            _walk(Order)
        assert 'Invalid http method "fetch"' in str(exc_info.value)
        assert exc_info.value.verb == "fetch"


class TestArity:
    def test_too_many_parameters(self) -> None:
        class Order:
            def save(self, request, response, next, extra): ...

        with pytest.raises(RouteDefinitionError) as exc_info:
            _walk(Order)
        assert "should have 3 parameters at most" in str(exc_info.value)

    def test_var_args_accepted(self) -> None:
        class Order:
            def save(self, *args): ...

        assert len(_walk(Order)) == 1

    def test_three_parameters_accepted(self) -> None:
        class Order:
            def save(self, request, response, next): ...

        assert len(_walk(Order)) == 1


class TestMiddleware:
    def test_body_parsers_on_body_verbs_only(self) -> None:
        class Order:
            @http.get()
            @http.post()
            @route.middleware(_mw)
            def save(self): ...

        session = BuildSession(RoutingConfig())
        walk_export(session, classify(Order, "o.py"), source="o.py", directory_prefix="/", file_name="order")
        get, post = session.routes
        assert get.middleware == (_mw,)
        assert post.middleware == (*session.body_parsers, _mw)

    def test_body_parser_disabled(self) -> None:
        class Order:
            @http.post()
            def save(self): ...

        (post,) = _walk(Order, RoutingConfig(disable_body_parser=True))
        assert post.middleware == ()

    def test_upload_replaces_body_parsers(self) -> None:
        class Order:
            @http.post()
            @route.file_upload(2048)
            def image(self): ...

        (post,) = _walk(Order)
        assert len(post.middleware) == 1
        assert post.middleware[0].file_size_limit == 2048

    def test_upload_parser_shared_by_limit(self) -> None:
        class Order:
            @http.post()
            @route.file_upload(2048)
            def a(self): ...

            @http.put()
            @route.file_upload(2048)
            def b(self): ...

        first, second = _walk(Order)
        assert first.middleware[0] is second.middleware[0]

    def test_upload_default_limit(self) -> None:
        class Order:
            @http.post()
            @route.file_upload()
            def image(self): ...

        (post,) = _walk(Order)
        assert post.middleware[0].file_size_limit == 10_485_760

    def test_upload_without_body_verb(self) -> None:
        class Order:
            @http.get()
            @route.file_upload(10)
            def image(self): ...

        with pytest.raises(RouteDefinitionError) as exc_info:
            _walk(Order)
        assert "all, delete, patch, post or put" in str(exc_info.value)

    def test_upload_while_disabled(self) -> None:
        class Order:
            @http.post()
            @route.file_upload(10)
            def image(self): ...

        with pytest.raises(RouteDefinitionError) as exc_info:
            _walk(Order, RoutingConfig(disable_file_upload=True))
        assert "disable_file_upload" in str(exc_info.value)


class TestOtherExports:
    def test_function_attributes(self) -> None:
        def order(): ...

        def m1(request, response): ...

        order.m1 = m1
        assert _pairs(_walk(order)) == [("get", "/order/m1")]

    def test_plain_object(self) -> None:
        class Handlers:
            def m1(self): ...

            @staticmethod
            def m2(): ...

        assert _pairs(_walk(Handlers())) == [("get", "/order/m1"), ("get", "/order/m2")]


class TestMembers:
    def test_static_members_shadowing(self) -> None:
        class Base:
            @staticmethod
            def a(): ...

        class Child(Base):
            def a(self): ...

        assert static_members(Child) == []

    def test_object_members_instance_attributes_first(self) -> None:
        class Handlers:
            def m1(self): ...

        obj = Handlers()
        obj.extra = lambda: None
        assert [m.name for m in object_members(obj)] == ["extra", "m1"]


class TestEntityPrefix:
    def test_override_beats_class_names(self) -> None:
        @route.class_name("custom")
        class Order: ...

        session = BuildSession(RoutingConfig(use_class_names_as_routes=True))
        assert entity_prefix(session, Order, directory_prefix="/", file_name="f") == "/custom/"



class TestIndexFolding:
    def test_index_class_and_method_any_case(self) -> None:
        @route.class_name("INDEX")
        class Order:
            def Index(self): ...

            @route.method_name("iNdEx")
            @http.post()
            def save(self): ...

        assert sorted(_pairs(_walk(Order, prefix="/api/"))) == [
            ("get", "/api"),
            ("post", "/api"),
        ]

    def test_index_method_under_full_class_route(self) -> None:
        @route.full_class_route("/shop/orders")
        class Order:
            def index(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/shop/orders")]

    def test_index_method_under_class_name(self) -> None:
        @route.class_name("orders")
        class Order:
            def INDEX(self): ...

        config = RoutingConfig(use_class_names_as_routes=True)
        assert _pairs(_walk(Order, config, prefix="/api/")) == [("get", "/api/orders")]

    def test_method_name_on_index_method(self) -> None:
        @route.full_class_route("/shop")
        class Order:
            @route.method_name("list")
            def index(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/shop/list")]

    def test_full_method_route_on_index_method(self) -> None:
        @route.class_name("orders")
        class Order:
            @route.full_method_route("/all-orders")
            def index(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/all-orders")]

    def test_empty_full_method_route_on_index_method(self) -> None:
        @route.full_class_route("/shop")
        class Order:
            @route.full_method_route("")
            def index(self): ...

        assert _pairs(_walk(Order, prefix="/api/")) == [("get", "/shop")]

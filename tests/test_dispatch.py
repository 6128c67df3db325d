"""Tests for wayfinder.dispatch — page, layout, API, and metadata resolution."""

import logging

import pytest

from wayfinder.config import RouterConfig
from wayfinder.dispatch import Dispatcher, PageResult
from wayfinder.errors import MethodNotAllowed, NotFound
from wayfinder.http.response import NO_CONTENT, Response
from wayfinder.metadata import Metadata
from wayfinder.routing.registry import RouteRegistry


def _page(label: str):
    async def handler(params: dict[str, str]) -> str:
        suffix = ",".join(f"{k}={v}" for k, v in params.items())
        return f"{label}({suffix})"

    return handler


def _wrap(label: str):
    async def layout(content: str, path: str) -> str:
        return f"<{label} path={path}>{content}</{label}>"

    return layout


def _dispatcher(config: RouterConfig | None = None) -> Dispatcher:
    registry = RouteRegistry(config)
    registry.register_route("/", _page("home"))
    registry.register_route("/admin", _page("admin"))
    registry.register_route("/:slug", _page("slug"))
    registry.register_route("/:slug/nested", _page("nested"))
    return Dispatcher(registry)


class TestResolvePage:
    @pytest.mark.asyncio
    async def test_literal_beats_param(self) -> None:
        page = await _dispatcher().resolve_page(["admin"])
        assert page is not None
        assert page.content == "admin()"
        assert page.route_pattern == "/admin"

    @pytest.mark.asyncio
    async def test_nested_param(self) -> None:
        page = await _dispatcher().resolve_page(["x", "nested"])
        assert page is not None
        assert page.content == "nested(slug=x)"
        assert page.params == {"slug": "x"}
        assert page.path == "/x/nested"

    @pytest.mark.asyncio
    async def test_root(self) -> None:
        page = await _dispatcher().resolve_page([])
        assert page is not None
        assert page.content == "home()"

    @pytest.mark.asyncio
    async def test_none_segments_is_root(self) -> None:
        page = await _dispatcher().resolve_page(None)
        assert page is not None
        assert page.route_pattern == "/"

    @pytest.mark.asyncio
    async def test_favicon_is_no_content(self) -> None:
        assert await _dispatcher().resolve_page(["favicon.ico"]) is None

    @pytest.mark.asyncio
    async def test_custom_reserved_paths(self) -> None:
        registry = RouteRegistry(RouterConfig(reserved_paths=("/robots.txt",)))
        registry.register_route("/:slug", _page("slug"))
        dispatcher = Dispatcher(registry)
        assert await dispatcher.resolve_page(["robots.txt"]) is None
        page = await dispatcher.resolve_page(["favicon.ico"])
        assert page is not None

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        with pytest.raises(NotFound) as exc_info:
            await _dispatcher().resolve_page(["a", "b", "c"])
        assert exc_info.value.status == 404
        assert "/a/b/c" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_sync_handler(self) -> None:
        registry = RouteRegistry()
        registry.register_route("/sync", lambda params: "sync page")
        page = await Dispatcher(registry).resolve_page(["sync"])
        assert page is not None
        assert page.content == "sync page"

    @pytest.mark.asyncio
    async def test_request_context_passed_when_accepted(self) -> None:
        seen: list[object] = []

        def handler(params: dict[str, str], request: object) -> str:
            seen.append(request)
            return "ok"

        registry = RouteRegistry()
        registry.register_route("/r", handler)
        await Dispatcher(registry).resolve_page(["r"], request="the-request")
        assert seen == ["the-request"]

    @pytest.mark.asyncio
    async def test_page_skips_api_routes(self) -> None:
        registry = RouteRegistry()
        registry.register_route("/hook", lambda params: Response("api"), "api")
        with pytest.raises(NotFound):
            await Dispatcher(registry).resolve_page(["api", "hook"])

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self) -> None:
        async def broken(params: dict[str, str]) -> str:
            raise ValueError("boom")

        registry = RouteRegistry()
        registry.register_route("/broken", broken)
        with pytest.raises(ValueError, match="boom"):
            await Dispatcher(registry).resolve_page(["broken"])

    @pytest.mark.asyncio
    async def test_handler_cannot_mutate_match(self) -> None:
        def mutating(params: dict[str, str]) -> str:
            params["slug"] = "changed"
            return "ok"

        registry = RouteRegistry()
        registry.register_route("/:slug", mutating)
        page = await Dispatcher(registry).resolve_page(["x"])
        assert page is not None
        assert page.params == {"slug": "x"}


class TestResolveLayoutFor:
    def _with_layouts(self) -> Dispatcher:
        dispatcher = _dispatcher()
        dispatcher.registry.register_layout("/*", _wrap("site"))
        dispatcher.registry.register_layout("/admin/*", _wrap("admin"))
        return dispatcher

    @pytest.mark.asyncio
    async def test_no_layout_passes_through(self) -> None:
        content = object()
        assert await _dispatcher().resolve_layout_for(["anything"], content) is content

    @pytest.mark.asyncio
    async def test_most_specific_layout(self) -> None:
        html = await self._with_layouts().resolve_layout_for(["admin", "x"], "body")
        assert html == "<admin path=/admin/x>body</admin>"

    @pytest.mark.asyncio
    async def test_falls_back_to_root_wildcard(self) -> None:
        html = await self._with_layouts().resolve_layout_for(["blog"], "body")
        assert html == "<site path=/blog>body</site>"

    @pytest.mark.asyncio
    async def test_path_from_page_result(self) -> None:
        dispatcher = self._with_layouts()
        page = await dispatcher.resolve_page(["admin"])
        assert page is not None
        html = await dispatcher.resolve_layout_for(None, page.content, page=page)
        assert html == "<admin path=/admin>admin()</admin>"

    @pytest.mark.asyncio
    async def test_segments_win_over_page(self) -> None:
        dispatcher = self._with_layouts()
        page = await dispatcher.resolve_page(["admin"])
        html = await dispatcher.resolve_layout_for(["blog"], "body", page=page)
        assert html == "<site path=/blog>body</site>"

    @pytest.mark.asyncio
    async def test_applies_to_unrouted_paths(self) -> None:
        html = await self._with_layouts().resolve_layout_for(["admin", "a", "b", "c"], "x")
        assert html.startswith("<admin")

    @pytest.mark.asyncio
    async def test_sync_layout_handler(self) -> None:
        dispatcher = _dispatcher()
        dispatcher.registry.register_layout("/*", lambda content, path: f"[{content}]")
        assert await dispatcher.resolve_layout_for([], "x") == "[x]"


class TestResolveLayoutChainFor:
    @pytest.mark.asyncio
    async def test_wraps_innermost_first(self) -> None:
        dispatcher = _dispatcher()
        dispatcher.registry.register_layout("/admin/*", _wrap("admin"))
        dispatcher.registry.register_layout("/*", _wrap("site"))
        html = await dispatcher.resolve_layout_chain_for(["admin"], "body")
        assert html == "<site path=/admin><admin path=/admin>body</admin></site>"

    @pytest.mark.asyncio
    async def test_empty_chain_passes_through(self) -> None:
        assert await _dispatcher().resolve_layout_chain_for(["x"], "body") == "body"


class TestRender:
    @pytest.mark.asyncio
    async def test_page_with_innermost_layout(self) -> None:
        dispatcher = _dispatcher()
        dispatcher.registry.register_layout("/*", _wrap("site"))
        dispatcher.registry.register_layout("/admin/*", _wrap("admin"))
        assert await dispatcher.render(["admin"]) == "<admin path=/admin>admin()</admin>"

    @pytest.mark.asyncio
    async def test_nested_layouts(self) -> None:
        dispatcher = _dispatcher(RouterConfig(nest_layouts=True))
        dispatcher.registry.register_layout("/*", _wrap("site"))
        dispatcher.registry.register_layout("/admin/*", _wrap("admin"))
        html = await dispatcher.render(["admin"])
        assert html == "<site path=/admin><admin path=/admin>admin()</admin></site>"

    @pytest.mark.asyncio
    async def test_reserved_path(self) -> None:
        assert await _dispatcher().render(["favicon.ico"]) is None

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        with pytest.raises(NotFound):
            await _dispatcher().render(["a", "b", "c"])


class TestResolveApiRequest:
    def _api(self) -> Dispatcher:
        registry = RouteRegistry()

        async def webhook(params: dict[str, str], request: object) -> Response:
            return Response(f"hook via {request}")

        def get_item(params: dict[str, str]) -> Response:
            return Response.json({"id": params["id"]})

        def delete_item(params: dict[str, str]) -> object:
            return NO_CONTENT

        def broken(params: dict[str, str]) -> object:
            return {"not": "a response"}

        registry.register_route("/billing/webhook", webhook, "api", "POST")
        registry.register_route("/items/:id", get_item, "api")
        registry.register_route("/items/:id", delete_item, "api", "DELETE")
        registry.register_route("/broken", broken, "api")
        return Dispatcher(registry)

    @pytest.mark.asyncio
    async def test_response_passes_through(self) -> None:
        response = await self._api().resolve_api_request(
            ["billing", "webhook"], "POST", request="req"
        )
        assert response.status == 200
        assert response.text == "hook via req"

    @pytest.mark.asyncio
    async def test_params(self) -> None:
        response = await self._api().resolve_api_request(["items", "42"], "get")
        assert response.content_type == "application/json"
        assert response.text == '{"id": "42"}'

    @pytest.mark.asyncio
    async def test_picks_route_by_method(self) -> None:
        response = await self._api().resolve_api_request(["items", "42"], "DELETE")
        assert response.status == 204
        assert response.body == ""

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        with pytest.raises(NotFound) as exc_info:
            await self._api().resolve_api_request(["nothing"], "GET")
        assert not isinstance(exc_info.value, MethodNotAllowed)

    @pytest.mark.asyncio
    async def test_method_mismatch_is_not_found(self) -> None:
        with pytest.raises(NotFound) as exc_info:
            await self._api().resolve_api_request(["billing", "webhook"], "GET")
        err = exc_info.value
        assert isinstance(err, MethodNotAllowed)
        assert err.status == 405
        assert err.allowed == frozenset({"POST"})

    @pytest.mark.asyncio
    async def test_page_routes_not_reachable(self) -> None:
        dispatcher = _dispatcher()
        with pytest.raises(NotFound):
            await dispatcher.resolve_api_request(["admin"], "GET")

    @pytest.mark.asyncio
    async def test_malformed_result_becomes_500(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wayfinder.dispatch"):
            response = await self._api().resolve_api_request(["broken"], "GET")
        assert response.status == 500
        assert "not a Response" in caplog.text

    @pytest.mark.asyncio
    async def test_none_is_malformed(self) -> None:
        registry = RouteRegistry()
        registry.register_route("/none", lambda params: None, "api")
        response = await Dispatcher(registry).resolve_api_request(["none"], "GET")
        assert response.status == 500


class TestRegistryConfig:
    @pytest.mark.asyncio
    async def test_api_prefix_follows_registry(self) -> None:
        registry = RouteRegistry(RouterConfig(api_prefix="rpc"))
        registry.register_route("/ping", lambda params: Response("pong"), "api")
        dispatcher = Dispatcher(registry)
        assert registry.routes[0].path == "/rpc/ping"
        response = await dispatcher.resolve_api_request(["ping"], "GET")
        assert response.text == "pong"

    @pytest.mark.asyncio
    async def test_reserved_paths_follow_registry(self) -> None:
        registry = RouteRegistry(RouterConfig(reserved_paths=("/robots.txt",)))
        registry.register_route("/:slug", _page("slug"))
        dispatcher = Dispatcher(registry)
        assert dispatcher.is_reserved("/robots.txt")
        assert not dispatcher.is_reserved("/favicon.ico")

    def test_rejects_separate_config(self) -> None:
        with pytest.raises(TypeError):
            Dispatcher(RouteRegistry(), RouterConfig(api_prefix="rpc"))  # type: ignore[call-arg]


class TestResolveMetadata:
    @pytest.mark.asyncio
    async def test_producer_with_params(self) -> None:
        registry = RouteRegistry()
        registry.register_route(
            "/:slug",
            _page("slug"),
            metadata=lambda params: Metadata(title=params["slug"].title()),
        )
        meta = await Dispatcher(registry).resolve_metadata(["hello"])
        assert meta.title == "Hello"

    @pytest.mark.asyncio
    async def test_async_producer_returning_mapping(self) -> None:
        async def produce(params: dict[str, str]) -> dict[str, object]:
            return {"title": "Test", "keywords": "a, b", "robots": "noindex"}

        registry = RouteRegistry()
        registry.register_route("/", _page("home"), metadata=produce)
        meta = await Dispatcher(registry).resolve_metadata([])
        assert meta.title == "Test"
        assert meta.keywords == ("a", "b")
        assert meta.extra == {"robots": "noindex"}

    @pytest.mark.asyncio
    async def test_no_route_is_empty(self) -> None:
        meta = await _dispatcher().resolve_metadata(["a", "b", "c"])
        assert meta == Metadata()
        assert meta.is_empty

    @pytest.mark.asyncio
    async def test_no_producer_is_empty(self) -> None:
        assert (await _dispatcher().resolve_metadata(["admin"])).is_empty

    @pytest.mark.asyncio
    async def test_reserved_path_is_empty(self) -> None:
        assert (await _dispatcher().resolve_metadata(["favicon.ico"])).is_empty

    @pytest.mark.asyncio
    async def test_failing_producer_is_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(params: dict[str, str]) -> Metadata:
            raise RuntimeError("db down")

        registry = RouteRegistry()
        registry.register_route("/", _page("home"), metadata=broken)
        with caplog.at_level(logging.ERROR, logger="wayfinder.dispatch"):
            meta = await Dispatcher(registry).resolve_metadata([])
        assert meta.is_empty
        assert "Metadata producer for / failed" in caplog.text

    @pytest.mark.asyncio
    async def test_malformed_mapping_is_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = RouteRegistry()
        registry.register_route(
            "/", _page("home"), metadata=lambda params: {"title": "T", "keywords": 5}
        )
        with caplog.at_level(logging.ERROR, logger="wayfinder.dispatch"):
            meta = await Dispatcher(registry).resolve_metadata([])
        assert meta.is_empty
        assert "Metadata producer for / failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unusable_result_is_empty(self) -> None:
        registry = RouteRegistry()
        registry.register_route("/", _page("home"), metadata=lambda params: 42)
        assert (await Dispatcher(registry).resolve_metadata([])).is_empty


class TestPageResult:
    @pytest.mark.asyncio
    async def test_is_an_explicit_value(self) -> None:
        dispatcher = _dispatcher()
        first = await dispatcher.resolve_page(["admin"])
        second = await dispatcher.resolve_page(["x"])
        assert isinstance(first, PageResult)
        assert first.route_pattern == "/admin"
        assert second is not None and second.route_pattern == "/:slug"

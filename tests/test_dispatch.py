"""
Test suite for request dispatch.
Tests chain execution order, short-circuiting, the onion wrap-around of
middleware, path parameter binding and the dispatch errors.
"""

import pytest

from routechain import (
    ChainRunner,
    MalformedURL,
    NoRegexMatch,
    Request,
    Response,
    Route,
    RouteNotFound,
    Router,
)


def make_request(url, method="GET"):
    return Request(method, url)


class TestChainRunner:
    """Test the ChainRunner cursor."""

    @pytest.mark.asyncio
    async def test_runs_in_order_while_continued(self):
        calls = []

        async def first(request, response, next):
            calls.append("first")
            await next()

        async def second(request, response, next):
            calls.append("second")
            await next()

        async def third(request, response, next):
            calls.append("third")
            await next()

        runner = ChainRunner([first, second, third], make_request("/"), Response())
        await runner.run()

        assert calls == ["first", "second", "third"]
        assert runner.cursor == 3

    @pytest.mark.asyncio
    async def test_stops_when_a_handler_does_not_continue(self):
        calls = []

        async def first(request, response, next):
            calls.append("first")

        async def second(request, response, next):
            calls.append("second")

        runner = ChainRunner([first, second], make_request("/"), Response())
        await runner.run()

        assert calls == ["first"]
        assert runner.cursor == 0

    @pytest.mark.asyncio
    async def test_two_argument_handler_is_terminal(self):
        calls = []

        def sync_handler(request, response):
            calls.append("sync")

        async def never_reached(request, response):
            calls.append("never")

        await ChainRunner([sync_handler, never_reached], make_request("/"), Response()).run()
        assert calls == ["sync"]

    @pytest.mark.asyncio
    async def test_sync_handlers_can_continue(self):
        calls = []

        def sync_middleware(request, response, next):
            calls.append("sync")
            return next()

        async def handler(request, response):
            calls.append("async")

        await ChainRunner([sync_middleware, handler], make_request("/"), Response()).run()
        assert calls == ["sync", "async"]

    @pytest.mark.asyncio
    async def test_sync_handler_calling_next_without_returning_it(self):
        calls = []

        def sync_middleware(request, response, next):
            calls.append("sync")
            next()
            calls.append("sync done")

        async def handler(request, response):
            calls.append("async")

        runner = ChainRunner([sync_middleware, handler], make_request("/"), Response())
        await runner.run()

        assert calls == ["sync", "sync done", "async"]
        assert runner.cursor == 1

    @pytest.mark.asyncio
    async def test_sync_handlers_continue_through_a_whole_chain(self):
        calls = []

        def first(request, response, next):
            calls.append("first")
            next()

        def second(request, response, next):
            calls.append("second")
            next()

        def last(request, response):
            response.text("done")
            calls.append("last")

        response = Response()
        await ChainRunner([first, second, last], make_request("/"), response).run()

        assert calls == ["first", "second", "last"]
        assert response.body == b"done"

    @pytest.mark.asyncio
    async def test_sync_handler_error_after_next_stops_the_chain(self):
        calls = []

        def failing(request, response, next):
            next()
            raise RuntimeError("after next")

        async def handler(request, response):
            calls.append("handler")

        with pytest.raises(RuntimeError, match="after next"):
            await ChainRunner([failing, handler], make_request("/"), Response()).run()
        assert calls == []

    @pytest.mark.asyncio
    async def test_onion_wrap_around(self):
        calls = []

        async def outer(request, response, next):
            calls.append("outer before")
            await next()
            calls.append("outer after")

        async def inner(request, response, next):
            calls.append("inner before")
            await next()
            calls.append("inner after")

        async def handler(request, response):
            calls.append("handler")

        await ChainRunner([outer, inner, handler], make_request("/"), Response()).run()
        assert calls == [
            "outer before",
            "inner before",
            "handler",
            "inner after",
            "outer after",
        ]

    @pytest.mark.asyncio
    async def test_continuing_past_the_end_is_a_no_op(self):
        async def last(request, response, next):
            await next()
            await next()

        runner = ChainRunner([last], make_request("/"), Response())
        await runner.run()
        assert runner.cursor == 2

    @pytest.mark.asyncio
    async def test_empty_chain(self):
        runner = ChainRunner([], make_request("/"), Response())
        await runner.run()
        assert runner.cursor == 0


class TestRouteDispatch:
    """Test Route.dispatch."""

    @pytest.mark.asyncio
    async def test_binds_named_parameters(self):
        seen = {}

        async def handler(request, response):
            seen.update(request.params)

        route = Route("GET", "/:foo/:fighters", handler)
        await route.dispatch(make_request("/hello/world"), Response())

        assert seen == {"foo": "hello", "fighters": "world"}
        assert list(seen) == ["foo", "fighters"]

    @pytest.mark.asyncio
    async def test_bound_parameters_overwrite_existing_keys(self):
        request = make_request("/users/42")
        request.params["id"] = "stale"
        request.params["other"] = "kept"

        async def handler(request, response):
            pass

        await Route("GET", "/users/:id", handler).dispatch(request, Response())
        assert request.params == {"id": "42", "other": "kept"}

    @pytest.mark.asyncio
    async def test_absent_optional_parameter_is_not_bound(self):
        request = make_request("/posts")

        async def handler(request, response):
            pass

        await Route("GET", "/posts/:page?", handler).dispatch(request, Response())
        assert request.params == {}

    @pytest.mark.asyncio
    async def test_query_string_is_ignored_for_matching(self):
        request = make_request("/users/42?expand=posts")

        async def handler(request, response):
            response.text(request.params["id"])

        response = Response()
        await Route("GET", "/users/:id", handler).dispatch(request, response)
        assert response.body == b"42"

    @pytest.mark.asyncio
    async def test_malformed_url(self):
        async def handler(request, response):
            pass

        with pytest.raises(MalformedURL) as exc_info:
            await Route("GET", "/foo", handler).dispatch(make_request(None), Response())
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_no_regex_match(self):
        async def handler(request, response):
            pass

        with pytest.raises(NoRegexMatch) as exc_info:
            await Route("GET", "/foo", handler).dispatch(make_request("/bar"), Response())
        assert exc_info.value.kind == "NoRegexMatch"


class TestRouterHandle:
    """Test Router.handle end to end."""

    @pytest.mark.asyncio
    async def test_handle_runs_matching_route(self):
        router = Router()

        @router.route("GET", "/:foo/:fighters")
        async def greet(request, response):
            response.json(request.params)

        response = Response()
        await router.handle(make_request("/hello/world"), response)

        assert response.status_code == 200
        assert response.body == b'{"foo": "hello", "fighters": "world"}'

    @pytest.mark.asyncio
    async def test_handle_uses_absolute_urls(self):
        router = Router()

        async def handler(request, response):
            response.text("ok")

        router.get("/foo", handler)
        response = Response()
        await router.handle(make_request("http://example.com//foo/?a=1"), response)
        assert response.body == b"ok"

    @pytest.mark.asyncio
    async def test_route_not_found_carries_method_and_path(self):
        router = Router()

        async def handler(request, response):
            pass

        router.get("/foo", handler)

        with pytest.raises(RouteNotFound) as exc_info:
            await router.handle(make_request("/bar", method="POST"), Response())

        assert exc_info.value.method == "POST"
        assert exc_info.value.path == "/bar"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method_is_not_found(self):
        router = Router()

        async def handler(request, response):
            pass

        router.get("/foo", handler)
        with pytest.raises(RouteNotFound):
            await router.handle(make_request("/foo", method="DELETE"), Response())

    @pytest.mark.asyncio
    async def test_malformed_url(self):
        router = Router()
        with pytest.raises(MalformedURL):
            await router.handle(make_request(""), Response())

    @pytest.mark.asyncio
    async def test_middleware_short_circuits(self):
        calls = []
        router = Router()

        async def deny(request, response, next):
            calls.append("deny")
            response.text("forbidden", status_code=403)

        async def handler(request, response):
            calls.append("handler")

        router.use_middleware(deny)
        router.get("/secret", handler)

        response = Response()
        await router.handle(make_request("/secret"), response)

        assert calls == ["deny"]
        assert response.status_code == 403
        assert response.body == b"forbidden"

    @pytest.mark.asyncio
    async def test_middleware_runs_before_handlers(self):
        router = Router()

        async def stamp(request, response, next):
            request.extensions.user = "ada"
            await next()

        async def handler(request, response):
            response.text(request.extensions.user)

        router.use_middleware(stamp)
        router.get("/me", handler)

        response = Response()
        await router.handle(make_request("/me"), response)
        assert response.body == b"ada"

    @pytest.mark.asyncio
    async def test_middleware_decorates_after_continuation(self):
        router = Router()

        async def add_header(request, response, next):
            await next()
            response.headers["x-wrapped"] = "yes"

        async def handler(request, response):
            response.write("partial")

        router.use_middleware(add_header)
        router.get("/foo", handler)

        response = Response()
        await router.handle(make_request("/foo"), response)
        assert response.get_header("x-wrapped") == "yes"
        assert response.body == b"partial"

    @pytest.mark.asyncio
    async def test_handler_errors_propagate_unchanged(self):
        router = Router()
        error = RuntimeError("boom")

        async def handler(request, response):
            raise error

        router.get("/boom", handler)

        with pytest.raises(RuntimeError) as exc_info:
            await router.handle(make_request("/boom"), Response())
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_errors_pass_through_middleware(self):
        calls = []
        router = Router()

        async def wrapper(request, response, next):
            calls.append("before")
            await next()
            calls.append("after")

        async def handler(request, response):
            raise ValueError("bad value")

        router.use_middleware(wrapper)
        router.get("/boom", handler)

        with pytest.raises(ValueError, match="bad value"):
            await router.handle(make_request("/boom"), Response())
        assert calls == ["before"]

    @pytest.mark.asyncio
    async def test_subrouter_dispatch(self):
        calls = []
        sub_router = Router()

        async def foo(request, response):
            calls.append("foo")

        async def fighter(request, response):
            calls.append("fighter")

        sub_router.get("/foo", foo)
        sub_router.get("/fighter", fighter)

        router = Router()
        router.use_subrouter("/second", sub_router)

        await router.handle(make_request("/second/foo"), Response())
        await router.handle(make_request("/second/fighter"), Response())
        assert calls == ["foo", "fighter"]

    @pytest.mark.asyncio
    async def test_merged_chain_runs_all_handlers(self):
        calls = []
        router = Router()

        async def first(request, response, next):
            calls.append("first")
            await next()

        async def second(request, response):
            calls.append("second")

        router.get("/foo", first)
        router.get("/foo", second)

        await router.handle(make_request("/foo"), Response())
        assert calls == ["first", "second"]

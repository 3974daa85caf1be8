"""
Tests for context resolution.

Tests ContextResolver, filter_empty, RequestContext adapters and the
current-request storage.
"""

from types import SimpleNamespace

import requests

from fanout_logger.core.context import (
    ContextResolver,
    RequestContext,
    clear_current_request,
    filter_empty,
    get_current_request,
    is_empty,
    merge_layers,
    normalize_context,
    set_current_request,
)


class TestFilterEmpty:
    """Tests for emptiness rule."""

    def test_numeric_zero_retained(self):
        """Empty string/array dropped, numeric zero kept."""
        assert filter_empty({"a": "", "b": 0, "c": []}) == {"b": 0}

    def test_none_and_empty_mappings_dropped(self):
        assert filter_empty({"a": None, "b": {}, "c": (), "d": set()}) == {}

    def test_false_and_float_zero_retained(self):
        assert filter_empty({"flag": False, "ratio": 0.0}) == {"flag": False, "ratio": 0.0}

    def test_objects_are_not_empty(self):
        marker = object()
        assert not is_empty(marker)

    def test_preserves_order(self):
        assert list(filter_empty({"z": 1, "a": "", "m": 2})) == ["z", "m"]


class TestMerge:
    """Tests for layered merge helpers."""

    def test_string_context_normalized(self):
        assert normalize_context("UsersService") == {"context": "UsersService"}

    def test_none_context_normalized(self):
        assert normalize_context(None) == {}

    def test_merge_is_right_biased(self):
        assert merge_layers({"a": 1}, {"a": 2}) == {"a": 2}

    def test_merge_never_deep_merges(self):
        merged = merge_layers({"user": {"id": 1, "name": "x"}}, {"user": {"id": 2}})

        assert merged == {"user": {"id": 2}}


class TestContextResolver:
    """Tests for ContextResolver."""

    def test_call_context_wins(self):
        resolver = ContextResolver({"a": 1})

        assert resolver.resolve({"a": 2}) == {"a": 2}

    def test_emptiness_filter_applied(self):
        resolver = ContextResolver({"a": "", "b": 0, "c": []})

        assert resolver.resolve() == {"b": 0}

    def test_static_string_context(self):
        resolver = ContextResolver("billing-api")

        assert resolver.resolve() == {"context": "billing-api"}

    def test_call_string_overrides_context_name(self):
        resolver = ContextResolver("billing-api")

        assert resolver.resolve("InvoiceService") == {"context": "InvoiceService"}

    def test_static_callable_receives_request(self):
        """Callable static context gets the raw request object."""
        seen = []

        def static(request):
            seen.append(request)
            return {"tenant": request.tenant}

        request = SimpleNamespace(tenant="acme", method="GET")
        resolved = ContextResolver(static).resolve(request=request)

        assert seen == [request]
        assert resolved["tenant"] == "acme"
        assert resolved["method"] == "GET"

    def test_static_callable_without_request_gets_empty_request(self):
        seen = []
        ContextResolver(lambda request: seen.append(request) or {}).resolve()

        assert seen == [RequestContext()]

    def test_static_callable_returning_none(self):
        assert ContextResolver(lambda request: None).resolve({"a": 1}) == {"a": 1}

    def test_request_fields_added(self):
        request = RequestContext(
            ip="10.0.0.1",
            user_agent="curl/8.0",
            method="POST",
            url="/orders?page=2",
            query={"page": "2"},
            body={"sku": "A-1"},
        )

        resolved = ContextResolver().resolve(request=request)

        assert resolved == {
            "ip": "10.0.0.1",
            "ua": "curl/8.0",
            "method": "POST",
            "url": "/orders?page=2",
            "query": {"page": "2"},
            "body": {"sku": "A-1"},
        }

    def test_precedence_static_request_call(self):
        """static < request-derived < call-supplied."""
        resolver = ContextResolver({"method": "static", "ip": "static", "x": 1})
        request = RequestContext(ip="10.0.0.1", method="GET")

        resolved = resolver.resolve({"method": "call"}, request=request)

        assert resolved["method"] == "call"
        assert resolved["ip"] == "10.0.0.1"
        assert resolved["x"] == 1

    def test_missing_request_omits_request_fields(self):
        resolved = ContextResolver().resolve({"a": 1})

        assert resolved == {"a": 1}
        assert "ip" not in resolved


class TestRequestContextAdapters:
    """Tests for RequestContext constructors."""

    def test_from_environ(self):
        environ = {
            "REQUEST_METHOD": "GET",
            "SCRIPT_NAME": "",
            "PATH_INFO": "/users",
            "QUERY_STRING": "page=2&tag=a&tag=b",
            "REMOTE_ADDR": "127.0.0.1",
            "HTTP_USER_AGENT": "pytest",
        }

        request = RequestContext.from_environ(environ)

        assert request.method == "GET"
        assert request.url == "/users?page=2&tag=a&tag=b"
        assert request.query == {"page": "2", "tag": ["a", "b"]}
        assert request.ip == "127.0.0.1"
        assert request.user_agent == "pytest"

    def test_from_environ_prefers_forwarded_for(self):
        environ = {
            "REQUEST_METHOD": "GET",
            "PATH_INFO": "/",
            "REMOTE_ADDR": "10.0.0.2",
            "HTTP_X_FORWARDED_FOR": "203.0.113.7, 10.0.0.1",
        }

        assert RequestContext.from_environ(environ).ip == "203.0.113.7"

    def test_from_prepared_request(self):
        prepared = requests.Request(
            "POST",
            "https://api.example.com/orders?dry_run=1",
            headers={"User-Agent": "client/1.0"},
            data=b"payload",
        ).prepare()

        request = RequestContext.from_prepared(prepared)

        assert request.method == "POST"
        assert request.url == "/orders?dry_run=1"
        assert request.query == {"dry_run": "1"}
        assert request.user_agent == "client/1.0"
        assert request.body == "payload"

    def test_from_any_duck_typed_object(self):
        request = SimpleNamespace(
            remote_addr="10.0.0.3",
            headers={"User-Agent": "browser"},
            method="DELETE",
            path="/items/1",
            args={"force": "true"},
        )

        adapted = RequestContext.from_any(request)

        assert adapted.ip == "10.0.0.3"
        assert adapted.user_agent == "browser"
        assert adapted.method == "DELETE"
        assert adapted.url == "/items/1"
        assert adapted.query == {"force": "true"}

    def test_from_any_mapping(self):
        adapted = RequestContext.from_any({"ip": "10.0.0.4", "ua": "x", "method": "GET"})

        assert adapted.ip == "10.0.0.4"
        assert adapted.user_agent == "x"

    def test_from_any_environ_mapping(self):
        adapted = RequestContext.from_any({"REQUEST_METHOD": "PUT", "PATH_INFO": "/a"})

        assert adapted.method == "PUT"
        assert adapted.url == "/a"

    def test_from_any_json_fallback(self):
        adapted = RequestContext.from_any(SimpleNamespace(method="POST", json={"sku": "A-1"}))

        assert adapted.body == {"sku": "A-1"}

    def test_from_any_body_preferred_over_json(self):
        adapted = RequestContext.from_any({"body": "raw", "json": {"a": 1}})

        assert adapted.body == "raw"

    def test_from_any_json_property_raising(self):
        class NonJsonRequest:
            method = "POST"

            @property
            def json(self):
                raise ValueError("not a JSON body")

        assert RequestContext.from_any(NonJsonRequest()).body is None

    def test_from_any_get_json_called_silently(self):
        calls = []

        class FlaskLikeRequest:
            method = "POST"

            def get_json(self, silent=False):
                calls.append(silent)
                return {"id": 7}

        assert RequestContext.from_any(FlaskLikeRequest()).body == {"id": 7}
        assert calls == [True]

    def test_from_any_passthrough(self):
        request = RequestContext(ip="1.2.3.4")

        assert RequestContext.from_any(request) is request


class TestCurrentRequest:
    """Tests for current-request storage."""

    def test_set_and_get(self):
        request = RequestContext(method="GET")
        set_current_request(request)

        assert get_current_request() is request

    def test_clear(self):
        set_current_request(RequestContext(method="GET"))
        clear_current_request()

        assert get_current_request() is None

"""
Tests for the Starlette content negotiation middleware.
"""

import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient


SUPPORTED = ["text/html", "application/json"]


async def echo_media_type(request):
    media_type = getattr(request.state, "media_type", None)
    return Response(media_type.get_value() if media_type else "")


def make_client(endpoint=echo_media_type, **options):
    from FastNegotiation import ContentNegotiationMiddleware

    options.setdefault("supported_types", SUPPORTED)
    app = Starlette(routes=[Route("/", endpoint), Route("/health", endpoint)])
    app.add_middleware(ContentNegotiationMiddleware, **options)
    return TestClient(app)


# ============== Content Negotiation ==============
class TestContentNegotiation:
    def test_selects_html_for_browser_accept(self):
        client = make_client(supply_default=True, add_content_type_header=True)

        response = client.get("/", headers={"Accept": "text/html;q=0.9,application/json;q=0.1"})

        assert response.status_code == 200
        assert response.text == "text/html"
        assert response.headers["content-type"] == "text/html"

    def test_selects_json_when_requested(self):
        client = make_client(supply_default=True, add_content_type_header=True)

        response = client.get("/", headers={"Accept": "application/json"})

        assert response.text == "application/json"
        assert response.headers["content-type"] == "application/json"

    def test_defaults_to_first_without_accept(self):
        client = make_client(supply_default=True)

        # TestClient sends "Accept: */*" unless told otherwise
        response = client.get("/", headers={"Accept": ""})

        assert response.status_code == 200
        assert response.text == "text/html"

    def test_missing_accept_without_default(self):
        client = make_client(supply_default=False)

        response = client.get("/", headers={"Accept": ""})

        assert response.status_code == 406

    def test_wildcard_accept(self):
        client = make_client()

        response = client.get("/", headers={"Accept": "*/*"})
        assert response.text == "text/html"

    def test_get_media_type_in_handler(self):
        from FastNegotiation import get_media_type

        async def homepage(request):
            return JSONResponse({"type": get_media_type().get_value()})

        client = make_client(endpoint=homepage)

        response = client.get("/", headers={"Accept": "application/json"})
        assert response.json() == {"type": "application/json"}

    def test_get_media_type_outside_request(self):
        from FastNegotiation import get_media_type

        assert get_media_type() is None


# ============== Not Acceptable ==============
class TestNotAcceptable:
    def test_unsupported_type_returns_406(self):
        calls = []

        async def homepage(request):
            calls.append(request)
            return PlainTextResponse("OK")

        client = make_client(endpoint=homepage, supply_default=False)

        response = client.get("/", headers={"Accept": "image/png"})

        assert response.status_code == 406
        assert response.content == b""
        assert "content-type" not in response.headers
        assert calls == []

    def test_unsupported_type_ignores_default(self):
        client = make_client(supply_default=True)

        response = client.get("/", headers={"Accept": "image/png"})
        assert response.status_code == 406

    def test_excluded_path_skips_negotiation(self):
        client = make_client(exclude_paths={"/health"})

        response = client.get("/health", headers={"Accept": "image/png"})

        assert response.status_code == 200
        assert response.text == ""


# ============== Response Headers ==============
class TestResponseHeaders:
    def test_content_type_not_added_when_disabled(self):
        client = make_client(supply_default=True, add_content_type_header=False)

        response = client.get("/", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert "content-type" not in response.headers

    def test_content_type_overwrites_handler_value(self):
        async def homepage(request):
            return PlainTextResponse("OK")

        client = make_client(endpoint=homepage, add_content_type_header=True)

        response = client.get("/", headers={"Accept": "text/html"})
        assert response.headers["content-type"] == "text/html"

    def test_vary_header(self):
        from FastNegotiation import ContentNegotiationConfig

        config = ContentNegotiationConfig(supported_types=SUPPORTED, add_vary_header=True)
        client = make_client(config=config, supported_types=None)

        response = client.get("/", headers={"Accept": "text/html"})
        assert response.headers["vary"] == "Accept"

    def test_vary_header_appends(self):
        from FastNegotiation import ContentNegotiationConfig

        async def homepage(request):
            return PlainTextResponse("OK", headers={"Vary": "Origin"})

        config = ContentNegotiationConfig(supported_types=SUPPORTED, add_vary_header=True)
        client = make_client(endpoint=homepage, config=config, supported_types=None)

        response = client.get("/", headers={"Accept": "text/html"})
        assert response.headers["vary"] == "Origin, Accept"

    def test_no_vary_header_by_default(self):
        client = make_client()

        response = client.get("/", headers={"Accept": "text/html"})
        assert "vary" not in response.headers


# ============== Edge Cases ==============
class TestContentNegotiationEdgeCases:
    def test_repeated_requests_do_not_share_state(self):
        client = make_client(supply_default=False)

        first = client.get("/", headers={"Accept": "application/json"})
        rejected = client.get("/", headers={"Accept": ""})
        second = client.get("/", headers={"Accept": "application/json"})

        assert first.text == second.text == "application/json"
        assert rejected.status_code == 406

    def test_handler_exception_propagates(self):
        async def homepage(request):
            raise RuntimeError("handler failed")

        client = make_client(endpoint=homepage)

        with pytest.raises(RuntimeError, match="handler failed"):
            client.get("/", headers={"Accept": "text/html"})

    def test_invalid_config_fails_at_startup(self):
        from FastNegotiation import ContentNegotiationMiddleware, NegotiationConfigError

        with pytest.raises(NegotiationConfigError):
            ContentNegotiationMiddleware(echo_media_type, supported_types=[], supply_default=True)

    def test_base_negotiation_config_rejected(self):
        from FastNegotiation import (
            ContentNegotiationMiddleware,
            NegotiationConfig,
            NegotiationConfigError,
        )

        config = NegotiationConfig(supported_types=SUPPORTED)

        with pytest.raises(NegotiationConfigError, match="ContentNegotiationConfig"):
            ContentNegotiationMiddleware(echo_media_type, config=config)

    def test_supported_types_normalized_in_response(self):
        client = make_client(
            supported_types=["Text/HTML", " application/json "], add_content_type_header=True
        )

        response = client.get("/", headers={"Accept": "text/html"})

        assert response.text == "text/html"
        assert response.headers["content-type"] == "text/html"

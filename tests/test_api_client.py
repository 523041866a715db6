"""Tests for the HTTP transport: auth header, error mapping, body decoding."""

import httpx
import pytest

from backoffice.shared.infrastructure.api.client import TRANSPORT_ERROR_MESSAGE, ApiError, extract_error_message


class TestAuthorizationHeader:

    @pytest.mark.asyncio
    async def test__request__bearer_header_when_token_present(self, backend, make_client) -> None:
        backend.routes["GET /admin/users"] = []
        client = make_client(token_provider=lambda: "T")

        await client.get("/admin/users")

        assert backend.last.headers["Authorization"] == "Bearer T"
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__no_header_without_token(self, backend, make_client) -> None:
        backend.routes["GET /admin/users"] = []
        client = make_client(token_provider=lambda: None)

        await client.get("/admin/users")

        assert "Authorization" not in backend.last.headers
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__token_read_at_send_time(self, backend, make_client) -> None:
        backend.routes["GET /reports"] = []
        token = {"value": None}
        client = make_client()
        client.set_token_provider(lambda: token["value"])

        await client.get("/reports")
        token["value"] = "fresh"
        await client.get("/reports")

        assert "Authorization" not in backend.requests[0].headers
        assert backend.requests[1].headers["Authorization"] == "Bearer fresh"
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__json_content_type(self, backend, make_client) -> None:
        backend.routes["POST /admin/announcements"] = {"success": True}
        client = make_client()

        await client.post("/admin/announcements", json={"title": "Hi"})

        assert backend.last.headers["Content-Type"] == "application/json"
        assert backend.body() == {"title": "Hi"}
        await client.aclose()


class TestResponses:

    @pytest.mark.asyncio
    async def test__request__decodes_json(self, backend, make_client) -> None:
        backend.routes["GET /admin/users"] = {"success": True, "data": [{"id": 1}]}
        client = make_client()

        assert await client.get("/admin/users") == {"success": True, "data": [{"id": 1}]}
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__empty_body_is_none(self, backend, make_client) -> None:
        backend.routes["DELETE /report/3"] = httpx.Response(204)
        client = make_client()

        assert await client.delete("/report/3") is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__query_params(self, backend, make_client) -> None:
        backend.routes["GET /block-status"] = {"blocked": False}
        client = make_client()

        await client.get("/block-status", params={"user_id": "1", "target_user_id": "2"})

        assert backend.last.url.params["user_id"] == "1"
        assert backend.last.url.params["target_user_id"] == "2"
        await client.aclose()


class TestErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["message", "error", "detail"])
    async def test__request__error_message_from_body(self, backend, make_client, field) -> None:
        backend.routes["POST /admin/users/5/ban"] = httpx.Response(400, json={field: "Nope"})
        client = make_client()

        with pytest.raises(ApiError) as exc_info:
            await client.post("/admin/users/5/ban")

        assert exc_info.value.message == "Nope"
        assert exc_info.value.status_code == 400
        assert exc_info.value.payload == {field: "Nope"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__non_json_error_uses_status_fallback(self, backend, make_client) -> None:
        backend.routes["GET /reports"] = httpx.Response(502, text="<html>Bad Gateway</html>")
        client = make_client()

        with pytest.raises(ApiError) as exc_info:
            await client.get("/reports")

        assert exc_info.value.message == "Request failed with status 502"
        assert str(exc_info.value) == "Request failed with status 502 (HTTP 502)"
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__transport_failure(self, make_client) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler=refuse)

        with pytest.raises(ApiError) as exc_info:
            await client.get("/admin/users")

        assert exc_info.value.message == TRANSPORT_ERROR_MESSAGE
        assert exc_info.value.status_code is None
        assert exc_info.value.is_transport_error is True
        await client.aclose()

    @pytest.mark.asyncio
    async def test__request__unknown_route_is_404(self, make_client) -> None:
        client = make_client()

        with pytest.raises(ApiError) as exc_info:
            await client.get("/nowhere")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not found"
        await client.aclose()


class TestExtractErrorMessage:

    def test__extract__prefers_message_over_error(self) -> None:
        response = httpx.Response(400, json={"error": "second", "message": "first"})
        assert extract_error_message(response)[0] == "first"

    def test__extract__ignores_non_string_detail(self) -> None:
        response = httpx.Response(422, json={"detail": [{"loc": ["body"], "msg": "field required"}]})
        message, payload = extract_error_message(response)

        assert message == "Request failed with status 422"
        assert payload == {"detail": [{"loc": ["body"], "msg": "field required"}]}

    def test__extract__blank_message_falls_back(self) -> None:
        response = httpx.Response(500, json={"message": "   "})
        assert extract_error_message(response)[0] == "Request failed with status 500"

"""Tests for the Gemini generateContent client."""

import json

import httpx
import pytest

from services.gemini_service import GeminiService
from utils.errors import AIServiceError, ContentBlockedError

SCHEMA = {"type": "OBJECT"}


def _service(handler, api_key="test-key"):
    return GeminiService(api_key=api_key, model="gemini-test", transport=httpx.MockTransport(handler))


def _answer(text, finish_reason="STOP"):
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}]}


class TestGenerateJson:

    @pytest.mark.asyncio
    async def test_returns_candidate_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_answer('{"ok": true}'))

        text = await _service(handler).generate_json("make a plan", SCHEMA)

        assert text == '{"ok": true}'
        assert seen["url"].path.endswith("/models/gemini-test:generateContent")
        assert seen["url"].params["key"] == "test-key"
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "make a plan"
        assert seen["body"]["generationConfig"] == {
            "responseMimeType": "application/json",
            "responseSchema": SCHEMA,
        }

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        service = _service(lambda request: httpx.Response(500, json={"error": {"message": "boom"}}))

        with pytest.raises(AIServiceError) as exc_info:
            await service.generate_json("make a plan", SCHEMA)

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, ContentBlockedError)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AIServiceError):
            await _service(handler).generate_json("make a plan", SCHEMA)

    @pytest.mark.asyncio
    async def test_blocked_prompt(self):
        service = _service(lambda request: httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}}))

        with pytest.raises(ContentBlockedError):
            await service.generate_json("make a plan", SCHEMA)

    @pytest.mark.asyncio
    async def test_blocked_answer(self):
        service = _service(lambda request: httpx.Response(200, json=_answer("", finish_reason="SAFETY")))

        with pytest.raises(ContentBlockedError):
            await service.generate_json("make a plan", SCHEMA)

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        service = _service(lambda request: httpx.Response(200, json={"candidates": []}))

        with pytest.raises(AIServiceError):
            await service.generate_json("make a plan", SCHEMA)

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=_answer("{}"))

        with pytest.raises(AIServiceError, match="not configured"):
            await _service(handler, api_key="").generate_json("make a plan", SCHEMA)
        assert calls == []

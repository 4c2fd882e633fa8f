"""Tests for the Groq enhancer and the async HTTP helper.

Validates the request payload sent to the chat completion endpoint, the
decoding of the model's JSON message, and that every transport or
decoding failure surfaces as EnhancementError. HTTP is served by
``httpx.MockTransport``; no network access is made.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from chainaudit.core.analyzer import Finding, Severity
from chainaudit.enhancement import (
    EnhancementRequest,
    EnhancementResponse,
    GroqEnhancer,
    VulnerabilityEnhancer,
)
from chainaudit.enhancement.client import USER_AGENT, post_json
from chainaudit.enhancement.groq import DEFAULT_MODEL, build_prompt
from chainaudit.exceptions import EnhancementError

REQUEST = EnhancementRequest(
    name="Reentrancy Vulnerability",
    type="SWC-107",
    code_snippet='(bool ok, ) = msg.sender.call{value: amount}("");',
    line_number=13,
)


def _completion(content: Any) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _transport(status: int = 200, body: Any = None, captured: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def _enhance(enhancer: GroqEnhancer) -> EnhancementResponse:
    return asyncio.run(enhancer.enhance(REQUEST))


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequestPayload:
    def test_posts_chat_completion(self) -> None:
        captured: list[httpx.Request] = []
        content = json.dumps({
            "enhancedDescription": "d",
            "exploitationScenario": "e",
            "recommendation": "r",
        })
        enhancer = GroqEnhancer(
            api_key="gsk-test",
            base_url="https://llm.example/v1/",
            transport=_transport(body=_completion(content), captured=captured),
        )
        _enhance(enhancer)

        assert len(captured) == 1
        sent = captured[0]
        assert str(sent.url) == "https://llm.example/v1/chat/completions"
        assert sent.headers["Authorization"] == "Bearer gsk-test"
        assert sent.headers["User-Agent"] == USER_AGENT
        payload = json.loads(sent.content)
        assert payload["model"] == DEFAULT_MODEL
        assert payload["temperature"] == 0.2
        assert payload["max_tokens"] == 1000
        assert payload["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert "Line: 13" in payload["messages"][1]["content"]

    def test_prompt_lists_finding(self) -> None:
        prompt = build_prompt(REQUEST)
        assert "Vulnerability: Reentrancy Vulnerability" in prompt
        assert "Type: SWC-107" in prompt
        assert "enhancedDescription, exploitationScenario, recommendation" in prompt

    def test_empty_api_key_rejected(self) -> None:
        with pytest.raises(EnhancementError):
            GroqEnhancer(api_key="")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(GroqEnhancer(api_key="k"), VulnerabilityEnhancer)


# ---------------------------------------------------------------------------
# Response decoding
# ---------------------------------------------------------------------------


class TestResponseDecoding:
    def test_all_fields(self) -> None:
        content = json.dumps({
            "enhancedDescription": "  Better description. ",
            "exploitationScenario": "Attack path.",
            "recommendation": "Fix it.",
        })
        response = _enhance(GroqEnhancer("k", transport=_transport(body=_completion(content))))
        assert response == EnhancementResponse(
            enhanced_description="Better description.",
            exploitation_scenario="Attack path.",
            recommendation="Fix it.",
        )

    def test_missing_and_blank_fields_are_none(self) -> None:
        content = json.dumps({"enhancedDescription": "Only this", "recommendation": "  "})
        response = _enhance(GroqEnhancer("k", transport=_transport(body=_completion(content))))
        assert response.enhanced_description == "Only this"
        assert response.exploitation_scenario is None
        assert response.recommendation is None

    def test_empty_content_yields_empty_response(self) -> None:
        response = _enhance(GroqEnhancer("k", transport=_transport(body=_completion(""))))
        assert response == EnhancementResponse()

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"unexpected": True},
            _completion("not json"),
            _completion("[1, 2]"),
        ],
    )
    def test_unusable_body(self, body: dict) -> None:
        with pytest.raises(EnhancementError):
            _enhance(GroqEnhancer("k", transport=_transport(body=body)))


# ---------------------------------------------------------------------------
# Transport failures
# ---------------------------------------------------------------------------


class TestTransportFailures:
    @pytest.mark.parametrize("status", [401, 429, 500])
    def test_http_error_status(self, status: int) -> None:
        with pytest.raises(EnhancementError, match=f"HTTP {status}"):
            _enhance(GroqEnhancer("k", transport=_transport(status=status, body={})))

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(EnhancementError, match="Timed out"):
            _enhance(GroqEnhancer("k", timeout=1.5, transport=httpx.MockTransport(handler)))

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(EnhancementError, match="Request failed"):
            _enhance(GroqEnhancer("k", transport=httpx.MockTransport(handler)))

    def test_non_object_body(self) -> None:
        with pytest.raises(EnhancementError, match="JSON object"):
            asyncio.run(post_json(
                "https://llm.example/v1/x", {}, transport=_transport(body=[1, 2, 3]),
            ))

    def test_non_json_body(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(EnhancementError):
            asyncio.run(post_json("https://llm.example/v1/x", {}, transport=transport))


# ---------------------------------------------------------------------------
# Finding round trip
# ---------------------------------------------------------------------------


class TestApplyToFinding:
    def _finding(self) -> Finding:
        return Finding(
            name="Reentrancy Vulnerability",
            type="SWC-107",
            severity=Severity.CRITICAL,
            line_number=13,
            code_snippet="call",
            description="static description",
            exploitation_scenario="static exploitation",
            recommendation="static recommendation",
        )

    def test_request_from_finding(self) -> None:
        request = EnhancementRequest.from_finding(self._finding())
        assert request.to_dict() == {
            "name": "Reentrancy Vulnerability",
            "type": "SWC-107",
            "codeSnippet": "call",
            "lineNumber": 13,
        }

    def test_partial_response_keeps_static_text(self) -> None:
        finding = self._finding()
        EnhancementResponse(enhanced_description="ai description").apply_to(finding)
        assert finding.description == "ai description"
        assert finding.exploitation_scenario == "static exploitation"
        assert finding.recommendation == "static recommendation"
        assert finding.detection_method.value == "ai"

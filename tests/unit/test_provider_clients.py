# tests/unit/test_provider_clients.py
"""Tests for provider chat clients (HTTP served by httpx MockTransport)."""

import json

import httpx
import pytest

from maximo_gateway.errors import ProviderCallError
from maximo_gateway.llm.anthropic_client import AnthropicChatClient
from maximo_gateway.llm.gemini import GeminiChatClient
from maximo_gateway.llm.openai_compat import OpenAICompatClient, api_root
from maximo_gateway.llm.types import ChatRequest, Message, ToolCallRequest
from maximo_gateway.llm.watsonx import WatsonxChatClient, build_prompt
from maximo_gateway.registry.types import ToolDescriptor
from maximo_gateway.trace import TraceKind, TraceSink

OPENAI_OK = {"choices": [{"message": {"content": "hello"}}]}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    @property
    def body(self):
        return json.loads(self.requests[-1].content)


def openai_client(response, provider="openai", base_url="https://api.openai.com", **kwargs):
    handler = Recorder(response)
    client = OpenAICompatClient(
        provider, "sk-test", base_url, transport=httpx.MockTransport(handler), **kwargs
    )
    return client, handler


def anthropic_client(response, **kwargs):
    handler = Recorder(response)
    client = AnthropicChatClient(
        "anthropic", "key", "https://api.anthropic.com", transport=httpx.MockTransport(handler), **kwargs
    )
    return client, handler


def gemini(handler):
    return GeminiChatClient("gemini", "k", "https://gl.test", transport=httpx.MockTransport(handler))


REQUEST = ChatRequest(
    messages=[Message.system("Be brief"), Message.user("hi")], model="m", temperature=0.2
)


class TestApiRoot:
    def test_appends_v1(self):
        assert api_root("https://api.openai.com/") == "https://api.openai.com/v1"

    def test_keeps_existing_v1(self):
        assert api_root("http://localhost:8000/v1") == "http://localhost:8000/v1"


class TestOpenAICompatClient:
    """Test the chat-completions client."""

    @pytest.mark.asyncio
    async def test_request_without_tools(self):
        client, handler = openai_client(httpx.Response(200, json=OPENAI_OK))

        reply = await client.complete(REQUEST)

        assert reply.text == "hello"
        assert handler.requests[0].url == "https://api.openai.com/v1/chat/completions"
        assert handler.requests[0].headers["authorization"] == "Bearer sk-test"
        body = handler.body
        assert body["model"] == "m"
        assert body["temperature"] == 0.2
        assert body["messages"] == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "hi"},
        ]
        assert "tools" not in body
        assert "tool_choice" not in body

    @pytest.mark.asyncio
    async def test_tools_and_tool_messages_rendered(self):
        client, handler = openai_client(
            httpx.Response(200, json={"choices": [{"message": {"content": "done"}}]}),
            provider="mistral",
            base_url="https://api.mistral.ai",
        )
        call = ToolCallRequest(id="c1", name="maximo.queryOS", raw_arguments="{}")
        request = ChatRequest(
            messages=[
                Message.user("q"),
                Message.assistant("", [call]),
                Message.tool("c1", '{"ok": true}'),
            ],
            model="mistral-small-latest",
        )

        await client.complete(request, [ToolDescriptor(name="maximo.queryOS")])

        body = handler.body
        assert body["tool_choice"] == "auto"
        assert body["tools"][0]["function"]["name"] == "maximo.queryOS"
        assert body["messages"][1]["tool_calls"] == [call.to_openai()]
        assert body["messages"][2] == {"role": "tool", "tool_call_id": "c1", "content": '{"ok": true}'}

    @pytest.mark.asyncio
    async def test_tool_calls_parsed(self):
        message = {
            "content": None,
            "tool_calls": [
                {"id": "c1", "type": "function", "function": {"name": "x.query", "arguments": '{"q":1}'}}
            ],
        }
        client, _ = openai_client(httpx.Response(200, json={"choices": [{"message": message}]}))

        reply = await client.complete(REQUEST, [ToolDescriptor(name="x.query")])

        assert reply.text == ""
        assert reply.tool_calls == [ToolCallRequest(id="c1", name="x.query", raw_arguments='{"q":1}')]

    def test_sdk_retries_disabled(self):
        client = OpenAICompatClient("deepseek", "key", "https://api.deepseek.com")

        assert client._client.max_retries == 0
        assert str(client._client.base_url).rstrip("/") == "https://api.deepseek.com/v1"

    @pytest.mark.asyncio
    async def test_status_error_becomes_provider_error(self):
        client, _ = openai_client(httpx.Response(401, json={"error": {"message": "bad key"}}))

        with pytest.raises(ProviderCallError) as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.upstream_status == 401
        assert exc_info.value.detail == "openai: bad key"
        assert exc_info.value.kind == "provider_failed"

    @pytest.mark.asyncio
    async def test_html_success_is_provider_error(self):
        sink = TraceSink()
        client, _ = openai_client(
            httpx.Response(200, text="<html>gateway</html>", headers={"content-type": "text/html"}),
            trace=sink,
        )

        with pytest.raises(ProviderCallError, match="expected a JSON object") as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.detail == "openai: expected a JSON object, got: <html>gateway</html>"
        assert exc_info.value.upstream_status == 200
        rx = sink.read_recent(kind=TraceKind.RX_PROVIDER)[0]
        assert rx.payload == "<html>gateway</html>"
        assert rx.meta["status"] == 200

    @pytest.mark.asyncio
    async def test_malformed_json_is_provider_error(self):
        client, _ = openai_client(
            httpx.Response(200, text="{not json", headers={"content-type": "application/json"})
        )

        with pytest.raises(ProviderCallError) as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.detail == "openai: expected a JSON object, got: {not json"

    @pytest.mark.asyncio
    async def test_json_array_is_provider_error(self):
        client, _ = openai_client(httpx.Response(200, json=[OPENAI_OK]))

        with pytest.raises(ProviderCallError, match="expected a JSON object"):
            await client.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_malformed_body_truncated(self):
        client, _ = openai_client(
            httpx.Response(200, text="y" * 2000, headers={"content-type": "text/plain"})
        )

        with pytest.raises(ProviderCallError) as exc_info:
            await client.complete(REQUEST)

        assert len(exc_info.value.detail) == len("openai: ") + 400

    @pytest.mark.asyncio
    async def test_connection_error_becomes_provider_error(self):
        request = httpx.Request("POST", "https://api.openai.com")
        client, _ = openai_client(httpx.ConnectError("refused", request=request))

        with pytest.raises(ProviderCallError, match="APIConnectionError"):
            await client.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_traffic_traced(self):
        sink = TraceSink()
        client, _ = openai_client(httpx.Response(200, json=OPENAI_OK), trace=sink, tenant="acme")

        await client.complete(REQUEST)

        tx, rx = sink.read_recent()
        assert tx.kind is TraceKind.TX_PROVIDER
        assert tx.meta["provider"] == "openai"
        assert rx.kind is TraceKind.RX_PROVIDER
        assert rx.tenant == "acme"
        assert json.loads(rx.payload) == OPENAI_OK


class TestAnthropicChatClient:
    """Test the messages API client."""

    @pytest.mark.asyncio
    async def test_system_split_and_text_joined(self):
        content = [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]
        client, handler = anthropic_client(httpx.Response(200, json={"content": content}))

        reply = await client.complete(REQUEST, [ToolDescriptor(name="ignored")])

        assert reply.text == "a\nb"
        assert handler.requests[0].url == "https://api.anthropic.com/v1/messages"
        assert handler.requests[0].headers["x-api-key"] == "key"
        body = handler.body
        assert body["system"] == "Be brief"
        assert body["messages"] == [{"role": "user", "content": "hi"}]
        assert body["max_tokens"] == 1024
        assert "tools" not in body

    @pytest.mark.asyncio
    async def test_no_system_key_without_prompt(self):
        client, handler = anthropic_client(httpx.Response(200, json={"content": []}))

        await client.complete(ChatRequest(messages=[Message.user("hi")], model="m"))

        assert "system" not in handler.body

    @pytest.mark.asyncio
    async def test_status_error(self):
        client, _ = anthropic_client(
            httpx.Response(529, text="overloaded", headers={"content-type": "text/plain"})
        )

        with pytest.raises(ProviderCallError, match="anthropic: overloaded") as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.upstream_status == 529

    @pytest.mark.asyncio
    async def test_non_json_success_is_provider_error(self):
        sink = TraceSink()
        client, _ = anthropic_client(
            httpx.Response(200, text="<html>", headers={"content-type": "text/html"}), trace=sink
        )

        with pytest.raises(ProviderCallError, match="expected a JSON object, got: <html>"):
            await client.complete(REQUEST)

        assert sink.read_recent(kind=TraceKind.RX_PROVIDER)[0].payload == "<html>"


class TestGeminiChatClient:
    """Test generateContent over httpx."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "hey"}]}}]})

        client = GeminiChatClient(
            "gemini", "g-key", "https://gl.test/", transport=httpx.MockTransport(handler)
        )
        request = ChatRequest(
            messages=[Message.system("sys"), Message.user("q"), Message.assistant("a"), Message.user("q2")],
            model="gemini-1.5-flash",
            temperature=0.5,
        )

        reply = await client.complete(request)

        assert reply.text == "hey"
        assert seen["url"].path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert seen["url"].params["key"] == "g-key"
        assert seen["body"]["contents"] == [
            {"role": "user", "parts": [{"text": "q"}]},
            {"role": "model", "parts": [{"text": "a"}]},
            {"role": "user", "parts": [{"text": "q2"}]},
        ]
        assert seen["body"]["systemInstruction"] == {"parts": [{"text": "sys"}]}
        assert seen["body"]["generationConfig"] == {"temperature": 0.5}

    @pytest.mark.asyncio
    async def test_error_message_extracted(self):
        handler = lambda r: httpx.Response(400, json={"error": {"message": "API key not valid"}})  # noqa: E731
        client = gemini(handler)

        with pytest.raises(ProviderCallError) as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.detail == "gemini: API key not valid"
        assert exc_info.value.upstream_status == 400

    @pytest.mark.asyncio
    async def test_long_error_truncated(self):
        handler = lambda r: httpx.Response(500, text="x" * 1000)  # noqa: E731
        client = gemini(handler)

        with pytest.raises(ProviderCallError) as exc_info:
            await client.complete(REQUEST)

        assert exc_info.value.detail == "gemini: " + "x" * 400

    @pytest.mark.asyncio
    async def test_non_json_success_rejected(self):
        handler = lambda r: httpx.Response(200, text="<html>")  # noqa: E731
        client = gemini(handler)

        with pytest.raises(ProviderCallError, match="expected a JSON object"):
            await client.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = gemini(handler)

        with pytest.raises(ProviderCallError, match="ConnectError"):
            await client.complete(REQUEST)


class TestWatsonxChatClient:
    """Test text generation over httpx."""

    def test_lone_user_message_sent_as_is(self):
        assert build_prompt(ChatRequest(messages=[Message.user("hello")], model="m")) == "hello"

    def test_conversation_flattened(self):
        request = ChatRequest(
            messages=[Message.system("sys"), Message.user("q"), Message.assistant("a"), Message.user("q2")],
            model="m",
        )

        assert build_prompt(request) == "sys\n\nUser: q\nAssistant: a\nUser: q2\nAssistant:"

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"results": [{"generated_text": "42"}]})

        client = WatsonxChatClient(
            "watsonx",
            "token",
            "https://wx.test",
            project_id="proj-1",
            transport=httpx.MockTransport(handler),
        )

        reply = await client.complete(ChatRequest(messages=[Message.user("q")], model="ibm/granite"))

        assert reply.text == "42"
        request = seen["request"]
        assert request.url.path == "/ml/v1/text/generation"
        assert request.url.params["version"] == "2024-05-01"
        assert request.headers["authorization"] == "Bearer token"
        assert seen["body"] == {
            "model_id": "ibm/granite",
            "input": "q",
            "parameters": {"temperature": 0.7, "max_new_tokens": 1024},
            "project_id": "proj-1",
        }
        assert client.supports_tools is False

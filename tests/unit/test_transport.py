"""
Unit tests for the Anthropic transport.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from unitforge.generation.profiles import NORMAL_PROFILE, STRICT_QUOTA_PROFILE
from unitforge.generation.transport import SYSTEM_PROMPT, AnthropicTransport
from unitforge.support.exceptions import QuotaError, TransientRequestError


def make_response(status, headers=None):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return httpx.Response(status, request=request, headers=headers or {})


@pytest.fixture
def mock_client():
    with patch("unitforge.generation.transport.anthropic.Anthropic") as mock_cls:
        client = MagicMock()
        mock_cls.return_value = client
        yield mock_cls, client


def test_transport_builds_client_without_sdk_retries(mock_client):
    mock_cls, _ = mock_client
    AnthropicTransport("sk-test", "claude-3-5-haiku-latest", 30.0)
    mock_cls.assert_called_once_with(api_key="sk-test", timeout=30.0, max_retries=0)


def test_send_passes_profile_settings(mock_client):
    _, client = mock_client
    client.messages.create.return_value = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="```js\n"),
            SimpleNamespace(type="tool_use", name="ignored"),
            SimpleNamespace(type="text", text="test();\n```"),
        ]
    )

    transport = AnthropicTransport("sk-test", "claude-model", 60.0)
    text = transport.send("write a test", STRICT_QUOTA_PROFILE)

    assert text == "```js\ntest();\n```"
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-model"
    assert kwargs["max_tokens"] == 1024
    assert kwargs["temperature"] == 0.1
    assert kwargs["top_k"] == 20
    assert kwargs["top_p"] == 0.8
    assert kwargs["system"] == SYSTEM_PROMPT
    assert kwargs["messages"] == [{"role": "user", "content": "write a test"}]


def test_rate_limit_becomes_quota_error(mock_client):
    _, client = mock_client
    client.messages.create.side_effect = anthropic.RateLimitError(
        "rate limited", response=make_response(429, {"retry-after": "12"}), body=None
    )

    transport = AnthropicTransport("sk-test", "claude-model", 60.0)
    with pytest.raises(QuotaError) as exc:
        transport.send("prompt", NORMAL_PROFILE)

    assert exc.value.retry_after == 12.0


def test_other_api_errors_are_transient(mock_client):
    _, client = mock_client
    client.messages.create.side_effect = anthropic.InternalServerError(
        "overloaded", response=make_response(500), body=None
    )

    transport = AnthropicTransport("sk-test", "claude-model", 60.0)
    with pytest.raises(TransientRequestError):
        transport.send("prompt", NORMAL_PROFILE)

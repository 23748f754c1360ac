"""
Unit Tests for the AI Client

Provider calls are replaced with monkeypatched methods; no network access.
"""

from edpsych.ai import AIClient, get_ai_client
from edpsych.ai.client import _strip_code_fence


def test_unconfigured_client_returns_none():
    client = AIClient()

    assert client.is_configured is False
    assert client.generate_completion(system="s", messages=[]) is None


def test_openai_is_tried_first(monkeypatch):
    client = AIClient(openai_api_key="sk-test", anthropic_api_key="ak-test")
    calls = []

    def fake_openai(**kwargs):
        calls.append("openai")
        return "from openai"

    def fake_anthropic(**kwargs):
        calls.append("anthropic")
        return "from anthropic"

    monkeypatch.setattr(client, "_try_openai", fake_openai)
    monkeypatch.setattr(client, "_try_anthropic", fake_anthropic)

    assert client.generate_completion(system="s", messages=[]) == "from openai"
    assert calls == ["openai"]


def test_falls_back_to_anthropic(monkeypatch):
    client = AIClient(openai_api_key="sk-test", anthropic_api_key="ak-test")
    monkeypatch.setattr(client, "_try_openai", lambda **kwargs: None)
    monkeypatch.setattr(client, "_try_anthropic", lambda **kwargs: "from anthropic")

    assert client.generate_completion(system="s", messages=[]) == "from anthropic"


def test_generate_json_parses_fenced_object(monkeypatch):
    client = AIClient(anthropic_api_key="ak-test")
    monkeypatch.setattr(client, "_try_anthropic", lambda **kwargs: '```json\n{"adjusted_pace": 55}\n```')

    assert client.generate_json(system="s", prompt="p") == {"adjusted_pace": 55}


def test_generate_json_rejects_invalid_json(monkeypatch):
    client = AIClient(anthropic_api_key="ak-test")
    monkeypatch.setattr(client, "_try_anthropic", lambda **kwargs: "not json")

    assert client.generate_json(system="s", prompt="p") is None


def test_generate_json_rejects_non_objects(monkeypatch):
    client = AIClient(anthropic_api_key="ak-test")
    monkeypatch.setattr(client, "_try_anthropic", lambda **kwargs: "[1, 2]")

    assert client.generate_json(system="s", prompt="p") is None


def test_strip_code_fence():
    assert _strip_code_fence('{"a": 1}') == '{"a": 1}'
    assert _strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'


def test_get_ai_client_reads_settings():
    client = get_ai_client()

    assert isinstance(client, AIClient)

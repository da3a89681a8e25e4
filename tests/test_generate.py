"""
Tests for the prompt generation endpoint.

The LLM client is patched; responses are real google-genai response models.
"""

import json
from unittest.mock import patch

from google.genai import errors

import app as promptos_app
from conftest import make_response
from system_prompt import META_PROMPT

PROMPTS = {
    "claude": "<task>Plan a week of meals</task>",
    "gpt4": "## Task\nPlan a week of meals.",
    "gemini": "**Task:** Plan a week of meals.",
    "grok": "Plan me a week of meals, keep it simple.",
}


class TestGenerateValidation:
    """Requests rejected before any network call."""

    @patch("app.genai.Client")
    def test_empty_intent_rejected(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")

        for body in ({"intent": ""}, {"intent": "   \n"}, {}, {"intent": 42}):
            resp = client.post("/api/generate", json=body)
            assert resp.status_code == 400
            assert resp.get_json() == {"error": "Intent is required"}

        mock_client_cls.assert_not_called()

    @patch("app.genai.Client")
    def test_non_json_body_rejected(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")

        resp = client.post("/api/generate", data="plan meals", content_type="text/plain")

        assert resp.status_code == 400
        mock_client_cls.assert_not_called()

    @patch("app.genai.Client")
    def test_missing_api_key(self, mock_client_cls, client):
        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "LLM API key not configured"}
        mock_client_cls.assert_not_called()


class TestGenerateSuccess:
    """Well-formed model replies."""

    @patch("app.genai.Client")
    def test_fenced_reply_returns_prompts(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        generate = mock_client_cls.return_value.models.generate_content
        generate.return_value = make_response(
            "```json\n" + json.dumps(PROMPTS) + "\n```", prompt_tokens=700, output_tokens=1300,
        )

        resp = client.post("/api/generate", json={"intent": "  plan meals  "})

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["prompts"] == PROMPTS
        assert data["usage"] == {"input_tokens": 700, "output_tokens": 1300}

        mock_client_cls.assert_called_once()
        assert mock_client_cls.call_args.kwargs["api_key"] == "test-key"
        call = generate.call_args.kwargs
        assert call["model"] == promptos_app.GENERATION_MODEL
        assert call["contents"] == 'User\'s intent: "plan meals"'
        assert META_PROMPT.splitlines()[0] in str(call["config"].system_instruction)

    @patch("app.genai.Client")
    def test_usage_recorded(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        generate = mock_client_cls.return_value.models.generate_content
        generate.return_value = make_response(
            json.dumps(PROMPTS), prompt_tokens=100, output_tokens=200, thoughts_tokens=50,
        )

        client.post("/api/generate", json={"intent": "plan meals"})
        client.post("/api/generate", json={"intent": "plan meals again"})

        session = client.get("/api/usage").get_json()["session"]
        assert session["inputTokens"] == 200
        assert session["outputTokens"] == 500
        assert session["requestCount"] == 2

    @patch("app.genai.Client")
    def test_tracker_failure_does_not_fail_request(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.return_value = make_response(json.dumps(PROMPTS))

        with patch.object(promptos_app.usage_tracker, "record", side_effect=ValueError("bad count")):
            resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 200
        assert resp.get_json()["prompts"] == PROMPTS


class TestGenerateFailures:
    """Every failure collapses to a generic message and records no usage."""

    @patch("app.genai.Client")
    def test_malformed_json_reply(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.return_value = make_response(
            "```json\n{\"claude\": \"half a prompt\n```"
        )

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to parse generated prompts"}
        assert promptos_app.usage_tracker.request_count == 0

    @patch("app.genai.Client")
    def test_reply_missing_a_prompt(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        partial = {k: v for k, v in PROMPTS.items() if k != "gpt4"}
        mock_client_cls.return_value.models.generate_content.return_value = make_response(json.dumps(partial))

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to parse generated prompts"}

    @patch("app.genai.Client")
    def test_deeply_nested_reply(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.return_value = make_response(
            "[" * 100000 + "]" * 100000
        )

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to parse generated prompts"}
        assert promptos_app.usage_tracker.request_count == 0

    @patch("app.genai.Client")
    def test_empty_reply(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.return_value = make_response(None)

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "No content in response"}

    @patch("app.genai.Client")
    def test_api_error_status(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.side_effect = errors.ServerError(
            503, {"error": {"code": 503, "message": "The model is overloaded.", "status": "UNAVAILABLE"}},
        )

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to generate prompts"}
        assert promptos_app.usage_tracker.request_count == 0

    @patch("app.genai.Client")
    def test_unexpected_error(self, mock_client_cls, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        mock_client_cls.return_value.models.generate_content.side_effect = ConnectionError("network down")

        resp = client.post("/api/generate", json={"intent": "plan meals"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Internal server error"}

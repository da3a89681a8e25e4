"""
Tests for the usage endpoints and the served pages.
"""

import json

import app as promptos_app
from system_prompt import MODEL_LABELS, USER_PROMPT_TEMPLATE


class TestUsageEndpoints:
    """GET and POST /api/usage."""

    def test_initial_usage(self, client):
        data = client.get("/api/usage").get_json()

        assert data["provider"] == "Google"
        assert data["session"]["requestCount"] == 0
        assert data["session"]["estimatedCost"] == 0.0
        assert set(data["pricing"]) == {"inputPer1M", "outputPer1M"}

    def test_post_accumulates(self, client):
        assert client.post("/api/usage", json={"input_tokens": 100, "output_tokens": 50}).get_json() == {"success": True}
        client.post("/api/usage", json={"input_tokens": 20})

        session = client.get("/api/usage").get_json()["session"]
        assert session["inputTokens"] == 120
        assert session["outputTokens"] == 50
        assert session["totalTokens"] == 170
        assert session["requestCount"] == 2
        assert session["estimatedCost"] > 0

    def test_post_invalid_body(self, client):
        for kwargs in (
            {"json": {"input_tokens": -5}},
            {"json": {"output_tokens": "many"}},
            {"json": [100, 50]},
            {"data": "100", "content_type": "text/plain"},
        ):
            resp = client.post("/api/usage", **kwargs)
            assert resp.status_code == 400
            assert resp.get_json() == {"error": "Failed to track usage"}

        assert promptos_app.usage_tracker.request_count == 0


class TestPages:
    """Inline pages get their server values injected."""

    def test_index(self, client):
        resp = client.get("/")
        html = resp.get_data(as_text=True)

        assert resp.status_code == 200
        assert "<title>PromptOS</title>" in html
        assert "/*__" not in html
        assert json.dumps(MODEL_LABELS) in html

    def test_desktop(self, client):
        html = client.get("/desktop").get_data(as_text=True)

        assert "/*__" not in html
        assert json.dumps(promptos_app.GENERATION_MODEL) in html
        assert "promptos_api_key" in html

    def test_desktop_intent_inserted_literally(self, client):
        html = client.get("/desktop").get_data(as_text=True)

        assert "USER_PROMPT_TEMPLATE.replace('{intent}', () => intent)" in html
        assert "USER_PROMPT_TEMPLATE.replace('{intent}', intent)" not in html
        assert "const USER_PROMPT_TEMPLATE = " + json.dumps(USER_PROMPT_TEMPLATE) + ";" in html

    def test_desktop_validates_reply_shape(self, client):
        html = client.get("/desktop").get_data(as_text=True)

        assert "function isPromptSet(value)" in html
        assert "if (!isPromptSet(prompts))" in html

    def test_desktop_auto_copy_failure_keeps_cards(self, client):
        html = client.get("/desktop").get_data(as_text=True)
        generate_body = html.split("async function generate()", 1)[1].split("function showError", 1)[0]
        auto_copy_body = html.split("async function autoCopy(key, text)", 1)[1].split("function showError", 1)[0]

        # The clipboard write lives only in autoCopy, which handles its own rejection
        assert "clipboard.writeText" not in generate_body.split("async function autoCopy", 1)[0]
        assert "await autoCopy(" in generate_body
        assert "clipboard.writeText" in auto_copy_body
        assert "catch (e)" in auto_copy_body
        assert "cardsEl.innerHTML" not in auto_copy_body

    def test_ping(self, client):
        assert client.get("/ping").get_json() == {"status": "ok", "version": promptos_app.APP_VERSION}

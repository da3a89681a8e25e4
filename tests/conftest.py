"""
Shared fixtures for the web app tests.
"""

import pytest
from google.genai import types

import app as promptos_app

ENV_VARS = ("ACCESS_PASSWORD", "SECONDARY_ACCESS_PASSWORD", "GEMINI_API_KEY")


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Start every test with no secrets configured and an empty usage session."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    promptos_app.usage_tracker.reset()
    yield
    promptos_app.usage_tracker.reset()


@pytest.fixture
def client():
    promptos_app.app.config["TESTING"] = True
    with promptos_app.app.test_client() as test_client:
        yield test_client


def make_response(text=None, prompt_tokens=120, output_tokens=480, thoughts_tokens=None):
    """Build a GenerateContentResponse carrying a single text part."""
    parts = [] if text is None else [types.Part(text=text)]
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=parts)),
        ],
        usage_metadata=types.GenerateContentResponseUsageMetadata(
            prompt_token_count=prompt_tokens,
            candidates_token_count=output_tokens,
            thoughts_token_count=thoughts_tokens,
        ),
    )

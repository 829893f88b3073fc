"""Shared fixtures - fake scraping and completion services, no internet."""

import json

import httpx
import pytest

from profilesift.config import AnalyzerConfig

SCRAPE_URL = "https://scrape.test/v1/scrape"
COMPLETION_URL = "https://llm.test/v1/chat/completions"


class FakeServices:
    """
    httpx MockTransport handler standing in for both external services.

    Each side is an ``httpx.Response``, an exception to raise, or a callable
    taking the request.
    """

    def __init__(self, scrape=None, completion=None):
        self.scrape = scrape if scrape is not None else httpx.Response(500, json={"success": False})
        self.completion = completion if completion is not None else httpx.Response(500, json={})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.scrape if str(request.url) == SCRAPE_URL else self.completion
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(request)
        return handler

    def calls_to(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == endpoint]

    def body_of(self, endpoint: str) -> dict:
        return json.loads(self.calls_to(endpoint)[0].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def scrape_response(markdown: str = "", links: list[str] | None = None) -> httpx.Response:
    """Successful scrape payload in the nested ``data`` shape."""
    return httpx.Response(
        200,
        json={"success": True, "data": {"markdown": markdown, "links": links or []}},
    )


def completion_response(content: str) -> httpx.Response:
    """Chat completion payload carrying ``content`` as the model answer."""
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


MODEL_PROFILE = {
    "username": "janedoe",
    "followers_count": 15300,
    "following_count": 210,
    "posts_count": 87,
    "bio_length": 64,
    "account_age": 1200,
    "has_profile_pic": True,
    "username_flags": {"numbers_heavy": False, "random_characters": False, "very_short": False},
    "platform": "Instagram",
    "confidence": "high",
    "notes": "All counts visible in header",
}


@pytest.fixture
def config() -> AnalyzerConfig:
    """Config with both credentials and fake endpoints."""
    return AnalyzerConfig(
        firecrawl_api_key="fc-test",
        llm_api_key="llm-test",
        scrape_api_url=SCRAPE_URL,
        completion_api_url=COMPLETION_URL,
        request_delay_ms=0,
    )


@pytest.fixture
def model_profile() -> dict:
    return json.loads(json.dumps(MODEL_PROFILE))

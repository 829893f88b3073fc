"""Unit tests for ProfileAnalyzer orchestrator - mocked services, no internet."""

import json

import httpx
import pytest
import structlog

from profilesift.config import AnalyzerConfig
from profilesift.core.orchestrator import ProfileAnalyzer
from profilesift.exceptions import ConfigError, MissingUrlError
from profilesift.models.result import AnalysisResult

from conftest import (
    COMPLETION_URL,
    SCRAPE_URL,
    FakeServices,
    completion_response,
    scrape_response,
)

PROFILE_URL = "https://www.instagram.com/janedoe"


class TestAnalyzerInit:
    """Test ProfileAnalyzer initialization."""

    def test_default_config(self, monkeypatch):
        monkeypatch.delenv("PROFILESIFT_LLM_MODEL", raising=False)
        analyzer = ProfileAnalyzer()
        assert analyzer.config is not None
        assert analyzer.config.llm_model == "google/gemini-2.5-flash"

    def test_custom_config(self, config):
        analyzer = ProfileAnalyzer(config)
        assert analyzer.config.firecrawl_api_key == "fc-test"


class TestAnalyzerContextManager:
    """Test async context manager."""

    @pytest.mark.asyncio
    async def test_creates_and_closes_client(self, config):
        analyzer = ProfileAnalyzer(config)
        async with analyzer:
            client = analyzer._client
            assert isinstance(client, httpx.AsyncClient)
        assert client.is_closed
        assert analyzer._client is None

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self, config):
        client = FakeServices().client()
        async with ProfileAnalyzer(config, client):
            pass
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_analyze_outside_context_raises(self, config):
        with pytest.raises(RuntimeError):
            await ProfileAnalyzer(config).analyze(PROFILE_URL)


class TestPreconditions:
    """Test checks that run before any external call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_missing_url(self, config, url):
        fake = FakeServices()
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            with pytest.raises(MissingUrlError) as exc:
                await analyzer.analyze(url)

        assert exc.value.message == "Profile URL is required"
        assert fake.requests == []

    @pytest.mark.asyncio
    async def test_missing_scrape_key(self, config):
        config = config.model_copy(update={"firecrawl_api_key": None})
        fake = FakeServices()
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            with pytest.raises(ConfigError, match="Firecrawl not configured"):
                await analyzer.analyze(PROFILE_URL)
        assert fake.requests == []

    @pytest.mark.asyncio
    async def test_missing_llm_key(self, config):
        config = config.model_copy(update={"llm_api_key": ""})
        fake = FakeServices()
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            with pytest.raises(ConfigError, match="AI gateway not configured"):
                await analyzer.analyze(PROFILE_URL)
        assert fake.requests == []


class TestAnalyze:
    """Test the four pipeline exits."""

    @pytest.mark.asyncio
    async def test_full_success(self, config, model_profile):
        fake = FakeServices(
            scrape=scrape_response("# Jane Doe\n15.3K followers", ["https://a.test"]),
            completion=completion_response(json.dumps(model_profile)),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            result = await analyzer.analyze(PROFILE_URL)

        assert isinstance(result, AnalysisResult)
        assert result.success is True
        assert result.confidence == "high"
        assert result.profile.username == "janedoe"
        assert result.profile.followers_count == 15300

        prompt = fake.body_of(COMPLETION_URL)["messages"][0]["content"]
        assert "15.3K followers" in prompt
        assert "Number of links found on page: 1" in prompt

    @pytest.mark.asyncio
    async def test_scrape_degraded(self, config, model_profile):
        model_profile["confidence"] = "low"
        fake = FakeServices(
            scrape=httpx.ConnectError("down"),
            completion=completion_response(json.dumps(model_profile)),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            result = await analyzer.analyze(PROFILE_URL)

        assert result.success is True
        assert len(fake.calls_to(COMPLETION_URL)) == 1
        assert result.profile.followers_count == 15300

    @pytest.mark.asyncio
    async def test_extraction_degraded(self, config):
        fake = FakeServices(
            scrape=scrape_response("# Jane"),
            completion=completion_response("```json\n{not valid json}\n```"),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            result = await analyzer.analyze(PROFILE_URL)

        assert result.success is True
        assert result.confidence == "low"
        assert result.notes == "Could not extract data from the page"

    @pytest.mark.asyncio
    async def test_both_services_unreachable(self, config):
        fake = FakeServices(
            scrape=httpx.ConnectError("down"),
            completion=httpx.ConnectError("down"),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            result = await analyzer.analyze("https://www.reddit.com/user/janedoe123")

        # Extractor still ran after the scrape failed
        assert len(fake.calls_to(SCRAPE_URL)) == 1
        assert len(fake.calls_to(COMPLETION_URL)) == 1

        assert result.model_dump() == {
            "success": True,
            "platform": "Reddit",
            "confidence": "low",
            "notes": "Could not extract data from the page",
            "profile": {
                "username": "janedoe123",
                "followers_count": 0,
                "following_count": 0,
                "posts_count": 0,
                "bio_length": 0,
                "account_age": 0,
                "username_flags": {
                    "numbers_heavy": False,
                    "no_profile_pic": False,
                    "random_characters": False,
                    "very_short": False,
                },
            },
        }

    @pytest.mark.asyncio
    async def test_model_flags_cannot_clear_local_checks(self, config, model_profile):
        model_profile["username"] = "user98765"
        model_profile["username_flags"] = {"numbers_heavy": False}
        fake = FakeServices(
            scrape=scrape_response("# user98765"),
            completion=completion_response(json.dumps(model_profile)),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            result = await analyzer.analyze("https://x.com/user98765")

        assert result.profile.username_flags.numbers_heavy is True

    @pytest.mark.asyncio
    async def test_stateless_between_calls(self, config, model_profile):
        fake = FakeServices(
            scrape=lambda request: scrape_response("# page"),
            completion=lambda request: completion_response(json.dumps(model_profile)),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            await analyzer.analyze(PROFILE_URL)
            await analyzer.analyze(PROFILE_URL)

        assert len(fake.calls_to(SCRAPE_URL)) == 2
        assert len(fake.calls_to(COMPLETION_URL)) == 2

    @pytest.mark.asyncio
    async def test_log_context_bound_during_analysis(self, config, model_profile, monkeypatch):
        from profilesift.core import orchestrator

        seen = []
        real_normalize = orchestrator.normalize

        def spy(*args, **kwargs):
            seen.append(structlog.contextvars.get_contextvars())
            return real_normalize(*args, **kwargs)

        monkeypatch.setattr(orchestrator, "normalize", spy)
        fake = FakeServices(
            scrape=scrape_response("# page"),
            completion=completion_response(json.dumps(model_profile)),
        )
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            await analyzer.analyze(PROFILE_URL)

        assert seen == [{"profile_url": PROFILE_URL}]
        assert "profile_url" not in structlog.contextvars.get_contextvars()


class TestAnalyzeMany:
    """Test batch analysis."""

    @pytest.mark.asyncio
    async def test_results_in_input_order(self, config):
        fake = FakeServices(
            scrape=lambda request: httpx.Response(500, json={"success": False}),
            completion=lambda request: httpx.Response(503, json={}),
        )
        urls = [
            "https://www.instagram.com/first",
            "https://www.tiktok.com/@second",
        ]
        async with ProfileAnalyzer(config, fake.client()) as analyzer:
            results = await analyzer.analyze_many(urls, delay_ms=0)

        assert [r.profile.username for r in results] == ["first", "second"]
        assert [r.platform for r in results] == ["Instagram", "TikTok"]

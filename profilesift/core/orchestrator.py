"""Pipeline orchestrator - coordinates classification, scraping, extraction."""

import asyncio
from datetime import datetime

import httpx

from profilesift.config import AnalyzerConfig
from profilesift.logging import analysis_context, configure_logging, get_logger
from profilesift.core.classifier import classify
from profilesift.core.scraper import scrape
from profilesift.core.extractor import extract
from profilesift.core.normalizer import normalize
from profilesift.models.result import AnalysisResult
from profilesift.exceptions import ConfigError, MissingUrlError


class ProfileAnalyzer:
    """
    High-level interface turning a profile URL into sanitized metrics.

    Example:
        async with ProfileAnalyzer() as analyzer:
            result = await analyzer.analyze("https://instagram.com/janedoe")
            print(result.profile.followers_count)
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize analyzer with optional configuration.

        Args:
            config: AnalyzerConfig instance, uses defaults if None
            client: HTTP client to use; one is created on enter if None
        """
        self.config = config or AnalyzerConfig()
        self._client = client
        self._owns_client = client is None
        self._log = get_logger("analyzer")

    async def __aenter__(self) -> "ProfileAnalyzer":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)
        self._log = get_logger("analyzer")

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.http_timeout_seconds)
            self._owns_client = True

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup resources."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def check_preconditions(self, url: str | None) -> str:
        """
        Validate the request before any external call is made.

        Returns:
            The stripped URL

        Raises:
            MissingUrlError: If the URL is empty
            ConfigError: If a service credential is missing
        """
        if not url or not url.strip():
            raise MissingUrlError()
        if not self.config.firecrawl_api_key:
            raise ConfigError("Firecrawl not configured")
        if not self.config.llm_api_key:
            raise ConfigError("AI gateway not configured")
        return url.strip()

    async def analyze(self, url: str | None) -> AnalysisResult:
        """
        Analyze a single profile URL.

        Stage failures degrade to defaults; only precondition errors raise.

        Args:
            url: Public profile URL

        Returns:
            AnalysisResult, always with success=True
        """
        url = self.check_preconditions(url)
        if self._client is None:
            raise RuntimeError("ProfileAnalyzer must be used as an async context manager")

        with analysis_context(url):
            return await self._run(url)

    async def _run(self, url: str) -> AnalysisResult:
        start = datetime.now()
        classification = classify(url)
        platform = classification.platform.value
        self._log.info(
            "analysis_start",
            platform=platform,
            url_username=classification.username,
        )

        scraped = await scrape(
            self._client,
            url,
            self.config.firecrawl_api_key,
            endpoint=self.config.scrape_api_url,
            wait_for_ms=self.config.scrape_wait_for_ms,
        )
        if not scraped.succeeded:
            self._log.warning("scrape_degraded", salvaged_chars=len(scraped.markdown))

        extracted = await extract(
            self._client,
            scraped,
            url,
            platform,
            classification.username,
            self.config.llm_api_key,
            endpoint=self.config.completion_api_url,
            model=self.config.llm_model,
            temperature=self.config.llm_temperature,
            max_chars=self.config.max_content_chars,
        )

        result = normalize(extracted, classification.username)
        duration_ms = (datetime.now() - start).total_seconds() * 1000

        self._log.info(
            "analysis_complete",
            username=result.profile.username,
            confidence=result.confidence,
            duration_ms=duration_ms,
        )
        return result

    async def analyze_many(
        self,
        urls: list[str],
        delay_ms: int | None = None,
    ) -> list[AnalysisResult]:
        """
        Analyze multiple profile URLs sequentially with delay.

        Args:
            urls: Profile URLs
            delay_ms: Delay between requests (uses config default if None)

        Returns:
            List of AnalysisResults in same order as input
        """
        delay = delay_ms if delay_ms is not None else self.config.request_delay_ms
        results = []

        for i, url in enumerate(urls):
            results.append(await self.analyze(url))

            if delay > 0 and i < len(urls) - 1:
                await asyncio.sleep(delay / 1000)

        return results

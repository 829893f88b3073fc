"""Client for the external page-scraping service (Firecrawl /v1/scrape)."""

from typing import Any

import httpx

from profilesift.logging import get_logger
from profilesift.models.scrape import ScrapeResult

DEFAULT_SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"


def _pick(payload: dict, key: str) -> Any:
    """Read a field from the nested ``data`` object, falling back to the top level."""
    data = payload.get("data")
    if isinstance(data, dict) and data.get(key) is not None:
        return data[key]
    return payload.get(key)


def _as_markdown(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_links(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [link for link in value if isinstance(link, str)]


async def scrape(
    client: httpx.AsyncClient,
    url: str,
    api_key: str,
    endpoint: str = DEFAULT_SCRAPE_URL,
    wait_for_ms: int = 3000,
) -> ScrapeResult:
    """
    Fetch the rendered markdown and outbound links of a profile page.

    Failures never propagate: a transport error or unusable response yields
    an empty ``ScrapeResult`` with ``succeeded=False``. When the service
    answers but reports failure, any markdown in the payload is kept.

    Args:
        client: Shared HTTP client
        url: Profile URL to scrape
        api_key: Scraping service API key
        endpoint: Scrape endpoint URL
        wait_for_ms: Server-side render wait before capturing content

    Returns:
        ScrapeResult with whatever content could be recovered
    """
    log = get_logger("scraper")

    try:
        response = await client.post(
            endpoint,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "url": url,
                "formats": ["markdown", "links"],
                "onlyMainContent": False,
                "waitFor": wait_for_ms,
            },
        )
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        log.warning("scrape_request_failed", url=url, error=str(e))
        return ScrapeResult()

    if not isinstance(payload, dict):
        log.warning("scrape_unexpected_payload", url=url, status=response.status_code)
        return ScrapeResult()

    log.info("scrape_response", url=url, status=response.status_code)

    if response.is_success and payload.get("success"):
        result = ScrapeResult(
            markdown=_as_markdown(_pick(payload, "markdown")),
            links=_as_links(_pick(payload, "links")),
            succeeded=True,
        )
        log.info(
            "scrape_complete",
            url=url,
            chars=len(result.markdown),
            links=len(result.links),
        )
        return result

    # Partial data is still worth handing to the extractor
    markdown = _as_markdown(_pick(payload, "markdown"))
    log.warning(
        "scrape_failed",
        url=url,
        status=response.status_code,
        error=payload.get("error"),
        salvaged_chars=len(markdown),
    )
    return ScrapeResult(markdown=markdown, succeeded=False)

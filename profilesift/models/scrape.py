"""Scraped page content model."""

from pydantic import BaseModel, ConfigDict


class ScrapeResult(BaseModel):
    """Rendered page text and outbound links returned by the scraping service."""

    model_config = ConfigDict(frozen=True)

    markdown: str = ""
    links: list[str] = []
    succeeded: bool = False

"""LLM-backed extraction of structured profile metrics from scraped content."""

import json
import re
from typing import Any

import httpx
from pydantic import ValidationError

from profilesift.logging import get_logger
from profilesift.models.profile import ExtractedProfile
from profilesift.models.scrape import ScrapeResult

DEFAULT_COMPLETION_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_NOTES = "Could not extract data from the page"

PROMPT_TEMPLATE = """You are a social media profile data extractor. Analyze the following scraped content from a {platform} profile page and extract structured data.

Profile URL: {url}
Scraped content (markdown):
{content}

Number of links found on page: {link_count}

Extract the following metrics and return them as a valid JSON object (no markdown, just JSON):
{{
  "username": "the profile username or handle (without @)",
  "followers_count": <integer, followers/subscribers count, 0 if not found>,
  "following_count": <integer, following count, 0 if not found>,
  "posts_count": <integer, posts/tweets/videos count, 0 if not found>,
  "bio_length": <integer, number of characters in the bio/description, 0 if not found>,
  "account_age": <integer, estimated account age in days. Look for "joined" date or similar. Use 0 if unknown>,
  "has_profile_pic": <boolean, true if the page mentions or shows a profile picture>,
  "username_flags": {{
    "numbers_heavy": <boolean, true if username has many numbers like user1234567>,
    "random_characters": <boolean, true if username looks randomly generated>,
    "very_short": <boolean, true if username is 3 chars or less>
  }},
  "platform": "{platform}",
  "confidence": <"high" | "medium" | "low" - how confident you are in the extracted data>,
  "notes": "<brief explanation of what was found or not found>"
}}

Rules:
- Parse numbers carefully: "1.2M" = 1200000, "15.3K" = 15300, "1,234" = 1234
- If a field is genuinely not visible on the page, use 0 or false defaults
- Do NOT make up data - only extract what's actually visible in the content
- Return ONLY valid JSON, no extra text"""

# Opening or closing fence, with or without a language label
_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?")


def build_prompt(
    url: str,
    platform: str,
    scraped: ScrapeResult,
    max_chars: int = 8000,
) -> str:
    """Fill the extraction template for one profile page."""
    return PROMPT_TEMPLATE.format(
        platform=platform,
        url=url,
        content=scraped.markdown[:max_chars],
        link_count=len(scraped.links),
    )


def default_profile(username: str, platform: str) -> ExtractedProfile:
    """Fallback record used whenever extraction cannot be trusted."""
    return ExtractedProfile(
        username=username,
        platform=platform,
        confidence="low",
        notes=DEFAULT_NOTES,
    )


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences around model output.

    Examples:
        '```json\\n{"a": 1}\\n```' -> '{"a": 1}'
        '```\\n{"a": 1}```' -> '{"a": 1}'
    """
    return _FENCE_RE.sub("", text).strip()


def parse_completion(text: str, default: ExtractedProfile) -> ExtractedProfile:
    """
    Parse model output into an ExtractedProfile.

    Parsed keys override the default field by field. Any failure returns
    ``default`` untouched.
    """
    log = get_logger("extractor")
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except ValueError as e:
        log.warning("extraction_parse_failed", error=str(e), raw=text[:200])
        return default

    if not isinstance(parsed, dict):
        log.warning("extraction_not_an_object", raw=text[:200])
        return default

    merged = {**default.model_dump(), **parsed}
    try:
        return ExtractedProfile.model_validate(merged)
    except ValidationError as e:
        log.warning(
            "extraction_invalid",
            errors=e.error_count(),
            fields=sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}),
            raw=text[:200],
        )
        return default


def _completion_text(payload: Any) -> str:
    """Pull ``choices[0].message.content`` out of a chat completion body."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


async def extract(
    client: httpx.AsyncClient,
    scraped: ScrapeResult,
    url: str,
    platform: str,
    url_username: str,
    api_key: str,
    endpoint: str = DEFAULT_COMPLETION_URL,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.1,
    max_chars: int = 8000,
) -> ExtractedProfile:
    """
    Ask the completion service to turn scraped content into profile metrics.

    Never raises. Returns the default record when the request fails, the
    service answers with a non-2xx status, or the output cannot be parsed.

    Args:
        client: Shared HTTP client
        scraped: Scraper output, possibly empty
        url: Original profile URL
        platform: Platform label from the classifier
        url_username: Username inferred from the URL
        api_key: Completion service API key
        endpoint: Chat completions endpoint URL
        model: Model identifier
        temperature: Sampling temperature
        max_chars: Prefix length of scraped content embedded in the prompt

    Returns:
        ExtractedProfile, either parsed or the default record
    """
    log = get_logger("extractor")
    default = default_profile(url_username, platform)
    prompt = build_prompt(url, platform, scraped, max_chars)

    try:
        response = await client.post(
            endpoint,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
            },
        )
        if not response.is_success:
            log.warning("extraction_request_failed", url=url, status=response.status_code)
            return default
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        log.warning("extraction_error", url=url, error=str(e))
        return default

    profile = parse_completion(_completion_text(payload), default)
    if profile is not default:
        log.info("extraction_complete", url=url, confidence=profile.confidence)
    return profile

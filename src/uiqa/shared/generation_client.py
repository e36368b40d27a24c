"""Async client for the component-generation collaborator.

Every provider is reached through an OpenAI-compatible chat endpoint, so one
``AsyncOpenAI`` instance per provider covers all of them. The interface the
rest of uiqa depends on is :class:`GenerationClient`: augmented prompt text
in, raw response text out.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import re
from typing import Any, Protocol

from openai import AsyncOpenAI, APIConnectionError, APITimeoutError, RateLimitError
from pydantic import BaseModel

from uiqa.schemas.config import ProviderSettings, QualityConfig
from uiqa.schemas.orchestration import ProviderId

logger = logging.getLogger(__name__)

# Retry settings for rate-limit (429) and connection errors
_MAX_RETRIES = 6
_BASE_DELAY = 2  # seconds, floor for exponential backoff


class GenerationClient(Protocol):
    async def generate(
        self,
        *,
        provider: ProviderId,
        system: str,
        user_message: str,
        image: str | None = None,
    ) -> str: ...


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Suggested retry delay in seconds from the ``Retry-After`` header or the message."""
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value
    return None


def _image_url(image: str) -> str:
    return image if image.startswith("data:") else f"data:image/png;base64,{image}"


class OpenAIGenerationClient:
    """One ``AsyncOpenAI`` per configured provider, created on first use."""

    def __init__(self, config: QualityConfig) -> None:
        self.config = config
        self._clients: dict[ProviderId, AsyncOpenAI] = {}

    @property
    def available_providers(self) -> set[ProviderId]:
        """Providers whose API key environment variable is set."""
        return {
            provider
            for provider, settings in self.config.providers.items()
            if os.environ.get(settings.api_key_env)
        }

    def _settings(self, provider: ProviderId) -> ProviderSettings:
        settings = self.config.providers.get(provider)
        if settings is None:
            raise ValueError(f"Provider '{provider.value}' is not configured")
        return settings

    def _client_for(self, provider: ProviderId) -> AsyncOpenAI:
        if provider not in self._clients:
            settings = self._settings(provider)
            self._clients[provider] = AsyncOpenAI(
                api_key=os.environ.get(settings.api_key_env),
                base_url=settings.base_url,
            )
        return self._clients[provider]

    async def _call_with_retry(self, provider: ProviderId, **kwargs: Any) -> Any:
        """chat.completions.create with jittered exponential backoff on 429 and connection errors."""
        client = self._client_for(provider)
        for attempt in range(_MAX_RETRIES):
            try:
                return await client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                # The payload itself is too big; retrying won't help.
                if "request too large" in msg or "context_length_exceeded" in msg:
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise
                if attempt == _MAX_RETRIES - 1:
                    raise

                backoff = _BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)
                logger.warning(
                    "%s rate limited (429), retrying in %.1fs (attempt %d/%d): %s",
                    provider.value, delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _MAX_RETRIES - 1:
                    raise
                backoff = _BASE_DELAY * (2 ** min(attempt, 3))
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(1.0, backoff + jitter)
                logger.warning(
                    "%s connection error, retrying in %.1fs (attempt %d/%d): %s",
                    provider.value, delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def generate(
        self,
        *,
        provider: ProviderId,
        system: str,
        user_message: str,
        image: str | None = None,
    ) -> str:
        content: str | list[dict[str, Any]] = user_message
        if image:
            content = [
                {"type": "text", "text": user_message},
                {"type": "image_url", "image_url": {"url": _image_url(image)}},
            ]

        response = await self._call_with_retry(
            provider,
            model=self._settings(provider).model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": content},
            ],
        )
        usage = getattr(response, "usage", None)
        if usage:
            logger.debug(
                "%s usage: %s prompt / %s completion tokens",
                provider.value,
                getattr(usage, "prompt_tokens", 0),
                getattr(usage, "completion_tokens", 0),
            )
        return response.choices[0].message.content or ""


_DRY_RUN_COMPONENT = """\
const StatusCard = () => {
  const [open, setOpen] = useState(false);
  const toggle = useCallback(() => setOpen((v) => !v), []);

  return (
    <section className="p-4 md:p-6 bg-white rounded-lg border border-gray-200">
      <h2 className="text-lg font-semibold text-gray-900">System status</h2>
      <button
        type="button"
        aria-expanded={open}
        onClick={toggle}
        className="mt-2 px-4 py-2 rounded-md bg-blue-600 text-white hover:bg-blue-700"
      >
        {open ? "Hide details" : "Show details"}
      </button>
      {open && <p className="mt-2 text-sm text-gray-700">All services operational.</p>}
    </section>
  );
};

render(<StatusCard />);"""


class DryRunGenerationClient:
    """Drop-in replacement that makes zero API calls and returns a canned component."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    @property
    def available_providers(self) -> set[ProviderId]:
        return set(ProviderId)

    async def generate(
        self,
        *,
        provider: ProviderId,
        system: str,
        user_message: str,
        image: str | None = None,
    ) -> str:
        self.calls.append({"provider": provider, "system": system, "user_message": user_message})
        logger.info("[dry-run] Generation via %s (%d chars of prompt)", provider.value, len(user_message))
        tag = "component_edit" if 'type="edit_component"' in user_message else "component"
        return (
            f"<{tag}><name>StatusCard</name>"
            "<description>Collapsible status card</description>"
            f"<code><![CDATA[{_DRY_RUN_COMPONENT}]]></code></{tag}>"
        )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


class GeneratedComponent(BaseModel):
    name: str
    description: str
    code: str


class ComponentParseError(ValueError):
    """The generator's response did not contain the expected XML fields."""


_CDATA = re.compile(r"^<!\[CDATA\[|\]\]>$")
_OPENING_FENCE = re.compile(r"^```(?:tsx|jsx|typescript|javascript|ts|js)?[ \t]*\n")
_CLOSING_FENCE = re.compile(r"\n```$")


def parse_component_response(text: str, *, is_edit: bool = False) -> GeneratedComponent:
    tag = "component_edit" if is_edit else "component"
    fields: dict[str, str] = {}
    for field, body in (("name", r"(.*?)"), ("description", r"(.*?)"), ("code", r"([\s\S]*?)")):
        m = re.search(rf"<{tag}>[\s\S]*?<{field}>{body}</{field}>", text)
        if not m:
            logger.error("Could not parse <%s> from generator response: %s", field, text[:200])
            raise ComponentParseError(f"Could not parse component {field} from the generator response")
        fields[field] = m.group(1).strip()

    code = _CDATA.sub("", fields["code"]).strip()
    code = _CLOSING_FENCE.sub("", _OPENING_FENCE.sub("", code)).strip()
    return GeneratedComponent(name=fields["name"], description=fields["description"], code=code)

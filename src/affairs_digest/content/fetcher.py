"""Digest text generation using the Gemini REST API."""

import logging
from typing import Optional

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from affairs_digest.config import Config, get_config

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Request the daily digest text from a generative model."""

    def __init__(
        self,
        config: Optional[Config] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or get_config()
        api_key = self.config.api_keys.gemini

        if not api_key:
            raise ValueError(
                "Gemini API key not configured. "
                "Set AFFAIRS_DIGEST_API_KEYS__GEMINI or api_keys.gemini in config."
            )

        self.api_key = api_key
        self.gemini = self.config.gemini
        self.prompt = self.config.prompts.digest_prompt
        self._client = client

    @property
    def endpoint(self) -> str:
        base_url = self.gemini.base_url.rstrip("/")
        return f"{base_url}/models/{self.gemini.model}:generateContent"

    def build_payload(self) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [{"parts": [{"text": self.prompt}]}],
            "generationConfig": {
                "temperature": self.gemini.temperature,
                "maxOutputTokens": self.gemini.max_output_tokens,
            },
        }

    def _post(self, client: httpx.Client) -> httpx.Response:
        retrying = Retrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(max(1, self.gemini.max_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=4),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=self.build_payload(),
                    headers={"Content-Type": "application/json"},
                )

    def fetch(self) -> Optional[str]:
        """Fetch today's digest text.

        Returns:
            The generated text, or None if the request failed or the
            response held no usable text.
        """
        logger.info(f"Requesting digest from {self.gemini.model}")

        try:
            if self._client is not None:
                response = self._post(self._client)
            else:
                with httpx.Client(timeout=self.gemini.timeout_seconds) as client:
                    response = self._post(client)

            response.raise_for_status()
            data = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                f"Gemini API returned {e.response.status_code}: {e.response.text[:500]}"
            )
            return None

        except httpx.HTTPError as e:
            logger.error(f"Gemini API request failed: {e}")
            return None

        except ValueError as e:
            logger.error(f"Gemini API returned malformed JSON: {e}")
            return None

        text = extract_text(data)
        if text is None:
            logger.error(f"Unexpected Gemini response shape: {str(data)[:500]}")
            return None

        if not text.strip():
            logger.warning("Gemini returned empty text")
            return None

        logger.info(f"Received digest text ({len(text)} chars)")
        return text


def extract_text(data) -> Optional[str]:
    """Pull candidates[0].content.parts[0].text out of a response body."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None

    if not isinstance(text, str):
        return None
    return text

"""Completion gateway client (OpenRouter, OpenAI-compatible chat completions)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """The gateway call failed; ``body`` carries the raw upstream detail."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass
class Completion:
    content: str
    usage: dict | None = None


class CompletionGateway:
    """Synchronous client for ``POST {base_url}/chat/completions``.

    One request per call: no retries, no fallback model.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        referer: str = "",
        title: str = "",
        timeout: float = 120.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.referer = referer
        self.title = title
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> CompletionGateway:
        return cls(
            api_key=settings.OPENROUTER_API_KEY,
            base_url=settings.OPENROUTER_BASE_URL,
            referer=settings.CLIENT_URL,
            title=settings.APP_TITLE,
            timeout=settings.COMPLETION_TIMEOUT_SECONDS,
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    def complete(
        self,
        messages: list[dict],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        """Send *messages* and return the single generated reply."""
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._headers(),
                    json={
                        "model": model,
                        "messages": messages,
                        "max_tokens": max_tokens,
                        "temperature": temperature,
                    },
                )
        except httpx.HTTPError as exc:
            raise CompletionError(f"Gateway request failed: {exc}", body=str(exc)) from exc

        if not response.is_success:
            raise CompletionError(
                f"Gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise CompletionError(
                "Gateway returned an unexpected payload",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.debug("Completion received from %s (%d chars)", model, len(content or ""))
        return Completion(content=content or "", usage=data.get("usage"))

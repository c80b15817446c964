from __future__ import annotations

from typing import Any

import httpx

from medocr.domain.pipeline.errors import NotConfiguredError, VendorCallFailedError

SERVICE_NAME = "OpenAI"


class CompletionsHttpClient:
    """Async client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise NotConfiguredError(SERVICE_NAME)
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            headers={"Authorization": f"Bearer {self._api_key}"},
            transport=self._transport,
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            async with self._client() as client:
                resp = await client.post("/chat/completions", json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise VendorCallFailedError(
                SERVICE_NAME,
                f"HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise VendorCallFailedError(SERVICE_NAME, str(e) or type(e).__name__) from e
        if not isinstance(data, dict):
            raise VendorCallFailedError(SERVICE_NAME, "completion response is not a JSON object")
        return data

    def extract_message_content(self, data: dict[str, Any]) -> str:
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            msg = choices[0].get("message") or {}
            content = msg.get("content")
            if isinstance(content, str):
                return content
        raise VendorCallFailedError(SERVICE_NAME, "completion response has no message content")

import base64
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
import openai

from app.classification.client_base import BaseClassificationClient
from app.classification.exceptions import (
    InvalidResponseError,
    QuotaExceededError,
    RateLimitedError,
    TransportError,
    UnsupportedFormatError,
)
from app.logging.logger import Log


@contextmanager
def _provider_errors() -> Iterator[None]:
    """Translate OpenAI SDK and transport exceptions into classification errors."""
    try:
        yield
    except openai.RateLimitError as exc:
        if getattr(exc, "code", None) == "insufficient_quota":
            raise QuotaExceededError(f"AI provider quota exceeded: {exc}") from exc
        raise RateLimitedError(f"AI provider rate limit: {exc}") from exc
    except (openai.BadRequestError, openai.UnprocessableEntityError) as exc:
        raise UnsupportedFormatError(f"AI provider rejected the file: {exc}") from exc
    except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
        raise TransportError(f"AI provider network error: {exc}") from exc
    except openai.APIError as exc:
        raise TransportError(f"AI provider API error: {exc}") from exc


class OpenAIClientAdapter(BaseClassificationClient):
    """Classification client built on the OpenAI-compatible chat and files APIs."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def analyze_document(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        document: bytes,
        filename: str,
    ) -> str:
        with self._uploaded_file(document, filename) as file_id:
            content: list[dict[str, Any]] = [
                {"type": "file", "file": {"file_id": file_id}},
                {"type": "text", "text": prompt},
            ]
            return self._complete(model, temperature, max_tokens, content)

    def analyze_image(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image: bytes,
        image_mime_type: str,
    ) -> str:
        encoded = base64.b64encode(image).decode("ascii")
        content: list[dict[str, Any]] = [
            {"type": "text", "text": prompt},
            {
                "type": "image_url",
                "image_url": {"url": f"data:{image_mime_type};base64,{encoded}"},
            },
        ]
        return self._complete(model, temperature, max_tokens, content)

    @contextmanager
    def _uploaded_file(self, document: bytes, filename: str) -> Iterator[str]:
        """Upload a file for one request and delete it afterwards on every path."""
        with _provider_errors():
            uploaded = self._client.files.create(
                file=(filename, document, "application/pdf"),
                purpose="user_data",
            )
        Log.debug(f"Uploaded {filename} to AI provider as {uploaded.id}")
        try:
            yield uploaded.id
        finally:
            self._delete_uploaded(uploaded.id)

    def _delete_uploaded(self, file_id: str) -> None:
        try:
            self._client.files.delete(file_id)
        except (openai.APIError, httpx.HTTPError) as exc:
            Log.warning(f"Failed to clean up provider file {file_id}: {exc}")

    def _complete(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        content: list[dict[str, Any]],
    ) -> str:
        with _provider_errors():
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": content}],  # type: ignore[list-item,misc]
            )
        if not response.choices:
            raise InvalidResponseError("AI returned no choices")
        text = response.choices[0].message.content
        if not text:
            raise InvalidResponseError("AI returned empty response")
        return text

"""Clients for the two external collaborators.

``BackendClient`` talks to the classification backend over HTTP;
``GeminiMemeModel`` sends the meme inference request to Google Gemini.
Neither retries: a failed call surfaces immediately.
"""
import logging
from typing import Any, Optional, Protocol

import httpx

from .config import MEME_CFG
from .exceptions import ExternalFormatError, TransportError, UpstreamStatusError
from .outbound import BackendRequest, MemeInferenceRequest

log = logging.getLogger("hate_console.clients")


class BackendClient:
    """Synchronous httpx client bound to the backend base URL."""

    def __init__(self, base_url: str, timeout: float = 60.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def send(self, req: BackendRequest, failure_message: str) -> Any:
        """POST ``req`` and return the decoded JSON body.

        Non-2xx answers raise ``UpstreamStatusError`` carrying the backend
        status and raw body; transport failures raise ``TransportError``.
        """
        log.debug("POST %s%s (%s)", self.base_url, req.path, req.content_kind)
        try:
            if req.files is not None:
                resp = self._http.post(req.path, files=req.files)
            else:
                resp = self._http.post(req.path, json=req.json)
        except httpx.HTTPError as e:
            log.error("Backend transport error path=%s: %s", req.path, e)
            raise TransportError(f"{failure_message}. Please try again.", str(e)) from e

        log.info("Backend response path=%s status=%d", req.path, resp.status_code)
        if not resp.is_success:
            raise UpstreamStatusError(failure_message, resp.status_code, resp.text)
        try:
            return resp.json()
        except ValueError as e:
            raise ExternalFormatError(
                "Backend returned non-JSON response",
                f"content-type={resp.headers.get('content-type')}",
            ) from e


class MemeModel(Protocol):
    def generate(self, req: MemeInferenceRequest) -> str:
        ...


class GeminiMemeModel:
    """Multimodal text generation through the google-genai SDK."""

    def __init__(self, model: str, api_key: Optional[str] = None):
        self.model = model
        self._api_key = api_key
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google import genai

            # Without a key the SDK falls back to its own environment discovery
            self._client = genai.Client(api_key=self._api_key) if self._api_key else genai.Client()
        return self._client

    def generate(self, req: MemeInferenceRequest) -> str:
        from google.genai import errors, types

        try:
            client = self._get_client()
            response = client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=req.image, mime_type=req.media_type),
                    req.prompt,
                ],
                config=types.GenerateContentConfig(temperature=req.temperature),
            )
        except (errors.APIError, ValueError) as e:
            log.error("Gemini call failed model=%s: %s", self.model, e)
            raise TransportError(
                "Failed to analyze meme image", str(e), hint=MEME_CFG.credential_hint
            ) from e

        text = response.text or ""
        log.info("Gemini responded model=%s text_length=%d", self.model, len(text))
        return text

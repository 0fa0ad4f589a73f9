"""Workers AI backend: run a model through the Cloudflare REST API."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import httpx

from .settings import DEFAULT_API_BASE, DEFAULT_REQUEST_TIMEOUT, CloudflareSettings
from .upstream_transport import get_upstream_transport

logger = logging.getLogger("cfshim")

ERROR_BODY_MAX_CHARS = 500


@dataclass(frozen=True)
class BackendResult:
    """Outcome of one backend call: a response, or the reason there is none."""

    response: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, response: Any, status_code: Optional[int] = 200) -> "BackendResult":
        return cls(response=response, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "BackendResult":
        return cls(error=error or "unknown backend error", status_code=status_code)


class InferenceBackend(Protocol):
    """Anything that can run a model on a request body."""

    async def run(self, model_id: str, body: Mapping[str, Any]) -> BackendResult:
        ...


def format_httpx_error(exc: Any, backend: "WorkersAIBackend", url: Optional[str] = None) -> str:
    """Produce a detailed, user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    try:
        request = exc.request
    except (AttributeError, RuntimeError):
        # httpx raises RuntimeError when no request is attached
        request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")

    if isinstance(exc, httpx.TimeoutException):
        parts.append(f"timeout={backend.timeout}s")

    return "; ".join(parts)


def _summarize_error_body(resp: httpx.Response) -> str:
    """Pull Cloudflare's ``errors[].message`` out of a failed response."""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, Mapping):
        errors = payload.get("errors")
        if isinstance(errors, list):
            messages = [
                str(err.get("message") or err) if isinstance(err, Mapping) else str(err)
                for err in errors
            ]
            if messages:
                return "; ".join(messages)
    text = resp.text.strip()
    if len(text) > ERROR_BODY_MAX_CHARS:
        return f"{text[:ERROR_BODY_MAX_CHARS]}...<truncated>"
    return text or "<empty body>"


@dataclass(frozen=True)
class WorkersAIBackend:
    """Calls ``POST {api_base}/accounts/{account_id}/ai/run/{model}``."""

    account_id: str
    api_token: str
    api_base: str = DEFAULT_API_BASE
    timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_settings(cls, settings: CloudflareSettings) -> "WorkersAIBackend":
        return cls(
            account_id=settings.account_id,
            api_token=settings.api_token,
            api_base=settings.api_base,
            timeout=settings.timeout,
        )

    def build_url(self, model_id: str) -> str:
        base = self.api_base.rstrip("/")
        return f"{base}/accounts/{self.account_id}/ai/run/{model_id.lstrip('/')}"

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def run(self, model_id: str, body: Mapping[str, Any]) -> BackendResult:
        """Run ``model_id`` on ``body``.

        Transport errors, error statuses, non-JSON bodies and
        ``success: false`` envelopes all come back as failed results;
        nothing here raises for a backend-side problem.
        """
        url = self.build_url(model_id)
        transport = get_upstream_transport(url)
        logger.debug("Calling Workers AI model %s at %s", model_id, url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=transport, follow_redirects=True
            ) as client:
                resp = await client.post(url, headers=self.build_headers(), json=dict(body))
        except httpx.HTTPError as exc:
            detail = format_httpx_error(exc, self, url=url)
            logger.error("Workers AI request for %s failed: %s", model_id, detail)
            return BackendResult.failure(detail)

        logger.debug("Received response from %s: status %s", url, resp.status_code)

        if resp.status_code >= 400:
            detail = f"{model_id} returned status {resp.status_code}: {_summarize_error_body(resp)}"
            logger.error("Workers AI error: %s", detail)
            return BackendResult.failure(detail, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError:
            detail = f"{model_id} returned a non-JSON body"
            logger.error("Workers AI error: %s", detail)
            return BackendResult.failure(detail, status_code=resp.status_code)

        if isinstance(payload, Mapping):
            if payload.get("success") is False:
                detail = f"{model_id} reported failure: {_summarize_error_body(resp)}"
                logger.error("Workers AI error: %s", detail)
                return BackendResult.failure(detail, status_code=resp.status_code)
            if "result" in payload:
                return BackendResult.success(payload["result"], resp.status_code)

        return BackendResult.success(payload, resp.status_code)

"""Azure OpenAI chat completion gateway."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Any

import httpx

from orgchat.core.logging_safety import redact_url
from orgchat.errors import InvalidResponseFormatError, NotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYMENT_NAME = "gpt-35-turbo"
DEFAULT_API_VERSION = "2023-05-15"
MAX_TOKENS = 2000
TEMPERATURE = 0.7

_FULL_COMPLETIONS_URL = re.compile(
    r"^(https://[^/]+)/openai/deployments/([^/?]+)/chat/completions\?api-version=([^&]+)",
    re.IGNORECASE,
)
_OPENAI_DEPLOYMENT_PATH = re.compile(r"/openai/deployments/([^/?]+)", re.IGNORECASE)
_DEPLOYMENT_PATH = re.compile(r"/deployments/([^/?]+)", re.IGNORECASE)
_DEPLOYMENT_SUFFIX = re.compile(r"/deployments/([^/?]+).*$")
_API_VERSION_PARAM = re.compile(r"api-version=([^&]+)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ResolvedEndpoint:
    base_endpoint: str
    deployment_name: str
    api_version: str

    @property
    def url(self) -> str:
        return (
            f"{self.base_endpoint}/openai/deployments/{self.deployment_name}"
            f"/chat/completions?api-version={self.api_version}"
        )


def resolve_endpoint(raw_endpoint: str) -> ResolvedEndpoint:
    """Derive the completions URL components from a free-form endpoint string.

    Accepted shapes, tried in order: a full completions URL, a URL with
    ``/openai/deployments/<name>``, a URL with ``/deployments/<name>``, and a
    bare resource root. A full completions URL is used verbatim; otherwise an
    ``api-version=`` anywhere in the input overrides the default version.
    """
    full_match = _FULL_COMPLETIONS_URL.match(raw_endpoint)
    if full_match:
        return ResolvedEndpoint(
            base_endpoint=full_match.group(1),
            deployment_name=full_match.group(2),
            api_version=full_match.group(3),
        )

    deployment_name = DEFAULT_DEPLOYMENT_NAME
    api_version = DEFAULT_API_VERSION
    base_endpoint = raw_endpoint.strip().rstrip("/")

    openai_match = _OPENAI_DEPLOYMENT_PATH.search(raw_endpoint)
    if openai_match:
        deployment_name = openai_match.group(1)
        base_endpoint = raw_endpoint.split("/openai/deployments/")[0]
    else:
        deployment_match = _DEPLOYMENT_PATH.search(raw_endpoint)
        if deployment_match:
            deployment_name = deployment_match.group(1)
            base_endpoint = _DEPLOYMENT_SUFFIX.sub("", raw_endpoint, count=1)

    version_match = _API_VERSION_PARAM.search(raw_endpoint)
    if version_match:
        api_version = version_match.group(1)

    return ResolvedEndpoint(
        base_endpoint=base_endpoint,
        deployment_name=deployment_name,
        api_version=api_version,
    )


def build_request_body(message: str) -> dict[str, Any]:
    return {
        "messages": [{"role": "user", "content": message}],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise InvalidResponseFormatError() from exc
    if not isinstance(content, str):
        raise InvalidResponseFormatError()
    return content


class CompletionGateway:
    """Single-shot chat completion against an Azure OpenAI deployment.

    No retries and no streaming; requests wait for the upstream without a timeout.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def complete(self, message: str, api_key: str, raw_endpoint: str) -> str:
        if not api_key or not raw_endpoint:
            raise NotConfiguredError("Azure API key and endpoint are required.")

        endpoint = resolve_endpoint(raw_endpoint)
        safe_url = redact_url(endpoint.url)
        logger.info(
            "completion.request url=%s deployment=%s api_version=%s",
            safe_url,
            endpoint.deployment_name,
            endpoint.api_version,
        )

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(
                    endpoint.url,
                    headers={"api-key": api_key},
                    json=build_request_body(message),
                )
        except httpx.HTTPError as exc:
            logger.error("completion.transport_failed url=%s error_type=%s", safe_url, type(exc).__name__)
            raise UpstreamError(status=None, body=str(exc)) from exc

        logger.info("completion.response url=%s status=%s", safe_url, response.status_code)
        if not response.is_success:
            body = response.text
            logger.error("completion.upstream_error url=%s status=%s", safe_url, response.status_code)
            if response.status_code == 404:
                raise UpstreamError(
                    status=404,
                    body=body,
                    message=(
                        "Azure AI endpoint not found. Please check:\n"
                        f"1. Your endpoint URL: {endpoint.base_endpoint}\n"
                        f"2. Your deployment name: {endpoint.deployment_name}\n"
                        "3. Ensure the deployment exists in your Azure OpenAI service"
                    ),
                )
            raise UpstreamError(status=response.status_code, body=body)

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("completion.invalid_body url=%s reason=not_json", safe_url)
            raise InvalidResponseFormatError() from exc
        return _extract_content(data)

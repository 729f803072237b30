"""Single chat-completion call against an OpenAI-compatible provider."""
from __future__ import annotations
import logging
from typing import Any

import httpx

from sellpoint.common.config import ProviderConfig
from sellpoint.common.errors import EmptyReplyError, TransportError
from sellpoint.common.templates import Prompt

LOGGER = logging.getLogger("sellpoint.pipeline.invoker")

def build_payload(prompt: Prompt, config: ProviderConfig) -> dict[str, Any]:
    return {
        "model": config.model,
        "messages": prompt.as_messages(),
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }

def _reply_content(data: Any) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None

def invoke_model(prompt: Prompt, config: ProviderConfig) -> str:
    """
    Send one chat-completion request and return the assistant text unmodified.

    Args:
        prompt: System and user messages.
        config: Provider endpoint, credentials and generation parameters.

    Raises:
        TransportError: non-success status, connection failure or unreadable body.
        EmptyReplyError: the response has no assistant message content.
    """
    headers = {"Authorization": f"Bearer {config.api_key}"}
    payload = build_payload(prompt, config)

    try:
        with httpx.Client(timeout=config.timeout) as client:
            r = client.post(config.completions_url, headers=headers, json=payload)
    except httpx.HTTPError as e:
        raise TransportError(None, str(e)) from e

    if not r.is_success:
        raise TransportError(r.status_code, r.text)

    try:
        data = r.json()
    except (ValueError, RecursionError) as e:
        raise TransportError(r.status_code, f"Unreadable response body: {e}") from e

    content = _reply_content(data)
    if not content:
        raise EmptyReplyError()
    LOGGER.debug("Raw model reply: %s...", content[:200])
    return content

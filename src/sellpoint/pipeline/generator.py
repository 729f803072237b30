"""Generation pipeline entry point."""
from __future__ import annotations
import itertools
import logging
import time
from typing import Callable

from sellpoint.common.config import ProviderConfig
from sellpoint.common.errors import InvalidShapeError
from sellpoint.common.schema import GenerationRequest, GenerationResult
from sellpoint.common.templates import Prompt, build_prompt, load_template
from sellpoint.pipeline.extract import extract_json, validate_result
from sellpoint.pipeline.invoker import invoke_model
from sellpoint.pipeline.retry import DEFAULT_RETRY_POLICY, RetryPolicy, run_with_retry

LOGGER = logging.getLogger("sellpoint.pipeline.generator")

Invoker = Callable[[Prompt, ProviderConfig], str]

def generate_copy(
    request: GenerationRequest,
    config: ProviderConfig,
    invoke: Invoker = invoke_model,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
) -> GenerationResult:
    """
    Turn a product description into marketing copy.

    The prompt is built once, from the configured template when one is set,
    and reused unchanged for every attempt.

    Args:
        request: Validated description.
        config: Provider settings.
        invoke: Model call; replaced in tests.
        policy: Attempt budget and backoff.
        sleep: Delay function used between attempts.

    Raises:
        UpstreamExhaustedError: every attempt failed.
    """
    prompt = build_prompt(request.description, template=load_template(config.prompt_template))
    preview = request.description[:50]
    counter = itertools.count(1)

    def attempt() -> GenerationResult:
        LOGGER.info("[Attempt %d] Generating for: %r", next(counter), preview)
        payload = extract_json(invoke(prompt, config))
        if not validate_result(payload):
            raise InvalidShapeError()
        return GenerationResult.from_payload(payload)

    return run_with_retry(attempt, policy=policy, sleep=sleep)

"""Generation pipeline: prompt, model call, extraction, validation, retry."""
from sellpoint.pipeline.generator import generate_copy
from sellpoint.pipeline.rate_limit import AdmissionPolicy, SlidingWindowRateLimiter
from sellpoint.pipeline.retry import RetryPolicy, run_with_retry

__all__ = [
    "generate_copy",
    "AdmissionPolicy",
    "SlidingWindowRateLimiter",
    "RetryPolicy",
    "run_with_retry",
]

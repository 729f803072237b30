"""Error taxonomy for the generation pipeline.

Attempt-local errors are recovered by retrying and never reach callers.
User-facing errors carry an HTTP status and a generic localized message.
"""
from __future__ import annotations


class PipelineError(Exception):
    """Base class for every error raised by the project."""


class AttemptError(PipelineError):
    """A single generation attempt failed; the orchestrator may retry."""


class TransportError(AttemptError):
    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Provider request failed: {body}")
        else:
            super().__init__(f"Provider returned HTTP {status_code}: {body}")


class EmptyReplyError(AttemptError):
    def __init__(self, message: str = "Provider returned empty content") -> None:
        super().__init__(message)


class NoJsonFoundError(AttemptError):
    def __init__(self, message: str = "No JSON object found in response") -> None:
        super().__init__(message)


class MalformedJsonError(AttemptError):
    def __init__(self, parser_message: str) -> None:
        self.parser_message = parser_message
        super().__init__(f"Malformed JSON in response: {parser_message}")


class InvalidShapeError(AttemptError):
    def __init__(self, message: str = "JSON structure invalid: missing required fields") -> None:
        super().__init__(message)


class UserFacingError(PipelineError):
    """Error rendered to the caller as ``{"error": message}``."""

    status_code: int = 500
    default_message: str = "服务内部错误"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InputError(UserFacingError):
    status_code = 400
    default_message = "请输入产品描述"


class AdmissionError(UserFacingError):
    status_code = 429
    default_message = "请求太频繁，请稍后再试"


class ConfigurationError(UserFacingError):
    status_code = 500
    default_message = "服务配置错误，请联系管理员"


class UpstreamExhaustedError(UserFacingError):
    status_code = 502
    default_message = "AI 生成失败，请稍后重试"

    def __init__(self, attempts: int, last_error: AttemptError | None = None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__()

"""Provider configuration read from the process environment."""
from __future__ import annotations
import os
from dataclasses import dataclass

DEFAULT_API_BASE = "https://api.siliconflow.cn/v1"
DEFAULT_MODEL = "deepseek-ai/DeepSeek-V3"

@dataclass(frozen=True)
class ProviderConfig:
    """Chat-completion provider settings and fixed generation parameters."""
    api_key: str | None = None
    api_base: str = DEFAULT_API_BASE
    model: str = DEFAULT_MODEL
    temperature: float = 0.4
    max_tokens: int = 1500
    timeout: float = 120.0
    prompt_template: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    @property
    def completions_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/chat/completions"

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """
        Build the config from AI_API_KEY, AI_API_BASE, AI_MODEL, AI_TIMEOUT
        and PROMPT_TEMPLATE_PATH.

        Empty values fall back to the defaults.
        """
        return cls(
            api_key=os.getenv("AI_API_KEY") or None,
            api_base=os.getenv("AI_API_BASE") or DEFAULT_API_BASE,
            model=os.getenv("AI_MODEL") or DEFAULT_MODEL,
            timeout=float(os.getenv("AI_TIMEOUT") or 120),
            prompt_template=os.getenv("PROMPT_TEMPLATE_PATH") or None,
        )

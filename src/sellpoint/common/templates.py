"""Prompt templating helpers.

The template holds both messages: the system instruction sits between
``<|system|>`` and ``<|user|>``, the user instruction follows ``<|user|>``
and receives the description through ``{{input}}``.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

SYSTEM_TAG = "<|system|>"
USER_TAG = "<|user|>"

DEFAULT_TEMPLATE = """<|system|>
你是一位产品卖点提炼专家。你的任务是：根据用户提供的【产品描述】，提炼该产品的营销卖点。

重要规则：
- 你必须严格围绕用户描述的产品来提炼，不要编造或替换成其他产品
- 只输出 JSON，不要输出任何其他文字、标题、解释、markdown标记
- 确保 JSON 格式正确，可以被直接解析
<|user|>
我的产品是：{{input}}

请为【这个产品】提炼以下内容，直接输出JSON（不要代码块标记）：
{
  "valueProposition": "一句话价值主张，不超过30字",
  "sellingPoints": [
    {"title": "卖点标题1(4-6字)", "description": "一句话解释(不超过30字)"},
    {"title": "卖点标题2(4-6字)", "description": "一句话解释(不超过30字)"},
    {"title": "卖点标题3(4-6字)", "description": "一句话解释(不超过30字)"}
  ],
  "targetUser": "目标用户画像，2-3句话",
  "elevatorPitch": "30秒电梯演讲稿，100-150字，口语化，像跟朋友聊天",
  "wechatCopy": "一条朋友圈文案，有吸引力，让人想评论"
}
"""

@dataclass(frozen=True)
class Prompt:
    system: str
    user: str

    def as_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]

def load_template(path: str | None = None) -> str:
    """
    Load a prompt template.

    Args:
        path: Optional path to a template file; the built-in template is used when omitted.
    """
    if path is None:
        return DEFAULT_TEMPLATE
    return Path(path).read_text(encoding="utf-8")

def render_prompt(template: str, user_input: str) -> str:
    """Substitute the description for every {{input}} placeholder."""
    return template.replace("{{input}}", user_input)

def split_template(template: str) -> tuple[str, str]:
    """Split a template into its system and user sections.

    Raises:
        ValueError: if either tag is missing or out of order.
    """
    if SYSTEM_TAG not in template or USER_TAG not in template:
        raise ValueError("Prompt template must contain both <|system|> and <|user|> tags")
    start = template.index(SYSTEM_TAG) + len(SYSTEM_TAG)
    end = template.find(USER_TAG, start)
    if end == -1:
        raise ValueError("<|user|> must follow <|system|> in prompt template")
    return template[start:end].strip(), template[end + len(USER_TAG):].strip()

def build_prompt(description: str, template: str | None = None) -> Prompt:
    """
    Build the system and user messages for one description.

    Args:
        description: Product description, already validated.
        template: Optional template override; defaults to the built-in one.
    """
    system, user = split_template(template or DEFAULT_TEMPLATE)
    return Prompt(system=system, user=render_prompt(user, description.strip()))

"""Dataclasses for pipeline request/result types."""
from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any

from sellpoint.common.errors import InputError

MAX_DESCRIPTION_LENGTH = 500

@dataclass(frozen=True)
class GenerationRequest:
    """A validated product description."""
    description: str

    @classmethod
    def parse(cls, raw: Any) -> "GenerationRequest":
        """
        Validate a raw description and return the trimmed request.

        Args:
            raw: Value taken from the request body; may be missing or non-string.

        Raises:
            InputError: if the description is missing, blank, or too long.
        """
        if not isinstance(raw, str) or not raw.strip():
            raise InputError("请输入产品描述")
        description = raw.strip()
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise InputError(f"产品描述不能超过{MAX_DESCRIPTION_LENGTH}字")
        return cls(description=description)


@dataclass(frozen=True)
class SellingPoint:
    title: str
    description: str

    @classmethod
    def from_raw(cls, item: Any) -> "SellingPoint":
        # items are not field-validated; keep whatever text the model gave
        if isinstance(item, dict):
            return cls(
                title=_as_text(item.get("title")),
                description=_as_text(item.get("description")),
            )
        return cls(title=_as_text(item), description="")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class GenerationResult:
    """Marketing copy produced by one successful attempt."""
    value_proposition: str
    selling_points: tuple[SellingPoint, ...]
    target_user: str
    elevator_pitch: str
    wechat_copy: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GenerationResult":
        """Build from a payload that already passed ``validate_result``."""
        return cls(
            value_proposition=payload["valueProposition"],
            selling_points=tuple(SellingPoint.from_raw(p) for p in payload["sellingPoints"]),
            target_user=payload["targetUser"],
            elevator_pitch=payload["elevatorPitch"],
            wechat_copy=payload["wechatCopy"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "valueProposition": self.value_proposition,
            "sellingPoints": [
                {"title": p.title, "description": p.description} for p in self.selling_points
            ],
            "targetUser": self.target_user,
            "elevatorPitch": self.elevator_pitch,
            "wechatCopy": self.wechat_copy,
        }

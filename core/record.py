"""
分析记录模型

管道唯一的成功输出：十个字段、keyTokens 恰好 7 个、所有文本已去除首尾空白。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.constants import MODULES_BY_ID, KeyTokenRules


class AnalysisRecord(BaseModel):
    """
    经过校验和修复的媒体分析记录。

    构造后不可变；序列化时使用 camelCase 字段名（keyTokens 等）。
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    title: str
    style: str
    prompt: str
    key_tokens: tuple[str, ...] = Field(alias="keyTokens")
    creative_remixes: tuple[str, ...] = Field(alias="creativeRemixes")
    outpainting_prompts: tuple[str, ...] = Field(alias="outpaintingPrompts")
    animation_prompts: tuple[str, ...] = Field(alias="animationPrompts")
    music_prompts: tuple[str, ...] = Field(alias="musicPrompts")
    dialogue_prompts: tuple[str, ...] = Field(alias="dialoguePrompts")
    story_prompts: tuple[str, ...] = Field(alias="storyPrompts")

    @field_validator("title", "style", "prompt")
    @classmethod
    def ensure_trimmed_text(cls, v: str) -> str:
        if not v or v != v.strip():
            raise ValueError("must be a non-empty, trimmed string")
        return v

    @field_validator(
        "key_tokens",
        "creative_remixes",
        "outpainting_prompts",
        "animation_prompts",
        "music_prompts",
        "dialogue_prompts",
        "story_prompts",
    )
    @classmethod
    def ensure_trimmed_items(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(item != item.strip() for item in v):
            raise ValueError("list items must be trimmed")
        return v

    @field_validator("key_tokens")
    @classmethod
    def ensure_key_token_count(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(v) != KeyTokenRules.COUNT:
            raise ValueError(f"keyTokens must contain exactly {KeyTokenRules.COUNT} items, got {len(v)}")
        return v

    def to_dict(self) -> dict[str, Any]:
        """序列化为只含十个 camelCase 字段的字典"""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def prompts_for(self, module_id: str) -> tuple[str, ...]:
        """返回某个创意模块（story、motion、mix 等）读取的提示列表"""
        module = MODULES_BY_ID.get(module_id)
        if module is None:
            raise KeyError(f"unknown creative module: {module_id}")
        for name, info in type(self).model_fields.items():
            if info.alias == module.field:
                return getattr(self, name)
        raise KeyError(module.field)

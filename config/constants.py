"""
配置常量模块

集中管理分析记录的字段名、数量约束、默认补齐词表以及创意模块映射。
"""

from dataclasses import dataclass


# ==================== 记录字段 ====================

class RecordFields:
    """分析记录的字段名（JSON 中的 camelCase 名称）"""

    TITLE: str = "title"
    STYLE: str = "style"
    PROMPT: str = "prompt"
    KEY_TOKENS: str = "keyTokens"
    CREATIVE_REMIXES: str = "creativeRemixes"
    OUTPAINTING_PROMPTS: str = "outpaintingPrompts"
    ANIMATION_PROMPTS: str = "animationPrompts"
    MUSIC_PROMPTS: str = "musicPrompts"
    DIALOGUE_PROMPTS: str = "dialoguePrompts"
    STORY_PROMPTS: str = "storyPrompts"

    # 必须是非空字符串的字段
    SCALAR_FIELDS: tuple[str, ...] = (TITLE, STYLE, PROMPT)

    # 必须是字符串列表的字段
    LIST_FIELDS: tuple[str, ...] = (
        KEY_TOKENS,
        CREATIVE_REMIXES,
        OUTPAINTING_PROMPTS,
        ANIMATION_PROMPTS,
        MUSIC_PROMPTS,
        DIALOGUE_PROMPTS,
        STORY_PROMPTS,
    )

    # 声明顺序即校验和报错顺序
    REQUIRED_FIELDS: tuple[str, ...] = (
        TITLE,
        STYLE,
        PROMPT,
        KEY_TOKENS,
        CREATIVE_REMIXES,
        OUTPAINTING_PROMPTS,
        ANIMATION_PROMPTS,
        MUSIC_PROMPTS,
        DIALOGUE_PROMPTS,
        STORY_PROMPTS,
    )


# ==================== 关键词约束 ====================

class KeyTokenRules:
    """keyTokens 数组的长度约束和补齐词表"""

    # keyTokens 修复后必须恰好有 7 个元素
    COUNT: int = 7

    # 其余提示列表约定为 3 个元素，但不强制
    CONVENTIONAL_PROMPT_COUNT: int = 3

    DEFAULT_FALLBACKS: tuple[str, ...] = (
        "visual style",
        "color palette",
        "artistic mood",
        "creative essence",
        "design elements",
        "aesthetic tone",
        "artistic vision",
    )

    @staticmethod
    def placeholder(index: int) -> str:
        """补齐词表耗尽时使用的占位词（index 从 0 开始）"""
        return f"token {index + 1}"


# ==================== 诊断预览 ====================

class DiagnosticLimits:
    """错误对象和日志中文本预览的长度上限"""

    # 错误中原始文本/清理后文本的预览长度
    PREVIEW_CHARS: int = 500

    # 语法错误位置前后各保留的字符数
    SNIPPET_RADIUS: int = 40

    # 日志中输入预览的长度
    LOG_PREVIEW_CHARS: int = 100


# ==================== 媒体类型 ====================

class MediaTypes:
    """上游模型支持分析的媒体类型"""

    IMAGE: str = "image"
    VIDEO: str = "video"
    AUDIO: str = "audio"

    ALL: tuple[str, ...] = (IMAGE, VIDEO, AUDIO)
    DEFAULT: str = IMAGE


# ==================== 创意模块 ====================

@dataclass(frozen=True)
class CreativeModule:
    """界面上的创意模块及其读取的提示列表字段"""

    id: str
    name: str
    field: str


TOP_MODULES: tuple[CreativeModule, ...] = (
    CreativeModule(id="story", name="STORY", field=RecordFields.STORY_PROMPTS),
    CreativeModule(id="motion", name="MOTION", field=RecordFields.ANIMATION_PROMPTS),
    CreativeModule(id="dialogue", name="DIALOGUE", field=RecordFields.DIALOGUE_PROMPTS),
)

BOTTOM_MODULES: tuple[CreativeModule, ...] = (
    CreativeModule(id="mix", name="MIX", field=RecordFields.CREATIVE_REMIXES),
    CreativeModule(id="expand", name="EXPAND", field=RecordFields.OUTPAINTING_PROMPTS),
    CreativeModule(id="sound", name="SOUND", field=RecordFields.MUSIC_PROMPTS),
)

MODULES_BY_ID: dict[str, CreativeModule] = {module.id: module for module in TOP_MODULES + BOTTOM_MODULES}


# ==================== 导出 ====================

__all__ = [
    "RecordFields",
    "KeyTokenRules",
    "DiagnosticLimits",
    "MediaTypes",
    "CreativeModule",
    "TOP_MODULES",
    "BOTTOM_MODULES",
    "MODULES_BY_ID",
]

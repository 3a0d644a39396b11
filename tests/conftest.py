"""测试共享夹具"""

import json
from typing import Any

import pytest

from config.env_loader import ExtractionSettings, load_extraction_settings


@pytest.fixture
def settings() -> ExtractionSettings:
    """不读取 .env 文件的默认配置"""
    return load_extraction_settings(_env_file=None)


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """一份完全合法的分析结果"""
    return {
        "title": "Digital Serenity",
        "style": "Neo-futuristic Cyberpunk",
        "prompt": (
            "A captivating cybernetic portrait bathed in neon glow, showcasing intricate digital "
            "enhancements and a serene expression, blending human and machine aesthetics seamlessly."
        ),
        "keyTokens": [
            "cybernetic portrait",
            "neon lighting",
            "futuristic aesthetic",
            "digital enhancement",
            "synthetic beauty",
            "technological fusion",
            "ethereal glow",
        ],
        "creativeRemixes": [
            "Transform into medieval fantasy setting with magical elements replacing technological components.",
            "Reimagine as 1920s art deco style with geometric patterns and luxurious vintage aesthetic.",
            "Convert to underwater scene with bioluminescent features and flowing aquatic elements.",
        ],
        "outpaintingPrompts": [
            "Reveal vast surrounding environment with additional contextual elements beyond current boundaries.",
            "Expand to show broader narrative context with supporting characters in background.",
            "Extend scope to include temporal elements showing progression of central theme.",
        ],
        "animationPrompts": [
            "Gentle rhythmic motion with subtle environmental changes and soft transitions.",
            "Dynamic transformation sequence with dramatic lighting changes and particle effects.",
            "Cinematic camera movement revealing hidden details through motion.",
        ],
        "musicPrompts": [
            "Ethereal ambient soundscape with layered textures and evolving harmonies.",
            "Dynamic orchestral composition featuring dramatic crescendos and rich instrumentation.",
            "Electronic fusion with synthesized textures and rhythmic patterns.",
        ],
        "dialoguePrompts": [
            "The essence of transformation unfolds",
            "Where reality meets imagination",
            "Beyond the realm of possibility",
        ],
        "storyPrompts": [
            "A simple discovery becomes the catalyst for extraordinary personal transformation.",
            "An intricate narrative exploring how unrelated elements connect across dimensions.",
            "A surreal adventure where boundaries between different realities blur.",
        ],
    }


@pytest.fixture
def sample_text(sample_payload: dict[str, Any]) -> str:
    """格式化后的合法 JSON 文本"""
    return json.dumps(sample_payload, indent=2)

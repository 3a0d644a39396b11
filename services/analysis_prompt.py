"""
分析提示词构建

生成发送给上游模型的指令文本，要求模型只返回固定结构的 JSON 对象。
模型调用本身由调用方负责。
"""

import logging

from config.constants import KeyTokenRules, MediaTypes

logger = logging.getLogger(__name__)

_RESPONSE_SHAPE = """{{
  "title": "2 word creative title",
  "style": "3 word creative description",
  "prompt": "Complete description of the scene in exactly 33 words",
  "keyTokens": [{key_token_slots}],
  "creativeRemixes": ["enhanced_remix1_15_to_21_words","enhanced_remix2_15_to_21_words","enhanced_remix3_15_to_21_words"],
  "outpaintingPrompts": ["enhanced_outpainting1_15_to_21_words","enhanced_outpainting2_15_to_21_words","enhanced_outpainting3_15_to_21_words"],
  "animationPrompts": ["enhanced_video1_15_to_21_words_5s_max","enhanced_video2_15_to_21_words_5s_max","enhanced_video3_15_to_21_words_5s_max"],
  "musicPrompts": ["enhanced_music1_150_to_180_characters","enhanced_music2_150_to_180_characters","enhanced_music3_150_to_180_characters"],
  "dialoguePrompts": ["dialogue1_5_to_10_words","dialogue2_5_to_10_words","dialogue3_5_to_10_words"],
  "storyPrompts": ["enhanced_story1_15_to_21_words","enhanced_story2_15_to_21_words","enhanced_story3_15_to_21_words"]
}}"""

_PROMPT_TEMPLATE = """Analyze this {media_type} and return ONLY a valid JSON object with the following exact structure. Do not include any markdown formatting, code blocks, or additional text:

{shape}

REQUIREMENTS:
- title: Exactly 2 words that capture the essence
- style: Exactly 3 words describing the aesthetic
- prompt: Exactly 33 words describing the complete scene
- keyTokens: EXACTLY {count} two-word tokens that best summarize the content (no more, no less)
- creativeRemixes: {prompts} creative reinterpretations, each 15-21 words
- outpaintingPrompts: {prompts} scene expansion prompts, each 15-21 words
- animationPrompts: {prompts} video animation descriptions, each 15-21 words, max 5 seconds
- musicPrompts: {prompts} music style descriptions, each 150-180 characters
- dialoguePrompts: {prompts} dialogue/narration prompts, each 5-10 words (simple and flexible)
- storyPrompts: {prompts} unique story concepts, each 15-21 words

CRITICAL: The keyTokens array MUST contain exactly {count} elements. Each element should be a meaningful two-word phrase that captures key aspects of the {media_type}. Return ONLY the JSON object above. No markdown, no code blocks, no additional text. Start with {{ and end with }}."""


def media_type_from_mime(mime_type: str | None) -> str:
    """
    根据 MIME 类型推断媒体类型

    Args:
        mime_type: 例如 "image/png"、"video/mp4"

    Returns:
        "image"、"video" 或 "audio"；无法识别时默认为 "image"
    """
    lowered = (mime_type or "").strip().lower()
    for media_type in MediaTypes.ALL:
        if lowered.startswith(f"{media_type}/"):
            return media_type
    return MediaTypes.DEFAULT


def build_analysis_prompt(media_type: str) -> str:
    """
    构建要求模型返回分析记录的提示词

    Args:
        media_type: "image"、"video" 或 "audio"

    Returns:
        提示词文本

    Raises:
        ValueError: 不支持的媒体类型
    """
    if media_type not in MediaTypes.ALL:
        raise ValueError(f"unsupported media type: {media_type!r}")

    key_token_slots = ",".join(f'"token{index + 1}"' for index in range(KeyTokenRules.COUNT))
    shape = _RESPONSE_SHAPE.format(key_token_slots=key_token_slots)
    prompt = _PROMPT_TEMPLATE.format(
        media_type=media_type,
        shape=shape,
        count=KeyTokenRules.COUNT,
        prompts=KeyTokenRules.CONVENTIONAL_PROMPT_COUNT,
    )
    logger.debug("构建分析提示词 (媒体类型=%s, 长度=%s)", media_type, len(prompt))
    return prompt

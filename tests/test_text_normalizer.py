"""
文本规范化模块的单元测试
"""

import unittest

from utils.text_normalizer import (
    TextNormalizer,
    normalize_response_text,
    normalize_unicode_quotes,
    remove_control_characters,
    strip_edge_backticks,
    strip_markdown_fence,
)


class TestStripMarkdownFence(unittest.TestCase):
    """测试代码块标记移除"""

    def test_json_fence_with_newline(self):
        """测试带 json 标签和换行的代码块"""
        text = '```json\n{"a": 1}\n```'
        self.assertEqual(strip_markdown_fence(text), '{"a": 1}')

    def test_uppercase_tag(self):
        """测试大写 JSON 标签"""
        text = '```JSON\n{"a": 1}\n```'
        self.assertEqual(strip_markdown_fence(text), '{"a": 1}')

    def test_fence_without_tag_or_newline(self):
        """测试没有标签也没有换行的代码块"""
        text = '```{"a": 1}```'
        self.assertEqual(strip_markdown_fence(text), '{"a": 1}')

    def test_no_fence(self):
        """测试无代码块时原样返回"""
        self.assertEqual(strip_markdown_fence('  {"a": 1} '), '{"a": 1}')


class TestNormalizeResponseText(unittest.TestCase):
    """测试完整的规范化流程"""

    def test_stray_backticks(self):
        """测试首尾残留的反引号"""
        self.assertEqual(normalize_response_text('`{"a": 1}`'), '{"a": 1}')
        self.assertEqual(normalize_response_text('``{"a": 1}'), '{"a": 1}')

    def test_fence_then_whitespace(self):
        """测试代码块外的空白"""
        text = '\n\n  ```json\n  {"a": 1}  \n```\n'
        self.assertEqual(normalize_response_text(text), '{"a": 1}')

    def test_empty_input(self):
        """测试空输入"""
        self.assertEqual(normalize_response_text(""), "")
        self.assertEqual(normalize_response_text("   "), "")

    def test_plain_prose_unchanged(self):
        """测试普通文本只去除空白"""
        self.assertEqual(normalize_response_text("  sorry, I cannot help  "), "sorry, I cannot help")

    def test_inner_backticks_kept(self):
        """测试内容中间的反引号不受影响"""
        text = '{"a": "use `code` here"}'
        self.assertEqual(normalize_response_text(text), text)


class TestNormalizeUnicodeQuotes(unittest.TestCase):
    """测试Unicode引号规范化"""

    def test_double_quotes(self):
        """测试弯双引号"""
        self.assertEqual(normalize_unicode_quotes("“title”"), '"title"')

    def test_single_quotes(self):
        """测试弯单引号"""
        self.assertEqual(normalize_unicode_quotes("don’t"), "don't")


class TestRemoveControlCharacters(unittest.TestCase):
    """测试控制字符移除"""

    def test_keeps_whitespace_controls(self):
        """测试保留制表符和换行"""
        self.assertEqual(remove_control_characters("a\tb\nc\rd"), "a\tb\nc\rd")

    def test_removes_others(self):
        """测试移除其他控制字符"""
        self.assertEqual(remove_control_characters("a\x00b\x07c\x7f"), "abc")


class TestTextNormalizer(unittest.TestCase):
    """测试面向对象封装"""

    def test_normalize(self):
        normalizer = TextNormalizer()
        self.assertEqual(normalizer.normalize('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(normalizer.strip_markdown('```\n{}\n```'), "{}")
        self.assertEqual(strip_edge_backticks("``x``"), "x")


if __name__ == "__main__":
    unittest.main()

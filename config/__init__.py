"""配置辅助工具的便捷导出。"""

from .env_loader import ExtractionSettings, get_settings, load_extraction_settings
from .logging_setup import setup_logging

__all__ = ["ExtractionSettings", "get_settings", "load_extraction_settings", "setup_logging"]

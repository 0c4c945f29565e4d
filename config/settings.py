#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings

from .constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_LINE_HEIGHT_PT,
    CHARS_PER_LINE,
    MIN_FRAGMENT_HEIGHT_PT,
    TOC_TEXT_WIDTH,
    TOC_LINES_PER_PAGE,
    LOG_LEVEL,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Layout ==========
    default_page_size: str = DEFAULT_PAGE_SIZE
    allow_block_splitting: bool = False  # keep blocks whole unless enabled
    min_fragment_height: float = MIN_FRAGMENT_HEIGHT_PT

    # Estimating measurer (used by the CLI and previews)
    line_height: float = DEFAULT_LINE_HEIGHT_PT
    chars_per_line: int = CHARS_PER_LINE

    # ========== Table of Contents ==========
    toc_text_width: int = TOC_TEXT_WIDTH
    toc_lines_per_page: int = TOC_LINES_PER_PAGE

    # ========== Versions ==========
    default_author: str = "system"

    # ========== Logging ==========
    log_level: str = LOG_LEVEL
    log_file: Optional[Path] = None  # no file logging unless set
    log_json: bool = False

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        env_prefix = "COMPOSER_"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model


# Global settings instance
settings = Settings()

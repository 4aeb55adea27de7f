"""Utility helpers."""

from fillergym.utils.llm_json import parse_llm_json
from fillergym.utils.logging_setup import setup_logging

__all__ = ["parse_llm_json", "setup_logging"]

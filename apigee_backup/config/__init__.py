"""
Configuration module.
"""

from .loader import Config, ConfigLoader, parse_tag_ids

__all__ = ["Config", "ConfigLoader", "parse_tag_ids"]

"""Configuration management: analysis settings, profiles, and TOML loading.

Usage:
    >>> from record_factory.config import load_config, AnalysisSettings, FactoryConfig
"""

from record_factory.config.loader import load_config
from record_factory.config.models import AnalysisSettings, DatabaseProfile, FactoryConfig

__all__ = ["load_config", "AnalysisSettings", "DatabaseProfile", "FactoryConfig"]

"""
Utilities Module
Configuration and logging utilities
"""

from .config import load_config, Config, validate_config, build_palette, evolver_kwargs
from .logger import setup_logger

__all__ = ['load_config', 'Config', 'validate_config', 'build_palette', 'evolver_kwargs', 'setup_logger']

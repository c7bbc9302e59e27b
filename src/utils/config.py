"""
Configuration Management
Load and validate configuration files
"""

import logging
import yaml
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass

from ..fractal_substitution.palette import ColorPalette

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'fractal': {
        'depth': 3,
        'palette': ['#000000', '#FFFFFF']
    },
    'evolution': {
        'population_size': 40,
        'elitism_rate': 0.1,
        'crossover_rate': 0.9,
        'mutation_rate': 0.03,
        'tournament_size': 2,
        'max_generations': 100,
        'time_budget': None,
        'n_workers': 1,
        'seed': None
    }
}

EVOLUTION_KEYS = (
    'population_size', 'elitism_rate', 'crossover_rate', 'mutation_rate',
    'tournament_size', 'max_generations', 'time_budget', 'n_workers', 'seed'
)

POSITIVE_KEYS = ('population_size', 'tournament_size', 'max_generations', 'time_budget', 'n_workers')

RATE_KEYS = ('elitism_rate', 'crossover_rate', 'mutation_rate')


@dataclass
class Config:
    """Configuration container."""
    fractal: Dict[str, Any]
    evolution: Dict[str, Any]


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    config_file = Path(config_path)

    if not config_file.exists():
        # Create default config if it doesn't exist
        create_default_config(config_path)

    with open(config_file, 'r') as f:
        config = yaml.safe_load(f)

    return config


def create_default_config(config_path: str):
    """
    Create default configuration file.

    Args:
        config_path: Path where to create config file
    """
    config_file = Path(config_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, 'w') as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, indent=2)

    logger.info(f"Created default configuration at {config_path}")


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration parameters.

    Args:
        config: Configuration dictionary

    Returns:
        True if configuration is valid
    """
    for section in ('fractal', 'evolution'):
        if section not in config:
            logger.error(f"Missing required configuration section: {section}")
            return False

    fractal = config['fractal']
    for param in ('depth', 'palette'):
        if param not in fractal:
            logger.error(f"Missing required fractal parameter: {param}")
            return False

    if not isinstance(fractal['depth'], int) or fractal['depth'] < 0:
        logger.error(f"Fractal depth must be a non-negative integer: {fractal['depth']}")
        return False

    if not fractal['palette']:
        logger.error("Fractal palette must not be empty")
        return False

    evolution = config['evolution']
    for param in ('population_size', 'max_generations'):
        if param not in evolution:
            logger.error(f"Missing required evolution parameter: {param}")
            return False

    for param in POSITIVE_KEYS:
        value = evolution.get(param)
        if value is not None and (not isinstance(value, (int, float)) or value <= 0):
            logger.error(f"Evolution parameter {param} must be positive: {value}")
            return False

    for param in RATE_KEYS:
        value = evolution.get(param, DEFAULT_CONFIG['evolution'][param])
        if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
            logger.error(f"Evolution parameter {param} must be in [0, 1]: {value}")
            return False

    if evolution.get('max_generations') is None and evolution.get('time_budget') is None:
        logger.error("Either max_generations or time_budget must be set")
        return False

    return True


def to_config(config: Dict[str, Any]) -> Config:
    """Wrap a configuration dictionary, filling missing keys from defaults."""
    fractal = {**DEFAULT_CONFIG['fractal'], **config.get('fractal', {})}
    evolution = {**DEFAULT_CONFIG['evolution'], **config.get('evolution', {})}
    return Config(fractal=fractal, evolution=evolution)


def build_palette(config: Dict[str, Any]) -> ColorPalette:
    """Palette from the fractal section."""
    return ColorPalette(config['fractal']['palette'])


def evolver_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
    """Keyword arguments for RuleEvolver from the evolution section."""
    evolution = to_config(config).evolution
    return {key: evolution[key] for key in EVOLUTION_KEYS}

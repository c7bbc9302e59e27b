"""
Diagnostics Module
Volume comparison metrics and visualization tools
"""

from .metrics import (
    compare_volumes,
    count_components,
    rule_usage
)
from .visualizer import DiagnosticVisualizer

__all__ = [
    'compare_volumes',
    'count_components',
    'rule_usage',
    'DiagnosticVisualizer'
]

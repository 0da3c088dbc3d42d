"""faillint - report unwanted import paths or exported declaration usages in Go code."""

__version__ = "0.1.0"
__date__ = "unknown"

from .analyzer.analyzer import Faillint, new_analyzer
from .config import FaillintConfig, load_config
from .rules import Rule, parse_paths

__all__ = [
    "Faillint",
    "FaillintConfig",
    "Rule",
    "load_config",
    "new_analyzer",
    "parse_paths",
    "__version__",
]

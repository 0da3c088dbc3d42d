"""Import-and-usage analysis and the faillint analyzer."""

from .analyzer import Faillint, new_analyzer
from .directives import FILE_IGNORE, IGNORE, DirectiveEngine, parse_directive
from .imports import ImportMode, effective_qualifier, resolve_imports, unquote
from .models import AnalysisPass, Diagnostic
from .usages import UNSPECIFIED, UsageScanner, scan_usages

__all__ = [
    "AnalysisPass",
    "Diagnostic",
    "DirectiveEngine",
    "FILE_IGNORE",
    "Faillint",
    "IGNORE",
    "ImportMode",
    "UNSPECIFIED",
    "UsageScanner",
    "effective_qualifier",
    "new_analyzer",
    "parse_directive",
    "resolve_imports",
    "scan_usages",
    "unquote",
]

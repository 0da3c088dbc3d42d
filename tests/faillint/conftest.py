"""Shared fixtures for faillint tests."""

import re
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from faillint.analyzer.analyzer import Faillint, new_analyzer
from faillint.analyzer.models import AnalysisPass, Diagnostic
from faillint.driver import Checker
from faillint.source.models import SourceFile
from faillint.source.parser import GoSourceParser

TESTDATA = Path(__file__).parent / "testdata" / "src"

WANT_PATTERN = re.compile(r"// want (.*)$")
WANT_MESSAGE = re.compile(r"`([^`]*)`")

# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)

@pytest.fixture
def testdata() -> Path:
    return TESTDATA

# ============================================================================
# Parsing Fixtures
# ============================================================================

@pytest.fixture
def parser() -> GoSourceParser:
    return GoSourceParser()

@pytest.fixture
def parse(parser: GoSourceParser):
    """Parse Go source text into a SourceFile."""

    def _parse(code: str, filename: str = "x.go") -> SourceFile:
        return parser.parse_content(code, filename)

    return _parse

@pytest.fixture
def analyze(parse):
    """Run an analyzer over inline Go files and return its diagnostics."""

    def _analyze(
        paths: str,
        *sources: str,
        ignore_tests: bool = False,
        filenames: list[str] | None = None,
    ) -> list[Diagnostic]:
        names = filenames or [f"file{i}.go" for i in range(len(sources))]
        files = [parse(code, name) for code, name in zip(sources, names)]
        diagnostics: list[Diagnostic] = []
        pass_ = AnalysisPass(files=files, report=diagnostics.append)
        new_analyzer(paths, ignore_tests).run(pass_)
        return diagnostics

    return _analyze

# ============================================================================
# Expectation helpers
# ============================================================================

def read_expectations(directory: Path) -> list[tuple[str, int, str]]:
    """Collect `// want` annotations of every Go file in a directory.

    Each backtick quoted string after `// want` is one diagnostic expected
    on that line.
    """
    expected: list[tuple[str, int, str]] = []
    for path in sorted(directory.glob("*.go")):
        for lineno, line in enumerate(path.read_text().splitlines(), start=1):
            match = WANT_PATTERN.search(line)
            if match is None:
                continue
            for message in WANT_MESSAGE.findall(match.group(1)):
                expected.append((path.name, lineno, message))
    return sorted(expected)

def describe(diagnostics: list[Diagnostic]) -> list[tuple[str, int, str]]:
    return sorted(
        (Path(d.position.filename).name, d.position.line, d.message) for d in diagnostics
    )

def run_testdata(analyzer: Faillint, name: str) -> tuple[list, list]:
    """Check testdata package `name`; return (expected, actual)."""
    directory = TESTDATA / name
    result = Checker(analyzer).check([str(directory)])
    return read_expectations(directory), describe(result.diagnostics)

@pytest.fixture
def check_testdata():
    """Fixture form of run_testdata."""
    return run_testdata

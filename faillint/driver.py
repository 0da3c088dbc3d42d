"""Runs the analyzer over Go packages found on disk."""

from dataclasses import dataclass, field
from pathlib import Path

from .analyzer.analyzer import Faillint
from .analyzer.models import AnalysisPass, Diagnostic
from .config import FaillintConfig
from .errors import SourceError
from .source.models import SourceFile
from .source.parser import GoSourceParser
from .utils.logging import LogContext, get_logger

logger = get_logger("driver")

RECURSIVE_SUFFIX = "/..."


@dataclass
class CheckResult:
    """Outcome of checking a set of packages."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    files_checked: int = 0
    packages_checked: int = 0
    parse_errors: list[str] = field(default_factory=list)

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)


class Checker:
    """Discovers packages, parses their files and runs one analyzer on them.

    Each directory holding `.go` files is one package.
    """

    def __init__(
        self,
        analyzer: Faillint,
        config: FaillintConfig | None = None,
        parser: GoSourceParser | None = None,
    ):
        self.analyzer = analyzer
        self.config = config or analyzer.config
        self.parser = parser or GoSourceParser()

    def discover_packages(self, patterns: list[str]) -> dict[Path, list[Path]]:
        """Expand package patterns (`dir`, `dir/...`, `file.go`) into packages.

        Raises:
            SourceError: if a pattern names something that does not exist
        """
        packages: dict[Path, list[Path]] = {}

        with LogContext("Discovering packages", logger):
            for pattern in patterns or ["." + RECURSIVE_SUFFIX]:
                if pattern == "...":
                    pattern = "." + RECURSIVE_SUFFIX
                if pattern.endswith(RECURSIVE_SUFFIX):
                    root = Path(pattern[: -len(RECURSIVE_SUFFIX)] or ".")
                    if not root.is_dir():
                        raise SourceError(f"no such directory: {root}")
                    for directory in self._walk(root):
                        self._add_package(packages, directory)
                    continue

                target = Path(pattern)
                if target.is_file() and target.suffix == ".go":
                    files = packages.setdefault(target.parent, [])
                    if target not in files:
                        files.append(target)
                elif target.is_dir():
                    self._add_package(packages, target)
                else:
                    raise SourceError(f"no such package: {pattern}")

            logger.info(f"Discovered {len(packages)} packages")

        return packages

    def check(self, patterns: list[str]) -> CheckResult:
        """Analyze all packages matching patterns."""
        result = CheckResult()

        for directory, files in self.discover_packages(patterns).items():
            parsed = self._parse_package(files, result)
            if not parsed:
                continue

            pass_ = AnalysisPass(
                files=parsed,
                report=result.diagnostics.append,
                package=str(directory),
            )
            self.analyzer.run(pass_)
            result.packages_checked += 1
            result.files_checked += len(parsed)

        result.diagnostics.sort(key=lambda d: d.position)
        logger.info(
            f"Checked {result.files_checked} files in {result.packages_checked} packages, "
            f"{len(result.diagnostics)} problems"
        )
        return result

    def _parse_package(self, files: list[Path], result: CheckResult) -> list[SourceFile]:
        parsed: list[SourceFile] = []
        for file_path in sorted(files):
            try:
                parsed.append(self.parser.parse_file(file_path))
            except SourceError as e:
                logger.warning(str(e))
                result.parse_errors.append(str(e))
        return parsed

    def _add_package(self, packages: dict[Path, list[Path]], directory: Path) -> None:
        files = sorted(p for p in directory.glob("*.go") if p.is_file())
        if files:
            packages[directory] = files

    def _walk(self, root: Path) -> list[Path]:
        """Directories under root, skipping the ones the go tool skips."""
        directories = [root]
        for child in sorted(root.iterdir()):
            if not child.is_dir() or self._is_excluded(child.name):
                continue
            directories.extend(self._walk(child))
        return directories

    def _is_excluded(self, name: str) -> bool:
        return name.startswith((".", "_")) or name in self.config.exclude_dirs

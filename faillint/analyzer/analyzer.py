"""The faillint analyzer: reports unwanted imports and declaration uses."""

from tree_sitter import Node

from ..config import FaillintConfig
from ..rules import Rule, parse_paths
from ..source.comment_map import CommentMap
from ..source.models import ImportSpec, SourceFile
from ..utils.logging import get_logger
from .directives import DirectiveEngine
from .imports import effective_qualifier, import_path, resolve_imports
from .models import AnalysisPass
from .usages import UNSPECIFIED, IgnoreCheck, scan_usages

logger = get_logger("analyzer")

TEST_FILE_SUFFIX = "_test.go"


def quote(text: str) -> str:
    """Double-quote text the way Go's %q verb does for printable strings."""
    escaped = []
    for ch in text:
        if ch in ('"', "\\"):
            escaped.append("\\" + ch)
        elif ch == "\n":
            escaped.append("\\n")
        elif ch == "\t":
            escaped.append("\\t")
        elif ch == "\r":
            escaped.append("\\r")
        elif not ch.isprintable():
            code = ord(ch)
            escaped.append(f"\\x{code:02x}" if code < 0x80 else f"\\u{code:04x}")
        else:
            escaped.append(ch)
    return '"' + "".join(escaped) + '"'


def package_message(path: str, suggestion: str = "") -> str:
    message = f"package {quote(path)} shouldn't be imported"
    if suggestion:
        message += f", suggested: {quote(suggestion)}"
    return message


def declaration_message(name: str, path: str, suggestion: str = "") -> str:
    message = f"declaration {quote(name)} from package {quote(path)} shouldn't be used"
    if suggestion:
        message += f", suggested: {quote(suggestion)}"
    return message


class Faillint:
    """Analyzer reporting unwanted import paths or exported declaration usages.

    Each instance owns its configuration; the policy is parsed once, when the
    analyzer is created.
    """

    name = "faillint"
    doc = "Report unwanted import path or exported declaration usages"

    def __init__(self, config: FaillintConfig | None = None):
        self.config = config or FaillintConfig()
        self._rules: tuple[Rule, ...] = tuple(parse_paths(self.config.paths))

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def run(self, pass_: AnalysisPass) -> None:
        """Analyze every file of a pass, reporting through the pass."""
        if not self._rules:
            return

        for source_file in pass_.files:
            self.check_file(pass_, source_file)

    def check_file(self, pass_: AnalysisPass, source_file: SourceFile) -> None:
        if self.config.ignore_tests and TEST_FILE_SUFFIX in _basename(source_file.filename):
            logger.debug(f"Skipping test file: {source_file.filename}")
            return

        directives = DirectiveEngine(pass_.reportf, package_doc=source_file.doc)
        if directives.file_is_ignored():
            logger.debug(f"Skipping file with file-ignore directive: {source_file.filename}")
            return

        comment_map = CommentMap.build(source_file)

        def is_ignored(node: Node, offset: int) -> bool:
            return directives.usage_has_directive(comment_map, node, offset)

        for rule in self._rules:
            for spec in resolve_imports(source_file, rule.import_path):
                if is_ignored(spec.node, spec.position.offset):
                    continue
                self._check_import(pass_, source_file, rule, spec, is_ignored)

    def _check_import(
        self,
        pass_: AnalysisPass,
        source_file: SourceFile,
        rule: Rule,
        spec: ImportSpec,
        is_ignored: IgnoreCheck,
    ) -> None:
        qualifier, mode = effective_qualifier(spec)
        usages = scan_usages(source_file, qualifier, mode, is_ignored)
        if not usages:
            return

        path = import_path(spec)
        if UNSPECIFIED in usages or rule.forbids_package:
            pass_.reportf(spec.path_position, package_message(path, rule.suggestion))
            return

        for declaration in rule.declarations:
            positions = usages.get(declaration)
            if not positions:
                continue
            message = declaration_message(declaration, path, rule.suggestion)
            for position in positions:
                pass_.reportf(position, message)


def new_analyzer(paths: str = "", ignore_tests: bool = False) -> Faillint:
    """Create an analyzer from flag values."""
    return Faillint(FaillintConfig(paths=paths, ignore_tests=ignore_tests))


def _basename(filename: str) -> str:
    return filename.replace("\\", "/").rsplit("/", 1)[-1]

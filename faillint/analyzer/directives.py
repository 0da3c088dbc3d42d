"""`//faillint:` comment directives.

Two directives are understood, both requiring a reason after a space:

    //faillint:ignore <reason>        ignores the line or statement below
    //faillint:file-ignore <reason>   in the package docs, ignores the file

A directive without a reason, or a file-ignore outside of the package docs,
is reported and has no effect.
"""

from collections.abc import Callable
from dataclasses import dataclass

from tree_sitter import Node

from ..source.comment_map import CommentMap
from ..source.models import CommentGroup, Position
from ..utils.logging import get_logger

logger = get_logger("analyzer.directives")

DIRECTIVE_PREFIX = "//faillint:"

IGNORE = "ignore"
FILE_IGNORE = "file-ignore"
OPTIONS = (IGNORE, FILE_IGNORE)

MISSING_REASON_MESSAGE = "missing reason on faillint directive"
MISPLACED_FILE_IGNORE_MESSAGE = f"{FILE_IGNORE} option on faillint directive must be in package docs"


@dataclass(frozen=True)
class Directive:
    option: str
    reason: str = ""

    @property
    def is_recognized(self) -> bool:
        return self.option in OPTIONS

    @property
    def is_well_formed(self) -> bool:
        return self.is_recognized and bool(self.reason)


def parse_directive(text: str) -> Directive | None:
    """Parse a comment line; None if it is not a faillint directive."""
    if not text.startswith(DIRECTIVE_PREFIX):
        return None
    option, _, reason = text[len(DIRECTIVE_PREFIX):].partition(" ")
    return Directive(option=option, reason=reason)


class DirectiveEngine:
    """Answers suppression questions for one file and reports bad directives.

    Each malformed directive is reported once, however many times its
    comment group is looked at.
    """

    def __init__(
        self,
        report: Callable[[Position, str], None],
        package_doc: CommentGroup | None = None,
    ):
        self._report = report
        self._package_doc = package_doc
        self._reported: set[tuple[int, str]] = set()

    def file_is_ignored(self) -> bool:
        return self.has_directive(self._package_doc, FILE_IGNORE)

    def has_directive(self, group: CommentGroup | None, option: str) -> bool:
        """Check a comment group for a well-formed directive with option."""
        if group is None:
            return False

        for comment in group.comments:
            directive = parse_directive(comment.text)
            if directive is None:
                continue
            if directive.is_recognized and not directive.reason:
                self._report_once(comment.position, MISSING_REASON_MESSAGE)
            if (
                directive.option == FILE_IGNORE
                and option == IGNORE
                and group is not self._package_doc
            ):
                self._report_once(comment.position, MISPLACED_FILE_IGNORE_MESSAGE)
            if directive.option == option and directive.is_well_formed:
                return True
        return False

    def usage_has_directive(self, comment_map: CommentMap, node: Node, offset: int) -> bool:
        """Check whether an ignore directive covers node at offset.

        Comments attached to node itself are checked first. Expressions
        rarely carry comments of their own, so every commented node whose
        range encloses offset is checked next.
        """
        for group in comment_map.groups_for(node):
            if self.has_directive(group, IGNORE):
                return True

        for _, groups in comment_map.enclosing(offset):
            for group in groups:
                if self.has_directive(group, IGNORE):
                    return True
        return False

    def _report_once(self, position: Position, message: str) -> None:
        key = (position.offset, message)
        if key in self._reported:
            return
        self._reported.add(key)
        logger.debug(f"{position}: {message}")
        self._report(position, message)

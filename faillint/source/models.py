"""Data models for parsed Go source files."""

from dataclasses import dataclass, field
from functools import total_ordering

from tree_sitter import Node, Tree


@total_ordering
@dataclass(frozen=True)
class Position:
    """Location in a source file.

    Lines and columns are 1-based, columns count bytes (as Go tooling does).
    """

    filename: str
    offset: int
    line: int
    column: int

    def __lt__(self, other: "Position") -> bool:
        return (self.filename, self.offset) < (other.filename, other.offset)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass
class Comment:
    """A single `//` or `/* */` comment."""

    text: str
    position: Position
    end: Position


@dataclass
class CommentGroup:
    """Sequence of comments with no other tokens and no empty lines between."""

    comments: list[Comment] = field(default_factory=list)

    @property
    def start(self) -> Position:
        return self.comments[0].position

    @property
    def end(self) -> Position:
        return self.comments[-1].end

    @property
    def text(self) -> str:
        return "\n".join(c.text for c in self.comments)


@dataclass
class ImportSpec:
    """A single import inside an import declaration."""

    node: Node
    path_literal: str
    position: Position
    path_position: Position
    name: str | None = None


@dataclass
class SourceFile:
    """A parsed Go source file."""

    filename: str
    source: bytes
    tree: Tree
    package_name: str | None = None
    imports: list[ImportSpec] = field(default_factory=list)
    comments: list[CommentGroup] = field(default_factory=list)
    doc: CommentGroup | None = None

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.tree.root_node.has_error

    def position(self, offset: int, point: tuple[int, int]) -> Position:
        """Build a position from a byte offset and a tree-sitter (row, column) point."""
        return Position(
            filename=self.filename,
            offset=offset,
            line=point[0] + 1,
            column=point[1] + 1,
        )

    def node_position(self, node: Node) -> Position:
        return self.position(node.start_byte, node.start_point)

    def node_end(self, node: Node) -> Position:
        return self.position(node.end_byte, node.end_point)

    def node_text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

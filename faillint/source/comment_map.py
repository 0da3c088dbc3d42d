"""Association of comment groups with AST nodes."""

from collections.abc import Iterator

from tree_sitter import Node

from .models import CommentGroup, SourceFile

# Nodes comments can attach to: declarations, specs, fields and statements.
ANCHOR_TYPES = frozenset(
    {
        "function_declaration",
        "method_declaration",
        "import_declaration",
        "const_declaration",
        "var_declaration",
        "type_declaration",
        "import_spec",
        "const_spec",
        "var_spec",
        "type_spec",
        "type_alias",
        "field_declaration",
        "parameter_declaration",
        "variadic_parameter_declaration",
        "method_elem",
        "method_spec",
        "short_var_declaration",
        "block",
        "expression_case",
        "default_case",
        "type_case",
        "communication_case",
    }
)


def is_anchor(node: Node) -> bool:
    return node.type in ANCHOR_TYPES or node.type.endswith("_statement")


class CommentMap:
    """Maps anchor nodes to the comment groups next to them.

    Follows the association rules of Go's `ast.NewCommentMap`: a group
    belongs to the node ending on its first line, to the node just above it
    when a blank line separates it from what follows, and to the next node
    otherwise. Groups above the package clause belong to the file itself.
    """

    def __init__(self):
        self._entries: dict[int, tuple[Node, list[CommentGroup]]] = {}
        self._sorted: list[tuple[Node, list[CommentGroup]]] | None = None

    @classmethod
    def build(cls, source_file: SourceFile) -> "CommentMap":
        comment_map = cls()
        if not source_file.comments:
            return comment_map

        root = source_file.root
        anchors = [n for n in _preorder(root) if n is not root and is_anchor(n)]

        package_start: int | None = None
        for child in root.children:
            if child.type == "package_clause":
                package_start = child.start_byte
                break

        for group in source_file.comments:
            if package_start is not None and group.end.offset <= package_start:
                comment_map.add(root, group)
                continue
            comment_map.add(_associate(group, anchors) or root, group)

        return comment_map

    def add(self, node: Node, group: CommentGroup) -> None:
        if node.id not in self._entries:
            self._entries[node.id] = (node, [])
            self._sorted = None
        self._entries[node.id][1].append(group)

    def groups_for(self, node: Node) -> list[CommentGroup]:
        entry = self._entries.get(node.id)
        return entry[1] if entry else []

    def items(self) -> list[tuple[Node, list[CommentGroup]]]:
        """Entries in source order, outer nodes first.

        The order is computed once and reused until a new node is added.
        """
        if self._sorted is None:
            self._sorted = sorted(
                self._entries.values(), key=lambda e: (e[0].start_byte, -e[0].end_byte)
            )
        return self._sorted

    def enclosing(self, offset: int) -> Iterator[tuple[Node, list[CommentGroup]]]:
        """Yield entries whose node range covers offset."""
        for node, groups in self.items():
            if node.start_byte <= offset <= node.end_byte:
                yield node, groups

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, node: Node) -> bool:
        return node.id in self._entries


def _associate(group: CommentGroup, anchors: list[Node]) -> Node | None:
    previous: Node | None = None
    following: Node | None = None

    for node in anchors:
        if node.end_byte <= group.start.offset:
            # Outermost node wins on ties: it comes first in preorder.
            if previous is None or node.end_byte > previous.end_byte:
                previous = node
        elif following is None and node.start_byte >= group.end.offset:
            following = node

    if previous is not None:
        previous_end_line = previous.end_point[0] + 1
        if (
            previous_end_line == group.start.line
            or following is None
            or (
                previous_end_line + 1 == group.start.line
                and group.end.line + 1 < following.start_point[0] + 1
            )
        ):
            return previous

    return following


def _preorder(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _preorder(child)

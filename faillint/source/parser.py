"""Go source parser using tree-sitter."""

from pathlib import Path

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import SourceError
from ..utils.logging import get_logger
from .models import Comment, CommentGroup, ImportSpec, SourceFile

logger = get_logger("source.parser")

_WHITESPACE = b" \t\r\n\f\v"


class GoSourceParser:
    """Parses Go files into `SourceFile` objects.

    The tree-sitter parser is created lazily and reused for every file.
    """

    file_extensions = [".go"]

    def __init__(self):
        self._parser: Parser | None = None
        self._language: Language | None = None

    def get_parser(self) -> Parser:
        """Get or create the tree-sitter parser."""
        if self._parser is None:
            self._language = Language(tree_sitter_go.language())
            self._parser = Parser()
            self._parser.language = self._language
        return self._parser

    def parse_file(self, file_path: Path) -> SourceFile:
        """Read and parse a source file.

        Raises:
            SourceError: if the file cannot be read
        """
        try:
            content = file_path.read_bytes()
        except OSError as e:
            raise SourceError(f"cannot read {file_path}: {e}") from e
        return self.parse_content(content, str(file_path))

    def parse_content(self, content: str | bytes, filename: str) -> SourceFile:
        """Parse Go source code.

        Files with syntax errors still produce a (partial) tree.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        tree = self.get_parser().parse(content)
        source_file = SourceFile(filename=filename, source=content, tree=tree)

        if tree.root_node.has_error:
            logger.debug(f"{filename}: syntax errors, analyzing partial tree")

        package_node = self._find_first_child(tree.root_node, "package_clause")
        if package_node is not None:
            name_node = self._find_first_child(package_node, "package_identifier")
            if name_node is not None:
                source_file.package_name = source_file.node_text(name_node)

        source_file.imports = self._parse_imports(tree.root_node, source_file)
        source_file.comments = self._group_comments(
            self._find_nodes_recursive(tree.root_node, ["comment"]), source_file
        )
        if package_node is not None:
            source_file.doc = self._find_doc(source_file, package_node)

        return source_file

    def _parse_imports(self, root: Node, source_file: SourceFile) -> list[ImportSpec]:
        """Collect import specs in source order."""
        imports: list[ImportSpec] = []

        for decl in self._find_nodes(root, ["import_declaration"]):
            for spec in self._find_nodes_recursive(decl, ["import_spec"]):
                path_node = spec.child_by_field_name("path")
                if path_node is None:
                    continue

                name: str | None = None
                name_node = spec.child_by_field_name("name")
                if name_node is not None:
                    name = source_file.node_text(name_node)

                imports.append(
                    ImportSpec(
                        node=spec,
                        path_literal=source_file.node_text(path_node),
                        position=source_file.node_position(spec),
                        path_position=source_file.node_position(path_node),
                        name=name,
                    )
                )

        return imports

    def _group_comments(self, nodes: list[Node], source_file: SourceFile) -> list[CommentGroup]:
        """Group comments the way the Go scanner does.

        A comment trailing code starts a group that only takes further
        comments from the same line. Any other group extends over comments
        separated by whitespace and at most one line break.
        """
        source = source_file.source
        groups: list[CommentGroup] = []
        current: CommentGroup | None = None
        previous: Node | None = None
        max_line_gap = 1

        for node in sorted(nodes, key=lambda n: n.start_byte):
            comment = Comment(
                text=source_file.node_text(node).rstrip("\r"),
                position=source_file.node_position(node),
                end=source_file.node_end(node),
            )
            if (
                current is not None
                and previous is not None
                and not source[previous.end_byte:node.start_byte].strip(_WHITESPACE)
                and node.start_point[0] <= previous.end_point[0] + max_line_gap
            ):
                current.comments.append(comment)
            else:
                current = CommentGroup(comments=[comment])
                groups.append(current)
                max_line_gap = 0 if self._trails_code(source, node.start_byte) else 1
            previous = node

        return groups

    def _trails_code(self, source: bytes, offset: int) -> bool:
        """Check whether something other than whitespace precedes offset on its line."""
        i = offset - 1
        while i >= 0 and source[i] in b" \t\r":
            i -= 1
        return i >= 0 and source[i] != ord("\n")

    def _find_doc(self, source_file: SourceFile, package_node: Node) -> CommentGroup | None:
        """Find the comment group ending on the line right above `package`."""
        package_line = package_node.start_point[0] + 1
        doc: CommentGroup | None = None
        for group in source_file.comments:
            if group.end.offset > package_node.start_byte:
                break
            if group.end.line + 1 == package_line:
                doc = group
        return doc

    def _find_nodes(self, node: Node, node_types: list[str]) -> list[Node]:
        """Find all child nodes of given types (non-recursive)."""
        return [child for child in node.children if child.type in node_types]

    def _find_nodes_recursive(self, node: Node, node_types: list[str]) -> list[Node]:
        """Find all descendant nodes of given types (recursive)."""
        results: list[Node] = []

        def traverse(n: Node) -> None:
            if n.type in node_types:
                results.append(n)
            for child in n.children:
                traverse(child)

        traverse(node)
        return results

    def _find_first_child(self, node: Node, node_type: str) -> Node | None:
        """Find the first child node of a given type."""
        for child in node.children:
            if child.type == node_type:
                return child
        return None

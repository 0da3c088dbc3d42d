"""Collection of `qualifier.Name` uses of an imported package."""

from collections.abc import Callable

from tree_sitter import Node

from ..source.models import Position, SourceFile
from .imports import ImportMode

# Key reported when individual uses cannot be told apart (blank and dot imports).
UNSPECIFIED = "unspecified"

UsageMap = dict[str, list[Position]]

# Called with the selector node and the offset of the selected name; True
# drops the occurrence.
IgnoreCheck = Callable[[Node, int], bool]

_SCOPE_TYPES = frozenset(
    {
        "block",
        "if_statement",
        "for_statement",
        "expression_switch_statement",
        "select_statement",
        "expression_case",
        "default_case",
        "type_case",
        "communication_case",
    }
)

_FUNCTION_TYPES = frozenset({"function_declaration", "method_declaration", "func_literal"})


def scan_usages(
    source_file: SourceFile,
    qualifier: str | None,
    mode: ImportMode,
    is_ignored: IgnoreCheck | None = None,
) -> UsageMap:
    """Find uses of the package imported under qualifier.

    Blank and dot imports give `{UNSPECIFIED: []}`: the whole package counts
    as used.
    """
    if mode in (ImportMode.BLANK, ImportMode.DOT) or not qualifier:
        return {UNSPECIFIED: []}
    return UsageScanner(source_file, qualifier, is_ignored).scan()


class UsageScanner:
    """Walks a file collecting selectors on an unresolved qualifier.

    An identifier declared in the file (top-level declarations, or locals
    visible at that point) shadows the package, so selectors on it are not
    package uses.
    """

    def __init__(
        self,
        source_file: SourceFile,
        qualifier: str,
        is_ignored: IgnoreCheck | None = None,
    ):
        self.source_file = source_file
        self.qualifier = qualifier
        self.is_ignored = is_ignored
        self._scopes: list[set[str]] = []
        self._usages: UsageMap = {}

    def scan(self) -> UsageMap:
        self._usages = {}
        self._scopes = [self._file_scope()]
        self._visit(self.source_file.root)
        for positions in self._usages.values():
            positions.sort(key=lambda p: p.offset)
        return self._usages

    def _file_scope(self) -> set[str]:
        """Names declared at the top level of the file (imports excluded)."""
        names: set[str] = set()
        for child in self.source_file.root.children:
            if child.type == "function_declaration":
                names.update(self._names(child))
            elif child.type in ("var_declaration", "const_declaration", "type_declaration"):
                for spec in self._descendants(
                    child, ("var_spec", "const_spec", "type_spec", "type_alias")
                ):
                    names.update(self._names(spec))
        return names

    def _visit(self, node: Node) -> None:
        node_type = node.type

        if node_type == "selector_expression":
            operand = node.child_by_field_name("operand")
            if operand is not None and operand.type == "identifier":
                self._check(node, operand, node.child_by_field_name("field"))
        elif node_type == "qualified_type":
            self._check(node, node.child_by_field_name("package"), node.child_by_field_name("name"))
            return
        elif node_type in _FUNCTION_TYPES:
            self._visit_function(node)
            return
        elif node_type == "short_var_declaration":
            self._visit_field(node, "right")
            self._declare_identifiers(node.child_by_field_name("left"))
            return
        elif node_type in ("range_clause", "receive_statement"):
            if any(child.type == ":=" for child in node.children):
                self._visit_field(node, "right")
                self._declare_identifiers(node.child_by_field_name("left"))
                return
        elif node_type in ("var_spec", "const_spec"):
            names = {child.id for child in node.children_by_field_name("name")}
            for child in node.children:
                if child.id not in names:
                    self._visit(child)
            self._declare(self._names(node))
            return
        elif node_type in ("type_spec", "type_alias"):
            self._declare(self._names(node))
            self._push()
            self._visit_children(node)
            self._pop()
            return
        elif node_type == "type_parameter_list":
            self._visit_parameters(node)
            return
        elif node_type == "type_switch_statement":
            self._push()
            self._visit_type_switch(node)
            self._pop()
            return
        elif node_type in _SCOPE_TYPES:
            self._push()
            self._visit_children(node)
            self._pop()
            return

        self._visit_children(node)

    def _visit_children(self, node: Node) -> None:
        for child in node.children:
            self._visit(child)

    def _visit_field(self, node: Node, field_name: str) -> None:
        child = node.child_by_field_name(field_name)
        if child is not None:
            self._visit(child)

    def _visit_function(self, node: Node) -> None:
        """Signature names are visible in the body only."""
        self._push()
        for field_name in ("type_parameters", "receiver", "parameters", "result"):
            part = node.child_by_field_name(field_name)
            if part is None:
                continue
            if part.type in ("parameter_list", "type_parameter_list"):
                self._visit_parameters(part)
            else:
                self._visit(part)
        self._visit_field(node, "body")
        self._pop()

    def _visit_parameters(self, node: Node) -> None:
        """Visit parameter types, then declare the parameter names."""
        names: list[str] = []
        for decl in node.named_children:
            if decl.type not in (
                "parameter_declaration",
                "variadic_parameter_declaration",
                "type_parameter_declaration",
            ):
                self._visit(decl)
                continue
            names.extend(self._names(decl))
            if decl.type == "type_parameter_declaration":
                # Type parameters may appear in their own constraints.
                self._declare(self._names(decl))
            self._visit_field(decl, "type")
        self._declare(names)

    def _visit_type_switch(self, node: Node) -> None:
        alias = node.child_by_field_name("alias")
        value = node.child_by_field_name("value")
        for child in node.children:
            if alias is not None and child.id == alias.id:
                continue
            self._visit(child)
            if alias is not None and value is not None and child.id == value.id:
                self._declare_identifiers(alias)

    def _check(self, node: Node, package: Node | None, name: Node | None) -> None:
        if package is None or name is None:
            return
        if self.source_file.node_text(package) != self.qualifier:
            return
        if self._resolved(self.qualifier):
            return
        if self.is_ignored is not None and self.is_ignored(node, name.start_byte):
            return
        self._usages.setdefault(self.source_file.node_text(name), []).append(
            self.source_file.node_position(name)
        )

    def _resolved(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    def _push(self) -> None:
        self._scopes.append(set())

    def _pop(self) -> None:
        self._scopes.pop()

    def _declare(self, names) -> None:
        self._scopes[-1].update(names)

    def _declare_identifiers(self, node: Node | None) -> None:
        """Declare identifiers of an expression list (e.g. the left of `:=`)."""
        if node is None:
            return
        if node.type == "identifier":
            self._declare([self.source_file.node_text(node)])
            return
        self._declare(
            self.source_file.node_text(child)
            for child in node.named_children
            if child.type == "identifier"
        )

    def _names(self, node: Node) -> list[str]:
        return [self.source_file.node_text(n) for n in node.children_by_field_name("name")]

    def _descendants(self, node: Node, node_types: tuple[str, ...]) -> list[Node]:
        results: list[Node] = []

        def traverse(n: Node) -> None:
            if n.type in node_types:
                results.append(n)
                return
            for child in n.children:
                traverse(child)

        traverse(node)
        return results

"""Tests for faillint/analyzer/directives.py - //faillint: comments."""

import pytest

from faillint.analyzer.directives import (
    FILE_IGNORE,
    IGNORE,
    MISPLACED_FILE_IGNORE_MESSAGE,
    MISSING_REASON_MESSAGE,
    Directive,
    DirectiveEngine,
    parse_directive,
)
from faillint.source.comment_map import CommentMap


class TestParseDirective:
    """Tests for parse_directive."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("//faillint:ignore legacy code", Directive(IGNORE, "legacy code")),
            ("//faillint:file-ignore generated", Directive(FILE_IGNORE, "generated")),
            ("//faillint:ignore", Directive(IGNORE, "")),
            ("//faillint:unknown why", Directive("unknown", "why")),
        ],
    )
    def test_directives(self, text: str, expected: Directive):
        assert parse_directive(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["// faillint:ignore spaced", "//nolint:faillint", "/* faillint:ignore */", "// plain"],
    )
    def test_not_directives(self, text: str):
        assert parse_directive(text) is None

    def test_well_formed(self):
        assert Directive(IGNORE, "reason").is_well_formed
        assert not Directive(IGNORE).is_well_formed
        assert not Directive("unknown", "reason").is_well_formed
        assert not Directive("unknown", "reason").is_recognized


@pytest.fixture
def reports():
    return []


@pytest.fixture
def engine_for(reports):
    """Build a DirectiveEngine for a SourceFile, collecting reports."""

    def _engine(source_file) -> DirectiveEngine:
        return DirectiveEngine(
            lambda position, message: reports.append((position.line, message)),
            package_doc=source_file.doc,
        )

    return _engine


class TestDirectiveEngine:
    """Tests for suppression decisions and malformed directive reports."""

    def test_ignore_in_group(self, parse, engine_for, reports):
        source_file = parse("package a\n\n// context\n//faillint:ignore needed\nvar x = 1\n")
        engine = engine_for(source_file)

        assert engine.has_directive(source_file.comments[0], IGNORE)
        assert not engine.has_directive(source_file.comments[0], FILE_IGNORE)
        assert reports == []

    def test_no_group(self, engine_for, parse):
        engine = engine_for(parse("package a\n"))

        assert not engine.has_directive(None, IGNORE)
        assert not engine.file_is_ignored()

    def test_missing_reason_is_reported_and_does_not_suppress(self, parse, engine_for, reports):
        source_file = parse("package a\n\n//faillint:ignore\nvar x = 1\n")
        engine = engine_for(source_file)

        assert not engine.has_directive(source_file.comments[0], IGNORE)
        assert reports == [(3, MISSING_REASON_MESSAGE)]

    def test_unknown_option_is_not_reported(self, parse, engine_for, reports):
        source_file = parse("package a\n\n//faillint:skip\nvar x = 1\n")
        engine = engine_for(source_file)

        assert not engine.has_directive(source_file.comments[0], IGNORE)
        assert reports == []

    def test_file_ignore_in_package_doc(self, parse, engine_for, reports):
        source_file = parse("//faillint:file-ignore generated\npackage a\n")

        assert engine_for(source_file).file_is_ignored()
        assert reports == []

    def test_file_ignore_without_reason(self, parse, engine_for, reports):
        source_file = parse("//faillint:file-ignore\npackage a\n")

        assert not engine_for(source_file).file_is_ignored()
        assert reports == [(1, MISSING_REASON_MESSAGE)]

    def test_misplaced_file_ignore(self, parse, engine_for, reports):
        source_file = parse("package a\n\n//faillint:file-ignore generated\nvar x = 1\n")
        engine = engine_for(source_file)

        assert not engine.has_directive(source_file.comments[0], IGNORE)
        assert reports == [(3, MISPLACED_FILE_IGNORE_MESSAGE)]

    def test_package_doc_never_misplaced(self, parse, engine_for, reports):
        source_file = parse("//faillint:file-ignore generated\npackage a\n")
        engine = engine_for(source_file)

        assert not engine.has_directive(source_file.doc, IGNORE)
        assert reports == []

    def test_reported_once(self, parse, engine_for, reports):
        source_file = parse("package a\n\n//faillint:ignore\nvar x = 1\n")
        engine = engine_for(source_file)

        for _ in range(3):
            engine.has_directive(source_file.comments[0], IGNORE)

        assert reports == [(3, MISSING_REASON_MESSAGE)]


class TestUsageHasDirective:
    """Tests for finding ignore directives that cover a use."""

    def _selector(self, source_file):
        def find(node):
            if node.type == "selector_expression":
                return node
            for child in node.children:
                found = find(child)
                if found is not None:
                    return found
            return None

        return find(source_file.root)

    def test_directive_on_enclosing_statement(self, parse, engine_for):
        source_file = parse(
            'package a\n\nimport "fmt"\n\nfunc f() {\n'
            "\t//faillint:ignore allowed\n\tfmt.Println(\n\t\t1,\n\t)\n}\n"
        )
        node = self._selector(source_file)

        assert engine_for(source_file).usage_has_directive(
            CommentMap.build(source_file), node, node.start_byte
        )

    def test_directive_on_function(self, parse, engine_for):
        source_file = parse(
            'package a\n\nimport "fmt"\n\n//faillint:ignore whole function\nfunc f() {\n'
            "\tfmt.Println()\n}\n"
        )
        node = self._selector(source_file)

        assert engine_for(source_file).usage_has_directive(
            CommentMap.build(source_file), node, node.start_byte
        )

    def test_directive_elsewhere(self, parse, engine_for):
        source_file = parse(
            'package a\n\nimport "fmt"\n\nfunc f() {\n\tfmt.Println()\n'
            "\t//faillint:ignore only the next one\n\t_ = 1\n}\n"
        )
        node = self._selector(source_file)

        assert not engine_for(source_file).usage_has_directive(
            CommentMap.build(source_file), node, node.start_byte
        )

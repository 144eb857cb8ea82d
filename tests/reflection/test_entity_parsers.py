# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the per-entity parsers and their cursor handoff."""

import pytest
from structlog.testing import capture_logs

from phpreflect.parser.lexer import TokenKind, tokenize
from phpreflect.parser.token_stream import TokenStream
from phpreflect.reflection.entities import (
    EntityParseError,
    parse_class,
    parse_constant,
    parse_function,
    parse_include,
    parse_interface,
)

# ###############
# Test Helpers
# ###############


def _stream_at(source: str, kind: TokenKind) -> TokenStream:
    """Return a stream over *source* with the cursor on the first token of *kind*."""
    stream = TokenStream(tokenize(source))
    while (token := stream.current()) is not None and token.type is not kind:
        stream.advance()
    assert stream.current() is not None
    return stream


_CLASS_SOURCE = """<?php
/**
 * A class.
 */
abstract class Foo extends Bar\\Base implements \\Countable, Baz {
    const A = 1, B = 'two';
    /** The name. */
    protected static ?string $name = null;
    private $x, $y = [1, 2];
    public function __construct(int $a = 5, &$b, string ...$rest) {}
    abstract protected function run(): void;
    final public static function &make(): static { return new static(); }
}
echo 1;
"""


# ###############
# Classes
# ###############


class TestParseClass:
    @pytest.fixture
    def parsed(self) -> tuple:
        stream = _stream_at(_CLASS_SOURCE, TokenKind.CLASS)
        return parse_class(stream, "App"), stream

    def test_header(self, parsed: tuple) -> None:
        cls, _ = parsed
        assert cls.name == "Foo"
        assert cls.namespace == "App"
        assert cls.line == 5
        assert cls.parent_class == "Bar\\Base"
        assert cls.interfaces == ["\\Countable", "Baz"]
        assert cls.is_abstract
        assert not cls.is_final

    def test_leading_docblock(self, parsed: tuple) -> None:
        cls, _ = parsed
        assert cls.docblock is not None
        assert cls.docblock.short_description == "A class."
        assert cls.docblock.line == 2

    def test_constants(self, parsed: tuple) -> None:
        cls, _ = parsed
        assert [(c.name, c.value, c.line) for c in cls.constants] == [("A", "1", 6), ("B", "'two'", 6)]

    def test_properties(self, parsed: tuple) -> None:
        cls, _ = parsed
        name, x, y = cls.properties
        assert (name.name, name.visibility, name.is_static, name.type, name.default) == (
            "$name",
            "protected",
            True,
            "?string",
            "null",
        )
        assert name.docblock is not None and name.docblock.short_description == "The name."
        assert (x.name, x.visibility, x.default, x.docblock) == ("$x", "private", None, None)
        assert (y.name, y.default, y.line) == ("$y", "[1, 2]", 9)

    def test_methods(self, parsed: tuple) -> None:
        cls, _ = parsed
        construct, run, make = cls.methods
        assert (construct.name, construct.visibility, construct.is_abstract) == ("__construct", "public", False)
        assert (run.visibility, run.is_abstract, run.return_type) == ("protected", True, "void")
        assert (make.is_final, make.is_static, make.by_reference, make.return_type) == (True, True, True, "static")

    def test_method_arguments(self, parsed: tuple) -> None:
        cls, _ = parsed
        a, b, rest = cls.methods[0].arguments
        assert (a.name, a.type, a.default, a.by_reference, a.variadic) == ("$a", "int", "5", False, False)
        assert (b.name, b.type, b.by_reference) == ("$b", None, True)
        assert (rest.name, rest.type, rest.variadic) == ("$rest", "string", True)

    def test_cursor_rests_after_closing_brace(self, parsed: tuple) -> None:
        _, stream = parsed
        assert stream.current().type is TokenKind.WHITESPACE
        assert stream.peek(1).type is TokenKind.ECHO

    def test_final_modifier(self) -> None:
        stream = _stream_at("<?php final class Foo {}", TokenKind.CLASS)
        cls = parse_class(stream, "default")
        assert cls.is_final and not cls.is_abstract

    def test_trait_use_is_consumed(self) -> None:
        source = "<?php class Foo { use A, B { A::hello insteadof B; } use C; public $p; }"
        stream = _stream_at(source, TokenKind.CLASS)
        cls = parse_class(stream, "default")
        assert [prop.name for prop in cls.properties] == ["$p"]
        assert stream.at_end()

    def test_promoted_constructor_property_type(self) -> None:
        source = "<?php class P { public function __construct(private readonly int $id) {} }"
        cls = parse_class(_stream_at(source, TokenKind.CLASS), "default")
        assert cls.methods[0].arguments[0].type == "int"

    def test_anonymous_class_is_consumed(self) -> None:
        source = "<?php $x = new class(1) extends Foo { public function a() {} };"
        stream = _stream_at(source, TokenKind.CLASS)
        assert parse_class(stream, "default") is None
        assert stream.current().content == ";"

    def test_missing_body_raises(self) -> None:
        with pytest.raises(EntityParseError) as exc_info:
            parse_class(_stream_at("<?php class Foo extends Bar;", TokenKind.CLASS), "default")
        assert exc_info.value.line == 1

    def test_unterminated_body_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_class(_stream_at("<?php class Foo {", TokenKind.CLASS), "default")

    def test_property_without_terminator_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_class(_stream_at("<?php class Foo { public $a $b; }", TokenKind.CLASS), "default")


# ###############
# Interfaces
# ###############


class TestParseInterface:
    SOURCE = """<?php
interface Shape extends A, \\B\\C {
    const SIDES = 0;
    public function area(): float;
}
"""

    def test_interface(self) -> None:
        stream = _stream_at(self.SOURCE, TokenKind.INTERFACE)
        interface = parse_interface(stream, "Geo")
        assert interface.name == "Shape"
        assert interface.namespace == "Geo"
        assert interface.parent_interfaces == ["A", "\\B\\C"]
        assert [c.name for c in interface.constants] == ["SIDES"]
        assert [(m.name, m.is_abstract, m.return_type) for m in interface.methods] == [("area", True, "float")]
        assert stream.current().content == "\n"

    def test_missing_name_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_interface(_stream_at("<?php interface {}", TokenKind.INTERFACE), "default")


# ###############
# Functions
# ###############


class TestParseFunction:
    def test_function(self) -> None:
        source = "<?php\nfunction &foo(array $items = [], ?Bar $b = null): ?int\n{\n    return 1;\n}\nfoo();"
        stream = _stream_at(source, TokenKind.FUNCTION)
        function = parse_function(stream, "default")
        assert function.name == "foo"
        assert function.line == 2
        assert function.by_reference
        assert function.return_type == "?int"
        items, b = function.arguments
        assert (items.name, items.type, items.default) == ("$items", "array", "[]")
        assert (b.name, b.type, b.default) == ("$b", "?Bar", "null")
        assert stream.current().content == "\n"
        assert stream.peek(1).content == "foo"

    def test_keyword_named_function(self) -> None:
        function = parse_function(_stream_at("<?php function list() {}", TokenKind.FUNCTION), "default")
        assert function.name == "list"

    def test_closure_is_consumed(self) -> None:
        source = "<?php $f = function ($a) use ($b) { return $a + $b; };"
        stream = _stream_at(source, TokenKind.FUNCTION)
        assert parse_function(stream, "default") is None
        assert stream.current().content == ";"

    def test_leading_docblock_across_comment(self) -> None:
        source = "<?php\n/** Doc. */\n// note\nfunction f() {}"
        function = parse_function(_stream_at(source, TokenKind.FUNCTION), "default")
        assert function.docblock is not None
        assert function.docblock.short_description == "Doc."

    def test_docblock_separated_by_code_is_not_attached(self) -> None:
        source = "<?php\n/** Doc. */\n$a = 1;\nfunction f() {}"
        function = parse_function(_stream_at(source, TokenKind.FUNCTION), "default")
        assert function.docblock is None

    def test_malformed_docblock_is_logged_and_dropped(self) -> None:
        source = "<?php\n/**\n * @ bad\n */\nfunction f() {}"
        with capture_logs() as logs:
            function = parse_function(_stream_at(source, TokenKind.FUNCTION), "default")
        assert function.docblock is None
        assert {"event": "docblock_parse_failed", "log_level": "error"}.items() <= logs[0].items()

    def test_missing_body_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_function(_stream_at("<?php function f() echo", TokenKind.FUNCTION), "default")


# ###############
# Constants and Includes
# ###############


class TestParseConstant:
    def test_first_constant_of_list(self) -> None:
        stream = _stream_at("<?php const A = 'x', B = 2;\necho A;", TokenKind.CONST)
        constant = parse_constant(stream, "Cfg")
        assert (constant.name, constant.value, constant.namespace) == ("A", "'x'", "Cfg")
        assert stream.current().content == "\n"

    def test_missing_value_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_constant(_stream_at("<?php const A;", TokenKind.CONST), "default")


class TestParseInclude:
    @pytest.mark.parametrize(
        ("source", "kind", "name"),
        [
            ("<?php require_once 'lib/a.php';", TokenKind.REQUIRE_ONCE, "lib/a.php"),
            ("<?php require('c.php');", TokenKind.REQUIRE, "c.php"),
            ("<?php include_once \"d.php\";", TokenKind.INCLUDE_ONCE, "d.php"),
            ("<?php include(__DIR__ . '/b.php');", TokenKind.INCLUDE, "(__DIR__ . '/b.php')"),
        ],
    )
    def test_include_target(self, source: str, kind: TokenKind, name: str) -> None:
        stream = _stream_at(source, kind)
        include = parse_include(stream, "default")
        assert include.name == name
        assert include.type == kind.value[2:].lower()
        assert stream.at_end()

    def test_keyword_case_is_normalized(self) -> None:
        include = parse_include(_stream_at("<?php REQUIRE 'x.php';", TokenKind.REQUIRE), "default")
        assert include.type == "require"

    def test_statement_ended_by_close_tag(self) -> None:
        stream = _stream_at("<?php include 'x.php' ?>", TokenKind.INCLUDE)
        include = parse_include(stream, "default")
        assert include.name == "x.php"
        assert stream.current().type is TokenKind.CLOSE_TAG

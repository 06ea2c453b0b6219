"""Unit tests for the text-mode hook detector."""

from plugincheck.scanner.heuristics import find_hook_in_text
from plugincheck.scanner.hook_detector import find_hook_in_tree
from plugincheck.scanner.parser import parse_source


class TestMatches:
    def test_method_form(self):
        pos = find_hook_in_text("index.js", "class P {\n  async onload() {}\n}")
        assert (pos.line, pos.column) == (2, 9)

    def test_arrow_assignment(self):
        assert find_hook_in_text("a.js", "this.onload = () => {}") is not None

    def test_async_arrow_assignment(self):
        assert find_hook_in_text("a.js", "onload = async () => {}") is not None

    def test_single_param_arrow(self):
        assert find_hook_in_text("a.js", "p.onload = async e => {}") is not None

    def test_function_property(self):
        assert find_hook_in_text("a.js", "{ onload: function () {} }") is not None

    def test_bytes_content(self):
        assert find_hook_in_text("a.js", b"onload() {}") is not None

    def test_reports_file(self):
        assert find_hook_in_text("src/x.ts", "onload(){}").file == "src/x.ts"


class TestKnownFalsePositives:
    def test_comment_matches(self):
        pos = find_hook_in_text("index.js", "// onload() should be implemented")
        assert pos is not None
        assert pos.column == 4

    def test_string_matches(self):
        assert find_hook_in_text("index.js", 'const s = "onload()";') is not None


class TestNonMatches:
    def test_bare_identifier(self):
        assert find_hook_in_text("a.js", "const name = 'onload';") is None

    def test_longer_identifier(self):
        assert find_hook_in_text("a.js", "this.onloadHandler(); preonload();") is None

    def test_non_function_assignment(self):
        assert find_hook_in_text("a.js", "x.onload = handler;") is None

    def test_empty(self):
        assert find_hook_in_text("a.js", "") is None


class TestLineNumbering:
    def test_unicode_line_separators_do_not_end_lines(self):
        code = 'const s = "a\u2028b\x0cc\x85d";\nclass P { onload() {} }'
        text_pos = find_hook_in_text("index.js", code)
        tree_pos = find_hook_in_tree(parse_source("index.js", code))
        assert text_pos.line == tree_pos.line == 2

    def test_crlf_line_endings(self):
        code = "// header\r\nclass P {\r\n  onload() {}\r\n}\r\n"
        text_pos = find_hook_in_text("index.js", code)
        tree_pos = find_hook_in_tree(parse_source("index.js", code))
        assert (text_pos.line, text_pos.column) == (tree_pos.line, tree_pos.column) == (3, 3)

    def test_lone_carriage_return_does_not_end_a_line(self):
        assert find_hook_in_text("a.js", "let a;\rlet b;\nonload() {}").line == 2

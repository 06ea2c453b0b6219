"""Unit tests for the structural lifecycle-hook detector."""

from plugincheck.scanner.hook_detector import find_hook, find_hook_in_tree
from plugincheck.scanner.parser import parse_source


def _find(code: str, path: str = "index.js", name: str = "onload"):
    return find_hook_in_tree(parse_source(path, code), name)


class TestMethodForms:
    def test_async_class_method(self):
        code = "class Plugin { async onload() {} }"
        pos = _find(code)
        assert pos is not None
        assert (pos.file, pos.line, pos.column) == ("index.js", 1, code.index("onload") + 1)

    def test_plain_class_method(self):
        assert _find("export default class P extends Plugin {\n  onload() {\n  }\n}") is not None

    def test_typescript_method_with_types(self):
        code = "export default class P extends Plugin {\n  public async onload(): Promise<void> {\n  }\n}"
        pos = _find(code, "src/index.ts")
        assert pos is not None
        assert pos.line == 2
        assert pos.column == code.splitlines()[1].index("onload") + 1

    def test_object_literal_method(self):
        assert _find("module.exports = { onload() { return 1; } };") is not None

    def test_generator_method(self):
        assert _find("class P { *onload() {} }") is not None

    def test_decorated_method_tsx(self):
        assert _find("class P { onload() { return <div />; } }", "src/App.tsx") is not None


class TestPropertyForms:
    def test_class_field_arrow(self):
        assert _find("class P { onload = () => {} }") is not None

    def test_class_field_async_arrow_typescript(self):
        assert _find("class P { private onload = async (): Promise<void> => {} }", "a.ts") is not None

    def test_class_field_function_expression(self):
        assert _find("class P { onload = function () {} }") is not None

    def test_class_field_non_function_ignored(self):
        assert _find("class P { onload = 1 }") is None

    def test_object_pair_function(self):
        assert _find("const p = { onload: function () {} };") is not None

    def test_object_pair_async_arrow(self):
        assert _find("const p = { onload: async () => {} };") is not None

    def test_object_pair_string_key(self):
        assert _find('const p = { "onload": () => {} };') is not None

    def test_object_pair_non_function_ignored(self):
        assert _find("const p = { onload: true };") is None

    def test_this_assignment(self):
        assert _find("function P() { this.onload = function () {}; }") is not None

    def test_prototype_assignment_async_arrow(self):
        assert _find("P.prototype.onload = async () => {};") is not None

    def test_parenthesized_function_value(self):
        assert _find("obj.onload = (() => {});") is not None

    def test_assignment_of_non_function_ignored(self):
        assert _find("obj.onload = handler;") is None


class TestNoFalsePositives:
    def test_line_comment(self):
        assert _find("// onload() should be implemented\nclass P {}") is None

    def test_block_comment(self):
        assert _find("/* class P { onload() {} } */") is None

    def test_string_literal(self):
        assert _find('const s = "onload() {}"; const t = `onload = () => {}`;') is None

    def test_call_is_not_a_declaration(self):
        assert _find("plugin.onload();") is None

    def test_plain_variable_is_not_a_member(self):
        assert _find("const onload = () => {};") is None

    def test_similar_name(self):
        assert _find("class P { onloaded() {} onLoad() {} }") is None

    def test_interface_member_is_not_an_implementation(self):
        assert _find("interface P { onload(): void; }", "a.ts") is None

    def test_abstract_method_is_not_an_implementation(self):
        assert _find("abstract class P { abstract onload(): void; }", "a.ts") is None

    def test_computed_key_ignored(self):
        assert _find('class P { ["onload"]() {} }') is None


class TestTraversal:
    def test_first_match_in_source_order(self):
        code = "class A { onload() {} }\nconst b = { onload() {} };"
        assert _find(code).line == 1

    def test_outer_before_nested(self):
        code = "class A {\n  onload() {\n    const x = { onload() {} };\n  }\n}"
        assert _find(code).line == 2

    def test_custom_name(self):
        assert _find("class P { onunload() {} }", name="onunload") is not None

    def test_non_ascii_column(self):
        code = 'const s = "插件"; class P { onload() {} }'
        assert _find(code).column == code.index("onload") + 1

    def test_across_trees_in_given_order(self):
        first = parse_source("a.js", "class A {}")
        second = parse_source("b.js", "class B { onload() {} }")
        third = parse_source("c.js", "class C { onload() {} }")
        pos = find_hook([first, second, third])
        assert pos.file == "b.js"

    def test_stops_after_first_match(self):
        def trees():
            yield parse_source("a.js", "class A { onload() {} }")
            raise AssertionError("walked past the first match")

        assert find_hook(trees()).file == "a.js"

    def test_no_trees(self):
        assert find_hook([]) is None

    def test_deeply_nested_source(self):
        code = "let x = " + "[" * 500 + "]" * 500 + ";\nclass P { onload() {} }"
        assert _find(code).line == 2

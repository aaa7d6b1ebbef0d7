"""Tests for syntax classification helpers."""

from rustgeiger.scanning.syntax import (
    Attribute,
    NodeKind,
    SafetyAnnotation,
    classify,
    inner_attributes,
    is_marked_unsafe,
    is_statement,
    is_test_function,
    is_test_module,
    outer_attributes,
    parse_attribute,
    safety_annotation,
)

SAMPLE_RUST = """
#![forbid(unsafe_code)]

/// Documented.
#[inline]
#[test]
fn free() {}

unsafe trait Marker {}

impl Marker for u8 {
    unsafe fn member(&self) {}
}

#[cfg(test)]
mod tests {
    #![allow(dead_code)]
}

fn body() {
    let x = 1;
    unsafe { x; }
    fn nested() {}
}
"""


class TestClassify:
    """Node kind classification."""

    def test_free_function(self, parse_rust, find_node):
        """Top-level function_item is a FUNCTION."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert classify(find_node(root, "function_item", "free")) is NodeKind.FUNCTION

    def test_method(self, parse_rust, find_node):
        """function_item in an impl body is a METHOD."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert classify(find_node(root, "function_item", "member")) is NodeKind.METHOD

    def test_nested_function_is_function(self, parse_rust, find_node):
        """function_item in a block is a FUNCTION."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert classify(find_node(root, "function_item", "nested")) is NodeKind.FUNCTION

    def test_other_kinds(self, parse_rust, find_node):
        """Traits, impls, modules and blocks map to their kinds."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert classify(find_node(root, "trait_item")) is NodeKind.TRAIT
        assert classify(find_node(root, "impl_item")) is NodeKind.IMPL
        assert classify(find_node(root, "mod_item")) is NodeKind.MODULE
        assert classify(find_node(root, "block")) is NodeKind.BLOCK
        assert classify(find_node(root, "unsafe_block")) is NodeKind.UNSAFE_BLOCK
        assert classify(root) is NodeKind.OTHER

    def test_foreign_declaration_is_not_a_function(self, parse_rust, find_node):
        """Signatures in extern blocks are neither functions nor methods."""
        root = parse_rust('extern "C" { fn abs(x: i32) -> i32; }').root_node
        assert classify(find_node(root, "function_signature_item")) is NodeKind.OTHER


class TestUnsafeMarking:
    """Detection of the unsafe keyword on items."""

    def test_unsafe_trait(self, parse_rust, find_node):
        """unsafe trait is marked."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert is_marked_unsafe(find_node(root, "trait_item"))

    def test_safe_impl_with_unsafe_member(self, parse_rust, find_node):
        """An impl is not unsafe because a member is."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert not is_marked_unsafe(find_node(root, "impl_item"))
        assert is_marked_unsafe(find_node(root, "function_item", "member"))

    def test_safe_function(self, parse_rust, find_node):
        """Plain fn is not marked."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert not is_marked_unsafe(find_node(root, "function_item", "free"))


class TestStatements:
    """Statement detection inside blocks."""

    def test_block_children(self, parse_rust, find_node):
        """let is a statement; braces, unsafe blocks and items are not."""
        root = parse_rust(SAMPLE_RUST).root_node
        body = find_node(root, "function_item", "body").child_by_field_name("body")
        kinds = {child.type: is_statement(child) for child in body.children}
        assert kinds["let_declaration"] is True
        assert kinds["function_item"] is False
        assert kinds["{"] is False
        assert kinds["}"] is False
        assert not any(
            is_statement(child)
            for child in body.children
            if child.type == "expression_statement"
        )


class TestAttributes:
    """Attribute parsing and interpretation."""

    def test_outer_attributes_in_order(self, parse_rust, find_node):
        """Outer attributes are collected in source order, skipping comments."""
        root = parse_rust(SAMPLE_RUST).root_node
        attrs = outer_attributes(find_node(root, "function_item", "free"))
        assert [a.path for a in attrs] == ["inline", "test"]

    def test_inner_attributes_of_file(self, parse_rust):
        """#![...] at the top of a file are inner attributes of source_file."""
        root = parse_rust(SAMPLE_RUST).root_node
        attrs = inner_attributes(root)
        assert attrs == [Attribute("forbid", ("unsafe_code",), inner=True)]

    def test_inner_attributes_of_module(self, parse_rust, find_node):
        """#![...] inside a module body belong to the module."""
        root = parse_rust(SAMPLE_RUST).root_node
        body = find_node(root, "mod_item").child_by_field_name("body")
        assert [a.path for a in inner_attributes(body)] == ["allow"]

    def test_inner_attributes_of_missing_body(self):
        """A module declared without a body has none."""
        assert inner_attributes(None) == []

    def test_parse_attribute(self, parse_rust):
        """Arguments are split and stripped."""
        root = parse_rust("#[derive(Debug,  Clone)]\nstruct S;\n").root_node
        attr = parse_attribute(root.children[0])
        assert attr == Attribute("derive", ("Debug", "Clone"))

    def test_parse_attribute_nested_commas(self, parse_rust):
        """Commas inside nested delimiters do not split arguments."""
        source = "#![forbid(clippy::x(a, b), unsafe_code)]\nfn f() {}\n"
        attr = parse_attribute(parse_rust(source).root_node.children[0])
        assert attr == Attribute("forbid", ("clippy::x(a, b)", "unsafe_code"), inner=True)
        assert safety_annotation([attr]) is SafetyAnnotation.FORBID_UNSAFE

    def test_attribute_name_is_last_segment(self):
        """Path attributes expose their last segment as name."""
        assert Attribute("tokio::test").name == "test"

    def test_test_markers(self, parse_rust, find_node):
        """#[test] functions and #[cfg(test)] modules are test code."""
        root = parse_rust(SAMPLE_RUST).root_node
        assert is_test_function(find_node(root, "function_item", "free"))
        assert not is_test_function(find_node(root, "function_item", "body"))
        assert is_test_module(find_node(root, "mod_item"))


class TestSafetyAnnotation:
    """ForbidUnsafe interpretation."""

    def test_forbid_unsafe_code(self):
        """forbid(unsafe_code) is ForbidUnsafe."""
        attrs = [Attribute("forbid", ("unsafe_code",))]
        assert safety_annotation(attrs) is SafetyAnnotation.FORBID_UNSAFE

    def test_other_lints(self):
        """Other lints and levels are not."""
        assert safety_annotation([Attribute("forbid", ("missing_docs",))]) is SafetyAnnotation.NONE
        assert safety_annotation([Attribute("deny", ("unsafe_code",))]) is SafetyAnnotation.NONE
        assert safety_annotation([]) is SafetyAnnotation.NONE

"""Tests for figshot.locator (node search over the document tree)."""

from unittest.mock import patch

import pytest

from figshot.locator import find_node_id, locate_node, search_scope


def _node(node_id, name="", node_type="FRAME", characters=None, children=None):
    node = {"id": node_id, "name": name, "type": node_type}
    if characters is not None:
        node["characters"] = characters
    if children is not None:
        node["children"] = children
    return node


# ---------------------------------------------------------------------------
# Match predicate
# ---------------------------------------------------------------------------


class TestMatching:

    def test_matches_name_substring(self):
        nodes = [_node("1", "Primary Submit Button")]
        assert find_node_id(nodes, "Submit") == "1"

    def test_name_match_is_case_sensitive(self):
        nodes = [_node("1", "submit button")]
        assert find_node_id(nodes, "Submit") is None

    def test_matches_text_content(self):
        nodes = [_node("1", "Label", "TEXT", characters="Click to Submit")]
        assert find_node_id(nodes, "Submit") == "1"

    def test_characters_ignored_on_non_text_nodes(self):
        nodes = [_node("1", "Frame", "FRAME", characters="Submit")]
        assert find_node_id(nodes, "Submit") is None

    def test_empty_name_and_missing_fields(self):
        nodes = [{"id": "1", "type": "RECTANGLE"}, _node("2", "", "TEXT", characters="")]
        assert find_node_id(nodes, "Submit") is None

    def test_parent_matched_before_children(self):
        nodes = [
            _node("parent", "Submit area", children=[
                _node("child", "Submit", "TEXT", characters="Submit"),
            ]),
        ]
        assert find_node_id(nodes, "Submit") == "parent"

    def test_name_checked_before_text_on_same_node(self):
        nodes = [_node("1", "Submit label", "TEXT", characters="Submit")]
        with patch("figshot.locator.logger") as mock_logger:
            assert find_node_id(nodes, "Submit") == "1"
        assert "matched by name" in mock_logger.info.call_args[0][0]


# ---------------------------------------------------------------------------
# Traversal order
# ---------------------------------------------------------------------------


class TestTraversalOrder:

    def test_earlier_sibling_subtree_wins_over_shallow_later_match(self):
        nodes = [
            _node("a", "A", children=[
                _node("a1", "A1", children=[
                    _node("deep", "Key deep"),
                ]),
            ]),
            _node("b", "Key shallow"),
        ]
        assert find_node_id(nodes, "Key") == "deep"

    def test_siblings_searched_in_order(self):
        nodes = [
            _node("x", "Other"),
            _node("y", "Key first"),
            _node("z", "Key second"),
        ]
        assert find_node_id(nodes, "Key") == "y"

    def test_first_child_before_second_child(self):
        nodes = [
            _node("root", "Root", children=[
                _node("c1", "Caption", "TEXT", characters="Key text"),
                _node("c2", "Key layer"),
            ]),
        ]
        assert find_node_id(nodes, "Key") == "c1"

    def test_not_found_returns_none(self, sample_file_response):
        pages = sample_file_response["document"]["children"]
        assert find_node_id(pages, "Nonexistent") is None

    @pytest.mark.parametrize("scope", [None, []])
    def test_empty_scope(self, scope):
        assert find_node_id(scope, "Key") is None

    def test_deep_tree_does_not_hit_recursion_limit(self):
        leaf = _node("leaf", "Key")
        node = leaf
        for i in range(5000):
            node = _node(f"n{i}", f"Level {i}", children=[node])
        assert find_node_id([node], "Key") == "leaf"


# ---------------------------------------------------------------------------
# Page scoping
# ---------------------------------------------------------------------------


class TestSearchScope:

    def test_no_page_name_uses_all_pages(self, sample_file_response):
        document = sample_file_response["document"]
        assert search_scope(document) == document["children"]
        assert search_scope(document, "") == document["children"]

    def test_page_name_limits_to_page_children(self, sample_file_response):
        document = sample_file_response["document"]
        scope = search_scope(document, "Checkout")
        assert [n["id"] for n in scope] == ["2:1"]

    def test_page_name_must_match_exactly(self, sample_file_response):
        document = sample_file_response["document"]
        assert search_scope(document, "checkout") == document["children"]
        assert search_scope(document, "Check") == document["children"]

    def test_missing_page_falls_back_to_whole_file(self, sample_file_response):
        document = sample_file_response["document"]
        with patch("figshot.locator.logger") as mock_logger:
            scope = search_scope(document, "Nope")
        assert scope == document["children"]
        mock_logger.warning.assert_called_once()
        assert "not found" in mock_logger.warning.call_args[0][0]

    def test_only_canvas_nodes_count_as_pages(self):
        document = {
            "children": [
                _node("f", "Checkout", "FRAME", children=[_node("inner", "Inner")]),
            ],
        }
        assert search_scope(document, "Checkout") == document["children"]

    def test_page_without_children(self):
        document = {"children": [_node("p", "Empty", "CANVAS")]}
        assert search_scope(document, "Empty") == []


class TestLocateNode:

    def test_finds_by_name_across_pages(self, sample_file_response):
        document = sample_file_response["document"]
        assert locate_node(document, "Submit") == "1:4"

    def test_finds_by_text_content(self, sample_file_response):
        document = sample_file_response["document"]
        assert locate_node(document, "Pay now") == "2:2"

    def test_scoped_search_never_leaves_the_page(self, sample_file_response):
        document = sample_file_response["document"]
        # "Submit" only exists on the Home page
        assert locate_node(document, "Submit", "Checkout") is None

    def test_scoped_search_finds_inside_page(self, sample_file_response):
        document = sample_file_response["document"]
        assert locate_node(document, "Pay", "Checkout") == "2:1"

    def test_unknown_page_searches_everything(self, sample_file_response):
        document = sample_file_response["document"]
        assert locate_node(document, "Submit", "Missing Page") == "1:4"

    def test_page_node_itself_is_not_a_candidate_when_scoped(self):
        document = {
            "children": [
                _node("p", "Key page", "CANVAS", children=[_node("c", "Child")]),
            ],
        }
        assert locate_node(document, "Key", "Key page") is None
        assert locate_node(document, "Key") == "p"

"""Node search over a Figma document tree.

Finds the first node, in depth-first pre-order, whose layer name or text
content contains a key text. Optionally restricted to one page (CANVAS).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger("figshot.locator")

CANVAS_TYPE = "CANVAS"
TEXT_TYPE = "TEXT"


def _match_kind(node: Dict[str, Any], key_text: str) -> Optional[str]:
    """Return "name" or "text" when the node matches, None otherwise.

    Name is checked before text content.
    """
    name = node.get("name")
    if name and key_text in name:
        return "name"
    if node.get("type") == TEXT_TYPE:
        characters = node.get("characters")
        if characters and key_text in characters:
            return "text"
    return None


def find_node_id(
    nodes: Optional[List[Dict[str, Any]]],
    key_text: str,
) -> Optional[str]:
    """Depth-first, pre-order search for the first node matching key_text.

    Siblings are visited in their original order and a node is tested before
    its children. Uses an explicit stack, so tree depth is not bounded by the
    interpreter's recursion limit. The tree is assumed acyclic.

    Returns:
        The matching node's id, or None when nothing in scope matches.
    """
    if not nodes:
        return None

    stack: List[Dict[str, Any]] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        logger.debug(
            f"find_node_id: visiting \"{node.get('name') or 'N/A'}\" "
            f"(type={node.get('type')})"
        )

        kind = _match_kind(node, key_text)
        if kind:
            logger.info(
                f"find_node_id: matched by {kind}: id={node.get('id')}, "
                f"name=\"{node.get('name', '')}\""
            )
            return node.get("id")

        children = node.get("children")
        if children:
            stack.extend(reversed(children))

    return None


def search_scope(
    document: Dict[str, Any],
    page_name: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Pick the nodes to search.

    Without a page name, the scope is every top-level page. With one, it is
    the children of the CANVAS whose name equals page_name exactly; if no
    such page exists the whole document is searched instead.
    """
    pages = document.get("children") or []
    if not page_name:
        return pages

    for page in pages:
        if page.get("type") == CANVAS_TYPE and page.get("name") == page_name:
            logger.info(f"search_scope: limited to page \"{page_name}\"")
            return page.get("children") or []

    logger.warning(
        f"search_scope: page \"{page_name}\" not found, searching the whole file"
    )
    return pages


def locate_node(
    document: Dict[str, Any],
    key_text: str,
    page_name: Optional[str] = None,
) -> Optional[str]:
    """Find the id of the node matching key_text within the requested scope."""
    scope = search_scope(document, page_name)
    logger.info(
        f"locate_node: searching \"{key_text}\" in {len(scope)} top-level node(s)"
    )
    return find_node_id(scope, key_text)

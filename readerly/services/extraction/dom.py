# readerly/services/extraction/dom.py
"""
Small helpers over BeautifulSoup ``Tag`` objects.

BeautifulSoup is the DOM the pipeline works on; this module collects the few
operations the passes need that bs4 does not express directly (normalised
text, class/id strings, element-only children, identity lookups).

Note that ``Tag.__eq__`` and ``Tag.__hash__`` are *structural* in bs4: two
different nodes with the same markup compare equal.  Anything that needs node
identity must use ``is`` or ``id()``, never ``==`` / ``in``.
"""

import re
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment

_WHITESPACE_RE = re.compile(r"\s+")


def parse_markup(markup: str, parser: str = "html.parser") -> BeautifulSoup:
    """Turn raw markup into a BeautifulSoup document."""
    return BeautifulSoup(markup, parser)


def inner_text(node: Tag) -> str:
    """Visible text of *node* with whitespace runs collapsed and trimmed."""
    return _WHITESPACE_RE.sub(" ", node.get_text()).strip()


def text_length(node: Tag) -> int:
    return len(inner_text(node))


def get_attr(node: Tag, name: str) -> str:
    """
    Return an attribute as a plain string ("" when missing).

    bs4 stores multi-valued attributes (``class``, ``rel``) as lists; they are
    joined back with single spaces.
    """
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_and_id(node: Tag, include_rel: bool = False) -> str:
    """Lowercased ``"class id"`` (or ``"class id rel"``) match string."""
    parts = [get_attr(node, "class"), get_attr(node, "id")]
    if include_rel:
        parts.append(get_attr(node, "rel"))
    return " ".join(parts).lower()


def element_children(node: Tag) -> List[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


def has_direct_text(node: Tag) -> bool:
    """True when *node* has a non-whitespace text node as a direct child."""
    for child in node.children:
        if isinstance(child, NavigableString) and not isinstance(child, Comment):
            if child.strip():
                return True
    return False


def only_child_element(node: Tag) -> Optional[Tag]:
    """The single element child of *node*, when it has no other content."""
    children = element_children(node)
    if len(children) != 1 or has_direct_text(node):
        return None
    return children[0]


def is_document(node) -> bool:
    return isinstance(node, BeautifulSoup)


def iter_elements(root: Tag) -> Iterator[Tag]:
    """Every element below *root* in document order (root excluded)."""
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def count_elements(root: Tag) -> int:
    return sum(1 for _ in iter_elements(root))


def first_attr(root: Tag, selector: str, attr: str = "content") -> str:
    """Attribute of the first node matching *selector* ("" when absent)."""
    node = root.select_one(selector)
    if node is None:
        return ""
    return get_attr(node, attr).strip()


def rename(node: Tag, tag_name: str) -> Tag:
    node.name = tag_name
    return node


def new_container(tag_name: str = "div") -> Tag:
    """A detached element for assembling extracted nodes into."""
    return BeautifulSoup("", "html.parser").new_tag(tag_name)

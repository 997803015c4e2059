# readerly/services/extraction/postprocess.py
"""
Final clean-up of the assembled article: absolute links, flattened wrapper
``<div>``s and stripped presentational attributes.
"""

from typing import Optional, Sequence
from urllib.parse import urljoin

from bs4 import Tag
from loguru import logger

from .dom import get_attr, only_child_element


PRESENTATIONAL_ATTRIBUTES = (
    "align", "background", "bgcolor", "border", "cellpadding", "cellspacing",
    "frame", "hspace", "rules", "style", "valign", "vspace",
)
DEPRECATED_SIZE_ATTRIBUTE_ELEMS = {"table", "th", "td", "hr", "pre"}
_UNRESOLVABLE_PREFIXES = ("#", "javascript:", "data:", "mailto:")


def fix_relative_uris(article: Tag, base_uri: Optional[str]) -> Tag:
    """Make ``a[href]`` and ``img[src]`` absolute.  No-op without a base URI."""
    if not base_uri:
        return article

    try:
        for tag_name, attr in (("a", "href"), ("img", "src")):
            for node in article.find_all(tag_name, attrs={attr: True}):
                value = get_attr(node, attr).strip()
                if not value or value.lower().startswith(_UNRESOLVABLE_PREFIXES):
                    continue
                node[attr] = urljoin(base_uri, value)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error fixing relative URIs: {exc}")
    return article


def _single_div_child(node: Tag) -> Optional[Tag]:
    child = only_child_element(node)
    if child is not None and child.name == "div":
        return child
    return None


def simplify_nested_elements(article: Tag) -> Tag:
    """
    Collapse ``<div><div>...</div></div>`` chains until none are left.

    The article root itself may be replaced by its only child, so callers
    must keep the returned node.
    """
    try:
        changed = True
        while changed:
            changed = False

            child = _single_div_child(article) if article.name == "div" else None
            if child is not None:
                article = child.extract()
                changed = True
                continue

            for div in article.find_all("div"):
                child = _single_div_child(div)
                if child is not None:
                    div.replace_with(child.extract())
                    changed = True
                    break
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error simplifying nested elements: {exc}")
    return article


def clean_classes(article: Tag, classes_to_preserve: Sequence[str] = ()) -> Tag:
    """
    Drop ``class`` (unless it contains a preserved substring), ``id`` and
    presentational attributes from the article and everything below it.
    """
    for node in [article, *article.find_all(True)]:
        class_name = get_attr(node, "class")
        if not any(keep in class_name for keep in classes_to_preserve):
            node.attrs.pop("class", None)

        node.attrs.pop("id", None)
        for attr in PRESENTATIONAL_ATTRIBUTES:
            node.attrs.pop(attr, None)
        if node.name in DEPRECATED_SIZE_ATTRIBUTE_ELEMS:
            node.attrs.pop("width", None)
            node.attrs.pop("height", None)
    return article


def post_process_content(
    article: Tag,
    base_uri: Optional[str] = None,
    keep_classes: bool = False,
    classes_to_preserve: Sequence[str] = (),
) -> Tag:
    """Run the three clean-up steps; returns the (possibly new) article root."""
    article = fix_relative_uris(article, base_uri)
    article = simplify_nested_elements(article)
    if not keep_classes:
        article = clean_classes(article, classes_to_preserve)
    return article

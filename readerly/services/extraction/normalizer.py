# readerly/services/extraction/normalizer.py
"""
Document preparation passes.

Each pass works on the whole tree, can be run again without changing the
result, and absorbs its own failure: a broken pass is logged and skipped so
the remaining passes still run.  ``collapse_brs`` re-parses the markup, so it
(and ``prep_document``) return the tree the caller must continue with.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .dom import class_and_id, get_attr, only_child_element, parse_markup, rename
from .patterns import DEFAULT_PATTERNS, PatternLibrary


JSON_LD_TYPE = "application/ld+json"
IMAGE_SOURCE_ATTRS = ("src", "srcset", "data-src")
SINGLE_CHILD_SAFE_TAGS = {"p", "a", "span", "img", "ul", "ol"}

_BLOCK_TAG_TEXT_RE = re.compile(r"<(a|blockquote|dl|div|img|ol|p|pre|table|ul|select)")
_BR_RUN_RE = re.compile(r"(<br[^>]*>[ \n\r\t]*){2,}", re.IGNORECASE)


# ----------------------------------------------------------------------
# Scripts & noscript images
# ----------------------------------------------------------------------
def _has_usable_source(img: Tag) -> bool:
    src = get_attr(img, "src").strip()
    if src and not src.lower().startswith("data:"):
        return True
    return bool(get_attr(img, "srcset").strip() or get_attr(img, "data-src").strip())


def _noscript_image(noscript: Tag, parser: str) -> Optional[Tag]:
    """First ``<img>`` with a real source inside the noscript's markup, if any."""
    fragment = parse_markup(noscript.decode_contents(), parser)
    for img in fragment.find_all("img"):
        if any(img.has_attr(attr) for attr in IMAGE_SOURCE_ATTRS):
            return img
    return None


def unwrap_noscript_image(noscript: Tag, parser: str = "html.parser") -> bool:
    """
    Swap a lazy-loading placeholder ``<img>`` for the real one kept in the
    adjacent ``<noscript>``.  Returns True when a replacement happened.
    """
    for sibling in (noscript.find_previous_sibling(True), noscript.find_next_sibling(True)):
        if sibling is None or sibling.name != "img" or _has_usable_source(sibling):
            continue
        replacement = _noscript_image(noscript, parser)
        if replacement is None:
            return False
        sibling.replace_with(replacement.extract())
        return True
    return False


def remove_scripts(
    document: BeautifulSoup,
    parser: str = "html.parser",
    debug: bool = False,
) -> List[str]:
    """
    Remove every ``<script>`` and ``<noscript>``.

    Returns the JSON-LD payloads found along the way, in document order, so
    metadata extraction can still read them after the scripts are gone.
    """
    json_ld: List[str] = []
    try:
        for script in document.find_all("script"):
            if get_attr(script, "type").strip().lower() == JSON_LD_TYPE:
                payload = script.string if script.string is not None else script.get_text()
                if payload and payload.strip():
                    json_ld.append(payload.strip())
            script.decompose()

        for noscript in document.find_all("noscript"):
            if noscript.decomposed:
                continue
            if unwrap_noscript_image(noscript, parser) and debug:
                logger.debug("Replaced placeholder <img> with its <noscript> fallback")
            noscript.decompose()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error removing scripts: {exc}")
    return json_ld


# ----------------------------------------------------------------------
# Unlikely candidates & misused divs
# ----------------------------------------------------------------------
def remove_unlikely_candidates(
    document: BeautifulSoup,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
    debug: bool = False,
) -> int:
    """Drop nodes whose class/id says they are chrome (menus, footers, ads)."""
    removed = 0
    try:
        for node in document.find_all(True):
            if node.decomposed:
                continue
            match_string = class_and_id(node)
            if patterns.is_unlikely(match_string):
                if debug:
                    logger.debug(f"Removing unlikely candidate <{node.name}> '{match_string.strip()}'")
                node.decompose()
                removed += 1
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error removing unlikely candidates: {exc}")
    return removed


def _wraps_single_safe_tag(div: Tag) -> bool:
    child = only_child_element(div)
    return child is not None and child.name in SINGLE_CHILD_SAFE_TAGS


def transform_misused_divs(document: BeautifulSoup, debug: bool = False) -> int:
    """Rename ``<div>``s that are really paragraphs to ``<p>``."""
    renamed = 0
    try:
        for div in document.find_all("div"):
            if _wraps_single_safe_tag(div):
                continue
            if _BLOCK_TAG_TEXT_RE.search(div.get_text()) is None:
                rename(div, "p")
                renamed += 1
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error transforming divs: {exc}")
    if debug:
        logger.debug(f"Turned {renamed} <div>(s) into <p>")
    return renamed


# ----------------------------------------------------------------------
# Line breaks
# ----------------------------------------------------------------------
def collapse_brs(document: BeautifulSoup, parser: str = "html.parser") -> BeautifulSoup:
    """
    Replace runs of two or more ``<br>`` with a paragraph break.

    Works on the serialised markup, so the returned tree is a new document
    whenever something changed.
    """
    try:
        markup = str(document)
        collapsed = _BR_RUN_RE.sub("</p><p>", markup)
        if collapsed == markup:
            return document
        return parse_markup(collapsed, parser)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error collapsing <br> runs: {exc}")
        return document


def prep_document(
    document: BeautifulSoup,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
    parser: str = "html.parser",
    debug: bool = False,
) -> BeautifulSoup:
    """Run the structural clean-up passes; returns the tree to keep using."""
    remove_unlikely_candidates(document, patterns, debug)
    transform_misused_divs(document, debug)
    return collapse_brs(document, parser)

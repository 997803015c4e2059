# readerly/services/extraction/assembler.py
"""
Build the article container around the top candidate and strip the
low-value leftovers from it.
"""

import re

from bs4 import Tag
from loguru import logger

from .dom import element_children, get_attr, inner_text, new_container, rename
from .patterns import DEFAULT_PATTERNS, PatternLibrary
from .scoring import Candidate, CandidateMap, get_class_weight, get_link_density


ALTER_TO_DIV_EXCEPTIONS = {"div", "article", "section", "p"}
SIBLING_SCORE_FLOOR = 10.0
SIBLING_SCORE_RATIO = 0.2
LONG_PARAGRAPH = 80
LONG_PARAGRAPH_MAX_LINK_DENSITY = 0.25

_SENTENCE_END_RE = re.compile(r"\.( |$)")


def sibling_score_threshold(top_candidate: Candidate) -> float:
    return max(SIBLING_SCORE_FLOOR, top_candidate.content_score) * SIBLING_SCORE_RATIO


def _is_readable_paragraph(node: Tag) -> bool:
    """A ``<p>`` sibling worth keeping even though it was never scored."""
    text = inner_text(node)
    link_density = get_link_density(node)

    if len(text) > LONG_PARAGRAPH and link_density < LONG_PARAGRAPH_MAX_LINK_DENSITY:
        return True
    return (
        len(text) < LONG_PARAGRAPH
        and link_density == 0
        and _SENTENCE_END_RE.search(text) is not None
    )


def get_article_content(
    top_candidate: Candidate,
    candidates: CandidateMap,
    debug: bool = False,
) -> Tag:
    """
    Collect the top candidate and its qualifying siblings, in document
    order, into a fresh ``<div>``.
    """
    article = new_container("div")
    top_node = top_candidate.node
    parent = top_node.parent

    if parent is None:
        article.append(top_node)
        return article

    threshold = sibling_score_threshold(top_candidate)
    if debug:
        logger.debug(f"Sibling score threshold: {threshold:.2f}")

    for sibling in element_children(parent):
        append = False
        if sibling is top_node:
            append = True
        else:
            candidate = candidates.lookup(sibling)
            if candidate is not None and candidate.content_score >= threshold:
                append = True
            elif sibling.name == "p" and _is_readable_paragraph(sibling):
                append = True

        if not append:
            continue

        if sibling.name not in ALTER_TO_DIV_EXCEPTIONS:
            if debug:
                logger.debug(f"Altering sibling <{sibling.name}> to <div>")
            rename(sibling, "div")
        article.append(sibling.extract())

    return article


def clean_conditionally(
    container: Tag,
    tag: str,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
    debug: bool = False,
) -> Tag:
    """Remove every ``tag`` below *container* whose class weight is negative."""
    try:
        for node in container.find_all(tag):
            if node.decomposed:
                continue
            weight = get_class_weight(node, patterns)
            if debug:
                logger.debug(
                    f"Cleaning conditionally {tag} "
                    f"({get_attr(node, 'class')}:{get_attr(node, 'id')}) with weight {weight}"
                )
            if weight < 0:
                node.decompose()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Error cleaning conditionally ({tag}): {exc}")
    return container

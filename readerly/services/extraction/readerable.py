# readerly/services/extraction/readerable.py
"""
Cheap "is this page worth extracting" check.

Looks only at paragraph-like nodes and never touches the tree, so it can run
on a document before (or instead of) a full ``Readability`` session.
"""

import math
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag
from loguru import logger

from readerly.models.options import ReadabilityOptions

from .dom import class_and_id, parse_markup, text_length
from .patterns import DEFAULT_PATTERNS, PatternLibrary


MIN_CONTENT_LENGTH = 140
MIN_SCORE = 20.0


def _readerable_nodes(document: BeautifulSoup) -> List[Tag]:
    nodes = document.find_all(["p", "pre", "article"])
    nodes.extend(div for div in document.find_all("div") if div.find("br") is not None)
    return nodes


def is_probably_readerable(
    document: Union[BeautifulSoup, str],
    options: Optional[ReadabilityOptions] = None,
    *,
    min_content_length: int = MIN_CONTENT_LENGTH,
    min_score: float = MIN_SCORE,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> bool:
    """
    Decide whether *document* probably holds an article.

    Parameters
    ----------
    document:
        A parsed ``BeautifulSoup`` tree or raw markup.
    options:
        Only ``parser`` (for raw markup) and ``debug`` are consulted.
    min_content_length:
        Nodes with less trimmed text than this are ignored.
    min_score:
        Sum of ``sqrt(length - min_content_length)`` needed to say yes.

    Returns
    -------
    bool
    """
    options = options or ReadabilityOptions()
    if isinstance(document, str):
        document = parse_markup(document, options.parser)

    score = 0.0
    for node in _readerable_nodes(document):
        length = text_length(node)
        if length < min_content_length:
            continue
        if patterns.is_unlikely(class_and_id(node)):
            continue
        if node.name == "p" and node.parent is not None and node.parent.name == "li":
            continue

        score += math.sqrt(length - min_content_length)
        if score >= min_score:
            if options.debug:
                logger.debug(f"Readerable: score reached {score:.2f}")
            return True

    if options.debug:
        logger.debug(f"Not readerable: score {score:.2f} < {min_score}")
    return False

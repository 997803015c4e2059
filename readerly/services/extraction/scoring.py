# readerly/services/extraction/scoring.py
"""
Content scoring and top-candidate selection.

Scorable nodes (paragraph-ish tags with at least 25 characters of text) earn
a score from their length and class/id keywords, and hand a decaying share of
it to up to three ancestors.  Ancestors accumulate those shares as
*candidates*; the best candidate after the link-density discount becomes the
root of the article.

Candidates are keyed by a node index assigned while walking the document, so
two look-alike ``<div>``s never share a score.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .dom import get_attr, inner_text, is_document, iter_elements, text_length
from .patterns import DEFAULT_PATTERNS, PatternLibrary


TAGS_TO_SCORE = "section,h2,h3,h4,h5,h6,p,td,pre"
MIN_SCORABLE_TEXT_LENGTH = 25
ANCESTOR_LEVELS = 3
CLASS_WEIGHT = 25


@dataclass
class Candidate:
    """A node being considered as the article root, with its running score."""

    node: Tag
    content_score: float = 0.0
    index: int = -1

    def describe(self) -> str:
        return f"<{self.node.name} class='{get_attr(self.node, 'class')}' id='{get_attr(self.node, 'id')}'>"


class CandidateMap(dict):
    """Candidates keyed by node index, in first-visited order."""

    def __init__(self, node_index: Dict[int, int]):
        super().__init__()
        self._node_index = node_index

    def key_for(self, node: Tag) -> Optional[int]:
        return self._node_index.get(id(node))

    def lookup(self, node: Tag) -> Optional[Candidate]:
        key = self.key_for(node)
        if key is None:
            return None
        return self.get(key)


def index_nodes(document: BeautifulSoup) -> Dict[int, int]:
    """Assign every element a stable integer (document order) by object identity."""
    return {id(node): position for position, node in enumerate(iter_elements(document))}


# ----------------------------------------------------------------------
# Per-node measures
# ----------------------------------------------------------------------
def get_class_weight(node: Tag, patterns: PatternLibrary = DEFAULT_PATTERNS) -> int:
    """
    +25 when class or id matches the positive keywords, -25 when either
    matches the negative ones.  Both checks always run.
    """
    weight = 0
    class_name = get_attr(node, "class")
    node_id = get_attr(node, "id")

    if patterns.matches("positive", class_name) or patterns.matches("positive", node_id):
        weight += CLASS_WEIGHT
    if patterns.matches("negative", class_name) or patterns.matches("negative", node_id):
        weight -= CLASS_WEIGHT
    return weight


def get_link_density(node: Tag) -> float:
    """
    Share of *node*'s text that sits inside real links.

    Anchors without an href, or pointing at a same-page fragment, do not count.
    """
    total = text_length(node)
    if total == 0:
        return 0.0

    link_length = 0
    for link in node.find_all("a"):
        href = get_attr(link, "href")
        if href and not href.startswith("#"):
            link_length += text_length(link)
    return link_length / total


def score_node(node: Tag, text: str, patterns: PatternLibrary = DEFAULT_PATTERNS) -> float:
    score = 1.0
    score += len(text) // 100
    score += get_class_weight(node, patterns)
    return score


# ----------------------------------------------------------------------
# Passes
# ----------------------------------------------------------------------
def get_candidates(
    document: BeautifulSoup,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
    debug: bool = False,
) -> CandidateMap:
    """Score every scorable node and propagate the score to its ancestors."""
    candidates = CandidateMap(index_nodes(document))

    for node in document.select(TAGS_TO_SCORE):
        text = inner_text(node)
        if len(text) < MIN_SCORABLE_TEXT_LENGTH:
            continue

        score = score_node(node, text, patterns)

        ancestor = node.parent
        level = 0
        while ancestor is not None and not is_document(ancestor) and level < ANCESTOR_LEVELS:
            key = candidates.key_for(ancestor)
            if key is None:
                break
            candidate = candidates.get(key)
            if candidate is None:
                candidate = candidates[key] = Candidate(node=ancestor, index=key)
            candidate.content_score += score / (level + 1)

            ancestor = ancestor.parent
            level += 1

    if debug:
        logger.debug(f"Scored {len(candidates)} candidate(s)")
    return candidates


def rank_candidates(candidates: CandidateMap, limit: int = 5) -> List[Candidate]:
    """
    The ``limit`` best candidates by link-density-adjusted score.

    A candidate only displaces a ranked one when its score is strictly
    greater, so on ties the first-visited candidate stays ahead.  Candidates
    whose adjusted score is not positive are never ranked.
    """
    ranked: List[Candidate] = []
    scores: List[float] = []

    for candidate in candidates.values():
        effective = candidate.content_score * (1 - get_link_density(candidate.node))
        if effective <= 0:
            continue

        for position, existing in enumerate(scores):
            if effective > existing:
                ranked.insert(position, candidate)
                scores.insert(position, effective)
                break
        else:
            ranked.append(candidate)
            scores.append(effective)

        if len(ranked) > limit:
            ranked.pop()
            scores.pop()

    return ranked


def get_top_candidate(
    candidates: CandidateMap,
    nb_top_candidates: int = 5,
    debug: bool = False,
) -> Optional[Candidate]:
    """Best candidate after the link-density discount, or None."""
    ranked = rank_candidates(candidates, nb_top_candidates)
    if debug:
        for position, candidate in enumerate(ranked, start=1):
            logger.debug(
                f"Top candidate #{position}: {candidate.describe()} score={candidate.content_score:.2f}"
            )
    if not ranked:
        return None
    return ranked[0]

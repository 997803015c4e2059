# tests/test_readerable.py
"""
Tests for ``is_probably_readerable`` – the quick pre-check that runs before
(or instead of) a full extraction.
"""

import pytest
from bs4 import BeautifulSoup
from loguru import logger

from readerly import ReadabilityOptions, is_probably_readerable


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def _paragraphs(*lengths: int, tag: str = "p", attrs: str = "") -> str:
    return "".join(f"<{tag}{attrs}>{'a' * n}</{tag}>" for n in lengths)


# ----------------------------------------------------------------------
# 1️⃣  Thresholds
# ----------------------------------------------------------------------
def test_paragraphs_at_exact_minimum_length_add_nothing():
    soup = _soup(_paragraphs(*([140] * 50)))
    assert is_probably_readerable(soup) is False


def test_single_paragraph_reaching_min_score():
    # sqrt(540 - 140) == 20
    assert is_probably_readerable(_soup(_paragraphs(540))) is True
    assert is_probably_readerable(_soup(_paragraphs(539))) is False


def test_scores_add_up_across_nodes():
    # 4 * sqrt(165 - 140) == 20
    assert is_probably_readerable(_soup(_paragraphs(165, 165, 165, 165))) is True
    assert is_probably_readerable(_soup(_paragraphs(165, 165, 165))) is False


def test_custom_thresholds():
    soup = _soup(_paragraphs(400))
    assert is_probably_readerable(soup, min_content_length=0) is True
    assert is_probably_readerable(soup, min_score=100) is False


@pytest.mark.parametrize("min_score", [1.0, 5.0, 10.0, 15.0, 20.0, 25.0, 40.0])
def test_lower_min_score_never_turns_yes_into_no(min_score):
    soup = _soup(_paragraphs(300, 200, 180))
    if is_probably_readerable(soup, min_score=min_score):
        assert is_probably_readerable(soup, min_score=min_score / 2)


@pytest.mark.parametrize(
    "min_content_length,expected",
    [(0, True), (50, True), (100, True), (140, True), (150, True), (200, False), (300, False)],
)
def test_min_content_length_thresholds(min_content_length, expected):
    soup = _soup(_paragraphs(300, 200, 180))
    assert is_probably_readerable(soup, min_content_length=min_content_length) is expected


def test_raising_min_content_length_never_turns_no_into_yes():
    """Once a page stops being readerable, longer minimums keep it that way."""
    soup = _soup(_paragraphs(320, 260, 210, 150))
    results = [
        is_probably_readerable(soup, min_content_length=minimum)
        for minimum in range(0, 400, 10)
    ]
    assert results[0] is True
    assert results[-1] is False
    first_no = results.index(False)
    assert not any(results[first_no:])


# ----------------------------------------------------------------------
# 2️⃣  Which nodes count
# ----------------------------------------------------------------------
def test_paragraph_inside_list_item_is_ignored():
    soup = _soup(f"<ul><li>{_paragraphs(1000)}</li></ul>")
    assert is_probably_readerable(soup) is False


def test_unlikely_nodes_are_ignored():
    soup = _soup(_paragraphs(1000, attrs=' class="sidebar"'))
    assert is_probably_readerable(soup) is False


def test_content_keyword_rescues_unlikely_node():
    soup = _soup(_paragraphs(1000, attrs=' class="sidebar-content"'))
    assert is_probably_readerable(soup) is True


def test_div_with_br_counts():
    soup = _soup(f"<div>{'a' * 270}<br>{'a' * 270}</div>")
    assert is_probably_readerable(soup) is True


def test_div_without_br_does_not_count():
    soup = _soup(f"<div>{'a' * 1000}</div>")
    assert is_probably_readerable(soup) is False


def test_pre_and_article_count():
    assert is_probably_readerable(_soup(_paragraphs(540, tag="pre"))) is True
    assert is_probably_readerable(_soup(_paragraphs(540, tag="article"))) is True


def test_navigation_page_is_not_readerable():
    soup = _soup(
        '<body><nav class="menu"><a href="/">Home</a><a href="/news">News</a></nav>'
        "<p>Short teaser.</p></body>"
    )
    assert is_probably_readerable(soup) is False


# ----------------------------------------------------------------------
# 3️⃣  Inputs and side effects
# ----------------------------------------------------------------------
def test_raw_markup_is_accepted():
    assert is_probably_readerable(_paragraphs(600)) is True


def test_document_is_not_modified():
    soup = _soup(
        '<body><div class="sidebar">Side</div>'
        f"<div>{'a' * 300}<br><br>{'b' * 300}</div></body>"
    )
    before = str(soup)
    is_probably_readerable(soup)
    assert str(soup) == before


def test_debug_logs_the_decision():
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG")
    try:
        is_probably_readerable(_paragraphs(200), ReadabilityOptions(debug=True))
    finally:
        logger.remove(sink_id)

    assert any("Not readerable" in m for m in messages)

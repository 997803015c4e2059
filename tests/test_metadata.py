# tests/test_metadata.py
"""
Tests for the metadata fallback chains, JSON-LD handling and the small
title/excerpt helpers.
"""

import json

import pytest
from bs4 import BeautifulSoup

from readerly.services.extraction.metadata import (
    clean_title,
    extract_byline,
    extract_dir,
    extract_language,
    extract_metadata,
    extract_published_time,
    extract_site_name,
    extract_title,
    get_article_title,
    get_excerpt,
    load_json_ld,
)


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


# ----------------------------------------------------------------------
# 1️⃣  Title
# ----------------------------------------------------------------------
def test_og_title_wins_verbatim_over_title_tag():
    soup = _soup(
        '<head><meta property="og:title" content="OG Title - With Dash">'
        "<title>Other Title | Site</title></head>"
    )
    assert extract_title(soup) == "OG Title - With Dash"


def test_title_fallback_order():
    soup = _soup(
        '<head><meta name="DC.title" content="Dublin Core">'
        '<meta name="twitter:title" content="Twitter Card"></head>'
    )
    assert extract_title(soup) == "Twitter Card"


def test_empty_og_title_falls_through():
    soup = _soup('<head><meta property="og:title" content=""><title>Plain</title></head>')
    assert extract_title(soup) == "Plain"


@pytest.mark.parametrize(
    "raw,cleaned",
    [
        ("Article headline here | Site", "Article headline here"),
        ("Site | A much longer article headline", "A much longer article headline"),
        ("One - Two - Three", "One"),
        ("Plain title", "Plain title"),
        ("Breaking news story :: Daily", "Breaking news story"),
        ("Same | Also", "Same"),
    ],
)
def test_clean_title(raw, cleaned):
    assert clean_title(raw) == cleaned


def test_get_article_title_prefers_similar_h1():
    soup = _soup("<title>Site name: the story</title><body><h1>The story itself</h1></body>")
    assert get_article_title(soup) == "The story itself"


def test_get_article_title_ignores_multiple_h1():
    soup = _soup("<title>The title</title><h1>One</h1><h1>Two</h1>")
    assert get_article_title(soup) == "The title"


# ----------------------------------------------------------------------
# 2️⃣  JSON-LD
# ----------------------------------------------------------------------
def test_malformed_json_ld_is_skipped():
    payloads = ["{not json", json.dumps({"author": {"name": "Ada"}})]
    assert load_json_ld(payloads) == {"author": {"name": "Ada"}}


def test_json_ld_graph_prefers_article_object():
    payload = json.dumps({
        "@graph": [
            {"@type": "WebSite", "name": "Site"},
            {"@type": "NewsArticle", "datePublished": "2024-05-01"},
        ]
    })
    assert load_json_ld([payload])["datePublished"] == "2024-05-01"


def test_json_ld_array_uses_first_object():
    payload = json.dumps([1, {"@type": "Article", "dateCreated": "2023"}])
    assert load_json_ld([payload])["dateCreated"] == "2023"


def test_only_malformed_json_ld_yields_none():
    assert load_json_ld(["[", "nope"]) is None


# ----------------------------------------------------------------------
# 3️⃣  Byline
# ----------------------------------------------------------------------
def test_byline_from_json_ld_author():
    soup = _soup('<meta name="author" content="Meta Author">')
    assert extract_byline(soup, {"author": {"name": "Jane Doe"}}) == "Jane Doe"


def test_byline_from_json_ld_author_list():
    data = {"author": [{"name": "Jane Doe"}, {"name": "John Roe"}, "ignored"]}
    assert extract_byline(_soup(""), data) == "Jane Doe, John Roe"


def test_byline_from_meta_tags_in_order():
    soup = _soup(
        '<meta property="article:author" content="OG Author">'
        '<meta name="DC.creator" content="DC Author">'
    )
    assert extract_byline(soup) == "DC Author"


def test_byline_from_document_structure():
    soup = _soup(
        '<body><span class="byline">' + "x" * 120 + "</span>"
        '<a rel="author" href="/jane">  By Jane Doe </a></body>'
    )
    assert extract_byline(soup) == "By Jane Doe"


def test_byline_absent():
    assert extract_byline(_soup("<p>No author here</p>")) is None


# ----------------------------------------------------------------------
# 4️⃣  Direction, site name, language, published time
# ----------------------------------------------------------------------
def test_dir_from_html_is_lowercased():
    assert extract_dir(_soup('<html dir="RTL"><body></body></html>')) == "rtl"


def test_dir_skips_invalid_values():
    soup = _soup(
        '<html dir="auto"><head><meta name="direction" content="ltr"></head>'
        '<body dir="sideways"></body></html>'
    )
    assert extract_dir(soup) == "ltr"


def test_dir_absent():
    assert extract_dir(_soup("<html><body></body></html>")) is None


def test_site_name_chain():
    soup = _soup(
        '<meta name="DC.publisher" content="Publisher">'
        '<meta name="application-name" content="App Name">'
    )
    assert extract_site_name(soup) == "App Name"


def test_language_from_html_then_meta():
    assert extract_language(_soup('<html lang="de"></html>')) == "de"
    soup = _soup('<html><head><meta http-equiv="content-language" content="fr"></head></html>')
    assert extract_language(soup) == "fr"


def test_published_time_prefers_json_ld():
    soup = _soup('<meta property="article:published_time" content="2020-01-01">')
    assert extract_published_time(soup, {"datePublished": "2024-02-03"}) == "2024-02-03"
    assert extract_published_time(soup, {"dateCreated": "2019-09-09"}) == "2019-09-09"
    assert extract_published_time(soup) == "2020-01-01"


def test_published_time_from_time_element():
    soup = _soup('<p>Posted <time datetime="2022-12-24T10:00">Christmas Eve</time></p>')
    assert extract_published_time(soup) == "2022-12-24T10:00"


# ----------------------------------------------------------------------
# 5️⃣  Whole chain
# ----------------------------------------------------------------------
def test_extract_metadata_leaves_missing_fields_none():
    metadata = extract_metadata(_soup("<html><body><p>Hi</p></body></html>"))
    assert metadata.model_dump() == {
        "title": None,
        "byline": None,
        "dir": None,
        "site_name": None,
        "lang": None,
        "published_time": None,
    }


def test_extract_metadata_uses_json_ld_payloads():
    payload = json.dumps({"author": {"name": "Jane"}, "datePublished": "2024-01-01"})
    metadata = extract_metadata(_soup("<title>T</title>"), [payload])
    assert metadata.byline == "Jane"
    assert metadata.published_time == "2024-01-01"
    assert metadata.title == "T"


def test_extract_metadata_can_ignore_json_ld():
    payload = json.dumps({"author": {"name": "Jane"}})
    metadata = extract_metadata(_soup(""), [payload], disable_json_ld=True)
    assert metadata.byline is None


# ----------------------------------------------------------------------
# 6️⃣  Excerpt
# ----------------------------------------------------------------------
def test_excerpt_uses_first_substantial_paragraph():
    text = "Short intro.\n\n" + "A" * 90 + "\n\n" + "B" * 300
    assert get_excerpt(text) == "A" * 90


def test_excerpt_is_capped():
    assert get_excerpt("C" * 1000) == "C" * 250


def test_excerpt_of_short_text():
    assert get_excerpt("  tiny  ") == "tiny"


def test_excerpt_collapses_whitespace_inside_paragraph():
    raw = "\n\n  " + "word " * 5 + "\n    " + "more text " * 10 + "\n\n  Second paragraph."
    excerpt = get_excerpt(raw)
    assert excerpt.startswith("word word")
    assert "  " not in excerpt
    assert "\n" not in excerpt
    assert "Second paragraph" not in excerpt

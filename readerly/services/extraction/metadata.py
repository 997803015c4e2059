# readerly/services/extraction/metadata.py
"""
Article metadata: title, byline, direction, site name, language and
publication time.

Every field is an ordered chain of sources; the first non-empty value wins
and each chain runs on its own, so a failure in one never costs another
field its value.  JSON-LD is read from payloads captured before the scripts
were stripped.
"""

import json
import re
from typing import Any, Dict, Optional, Sequence

from bs4 import BeautifulSoup
from loguru import logger

from readerly.exceptions import MalformedMetadataSource
from readerly.models.result import EXCERPT_MAX_LENGTH, ArticleMetadata

from .dom import class_and_id, first_attr, get_attr, inner_text
from .patterns import DEFAULT_PATTERNS, PatternLibrary


TITLE_SEPARATORS = (" | ", " - ", " :: ", " · ", " • ", " — ", " – ", " / ")
DIRECTIONS = {"ltr", "rtl"}
MAX_BYLINE_LENGTH = 100
EXCERPT_MIN_PARAGRAPH = 80

TITLE_SELECTORS = (
    'meta[property="og:title"]',
    'meta[name="twitter:title"]',
    'meta[name="DC.title"]',
)
BYLINE_SELECTORS = (
    'meta[name="author"]',
    'meta[name="article:author"]',
    'meta[name="article:author_name"]',
    'meta[name="DC.creator"]',
    'meta[property="article:author"]',
)
SITE_NAME_SELECTORS = (
    'meta[property="og:site_name"]',
    'meta[name="application-name"]',
    'meta[name="DC.publisher"]',
)
LANGUAGE_SELECTORS = (
    'meta[name="language"]',
    'meta[http-equiv="content-language"]',
    'meta[name="DC.language"]',
)
PUBLISHED_TIME_SELECTORS = (
    'meta[name="article:published_time"]',
    'meta[property="article:published_time"]',
    'meta[name="article:modified_time"]',
    'meta[property="article:modified_time"]',
    'meta[name="pubdate"]',
    'meta[name="DC.date"]',
    'meta[name="date"]',
    'meta[name="DC.date.created"]',
)

_ARTICLE_TYPE_RE = re.compile(r"Article$|^BlogPosting$|^Report$|^LiveBlogPosting$")
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
_WHITESPACE_RE = re.compile(r"\s+")


# ----------------------------------------------------------------------
# JSON-LD
# ----------------------------------------------------------------------
def _decode_json_ld(payload: str) -> Any:
    try:
        return json.loads(payload)
    except (ValueError, TypeError) as exc:
        raise MalformedMetadataSource("JSON-LD", str(exc)) from exc


def _is_article_type(obj: Dict[str, Any]) -> bool:
    types = obj.get("@type", [])
    if isinstance(types, str):
        types = [types]
    return any(isinstance(t, str) and _ARTICLE_TYPE_RE.search(t) for t in types)


def _pick_object(data: Any) -> Optional[Dict[str, Any]]:
    """The object describing the page inside a decoded JSON-LD blob."""
    if isinstance(data, list):
        objects = [item for item in data if isinstance(item, dict)]
        return objects[0] if objects else None
    if not isinstance(data, dict):
        return None

    graph = data.get("@graph")
    if isinstance(graph, list):
        objects = [item for item in graph if isinstance(item, dict)]
        for obj in objects:
            if _is_article_type(obj):
                return obj
        if objects:
            return objects[0]
    return data


def load_json_ld(payloads: Sequence[str], debug: bool = False) -> Optional[Dict[str, Any]]:
    """First JSON-LD payload that decodes to an object; malformed ones are skipped."""
    for payload in payloads:
        try:
            obj = _pick_object(_decode_json_ld(payload))
        except MalformedMetadataSource as exc:
            if debug:
                logger.debug(f"Skipping structured data: {exc}")
            continue
        if obj is not None:
            return obj
    return None


def _json_ld_string(data: Optional[Dict[str, Any]], key: str) -> Optional[str]:
    if not data:
        return None
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _json_ld_author(data: Optional[Dict[str, Any]]) -> Optional[str]:
    if not data:
        return None
    author = data.get("author")
    if isinstance(author, dict):
        author = [author]
    if not isinstance(author, list):
        return None

    names = []
    for entry in author:
        name = entry.get("name") if isinstance(entry, dict) else None
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return ", ".join(names) or None


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _first_meta(document: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        content = first_attr(document, selector)
        if content:
            return content
    return None


def clean_title(title: str) -> str:
    """
    Drop a site name glued on with a separator ("Story | Site").

    The first separator present decides: with more than two segments the
    first one is kept, otherwise the longer of the first and last.
    """
    cleaned = title
    for separator in TITLE_SEPARATORS:
        if separator not in cleaned:
            continue
        parts = cleaned.split(separator)
        first = parts[0].strip()
        last = parts[-1].strip()
        if len(parts) > 2 or len(first) >= len(last):
            cleaned = first
        else:
            cleaned = last
        break
    return cleaned.strip()


# ----------------------------------------------------------------------
# Field extractors
# ----------------------------------------------------------------------
def extract_title(document: BeautifulSoup) -> Optional[str]:
    title = _first_meta(document, TITLE_SELECTORS)
    if title:
        return title

    title_tag = document.find("title")
    if title_tag is not None:
        return clean_title(inner_text(title_tag)) or None
    return None


def extract_byline(
    document: BeautifulSoup,
    json_ld: Optional[Dict[str, Any]] = None,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> Optional[str]:
    byline = _json_ld_author(json_ld) or _first_meta(document, BYLINE_SELECTORS)
    if byline:
        return byline

    for node in document.find_all(True):
        if not patterns.is_byline(class_and_id(node, include_rel=True)):
            continue
        text = inner_text(node)
        if 0 < len(text) < MAX_BYLINE_LENGTH:
            return text
    return None


def extract_dir(document: BeautifulSoup) -> Optional[str]:
    for tag_name in ("html", "body"):
        node = document.find(tag_name)
        if node is not None:
            direction = get_attr(node, "dir").strip().lower()
            if direction in DIRECTIONS:
                return direction

    direction = first_attr(document, 'meta[name="direction"]').lower()
    if direction in DIRECTIONS:
        return direction
    return None


def extract_site_name(document: BeautifulSoup) -> Optional[str]:
    return _first_meta(document, SITE_NAME_SELECTORS)


def extract_language(document: BeautifulSoup) -> Optional[str]:
    html = document.find("html")
    if html is not None:
        lang = get_attr(html, "lang").strip()
        if lang:
            return lang
    return _first_meta(document, LANGUAGE_SELECTORS)


def extract_published_time(
    document: BeautifulSoup,
    json_ld: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    published = (
        _json_ld_string(json_ld, "datePublished")
        or _json_ld_string(json_ld, "dateCreated")
        or _first_meta(document, PUBLISHED_TIME_SELECTORS)
    )
    if published:
        return published
    return first_attr(document, "time[datetime]", "datetime") or None


def extract_metadata(
    document: BeautifulSoup,
    json_ld_payloads: Sequence[str] = (),
    patterns: PatternLibrary = DEFAULT_PATTERNS,
    disable_json_ld: bool = False,
    debug: bool = False,
) -> ArticleMetadata:
    """Run every field chain; a failing chain leaves only its own field empty."""
    json_ld = None if disable_json_ld else load_json_ld(json_ld_payloads, debug)

    extractors = {
        "title": lambda: extract_title(document),
        "byline": lambda: extract_byline(document, json_ld, patterns),
        "dir": lambda: extract_dir(document),
        "site_name": lambda: extract_site_name(document),
        "lang": lambda: extract_language(document),
        "published_time": lambda: extract_published_time(document, json_ld),
    }

    values: Dict[str, Optional[str]] = {}
    for field_name, extractor in extractors.items():
        try:
            values[field_name] = extractor()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(f"Error extracting {field_name}: {exc}")
            values[field_name] = None

    metadata = ArticleMetadata(**values)
    if debug:
        logger.debug(f"Extracted metadata: {metadata.model_dump(exclude_none=True)}")
    return metadata


# ----------------------------------------------------------------------
# Parse-time fallbacks
# ----------------------------------------------------------------------
def get_article_title(document: BeautifulSoup) -> str:
    """
    Title from the ``<title>`` element, replaced by the page's only ``<h1>``
    when the two are of comparable length.
    """
    title_tag = document.find("title")
    title = inner_text(title_tag) if title_tag is not None else ""

    headings = document.find_all("h1")
    if len(headings) == 1 and title:
        heading = inner_text(headings[0])
        if heading and len(heading) < len(title) * 2 and len(title) < len(heading) * 2:
            title = heading
    return title.strip()


def get_excerpt(raw_text: str) -> str:
    """
    First substantial paragraph of the article, capped at 250 characters.

    Takes the unnormalised ``get_text()`` output so blank lines still mark
    paragraph breaks; each paragraph is whitespace-collapsed before use.
    """
    for paragraph in _PARAGRAPH_BREAK_RE.split(raw_text):
        paragraph = _WHITESPACE_RE.sub(" ", paragraph).strip()
        if len(paragraph) > EXCERPT_MIN_PARAGRAPH:
            return paragraph[:EXCERPT_MAX_LENGTH]
    return _WHITESPACE_RE.sub(" ", raw_text).strip()[:EXCERPT_MAX_LENGTH]



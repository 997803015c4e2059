# readerly/services/extraction/session.py
"""
``Readability`` – one extraction session over one document.

Construction strips scripts, reads the metadata and normalises the tree.
``parse()`` scores, selects, assembles and cleans the article exactly once:
the passes rewrite the tree in place, so a session cannot be parsed twice.

    >>> article = Readability(html).parse()
    >>> article.title if article else None
"""

from enum import Enum
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag
from loguru import logger

from readerly.exceptions import ElementLimitExceeded, SessionConsumedError
from readerly.models.options import ReadabilityOptions
from readerly.models.result import ArticleMetadata, ExtractionResult

from .assembler import clean_conditionally, get_article_content
from .dom import count_elements, inner_text, parse_markup
from .metadata import extract_metadata, get_article_title, get_excerpt
from .normalizer import prep_document, remove_scripts, remove_unlikely_candidates, transform_misused_divs
from .patterns import DEFAULT_PATTERNS, PatternLibrary
from .postprocess import post_process_content
from .scoring import get_candidates, get_top_candidate
from .serializers import html_serializer


# ----------------------------------------------------------------------
#  Session lifecycle
# ----------------------------------------------------------------------
class SessionState(str, Enum):
    CONSTRUCTED = "constructed"
    PARSED = "parsed"
    EMPTY = "empty"
    FAILED = "failed"


class Readability:
    """
    Extracts the main article from an HTML document.

    Args:
        document (BeautifulSoup | str): A parsed tree (the session takes
            ownership and mutates it) or raw markup.
        options (ReadabilityOptions): Configuration snapshot; defaults apply
            when omitted.
        patterns (PatternLibrary): Classification keywords.
    """

    def __init__(
        self,
        document: Union[BeautifulSoup, str],
        options: Optional[ReadabilityOptions] = None,
        patterns: PatternLibrary = DEFAULT_PATTERNS,
    ):
        self.options = options or ReadabilityOptions()
        self.patterns = patterns

        if isinstance(document, str):
            document = parse_markup(document, self.options.parser)

        debug = self.options.debug
        json_ld = remove_scripts(document, self.options.parser, debug)
        self.metadata: ArticleMetadata = extract_metadata(
            document,
            json_ld,
            patterns=patterns,
            disable_json_ld=self.options.disable_json_ld,
            debug=debug,
        )
        self.document: BeautifulSoup = prep_document(document, patterns, self.options.parser, debug)
        self.state = SessionState.CONSTRUCTED

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def parse(self) -> Optional[ExtractionResult]:
        """
        Run the extraction.

        Returns:
            ExtractionResult | None: The article, or ``None`` when nothing in
            the document looks like content.

        Raises:
            ElementLimitExceeded: The document is larger than
                ``options.max_elems_to_parse``.
            SessionConsumedError: ``parse()`` already ran on this session.
        """
        if self.state is not SessionState.CONSTRUCTED:
            raise SessionConsumedError(self.state.value)

        options = self.options
        if options.max_elems_to_parse > 0:
            count = count_elements(self.document)
            if count > options.max_elems_to_parse:
                self.state = SessionState.FAILED
                raise ElementLimitExceeded(count, options.max_elems_to_parse)

        if options.debug:
            logger.debug("Starting to parse document...")

        try:
            result = self._grab_article()
        except Exception:
            self.state = SessionState.FAILED
            raise

        self.state = SessionState.PARSED if result is not None else SessionState.EMPTY
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _grab_article(self) -> Optional[ExtractionResult]:
        options = self.options
        debug = options.debug

        remove_unlikely_candidates(self.document, self.patterns, debug)
        transform_misused_divs(self.document, debug)

        candidates = get_candidates(self.document, self.patterns, debug)
        top_candidate = get_top_candidate(candidates, options.nb_top_candidates, debug)
        if top_candidate is None:
            if debug:
                logger.debug("No top candidate found")
            return None

        # the <h1> may move into the article below, so settle the title first
        title = self.metadata.title or get_article_title(self.document)

        article = get_article_content(top_candidate, candidates, debug)
        article = clean_conditionally(article, "form", self.patterns, debug)
        article = post_process_content(
            article,
            base_uri=options.base_uri,
            keep_classes=options.keep_classes,
            classes_to_preserve=options.classes_to_preserve,
        )

        raw_text = article.get_text()
        text_content = inner_text(article)
        if debug and len(text_content) < options.char_threshold:
            logger.debug(
                f"Article text is {len(text_content)} chars, below char_threshold ({options.char_threshold})"
            )

        return ExtractionResult.build(
            self.metadata.model_copy(update={"title": title}),
            content=self._serialize(article),
            text_content=text_content,
            excerpt=get_excerpt(raw_text),
        )

    def _serialize(self, article: Tag) -> str:
        serializer = self.options.serializer or html_serializer
        return serializer(article)


def extract_article(
    document: Union[BeautifulSoup, str],
    options: Optional[ReadabilityOptions] = None,
) -> Optional[ExtractionResult]:
    """One-shot helper: build a session and parse it."""
    return Readability(document, options).parse()

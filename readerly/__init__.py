"""
readerly – reader-mode article extraction for BeautifulSoup documents.

    >>> from readerly import Readability, is_probably_readerable
    >>> if is_probably_readerable(html):
    ...     article = Readability(html).parse()
"""

from .exceptions import (
    ElementLimitExceeded,
    MalformedMetadataSource,
    PatternCompilationFailure,
    ProfileNotFoundError,
    ReadabilityError,
    SessionConsumedError,
)
from .models import ArticleMetadata, ExtractionResult, ReadabilityOptions
from .services.config_loader import get_profile_options, list_available_profiles
from .services.extraction import (
    DEFAULT_PATTERNS,
    PatternLibrary,
    Readability,
    SessionState,
    extract_article,
    html_serializer,
    is_probably_readerable,
    markdown_serializer,
)

__version__ = "0.1.0"

__all__ = [
    'ArticleMetadata', 'DEFAULT_PATTERNS', 'ElementLimitExceeded', 'ExtractionResult',
    'MalformedMetadataSource', 'PatternCompilationFailure', 'PatternLibrary',
    'ProfileNotFoundError', 'Readability', 'ReadabilityError', 'ReadabilityOptions',
    'SessionConsumedError', 'SessionState', 'extract_article', 'get_profile_options',
    'html_serializer', 'is_probably_readerable', 'list_available_profiles',
    'markdown_serializer',
]

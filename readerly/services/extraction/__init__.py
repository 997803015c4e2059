from .patterns import DEFAULT_PATTERNS, PatternLibrary
from .readerable import is_probably_readerable
from .serializers import html_serializer, markdown_serializer
from .session import Readability, SessionState, extract_article

__all__ = [
    'DEFAULT_PATTERNS', 'PatternLibrary', 'Readability', 'SessionState',
    'extract_article', 'is_probably_readerable', 'html_serializer', 'markdown_serializer',
]

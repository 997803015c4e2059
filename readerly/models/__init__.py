from .options import ReadabilityOptions
from .result import ArticleMetadata, ExtractionResult

__all__ = ['ReadabilityOptions', 'ArticleMetadata', 'ExtractionResult',]

# readerly/services/extraction/serializers.py
"""
Ways of turning the extracted article node into the result's ``content``.

``html_serializer`` is the default.  ``markdown_serializer`` can be passed as
``ReadabilityOptions(serializer=markdown_serializer)``.
"""

import html2text
from bs4 import Tag


def _markdown_handler() -> html2text.HTML2Text:
    handler = html2text.HTML2Text()
    handler.ignore_links = False
    handler.ignore_images = False
    handler.ignore_tables = False
    handler.body_width = 0
    return handler


def html_serializer(node: Tag) -> str:
    return str(node)


def markdown_serializer(node: Tag) -> str:
    """Article markup converted to Markdown, links and images kept."""
    return _markdown_handler().handle(str(node)).strip()

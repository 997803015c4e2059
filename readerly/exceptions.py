# readerly/exceptions.py
"""
Error types raised by the extraction pipeline.

Only ``ElementLimitExceeded`` and ``SessionConsumedError`` ever reach callers
of ``Readability.parse()``.  ``MalformedMetadataSource`` and
``PatternCompilationFailure`` are raised internally and absorbed by the
component that owns the source (the field falls through / the pattern never
matches).  "No content found" is not an error: ``parse()`` returns ``None``.
"""


class ReadabilityError(Exception):
    """Base class for every readerly error."""


class ElementLimitExceeded(ReadabilityError):
    """Raised by ``parse()`` when the document has more elements than allowed."""

    def __init__(self, count: int, limit: int = 0):
        message = f"Document has {count} elements"
        if limit:
            message += f", limit is {limit}"
        super().__init__(message)
        self.count = count
        self.limit = limit


class MalformedMetadataSource(ReadabilityError):
    """A structured-data blob (JSON-LD) could not be decoded."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Malformed {source}: {reason}")
        self.source = source
        self.reason = reason


class PatternCompilationFailure(ReadabilityError):
    """A classification pattern is not a valid regular expression."""

    def __init__(self, name: str, pattern: str, reason: str):
        super().__init__(f"Pattern '{name}' failed to compile: {reason}")
        self.name = name
        self.pattern = pattern


class SessionConsumedError(ReadabilityError):
    """``parse()`` was called on a session that already ran."""

    def __init__(self, state: str):
        super().__init__(
            f"parse() already ran on this session (state: {state}); "
            "build a new Readability instance to parse again."
        )
        self.state = state


class ProfileNotFoundError(KeyError):
    """Raised when a requested options profile does not exist in profiles.yaml."""

    def __init__(self, profile_name: str):
        super().__init__(f"Profile '{profile_name}' not found.")
        self.profile_name = profile_name

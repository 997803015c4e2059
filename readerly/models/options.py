# readerly/models/options.py
from typing import Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ----------------------------------------------------------------------
#  Tree builders BeautifulSoup knows how to drive
# ----------------------------------------------------------------------
SUPPORTED_PARSERS = {"html.parser", "lxml", "html5lib"}


class ReadabilityOptions(BaseModel):
    """
    Immutable configuration snapshot for a ``Readability`` session.

    The session captures one instance at construction time and never
    mutates it.  Every field has a default, so ``ReadabilityOptions()`` is
    the usual starting point; use ``model_copy(update=...)`` to derive a
    variant.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # ------------------------------------------------------------------
    #  Limits
    # ------------------------------------------------------------------
    max_elems_to_parse: int = Field(
        default=0,
        ge=0,
        description="Fail parse() when the document has more elements (0 = unlimited)",
    )
    nb_top_candidates: int = Field(
        default=5,
        ge=1,
        description="How many of the best-scoring candidates to keep ranked",
    )
    char_threshold: int = Field(
        default=500,
        ge=0,
        description="Article text length below which parse() reports a short extraction",
    )

    # ------------------------------------------------------------------
    #  Post-processing
    # ------------------------------------------------------------------
    classes_to_preserve: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Substrings that keep an element's class attribute alive",
    )
    keep_classes: bool = Field(
        default=False,
        description="Skip class/id/presentational attribute stripping entirely",
    )
    base_uri: Optional[str] = Field(
        default=None,
        description="Base URL for resolving relative href/src (None = leave as is)",
    )
    serializer: Optional[Callable[..., str]] = Field(
        default=None,
        description="Turns the article node into the result's content string",
    )

    # ------------------------------------------------------------------
    #  Metadata & parsing
    # ------------------------------------------------------------------
    disable_json_ld: bool = Field(
        default=False,
        description="Ignore JSON-LD structured data when extracting metadata",
    )
    parser: str = Field(
        default="html.parser",
        description="BeautifulSoup tree builder used for raw markup",
    )
    debug: bool = Field(
        default=False,
        description="Log scoring and cleaning decisions at DEBUG level",
    )

    @field_validator("classes_to_preserve", mode="before")
    @classmethod
    def _drop_blank_classes(cls, value):
        """Accept any iterable of strings; blank entries would preserve everything."""
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split()
        return tuple(v.strip() for v in value if v and v.strip())

    @field_validator("parser")
    @classmethod
    def _validate_parser(cls, value: str) -> str:
        if value not in SUPPORTED_PARSERS:
            raise ValueError(
                f"Unsupported parser '{value}', expected one of {sorted(SUPPORTED_PARSERS)}"
            )
        return value

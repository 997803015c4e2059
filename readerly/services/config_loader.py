# readerly/services/config_loader.py
"""
Loads named option profiles from ``configs/profiles.yaml`` and validates them
with Pydantic models.  The file can contain a top-level ``profiles`` key or
just the mapping of profile names → option dictionaries.

Public API:
* ``get_profile_options(name)`` – returns a ready ``ReadabilityOptions`` or
  raises ``ProfileNotFoundError``.
* ``list_available_profiles()`` – convenience helper for callers/tests.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field

from readerly.exceptions import ProfileNotFoundError
from readerly.models.options import ReadabilityOptions
from readerly.services.extraction.serializers import html_serializer, markdown_serializer


SERIALIZERS = {
    "html": html_serializer,
    "markdown": markdown_serializer,
}


# ----------------------------------------------------------------------
# Pydantic schemas
# ----------------------------------------------------------------------
class ProfileConfig(BaseModel):
    """One named profile: every ``ReadabilityOptions`` field except callables."""

    model_config = ConfigDict(extra="forbid")

    max_elems_to_parse: int = Field(default=0, ge=0)
    nb_top_candidates: int = Field(default=5, ge=1)
    char_threshold: int = Field(default=500, ge=0)
    classes_to_preserve: Tuple[str, ...] = Field(default_factory=tuple)
    keep_classes: bool = False
    base_uri: Optional[str] = None
    disable_json_ld: bool = False
    parser: str = "html.parser"
    debug: bool = False
    serializer: Literal["html", "markdown"] = "html"

    def to_options(self, **overrides) -> ReadabilityOptions:
        """Build the options snapshot; keyword overrides win over the file."""
        values = self.model_dump(exclude={"serializer"})
        values["serializer"] = SERIALIZERS[self.serializer]
        values.update(overrides)
        return ReadabilityOptions(**values)


class AllProfiles(BaseModel):
    """Top-level container – maps profile name → its config."""
    profiles: Dict[str, ProfileConfig]


# ----------------------------------------------------------------------
# Internal helpers & caching
# ----------------------------------------------------------------------
# Resolve the path relative to this file (one level up → package root)
CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "profiles.yaml"

# In-process cache; the YAML is read and validated once
_cached_all: Optional[AllProfiles] = None


def _load_yaml(path: Path = CONFIG_PATH) -> dict:
    """Read the YAML file and return the inner ``profiles`` mapping."""
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
        # If the file wraps everything under a top-level key called "profiles",
        # return that inner dict; otherwise return the whole dict.
        return raw.get("profiles", raw)


def load_profiles(path: Path = CONFIG_PATH) -> AllProfiles:
    """
    Parse a profiles file and validate it against ``AllProfiles``.  Any
    validation problem raises ``ValidationError`` naming the offending field.
    """
    raw = _load_yaml(path)
    # Empty profile bodies ("strict:") come back as None
    wrapped = {"profiles": {name: body or {} for name, body in raw.items()}}
    return AllProfiles(**wrapped)


def _load_all() -> AllProfiles:
    global _cached_all
    if _cached_all is None:
        _cached_all = load_profiles()
    return _cached_all


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def get_profile_config(profile_name: str) -> ProfileConfig:
    """
    Return the **validated** ``ProfileConfig`` for the requested profile.

    Raises
    ------
    ProfileNotFoundError
        If the profile name is not present in the YAML.
    ValidationError
        If the YAML exists but does not conform to the Pydantic schema.
    """
    all_cfg = _load_all()
    try:
        return all_cfg.profiles[profile_name]
    except KeyError as exc:
        raise ProfileNotFoundError(profile_name) from exc


def get_profile_options(profile_name: str, **overrides) -> ReadabilityOptions:
    """``ReadabilityOptions`` for a named profile, with optional overrides."""
    return get_profile_config(profile_name).to_options(**overrides)


def list_available_profiles() -> List[str]:
    """Convenient helper – returns all profile identifiers."""
    return list(_load_all().profiles.keys())

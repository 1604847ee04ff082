"""
Orchestration config patching.

Images of non-primary manifest entries are switched from a registry
reference to a local build of their clone:

    image: storefront-api:latest   ->   build: ./storefront-api

Matching is textual; every line containing ``image: <name>:`` is rewritten.
"""

from typing import List

from pydantic import BaseModel

from ..tools.sed import DEFAULT_DELIMITER, escape_pattern, escape_replacement
from .manifest import ManifestEntry


class Substitution(BaseModel):
    """One sed substitution, already escaped."""

    image: str
    image_dir: str
    pattern: str
    replacement: str
    delimiter: str = DEFAULT_DELIMITER

    @property
    def expected_line(self) -> str:
        """Text the config contains once the substitution applied."""
        return f"build: ./{self.image_dir}"


def build_substitution(
    entry: ManifestEntry, delimiter: str = DEFAULT_DELIMITER
) -> Substitution:
    """Substitution turning ``entry``'s image reference into a build path."""
    return Substitution(
        image=entry.image,
        image_dir=entry.clone_dir,
        pattern=f"image: {escape_pattern(entry.image, delimiter)}:.*",
        replacement=escape_replacement(f"build: ./{entry.clone_dir}", delimiter),
        delimiter=delimiter,
    )


def unpatched_images(config_text: str, substitutions: List[Substitution]) -> List[str]:
    """Images whose build line is missing from ``config_text``."""
    return [s.image for s in substitutions if s.expected_line not in config_text]

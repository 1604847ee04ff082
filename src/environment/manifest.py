"""
Repository manifest.

The application is split across several repositories, each producing one
container image. The first entry is the primary image: the orchestration
config keeps pulling it, while every other image is built from its clone.
"""

import re
from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator

# Docker image repository names: lowercase components separated by / . _ -
IMAGE_NAME_PATTERN = re.compile(r"^[a-z0-9]+(?:[._/-][a-z0-9]+)*$")


class ManifestEntry(BaseModel):
    """One source repository and the container image it provides."""

    model_config = ConfigDict(frozen=True)

    repository: str
    image: str

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        """Image names must be plain Docker repository names (no tag)."""
        if not IMAGE_NAME_PATTERN.match(v):
            raise ValueError(f"Invalid image name: {v}")
        return v

    @property
    def clone_dir(self) -> str:
        """Directory name ``git clone`` creates for the repository."""
        name = self.repository.rstrip("/").rsplit("/", 1)[-1]
        name = name.rsplit(":", 1)[-1]
        return name[: -len(".git")] if name.endswith(".git") else name


REPOSITORY_MANIFEST: Tuple[ManifestEntry, ...] = (
    ManifestEntry(
        repository="https://github.com/acme-labs/storefront-platform.git",
        image="storefront-platform",
    ),
    ManifestEntry(
        repository="https://github.com/acme-labs/storefront-api.git",
        image="storefront-api",
    ),
    ManifestEntry(
        repository="https://github.com/acme-labs/storefront-web.git",
        image="storefront-web",
    ),
    ManifestEntry(
        repository="https://github.com/acme-labs/storefront-worker.git",
        image="storefront-worker",
    ),
)


def source_built_entries(
    manifest: Tuple[ManifestEntry, ...] = REPOSITORY_MANIFEST,
) -> Tuple[ManifestEntry, ...]:
    """Entries whose image references are rewritten to local builds."""
    return manifest[1:]

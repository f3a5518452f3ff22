"""
wavtagger/session/metadata.py
Per-file annotation record
"""

from dataclasses import dataclass, field, replace
from typing import Optional


def split_tags(raw: str) -> list[str]:
    """Split comma separated input, trimming parts and dropping empty ones"""
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(frozen=True)
class FileMetadata:
    tags: tuple[str, ...] = field(default_factory=tuple)
    location: Optional[str] = None

    def with_location(self, text: str) -> 'FileMetadata':
        """Overwrite the location with trimmed text"""
        return replace(self, location=text.strip())

    def with_tags(self, raw: str) -> 'FileMetadata':
        """Append the tags parsed from raw, duplicates are kept"""
        return replace(self, tags=self.tags + tuple(split_tags(raw)))

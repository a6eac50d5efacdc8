"""Format-agnostic document metadata shared by every format processor.

Processors fill the common fields when their source format exposes them and
put everything else into ``custom_properties`` under a namespaced key
(``OcrConfidence``, ``PDFVersion``, ``HasHeader``, ...). Readers must not
assume a custom key exists; use the typed getters, which return a default
for missing or mistyped values instead of raising.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

PropertyValue = str | int | float | bool | list[str]


@dataclass
class DocumentMetadata:
    """Normalized metadata for one document."""

    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    page_count: int = 0
    custom_properties: dict[str, PropertyValue] = field(default_factory=dict)

    def set_property(self, key: str, value: PropertyValue | None) -> None:
        """Store a custom property, skipping empty values."""
        if value is None or value == "":
            return
        if isinstance(value, (list, tuple)):
            self.custom_properties[key] = [str(item) for item in value]
            return
        self.custom_properties[key] = value

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self.custom_properties.get(key)
        return value if isinstance(value, str) else default

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self.custom_properties.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value

    def get_float(self, key: str, default: float | None = None) -> float | None:
        value = self.custom_properties.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return float(value)

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        value = self.custom_properties.get(key)
        return value if isinstance(value, bool) else default

    def ensure_page_count(self) -> None:
        """Apply the page-count floor: an unknown page count is reported as 1."""
        if self.page_count < 1:
            self.page_count = 1

    def to_dict(self) -> dict[str, Any]:
        """Render a JSON-ready dict for the processing_results.metadata column."""
        return {
            "title": self.title,
            "author": self.author,
            "subject": self.subject,
            "creator": self.creator,
            "producer": self.producer,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
            "page_count": self.page_count,
            "custom_properties": {
                key: list(value) if isinstance(value, list) else value
                for key, value in self.custom_properties.items()
            },
        }

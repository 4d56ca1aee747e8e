"""Data model for voices and history items returned by the API."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from papla.base import PaplaResponseError

VOICE_CATEGORIES = ("premade", "cloned")


def _require(data: Any, key: str, kind: str) -> None:
    if not isinstance(data, dict):
        raise PaplaResponseError(f"Expected a {kind} object, got {type(data).__name__}")
    if key not in data:
        raise PaplaResponseError(f"{kind} object is missing {key}")


def _merge_raw(raw: Dict[str, Any], known: Dict[str, Any]) -> Dict[str, Any]:
    """Server payload with known fields overlaid; None fields are left as the server sent them."""
    result = dict(raw)
    result.update({key: value for key, value in known.items() if value is not None})
    return result


@dataclass
class Voice:
    """
    A synthesis identity, either premade or cloned from an audio sample.

    Voices live entirely on the server; instances are snapshots of the
    last response and are never cached. Only voice_id is required on the
    wire, everything else is taken as the server reports it.
    """

    voice_id: str
    name: Optional[str] = None
    category: Optional[str] = None
    """One of VOICE_CATEGORIES when the server reports it"""

    description: Optional[str] = None
    preview_url: Optional[str] = None
    labels: Optional[Dict[str, str]] = None

    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)
    """The decoded JSON object this voice was built from"""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Voice":
        """
        Build a Voice from an API response object.

        Raises:
            PaplaResponseError: If data is not an object or lacks voice_id
        """
        _require(data, "voice_id", "voice")
        return cls(
            voice_id=data["voice_id"],
            name=data.get("name"),
            category=data.get("category"),
            description=data.get("description"),
            preview_url=data.get("preview_url"),
            labels=data.get("labels"),
            raw=dict(data),
        )

    @property
    def is_cloned(self) -> bool:
        return self.category == "cloned"

    def to_dict(self) -> Dict[str, Any]:
        """The server's fields, including ones this model does not name."""
        return _merge_raw(self.raw, {
            "voice_id": self.voice_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "preview_url": self.preview_url,
            "labels": self.labels,
        })


@dataclass
class HistoryItem:
    """A server-side record of a past synthesis call."""

    history_item_id: str
    voice_id: Optional[str] = None
    text: Optional[str] = None
    voice_name: Optional[str] = None
    created_at: Optional[str] = None
    character_count: Optional[int] = None

    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        _require(data, "history_item_id", "history item")
        return cls(
            history_item_id=data["history_item_id"],
            voice_id=data.get("voice_id"),
            text=data.get("text"),
            voice_name=data.get("voice_name"),
            created_at=data.get("created_at"),
            character_count=data.get("character_count"),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _merge_raw(self.raw, {
            "history_item_id": self.history_item_id,
            "voice_id": self.voice_id,
            "voice_name": self.voice_name,
            "text": self.text,
            "created_at": self.created_at,
            "character_count": self.character_count,
        })

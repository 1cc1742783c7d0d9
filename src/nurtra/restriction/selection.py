"""Set of applications, categories and web domains to restrict."""

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RestrictionSelection:
    """The user's chosen restriction targets.

    Attributes:
        applications: Opaque application tokens.
        categories: Opaque category tokens.
        web_domains: Opaque web-domain tokens.
    """

    applications: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    web_domains: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.applications or self.categories or self.web_domains)

    def to_dict(self) -> dict[str, Any]:
        return {
            "applications": sorted(self.applications),
            "categories": sorted(self.categories),
            "webDomains": sorted(self.web_domains),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RestrictionSelection":
        """Create from a decoded selection.

        Raises:
            ValueError: If the data is not a selection.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        def tokens(key: str) -> frozenset[str]:
            value = data.get(key, [])
            if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
                raise ValueError(f"'{key}' must be a list of strings")
            return frozenset(value)

        return cls(
            applications=tokens("applications"),
            categories=tokens("categories"),
            web_domains=tokens("webDomains"),
        )

    def encode(self) -> str:
        """Encode as the JSON blob kept in local state."""
        return json.dumps(self.to_dict())

    @classmethod
    def decode(cls, blob: str) -> "RestrictionSelection":
        """Decode a JSON blob written by ``encode``.

        Raises:
            ValueError: If the blob is not valid JSON or not a selection.
        """
        return cls.from_dict(json.loads(blob))


__all__ = ["RestrictionSelection"]

"""Replacement versions for specific ids, e.g. ``fabric-api:0.90.0,sodium:0.5.3``."""

from __future__ import annotations

from typing import Dict, FrozenSet, Mapping, Optional

from .models import Version
from .parser import parse_version


class VersionOverrides:
    """Maps ids to the version that should be reported instead of the declared one."""

    def __init__(self, replacements: Optional[Mapping[str, Version]] = None):
        self._replacements: Dict[str, Version] = dict(replacements or {})

    @classmethod
    def from_string(cls, value: Optional[str]) -> VersionOverrides:
        """Parse comma separated ``id:version`` entries.

        Raises:
            ValueError: If an entry lacks the id or the version.
        """
        replacements: Dict[str, Version] = {}
        for entry in (value or "").split(","):
            entry = entry.strip()
            if not entry:
                continue

            pos = entry.find(":")
            if pos <= 0 or pos >= len(entry) - 1:
                raise ValueError(f"invalid version replacement entry: {entry}")

            replacements[entry[:pos]] = parse_version(entry[pos + 1:])
        return cls(replacements)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, object]]) -> VersionOverrides:
        """Build overrides from an ``{id: version}`` mapping such as a config section.

        Versions must be strings. YAML reads an unquoted ``1.20`` as the
        number ``1.2``, so numbers are rejected rather than converted.

        Raises:
            ValueError: If an id is empty or a version is missing or not a string.
        """
        replacements: Dict[str, Version] = {}
        for mod_id, raw in (mapping or {}).items():
            if not mod_id or raw is None or raw == "":
                raise ValueError(f"invalid version replacement entry: {mod_id}:{raw}")
            if not isinstance(raw, str):
                raise ValueError(
                    f"invalid version replacement entry: {mod_id}:{raw!r} is a {type(raw).__name__}, "
                    "quote the version"
                )
            replacements[str(mod_id)] = parse_version(str(raw))
        return cls(replacements)

    def merged_with(self, other: VersionOverrides) -> VersionOverrides:
        """Return overrides where entries of ``other`` take precedence."""
        return VersionOverrides({**self._replacements, **other._replacements})

    def apply(self, mod_id: str, version: Version) -> Version:
        return self._replacements.get(mod_id, version)

    @property
    def affected_mod_ids(self) -> FrozenSet[str]:
        return frozenset(self._replacements)

    def __len__(self) -> int:
        return len(self._replacements)

"""Mod manifest loading and dependency checking for the modcheck CLI.

A manifest is a YAML document listing the mods that are present together
with their dependency declarations::

    mods:
      - id: fabric-api
        version: 0.92.0
        depends:
          minecraft: ">=1.20 <1.21"
          fabricloader: [">=0.14", "0.13.x"]
        breaks:
          sodium: "<0.5"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import yaml

from constants import Constants
from modversion import (
    DependencyKind,
    ModDependency,
    Version,
    VersionOverrides,
    VersionParsingError,
    parse_version,
)

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a manifest cannot be read or has the wrong shape."""


@dataclass
class ModEntry:
    """A mod present in the manifest."""

    mod_id: str
    version: Version
    dependencies: List[ModDependency] = field(default_factory=list)


@dataclass
class Finding:
    """A dependency declaration that is not met."""

    mod_id: str
    dependency: ModDependency
    found_version: Optional[Version]
    severity: str  # "error" | "warning"
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mod": self.mod_id,
            "kind": self.dependency.kind.key,
            "target": self.dependency.mod_id,
            "requirements": list(self.dependency.matchers),
            "found": str(self.found_version) if self.found_version is not None else None,
            "severity": self.severity,
            "message": self.message,
        }


def _require_string(value: Any, what: str) -> str:
    # YAML turns an unquoted 1.20 into the float 1.2
    if not isinstance(value, str):
        raise ManifestError(
            f"{what} must be a string, got {type(value).__name__} {value!r}; quote the version"
        )
    return value


def _as_matchers(raw: Any, what: str) -> List[str]:
    if raw is None:
        return ["*"]
    if isinstance(raw, (list, tuple)):
        return [_require_string(item, what) for item in raw] or ["*"]
    return [_require_string(raw, what)]


def parse_mod_entry(raw: Dict[str, Any]) -> ModEntry:
    """Build a ModEntry from one manifest item.

    Invalid dependency declarations are logged and skipped; the rest of the
    mod is still loaded.

    Raises:
        ManifestError: If the id or version is missing, or a version or range
            is not a string.
    """
    if not isinstance(raw, dict):
        raise ManifestError(f"Mod entry must be a mapping, got {type(raw).__name__}")

    mod_id = raw.get("id")
    raw_version = raw.get("version")
    if not mod_id or raw_version is None or raw_version == "":
        raise ManifestError(f"Mod entry requires 'id' and 'version': {raw!r}")

    version = _require_string(raw_version, f"Version of mod '{mod_id}'")
    entry = ModEntry(mod_id=str(mod_id), version=parse_version(version))

    for key in Constants.DEPENDENCY_KEYS:
        declarations = raw.get(key) or {}
        if not isinstance(declarations, dict):
            raise ManifestError(f"'{key}' of mod '{mod_id}' must be a mapping of id to version ranges")

        kind = DependencyKind.parse(key)
        for target, requirements in declarations.items():
            matchers = _as_matchers(requirements, f"Range in {key} '{target}' of mod '{mod_id}'")
            try:
                entry.dependencies.append(ModDependency(kind, str(target), tuple(matchers)))
            except VersionParsingError as e:
                logger.warning("Skipping invalid %s declaration of '%s' on '%s': %s", key, mod_id, target, e)

    return entry


def load_manifest(path: str) -> List[ModEntry]:
    """Load all mod entries from a YAML manifest.

    Raises:
        ManifestError: If the file cannot be read or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read manifest {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Failed to parse manifest {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("mods"), list):
        raise ManifestError(f"Manifest {path} must contain a 'mods' list")

    mods = [parse_mod_entry(item) for item in data["mods"]]
    logger.debug("Loaded %d mods from %s", len(mods), path)
    return mods


def check_mods(mods: Iterable[ModEntry], overrides: Optional[VersionOverrides] = None) -> List[Finding]:
    """Check every dependency declaration against the versions present.

    Args:
        mods: Mods in the manifest.
        overrides: Replacement versions applied before checking.

    Returns:
        Findings for unmet declarations; hard kinds are errors, soft kinds warnings.
    """
    mods = list(mods)
    overrides = overrides or VersionOverrides()
    present = {mod.mod_id: overrides.apply(mod.mod_id, mod.version) for mod in mods}

    findings: List[Finding] = []
    for mod in mods:
        for dep in mod.dependencies:
            severity = "warning" if dep.kind.soft else "error"
            requirement = " || ".join(dep.matchers)
            found = present.get(dep.mod_id)

            if found is None:
                if dep.kind.positive:
                    findings.append(Finding(
                        mod.mod_id, dep, None, severity,
                        f"{mod.mod_id} {dep.kind.key} {dep.mod_id} {requirement}, which is missing",
                    ))
                continue

            if not dep.is_satisfied_by(found):
                if dep.kind.positive:
                    message = f"{mod.mod_id} {dep.kind.key} {dep.mod_id} {requirement}, but {found} is present"
                else:
                    message = f"{mod.mod_id} {dep.kind.key} {dep.mod_id} {requirement}, and {found} is present"
                findings.append(Finding(mod.mod_id, dep, found, severity, message))

    return findings

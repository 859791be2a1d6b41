"""
Package model shared by all manifest parsers.

A PackageIdentity names a package (case-insensitive id plus version);
a ResolvedPackage adds the folder the package was installed to.
"""

from dataclasses import dataclass
from functools import total_ordering
from pathlib import Path
from typing import Any

from modprops.core.version import PackageVersion


@total_ordering
@dataclass(frozen=True, eq=False)
class PackageIdentity:
    """Package id and version."""

    name: str
    version: PackageVersion

    @classmethod
    def create(cls, name: str, version: str) -> "PackageIdentity":
        """Build an identity from plain strings."""
        return cls(name=name, version=PackageVersion.parse(version))

    def _cmp_key(self) -> tuple:
        return (self.name.casefold(), self.version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageIdentity):
            return NotImplemented
        return self._cmp_key() == other._cmp_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageIdentity):
            return NotImplemented
        return self._cmp_key() < other._cmp_key()

    def __hash__(self) -> int:
        return hash(self._cmp_key())

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class ResolvedPackage:
    """A package occurrence from a manifest, resolved to its folder."""

    identity: PackageIdentity

    # Folder containing the package's build assets
    module_path: Path

    # Same folder relative to the packages root, '/'-separated
    folder: str

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def version(self) -> PackageVersion:
        return self.identity.version

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": str(self.version),
            "module_path": str(self.module_path),
            "folder": self.folder,
        }

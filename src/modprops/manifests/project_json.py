"""
project.json manifest parser.

Dependency map of package id to version:

    {
      "dependencies": {
        "Some.Package": "1.2.0",
        "Other.Package": { "version": "[2.0.0]", "type": "build" }
      }
    }

Packages are installed nested as <root>/<id>/<version>.
"""

from pathlib import Path
from typing import Any

from modprops.errors import ManifestParseError
from modprops.manifests.base import ManifestParser

# Characters that only appear in version ranges
_RANGE_CHARS = frozenset("[]()*,")


class ProjectJsonParser(ManifestParser):
    """Parser for project.json manifests."""

    name = "project-json"
    file_name = "project.json"

    def read_entries(self, manifest_path: Path) -> list[tuple[str, str]]:
        pairs = self.load_json_pairs(manifest_path)

        dependencies = self.section(pairs, "dependencies")
        if dependencies is None:
            return []
        if not self.is_object(dependencies):
            raise ManifestParseError(
                f"'dependencies' must be an object in {manifest_path}"
            )

        return [
            (name, self._dependency_version(name, value, manifest_path))
            for name, value in dependencies
        ]

    def package_folder(self, name: str, version: str) -> str:
        return f"{name}/{version}"

    def _dependency_version(self, name: str, value: Any, manifest_path: Path) -> str:
        """Extract the installed version from a dependency value."""
        # Object form: { "version": "...", ... }
        if self.is_object(value):
            value = self.section(value, "version")

        if not isinstance(value, str) or not value.strip():
            raise ManifestParseError(
                f"Dependency '{name}' has no version in {manifest_path}"
            )

        version = value.strip()

        # Exact-version range "[1.0.0]"
        if version.startswith("[") and version.endswith("]"):
            version = version[1:-1].strip()

        if any(ch in _RANGE_CHARS for ch in version):
            raise ManifestParseError(
                f"Dependency '{name}' uses version range '{value}' in {manifest_path}; "
                "only exact versions map to an installed folder"
            )

        return version

"""
Abstract base class for package manifest parsers.

Provides common functionality shared across all manifest formats.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from modprops.core.package import PackageIdentity, ResolvedPackage
from modprops.errors import ManifestNotFoundError, ManifestParseError

logger = logging.getLogger(__name__)


class JsonPairs(list):
    """Key/value pairs of one JSON object, in document order."""


class ManifestParser(ABC):
    """Abstract base class for manifest parsers."""

    # Format identifier (e.g., 'packages-config')
    name: str = "base"

    # Manifest file name this parser reads (e.g., 'packages.config')
    file_name: str = ""

    @abstractmethod
    def read_entries(self, manifest_path: Path) -> list[tuple[str, str]]:
        """
        Read (id, version) pairs from the manifest in declaration order.

        Args:
            manifest_path: Path to an existing manifest file.

        Returns:
            List of (package id, version text) tuples, duplicates kept.

        Raises:
            ManifestParseError: If the manifest is malformed.
        """
        pass

    @abstractmethod
    def package_folder(self, name: str, version: str) -> str:
        """
        Folder of an installed package, relative to the packages root.

        Args:
            name: Package id as written in the manifest.
            version: Version text as written in the manifest.

        Returns:
            '/'-separated relative folder.
        """
        pass

    def get_packages(
        self, packages_root: Path | str, manifest_path: Path | str
    ) -> list[ResolvedPackage]:
        """
        Resolve every package listed in a manifest.

        Args:
            packages_root: Directory packages are installed under.
            manifest_path: Path to the manifest file.

        Returns:
            Resolved packages in manifest declaration order.

        Raises:
            ManifestNotFoundError: If the manifest does not exist.
            ManifestParseError: If the manifest is malformed.
        """
        manifest_path = Path(manifest_path)
        if not manifest_path.is_file():
            raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")

        packages_root = Path(packages_root)
        packages = []
        for name, version in self.read_entries(manifest_path):
            try:
                identity = PackageIdentity.create(name, version)
            except ValueError as e:
                raise ManifestParseError(
                    f"Invalid version for package '{name}' in {manifest_path}: {e}"
                ) from e

            folder = self.package_folder(name, str(identity.version))
            packages.append(
                ResolvedPackage(
                    identity=identity,
                    module_path=packages_root.joinpath(*folder.split("/")),
                    folder=folder,
                )
            )

        logger.debug(
            "Read %d package(s) from %s (%s)", len(packages), manifest_path, self.name
        )
        return packages

    # -------------------------------------------------------------------------
    # Common utility methods shared by JSON-based formats
    # -------------------------------------------------------------------------

    def load_json_pairs(self, manifest_path: Path) -> list[tuple[str, Any]]:
        """
        Load a JSON manifest keeping every object as a list of key/value pairs.

        Duplicate keys survive, which plain dict loading would collapse.

        Raises:
            ManifestParseError: If the file is not a JSON object.
        """
        try:
            content = manifest_path.read_text(encoding="utf-8-sig")
            data = json.loads(content, object_pairs_hook=JsonPairs)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestParseError(f"Malformed JSON in {manifest_path}: {e}") from e

        if not self.is_object(data):
            raise ManifestParseError(
                f"Expected a JSON object at the top of {manifest_path}"
            )
        return data

    @staticmethod
    def is_object(value: Any) -> bool:
        """True if value is a JSON object loaded by load_json_pairs()."""
        return isinstance(value, JsonPairs)

    @staticmethod
    def section(pairs: list[tuple[str, Any]], key: str) -> Any:
        """Return the last value for key in a pair list, or None."""
        value = None
        for k, v in pairs:
            if k == key:
                value = v
        return value

    def describe(self) -> str:
        """Describe the manifest this parser expects."""
        return f"{self.name}: {self.file_name}"

"""
packages.config manifest parser.

Flat XML list of installed packages:

    <packages>
      <package id="Some.Package" version="1.2.0" />
    </packages>

Packages are installed flat as <root>/<id>.<version>.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from modprops.errors import ManifestParseError
from modprops.manifests.base import ManifestParser


class PackagesConfigParser(ManifestParser):
    """Parser for packages.config manifests."""

    name = "packages-config"
    file_name = "packages.config"

    def read_entries(self, manifest_path: Path) -> list[tuple[str, str]]:
        try:
            root = ET.parse(manifest_path).getroot()
        except ET.ParseError as e:
            raise ManifestParseError(f"Malformed XML in {manifest_path}: {e}") from e

        if root.tag != "packages":
            raise ManifestParseError(
                f"Expected <packages> root element in {manifest_path}, got <{root.tag}>"
            )

        entries = []
        for element in root.findall("package"):
            package_id = element.get("id")
            version = element.get("version")
            if not package_id or not version:
                raise ManifestParseError(
                    f"<package> element missing 'id' or 'version' in {manifest_path}"
                )
            entries.append((package_id, version))

        return entries

    def package_folder(self, name: str, version: str) -> str:
        return f"{name}.{version}"

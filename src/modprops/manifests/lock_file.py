"""
project.lock.json manifest parser.

Fully resolved lock file. Each library key is "<id>/<version>":

    {
      "version": 2,
      "libraries": {
        "Some.Package/1.2.0": { "type": "package", "sha512": "..." },
        "MyProject/1.0.0": { "type": "project" }
      }
    }

Only "package" libraries are installed; they live at <root>/<id>/<version>.
"""

from pathlib import Path

from modprops.errors import ManifestParseError
from modprops.manifests.base import ManifestParser


class LockFileParser(ManifestParser):
    """Parser for project.lock.json manifests."""

    name = "lock-file"
    file_name = "project.lock.json"

    def read_entries(self, manifest_path: Path) -> list[tuple[str, str]]:
        pairs = self.load_json_pairs(manifest_path)

        libraries = self.section(pairs, "libraries")
        if not self.is_object(libraries):
            raise ManifestParseError(
                f"Lock file {manifest_path} has no 'libraries' object"
            )

        entries = []
        for key, value in libraries:
            library_type = None
            if self.is_object(value):
                library_type = self.section(value, "type")
            if library_type is not None and library_type != "package":
                continue

            name, sep, version = key.partition("/")
            if not sep or not name or not version:
                raise ManifestParseError(
                    f"Library key '{key}' is not '<id>/<version>' in {manifest_path}"
                )
            entries.append((name, version))

        return entries

    def package_folder(self, name: str, version: str) -> str:
        return f"{name}/{version}"

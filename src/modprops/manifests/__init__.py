"""
Package manifest parsers for modprops.

Each manifest format (packages.config, project.json, project.lock.json)
has its own parser producing the same ResolvedPackage sequence.

The MANIFEST_REGISTRY provides lookup of parsers by format name, and
find_manifest() picks the format from whichever manifest file is present.
"""

from pathlib import Path
from typing import Optional, Type

from modprops.manifests.base import ManifestParser
from modprops.manifests.packages_config import PackagesConfigParser
from modprops.manifests.project_json import ProjectJsonParser
from modprops.manifests.lock_file import LockFileParser


# Registry mapping format names to their parser classes.
# To add a new format:
#   1. Create manifests/newformat.py with a class extending ManifestParser
#   2. Import it here
#   3. Add an entry to MANIFEST_REGISTRY (and MANIFEST_PREFERENCE)
MANIFEST_REGISTRY: dict[str, Type[ManifestParser]] = {
    "packages-config": PackagesConfigParser,
    "project-json": ProjectJsonParser,
    "lock-file": LockFileParser,
}

# Most resolved format first; used when a directory holds several manifests
MANIFEST_PREFERENCE: tuple[str, ...] = ("lock-file", "project-json", "packages-config")


def get_parser(name: str) -> ManifestParser:
    """
    Get a parser instance by format name.

    Args:
        name: Format identifier (e.g., 'packages-config').

    Returns:
        ManifestParser instance.

    Raises:
        ValueError: If format name is not recognized.
    """
    if name not in MANIFEST_REGISTRY:
        available = ", ".join(list_formats())
        raise ValueError(f"Unknown manifest format: '{name}'. Available: {available}")
    return MANIFEST_REGISTRY[name]()


def list_formats() -> list[str]:
    """
    List all available manifest format names.

    Returns:
        Sorted list of format identifiers.
    """
    return sorted(MANIFEST_REGISTRY.keys())


def parser_for_manifest(manifest_path: Path | str) -> ManifestParser:
    """
    Get the parser for a manifest based on its file name.

    Args:
        manifest_path: Path to a manifest file (need not exist).

    Returns:
        ManifestParser instance.

    Raises:
        ValueError: If the file name matches no known format.
    """
    file_name = Path(manifest_path).name.lower()
    for name in MANIFEST_PREFERENCE:
        if MANIFEST_REGISTRY[name].file_name == file_name:
            return MANIFEST_REGISTRY[name]()

    known = ", ".join(MANIFEST_REGISTRY[n].file_name for n in MANIFEST_PREFERENCE)
    raise ValueError(
        f"Cannot determine manifest format of '{Path(manifest_path).name}'. "
        f"Expected one of: {known}"
    )


def find_manifest(directory: Path | str) -> Optional[Path]:
    """
    Find the manifest in a directory, preferring the most resolved format.

    Args:
        directory: Project directory to search.

    Returns:
        Path to the manifest or None if no known manifest is present.
    """
    directory = Path(directory)
    for name in MANIFEST_PREFERENCE:
        candidate = directory / MANIFEST_REGISTRY[name].file_name
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "ManifestParser",
    "PackagesConfigParser",
    "ProjectJsonParser",
    "LockFileParser",
    "MANIFEST_REGISTRY",
    "MANIFEST_PREFERENCE",
    "get_parser",
    "list_formats",
    "parser_for_manifest",
    "find_manifest",
]

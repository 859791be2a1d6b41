"""
Reader for per-package module descriptors.

A package may ship a module.config declaring the extension slot files it
wants generated:

    <configuration>
      <extensionImports>
        <add name="before.MyProduct.targets" />
      </extensionImports>
    </configuration>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from modprops.core.package import ResolvedPackage
from modprops.errors import ModuleDescriptorParseError

logger = logging.getLogger(__name__)

# Location of the descriptor inside a package folder
DEFAULT_MODULE_CONFIG_PATH = "CBT/Module/module.config"


class ModuleExtensionReader:
    """Read extension names requested by packages."""

    def __init__(self, relative_path: str = DEFAULT_MODULE_CONFIG_PATH):
        """
        Initialize reader.

        Args:
            relative_path: '/'-separated descriptor path inside a package folder.
        """
        self.relative_path = relative_path

    def descriptor_path(self, package: ResolvedPackage) -> Path:
        """Path of the module descriptor for a package."""
        return package.module_path.joinpath(*self.relative_path.split("/"))

    def read(self, package: ResolvedPackage) -> list[str]:
        """
        Read the extension names a package requests.

        Args:
            package: Resolved package to inspect.

        Returns:
            Extension names in declaration order, duplicates removed.
            Empty if the package has no module descriptor.

        Raises:
            ModuleDescriptorParseError: If the descriptor is malformed.
        """
        path = self.descriptor_path(package)
        if not path.is_file():
            return []

        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise ModuleDescriptorParseError(
                f"Malformed module descriptor for {package.identity}: {path}: {e}"
            ) from e

        if root.tag != "configuration":
            raise ModuleDescriptorParseError(
                f"Expected <configuration> root element in {path}, got <{root.tag}>"
            )

        names: dict[str, None] = {}
        for imports in root.findall("extensionImports"):
            for element in imports.findall("add"):
                name = (element.get("name") or "").strip()
                if not name:
                    raise ModuleDescriptorParseError(
                        f"<add> element without a 'name' attribute in {path}"
                    )
                # Slot files are written directly under the extensions directory
                if "/" in name or "\\" in name or name in (".", ".."):
                    raise ModuleDescriptorParseError(
                        f"Extension name '{name}' in {path} is not a plain file name"
                    )
                names.setdefault(name, None)

        logger.debug(
            "%s requests %d extension(s)", package.identity, len(names)
        )
        return list(names)

    def read_all(self, packages: Iterable[ResolvedPackage]) -> list[str]:
        """
        Union of extension names requested by any package.

        Returns:
            Distinct names sorted ordinally, so output order is stable.
        """
        extensions: set[str] = set()
        for package in packages:
            extensions.update(self.read(package))
        return sorted(extensions)

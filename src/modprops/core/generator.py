"""
Module property generator for modprops.

Turns the packages listed in a manifest into MSBuild descriptors:

- a root descriptor with one path property per package name and an
  existence-guarded import of every package's module file, and
- one extension slot descriptor per extension name any package requests,
  importing that file from every package.

Typical data flow:

    manifest -> ManifestParser -> [ResolvedPackage] -> ModuleExtensionReader
             -> ModulePropertyGenerator.build() -> DescriptorWriter -> files
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from modprops.core.module_config import (
    DEFAULT_MODULE_CONFIG_PATH,
    ModuleExtensionReader,
)
from modprops.core.package import ResolvedPackage
from modprops.core.writer import (
    BuildDescriptor,
    DescriptorWriter,
    GeneratedImport,
    GeneratedProperty,
)
from modprops.errors import ModPropsError, ValidationError
from modprops.manifests import ManifestParser, parser_for_manifest

logger = logging.getLogger(__name__)

# Sentinel property registering the generated file with MSBuild's
# up-to-date checks
ALL_PROJECTS_PROPERTY = "MSBuildAllProjects"
ALL_PROJECTS_VALUE = "$(MSBuildAllProjects);$(MSBuildThisFileFullPath)"

_PROPERTY_PREFIX_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")


@dataclass
class GeneratorConfig:
    """Naming conventions used by the generator."""

    # Prefix of each package property name (CBTModule_Some_Package)
    property_name_prefix: str = "CBTModule_"

    # Prefix of each package property value, joined with the package folder
    property_value_prefix: str = "$(NuGetPackagesPath)\\"

    # Module file imported from each package by the root descriptor
    import_relative_path: str = "CBT\\Module\\$(MSBuildThisFile)"

    # Folder inside each package holding its extension slot contributions
    # (empty: the package folder itself)
    extension_relative_dir: str = ""

    # Module descriptor inside each package folder ('/'-separated)
    module_config_path: str = DEFAULT_MODULE_CONFIG_PATH

    # Use folders relative to the packages root instead of absolute paths
    relative_module_paths: bool = True

    def validate(self) -> list[str]:
        """
        Validate the configuration.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors = []

        if not _PROPERTY_PREFIX_RE.match(self.property_name_prefix):
            errors.append(
                f"Property name prefix '{self.property_name_prefix}' is not a valid "
                "MSBuild property name. Must start with letter/underscore and "
                "contain only alphanumeric characters, underscores and dashes."
            )

        if not self.import_relative_path.strip():
            errors.append("Import relative path must not be empty")
        elif self.import_relative_path.startswith(("\\", "/")):
            errors.append(
                f"Import relative path '{self.import_relative_path}' must be relative"
            )

        if self.extension_relative_dir.startswith(("\\", "/")):
            errors.append(
                f"Extension relative dir '{self.extension_relative_dir}' must be relative"
            )

        if not self.module_config_path.strip():
            errors.append("Module config path must not be empty")
        elif Path(self.module_config_path).is_absolute():
            errors.append(
                f"Module config path '{self.module_config_path}' must be relative"
            )

        return errors


@dataclass
class GenerationResult:
    """Descriptors computed for one generation run."""

    packages: list[ResolvedPackage]

    # Root descriptor: properties plus the import chain
    root: BuildDescriptor

    # Extension slot descriptors keyed by extension name, in write order
    extensions: dict[str, BuildDescriptor] = field(default_factory=dict)


class ModulePropertyGenerator:
    """Generate module property and extension slot descriptors."""

    def __init__(
        self,
        packages_root: Path | str,
        manifest_path: Path | str,
        config: Optional[GeneratorConfig] = None,
        parser: Optional[ManifestParser] = None,
    ):
        """
        Initialize generator.

        Args:
            packages_root: Directory packages are installed under.
            manifest_path: Path to packages.config, project.json or
                           project.lock.json.
            config: Naming conventions. Defaults to GeneratorConfig().
            parser: Manifest parser. If None, chosen from the manifest file name.
        """
        self.packages_root = Path(packages_root)
        self.manifest_path = Path(manifest_path)
        self.config = config if config is not None else GeneratorConfig()
        self._parser = parser
        self.writer = DescriptorWriter()

    @property
    def parser(self) -> ManifestParser:
        """Manifest parser, resolved from the manifest file name on first use."""
        if self._parser is None:
            try:
                self._parser = parser_for_manifest(self.manifest_path)
            except ValueError as e:
                raise ValidationError(str(e)) from e
        return self._parser

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def property_name(self, package: ResolvedPackage) -> str:
        """Property name for a package; dots are not allowed in MSBuild names."""
        return self.config.property_name_prefix + package.name.replace(".", "_")

    def property_value(self, package: ResolvedPackage) -> str:
        """Property value (path of the package folder) for one occurrence."""
        if self.config.relative_module_paths:
            location = package.folder.replace("/", "\\")
        else:
            location = str(package.module_path)
        return self.config.property_value_prefix + location

    @staticmethod
    def guarded_import(project: str) -> GeneratedImport:
        """Import guarded by the existence of its literal, unexpanded path."""
        return GeneratedImport(project=project, condition=f" Exists('{project}') ")

    # -------------------------------------------------------------------------
    # Descriptor construction
    # -------------------------------------------------------------------------

    def build_properties(
        self, packages: Sequence[ResolvedPackage]
    ) -> list[GeneratedProperty]:
        """
        Build the root descriptor properties.

        The last occurrence of a package name wins. Each name keeps the
        position of its first occurrence.
        """
        latest: dict[str, ResolvedPackage] = {}
        for package in reversed(packages):
            latest.setdefault(package.name.casefold(), package)

        properties = [GeneratedProperty(ALL_PROJECTS_PROPERTY, ALL_PROJECTS_VALUE)]
        emitted: set[str] = set()
        for package in packages:
            key = package.name.casefold()
            if key in emitted:
                continue
            emitted.add(key)
            chosen = latest[key]
            properties.append(
                GeneratedProperty(self.property_name(chosen), self.property_value(chosen))
            )

        return properties

    def build_imports(
        self,
        packages: Sequence[ResolvedPackage],
        imports_before: Sequence[str] = (),
        imports_after: Sequence[str] = (),
    ) -> list[GeneratedImport]:
        """Build the import chain: before, one per package occurrence, after."""
        projects = list(imports_before)
        projects.extend(
            f"{self.property_value(package)}\\{self.config.import_relative_path}"
            for package in packages
        )
        projects.extend(imports_after)
        return [self.guarded_import(project) for project in projects]

    def build_extension(
        self, packages: Sequence[ResolvedPackage], extension_name: str
    ) -> BuildDescriptor:
        """
        Build an extension slot: every package may contribute the file.

        A package contributes by shipping
        <package folder>\\<extension_relative_dir>\\<extension name>; the
        import is skipped by its Exists() guard when the file is absent.
        """
        relative_dir = self.config.extension_relative_dir.strip("\\/")
        if relative_dir:
            relative_dir = relative_dir.replace("/", "\\") + "\\"
        return BuildDescriptor(
            imports=[
                self.guarded_import(
                    f"{self.property_value(package)}\\{relative_dir}{extension_name}"
                )
                for package in packages
            ]
        )

    def build(
        self,
        imports_before: Sequence[str] = (),
        imports_after: Sequence[str] = (),
    ) -> GenerationResult:
        """
        Compute all descriptors without writing anything.

        Args:
            imports_before: Import paths placed before the package imports.
            imports_after: Import paths placed after the package imports.

        Returns:
            GenerationResult with the root and extension slot descriptors.

        Raises:
            ValidationError: If the configuration is invalid.
            ManifestNotFoundError: If the manifest does not exist.
            ManifestParseError: If the manifest is malformed.
            ModuleDescriptorParseError: If any module.config is malformed.
        """
        errors = self.config.validate()
        if errors:
            raise ValidationError(
                "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        packages = self.parser.get_packages(self.packages_root, self.manifest_path)
        logger.info(
            "Resolved %d package(s) from %s", len(packages), self.manifest_path
        )

        reader = ModuleExtensionReader(self.config.module_config_path)
        extension_names = reader.read_all(packages)

        root = BuildDescriptor(
            properties=self.build_properties(packages),
            imports=self.build_imports(packages, imports_before, imports_after),
        )
        extensions = {
            name: self.build_extension(packages, name) for name in extension_names
        }

        return GenerationResult(packages=packages, root=root, extensions=extensions)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def write(
        self,
        result: GenerationResult,
        output_path: Path | str,
        extensions_path: Path | str,
    ) -> list[Path]:
        """
        Write the root descriptor, then each extension slot in name order.

        Files written before a failure are left in place.

        Raises:
            OutputWriteError: If a file cannot be written.
        """
        extensions_path = Path(extensions_path)
        written = [self.writer.write(result.root, output_path)]
        for name, descriptor in result.extensions.items():
            written.append(self.writer.write(descriptor, extensions_path / name))

        logger.info(
            "Wrote %s and %d extension slot(s) under %s",
            output_path,
            len(result.extensions),
            extensions_path,
        )
        return written

    def generate(
        self,
        output_path: Path | str,
        extensions_path: Path | str,
        imports_before: Sequence[str] = (),
        imports_after: Sequence[str] = (),
    ) -> bool:
        """
        Generate and write all descriptors.

        Args:
            output_path: Root descriptor file to write.
            extensions_path: Directory for extension slot files.
            imports_before: Import paths placed before the package imports.
            imports_after: Import paths placed after the package imports.

        Returns:
            True on success, False if any error aborted the run.
        """
        try:
            result = self.build(imports_before, imports_after)
            self.write(result, output_path, extensions_path)
        except (ModPropsError, OSError) as e:
            logger.error("Module property generation failed: %s", e)
            return False
        return True

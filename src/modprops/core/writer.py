"""
Descriptor writer for modprops.

Renders property/import descriptors as MSBuild project XML and writes
them to disk. Rendering is deterministic: identical descriptors always
produce identical bytes.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from xml.sax.saxutils import escape

from modprops.errors import OutputWriteError

logger = logging.getLogger(__name__)

MSBUILD_NAMESPACE = "http://schemas.microsoft.com/developer/msbuild/2003"


@dataclass(frozen=True)
class GeneratedProperty:
    """A <PropertyGroup> entry."""

    name: str
    value: str


@dataclass(frozen=True)
class GeneratedImport:
    """A conditional <Import> entry."""

    project: str
    condition: str


@dataclass
class BuildDescriptor:
    """In-memory contents of one generated descriptor file."""

    properties: list[GeneratedProperty] = field(default_factory=list)
    imports: list[GeneratedImport] = field(default_factory=list)


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


class DescriptorWriter:
    """Render and write BuildDescriptors."""

    def __init__(self, tools_version: str = "4.0"):
        self.tools_version = tools_version

    def render(self, descriptor: BuildDescriptor) -> str:
        """
        Render a descriptor as MSBuild project XML.

        Args:
            descriptor: Properties and imports to render.

        Returns:
            Complete file content, '\\n' line endings with a trailing newline.
        """
        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<Project ToolsVersion="{_attr(self.tools_version)}" '
            f'xmlns="{MSBUILD_NAMESPACE}">',
        ]

        if descriptor.properties:
            lines.append("  <PropertyGroup>")
            for prop in descriptor.properties:
                lines.append(f"    <{prop.name}>{escape(prop.value)}</{prop.name}>")
            lines.append("  </PropertyGroup>")

        for imp in descriptor.imports:
            lines.append(
                f'  <Import Project="{_attr(imp.project)}" '
                f'Condition="{_attr(imp.condition)}" />'
            )

        lines.append("</Project>")
        return "\n".join(lines) + "\n"

    def write(self, descriptor: BuildDescriptor, output_path: Path | str) -> Path:
        """
        Render a descriptor and write it, replacing any existing file.

        Args:
            descriptor: Descriptor to write.
            output_path: Destination file; parent directories are created.

        Returns:
            The path written.

        Raises:
            OutputWriteError: If the file cannot be written.
        """
        output_path = Path(output_path)
        content = self.render(descriptor)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            # Bytes, so line endings are identical on every platform
            output_path.write_bytes(content.encode("utf-8"))
        except OSError as e:
            raise OutputWriteError(f"Cannot write {output_path}: {e}") from e

        logger.debug("Wrote %s", output_path)
        return output_path

"""Pytest configuration and fixtures for modprops tests."""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

MSBUILD_NS = "{http://schemas.microsoft.com/developer/msbuild/2003}"

# (id, version) pairs in manifest order; package1 is listed twice
PACKAGES = [
    ("package1", "1.0.0"),
    ("package1", "2.0.0"),
    ("package2.thing", "2.5.1"),
    ("package3.a.b.c.d.e.f", "10.10.9999.9999-beta99"),
]

# One module requests 200 extensions so reading scales past small lists
MODULE_EXTENSIONS = {
    "package1": [
        name
        for i in range(100)
        for name in (f"before.package{i}.targets", f"after.package{i}.targets")
    ],
    "package2.thing": ["before.package2.targets"],
    "package3.a.b.c.d.e.f": ["before.somethingelse.targets"],
}


def write_packages_config(path: Path, packages: list[tuple[str, str]]) -> Path:
    """Write a packages.config listing the given packages."""
    lines = ['<?xml version="1.0" encoding="utf-8"?>', "<packages>"]
    for name, version in packages:
        lines.append(f'  <package id="{name}" version="{version}" />')
    lines.append("</packages>")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_project_json(path: Path, packages: list[tuple[str, str]]) -> Path:
    """Write a project.json; built by hand so duplicate ids survive."""
    entries = ",\n    ".join(
        f"{json.dumps(name)}: {json.dumps(version)}" for name, version in packages
    )
    content = (
        "{\n"
        '  "dependencies": {\n'
        f"    {entries}\n"
        "  },\n"
        '  "frameworks": {\n'
        '    "net45": {}\n'
        "  }\n"
        "}\n"
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_lock_file(path: Path, packages: list[tuple[str, str]]) -> Path:
    """Write a project.lock.json with one package library per entry."""
    libraries = {
        f"{name}/{version}": {"type": "package", "files": [f"{name}.nuspec"]}
        for name, version in packages
    }
    data = {
        "locked": False,
        "version": 2,
        "targets": {".NETFramework,Version=v4.5": {}},
        "libraries": libraries,
        "projectFileDependencyGroups": {"": []},
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_module_config(package_dir: Path, extensions: list[str]) -> Path:
    """Write CBT/Module/module.config declaring the given extensions."""
    path = package_dir / "CBT" / "Module" / "module.config"
    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        "<!-- This file was auto-generated by unit tests -->",
        "<configuration>",
        "  <extensionImports>",
    ]
    lines.extend(f'    <add name="{name}" />' for name in extensions)
    lines.extend(["  </extensionImports>", "</configuration>"])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def read_descriptor(path: Path) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """Parse a generated descriptor into (properties, imports) pairs."""
    root = ET.parse(path).getroot()
    properties = [
        (element.tag.replace(MSBUILD_NS, ""), element.text or "")
        for group in root.findall(f"{MSBUILD_NS}PropertyGroup")
        for element in group
    ]
    imports = [
        (element.get("Project"), element.get("Condition"))
        for element in root.findall(f"{MSBUILD_NS}Import")
    ]
    return properties, imports


@pytest.fixture
def packages_root(tmp_path: Path) -> Path:
    """Directory packages are installed under."""
    root = tmp_path / "packages"
    root.mkdir()
    return root


@pytest.fixture
def packages_config(tmp_path: Path) -> Path:
    """packages.config listing PACKAGES."""
    return write_packages_config(tmp_path / "packages.config", PACKAGES)


@pytest.fixture
def project_json(tmp_path: Path) -> Path:
    """project.json listing PACKAGES."""
    return write_project_json(tmp_path / "project.json", PACKAGES)


@pytest.fixture
def lock_file(tmp_path: Path) -> Path:
    """project.lock.json listing PACKAGES."""
    return write_lock_file(tmp_path / "project.lock.json", PACKAGES)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory for generated descriptors."""
    return tmp_path / "obj"

"""
Core modules for modprops.
"""

from modprops.core.version import PackageVersion
from modprops.core.package import PackageIdentity, ResolvedPackage
from modprops.core.module_config import ModuleExtensionReader
from modprops.core.writer import BuildDescriptor, DescriptorWriter

__all__ = [
    "PackageVersion",
    "PackageIdentity",
    "ResolvedPackage",
    "ModuleExtensionReader",
    "BuildDescriptor",
    "DescriptorWriter",
]

"""
modprops - Generate MSBuild module properties from installed NuGet packages.

This package provides tools to:
- Parse packages.config, project.json and project.lock.json manifests
- Resolve every listed package to its installed folder
- Generate a root descriptor with one property per package and an
  existence-guarded import of each package's module file
- Generate extension slot descriptors that packages can contribute to
"""

from modprops.core.generator import GeneratorConfig, ModulePropertyGenerator
from modprops.core.package import PackageIdentity, ResolvedPackage
from modprops.errors import ModPropsError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "GeneratorConfig",
    "ModulePropertyGenerator",
    "PackageIdentity",
    "ResolvedPackage",
    "ModPropsError",
]

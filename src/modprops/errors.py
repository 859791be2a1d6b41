"""
Custom exceptions for modprops.
"""


class ModPropsError(Exception):
    """Base exception for modprops errors."""

    pass


class ManifestNotFoundError(ModPropsError):
    """Package manifest does not exist."""

    pass


class ManifestParseError(ModPropsError):
    """Package manifest content is malformed."""

    pass


class ModuleDescriptorParseError(ModPropsError):
    """Per-package module.config content is malformed."""

    pass


class OutputWriteError(ModPropsError):
    """Error writing a generated descriptor file."""

    pass


class ValidationError(ModPropsError):
    """Error validating configuration or inputs."""

    pass

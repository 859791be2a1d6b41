"""
Package version values.

NuGet-style versions: one to four numeric parts, an optional pre-release
label and optional build metadata, e.g. ``1.0``, ``2.5.1``,
``10.10.9999.9999-beta99``, ``1.0.0-rc.1+sha.5114f85``.

The original text is kept verbatim because package folders on disk are
named after it.
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering

VERSION_PATTERN = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@total_ordering
@dataclass(frozen=True, eq=False)
class PackageVersion:
    """A parsed package version."""

    # Numeric parts padded to four (major, minor, patch, revision)
    numbers: tuple[int, int, int, int]

    # Pre-release identifiers ("beta", "1" for "-beta.1")
    prerelease: tuple[str, ...] = ()

    # Build metadata, ignored for ordering
    metadata: tuple[str, ...] = ()

    # Text the version was parsed from
    text: str = field(default="")

    @classmethod
    def parse(cls, raw: str) -> "PackageVersion":
        """
        Parse a version string.

        Raises:
            ValueError: If the text is not a valid version.
        """
        if not isinstance(raw, str):
            raise ValueError(f"Version must be a string, got {type(raw).__name__}")

        text = raw.strip()
        match = VERSION_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid version: {raw!r}")

        numbers = [int(part) for part in match.group("numbers").split(".")]
        while len(numbers) < 4:
            numbers.append(0)

        prerelease = match.group("prerelease")
        metadata = match.group("metadata")

        return cls(
            numbers=(numbers[0], numbers[1], numbers[2], numbers[3]),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            metadata=tuple(metadata.split(".")) if metadata else (),
            text=text,
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _prerelease_key(self) -> tuple:
        # Numeric identifiers sort before alphanumeric ones
        parts: list[tuple[int, int | str]] = []
        for ident in self.prerelease:
            if ident.isdigit():
                parts.append((0, int(ident)))
            else:
                parts.append((1, ident.lower()))
        return tuple(parts)

    def _cmp_key(self) -> tuple:
        # A release sorts after every pre-release of the same numbers
        release_flag = 0 if self.prerelease else 1
        return (self.numbers, release_flag, self._prerelease_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._cmp_key() == other._cmp_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._cmp_key() < other._cmp_key()

    def __hash__(self) -> int:
        return hash(self._cmp_key())

    def __str__(self) -> str:
        if self.text:
            return self.text
        base = ".".join(str(n) for n in self.numbers)
        prerelease = f"-{'.'.join(self.prerelease)}" if self.prerelease else ""
        metadata = f"+{'.'.join(self.metadata)}" if self.metadata else ""
        return f"{base}{prerelease}{metadata}"

    def __repr__(self) -> str:
        return f"PackageVersion({self.text!r})"

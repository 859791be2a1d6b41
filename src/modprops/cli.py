"""
Command-line interface for modprops.

Usage:
    modprops generate <manifest> -o <output> [-e <extensions-dir>] [-r <packages-root>]
    modprops detect <manifest> [-r <packages-root>] [--json]
    modprops list
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from modprops import __version__
from modprops.core.generator import GeneratorConfig, ModulePropertyGenerator
from modprops.core.module_config import ModuleExtensionReader
from modprops.errors import ModPropsError
from modprops.manifests import (
    ManifestParser,
    find_manifest,
    get_parser,
    list_formats,
    parser_for_manifest,
)

# Environment variable overriding the default packages root
PACKAGES_PATH_ENV = "MODPROPS_PACKAGES_PATH"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="modprops",
        description="Generate MSBuild module properties from installed NuGet packages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate build.props and extension slots from a packages.config
  modprops generate ./packages.config -o obj/modules.props -r ./packages

  # Use whichever manifest a project directory contains
  modprops generate ./src/MyProject -o obj/modules.props

  # Show resolved packages and the extensions they request
  modprops detect ./project.lock.json --json

  # List supported manifest formats
  modprops list
""",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"modprops {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate module property and extension slot descriptors",
        description="Write the module properties descriptor and extension slots.",
    )
    _add_manifest_arguments(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Path of the root descriptor to write",
    )
    generate_parser.add_argument(
        "-e",
        "--extensions",
        type=Path,
        help="Directory for extension slot files (default: <output-dir>/Extensions)",
    )
    generate_parser.add_argument(
        "--before",
        nargs="+",
        default=[],
        metavar="PROJECT",
        help="Import paths placed before the package imports",
    )
    generate_parser.add_argument(
        "--after",
        nargs="+",
        default=[],
        metavar="PROJECT",
        help="Import paths placed after the package imports",
    )
    generate_parser.add_argument(
        "--property-prefix",
        default=GeneratorConfig.property_name_prefix,
        help=f"Package property name prefix (default: {GeneratorConfig.property_name_prefix})",
    )
    generate_parser.add_argument(
        "--absolute-paths",
        action="store_true",
        help="Use absolute package folders in property values",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without creating files",
    )
    generate_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    # detect command
    detect_parser = subparsers.add_parser(
        "detect",
        help="Show packages resolved from a manifest",
        description="Resolve packages and the extensions they request.",
    )
    _add_manifest_arguments(detect_parser)
    detect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    # list command
    subparsers.add_parser(
        "list",
        help="List supported manifest formats",
        description="Show all supported package manifest formats.",
    )

    return parser


def _add_manifest_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "manifest",
        type=Path,
        help="Manifest file, or a directory containing one",
    )
    parser.add_argument(
        "-r",
        "--packages-root",
        type=Path,
        help=f"Directory packages are installed under "
        f"(default: ${PACKAGES_PATH_ENV} or <manifest-dir>/packages)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=list_formats(),
        help="Manifest format (default: from the manifest file name)",
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_inputs(args: argparse.Namespace) -> tuple[Path, Path, ManifestParser]:
    """
    Resolve manifest path, packages root and parser from arguments.

    Raises:
        ModPropsError: If no manifest can be found.
        ValueError: If the manifest format cannot be determined.
    """
    manifest = args.manifest.resolve()
    if manifest.is_dir():
        found = find_manifest(manifest)
        if found is None:
            raise ModPropsError(f"No package manifest found in {manifest}")
        manifest = found

    if args.packages_root:
        packages_root = args.packages_root.resolve()
    elif os.environ.get(PACKAGES_PATH_ENV):
        packages_root = Path(os.environ[PACKAGES_PATH_ENV])
    else:
        packages_root = manifest.parent / "packages"

    parser = get_parser(args.format) if args.format else parser_for_manifest(manifest)
    return manifest, packages_root, parser


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    _configure_logging(args.verbose)

    try:
        manifest, packages_root, manifest_parser = _resolve_inputs(args)
    except (ModPropsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = GeneratorConfig(property_name_prefix=args.property_prefix)
    if args.absolute_paths:
        # Absolute folders already name the package; no packages path prefix
        config.relative_module_paths = False
        config.property_value_prefix = ""

    # Validate
    errors = config.validate()
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        return 1

    output = args.output.resolve()
    extensions_dir = (
        args.extensions.resolve() if args.extensions else output.parent / "Extensions"
    )

    generator = ModulePropertyGenerator(
        packages_root, manifest, config=config, parser=manifest_parser
    )

    if args.dry_run:
        try:
            result = generator.build(args.before, args.after)
        except (ModPropsError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        print(f"Would write: {output}")
        print(f"  Manifest: {manifest} ({manifest_parser.name})")
        print(f"  Packages: {len(result.packages)}")
        print(f"  Properties: {len(result.root.properties)}")
        print(f"  Imports: {len(result.root.imports)}")
        for name in result.extensions:
            print(f"Would write: {extensions_dir / name}")
        return 0

    if not generator.generate(output, extensions_dir, args.before, args.after):
        print(f"Error: failed to generate {output}", file=sys.stderr)
        return 1

    print(f"Generated: {output}")
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    """Handle the detect command."""
    try:
        manifest, packages_root, manifest_parser = _resolve_inputs(args)
        packages = manifest_parser.get_packages(packages_root, manifest)
        reader = ModuleExtensionReader()
        extensions = [reader.read(package) for package in packages]
    except (ModPropsError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        data = {
            "manifest": str(manifest),
            "format": manifest_parser.name,
            "packages_root": str(packages_root),
            "packages": [
                dict(package.to_dict(), extensions=names)
                for package, names in zip(packages, extensions)
            ],
        }
        print(json.dumps(data, indent=2))
    else:
        print(f"Manifest: {manifest} ({manifest_parser.name})")
        print(f"Packages root: {packages_root}")
        print(f"Packages: {len(packages)}")
        for package, names in zip(packages, extensions):
            installed = "" if package.module_path.is_dir() else "  (not installed)"
            print(f"  {package.name} {package.version} -> {package.folder}{installed}")
            for name in names:
                print(f"    extension: {name}")

    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle the list command."""
    for name in list_formats():
        print(get_parser(name).describe())
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "generate": cmd_generate,
        "detect": cmd_detect,
        "list": cmd_list,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Command line entry point.

Builds a gang sheet from image files without the interactive editor:
upload, optional auto-layout, export, and optionally save or print a
share link.

Examples:
    gangsheet build logo.png badge.png --layout smart --format pdf
    gangsheet build *.png --preset 22x60 --dpi 150 --output sheet.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from gangsheet_toolkit import __version__
from gangsheet_toolkit.builder import (
    BuilderConfig,
    ExportArtifact,
    ExportFormat,
    GangSheetWorkspace,
    JsonFileStore,
    UploadedFile,
)
from gangsheet_toolkit.core.models import SHEET_PRESETS, LayoutMode

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gangsheet",
        description="Arrange images on a print sheet and export it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Layouts:
  freeform - keep upload positions
  grid     - square cells, row-major
  compact  - left-to-right rows
  smart    - largest first, shelf packing

Examples:
  %(prog)s build logo.png badge.png --layout smart --format pdf
  %(prog)s build art/*.png --preset 22x60 --store projects.json
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    build = sub.add_parser("build", help="Build and export a sheet from images")
    build.add_argument("images", nargs="+", type=Path, help="Image files to place")
    build.add_argument(
        "--preset",
        default=BuilderConfig().default_preset,
        choices=sorted(SHEET_PRESETS),
        help="Sheet preset (default: %(default)s)",
    )
    build.add_argument(
        "--layout",
        default=LayoutMode.SMART.value,
        choices=[m.value for m in LayoutMode],
        help="Auto-layout mode (default: %(default)s)",
    )
    build.add_argument("--dpi", type=int, default=BuilderConfig().default_export_dpi, help="Export resolution")
    build.add_argument(
        "--format",
        default=ExportFormat.PNG.value,
        choices=[f.value for f in ExportFormat],
        help="Export format (default: %(default)s)",
    )
    build.add_argument("--output", type=Path, help="Output file or directory (default: current directory)")
    build.add_argument("--background", default="#ffffff", help="Background hex color")
    build.add_argument("--transparent", action="store_true", help="Export without a background fill")
    build.add_argument("--store", type=Path, help="JSON file to save the project into")
    build.add_argument("--key", default=BuilderConfig().storage_key, help="Key to save the project under")
    build.add_argument("--share-base", help="Print a share link based on this URL")
    return parser


def _output_path(output: Optional[Path], artifact: ExportArtifact) -> Path:
    if output is None:
        return Path.cwd() / artifact.filename
    if output.is_dir():
        return output / artifact.filename
    if artifact.degraded:
        # Suffix follows the format actually produced
        return output.with_suffix(f".{artifact.format.value}")
    return output


def run_build(args: argparse.Namespace) -> int:
    """Run the build command; returns the process exit code."""
    store = JsonFileStore(args.store) if args.store else None
    workspace = GangSheetWorkspace(store=store)

    if not workspace.set_preset(args.preset):
        return 2
    if not workspace.set_export_dpi(args.dpi):
        return 2
    if not workspace.set_view(background=args.background, transparent=args.transparent):
        return 2

    uploads = []
    for path in args.images:
        try:
            uploads.append(UploadedFile.from_path(path))
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
    created = workspace.upload(uploads)
    if not created:
        logger.error("No images could be placed")
        return 1

    workspace.apply_auto_layout(args.layout)

    artifact = workspace.export(args.format)
    if artifact is None:
        return 1
    target = _output_path(args.output, artifact)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(artifact.data)
    logger.info(f"Wrote {artifact.format.value.upper()} to {target}")

    if store is not None:
        workspace.save(args.key)
    if args.share_base:
        print(workspace.share_url(args.share_base))

    quote = workspace.quote()
    logger.info(
        f"Sheet {workspace.sheet.name}: {quote.width_in:.2f}x{quote.height_in:.2f}in, "
        f"{len(workspace.items)} items, price {quote.total}"
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.command == "build":
        return run_build(args)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point for LoopCard."""

import argparse
import os
import sys
from pathlib import Path

from loopcard import __version__


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loopcard",
        description="Local-first business card builder with a scannable QR code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive wizard / dashboard / settings
  loopcard

  # Print the card summary and its public URL
  loopcard show

  # Render the public card as a standalone HTML page
  loopcard card --html card.html

  # Export the QR code PNG (named from the slug by default)
  loopcard qr -o my_card.png
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Path to the local storage file (default: $LOOPCARD_STORE or ~/.loopcard/storage.json)",
    )
    parser.add_argument(
        "--public-url",
        default=None,
        help="Base URL for public card links (default: $LOOPCARD_PUBLIC_URL or http://localhost:5173)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for the JSON log on stderr (default: $LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")
    parser.set_defaults(handler=_run_command)

    run_parser = subparsers.add_parser("run", help="Start the interactive application (default)")
    run_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Do not print the ANSI theme colour swatch",
    )
    run_parser.add_argument(
        "--download-dir",
        type=Path,
        default=Path("."),
        help="Where the dashboard saves QR code PNGs (default: current directory)",
    )
    run_parser.set_defaults(handler=_run_command)

    show_parser = subparsers.add_parser("show", help="Print the dashboard summary")
    show_parser.set_defaults(handler=_show_command)

    card_parser = subparsers.add_parser("card", help="Render the public card")
    card_parser.add_argument(
        "--html",
        type=Path,
        default=None,
        help="Write a standalone HTML page instead of printing text",
    )
    card_parser.set_defaults(handler=_card_command)

    qr_parser = subparsers.add_parser("qr", help="Export the QR code as a PNG")
    qr_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output image path (default: loopcard_<slug>.png)",
    )
    qr_parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip QR code scannability verification of the output",
    )
    qr_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output file without prompting",
    )
    qr_parser.set_defaults(handler=_qr_command)

    return parser


def _load(arguments: argparse.Namespace):
    from loopcard.config import load_settings
    from loopcard.state import AppState
    from loopcard.store import RecordStore

    settings = load_settings(store=arguments.store, public_url=arguments.public_url)
    store = RecordStore(settings.store, key=settings.storage_key)
    return settings, AppState.load(store)


def _run_command(arguments: argparse.Namespace) -> int:
    from loopcard.app import LoopCardApp

    settings, state = _load(arguments)
    app = LoopCardApp(
        state,
        settings,
        color=not getattr(arguments, "no_color", False) and sys.stdout.isatty(),
        download_dir=getattr(arguments, "download_dir", Path(".")),
        spinner=sys.stderr.isatty(),
    )
    return app.run()


def _show_command(arguments: argparse.Namespace) -> int:
    from loopcard.dashboard import INCOMPLETE_NOTICE, summary_rows
    from loopcard.qr_generator import build_public_url

    settings, state = _load(arguments)
    for label, value in summary_rows(state.record):
        print(f"{label + ':':<10} {value}")
    print(f"URL:       {build_public_url(state.record.slug, settings.public_url)}")
    if not state.is_complete:
        print(f"\n  ⚠️  {INCOMPLETE_NOTICE}")
    return 0


def _card_command(arguments: argparse.Namespace) -> int:
    from loopcard.views import render_public_card, render_public_card_html

    settings, state = _load(arguments)
    if state.public_notice:
        print(f"  ERROR: {state.public_notice}", file=sys.stderr)
        return 1

    if arguments.html is None:
        print(render_public_card(state.record, settings.public_url))
        return 0

    page = render_public_card_html(state.record, settings.public_url)
    arguments.html.parent.mkdir(parents=True, exist_ok=True)
    arguments.html.write_text(page, encoding="utf-8")
    print(f"✓ Saved: {arguments.html}")
    return 0


def _qr_command(arguments: argparse.Namespace) -> int:
    from loopcard.image_utils import VerifyResult, qr_filename, save_png, verify_qr_scannable
    from loopcard.qr_generator import build_public_url, generate_qr_code

    settings, state = _load(arguments)
    url = build_public_url(state.record.slug, settings.public_url)
    output = arguments.output or Path(qr_filename(state.record.slug))

    if os.path.exists(output) and not arguments.overwrite:
        response = input(f"  Output file '{output}' already exists. Overwrite? [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("  Aborted.")
            return 0

    print(f"Generating QR code for: {url}")
    qr_image = generate_qr_code(url, size=settings.qr_size, margin=settings.qr_margin)
    path = save_png(qr_image, output)
    print(f"  ✓ Saved: {path}")

    if not arguments.no_verify:
        result, decoded = verify_qr_scannable(path)
        if result == VerifyResult.SCANNABLE:
            print(f"  ✓ QR code is SCANNABLE! Decoded: {decoded}")
        elif result == VerifyResult.SKIPPED:
            print("  ⊘ Verification skipped (pyzbar not installed)")
            print("    Install with: pip install pyzbar")
        else:
            print("  ⚠️  WARNING: QR code could not be decoded.")
    return 0


def main(argv: list[str] | None = None) -> int:
    from loopcard.exceptions import LoopCardError
    from loopcard.logging import set_level

    parser = create_parser()
    args = parser.parse_args(argv)
    set_level(args.log_level)

    try:
        return args.handler(args)
    except (LoopCardError, ValueError, OSError) as e:
        print(f"\n  ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n  Aborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())

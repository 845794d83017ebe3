"""Command-line entry point for retargeting a project's debug launch.

The IDE command this tool grew out of ran against the project file open in
the editor.  From a shell the project file is passed explicitly:

* ``setupfordebug Web/Web.csproj`` rewrites the ``IISUrl`` host and stores it
  as the start URL in ``Web/Web.csproj.user``.
* ``setupfordebug show Web/Web.csproj`` prints the extracted and rewritten
  URLs without touching the overlay.

Exit codes: ``0`` success, ``1`` nothing to rewrite, ``2`` usage error,
``3`` any other failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import SetupSettings, load_settings
from .core.types import (
    InvalidFlavorGuidError,
    NoUrlFoundError,
    SetupForDebugError,
    error_payload,
)
from .runner import DebugSetup

EXIT_OK = 0
EXIT_NOTHING_TO_REWRITE = 1
EXIT_USAGE = 2
EXIT_FAILED = 3


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project",
        type=Path,
        help="Project descriptor (.csproj/.vbproj) holding the IISUrl.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON settings file (remote_host, flavor_guid, ...).",
    )
    parser.add_argument(
        "--remote-host",
        help="Replacement for the loopback host (default: http://debug.example.edu).",
    )
    parser.add_argument(
        "--loopback-host",
        help="Host token to replace (default: http://localhost).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit a JSON object instead of text.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log each step to stderr.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setupfordebug",
        description="Point a web project's debug start URL at the remote debug host.",
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--flavor-guid",
        help="Project flavor GUID keying the overlay settings "
        "(default: read from ProjectTypeGuids).",
    )
    return parser


def _build_show_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setupfordebug show",
        description="Print the debug URL that would be written, without saving.",
    )
    _add_common_arguments(parser)
    return parser


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _resolve_settings(args: argparse.Namespace, parser: argparse.ArgumentParser) -> SetupSettings:
    try:
        settings = load_settings(args.config)
        return settings.merged(
            remote_host=args.remote_host,
            loopback_host=args.loopback_host,
            flavor_guid=getattr(args, "flavor_guid", None),
        )
    except OSError as exc:
        parser.error(f"Unable to read settings {args.config}: {exc}")
    except json.JSONDecodeError as exc:
        parser.error(f"Settings file is not valid JSON: {exc}")
    except (TypeError, ValueError) as exc:
        parser.error(str(exc))


def _error_document(exc: Exception) -> dict:
    if isinstance(exc, SetupForDebugError):
        return error_payload(exc)
    if isinstance(exc, InvalidFlavorGuidError):
        return {"error": "invalid-flavor-guid", "reason": str(exc)}
    return {"error": "error", "reason": str(exc)}


def _report_error(exc: Exception, *, as_json: bool) -> None:
    if as_json:
        sys.stdout.write(json.dumps(_error_document(exc), sort_keys=True) + "\n")
    sys.stderr.write(f"error: {exc}\n")


def _exit_code_for(exc: Exception) -> int:
    if isinstance(exc, NoUrlFoundError):
        return EXIT_NOTHING_TO_REWRITE
    return EXIT_FAILED


def _run_show(argv: Sequence[str]) -> int:
    parser = _build_show_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    setup = DebugSetup(_resolve_settings(args, parser))

    try:
        urls, start_url = setup.build_debug_url(args.project)
    except SetupForDebugError as exc:
        _report_error(exc, as_json=args.json)
        return _exit_code_for(exc)

    overlay_path = setup.overlay_path_for(args.project)
    if args.json:
        payload = {
            "descriptor": str(args.project),
            "overlay": str(overlay_path),
            "urls": list(urls),
            "start_url": start_url,
        }
        sys.stdout.write(json.dumps(payload, sort_keys=True) + "\n")
        return EXIT_OK

    for url in urls:
        sys.stdout.write(f"IISUrl: {url}\n")
    sys.stdout.write(f"Start URL: {start_url}\n")
    sys.stdout.write(f"Overlay: {overlay_path}\n")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = list(sys.argv[1:])
    else:
        argv = list(argv)
    if argv and argv[0] == "show":
        return _run_show(argv[1:])

    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    setup = DebugSetup(_resolve_settings(args, parser))

    try:
        result = setup.run(args.project)
    except (SetupForDebugError, InvalidFlavorGuidError) as exc:
        _report_error(exc, as_json=args.json)
        return _exit_code_for(exc)

    if args.json:
        sys.stdout.write(json.dumps(result.to_dict(), sort_keys=True) + "\n")
    else:
        verb = "Added" if result.inserted else "Updated"
        sys.stdout.write(f"{verb} debug settings in {result.overlay_path}\n")
        sys.stdout.write(f"Start URL: {result.start_url}\n")
        sys.stdout.write(f"Flavor: {result.flavor_guid}\n")
    return EXIT_OK


def console_main() -> None:
    """Entry point for ``setupfordebug`` console script."""

    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())

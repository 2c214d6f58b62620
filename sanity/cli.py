"""Command line entry point — `sanity [options] [test-id...]`."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.markup import escape

from sanity.config import settings
from sanity.core import Sanity
from sanity.errors import SanityError
from sanity.matching import id_filter
from sanity.models import Verdict
from sanity.render import print_report

EPILOG = """\
environment:
  SANITY_MODULES  comma / semicolon separated glob paths to search for modules
  SANITY_REQUIRE  file(s) run during boot to configure sanity, each defining setup(sanity)

IDs can be an exact id, a "/regex/" or a glob such as "disk*".
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sanity",
        usage="%(prog)s [options] [test-id...]",
        description="Run Sanity modules",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("ids", nargs="*", metavar="test-id", help="Only run modules matching these ids")
    parser.add_argument("-p", "--path", help="Override the default environment globpath")
    parser.add_argument("-r", "--require", help="Optional file to further configure sanity before running")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Be verbose. Specify multiple times for increasing verbosity",
    )
    parser.add_argument("--no-align", dest="align", action="store_false", help="Do not align columns in output")
    parser.add_argument("--no-color", dest="color", action="store_false", help="Force disable color")
    parser.add_argument(
        "--no-cache", dest="cache", action="store_false",
        help="Disable caching of module results - forces all modules to run",
    )
    parser.add_argument("--no-modules", dest="modules", action="store_false", help="Skip individual module output")
    parser.add_argument("--no-summary", dest="summary", action="store_false", help="Skip output of an overall summary")
    parser.add_argument("--no-verdict", dest="verdict", action="store_false", help="Skip output of an overall verdict")
    return parser


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return getattr(logging, settings.log_level.upper(), logging.WARNING)


async def run(args: argparse.Namespace, console: Console) -> int:
    sanity = Sanity()
    try:
        await sanity.load_env(paths=args.path, require=args.require)
        report = await sanity.exec(use_cache=args.cache, filter=id_filter(args.ids))
    finally:
        sanity.close()

    print_report(
        console,
        report,
        modules=args.modules,
        summary=args.summary,
        verdict=args.verdict,
        align=args.align,
    )
    return 0 if report.verdict == Verdict.PASS else 1


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=_log_level(args.verbose),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    console = Console(no_color=not args.color, highlight=False)

    try:
        code = asyncio.run(run(args, console))
    except SanityError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()

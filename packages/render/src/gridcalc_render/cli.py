"""Command-line entry point: ``gridcalc``."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from gridcalc_domain.exceptions import GridError
from gridcalc_domain.schemas import GridSourceCFG, ResolutionCFG, RunCFG
from gridcalc_domain.schemas.config import DEFAULT_MAX_PASSES
from gridcalc_domain.utils import configure_logging

from .loader import run
from .text_renderer import TextTableRenderer

DEFAULT_FOLDER = Path("data")
DEFAULT_FILES = ["1", "2", "3", "4", "budget"]
DEFAULT_EXTENSION = "csv"
SEPARATOR = "-" * 20

DELIMITER_ALIASES = {
    "tab": "\t",
    "\\t": "\t",
    "comma": ",",
    "semicolon": ";",
    "pipe": "|",
    "space": " ",
}


def parse_delimiter(text: str) -> str:
    """Map a delimiter argument (a single character or an alias like 'tab')."""
    return DELIMITER_ALIASES.get(text, text)


def split_source_arg(arg: str, default_delimiter: str):
    """Split ``name[:delimiter]`` into (name, delimiter).

    The suffix counts as a delimiter only when it is a single character or a
    known alias, so paths containing ':' elsewhere are left alone.
    """
    name, sep, suffix = arg.rpartition(":")
    if sep and name and (len(suffix) == 1 or suffix in DELIMITER_ALIASES):
        return name, parse_delimiter(suffix)
    return arg, default_delimiter


def build_config(args: argparse.Namespace) -> RunCFG:
    """Turn parsed arguments into a RunCFG."""
    delimiter = parse_delimiter(args.delimiter)
    sources: List[GridSourceCFG] = []

    if args.paths:
        for arg in args.paths:
            name, file_delimiter = split_source_arg(arg, delimiter)
            sources.append(GridSourceCFG(path=Path(name), delimiter=file_delimiter))
    else:
        for arg in args.files:
            name, file_delimiter = split_source_arg(arg, delimiter)
            sources.append(GridSourceCFG(
                path=args.folder / f"{name}.{args.ext}",
                delimiter=file_delimiter,
                label=name,
            ))

    return RunCFG(
        sources=sources,
        resolution=ResolutionCFG(strategy=args.strategy, max_passes=args.passes),
        xlsx_dir=args.xlsx_dir,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridcalc",
        description="Parse delimited text grids and resolve references, ranges and sums",
        epilog="Without positional paths, reads FOLDER/NAME.EXT for each --files name",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Input files, optionally suffixed with ':<delimiter>' (e.g. data.tsv:tab)",
    )
    parser.add_argument("--folder", type=Path, default=DEFAULT_FOLDER, help="Input folder")
    parser.add_argument(
        "--files",
        nargs="+",
        default=DEFAULT_FILES,
        help="File names inside --folder, without extension",
    )
    parser.add_argument("--ext", default=DEFAULT_EXTENSION, help="File extension")
    parser.add_argument(
        "--delimiter",
        default=",",
        help="Field delimiter for every file (a single character, or tab/comma/semicolon/pipe/space)",
    )
    parser.add_argument(
        "--passes",
        type=int,
        default=DEFAULT_MAX_PASSES,
        help="Pass budget for the fixed-point strategy",
    )
    parser.add_argument(
        "--strategy",
        choices=["fixed_point", "dependency_order"],
        default="fixed_point",
        help="Resolution strategy",
    )
    parser.add_argument("--xlsx-dir", type=Path, default=None, help="Also export each grid as .xlsx here")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostics level (printed to stderr)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        cfg = build_config(args)
    except ValidationError as e:
        print(f"Error: invalid configuration:\n{e}", file=sys.stderr)
        return 2

    renderer = TextTableRenderer()
    try:
        results = run(cfg)
    except GridError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for result in results:
        table = renderer.render(result.display_frame, result.comment_frame)
        if table:
            print(table)
        print(SEPARATOR)

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Read configured sources and push each one through the grid pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from gridcalc_domain.blocks import BlockContext, grid_pipeline
from gridcalc_domain.engine import ResolutionReport
from gridcalc_domain.schemas import Grid, GridSourceCFG, ResolutionCFG, RunCFG
from gridcalc_domain.utils import LogContext

from .xlsx_renderer import XlsxGridRenderer

logger = logging.getLogger(__name__)


@dataclass
class GridResult:
    """Everything produced for one source file."""

    source: GridSourceCFG
    grid: Grid
    report: ResolutionReport
    display_frame: pd.DataFrame
    comment_frame: pd.DataFrame
    status_summary: pd.DataFrame
    xlsx_path: Optional[Path] = None

    @property
    def label(self) -> str:
        return self.source.display_label


def load_grid_sources(cfg: RunCFG) -> List[Tuple[GridSourceCFG, str]]:
    """Read every configured file, in order.

    Files that cannot be read (missing, unreadable, not UTF-8) are skipped
    with a warning; the remaining files are still returned.
    """
    loaded: List[Tuple[GridSourceCFG, str]] = []
    for source in cfg.sources:
        try:
            text = source.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", source.path, e)
            continue
        loaded.append((source, text))
    return loaded


def process_source(
    source: GridSourceCFG,
    text: str,
    resolution: Optional[ResolutionCFG] = None,
) -> GridResult:
    """Parse, resolve and tabulate one source text."""
    context = BlockContext.with_values(
        source_text=text,
        delimiter=source.delimiter,
        resolution_cfg=resolution or ResolutionCFG(),
    )

    with LogContext(source=source.display_label):
        grid_pipeline().execute(context)

    return GridResult(
        source=source,
        grid=context.get("resolved_grid"),
        report=context.get("resolution_report"),
        display_frame=context.get("display_frame"),
        comment_frame=context.get("comment_frame"),
        status_summary=context.get("status_summary"),
    )


def export_xlsx(result: GridResult, xlsx_dir: Path) -> Path:
    """Write ``<xlsx_dir>/<source stem>.xlsx`` and remember the path on the result."""
    xlsx_dir.mkdir(parents=True, exist_ok=True)
    path = xlsx_dir / f"{result.source.path.stem}.xlsx"
    XlsxGridRenderer(result.grid, report=result.report, title=result.label).render(path)
    result.xlsx_path = path
    logger.info("Wrote %s", path)
    return path


def run(cfg: RunCFG) -> List[GridResult]:
    """Process every readable source of a run configuration."""
    results: List[GridResult] = []
    for source, text in load_grid_sources(cfg):
        result = process_source(source, text, cfg.resolution)
        if cfg.xlsx_dir is not None:
            export_xlsx(result, cfg.xlsx_dir)
        results.append(result)
    return results


__all__ = ["GridResult", "load_grid_sources", "process_source", "export_xlsx", "run"]

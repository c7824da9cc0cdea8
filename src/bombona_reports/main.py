"""CLI for rendering bombona reports from aggregated JSON snapshots."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from .composers import (
    AnnualReportRequest,
    FullAnalyticsReportRequest,
    MonthlyReportRequest,
    RenderedReport,
    generate_report,
)
from .errors import ReportError
from .exports import build_analytics_json, build_annual_workbook
from .models import AnalyticsData, MonthlyMetrics, series_from_payload
from .profiles import DEFAULT_REPORT_PROFILE
from .theme_profiles import THEME_PROFILES, resolve_theme

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
EXPORT_FORMATS = ("xlsx", "json")


def load_json_input(path: Path) -> Any:
    """Read one decoded JSON document from `path`."""
    if not path.exists():
        msg = f"input file '{path}' does not exist."
        raise ValueError(msg)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"input file '{path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc


def write_report(report: RenderedReport, output_path: str | Path | None = None) -> Path:
    """Write the report bytes and return the destination path."""
    destination = Path(output_path or report.filename)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(report.content)
    logger.debug("Wrote %d byte(s) to %s.", len(report.content), destination)
    return destination


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", type=Path, required=True, help="JSON snapshot to render.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output path. Default: the report's standard file name.",
    )


def _add_pdf_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--theme-profile",
        choices=sorted(THEME_PROFILES),
        default="default",
        help="Built-in theme profile name.",
    )
    parser.add_argument(
        "--theme-file",
        type=Path,
        default=None,
        help="JSON file with theme overrides.",
    )
    parser.add_argument(
        "--repeat-table-header",
        action="store_true",
        help="Redraw the table header after a page break.",
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate bombona tracking reports.")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    monthly_parser = subparsers.add_parser("monthly", help="Render the monthly PDF report.")
    _add_common_arguments(monthly_parser)
    monthly_parser.add_argument("--month", type=int, required=True, help="Month number (1-12).")
    monthly_parser.add_argument("--year", type=int, required=True, help="Report year.")
    _add_pdf_arguments(monthly_parser)

    annual_parser = subparsers.add_parser("annual", help="Render the annual PDF report.")
    _add_common_arguments(annual_parser)
    annual_parser.add_argument("--year", type=int, required=True, help="Report year.")
    _add_pdf_arguments(annual_parser)

    analytics_parser = subparsers.add_parser("analytics", help="Render the full analytics PDF report.")
    _add_common_arguments(analytics_parser)
    analytics_parser.add_argument(
        "--chart-image",
        type=Path,
        default=None,
        help="PNG/JPEG snapshot embedded on a final visual analysis page.",
    )
    _add_pdf_arguments(analytics_parser)

    export_parser = subparsers.add_parser("export", help="Export data as a spreadsheet or JSON.")
    export_parser.add_argument("format", choices=EXPORT_FORMATS, help="Export format.")
    _add_common_arguments(export_parser)
    export_parser.add_argument("--year", type=int, default=None, help="Report year (xlsx only).")
    return parser


def _render(args: argparse.Namespace) -> RenderedReport:
    payload = load_json_input(args.input)

    if args.command == "export":
        if args.format == "xlsx":
            if args.year is None:
                msg = "--year is required for xlsx exports."
                raise ValueError(msg)
            return build_annual_workbook(series_from_payload(payload), args.year)
        return build_analytics_json(AnalyticsData.from_mapping(payload))

    theme = resolve_theme(profile=args.theme_profile, theme_file=args.theme_file)
    profile = replace(DEFAULT_REPORT_PROFILE, repeat_table_header=args.repeat_table_header)

    if args.command == "monthly":
        request = MonthlyReportRequest(
            metrics=MonthlyMetrics.from_mapping(payload), month=args.month, year=args.year
        )
    elif args.command == "annual":
        request = AnnualReportRequest(series=series_from_payload(payload), year=args.year)
    else:
        data = AnalyticsData.from_mapping(payload)
        if args.chart_image is not None:
            if not args.chart_image.exists():
                msg = f"chart image '{args.chart_image}' does not exist."
                raise ValueError(msg)
            data = replace(data, chart_snapshot=args.chart_image.read_bytes())
        request = FullAnalyticsReportRequest(data=data)

    return generate_report(request, profile=profile, theme=theme)


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        report = _render(args)
        destination = write_report(report, args.output)
    except (ValueError, TypeError, ReportError) as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    print(f"Generated report at: {destination}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Report composers: monthly, annual and full analytics documents."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar

from .charts import (
    BAR_CHART_HEIGHT,
    LINE_CHART_HEIGHT,
    PIE_CHART_HEIGHT,
    ChartDataset,
    ChartEntry,
    draw_bar_chart,
    draw_legend,
    draw_line_chart,
    draw_pie_chart,
    status_dataset,
)
from .config import (
    ANALYTICS_FILENAME_TEMPLATE,
    ANNUAL_FILENAME_TEMPLATE,
    BRAND_TITLE,
    ICON_BOX,
    ICON_CHART,
    ICON_CHECK,
    ICON_CYCLE,
    ICON_RECYCLE,
    ICON_TABLE,
    ICON_TROPHY,
    ICON_USERS,
    MONTHLY_FILENAME_TEMPLATE,
    NO_PRODUCTS_PLACEHOLDER,
    PDF_MEDIA_TYPE,
    Theme,
)
from .drawing import Document, Page
from .formatting import month_name, translate_month
from .layout import (
    NO_DATA_MESSAGE,
    MetricCard,
    draw_card_row,
    draw_centered_message,
    draw_footer,
    draw_header,
    draw_image_or_notice,
    draw_metric_card,
    draw_note_card,
    draw_section_title,
    ensure_space,
)
from .models import AnalyticsData, MonthlyMetrics, MonthlySnapshot
from .profiles import DEFAULT_REPORT_PROFILE, ReportProfile
from .tables import TableColumn, TableSpec, draw_table

logger = logging.getLogger(__name__)

CARD_WIDTH = 85
CARD_HEIGHT = 38
SUMMARY_CARD_WIDTH = 55
SUMMARY_CARD_GAP = 8
PIE_CENTER_X = 70
LEGEND_X = 120
CHART_PLOT_HEIGHT = 60
BAR_PLOT_HEIGHT = 50
PRODUCTS_BLOCK_HEIGHT = 40
TABLE_MIN_HEIGHT = 60
HISTORY_TABLE_ROWS = 12
TOP_PRODUCTS = 5


class ReportKind(Enum):
    MONTHLY = "mensal"
    ANNUAL = "anual"
    FULL_ANALYTICS = "analytics_completo"


@dataclass(frozen=True)
class RenderedReport:
    """A finished downloadable file."""

    filename: str
    content: bytes
    page_count: int
    media_type: str = PDF_MEDIA_TYPE


@dataclass(frozen=True)
class MonthlyReportRequest:
    metrics: MonthlyMetrics
    month: int
    year: int
    kind: ClassVar[ReportKind] = ReportKind.MONTHLY


@dataclass(frozen=True)
class AnnualReportRequest:
    series: tuple[MonthlySnapshot, ...]
    year: int
    kind: ClassVar[ReportKind] = ReportKind.ANNUAL


@dataclass(frozen=True)
class FullAnalyticsReportRequest:
    data: AnalyticsData
    kind: ClassVar[ReportKind] = ReportKind.FULL_ANALYTICS


ReportRequest = MonthlyReportRequest | AnnualReportRequest | FullAnalyticsReportRequest


def _validate_year(year: int) -> None:
    if isinstance(year, bool) or not isinstance(year, int):
        msg = "year must be an integer."
        raise TypeError(msg)
    if year < 1:
        msg = "year must be >= 1."
        raise ValueError(msg)


def _validate_month(month: int) -> None:
    if isinstance(month, bool) or not isinstance(month, int):
        msg = "month must be an integer."
        raise TypeError(msg)
    if not 1 <= month <= 12:
        msg = "month must be between 1 and 12."
        raise ValueError(msg)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def monthly_filename(month: int, year: int) -> str:
    _validate_month(month)
    _validate_year(year)
    return MONTHLY_FILENAME_TEMPLATE.format(month=month, year=year)


def annual_filename(year: int) -> str:
    _validate_year(year)
    return ANNUAL_FILENAME_TEMPLATE.format(year=year)


def analytics_filename(generated_at: datetime) -> str:
    return ANALYTICS_FILENAME_TEMPLATE.format(date=generated_at.date().isoformat())


def _stamp_footers(
    document: Document,
    generated_at: datetime,
    *,
    profile: ReportProfile,
    theme: type,
) -> Document:
    def stamp_footer(page_pdf: Document, _page: Page) -> None:
        draw_footer(page_pdf, generated_at, profile=profile, theme=theme)

    document.finish_pages(stamp_footer)
    return document


def _render(document: Document, filename: str) -> RenderedReport:
    content = document.serialize()
    logger.info("Generated %s (%d page(s)).", filename, document.page_count)
    return RenderedReport(filename=filename, content=content, page_count=document.page_count)


def _draw_status_section(
    document: Document,
    y: float,
    title: str,
    dataset: ChartDataset,
    legend_total: float,
    *,
    profile: ReportProfile,
    theme: type,
) -> float:
    y = ensure_space(document, y, PIE_CHART_HEIGHT, profile=profile)
    y = draw_section_title(document, title, y, icon=ICON_CHART, profile=profile, theme=theme)
    y += 10
    draw_pie_chart(document, PIE_CENTER_X, y + 30, profile.chart_radius, dataset, theme=theme)
    draw_legend(document, LEGEND_X, y + 10, dataset, legend_total, profile=profile, theme=theme)
    return y + PIE_CHART_HEIGHT


def _series_line_dataset(series: Sequence[MonthlySnapshot]) -> ChartDataset:
    return ChartDataset(
        tuple(
            ChartEntry(label=translate_month(item.mes)[:3], value=item.bombonas_ativas)
            for item in series
        )
    )


def build_monthly_document(
    metrics: MonthlyMetrics,
    month: int,
    year: int,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> Document:
    """Lay out the monthly indicators report, footers included."""
    _validate_month(month)
    _validate_year(year)
    generated_at = generated_at or datetime.now()
    period = f"{month_name(month)} {year}"
    logger.info("Composing monthly report for %s.", period)

    document = Document(title=f"Relatório Mensal - {period}", profile=profile)
    y = draw_header(
        document, BRAND_TITLE, "Relatório Mensal de Bombonas", period, profile=profile, theme=theme
    )

    y = draw_section_title(document, "INDICADORES DO MÊS", y, icon=ICON_CHART, profile=profile, theme=theme)
    y += profile.small_gap

    cards = (
        MetricCard("TOTAL DE BOMBONAS", metrics.total_bombonas, ICON_BOX, theme.PRIMARY),
        MetricCard("BOMBONAS ATIVAS", metrics.bombonas_ativas, ICON_CHECK, theme.SUCCESS),
        MetricCard("BOMBONAS EM USO", metrics.bombonas_em_uso, ICON_CYCLE, theme.HIGHLIGHT),
        MetricCard("TOTAL USUÁRIOS", metrics.total_usuarios, ICON_USERS, theme.INFO),
        MetricCard("CICLOS/MOVIMENTAÇÕES", metrics.ciclos_mensais, ICON_CHART, theme.ACCENT),
    )
    gap = profile.card_gap
    for row in (cards[0:2], cards[2:4]):
        y = draw_card_row(
            document,
            row,
            profile.page_margin,
            y,
            width=CARD_WIDTH,
            height=CARD_HEIGHT,
            gap=gap,
            profile=profile,
            theme=theme,
        )
        y += gap

    draw_metric_card(
        document,
        cards[4],
        (profile.page_width - CARD_WIDTH) / 2,
        y,
        CARD_WIDTH,
        CARD_HEIGHT,
        profile=profile,
        theme=theme,
    )
    y += CARD_HEIGHT + profile.section_gap

    status = status_dataset(
        (
            ("Ativas", metrics.bombonas_ativas, theme.SUCCESS),
            ("Em Uso", metrics.bombonas_em_uso, theme.HIGHLIGHT),
            ("Inativas", metrics.bombonas_inativas, theme.INACTIVE),
        )
    )
    y = _draw_status_section(
        document,
        y,
        "DISTRIBUIÇÃO POR STATUS",
        status,
        metrics.total_bombonas,
        profile=profile,
        theme=theme,
    )

    products = metrics.produtos_mais_utilizados.strip()
    if products and products != NO_PRODUCTS_PLACEHOLDER:
        y = ensure_space(document, y, PRODUCTS_BLOCK_HEIGHT, profile=profile)
        y = draw_section_title(
            document, "PRODUTOS MAIS UTILIZADOS", y, icon=ICON_TROPHY, profile=profile, theme=theme
        )
        y += profile.small_gap
        draw_note_card(document, products, y, profile=profile, theme=theme)

    return _stamp_footers(document, generated_at, profile=profile, theme=theme)


def build_annual_document(
    series: Sequence[MonthlySnapshot],
    year: int,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> Document:
    """Lay out the annual evolution report.

    An empty series yields a single page with a "no data" message; a series of
    zero-valued months still renders the flat chart and the full table.
    """
    _validate_year(year)
    generated_at = generated_at or datetime.now()
    logger.info("Composing annual report for %d with %d month(s).", year, len(series))

    document = Document(title=f"Relatório Anual - {year}", profile=profile)
    y = draw_header(
        document, BRAND_TITLE, "Relatório Anual de Bombonas", f"Ano {year}", profile=profile, theme=theme
    )

    if not series:
        draw_centered_message(document, NO_DATA_MESSAGE, y, profile=profile, theme=theme)
        return _stamp_footers(document, generated_at, profile=profile, theme=theme)

    y = draw_section_title(document, "RESUMO ANUAL", y, icon=ICON_CHART, profile=profile, theme=theme)
    y += profile.small_gap

    peak = max(item.total_bombonas for item in series)
    new_users = sum(item.novos_usuarios for item in series)
    average_active = _round_half_up(sum(item.bombonas_ativas for item in series) / len(series))
    y = draw_card_row(
        document,
        (
            MetricCard("PICO DE BOMBONAS", peak, ICON_CHART, theme.PRIMARY),
            MetricCard("NOVOS USUÁRIOS", new_users, ICON_USERS, theme.INFO),
            MetricCard("MÉDIA ATIVAS/MÊS", average_active, ICON_CHECK, theme.SUCCESS),
        ),
        profile.page_margin + 5,
        y,
        width=SUMMARY_CARD_WIDTH,
        height=CARD_HEIGHT,
        gap=SUMMARY_CARD_GAP,
        profile=profile,
        theme=theme,
    )
    y += profile.section_gap

    y = ensure_space(document, y, LINE_CHART_HEIGHT + 5, profile=profile)
    y = draw_section_title(document, "EVOLUÇÃO MENSAL", y, icon=ICON_CHART, profile=profile, theme=theme)
    y += 10
    draw_line_chart(
        document,
        profile.page_margin + 10,
        y,
        profile.content_width - 20,
        CHART_PLOT_HEIGHT,
        _series_line_dataset(series),
        color=theme.PRIMARY,
        profile=profile,
        theme=theme,
    )
    y += LINE_CHART_HEIGHT

    y = ensure_space(document, y, TABLE_MIN_HEIGHT, profile=profile)
    y = draw_section_title(document, "DETALHAMENTO MENSAL", y, icon=ICON_TABLE, profile=profile, theme=theme)
    y += profile.small_gap

    rows = []
    for item in series:
        row = item.as_row()
        row["mes"] = translate_month(item.mes)
        rows.append(row)
    table = TableSpec(
        columns=(
            TableColumn("MÊS", 35, "mes"),
            TableColumn("TOTAL", 30, "total_bombonas"),
            TableColumn("ATIVAS", 30, "bombonas_ativas"),
            TableColumn("EM USO", 30, "bombonas_em_uso"),
            TableColumn("NOVOS USU.", 35, "novos_usuarios"),
        ),
        rows=tuple(rows),
    )
    draw_table(
        document,
        table,
        profile.page_margin,
        y,
        profile.content_width,
        repeat_header=profile.repeat_table_header,
        profile=profile,
        theme=theme,
    )

    return _stamp_footers(document, generated_at, profile=profile, theme=theme)


def build_full_analytics_document(
    data: AnalyticsData,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> Document:
    generated_at = generated_at or datetime.now()
    logger.info("Composing full analytics report.")

    document = Document(title="Analytics Completo", profile=profile)
    y = draw_header(
        document,
        BRAND_TITLE,
        "Analytics Completo",
        "Análise Histórica de Dados",
        profile=profile,
        theme=theme,
    )

    y = draw_section_title(document, "RESUMO EXECUTIVO", y, icon=ICON_TROPHY, profile=profile, theme=theme)
    y += profile.small_gap

    summary = data.resumo_geral
    cards = (
        MetricCard("TOTAL BOMBONAS HISTÓRICO", summary.total_bombonas_historico, ICON_BOX, theme.PRIMARY),
        MetricCard("TOTAL USUÁRIOS", summary.total_usuarios, ICON_USERS, theme.INFO),
        MetricCard("TOTAL CICLOS", summary.total_ciclos, ICON_CYCLE, theme.HIGHLIGHT),
        MetricCard("TAXA REUTILIZAÇÃO", f"{summary.taxa_reutilizacao:.1f}%", ICON_RECYCLE, theme.SUCCESS),
    )
    gap = profile.card_gap
    y = draw_card_row(
        document, cards[0:2], profile.page_margin, y,
        width=CARD_WIDTH, height=CARD_HEIGHT, gap=gap, profile=profile, theme=theme,
    )
    y += gap
    y = draw_card_row(
        document, cards[2:4], profile.page_margin, y,
        width=CARD_WIDTH, height=CARD_HEIGHT, gap=gap, profile=profile, theme=theme,
    )
    y += profile.section_gap

    distribution = data.distribuicao_status
    status = status_dataset(
        (
            ("Ativas", distribution.ativas, theme.SUCCESS),
            ("Em Uso", distribution.em_uso, theme.HIGHLIGHT),
            ("Inativas", distribution.inativas, theme.INACTIVE),
        )
    )
    y = _draw_status_section(
        document,
        y,
        "DISTRIBUIÇÃO ATUAL DE STATUS",
        status,
        status.total,
        profile=profile,
        theme=theme,
    )

    if data.produtos_populares:
        y = ensure_space(document, y, BAR_CHART_HEIGHT + 10, profile=profile)
        y = draw_section_title(document, "TOP PRODUTOS", y, icon=ICON_TROPHY, profile=profile, theme=theme)
        y += 10
        top_products = ChartDataset(
            tuple(
                ChartEntry(label=product.produto[:15], value=product.uso_count)
                for product in data.produtos_populares[:TOP_PRODUCTS]
            )
        )
        draw_bar_chart(
            document,
            profile.page_margin,
            y,
            profile.content_width,
            BAR_PLOT_HEIGHT,
            top_products,
            color=theme.ACCENT,
            profile=profile,
            theme=theme,
        )
        y += BAR_CHART_HEIGHT

    if data.evolucao_mensal:
        # The historical section always opens a page of its own.
        if y > profile.continuation_top:
            document.add_page()
            y = profile.continuation_top
        y = draw_section_title(document, "EVOLUÇÃO HISTÓRICA", y, icon=ICON_CHART, profile=profile, theme=theme)
        y += 10
        draw_line_chart(
            document,
            profile.page_margin + 10,
            y,
            profile.content_width - 20,
            CHART_PLOT_HEIGHT,
            _series_line_dataset(data.evolucao_mensal),
            color=theme.PRIMARY,
            profile=profile,
            theme=theme,
        )
        y += LINE_CHART_HEIGHT

        y = ensure_space(document, y, TABLE_MIN_HEIGHT, profile=profile)
        recent = data.evolucao_mensal[-HISTORY_TABLE_ROWS:]
        table = TableSpec(
            columns=(
                TableColumn("PERÍODO", 40, "mes"),
                TableColumn("ATIVAS", 35, "bombonas_ativas"),
                TableColumn("EM USO", 35, "bombonas_em_uso"),
                TableColumn("USUÁRIOS", 35, "novos_usuarios"),
            ),
            rows=tuple(
                {
                    "mes": translate_month(item.mes)[:8],
                    "bombonas_ativas": item.bombonas_ativas,
                    "bombonas_em_uso": item.bombonas_em_uso,
                    "novos_usuarios": item.novos_usuarios,
                }
                for item in recent
            ),
        )
        y = draw_table(
            document,
            table,
            profile.page_margin + 15,
            y,
            profile.content_width - 30,
            repeat_header=profile.repeat_table_header,
            profile=profile,
            theme=theme,
        )

    if data.chart_snapshot:
        document.add_page()
        y = draw_section_title(
            document,
            "ANÁLISE VISUAL E GRÁFICOS",
            profile.continuation_top,
            icon=ICON_CHART,
            profile=profile,
            theme=theme,
        )
        draw_image_or_notice(document, data.chart_snapshot, y + profile.small_gap, profile=profile, theme=theme)

    return _stamp_footers(document, generated_at, profile=profile, theme=theme)


def compose_monthly_report(
    metrics: MonthlyMetrics,
    month: int,
    year: int,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> RenderedReport:
    """Render the monthly indicators report to PDF bytes."""
    filename = monthly_filename(month, year)
    document = build_monthly_document(
        metrics, month, year, profile=profile, theme=theme, generated_at=generated_at
    )
    return _render(document, filename)


def compose_annual_report(
    series: Sequence[MonthlySnapshot],
    year: int,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> RenderedReport:
    """Render the annual evolution report to PDF bytes."""
    filename = annual_filename(year)
    document = build_annual_document(
        series, year, profile=profile, theme=theme, generated_at=generated_at
    )
    return _render(document, filename)


def compose_full_analytics_report(
    data: AnalyticsData,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> RenderedReport:
    """Render the historical analytics report to PDF bytes.

    The file name carries the generation date.
    """
    generated_at = generated_at or datetime.now()
    document = build_full_analytics_document(
        data, profile=profile, theme=theme, generated_at=generated_at
    )
    return _render(document, analytics_filename(generated_at))


def _compose_monthly(request: MonthlyReportRequest, **options: object) -> RenderedReport:
    return compose_monthly_report(request.metrics, request.month, request.year, **options)


def _compose_annual(request: AnnualReportRequest, **options: object) -> RenderedReport:
    return compose_annual_report(request.series, request.year, **options)


def _compose_full_analytics(request: FullAnalyticsReportRequest, **options: object) -> RenderedReport:
    return compose_full_analytics_report(request.data, **options)


COMPOSERS: dict[ReportKind, Callable[..., RenderedReport]] = {
    ReportKind.MONTHLY: _compose_monthly,
    ReportKind.ANNUAL: _compose_annual,
    ReportKind.FULL_ANALYTICS: _compose_full_analytics,
}


def generate_report(
    request: ReportRequest,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
    generated_at: datetime | None = None,
) -> RenderedReport:
    """Dispatch a report request to the composer registered for its kind."""
    composer = COMPOSERS.get(getattr(request, "kind", None))
    if composer is None:
        msg = f"unsupported report request: {type(request).__name__}."
        raise ValueError(msg)
    return composer(request, profile=profile, theme=theme, generated_at=generated_at)

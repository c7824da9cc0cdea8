"""Spreadsheet and JSON exports that bypass the drawing engine."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from .composers import RenderedReport, annual_filename
from .config import (
    ANALYTICS_JSON_FILENAME_TEMPLATE,
    ANNUAL_WORKBOOK_FILENAME_TEMPLATE,
    JSON_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    Theme,
)
from .formatting import translate_month
from .geometry import percentage_label
from .models import AnalyticsData, MonthlySnapshot

logger = logging.getLogger(__name__)

WORKBOOK_COLUMNS = (
    ("Mês", 15),
    ("Total Bombonas", 15),
    ("Em Uso", 15),
    ("Disponíveis", 15),
    ("Taxa Utilização", 15),
)


def utilization_rate(in_use: int, total: int) -> str:
    """Return `in_use / total` as a one-decimal percentage string."""
    return f"{percentage_label(in_use, total)}%"


def _argb(color: Any) -> str:
    return "FF" + color.hexval()[2:].upper()


def build_annual_workbook(
    series: Sequence[MonthlySnapshot],
    year: int,
    *,
    theme: type = Theme,
) -> RenderedReport:
    """Write one worksheet row per month with a styled header row."""
    # Validates the year the same way the PDF report does.
    annual_filename(year)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = f"Relatório {year}"

    sheet.append([header for header, _width in WORKBOOK_COLUMNS])
    header_fill = PatternFill(fill_type="solid", fgColor=_argb(theme.PRIMARY))
    for cell in sheet[1]:
        cell.font = Font(bold=True, color=_argb(theme.WHITE))
        cell.fill = header_fill

    for index, (_header, width) in enumerate(WORKBOOK_COLUMNS):
        sheet.column_dimensions[get_column_letter(index + 1)].width = width

    for item in series:
        sheet.append(
            [
                translate_month(item.mes),
                item.total_bombonas,
                item.bombonas_em_uso,
                max(0, item.total_bombonas - item.bombonas_em_uso),
                utilization_rate(item.bombonas_em_uso, item.total_bombonas),
            ]
        )

    buffer = io.BytesIO()
    workbook.save(buffer)
    filename = ANNUAL_WORKBOOK_FILENAME_TEMPLATE.format(year=year)
    logger.info("Exported %s with %d month(s).", filename, len(series))
    return RenderedReport(
        filename=filename,
        content=buffer.getvalue(),
        page_count=1,
        media_type=XLSX_MEDIA_TYPE,
    )


def analytics_payload(data: AnalyticsData, generated_at: datetime) -> dict[str, Any]:
    summary = data.resumo_geral
    status = data.distribuicao_status
    return {
        "gerado_em": generated_at.isoformat(),
        "resumo_geral": {
            "total_bombonas_historico": summary.total_bombonas_historico,
            "total_usuarios": summary.total_usuarios,
            "total_ciclos": summary.total_ciclos,
            "taxa_reutilizacao": summary.taxa_reutilizacao,
        },
        "distribuicao_status": {
            "ativas": status.ativas,
            "em_uso": status.em_uso,
            "inativas": status.inativas,
        },
        "produtos_populares": [
            {"produto": product.produto, "uso_count": product.uso_count}
            for product in data.produtos_populares
        ],
        "evolucao_mensal": [
            {
                **item.as_row(),
                "mes": translate_month(item.mes),
                "utilizacao": utilization_rate(item.bombonas_em_uso, item.total_bombonas),
            }
            for item in data.evolucao_mensal
        ],
    }


def build_analytics_json(
    data: AnalyticsData,
    *,
    generated_at: datetime | None = None,
) -> RenderedReport:
    generated_at = generated_at or datetime.now()
    content = json.dumps(analytics_payload(data, generated_at), indent=2, ensure_ascii=False)
    filename = ANALYTICS_JSON_FILENAME_TEMPLATE.format(date=generated_at.date().isoformat())
    logger.info("Exported %s.", filename)
    return RenderedReport(
        filename=filename,
        content=content.encode("utf-8"),
        page_count=1,
        media_type=JSON_MEDIA_TYPE,
    )

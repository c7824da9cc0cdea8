"""End-to-end tests for the report composers."""

from __future__ import annotations

import re
import struct
import unittest
import zlib
from dataclasses import replace
from datetime import datetime

from bombona_reports.composers import (
    AnnualReportRequest,
    FullAnalyticsReportRequest,
    MonthlyReportRequest,
    build_annual_document,
    build_full_analytics_document,
    build_monthly_document,
    compose_annual_report,
    compose_full_analytics_report,
    compose_monthly_report,
    generate_report,
)
from bombona_reports.config import FOOTER_ATTRIBUTION, PDF_MEDIA_TYPE
from bombona_reports.drawing import Document
from bombona_reports.layout import IMAGE_FALLBACK_NOTICE, NO_DATA_MESSAGE
from bombona_reports.models import (
    AnalyticsData,
    AnalyticsSummary,
    MonthlyMetrics,
    MonthlySnapshot,
    ProductUsage,
    StatusDistribution,
)
from bombona_reports.profiles import DEFAULT_REPORT_PROFILE

PAGE_PATTERN = re.compile(rb"/Type\s*/Page\b")
GENERATED_AT = datetime(2026, 10, 19, 9, 30)
FOOTER_TEXT = "Gerado em 19 de outubro de 2026 às 09:30"
ENGLISH_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def all_texts(document: Document) -> list[str]:
    return [command.args[0] for page in document.pages for command in page.ops("text")]


def page_texts(document: Document, index: int) -> list[str]:
    return [command.args[0] for command in document.pages[index].ops("text")]


def count_ops(document: Document, *names: str) -> int:
    return sum(len(page.ops(*names)) for page in document.pages)


def table_rows(document: Document, width: float) -> int:
    return sum(
        1
        for page in document.pages
        for command in page.ops("rect")
        if command.args[2:] == (width, 8)
    )


def png_bytes(idat: bytes | None = None) -> bytes:
    def chunk(tag: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + tag
            + data
            + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
        )

    raw = b"\x00" + b"\x4c\xaf\x50" * 4
    if idat is None:
        idat = zlib.compress(raw)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", 4, 1, 8, 2, 0, 0, 0))
        + chunk(b"IDAT", idat)
        + chunk(b"IEND", b"")
    )


def monthly_metrics(**overrides: object) -> MonthlyMetrics:
    values: dict[str, object] = {
        "total_bombonas": 10,
        "bombonas_ativas": 8,
        "bombonas_em_uso": 3,
        "total_usuarios": 4,
        "ciclos_mensais": 6,
        "produtos_mais_utilizados": "Óleo, Detergente",
    }
    values.update(overrides)
    return MonthlyMetrics(**values)  # type: ignore[arg-type]


def year_series() -> tuple[MonthlySnapshot, ...]:
    return tuple(
        MonthlySnapshot(
            mes=name,
            total_bombonas=100 + index,
            bombonas_ativas=50 + index,
            bombonas_em_uso=30,
            novos_usuarios=2,
        )
        for index, name in enumerate(ENGLISH_MONTHS)
    )


def analytics_data(**overrides: object) -> AnalyticsData:
    values: dict[str, object] = {
        "resumo_geral": AnalyticsSummary(
            total_bombonas_historico=120,
            total_usuarios=30,
            total_ciclos=410,
            taxa_reutilizacao=87.5,
        ),
        "evolucao_mensal": tuple(
            MonthlySnapshot(
                mes=label,
                total_bombonas=100,
                bombonas_ativas=60 + index,
                bombonas_em_uso=40,
                novos_usuarios=index,
            )
            for index, label in enumerate(
                [f"2025-{month:02d}" for month in range(1, 13)] + ["2026-01", "2026-02"]
            )
        ),
        "produtos_populares": tuple(
            ProductUsage(produto=name, uso_count=count)
            for name, count in (
                ("Detergente Industrial Concentrado", 40),
                ("Óleo", 30),
                ("Solvente", 20),
                ("Tinta", 10),
                ("Resina", 5),
                ("Verniz", 1),
            )
        ),
        "distribuicao_status": StatusDistribution(ativas=80, em_uso=60, inativas=20),
    }
    values.update(overrides)
    return AnalyticsData(**values)  # type: ignore[arg-type]


class FooterInvariantTests(unittest.TestCase):
    def test_every_page_has_exactly_one_footer(self) -> None:
        documents = (
            build_monthly_document(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT),
            build_annual_document(year_series(), 2026, generated_at=GENERATED_AT),
            build_annual_document((), 2026, generated_at=GENERATED_AT),
            build_full_analytics_document(analytics_data(), generated_at=GENERATED_AT),
        )
        for document in documents:
            with self.subTest(title=document.title):
                for index in range(document.page_count):
                    texts = page_texts(document, index)
                    self.assertEqual(texts.count(FOOTER_TEXT), 1)
                    self.assertEqual(texts.count(FOOTER_ATTRIBUTION), 1)

    def test_serialized_page_count_matches_report(self) -> None:
        reports = (
            compose_monthly_report(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT),
            compose_annual_report(year_series(), 2026, generated_at=GENERATED_AT),
            compose_full_analytics_report(analytics_data(), generated_at=GENERATED_AT),
        )
        for report in reports:
            with self.subTest(filename=report.filename):
                self.assertTrue(report.content.startswith(b"%PDF"))
                self.assertEqual(report.media_type, PDF_MEDIA_TYPE)
                self.assertEqual(len(PAGE_PATTERN.findall(report.content)), report.page_count)


class MonthlyReportTests(unittest.TestCase):
    def test_cards_legend_and_products(self) -> None:
        document = build_monthly_document(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertIn("Março 2026", page_texts(document, 0))
        for value in ("10", "8", "3", "4", "6"):
            self.assertIn(value, texts)
        for label in ("TOTAL DE BOMBONAS", "BOMBONAS ATIVAS", "BOMBONAS EM USO", "TOTAL USUÁRIOS"):
            self.assertIn(label, texts)
        self.assertIn("Ativas: 8 (80.0%)", texts)
        self.assertIn("Em Uso: 3 (30.0%)", texts)
        self.assertIn("Inativas: 2 (20.0%)", texts)
        self.assertEqual(count_ops(document, "path"), 3)
        self.assertIn("PRODUTOS MAIS UTILIZADOS", texts)
        self.assertIn("Óleo, Detergente", texts)

    def test_status_section_breaks_to_second_page(self) -> None:
        document = build_monthly_document(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT)

        self.assertEqual(document.page_count, 2)
        self.assertIn("DISTRIBUIÇÃO POR STATUS", page_texts(document, 1))

    def test_zero_total_shows_zero_percent_and_no_wedges(self) -> None:
        metrics = monthly_metrics(
            total_bombonas=0,
            bombonas_ativas=0,
            bombonas_em_uso=0,
            produtos_mais_utilizados="Nenhum dado",
        )
        document = build_monthly_document(metrics, 1, 2026, generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertIn("Ativas: 0 (0.0%)", texts)
        self.assertIn("Inativas: 0 (0.0%)", texts)
        self.assertEqual(count_ops(document, "path"), 0)
        self.assertNotIn("PRODUTOS MAIS UTILIZADOS", texts)

    def test_report_filename(self) -> None:
        report = compose_monthly_report(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT)
        self.assertEqual(report.filename, "relatorio_mensal_03_2026.pdf")
        self.assertEqual(report.page_count, 2)

    def test_invalid_period_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            compose_monthly_report(monthly_metrics(), 13, 2026)
        with self.assertRaises(TypeError):
            compose_monthly_report(monthly_metrics(), "3", 2026)  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            compose_monthly_report(monthly_metrics(), 3, 0)

    def test_composing_logs_at_info(self) -> None:
        with self.assertLogs("bombona_reports.composers", level="INFO") as captured:
            compose_monthly_report(monthly_metrics(), 3, 2026, generated_at=GENERATED_AT)
        self.assertTrue(any("relatorio_mensal_03_2026.pdf" in line for line in captured.output))


class AnnualReportTests(unittest.TestCase):
    def test_full_year_spans_two_pages_with_every_month(self) -> None:
        document = build_annual_document(year_series(), 2026, generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertGreaterEqual(document.page_count, 2)
        self.assertNotIn(NO_DATA_MESSAGE, texts)
        self.assertEqual(table_rows(document, 170), 12)
        self.assertIn("Janeiro", texts)
        self.assertIn("Dezembro", texts)
        self.assertIn("Jan", texts)
        self.assertIn("Ano 2026", texts)

    def test_summary_cards(self) -> None:
        series = (
            MonthlySnapshot("January", 200, 11, 5, 7),
            MonthlySnapshot("February", 300, 14, 6, 9),
        )
        texts = all_texts(build_annual_document(series, 2026, generated_at=GENERATED_AT))

        self.assertIn("300", texts)
        self.assertIn("16", texts)
        # 12.5 rounds half up.
        self.assertIn("13", texts)

    def test_empty_series_renders_single_page_message(self) -> None:
        document = build_annual_document((), 2026, generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertEqual(document.page_count, 1)
        self.assertIn(NO_DATA_MESSAGE, texts)
        self.assertNotIn("RESUMO ANUAL", texts)
        self.assertEqual(table_rows(document, 170), 0)

    def test_all_zero_series_still_renders_chart_and_table(self) -> None:
        series = tuple(MonthlySnapshot(name, 0, 0, 0, 0) for name in ENGLISH_MONTHS[:3])
        document = build_annual_document(series, 2026, generated_at=GENERATED_AT)

        self.assertNotIn(NO_DATA_MESSAGE, all_texts(document))
        self.assertEqual(count_ops(document, "path"), 1)
        self.assertEqual(table_rows(document, 170), 3)

    def test_report_filename(self) -> None:
        report = compose_annual_report(year_series(), 2026, generated_at=GENERATED_AT)
        self.assertEqual(report.filename, "relatorio_anual_2026.pdf")


class FullAnalyticsReportTests(unittest.TestCase):
    def test_executive_summary_and_top_products(self) -> None:
        document = build_full_analytics_document(analytics_data(), generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertIn("87.5%", texts)
        self.assertIn("410", texts)
        self.assertIn("Ativas: 80 (50.0%)", texts)
        self.assertIn("Detergente Indu", texts)
        self.assertIn("Resina", texts)
        self.assertNotIn("Verniz", texts)

    def test_history_starts_on_fresh_page_with_last_twelve_months(self) -> None:
        document = build_full_analytics_document(analytics_data(), generated_at=GENERATED_AT)

        history_pages = [
            index
            for index in range(document.page_count)
            if "EVOLUÇÃO HISTÓRICA" in page_texts(document, index)
        ]
        self.assertEqual(len(history_pages), 1)
        title = next(
            command
            for command in document.pages[history_pages[0]].ops("text")
            if command.args[0] == "EVOLUÇÃO HISTÓRICA"
        )
        self.assertEqual(title.args[2], 25)

        texts = all_texts(document)
        self.assertEqual(table_rows(document, 140), 12)
        self.assertIn("2026-02", texts)
        self.assertIn("2025-03", texts)
        self.assertNotIn("2025-02", texts)

    def test_zero_status_and_no_history(self) -> None:
        data = analytics_data(
            evolucao_mensal=(),
            produtos_populares=(),
            distribuicao_status=StatusDistribution(0, 0, 0),
        )
        document = build_full_analytics_document(data, generated_at=GENERATED_AT)
        texts = all_texts(document)

        self.assertEqual(count_ops(document, "path"), 0)
        self.assertIn("Ativas: 0 (0.0%)", texts)
        self.assertNotIn("TOP PRODUTOS", texts)
        self.assertNotIn("EVOLUÇÃO HISTÓRICA", texts)

    def test_chart_snapshot_is_embedded_on_its_own_page(self) -> None:
        without_image = build_full_analytics_document(analytics_data(), generated_at=GENERATED_AT)
        document = build_full_analytics_document(
            analytics_data(chart_snapshot=png_bytes()), generated_at=GENERATED_AT
        )

        self.assertEqual(document.page_count, without_image.page_count + 1)
        self.assertEqual(len(document.pages[-1].ops("image")), 1)

    def test_broken_chart_snapshot_falls_back_to_notice(self) -> None:
        with self.assertLogs("bombona_reports.layout", level="WARNING"):
            report = compose_full_analytics_report(
                analytics_data(chart_snapshot=b"not a png"), generated_at=GENERATED_AT
            )
        self.assertTrue(report.content.startswith(b"%PDF"))

        document = build_full_analytics_document(
            analytics_data(chart_snapshot=b"not a png"), generated_at=GENERATED_AT
        )
        self.assertIn(IMAGE_FALLBACK_NOTICE, page_texts(document, document.page_count - 1))

    def test_chart_snapshot_with_corrupt_pixel_data_falls_back_to_notice(self) -> None:
        snapshot = png_bytes(idat=b"not-zlib-data")
        with self.assertLogs("bombona_reports.layout", level="WARNING"):
            report = compose_full_analytics_report(
                analytics_data(chart_snapshot=snapshot), generated_at=GENERATED_AT
            )
        self.assertTrue(report.content.startswith(b"%PDF"))
        self.assertEqual(len(PAGE_PATTERN.findall(report.content)), report.page_count)

        with self.assertLogs("bombona_reports.layout", level="WARNING"):
            document = build_full_analytics_document(
                analytics_data(chart_snapshot=snapshot), generated_at=GENERATED_AT
            )
        last_page = document.pages[-1]
        self.assertIn(IMAGE_FALLBACK_NOTICE, page_texts(document, document.page_count - 1))
        self.assertEqual(last_page.ops("image"), [])

    def test_report_filename_uses_generation_date(self) -> None:
        report = compose_full_analytics_report(analytics_data(), generated_at=GENERATED_AT)
        self.assertEqual(report.filename, "relatorio_analytics_completo_2026-10-19.pdf")


class GenerateReportTests(unittest.TestCase):
    def test_dispatches_by_request_kind(self) -> None:
        cases = (
            (MonthlyReportRequest(monthly_metrics(), 3, 2026), "relatorio_mensal_03_2026.pdf"),
            (AnnualReportRequest(year_series(), 2026), "relatorio_anual_2026.pdf"),
            (FullAnalyticsReportRequest(analytics_data()), "relatorio_analytics_completo_2026-10-19.pdf"),
        )
        for request, filename in cases:
            with self.subTest(kind=request.kind):
                report = generate_report(request, generated_at=GENERATED_AT)
                self.assertEqual(report.filename, filename)

    def test_unknown_request_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unsupported report request"):
            generate_report(object())  # type: ignore[arg-type]

    def test_repeat_header_profile_is_honoured(self) -> None:
        profile = replace(DEFAULT_REPORT_PROFILE, repeat_table_header=True)
        long_series = tuple(
            MonthlySnapshot(f"M{index:02d}", 1, 1, 1, 1) for index in range(30)
        )
        document = build_annual_document(long_series, 2026, profile=profile, generated_at=GENERATED_AT)

        header_labels = all_texts(document).count("NOVOS USU.")
        self.assertEqual(header_labels, 2)
        self.assertEqual(table_rows(document, 170), 30)


if __name__ == "__main__":
    unittest.main()

"""Aggregated metrics snapshots consumed by the report composers.

Each snapshot is produced by the aggregation layer and only read here.
`from_mapping` accepts decoded JSON and raises `DataShapeError` before any
drawing happens.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import DataShapeError


def _require_mapping(payload: Any, *, where: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        msg = f"{where} must be an object."
        raise DataShapeError(msg)
    return payload


def _require_list(payload: Mapping[str, Any], key: str, *, where: str) -> Sequence[Any]:
    if key not in payload:
        msg = f"missing required field '{where}{key}'."
        raise DataShapeError(msg)
    value = payload[key]
    if not isinstance(value, (list, tuple)):
        msg = f"field '{where}{key}' must be a list."
        raise DataShapeError(msg)
    return value


def _require_count(payload: Mapping[str, Any], key: str, *, where: str = "") -> int:
    if key not in payload:
        msg = f"missing required field '{where}{key}'."
        raise DataShapeError(msg)
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"field '{where}{key}' must be a number."
        raise DataShapeError(msg)
    if isinstance(value, float):
        if not value.is_integer():
            msg = f"field '{where}{key}' must be a whole number."
            raise DataShapeError(msg)
        value = int(value)
    if value < 0:
        msg = f"field '{where}{key}' must be >= 0."
        raise DataShapeError(msg)
    return value


def _require_rate(payload: Mapping[str, Any], key: str, *, where: str = "") -> float:
    if key not in payload:
        msg = f"missing required field '{where}{key}'."
        raise DataShapeError(msg)
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"field '{where}{key}' must be a number."
        raise DataShapeError(msg)
    if not math.isfinite(value):
        msg = f"field '{where}{key}' must be a finite number."
        raise DataShapeError(msg)
    return float(value)


def _require_text(payload: Mapping[str, Any], key: str, *, where: str = "", default: str | None = None) -> str:
    if key not in payload or payload[key] is None:
        if default is not None:
            return default
        msg = f"missing required field '{where}{key}'."
        raise DataShapeError(msg)
    value = payload[key]
    if not isinstance(value, str):
        msg = f"field '{where}{key}' must be a string."
        raise DataShapeError(msg)
    return value


@dataclass(frozen=True)
class MonthlyMetrics:
    """Counts for a single month."""

    total_bombonas: int
    bombonas_ativas: int
    bombonas_em_uso: int
    total_usuarios: int
    ciclos_mensais: int
    produtos_mais_utilizados: str = ""

    @property
    def bombonas_inativas(self) -> int:
        return max(0, self.total_bombonas - self.bombonas_ativas)

    @classmethod
    def from_mapping(cls, payload: Any) -> MonthlyMetrics:
        data = _require_mapping(payload, where="monthly metrics")
        return cls(
            total_bombonas=_require_count(data, "total_bombonas"),
            bombonas_ativas=_require_count(data, "bombonas_ativas"),
            bombonas_em_uso=_require_count(data, "bombonas_em_uso"),
            total_usuarios=_require_count(data, "total_usuarios"),
            ciclos_mensais=_require_count(data, "ciclos_mensais"),
            produtos_mais_utilizados=_require_text(data, "produtos_mais_utilizados", default=""),
        )


@dataclass(frozen=True)
class MonthlySnapshot:
    """One month of an annual or historical series."""

    mes: str
    total_bombonas: int
    bombonas_ativas: int
    bombonas_em_uso: int
    novos_usuarios: int

    @classmethod
    def from_mapping(cls, payload: Any, *, where: str = "") -> MonthlySnapshot:
        data = _require_mapping(payload, where=where.rstrip(".") or "monthly snapshot")
        return cls(
            mes=_require_text(data, "mes", where=where),
            total_bombonas=_require_count(data, "total_bombonas", where=where),
            bombonas_ativas=_require_count(data, "bombonas_ativas", where=where),
            bombonas_em_uso=_require_count(data, "bombonas_em_uso", where=where),
            novos_usuarios=_require_count(data, "novos_usuarios", where=where),
        )

    def as_row(self) -> dict[str, Any]:
        return {
            "mes": self.mes,
            "total_bombonas": self.total_bombonas,
            "bombonas_ativas": self.bombonas_ativas,
            "bombonas_em_uso": self.bombonas_em_uso,
            "novos_usuarios": self.novos_usuarios,
        }


def series_from_payload(payload: Any, *, where: str = "series") -> tuple[MonthlySnapshot, ...]:
    """Parse a list of monthly snapshots."""
    if not isinstance(payload, (list, tuple)):
        msg = f"{where} must be a list."
        raise DataShapeError(msg)
    return tuple(
        MonthlySnapshot.from_mapping(item, where=f"{where}[{index}].")
        for index, item in enumerate(payload)
    )


@dataclass(frozen=True)
class AnalyticsSummary:
    total_bombonas_historico: int
    total_usuarios: int
    total_ciclos: int
    taxa_reutilizacao: float


@dataclass(frozen=True)
class ProductUsage:
    produto: str
    uso_count: int


@dataclass(frozen=True)
class StatusDistribution:
    ativas: int
    em_uso: int
    inativas: int

    @property
    def total(self) -> int:
        return self.ativas + self.em_uso + self.inativas


@dataclass(frozen=True)
class AnalyticsData:
    """Historical snapshot for the full analytics report."""

    resumo_geral: AnalyticsSummary
    evolucao_mensal: tuple[MonthlySnapshot, ...]
    produtos_populares: tuple[ProductUsage, ...]
    distribuicao_status: StatusDistribution
    chart_snapshot: bytes | None = None

    @classmethod
    def from_mapping(cls, payload: Any) -> AnalyticsData:
        data = _require_mapping(payload, where="analytics data")

        summary = _require_mapping(data.get("resumo_geral"), where="field 'resumo_geral'")
        status = _require_mapping(data.get("distribuicao_status"), where="field 'distribuicao_status'")
        products = _require_list(data, "produtos_populares", where="")

        parsed_products: list[ProductUsage] = []
        for index, item in enumerate(products):
            where = f"produtos_populares[{index}]."
            product = _require_mapping(item, where=where.rstrip("."))
            parsed_products.append(
                ProductUsage(
                    produto=_require_text(product, "produto", where=where),
                    uso_count=_require_count(product, "uso_count", where=where),
                )
            )

        return cls(
            resumo_geral=AnalyticsSummary(
                total_bombonas_historico=_require_count(
                    summary, "total_bombonas_historico", where="resumo_geral."
                ),
                total_usuarios=_require_count(summary, "total_usuarios", where="resumo_geral."),
                total_ciclos=_require_count(summary, "total_ciclos", where="resumo_geral."),
                taxa_reutilizacao=_require_rate(summary, "taxa_reutilizacao", where="resumo_geral."),
            ),
            evolucao_mensal=series_from_payload(
                _require_list(data, "evolucao_mensal", where=""), where="evolucao_mensal"
            ),
            produtos_populares=tuple(parsed_products),
            distribuicao_status=StatusDistribution(
                ativas=_require_count(status, "ativas", where="distribuicao_status."),
                em_uso=_require_count(status, "em_uso", where="distribuicao_status."),
                inativas=_require_count(status, "inativas", where="distribuicao_status."),
            ),
        )

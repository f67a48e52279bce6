"""
Response models for the analytics endpoints.

Field names are Pythonic; aliases carry the JSON keys the dashboard consumes.
Responses serialize by alias, models are built by field name.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AppliedFilters(ReportModel):
    """Echo of the request parameters a report was computed with."""

    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    limit: int | None = None
    include_incomplete: bool | None = Field(default=None, alias="includeIncomplete")
    compare_with: str | None = Field(default=None, alias="compareWith")
    sort_by: str | None = Field(default=None, alias="sortBy")
    category: str | None = None


class ComparisonSummary(ReportModel):
    """Scalar comparison against a shifted window."""

    compare_with: str = Field(alias="compareWith")
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    previous_average_efficiency: float = Field(alias="previousAverageEfficiency")
    change_percentage: float = Field(alias="changePercentage")


# Throughput per hour


class ThroughputRowResponse(ReportModel):
    product_id: int = Field(alias="productoId")
    product_name: str = Field(alias="productoNombre")
    line_id: int = Field(alias="lineaProduccionId")
    line_name: str = Field(alias="lineaProduccionNombre")
    average_boxes_per_hour: float = Field(alias="promedioCajasHora")
    planned_speed: float = Field(alias="velocidadPlan")
    efficiency: float = Field(alias="eficiencia")
    deviation: float = Field(alias="desviacion")
    total_records: int = Field(alias="totalRegistros")


class HourlyEfficiencyResponse(ReportModel):
    data: list[ThroughputRowResponse]
    average_efficiency: float = Field(alias="averageEfficiency")
    positive_deviation_average: float = Field(alias="promedioDesviacionPositiva")
    negative_deviation_average: float = Field(alias="promedioDesviacionNegativa")
    total_groups: int = Field(alias="totalProductosLinea")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")
    comparison: ComparisonSummary | None = None


# Planned vs. actual time


class TimePlanRowResponse(ReportModel):
    id: str
    name: str = Field(alias="nombre")
    planned_hours: float = Field(alias="tiempoPlan")
    actual_hours: float = Field(alias="tiempoReal")
    difference: float = Field(alias="diferencia")
    deviation_percentage: float = Field(alias="diferenciaPorcentaje")
    total_orders: int = Field(alias="totalOrdenes")
    average_completion: float = Field(alias="porcentajePromedioCumplimiento")


class TimePlanResponse(ReportModel):
    data: list[TimePlanRowResponse]
    positive_deviation_average: float = Field(alias="promedioDesviacionPositiva")
    negative_deviation_average: float = Field(alias="promedioDesviacionNegativa")
    completed_only: bool = Field(alias="filtroCompletadas")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class ShiftTimePlanResponse(TimePlanResponse):
    total_groups: int = Field(alias="totalTurnos")


class OperatorTimePlanResponse(TimePlanResponse):
    total_groups: int = Field(alias="totalOperadores")


class LineTimePlanResponse(TimePlanResponse):
    total_groups: int = Field(alias="totalLineas")


# Produced vs. planned boxes


class BoxEfficiencyRowResponse(ReportModel):
    id: str
    name: str
    efficiency: float
    produced_boxes: int = Field(alias="totalProduced")
    planned_boxes: int = Field(alias="totalPlanned")


class BoxEfficiencyResponse(ReportModel):
    data: list[BoxEfficiencyRowResponse]
    average_efficiency: float = Field(alias="averageEfficiency")
    total_produced: int = Field(alias="totalProduced")
    total_planned: int = Field(alias="totalPlanned")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")
    comparison: ComparisonSummary | None = None


class LineEfficiencyResponse(BoxEfficiencyResponse):
    total_groups: int = Field(alias="totalLines")


class ShiftEfficiencyResponse(BoxEfficiencyResponse):
    total_groups: int = Field(alias="totalShifts")


# Heatmaps and product totals


class HourBucketResponse(ReportModel):
    hour: str
    hour_index: int = Field(alias="hourIndex")
    boxes: int = Field(alias="cajasProducidas")
    liters: float = Field(alias="litrosProducidos")
    records: int = Field(alias="totalRegistros")


class HourHeatmapResponse(ReportModel):
    data: list[HourBucketResponse]
    total_boxes: int = Field(alias="totalCajas")
    total_liters: float = Field(alias="totalLitros")
    max_boxes: int = Field(alias="maxCajasHora")
    max_liters: float = Field(alias="maxLitrosHora")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class DayBucketResponse(ReportModel):
    day: str
    day_index: int = Field(alias="dayIndex")
    boxes: int = Field(alias="cajasProducidas")
    liters: float = Field(alias="litrosProducidos")
    records: int = Field(alias="totalRegistros")


class DayHeatmapResponse(ReportModel):
    data: list[DayBucketResponse]
    total_boxes: int = Field(alias="totalCajas")
    total_liters: float = Field(alias="totalLitros")
    max_boxes: int = Field(alias="maxCajasDia")
    max_liters: float = Field(alias="maxLitrosDia")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class ProductProductionRowResponse(ReportModel):
    product_id: int = Field(alias="productoId")
    name: str
    boxes: int = Field(alias="cajas")
    planned_boxes: int = Field(alias="planificadas")
    liters: float = Field(alias="litros")
    completion: float = Field(alias="cumplimiento")


class ProductProductionResponse(ReportModel):
    data: list[ProductProductionRowResponse]
    total_boxes: int = Field(alias="totalCajas")
    total_liters: float = Field(alias="totalLitros")
    total_products: int = Field(alias="totalProductos")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class GroupProductionRowResponse(ReportModel):
    """Totals for one flavor or one unit size."""

    name: str
    boxes: int = Field(alias="cajas")
    planned_boxes: int = Field(alias="planificadas")
    liters: float = Field(alias="litros")
    completion: float = Field(alias="cumplimiento")
    products: int = Field(alias="productos")


class GroupProductionResponse(ReportModel):
    data: list[GroupProductionRowResponse]
    total_boxes: int = Field(alias="totalCajas")
    total_liters: float = Field(alias="totalLitros")
    total_groups: int = Field(alias="totalGrupos")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


# Stoppages


class StopCategoryRowResponse(ReportModel):
    category: str = Field(alias="categoria")
    count: int = Field(alias="cantidad")
    total_minutes: float = Field(alias="tiempo_total")
    percentage: float = Field(alias="porcentaje")


class StopLineRowResponse(ReportModel):
    id: int
    name: str
    count: int = Field(alias="cantidad")
    total_minutes: float = Field(alias="tiempo_total")
    percentage: float = Field(alias="porcentaje")
    minutes_by_category: dict[str, float] = Field(alias="minutosPorCategoria")


class StopsByCategoryResponse(ReportModel):
    data: list[StopCategoryRowResponse]
    total_stops: int = Field(alias="totalParos")
    total_minutes: float = Field(alias="tiempoTotal")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class StopsByLineResponse(ReportModel):
    data: list[StopLineRowResponse]
    total_stops: int = Field(alias="totalParos")
    total_minutes: float = Field(alias="tiempoTotal")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")


class StopSubsystemRowResponse(ReportModel):
    id: int
    name: str
    system_id: int = Field(alias="sistemaId")
    system: str = Field(alias="sistema")
    line: str = Field(alias="linea")
    count: int = Field(alias="cantidad")
    total_minutes: float = Field(alias="tiempo_total")
    percentage: float = Field(alias="porcentaje")


class StopSystemRowResponse(ReportModel):
    id: int
    name: str
    line: str = Field(alias="linea")
    count: int = Field(alias="cantidad")
    total_minutes: float = Field(alias="tiempo_total")
    percentage: float = Field(alias="porcentaje")
    subsystems: int = Field(alias="subsistemas")


class StopsBySubsystemResponse(ReportModel):
    """
    Stoppages attributed to a subsystem, with the same minutes rolled up per
    system. Percentages are shares of the attributed minutes; stoppages
    without a subsystem are only counted in ``unattributed_stops``.
    """

    data: list[StopSubsystemRowResponse]
    systems: list[StopSystemRowResponse] = Field(alias="sistemas")
    total_stops: int = Field(alias="totalParos")
    total_minutes: float = Field(alias="tiempoTotal")
    unattributed_stops: int = Field(alias="parosSinSubsistema")
    applied_filters: AppliedFilters = Field(alias="appliedFilters")

"""
Stoppage (paro) report query service.
"""

from linedash.application.dtos import (
    StopCategoryRowResponse,
    StopLineRowResponse,
    StopsByCategoryResponse,
    StopsByLineResponse,
    StopsBySubsystemResponse,
    StopSubsystemRowResponse,
    StopSystemRowResponse,
)
from linedash.core.observability import monitor_report
from linedash.domain.efficiency import ReportWindow, round_to
from linedash.infrastructure.database.repositories import (
    ProductionLineRepository,
    StoppageRepository,
)
from linedash.models import StopCategory

from .base_query import BaseQueryService


class StoppageQueryService(BaseQueryService):
    """
    Counts and downtime minutes of stoppages created within a window.

    The category and line reports list every category and every line, with
    zeros where nothing stopped.
    """

    def __init__(self, session):
        super().__init__(session)
        self.stoppages = StoppageRepository(session)
        self.lines = ProductionLineRepository(session)

    @monitor_report("stops_by_category")
    def stops_by_category(self, window: ReportWindow) -> StopsByCategoryResponse:
        counts = {category: 0 for category in StopCategory}
        minutes = {category: 0.0 for category in StopCategory}
        for stoppage, _line in self.stoppages.find_in_window(window.start, window.end):
            category = StopCategory(stoppage.category)
            counts[category] += 1
            minutes[category] += stoppage.duration_minutes

        total_minutes = sum(minutes.values())
        rows = [
            StopCategoryRowResponse(
                category=category.value,
                count=counts[category],
                total_minutes=round_to(minutes[category], 1),
                percentage=round_to(
                    self.calculate_percentage(minutes[category], total_minutes), 1
                ),
            )
            for category in StopCategory
        ]
        rows.sort(key=lambda r: -r.total_minutes)

        return StopsByCategoryResponse(
            data=rows,
            total_stops=sum(counts.values()),
            total_minutes=round_to(total_minutes, 1),
            applied_filters=self.applied_filters(window),
        )

    @monitor_report("stops_by_line")
    def stops_by_line(self, window: ReportWindow) -> StopsByLineResponse:
        lines = {line.id: line for line in self.lines.get_all()}
        counts = {line_id: 0 for line_id in lines}
        minutes = {line_id: 0.0 for line_id in lines}
        by_category = {
            line_id: {category.value: 0.0 for category in StopCategory}
            for line_id in lines
        }
        for stoppage, line in self.stoppages.find_in_window(window.start, window.end):
            category = StopCategory(stoppage.category)
            counts[line.id] += 1
            minutes[line.id] += stoppage.duration_minutes
            by_category[line.id][category.value] += stoppage.duration_minutes

        total_minutes = sum(minutes.values())
        rows = [
            StopLineRowResponse(
                id=line_id,
                name=line.name,
                count=counts[line_id],
                total_minutes=round_to(minutes[line_id], 1),
                percentage=round_to(
                    self.calculate_percentage(minutes[line_id], total_minutes), 1
                ),
                minutes_by_category={
                    key: round_to(value, 1)
                    for key, value in by_category[line_id].items()
                },
            )
            for line_id, line in lines.items()
        ]
        rows.sort(key=lambda r: (-r.total_minutes, r.name))

        return StopsByLineResponse(
            data=rows,
            total_stops=sum(counts.values()),
            total_minutes=round_to(total_minutes, 1),
            applied_filters=self.applied_filters(window),
        )

    @monitor_report("stops_by_subsystem")
    def stops_by_subsystem(
        self, window: ReportWindow, category: StopCategory | None = None
    ) -> StopsBySubsystemResponse:
        """
        Stoppages per subsystem, optionally of one category, rolled up per
        system. Only subsystems and systems that stopped are listed.
        """
        subsystems: dict[int, dict] = {}
        systems: dict[int, dict] = {}
        unattributed = 0
        records = self.stoppages.find_with_subsystem_in_window(
            window.start, window.end, category
        )
        for stoppage, subsystem, system, line in records:
            if subsystem is None:
                unattributed += 1
                continue
            line_name = line.name if line else ""
            sub_row = subsystems.setdefault(
                subsystem.id,
                {
                    "name": subsystem.name,
                    "system": system,
                    "line": line_name,
                    "count": 0,
                    "minutes": 0.0,
                },
            )
            sub_row["count"] += 1
            sub_row["minutes"] += stoppage.duration_minutes

            system_row = systems.setdefault(
                system.id,
                {
                    "name": system.name,
                    "line": line_name,
                    "count": 0,
                    "minutes": 0.0,
                    "subsystems": set(),
                },
            )
            system_row["count"] += 1
            system_row["minutes"] += stoppage.duration_minutes
            system_row["subsystems"].add(subsystem.id)

        total_minutes = sum(row["minutes"] for row in subsystems.values())
        rows = [
            StopSubsystemRowResponse(
                id=subsystem_id,
                name=row["name"],
                system_id=row["system"].id,
                system=row["system"].name,
                line=row["line"],
                count=row["count"],
                total_minutes=round_to(row["minutes"], 1),
                percentage=round_to(
                    self.calculate_percentage(row["minutes"], total_minutes), 1
                ),
            )
            for subsystem_id, row in subsystems.items()
        ]
        rows.sort(key=lambda r: (-r.total_minutes, r.system, r.name))

        system_rows = [
            StopSystemRowResponse(
                id=system_id,
                name=row["name"],
                line=row["line"],
                count=row["count"],
                total_minutes=round_to(row["minutes"], 1),
                percentage=round_to(
                    self.calculate_percentage(row["minutes"], total_minutes), 1
                ),
                subsystems=len(row["subsystems"]),
            )
            for system_id, row in systems.items()
        ]
        system_rows.sort(key=lambda r: (-r.total_minutes, r.name))

        return StopsBySubsystemResponse(
            data=rows,
            systems=system_rows,
            total_stops=sum(row["count"] for row in subsystems.values()),
            total_minutes=round_to(total_minutes, 1),
            unattributed_stops=unattributed,
            applied_filters=self.applied_filters(
                window, category=category.value if category else None
            ),
        )

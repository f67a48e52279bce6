"""
Production order application service.

Coordinates order creation and the order lifecycle: pending -> in_progress ->
completed. Hourly logging only ever adds to ``produced_boxes``.
"""

from datetime import datetime

from linedash.core.observability import get_logger
from linedash.domain.shared.exceptions import (
    BusinessRuleViolation,
    EntityAlreadyExistsError,
)
from linedash.infrastructure.database.repositories import (
    ProductionLineRepository,
    ProductionOrderRepository,
    ProductRepository,
    StoppageRepository,
    SubsystemRepository,
)
from linedash.models import (
    HourlyProductionEntry,
    OrderStatus,
    ProductionOrder,
    ProductionOrderCreate,
    Stoppage,
    StoppageCreate,
)

from .base_service import ApplicationServiceBase

logger = get_logger(__name__)


class ProductionService(ApplicationServiceBase):
    """
    Application service for production orders and their raw records.
    """

    def __init__(self, session):
        super().__init__(session)
        self.orders = ProductionOrderRepository(session)
        self.stoppages = StoppageRepository(session)
        self.lines = ProductionLineRepository(session)
        self.products = ProductRepository(session)
        self.subsystems = SubsystemRepository(session)

    def create_order(self, request: ProductionOrderCreate) -> ProductionOrder:
        """
        Create a new production order in ``pending`` status.

        Raises:
            ValidationError: If the order number is blank
            EntityNotFoundError: If the line or product does not exist
            EntityAlreadyExistsError: If the order number is taken
        """
        self.validate_non_empty_string(request.order_number, "order_number")
        self.lines.get_by_id_required(request.production_line_id)
        self.products.get_by_id_required(request.product_id)

        if self.orders.find_by_order_number(request.order_number):
            raise EntityAlreadyExistsError(
                f"Production order {request.order_number} already exists"
            )

        request.production_date = self.as_naive_utc(request.production_date)
        order = self.orders.create(request)
        logger.info(
            "Production order created",
            order_id=order.id,
            order_number=order.order_number,
            line_id=order.production_line_id,
            product_id=order.product_id,
        )
        return order

    def get_order(self, order_id: int) -> ProductionOrder:
        return self.orders.get_by_id_required(order_id)

    def list_orders(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        status: OrderStatus | None = None,
        line_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ProductionOrder]:
        return self.orders.find_orders(
            start=start,
            end=end,
            status=status,
            line_id=line_id,
            limit=limit,
            offset=offset,
        )

    def start_order(self, order_id: int) -> ProductionOrder:
        """
        Move a pending order to ``in_progress``.

        Raises:
            EntityNotFoundError: If the order does not exist
            BusinessRuleViolation: If the order is not pending
        """
        order = self.orders.get_by_id_required(order_id)
        if order.status != OrderStatus.PENDING:
            raise BusinessRuleViolation(
                f"Order {order.order_number} cannot be started from status "
                f"{OrderStatus(order.status).value}",
                {"order_id": order_id},
            )
        order.status = OrderStatus.IN_PROGRESS
        order.last_update_time = datetime.utcnow()
        order = self.orders.save(order)
        logger.info("Production order started", order_id=order_id)
        return order

    def record_hourly_production(
        self, order_id: int, boxes: int, recorded_at: datetime | None = None
    ) -> HourlyProductionEntry:
        """
        Log one hour of output and add it to the order's produced boxes.

        Raises:
            ValidationError: If ``boxes`` is negative
            EntityNotFoundError: If the order does not exist
            BusinessRuleViolation: If the order is already completed
        """
        self.validate_non_negative(boxes, "boxes")
        order = self.orders.get_by_id_required(order_id)
        if order.status == OrderStatus.COMPLETED:
            raise BusinessRuleViolation(
                f"Order {order.order_number} is completed; production can no longer "
                "be logged",
                {"order_id": order_id},
            )

        entry = self.orders.add_hourly_entry(
            order, boxes, self.as_naive_utc(recorded_at or datetime.utcnow())
        )
        logger.info(
            "Hourly production logged",
            order_id=order_id,
            boxes=boxes,
            produced_boxes=order.produced_boxes,
        )
        return entry

    def finish_order(
        self, order_id: int, elapsed_hours: float | None = None
    ) -> ProductionOrder:
        """
        Complete an order, recording residual hours worked after the last
        hourly entry.

        Raises:
            ValidationError: If ``elapsed_hours`` is negative
            EntityNotFoundError: If the order does not exist
            BusinessRuleViolation: If the order is already completed
        """
        self.validate_non_negative(elapsed_hours, "elapsed_hours")
        order = self.orders.get_by_id_required(order_id)
        if order.status == OrderStatus.COMPLETED:
            raise BusinessRuleViolation(
                f"Order {order.order_number} is already completed",
                {"order_id": order_id},
            )

        order = self.orders.finish(order, elapsed_hours, datetime.utcnow())
        logger.info(
            "Production order finished",
            order_id=order_id,
            elapsed_hours=elapsed_hours,
            produced_boxes=order.produced_boxes,
            planned_boxes=order.planned_boxes,
        )
        return order

    def record_stoppage(self, order_id: int, request: StoppageCreate) -> Stoppage:
        """
        Record a stoppage against an order.

        Raises:
            EntityNotFoundError: If the order or referenced subsystem does not exist
        """
        self.orders.get_by_id_required(order_id)
        if request.subsystem_id is not None:
            self.subsystems.get_by_id_required(request.subsystem_id)

        stoppage = self.stoppages.create(request, order_id=order_id)
        logger.info(
            "Stoppage recorded",
            order_id=order_id,
            category=stoppage.category,
            duration_minutes=stoppage.duration_minutes,
        )
        return stoppage

    def list_stoppages(self, order_id: int) -> list[Stoppage]:
        self.orders.get_by_id_required(order_id)
        return self.stoppages.find_for_order(order_id)

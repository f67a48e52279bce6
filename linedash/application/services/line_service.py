"""
Production line application service: the equipment hierarchy, the product
catalogue and planned speeds per (product, line).
"""

from linedash.core.observability import get_logger
from linedash.domain.shared.exceptions import EntityAlreadyExistsError, EntityNotFoundError
from linedash.infrastructure.database.repositories import (
    PlannedSpeedRepository,
    ProductionLineRepository,
    ProductionSystemRepository,
    ProductRepository,
    SubsubsystemRepository,
    SubsystemRepository,
)
from linedash.models import (
    Product,
    ProductCreate,
    ProductionLine,
    ProductionLineCreate,
    ProductionLineTree,
    ProductionSystem,
    ProductionSystemCreate,
    ProductOnLine,
    Subsubsystem,
    SubsubsystemCreate,
    Subsystem,
    SubsystemCreate,
)

from .base_service import ApplicationServiceBase

logger = get_logger(__name__)


class LineService(ApplicationServiceBase):
    def __init__(self, session):
        super().__init__(session)
        self.lines = ProductionLineRepository(session)
        self.systems = ProductionSystemRepository(session)
        self.subsystems = SubsystemRepository(session)
        self.subsubsystems = SubsubsystemRepository(session)
        self.products = ProductRepository(session)
        self.planned_speeds = PlannedSpeedRepository(session)

    # Hierarchy

    def create_line(self, request: ProductionLineCreate) -> ProductionLine:
        """
        Raises:
            EntityAlreadyExistsError: If a line with the same name exists
        """
        self.validate_non_empty_string(request.name, "name")
        if self.lines.find_by_name(request.name):
            raise EntityAlreadyExistsError(
                f"Production line '{request.name}' already exists"
            )
        line = self.lines.create(request)
        logger.info("Production line created", line_id=line.id, name=line.name)
        return line

    def list_lines(self) -> list[ProductionLine]:
        return self.lines.get_all()

    def get_line_tree(self, line_id: int) -> ProductionLineTree:
        """The line with its systems, subsystems and sub-subsystems."""
        line = self.lines.find_with_tree(line_id)
        if line is None:
            raise EntityNotFoundError("ProductionLine", line_id)
        return ProductionLineTree.model_validate(line)

    def add_system(
        self, line_id: int, request: ProductionSystemCreate
    ) -> ProductionSystem:
        self.lines.get_by_id_required(line_id)
        return self.systems.create(request, production_line_id=line_id)

    def add_subsystem(self, system_id: int, request: SubsystemCreate) -> Subsystem:
        self.systems.get_by_id_required(system_id)
        return self.subsystems.create(request, system_id=system_id)

    def add_subsubsystem(
        self, subsystem_id: int, request: SubsubsystemCreate
    ) -> Subsubsystem:
        self.subsystems.get_by_id_required(subsystem_id)
        return self.subsubsystems.create(request, subsystem_id=subsystem_id)

    # Catalogue

    def create_product(self, request: ProductCreate) -> Product:
        """
        Raises:
            EntityAlreadyExistsError: If a product with the same name exists
        """
        self.validate_non_empty_string(request.name, "name")
        if self.products.find_by_name(request.name):
            raise EntityAlreadyExistsError(f"Product '{request.name}' already exists")
        product = self.products.create(request)
        logger.info("Product created", product_id=product.id, name=product.name)
        return product

    def list_products(self) -> list[Product]:
        return self.products.get_all()

    # Planned speeds

    def set_planned_speed(
        self, line_id: int, product_id: int, boxes_per_hour: float
    ) -> ProductOnLine:
        """
        Create or replace the planned speed of a product on a line. Zero clears
        the plan without deleting the pair.

        Raises:
            ValidationError: If ``boxes_per_hour`` is negative
            EntityNotFoundError: If the line or product does not exist
        """
        self.validate_non_negative(boxes_per_hour, "boxes_per_hour")
        self.lines.get_by_id_required(line_id)
        self.products.get_by_id_required(product_id)
        planned = self.planned_speeds.upsert(product_id, line_id, boxes_per_hour)
        logger.info(
            "Planned speed set",
            line_id=line_id,
            product_id=product_id,
            boxes_per_hour=boxes_per_hour,
        )
        return planned

    def get_planned_speed(self, line_id: int, product_id: int) -> ProductOnLine:
        planned = self.planned_speeds.find_pair(product_id, line_id)
        if planned is None:
            raise EntityNotFoundError(
                "ProductOnLine", f"product {product_id} on line {line_id}"
            )
        return planned

    def list_planned_speeds(self, line_id: int) -> list[ProductOnLine]:
        self.lines.get_by_id_required(line_id)
        return self.planned_speeds.find_for_line(line_id)

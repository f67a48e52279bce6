"""
Shared persistence for the SQLModel tables: create, save, get by id, list.

Concrete repositories extend this class with the queries their aggregate
needs. SQLAlchemy failures are re-raised as domain exceptions so routes never
see driver errors.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from linedash.domain.shared.exceptions import (
    DatabaseError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
)

EntityType = TypeVar("EntityType", bound=SQLModel)
CreateType = TypeVar("CreateType", bound=SQLModel)


class BaseRepository(Generic[EntityType, CreateType], ABC):
    """
    Persistence for one table. Subclasses name the table through
    ``entity_class``.
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    @abstractmethod
    def entity_class(self) -> type[EntityType]:
        """The SQLModel table class this repository reads and writes."""

    def create(self, entity_data: CreateType | dict, **extra) -> EntityType:
        """
        Create a new entity.

        Args:
            entity_data: Create model or mapping with the entity fields
            extra: Additional fields not part of the create model (foreign keys)

        Raises:
            EntityAlreadyExistsError: If a unique constraint is violated
            DatabaseError: If database operation fails
        """
        if isinstance(entity_data, dict):
            values = dict(entity_data)
        else:
            values = entity_data.model_dump()
        values.update(extra)
        entity = self.entity_class(**values)
        return self.save(entity)

    def save(self, entity: EntityType) -> EntityType:
        """Persist a new or modified entity and refresh it."""
        try:
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
            return entity
        except IntegrityError as e:
            self.session.rollback()
            raise EntityAlreadyExistsError(
                f"{self.entity_class.__name__} already exists or references a "
                f"missing record: {e.orig}"
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(f"Database error during save: {str(e)}") from e

    def get_by_id(self, entity_id: int) -> EntityType | None:
        try:
            return self.session.get(self.entity_class, entity_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_by_id: {str(e)}") from e

    def get_by_id_required(self, entity_id: int) -> EntityType:
        """
        Like ``get_by_id`` but a missing row is an error.

        Raises:
            EntityNotFoundError: If entity not found
            DatabaseError: If database operation fails
        """
        entity = self.get_by_id(entity_id)
        if not entity:
            raise EntityNotFoundError(self.entity_class.__name__, entity_id)
        return entity

    def get_all(self, limit: int | None = None, offset: int = 0) -> list[EntityType]:
        try:
            statement = (
                select(self.entity_class)
                .order_by(self.entity_class.id)  # type: ignore[attr-defined]
                .offset(offset)
            )
            if limit:
                statement = statement.limit(limit)
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_all: {str(e)}") from e

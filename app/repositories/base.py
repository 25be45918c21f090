from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
from sqlalchemy.orm import Session, Query
from sqlalchemy.inspection import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import desc, asc, or_, String, Enum
from pydantic import BaseModel
import logging
import math

from app.core.exceptions import NotFound, Conflict

ModelType = TypeVar("ModelType")

logger = logging.getLogger(__name__)

class CRUDBase(Generic[ModelType]):
    """Persistence primitives shared by the entity repositories.

    Writes commit immediately. Integrity violations are rolled back and
    surface as Conflict; any other database failure is logged and re-raised.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model
        mapper = inspect(model)
        self.pk_column = mapper.primary_key[0]
        self.column_names = {attr.key for attr in mapper.column_attrs}
        # Free-text search only looks at plain string columns, never enums
        self.text_columns = [
            attr.key for attr in mapper.column_attrs
            if isinstance(attr.columns[0].type, String)
            and not isinstance(attr.columns[0].type, Enum)
        ]

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    # =========================================================================
    # READ
    # =========================================================================

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def get_or_raise(self, db: Session, id: Any) -> ModelType:
        obj = self.get(db, id)
        if obj is None:
            raise NotFound(f"{self.entity_name} {id} not found")
        return obj

    def get_by_field(self, db: Session, field_name: str, value: Any) -> Optional[ModelType]:
        if field_name not in self.column_names:
            return None
        return db.query(self.model).filter(getattr(self.model, field_name) == value).first()

    def _build_query(
        self,
        db: Session,
        *,
        filters: Dict[str, Any] = None,
        search: str = None,
    ) -> Query:
        """Equality filters (None values skipped, collections become IN) plus optional text search."""
        query = db.query(self.model)

        for key, value in (filters or {}).items():
            if value is None or key not in self.column_names:
                continue
            column = getattr(self.model, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.filter(column.in_(list(value)))
            else:
                query = query.filter(column == value)

        if search and self.text_columns:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(*[getattr(self.model, name).ilike(pattern) for name in self.text_columns]))

        return query

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        filters: Dict[str, Any] = None,
        search: str = None,
        sort_by: str = None,
        sort_order: str = "asc",
    ) -> Dict[str, Any]:
        """One page of records plus the counters list endpoints return."""
        query = self._build_query(db, filters=filters, search=search)
        total = query.count()

        direction = desc if sort_order.lower() == "desc" else asc
        if sort_by in self.column_names:
            # Primary key breaks ties so pages stay stable
            query = query.order_by(direction(getattr(self.model, sort_by)), direction(self.pk_column))
        else:
            query = query.order_by(direction(self.pk_column))

        items = query.offset(skip).limit(limit).all()
        return {
            "items": items,
            "total": total,
            "page": skip // limit + 1 if limit else 1,
            "size": limit,
            "pages": math.ceil(total / limit) if limit else 1,
            "has_next": skip + len(items) < total,
            "has_prev": skip > 0
        }

    # =========================================================================
    # WRITE
    # =========================================================================

    def _commit(self, db: Session, action: str, message: str) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Integrity violation {action} {self.entity_name}: {e.orig}")
            raise Conflict(message)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error {action} {self.entity_name}: {e}")
            raise

    def create(self, db: Session, *, obj_in: Union[BaseModel, Dict[str, Any]]) -> ModelType:
        data = obj_in.model_dump() if isinstance(obj_in, BaseModel) else dict(obj_in)
        db_obj = self.model(**{k: v for k, v in data.items() if v is not None})
        db.add(db_obj)
        self._commit(db, "creating", f"{self.entity_name} conflicts with an existing record")
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: ModelType, obj_in: Union[BaseModel, Dict[str, Any]]) -> ModelType:
        """Partial update; keys absent or None leave the column untouched."""
        data = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else obj_in
        for field, value in data.items():
            if value is not None and field in self.column_names:
                setattr(db_obj, field, value)
        db.add(db_obj)
        self._commit(db, "updating", f"{self.entity_name} conflicts with an existing record")
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: Any) -> ModelType:
        obj = self.get_or_raise(db, id)
        db.delete(obj)
        self._commit(db, "deleting", f"{self.entity_name} {id} is still referenced")
        return obj

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import Base
from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


@contextmanager
def store_errors(db: Session, operation: str) -> Iterator[None]:
    """Roll back and re-raise driver failures as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure during {operation}: {e}")
        raise StoreError(f"Database operation failed: {operation}", operation=operation) from e


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _primary_key(self):
        return self.model.__mapper__.primary_key[0]

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        with store_errors(db, f"get {self.model.__tablename__}"):
            return db.query(self.model).filter(self._primary_key() == id).first()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        with store_errors(db, f"insert {self.model.__tablename__}"):
            db.add(db_obj)
            db.flush() # Populate ID
            if commit:
                db.commit()
            db.refresh(db_obj) # Refresh to get ID and other defaults
        return db_obj


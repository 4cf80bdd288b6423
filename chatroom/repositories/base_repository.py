from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.database import Base
from chatroom.errors import DuplicateKeyError, StoreError
from chatroom.logger import get_logger

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)

logger = get_logger(__name__)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic collection store keyed by filter criteria.

    Every method takes SQLAlchemy criteria (``Model.column == value``) as the
    filter. Writes commit immediately; each one touches a single statement so
    there is nothing to roll back across calls.
    """

    def __init__(self, db: AsyncSession, model_class: Any):
        self.db = db
        self.model_class = model_class

    async def find_one(self, *criteria: Any) -> Optional[PydanticType]:
        """Get the first record matching the filter."""
        query = select(self.model_class).where(*criteria).limit(1)
        result = await self._execute(query)
        db_model = result.scalars().first()
        return self._to_pydantic(db_model) if db_model else None

    async def find_many(
        self,
        *criteria: Any,
        order_by: Optional[Any] = None,
        limit: Optional[int] = None,
    ) -> List[PydanticType]:
        """Get all records matching the filter."""
        query = select(self.model_class).where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        result = await self._execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def insert_one(self, **values: Any) -> PydanticType:
        """Create a new record.

        Raises DuplicateKeyError when a unique constraint rejects the row.
        """
        db_model = self.model_class(**values)
        self.db.add(db_model)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateKeyError(str(e.orig)) from e
        except SQLAlchemyError as e:
            await self._fail(e)
        await self.db.refresh(db_model)
        return self._to_pydantic(db_model)

    async def update_one(
        self, *criteria: Any, values: Dict[str, Any]
    ) -> Optional[PydanticType]:
        """Update the record matching the filter in one statement.

        Returns the updated record, or None when nothing matched.
        """
        query = (
            update(self.model_class)
            .where(*criteria)
            .values({getattr(self.model_class, k): v for k, v in values.items()})
            .returning(self.model_class)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(query)
        db_model = result.scalars().first()
        await self._commit()
        return self._to_pydantic(db_model) if db_model else None

    async def delete_one(self, *criteria: Any) -> Optional[PydanticType]:
        """Delete the record matching the filter and return it, if any."""
        deleted = await self.delete_many(*criteria)
        return deleted[0] if deleted else None

    async def delete_many(self, *criteria: Any) -> List[PydanticType]:
        """Delete every record matching the filter and return what was removed.

        Match and removal happen in one DELETE ... RETURNING statement, so two
        callers racing on the same rows never both get a row back.
        """
        query = delete(self.model_class).where(*criteria).returning(self.model_class)
        result = await self._execute(query)
        db_models = result.scalars().all()
        deleted = [self._to_pydantic(db_model) for db_model in db_models]
        await self._commit()
        return deleted

    async def _execute(self, statement: Any) -> Any:
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            await self._fail(e)

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail(e)

    async def _fail(self, error: SQLAlchemyError) -> None:
        table = self.model_class.__tablename__
        logger.error(f"Store operation on {table} failed: {error}")
        await self.db.rollback()
        raise StoreError("Internal server error") from error

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError

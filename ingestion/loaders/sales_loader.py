"""
Load sales entity bundles with insert-if-absent logic (idempotency)
"""

from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.dialects import postgresql, sqlite
from models.sales import Customer, Product, Order, OrderItem
from schemas.sales import EntityBundle
from core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)

# Parents before children: (stage, model, conflict key)
UPSERT_STAGES = (
    ("customer", Customer, ["customer_id"]),
    ("product", Product, ["product_id"]),
    ("order", Order, ["order_id"]),
    ("order_item", OrderItem, ["order_id", "product_id"]),
)

DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SalesUpsertLoader:
    """
    Write one row's entities with idempotent insert operations.

    Ensures:
    - No duplicate rows on repeated loads (ON CONFLICT DO NOTHING)
    - First-seen wins: existing rows are never overwritten
    - One atomic transaction per row: all four inserts or none
    """

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    async def upsert(self, bundle: EntityBundle) -> None:
        """
        Insert customer, product, order and order item for one row.

        Raises:
            PersistenceError: Naming the failed stage; the row's
                transaction has been rolled back
        """
        stage = "begin"

        async with self.session_maker() as session:
            dialect = session.get_bind().dialect.name
            if dialect not in DIALECT_INSERTS:
                raise PersistenceError(
                    bundle.row,
                    stage,
                    f"insert-if-absent is not supported on {dialect}"
                )

            try:
                async with session.begin():
                    for stage, model, conflict_key in UPSERT_STAGES:
                        values = getattr(bundle, stage).dict()
                        await session.execute(
                            self._insert_statement(session, model, conflict_key, values)
                        )
                    stage = "commit"
            except Exception as e:
                # Driver conversion errors (e.g. OverflowError) count as stage
                # failures too; cancellation is not an Exception and propagates
                logger.debug(f"Row {bundle.row}: rolled back at {stage} stage")
                raise PersistenceError(bundle.row, stage, str(e), original_exception=e)

    def _insert_statement(self, session: AsyncSession, model, conflict_key: List[str], values: Dict[str, Any]):
        """Build INSERT ... ON CONFLICT (<key>) DO NOTHING for the session's dialect"""
        insert = DIALECT_INSERTS[session.get_bind().dialect.name]
        return insert(model).values(**values).on_conflict_do_nothing(
            index_elements=conflict_key
        )

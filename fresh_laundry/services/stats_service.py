import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from fresh_laundry.core.errors import Internal
from fresh_laundry.db.session import Database
from fresh_laundry.models.tables import Order, OrderStatus

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, database: Database):
        self.database = database

    def get_stats(self) -> dict:
        """Order counts per status and revenue over every order that is not cancelled."""
        try:
            with self.database.session() as session:
                status_counts = session.execute(
                    select(Order.status, func.count()).group_by(Order.status)
                ).all()
                revenue = session.execute(
                    select(func.coalesce(func.sum(Order.total_price), 0)).where(
                        Order.status != OrderStatus.CANCELLED.value
                    )
                ).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Stats error: %s", e, exc_info=True)
            raise Internal("Failed to fetch stats")

        counts = {status: count for status, count in status_counts}
        return {
            "pending": counts.get(OrderStatus.PENDING.value, 0),
            "in_wash": counts.get(OrderStatus.IN_WASH.value, 0),
            "finished": counts.get(OrderStatus.FINISHED.value, 0),
            "total_revenue": revenue or 0,
        }

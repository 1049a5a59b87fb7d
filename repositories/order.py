import json
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit, session_execute, session_refresh
from enums.order_status import OrderStatus
from models.order import ComposedOrder, Order, OrderRecordDTO

logger = logging.getLogger(__name__)


class OrderRepository:
    @staticmethod
    async def create(order: ComposedOrder, session: AsyncSession) -> int:
        """Store a composed order as a PENDING order record and return its id."""
        payload = order.to_payload()
        record = Order(
            business_id=order.business_id,
            status=OrderStatus.PENDING,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            delivery_type=order.delivery_type,
            address=order.address,
            table_number=order.table_number,
            notes=order.notes,
            delivery_fee=order.delivery_fee,
            grand_total=order.grand_total,
            created_at=order.created_at.replace(tzinfo=None),
            items_snapshot=json.dumps(payload["items"], ensure_ascii=False),
        )
        session.add(record)
        await session_commit(session)
        await session_refresh(session, record)
        logger.info(f"Stored order record {record.id} for business {order.business_id} ({len(order.lines)} lines)")
        return record.id

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderRecordDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        result = await session_execute(stmt, session)
        record = result.scalar_one_or_none()
        if record is None:
            return None
        return OrderRecordDTO.model_validate(record, from_attributes=True)

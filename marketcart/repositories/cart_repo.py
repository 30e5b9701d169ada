# marketcart/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session, select

from marketcart.models.cart import CartItem


class CartRepository:
    """
    Canonical cart store: owns cart lines keyed by user.

    - Pure DB operations, no product knowledge and no stock checks.
    - Missing lines are signalled with None, never an exception.
    """

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def add(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartItem:
        """
        Increment the existing line for (user, product) by `quantity`,
        or insert a new line stamped with the current time.
        """
        item = self.get_item(session, user_id, product_id)
        if item:
            item.quantity += quantity
        else:
            item = CartItem(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                added_at=datetime.now(timezone.utc),
            )
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItem | None:
        """
        Set the absolute quantity of a line. Callers route quantity <= 0
        to `remove` instead.
        """
        item = self.get_item(session, user_id, product_id)
        if item is None:
            return None
        item.quantity = quantity
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def remove(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        item = self.get_item(session, user_id, product_id)
        if item is None:
            return None
        session.delete(item)
        session.commit()
        return item

    def clear(self, session: Session, user_id: uuid.UUID) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()

#minishop/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship
from minishop.data.database import Base
from minishop.data.models._ids import new_public_id


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    # one cart per user
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    user = relationship("UserModel")
    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

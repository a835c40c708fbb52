from datetime import datetime, timezone
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from minishop.data.database import Base
from minishop.data.models._ids import new_public_id


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    name = Column(String(200), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    # whole currency units
    price = Column(BigInteger, nullable=False)
    available_quantity = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products")

    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_product_stock_non_negative"),
    )

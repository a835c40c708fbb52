import enum
from sqlalchemy import Column, Integer, BigInteger, ForeignKey, String, Enum
from sqlalchemy.orm import relationship
from minishop.data.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False)
    amount = Column(BigInteger, nullable=False)
    status = Column(Enum(PaymentStatus, name="payment_status"), nullable=False, default=PaymentStatus.PENDING)
    # gateway checkout session id
    reference = Column(String(255), unique=True, nullable=False)

    order = relationship("OrderModel", back_populates="payment")

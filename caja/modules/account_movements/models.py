"""
Modelos SQLAlchemy para el ledger de cuentas corrientes

AccountMovement: cada entrada fechada de la cuenta de un cliente.
- amount: delta aplicado al saldo anterior (ventas positivas, pagos negativos)
- balance: saldo corrido DESPUÉS de este movimiento (desnormalizado)
- customer_name: copia del nombre al momento de crear el movimiento
"""

from caja.database.database import Base
from sqlalchemy import Column, String, Date, Numeric, Text, Enum, Index
from caja.common.mixins import BaseMixin
import enum


class MovementType(str, enum.Enum):
    """Tipos de movimiento de cuenta corriente"""
    SALE = "sale"               # Venta a crédito (aumenta la deuda)
    PAYMENT = "payment"         # Pago del cliente (disminuye la deuda)
    ADJUSTMENT = "adjustment"   # Ajuste manual (+ o -)


class AccountMovement(Base, BaseMixin):
    """Movimiento del ledger de un cliente"""
    __tablename__ = "account_movements"

    customer_id = Column(String(36), nullable=False, index=True)
    customer_name = Column(String(200), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    code = Column(String(100), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    balance = Column(Numeric(15, 2), nullable=False)
    type = Column(
        Enum(MovementType, values_callable=lambda e: [m.value for m in e], name="account_movement_type"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("idx_account_movements_ledger", "user_id", "customer_id", "date", "created_at"),
    )

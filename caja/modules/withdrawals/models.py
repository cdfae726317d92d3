"""
Modelos SQLAlchemy para el módulo de Retiros

Withdrawal: dinero que sale de la caja (gastos, proveedores, sueldos, etc.)
"""

from caja.database.database import Base
from sqlalchemy import Column, Date, Numeric, Text, Enum, Index
from caja.common.mixins import BaseMixin
import enum


class WithdrawalReason(str, enum.Enum):
    """Motivos de retiro de caja"""
    GASTOS_OPERATIVOS = "gastos_operativos"
    PAGO_PROVEEDORES = "pago_proveedores"
    SALARIOS = "salarios"
    SERVICIOS = "servicios"
    IMPUESTOS = "impuestos"
    PERSONAL = "personal"
    OTROS = "otros"


class Withdrawal(Base, BaseMixin):
    """Retiro de caja"""
    __tablename__ = "withdrawals"

    amount = Column(Numeric(15, 2), nullable=False)
    reason = Column(
        Enum(WithdrawalReason, values_callable=lambda e: [m.value for m in e], name="withdrawal_reason"),
        nullable=False,
    )
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)

    __table_args__ = (
        Index("idx_withdrawals_user_date", "user_id", "date"),
    )

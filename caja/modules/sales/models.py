"""
Modelos SQLAlchemy para el módulo de Ventas

Sale: venta de mostrador (no afecta cuentas corrientes).
- cash_amount / digital_amount: el monto va a uno u otro según el medio de pago
- commission_amount: comisión calculada al registrar la venta
"""

from caja.database.database import Base
from sqlalchemy import Column, String, Integer, Date, Numeric, Text, Index
from caja.common.mixins import BaseMixin


class Sale(Base, BaseMixin):
    """Venta registrada en caja"""
    __tablename__ = "sales"

    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    cash_amount = Column(Numeric(15, 2), nullable=False, default=0)
    digital_amount = Column(Numeric(15, 2), nullable=False, default=0)
    commission_amount = Column(Numeric(15, 2), nullable=False, default=0)
    payment_method = Column(String(30), nullable=False, index=True)
    card_brand = Column(String(30), nullable=True)
    installments = Column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_sales_user_date", "user_id", "date"),
    )

    @property
    def total_amount(self):
        return (self.cash_amount or 0) + (self.digital_amount or 0)

    @property
    def net_amount(self):
        return self.total_amount - (self.commission_amount or 0)

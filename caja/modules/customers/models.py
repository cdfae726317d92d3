"""
Modelos SQLAlchemy para el módulo de Clientes

Clientes con cuenta corriente (fiado). Cada cliente pertenece a un único
usuario (tenant). El borrado no elimina sus movimientos de cuenta.
"""

from caja.database.database import Base
from sqlalchemy import Column, String, Numeric, Text
from caja.common.mixins import BaseMixin


class Customer(Base, BaseMixin):
    """Cliente con cuenta corriente"""
    __tablename__ = "customers"

    name = Column(String(200), nullable=False, index=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(300), nullable=True)
    tax_id = Column(String(50), nullable=True)
    credit_limit = Column(Numeric(15, 2), nullable=True)
    notes = Column(Text, nullable=True)

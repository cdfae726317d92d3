"""
Modelo de configuración del negocio (una fila por usuario)
"""

from caja.database.database import Base
from sqlalchemy import Column, String, Text, UniqueConstraint
from caja.common.mixins import BaseMixin

DEFAULT_CURRENCY = "ARS"
DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"


class BusinessConfig(Base, BaseMixin):
    """Datos del comercio usados en comprobantes y reportes"""
    __tablename__ = "business_configs"

    business_name = Column(String(200), nullable=False)
    owner_name = Column(String(200), nullable=True)
    address = Column(String(300), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(100), nullable=True)
    website = Column(String(200), nullable=True)
    logo = Column(Text, nullable=True)          # URL del logo
    description = Column(Text, nullable=True)
    currency = Column(String(10), nullable=False, default=DEFAULT_CURRENCY)
    timezone = Column(String(64), nullable=False, default=DEFAULT_TIMEZONE)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_business_configs_user"),
    )

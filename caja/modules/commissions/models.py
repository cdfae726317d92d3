"""
Modelos SQLAlchemy para el módulo de Comisiones

CommissionConfig: porcentaje (y monto fijo opcional) que cobra cada medio de pago.
- Medios simples: una fila por (usuario, medio de pago)
- Tarjeta de crédito: una fila por (usuario, marca, cuotas)
"""

from caja.database.database import Base
from sqlalchemy import Column, String, Integer, Numeric, Boolean, Index
from caja.common.mixins import BaseMixin
import enum


class PaymentMethod(str, enum.Enum):
    """Medios de pago"""
    EFECTIVO = "efectivo"
    TRANSFERENCIA = "transferencia"
    QR = "qr"
    TARJETA_DEBITO = "tarjeta_debito"
    TARJETA_CREDITO = "tarjeta_credito"


class CardBrand(str, enum.Enum):
    """Marcas de tarjeta de crédito"""
    VISA = "visa"
    MASTERCARD = "mastercard"
    NARANJA = "naranja"
    TUYA = "tuya"


INSTALLMENT_OPTIONS = (1, 3, 6, 12)


class CommissionConfig(Base, BaseMixin):
    """Configuración de comisión por medio de pago"""
    __tablename__ = "commission_configs"

    payment_method = Column(String(30), nullable=False, index=True)
    card_brand = Column(String(30), nullable=True)     # Sólo tarjeta_credito
    installments = Column(Integer, nullable=True)      # Sólo tarjeta_credito: 1, 3, 6, 12
    percentage = Column(Numeric(5, 2), nullable=False, default=0)
    fixed_amount = Column(Numeric(15, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        Index("idx_commission_configs_lookup", "user_id", "payment_method", "card_brand", "installments"),
    )

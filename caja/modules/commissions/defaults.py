"""
Tabla de comisiones predeterminadas (valores promedio Argentina 2024)
"""
from decimal import Decimal
from typing import Optional, Union
from uuid import NAMESPACE_URL, uuid5

from caja.modules.commissions.models import PaymentMethod, CardBrand, INSTALLMENT_OPTIONS

ZERO = Decimal("0")

SIMPLE_METHODS = (
    PaymentMethod.EFECTIVO,
    PaymentMethod.TRANSFERENCIA,
    PaymentMethod.QR,
    PaymentMethod.TARJETA_DEBITO,
)

DEFAULT_COMMISSIONS = {
    PaymentMethod.EFECTIVO: Decimal("0"),
    PaymentMethod.TRANSFERENCIA: Decimal("0"),
    PaymentMethod.QR: Decimal("1.2"),
    PaymentMethod.TARJETA_DEBITO: Decimal("2.0"),
    PaymentMethod.TARJETA_CREDITO: {
        CardBrand.VISA: {1: Decimal("2.8"), 3: Decimal("3.2"), 6: Decimal("3.5"), 12: Decimal("4.0")},
        CardBrand.MASTERCARD: {1: Decimal("2.8"), 3: Decimal("3.2"), 6: Decimal("3.5"), 12: Decimal("4.0")},
        CardBrand.NARANJA: {1: Decimal("3.5"), 3: Decimal("4.0"), 6: Decimal("4.5"), 12: Decimal("5.0")},
        CardBrand.TUYA: {1: Decimal("3.0"), 3: Decimal("3.5"), 6: Decimal("4.0"), 12: Decimal("4.5")},
    },
}

_CONFIG_NAMESPACE = uuid5(NAMESPACE_URL, "caja/commission-config")


def default_percentage(
    payment_method: Union[PaymentMethod, str],
    card_brand: Optional[Union[CardBrand, str]] = None,
    installments: Optional[int] = None,
) -> Decimal:
    """Porcentaje de la tabla predeterminada; 0 si la combinación no existe"""
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        return ZERO

    if method == PaymentMethod.TARJETA_CREDITO:
        if not card_brand or not installments:
            return ZERO
        try:
            brand = CardBrand(card_brand)
        except ValueError:
            return ZERO
        return DEFAULT_COMMISSIONS[method][brand].get(int(installments), ZERO)

    return DEFAULT_COMMISSIONS[method]


def default_keys():
    """Las 20 combinaciones (medio, marca, cuotas) que se provisionan por usuario"""
    for method in SIMPLE_METHODS:
        yield method, None, None
    for brand in CardBrand:
        for installments in INSTALLMENT_OPTIONS:
            yield PaymentMethod.TARJETA_CREDITO, brand, installments


def config_id(
    user_id: str,
    payment_method: Union[PaymentMethod, str],
    card_brand: Optional[Union[CardBrand, str]] = None,
    installments: Optional[int] = None,
) -> str:
    """ID determinístico por clave natural: reprovisionar nunca duplica filas"""
    brand = CardBrand(card_brand).value if card_brand else ""
    key = f"{user_id}|{PaymentMethod(payment_method).value}|{brand}|{installments or ''}"
    return str(uuid5(_CONFIG_NAMESPACE, key))

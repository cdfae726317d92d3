"""
Esquemas Pydantic para el ledger de cuentas corrientes

- Alta, edición y consulta de movimientos
- Importación masiva (movimientos ya normalizados o filas crudas de planilla)
- Vista completa de la cuenta de un cliente
"""

from pydantic import Field, field_validator, model_validator
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List
import datetime as dt

from caja.common.responses import CamelModel, Money
from caja.common.validators import parse_calendar_day
from caja.modules.account_movements.models import MovementType
from caja.modules.customers.schemas import CustomerOut


def check_amount_sign(movement_type: MovementType, amount: Decimal) -> None:
    """Ventas positivas, pagos negativos, ajustes distintos de cero"""
    if movement_type == MovementType.SALE and amount <= 0:
        raise ValueError('Una venta debe tener monto positivo')
    if movement_type == MovementType.PAYMENT and amount >= 0:
        raise ValueError('Un pago debe tener monto negativo')
    if movement_type == MovementType.ADJUSTMENT and amount == 0:
        raise ValueError('Un ajuste no puede ser cero')


def check_description(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError('Descripción es requerida')
    return v


class AccountMovementCreate(CamelModel):
    """
    Alta de movimiento. El signo de `amount` debe coincidir con el tipo:
    ventas positivas, pagos negativos, ajustes de cualquier signo distinto de cero.
    """
    customer_id: str = Field(..., min_length=1, description="ID del cliente")
    description: str = Field(..., min_length=1, description="Descripción")
    amount: Decimal = Field(..., decimal_places=2, description="Delta a aplicar sobre el saldo")
    type: MovementType
    code: Optional[str] = Field(None, max_length=100, description="Código de artículo")
    date: Optional[dt.date] = Field(None, description="Día calendario YYYY-MM-DD")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        return check_description(v)

    @field_validator('date', mode='before')
    @classmethod
    def empty_date_is_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return parse_calendar_day(v)

    @model_validator(mode='after')
    def validate_sign(self):
        check_amount_sign(self.type, self.amount)
        return self


class AccountMovementUpdate(CamelModel):
    """
    Sólo descripción, código, fecha y monto son editables.
    Un código vacío borra el código guardado; el signo del monto se valida
    contra el tipo del movimiento existente.
    """
    description: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, max_length=100)
    date: Optional[dt.date] = None
    amount: Optional[Decimal] = Field(None, decimal_places=2)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return check_description(v)

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        if v is None:
            return None
        return parse_calendar_day(v)


class AccountMovementOut(CamelModel):
    id: str
    customer_id: str
    customer_name: str
    date: dt.date
    description: str
    code: Optional[str] = None
    amount: Money
    balance: Money
    type: MovementType
    user_id: str
    created_at: dt.datetime
    updated_at: dt.datetime


# ===== IMPORTACIÓN =====

class ImportedMovement(CamelModel):
    """Movimiento ya normalizado; `balance` se guarda tal cual viene"""
    date: dt.date
    description: str = Field(..., min_length=1)
    code: Optional[str] = None
    amount: Decimal = Field(..., decimal_places=2)
    balance: Decimal = Field(..., decimal_places=2)
    type: MovementType

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return parse_calendar_day(v)


class AccountMovementImport(CamelModel):
    customer_id: str = Field(..., min_length=1)
    movements: List[ImportedMovement]


class SpreadsheetRow(CamelModel):
    """Fila cruda de la planilla del cliente (FECHA, DESCRIPCION, CODIGO, PRECIO, SALDO)"""
    fecha: dt.date
    descripcion: Optional[str] = None
    codigo: Optional[str] = None
    precio: Decimal
    saldo: Decimal

    @field_validator('fecha', mode='before')
    @classmethod
    def parse_fecha(cls, v):
        return parse_calendar_day(v)

    @field_validator('codigo', mode='before')
    @classmethod
    def codigo_as_text(cls, v):
        # Las planillas suelen traer códigos numéricos
        if v is None:
            return None
        return str(v)

    @field_validator('precio', 'saldo')
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        # Montos de planilla con ruido de punto flotante
        return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class CustomerDataImport(CamelModel):
    customer_name: str = Field(..., min_length=1)
    movements: List[SpreadsheetRow]

    @field_validator('customer_name')
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Nombre del cliente es requerido')
        return cleaned


# ===== SALIDAS COMPUESTAS =====

class CustomerAccount(CamelModel):
    customer: CustomerOut
    movements: List[AccountMovementOut]
    current_balance: Money
    total_sales: Money
    total_payments: Money


class CustomerBalanceOut(CamelModel):
    balance: Money


class CustomerImportResult(CamelModel):
    customer: CustomerOut
    movements: List[AccountMovementOut]

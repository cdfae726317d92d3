"""
Validadores y normalizadores compartidos
"""
from datetime import date, datetime
from typing import Optional, Union


def today_iso() -> date:
    """Día calendario local actual (fecha por defecto de ventas, retiros y movimientos)."""
    return date.today()


def normalize_code(code: Optional[str]) -> Optional[str]:
    """
    Un código vacío o sólo con espacios no se guarda.
    Devuelve None para que el campo quede ausente del registro.
    """
    if code is None:
        return None
    if not str(code).strip():
        return None
    return code


def parse_calendar_day(value: Union[str, date, datetime]) -> date:
    """
    Convierte 'YYYY-MM-DD' (o un ISO datetime) a date, tal cual viene,
    sin convertir zonas horarias.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Fecha vacía")
    return date.fromisoformat(text[:10])

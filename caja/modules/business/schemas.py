"""
Esquemas Pydantic para la configuración del negocio
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from caja.common.responses import CamelModel
from caja.modules.business.models import DEFAULT_CURRENCY, DEFAULT_TIMEZONE


class BusinessConfigBase(CamelModel):
    owner_name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=300)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=200)
    logo: Optional[str] = None
    description: Optional[str] = None


class BusinessConfigCreate(BusinessConfigBase):
    business_name: str = Field(..., min_length=1, max_length=200)
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=10)
    timezone: str = Field(DEFAULT_TIMEZONE, max_length=64)

    @field_validator('business_name')
    @classmethod
    def validate_business_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Nombre del negocio es requerido')
        return v.strip()

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


class BusinessConfigUpdate(BusinessConfigBase):
    business_name: Optional[str] = Field(None, min_length=1, max_length=200)
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    timezone: Optional[str] = Field(None, max_length=64)

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class BusinessConfigOut(BusinessConfigBase):
    id: str
    user_id: str
    business_name: str
    currency: str
    timezone: str
    created_at: datetime
    updated_at: datetime

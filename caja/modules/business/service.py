"""
Configuración del negocio: a lo sumo una por usuario
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import Optional
import logging

from caja.modules.business.models import BusinessConfig
from caja.modules.business.schemas import BusinessConfigCreate, BusinessConfigUpdate

logger = logging.getLogger(__name__)

# Campos que nunca se sobrescriben con null
REQUIRED_FIELDS = ("business_name", "currency", "timezone")


def get_business_config(db: Session, user_id: str) -> Optional[BusinessConfig]:
    return db.query(BusinessConfig).filter(BusinessConfig.user_id == user_id).first()


def create_business_config(db: Session, config_data: BusinessConfigCreate, user_id: str) -> BusinessConfig:
    """
    Crear la configuración del negocio del usuario.

    Raises:
        HTTPException 409: si el usuario ya tiene una configuración.
    """
    if get_business_config(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe una configuración para este usuario"
        )

    try:
        config = BusinessConfig(**config_data.model_dump(), user_id=user_id)
        db.add(config)
        db.commit()
        db.refresh(config)
        logger.info(f"Configuración de negocio creada para usuario {user_id}")
        return config

    except IntegrityError:
        # Otra request creó la configuración en paralelo
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe una configuración para este usuario"
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al crear la configuración del negocio: {str(e)}"
        )


def update_business_config(db: Session, user_id: str, updates: BusinessConfigUpdate) -> BusinessConfig:
    config = get_business_config(db, user_id)
    if not config:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se encontró la configuración del negocio"
        )

    try:
        for field, value in updates.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(config, field, value)
        db.commit()
        db.refresh(config)
        return config

    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al actualizar la configuración del negocio: {str(e)}"
        )

"""
Router para la configuración del negocio
"""

from fastapi import APIRouter, HTTPException, status

from caja.common.responses import ApiResponse
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.business import service
from caja.modules.business.schemas import BusinessConfigCreate, BusinessConfigUpdate, BusinessConfigOut

router = APIRouter(
    prefix="/business",
    tags=["Business"]
)


@router.get("", response_model=ApiResponse[BusinessConfigOut])
async def get_business_config(db: db_dependency, auth: user_dependency):
    config = service.get_business_config(db, auth.user_id)
    if not config:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Configuración no encontrada")
    return ApiResponse(data=BusinessConfigOut.model_validate(config))


@router.post("", response_model=ApiResponse[BusinessConfigOut], status_code=status.HTTP_201_CREATED)
async def create_business_config(config_data: BusinessConfigCreate, db: db_dependency, auth: user_dependency):
    """
    Crear la configuración del negocio

    - **businessName**: requerido
    - **currency**: por defecto ARS
    - **timezone**: por defecto America/Argentina/Buenos_Aires
    """
    config = service.create_business_config(db, config_data, auth.user_id)
    return ApiResponse(data=BusinessConfigOut.model_validate(config), message="Configuración creada correctamente")


@router.put("", response_model=ApiResponse[BusinessConfigOut])
async def update_business_config(updates: BusinessConfigUpdate, db: db_dependency, auth: user_dependency):
    config = service.update_business_config(db, auth.user_id, updates)
    return ApiResponse(data=BusinessConfigOut.model_validate(config), message="Configuración actualizada correctamente")

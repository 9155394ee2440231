from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.entregas.schemas.schema_presenca import PresencaEntregadorOut
from app.api.entregas.services.dependencies import get_presenca_service
from app.api.entregas.services.service_presenca import PresencaEntregadorService
from app.core.admin_dependencies import get_current_user

router = APIRouter(
    prefix="/api/entregas/admin/entregadores",
    tags=["Admin - Entregas - Entregadores"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[PresencaEntregadorOut])
def listar_entregadores(
    apenas_disponiveis: bool = Query(False),
    svc: PresencaEntregadorService = Depends(get_presenca_service),
):
    if apenas_disponiveis:
        return svc.listar_disponiveis()
    return svc.listar_status()

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.entregas.models.model_entrega import StatusEntrega
from app.api.entregas.schemas.schema_entrega import EntregaOut
from app.api.entregas.schemas.schema_presenca import HeartbeatRequest, PresencaEntregadorOut
from app.api.entregas.services.dependencies import get_despacho_service, get_presenca_service
from app.api.entregas.services.service_despacho import DespachoService
from app.api.entregas.services.service_presenca import PresencaEntregadorService
from app.core.admin_dependencies import get_current_user

router = APIRouter(
    prefix="/api/entregas/entregador",
    tags=["Entregador - Entregas"],
    dependencies=[Depends(get_current_user)],
)


@router.put("/{entregador_id}/heartbeat", response_model=PresencaEntregadorOut)
def heartbeat(
    entregador_id: str,
    payload: HeartbeatRequest,
    svc: PresencaEntregadorService = Depends(get_presenca_service),
):
    return svc.heartbeat(entregador_id, payload)


@router.get("/{entregador_id}/entregas", response_model=List[EntregaOut])
def listar_entregas_entregador(
    entregador_id: str,
    status_filtro: Optional[StatusEntrega] = Query(None, alias="status"),
    svc: DespachoService = Depends(get_despacho_service),
):
    return svc.listar_por_entregador(entregador_id, status_filtro)


@router.get("/{entregador_id}/entrega-ativa", response_model=Optional[EntregaOut])
def entrega_ativa(
    entregador_id: str,
    svc: DespachoService = Depends(get_despacho_service),
):
    return svc.entrega_ativa(entregador_id)

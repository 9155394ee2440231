from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.entregas.models.model_entrega import StatusEntrega
from app.api.entregas.schemas.schema_entrega import (
    CancelarEntregaRequest,
    DevolverEntregaRequest,
    EntregaCreate,
    EntregaOut,
    IniciarRotaRequest,
    PainelDespachoOut,
)
from app.api.entregas.services.dependencies import get_despacho_service
from app.api.entregas.services.service_despacho import DespachoService
from app.core.admin_dependencies import get_current_user
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/entregas/admin/despacho",
    tags=["Admin - Entregas - Despacho"],
    dependencies=[Depends(get_current_user)],
)

VERSAO_QUERY = Query(None, description="Versão exibida no painel; diferente da atual responde 409")


@router.post("", response_model=EntregaOut, status_code=status.HTTP_201_CREATED)
def criar_entrega(
    payload: EntregaCreate,
    svc: DespachoService = Depends(get_despacho_service),
):
    logger.info(f"[Despacho] Criar - O.S. {payload.os_id}")
    return svc.criar(payload)


@router.get("", response_model=List[EntregaOut])
def listar_entregas(
    status_filtro: Optional[StatusEntrega] = Query(None, alias="status"),
    svc: DespachoService = Depends(get_despacho_service),
):
    return svc.listar(status_filtro)


@router.get("/painel", response_model=PainelDespachoOut)
def painel_despacho(svc: DespachoService = Depends(get_despacho_service)):
    return svc.painel()


@router.get("/{entrega_id}", response_model=EntregaOut)
def get_entrega(entrega_id: str, svc: DespachoService = Depends(get_despacho_service)):
    return svc.get(entrega_id)


@router.post("/{entrega_id}/iniciar-rota", response_model=EntregaOut)
def iniciar_rota(
    entrega_id: str,
    payload: IniciarRotaRequest,
    versao: Optional[int] = VERSAO_QUERY,
    svc: DespachoService = Depends(get_despacho_service),
):
    logger.info(f"[Despacho] Iniciar rota - entrega={entrega_id} entregador={payload.entregador_id}")
    return svc.iniciar_rota(entrega_id, payload.entregador_id, versao)


@router.post("/{entrega_id}/concluir", response_model=EntregaOut)
def concluir_entrega(
    entrega_id: str,
    versao: Optional[int] = VERSAO_QUERY,
    svc: DespachoService = Depends(get_despacho_service),
):
    return svc.concluir(entrega_id, versao)


@router.post("/{entrega_id}/devolver", response_model=EntregaOut)
def devolver_entrega(
    entrega_id: str,
    payload: DevolverEntregaRequest,
    versao: Optional[int] = VERSAO_QUERY,
    svc: DespachoService = Depends(get_despacho_service),
):
    return svc.devolver(entrega_id, payload.motivo, versao)


@router.post("/{entrega_id}/cancelar", response_model=EntregaOut)
def cancelar_entrega(
    entrega_id: str,
    payload: CancelarEntregaRequest,
    versao: Optional[int] = VERSAO_QUERY,
    svc: DespachoService = Depends(get_despacho_service),
):
    logger.info(f"[Despacho] Cancelar - entrega={entrega_id}")
    return svc.cancelar(entrega_id, payload.confirmar, versao)

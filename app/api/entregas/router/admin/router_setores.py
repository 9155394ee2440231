from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.entregas.schemas.schema_zona_entrega import (
    SetorEntregaCreate,
    SetorEntregaMover,
    SetorEntregaOut,
)
from app.api.entregas.services.dependencies import get_zona_service
from app.api.entregas.services.service_zonas import ZonaEntregaService
from app.core.admin_dependencies import get_current_user
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/entregas/admin/setores",
    tags=["Admin - Entregas - Setores"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[SetorEntregaOut])
def listar_setores(
    zona_id: Optional[str] = Query(None),
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    return svc.list_setores(zona_id)


@router.post("", response_model=SetorEntregaOut, status_code=status.HTTP_201_CREATED)
def criar_setor(
    payload: SetorEntregaCreate,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Setores] Upsert - {payload.nome} zona={payload.zona_id}")
    return svc.upsert_setor(payload)


@router.put("/{setor_id}/mover", response_model=SetorEntregaOut)
def mover_setor(
    setor_id: str,
    payload: SetorEntregaMover,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    return svc.mover_setor(setor_id, payload.zona_id)


@router.delete("/{setor_id}")
def deletar_setor(
    setor_id: str,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Setores] Delete - id={setor_id}")
    return svc.delete_setor(setor_id)

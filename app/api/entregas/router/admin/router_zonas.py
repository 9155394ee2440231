from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from app.api.entregas.schemas.schema_busca_area import BuscaAreaOut
from app.api.entregas.schemas.schema_zona_entrega import (
    SobreposicaoOut,
    SobreposicaoRequest,
    ZonaEntregaCreate,
    ZonaEntregaOut,
    ZonaEntregaSalvar,
    ZonaEntregaUpdate,
)
from app.api.entregas.services.dependencies import get_busca_area_service, get_zona_service
from app.api.entregas.services.service_busca_area import BuscaAreaService
from app.api.entregas.services.service_zonas import ZonaEntregaService
from app.core.admin_dependencies import get_current_user
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/entregas/admin/zonas",
    tags=["Admin - Entregas - Zonas"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[ZonaEntregaOut])
def listar_zonas(
    deposito_id: Optional[str] = Query(None, description="Inclui o preço de cada zona para este depósito"),
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Listar - deposito={deposito_id}")
    return svc.list(deposito_id)


@router.post("", response_model=ZonaEntregaOut, status_code=status.HTTP_201_CREATED)
def criar_zona(
    payload: ZonaEntregaCreate,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Criar - {payload.nome}")
    return svc.create(payload)


@router.post("/salvar", response_model=ZonaEntregaOut)
def salvar_zona(
    payload: ZonaEntregaSalvar,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Salvar - {payload.nome} deposito={payload.deposito_id}")
    return svc.salvar(payload)


@router.post("/sobreposicoes", response_model=SobreposicaoOut)
def verificar_sobreposicoes(
    payload: SobreposicaoRequest,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    return SobreposicaoOut(zonas=svc.sobreposicoes(payload.poligono, payload.ignorar_zona_id))


@router.get("/buscar-area", response_model=BuscaAreaOut)
def buscar_area(
    termo: str = Query(..., min_length=1, description="Bairro, setor ou endereço"),
    escopo: Optional[str] = Query(None, description="Cidade/UF; padrão configurado no servidor"),
    svc: BuscaAreaService = Depends(get_busca_area_service),
):
    logger.info(f"[Zonas] Buscar área - termo={termo} escopo={escopo}")
    return svc.buscar(termo, escopo)


@router.get("/{zona_id}", response_model=ZonaEntregaOut)
def get_zona(
    zona_id: str = Path(...),
    deposito_id: Optional[str] = Query(None),
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    return svc.get(zona_id, deposito_id)


@router.put("/{zona_id}", response_model=ZonaEntregaOut)
def substituir_zona(
    zona_id: str,
    payload: ZonaEntregaCreate,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Upsert - id={zona_id}")
    return svc.upsert(zona_id, payload)


@router.patch("/{zona_id}", response_model=ZonaEntregaOut)
def atualizar_zona(
    zona_id: str,
    payload: ZonaEntregaUpdate,
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Update - id={zona_id}")
    return svc.update(zona_id, payload)


@router.delete("/{zona_id}")
def deletar_zona(
    zona_id: str,
    mover_setores_para: Optional[str] = Query(None, description="Zona que recebe os setores; sem ela os setores são removidos"),
    svc: ZonaEntregaService = Depends(get_zona_service),
):
    logger.info(f"[Zonas] Delete - id={zona_id} mover_setores_para={mover_setores_para}")
    return svc.delete(zona_id, mover_setores_para)

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.entregas.schemas.schema_preco_zona import (
    FreteGratisOut,
    FreteGratisUpdate,
    PrecoZonaConsultaOut,
    PrecoZonaOut,
    PrecoZonaUpsert,
    TaxaEntregaOut,
)
from app.api.entregas.services.dependencies import get_preco_zona_service
from app.api.entregas.services.service_precos_zona import PrecoZonaService
from app.core.admin_dependencies import get_current_user
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/entregas/admin",
    tags=["Admin - Entregas - Preços"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/precos", response_model=List[PrecoZonaOut])
def listar_precos(
    deposito_id: Optional[str] = Query(None),
    zona_id: Optional[str] = Query(None),
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    return svc.list(deposito_id=deposito_id, zona_id=zona_id)


@router.put("/precos", response_model=PrecoZonaOut)
def definir_preco(
    payload: PrecoZonaUpsert,
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    logger.info(f"[Precos] Upsert - zona={payload.zona_id} deposito={payload.deposito_id}")
    return svc.definir_preco(payload)


@router.get("/precos/consulta", response_model=PrecoZonaConsultaOut)
def consultar_preco(
    zona_id: str = Query(...),
    deposito_id: str = Query(...),
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    return svc.consultar(zona_id, deposito_id)


@router.get("/precos/taxa", response_model=TaxaEntregaOut)
def calcular_taxa(
    zona_id: str = Query(...),
    deposito_id: str = Query(...),
    subtotal: Decimal = Query(..., ge=0),
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    return svc.calcular_taxa(zona_id, deposito_id, subtotal)


@router.delete("/precos/{preco_id}")
def deletar_preco(
    preco_id: str,
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    logger.info(f"[Precos] Delete - id={preco_id}")
    return svc.delete(preco_id)


@router.put("/depositos/{deposito_id}/frete-gratis", response_model=FreteGratisOut)
def definir_frete_gratis(
    deposito_id: str,
    payload: FreteGratisUpdate,
    svc: PrecoZonaService = Depends(get_preco_zona_service),
):
    return svc.definir_frete_gratis(deposito_id, payload.valor_minimo)

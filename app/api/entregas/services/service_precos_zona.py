from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.depositos.contracts.deposito_contract import IDepositoContract
from app.api.entregas.repositories.repo_precos_zona import PrecoZonaRepository
from app.api.entregas.repositories.repo_zonas import ZonaEntregaRepository
from app.api.entregas.schemas.schema_preco_zona import (
    FreteGratisOut,
    PrecoZonaConsultaOut,
    PrecoZonaOut,
    PrecoZonaUpsert,
    TaxaEntregaOut,
)
from app.utils.logger import logger


def calcular_taxa_entrega(
    preco_zona: Optional[Decimal],
    subtotal: Decimal,
    frete_gratis_valor_minimo: Decimal,
) -> Optional[Decimal]:
    """
    Frete grátis (limite > 0 e subtotal >= limite) vence qualquer preço de zona.
    Fora disso vale o preço da zona como está; None quando não há preço.
    """
    if frete_gratis_valor_minimo > 0 and subtotal >= frete_gratis_valor_minimo:
        return Decimal("0")
    return preco_zona


class PrecoZonaService:
    def __init__(self, db: Session, deposito_contract: IDepositoContract):
        self.db = db
        self.repo = PrecoZonaRepository(db)
        self.zona_repo = ZonaEntregaRepository(db)
        self.deposito_contract = deposito_contract

    def _garantir_zona(self, zona_id: str):
        zona = self.zona_repo.get(zona_id)
        if not zona:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Zona {zona_id} não encontrada")
        return zona

    def _garantir_deposito(self, deposito_id: str):
        deposito = self.deposito_contract.obter_deposito(deposito_id)
        if not deposito:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Depósito {deposito_id} não encontrado")
        return deposito

    def list(self, deposito_id: Optional[str] = None, zona_id: Optional[str] = None) -> List[PrecoZonaOut]:
        precos = self.repo.list(deposito_id=deposito_id, zona_id=zona_id)
        # Preço de depósito removido é tratado como inexistente
        existentes = self.deposito_contract.filtrar_existentes(p.deposito_id for p in precos)
        return [PrecoZonaOut.model_validate(p) for p in precos if p.deposito_id in existentes]

    def obter_preco(self, zona_id: str, deposito_id: str) -> Optional[Decimal]:
        preco = self.repo.get_by_par(zona_id, deposito_id)
        if not preco:
            return None
        if not self.deposito_contract.filtrar_existentes([deposito_id]):
            return None
        return Decimal(str(preco.preco))

    def consultar(self, zona_id: str, deposito_id: str) -> PrecoZonaConsultaOut:
        preco = self.obter_preco(zona_id, deposito_id)
        return PrecoZonaConsultaOut(
            zona_id=zona_id,
            deposito_id=deposito_id,
            configurado=preco is not None,
            preco=preco,
        )

    def definir_preco(self, payload: PrecoZonaUpsert) -> PrecoZonaOut:
        self._garantir_zona(payload.zona_id)
        self._garantir_deposito(payload.deposito_id)
        preco = self.repo.upsert(payload.zona_id, payload.deposito_id, payload.preco)
        logger.info(
            f"[PrecoZona] Zona {payload.zona_id} / depósito {payload.deposito_id}: preço {payload.preco}"
        )
        return PrecoZonaOut.model_validate(preco)

    def delete(self, preco_id: str):
        preco = self.repo.get(preco_id)
        if not preco:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Preço não encontrado")
        self.repo.delete(preco)
        return {"message": "Preço removido com sucesso"}

    def definir_frete_gratis(self, deposito_id: str, valor_minimo: Decimal) -> FreteGratisOut:
        deposito = self.deposito_contract.definir_frete_gratis(deposito_id, valor_minimo)
        if not deposito:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Depósito {deposito_id} não encontrado")
        logger.info(f"[FreteGratis] Depósito {deposito_id}: valor mínimo {valor_minimo}")
        return FreteGratisOut(deposito_id=deposito.id, valor_minimo=deposito.frete_gratis_valor_minimo)

    def calcular_taxa(self, zona_id: str, deposito_id: str, subtotal: Decimal) -> TaxaEntregaOut:
        self._garantir_zona(zona_id)
        deposito = self._garantir_deposito(deposito_id)
        preco = self.obter_preco(zona_id, deposito_id)
        taxa = calcular_taxa_entrega(preco, subtotal, deposito.frete_gratis_valor_minimo)
        limite = deposito.frete_gratis_valor_minimo
        return TaxaEntregaOut(
            zona_id=zona_id,
            deposito_id=deposito_id,
            subtotal=subtotal,
            preco_configurado=preco is not None,
            preco_zona=preco,
            frete_gratis_valor_minimo=limite,
            frete_gratis=limite > 0 and subtotal >= limite,
            taxa_entrega=taxa,
        )

from decimal import Decimal
from typing import List, Optional, Dict

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.depositos.contracts.deposito_contract import IDepositoContract
from app.api.entregas.models.model_setor_entrega import SetorEntregaModel
from app.api.entregas.models.model_zona_entrega import ZonaEntregaModel, COR_PADRAO_ZONA
from app.api.entregas.repositories.repo_precos_zona import PrecoZonaRepository
from app.api.entregas.repositories.repo_zonas import ZonaEntregaRepository
from app.api.entregas.schemas.schema_zona_entrega import (
    SetorEntregaCreate,
    SetorEntregaOut,
    ZonaEntregaCreate,
    ZonaEntregaOut,
    ZonaEntregaSalvar,
    ZonaEntregaUpdate,
    ZonaResumoOut,
)
from app.api.entregas.utils.geometria import normalizar_poligono, poligonos_sobrepostos
from app.utils.database_utils import gerar_id
from app.utils.logger import logger


class ZonaEntregaService:
    def __init__(self, db: Session, deposito_contract: IDepositoContract):
        self.db = db
        self.repo = ZonaEntregaRepository(db)
        self.preco_repo = PrecoZonaRepository(db)
        self.deposito_contract = deposito_contract

    def _get_or_404(self, zona_id: str) -> ZonaEntregaModel:
        zona = self.repo.get(zona_id)
        if not zona:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Zona {zona_id} não encontrada")
        return zona

    def _to_out(self, zona: ZonaEntregaModel, preco: Optional[Decimal] = None) -> ZonaEntregaOut:
        return ZonaEntregaOut.model_validate(zona).model_copy(update={"preco": preco})

    def _precos_do_deposito(self, deposito_id: Optional[str]) -> Dict[str, Decimal]:
        if not deposito_id or not self.deposito_contract.filtrar_existentes([deposito_id]):
            return {}
        return {
            p.zona_id: Decimal(str(p.preco))
            for p in self.preco_repo.list(deposito_id=deposito_id)
        }

    # ---------------- Zonas ----------------
    def list(self, deposito_id: Optional[str] = None) -> List[ZonaEntregaOut]:
        precos = self._precos_do_deposito(deposito_id)
        return [self._to_out(z, precos.get(z.id)) for z in self.repo.list()]

    def get(self, zona_id: str, deposito_id: Optional[str] = None) -> ZonaEntregaOut:
        zona = self._get_or_404(zona_id)
        return self._to_out(zona, self._precos_do_deposito(deposito_id).get(zona.id))

    def create(self, payload: ZonaEntregaCreate) -> ZonaEntregaOut:
        if payload.id and self.repo.get(payload.id):
            raise HTTPException(status.HTTP_409_CONFLICT, f"Já existe uma zona com id {payload.id}")

        zona = self.repo.create(
            ZonaEntregaModel(
                id=payload.id or gerar_id(),
                nome=payload.nome,
                cor=payload.cor or COR_PADRAO_ZONA,
                poligono=payload.poligono,
            )
        )
        logger.info(f"[ZonaEntrega] Zona criada: {zona.id} ({zona.nome})")
        return self._to_out(zona)

    def upsert(self, zona_id: str, payload: ZonaEntregaCreate) -> ZonaEntregaOut:
        """Cria ou substitui a zona pelo id da rota."""
        zona = self.repo.get(zona_id)
        data = {
            "nome": payload.nome,
            "cor": payload.cor or COR_PADRAO_ZONA,
            "poligono": payload.poligono,
        }
        if zona:
            zona = self.repo.update(zona, data)
        else:
            zona = self.repo.create(ZonaEntregaModel(id=zona_id, **data))
        return self._to_out(zona)

    def update(self, zona_id: str, payload: ZonaEntregaUpdate) -> ZonaEntregaOut:
        zona = self._get_or_404(zona_id)
        data = payload.model_dump(exclude_unset=True)
        if "nome" in data and data["nome"] is None:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Nome da zona não pode ser vazio.")
        if "cor" in data and not data["cor"]:
            data["cor"] = COR_PADRAO_ZONA
        return self._to_out(self.repo.update(zona, data))

    def salvar(self, payload: ZonaEntregaSalvar) -> ZonaEntregaOut:
        """Grava geometria e preço do depósito juntos; se algo falhar, nada fica gravado."""
        if not payload.poligono:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Desenhe a área da zona antes de salvar.")

        grava_preco = bool(payload.deposito_id) and payload.taxa_entrega is not None
        if grava_preco and not self.deposito_contract.obter_deposito(payload.deposito_id):
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Depósito {payload.deposito_id} não encontrado")

        data = {
            "nome": payload.nome,
            "cor": payload.cor or COR_PADRAO_ZONA,
            "poligono": payload.poligono,
        }
        try:
            zona = self.repo.get(payload.id) if payload.id else None
            if zona:
                zona = self.repo.update(zona, data)
            else:
                zona = self.repo.create(ZonaEntregaModel(id=payload.id or gerar_id(), **data))

            preco = None
            if grava_preco:
                preco = Decimal(str(self.preco_repo.upsert(zona.id, payload.deposito_id, payload.taxa_entrega).preco))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[ZonaEntrega] Erro ao salvar zona {payload.nome}: {e}")
            raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro ao salvar a zona. Nada foi gravado.")

        if preco is None and payload.deposito_id:
            preco = self._precos_do_deposito(payload.deposito_id).get(zona.id)
        logger.info(f"[ZonaEntrega] Zona salva: {zona.id} ({zona.nome}) preço={preco}")
        return self._to_out(zona, preco)

    def delete(self, zona_id: str, mover_setores_para: Optional[str] = None):
        zona = self._get_or_404(zona_id)

        movidos = 0
        if mover_setores_para:
            if mover_setores_para == zona_id:
                raise HTTPException(
                    status.HTTP_400_BAD_REQUEST,
                    "A zona de destino dos setores deve ser diferente da zona removida.",
                )
            self._get_or_404(mover_setores_para)
            movidos = self.repo.mover_setores(zona_id, mover_setores_para)
            # Recarrega a coleção para o delete-orphan não levar os setores movidos
            self.db.expire(zona, ["setores"])

        self.repo.delete(zona)
        logger.info(f"[ZonaEntrega] Zona removida: {zona_id} (setores movidos: {movidos})")
        return {"message": "Zona removida com sucesso", "setores_movidos": movidos}

    def sobreposicoes(self, poligono, ignorar_zona_id: Optional[str] = None) -> List[ZonaResumoOut]:
        """Zonas existentes cujo polígono sobrepõe o rascunho. Serve só como aviso."""
        rascunho = normalizar_poligono(poligono)
        if not rascunho:
            return []
        sobrepostas = []
        for zona in self.repo.list():
            if zona.id == ignorar_zona_id:
                continue
            existente = normalizar_poligono(zona.poligono)
            if existente and poligonos_sobrepostos(rascunho, existente):
                sobrepostas.append(ZonaResumoOut.model_validate(zona))
        return sobrepostas

    # ---------------- Setores ----------------
    def list_setores(self, zona_id: Optional[str] = None) -> List[SetorEntregaOut]:
        return [SetorEntregaOut.model_validate(s) for s in self.repo.list_setores(zona_id)]

    def upsert_setor(self, payload: SetorEntregaCreate) -> SetorEntregaOut:
        self._get_or_404(payload.zona_id)
        setor = self.repo.upsert_setor(
            SetorEntregaModel(
                id=payload.id or gerar_id(),
                zona_id=payload.zona_id,
                nome=payload.nome,
            )
        )
        return SetorEntregaOut.model_validate(setor)

    def mover_setor(self, setor_id: str, zona_id: str) -> SetorEntregaOut:
        setor = self.repo.get_setor(setor_id)
        if not setor:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Setor não encontrado")
        self._get_or_404(zona_id)
        origem = setor.zona_id
        setor.zona_id = zona_id
        self.db.flush()
        logger.info(f"[SetorEntrega] Setor {setor_id} movido de {origem} para {zona_id}")
        return SetorEntregaOut.model_validate(setor)

    def delete_setor(self, setor_id: str):
        setor = self.repo.get_setor(setor_id)
        if not setor:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Setor não encontrado")
        self.repo.delete_setor(setor)
        return {"message": "Setor removido com sucesso"}

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.entregas.models.model_entrega import EntregaModel, StatusEntrega, STATUS_TERMINAIS
from app.api.entregas.repositories.repo_entregas import EntregaRepository
from app.api.entregas.schemas.schema_entrega import EntregaCreate, EntregaOut, PainelDespachoOut
from app.api.entregas.services.service_presenca import PresencaEntregadorService, esta_disponivel
from app.utils.database_utils import agora, gerar_id
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_transicao_entrega

MSG_ESTADO_DESATUALIZADO = "Entrega alterada por outro operador: estado desatualizado, atualize o painel."

STATUS_AGUARDANDO = (StatusEntrega.PENDENTE_ENTREGA, StatusEntrega.DEVOLVIDA)


def montar_itens_resumo(payload: EntregaCreate) -> str:
    if payload.itens:
        return ", ".join(f"{item.quantidade}x {item.produto}" for item in payload.itens)
    return payload.itens_resumo or ""


class DespachoService:
    """
    Máquina de estados das entregas.

    PENDENTE_ENTREGA/DEVOLVIDA -> EM_ROTA -> CONCLUIDA | DEVOLVIDA, e CANCELADA a
    partir de qualquer estado não terminal. Cada transição é um UPDATE
    condicionado à versão lida; se outra requisição chegou antes, responde 409.
    """

    def __init__(self, db: Session, relogio: Callable[[], datetime] = agora):
        self.db = db
        self.repo = EntregaRepository(db)
        self.presenca_service = PresencaEntregadorService(db, relogio=relogio)
        self.relogio = relogio

    def _get_or_404(self, entrega_id: str) -> EntregaModel:
        entrega = self.repo.get(entrega_id)
        if not entrega:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Entrega {entrega_id} não encontrada")
        return entrega

    def _transicionar(
        self,
        entrega_id: str,
        origens: Iterable[StatusEntrega],
        destino: StatusEntrega,
        valores: Optional[Dict] = None,
        versao_esperada: Optional[int] = None,
        entrega: Optional[EntregaModel] = None,
    ) -> EntregaOut:
        entrega = entrega or self._get_or_404(entrega_id)
        atual = entrega.status

        if atual in STATUS_TERMINAIS:
            raise HTTPException(
                status.HTTP_409_CONFLICT,
                f"Entrega já finalizada ({atual.value}); nenhuma alteração é permitida.",
            )
        if atual not in origens:
            raise HTTPException(
                status.HTTP_409_CONFLICT,
                f"Transição inválida: {atual.value} -> {destino.value}",
            )
        if versao_esperada is not None and versao_esperada != entrega.versao:
            raise HTTPException(status.HTTP_409_CONFLICT, MSG_ESTADO_DESATUALIZADO)

        data = dict(valores or {})
        data["status"] = destino
        if not self.repo.atualizar_se_versao(entrega.id, entrega.versao, data):
            logger.warning(f"[Despacho] Conflito de versão na entrega {entrega.id} ({atual.value} -> {destino.value})")
            raise HTTPException(status.HTTP_409_CONFLICT, MSG_ESTADO_DESATUALIZADO)

        self.repo.refresh(entrega)
        record_transicao_entrega(atual.value, destino.value)
        logger.info(f"[Despacho] Entrega {entrega.id} (O.S. {entrega.os_id}): {atual.value} -> {destino.value}")
        return EntregaOut.model_validate(entrega)

    # ---------------- Criação / leitura ----------------
    def criar(self, payload: EntregaCreate) -> EntregaOut:
        if payload.id and self.repo.get(payload.id):
            raise HTTPException(status.HTTP_409_CONFLICT, f"Já existe uma entrega com id {payload.id}")

        entrega = self.repo.create(
            EntregaModel(
                id=payload.id or gerar_id(),
                os_id=payload.os_id,
                deposito_id=payload.deposito_id,
                status=StatusEntrega.PENDENTE_ENTREGA,
                cliente_nome=payload.cliente_nome,
                cliente_telefone=payload.cliente_telefone,
                endereco=payload.endereco.model_dump(),
                itens_resumo=montar_itens_resumo(payload),
                valor_total=payload.valor_total,
                forma_pagamento=payload.forma_pagamento,
                observacao=payload.observacao,
                atribuida_em=self.relogio(),
                versao=1,
            )
        )
        logger.info(f"[Despacho] Entrega criada: {entrega.id} para O.S. {entrega.os_id}")
        return EntregaOut.model_validate(entrega)

    def get(self, entrega_id: str) -> EntregaOut:
        return EntregaOut.model_validate(self._get_or_404(entrega_id))

    def listar(self, status_filtro: Optional[StatusEntrega] = None) -> List[EntregaOut]:
        return [EntregaOut.model_validate(e) for e in self.repo.list(status_filtro)]

    def listar_por_entregador(
        self, entregador_id: str, status_filtro: Optional[StatusEntrega] = None
    ) -> List[EntregaOut]:
        return [
            EntregaOut.model_validate(e)
            for e in self.repo.list_by_entregador(entregador_id, status_filtro)
        ]

    def entrega_ativa(self, entregador_id: str) -> Optional[EntregaOut]:
        """Primeira entrega EM_ROTA do entregador; usada para recuperar o app após reabrir."""
        em_rota = self.repo.list_by_entregador(entregador_id, StatusEntrega.EM_ROTA)
        return EntregaOut.model_validate(em_rota[0]) if em_rota else None

    def painel(self) -> PainelDespachoOut:
        entregas = self.repo.list()
        return PainelDespachoOut(
            aguardando=[EntregaOut.model_validate(e) for e in entregas if e.status in STATUS_AGUARDANDO],
            ativas=[EntregaOut.model_validate(e) for e in entregas if e.status == StatusEntrega.EM_ROTA],
            concluidas=[EntregaOut.model_validate(e) for e in entregas if e.status == StatusEntrega.CONCLUIDA],
            entregadores=self.presenca_service.listar_status(),
            entregadores_disponiveis=self.presenca_service.listar_disponiveis(),
        )

    # ---------------- Transições ----------------
    def iniciar_rota(self, entrega_id: str, entregador_id: str, versao: Optional[int] = None) -> EntregaOut:
        entrega = self._get_or_404(entrega_id)
        if entrega.status in STATUS_AGUARDANDO:
            presenca = self.presenca_service.obter(entregador_id)
            if not esta_disponivel(presenca, self.relogio()):
                raise HTTPException(
                    status.HTTP_409_CONFLICT,
                    "Entregador indisponível: precisa estar online e DISPONIVEL.",
                )
            nome = presenca.entregador_nome
        else:
            nome = None

        # atribuida_em não muda: a entrega devolvida mantém sua posição na fila
        return self._transicionar(
            entrega_id,
            STATUS_AGUARDANDO,
            StatusEntrega.EM_ROTA,
            {
                "entregador_id": entregador_id,
                "entregador_nome": nome,
                "iniciada_em": self.relogio(),
                "motivo_devolucao": None,
            },
            versao_esperada=versao,
            entrega=entrega,
        )

    def concluir(self, entrega_id: str, versao: Optional[int] = None) -> EntregaOut:
        return self._transicionar(
            entrega_id,
            (StatusEntrega.EM_ROTA,),
            StatusEntrega.CONCLUIDA,
            {"concluida_em": self.relogio()},
            versao_esperada=versao,
        )

    def devolver(self, entrega_id: str, motivo: Optional[str], versao: Optional[int] = None) -> EntregaOut:
        motivo = (motivo or "").strip()
        if not motivo:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Informe o motivo da devolução.")
        return self._transicionar(
            entrega_id,
            (StatusEntrega.EM_ROTA,),
            StatusEntrega.DEVOLVIDA,
            {"motivo_devolucao": motivo},
            versao_esperada=versao,
        )

    def cancelar(self, entrega_id: str, confirmar: bool, versao: Optional[int] = None) -> EntregaOut:
        if not confirmar:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                "Cancelamento não confirmado. Envie confirmar=true para cancelar a entrega.",
            )
        return self._transicionar(
            entrega_id,
            (StatusEntrega.PENDENTE_ENTREGA, StatusEntrega.EM_ROTA, StatusEntrega.DEVOLVIDA),
            StatusEntrega.CANCELADA,
            {"cancelada_em": self.relogio()},
            versao_esperada=versao,
        )

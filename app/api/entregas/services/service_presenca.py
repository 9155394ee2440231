from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from app.api.entregas.models.model_presenca_entregador import (
    PresencaEntregadorModel,
    StatusEntregador,
)
from app.api.entregas.repositories.repo_presenca import PresencaEntregadorRepository
from app.api.entregas.schemas.schema_presenca import HeartbeatRequest, PresencaEntregadorOut
from app.config import settings
from app.utils.database_utils import agora, as_aware
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_heartbeat


def segundos_desde_ultimo_sinal(presenca: PresencaEntregadorModel, momento: datetime) -> float:
    return (momento - as_aware(presenca.ultimo_sinal_em)).total_seconds()


def esta_online(presenca: PresencaEntregadorModel, momento: datetime) -> bool:
    """Online enquanto o último sinal tiver menos de ENTREGADOR_OFFLINE_TIMEOUT_SECONDS."""
    return segundos_desde_ultimo_sinal(presenca, momento) < settings.ENTREGADOR_OFFLINE_TIMEOUT_SECONDS


def status_efetivo(presenca: PresencaEntregadorModel, momento: datetime) -> StatusEntregador:
    if not esta_online(presenca, momento):
        return StatusEntregador.OFFLINE
    return presenca.status


def esta_disponivel(presenca: Optional[PresencaEntregadorModel], momento: datetime) -> bool:
    return (
        presenca is not None
        and esta_online(presenca, momento)
        and presenca.status == StatusEntregador.DISPONIVEL
    )


class PresencaEntregadorService:
    """
    Presença dos entregadores por heartbeat.

    O status OFFLINE por falta de sinal é sempre derivado na leitura; a linha
    no banco guarda apenas o que o entregador informou por último.
    """

    def __init__(self, db: Session, relogio: Callable[[], datetime] = agora):
        self.db = db
        self.repo = PresencaEntregadorRepository(db)
        self.relogio = relogio

    def _to_out(self, presenca: PresencaEntregadorModel, momento: datetime) -> PresencaEntregadorOut:
        return PresencaEntregadorOut(
            entregador_id=presenca.entregador_id,
            entregador_nome=presenca.entregador_nome,
            status=status_efetivo(presenca, momento),
            status_informado=presenca.status,
            online=esta_online(presenca, momento),
            ultimo_sinal_em=as_aware(presenca.ultimo_sinal_em),
            segundos_desde_ultimo_sinal=max(0, int(segundos_desde_ultimo_sinal(presenca, momento))),
            latitude=presenca.latitude,
            longitude=presenca.longitude,
            entrega_atual_id=presenca.entrega_atual_id,
        )

    def heartbeat(self, entregador_id: str, payload: HeartbeatRequest) -> PresencaEntregadorOut:
        momento = self.relogio()
        presenca = self.repo.upsert(
            PresencaEntregadorModel(
                entregador_id=entregador_id,
                entregador_nome=payload.entregador_nome,
                status=payload.status,
                ultimo_sinal_em=momento,
                latitude=payload.latitude,
                longitude=payload.longitude,
                entrega_atual_id=payload.entrega_atual_id,
            )
        )
        record_heartbeat(payload.status.value)
        if payload.status == StatusEntregador.OFFLINE:
            logger.info(f"[Presenca] Entregador {entregador_id} ficou offline")
        return self._to_out(presenca, momento)

    def obter(self, entregador_id: str) -> Optional[PresencaEntregadorModel]:
        return self.repo.get(entregador_id)

    def listar_status(self) -> List[PresencaEntregadorOut]:
        momento = self.relogio()
        return [self._to_out(p, momento) for p in self.repo.list()]

    def listar_disponiveis(self) -> List[PresencaEntregadorOut]:
        momento = self.relogio()
        return [self._to_out(p, momento) for p in self.repo.list() if esta_disponivel(p, momento)]

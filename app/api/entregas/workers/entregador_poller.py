"""
Poller do app do entregador.

Enquanto o entregador está online, a cada ``ENTREGADOR_POLLING_SECONDS``:

1. envia heartbeat (OCUPADO com entrega em mãos, DISPONIVEL sem);
2. consulta as entregas EM_ROTA atribuídas a ele;
3. dispara o alerta local na primeira vez que vê cada entrega.

Os ciclos são agendados pelo relógio (uma task por ciclo), não pelo término
do ciclo anterior; uma requisição lenta não atrasa a próxima. Parar
interrompe só os ciclos futuros e envia OFFLINE.

Nenhum erro sai de um ciclo: falha de rede ou resposta inválida fica no log e
o próximo ciclo tenta de novo; alerta que falhou é repetido no ciclo seguinte.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

import httpx

from app.api.entregas.contracts.entregas_gateway_contract import IEntregasGateway
from app.config import settings

logger = logging.getLogger(__name__)

CallbackEntrega = Callable[[Dict], Union[None, Awaitable[None]]]

# Rede/HTTP ou corpo que não é JSON
ERROS_GATEWAY = (httpx.HTTPError, ValueError)


class EntregadorPoller:
    """Heartbeat + checagem de entregas do entregador por polling."""

    def __init__(
        self,
        gateway: IEntregasGateway,
        entregador_id: str,
        entregador_nome: str,
        ao_receber_entrega: Optional[CallbackEntrega] = None,
        ao_recuperar_entrega: Optional[CallbackEntrega] = None,
        intervalo: Optional[float] = None,
        obter_localizacao: Optional[Callable[[], Optional[tuple]]] = None,
    ):
        self.gateway = gateway
        self.entregador_id = entregador_id
        self.entregador_nome = entregador_nome
        self.ao_receber_entrega = ao_receber_entrega
        self.ao_recuperar_entrega = ao_recuperar_entrega
        self.intervalo = intervalo if intervalo is not None else settings.ENTREGADOR_POLLING_SECONDS
        self.obter_localizacao = obter_localizacao

        self.entrega_atual: Optional[Dict[str, Any]] = None
        self._entregas_vistas: Set[str] = set()
        self._ciclos: Set[asyncio.Task] = set()
        self._agendador: Optional[asyncio.Task] = None
        self._running = False

    @property
    def online(self) -> bool:
        return self._running

    async def iniciar(self):
        """Recupera a entrega ativa (uma vez) e começa os ciclos."""
        if self._running:
            return
        self._running = True
        try:
            await self._recuperar_entrega_ativa()
        finally:
            # Online sempre com ciclos rodando, mesmo se a recuperação falhar
            self._agendador = asyncio.create_task(self._agendar_ciclos())
        logger.info(f"[EntregadorPoller] Entregador {self.entregador_id} online")

    async def parar(self):
        """Para os ciclos futuros e avisa OFFLINE. Requisições em andamento não são canceladas."""
        if not self._running:
            return
        self._running = False
        if self._agendador:
            self._agendador.cancel()
            self._agendador = None
        try:
            await self.gateway.enviar_heartbeat(self.entregador_id, self._payload_heartbeat("OFFLINE"))
        except ERROS_GATEWAY as e:
            logger.warning(f"[EntregadorPoller] Falha ao avisar OFFLINE de {self.entregador_id}: {e}")
        logger.info(f"[EntregadorPoller] Entregador {self.entregador_id} offline")

    async def aguardar_ciclos(self):
        """Espera os ciclos já disparados terminarem (útil ao encerrar o app)."""
        if self._ciclos:
            await asyncio.gather(*list(self._ciclos), return_exceptions=True)

    async def _chamar(self, callback: Optional[CallbackEntrega], entrega: Dict) -> bool:
        """Executa o callback do app; False quando ele falha."""
        if callback is None:
            return True
        try:
            resultado = callback(entrega)
            if inspect.isawaitable(resultado):
                await resultado
        except Exception:
            logger.exception(f"[EntregadorPoller] Callback falhou para a entrega {entrega.get('id')}")
            return False
        return True

    async def _recuperar_entrega_ativa(self):
        try:
            entrega = await self.gateway.obter_entrega_ativa(self.entregador_id)
        except ERROS_GATEWAY as e:
            logger.warning(f"[EntregadorPoller] Falha ao recuperar entrega ativa: {e}")
            return
        if entrega:
            entrega_id = entrega["id"]
            self.entrega_atual = entrega
            self._entregas_vistas.add(entrega_id)
            logger.info(f"[EntregadorPoller] Entrega ativa recuperada: {entrega_id}")
            await self._chamar(self.ao_recuperar_entrega, entrega)

    async def _agendar_ciclos(self):
        loop = asyncio.get_running_loop()
        proximo = loop.time()
        while self._running:
            ciclo = asyncio.create_task(self._ciclo_agendado())
            self._ciclos.add(ciclo)
            ciclo.add_done_callback(self._ciclos.discard)
            proximo += self.intervalo
            await asyncio.sleep(max(0.0, proximo - loop.time()))

    async def _ciclo_agendado(self):
        # Task solta: ninguém recolhe a exceção, então ela termina aqui
        try:
            await self.executar_ciclo()
        except Exception:
            logger.exception(f"[EntregadorPoller] Erro inesperado no ciclo de {self.entregador_id}")

    def _payload_heartbeat(self, status: str) -> Dict:
        payload = {
            "entregador_nome": self.entregador_nome,
            "status": status,
            "entrega_atual_id": self.entrega_atual["id"] if self.entrega_atual else None,
        }
        if self.obter_localizacao:
            localizacao = self.obter_localizacao()
            if localizacao:
                payload["latitude"], payload["longitude"] = localizacao
        return payload

    async def executar_ciclo(self):
        """Um ciclo: heartbeat e checagem de entregas. Falhas ficam no log; o próximo ciclo tenta de novo."""
        status = "OCUPADO" if self.entrega_atual else "DISPONIVEL"
        try:
            await self.gateway.enviar_heartbeat(self.entregador_id, self._payload_heartbeat(status))
            entregas = await self.gateway.listar_entregas_em_rota(self.entregador_id)
        except ERROS_GATEWAY as e:
            logger.warning(f"[EntregadorPoller] Falha no ciclo de {self.entregador_id}: {e}")
            return

        if not self._running:
            return

        if not entregas:
            self.entrega_atual = None
            return

        self.entrega_atual = entregas[0]
        for entrega in entregas:
            if entrega["id"] in self._entregas_vistas:
                continue
            self._entregas_vistas.add(entrega["id"])
            logger.info(f"[EntregadorPoller] Nova entrega para {self.entregador_id}: {entrega['id']}")
            if not await self._chamar(self.ao_receber_entrega, entrega):
                # Alerta não chegou ao entregador: tenta de novo no próximo ciclo
                self._entregas_vistas.discard(entrega["id"])

from typing import Optional, List, Dict

import httpx

from app.api.entregas.contracts.entregas_gateway_contract import IEntregasGateway
from app.config import settings

PREFIXO_ENTREGADOR = "/api/entregas/entregador"


class HttpEntregasGateway(IEntregasGateway):
    """
    Gateway HTTP (httpx.AsyncClient) usado pelo poller do entregador.

    Erros de rede/HTTP sobem como ``httpx.HTTPError`` e corpo que não é JSON
    como ``ValueError``; quem decide tolerar é o poller.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout,
        )
        self._headers = {"Authorization": f"Bearer {token}"}

    async def enviar_heartbeat(self, entregador_id: str, payload: Dict) -> Dict:
        response = await self._client.put(
            f"{PREFIXO_ENTREGADOR}/{entregador_id}/heartbeat",
            json=payload,
            headers=self._headers,
        )
        response.raise_for_status()
        return response.json()

    async def listar_entregas_em_rota(self, entregador_id: str) -> List[Dict]:
        response = await self._client.get(
            f"{PREFIXO_ENTREGADOR}/{entregador_id}/entregas",
            params={"status": "EM_ROTA"},
            headers=self._headers,
        )
        response.raise_for_status()
        return response.json()

    async def obter_entrega_ativa(self, entregador_id: str) -> Optional[Dict]:
        response = await self._client.get(
            f"{PREFIXO_ENTREGADOR}/{entregador_id}/entrega-ativa",
            headers=self._headers,
        )
        response.raise_for_status()
        return response.json()

    async def fechar(self):
        await self._client.aclose()

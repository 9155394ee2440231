from abc import ABC, abstractmethod
from typing import Optional, List, Dict


class IEntregasGateway(ABC):
    """Acesso do app do entregador à API de entregas."""

    @abstractmethod
    async def enviar_heartbeat(self, entregador_id: str, payload: Dict) -> Dict:
        raise NotImplementedError

    @abstractmethod
    async def listar_entregas_em_rota(self, entregador_id: str) -> List[Dict]:
        raise NotImplementedError

    @abstractmethod
    async def obter_entrega_ativa(self, entregador_id: str) -> Optional[Dict]:
        raise NotImplementedError

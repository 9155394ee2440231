from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Iterable, Set

from pydantic import BaseModel


class DepositoDTO(BaseModel):
    """DTO de depósito para comunicação entre contextos."""
    id: str
    nome: str
    frete_gratis_valor_minimo: Decimal = Decimal("0")


class IDepositoContract(ABC):
    """Contrato para acesso a depósitos a partir do contexto Entregas."""

    @abstractmethod
    def obter_deposito(self, deposito_id: str) -> Optional[DepositoDTO]:
        raise NotImplementedError

    @abstractmethod
    def filtrar_existentes(self, deposito_ids: Iterable[str]) -> Set[str]:
        """Retorna o subconjunto de ids que ainda existem."""
        raise NotImplementedError

    @abstractmethod
    def definir_frete_gratis(self, deposito_id: str, valor_minimo: Decimal) -> Optional[DepositoDTO]:
        raise NotImplementedError

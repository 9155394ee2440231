from decimal import Decimal
from typing import Optional, Iterable, Set

from sqlalchemy.orm import Session

from app.api.depositos.contracts.deposito_contract import IDepositoContract, DepositoDTO
from app.api.depositos.models.model_deposito import DepositoModel
from app.api.depositos.repositories.repo_depositos import DepositoRepository


class DepositoAdapter(IDepositoContract):
    """Implementação do contrato de depósito baseada no repositório SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DepositoRepository(db)

    def _to_dto(self, d: DepositoModel) -> DepositoDTO:
        return DepositoDTO(
            id=d.id,
            nome=d.nome,
            frete_gratis_valor_minimo=Decimal(str(d.frete_gratis_valor_minimo or 0)),
        )

    def obter_deposito(self, deposito_id: str) -> Optional[DepositoDTO]:
        d = self.repo.get(deposito_id)
        if not d:
            return None
        return self._to_dto(d)

    def filtrar_existentes(self, deposito_ids: Iterable[str]) -> Set[str]:
        return self.repo.ids_existentes(deposito_ids)

    def definir_frete_gratis(self, deposito_id: str, valor_minimo: Decimal) -> Optional[DepositoDTO]:
        d = self.repo.get(deposito_id)
        if not d:
            return None
        self.repo.atualizar_frete_gratis(d, valor_minimo)
        return self._to_dto(d)

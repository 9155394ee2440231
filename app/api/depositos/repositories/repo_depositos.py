from decimal import Decimal
from typing import Optional, List

from sqlalchemy.orm import Session

from app.api.depositos.models.model_deposito import DepositoModel


class DepositoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, deposito_id: str) -> Optional[DepositoModel]:
        return self.db.query(DepositoModel).filter_by(id=deposito_id).first()

    def list(self) -> List[DepositoModel]:
        return self.db.query(DepositoModel).order_by(DepositoModel.nome.asc()).all()

    def ids_existentes(self, deposito_ids) -> set:
        ids = {d for d in deposito_ids if d}
        if not ids:
            return set()
        rows = self.db.query(DepositoModel.id).filter(DepositoModel.id.in_(ids)).all()
        return {r[0] for r in rows}

    def upsert(self, deposito: DepositoModel) -> DepositoModel:
        merged = self.db.merge(deposito)
        self.db.flush()
        return merged

    def atualizar_frete_gratis(self, deposito: DepositoModel, valor: Decimal) -> DepositoModel:
        deposito.frete_gratis_valor_minimo = valor
        self.db.flush()
        return deposito

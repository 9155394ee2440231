from typing import Optional, List

from sqlalchemy.orm import Session

from app.api.entregas.models.model_presenca_entregador import PresencaEntregadorModel


class PresencaEntregadorRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[PresencaEntregadorModel]:
        return (
            self.db.query(PresencaEntregadorModel)
            .order_by(PresencaEntregadorModel.ultimo_sinal_em.desc())
            .all()
        )

    def get(self, entregador_id: str) -> Optional[PresencaEntregadorModel]:
        return self.db.query(PresencaEntregadorModel).filter_by(entregador_id=entregador_id).first()

    def upsert(self, presenca: PresencaEntregadorModel) -> PresencaEntregadorModel:
        merged = self.db.merge(presenca)
        self.db.flush()
        return merged

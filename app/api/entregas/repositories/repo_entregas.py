from typing import Optional, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.api.entregas.models.model_entrega import EntregaModel, StatusEntrega


class EntregaRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, status: Optional[StatusEntrega] = None) -> List[EntregaModel]:
        query = self.db.query(EntregaModel)
        if status is not None:
            query = query.filter(EntregaModel.status == status)
        return query.order_by(EntregaModel.atribuida_em.asc(), EntregaModel.created_at.asc()).all()

    def list_by_entregador(self, entregador_id: str, status: Optional[StatusEntrega] = None) -> List[EntregaModel]:
        query = self.db.query(EntregaModel).filter(EntregaModel.entregador_id == entregador_id)
        if status is not None:
            query = query.filter(EntregaModel.status == status)
        return query.order_by(EntregaModel.atribuida_em.asc()).all()

    def get(self, entrega_id: str) -> Optional[EntregaModel]:
        return self.db.query(EntregaModel).filter_by(id=entrega_id).first()

    def create(self, entrega: EntregaModel) -> EntregaModel:
        self.db.add(entrega)
        self.db.flush()
        return entrega

    def atualizar_se_versao(self, entrega_id: str, versao_lida: int, data: dict) -> bool:
        """
        Atualiza apenas se a versão no banco ainda for ``versao_lida``.

        Retorna False quando outro operador alterou a entrega antes.
        """
        valores = dict(data)
        valores["versao"] = versao_lida + 1
        result = self.db.execute(
            update(EntregaModel)
            .where(EntregaModel.id == entrega_id, EntregaModel.versao == versao_lida)
            .values(**valores)
            .execution_options(synchronize_session=False)
        )
        self.db.flush()
        return result.rowcount == 1

    def refresh(self, entrega: EntregaModel) -> EntregaModel:
        self.db.refresh(entrega)
        return entrega

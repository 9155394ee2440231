from typing import Optional, List

from sqlalchemy.orm import Session

from app.api.entregas.models.model_zona_entrega import ZonaEntregaModel
from app.api.entregas.models.model_setor_entrega import SetorEntregaModel


class ZonaEntregaRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------------- Zonas ----------------
    def list(self) -> List[ZonaEntregaModel]:
        return self.db.query(ZonaEntregaModel).order_by(ZonaEntregaModel.nome.asc()).all()

    def get(self, zona_id: str) -> Optional[ZonaEntregaModel]:
        return self.db.query(ZonaEntregaModel).filter_by(id=zona_id).first()

    def create(self, zona: ZonaEntregaModel) -> ZonaEntregaModel:
        self.db.add(zona)
        self.db.flush()
        return zona

    def update(self, zona: ZonaEntregaModel, data: dict) -> ZonaEntregaModel:
        for k, v in data.items():
            setattr(zona, k, v)
        self.db.flush()
        return zona

    def delete(self, zona: ZonaEntregaModel):
        self.db.delete(zona)
        self.db.flush()

    # ---------------- Setores ----------------
    def list_setores(self, zona_id: Optional[str] = None) -> List[SetorEntregaModel]:
        query = self.db.query(SetorEntregaModel)
        if zona_id:
            query = query.filter(SetorEntregaModel.zona_id == zona_id)
        return query.order_by(SetorEntregaModel.nome.asc()).all()

    def get_setor(self, setor_id: str) -> Optional[SetorEntregaModel]:
        return self.db.query(SetorEntregaModel).filter_by(id=setor_id).first()

    def upsert_setor(self, setor: SetorEntregaModel) -> SetorEntregaModel:
        merged = self.db.merge(setor)
        self.db.flush()
        return merged

    def mover_setores(self, origem_zona_id: str, destino_zona_id: str) -> int:
        movidos = (
            self.db.query(SetorEntregaModel)
            .filter(SetorEntregaModel.zona_id == origem_zona_id)
            .update({SetorEntregaModel.zona_id: destino_zona_id}, synchronize_session="fetch")
        )
        self.db.flush()
        return movidos

    def delete_setor(self, setor: SetorEntregaModel):
        self.db.delete(setor)
        self.db.flush()

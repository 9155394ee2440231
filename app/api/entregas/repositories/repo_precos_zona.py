from decimal import Decimal
from typing import Optional, List

from sqlalchemy.orm import Session

from app.api.entregas.models.model_preco_zona import PrecoZonaModel, montar_preco_zona_id


class PrecoZonaRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, deposito_id: Optional[str] = None, zona_id: Optional[str] = None) -> List[PrecoZonaModel]:
        query = self.db.query(PrecoZonaModel)
        if deposito_id:
            query = query.filter(PrecoZonaModel.deposito_id == deposito_id)
        if zona_id:
            query = query.filter(PrecoZonaModel.zona_id == zona_id)
        return query.all()

    def get(self, preco_id: str) -> Optional[PrecoZonaModel]:
        return self.db.query(PrecoZonaModel).filter_by(id=preco_id).first()

    def get_by_par(self, zona_id: str, deposito_id: str) -> Optional[PrecoZonaModel]:
        return (
            self.db.query(PrecoZonaModel)
            .filter(
                PrecoZonaModel.zona_id == zona_id,
                PrecoZonaModel.deposito_id == deposito_id,
            )
            .first()
        )

    def upsert(self, zona_id: str, deposito_id: str, preco: Decimal) -> PrecoZonaModel:
        existente = self.get_by_par(zona_id, deposito_id)
        if existente:
            existente.preco = preco
            self.db.flush()
            return existente

        novo = PrecoZonaModel(
            id=montar_preco_zona_id(deposito_id, zona_id),
            zona_id=zona_id,
            deposito_id=deposito_id,
            preco=preco,
        )
        self.db.add(novo)
        self.db.flush()
        return novo

    def delete(self, preco: PrecoZonaModel):
        self.db.delete(preco)
        self.db.flush()

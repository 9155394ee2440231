from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed


def montar_preco_zona_id(deposito_id: str, zona_id: str) -> str:
    return f"{deposito_id}:{zona_id}"


class PrecoZonaModel(Base):
    """
    Preço de entrega de uma zona para um depósito.

    ``deposito_id`` não tem FK: o depósito pertence a outro contexto e linhas
    de depósitos removidos são tratadas como ausentes na consulta.
    """
    __tablename__ = "precos_zona"
    __table_args__ = (
        UniqueConstraint("zona_id", "deposito_id", name="uq_precos_zona_zona_deposito"),
        Index("idx_precos_zona_deposito", "deposito_id"),
    )

    id = Column(String(80), primary_key=True)
    zona_id = Column(String(36), ForeignKey("zonas_entrega.id", ondelete="CASCADE"), nullable=False)
    deposito_id = Column(String(36), nullable=False)
    preco = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    zona = relationship("ZonaEntregaModel", back_populates="precos")

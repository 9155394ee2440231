from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed, gerar_id


class SetorEntregaModel(Base):
    """Subárea nomeada de uma zona, sem geometria própria."""
    __tablename__ = "setores_entrega"
    __table_args__ = (
        Index("idx_setores_entrega_zona", "zona_id"),
    )

    id = Column(String(36), primary_key=True, default=gerar_id)
    zona_id = Column(String(36), ForeignKey("zonas_entrega.id", ondelete="CASCADE"), nullable=False)
    nome = Column(String(120), nullable=False)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    zona = relationship("ZonaEntregaModel", back_populates="setores")

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed, gerar_id

COR_PADRAO_ZONA = "#f97316"


class ZonaEntregaModel(Base):
    """
    Zona de entrega global (não pertence a um depósito).

    O preço de entrega da zona varia por depósito e fica em ``precos_zona``.
    """
    __tablename__ = "zonas_entrega"

    id = Column(String(36), primary_key=True, default=gerar_id)
    nome = Column(String(120), nullable=False)
    cor = Column(String(20), nullable=True, default=COR_PADRAO_ZONA)

    # Lista de anéis [[lat, lng], ...]; nula até a área ser desenhada
    poligono = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    setores = relationship(
        "SetorEntregaModel",
        back_populates="zona",
        cascade="all, delete-orphan",
    )
    precos = relationship(
        "PrecoZonaModel",
        back_populates="zona",
        cascade="all, delete-orphan",
    )

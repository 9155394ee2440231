import enum

from sqlalchemy import Column, String, DateTime, Float, Enum as SAEnum

from app.database.db_connection import Base


class StatusEntregador(enum.Enum):
    DISPONIVEL = "DISPONIVEL"
    OCUPADO = "OCUPADO"
    OFFLINE = "OFFLINE"


StatusEntregadorEnum = SAEnum(
    StatusEntregador,
    name="entregador_status_enum",
    native_enum=False,
    length=20,
)


class PresencaEntregadorModel(Base):
    """Último sinal de vida de cada entregador. Uma linha por entregador, nunca apagada."""
    __tablename__ = "presenca_entregadores"

    entregador_id = Column(String(36), primary_key=True)
    entregador_nome = Column(String(150), nullable=False)
    status = Column(StatusEntregadorEnum, nullable=False, default=StatusEntregador.OFFLINE)
    ultimo_sinal_em = Column(DateTime(timezone=True), nullable=False)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    entrega_atual_id = Column(String(36), nullable=True)

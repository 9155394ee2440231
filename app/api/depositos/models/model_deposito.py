from decimal import Decimal

from sqlalchemy import Column, String, DateTime, Numeric

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed, gerar_id


class DepositoModel(Base):
    """Depósito (cadastro mantido por outro módulo); aqui só o frete grátis é alterado."""
    __tablename__ = "depositos"

    id = Column(String(36), primary_key=True, default=gerar_id)
    nome = Column(String(120), nullable=False)

    # 0 = sem frete grátis
    frete_gratis_valor_minimo = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

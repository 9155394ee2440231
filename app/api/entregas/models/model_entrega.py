import enum

from sqlalchemy import (
    Column, String, DateTime, Integer, Numeric, JSON, Enum as SAEnum, Index
)

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed, gerar_id


class StatusEntrega(enum.Enum):
    """Ciclo de vida de uma entrega.

    - PENDENTE_ENTREGA: criada, aguardando saída
    - EM_ROTA: entregador saiu com o pedido
    - CONCLUIDA: entregue (terminal)
    - DEVOLVIDA: entrega falhou; pode ser despachada de novo
    - CANCELADA: abortada (terminal, mantida para auditoria)
    """
    PENDENTE_ENTREGA = "PENDENTE_ENTREGA"
    EM_ROTA = "EM_ROTA"
    CONCLUIDA = "CONCLUIDA"
    DEVOLVIDA = "DEVOLVIDA"
    CANCELADA = "CANCELADA"


STATUS_TERMINAIS = frozenset({StatusEntrega.CONCLUIDA, StatusEntrega.CANCELADA})

StatusEntregaEnum = SAEnum(
    StatusEntrega,
    name="entrega_status_enum",
    native_enum=False,
    length=20,
)


class EntregaModel(Base):
    """
    Entrega (despacho) de uma ordem de serviço.

    Guarda um retrato dos dados da O.S. para o painel não precisar relê-la.
    Nunca é apagada; ``versao`` é incrementada a cada transição e usada como
    compare-and-swap.
    """
    __tablename__ = "entregas"
    __table_args__ = (
        Index("idx_entregas_status_atribuida", "status", "atribuida_em"),
        Index("idx_entregas_entregador_status", "entregador_id", "status"),
        Index("idx_entregas_os", "os_id"),
    )

    id = Column(String(36), primary_key=True, default=gerar_id)
    os_id = Column(String(36), nullable=False)
    deposito_id = Column(String(36), nullable=True)

    status = Column(StatusEntregaEnum, nullable=False, default=StatusEntrega.PENDENTE_ENTREGA)

    # Retrato da O.S.
    cliente_nome = Column(String(150), nullable=False)
    cliente_telefone = Column(String(30), nullable=True)
    endereco = Column(JSON, nullable=False)  # {"completo": str, "latitude": float|None, "longitude": float|None}
    itens_resumo = Column(String(500), nullable=False, default="")
    valor_total = Column(Numeric(12, 2), nullable=False, default=0)
    forma_pagamento = Column(String(60), nullable=True)
    observacao = Column(String(500), nullable=True)

    # Atribuição
    entregador_id = Column(String(36), nullable=True)
    entregador_nome = Column(String(150), nullable=True)
    motivo_devolucao = Column(String(255), nullable=True)

    # Ordem da fila: definida na criação e mantida no redespacho
    atribuida_em = Column(DateTime(timezone=True), nullable=False)
    iniciada_em = Column(DateTime(timezone=True), nullable=True)
    concluida_em = Column(DateTime(timezone=True), nullable=True)
    cancelada_em = Column(DateTime(timezone=True), nullable=True)

    versao = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

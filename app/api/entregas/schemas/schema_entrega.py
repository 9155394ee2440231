from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, conint, constr, field_validator

from app.api.entregas.models.model_entrega import StatusEntrega
from app.api.entregas.schemas.schema_presenca import PresencaEntregadorOut
from app.utils.database_utils import as_aware


class EnderecoEntrega(BaseModel):
    completo: constr(strip_whitespace=True, min_length=1) = Field(..., example="Rua 7, 120 - Centro")
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ItemOrdemServico(BaseModel):
    produto: constr(min_length=1)
    quantidade: conint(gt=0) = 1


class EntregaCreate(BaseModel):
    """Retrato da ordem de serviço que precisa de entrega."""
    id: Optional[str] = None
    os_id: constr(strip_whitespace=True, min_length=1)
    deposito_id: Optional[str] = None
    cliente_nome: constr(strip_whitespace=True, min_length=1)
    cliente_telefone: Optional[str] = None
    endereco: EnderecoEntrega
    valor_total: condecimal(ge=0, decimal_places=2) = Decimal("0")
    itens: List[ItemOrdemServico] = []
    itens_resumo: Optional[str] = Field(None, description="Usado quando `itens` não é enviado.")
    forma_pagamento: Optional[str] = None
    observacao: Optional[str] = None


class IniciarRotaRequest(BaseModel):
    entregador_id: constr(strip_whitespace=True, min_length=1)


class DevolverEntregaRequest(BaseModel):
    motivo: Optional[str] = None


class CancelarEntregaRequest(BaseModel):
    confirmar: bool = Field(False, description="Cancelamento é irreversível; exige confirmação explícita.")


class EntregaOut(BaseModel):
    id: str
    os_id: str
    deposito_id: Optional[str] = None
    status: StatusEntrega
    cliente_nome: str
    cliente_telefone: Optional[str] = None
    endereco: EnderecoEntrega
    itens_resumo: str
    valor_total: Decimal
    forma_pagamento: Optional[str] = None
    observacao: Optional[str] = None
    entregador_id: Optional[str] = None
    entregador_nome: Optional[str] = None
    motivo_devolucao: Optional[str] = None
    atribuida_em: datetime
    iniciada_em: Optional[datetime] = None
    concluida_em: Optional[datetime] = None
    cancelada_em: Optional[datetime] = None
    versao: int

    model_config = ConfigDict(from_attributes=True)

    @field_validator("atribuida_em", "iniciada_em", "concluida_em", "cancelada_em")
    @classmethod
    def _com_fuso(cls, v):
        return as_aware(v)


class PainelDespachoOut(BaseModel):
    aguardando: List[EntregaOut]
    ativas: List[EntregaOut]
    concluidas: List[EntregaOut]
    entregadores: List[PresencaEntregadorOut]
    entregadores_disponiveis: List[PresencaEntregadorOut]

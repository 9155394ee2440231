from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, constr

from app.api.entregas.models.model_presenca_entregador import StatusEntregador


class HeartbeatRequest(BaseModel):
    entregador_nome: constr(strip_whitespace=True, min_length=1)
    status: StatusEntregador = StatusEntregador.DISPONIVEL
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    entrega_atual_id: Optional[str] = None


class PresencaEntregadorOut(BaseModel):
    entregador_id: str
    entregador_nome: str
    status: StatusEntregador = Field(..., description="Status efetivo: OFFLINE quando o sinal expirou.")
    status_informado: StatusEntregador
    online: bool
    ultimo_sinal_em: datetime
    segundos_desde_ultimo_sinal: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    entrega_atual_id: Optional[str] = None

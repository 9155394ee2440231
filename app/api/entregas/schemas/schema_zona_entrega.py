from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, condecimal, constr

from app.api.entregas.utils.geometria import normalizar_poligono, poligono_para_json

PoligonoJSON = List[List[List[float]]]


def _validar_poligono(value: Any) -> Optional[PoligonoJSON]:
    if value is None:
        return None
    poligono = normalizar_poligono(value)
    if poligono is None:
        raise ValueError("Polígono inválido: informe ao menos um anel com 3 pontos válidos.")
    return poligono_para_json(poligono)


# Toda entrada de polígono passa por normalizar_poligono antes de chegar aos services
PoligonoEntrada = Annotated[Optional[Any], AfterValidator(_validar_poligono)]


class ZonaEntregaCreate(BaseModel):
    id: Optional[str] = Field(None, description="Opcional; gerado quando ausente.")
    nome: constr(strip_whitespace=True, min_length=1)
    cor: Optional[str] = Field(None, example="#f97316")
    poligono: PoligonoEntrada = Field(
        None,
        description="GeoJSON (Polygon/MultiPolygon/Feature), texto JSON ou lista de anéis [lat, lng].",
    )


class ZonaEntregaUpdate(BaseModel):
    nome: Optional[constr(strip_whitespace=True, min_length=1)] = None
    cor: Optional[str] = None
    poligono: PoligonoEntrada = None


class ZonaEntregaSalvar(BaseModel):
    """Salva geometria e, se houver depósito selecionado, o preço numa única ação."""
    id: Optional[str] = None
    nome: constr(strip_whitespace=True, min_length=1)
    cor: Optional[str] = None
    poligono: PoligonoEntrada = None
    deposito_id: Optional[str] = None
    taxa_entrega: Optional[condecimal(ge=0, decimal_places=2)] = Field(None, example="8.50")


class SetorEntregaOut(BaseModel):
    id: str
    zona_id: str
    nome: str

    model_config = ConfigDict(from_attributes=True)


class ZonaEntregaOut(BaseModel):
    id: str
    nome: str
    cor: Optional[str] = None
    poligono: Optional[PoligonoJSON] = None
    setores: List[SetorEntregaOut] = []
    preco: Optional[Decimal] = Field(None, description="Preço para o depósito consultado, se configurado.")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ZonaResumoOut(BaseModel):
    id: str
    nome: str
    cor: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SobreposicaoRequest(BaseModel):
    poligono: PoligonoEntrada
    ignorar_zona_id: Optional[str] = None


class SobreposicaoOut(BaseModel):
    zonas: List[ZonaResumoOut]


class SetorEntregaCreate(BaseModel):
    id: Optional[str] = None
    zona_id: str
    nome: constr(strip_whitespace=True, min_length=1)


class SetorEntregaMover(BaseModel):
    zona_id: str = Field(..., description="Zona de destino")

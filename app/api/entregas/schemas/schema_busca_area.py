import enum
from typing import Optional

from pydantic import BaseModel

from app.api.entregas.schemas.schema_zona_entrega import PoligonoJSON


class ResultadoBuscaArea(str, enum.Enum):
    POLIGONO = "POLIGONO"          # limite oficial encontrado
    RETANGULO = "RETANGULO"        # sem limite, usa o bounding box
    PONTO = "PONTO"                # só a localização; desenhar manualmente
    NAO_ENCONTRADO = "NAO_ENCONTRADO"


class CentroMapa(BaseModel):
    latitude: float
    longitude: float
    zoom: int


class CandidatoAreaOut(BaseModel):
    nome_exibicao: str
    classe: Optional[str] = None
    tipo: Optional[str] = None
    pontuacao: float


class BuscaAreaOut(BaseModel):
    resultado: ResultadoBuscaArea
    termo: str
    escopo: str
    poligono: Optional[PoligonoJSON] = None
    centro: Optional[CentroMapa] = None
    nome_sugerido: Optional[str] = None
    aviso: Optional[str] = None
    candidato: Optional[CandidatoAreaOut] = None

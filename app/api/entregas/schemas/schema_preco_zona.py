from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


class PrecoZonaUpsert(BaseModel):
    zona_id: str
    deposito_id: str
    preco: condecimal(ge=0, decimal_places=2) = Field(..., example="8.50")


class PrecoZonaOut(BaseModel):
    id: str
    zona_id: str
    deposito_id: str
    preco: Decimal

    model_config = ConfigDict(from_attributes=True)


class PrecoZonaConsultaOut(BaseModel):
    zona_id: str
    deposito_id: str
    configurado: bool
    preco: Optional[Decimal] = None


class FreteGratisUpdate(BaseModel):
    valor_minimo: condecimal(ge=0, decimal_places=2) = Field(
        ...,
        example="150.00",
        description="Pedidos com subtotal igual ou acima deste valor não pagam entrega. 0 desativa.",
    )


class FreteGratisOut(BaseModel):
    deposito_id: str
    valor_minimo: Decimal


class TaxaEntregaOut(BaseModel):
    zona_id: str
    deposito_id: str
    subtotal: Decimal
    preco_configurado: bool
    preco_zona: Optional[Decimal] = None
    frete_gratis_valor_minimo: Decimal
    frete_gratis: bool
    taxa_entrega: Optional[Decimal] = Field(
        None,
        description="Nula quando a zona não tem preço para o depósito e não há frete grátis.",
    )

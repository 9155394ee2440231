"""
Models de Entregas
Importa todos os models para garantir registro no SQLAlchemy
"""
from app.api.entregas.models.model_zona_entrega import ZonaEntregaModel
from app.api.entregas.models.model_setor_entrega import SetorEntregaModel
from app.api.entregas.models.model_preco_zona import PrecoZonaModel
from app.api.entregas.models.model_entrega import EntregaModel, StatusEntrega
from app.api.entregas.models.model_presenca_entregador import PresencaEntregadorModel, StatusEntregador
from app.api.depositos.models.model_deposito import DepositoModel

__all__ = [
    "ZonaEntregaModel",
    "SetorEntregaModel",
    "PrecoZonaModel",
    "EntregaModel",
    "StatusEntrega",
    "PresencaEntregadorModel",
    "StatusEntregador",
    "DepositoModel",
]

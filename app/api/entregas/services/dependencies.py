from fastapi import Depends
from sqlalchemy.orm import Session

from app.database.db_connection import get_db
from app.api.depositos.contracts.deposito_contract import IDepositoContract
from app.api.depositos.contracts.dependencies import get_deposito_contract
from app.api.entregas.services.service_busca_area import BuscaAreaService
from app.api.entregas.services.service_despacho import DespachoService
from app.api.entregas.services.service_precos_zona import PrecoZonaService
from app.api.entregas.services.service_presenca import PresencaEntregadorService
from app.api.entregas.services.service_zonas import ZonaEntregaService
from app.api.localizacao.adapters.cache_adapter import CacheAdapter
from app.api.localizacao.adapters.nominatim_adapter import NominatimAdapter
from app.api.localizacao.contracts.busca_area_contract import IBuscaAreaProvider

# Cache compartilhado entre requisições (processo)
_cache_busca_area = CacheAdapter()


def get_busca_area_provider() -> IBuscaAreaProvider:
    return NominatimAdapter()


def get_busca_area_service(
    provider: IBuscaAreaProvider = Depends(get_busca_area_provider),
) -> BuscaAreaService:
    return BuscaAreaService(provider, cache=_cache_busca_area)


def get_zona_service(
    db: Session = Depends(get_db),
    deposito_contract: IDepositoContract = Depends(get_deposito_contract),
) -> ZonaEntregaService:
    return ZonaEntregaService(db, deposito_contract=deposito_contract)


def get_preco_zona_service(
    db: Session = Depends(get_db),
    deposito_contract: IDepositoContract = Depends(get_deposito_contract),
) -> PrecoZonaService:
    return PrecoZonaService(db, deposito_contract=deposito_contract)


def get_despacho_service(db: Session = Depends(get_db)) -> DespachoService:
    return DespachoService(db)


def get_presenca_service(db: Session = Depends(get_db)) -> PresencaEntregadorService:
    return PresencaEntregadorService(db)

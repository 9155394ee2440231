from typing import Optional, List, Dict

import httpx

from app.api.localizacao.contracts.busca_area_contract import IBuscaAreaProvider
from app.config import settings
from app.utils.logger import logger


class NominatimAdapter(IBuscaAreaProvider):
    """Adapter para o Nominatim (OpenStreetMap) - busca de áreas com polígono."""

    SEARCH_PATH = "/search"
    LIMITE_RESULTADOS = 8

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self.timeout = timeout or settings.NOMINATIM_TIMEOUT_SECONDS
        self.transport = transport

    def _montar_params(self, consulta: str, limites: Optional[Dict[str, float]]) -> Dict:
        params = {
            "format": "jsonv2",
            "q": consulta,
            "polygon_geojson": 1,
            "addressdetails": 1,
            "limit": self.LIMITE_RESULTADOS,
            "dedupe": 1,
            "countrycodes": "br",
        }
        if limites:
            # viewbox = oeste,norte,leste,sul
            params["viewbox"] = f"{limites['west']},{limites['north']},{limites['east']},{limites['south']}"
            params["bounded"] = 1
        return params

    def buscar_areas(self, consulta: str, limites: Optional[Dict[str, float]] = None) -> Optional[List[Dict]]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(
                    f"{self.base_url}{self.SEARCH_PATH}",
                    params=self._montar_params(consulta, limites),
                    headers={
                        "Accept-Language": "pt-BR",
                        # Política de uso do Nominatim exige User-Agent identificável
                        "User-Agent": self.user_agent,
                    },
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[NominatimAdapter] Erro HTTP ao buscar '{consulta}': Status {e.response.status_code}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[NominatimAdapter] Erro ao buscar '{consulta}': {e}")
            return None

        if not isinstance(data, list):
            logger.warning(f"[NominatimAdapter] Resposta inesperada para '{consulta}': {type(data).__name__}")
            return None

        if not data:
            logger.info(f"[NominatimAdapter] Nenhum resultado encontrado para '{consulta}'")
        return data

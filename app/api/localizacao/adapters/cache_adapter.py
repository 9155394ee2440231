from collections import OrderedDict
from typing import Optional, Dict, Tuple, List
from threading import Lock

from app.config import settings


class CacheAdapter:
    """
    Adapter para cache de buscas de área em memória, por (termo, escopo).

    Guarda no máximo ``max_entradas`` buscas; ao passar do limite, descarta a
    usada há mais tempo.
    """

    def __init__(self, max_entradas: Optional[int] = None):
        self._cache_buscas: "OrderedDict[Tuple[str, str], List[Dict]]" = OrderedDict()
        self._lock = Lock()
        self.max_entradas = max_entradas or settings.ZONA_BUSCA_CACHE_MAX_ENTRADAS

    @staticmethod
    def montar_chave(termo: str, escopo: str) -> Tuple[str, str]:
        return (termo.strip().lower(), escopo.strip().lower())

    def get(self, key: Tuple[str, str]) -> Optional[List[Dict]]:
        """Obtém resultados do cache."""
        with self._lock:
            resultados = self._cache_buscas.get(key)
            if resultados is not None:
                self._cache_buscas.move_to_end(key)
            return resultados

    def set(self, key: Tuple[str, str], resultados: List[Dict]):
        """Armazena resultados no cache. Falhas do provedor (None) não são guardadas."""
        with self._lock:
            self._cache_buscas[key] = resultados
            self._cache_buscas.move_to_end(key)
            while len(self._cache_buscas) > self.max_entradas:
                self._cache_buscas.popitem(last=False)

    def clear(self, key: Optional[Tuple[str, str]] = None):
        """Limpa o cache. Se key for fornecido, remove apenas essa entrada."""
        with self._lock:
            if key:
                self._cache_buscas.pop(key, None)
            else:
                self._cache_buscas.clear()

from abc import ABC, abstractmethod
from typing import Optional, List, Dict


class IBuscaAreaProvider(ABC):
    """Interface para provedores de busca de áreas (bairros, setores) com geometria."""

    @abstractmethod
    def buscar_areas(self, consulta: str, limites: Optional[Dict[str, float]] = None) -> Optional[List[Dict]]:
        """
        Busca lugares para a consulta informada.

        Args:
            consulta: Texto completo já com o escopo (ex.: "Setor Morada do Sol, Rio Verde, GO")
            limites: Caixa {"south", "north", "west", "east"} que restringe a busca, se houver

        Returns:
            Lista de resultados no formato jsonv2 do Nominatim, lista vazia quando
            nada foi encontrado, ou None quando o provedor falhou.
        """
        pass

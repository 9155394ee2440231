"""
Busca de áreas (bairros/setores) para desenhar zonas de entrega.

A consulta vai ao provedor (Nominatim) e os resultados passam por heurísticas
para escolher um limite oficial quando o termo indica uma área:

- filtro suave pela cidade do escopo (sem acento, sem caixa);
- termos de área ("bairro", "setor", ...) restringem a limites administrativos
  e lugares do tipo bairro, e depois aos que contêm os tokens do termo;
- pontuação por importância, polígono, tipo e cidade.

Os pesos ficam em constantes do módulo para poderem ser ajustados.
"""
import math
import re
import unicodedata
from typing import Optional, List, Dict, Tuple

from fastapi import HTTPException, status

from app.api.entregas.schemas.schema_busca_area import (
    BuscaAreaOut,
    CandidatoAreaOut,
    CentroMapa,
    ResultadoBuscaArea,
)
from app.api.entregas.utils.geometria import (
    geojson_para_poligono,
    poligono_para_json,
    retangulo_de_bbox,
)
from app.api.localizacao.adapters.cache_adapter import CacheAdapter
from app.api.localizacao.contracts.busca_area_contract import IBuscaAreaProvider
from app.config import settings
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_busca_area

PALAVRAS_AREA = (
    "bairro", "setor", "zona", "distrito", "regiao",
    "vila", "jardim", "loteamento", "condominio",
)

PALAVRAS_IGNORADAS = frozenset({
    "bairro", "setor", "zona", "distrito", "regiao", "rua", "avenida", "av",
    "praca", "vila", "jardim", "jd", "loteamento", "condominio", "cidade", "municipio",
})

TIPOS_LUGAR_PREFERIDOS = frozenset({"neighbourhood", "suburb", "quarter", "city_district", "borough"})
CLASSES_POI = frozenset({"amenity", "tourism", "shop", "building", "highway", "leisure", "natural"})

PESO_POLIGONO = 5
PESO_LIMITE = 6
PESO_LUGAR = 4
PESO_BAIRRO = 2
PESO_POI = -4
PESO_CIDADE = 2
PESO_NOME = 1

ZOOM_LOCAL = 15
ZOOM_HUB = 12

AVISO_SEM_LIMITES = "Sem limites oficiais do bairro no alcance. Desenhe a area manualmente."
AVISO_SEM_POLIGONO = "Endereco encontrado, mas sem limite do bairro. Desenhe a area manualmente."
AVISO_SEM_LOCALIZACAO = "Localizacao nao encontrada. Desenhe a area manualmente."


def normalizar_texto(valor: Optional[str]) -> str:
    decomposto = unicodedata.normalize("NFD", str(valor or ""))
    return "".join(c for c in decomposto if not unicodedata.combining(c)).lower()


def cidade_do_escopo(escopo: str) -> str:
    return normalizar_texto((escopo or "").split(",")[0].strip())


def nome_cidade(item: Dict) -> str:
    endereco = item.get("address") or {}
    for chave in ("city", "town", "village", "hamlet", "locality", "municipality", "county"):
        if endereco.get(chave):
            return str(endereco[chave])
    return ""


def extrair_tokens(termo: str) -> List[str]:
    return [
        t for t in re.split(r"[^a-z0-9]+", normalizar_texto(termo))
        if len(t) > 2 and t not in PALAVRAS_IGNORADAS
    ]


def tem_intencao_area(termo: str) -> bool:
    normalizado = normalizar_texto(termo)
    return any(palavra in normalizado for palavra in PALAVRAS_AREA)


def item_casa_tokens(item: Dict, tokens: List[str]) -> bool:
    if not tokens:
        return True
    endereco = item.get("address") or {}
    campos = [
        item.get("name"),
        item.get("display_name"),
        endereco.get("neighbourhood"),
        endereco.get("suburb"),
        endereco.get("quarter"),
        endereco.get("city_district"),
        endereco.get("borough"),
        endereco.get("locality"),
    ]
    texto = normalizar_texto(" ".join(str(c) for c in campos if c))
    return all(token in texto for token in tokens)


def item_na_cidade(item: Dict, cidade: str) -> bool:
    if not cidade:
        return True
    return cidade in normalizar_texto(nome_cidade(item))


def eh_limite(item: Dict) -> bool:
    return item.get("class") == "boundary" or item.get("type") == "administrative"


def eh_lugar_preferido(item: Dict) -> bool:
    return item.get("class") == "place" and item.get("type") in TIPOS_LUGAR_PREFERIDOS


def _importancia(item: Dict) -> float:
    """`importance` quando presente, senão `place_rank`; valor não numérico conta 0."""
    valor = item.get("importance")
    if valor is None:
        valor = item.get("place_rank")
    return _numero_finito(valor) or 0.0


def pontuar(item: Dict, termo: str, escopo: str) -> float:
    pontos = _importancia(item)
    if geojson_para_poligono(item.get("geojson")):
        pontos += PESO_POLIGONO
    if eh_limite(item):
        pontos += PESO_LIMITE
    if eh_lugar_preferido(item):
        pontos += PESO_LUGAR
    if item.get("class") == "place" and item.get("type") == "neighbourhood":
        pontos += PESO_BAIRRO
    if item.get("class") in CLASSES_POI:
        pontos += PESO_POI

    cidade_escopo = cidade_do_escopo(escopo)
    cidade = normalizar_texto(nome_cidade(item))
    if cidade_escopo and cidade:
        pontos += PESO_CIDADE if cidade_escopo in cidade else -PESO_CIDADE

    termo_normalizado = normalizar_texto(termo)
    if termo_normalizado and termo_normalizado in normalizar_texto(item.get("display_name")):
        pontos += PESO_NOME
    return pontos


def filtrar_candidatos(resultados: List[Dict], termo: str, escopo: str) -> List[Dict]:
    cidade = cidade_do_escopo(escopo)
    no_escopo = [r for r in resultados if item_na_cidade(r, cidade)]
    if not tem_intencao_area(termo):
        return no_escopo

    limites = [r for r in no_escopo if eh_limite(r) or eh_lugar_preferido(r)]
    tokens = extrair_tokens(termo)
    por_token = [r for r in limites if item_casa_tokens(r, tokens)] if tokens else limites
    return por_token or limites


def escolher_melhor(candidatos: List[Dict], termo: str, escopo: str) -> Optional[Tuple[Dict, float]]:
    """Ordem: polígono de limite/lugar, depois qualquer polígono, depois maior pontuação."""
    if not candidatos:
        return None

    pontuados = []
    for item in candidatos:
        tem_poligono = geojson_para_poligono(item.get("geojson")) is not None
        pontuados.append((item, pontuar(item, termo, escopo), tem_poligono))

    preferidos = [p for p in pontuados if p[2] and (eh_limite(p[0]) or eh_lugar_preferido(p[0]))]
    com_poligono = [p for p in pontuados if p[2]]
    grupo = preferidos or com_poligono or pontuados

    # max() mantém o primeiro em caso de empate, igual à ordem do provedor
    melhor = max(grupo, key=lambda p: p[1])
    return melhor[0], melhor[1]


def _numero_finito(valor) -> Optional[float]:
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    return numero if math.isfinite(numero) else None


def _retangulo_do_item(item: Dict):
    bbox = item.get("boundingbox")
    if not isinstance(bbox, (list, tuple)) or len(bbox) != 4:
        return None
    sul, norte, oeste, leste = (_numero_finito(v) for v in bbox)
    if None in (sul, norte, oeste, leste):
        return None
    return retangulo_de_bbox(sul, norte, oeste, leste)


def resolver_area(resultados: List[Dict], termo: str, escopo: str) -> BuscaAreaOut:
    """Transforma os resultados do provedor no desfecho da busca. Função pura."""
    hub = CentroMapa(latitude=settings.HUB_LATITUDE, longitude=settings.HUB_LONGITUDE, zoom=ZOOM_HUB)
    base = {"termo": termo, "escopo": escopo, "nome_sugerido": termo}

    escolhido = escolher_melhor(filtrar_candidatos(resultados, termo, escopo), termo, escopo)
    if escolhido is None:
        return BuscaAreaOut(resultado=ResultadoBuscaArea.NAO_ENCONTRADO, centro=hub, aviso=AVISO_SEM_LIMITES, **base)

    item, pontuacao = escolhido
    candidato = CandidatoAreaOut(
        nome_exibicao=str(item.get("display_name") or item.get("name") or ""),
        classe=item.get("class"),
        tipo=item.get("type"),
        pontuacao=pontuacao,
    )

    lat, lng = _numero_finito(item.get("lat")), _numero_finito(item.get("lon"))
    if lat is None or lng is None:
        return BuscaAreaOut(
            resultado=ResultadoBuscaArea.NAO_ENCONTRADO,
            centro=hub,
            aviso=AVISO_SEM_LOCALIZACAO,
            candidato=candidato,
            **base,
        )
    centro = CentroMapa(latitude=lat, longitude=lng, zoom=ZOOM_LOCAL)

    # Polígono só vale para limite oficial ou lugar do tipo bairro
    if eh_limite(item) or eh_lugar_preferido(item):
        poligono = geojson_para_poligono(item.get("geojson"))
        if poligono:
            return BuscaAreaOut(
                resultado=ResultadoBuscaArea.POLIGONO,
                poligono=poligono_para_json(poligono),
                centro=centro,
                candidato=candidato,
                **base,
            )
        retangulo = _retangulo_do_item(item)
        if retangulo:
            return BuscaAreaOut(
                resultado=ResultadoBuscaArea.RETANGULO,
                poligono=poligono_para_json(retangulo),
                centro=centro,
                candidato=candidato,
                **base,
            )

    return BuscaAreaOut(
        resultado=ResultadoBuscaArea.PONTO,
        centro=centro,
        aviso=AVISO_SEM_POLIGONO,
        candidato=candidato,
        **base,
    )


class BuscaAreaService:
    def __init__(self, provider: IBuscaAreaProvider, cache: Optional[CacheAdapter] = None):
        self.provider = provider
        self.cache = cache

    def _limites_para(self, escopo: str) -> Optional[Dict[str, float]]:
        if cidade_do_escopo(escopo) == cidade_do_escopo(settings.ZONA_BUSCA_ESCOPO_PADRAO):
            return dict(settings.ZONA_BUSCA_LIMITES_PADRAO)
        return None

    def buscar(self, termo: str, escopo: Optional[str] = None) -> BuscaAreaOut:
        termo = (termo or "").strip()
        if not termo:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Informe o termo da busca.")
        escopo = (escopo or "").strip() or settings.ZONA_BUSCA_ESCOPO_PADRAO

        chave = CacheAdapter.montar_chave(termo, escopo)
        resultados = self.cache.get(chave) if self.cache is not None else None
        if resultados is None:
            resultados = self.provider.buscar_areas(f"{termo}, {escopo}", self._limites_para(escopo))
            if resultados is None:
                record_busca_area("FALHA")
                raise HTTPException(
                    status.HTTP_502_BAD_GATEWAY,
                    "Falha ao buscar local. Tente novamente ou desenhe a area manualmente.",
                )
            if self.cache is not None:
                self.cache.set(chave, resultados)

        desfecho = resolver_area(resultados, termo, escopo)
        logger.info(
            f"[BuscaArea] '{termo}' em '{escopo}': {len(resultados)} resultado(s), desfecho {desfecho.resultado.value}"
        )
        record_busca_area(desfecho.resultado.value)
        return desfecho

"""
Geometria das zonas de entrega.

Funções puras sobre polígonos em coordenadas (lat, lng):

- normalização de entradas heterogêneas (GeoJSON, JSON em texto, anéis de
  pares ou de dicionários) para a forma canônica ``[[(lat, lng), ...], ...]``;
- detecção de sobreposição entre zonas (bbox + cruzamento de segmentos +
  ponto-no-polígono).

A sobreposição é aproximada: considera apenas o anel externo e o primeiro
vértice para detectar contenção. Serve para avisar o operador, não para
bloquear o cadastro.
"""
from __future__ import annotations

import json
import math
from typing import Any, Iterable, List, Optional, Tuple

LatLng = Tuple[float, float]
Anel = List[LatLng]
Poligono = List[Anel]
BBox = Tuple[float, float, float, float]  # (min_lat, max_lat, min_lng, max_lng)

MIN_PONTOS_ANEL = 3


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def ponto_para_latlng(ponto: Any) -> Optional[LatLng]:
    """Converte ``[lat, lng]`` ou ``{"lat", "lng"}`` (e variações) em tupla."""
    if ponto is None:
        return None
    if isinstance(ponto, (list, tuple)):
        if len(ponto) < 2:
            return None
        lat, lng = _to_float(ponto[0]), _to_float(ponto[1])
    elif isinstance(ponto, dict):
        lat = _to_float(ponto.get("lat", ponto.get("latitude")))
        lng = _to_float(ponto.get("lng", ponto.get("lon", ponto.get("longitude"))))
    else:
        return None
    if lat is None or lng is None:
        return None
    return (lat, lng)


def _anel_valido(pontos: Iterable[Any], conversor) -> Optional[Anel]:
    anel = [p for p in (conversor(item) for item in pontos) if p is not None]
    return anel if len(anel) >= MIN_PONTOS_ANEL else None


def _lnglat_para_latlng(ponto: Any) -> Optional[LatLng]:
    if not isinstance(ponto, (list, tuple)) or len(ponto) < 2:
        return None
    return ponto_para_latlng((ponto[1], ponto[0]))


def _parece_ponto(item: Any) -> bool:
    if isinstance(item, dict):
        return True
    return isinstance(item, (list, tuple)) and not any(isinstance(v, (list, tuple, dict)) for v in item)


def geojson_para_poligono(geojson: Any) -> Optional[Poligono]:
    """Aceita Polygon, MultiPolygon (usa o primeiro polígono) ou Feature."""
    if not isinstance(geojson, dict):
        return None
    if geojson.get("type") == "Feature":
        return geojson_para_poligono(geojson.get("geometry"))

    coords = geojson.get("coordinates")
    if not isinstance(coords, list) or not coords:
        return None

    tipo = geojson.get("type")
    if tipo == "MultiPolygon":
        coords = coords[0]
        if not isinstance(coords, list):
            return None
    elif tipo != "Polygon":
        return None

    aneis = []
    for anel_raw in coords:
        if not isinstance(anel_raw, list):
            continue
        anel = _anel_valido(anel_raw, _lnglat_para_latlng)
        if anel:
            aneis.append(anel)
    return aneis or None


def normalizar_poligono(raw: Any) -> Optional[Poligono]:
    """
    Ponto único de entrada para polígonos vindos do mapa, do geocoder ou do banco.

    Returns:
        Lista de anéis ``(lat, lng)`` com pelo menos 3 pontos cada, ou ``None``
        quando nada aproveitável sobra.
    """
    if raw is None or raw == "" or raw == []:
        return None

    data = raw
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            return None

    if isinstance(data, dict):
        return geojson_para_poligono(data)

    if not isinstance(data, (list, tuple)) or not data:
        return None

    # Anel único: [[lat, lng], ...] ou [{"lat":..}, ...]
    if _parece_ponto(data[0]):
        anel = _anel_valido(data, ponto_para_latlng)
        return [anel] if anel else None

    aneis = []
    for anel_raw in data:
        if not isinstance(anel_raw, (list, tuple)):
            continue
        anel = _anel_valido(anel_raw, ponto_para_latlng)
        if anel:
            aneis.append(anel)
    return aneis or None


def anel_externo(poligono: Optional[Poligono]) -> Anel:
    if not poligono:
        return []
    return list(poligono[0] or [])


def fechar_anel(anel: Anel) -> Anel:
    """Repete o primeiro ponto no final quando o anel não está fechado."""
    if len(anel) < 2:
        return list(anel)
    if anel[0] == anel[-1]:
        return list(anel)
    return list(anel) + [anel[0]]


def bbox_do_anel(anel: Anel) -> BBox:
    lats = [p[0] for p in anel]
    lngs = [p[1] for p in anel]
    return (min(lats), max(lats), min(lngs), max(lngs))


def bboxes_se_intersectam(a: BBox, b: BBox) -> bool:
    return a[0] <= b[1] and a[1] >= b[0] and a[2] <= b[3] and a[3] >= b[2]


def _orientacao(p: LatLng, q: LatLng, r: LatLng) -> int:
    val = (q[0] - p[0]) * (r[1] - q[1]) - (q[1] - p[1]) * (r[0] - q[0])
    if val == 0:
        return 0
    return 1 if val > 0 else 2


def _no_segmento(p: LatLng, q: LatLng, r: LatLng) -> bool:
    """q está dentro do retângulo formado por p e r (usado só com pontos colineares)."""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def segmentos_se_cruzam(p1: LatLng, q1: LatLng, p2: LatLng, q2: LatLng) -> bool:
    o1 = _orientacao(p1, q1, p2)
    o2 = _orientacao(p1, q1, q2)
    o3 = _orientacao(p2, q2, p1)
    o4 = _orientacao(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True
    # Casos colineares
    if o1 == 0 and _no_segmento(p1, p2, q1):
        return True
    if o2 == 0 and _no_segmento(p1, q2, q1):
        return True
    if o3 == 0 and _no_segmento(p2, p1, q2):
        return True
    if o4 == 0 and _no_segmento(p2, q1, q2):
        return True
    return False


def ponto_no_poligono(ponto: LatLng, anel: Anel) -> bool:
    """Ray casting com x = lng e y = lat."""
    x, y = ponto[1], ponto[0]
    dentro = False
    j = len(anel) - 1
    for i in range(len(anel)):
        yi, xi = anel[i]
        yj, xj = anel[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            dentro = not dentro
        j = i
    return dentro


def poligonos_sobrepostos(a: Optional[Poligono], b: Optional[Poligono]) -> bool:
    anel_a = fechar_anel(anel_externo(a))
    anel_b = fechar_anel(anel_externo(b))
    if len(anel_a) < MIN_PONTOS_ANEL or len(anel_b) < MIN_PONTOS_ANEL:
        return False

    if not bboxes_se_intersectam(bbox_do_anel(anel_a), bbox_do_anel(anel_b)):
        return False

    for i in range(len(anel_a) - 1):
        a1, a2 = anel_a[i], anel_a[i + 1]
        for j in range(len(anel_b) - 1):
            if segmentos_se_cruzam(a1, a2, anel_b[j], anel_b[j + 1]):
                return True

    # Sem cruzamento de arestas: um pode conter o outro por inteiro
    return ponto_no_poligono(anel_a[0], anel_b) or ponto_no_poligono(anel_b[0], anel_a)


def retangulo_de_bbox(sul: float, norte: float, oeste: float, leste: float) -> Poligono:
    return [[
        (sul, oeste),
        (sul, leste),
        (norte, leste),
        (norte, oeste),
        (sul, oeste),
    ]]


def poligono_para_json(poligono: Optional[Poligono]) -> Optional[list]:
    """Forma serializável (listas) para colunas JSON."""
    if poligono is None:
        return None
    return [[[lat, lng] for lat, lng in anel] for anel in poligono]

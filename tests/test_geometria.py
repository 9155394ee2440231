import json

from app.api.entregas.utils.geometria import (
    bbox_do_anel,
    bboxes_se_intersectam,
    fechar_anel,
    normalizar_poligono,
    poligonos_sobrepostos,
    ponto_no_poligono,
    segmentos_se_cruzam,
)

QUADRADO_A = [[(0, 0), (0, 2), (2, 2), (2, 0)]]
QUADRADO_B = [[(1, 1), (1, 3), (3, 3), (3, 1)]]
QUADRADO_LONGE = [[(10, 10), (10, 12), (12, 12), (12, 10)]]


def test_fechar_anel_idempotente():
    aneis = [
        [(0, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 1)],
        [(0, 0), (0, 1), (1, 1), (0, 0)],
    ]
    for anel in aneis:
        fechado = fechar_anel(anel)
        assert fechar_anel(fechado) == fechado
        assert fechado[0] == fechado[-1]


def test_sobreposicao_retangulos():
    assert poligonos_sobrepostos(QUADRADO_A, QUADRADO_B) is True
    assert poligonos_sobrepostos(QUADRADO_A, QUADRADO_LONGE) is False


def test_sobreposicao_simetrica():
    contido = [[(0.5, 0.5), (0.5, 1.5), (1.5, 1.5), (1.5, 0.5)]]
    encostado = [[(2, 0), (2, 2), (4, 2), (4, 0)]]
    pares = [
        (QUADRADO_A, QUADRADO_B),
        (QUADRADO_A, QUADRADO_LONGE),
        (QUADRADO_A, contido),
        (QUADRADO_A, encostado),
        (QUADRADO_B, contido),
    ]
    for a, b in pares:
        assert poligonos_sobrepostos(a, b) == poligonos_sobrepostos(b, a)


def test_contencao_total_conta_como_sobreposicao():
    contido = [[(0.5, 0.5), (0.5, 1.5), (1.5, 1.5), (1.5, 0.5)]]
    assert poligonos_sobrepostos(QUADRADO_A, contido) is True


def test_bbox_disjunto_implica_sem_cruzamento():
    anel_a = fechar_anel(QUADRADO_A[0])
    anel_b = fechar_anel(QUADRADO_LONGE[0])
    assert not bboxes_se_intersectam(bbox_do_anel(anel_a), bbox_do_anel(anel_b))
    for i in range(len(anel_a) - 1):
        for j in range(len(anel_b) - 1):
            assert not segmentos_se_cruzam(anel_a[i], anel_a[i + 1], anel_b[j], anel_b[j + 1])


def test_segmentos_colineares_sobrepostos():
    assert segmentos_se_cruzam((0, 0), (0, 2), (0, 1), (0, 3)) is True
    assert segmentos_se_cruzam((0, 0), (0, 1), (0, 2), (0, 3)) is False


def test_ponto_no_poligono():
    anel = fechar_anel(QUADRADO_A[0])
    assert ponto_no_poligono((1, 1), anel) is True
    assert ponto_no_poligono((5, 5), anel) is False


def test_poligono_com_menos_de_tres_pontos_nao_sobrepoe():
    # Um ponto dentro do quadrado, sozinho ou repetido, não forma anel
    assert poligonos_sobrepostos([[(1, 1)]], QUADRADO_A) is False
    assert poligonos_sobrepostos([[(1, 1), (1, 1)]], QUADRADO_A) is False
    assert poligonos_sobrepostos(None, QUADRADO_A) is False


def test_dois_pontos_fecham_em_triangulo_degenerado():
    # [a, b] vira [a, b, a]: o segmento encosta no canto do quadrado
    assert poligonos_sobrepostos([[(0, 0), (1, 1)]], QUADRADO_A) is True
    assert poligonos_sobrepostos([[(5, 5), (6, 6)]], QUADRADO_A) is False


def test_normalizar_geojson_troca_lng_lat():
    geojson = {
        "type": "Polygon",
        "coordinates": [[[-50.92, -17.79], [-50.91, -17.79], [-50.91, -17.80], [-50.92, -17.79]]],
    }
    assert normalizar_poligono(geojson) == [[(-17.79, -50.92), (-17.79, -50.91), (-17.80, -50.91), (-17.79, -50.92)]]


def test_normalizar_multipolygon_usa_o_primeiro():
    geojson = {
        "type": "MultiPolygon",
        "coordinates": [
            [[[0, 0], [0, 1], [1, 1]]],
            [[[5, 5], [5, 6], [6, 6]]],
        ],
    }
    assert normalizar_poligono(geojson) == [[(0, 0), (1, 0), (1, 1)]]


def test_normalizar_feature_e_texto_json():
    feature = {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [[[1, 2], [3, 4], [5, 6]]]},
    }
    assert normalizar_poligono(json.dumps(feature)) == [[(2, 1), (4, 3), (6, 5)]]


def test_normalizar_anel_unico_de_dicionarios():
    anel = [{"lat": 1, "lng": 2}, {"latitude": 3, "longitude": 4}, {"lat": 5, "lon": 6}]
    assert normalizar_poligono(anel) == [[(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]]


def test_normalizar_descarta_pontos_e_aneis_invalidos():
    bruto = [
        [[0, 0], [0, "x"], [1, 1], [float("nan"), 1], [2, 2]],
        [[0, 0], [1, 1]],
    ]
    assert normalizar_poligono(bruto) == [[(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]]


def test_normalizar_entradas_vazias_ou_invalidas():
    for bruto in (None, "", [], "não é json", {"type": "Point", "coordinates": [1, 2]}, [[[0, 0], [1, 1]]]):
        assert normalizar_poligono(bruto) is None

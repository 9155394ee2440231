from datetime import datetime, timedelta

import pytest

from app.api.entregas.models.model_presenca_entregador import PresencaEntregadorModel, StatusEntregador
from app.api.entregas.schemas.schema_presenca import HeartbeatRequest
from app.api.entregas.services.service_presenca import (
    PresencaEntregadorService,
    esta_disponivel,
    esta_online,
    status_efetivo,
)
from app.utils.database_utils import TZ_SP

MOMENTO = datetime(2026, 10, 18, 14, 0, 0, tzinfo=TZ_SP)


def _presenca(segundos_atras: float, status=StatusEntregador.DISPONIVEL):
    return PresencaEntregadorModel(
        entregador_id="d1",
        entregador_nome="João",
        status=status,
        ultimo_sinal_em=MOMENTO - timedelta(seconds=segundos_atras),
    )


@pytest.mark.parametrize("segundos,online", [(0, True), (44, True), (44.9, True), (45, False), (120, False)])
def test_online_depende_do_ultimo_sinal(segundos, online):
    assert esta_online(_presenca(segundos), MOMENTO) is online


def test_sinal_antigo_vira_offline_mesmo_informando_disponivel():
    presenca = _presenca(60)
    assert presenca.status == StatusEntregador.DISPONIVEL
    assert status_efetivo(presenca, MOMENTO) == StatusEntregador.OFFLINE
    assert esta_disponivel(presenca, MOMENTO) is False


def test_disponivel_exige_status_disponivel():
    assert esta_disponivel(_presenca(5), MOMENTO) is True
    assert esta_disponivel(_presenca(5, StatusEntregador.OCUPADO), MOMENTO) is False
    assert esta_disponivel(_presenca(5, StatusEntregador.OFFLINE), MOMENTO) is False
    assert esta_disponivel(None, MOMENTO) is False


def test_ultimo_sinal_sem_fuso_assume_sao_paulo():
    presenca = _presenca(10)
    presenca.ultimo_sinal_em = presenca.ultimo_sinal_em.replace(tzinfo=None)
    assert esta_online(presenca, MOMENTO) is True


def test_heartbeat_substitui_o_anterior(db):
    relogio = iter([MOMENTO, MOMENTO + timedelta(seconds=3)])
    svc = PresencaEntregadorService(db, relogio=lambda: next(relogio))

    svc.heartbeat("d1", HeartbeatRequest(entregador_nome="João", latitude=-17.79, longitude=-50.92))
    out = svc.heartbeat("d1", HeartbeatRequest(entregador_nome="João", status=StatusEntregador.OCUPADO))
    db.commit()

    assert out.status == StatusEntregador.OCUPADO
    assert out.latitude is None
    assert db.query(PresencaEntregadorModel).count() == 1


def test_heartbeat_pela_api(client):
    resp = client.put(
        "/api/entregas/entregador/d1/heartbeat",
        json={"entregador_nome": "João", "status": "DISPONIVEL", "latitude": -17.79, "longitude": -50.92},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["online"] is True
    assert body["status"] == "DISPONIVEL"
    assert body["segundos_desde_ultimo_sinal"] == 0

    resp = client.put("/api/entregas/entregador/d1/heartbeat", json={"entregador_nome": ""})
    assert resp.status_code == 422


def test_listagem_de_entregadores_deriva_offline(client, db):
    client.put("/api/entregas/entregador/d1/heartbeat", json={"entregador_nome": "João"})
    client.put("/api/entregas/entregador/d2/heartbeat", json={"entregador_nome": "Pedro", "status": "OCUPADO"})
    client.put("/api/entregas/entregador/d3/heartbeat", json={"entregador_nome": "Ana"})

    presenca = db.query(PresencaEntregadorModel).filter_by(entregador_id="d3").one()
    presenca.ultimo_sinal_em = presenca.ultimo_sinal_em - timedelta(minutes=5)
    db.commit()

    todos = {p["entregador_id"]: p for p in client.get("/api/entregas/admin/entregadores").json()}
    assert todos["d1"]["status"] == "DISPONIVEL"
    assert todos["d2"]["status"] == "OCUPADO"
    assert todos["d3"]["status"] == "OFFLINE"
    assert todos["d3"]["status_informado"] == "DISPONIVEL"
    assert todos["d3"]["online"] is False

    disponiveis = client.get("/api/entregas/admin/entregadores", params={"apenas_disponiveis": True}).json()
    assert [p["entregador_id"] for p in disponiveis] == ["d1"]


def test_offline_explicito(client):
    client.put("/api/entregas/entregador/d1/heartbeat", json={"entregador_nome": "João", "status": "OFFLINE"})
    disponiveis = client.get("/api/entregas/admin/entregadores", params={"apenas_disponiveis": True}).json()
    assert disponiveis == []

from datetime import timedelta

import pytest

from app.api.entregas.models.model_entrega import EntregaModel, StatusEntrega
from app.api.entregas.models.model_presenca_entregador import PresencaEntregadorModel
from app.api.entregas.repositories.repo_entregas import EntregaRepository

ADMIN = "/api/entregas/admin/despacho"
ENTREGADOR = "/api/entregas/entregador"


def _nova_entrega(client, os_id="OS-1", **extra):
    payload = {
        "os_id": os_id,
        "cliente_nome": "Maria",
        "cliente_telefone": "64999990000",
        "endereco": {"completo": "Rua 7, 120 - Centro", "latitude": -17.79, "longitude": -50.92},
        "valor_total": "120.00",
        "itens": [{"produto": "Gás P13", "quantidade": 2}, {"produto": "Água 20L", "quantidade": 1}],
        "forma_pagamento": "PIX",
    }
    payload.update(extra)
    resp = client.post(ADMIN, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _heartbeat(client, entregador_id, status="DISPONIVEL", nome=None):
    resp = client.put(
        f"{ENTREGADOR}/{entregador_id}/heartbeat",
        json={"entregador_nome": nome or f"Entregador {entregador_id}", "status": status},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def _iniciar(client, entrega_id, entregador_id, **params):
    return client.post(f"{ADMIN}/{entrega_id}/iniciar-rota", json={"entregador_id": entregador_id}, params=params)


def test_criar_entrega_monta_resumo_dos_itens(client):
    entrega = _nova_entrega(client)
    assert entrega["status"] == "PENDENTE_ENTREGA"
    assert entrega["itens_resumo"] == "2x Gás P13, 1x Água 20L"
    assert entrega["versao"] == 1
    assert entrega["entregador_id"] is None
    assert entrega["atribuida_em"]


def test_criar_entrega_exige_os_e_endereco(client):
    resp = client.post(ADMIN, json={"cliente_nome": "Maria", "endereco": {"completo": "Rua 1"}})
    assert resp.status_code == 422
    resp = client.post(ADMIN, json={"os_id": "OS-1", "cliente_nome": "Maria", "endereco": {"completo": ""}})
    assert resp.status_code == 422


def test_iniciar_rota_e_entregador_ve_a_entrega(client):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1", nome="João")

    resp = _iniciar(client, entrega["id"], "d1")
    assert resp.status_code == 200, resp.text
    em_rota = resp.json()
    assert em_rota["status"] == "EM_ROTA"
    assert em_rota["entregador_id"] == "d1"
    assert em_rota["entregador_nome"] == "João"
    assert em_rota["iniciada_em"]
    assert em_rota["versao"] == 2

    vistas = client.get(f"{ENTREGADOR}/d1/entregas", params={"status": "EM_ROTA"}).json()
    assert [e["id"] for e in vistas] == [entrega["id"]]
    ativa = client.get(f"{ENTREGADOR}/d1/entrega-ativa").json()
    assert ativa["id"] == entrega["id"]


def test_devolver_e_redespachar_mantem_atribuida_em(client):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1")
    _heartbeat(client, "d2")
    _iniciar(client, entrega["id"], "d1")

    resp = client.post(f"{ADMIN}/{entrega['id']}/devolver", json={"motivo": "Cliente ausente"})
    assert resp.status_code == 200
    devolvida = resp.json()
    assert devolvida["status"] == "DEVOLVIDA"
    assert devolvida["motivo_devolucao"] == "Cliente ausente"

    resp = _iniciar(client, entrega["id"], "d2")
    assert resp.status_code == 200, resp.text
    redespachada = resp.json()
    assert redespachada["status"] == "EM_ROTA"
    assert redespachada["entregador_id"] == "d2"
    assert redespachada["motivo_devolucao"] is None
    assert redespachada["atribuida_em"] == entrega["atribuida_em"]
    assert client.get(f"{ENTREGADOR}/d1/entrega-ativa").json() is None


def test_devolver_sem_motivo_nao_altera(client):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1")
    _iniciar(client, entrega["id"], "d1")

    for motivo in (None, "", "   "):
        resp = client.post(f"{ADMIN}/{entrega['id']}/devolver", json={"motivo": motivo})
        assert resp.status_code == 400
    assert client.get(f"{ADMIN}/{entrega['id']}").json()["status"] == "EM_ROTA"


def test_entregador_offline_ou_ocupado_nao_recebe(client, db):
    entrega = _nova_entrega(client)

    assert _iniciar(client, entrega["id"], "ninguem").status_code == 409

    _heartbeat(client, "ocupado", status="OCUPADO")
    assert _iniciar(client, entrega["id"], "ocupado").status_code == 409

    _heartbeat(client, "sumido")
    presenca = db.query(PresencaEntregadorModel).filter_by(entregador_id="sumido").one()
    presenca.ultimo_sinal_em = presenca.ultimo_sinal_em - timedelta(seconds=46)
    db.commit()
    assert _iniciar(client, entrega["id"], "sumido").status_code == 409

    assert client.get(f"{ADMIN}/{entrega['id']}").json()["status"] == "PENDENTE_ENTREGA"


def test_concluir_duas_vezes_nao_reaplica(client):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1")
    _iniciar(client, entrega["id"], "d1")

    primeira = client.post(f"{ADMIN}/{entrega['id']}/concluir")
    assert primeira.status_code == 200
    assert primeira.json()["status"] == "CONCLUIDA"
    assert primeira.json()["concluida_em"]

    segunda = client.post(f"{ADMIN}/{entrega['id']}/concluir")
    assert segunda.status_code == 409
    assert client.get(f"{ADMIN}/{entrega['id']}").json()["versao"] == primeira.json()["versao"]


@pytest.mark.parametrize("terminal", ["concluir", "cancelar"])
def test_estados_terminais_rejeitam_tudo(client, terminal):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1")
    _iniciar(client, entrega["id"], "d1")
    if terminal == "concluir":
        client.post(f"{ADMIN}/{entrega['id']}/concluir")
    else:
        client.post(f"{ADMIN}/{entrega['id']}/cancelar", json={"confirmar": True})
    status_final = client.get(f"{ADMIN}/{entrega['id']}").json()["status"]

    respostas = [
        _iniciar(client, entrega["id"], "d1"),
        client.post(f"{ADMIN}/{entrega['id']}/concluir"),
        client.post(f"{ADMIN}/{entrega['id']}/devolver", json={"motivo": "x"}),
        client.post(f"{ADMIN}/{entrega['id']}/cancelar", json={"confirmar": True}),
    ]
    assert all(r.status_code == 409 for r in respostas)
    assert client.get(f"{ADMIN}/{entrega['id']}").json()["status"] == status_final


def test_transicoes_invalidas(client):
    entrega = _nova_entrega(client)
    assert client.post(f"{ADMIN}/{entrega['id']}/concluir").status_code == 409
    assert client.post(f"{ADMIN}/{entrega['id']}/devolver", json={"motivo": "x"}).status_code == 409


def test_cancelar_exige_confirmacao(client):
    entrega = _nova_entrega(client)
    assert client.post(f"{ADMIN}/{entrega['id']}/cancelar", json={"confirmar": False}).status_code == 400
    assert client.get(f"{ADMIN}/{entrega['id']}").json()["status"] == "PENDENTE_ENTREGA"

    resp = client.post(f"{ADMIN}/{entrega['id']}/cancelar", json={"confirmar": True})
    assert resp.status_code == 200
    assert resp.json()["status"] == "CANCELADA"
    assert resp.json()["cancelada_em"]


def test_versao_desatualizada_responde_409(client):
    entrega = _nova_entrega(client)
    _heartbeat(client, "d1")
    _iniciar(client, entrega["id"], "d1")

    # Painel ainda mostra a versão 1
    resp = client.post(f"{ADMIN}/{entrega['id']}/cancelar", json={"confirmar": True}, params={"versao": 1})
    assert resp.status_code == 409
    assert "desatualizado" in resp.json()["detail"]
    assert client.get(f"{ADMIN}/{entrega['id']}").json()["status"] == "EM_ROTA"


def test_compare_and_swap_no_repositorio(client, db):
    entrega = _nova_entrega(client)
    repo = EntregaRepository(db)

    assert repo.atualizar_se_versao(entrega["id"], 1, {"status": StatusEntrega.CANCELADA}) is True
    # Segunda escrita com a mesma versão lida perde
    assert repo.atualizar_se_versao(entrega["id"], 1, {"status": StatusEntrega.EM_ROTA, "entregador_id": "x"}) is False
    db.commit()

    salvo = db.query(EntregaModel).filter_by(id=entrega["id"]).one()
    db.refresh(salvo)
    assert salvo.status == StatusEntrega.CANCELADA
    assert salvo.versao == 2


def test_entrega_inexistente(client):
    assert client.post(f"{ADMIN}/nao-existe/concluir").status_code == 404
    assert client.get(f"{ADMIN}/nao-existe").status_code == 404


def test_fila_ordenada_por_atribuicao_e_painel(client):
    primeira = _nova_entrega(client, os_id="OS-1")
    segunda = _nova_entrega(client, os_id="OS-2")
    terceira = _nova_entrega(client, os_id="OS-3")
    _heartbeat(client, "d1")
    _heartbeat(client, "d2")

    _iniciar(client, primeira["id"], "d1")
    client.post(f"{ADMIN}/{primeira['id']}/devolver", json={"motivo": "Endereço errado"})
    _iniciar(client, segunda["id"], "d2")
    client.post(f"{ADMIN}/{segunda['id']}/concluir")

    pendentes = client.get(ADMIN, params={"status": "PENDENTE_ENTREGA"}).json()
    assert [e["id"] for e in pendentes] == [terceira["id"]]

    painel = client.get(f"{ADMIN}/painel").json()
    assert [e["id"] for e in painel["aguardando"]] == [primeira["id"], terceira["id"]]
    assert painel["ativas"] == []
    assert [e["id"] for e in painel["concluidas"]] == [segunda["id"]]
    assert {p["entregador_id"] for p in painel["entregadores"]} == {"d1", "d2"}
    assert all(p["online"] for p in painel["entregadores"])

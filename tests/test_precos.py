from decimal import Decimal

import pytest

from app.api.entregas.services.service_precos_zona import calcular_taxa_entrega

BASE = "/api/entregas/admin"


@pytest.fixture
def zonas(client):
    a = client.post(f"{BASE}/zonas", json={"nome": "Zona A"}).json()
    b = client.post(f"{BASE}/zonas", json={"nome": "Zona B"}).json()
    return a["id"], b["id"]


def _preco(client, zona_id, deposito_id):
    resp = client.get(f"{BASE}/precos/consulta", params={"zona_id": zona_id, "deposito_id": deposito_id})
    assert resp.status_code == 200
    preco = resp.json()["preco"]
    return None if preco is None else Decimal(str(preco))


def test_preco_independente_por_par(client, criar_deposito, zonas):
    zona_a, zona_b = zonas
    criar_deposito("dep-x")
    criar_deposito("dep-y")

    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-y", "preco": "4.00"})
    client.put(f"{BASE}/precos", json={"zona_id": zona_b, "deposito_id": "dep-x", "preco": "6.00"})
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "9.90"})

    assert _preco(client, zona_a, "dep-x") == Decimal("9.90")
    assert _preco(client, zona_a, "dep-y") == Decimal("4.00")
    assert _preco(client, zona_b, "dep-x") == Decimal("6.00")
    assert _preco(client, zona_b, "dep-y") is None


def test_upsert_mantem_uma_linha_por_par(client, criar_deposito, zonas):
    zona_a, _ = zonas
    criar_deposito("dep-x")
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "5"})
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "7"})

    precos = client.get(f"{BASE}/precos", params={"deposito_id": "dep-x"}).json()
    assert len(precos) == 1
    assert Decimal(str(precos[0]["preco"])) == Decimal("7")


def test_preco_zero_e_diferente_de_ausente(client, criar_deposito, zonas):
    zona_a, zona_b = zonas
    criar_deposito("dep-x")
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "0"})

    assert _preco(client, zona_a, "dep-x") == Decimal("0")
    assert _preco(client, zona_b, "dep-x") is None


@pytest.mark.parametrize("preco", ["-1", "NaN", "Infinity", "abc"])
def test_preco_invalido_rejeitado(client, criar_deposito, zonas, preco):
    zona_a, _ = zonas
    criar_deposito("dep-x")
    resp = client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": preco})
    assert resp.status_code == 422
    assert client.get(f"{BASE}/precos").json() == []


def test_preco_para_deposito_inexistente(client, zonas):
    zona_a, _ = zonas
    resp = client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "fantasma", "preco": "5"})
    assert resp.status_code == 404


def test_preco_de_deposito_removido_e_tratado_como_ausente(client, criar_deposito, zonas, db):
    from app.api.depositos.models.model_deposito import DepositoModel

    zona_a, _ = zonas
    criar_deposito("dep-x")
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "5"})

    db.query(DepositoModel).filter_by(id="dep-x").delete()
    db.commit()

    assert _preco(client, zona_a, "dep-x") is None
    assert client.get(f"{BASE}/precos").json() == []


def test_remover_preco(client, criar_deposito, zonas):
    zona_a, _ = zonas
    criar_deposito("dep-x")
    preco = client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "5"}).json()

    assert client.delete(f"{BASE}/precos/{preco['id']}").status_code == 200
    assert _preco(client, zona_a, "dep-x") is None
    assert client.delete(f"{BASE}/precos/{preco['id']}").status_code == 404


def test_frete_gratis_vence_preco_da_zona(client, criar_deposito, zonas):
    zona_a, _ = zonas
    criar_deposito("dep-x")
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "12.00"})
    resp = client.put(f"{BASE}/depositos/dep-x/frete-gratis", json={"valor_minimo": "150.00"})
    assert resp.status_code == 200

    for subtotal in ("150.00", "150.01", "999"):
        taxa = client.get(
            f"{BASE}/precos/taxa",
            params={"zona_id": zona_a, "deposito_id": "dep-x", "subtotal": subtotal},
        ).json()
        assert taxa["frete_gratis"] is True
        assert Decimal(str(taxa["taxa_entrega"])) == Decimal("0")

    abaixo = client.get(
        f"{BASE}/precos/taxa",
        params={"zona_id": zona_a, "deposito_id": "dep-x", "subtotal": "149.99"},
    ).json()
    assert abaixo["frete_gratis"] is False
    assert Decimal(str(abaixo["taxa_entrega"])) == Decimal("12.00")


def test_limite_zero_desativa_frete_gratis(client, criar_deposito, zonas):
    zona_a, _ = zonas
    criar_deposito("dep-x")
    client.put(f"{BASE}/precos", json={"zona_id": zona_a, "deposito_id": "dep-x", "preco": "3.50"})

    taxa = client.get(
        f"{BASE}/precos/taxa",
        params={"zona_id": zona_a, "deposito_id": "dep-x", "subtotal": "0"},
    ).json()
    assert taxa["frete_gratis"] is False
    assert Decimal(str(taxa["taxa_entrega"])) == Decimal("3.50")


def test_frete_gratis_deposito_inexistente(client):
    resp = client.put(f"{BASE}/depositos/fantasma/frete-gratis", json={"valor_minimo": "10"})
    assert resp.status_code == 404


def test_calcular_taxa_entrega_sem_preco():
    assert calcular_taxa_entrega(None, Decimal("10"), Decimal("0")) is None
    assert calcular_taxa_entrega(None, Decimal("100"), Decimal("50")) == Decimal("0")
    assert calcular_taxa_entrega(Decimal("8"), Decimal("49.99"), Decimal("50")) == Decimal("8")

import os

# Banco em memória e segredo de teste antes de importar a aplicação
os.environ["RUNNING_IN_DOCKER"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "segredo-de-teste"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.main import app
from app.database.db_connection import Base, SessionLocal, engine
from app.api.depositos.models.model_deposito import DepositoModel
from app.api.entregas.services.dependencies import _cache_busca_area


def gerar_token(sub: str = "1", permissoes=None) -> str:
    return jwt.encode(
        {"sub": sub, "nome": "Operador", "permissoes": permissoes or ["entregas:admin"]},
        os.environ["SECRET_KEY"],
        algorithm="HS256",
    )


@pytest.fixture(autouse=True)
def banco_limpo():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    _cache_busca_area.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app, headers={"Authorization": f"Bearer {gerar_token()}"})


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def criar_deposito():
    def _criar(deposito_id: str, nome: str = None, frete_gratis: str = "0"):
        session = SessionLocal()
        try:
            session.add(
                DepositoModel(
                    id=deposito_id,
                    nome=nome or deposito_id,
                    frete_gratis_valor_minimo=Decimal(frete_gratis),
                )
            )
            session.commit()
        finally:
            session.close()
        return deposito_id

    return _criar

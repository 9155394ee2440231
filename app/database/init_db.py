import logging

from sqlalchemy import text

from .db_connection import engine, Base

logger = logging.getLogger(__name__)


def _eh_postgres() -> bool:
    return engine.dialect.name == "postgresql"


def configurar_timezone():
    """Configura o timezone do banco de dados para America/Sao_Paulo"""
    if not _eh_postgres():
        return
    try:
        with engine.begin() as conn:
            conn.execute(text("SET timezone = 'America/Sao_Paulo'"))
            timezone_atual = conn.execute(text("SHOW timezone")).scalar()
            logger.info(f"✅ Timezone do banco configurado: {timezone_atual}")
    except Exception as e:
        logger.warning(f"⚠️ Erro ao configurar timezone do banco: {e}")


def importar_models():
    # ─── Models Depósitos ───────────────────────────────────────────
    from app.api.depositos.models.model_deposito import DepositoModel
    # ─── Models Entregas ────────────────────────────────────────────
    from app.api.entregas.models.model_zona_entrega import ZonaEntregaModel
    from app.api.entregas.models.model_setor_entrega import SetorEntregaModel
    from app.api.entregas.models.model_preco_zona import PrecoZonaModel
    from app.api.entregas.models.model_entrega import EntregaModel
    from app.api.entregas.models.model_presenca_entregador import PresencaEntregadorModel
    logger.info("📦 Models importados com sucesso.")


def criar_tabelas():
    """
    Registra os models no Base e cria as tabelas que ainda não existem.
    Não altera tabelas existentes; mudanças de estrutura vão por migração (alembic).
    """
    importar_models()
    tabelas = list(Base.metadata.tables.values())
    logger.info(f"📋 Criando/verificando {len(tabelas)} tabelas: {', '.join(t.name for t in tabelas)}")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("✅ Tabelas criadas/verificadas com sucesso.")


def inicializar_banco():
    logger.info("🚀 Iniciando processo de inicialização do banco de dados...")

    logger.info("📦 Passo 1/2: Configurando timezone do banco...")
    configurar_timezone()

    logger.info("📋 Passo 2/2: Criando/verificando todas as tabelas...")
    criar_tabelas()

    logger.info("✅ Banco inicializado com sucesso.")

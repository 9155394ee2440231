"""Create depositos, zonas_entrega, setores_entrega, precos_zona, entregas and presenca_entregadores

Revision ID: 20261018_create_entregas_tables
Revises: 
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_create_entregas_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # depositos (cadastro de outro módulo; aqui só o frete grátis)
    op.create_table(
        "depositos",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("nome", sa.String(120), nullable=False),
        sa.Column("frete_gratis_valor_minimo", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "zonas_entrega",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("nome", sa.String(120), nullable=False),
        sa.Column("cor", sa.String(20), nullable=True, server_default="#f97316"),
        sa.Column("poligono", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "setores_entrega",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("zona_id", sa.String(36), sa.ForeignKey("zonas_entrega.id", ondelete="CASCADE"), nullable=False),
        sa.Column("nome", sa.String(120), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("idx_setores_entrega_zona", "setores_entrega", ["zona_id"])

    # precos_zona: id = "{deposito_id}:{zona_id}", sem FK para depositos
    op.create_table(
        "precos_zona",
        sa.Column("id", sa.String(80), primary_key=True),
        sa.Column("zona_id", sa.String(36), sa.ForeignKey("zonas_entrega.id", ondelete="CASCADE"), nullable=False),
        sa.Column("deposito_id", sa.String(36), nullable=False),
        sa.Column("preco", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("zona_id", "deposito_id", name="uq_precos_zona_zona_deposito"),
        sa.CheckConstraint("preco >= 0", name="ck_precos_zona_preco_nao_negativo"),
    )
    op.create_index("idx_precos_zona_deposito", "precos_zona", ["deposito_id"])

    op.create_table(
        "entregas",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("os_id", sa.String(36), nullable=False),
        sa.Column("deposito_id", sa.String(36), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDENTE_ENTREGA"),
        sa.Column("cliente_nome", sa.String(150), nullable=False),
        sa.Column("cliente_telefone", sa.String(30), nullable=True),
        sa.Column("endereco", sa.JSON, nullable=False),
        sa.Column("itens_resumo", sa.String(500), nullable=False, server_default=""),
        sa.Column("valor_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("forma_pagamento", sa.String(60), nullable=True),
        sa.Column("observacao", sa.String(500), nullable=True),
        sa.Column("entregador_id", sa.String(36), nullable=True),
        sa.Column("entregador_nome", sa.String(150), nullable=True),
        sa.Column("motivo_devolucao", sa.String(255), nullable=True),
        sa.Column("atribuida_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("iniciada_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("concluida_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelada_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("versao", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "status <> 'EM_ROTA' OR entregador_id IS NOT NULL",
            name="ck_entregas_em_rota_com_entregador",
        ),
    )
    op.create_index("idx_entregas_status_atribuida", "entregas", ["status", "atribuida_em"])
    op.create_index("idx_entregas_entregador_status", "entregas", ["entregador_id", "status"])
    op.create_index("idx_entregas_os", "entregas", ["os_id"])

    op.create_table(
        "presenca_entregadores",
        sa.Column("entregador_id", sa.String(36), primary_key=True),
        sa.Column("entregador_nome", sa.String(150), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="OFFLINE"),
        sa.Column("ultimo_sinal_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("entrega_atual_id", sa.String(36), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("presenca_entregadores")
    op.drop_index("idx_entregas_os", table_name="entregas")
    op.drop_index("idx_entregas_entregador_status", table_name="entregas")
    op.drop_index("idx_entregas_status_atribuida", table_name="entregas")
    op.drop_table("entregas")
    op.drop_index("idx_precos_zona_deposito", table_name="precos_zona")
    op.drop_table("precos_zona")
    op.drop_index("idx_setores_entrega_zona", table_name="setores_entrega")
    op.drop_table("setores_entrega")
    op.drop_table("zonas_entrega")
    op.drop_table("depositos")

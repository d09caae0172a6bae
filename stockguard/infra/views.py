"""
Criação de views auxiliares para consultas frequentes.

Views criadas:
- vw_estoque_baixo:        produtos com quantity <= threshold.
- vw_historico_usuarios:   histórico de vendas com nome/e-mail do perfil.

Obs.:
- As views assumem que as migrações já foram aplicadas.
- "Inativo" depende do instante da consulta e é calculado em Python
  (ver `stockguard.domain.policies.is_inativo`).
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        c.executescript(
            """
            ---------------------------
            -- Produtos abaixo do estoque mínimo
            ---------------------------
            DROP VIEW IF EXISTS vw_estoque_baixo;
            CREATE VIEW vw_estoque_baixo AS
            SELECT
                id, code, description, quantity, threshold, last_activity, ean
            FROM products
            WHERE quantity <= threshold;

            ---------------------------
            -- Histórico com dados do usuário
            ---------------------------
            DROP VIEW IF EXISTS vw_historico_usuarios;
            CREATE VIEW vw_historico_usuarios AS
            SELECT
                h.id,
                h.codigo_produto,
                h.produto_id,
                h.quantidade_ajustada,
                h.tipo,
                h.observacao,
                h.usuario_id,
                h.created_at,
                p.nome_completo AS user_name,
                p.email         AS user_email
            FROM historico_vendas h
            LEFT JOIN profiles p ON p.id = h.usuario_id;
            """
        )

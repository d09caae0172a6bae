"""
Migrações de schema usando PRAGMA user_version.

V1: perfis, produtos, livro de movimentações e histórico de vendas
V2: índices de consulta (busca por código e ordenação por data)
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Perfis (identidade do chamador)
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        cpf TEXT NOT NULL UNIQUE,
        nome_completo TEXT,
        email TEXT,
        role TEXT,
        created_at TEXT
    );
    """,
    # Cadastro de produtos (estoque atual)
    """
    CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        code TEXT NOT NULL UNIQUE CHECK (length(code) > 0),
        description TEXT NOT NULL,
        quantity INTEGER NOT NULL CHECK (quantity >= 0),
        threshold INTEGER NOT NULL DEFAULT 0 CHECK (threshold >= 0),
        last_activity TEXT NOT NULL,
        ean TEXT UNIQUE
    );
    """,
    # Livro de movimentações (somente inserção)
    """
    CREATE TABLE IF NOT EXISTS stock_movements (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id TEXT NOT NULL,
        product_code TEXT NOT NULL,
        product_description TEXT NOT NULL,
        type TEXT NOT NULL CHECK (type IN ('initial', 'add', 'remove')),
        quantity_change INTEGER NOT NULL CHECK (quantity_change >= 0),
        new_quantity INTEGER NOT NULL CHECK (new_quantity >= 0),
        timestamp TEXT NOT NULL,
        user_email TEXT NOT NULL,
        FOREIGN KEY (product_id) REFERENCES products(id)
    );
    """,
    # Histórico de vendas/ajustes (somente inserção)
    """
    CREATE TABLE IF NOT EXISTS historico_vendas (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        codigo_produto TEXT NOT NULL,
        produto_id TEXT,
        quantidade_ajustada INTEGER NOT NULL CHECK (quantidade_ajustada >= 0),
        tipo TEXT NOT NULL CHECK (tipo IN ('entrada', 'venda', 'ajuste')),
        observacao TEXT,
        usuario_id TEXT NOT NULL,
        created_at TEXT,
        FOREIGN KEY (produto_id) REFERENCES products(id)
    );
    """,
]

SCHEMA_V2: List[str] = [
    "CREATE INDEX IF NOT EXISTS idx_mov_product   ON stock_movements(product_id);",
    "CREATE INDEX IF NOT EXISTS idx_mov_timestamp ON stock_movements(timestamp);",
    "CREATE INDEX IF NOT EXISTS idx_hist_codigo   ON historico_vendas(codigo_produto);",
    "CREATE INDEX IF NOT EXISTS idx_hist_created  ON historico_vendas(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_products_desc ON products(description);",
]


def _apply(conn, statements: List[str]) -> None:
    for sql in statements:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply(conn, SCHEMA_V1)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply(conn, SCHEMA_V2)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2

        # versões futuras: if ver < 3: _apply(conn, SCHEMA_V3)

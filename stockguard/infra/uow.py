"""
Unidade de trabalho: produto + livro + histórico na mesma transação.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .db import transaction
from .logger import log_database_operation
from .repositories import HistoryRepo, MovementRepo, ProductRepo
from stockguard.domain.errors import PersistenceFailure


class UnitOfWork:
    """Repositórios ligados a uma única conexão/transação."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.products = ProductRepo(conn=conn)
        self.movements = MovementRepo(conn=conn)
        self.history = HistoryRepo(conn=conn)


@contextmanager
def unit_of_work(db_path: str) -> Iterator[UnitOfWork]:
    """
    Abre uma transação ``BEGIN IMMEDIATE`` e entrega os repositórios.

    - sucesso: COMMIT das três escritas;
    - `StockError` dentro do bloco: ROLLBACK e a exceção segue intacta;
    - `sqlite3.Error`: ROLLBACK e vira `PersistenceFailure`.
    """
    try:
        with transaction(db_path) as conn:
            yield UnitOfWork(conn)
    except sqlite3.Error as e:
        log_database_operation("unit_of_work", "ROLLBACK", 0, error=str(e))
        raise PersistenceFailure(f"Falha ao gravar no banco de dados: {e}") from e

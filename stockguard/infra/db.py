"""
Utilidades de conexão SQLite.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from stockguard.config import DEFAULTS


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Context manager para abrir conexão SQLite com:
    - foreign_keys ON
    - row_factory = sqlite3.Row
    - commit ao sair (rollback em caso de exceção)
    """
    conn = sqlite3.connect(db_path, timeout=DEFAULTS.timeout_conexao)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def transaction(db_path: str, timeout: float = None) -> Iterator[sqlite3.Connection]:
    """
    Transação explícita com ``BEGIN IMMEDIATE``.

    O lock de escrita é obtido antes de qualquer leitura, então duas
    movimentações concorrentes no mesmo banco são serializadas: a segunda
    espera (até `timeout`) e relê o estado já confirmado pela primeira.
    Qualquer exceção dentro do bloco desfaz todas as escritas.
    """
    conn = sqlite3.connect(
        db_path,
        timeout=DEFAULTS.timeout_conexao if timeout is None else timeout,
        isolation_level=None,
    )
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute("BEGIN IMMEDIATE;")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK;")
            raise
        conn.execute("COMMIT;")
    finally:
        conn.close()

"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ProfileRepo
- ProductRepo
- MovementRepo
- HistoryRepo

Cada repositório pode ser criado com `db_path` (uma conexão por chamada,
commit ao final) ou com `conn` (usa a conexão/transação de quem chamou,
ver `stockguard.infra.uow`).
"""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .db import connect
from stockguard.domain.errors import (
    ConcurrentModification,
    DuplicateCode,
    ProductNotFound,
)
from stockguard.domain.models import (
    HistoryEntry,
    LedgerType,
    Product,
    Profile,
    StockMovement,
    TipoMovimentacao,
)


# -------------------------
# Helpers
# -------------------------

def _new_id() -> str:
    return uuid.uuid4().hex


def _rows(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


def _product(row) -> Product:
    return Product(
        id=row["id"],
        code=row["code"],
        description=row["description"],
        quantity=int(row["quantity"]),
        threshold=int(row["threshold"]),
        last_activity=row["last_activity"],
        ean=row["ean"],
    )


class _Repo:
    def __init__(self, db_path: Optional[str] = None, conn: Optional[sqlite3.Connection] = None):
        if db_path is None and conn is None:
            raise ValueError("informe db_path ou conn")
        self.db_path = db_path
        self.conn = conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        if self.conn is not None:
            yield self.conn
        else:
            with connect(self.db_path) as c:
                yield c


# -------------------------
# Perfis
# -------------------------

class ProfileRepo(_Repo):
    _COLS = "id, cpf, nome_completo, email, role, created_at"

    def insert(self, profile: Profile) -> Profile:
        with self._connection() as c:
            c.execute(
                f"INSERT INTO profiles ({self._COLS}) "
                "VALUES (:id, :cpf, :nome_completo, :email, :role, :created_at)",
                profile.__dict__,
            )
        return profile

    def _get(self, where: str, value: str) -> Optional[Profile]:
        with self._connection() as c:
            row = c.execute(
                f"SELECT {self._COLS} FROM profiles WHERE {where} = ?", (value,)
            ).fetchone()
        return Profile(**dict(row)) if row else None

    def get_by_cpf(self, cpf: str) -> Optional[Profile]:
        return self._get("cpf", cpf)

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        return self._get("id", user_id)


# -------------------------
# Produto
# -------------------------

class ProductRepo(_Repo):
    _COLS = "id, code, description, quantity, threshold, last_activity, ean"

    def create(
        self,
        code: str,
        description: str,
        quantity: int,
        threshold: int,
        last_activity: str,
        ean: Optional[str] = None,
    ) -> Product:
        """Insere um produto novo. Falha com `DuplicateCode` se o código existir."""
        if self.get_by_code(code) is not None:
            raise DuplicateCode()
        product = Product(
            id=_new_id(),
            code=code,
            description=description,
            quantity=quantity,
            threshold=threshold,
            last_activity=last_activity,
            ean=ean,
        )
        with self._connection() as c:
            c.execute(
                f"INSERT INTO products ({self._COLS}) "
                "VALUES (:id, :code, :description, :quantity, :threshold, :last_activity, :ean)",
                product.to_dict(),
            )
        return product

    def get_by_code(self, code: str) -> Optional[Product]:
        with self._connection() as c:
            row = c.execute(f"SELECT {self._COLS} FROM products WHERE code = ?", (code,)).fetchone()
        return _product(row) if row else None

    def find_by_code(self, code: str) -> Product:
        product = self.get_by_code(code)
        if product is None:
            raise ProductNotFound()
        return product

    def get_by_id(self, product_id: str) -> Optional[Product]:
        with self._connection() as c:
            row = c.execute(f"SELECT {self._COLS} FROM products WHERE id = ?", (product_id,)).fetchone()
        return _product(row) if row else None

    def find_by_ean(self, ean: str, exclude_id: Optional[str] = None) -> Optional[Product]:
        with self._connection() as c:
            row = c.execute(
                f"SELECT {self._COLS} FROM products WHERE ean = ? AND id != ?",
                (ean, exclude_id or ""),
            ).fetchone()
        return _product(row) if row else None

    def update_quantity(
        self,
        product_id: str,
        quantity: int,
        last_activity: str,
        expected_quantity: Optional[int] = None,
    ) -> None:
        """Atualiza somente `quantity` e `last_activity`.

        Com `expected_quantity`, a escrita só acontece se o estoque gravado
        ainda for o lido pelo chamador; caso contrário `ConcurrentModification`.
        """
        sql = "UPDATE products SET quantity = ?, last_activity = ? WHERE id = ?"
        params: List[Any] = [quantity, last_activity, product_id]
        if expected_quantity is not None:
            sql += " AND quantity = ?"
            params.append(expected_quantity)
        with self._connection() as c:
            cur = c.execute(sql, params)
            if cur.rowcount == 1:
                return
            exists = c.execute("SELECT 1 FROM products WHERE id = ?", (product_id,)).fetchone()
        if not exists:
            raise ProductNotFound()
        raise ConcurrentModification()

    def update_ean(self, product_id: str, ean: Optional[str]) -> None:
        with self._connection() as c:
            cur = c.execute("UPDATE products SET ean = ? WHERE id = ?", (ean, product_id))
            if cur.rowcount != 1:
                raise ProductNotFound()

    def get_all(self) -> List[Product]:
        with self._connection() as c:
            cur = c.execute(f"SELECT {self._COLS} FROM products ORDER BY description, code")
            return [_product(r) for r in cur.fetchall()]

    def get_estoque_baixo(self) -> List[Product]:
        """Lê a view `vw_estoque_baixo` (quantity <= threshold)."""
        with self._connection() as c:
            cur = c.execute(f"SELECT {self._COLS} FROM vw_estoque_baixo ORDER BY description, code")
            return [_product(r) for r in cur.fetchall()]


# -------------------------
# Movimentações / Histórico (somente inserção)
# -------------------------

class MovementRepo(_Repo):
    def insert(self, mov: StockMovement) -> StockMovement:
        payload = mov.to_dict()
        payload.pop("id")
        with self._connection() as c:
            cur = c.execute(
                """
                INSERT INTO stock_movements
                    (product_id, product_code, product_description, type,
                     quantity_change, new_quantity, timestamp, user_email)
                VALUES
                    (:product_id, :product_code, :product_description, :type,
                     :quantity_change, :new_quantity, :timestamp, :user_email)
                """,
                payload,
            )
            new_id = cur.lastrowid
        return StockMovement(**{**mov.__dict__, "id": new_id})

    def list_all(self, product_id: Optional[str] = None) -> List[StockMovement]:
        sql = """SELECT id, product_id, product_code, product_description, type,
                        quantity_change, new_quantity, timestamp, user_email
                 FROM stock_movements"""
        params: tuple = ()
        if product_id:
            sql += " WHERE product_id = ?"
            params = (product_id,)
        sql += " ORDER BY timestamp DESC, id DESC"
        with self._connection() as c:
            rows = _rows(c.execute(sql, params))
        return [StockMovement(**{**r, "type": LedgerType(r["type"])}) for r in rows]

    def count(self, product_id: Optional[str] = None) -> int:
        with self._connection() as c:
            if product_id:
                row = c.execute("SELECT COUNT(*) FROM stock_movements WHERE product_id = ?", (product_id,)).fetchone()
            else:
                row = c.execute("SELECT COUNT(*) FROM stock_movements").fetchone()
        return int(row[0])


class HistoryRepo(_Repo):
    def insert(self, entry: HistoryEntry) -> HistoryEntry:
        payload = entry.to_dict()
        payload.pop("id")
        with self._connection() as c:
            cur = c.execute(
                """
                INSERT INTO historico_vendas
                    (codigo_produto, produto_id, quantidade_ajustada, tipo,
                     observacao, usuario_id, created_at)
                VALUES
                    (:codigo_produto, :produto_id, :quantidade_ajustada, :tipo,
                     :observacao, :usuario_id, :created_at)
                """,
                payload,
            )
            new_id = cur.lastrowid
        return HistoryEntry(**{**entry.__dict__, "id": new_id})

    def list_all(self, produto_id: Optional[str] = None) -> List[HistoryEntry]:
        sql = """SELECT id, codigo_produto, produto_id, quantidade_ajustada, tipo,
                        observacao, usuario_id, created_at
                 FROM historico_vendas"""
        params: tuple = ()
        if produto_id:
            sql += " WHERE produto_id = ?"
            params = (produto_id,)
        sql += " ORDER BY created_at DESC, id DESC"
        with self._connection() as c:
            rows = _rows(c.execute(sql, params))
        return [HistoryEntry(**{**r, "tipo": TipoMovimentacao(r["tipo"])}) for r in rows]

    def list_with_users(self) -> List[Dict[str, Any]]:
        """Histórico com nome/e-mail do usuário (view `vw_historico_usuarios`)."""
        with self._connection() as c:
            return _rows(c.execute(
                "SELECT * FROM vw_historico_usuarios ORDER BY created_at DESC, id DESC"
            ))

    def count(self, produto_id: Optional[str] = None) -> int:
        with self._connection() as c:
            if produto_id:
                row = c.execute("SELECT COUNT(*) FROM historico_vendas WHERE produto_id = ?", (produto_id,)).fetchone()
            else:
                row = c.execute("SELECT COUNT(*) FROM historico_vendas").fetchone()
        return int(row[0])

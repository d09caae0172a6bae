"""
Consultas e relatórios de estoque:
- produtos (busca + status: estoque baixo / sem vendas em 30 dias / ok)
- resumo do estoque
- livro de movimentações (busca + tipo)
- histórico de vendas/ajustes (busca + tipo, com nome do usuário)
- exportação CSV das movimentações e do histórico

Todas são visões derivadas de `products`, `stock_movements` e
`historico_vendas`; nenhuma escreve no banco.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from stockguard.config import DB_PATH, DEFAULTS
from stockguard.domain.models import Product
from stockguard.domain.policies import is_estoque_baixo, is_inativo, status_produto
from stockguard.infra.repositories import HistoryRepo, MovementRepo, ProductRepo
from stockguard.infra.logger import log_database_operation, log_file_operation, system_logger


STATUS_LABELS = {"low": "Estoque Baixo", "inactive": "Sem Vendas (30d)", "ok": "OK"}
LEDGER_LABELS = {"initial": "Inicial", "add": "Entrada", "remove": "Saída"}
HISTORICO_LABELS = {"entrada": "Entrada", "venda": "Venda", "ajuste": "Ajuste"}
USUARIO_DESCONHECIDO = "Usuário não encontrado"


# ----------------------
# util
# ----------------------

def _contains(termo: str, *campos: Optional[str]) -> bool:
    t = termo.lower()
    return any(c and t in str(c).lower() for c in campos)


def _fmt_data_hora(ts: Optional[str]) -> str:
    """ISO-8601 → "dd/mm/aaaa HH:MM:SS" (formato pt-BR)."""
    if not ts:
        return ""
    return datetime.fromisoformat(ts).strftime("%d/%m/%Y %H:%M:%S")


# ----------------------
# Produtos
# ----------------------

def listar_produtos(
    busca: Optional[str] = None,
    status: str = "all",
    agora: Optional[datetime] = None,
    db_path: str = DB_PATH,
) -> List[Dict[str, Any]]:
    """
    Lista produtos ordenados pela descrição, cada um com seu `status`.

    `busca` compara código, descrição e EAN (sem diferenciar maiúsculas);
    `status` ∈ {all, low, inactive, ok}.
    """
    agora = agora or datetime.now(timezone.utc)
    dias = DEFAULTS.dias_inatividade
    produtos = ProductRepo(db_path).get_all()
    log_database_operation("products", "SELECT_ALL", len(produtos))

    out: List[Dict[str, Any]] = []
    for p in produtos:
        if busca and not _contains(busca, p.code, p.description, p.ean):
            continue
        # filtro por critério; `status` abaixo é só o rótulo de exibição
        baixo = is_estoque_baixo(p.quantity, p.threshold)
        inativo = is_inativo(p.last_activity, agora, dias)
        if status == "low" and not baixo:
            continue
        if status == "inactive" and not inativo:
            continue
        if status == "ok" and (baixo or inativo):
            continue
        st = status_produto(p.quantity, p.threshold, p.last_activity, agora, dias)
        out.append({**p.to_dict(), "status": st, "status_label": STATUS_LABELS[st]})
    return out


def estoque_baixo(db_path: str = DB_PATH) -> List[Product]:
    """Produtos com quantity <= threshold."""
    return ProductRepo(db_path).get_estoque_baixo()


def produtos_inativos(
    dias: int = DEFAULTS.dias_inatividade,
    agora: Optional[datetime] = None,
    db_path: str = DB_PATH,
) -> List[Product]:
    """Produtos cuja última movimentação é anterior a `dias` dias."""
    return [p for p in ProductRepo(db_path).get_all() if is_inativo(p.last_activity, agora, dias)]


def resumo_estoque(agora: Optional[datetime] = None, db_path: str = DB_PATH) -> Dict[str, int]:
    """
    Contadores do painel de estoque.

    `low` e `inactive` contam cada critério isoladamente (um produto pode
    estar nos dois); `ok` são os que não estão em nenhum.
    """
    agora = agora or datetime.now(timezone.utc)
    produtos = ProductRepo(db_path).get_all()
    dias = DEFAULTS.dias_inatividade
    low = sum(1 for p in produtos if p.quantity <= p.threshold)
    inactive = sum(1 for p in produtos if is_inativo(p.last_activity, agora, dias))
    ok = sum(1 for p in produtos if p.quantity > p.threshold and not is_inativo(p.last_activity, agora, dias))
    return {"total": len(produtos), "low": low, "inactive": inactive, "ok": ok}


# ----------------------
# Movimentações
# ----------------------

def listar_movimentacoes(
    busca: Optional[str] = None,
    tipo: str = "all",
    db_path: str = DB_PATH,
) -> List[Dict[str, Any]]:
    """Livro de movimentações, mais recentes primeiro."""
    movs = MovementRepo(db_path).list_all()
    log_database_operation("stock_movements", "SELECT_ALL", len(movs))
    out = []
    for m in movs:
        if busca and not _contains(busca, m.product_code, m.product_description, m.user_email):
            continue
        if tipo != "all" and m.type.value != tipo:
            continue
        out.append(m.to_dict())
    return out


def resumo_movimentacoes(db_path: str = DB_PATH) -> Dict[str, int]:
    movs = MovementRepo(db_path).list_all()
    entradas = sum(1 for m in movs if m.type.value in ("add", "initial"))
    saidas = sum(1 for m in movs if m.type.value == "remove")
    return {"total": len(movs), "entradas": entradas, "saidas": saidas}


# ----------------------
# Histórico de vendas
# ----------------------

def listar_historico(
    busca: Optional[str] = None,
    tipo: str = "all",
    db_path: str = DB_PATH,
) -> List[Dict[str, Any]]:
    """Histórico de vendas/ajustes com nome e e-mail do usuário."""
    rows = HistoryRepo(db_path).list_with_users()
    log_database_operation("historico_vendas", "SELECT_ALL", len(rows))
    out = []
    for r in rows:
        r = {**r, "user_name": r.get("user_name") or USUARIO_DESCONHECIDO, "user_email": r.get("user_email") or ""}
        if busca and not _contains(busca, r["codigo_produto"], r["observacao"], r["user_name"], r["user_email"]):
            continue
        if tipo != "all" and r["tipo"] != tipo:
            continue
        out.append(r)
    return out


# ----------------------
# Exportação CSV
# ----------------------

def movimentacoes_dataframe(movs: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Data/Hora": [_fmt_data_hora(m["timestamp"]) for m in movs],
            "Código": [m["product_code"] for m in movs],
            "Descrição": [m["product_description"] for m in movs],
            "Tipo": [LEDGER_LABELS.get(m["type"], m["type"]) for m in movs],
            "Quantidade": [m["quantity_change"] for m in movs],
            "Estoque Final": [m["new_quantity"] for m in movs],
            "Usuário": [m["user_email"] for m in movs],
        }
    )


def historico_dataframe(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Data/Hora": [_fmt_data_hora(r["created_at"]) for r in rows],
            "Código": [r["codigo_produto"] for r in rows],
            "Tipo": [HISTORICO_LABELS.get(r["tipo"], r["tipo"]) for r in rows],
            "Quantidade": [r["quantidade_ajustada"] for r in rows],
            "Observação": [r["observacao"] or "" for r in rows],
            "Usuário": [r["user_name"] for r in rows],
            "E-mail": [r["user_email"] for r in rows],
        }
    )


def exportar_movimentacoes_csv(
    path: str,
    busca: Optional[str] = None,
    tipo: str = "all",
    db_path: str = DB_PATH,
) -> Dict[str, Any]:
    movs = listar_movimentacoes(busca=busca, tipo=tipo, db_path=db_path)
    movimentacoes_dataframe(movs).to_csv(path, index=False, encoding="utf-8")
    log_file_operation("export", path, rows_processed=len(movs))
    system_logger.debug(f"EXPORT_MOVIMENTACOES: {len(movs)} linhas em {path}")
    return {"arquivo": path, "linhas_exportadas": len(movs)}


def exportar_historico_csv(
    path: str,
    busca: Optional[str] = None,
    tipo: str = "all",
    db_path: str = DB_PATH,
) -> Dict[str, Any]:
    rows = listar_historico(busca=busca, tipo=tipo, db_path=db_path)
    historico_dataframe(rows).to_csv(path, index=False, encoding="utf-8")
    log_file_operation("export", path, rows_processed=len(rows))
    return {"arquivo": path, "linhas_exportadas": len(rows)}

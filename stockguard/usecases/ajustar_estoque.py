"""
UC: Ajustar ESTOQUE (entrada, venda, ajuste).

Fluxo:
1) Valida identidade, tipo e quantidade.
2) Abre a transação (lock de escrita) e relê o produto pelo código.
3) Calcula novo estoque e classificação (`calcular_movimentacao`).
4) Grava produto + movimentação + histórico; qualquer falha desfaz as três.

Obs.:
- `entrada`/`venda` aplicam deltas; `ajuste` define o valor absoluto.
- `venda` acima do estoque falha com `InsufficientStock` sem gravar nada.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from stockguard.config import DB_PATH
from stockguard.adapters.parsers import normalize_str
from stockguard.domain.errors import StockError
from stockguard.domain.models import Actor, HistoryEntry, Product, ResultadoAjuste, StockMovement
from stockguard.domain.policies import (
    agora_iso, calcular_movimentacao, parse_tipo, validar_quantidade
)
from stockguard.infra.uow import unit_of_work
from stockguard.infra.logger import (
    log_transaction, log_movimentacao, log_database_operation, log_system_event
)
from stockguard.usecases.autenticacao import exigir_ator


def adjust_stock(
    actor: Actor,
    product_code: str,
    tipo: str,
    quantidade: int,
    observacao: Optional[str] = None,
    db_path: str = DB_PATH,
) -> ResultadoAjuste:
    """Aplica uma movimentação ao produto `product_code`."""
    data: Dict[str, Any] = {
        "productCode": product_code,
        "type": str(getattr(tipo, "value", tipo)),
        "quantity": quantidade,
        "observation": observacao,
    }
    log_system_event("adjust_stock_start", data)

    try:
        ator = exigir_ator(actor)
        kind = parse_tipo(tipo)
        q = validar_quantidade(quantidade)
        code = normalize_str(product_code) or ""

        with unit_of_work(db_path) as uow:
            product = uow.products.find_by_code(code)
            outcome = calcular_movimentacao(product.quantity, kind, q)
            agora = agora_iso()

            uow.products.update_quantity(
                product.id, outcome.new_quantity, agora, expected_quantity=product.quantity
            )
            uow.movements.insert(StockMovement(
                product_id=product.id,
                product_code=product.code,
                product_description=product.description,
                type=outcome.type,
                quantity_change=outcome.quantity_change,
                new_quantity=outcome.new_quantity,
                timestamp=agora,
                user_email=ator.email,
            ))
            uow.history.insert(HistoryEntry(
                codigo_produto=product.code,
                produto_id=product.id,
                quantidade_ajustada=outcome.quantity_change,
                tipo=kind,
                observacao=normalize_str(observacao),
                usuario_id=ator.id,
                created_at=agora,
            ))

        updated = Product(**{**product.to_dict(), "quantity": outcome.new_quantity, "last_activity": agora})
        log_database_operation("products", "UPDATE", 1, codigo=code)
        log_movimentacao(kind.value, code, product.quantity, outcome.new_quantity,
                         ledger=outcome.type.value, usuario=ator.email)
        result = ResultadoAjuste(product=updated, movement=outcome)
        log_transaction("adjust_stock", data, result=result.movement.to_dict())
        return result

    except StockError as e:
        log_transaction("adjust_stock", data, error=f"{e.kind}: {e.message}")
        log_system_event("adjust_stock_error", {"productCode": product_code, "error": e.message}, level="error")
        raise

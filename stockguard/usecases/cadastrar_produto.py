"""
UC: Cadastrar PRODUTO.

O cadastro é o caso degenerado do motor de movimentação: grava o produto,
uma movimentação `initial` e uma linha `entrada` no histórico com a
observação de cadastro inicial, tudo na mesma transação.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from stockguard.config import DB_PATH, DEFAULTS
from stockguard.adapters.parsers import normalize_ean, normalize_str
from stockguard.domain.errors import DuplicateEan, InvalidProductData, InvalidQuantity, StockError
from stockguard.domain.models import Actor, HistoryEntry, Product, StockMovement, TipoMovimentacao
from stockguard.domain.policies import agora_iso, movimentacao_inicial, validar_quantidade
from stockguard.infra.uow import unit_of_work
from stockguard.infra.logger import (
    log_transaction, log_movimentacao, log_database_operation, log_system_event
)
from stockguard.usecases.autenticacao import exigir_ator


def _validar_dados(code: Any, description: Any, threshold: Any, ean: Any):
    code = normalize_str(code)
    if not code:
        raise InvalidProductData("Código do produto é obrigatório")
    description = normalize_str(description)
    if not description:
        raise InvalidProductData("Descrição do produto é obrigatória")
    try:
        threshold = validar_quantidade(threshold)
    except InvalidQuantity:
        raise InvalidQuantity("Estoque mínimo deve ser maior ou igual a 0") from None
    ean = normalize_ean(ean) if normalize_str(ean) else None
    return code, description, threshold, ean


def create_product(
    actor: Actor,
    code: str,
    description: str,
    quantity: int,
    threshold: int,
    ean: Optional[str] = None,
    db_path: str = DB_PATH,
) -> Product:
    """Cadastra um produto e registra a movimentação inicial."""
    data: Dict[str, Any] = {"code": code, "quantity": quantity, "threshold": threshold, "ean": ean}
    log_system_event("create_product_start", data)

    try:
        ator = exigir_ator(actor)
        code, description, threshold, ean = _validar_dados(code, description, threshold, ean)
        outcome = movimentacao_inicial(quantity)
        agora = agora_iso()

        with unit_of_work(db_path) as uow:
            if ean:
                dono = uow.products.find_by_ean(ean)
                if dono is not None:
                    raise DuplicateEan(f"Código já existe no produto: {dono.code} - {dono.description}")

            product = uow.products.create(
                code=code,
                description=description,
                quantity=outcome.new_quantity,
                threshold=threshold,
                last_activity=agora,
                ean=ean,
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
                tipo=TipoMovimentacao.ENTRADA,
                observacao=DEFAULTS.observacao_cadastro,
                usuario_id=ator.id,
                created_at=agora,
            ))

        log_database_operation("products", "INSERT", 1, codigo=code)
        log_movimentacao(outcome.type.value, code, 0, outcome.new_quantity, usuario=ator.email)
        log_transaction("create_product", data, result=product.to_dict())
        return product

    except StockError as e:
        log_transaction("create_product", data, error=f"{e.kind}: {e.message}")
        log_system_event("create_product_error", {"code": code, "error": e.message}, level="error")
        raise

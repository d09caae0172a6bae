"""
UC: Atualizar código de barras (EAN / código Yarn) de um produto.

Não altera estoque e não gera movimentação.
"""

from __future__ import annotations

from typing import Optional

from stockguard.config import DB_PATH
from stockguard.adapters.parsers import normalize_ean, normalize_str
from stockguard.domain.errors import DuplicateEan, InvalidProductData, ProductNotFound, StockError
from stockguard.domain.models import Actor, Product
from stockguard.infra.uow import unit_of_work
from stockguard.infra.logger import log_transaction, log_database_operation, log_system_event
from stockguard.usecases.autenticacao import exigir_ator


def update_ean(
    actor: Actor,
    ean: str,
    product_code: Optional[str] = None,
    product_id: Optional[str] = None,
    db_path: str = DB_PATH,
) -> Product:
    """Grava o EAN no produto (por código ou id), se não pertencer a outro."""
    data = {"productCode": product_code, "productId": product_id, "ean": ean}
    log_system_event("update_ean_start", data)

    try:
        ator = exigir_ator(actor)
        if not normalize_str(product_code) and not normalize_str(product_id):
            raise InvalidProductData("Selecione um produto primeiro")
        ean = normalize_ean(ean)

        with unit_of_work(db_path) as uow:
            if normalize_str(product_id):
                product = uow.products.get_by_id(product_id)
                if product is None:
                    raise ProductNotFound()
            else:
                product = uow.products.find_by_code(normalize_str(product_code))

            dono = uow.products.find_by_ean(ean, exclude_id=product.id)
            if dono is not None:
                raise DuplicateEan(f"Código já existe no produto: {dono.code} - {dono.description}")
            uow.products.update_ean(product.id, ean)

        product.ean = ean
        log_database_operation("products", "UPDATE_EAN", 1, codigo=product.code, usuario=ator.email)
        log_transaction("update_ean", data, result=product.to_dict())
        return product

    except StockError as e:
        log_transaction("update_ean", data, error=f"{e.kind}: {e.message}")
        log_system_event("update_ean_error", {"error": e.message}, level="error")
        raise

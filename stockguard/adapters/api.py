"""
Despachante de requisições no formato `{operation, data}`.

Responde sempre com `Resposta(status, body)`:
- 200 e `{"success": true, "product": ...}` (mais `movement` no ajuste);
- erros de negócio: o `status` da exceção e `{"error": mensagem, "kind": ...}`.

Operações: create_product, adjust_stock, update_ean.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from stockguard.config import DB_PATH
from stockguard.adapters.parsers import parse_quantidade
from stockguard.domain.errors import AuthenticationFailure, StockError
from stockguard.domain.models import Actor
from stockguard.infra.logger import log_system_event
from stockguard.usecases.ajustar_estoque import adjust_stock
from stockguard.usecases.atualizar_ean import update_ean
from stockguard.usecases.cadastrar_produto import create_product


@dataclass
class Resposta:
    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == 200

    def to_json(self) -> str:
        return json.dumps(self.body, ensure_ascii=False)


def _op_create_product(data: Dict[str, Any], actor: Actor, db_path: str) -> Dict[str, Any]:
    product = create_product(
        actor,
        code=data.get("code"),
        description=data.get("description"),
        quantity=parse_quantidade(data.get("quantity")),
        threshold=parse_quantidade(data.get("threshold")),
        ean=data.get("ean"),
        db_path=db_path,
    )
    return {"success": True, "product": product.to_dict()}


def _op_adjust_stock(data: Dict[str, Any], actor: Actor, db_path: str) -> Dict[str, Any]:
    res = adjust_stock(
        actor,
        product_code=data.get("productCode"),
        tipo=data.get("type"),
        quantidade=parse_quantidade(data.get("quantity")),
        observacao=data.get("observation"),
        db_path=db_path,
    )
    return {"success": True, **res.to_dict()}


def _op_update_ean(data: Dict[str, Any], actor: Actor, db_path: str) -> Dict[str, Any]:
    product = update_ean(
        actor,
        ean=data.get("ean") or data.get("yarnCode"),
        product_code=data.get("productCode"),
        product_id=data.get("productId"),
        db_path=db_path,
    )
    return {"success": True, "product": product.to_dict()}


OPERATIONS: Dict[str, Callable[[Dict[str, Any], Actor, str], Dict[str, Any]]] = {
    "create_product": _op_create_product,
    "adjust_stock": _op_adjust_stock,
    "update_ean": _op_update_ean,
}


def dispatch(
    operation: str,
    data: Optional[Dict[str, Any]],
    actor: Optional[Actor],
    db_path: str = DB_PATH,
) -> Resposta:
    """Executa a operação e traduz exceções de negócio em respostas."""
    log_system_event("dispatch", {"operation": operation})
    try:
        if actor is None:
            raise AuthenticationFailure("Usuário não autenticado")
        handler = OPERATIONS.get(operation)
        if handler is None:
            return Resposta(400, {"error": "Operação inválida", "kind": "InvalidOperation"})
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return Resposta(400, {"error": "JSON inválido", "kind": "InvalidRequest"})
        return Resposta(200, handler(data, actor, db_path))
    except StockError as e:
        return Resposta(e.status, {"error": e.message, "kind": e.kind})


def dispatch_json(raw: str, actor: Optional[Actor], db_path: str = DB_PATH) -> Resposta:
    """Versão para corpo JSON cru (`{"operation": ..., "data": {...}}`)."""
    try:
        req = json.loads(raw)
    except json.JSONDecodeError:
        return Resposta(400, {"error": "JSON inválido", "kind": "InvalidRequest"})
    if not isinstance(req, dict):
        return Resposta(400, {"error": "JSON inválido", "kind": "InvalidRequest"})
    return dispatch(req.get("operation"), req.get("data"), actor, db_path=db_path)

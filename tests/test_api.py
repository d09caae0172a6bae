import json

import pytest

from stockguard.adapters.api import dispatch, dispatch_json
from stockguard.infra.repositories import ProductRepo


def test_create_product_200(db, actor):
    resp = dispatch(
        "create_product",
        {"code": "P1", "description": "Linha Azul", "quantity": 10, "threshold": 2},
        actor,
        db_path=db,
    )
    assert resp.status == 200
    assert resp.body["success"] is True
    assert resp.body["product"]["code"] == "P1"
    assert resp.body["product"]["quantity"] == 10


def test_adjust_stock_200(db, actor, p1):
    resp = dispatch("adjust_stock", {"productCode": "P1", "type": "venda", "quantity": 4}, actor, db_path=db)
    assert resp.status == 200
    assert resp.body["product"]["quantity"] == 6
    assert resp.body["movement"] == {"type": "remove", "quantityChange": 4, "newQuantity": 6}


def test_adjust_stock_quantidade_em_texto(db, actor, p1):
    resp = dispatch("adjust_stock", {"productCode": "P1", "type": "ajuste", "quantity": "20"}, actor, db_path=db)
    assert resp.body["movement"] == {"type": "add", "quantityChange": 10, "newQuantity": 20}


@pytest.mark.parametrize(
    "operation,data,status,kind",
    [
        ("adjust_stock", {"productCode": "P1", "type": "venda", "quantity": 12}, 400, "InsufficientStock"),
        ("adjust_stock", {"productCode": "XX", "type": "venda", "quantity": 1}, 404, "ProductNotFound"),
        ("adjust_stock", {"productCode": "P1", "type": "troca", "quantity": 1}, 400, "InvalidMovementKind"),
        ("adjust_stock", {"productCode": "P1", "type": "venda"}, 400, "InvalidQuantity"),
        ("adjust_stock", {"productCode": "P1", "type": "venda", "quantity": -3}, 400, "InvalidQuantity"),
        ("create_product", {"code": "P1", "description": "Dup", "quantity": 1, "threshold": 0}, 409, "DuplicateCode"),
        ("create_product", {"code": "P5", "description": "Sem quantidade", "threshold": 0}, 400, "InvalidQuantity"),
        ("create_product", {"code": "P5", "description": "Sem mínimo", "quantity": 3}, 400, "InvalidQuantity"),
        ("update_ean", {"productCode": "P1", "ean": "12x"}, 400, "InvalidEan"),
        ("delete_product", {"productCode": "P1"}, 400, "InvalidOperation"),
    ],
)
def test_erros_viram_respostas(db, actor, p1, operation, data, status, kind):
    resp = dispatch(operation, data, actor, db_path=db)
    assert resp.status == status
    assert resp.body["kind"] == kind
    assert resp.body["error"]
    assert ProductRepo(db).find_by_code("P1").quantity == 10


def test_sem_ator_401(db, p1):
    resp = dispatch("adjust_stock", {"productCode": "P1", "type": "entrada", "quantity": 1}, None, db_path=db)
    assert resp.status == 401
    assert resp.body["kind"] == "AuthenticationFailure"


def test_update_ean_por_yarn_code(db, actor, p1):
    resp = dispatch("update_ean", {"productId": p1.id, "yarnCode": "12345"}, actor, db_path=db)
    assert resp.status == 200
    assert resp.body["product"]["ean"] == "12345"


def test_dispatch_json(db, actor, p1):
    raw = json.dumps({"operation": "adjust_stock", "data": {"productCode": "P1", "type": "entrada", "quantity": 5}})
    resp = dispatch_json(raw, actor, db_path=db)
    assert resp.ok
    assert json.loads(resp.to_json())["movement"]["newQuantity"] == 15

    assert dispatch_json("{nao json", actor, db_path=db).status == 400
    assert dispatch_json("[]", actor, db_path=db).status == 400


def test_data_que_nao_e_objeto(db, actor, p1):
    resp = dispatch_json('{"operation": "adjust_stock", "data": [1]}', actor, db_path=db)
    assert resp.status == 400
    assert resp.body["kind"] == "InvalidRequest"

    resp = dispatch("adjust_stock", "P1", actor, db_path=db)
    assert resp.status == 400
    assert ProductRepo(db).find_by_code("P1").quantity == 10


def test_create_product_sem_quantidade_nao_cadastra(db, actor):
    resp = dispatch("create_product", {"code": "P5", "description": "Linha Rosa", "threshold": 1}, actor, db_path=db)
    assert resp.status == 400
    assert ProductRepo(db).get_by_code("P5") is None

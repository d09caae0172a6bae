from datetime import datetime, timedelta, timezone

import pytest

from stockguard.domain.errors import InsufficientStock, InvalidMovementKind, InvalidQuantity
from stockguard.domain.models import LedgerType, TipoMovimentacao
from stockguard.domain.policies import (
    calcular_movimentacao,
    is_inativo,
    movimentacao_inicial,
    parse_tipo,
    status_produto,
)


@pytest.mark.parametrize(
    "atual,tipo,qtd,exp_type,exp_change,exp_new",
    [
        (10, "entrada", 5, LedgerType.ADD, 5, 15),
        (0, "entrada", 0, LedgerType.ADD, 0, 0),
        (10, "venda", 4, LedgerType.REMOVE, 4, 6),
        (10, "venda", 10, LedgerType.REMOVE, 10, 0),
        (6, "ajuste", 20, LedgerType.ADD, 14, 20),
        (10, "ajuste", 3, LedgerType.REMOVE, 7, 3),
        (10, "ajuste", 10, LedgerType.REMOVE, 0, 10),
        (10, "ajuste", 0, LedgerType.REMOVE, 10, 0),
    ],
)
def test_calcular_movimentacao(atual, tipo, qtd, exp_type, exp_change, exp_new):
    out = calcular_movimentacao(atual, tipo, qtd)
    assert out.type is exp_type
    assert out.quantity_change == exp_change
    assert out.new_quantity == exp_new
    assert out.quantity_change >= 0


def test_venda_acima_do_estoque():
    with pytest.raises(InsufficientStock) as exc:
        calcular_movimentacao(10, "venda", 12)
    assert exc.value.message == "Estoque insuficiente para a venda"


@pytest.mark.parametrize("tipo", ["saida", "", None, "initial", "add"])
def test_tipo_invalido(tipo):
    with pytest.raises(InvalidMovementKind):
        calcular_movimentacao(10, tipo, 1)


@pytest.mark.parametrize("qtd", [-1, 1.5, "3", True, None])
def test_quantidade_invalida(qtd):
    with pytest.raises(InvalidQuantity):
        calcular_movimentacao(10, "entrada", qtd)


def test_parse_tipo_aceita_enum_e_maiusculas():
    assert parse_tipo(TipoMovimentacao.VENDA) is TipoMovimentacao.VENDA
    assert parse_tipo(" Ajuste ") is TipoMovimentacao.AJUSTE


def test_movimentacao_inicial():
    out = movimentacao_inicial(7)
    assert (out.type, out.quantity_change, out.new_quantity) == (LedgerType.INITIAL, 7, 7)


def test_status_produto():
    agora = datetime(2025, 3, 1, tzinfo=timezone.utc)
    recente = (agora - timedelta(days=2)).isoformat()
    antigo = (agora - timedelta(days=31)).isoformat()

    assert status_produto(2, 2, recente, agora) == "low"
    assert status_produto(1, 2, antigo, agora) == "low"  # estoque baixo tem prioridade
    assert status_produto(5, 2, antigo, agora) == "inactive"
    assert status_produto(5, 2, recente, agora) == "ok"


def test_is_inativo_aceita_timestamp_sem_fuso():
    agora = datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert is_inativo("2025-01-01T10:00:00", agora)
    assert not is_inativo("2025-02-25T10:00:00", agora)

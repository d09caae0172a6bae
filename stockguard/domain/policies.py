"""
Regras de cálculo das movimentações e de classificação de produtos.

Este módulo contém as funções puras usadas pelo motor de movimentação
(cálculo do novo estoque e da classificação no livro) e pelas consultas
(status de estoque baixo / inativo). Nenhuma função aqui acessa o banco.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Union

from stockguard.domain.errors import InsufficientStock, InvalidMovementKind, InvalidQuantity
from stockguard.domain.models import LedgerType, MovementOutcome, TipoMovimentacao


def parse_tipo(tipo: Union[str, TipoMovimentacao]) -> TipoMovimentacao:
    """Converte a string recebida em `TipoMovimentacao`.

    Raises:
        InvalidMovementKind: se o valor não for entrada/venda/ajuste.
    """
    if isinstance(tipo, TipoMovimentacao):
        return tipo
    try:
        return TipoMovimentacao(str(tipo).strip().lower())
    except ValueError:
        raise InvalidMovementKind() from None


def validar_quantidade(quantidade: Any) -> int:
    """Aceita apenas inteiros >= 0 (bool não conta como inteiro)."""
    if isinstance(quantidade, bool) or not isinstance(quantidade, int):
        raise InvalidQuantity()
    if quantidade < 0:
        raise InvalidQuantity()
    return quantidade


def calcular_movimentacao(
    atual: int,
    tipo: Union[str, TipoMovimentacao],
    quantidade: int,
) -> MovementOutcome:
    """Calcula o novo estoque e a classificação no livro de movimentações.

    Regras:
        - ``entrada``: soma ``quantidade``; livro ``add``.
        - ``venda``: subtrai ``quantidade``; livro ``remove``. Falha com
          ``InsufficientStock`` se o resultado for negativo.
        - ``ajuste``: ``quantidade`` é o novo valor absoluto. Acima do atual
          vira ``add`` com a diferença; caso contrário ``remove`` (magnitude
          0 quando não há mudança).

    Args:
        atual: Estoque atual do produto.
        tipo: entrada | venda | ajuste.
        quantidade: Quantidade informada (delta ou alvo absoluto).

    Returns:
        ``MovementOutcome`` com tipo, magnitude (sempre >= 0) e novo estoque.
    """
    kind = parse_tipo(tipo)
    q = validar_quantidade(quantidade)

    if kind is TipoMovimentacao.ENTRADA:
        return MovementOutcome(LedgerType.ADD, q, atual + q)

    if kind is TipoMovimentacao.VENDA:
        nova = atual - q
        if nova < 0:
            raise InsufficientStock()
        return MovementOutcome(LedgerType.REMOVE, q, nova)

    # ajuste: alvo absoluto
    if q > atual:
        return MovementOutcome(LedgerType.ADD, q - atual, q)
    return MovementOutcome(LedgerType.REMOVE, atual - q, q)


def movimentacao_inicial(quantidade: int) -> MovementOutcome:
    """Movimentação do cadastro: sempre ``initial`` com a quantidade inicial."""
    q = validar_quantidade(quantidade)
    return MovementOutcome(LedgerType.INITIAL, q, q)


def agora_iso() -> str:
    """Instante atual (UTC, ISO-8601) usado em last_activity/timestamp/created_at."""
    return datetime.now(timezone.utc).isoformat()


# -------------------------
# Status de produto (consultas)
# -------------------------

def _parse_ts(ts: str) -> datetime:
    dt = datetime.fromisoformat(ts)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_estoque_baixo(quantity: int, threshold: int) -> bool:
    return quantity <= threshold


def is_inativo(last_activity: str, agora: datetime = None, dias: int = 30) -> bool:
    """Produto sem movimentação há mais de `dias` dias."""
    agora = agora or datetime.now(timezone.utc)
    if agora.tzinfo is None:
        agora = agora.replace(tzinfo=timezone.utc)
    return _parse_ts(last_activity) < agora - timedelta(days=dias)


def status_produto(quantity: int, threshold: int, last_activity: str,
                   agora: datetime = None, dias: int = 30) -> str:
    """Classifica o produto: ``'low'`` > ``'inactive'`` > ``'ok'``."""
    if is_estoque_baixo(quantity, threshold):
        return "low"
    if is_inativo(last_activity, agora, dias):
        return "inactive"
    return "ok"

"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios devolvem estas dataclasses; `to_dict()` gera o payload
  JSON usado pelo despachante e pela CLI.
- Os dois vocabulários de movimentação são mantidos separados:
  `LedgerType` (tabela `stock_movements`) e `TipoMovimentacao`
  (tabela `historico_vendas`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TipoMovimentacao(str, Enum):
    """Intenção de negócio registrada no histórico."""
    ENTRADA = "entrada"   # reposição
    VENDA = "venda"       # saída por venda
    AJUSTE = "ajuste"     # correção para um valor absoluto


class LedgerType(str, Enum):
    """Classificação operacional gravada no livro de movimentações."""
    INITIAL = "initial"
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Actor:
    """Identidade do chamador (vinda da autenticação)."""
    id: str
    email: str


@dataclass
class Product:
    """Cadastro de produto com o estoque atual."""
    id: str
    code: str
    description: str
    quantity: int
    threshold: int
    last_activity: str
    ean: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StockMovement:
    """Linha imutável do livro de movimentações."""
    product_id: str
    product_code: str
    product_description: str
    type: LedgerType
    quantity_change: int
    new_quantity: int
    timestamp: str
    user_email: str
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["type"] = self.type.value
        return d


@dataclass(frozen=True)
class HistoryEntry:
    """Linha imutável do histórico de vendas/ajustes."""
    codigo_produto: str
    produto_id: Optional[str]
    quantidade_ajustada: int
    tipo: TipoMovimentacao
    usuario_id: str
    observacao: Optional[str] = None
    created_at: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["tipo"] = self.tipo.value
        return d


@dataclass(frozen=True)
class MovementOutcome:
    """Resultado calculado de uma movimentação (tipo, magnitude, novo estoque)."""
    type: LedgerType
    quantity_change: int
    new_quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "quantityChange": self.quantity_change,
            "newQuantity": self.new_quantity,
        }


@dataclass
class Profile:
    """Perfil de usuário (origem da identidade do chamador)."""
    id: str
    cpf: str
    nome_completo: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[str] = None

    def as_actor(self) -> Actor:
        return Actor(id=self.id, email=self.email or "unknown")


@dataclass
class ResultadoAjuste:
    """Retorno de `adjust_stock`: produto atualizado + movimentação calculada."""
    product: Product
    movement: MovementOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {"product": self.product.to_dict(), "movement": self.movement.to_dict()}

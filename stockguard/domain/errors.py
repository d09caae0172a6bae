"""
Exceções de negócio do estoque.

Todas são terminais para a requisição corrente: o motor não faz novas
tentativas. `status` é o código HTTP-like devolvido pelo despachante.
"""

from __future__ import annotations


class StockError(Exception):
    status = 400
    default_message = "Erro na operação de estoque"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class DuplicateCode(StockError):
    status = 409
    default_message = "Produto com este código já existe"


class ProductNotFound(StockError):
    status = 404
    default_message = "Produto não encontrado"


class InsufficientStock(StockError):
    default_message = "Estoque insuficiente para a venda"


class InvalidMovementKind(StockError):
    default_message = "Tipo de movimentação inválido"


class InvalidQuantity(StockError):
    default_message = "Quantidade deve ser um inteiro maior ou igual a 0"


class InvalidEan(StockError):
    default_message = "Código Yarn deve conter apenas números"


class DuplicateEan(StockError):
    status = 409
    default_message = "Código já existe em outro produto"


class AuthenticationFailure(StockError):
    status = 401
    default_message = "Falha na autenticação"


class PersistenceFailure(StockError):
    status = 500
    default_message = "Falha ao gravar no banco de dados"


class ConcurrentModification(PersistenceFailure):
    status = 409
    default_message = "Produto alterado por outra operação; recarregue e tente novamente"


class InvalidProductData(StockError):
    default_message = "Dados do produto inválidos"

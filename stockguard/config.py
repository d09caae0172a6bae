"""
Configurações globais e valores padrão do StockGuard.
"""

import os
from dataclasses import dataclass
from pathlib import Path


# Caminho padrão do banco de dados SQLite
DB_PATH = os.environ.get("STOCKGUARD_DB") or os.path.join(os.getcwd(), "stockguard.db")

# Diretório de logs (padrão: pasta `logs` ao lado do pacote)
LOGS_DIR = Path(os.environ.get("STOCKGUARD_LOGS") or Path(__file__).parent.parent / "logs")


@dataclass
class DefaultConfig:
    """Valores padrão para regras de consulta e cadastro."""
    dias_inatividade: int = 30  # produto "sem vendas" após N dias sem movimentação
    observacao_cadastro: str = "Cadastro inicial do produto"
    timeout_conexao: float = 5.0  # segundos aguardando o lock de escrita do SQLite


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()

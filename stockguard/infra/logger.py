"""
Sistema de logging para as operações do estoque.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: cadastros, movimentações, acesso ao banco de dados,
autenticação e eventos gerais.
"""

import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional

from stockguard.config import LOGS_DIR


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False


# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILES = {
    "transactions": "transactions.log",
    "movimentacoes": "movimentacoes.log",
    "database": "database.log",
    "system": "system.log",
    "auth": "auth.log",
}


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O handler de arquivo é criado com ``delay=True``: o arquivo (e a pasta)
    só passam a existir na primeira mensagem efetivamente emitida.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove todos os handlers existentes
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = _LazyDirFileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


class _LazyDirFileHandler(logging.FileHandler):
    """FileHandler que cria o diretório do arquivo apenas ao abrir."""

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


# Loggers específicos para cada operação
transaction_logger = setup_logger('stockguard.transactions', str(LOGS_DIR / LOG_FILES["transactions"]))
movimentacao_logger = setup_logger('stockguard.movimentacoes', str(LOGS_DIR / LOG_FILES["movimentacoes"]))
database_logger = setup_logger('stockguard.database', str(LOGS_DIR / LOG_FILES["database"]))
system_logger = setup_logger('stockguard.system', str(LOGS_DIR / LOG_FILES["system"]))
auth_logger = setup_logger('stockguard.auth', str(LOGS_DIR / LOG_FILES["auth"]))


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa no log.

    Args:
        operation: Tipo de operação (create_product, adjust_stock, ...)
        data: Dados da requisição
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_movimentacao(tipo: str, codigo: str, quantidade_anterior: int, quantidade_nova: int, **kwargs) -> None:
    """
    Log específico para movimentações de estoque.

    Args:
        tipo: Tipo da movimentação (entrada, venda, ajuste, initial)
        codigo: Código do produto
        quantidade_anterior: Estoque antes da movimentação
        quantidade_nova: Estoque após a movimentação
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "tipo": tipo,
        "codigo": codigo,
        "de": quantidade_anterior,
        "para": quantidade_nova,
        **kwargs
    }
    movimentacao_logger.info(f"MOVIMENTACAO_{tipo.upper()}: {log_data}")


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (INSERT, UPDATE, SELECT, ...)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_auth_event(event: str, user_id: Optional[str] = None, level: str = "info", **kwargs) -> None:
    """Log para tentativas de autenticação e cadastro de perfis."""
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"event": event, "user_id": user_id, **kwargs}
    log_method = getattr(auth_logger, level.lower(), auth_logger.info)
    log_method(f"AUTH_{event.upper()}: {log_data}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Log para operações de arquivo (exportação).

    Args:
        operation: Tipo de operação (export)
        file_path: Caminho do arquivo
        rows_processed: Número de linhas processadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "rows_processed": rows_processed,
        **kwargs
    }
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (transactions, movimentacoes, database, system, auth)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return None

    file_name = LOG_FILES.get(log_type)
    log_file = LOGS_DIR / file_name if file_name else None
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"


def set_logging(enabled: bool) -> None:
    """Liga/desliga o registro em arquivo (usado pela CLI)."""
    global ENABLE_LOGGING
    ENABLE_LOGGING = enabled
    log_system_event("logging_toggled", {"enabled": enabled, "at": datetime.now().isoformat()})

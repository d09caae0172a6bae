"""
Utilidades de parsing e normalização de entradas.

Este módulo interpreta os valores recebidos pela CLI e pelo despachante
JSON antes que cheguem aos casos de uso: textos opcionais, CPF, código de
barras (EAN / "código Yarn") e quantidades inteiras.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from stockguard.domain.errors import InvalidEan, InvalidQuantity

_NON_DIGIT_RE = re.compile(r"\D")
_INT_RE = re.compile(r"^[+]?\d+$")


def normalize_str(x: Any) -> Optional[str]:
    """Remove espaços das pontas; texto vazio vira ``None``."""
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def normalize_cpf(cpf: Any) -> Optional[str]:
    """Mantém apenas os dígitos do CPF (``"123.456.789-09"`` → ``"12345678909"``)."""
    if cpf is None:
        return None
    digits = _NON_DIGIT_RE.sub("", str(cpf))
    return digits or None


def normalize_ean(ean: Any) -> Optional[str]:
    """Valida um EAN / código Yarn.

    Exemplos:
        " 7891234567895 " → "7891234567895"
        ""                → InvalidEan("Código Yarn é obrigatório")
        "78A1"            → InvalidEan("Código Yarn deve conter apenas números")

    Raises:
        InvalidEan: se vazio ou com caracteres não numéricos.
    """
    s = normalize_str(ean)
    if s is None:
        raise InvalidEan("Código Yarn é obrigatório")
    if not (s.isascii() and s.isdigit()):
        raise InvalidEan()
    return s


def parse_quantidade(val: Any) -> int:
    """Interpreta uma quantidade inteira não negativa.

    Aceita ``int`` ou texto numérico (``"12"``, ``"+3"``). Valores
    fracionários, negativos ou não numéricos são rejeitados.

    Raises:
        InvalidQuantity: para qualquer valor fora desse formato.
    """
    if isinstance(val, bool):
        raise InvalidQuantity()
    if isinstance(val, int):
        if val < 0:
            raise InvalidQuantity()
        return val
    if isinstance(val, float):
        if val.is_integer() and val >= 0:
            return int(val)
        raise InvalidQuantity()
    s = normalize_str(val)
    if s is None or not _INT_RE.match(s):
        raise InvalidQuantity()
    return int(s)

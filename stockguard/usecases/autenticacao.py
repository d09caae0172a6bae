"""
UC: Perfis e identidade do chamador.

- registrar_perfil(): cadastra um perfil identificado pelo CPF.
- autenticar_por_cpf(): devolve o `Actor` do perfil (login por CPF).
- resolver_ator(): devolve o `Actor` a partir do id do usuário.
- exigir_ator(): valida o `Actor` recebido antes de qualquer escrita.

Obs.:
- Não há sessão global: cada operação de estoque recebe o `Actor`
  explicitamente e confia nele como está.
"""

from __future__ import annotations

import uuid
from typing import Optional

from stockguard.config import DB_PATH
from stockguard.adapters.parsers import normalize_cpf, normalize_str
from stockguard.domain.errors import AuthenticationFailure
from stockguard.domain.models import Actor, Profile
from stockguard.domain.policies import agora_iso
from stockguard.infra.repositories import ProfileRepo
from stockguard.infra.logger import log_auth_event, log_database_operation


def registrar_perfil(
    cpf: str,
    nome_completo: str,
    email: Optional[str] = None,
    role: str = "funcionario",
    db_path: str = DB_PATH,
) -> Profile:
    """Cadastra um novo perfil. CPF repetido falha com `AuthenticationFailure`."""
    clean = normalize_cpf(cpf)
    if not clean:
        log_auth_event("signup_rejected", reason="cpf_vazio", level="warning")
        raise AuthenticationFailure("CPF é obrigatório")

    repo = ProfileRepo(db_path)
    if repo.get_by_cpf(clean) is not None:
        log_auth_event("signup_rejected", reason="cpf_duplicado", level="warning")
        raise AuthenticationFailure("CPF já cadastrado no sistema")

    profile = Profile(
        id=uuid.uuid4().hex,
        cpf=clean,
        nome_completo=normalize_str(nome_completo),
        email=normalize_str(email),
        role=role,
        created_at=agora_iso(),
    )
    repo.insert(profile)
    log_database_operation("profiles", "INSERT", 1, id=profile.id)
    log_auth_event("signup", profile.id)
    return profile


def autenticar_por_cpf(cpf: str, db_path: str = DB_PATH) -> Actor:
    """Login por CPF: devolve a identidade a ser passada às operações."""
    clean = normalize_cpf(cpf)
    profile = ProfileRepo(db_path).get_by_cpf(clean) if clean else None
    if profile is None:
        log_auth_event("login_failed", level="warning")
        raise AuthenticationFailure("CPF não encontrado no sistema")
    log_auth_event("login", profile.id)
    return profile.as_actor()


def resolver_ator(user_id: str, db_path: str = DB_PATH) -> Actor:
    profile = ProfileRepo(db_path).get_by_id(user_id) if user_id else None
    if profile is None:
        log_auth_event("resolve_failed", user_id, level="warning")
        raise AuthenticationFailure()
    return profile.as_actor()


def exigir_ator(actor: Optional[Actor]) -> Actor:
    """Garante que há uma identidade com id e e-mail."""
    if actor is None or not normalize_str(actor.id) or not normalize_str(actor.email):
        raise AuthenticationFailure("Usuário não autenticado")
    return actor

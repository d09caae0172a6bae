import pytest

from stockguard.domain.errors import AuthenticationFailure
from stockguard.usecases.autenticacao import (
    autenticar_por_cpf,
    exigir_ator,
    registrar_perfil,
    resolver_ator,
)


def test_registrar_e_autenticar(db):
    profile = registrar_perfil("111.222.333-44", "João Souza", email="joao@loja.com", db_path=db)
    assert profile.cpf == "11122233344"
    assert profile.role == "funcionario"

    actor = autenticar_por_cpf("11122233344", db_path=db)
    assert actor.id == profile.id
    assert actor.email == "joao@loja.com"
    assert resolver_ator(profile.id, db_path=db) == actor


def test_cpf_duplicado(db, profile):
    with pytest.raises(AuthenticationFailure) as exc:
        registrar_perfil("12345678909", "Outra Pessoa", db_path=db)
    assert exc.value.message == "CPF já cadastrado no sistema"


def test_cpf_desconhecido(db):
    with pytest.raises(AuthenticationFailure) as exc:
        autenticar_por_cpf("000.000.000-00", db_path=db)
    assert exc.value.status == 401
    with pytest.raises(AuthenticationFailure):
        autenticar_por_cpf("", db_path=db)
    with pytest.raises(AuthenticationFailure):
        resolver_ator("nao-existe", db_path=db)


def test_perfil_sem_email(db):
    registrar_perfil("99988877766", "Sem Email", db_path=db)
    assert autenticar_por_cpf("99988877766", db_path=db).email == "unknown"


def test_exigir_ator(actor):
    assert exigir_ator(actor) is actor
    with pytest.raises(AuthenticationFailure):
        exigir_ator(None)

import pytest

from stockguard.infra.migrations import apply_migrations
from stockguard.infra.views import create_views
from stockguard.usecases.autenticacao import registrar_perfil
from stockguard.usecases.cadastrar_produto import create_product


@pytest.fixture
def db(tmp_path):
    db_path = str(tmp_path / "stockguard_test.sqlite")
    apply_migrations(db_path)
    create_views(db_path)
    return db_path


@pytest.fixture
def profile(db):
    return registrar_perfil("123.456.789-09", "Maria Silva", email="maria@loja.com", db_path=db)


@pytest.fixture
def actor(profile):
    return profile.as_actor()


@pytest.fixture
def p1(db, actor):
    """Produto P1 com 10 unidades e mínimo 2."""
    return create_product(actor, "P1", "Linha Azul", 10, 2, db_path=db)

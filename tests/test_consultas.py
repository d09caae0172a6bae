from datetime import datetime, timedelta, timezone

import pandas as pd

from stockguard.infra.db import connect
from stockguard.usecases.ajustar_estoque import adjust_stock
from stockguard.usecases.cadastrar_produto import create_product
from stockguard.usecases.consultas import (
    estoque_baixo,
    exportar_historico_csv,
    exportar_movimentacoes_csv,
    listar_historico,
    listar_movimentacoes,
    listar_produtos,
    produtos_inativos,
    resumo_estoque,
    resumo_movimentacoes,
)


def _seed(db, actor):
    create_product(actor, "P1", "Linha Azul", 10, 2, ean="789100", db_path=db)
    create_product(actor, "P2", "Agulha Circular", 1, 3, db_path=db)
    create_product(actor, "P3", "Botão Madeira", 50, 5, db_path=db)
    adjust_stock(actor, "P1", "venda", 4, observacao="Cliente balcão", db_path=db)
    adjust_stock(actor, "P3", "ajuste", 45, db_path=db)


def _envelhecer(db, code, dias):
    ts = (datetime.now(timezone.utc) - timedelta(days=dias)).isoformat()
    with connect(db) as c:
        c.execute("UPDATE products SET last_activity = ? WHERE code = ?", (ts, code))


def test_listar_produtos_ordenado_e_com_status(db, actor):
    _seed(db, actor)
    _envelhecer(db, "P3", 40)

    rows = listar_produtos(db_path=db)
    assert [r["description"] for r in rows] == ["Agulha Circular", "Botão Madeira", "Linha Azul"]
    status = {r["code"]: r["status"] for r in rows}
    assert status == {"P1": "ok", "P2": "low", "P3": "inactive"}
    assert {r["code"]: r["status_label"] for r in rows}["P3"] == "Sem Vendas (30d)"


def test_listar_produtos_filtros(db, actor):
    _seed(db, actor)
    assert [r["code"] for r in listar_produtos(busca="linha", db_path=db)] == ["P1"]
    assert [r["code"] for r in listar_produtos(busca="7891", db_path=db)] == ["P1"]
    assert [r["code"] for r in listar_produtos(status="low", db_path=db)] == ["P2"]
    assert listar_produtos(status="inactive", db_path=db) == []


def test_estoque_baixo_inclui_igual_ao_minimo(db, actor):
    _seed(db, actor)
    adjust_stock(actor, "P1", "ajuste", 2, db_path=db)
    assert sorted(p.code for p in estoque_baixo(db_path=db)) == ["P1", "P2"]


def test_produtos_inativos_e_resumo(db, actor):
    _seed(db, actor)
    futuro = datetime.now(timezone.utc) + timedelta(days=31)
    assert sorted(p.code for p in produtos_inativos(agora=futuro, db_path=db)) == ["P1", "P2", "P3"]
    assert produtos_inativos(db_path=db) == []

    assert resumo_estoque(db_path=db) == {"total": 3, "low": 1, "inactive": 0, "ok": 2}
    assert resumo_estoque(agora=futuro, db_path=db) == {"total": 3, "low": 1, "inactive": 3, "ok": 0}


def test_listar_movimentacoes(db, actor):
    _seed(db, actor)
    movs = listar_movimentacoes(db_path=db)
    assert len(movs) == 5
    assert movs[0]["product_code"] == "P3"  # mais recente primeiro
    assert movs[0]["type"] == "remove"
    assert [m["product_code"] for m in listar_movimentacoes(tipo="remove", db_path=db)] == ["P3", "P1"]
    assert len(listar_movimentacoes(busca="maria@", db_path=db)) == 5
    assert len(listar_movimentacoes(busca="agulha", db_path=db)) == 1

    assert resumo_movimentacoes(db_path=db) == {"total": 5, "entradas": 3, "saidas": 2}


def test_listar_historico_com_usuario(db, actor):
    _seed(db, actor)
    rows = listar_historico(db_path=db)
    assert len(rows) == 5
    assert rows[0]["user_name"] == "Maria Silva"
    assert rows[0]["user_email"] == "maria@loja.com"
    assert [r["codigo_produto"] for r in listar_historico(tipo="venda", db_path=db)] == ["P1"]
    assert [r["codigo_produto"] for r in listar_historico(busca="balcão", db_path=db)] == ["P1"]


def test_historico_usuario_desconhecido(db, actor):
    _seed(db, actor)
    with connect(db) as c:
        c.execute("DELETE FROM profiles")
    rows = listar_historico(db_path=db)
    assert all(r["user_name"] == "Usuário não encontrado" for r in rows)
    assert all(r["user_email"] == "" for r in rows)


def test_exportar_movimentacoes_csv(db, actor, tmp_path):
    _seed(db, actor)
    path = tmp_path / "movs.csv"
    info = exportar_movimentacoes_csv(str(path), tipo="remove", db_path=db)
    assert info["linhas_exportadas"] == 2

    df = pd.read_csv(path)
    assert list(df.columns) == ["Data/Hora", "Código", "Descrição", "Tipo", "Quantidade", "Estoque Final", "Usuário"]
    assert set(df["Tipo"]) == {"Saída"}
    assert df.loc[df["Código"] == "P1", "Estoque Final"].iloc[0] == 6


def test_exportar_historico_csv_vazio(db, tmp_path):
    path = tmp_path / "hist.csv"
    info = exportar_historico_csv(str(path), db_path=db)
    assert info["linhas_exportadas"] == 0
    df = pd.read_csv(path)
    assert df.empty
    assert "Observação" in df.columns


def test_filtro_inativo_inclui_produto_tambem_em_estoque_baixo(db, actor):
    _seed(db, actor)
    futuro = datetime.now(timezone.utc) + timedelta(days=31)

    inativos = listar_produtos(status="inactive", agora=futuro, db_path=db)
    assert [r["code"] for r in inativos] == ["P2", "P3", "P1"]
    assert {r["code"]: r["status"] for r in inativos}["P2"] == "low"

    assert [r["code"] for r in listar_produtos(status="low", agora=futuro, db_path=db)] == ["P2"]
    assert listar_produtos(status="ok", agora=futuro, db_path=db) == []
    assert sorted(p.code for p in produtos_inativos(agora=futuro, db_path=db)) == ["P1", "P2", "P3"]

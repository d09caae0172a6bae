"""
CLI do StockGuard (Typer).

Comandos principais:
- migrate                        -> aplica migrações e cria views
- perfil registrar               -> cadastra um perfil (CPF)
- produto criar/ean/listar       -> cadastro, código de barras e consulta
- estoque ajustar                -> entrada | venda | ajuste
- estoque baixo/inativos/resumo  -> painéis de estoque
- mov listar/exportar            -> livro de movimentações
- hist listar/exportar           -> histórico de vendas
- op <json>                      -> executa uma requisição {operation, data}
- logs <tipo>                    -> últimas linhas de um log
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from stockguard.config import DB_PATH
from stockguard.adapters.api import dispatch_json
from stockguard.domain.errors import StockError
from stockguard.domain.models import Actor
from stockguard.infra import logger as sg_logger
from stockguard.infra.migrations import apply_migrations
from stockguard.infra.views import create_views
from stockguard.usecases.autenticacao import autenticar_por_cpf, registrar_perfil
from stockguard.usecases.ajustar_estoque import adjust_stock
from stockguard.usecases.atualizar_ean import update_ean
from stockguard.usecases.cadastrar_produto import create_product
from stockguard.usecases.consultas import (
    HISTORICO_LABELS,
    LEDGER_LABELS,
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


app = typer.Typer(help="StockGuard: controle de estoque")
console = Console()

DbOption = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")
CpfOption = typer.Option(..., "--cpf", help="CPF do usuário que executa a operação")


@app.callback()
def main_callback(
    log: bool = typer.Option(False, "--log/--no-log", help="Grava os logs em arquivo"),
):
    """Opções globais."""
    if log:
        sg_logger.set_logging(True)


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _erro(e: StockError) -> None:
    console.print(Panel(e.message, title=f"Erro: {e.kind}", border_style="red"))
    raise typer.Exit(code=1)


def _executar(fn: Callable[[], Any]) -> Any:
    """Executa `fn` convertendo erros de negócio em saída amigável + exit 1."""
    try:
        return fn()
    except StockError as e:
        _erro(e)


def _ator(cpf: str, db_path: str) -> Actor:
    return _executar(lambda: autenticar_por_cpf(cpf, db_path=db_path))


def _display_table(data: List[Dict[str, Any]], columns: List[str], title: str,
                   labels: Optional[Dict[str, Dict[str, str]]] = None) -> None:
    """Exibe uma lista de dicionários como tabela Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    labels = labels or {}
    table = Table(title=title, box=box.ROUNDED)
    for col in columns:
        if col in ("quantity", "threshold", "quantity_change", "new_quantity", "quantidade_ajustada"):
            table.add_column(col, justify="right")
        else:
            table.add_column(col)

    for row in data:
        valores = []
        for col in columns:
            val = row.get(col, "")
            if col in labels:
                val = labels[col].get(val, val)
            if col == "status_label":
                status = row.get("status")
                if status == "low":
                    val = f"[bold red]{val}[/]"
                elif status == "inactive":
                    val = f"[bold yellow]{val}[/]"
                else:
                    val = f"[bold green]{val}[/]"
            valores.append("" if val is None else str(val))
        table.add_row(*valores)

    console.print(table)


def _display_counts(counts: Dict[str, int], title: str) -> None:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Indicador")
    table.add_column("Total", justify="right")
    for k, v in counts.items():
        table.add_row(k, str(v))
    console.print(table)


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DbOption):
    """Aplica migrações e recria as views auxiliares."""
    apply_migrations(db_path)
    create_views(db_path)
    typer.echo(f">> Migrações aplicadas e views criadas em: {db_path}")


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("transactions", help="transactions | movimentacoes | database | system | auth"),
    linhas: int = typer.Option(20, help="Quantidade de linhas"),
):
    """Mostra as últimas linhas de um arquivo de log."""
    sg_logger.set_logging(True)
    typer.echo(sg_logger.get_log_summary(tipo, lines=linhas) or "")


# -----------------------
# perfis
# -----------------------

perfil_app = typer.Typer(help="Perfis de usuário.")
app.add_typer(perfil_app, name="perfil")


@perfil_app.command("registrar")
def cmd_perfil_registrar(
    cpf: str = typer.Option(..., help="CPF (com ou sem pontuação)"),
    nome: str = typer.Option(..., help="Nome completo"),
    email: Optional[str] = typer.Option(None, help="E-mail"),
    db_path: str = DbOption,
):
    """Cadastra um perfil identificado pelo CPF."""
    profile = _executar(lambda: registrar_perfil(cpf, nome, email=email, db_path=db_path))
    typer.echo(f">> Perfil criado: {profile.id}")


# -----------------------
# produtos
# -----------------------

produto_app = typer.Typer(help="Cadastro e consulta de produtos.")
app.add_typer(produto_app, name="produto")


@produto_app.command("criar")
def cmd_produto_criar(
    code: str = typer.Argument(..., help="Código do produto"),
    description: str = typer.Argument(..., help="Descrição"),
    quantidade: int = typer.Option(0, "--quantidade", min=0, help="Estoque inicial"),
    minimo: int = typer.Option(0, "--minimo", min=0, help="Estoque mínimo (alerta)"),
    ean: Optional[str] = typer.Option(None, help="Código de barras (opcional)"),
    cpf: str = CpfOption,
    db_path: str = DbOption,
):
    """Cadastra um produto com a movimentação inicial."""
    actor = _ator(cpf, db_path)
    product = _executar(lambda: create_product(actor, code, description, quantidade, minimo, ean=ean, db_path=db_path))
    typer.echo(f">> Produto {product.code} cadastrado com {product.quantity} unidade(s).")


@produto_app.command("ean")
def cmd_produto_ean(
    code: str = typer.Argument(..., help="Código do produto"),
    ean: str = typer.Argument(..., help="Novo código de barras"),
    cpf: str = CpfOption,
    db_path: str = DbOption,
):
    """Atualiza o código de barras (EAN) do produto."""
    actor = _ator(cpf, db_path)
    product = _executar(lambda: update_ean(actor, ean, product_code=code, db_path=db_path))
    typer.echo(f">> EAN do produto {product.code} atualizado para {product.ean}.")


@produto_app.command("listar")
def cmd_produto_listar(
    busca: Optional[str] = typer.Option(None, help="Filtro por código, descrição ou EAN"),
    status: str = typer.Option("all", help="all | low | inactive | ok"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DbOption,
):
    """Lista produtos com status de estoque."""
    rows = listar_produtos(busca=busca, status=status, db_path=db_path)
    if as_json:
        _print_json(rows)
        return
    _display_table(rows, ["code", "description", "quantity", "threshold", "ean", "status_label"],
                   title=f"Produtos ({len(rows)})")


# -----------------------
# estoque
# -----------------------

estoque_app = typer.Typer(help="Movimentação e painéis de estoque.")
app.add_typer(estoque_app, name="estoque")


@estoque_app.command("ajustar")
def cmd_estoque_ajustar(
    code: str = typer.Argument(..., help="Código do produto"),
    tipo: str = typer.Argument(..., help="entrada | venda | ajuste"),
    quantidade: int = typer.Argument(..., min=0, help="Quantidade (no ajuste: novo estoque)"),
    obs: Optional[str] = typer.Option(None, "--obs", help="Observação"),
    cpf: str = CpfOption,
    db_path: str = DbOption,
):
    """Registra entrada, venda ou ajuste de estoque."""
    actor = _ator(cpf, db_path)
    res = _executar(lambda: adjust_stock(actor, code, tipo, quantidade, observacao=obs, db_path=db_path))
    mov = res.movement
    table = Table(title="Movimentação Registrada", box=box.ROUNDED)
    table.add_column("Campo")
    table.add_column("Valor")
    table.add_row("Produto", f"{res.product.code} - {res.product.description}")
    table.add_row("Tipo", f"{tipo} ({LEDGER_LABELS[mov.type.value]})")
    table.add_row("Quantidade", str(mov.quantity_change))
    table.add_row("Estoque Final", str(mov.new_quantity))
    console.print(table)


@estoque_app.command("baixo")
def cmd_estoque_baixo(db_path: str = DbOption):
    """Produtos com estoque menor ou igual ao mínimo."""
    rows = [p.to_dict() for p in estoque_baixo(db_path=db_path)]
    _display_table(rows, ["code", "description", "quantity", "threshold"], title="Estoque Baixo")


@estoque_app.command("inativos")
def cmd_estoque_inativos(
    dias: int = typer.Option(30, help="Dias sem movimentação"),
    db_path: str = DbOption,
):
    """Produtos sem movimentação no período."""
    rows = [p.to_dict() for p in produtos_inativos(dias=dias, db_path=db_path)]
    _display_table(rows, ["code", "description", "quantity", "last_activity"], title=f"Sem Vendas ({dias}d)")


@estoque_app.command("resumo")
def cmd_estoque_resumo(db_path: str = DbOption):
    """Totais do painel de estoque e de movimentações."""
    _display_counts(resumo_estoque(db_path=db_path), title="Estoque")
    _display_counts(resumo_movimentacoes(db_path=db_path), title="Movimentações")


# -----------------------
# movimentações / histórico
# -----------------------

mov_app = typer.Typer(help="Livro de movimentações.")
app.add_typer(mov_app, name="mov")


@mov_app.command("listar")
def cmd_mov_listar(
    busca: Optional[str] = typer.Option(None, help="Código, descrição ou e-mail"),
    tipo: str = typer.Option("all", help="all | initial | add | remove"),
    db_path: str = DbOption,
):
    rows = listar_movimentacoes(busca=busca, tipo=tipo, db_path=db_path)
    _display_table(
        rows,
        ["timestamp", "product_code", "product_description", "type", "quantity_change", "new_quantity", "user_email"],
        title=f"Movimentações ({len(rows)})",
        labels={"type": LEDGER_LABELS},
    )


@mov_app.command("exportar")
def cmd_mov_exportar(
    path: str = typer.Argument(..., help="Arquivo CSV de destino"),
    busca: Optional[str] = typer.Option(None),
    tipo: str = typer.Option("all"),
    db_path: str = DbOption,
):
    info = exportar_movimentacoes_csv(path, busca=busca, tipo=tipo, db_path=db_path)
    typer.echo(f">> {info['linhas_exportadas']} movimentação(ões) exportada(s) para {path}")


hist_app = typer.Typer(help="Histórico de vendas e ajustes.")
app.add_typer(hist_app, name="hist")


@hist_app.command("listar")
def cmd_hist_listar(
    busca: Optional[str] = typer.Option(None, help="Código, observação, nome ou e-mail"),
    tipo: str = typer.Option("all", help="all | entrada | venda | ajuste"),
    db_path: str = DbOption,
):
    rows = listar_historico(busca=busca, tipo=tipo, db_path=db_path)
    _display_table(
        rows,
        ["created_at", "codigo_produto", "tipo", "quantidade_ajustada", "observacao", "user_name"],
        title=f"Histórico ({len(rows)})",
        labels={"tipo": HISTORICO_LABELS},
    )


@hist_app.command("exportar")
def cmd_hist_exportar(
    path: str = typer.Argument(..., help="Arquivo CSV de destino"),
    busca: Optional[str] = typer.Option(None),
    tipo: str = typer.Option("all"),
    db_path: str = DbOption,
):
    info = exportar_historico_csv(path, busca=busca, tipo=tipo, db_path=db_path)
    typer.echo(f">> {info['linhas_exportadas']} registro(s) exportado(s) para {path}")


# -----------------------
# requisição JSON
# -----------------------

@app.command("op")
def cmd_op(
    request: str = typer.Argument(..., help='Ex.: \'{"operation": "adjust_stock", "data": {...}}\''),
    cpf: str = CpfOption,
    db_path: str = DbOption,
):
    """Executa uma requisição {operation, data} e imprime a resposta JSON."""
    try:
        actor = autenticar_por_cpf(cpf, db_path=db_path)
    except StockError:
        actor = None
    resp = dispatch_json(request, actor, db_path=db_path)
    typer.echo(resp.to_json())
    if not resp.ok:
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()

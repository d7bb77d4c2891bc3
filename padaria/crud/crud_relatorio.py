# padaria/crud/crud_relatorio.py

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .crud_venda import intervalo_datas
from ..models import ItemVenda, Produto, StatusVenda, TipoProduto, Venda

# Formato do rótulo de cada período, por banco de dados
_FORMATOS_PERIODO = {
    "sqlite": {"dia": "%Y-%m-%d", "semana": "%Y-%W", "mes": "%Y-%m"},
    "mysql": {"dia": "%Y-%m-%d", "semana": "%x-%v", "mes": "%Y-%m"},
    "postgresql": {"dia": "YYYY-MM-DD", "semana": "IYYY-IW", "mes": "YYYY-MM"},
}

AGRUPAMENTOS = ("dia", "semana", "mes")


def expressao_periodo(db: Session, agrupamento: str):
    """Expressão SQL que transforma Data_Hora no rótulo do período ('2024-05-01', '2024-18', '2024-05')."""
    dialeto = db.get_bind().dialect.name
    formatos = _FORMATOS_PERIODO.get(dialeto, _FORMATOS_PERIODO["mysql"])
    formato = formatos[agrupamento]
    if dialeto == "sqlite":
        return func.strftime(formato, Venda.data_hora)
    if dialeto == "postgresql":
        return func.to_char(Venda.data_hora, formato)
    return func.date_format(Venda.data_hora, formato)


def vendas_por_periodo(db: Session, *, inicio: date, fim: date, agrupamento: str):
    periodo = expressao_periodo(db, agrupamento).label("periodo")
    return (
        db.query(
            periodo,
            func.count(Venda.id).label("total_vendas"),
            func.sum(Venda.valor_total).label("valor_total"),
            func.min(Venda.valor_total).label("menor_venda"),
            func.max(Venda.valor_total).label("maior_venda"),
        )
        .filter(Venda.status == StatusVenda.FINALIZADA, *intervalo_datas(inicio, fim))
        .group_by(periodo)
        .order_by(periodo)
        .all()
    )


def vendas_por_dia_desde(db: Session, *, inicio: date):
    """Quantidade e total por dia, de `inicio` até hoje."""
    return vendas_por_periodo(db, inicio=inicio, fim=date.today(), agrupamento="dia")


def produtos_mais_vendidos(
    db: Session,
    *,
    inicio: Optional[date] = None,
    fim: Optional[date] = None,
    limite: int = 10,
):
    """Ranking por faturamento (soma de quantidade x preço congelado nos itens)."""
    faturamento = func.sum(ItemVenda.quantidade * ItemVenda.preco_unitario).label("faturamento_total")
    query = (
        db.query(
            Produto.id,
            Produto.nome,
            TipoProduto.nome_tipo,
            Produto.unidade_medida,
            func.sum(ItemVenda.quantidade).label("total_vendido"),
            func.count(func.distinct(ItemVenda.id_venda)).label("quantidade_vendas"),
            faturamento,
        )
        .select_from(ItemVenda)
        .join(Venda, ItemVenda.id_venda == Venda.id)
        .join(Produto, ItemVenda.id_produto == Produto.id)
        .join(TipoProduto, Produto.id_tipo_produto == TipoProduto.id)
        .filter(Venda.status == StatusVenda.FINALIZADA)
    )
    if inicio and fim:
        query = query.filter(*intervalo_datas(inicio, fim))
    return (
        query.group_by(Produto.id, Produto.nome, TipoProduto.nome_tipo, Produto.unidade_medida)
        .order_by(faturamento.desc())
        .limit(limite)
        .all()
    )


def produtos_estoque_baixo(db: Session, *, limite: Decimal):
    return (
        db.query(Produto, TipoProduto.nome_tipo)
        .join(TipoProduto, Produto.id_tipo_produto == TipoProduto.id)
        .filter(Produto.estoque_atual < limite)
        .order_by(Produto.estoque_atual.asc(), Produto.nome)
        .all()
    )

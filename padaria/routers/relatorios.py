# padaria/routers/relatorios.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.relatorio_service import RelatorioService

router = APIRouter(
    prefix="/relatorios",
    tags=["Relatórios"],
    responses=schemas.ERROS_PADRAO,
)


def get_relatorio_service(db: Session = Depends(get_db)) -> RelatorioService:
    return RelatorioService(db=db)


@router.get("/vendas-periodo", response_model=schemas.Resposta[schemas.RelatorioVendasPeriodo])
def vendas_periodo(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    agrupamento: str = "dia",
    service: RelatorioService = Depends(get_relatorio_service),
):
    """`agrupamento`: dia, semana ou mes. As duas datas são obrigatórias."""
    relatorio = service.vendas_por_periodo(
        data_inicio=data_inicio, data_fim=data_fim, agrupamento=agrupamento
    )
    return {"data": relatorio}


@router.get("/produtos-mais-vendidos", response_model=schemas.Resposta[schemas.RelatorioProdutosMaisVendidos])
def produtos_mais_vendidos(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    limite: int = Query(10, gt=0),
    service: RelatorioService = Depends(get_relatorio_service),
):
    relatorio = service.produtos_mais_vendidos(data_inicio=data_inicio, data_fim=data_fim, limite=limite)
    return {"data": relatorio}


@router.get("/vendas-por-forma-pagamento", response_model=schemas.Resposta[schemas.RelatorioFormasPagamento])
def vendas_por_forma_pagamento(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: RelatorioService = Depends(get_relatorio_service),
):
    return {"data": service.vendas_por_forma_pagamento(data_inicio=data_inicio, data_fim=data_fim)}


@router.get("/desempenho-funcionarios", response_model=schemas.Resposta[schemas.RelatorioDesempenho])
def desempenho_funcionarios(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: RelatorioService = Depends(get_relatorio_service),
):
    return {"data": service.desempenho_funcionarios(data_inicio=data_inicio, data_fim=data_fim)}


@router.get("/clientes-devedores", response_model=schemas.Resposta[schemas.RelatorioDevedores])
def clientes_devedores(service: RelatorioService = Depends(get_relatorio_service)):
    return {"data": service.clientes_devedores()}


@router.get("/produtos-estoque-baixo", response_model=schemas.Resposta[schemas.RelatorioEstoqueBaixo])
def produtos_estoque_baixo(
    limite: int = Query(50, gt=0),
    service: RelatorioService = Depends(get_relatorio_service),
):
    return {"data": service.produtos_estoque_baixo(limite=limite)}


@router.get("/dashboard", response_model=schemas.Resposta[schemas.Dashboard])
def dashboard(service: RelatorioService = Depends(get_relatorio_service)):
    return {"data": service.dashboard()}

# padaria/services/relatorio_service.py

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud, schemas
from ..core.config import settings
from ..core.errors import ValidationFailedError
from ..core.numeros import arredondar, media, percentual, to_decimal
from .cliente_service import linha_devedor

ESTOQUE_CRITICO = 10
ESTOQUE_ATENCAO = 30


def _periodo(data_inicio: Optional[date], data_fim: Optional[date]) -> Optional[schemas.Periodo]:
    if data_inicio and data_fim:
        return schemas.Periodo(inicio=data_inicio, fim=data_fim)
    return None


def nivel_alerta(estoque) -> str:
    estoque = to_decimal(estoque)
    if estoque < ESTOQUE_CRITICO:
        return "CRÍTICO"
    if estoque < ESTOQUE_ATENCAO:
        return "ATENÇÃO"
    return "BAIXO"


class RelatorioService:
    """Relatórios agregados. Só contam vendas com status 'finalizada'."""

    def __init__(self, db: Session):
        self.db = db

    def vendas_por_periodo(
        self, *, data_inicio: Optional[date], data_fim: Optional[date], agrupamento: str = "dia"
    ) -> schemas.RelatorioVendasPeriodo:
        erros = []
        if not data_inicio or not data_fim:
            erros.append("Data início e data fim são obrigatórias")
        if agrupamento not in crud.relatorio.AGRUPAMENTOS:
            erros.append("Agrupamento inválido. Use: dia, semana ou mes")
        if erros:
            raise ValidationFailedError(erros)

        linhas = crud.relatorio.vendas_por_periodo(
            self.db, inicio=data_inicio, fim=data_fim, agrupamento=agrupamento
        )
        total_vendas = sum(linha.total_vendas for linha in linhas)
        valor_total = sum((to_decimal(linha.valor_total) for linha in linhas), Decimal("0"))

        return schemas.RelatorioVendasPeriodo(
            periodo=schemas.PeriodoAgrupado(inicio=data_inicio, fim=data_fim, agrupamento=agrupamento),
            resumo=schemas.ResumoPeriodo(
                total_vendas=total_vendas,
                valor_total=arredondar(valor_total),
                ticket_medio=media(valor_total, total_vendas),
            ),
            dados=[
                schemas.VendasNoPeriodo(
                    periodo=str(linha.periodo),
                    total_vendas=linha.total_vendas,
                    valor_total=arredondar(linha.valor_total),
                    ticket_medio=media(linha.valor_total, linha.total_vendas),
                    menor_venda=arredondar(linha.menor_venda),
                    maior_venda=arredondar(linha.maior_venda),
                )
                for linha in linhas
            ],
        )

    def produtos_mais_vendidos(
        self, *, data_inicio: Optional[date] = None, data_fim: Optional[date] = None, limite: int = 10
    ) -> schemas.RelatorioProdutosMaisVendidos:
        linhas = crud.relatorio.produtos_mais_vendidos(
            self.db, inicio=data_inicio, fim=data_fim, limite=limite
        )
        faturamento_total = sum((to_decimal(linha.faturamento_total) for linha in linhas), Decimal("0"))

        dados = []
        for posicao, linha in enumerate(linhas, start=1):
            total_vendido = to_decimal(linha.total_vendido)
            faturamento = to_decimal(linha.faturamento_total)
            dados.append(schemas.ProdutoMaisVendido(
                posicao=posicao,
                id_produto=linha.id,
                produto=linha.nome,
                tipo=linha.nome_tipo,
                unidade_medida=linha.unidade_medida,
                total_vendido=total_vendido,
                quantidade_vendas=linha.quantidade_vendas,
                faturamento_total=arredondar(faturamento),
                # Preço médio ponderado pela quantidade vendida
                preco_medio=arredondar(faturamento / total_vendido) if total_vendido else Decimal("0.00"),
                percentual_faturamento=percentual(faturamento, faturamento_total),
            ))

        return schemas.RelatorioProdutosMaisVendidos(
            periodo=_periodo(data_inicio, data_fim),
            limite=limite,
            resumo=schemas.ResumoFaturamento(faturamento_total=arredondar(faturamento_total)),
            dados=dados,
        )

    def vendas_por_forma_pagamento(
        self, *, data_inicio: Optional[date] = None, data_fim: Optional[date] = None
    ) -> schemas.RelatorioFormasPagamento:
        periodo = _periodo(data_inicio, data_fim)
        inicio, fim = (data_inicio, data_fim) if periodo else (None, None)
        linhas = crud.venda.totais_por_forma(self.db, inicio=inicio, fim=fim)
        # Do maior valor para o menor
        linhas = sorted(linhas, key=lambda linha: to_decimal(linha[2]), reverse=True)

        total_vendas = sum(quantidade for _, quantidade, _ in linhas)
        valor_total = sum((to_decimal(valor) for _, _, valor in linhas), Decimal("0"))

        return schemas.RelatorioFormasPagamento(
            periodo=periodo,
            resumo=schemas.ResumoFormas(total_vendas=total_vendas, valor_total=arredondar(valor_total)),
            dados=[
                schemas.VendasPorForma(
                    forma_pagamento=forma,
                    quantidade_vendas=quantidade,
                    valor_total=arredondar(valor),
                    ticket_medio=media(valor, quantidade),
                    percentual_quantidade=percentual(quantidade, total_vendas),
                    percentual_valor=percentual(valor, valor_total),
                )
                for forma, quantidade, valor in linhas
            ],
        )

    def desempenho_funcionarios(
        self, *, data_inicio: Optional[date] = None, data_fim: Optional[date] = None
    ) -> schemas.RelatorioDesempenho:
        linhas = crud.funcionario.get_ranking(self.db, inicio=data_inicio, fim=data_fim)
        total_vendas = sum(linha.total_vendas for linha in linhas)
        valor_total = sum((to_decimal(linha.valor_total_vendido) for linha in linhas), Decimal("0"))

        return schemas.RelatorioDesempenho(
            periodo=_periodo(data_inicio, data_fim),
            resumo=schemas.ResumoPeriodo(
                total_vendas=total_vendas,
                valor_total=arredondar(valor_total),
                ticket_medio=media(valor_total, total_vendas),
            ),
            dados=[
                schemas.DesempenhoFuncionario(
                    posicao=posicao,
                    id_funcionario=linha.id,
                    funcionario=linha.nome,
                    cargo=linha.nome_cargo,
                    total_vendas=linha.total_vendas,
                    valor_total_vendido=arredondar(linha.valor_total_vendido),
                    ticket_medio=media(linha.valor_total_vendido, linha.total_vendas),
                    menor_venda=arredondar(linha.menor_venda) if linha.menor_venda is not None else None,
                    maior_venda=arredondar(linha.maior_venda) if linha.maior_venda is not None else None,
                    percentual_vendas=percentual(linha.total_vendas, total_vendas),
                )
                for posicao, linha in enumerate(linhas, start=1)
            ],
        )

    def clientes_devedores(self) -> schemas.RelatorioDevedores:
        dados = []
        for linha in crud.cliente.get_devedores(self.db):
            devedor = linha_devedor(linha)
            devedor["situacao"] = "EXCEDIDO" if devedor["credito_disponivel"] < 0 else "EM_DIA"
            dados.append(schemas.DevedorRelatorio(**devedor))

        return schemas.RelatorioDevedores(
            resumo=schemas.ResumoDevedores(
                quantidade_clientes=len(dados),
                quantidade_vendas=sum(d.quantidade_vendas_abertas for d in dados),
                total_em_aberto=sum((d.total_em_aberto for d in dados), Decimal("0")),
            ),
            dados=dados,
        )

    def produtos_estoque_baixo(self, *, limite: int = 50) -> schemas.RelatorioEstoqueBaixo:
        dados = []
        for produto, nome_tipo in crud.relatorio.produtos_estoque_baixo(self.db, limite=Decimal(limite)):
            estoque = to_decimal(produto.estoque_atual)
            preco = to_decimal(produto.preco_base)
            dados.append(schemas.ProdutoEstoqueBaixo(
                id_produto=produto.id,
                produto=produto.nome,
                tipo=nome_tipo,
                unidade_medida=produto.unidade_medida,
                estoque_atual=estoque,
                preco_base=preco,
                valor_estoque=arredondar(estoque * preco),
                alerta=nivel_alerta(estoque),
            ))

        return schemas.RelatorioEstoqueBaixo(
            limite=limite,
            resumo=schemas.ResumoEstoque(
                quantidade_produtos=len(dados),
                valor_total_estoque=sum((d.valor_estoque for d in dados), Decimal("0")),
            ),
            dados=dados,
        )

    def dashboard(self) -> schemas.Dashboard:
        hoje = date.today()

        vendas_hoje = crud.venda.totais(self.db, inicio=hoje, fim=hoje)
        vendas_mes = crud.venda.totais(self.db, inicio=hoje.replace(day=1), fim=hoje)
        fiado_aberto = crud.venda.totais_fiado_em_aberto(self.db)

        # Sete dias contando com hoje
        ultimos_dias = crud.relatorio.vendas_por_dia_desde(self.db, inicio=hoje - timedelta(days=6))

        return schemas.Dashboard(
            vendas_hoje=schemas.TotaisVendas(quantidade=vendas_hoje[0], valor_total=to_decimal(vendas_hoje[1])),
            vendas_mes=schemas.TotaisVendas(quantidade=vendas_mes[0], valor_total=to_decimal(vendas_mes[1])),
            clientes={"total": crud.cliente.count(self.db)},
            produtos=schemas.TotaisProdutos(
                total=crud.produto.count(self.db),
                estoque_baixo=crud.produto.count_estoque_baixo(
                    self.db, limite=Decimal(settings.LOW_STOCK_THRESHOLD)
                ),
            ),
            alertas=schemas.Alertas(
                clientes_credito_excedido=crud.cliente.count_credito_excedido(self.db) or 0,
                fiado_em_aberto=schemas.TotaisVendas(
                    quantidade=fiado_aberto[0], valor_total=to_decimal(fiado_aberto[1])
                ),
            ),
            vendas_ultimos_7_dias=[
                schemas.VendasDoDia(
                    data=date.fromisoformat(str(linha.periodo)),
                    quantidade=linha.total_vendas,
                    total=arredondar(linha.valor_total),
                )
                for linha in ultimos_dias
            ],
        )

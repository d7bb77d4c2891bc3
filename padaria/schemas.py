from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import (
    AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer,
    field_validator, model_validator,
)

from .models import StatusCliente, StatusVenda, TipoPagamento, UnidadeMedida

T = TypeVar("T")

# Valores monetários e quantidades são Decimal por dentro e número no JSON
Dinheiro = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Quantidade = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _texto_obrigatorio(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("não pode ficar em branco")
    return value


TextoObrigatorio = Annotated[str, AfterValidator(_texto_obrigatorio)]


def _somente_digitos(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


# --- Envelope de resposta ---

class Resposta(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class RespostaLista(BaseModel, Generic[T]):
    success: bool = True
    total: int
    data: List[T]


class RespostaErro(BaseModel):
    success: bool = False
    error: Optional[str] = None
    errors: Optional[List[str]] = None


# Respostas de erro documentadas no OpenAPI de todos os routers
ERROS_PADRAO = {
    400: {"model": RespostaErro, "description": "Dados inválidos ou regra de negócio violada"},
    404: {"model": RespostaErro, "description": "Registro não encontrado"},
}


class _AtualizacaoParcial(BaseModel):
    """
    Base dos schemas de atualização (PUT parcial): só os campos enviados são
    aplicados, mas campos obrigatórios no banco não podem ser enviados como null.
    """
    campos_obrigatorios: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _rejeitar_nulos(self):
        for campo in self.campos_obrigatorios:
            if campo in self.model_fields_set and getattr(self, campo) is None:
                raise ValueError(f"{campo} não pode ser nulo")
        return self


# --- Tipos de Produto ---

class TipoProdutoCreate(BaseModel):
    nome_tipo: TextoObrigatorio


class TipoProdutoUpdate(TipoProdutoCreate):
    pass


class TipoProduto(BaseModel):
    id: int
    nome_tipo: str

    model_config = ConfigDict(from_attributes=True)


# --- Produtos ---

class ProdutoCreate(BaseModel):
    nome: TextoObrigatorio
    unidade_medida: UnidadeMedida
    preco_base: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    estoque_atual: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=3)
    id_tipo_produto: int = Field(..., gt=0)


class ProdutoUpdate(_AtualizacaoParcial):
    campos_obrigatorios: ClassVar[Tuple[str, ...]] = (
        "nome", "unidade_medida", "preco_base", "estoque_atual", "id_tipo_produto",
    )

    nome: Optional[TextoObrigatorio] = None
    unidade_medida: Optional[UnidadeMedida] = None
    preco_base: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    estoque_atual: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=3)
    id_tipo_produto: Optional[int] = Field(None, gt=0)


class Produto(BaseModel):
    id: int
    nome: str
    unidade_medida: UnidadeMedida
    preco_base: Dinheiro
    estoque_atual: Quantidade
    id_tipo_produto: int
    tipo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AjusteEstoque(BaseModel):
    # Positivo para entrada, negativo para saída
    quantidade: Decimal = Field(..., max_digits=10, decimal_places=3)

    @field_validator("quantidade")
    @classmethod
    def _diferente_de_zero(cls, value: Decimal) -> Decimal:
        if value == 0:
            raise ValueError("Quantidade deve ser diferente de zero")
        return value


class AjusteEstoqueResultado(BaseModel):
    id: int
    nome: str
    estoque_anterior: Quantidade
    quantidade_alterada: Quantidade
    estoque_atual: Quantidade


# --- Clientes ---

class _ClienteCampos(BaseModel):
    @field_validator("telefone", check_fields=False)
    @classmethod
    def _validar_telefone(cls, value: Optional[str]) -> Optional[str]:
        if value and value.strip():
            if len(_somente_digitos(value)) not in (10, 11):
                raise ValueError("Telefone inválido (deve ter 10 ou 11 dígitos)")
        return value

    @field_validator("cep", check_fields=False)
    @classmethod
    def _validar_cep(cls, value: Optional[str]) -> Optional[str]:
        if value and value.strip():
            if len(_somente_digitos(value)) != 8:
                raise ValueError("CEP inválido (deve ter 8 dígitos)")
        return value


class ClienteCreate(_ClienteCampos):
    nome: TextoObrigatorio
    telefone: Optional[str] = None
    status: StatusCliente
    limite_fiado: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    rua: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    cep: Optional[str] = None


class ClienteUpdate(_ClienteCampos, _AtualizacaoParcial):
    campos_obrigatorios: ClassVar[Tuple[str, ...]] = ("nome", "status", "limite_fiado")

    nome: Optional[TextoObrigatorio] = None
    telefone: Optional[str] = None
    status: Optional[StatusCliente] = None
    limite_fiado: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    rua: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    cep: Optional[str] = None


class Cliente(BaseModel):
    id: int
    nome: str
    telefone: Optional[str] = None
    status: StatusCliente
    limite_fiado: Dinheiro
    rua: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    cep: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClienteComCredito(Cliente):
    total_em_aberto: Dinheiro
    credito_disponivel: Dinheiro


class ClienteResumo(BaseModel):
    id: int
    nome: str
    status: StatusCliente


class SituacaoCredito(BaseModel):
    cliente: ClienteResumo
    limite_fiado: Dinheiro
    total_em_aberto: Dinheiro
    credito_disponivel: Dinheiro
    percentual_utilizado: float
    situacao: str


class ValidarFiadoRequest(BaseModel):
    valor: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class ValidacaoFiado(BaseModel):
    pode_vender: bool
    credito_disponivel: Dinheiro
    valor_venda: Dinheiro
    credito_apos_venda: Dinheiro
    mensagem: str


class ClienteDevedor(BaseModel):
    id_cliente: int
    nome: str
    telefone: Optional[str] = None
    status: StatusCliente
    limite_fiado: Dinheiro
    total_em_aberto: Dinheiro
    credito_disponivel: Dinheiro
    quantidade_vendas_abertas: int
    venda_mais_antiga: datetime
    dias_mais_antigo: int


# --- Cargos ---

class CargoCreate(BaseModel):
    nome_cargo: TextoObrigatorio


class CargoUpdate(CargoCreate):
    pass


class Cargo(BaseModel):
    id: int
    nome_cargo: str

    model_config = ConfigDict(from_attributes=True)


# --- Funcionários ---

def _nome_funcionario(value: str) -> str:
    if len(value) < 3:
        raise ValueError("Nome deve ter pelo menos 3 caracteres")
    return value


NomeFuncionario = Annotated[TextoObrigatorio, AfterValidator(_nome_funcionario)]


class FuncionarioCreate(BaseModel):
    nome: NomeFuncionario
    id_cargo: int = Field(..., gt=0)


class FuncionarioUpdate(_AtualizacaoParcial):
    campos_obrigatorios: ClassVar[Tuple[str, ...]] = ("nome", "id_cargo")

    nome: Optional[NomeFuncionario] = None
    id_cargo: Optional[int] = Field(None, gt=0)


class Funcionario(BaseModel):
    id: int
    nome: str
    id_cargo: int
    cargo: Optional[str] = Field(None, validation_alias="nome_do_cargo")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class FuncionarioResumo(BaseModel):
    id: int
    nome: str
    cargo: Optional[str] = None


class NumerosFuncionario(BaseModel):
    total_vendas: int
    valor_total_vendido: Dinheiro
    ticket_medio: Dinheiro


class EstatisticasFuncionario(BaseModel):
    funcionario: FuncionarioResumo
    estatisticas: NumerosFuncionario


class RankingFuncionario(BaseModel):
    posicao: int
    id_funcionario: int
    nome: str
    cargo: Optional[str] = None
    total_vendas: int
    valor_total_vendido: Dinheiro
    ticket_medio: Dinheiro


# --- Vendas ---

class ItemVendaCreate(BaseModel):
    # Um eventual 'preco_unitario' enviado pelo cliente é ignorado:
    # o preço vem sempre do cadastro do produto.
    id_produto: int = Field(..., gt=0)
    quantidade: Decimal = Field(..., gt=0, max_digits=10, decimal_places=3)


class VendaCreate(BaseModel):
    id_cliente: int = Field(..., gt=0)
    id_funcionario: int = Field(..., gt=0)
    tipo_pagamento: TipoPagamento
    itens: List[ItemVendaCreate] = Field(..., min_length=1)


class ItemVenda(BaseModel):
    id: int
    id_produto: int
    produto: Optional[str] = Field(None, validation_alias="nome_produto")
    unidade_medida: Optional[UnidadeMedida] = None
    quantidade: Quantidade
    preco_unitario: Dinheiro
    subtotal: Dinheiro

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class VendaResumo(BaseModel):
    id: int
    data_hora: datetime
    tipo_pagamento: TipoPagamento
    valor_total: Dinheiro
    status: StatusVenda
    data_pagamento_fiado: Optional[datetime] = None
    id_cliente: int
    id_funcionario: int
    cliente: Optional[str] = Field(None, validation_alias="nome_cliente")
    funcionario: Optional[str] = Field(None, validation_alias="nome_funcionario")
    status_pagamento: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Venda(VendaResumo):
    cliente_telefone: Optional[str] = Field(None, validation_alias="telefone_cliente")
    cargo_funcionario: Optional[str] = None
    itens: List[ItemVenda] = []


class FiadoEmAberto(BaseModel):
    id_venda: int
    data_hora: datetime
    valor_total: Dinheiro
    dias_em_aberto: int
    id_cliente: int
    cliente: str
    cliente_telefone: Optional[str] = None


class RespostaFiadoEmAberto(RespostaLista[FiadoEmAberto]):
    total_em_aberto: Dinheiro


class Periodo(BaseModel):
    inicio: date
    fim: date


class TotalPorForma(BaseModel):
    quantidade: int
    valor: Dinheiro


class ResumoVendas(BaseModel):
    periodo: Periodo
    total_vendas: int
    valor_total: Dinheiro
    ticket_medio: Dinheiro
    por_forma_pagamento: Dict[str, TotalPorForma]


# --- Relatórios ---

class PeriodoAgrupado(Periodo):
    agrupamento: str


class ResumoPeriodo(BaseModel):
    total_vendas: int
    valor_total: Dinheiro
    ticket_medio: Dinheiro


class VendasNoPeriodo(BaseModel):
    periodo: str
    total_vendas: int
    valor_total: Dinheiro
    ticket_medio: Dinheiro
    menor_venda: Dinheiro
    maior_venda: Dinheiro


class RelatorioVendasPeriodo(BaseModel):
    periodo: PeriodoAgrupado
    resumo: ResumoPeriodo
    dados: List[VendasNoPeriodo]


class ProdutoMaisVendido(BaseModel):
    posicao: int
    id_produto: int
    produto: str
    tipo: Optional[str] = None
    unidade_medida: UnidadeMedida
    total_vendido: Quantidade
    quantidade_vendas: int
    faturamento_total: Dinheiro
    preco_medio: Dinheiro
    percentual_faturamento: float


class ResumoFaturamento(BaseModel):
    faturamento_total: Dinheiro


class RelatorioProdutosMaisVendidos(BaseModel):
    periodo: Optional[Periodo] = None
    limite: int
    resumo: ResumoFaturamento
    dados: List[ProdutoMaisVendido]


class VendasPorForma(BaseModel):
    forma_pagamento: TipoPagamento
    quantidade_vendas: int
    valor_total: Dinheiro
    ticket_medio: Dinheiro
    percentual_quantidade: float
    percentual_valor: float


class ResumoFormas(BaseModel):
    total_vendas: int
    valor_total: Dinheiro


class RelatorioFormasPagamento(BaseModel):
    periodo: Optional[Periodo] = None
    resumo: ResumoFormas
    dados: List[VendasPorForma]


class DesempenhoFuncionario(BaseModel):
    posicao: int
    id_funcionario: int
    funcionario: str
    cargo: Optional[str] = None
    total_vendas: int
    valor_total_vendido: Dinheiro
    ticket_medio: Dinheiro
    menor_venda: Optional[Dinheiro] = None
    maior_venda: Optional[Dinheiro] = None
    percentual_vendas: float


class RelatorioDesempenho(BaseModel):
    periodo: Optional[Periodo] = None
    resumo: ResumoPeriodo
    dados: List[DesempenhoFuncionario]


class DevedorRelatorio(ClienteDevedor):
    situacao: str


class ResumoDevedores(BaseModel):
    quantidade_clientes: int
    quantidade_vendas: int
    total_em_aberto: Dinheiro


class RelatorioDevedores(BaseModel):
    resumo: ResumoDevedores
    dados: List[DevedorRelatorio]


class ProdutoEstoqueBaixo(BaseModel):
    id_produto: int
    produto: str
    tipo: Optional[str] = None
    unidade_medida: UnidadeMedida
    estoque_atual: Quantidade
    preco_base: Dinheiro
    valor_estoque: Dinheiro
    alerta: str


class ResumoEstoque(BaseModel):
    quantidade_produtos: int
    valor_total_estoque: Dinheiro


class RelatorioEstoqueBaixo(BaseModel):
    limite: int
    resumo: ResumoEstoque
    dados: List[ProdutoEstoqueBaixo]


class TotaisVendas(BaseModel):
    quantidade: int
    valor_total: Dinheiro


class TotaisProdutos(BaseModel):
    total: int
    estoque_baixo: int


class Alertas(BaseModel):
    clientes_credito_excedido: int
    fiado_em_aberto: TotaisVendas


class VendasDoDia(BaseModel):
    data: date
    quantidade: int
    total: Dinheiro


class Dashboard(BaseModel):
    vendas_hoje: TotaisVendas
    vendas_mes: TotaisVendas
    clientes: Dict[str, int]
    produtos: TotaisProdutos
    alertas: Alertas
    vendas_ultimos_7_dias: List[VendasDoDia]

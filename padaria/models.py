# padaria/models.py

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DECIMAL, DateTime, ForeignKey, Enum
)
from sqlalchemy.orm import relationship

from .core.numeros import subtotal_item
from .database import Base


def _enum_values(enum_cls):
    # Guarda no banco o valor ('fiado'), não o nome do membro ('FIADO')
    return [member.value for member in enum_cls]


# --- ENUMS ---

class UnidadeMedida(str, enum.Enum):
    UNIDADE = "unidade"
    KG = "kg"
    FATIA = "fatia"


class StatusCliente(str, enum.Enum):
    BOM = "bom"
    MEDIO = "medio"
    RUIM = "ruim"


class TipoPagamento(str, enum.Enum):
    DINHEIRO = "dinheiro"
    CARTAO = "cartao"
    PIX = "pix"
    FIADO = "fiado"


class StatusVenda(str, enum.Enum):
    FINALIZADA = "finalizada"
    CANCELADA = "cancelada"


# --- MODELOS ---
# Os nomes de tabelas e colunas seguem o schema MySQL já existente da padaria.

class Cargo(Base):
    __tablename__ = "Cargo"

    id = Column("ID_Cargo", Integer, primary_key=True, index=True)
    nome_cargo = Column("Nome_Cargo", String(100), unique=True, nullable=False)

    funcionarios = relationship("Funcionario", back_populates="cargo")


class Funcionario(Base):
    __tablename__ = "Funcionario"

    id = Column("ID_Funcionario", Integer, primary_key=True, index=True)
    nome = Column("Nome", String(150), nullable=False)
    id_cargo = Column("ID_Cargo", Integer, ForeignKey("Cargo.ID_Cargo"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    cargo = relationship("Cargo", back_populates="funcionarios")
    vendas = relationship("Venda", back_populates="funcionario")

    @property
    def nome_do_cargo(self):
        return self.cargo.nome_cargo if self.cargo else None


class Cliente(Base):
    __tablename__ = "Cliente"

    id = Column("ID_Cliente", Integer, primary_key=True, index=True)
    nome = Column("Nome", String(150), nullable=False)
    telefone = Column("Telefone", String(20))
    status = Column(
        "Status",
        Enum(StatusCliente, values_callable=_enum_values, name="status_cliente"),
        nullable=False,
        default=StatusCliente.BOM,
    )
    limite_fiado = Column("Limite_Fiado", DECIMAL(10, 2), nullable=False, default=0)
    rua = Column("Rua", String(150))
    numero = Column("Numero", String(20))
    bairro = Column("Bairro", String(100))
    cidade = Column("Cidade", String(100))
    cep = Column("CEP", String(10))

    vendas = relationship("Venda", back_populates="cliente")


class TipoProduto(Base):
    __tablename__ = "Tipo_Produto"

    id = Column("ID_Tipo_Produto", Integer, primary_key=True, index=True)
    nome_tipo = Column("Nome_Tipo", String(100), unique=True, nullable=False)

    produtos = relationship("Produto", back_populates="tipo_produto")


class Produto(Base):
    __tablename__ = "Produto"

    id = Column("ID_Produto", Integer, primary_key=True, index=True)
    nome = Column("Nome", String(150), nullable=False)
    unidade_medida = Column(
        "Unidade_Medida",
        Enum(UnidadeMedida, values_callable=_enum_values, name="unidade_medida"),
        nullable=False,
    )
    preco_base = Column("Preco_Base", DECIMAL(10, 2), nullable=False)
    # Estoque fracionado (produtos vendidos por kg)
    estoque_atual = Column("Estoque_Atual", DECIMAL(10, 3), nullable=False, default=0)
    id_tipo_produto = Column(
        "ID_Tipo_Produto", Integer, ForeignKey("Tipo_Produto.ID_Tipo_Produto"), nullable=False
    )

    tipo_produto = relationship("TipoProduto", back_populates="produtos")
    itens_venda = relationship("ItemVenda", back_populates="produto")

    @property
    def tipo(self):
        return self.tipo_produto.nome_tipo if self.tipo_produto else None


class Venda(Base):
    __tablename__ = "Venda"

    id = Column("ID_Venda", Integer, primary_key=True, index=True)
    data_hora = Column("Data_Hora", DateTime, nullable=False, default=datetime.now)
    tipo_pagamento = Column(
        "Tipo_Pagamento",
        Enum(TipoPagamento, values_callable=_enum_values, name="tipo_pagamento"),
        nullable=False,
    )
    valor_total = Column("Valor_Total", DECIMAL(10, 2), nullable=False)
    id_cliente = Column("ID_Cliente", Integer, ForeignKey("Cliente.ID_Cliente"), nullable=False)
    id_funcionario = Column(
        "ID_Funcionario", Integer, ForeignKey("Funcionario.ID_Funcionario"), nullable=False
    )
    status = Column(
        "Status",
        Enum(StatusVenda, values_callable=_enum_values, name="status_venda"),
        nullable=False,
        default=StatusVenda.FINALIZADA,
    )
    # Nulo até a venda a fiado ser quitada
    data_pagamento_fiado = Column("Data_Pagamento_Fiado", DateTime, nullable=True)

    cliente = relationship("Cliente", back_populates="vendas")
    funcionario = relationship("Funcionario", back_populates="vendas")
    itens = relationship("ItemVenda", back_populates="venda", order_by="ItemVenda.id")

    @property
    def status_pagamento(self) -> str:
        if self.tipo_pagamento == TipoPagamento.FIADO:
            return "Em Aberto" if self.data_pagamento_fiado is None else "Quitado"
        return "Pago"

    @property
    def nome_cliente(self):
        return self.cliente.nome if self.cliente else None

    @property
    def nome_funcionario(self):
        return self.funcionario.nome if self.funcionario else None

    @property
    def telefone_cliente(self):
        return self.cliente.telefone if self.cliente else None

    @property
    def cargo_funcionario(self):
        return self.funcionario.nome_do_cargo if self.funcionario else None


class ItemVenda(Base):
    __tablename__ = "Item_Venda"

    id = Column("ID_Item", Integer, primary_key=True, index=True)
    id_venda = Column("ID_Venda", Integer, ForeignKey("Venda.ID_Venda"), nullable=False)
    id_produto = Column("ID_Produto", Integer, ForeignKey("Produto.ID_Produto"), nullable=False)
    quantidade = Column("Quantidade", DECIMAL(10, 3), nullable=False)
    # Preço "congelado" no momento da venda
    preco_unitario = Column("Preco_Unitario", DECIMAL(10, 2), nullable=False)

    venda = relationship("Venda", back_populates="itens")
    produto = relationship("Produto", back_populates="itens_venda")

    @property
    def subtotal(self):
        return subtotal_item(self.quantidade, self.preco_unitario)

    @property
    def nome_produto(self):
        return self.produto.nome if self.produto else None

    @property
    def unidade_medida(self):
        return self.produto.unidade_medida if self.produto else None

# padaria/crud/crud_venda.py

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .base import CRUDBase
from ..models import Funcionario, ItemVenda, StatusVenda, TipoPagamento, Venda
from ..schemas import VendaCreate


def intervalo_datas(inicio: Optional[date], fim: Optional[date]) -> list:
    """
    Filtro de período por data do calendário (dias inteiros, fim incluído).
    Equivale a DATE(Data_Hora) BETWEEN inicio AND fim, mas sem função de
    data específica do banco.
    """
    condicoes = []
    if inicio is not None:
        condicoes.append(Venda.data_hora >= datetime.combine(inicio, time.min))
    if fim is not None:
        condicoes.append(Venda.data_hora < datetime.combine(fim + timedelta(days=1), time.min))
    return condicoes


def filtro_fiado_em_aberto() -> list:
    """Vendas a fiado finalizadas e ainda não quitadas."""
    return [
        Venda.tipo_pagamento == TipoPagamento.FIADO,
        Venda.data_pagamento_fiado.is_(None),
        Venda.status == StatusVenda.FINALIZADA,
    ]


def _com_detalhes(query):
    return query.options(
        joinedload(Venda.cliente),
        joinedload(Venda.funcionario).joinedload(Funcionario.cargo),
    )


class CRUDVenda(CRUDBase[Venda, VendaCreate, VendaCreate]):

    def get(self, db: Session, id: int) -> Optional[Venda]:
        """Venda com cliente, funcionário (e cargo) e itens com o produto."""
        return (
            _com_detalhes(db.query(Venda))
            .options(joinedload(Venda.itens).joinedload(ItemVenda.produto))
            .filter(Venda.id == id)
            .first()
        )

    def get_filtered(
        self,
        db: Session,
        *,
        periodo_inicio: Optional[date] = None,
        periodo_fim: Optional[date] = None,
        cliente: Optional[int] = None,
        funcionario: Optional[int] = None,
        tipo_pagamento: Optional[TipoPagamento] = None,
    ) -> List[Venda]:
        query = _com_detalhes(db.query(Venda))
        # O período só é aplicado com as duas datas
        if periodo_inicio and periodo_fim:
            query = query.filter(*intervalo_datas(periodo_inicio, periodo_fim))
        if cliente is not None:
            query = query.filter(Venda.id_cliente == cliente)
        if funcionario is not None:
            query = query.filter(Venda.id_funcionario == funcionario)
        if tipo_pagamento is not None:
            query = query.filter(Venda.tipo_pagamento == tipo_pagamento)
        return query.order_by(Venda.data_hora.desc(), Venda.id.desc()).all()

    def get_fiado_em_aberto(self, db: Session) -> List[Venda]:
        """Da venda mais antiga para a mais recente."""
        return (
            db.query(Venda)
            .options(joinedload(Venda.cliente))
            .filter(*filtro_fiado_em_aberto())
            .order_by(Venda.data_hora.asc(), Venda.id.asc())
            .all()
        )

    def totais(self, db: Session, *, inicio: Optional[date] = None, fim: Optional[date] = None):
        """(quantidade, valor_total) das vendas finalizadas no período."""
        return (
            db.query(func.count(Venda.id), func.coalesce(func.sum(Venda.valor_total), 0))
            .filter(Venda.status == StatusVenda.FINALIZADA, *intervalo_datas(inicio, fim))
            .one()
        )

    def totais_por_forma(self, db: Session, *, inicio: Optional[date] = None, fim: Optional[date] = None):
        return (
            db.query(Venda.tipo_pagamento, func.count(Venda.id), func.sum(Venda.valor_total))
            .filter(Venda.status == StatusVenda.FINALIZADA, *intervalo_datas(inicio, fim))
            .group_by(Venda.tipo_pagamento)
            .all()
        )

    def totais_fiado_em_aberto(self, db: Session):
        return (
            db.query(func.count(Venda.id), func.coalesce(func.sum(Venda.valor_total), 0))
            .filter(*filtro_fiado_em_aberto())
            .one()
        )

    # --- Escrita dentro da transação da venda (sem commit) ---

    def create_venda(
        self,
        db: Session,
        *,
        id_cliente: int,
        id_funcionario: int,
        tipo_pagamento: TipoPagamento,
        valor_total: Decimal,
    ) -> Venda:
        """Cria o cabeçalho da venda. Não faz commit."""
        db_venda = Venda(
            id_cliente=id_cliente,
            id_funcionario=id_funcionario,
            tipo_pagamento=tipo_pagamento,
            valor_total=valor_total,
            status=StatusVenda.FINALIZADA,
        )
        db.add(db_venda)
        db.flush()  # Garante que db_venda.id esteja disponível para os itens
        return db_venda

    def create_item(
        self,
        db: Session,
        *,
        id_venda: int,
        id_produto: int,
        quantidade: Decimal,
        preco_unitario: Decimal,
    ) -> ItemVenda:
        """Cria um item da venda com o preço congelado. Não faz commit."""
        db_item = ItemVenda(
            id_venda=id_venda,
            id_produto=id_produto,
            quantidade=quantidade,
            preco_unitario=preco_unitario,
        )
        db.add(db_item)
        return db_item

    def quitar(self, db: Session, *, venda_id: int, quando: datetime) -> bool:
        """
        Marca a venda a fiado como paga, só se ainda estiver em aberto.
        Não faz commit.
        """
        rows = (
            db.query(Venda)
            .filter(
                Venda.id == venda_id,
                Venda.tipo_pagamento == TipoPagamento.FIADO,
                Venda.data_pagamento_fiado.is_(None),
            )
            .update({Venda.data_pagamento_fiado: quando}, synchronize_session=False)
        )
        return rows == 1


venda = CRUDVenda(Venda)

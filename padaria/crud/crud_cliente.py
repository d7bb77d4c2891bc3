# padaria/crud/crud_cliente.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from .base import CRUDBase
from .crud_venda import filtro_fiado_em_aberto
from ..models import Cliente, Funcionario, StatusCliente, Venda
from ..schemas import ClienteCreate, ClienteUpdate


def _em_aberto_por_cliente():
    """
    Subquery com o saldo de fiado em aberto de cada cliente.
    Usada pelo crédito de um cliente, pela lista de devedores e pela de
    crédito excedido, para que todos calculem o saldo da mesma forma.
    """
    return (
        select(
            Venda.id_cliente.label("id_cliente"),
            func.sum(Venda.valor_total).label("total_em_aberto"),
            func.count(Venda.id).label("quantidade_vendas_abertas"),
            func.min(Venda.data_hora).label("venda_mais_antiga"),
        )
        .where(*filtro_fiado_em_aberto())
        .group_by(Venda.id_cliente)
        .subquery("em_aberto")
    )


class CRUDCliente(CRUDBase[Cliente, ClienteCreate, ClienteUpdate]):
    order_by = "nome"

    def get_filtered(
        self,
        db: Session,
        *,
        status: Optional[StatusCliente] = None,
        busca: Optional[str] = None,
    ) -> List[Cliente]:
        query = db.query(Cliente)
        if status is not None:
            query = query.filter(Cliente.status == status)
        if busca:
            termo = f"%{busca}%"
            query = query.filter(or_(Cliente.nome.ilike(termo), Cliente.telefone.ilike(termo)))
        return query.order_by(Cliente.nome).all()

    def count_vendas(self, db: Session, *, cliente_id: int) -> int:
        return db.query(Venda).filter(Venda.id_cliente == cliente_id).count()

    def total_em_aberto(self, db: Session, *, cliente_id: int) -> Decimal:
        total = (
            db.query(func.coalesce(func.sum(Venda.valor_total), 0))
            .filter(Venda.id_cliente == cliente_id, *filtro_fiado_em_aberto())
            .scalar()
        )
        return Decimal(str(total or 0))

    def get_historico(self, db: Session, *, cliente_id: int) -> List[Venda]:
        """Vendas do cliente, da mais recente para a mais antiga."""
        return (
            db.query(Venda)
            .options(
                joinedload(Venda.cliente),
                joinedload(Venda.funcionario).joinedload(Funcionario.cargo),
            )
            .filter(Venda.id_cliente == cliente_id)
            .order_by(Venda.data_hora.desc(), Venda.id.desc())
            .all()
        )

    def _devedores_query(self, db: Session):
        em_aberto = _em_aberto_por_cliente()
        credito_disponivel = (Cliente.limite_fiado - em_aberto.c.total_em_aberto).label("credito_disponivel")
        query = (
            db.query(
                Cliente,
                em_aberto.c.total_em_aberto,
                credito_disponivel,
                em_aberto.c.quantidade_vendas_abertas,
                em_aberto.c.venda_mais_antiga,
            )
            .join(em_aberto, em_aberto.c.id_cliente == Cliente.id)
        )
        return query, em_aberto, credito_disponivel

    def get_devedores(self, db: Session):
        """
        Clientes com fiado em aberto, do maior saldo devedor para o menor.
        Cada linha: (cliente, total_em_aberto, credito_disponivel,
        quantidade_vendas_abertas, venda_mais_antiga).
        """
        query, em_aberto, _ = self._devedores_query(db)
        return query.order_by(em_aberto.c.total_em_aberto.desc(), Cliente.nome).all()

    def get_credito_excedido(self, db: Session):
        """Mesmas linhas de get_devedores, só com crédito disponível negativo."""
        query, em_aberto, credito_disponivel = self._devedores_query(db)
        return (
            query.filter(Cliente.limite_fiado - em_aberto.c.total_em_aberto < 0)
            .order_by(credito_disponivel.asc(), Cliente.nome)
            .all()
        )

    def count_credito_excedido(self, db: Session) -> int:
        em_aberto = _em_aberto_por_cliente()
        return (
            db.query(func.count(Cliente.id))
            .select_from(Cliente)
            .join(em_aberto, em_aberto.c.id_cliente == Cliente.id)
            .filter(Cliente.limite_fiado - em_aberto.c.total_em_aberto < 0)
            .scalar()
        )


cliente = CRUDCliente(Cliente)

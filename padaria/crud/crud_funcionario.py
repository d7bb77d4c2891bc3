# padaria/crud/crud_funcionario.py

from datetime import date
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload

from .base import CRUDBase
from .crud_venda import intervalo_datas
from ..models import Cargo, Funcionario, StatusVenda, Venda
from ..schemas import FuncionarioCreate, FuncionarioUpdate


class CRUDFuncionario(CRUDBase[Funcionario, FuncionarioCreate, FuncionarioUpdate]):
    order_by = "nome"

    def get(self, db: Session, id: int) -> Optional[Funcionario]:
        return (
            db.query(Funcionario)
            .options(joinedload(Funcionario.cargo))
            .filter(Funcionario.id == id)
            .first()
        )

    def get_filtered(
        self,
        db: Session,
        *,
        cargo: Optional[int] = None,
        nome: Optional[str] = None,
    ) -> List[Funcionario]:
        query = db.query(Funcionario).options(joinedload(Funcionario.cargo))
        if cargo is not None:
            query = query.filter(Funcionario.id_cargo == cargo)
        if nome:
            query = query.filter(Funcionario.nome.ilike(f"%{nome}%"))
        return query.order_by(Funcionario.nome).all()

    def count_vendas(self, db: Session, *, funcionario_id: int) -> int:
        return db.query(Venda).filter(Venda.id_funcionario == funcionario_id).count()

    def get_vendas(self, db: Session, *, funcionario_id: int) -> List[Venda]:
        return (
            db.query(Venda)
            .options(joinedload(Venda.cliente), joinedload(Venda.funcionario))
            .filter(Venda.id_funcionario == funcionario_id)
            .order_by(Venda.data_hora.desc(), Venda.id.desc())
            .all()
        )

    def get_estatisticas(self, db: Session, *, funcionario_id: int):
        """(total_vendas, valor_total_vendido) das vendas finalizadas."""
        return (
            db.query(
                func.count(Venda.id),
                func.coalesce(func.sum(Venda.valor_total), 0),
            )
            .filter(Venda.id_funcionario == funcionario_id, Venda.status == StatusVenda.FINALIZADA)
            .one()
        )

    def get_ranking(self, db: Session, *, inicio: Optional[date] = None, fim: Optional[date] = None):
        """
        Todos os funcionários com os totais das vendas finalizadas no período,
        do maior valor vendido para o menor. Quem não vendeu aparece com zero.
        """
        condicoes_venda = [
            Venda.id_funcionario == Funcionario.id,
            Venda.status == StatusVenda.FINALIZADA,
        ]
        if inicio and fim:
            condicoes_venda.extend(intervalo_datas(inicio, fim))

        valor_total = func.coalesce(func.sum(Venda.valor_total), 0).label("valor_total_vendido")
        return (
            db.query(
                Funcionario.id,
                Funcionario.nome,
                Cargo.nome_cargo,
                func.count(Venda.id).label("total_vendas"),
                valor_total,
                func.min(Venda.valor_total).label("menor_venda"),
                func.max(Venda.valor_total).label("maior_venda"),
            )
            .select_from(Funcionario)
            .join(Cargo, Funcionario.id_cargo == Cargo.id)
            .outerjoin(Venda, and_(*condicoes_venda))
            .group_by(Funcionario.id, Funcionario.nome, Cargo.nome_cargo)
            .order_by(valor_total.desc(), Funcionario.nome)
            .all()
        )


funcionario = CRUDFuncionario(Funcionario)

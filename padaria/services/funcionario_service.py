# padaria/services/funcionario_service.py

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError
from ..core.numeros import media, to_decimal

logger = logging.getLogger(__name__)


class FuncionarioService:
    def __init__(self, db: Session):
        self.db = db

    def listar(self, *, cargo: Optional[int] = None, nome: Optional[str] = None) -> List[models.Funcionario]:
        return crud.funcionario.get_filtered(self.db, cargo=cargo, nome=nome)

    def listar_cargos(self) -> List[models.Cargo]:
        return crud.cargo.get_multi(self.db)

    def buscar(self, funcionario_id: int) -> models.Funcionario:
        funcionario = crud.funcionario.get(self.db, funcionario_id)
        if not funcionario:
            raise NotFoundError("Funcionário não encontrado")
        return funcionario

    def _verificar_cargo(self, cargo_id: int) -> None:
        if not crud.cargo.exists(self.db, cargo_id):
            raise NotFoundError("Cargo não encontrado")

    def criar(self, dados: schemas.FuncionarioCreate) -> models.Funcionario:
        self._verificar_cargo(dados.id_cargo)
        funcionario = crud.funcionario.create(self.db, obj_in=dados)
        return self.buscar(funcionario.id)

    def atualizar(self, funcionario_id: int, dados: schemas.FuncionarioUpdate) -> models.Funcionario:
        funcionario = self.buscar(funcionario_id)
        if dados.id_cargo is not None:
            self._verificar_cargo(dados.id_cargo)
        crud.funcionario.update(self.db, db_obj=funcionario, obj_in=dados)
        return self.buscar(funcionario_id)

    def deletar(self, funcionario_id: int) -> None:
        funcionario = self.buscar(funcionario_id)
        total = crud.funcionario.count_vendas(self.db, funcionario_id=funcionario_id)
        if total > 0:
            raise BusinessRuleError(
                f"Não é possível deletar. Existem {total} venda(s) registrada(s) por este funcionário."
            )
        crud.funcionario.remove(self.db, db_obj=funcionario)
        logger.info("Funcionário %s removido", funcionario_id)

    def vendas(self, funcionario_id: int) -> List[models.Venda]:
        self.buscar(funcionario_id)
        return crud.funcionario.get_vendas(self.db, funcionario_id=funcionario_id)

    def estatisticas(self, funcionario_id: int) -> schemas.EstatisticasFuncionario:
        funcionario = self.buscar(funcionario_id)
        total_vendas, valor_total = crud.funcionario.get_estatisticas(self.db, funcionario_id=funcionario_id)
        return schemas.EstatisticasFuncionario(
            funcionario=schemas.FuncionarioResumo(
                id=funcionario.id, nome=funcionario.nome, cargo=funcionario.nome_do_cargo
            ),
            estatisticas=schemas.NumerosFuncionario(
                total_vendas=total_vendas,
                valor_total_vendido=to_decimal(valor_total),
                ticket_medio=media(valor_total, total_vendas),
            ),
        )

    def ranking(self, *, data_inicio: Optional[date] = None, data_fim: Optional[date] = None) -> List[schemas.RankingFuncionario]:
        linhas = crud.funcionario.get_ranking(self.db, inicio=data_inicio, fim=data_fim)
        return [
            schemas.RankingFuncionario(
                posicao=posicao,
                id_funcionario=linha.id,
                nome=linha.nome,
                cargo=linha.nome_cargo,
                total_vendas=linha.total_vendas,
                valor_total_vendido=to_decimal(linha.valor_total_vendido),
                ticket_medio=media(linha.valor_total_vendido, linha.total_vendas),
            )
            for posicao, linha in enumerate(linhas, start=1)
        ]

# padaria/routers/funcionarios.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.funcionario_service import FuncionarioService

router = APIRouter(
    prefix="/funcionarios",
    tags=["Funcionários"],
    responses=schemas.ERROS_PADRAO,
)


def get_funcionario_service(db: Session = Depends(get_db)) -> FuncionarioService:
    return FuncionarioService(db=db)


@router.get("/", response_model=schemas.RespostaLista[schemas.Funcionario])
def listar_funcionarios(
    cargo: Optional[int] = None,
    nome: Optional[str] = None,
    service: FuncionarioService = Depends(get_funcionario_service),
):
    funcionarios = service.listar(cargo=cargo, nome=nome)
    return {"total": len(funcionarios), "data": funcionarios}


@router.get("/cargos", response_model=schemas.RespostaLista[schemas.Cargo])
def listar_cargos(service: FuncionarioService = Depends(get_funcionario_service)):
    cargos = service.listar_cargos()
    return {"total": len(cargos), "data": cargos}


@router.get("/ranking", response_model=schemas.RespostaLista[schemas.RankingFuncionario])
def ranking(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: FuncionarioService = Depends(get_funcionario_service),
):
    """Funcionários do maior para o menor valor vendido. O período só vale com as duas datas."""
    linhas = service.ranking(data_inicio=data_inicio, data_fim=data_fim)
    return {"total": len(linhas), "data": linhas}


@router.get("/{funcionario_id}", response_model=schemas.Resposta[schemas.Funcionario])
def buscar_funcionario(funcionario_id: int, service: FuncionarioService = Depends(get_funcionario_service)):
    return {"data": service.buscar(funcionario_id)}


@router.get("/{funcionario_id}/vendas", response_model=schemas.RespostaLista[schemas.VendaResumo])
def vendas_funcionario(funcionario_id: int, service: FuncionarioService = Depends(get_funcionario_service)):
    vendas = service.vendas(funcionario_id)
    return {"total": len(vendas), "data": vendas}


@router.get("/{funcionario_id}/estatisticas", response_model=schemas.Resposta[schemas.EstatisticasFuncionario])
def estatisticas_funcionario(funcionario_id: int, service: FuncionarioService = Depends(get_funcionario_service)):
    return {"data": service.estatisticas(funcionario_id)}


@router.post("/", response_model=schemas.Resposta[schemas.Funcionario], status_code=status.HTTP_201_CREATED)
def criar_funcionario(
    funcionario_in: schemas.FuncionarioCreate,
    service: FuncionarioService = Depends(get_funcionario_service),
):
    return {"message": "Funcionário criado com sucesso", "data": service.criar(funcionario_in)}


@router.put("/{funcionario_id}", response_model=schemas.Resposta[schemas.Funcionario])
def atualizar_funcionario(
    funcionario_id: int,
    funcionario_in: schemas.FuncionarioUpdate,
    service: FuncionarioService = Depends(get_funcionario_service),
):
    funcionario = service.atualizar(funcionario_id, funcionario_in)
    return {"message": "Funcionário atualizado com sucesso", "data": funcionario}


@router.delete("/{funcionario_id}", response_model=schemas.Resposta)
def deletar_funcionario(funcionario_id: int, service: FuncionarioService = Depends(get_funcionario_service)):
    service.deletar(funcionario_id)
    return {"message": "Funcionário deletado com sucesso"}

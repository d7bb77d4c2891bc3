# padaria/routers/clientes.py

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models import StatusCliente
from ..services.cliente_service import ClienteService

router = APIRouter(
    prefix="/clientes",
    tags=["Clientes"],
    responses=schemas.ERROS_PADRAO,
)


def get_cliente_service(db: Session = Depends(get_db)) -> ClienteService:
    return ClienteService(db=db)


@router.get("/", response_model=schemas.RespostaLista[schemas.Cliente])
def listar_clientes(
    status: Optional[StatusCliente] = None,
    busca: Optional[str] = None,
    service: ClienteService = Depends(get_cliente_service),
):
    """`busca` procura no nome e no telefone."""
    clientes = service.listar(status=status, busca=busca)
    return {"total": len(clientes), "data": clientes}


# Rotas fixas antes de /{cliente_id}

@router.get("/devedores", response_model=schemas.RespostaLista[schemas.ClienteDevedor])
def listar_devedores(service: ClienteService = Depends(get_cliente_service)):
    devedores = service.devedores()
    return {"total": len(devedores), "data": devedores}


@router.get("/credito-excedido", response_model=schemas.RespostaLista[schemas.ClienteDevedor])
def listar_credito_excedido(service: ClienteService = Depends(get_cliente_service)):
    clientes = service.credito_excedido()
    return {"total": len(clientes), "data": clientes}


@router.get("/{cliente_id}", response_model=schemas.Resposta[schemas.ClienteComCredito])
def buscar_cliente(cliente_id: int, service: ClienteService = Depends(get_cliente_service)):
    return {"data": service.buscar(cliente_id)}


@router.get("/{cliente_id}/historico", response_model=schemas.RespostaLista[schemas.VendaResumo])
def historico_cliente(cliente_id: int, service: ClienteService = Depends(get_cliente_service)):
    vendas = service.historico(cliente_id)
    return {"total": len(vendas), "data": vendas}


@router.get("/{cliente_id}/credito", response_model=schemas.Resposta[schemas.SituacaoCredito])
def situacao_credito(cliente_id: int, service: ClienteService = Depends(get_cliente_service)):
    return {"data": service.situacao_credito(cliente_id)}


@router.post("/{cliente_id}/validar-fiado", response_model=schemas.Resposta[schemas.ValidacaoFiado])
def validar_fiado(
    cliente_id: int,
    pedido: schemas.ValidarFiadoRequest,
    service: ClienteService = Depends(get_cliente_service),
):
    return {"data": service.validar_fiado(cliente_id, pedido.valor)}


@router.post("/", response_model=schemas.Resposta[schemas.Cliente], status_code=status.HTTP_201_CREATED)
def criar_cliente(cliente_in: schemas.ClienteCreate, service: ClienteService = Depends(get_cliente_service)):
    return {"message": "Cliente criado com sucesso", "data": service.criar(cliente_in)}


@router.put("/{cliente_id}", response_model=schemas.Resposta[schemas.Cliente])
def atualizar_cliente(
    cliente_id: int,
    cliente_in: schemas.ClienteUpdate,
    service: ClienteService = Depends(get_cliente_service),
):
    return {"message": "Cliente atualizado com sucesso", "data": service.atualizar(cliente_id, cliente_in)}


@router.delete("/{cliente_id}", response_model=schemas.Resposta)
def deletar_cliente(cliente_id: int, service: ClienteService = Depends(get_cliente_service)):
    service.deletar(cliente_id)
    return {"message": "Cliente deletado com sucesso"}

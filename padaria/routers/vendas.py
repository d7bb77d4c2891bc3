# padaria/routers/vendas.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models import TipoPagamento
from ..services.venda_service import VendaService

router = APIRouter(
    prefix="/vendas",
    tags=["Vendas"],
    responses=schemas.ERROS_PADRAO,
)


def get_venda_service(db: Session = Depends(get_db)) -> VendaService:
    return VendaService(db=db)


@router.post("/", response_model=schemas.Resposta[schemas.Venda], status_code=status.HTTP_201_CREATED)
def criar_venda(venda_in: schemas.VendaCreate, service: VendaService = Depends(get_venda_service)):
    """
    Registra a venda, os itens e a baixa de estoque numa única transação.
    O preço de cada item vem do cadastro do produto.
    """
    return {"message": "Venda registrada com sucesso", "data": service.criar(venda_in)}


@router.get("/", response_model=schemas.RespostaLista[schemas.VendaResumo])
def listar_vendas(
    periodo_inicio: Optional[date] = None,
    periodo_fim: Optional[date] = None,
    cliente: Optional[int] = None,
    funcionario: Optional[int] = None,
    tipo_pagamento: Optional[TipoPagamento] = None,
    service: VendaService = Depends(get_venda_service),
):
    vendas = service.listar(
        periodo_inicio=periodo_inicio,
        periodo_fim=periodo_fim,
        cliente=cliente,
        funcionario=funcionario,
        tipo_pagamento=tipo_pagamento,
    )
    return {"total": len(vendas), "data": vendas}


@router.get("/fiado/em-aberto", response_model=schemas.RespostaFiadoEmAberto)
def fiado_em_aberto(service: VendaService = Depends(get_venda_service)):
    return service.fiado_em_aberto()


@router.get("/relatorio/resumo", response_model=schemas.Resposta[schemas.ResumoVendas])
def resumo_vendas(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: VendaService = Depends(get_venda_service),
):
    return {"data": service.resumo(data_inicio=data_inicio, data_fim=data_fim)}


@router.get("/{venda_id}", response_model=schemas.Resposta[schemas.Venda])
def buscar_venda(venda_id: int, service: VendaService = Depends(get_venda_service)):
    return {"data": service.buscar(venda_id)}


@router.patch("/{venda_id}/quitar", response_model=schemas.Resposta[schemas.VendaResumo])
def quitar_venda(venda_id: int, service: VendaService = Depends(get_venda_service)):
    return {"message": "Venda quitada com sucesso", "data": service.quitar(venda_id)}

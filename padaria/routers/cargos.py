# padaria/routers/cargos.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.cargo_service import CargoService

router = APIRouter(
    prefix="/cargos",
    tags=["Cargos"],
    responses=schemas.ERROS_PADRAO,
)


def get_cargo_service(db: Session = Depends(get_db)) -> CargoService:
    return CargoService(db=db)


@router.get("/", response_model=schemas.RespostaLista[schemas.Cargo])
def listar_cargos(service: CargoService = Depends(get_cargo_service)):
    cargos = service.listar()
    return {"total": len(cargos), "data": cargos}


@router.get("/{cargo_id}", response_model=schemas.Resposta[schemas.Cargo])
def buscar_cargo(cargo_id: int, service: CargoService = Depends(get_cargo_service)):
    return {"data": service.buscar(cargo_id)}


@router.post("/", response_model=schemas.Resposta[schemas.Cargo], status_code=status.HTTP_201_CREATED)
def criar_cargo(cargo_in: schemas.CargoCreate, service: CargoService = Depends(get_cargo_service)):
    return {"message": "Cargo criado com sucesso", "data": service.criar(cargo_in)}


@router.put("/{cargo_id}", response_model=schemas.Resposta[schemas.Cargo])
def atualizar_cargo(
    cargo_id: int,
    cargo_in: schemas.CargoUpdate,
    service: CargoService = Depends(get_cargo_service),
):
    return {"message": "Cargo atualizado com sucesso", "data": service.atualizar(cargo_id, cargo_in)}


@router.delete("/{cargo_id}", response_model=schemas.Resposta)
def deletar_cargo(cargo_id: int, service: CargoService = Depends(get_cargo_service)):
    service.deletar(cargo_id)
    return {"message": "Cargo deletado com sucesso"}

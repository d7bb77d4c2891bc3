# tests/integration/test_clientes_router.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.utils.pessoas import create_random_cliente, create_random_funcionario
from tests.utils.produto import create_random_produto
from tests.utils.venda import registrar_venda


def test_create_cliente_normalizes_phone_and_cep(client: TestClient):
    payload = {
        "nome": "  Maria da Silva ",
        "telefone": "11987654321",
        "status": "bom",
        "limite_fiado": 150,
        "rua": " Rua das Flores ",
        "cep": "01310100",
    }

    response = client.post("/api/clientes/", json=payload)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["nome"] == "Maria da Silva"
    assert data["telefone"] == "(11) 98765-4321"
    assert data["cep"] == "01310-100"
    assert data["rua"] == "Rua das Flores"
    assert data["limite_fiado"] == 150.0


def test_create_cliente_landline_phone(client: TestClient):
    payload = {"nome": "Padaria Vizinha", "telefone": "(11) 3333-4444", "status": "medio", "limite_fiado": 0}

    response = client.post("/api/clientes/", json=payload)

    assert response.status_code == 201
    assert response.json()["data"]["telefone"] == "(11) 3333-4444"


def test_create_cliente_reports_every_invalid_field(client: TestClient):
    payload = {"nome": "", "telefone": "1234", "status": "otimo", "limite_fiado": -10, "cep": "123"}

    response = client.post("/api/clientes/", json=payload)

    assert response.status_code == 400
    erros = response.json()["errors"]
    assert "telefone: Telefone inválido (deve ter 10 ou 11 dígitos)" in erros
    assert "cep: CEP inválido (deve ter 8 dígitos)" in erros
    assert {erro.split(":")[0] for erro in erros} == {"nome", "telefone", "status", "limite_fiado", "cep"}


def test_list_clientes_filters(client: TestClient, db_session: Session):
    create_random_cliente(db_session, nome="Ana Souza", telefone="(11) 91111-2222")
    create_random_cliente(db_session, nome="Bruno Lima", status="ruim")
    create_random_cliente(db_session, nome="Carla Souza", status="ruim")

    assert client.get("/api/clientes/").json()["total"] == 3

    ruins = client.get("/api/clientes/", params={"status": "ruim"}).json()
    assert [c["nome"] for c in ruins["data"]] == ["Bruno Lima", "Carla Souza"]

    souza = client.get("/api/clientes/", params={"busca": "souza"}).json()
    assert souza["total"] == 2

    por_telefone = client.get("/api/clientes/", params={"busca": "91111"}).json()
    assert [c["nome"] for c in por_telefone["data"]] == ["Ana Souza"]


def test_get_cliente_includes_credit(client: TestClient, db_session: Session):
    cliente = create_random_cliente(db_session, limite_fiado=200)

    response = client.get(f"/api/clientes/{cliente.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_em_aberto"] == 0
    assert data["credito_disponivel"] == 200.0

    response = client.get("/api/clientes/9999")
    assert response.status_code == 404
    assert response.json()["error"] == "Cliente não encontrado"


def test_update_cliente(client: TestClient, db_session: Session):
    cliente = create_random_cliente(db_session, limite_fiado=50)

    response = client.put(f"/api/clientes/{cliente.id}", json={"limite_fiado": 80, "telefone": "21912345678"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["limite_fiado"] == 80.0
    assert data["telefone"] == "(21) 91234-5678"
    assert data["nome"] == cliente.nome


def test_credit_situation(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=1, estoque_atual=1000)
    cliente = create_random_cliente(db_session, limite_fiado=100)
    funcionario = create_random_funcionario(db_session)

    ok = client.get(f"/api/clientes/{cliente.id}/credito").json()["data"]
    assert ok["situacao"] == "OK"
    assert ok["percentual_utilizado"] == 0

    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 85)], tipo_pagamento="fiado")

    atencao = client.get(f"/api/clientes/{cliente.id}/credito").json()["data"]
    assert atencao["situacao"] == "ATENCAO"
    assert atencao["total_em_aberto"] == 85.0
    assert atencao["credito_disponivel"] == 15.0
    assert atencao["percentual_utilizado"] == 85.0
    assert atencao["cliente"]["id"] == cliente.id

    # Reduzir o limite abaixo do que já está em aberto
    client.put(f"/api/clientes/{cliente.id}", json={"limite_fiado": 50})

    excedido = client.get(f"/api/clientes/{cliente.id}/credito").json()["data"]
    assert excedido["situacao"] == "EXCEDIDO"
    assert excedido["credito_disponivel"] == -35.0


def test_validate_credit_sale(client: TestClient, db_session: Session):
    cliente = create_random_cliente(db_session, limite_fiado=100)

    autorizada = client.post(f"/api/clientes/{cliente.id}/validar-fiado", json={"valor": 60}).json()["data"]
    assert autorizada == {
        "pode_vender": True,
        "credito_disponivel": 100.0,
        "valor_venda": 60.0,
        "credito_apos_venda": 40.0,
        "mensagem": "Venda autorizada",
    }

    negada = client.post(f"/api/clientes/{cliente.id}/validar-fiado", json={"valor": 100.01}).json()["data"]
    assert negada["pode_vender"] is False
    assert negada["mensagem"] == "Crédito insuficiente. Disponível: R$ 100.00"

    response = client.post(f"/api/clientes/{cliente.id}/validar-fiado", json={"valor": 0})
    assert response.status_code == 400


def test_debtors_and_exceeded_credit(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=1, estoque_atual=1000)
    funcionario = create_random_funcionario(db_session)
    pequeno = create_random_cliente(db_session, limite_fiado=100, nome="Pequeno")
    grande = create_random_cliente(db_session, limite_fiado=100, nome="Grande")
    create_random_cliente(db_session, limite_fiado=100, nome="Sem Dívida")

    registrar_venda(client, id_cliente=pequeno.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 10)], tipo_pagamento="fiado")
    for quantidade in (30, 40):
        registrar_venda(client, id_cliente=grande.id, id_funcionario=funcionario.id,
                        itens=[(produto.id, quantidade)], tipo_pagamento="fiado")

    devedores = client.get("/api/clientes/devedores").json()
    assert devedores["total"] == 2
    primeiro = devedores["data"][0]
    assert primeiro["nome"] == "Grande"
    assert primeiro["total_em_aberto"] == 70.0
    assert primeiro["credito_disponivel"] == 30.0
    assert primeiro["quantidade_vendas_abertas"] == 2
    assert primeiro["dias_mais_antigo"] == 0

    assert client.get("/api/clientes/credito-excedido").json()["total"] == 0

    client.put(f"/api/clientes/{grande.id}", json={"limite_fiado": 60})

    excedidos = client.get("/api/clientes/credito-excedido").json()
    assert excedidos["total"] == 1
    assert excedidos["data"][0]["id_cliente"] == grande.id
    assert excedidos["data"][0]["credito_disponivel"] == -10.0


def test_cliente_history_newest_first(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=2, estoque_atual=100)
    cliente = create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    primeira = registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                               itens=[(produto.id, 1)]).json()["data"]
    segunda = registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                              itens=[(produto.id, 2)]).json()["data"]

    historico = client.get(f"/api/clientes/{cliente.id}/historico").json()

    assert historico["total"] == 2
    assert [v["id"] for v in historico["data"]] == [segunda["id"], primeira["id"]]
    assert client.get("/api/clientes/9999/historico").status_code == 404


def test_delete_cliente_blocked_by_sales(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session)
    com_compra = create_random_cliente(db_session)
    sem_compra = create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    registrar_venda(client, id_cliente=com_compra.id, id_funcionario=funcionario.id, itens=[(produto.id, 1)])

    response = client.delete(f"/api/clientes/{com_compra.id}")
    assert response.status_code == 400
    assert response.json()["error"] == "Não é possível deletar. Existem 1 venda(s) vinculada(s) a este cliente."

    response = client.delete(f"/api/clientes/{sem_compra.id}")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get(f"/api/clientes/{sem_compra.id}").status_code == 404

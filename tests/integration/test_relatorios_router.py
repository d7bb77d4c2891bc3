# tests/integration/test_relatorios_router.py

from datetime import date, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.utils.pessoas import create_random_cliente, create_random_funcionario
from tests.utils.produto import create_random_produto, create_random_tipo_produto
from tests.utils.venda import registrar_venda


def _hoje():
    return date.today().isoformat()


def test_sales_by_period_requires_dates_and_valid_grouping(client: TestClient):
    response = client.get("/api/relatorios/vendas-periodo", params={"agrupamento": "ano"})

    assert response.status_code == 400
    assert response.json()["errors"] == [
        "Data início e data fim são obrigatórias",
        "Agrupamento inválido. Use: dia, semana ou mes",
    ]


def test_sales_by_period_grouped_by_day(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=10, estoque_atual=100)
    cliente = create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    for quantidade in (1, 3):
        registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id, itens=[(produto.id, quantidade)])

    response = client.get(
        "/api/relatorios/vendas-periodo",
        params={"data_inicio": _hoje(), "data_fim": _hoje(), "agrupamento": "dia"},
    )

    assert response.status_code == 200
    relatorio = response.json()["data"]
    assert relatorio["periodo"]["agrupamento"] == "dia"
    assert relatorio["resumo"] == {"total_vendas": 2, "valor_total": 40.0, "ticket_medio": 20.0}
    assert relatorio["dados"] == [{
        "periodo": _hoje(),
        "total_vendas": 2,
        "valor_total": 40.0,
        "ticket_medio": 20.0,
        "menor_venda": 10.0,
        "maior_venda": 30.0,
    }]


def test_sales_by_period_outside_range_is_empty(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session)
    cliente = create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id, itens=[(produto.id, 1)])
    ontem = (date.today() - timedelta(days=1)).isoformat()

    relatorio = client.get(
        "/api/relatorios/vendas-periodo",
        params={"data_inicio": ontem, "data_fim": ontem, "agrupamento": "mes"},
    ).json()["data"]

    assert relatorio["dados"] == []
    assert relatorio["resumo"]["total_vendas"] == 0


def test_best_selling_products(client: TestClient, db_session: Session):
    tipo = create_random_tipo_produto(db_session, nome_tipo="paes")
    pao = create_random_produto(db_session, nome="Pão Francês", preco_base=1, estoque_atual=100, id_tipo_produto=tipo.id)
    bolo = create_random_produto(db_session, nome="Bolo", preco_base=30, estoque_atual=100, id_tipo_produto=tipo.id)
    cliente = create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id, itens=[(pao.id, 10), (bolo.id, 1)])
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id, itens=[(pao.id, 15)])

    relatorio = client.get("/api/relatorios/produtos-mais-vendidos").json()["data"]

    assert relatorio["periodo"] is None
    assert relatorio["limite"] == 10
    assert relatorio["resumo"]["faturamento_total"] == 55.0
    primeiro, segundo = relatorio["dados"]
    assert (primeiro["posicao"], primeiro["id_produto"]) == (1, bolo.id)
    assert primeiro["percentual_faturamento"] == 54.55
    assert segundo["produto"] == "Pão Francês"
    assert segundo["tipo"] == "paes"
    assert segundo["total_vendido"] == 25.0
    assert segundo["quantidade_vendas"] == 2
    assert segundo["preco_medio"] == 1.0

    limitado = client.get("/api/relatorios/produtos-mais-vendidos", params={"limite": 1}).json()["data"]
    assert len(limitado["dados"]) == 1
    assert client.get("/api/relatorios/produtos-mais-vendidos", params={"limite": 0}).status_code == 400


def test_sales_by_payment_method(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=10, estoque_atual=100)
    cliente = create_random_cliente(db_session, limite_fiado=1000)
    funcionario = create_random_funcionario(db_session)
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 1)], tipo_pagamento="pix")
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 1)], tipo_pagamento="pix")
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 6)], tipo_pagamento="fiado")

    relatorio = client.get("/api/relatorios/vendas-por-forma-pagamento").json()["data"]

    assert relatorio["resumo"] == {"total_vendas": 3, "valor_total": 80.0}
    fiado, pix = relatorio["dados"]
    assert fiado["forma_pagamento"] == "fiado"
    assert fiado["percentual_valor"] == 75.0
    assert fiado["percentual_quantidade"] == 33.33
    assert pix["quantidade_vendas"] == 2
    assert pix["ticket_medio"] == 10.0


def test_employee_performance(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=10, estoque_atual=100)
    cliente = create_random_cliente(db_session)
    vendedor = create_random_funcionario(db_session, nome="Vendedor Um")
    parado = create_random_funcionario(db_session, nome="Parado Dois")
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=vendedor.id, itens=[(produto.id, 2)])
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=vendedor.id, itens=[(produto.id, 4)])

    relatorio = client.get("/api/relatorios/desempenho-funcionarios").json()["data"]

    assert relatorio["resumo"] == {"total_vendas": 2, "valor_total": 60.0, "ticket_medio": 30.0}
    primeiro, segundo = relatorio["dados"]
    assert primeiro["id_funcionario"] == vendedor.id
    assert primeiro["menor_venda"] == 20.0
    assert primeiro["maior_venda"] == 40.0
    assert primeiro["percentual_vendas"] == 100.0
    assert segundo["id_funcionario"] == parado.id
    assert segundo["menor_venda"] is None
    assert segundo["percentual_vendas"] == 0


def test_debtors_report(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=1, estoque_atual=1000)
    funcionario = create_random_funcionario(db_session)
    em_dia = create_random_cliente(db_session, limite_fiado=100)
    excedido = create_random_cliente(db_session, limite_fiado=100)
    registrar_venda(client, id_cliente=em_dia.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 20)], tipo_pagamento="fiado")
    registrar_venda(client, id_cliente=excedido.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 90)], tipo_pagamento="fiado")
    client.put(f"/api/clientes/{excedido.id}", json={"limite_fiado": 50})

    relatorio = client.get("/api/relatorios/clientes-devedores").json()["data"]

    assert relatorio["resumo"] == {"quantidade_clientes": 2, "quantidade_vendas": 2, "total_em_aberto": 110.0}
    assert [(d["id_cliente"], d["situacao"]) for d in relatorio["dados"]] == [
        (excedido.id, "EXCEDIDO"), (em_dia.id, "EM_DIA"),
    ]


def test_low_stock_report_alert_levels(client: TestClient, db_session: Session):
    create_random_produto(db_session, nome="Critico", estoque_atual=5, preco_base=2)
    create_random_produto(db_session, nome="Atencao", estoque_atual=20, preco_base=1)
    create_random_produto(db_session, nome="Baixo", estoque_atual=40, preco_base=1)
    create_random_produto(db_session, nome="Cheio", estoque_atual=80, preco_base=1)

    relatorio = client.get("/api/relatorios/produtos-estoque-baixo").json()["data"]

    assert relatorio["limite"] == 50
    assert relatorio["resumo"] == {"quantidade_produtos": 3, "valor_total_estoque": 70.0}
    assert [(p["produto"], p["alerta"]) for p in relatorio["dados"]] == [
        ("Critico", "CRÍTICO"), ("Atencao", "ATENÇÃO"), ("Baixo", "BAIXO"),
    ]

    apertado = client.get("/api/relatorios/produtos-estoque-baixo", params={"limite": 10}).json()["data"]
    assert [p["produto"] for p in apertado["dados"]] == ["Critico"]


def test_dashboard(client: TestClient, db_session: Session):
    produto = create_random_produto(db_session, preco_base=10, estoque_atual=55)
    create_random_produto(db_session, estoque_atual=100)
    cliente = create_random_cliente(db_session, limite_fiado=100)
    create_random_cliente(db_session)
    funcionario = create_random_funcionario(db_session)
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id, itens=[(produto.id, 2)])
    registrar_venda(client, id_cliente=cliente.id, id_funcionario=funcionario.id,
                    itens=[(produto.id, 3)], tipo_pagamento="fiado")

    dashboard = client.get("/api/relatorios/dashboard").json()["data"]

    assert dashboard["vendas_hoje"] == {"quantidade": 2, "valor_total": 50.0}
    assert dashboard["vendas_mes"]["quantidade"] == 2
    assert dashboard["clientes"] == {"total": 2}
    # 55 - 5 vendidos = 50, que ainda não está abaixo do limite de 50
    assert dashboard["produtos"] == {"total": 2, "estoque_baixo": 0}
    assert dashboard["alertas"] == {
        "clientes_credito_excedido": 0,
        "fiado_em_aberto": {"quantidade": 1, "valor_total": 30.0},
    }
    assert dashboard["vendas_ultimos_7_dias"] == [{"data": _hoje(), "quantidade": 2, "total": 50.0}]


def test_dashboard_empty_database(client: TestClient):
    dashboard = client.get("/api/relatorios/dashboard").json()["data"]

    assert dashboard["vendas_hoje"] == {"quantidade": 0, "valor_total": 0}
    assert dashboard["alertas"]["clientes_credito_excedido"] == 0
    assert dashboard["vendas_ultimos_7_dias"] == []

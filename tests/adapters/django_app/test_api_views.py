"""
Testes das APIs JSON percorrendo URLs, container DI e banco.

Testa:
- Envelope {success, data|error} e mapeamento de erros para HTTP
- Fluxo aluno → curso → matrícula → parcelas → contrato
- Cancelamento idempotente, webhook assinado e rotas com Bearer
- LGPD, monitoramento e health check
- Turmas, requisitos e grade curricular da matrícula
- Feedback dos usuários (autenticação e staff)
"""

import json
import time

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from src.config.container import get_container
from src.core.seguranca.assinatura import assinar_payload

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


@pytest.fixture
def client():
    return Client()


def post_json(client, url, dados=None, **extra):
    return client.post(url, data=json.dumps(dados or {}), content_type="application/json", **extra)


def corpo(response):
    return json.loads(response.content)


@pytest.fixture
def aluno(client):
    response = post_json(client, "/academico/api/alunos/", {
        "nome": "Maria Souza Lima",
        "email": "maria@exemplo.com",
        "cpf": "529.982.247-25",
        "endereco": "Rua A, 1",
    })
    assert response.status_code == 201
    return corpo(response)["data"]


@pytest.fixture
def curso(client):
    response = post_json(client, "/academico/api/cursos/", {
        "nome": "Python Avançado",
        "codigo": "PY-200",
        "carga_horaria": 160,
        "valor": "1000.00",
        "modalidade": "ead",
    })
    assert response.status_code == 201
    return corpo(response)["data"]


@pytest.fixture
def matricula(client, aluno, curso):
    response = post_json(client, "/matriculas/api/", {
        "aluno_id": aluno["id"],
        "curso_id": curso["id"],
        "data_inicio": "2024-03-01",
        "valor_total": "1000.00",
        "forma_pagamento": "boleto",
        "numero_parcelas": 3,
        "data_primeiro_vencimento": "2024-03-10",
    })
    assert response.status_code == 201
    return corpo(response)["data"]


class TestEnvelope:

    def test_validacao_retorna_400(self, client):
        response = post_json(client, "/academico/api/alunos/", {"nome": "Maria"})

        assert response.status_code == 400
        assert corpo(response) == {
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "email é obrigatório",
                "field": "email",
            },
        }

    def test_json_invalido(self, client):
        response = client.post("/academico/api/alunos/", data="{x", content_type="application/json")

        assert response.status_code == 400
        assert corpo(response)["success"] is False

    def test_nao_encontrado_retorna_404(self, client):
        response = client.get("/matriculas/api/nao-existe/")

        assert response.status_code == 404
        assert corpo(response)["error"]["code"] == "NOT_FOUND"

    def test_cpf_duplicado(self, client, aluno):
        response = post_json(client, "/academico/api/alunos/", {
            "nome": "Outra Pessoa",
            "email": "outra@exemplo.com",
            "cpf": "52998224725",
        })

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "ALREADY_EXISTS"


class TestFluxoDeMatricula:

    def test_parcelas_somam_o_total(self, matricula):
        pagamentos = matricula["pagamentos"]

        assert [p["valor"] for p in pagamentos] == ["333.33", "333.33", "333.34"]
        assert [p["data_vencimento"] for p in pagamentos] == ["2024-03-10", "2024-04-10", "2024-05-10"]
        assert matricula["matricula"]["status"] == "pendente"

    def test_evento_publicado_apos_commit(self, matricula):
        publisher = get_container().event_publisher()

        assert publisher.get_events_by_type("MatriculaCriadaEvent")

    def test_listar_pagamentos_da_matricula(self, client, matricula):
        matricula_id = matricula["matricula"]["id"]

        response = client.get(f"/financeiro/api/pagamentos/?matricula_id={matricula_id}")

        assert corpo(response)["meta"] == {"total": 3}

    def test_alterar_status(self, client, matricula):
        matricula_id = matricula["matricula"]["id"]

        response = post_json(client, f"/matriculas/api/{matricula_id}/status/", {
            "status": "aprovado", "observacoes": "Documentos conferidos",
        })

        historico = corpo(response)["data"]["status_history"]
        assert response.status_code == 200
        assert historico[-1]["from"] == "pendente"
        assert historico[-1]["to"] == "aprovado"

    def test_transicao_invalida(self, client, matricula):
        matricula_id = matricula["matricula"]["id"]

        response = post_json(client, f"/matriculas/api/{matricula_id}/status/", {"status": "concluido"})

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "INVALID_STATUS"

    def test_documento(self, client, matricula):
        matricula_id = matricula["matricula"]["id"]
        arquivo = SimpleUploadedFile("rg.pdf", b"%PDF-1.4 teste", content_type="application/pdf")

        enviado = client.post(f"/matriculas/api/{matricula_id}/documentos/", {"tipo": "rg", "arquivo": arquivo})
        documento = corpo(enviado)["data"]
        avaliado = post_json(client, f"/matriculas/api/documentos/{documento['id']}/avaliar/", {
            "status": "aprovado", "avaliado_por": "secretaria",
        })
        invalido = post_json(client, f"/matriculas/api/documentos/{documento['id']}/avaliar/", {
            "status": "talvez",
        })

        assert enviado.status_code == 201
        assert documento["status"] == "pendente"
        assert corpo(avaliado)["data"]["status"] == "aprovado"
        assert invalido.status_code == 400

    def test_contrato_gerado_e_assinado_uma_vez(self, client, matricula):
        matricula_id = matricula["matricula"]["id"]

        gerado = client.post(f"/matriculas/api/{matricula_id}/contrato/")
        contrato_id = corpo(gerado)["data"]["id"]
        assinado = post_json(
            client, f"/matriculas/api/contratos/{contrato_id}/assinar/",
            {"assinado_por": "maria"}, HTTP_USER_AGENT="pytest",
        )
        de_novo = post_json(client, f"/matriculas/api/contratos/{contrato_id}/assinar/", {"assinado_por": "maria"})

        assert gerado.status_code == 201
        assert corpo(assinado)["data"]["status"] == "assinado"
        assert corpo(assinado)["data"]["assinatura_metadata"]["user_agent"] == "pytest"
        assert de_novo.status_code == 422
        assert corpo(de_novo)["error"]["code"] == "ALREADY_SIGNED"


class TestPagamentos:

    def test_cancelamento_idempotente(self, client, matricula):
        pagamento_id = matricula["pagamentos"][0]["id"]
        url = f"/financeiro/api/pagamentos/{pagamento_id}/cancelar/"

        primeiro = post_json(client, url, {"motivo": "Desistência"})
        segundo = post_json(client, url, {"motivo": "Desistência"})

        assert corpo(primeiro)["data"]["status"] == "cancelado"
        assert segundo.status_code == 200
        assert corpo(segundo)["data"]["status"] == "cancelado"
        publisher = get_container().event_publisher()
        assert len(publisher.get_events_by_type("PagamentoCanceladoEvent")) == 1

    def test_registrar_pagamento_duas_vezes(self, client, matricula):
        pagamento_id = matricula["pagamentos"][0]["id"]
        url = f"/financeiro/api/pagamentos/{pagamento_id}/registrar/"

        post_json(client, url, {"data_pagamento": "2024-03-09"})
        response = post_json(client, url, {"data_pagamento": "2024-03-09"})

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "ALREADY_PAID"

    def test_processar_boleto_pendente(self, client, matricula):
        response = post_json(client, "/api/payments/process", {
            "pagamento_id": matricula["pagamentos"][1]["id"],
        })

        assert response.status_code == 200
        assert corpo(response)["data"]["gateway_status"] == "pending"
        assert corpo(response)["data"]["pagamento"]["status"] == "pendente"

    def test_gateway_http_sem_id_responde_502(self, client, settings, matricula):
        from unittest.mock import Mock, patch

        import requests

        from src.config.container import reset_container

        settings.PAYMENT_GATEWAY_MODE = "http"
        settings.PAYMENT_GATEWAY_URL = "https://gateway.teste"
        reset_container()
        sem_id = Mock(status_code=200, text="{}")
        sem_id.json.return_value = {"status": "pending"}
        pagamento_id = matricula["pagamentos"][1]["id"]

        with patch.object(requests.Session, "post", return_value=sem_id):
            response = post_json(client, "/api/payments/process", {"pagamento_id": pagamento_id})

        assert response.status_code == 502
        assert corpo(response)["error"]["code"] == "GATEWAY_ERROR"
        detalhe = client.get(f"/financeiro/api/pagamentos/{pagamento_id}/")
        assert corpo(detalhe)["data"]["status"] == "pendente"

    def test_desconto_por_codigo(self, client):
        post_json(client, "/financeiro/api/descontos/", {
            "nome": "Primeira turma", "codigo": "PRIMEIRA10", "tipo": "percentual", "valor": "10",
        })

        response = post_json(client, "/financeiro/api/descontos/validar/", {
            "codigo": "primeira10", "valor_total": "1000",
        })

        assert corpo(response)["data"]["valor_com_desconto"] == "900.00"

    def test_desconto_com_valor_gigante(self, client):
        response = post_json(client, "/financeiro/api/descontos/", {
            "nome": "Gigante", "codigo": "GIGANTE", "tipo": "valor_fixo", "valor": "1e30",
        })

        assert response.status_code == 400
        assert corpo(response)["error"]["code"] == "VALIDATION_ERROR"
        assert corpo(response)["error"]["field"] == "valor"

    def test_validar_desconto_com_total_de_29_digitos(self, client):
        post_json(client, "/financeiro/api/descontos/", {
            "nome": "Primeira turma", "codigo": "PRIMEIRA10", "tipo": "percentual", "valor": "10",
        })

        response = post_json(client, "/financeiro/api/descontos/validar/", {
            "codigo": "primeira10", "valor_total": "9" * 29,
        })

        assert response.status_code == 400
        assert corpo(response)["error"]["field"] == "valor_total"


class TestWebhook:

    def enviar(self, client, settings, dados, assinatura=None, timestamp=None):
        timestamp = timestamp or str(int(time.time()))
        assinatura = assinatura or assinar_payload(settings.WEBHOOK_SECRET, timestamp, dados)
        return post_json(
            client, "/api/webhooks/payments", {"event": "payment.approved", "data": dados},
            HTTP_X_WEBHOOK_SIGNATURE=assinatura, HTTP_X_WEBHOOK_TIMESTAMP=timestamp,
        )

    def test_assinatura_valida_quita_parcela(self, client, settings, matricula):
        pagamento_id = matricula["pagamentos"][0]["id"]

        response = self.enviar(client, settings, {"payment_id": pagamento_id, "id": "gw_1"})

        assert response.status_code == 200
        assert corpo(response)["data"]["status"] == "pago"

    def test_assinatura_invalida(self, client, settings, matricula):
        pagamento_id = matricula["pagamentos"][0]["id"]

        response = self.enviar(client, settings, {"payment_id": pagamento_id}, assinatura="0" * 64)

        assert response.status_code == 401
        detalhe = client.get(f"/financeiro/api/pagamentos/{pagamento_id}/")
        assert corpo(detalhe)["data"]["status"] == "pendente"

    def test_webhook_antigo_recusado(self, client, settings, matricula):
        pagamento_id = matricula["pagamentos"][0]["id"]
        uma_hora_atras = str(int(time.time()) - 3600)

        response = self.enviar(
            client, settings, {"payment_id": pagamento_id, "id": "gw_1"}, timestamp=uma_hora_atras
        )

        assert response.status_code == 401
        assert corpo(response)["error"]["code"] == "UNAUTHORIZED"


class TestRotasProtegidas:

    def test_cron_sem_token(self, client):
        response = client.get("/api/cron/overdue-payments")

        assert response.status_code == 401
        assert corpo(response)["error"]["code"] == "UNAUTHORIZED"

    def test_cron_marca_vencidos(self, client, settings, matricula):
        response = client.get(
            "/api/cron/overdue-payments", HTTP_AUTHORIZATION=f"Bearer {settings.CRON_SECRET}"
        )

        assert corpo(response)["data"]["processados"] == 3

    def test_relatorio_csv(self, client, settings, matricula):
        response = post_json(
            client, "/api/reports/financial", {"type": "overdue", "format": "csv"},
            HTTP_AUTHORIZATION=f"Bearer {settings.REPORT_SECRET}",
        )

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/csv")
        assert "attachment" in response["Content-Disposition"]

    def test_relatorio_com_token_errado(self, client):
        response = post_json(
            client, "/api/reports/financial", {"type": "overdue"},
            HTTP_AUTHORIZATION="Bearer errado",
        )

        assert response.status_code == 401

    def test_resumo_financeiro(self, client, matricula):
        response = client.get("/api/dashboard/financial-summary?months=3")

        metricas = corpo(response)["data"]["metricas"]
        assert response.status_code == 200
        assert set(metricas) == {
            "total_receitas", "total_pendentes", "total_atrasados", "taxa_inadimplencia",
        }

    def test_resumo_com_meses_absurdos(self, client):
        response = client.get("/api/dashboard/financial-summary?months=100000")

        assert response.status_code == 400
        assert corpo(response)["error"]["field"] == "months"

    def test_lembretes_com_antecedencia_absurda(self, client, settings):
        response = post_json(
            client, "/api/cron/overdue-payments", {"daysBeforeDue": 10**9},
            HTTP_AUTHORIZATION=f"Bearer {settings.CRON_SECRET}",
        )

        assert response.status_code == 400
        assert corpo(response)["error"]["field"] == "daysBeforeDue"


class TestLGPDEMonitoramento:

    def test_consentimento(self, client):
        criado = post_json(client, "/api/lgpd/consentimentos/", {
            "user_id": "aluno-1", "purpose": "marketing", "granted": True,
        })
        consulta = client.get("/api/lgpd/consentimentos/aluno-1/?purpose=marketing")

        assert criado.status_code == 201
        assert corpo(consulta)["data"]["has_consent"] is True

    def test_consentimento_exige_booleano(self, client):
        response = post_json(client, "/api/lgpd/consentimentos/", {
            "user_id": "aluno-1", "purpose": "marketing", "granted": "sim",
        })

        assert response.status_code == 400

    def test_esquecimento(self, client, aluno):
        response = client.post(f"/api/lgpd/esquecimento/{aluno['id']}/")
        detalhe = client.get(f"/academico/api/alunos/{aluno['id']}/")

        assert response.status_code == 200
        assert corpo(detalhe)["data"]["nome"] == "M**** L***"
        assert corpo(detalhe)["data"]["ativo"] is False

    def test_logs_do_titular(self, client):
        post_json(client, "/api/lgpd/consentimentos/", {
            "user_id": "aluno-1", "purpose": "analytics", "granted": False,
        })

        response = client.get("/api/lgpd/logs/aluno-1/")

        assert len(corpo(response)["data"]) == 1

    def test_metricas_exigem_parametros(self, client):
        response = client.get("/api/monitoring/metrics?type=response_time")

        assert response.status_code == 400

    def test_metricas_periodo(self, client):
        get_container().monitoring_service().record_response_time("/api/x", 2500)

        response = client.get(
            "/api/monitoring/metrics?type=response_time&start_date=2000-01-01&end_date=2100-01-01"
        )
        alertas = client.get("/api/monitoring/alerts?severity=critical")

        assert corpo(response)["data"]["stats"]["count"] == 1
        assert corpo(alertas)["meta"] == {"total": 1}

    def test_health(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert corpo(response)["data"]["status"] == "ok"


def aprovar(client, matricula):
    matricula_id = matricula["matricula"]["id"]
    response = post_json(client, f"/matriculas/api/{matricula_id}/status/", {"status": "aprovado"})
    assert response.status_code == 200
    return matricula_id


def abrir_turma(client, curso, codigo="T1", vagas=1):
    response = post_json(client, f"/academico/api/cursos/{curso['id']}/turmas/", {
        "nome": "Turma Noturna", "codigo": codigo, "vagas": vagas, "turno": "noite",
    })
    assert response.status_code == 201
    return corpo(response)["data"]


class TestTurmasEGrade:

    def test_alocar_em_turma(self, client, curso, matricula):
        matricula_id = aprovar(client, matricula)
        turma = abrir_turma(client, curso, vagas=2)

        response = post_json(client, f"/academico/api/matriculas/{matricula_id}/turma/", {
            "turma_id": turma["id"], "observacoes": "Prefere noite",
        })
        turmas = client.get(f"/academico/api/cursos/{curso['id']}/turmas/")

        assert response.status_code == 201
        assert corpo(response)["data"]["turma_id"] == turma["id"]
        assert corpo(turmas)["data"][0]["vagas_disponiveis"] == 1

    def test_alocacao_repetida(self, client, curso, matricula):
        matricula_id = aprovar(client, matricula)
        turma = abrir_turma(client, curso, vagas=3)
        url = f"/academico/api/matriculas/{matricula_id}/turma/"
        post_json(client, url, {"turma_id": turma["id"]})

        response = post_json(client, url, {"turma_id": turma["id"]})

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "ALREADY_ALLOCATED"

    def test_turma_lotada(self, client, curso, matricula):
        matricula_id = aprovar(client, matricula)
        turma = abrir_turma(client, curso, vagas=1)
        get_container().turma_repository().ocupar_vaga(turma["id"])

        response = post_json(client, f"/academico/api/matriculas/{matricula_id}/turma/", {
            "turma_id": turma["id"],
        })

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "NO_VACANCIES"

    def test_matricula_pendente_nao_aloca(self, client, curso, matricula):
        turma = abrir_turma(client, curso)

        response = post_json(
            client,
            f"/academico/api/matriculas/{matricula['matricula']['id']}/turma/",
            {"turma_id": turma["id"]},
        )

        assert response.status_code == 422
        assert corpo(response)["error"]["code"] == "INVALID_STATUS"

    def test_turma_de_outro_curso(self, client, matricula):
        matricula_id = aprovar(client, matricula)
        outro = post_json(client, "/academico/api/cursos/", {
            "nome": "Java Básico", "codigo": "JV-100", "carga_horaria": 80, "valor": "500.00",
        })
        turma = abrir_turma(client, corpo(outro)["data"])

        response = post_json(client, f"/academico/api/matriculas/{matricula_id}/turma/", {
            "turma_id": turma["id"],
        })

        assert corpo(response)["error"]["code"] == "INVALID_CLASS"

    def test_requisitos_sem_documentos(self, client, matricula):
        response = client.get(f"/academico/api/matriculas/{matricula['matricula']['id']}/requisitos/")

        dados = corpo(response)["data"]
        assert response.status_code == 200
        assert dados["approved"] is False
        assert len(dados["reasons"]) == 3

    def test_gerar_e_obter_grade(self, client, curso, matricula):
        matricula_id = aprovar(client, matricula)
        url_disciplinas = f"/academico/api/cursos/{curso['id']}/disciplinas/"
        post_json(client, url_disciplinas, {"codigo": "WEB", "nome": "Web", "semestre": 2, "carga_horaria": 80})
        post_json(client, url_disciplinas, {"codigo": "ALG", "nome": "Algoritmos", "semestre": 1, "carga_horaria": 60})

        gerada = client.post(f"/academico/api/matriculas/{matricula_id}/grade/")
        repetida = client.post(f"/academico/api/matriculas/{matricula_id}/grade/")
        obtida = client.get(f"/academico/api/matriculas/{matricula_id}/grade/")

        assert gerada.status_code == 201
        assert [d["codigo"] for d in corpo(obtida)["data"]["disciplinas"]] == ["ALG", "WEB"]
        assert corpo(obtida)["data"]["carga_horaria_total"] == 140
        assert corpo(repetida)["error"]["code"] == "ALREADY_EXISTS"

    def test_grade_inexistente(self, client, matricula):
        response = client.get(f"/academico/api/matriculas/{matricula['matricula']['id']}/grade/")

        assert response.status_code == 404


@pytest.fixture
def usuario(client):
    user = get_user_model().objects.create_user("aluna", password="senha-de-teste")
    client.force_login(user)
    return user


@pytest.fixture
def staff():
    return get_user_model().objects.create_user("secretaria", password="senha-de-teste", is_staff=True)


def enviar_feedback(client, **dados):
    payload = {
        "type": "bug",
        "message": "O boleto não carrega na tela de pagamento",
        "module": "financeiro",
        "feature": "boleto",
        "satisfactionLevel": 2,
    }
    payload.update(dados)
    return post_json(client, "/api/feedback/", payload)


class TestFeedback:

    def test_envio_exige_login(self, client):
        response = enviar_feedback(client)

        assert response.status_code == 401
        assert corpo(response)["error"]["code"] == "UNAUTHORIZED"

    def test_enviar_feedback(self, client, usuario):
        response = enviar_feedback(client)

        dados = corpo(response)["data"]
        assert response.status_code == 201
        assert dados["user_id"] == str(usuario.id)
        assert dados["priority"] == "high"
        assert "keyword:pagamento" in dados["tags"]

    def test_mensagem_curta(self, client, usuario):
        response = enviar_feedback(client, message="ruim")

        assert response.status_code == 400
        assert corpo(response)["error"]["field"] == "message"

    def test_usuario_comum_ve_apenas_o_proprio(self, client, usuario, staff):
        outro = Client()
        outro.force_login(staff)
        enviar_feedback(outro, type="general")
        enviar_feedback(client)

        response = client.get("/api/feedback/")
        todos = outro.get("/api/feedback/?module=financeiro")

        assert [f["user_id"] for f in corpo(response)["data"]] == [str(usuario.id)]
        assert corpo(todos)["meta"] == {"total": 2}

    def test_estatisticas_somente_staff(self, client, usuario, staff):
        enviar_feedback(client)

        negado = client.get("/api/feedback/stats/?start_date=2000-01-01&end_date=2100-01-01")
        client.force_login(staff)
        permitido = client.get("/api/feedback/stats/?start_date=2000-01-01&end_date=2100-01-01")

        assert negado.status_code == 403
        assert corpo(negado)["error"]["code"] == "FORBIDDEN"
        assert corpo(permitido)["data"]["total"] == 1
        assert corpo(permitido)["data"]["average_satisfaction"] == 2

    def test_atualizar_status(self, client, usuario, staff):
        feedback = corpo(enviar_feedback(client))["data"]
        url = f"/api/feedback/{feedback['id']}/"

        negado = client.patch(url, data=json.dumps({"status": "reviewed"}), content_type="application/json")
        client.force_login(staff)
        atualizado = client.patch(
            url, data=json.dumps({"status": "implemented", "priority": "low"}), content_type="application/json"
        )

        assert negado.status_code == 403
        assert corpo(atualizado)["data"]["status"] == "implemented"
        assert corpo(atualizado)["data"]["priority"] == "low"

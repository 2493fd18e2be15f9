"""
Testes de eventos, notificações e middleware de métricas.

Celery roda em modo eager nos testes: ``.delay`` executa na hora e
os e-mails ficam em ``mail.outbox``.
"""

from datetime import date

import pytest
from django.core import mail
from django.http import HttpResponse
from django.test import RequestFactory

from src.adapters.django_app.academico.repositories import DjangoAlunoRepository, DjangoCursoRepository
from src.adapters.django_app.events import notificacoes
from src.adapters.django_app.events.handlers import (
    dispatch_domain_event,
    enviar_relatorio_financeiro,
)
from src.adapters.django_app.events.notificacoes import Destinatario
from src.adapters.django_app.events.publishers import (
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.matriculas.repositories import DjangoMatriculaRepository
from src.adapters.django_app.shared.middleware import MetricsMiddleware
from src.config.container import get_container
from src.core.academico.entities import AlunoEntity, CursoEntity
from src.core.financeiro.entities import FormaPagamento
from src.core.matriculas.entities import MatriculaEntity
from src.core.matriculas.events import MatriculaCriadaEvent


@pytest.fixture
def maria():
    return Destinatario(id="a1", nome="Maria", email="maria@exemplo.com", telefone="11987654321")


class TestNotificacoes:

    def test_renderiza_email_com_assinatura(self):
        mensagem = notificacoes.renderizar(
            "matricula_rejeitada", {"nome": "Maria", "matricula_id": "m1", "observacoes": "RG ilegível"}
        )

        assert mensagem.assunto == "Notificação de Matrícula - Sua matrícula foi rejeitada"
        assert "Motivo: RG ilegível" in mensagem.conteudo
        assert mensagem.conteudo.endswith(notificacoes.ASSINATURA)

    def test_sms_usa_texto_curto(self):
        mensagem = notificacoes.renderizar(
            "payment_overdue", {"valor": "333.33", "dias_atraso": 5}, canal="sms"
        )

        assert mensagem.conteudo == "Edunexia: Parcela de R$ 333.33 em atraso há 5 dia(s)."

    def test_envia_email(self, maria):
        assert notificacoes.enviar(maria, "matricula_aprovada", {"matricula_id": "m1"})

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["maria@exemplo.com"]
        assert "Olá Maria" in mail.outbox[0].body

    def test_sem_contato_no_canal(self):
        sem_email = Destinatario(id="a2", nome="João")

        assert notificacoes.enviar(sem_email, "matricula_aprovada") is False
        assert notificacoes.enviar(sem_email, "matricula_aprovada", canal="sms") is False
        assert mail.outbox == []

    def test_tipo_ou_canal_desconhecido(self, maria):
        assert notificacoes.enviar(maria, "inexistente") is False
        assert notificacoes.enviar(maria, "matricula_aprovada", canal="pombo") is False

    def test_whatsapp_nao_usa_email(self, maria):
        assert notificacoes.enviar(maria, "matricula_aprovada", canal="whatsapp") is True
        assert mail.outbox == []


@pytest.mark.django_db
class TestDispatcher:

    @pytest.fixture
    def matricula(self):
        aluno = AlunoEntity.criar("Maria Souza", "maria@exemplo.com", "529.982.247-25")
        curso = CursoEntity.criar("Python Avançado", "PY-200", 160, "1000")
        DjangoAlunoRepository().save(aluno)
        DjangoCursoRepository().save(curso)
        matricula = MatriculaEntity.criar(
            aluno.id, curso.id, date(2024, 3, 1), "1000", FormaPagamento.BOLETO, 3
        )
        DjangoMatriculaRepository().save(matricula)
        return matricula

    def test_matricula_criada_notifica_aluno(self, matricula):
        evento = MatriculaCriadaEvent(
            aggregate_id=matricula.id,
            aluno_id=matricula.aluno_id,
            curso_id=matricula.curso_id,
        )

        enviadas = dispatch_domain_event.apply(args=(evento.event_type, evento.to_dict())).get()

        assert enviadas == 1
        assert "Python Avançado" in mail.outbox[0].body

    def test_evento_sem_handler(self):
        assert dispatch_domain_event.apply(args=("EventoQualquer", {"data": {}})).get() == 0

    def test_relatorio_por_email(self):
        nome = enviar_relatorio_financeiro.apply(
            kwargs={"email": "financeiro@exemplo.com", "tipo": "overdue"}
        ).get()

        assert nome.endswith(".csv")
        assert mail.outbox[0].attachments[0][0] == nome


class TestPublishers:

    def test_factory(self):
        assert isinstance(get_event_publisher("memory"), InMemoryEventPublisher)
        assert isinstance(get_event_publisher("logging"), LoggingEventPublisher)

    def test_in_memory_chama_handlers(self):
        publisher = InMemoryEventPublisher()
        recebidos = []
        publisher.register_handler("MatriculaCriadaEvent", recebidos.append)
        evento = MatriculaCriadaEvent(aggregate_id="m1", aluno_id="a1", curso_id="c1")

        publisher.publish(evento)

        assert recebidos == [evento]
        assert publisher.get_events_by_type("MatriculaCriadaEvent") == [evento]


@pytest.mark.django_db
class TestMetricsMiddleware:

    def test_registra_requisicoes_da_api(self):
        middleware = MetricsMiddleware(lambda request: HttpResponse(status=500))

        middleware(RequestFactory().get("/api/payments/process"))

        alertas = get_container().monitoring_service().list_alerts()
        assert [a["type"] for a in alertas] == ["error_rate_threshold_exceeded"]

    def test_ignora_paginas_html(self):
        chamadas = []
        middleware = MetricsMiddleware(lambda request: chamadas.append(request) or HttpResponse())

        middleware(RequestFactory().get("/matriculas/"))

        assert len(chamadas) == 1
        assert get_container().monitoring_service().list_alerts() == []

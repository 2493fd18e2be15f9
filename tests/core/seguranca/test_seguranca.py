"""
Testes de segurança e conformidade.

Coverage:
- Assinatura HMAC de webhooks
- Mascaramento de segredos nos logs de transação
- Anonimização de dados pessoais
- LGPDComplianceService (consentimento e direito ao esquecimento)
"""

from datetime import datetime, timedelta

import pytest

from src.core.academico.entities import AlunoEntity
from src.core.academico.events import AlunoAnonimizadoEvent
from src.core.academico.ports import InMemoryAlunoRepository
from src.core.seguranca.assinatura import (
    assinar_payload,
    json_canonico,
    timestamp_recente,
    verificar_assinatura,
)
from src.core.seguranca.entities import (
    ConsentRecord,
    DataPurpose,
    TransactionStatus,
    TransactionType,
)
from src.core.seguranca.ports import InMemoryTransactionLogRepository
from src.core.seguranca.sanitizacao import (
    REDACTED,
    anonimizar_dados,
    anonimizar_documento,
    anonimizar_email,
    anonimizar_nome,
    anonimizar_telefone,
    redigir_sensiveis,
)
from src.core.seguranca.services import LGPDComplianceService, TransactionLogger
from src.core.shared.exceptions import EntityNotFoundError, ValidationError


@pytest.fixture
def log_repo():
    return InMemoryTransactionLogRepository()


@pytest.fixture
def transaction_logger(log_repo):
    return TransactionLogger(log_repo)


class TestAssinaturaWebhook:

    def test_json_canonico_ordena_chaves(self):
        assert json_canonico({"b": 1, "a": "x"}) == '{"a":"x","b":1}'

    def test_assinatura_valida(self):
        dados = {"payment_id": "p1", "id": "gw_1"}
        assinatura = assinar_payload("segredo", "1700000000", dados)

        assert len(assinatura) == 64
        assert verificar_assinatura("segredo", "1700000000", dados, assinatura, agora=1700000000)

    def test_timestamp_diferente_invalida(self):
        dados = {"payment_id": "p1"}
        assinatura = assinar_payload("segredo", "1700000000", dados)

        assert not verificar_assinatura(
            "segredo", "1700000001", dados, assinatura, agora=1700000000
        )

    def test_sem_segredo_configurado(self):
        assert not verificar_assinatura("", "1", {}, assinar_payload("x", "1", {}))

    def test_reenvio_fora_da_janela_recusado(self):
        """Assinatura correta, mas capturada há mais de 5 minutos."""
        dados = {"payment_id": "p1"}
        assinatura = assinar_payload("segredo", "1700000000", dados)

        assert verificar_assinatura("segredo", "1700000000", dados, assinatura, agora=1700000300)
        assert not verificar_assinatura(
            "segredo", "1700000000", dados, assinatura, agora=1700000301
        )

    @pytest.mark.parametrize("timestamp,agora,esperado", [
        ("1700000000", 1700000000, True),
        ("1700000000", 1699999700, True),
        ("1700000000", 1699999699, False),
        ("1700000000", 1700003600, False),
        ("ontem", 1700000000, False),
        ("", 1700000000, False),
    ])
    def test_timestamp_recente(self, timestamp, agora, esperado):
        assert timestamp_recente(timestamp, agora=agora) is esperado

    def test_timestamp_atual_sem_relogio_explicito(self):
        import time

        assert timestamp_recente(str(int(time.time())))


class TestRedacao:
    """Segredos nunca chegam ao log."""

    def test_chaves_sensiveis_mascaradas(self):
        dados = redigir_sensiveis({
            "valor": "100.00",
            "card_number": "4111111111111111",
            "userPassword": "123",
            "cliente": {"nome": "Maria", "cvv": "123"},
            "itens": [{"api_key": "abc"}, "livre"],
        })

        assert dados["valor"] == "100.00"
        assert dados["card_number"] == REDACTED
        assert dados["userPassword"] == REDACTED
        assert dados["cliente"] == {"nome": "Maria", "cvv": REDACTED}
        assert dados["itens"] == [{"api_key": REDACTED}, "livre"]

    def test_log_transaction_grava_dados_mascarados(self, transaction_logger, log_repo):
        resultado = transaction_logger.log_payment(
            {"id": "p1", "valor": "50.00", "token": "tok_123"},
            TransactionStatus.SUCCESS,
            user_id="aluno-1",
            request_info={"ip": "10.0.0.1", "user_agent": "pytest"},
        )

        assert resultado["success"] is True
        registro = log_repo.registros[0]
        assert registro.transaction_id == "p1"
        assert registro.details["token"] == REDACTED
        assert registro.user_agent == "pytest"

    def test_falha_ao_gravar_nao_propaga(self):
        class RepositorioQuebrado:
            def save(self, entry):
                raise RuntimeError("banco fora")

        resultado = TransactionLogger(RepositorioQuebrado()).log_webhook(
            {"event": "payment.approved"}, TransactionStatus.SUCCESS
        )

        assert resultado == {"success": False, "error": "banco fora"}

    def test_logs_do_usuario(self, transaction_logger):
        transaction_logger.log_data_access("aluno", "read", "aluno-1", resource_id="a1")
        transaction_logger.log_data_access("aluno", "read", "aluno-2")

        resultado = transaction_logger.get_user_transaction_logs("aluno-1")

        assert resultado["success"] is True
        assert len(resultado["data"]) == 1
        assert resultado["data"][0]["details"]["resource_id"] == "a1"


class TestAnonimizacao:

    def test_nome(self):
        assert anonimizar_nome("Maria Souza Lima") == "M**** L***"
        assert anonimizar_nome("Maria") == "M****"

    def test_email(self):
        assert anonimizar_email("maria@exemplo.com") == "m***a@exemplo.com"
        assert anonimizar_email("sem-arroba") == "[EMAIL INVÁLIDO]"

    def test_documento_e_telefone(self):
        assert anonimizar_documento("529.982.247-25") == "529******25"
        assert anonimizar_telefone("(11) 98765-4321") == "11*******21"

    def test_anonimizar_dados(self):
        dados = anonimizar_dados({
            "nome": "Maria Souza",
            "endereco": "Rua A, 1",
            "religiao": "Qualquer",
            "curso": "Python",
            "telefone": "",
        })

        assert dados["nome"] == "M**** S****"
        assert dados["endereco"] == "[ENDEREÇO ANONIMIZADO]"
        assert dados["religiao"] == "[DADO SENSÍVEL ANONIMIZADO]"
        assert dados["curso"] == "Python"
        assert dados["telefone"] == ""


class TestLGPDComplianceService:
    """Consentimento e direito ao esquecimento."""

    @pytest.fixture
    def aluno_repo(self):
        return InMemoryAlunoRepository()

    @pytest.fixture
    def service(self, transaction_logger, aluno_repo, uow):
        return LGPDComplianceService(transaction_logger, aluno_repo=aluno_repo, uow=uow)

    def test_consentimento_mais_recente_prevalece(self, service):
        agora = datetime.now()
        service.register_consent(ConsentRecord(
            "aluno-1", DataPurpose.MARKETING, True, timestamp=agora - timedelta(days=2)
        ))
        service.register_consent(ConsentRecord(
            "aluno-1", DataPurpose.MARKETING, False, timestamp=agora - timedelta(days=1)
        ))

        assert service.get_consent("aluno-1", DataPurpose.MARKETING).granted is False
        assert service.has_consent("aluno-1", DataPurpose.MARKETING) is False

    def test_consentimento_expirado(self, service):
        service.register_consent(ConsentRecord(
            "aluno-1", DataPurpose.COMMUNICATION, True,
            expiration=datetime(2024, 1, 1),
        ))

        assert service.has_consent(
            "aluno-1", DataPurpose.COMMUNICATION, agora=datetime(2023, 12, 1)
        )
        assert not service.has_consent(
            "aluno-1", DataPurpose.COMMUNICATION, agora=datetime(2024, 2, 1)
        )

    def test_consentimento_gravado_como_acesso_a_dados(self, service, log_repo):
        service.register_consent(ConsentRecord("aluno-1", DataPurpose.ANALYTICS, True))

        registro = log_repo.registros[0]
        assert registro.transaction_type == TransactionType.DATA_ACCESS
        assert registro.details["action"] == "consent"
        assert registro.details["purpose"] == "analytics"

    def test_sem_consentimento(self, service):
        assert service.get_consent("aluno-9", DataPurpose.PAYMENT) is None

    def test_consentimento_exige_usuario(self):
        with pytest.raises(ValidationError):
            ConsentRecord("", DataPurpose.PAYMENT, True)

    def test_direito_ao_esquecimento(self, service, aluno_repo, uow, log_repo):
        aluno = AlunoEntity.criar(
            "Maria Souza Lima", "maria@exemplo.com", "529.982.247-25",
            telefone="11987654321", endereco="Rua A, 1",
        )
        aluno_repo.save(aluno)

        resultado = service.implement_right_to_be_forgotten(aluno.id, solicitado_por="dpo")

        anonimizado = aluno_repo.get_by_id(aluno.id)
        assert resultado["success"] is True
        assert anonimizado.nome == "M**** L***"
        assert anonimizado.email == "m***a@exemplo.com"
        assert anonimizado.cpf == "529******25"
        assert anonimizado.ativo is False
        assert isinstance(uow.collect_events()[0], AlunoAnonimizadoEvent)
        assert log_repo.registros[-1].transaction_type == TransactionType.DATA_MODIFICATION

    def test_esquecimento_de_aluno_inexistente(self, service):
        with pytest.raises(EntityNotFoundError):
            service.implement_right_to_be_forgotten("nao-existe")

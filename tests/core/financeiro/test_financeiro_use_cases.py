"""
Testes Unitários para Use Cases do Domínio Financeiro.

Estratégia de Teste:
- Repositórios em memória (fakes) para isolamento
- FakeUnitOfWork (conftest) para transações e eventos
- Gateway e cache fakes

Coverage:
- GerarPagamentosService / RegistrarPagamentoService / CancelarPagamentoService
- ProcessarPagamentoService / ProcessarWebhookService
- VerificarPagamentosVencidosService / VerificarPagamentosProximosService
- Descontos, negociações e split
- ObterResumoFinanceiroService
"""

from datetime import date
from decimal import Decimal

import pytest

from src.core.financeiro.dtos import (
    CancelarPagamentoInputDTO,
    ConfigurarSplitInputDTO,
    CriarDescontoInputDTO,
    CriarNegociacaoInputDTO,
    DecidirNegociacaoInputDTO,
    GerarPagamentosInputDTO,
    ProcessarPagamentoInputDTO,
    RegistrarPagamentoInputDTO,
    ValidarDescontoInputDTO,
    WebhookInputDTO,
)
from src.core.financeiro.entities import (
    DescontoEntity,
    PagamentoEntity,
    PaymentStatus,
    TipoDesconto,
    TipoTransacao,
)
from src.core.financeiro.events import (
    LembretePagamentoEvent,
    NegociacaoAprovadaEvent,
    PagamentoCanceladoEvent,
    PagamentoEstornadoEvent,
    PagamentoRegistradoEvent,
    PagamentoVencidoEvent,
)
from src.core.financeiro.ports import (
    InMemoryDescontoRepository,
    InMemoryNegociacaoRepository,
    InMemoryPagamentoRepository,
    InMemorySplitPagamentoRepository,
    InMemoryTransacaoRepository,
    ResultadoCobranca,
)
from src.core.financeiro.use_cases import (
    AprovarNegociacaoService,
    CancelarPagamentoService,
    ConfigurarSplitService,
    CriarDescontoService,
    CriarNegociacaoService,
    GerarPagamentosService,
    ListarPagamentosService,
    ObterResumoFinanceiroService,
    ProcessarPagamentoService,
    ProcessarWebhookService,
    RegistrarPagamentoService,
    ValidarDescontoService,
    VerificarPagamentosProximosService,
    VerificarPagamentosVencidosService,
)
from src.core.seguranca.assinatura import assinar_payload
from src.core.seguranca.entities import TransactionStatus, TransactionType
from src.core.seguranca.ports import InMemoryTransactionLogRepository
from src.core.seguranca.services import TransactionLogger
from src.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
    ExternalServiceError,
    ValidationError,
)


WEBHOOK_SECRET = "segredo-webhook"


class FakeCache:
    """Cache em dicionário que conta invalidações."""

    def __init__(self):
        self.dados = {}
        self.invalidacoes = []

    def get_or_set(self, key, factory, ttl=None):
        if key not in self.dados:
            self.dados[key] = factory()
        return self.dados[key]

    def delete_by_pattern(self, pattern):
        self.invalidacoes.append(pattern)
        prefixo = pattern.rstrip("*")
        chaves = [k for k in self.dados if k.startswith(prefixo)]
        for chave in chaves:
            del self.dados[chave]
        return len(chaves)


class FakeGateway:
    def __init__(self, status="approved", erro=None):
        self.status = status
        self.erro = erro
        self.chamadas = []

    def criar_cobranca(self, pagamento, forma_pagamento, dados_cliente):
        self.chamadas.append((pagamento.id, forma_pagamento, dados_cliente))
        if self.erro:
            raise self.erro
        return ResultadoCobranca(
            gateway_id=f"gw_{pagamento.id[:8]}",
            status=self.status,
            payment_url="https://pagamentos.exemplo/boleto",
            mensagem="Cartão recusado" if self.status == "failed" else "",
        )


@pytest.fixture
def pagamento_repo():
    return InMemoryPagamentoRepository()


@pytest.fixture
def desconto_repo():
    return InMemoryDescontoRepository()


@pytest.fixture
def transacao_repo():
    return InMemoryTransacaoRepository()


@pytest.fixture
def log_repo():
    return InMemoryTransactionLogRepository()


@pytest.fixture
def transaction_logger(log_repo):
    return TransactionLogger(log_repo)


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def parcelas(pagamento_repo, desconto_repo, uow):
    """Três parcelas de uma matrícula de 1000, a partir de 10/03/2024."""
    service = GerarPagamentosService(pagamento_repo, desconto_repo, uow)
    service.execute(GerarPagamentosInputDTO(
        matricula_id="mat-1",
        valor_total="1000",
        numero_parcelas=3,
        forma_pagamento="boleto",
        data_primeiro_vencimento=date(2024, 3, 10),
    ))
    return pagamento_repo.list_by_matricula("mat-1")


class TestGerarPagamentosService:
    """Testes para GerarPagamentosService."""

    def test_gera_parcelas_com_soma_exata(self, parcelas):
        """Soma das parcelas é exatamente o total."""
        assert [p.valor for p in parcelas] == [
            Decimal("333.33"), Decimal("333.33"), Decimal("333.34"),
        ]
        assert sum(p.valor for p in parcelas) == Decimal("1000.00")
        assert [p.data_vencimento for p in parcelas] == [
            date(2024, 3, 10), date(2024, 4, 10), date(2024, 5, 10),
        ]
        assert all(p.status == PaymentStatus.PENDENTE for p in parcelas)

    def test_nao_gera_duas_vezes(self, parcelas, pagamento_repo, desconto_repo, uow):
        service = GerarPagamentosService(pagamento_repo, desconto_repo, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(GerarPagamentosInputDTO(
                matricula_id="mat-1",
                valor_total="1000",
                numero_parcelas=2,
                forma_pagamento="pix",
                data_primeiro_vencimento=date(2024, 3, 10),
            ))

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS
        assert uow.rolled_back

    def test_aplica_desconto_e_registra_uso(self, pagamento_repo, desconto_repo, uow):
        """Desconto de 10% sobre 1000 gera parcelas somando 900."""
        desconto = DescontoEntity.criar("Dez por cento", "DEZ", TipoDesconto.PERCENTUAL, 10)
        desconto_repo.save(desconto)
        service = GerarPagamentosService(pagamento_repo, desconto_repo, uow)

        saida = service.execute(GerarPagamentosInputDTO(
            matricula_id="mat-2",
            valor_total="1000",
            numero_parcelas=4,
            forma_pagamento="pix",
            data_primeiro_vencimento=date(2024, 3, 10),
            desconto_id=desconto.id,
        ))

        assert sum(p.valor for p in saida) == Decimal("900.00")
        assert all(p.forma_pagamento == "pix" for p in saida)
        assert desconto_repo.get_by_id(desconto.id).usos == 1

    def test_forma_pagamento_invalida(self, pagamento_repo, desconto_repo, uow):
        service = GerarPagamentosService(pagamento_repo, desconto_repo, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(GerarPagamentosInputDTO(
                matricula_id="mat-3",
                valor_total="1000",
                numero_parcelas=2,
                forma_pagamento="cheque",
                data_primeiro_vencimento=date(2024, 3, 10),
            ))

        assert exc_info.value.code == ErrorCode.INVALID_PAYMENT_METHOD
        assert pagamento_repo.list_by_matricula("mat-3") == []


class TestRegistrarPagamentoService:

    def test_registrar_lanca_receita_e_evento(
        self, parcelas, pagamento_repo, transacao_repo, uow, cache
    ):
        service = RegistrarPagamentoService(pagamento_repo, transacao_repo, uow, cache)

        saida = service.execute(RegistrarPagamentoInputDTO(
            pagamento_id=parcelas[0].id, data_pagamento=date(2024, 3, 9)
        ))

        assert saida.status == "pago"
        assert saida.data_pagamento == date(2024, 3, 9)
        assert transacao_repo.list_by_reference(parcelas[0].id)[0].type == TipoTransacao.INCOME
        assert any(isinstance(e, PagamentoRegistradoEvent) for e in uow.collect_events())
        assert cache.invalidacoes

    def test_pagamento_inexistente(self, pagamento_repo, transacao_repo, uow):
        service = RegistrarPagamentoService(pagamento_repo, transacao_repo, uow)

        with pytest.raises(EntityNotFoundError):
            service.execute(RegistrarPagamentoInputDTO(pagamento_id="nao-existe"))


class TestCancelarPagamentoService:
    """Cancelamento de parcela é idempotente."""

    def test_cancelar(self, parcelas, pagamento_repo, uow):
        service = CancelarPagamentoService(pagamento_repo, uow)

        saida = service.execute(CancelarPagamentoInputDTO(parcelas[1].id, "Desistência"))

        assert saida.status == "cancelado"
        assert pagamento_repo.get_by_id(parcelas[1].id).status == PaymentStatus.CANCELADO
        eventos = [e for e in uow.collect_events() if isinstance(e, PagamentoCanceladoEvent)]
        assert len(eventos) == 1

    def test_cancelar_duas_vezes_nao_publica_segundo_evento(self, parcelas, pagamento_repo, uow):
        service = CancelarPagamentoService(pagamento_repo, uow)
        service.execute(CancelarPagamentoInputDTO(parcelas[1].id, "Desistência"))

        saida = service.execute(CancelarPagamentoInputDTO(parcelas[1].id, "De novo"))

        assert saida.status == "cancelado"
        assert saida.observacoes == "Desistência"
        eventos = [e for e in uow.collect_events() if isinstance(e, PagamentoCanceladoEvent)]
        assert len(eventos) == 1

    def test_cancelar_pago_falha(self, parcelas, pagamento_repo, uow):
        parcelas[0].registrar_pagamento()
        service = CancelarPagamentoService(pagamento_repo, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(CancelarPagamentoInputDTO(parcelas[0].id))

        assert exc_info.value.code == ErrorCode.INVALID_STATUS


class TestListarPagamentosService:

    def test_filtra_por_status(self, parcelas, pagamento_repo):
        parcelas[0].registrar_pagamento()

        saida = ListarPagamentosService(pagamento_repo).execute(
            matricula_id="mat-1", status="pendente"
        )

        assert len(saida) == 2

    def test_sem_filtro(self, pagamento_repo):
        with pytest.raises(ValidationError):
            ListarPagamentosService(pagamento_repo).execute()


class TestProcessarPagamentoService:
    """Testes da cobrança via gateway."""

    def _service(self, pagamento_repo, transacao_repo, gateway, transaction_logger, uow):
        return ProcessarPagamentoService(
            pagamento_repo, transacao_repo, gateway, transaction_logger, uow
        )

    def test_aprovacao_imediata_quita_parcela(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, log_repo, uow
    ):
        gateway = FakeGateway("approved")
        service = self._service(pagamento_repo, transacao_repo, gateway, transaction_logger, uow)

        saida = service.execute(
            ProcessarPagamentoInputDTO(parcelas[0].id, "cartao_credito", {"card_number": "4111"}),
            user_id="user-1",
            request_info={"ip": "10.0.0.1", "user_agent": "pytest"},
        )

        assert saida.pagamento.status == "pago"
        assert saida.gateway_status == "approved"
        assert pagamento_repo.get_by_id(parcelas[0].id).gateway_id == saida.gateway_id
        registro = log_repo.registros[-1]
        assert registro.transaction_type == TransactionType.PAYMENT
        assert registro.status == TransactionStatus.SUCCESS
        assert registro.ip_address == "10.0.0.1"

    def test_pendente_no_gateway_mantem_parcela_pendente(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, uow
    ):
        service = self._service(
            pagamento_repo, transacao_repo, FakeGateway("pending"), transaction_logger, uow
        )

        saida = service.execute(ProcessarPagamentoInputDTO(parcelas[0].id, "boleto"))

        assert saida.pagamento.status == "pendente"
        assert saida.payment_url

    def test_recusa_do_gateway(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, log_repo, uow
    ):
        service = self._service(
            pagamento_repo, transacao_repo, FakeGateway("failed"), transaction_logger, uow
        )

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(ProcessarPagamentoInputDTO(parcelas[0].id, "cartao_credito"))

        assert exc_info.value.code == ErrorCode.PAYMENT_FAILED
        assert pagamento_repo.get_by_id(parcelas[0].id).status == PaymentStatus.PENDENTE
        assert log_repo.registros[-1].status == TransactionStatus.FAILURE

    def test_gateway_indisponivel(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, log_repo, uow
    ):
        gateway = FakeGateway(erro=ExternalServiceError("timeout", service="gateway"))
        service = self._service(pagamento_repo, transacao_repo, gateway, transaction_logger, uow)

        with pytest.raises(ExternalServiceError):
            service.execute(ProcessarPagamentoInputDTO(parcelas[0].id, "pix"))

        assert log_repo.registros[-1].status == TransactionStatus.FAILURE

    def test_parcela_ja_paga(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, uow
    ):
        parcelas[0].registrar_pagamento()
        gateway = FakeGateway()
        service = self._service(pagamento_repo, transacao_repo, gateway, transaction_logger, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(ProcessarPagamentoInputDTO(parcelas[0].id, "pix"))

        assert exc_info.value.code == ErrorCode.ALREADY_PAID
        assert gateway.chamadas == []


class TestProcessarWebhookService:
    """Testes dos callbacks do gateway."""

    TIMESTAMP = "1700000000"

    @pytest.fixture
    def service(self, pagamento_repo, transacao_repo, transaction_logger, uow):
        return ProcessarWebhookService(
            pagamento_repo, transacao_repo, transaction_logger, uow, WEBHOOK_SECRET,
            relogio=lambda: float(self.TIMESTAMP),
        )

    def _webhook(self, evento, dados, assinatura=None):
        return WebhookInputDTO(
            evento=evento,
            dados=dados,
            timestamp=self.TIMESTAMP,
            assinatura=assinatura or assinar_payload(WEBHOOK_SECRET, self.TIMESTAMP, dados),
        )

    def test_payment_approved_quita_parcela(self, service, parcelas, pagamento_repo):
        dados = {"payment_id": parcelas[0].id, "id": "gw_123"}

        resultado = service.execute(self._webhook("payment.approved", dados))

        assert resultado == {
            "evento": "payment.approved",
            "pagamento_id": parcelas[0].id,
            "status": "pago",
        }
        assert pagamento_repo.get_by_id(parcelas[0].id).gateway_id == "gw_123"

    def test_reentrega_de_aprovacao_nao_falha(self, service, parcelas):
        dados = {"payment_id": parcelas[0].id}
        service.execute(self._webhook("payment.approved", dados))

        resultado = service.execute(self._webhook("payment.approved", dados))

        assert resultado["status"] == "pago"

    def test_localiza_pelo_id_do_gateway(self, service, parcelas, pagamento_repo):
        parcelas[1].vincular_gateway("gw_999")
        pagamento_repo.save(parcelas[1])

        resultado = service.execute(self._webhook("boleto.expired", {"id": "gw_999"}))

        assert resultado["pagamento_id"] == parcelas[1].id
        assert resultado["status"] == "atrasado"

    def test_chargeback_estorna(self, service, parcelas, transacao_repo, uow):
        parcelas[0].registrar_pagamento()

        resultado = service.execute(
            self._webhook("payment.chargeback", {"payment_id": parcelas[0].id})
        )

        assert resultado["status"] == "reembolsado"
        assert any(isinstance(e, PagamentoEstornadoEvent) for e in uow.collect_events())
        assert transacao_repo.list_by_reference(parcelas[0].id)[-1].type == TipoTransacao.REFUND

    def test_payment_failed_mantem_pendente(self, service, parcelas, pagamento_repo):
        dados = {"payment_id": parcelas[0].id, "failure_reason": "saldo insuficiente"}

        resultado = service.execute(self._webhook("payment.failed", dados))

        assert resultado["status"] == "pendente"
        assert "saldo insuficiente" in pagamento_repo.get_by_id(parcelas[0].id).observacoes

    def test_assinatura_invalida(self, service, parcelas, log_repo, pagamento_repo):
        dados = {"payment_id": parcelas[0].id}

        with pytest.raises(AuthorizationError):
            service.execute(self._webhook("payment.approved", dados, assinatura="0" * 64))

        assert pagamento_repo.get_by_id(parcelas[0].id).status == PaymentStatus.PENDENTE
        assert log_repo.registros[-1].status == TransactionStatus.FAILURE

    def test_webhook_reenviado_depois_da_janela(
        self, parcelas, pagamento_repo, transacao_repo, transaction_logger, uow
    ):
        """Webhook legítimo capturado e reenviado 10 minutos depois."""
        service = ProcessarWebhookService(
            pagamento_repo, transacao_repo, transaction_logger, uow, WEBHOOK_SECRET,
            relogio=lambda: float(self.TIMESTAMP) + 600,
        )
        dados = {"payment_id": parcelas[0].id, "failure_reason": "saldo insuficiente"}

        with pytest.raises(AuthorizationError):
            service.execute(self._webhook("payment.failed", dados))

        assert "saldo insuficiente" not in pagamento_repo.get_by_id(parcelas[0].id).observacoes

    def test_evento_desconhecido(self, service, parcelas):
        with pytest.raises(ValidationError):
            service.execute(self._webhook("payment.unknown", {"payment_id": parcelas[0].id}))

    def test_pagamento_nao_encontrado(self, service):
        with pytest.raises(EntityNotFoundError):
            service.execute(self._webhook("payment.approved", {"payment_id": "x"}))


class TestVerificacoesAgendadas:

    def test_marca_vencidas_como_atrasadas(self, parcelas, pagamento_repo, uow):
        service = VerificarPagamentosVencidosService(pagamento_repo, uow)

        resultado = service.execute(hoje=date(2024, 4, 11))

        assert resultado["processados"] == 2
        assert set(resultado["pagamentos"]) == {parcelas[0].id, parcelas[1].id}
        assert pagamento_repo.get_by_id(parcelas[2].id).status == PaymentStatus.PENDENTE
        eventos = [e for e in uow.collect_events() if isinstance(e, PagamentoVencidoEvent)]
        assert len(eventos) == 2

    def test_segunda_execucao_nao_reprocessa(self, parcelas, pagamento_repo, uow):
        service = VerificarPagamentosVencidosService(pagamento_repo, uow)
        service.execute(hoje=date(2024, 4, 11))

        assert service.execute(hoje=date(2024, 4, 11))["processados"] == 0

    def test_lembretes_para_vencimento_proximo(self, parcelas, pagamento_repo, uow):
        service = VerificarPagamentosProximosService(pagamento_repo, uow)

        resultado = service.execute(dias_antes=3, hoje=date(2024, 4, 7))

        assert resultado["lembretes"] == 1
        assert resultado["pagamentos"] == [parcelas[1].id]
        assert resultado["data_vencimento"] == "2024-04-10"
        assert isinstance(uow.collect_events()[-1], LembretePagamentoEvent)

    @pytest.mark.parametrize("dias", [-1, 366, 10**9])
    def test_dias_fora_do_intervalo(self, pagamento_repo, uow, dias):
        with pytest.raises(ValidationError) as exc_info:
            VerificarPagamentosProximosService(pagamento_repo, uow).execute(dias_antes=dias)

        assert exc_info.value.field == "daysBeforeDue"

    def test_um_ano_de_antecedencia_aceito(self, pagamento_repo, uow):
        resultado = VerificarPagamentosProximosService(pagamento_repo, uow).execute(
            dias_antes=365, hoje=date(2024, 1, 1)
        )

        assert resultado["data_vencimento"] == "2024-12-31"


class TestDescontos:

    def test_criar_e_validar_cupom(self, desconto_repo, uow):
        CriarDescontoService(desconto_repo, uow).execute(CriarDescontoInputDTO(
            nome="Volta às aulas",
            codigo="volta10",
            tipo="percentual",
            valor="10",
        ))

        aplicado = ValidarDescontoService(desconto_repo).execute(
            ValidarDescontoInputDTO(codigo="VOLTA10", valor_total="1000")
        )

        assert aplicado.valor_com_desconto == Decimal("900.00")
        assert aplicado.economia == Decimal("100.00")

    def test_codigo_duplicado(self, desconto_repo, uow):
        dto = CriarDescontoInputDTO(nome="Cupom", codigo="ABC", tipo="valor_fixo", valor="50")
        service = CriarDescontoService(desconto_repo, uow)
        service.execute(dto)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(dto)

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_cupom_inexistente(self, desconto_repo):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ValidarDescontoService(desconto_repo).execute(
                ValidarDescontoInputDTO(codigo="NADA", valor_total="100")
            )

        assert exc_info.value.code == ErrorCode.INVALID_DISCOUNT


class TestNegociacoes:
    """Aprovação cancela as parcelas originais e gera novas."""

    @pytest.fixture
    def negociacao_repo(self):
        return InMemoryNegociacaoRepository()

    def test_fluxo_completo(self, parcelas, pagamento_repo, negociacao_repo, uow):
        abertas = [parcelas[1].id, parcelas[2].id]
        negociacao = CriarNegociacaoService(negociacao_repo, pagamento_repo, uow).execute(
            CriarNegociacaoInputDTO(
                aluno_id="aluno-1",
                pagamento_ids=tuple(abertas),
                valor_negociado="600",
                numero_parcelas=3,
                data_primeira_parcela=date(2024, 6, 15),
            )
        )
        assert negociacao.status == "pendente"
        assert negociacao.valor_original == Decimal("666.67")

        resultado = AprovarNegociacaoService(negociacao_repo, pagamento_repo, uow).execute(
            DecidirNegociacaoInputDTO(negociacao.id, responsavel_id="gestor-1")
        )

        assert resultado["negociacao"]["status"] == "concluida"
        novas = resultado["pagamentos"]
        assert [p["numero_parcela"] for p in novas] == [4, 5, 6]
        assert sum(Decimal(p["valor"]) for p in novas) == Decimal("600.00")
        for pagamento_id in abertas:
            original = pagamento_repo.get_by_id(pagamento_id)
            assert original.status == PaymentStatus.CANCELADO
            assert original.observacoes == "Renegociado"
        assert any(isinstance(e, NegociacaoAprovadaEvent) for e in uow.collect_events())

    def test_parcelas_de_matriculas_diferentes(self, pagamento_repo, negociacao_repo, uow):
        a = PagamentoEntity.criar("mat-a", 1, 100, date(2024, 3, 1))
        b = PagamentoEntity.criar("mat-b", 1, 100, date(2024, 3, 1))
        pagamento_repo.save_many([a, b])

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            CriarNegociacaoService(negociacao_repo, pagamento_repo, uow).execute(
                CriarNegociacaoInputDTO("aluno-1", (a.id, b.id), "150", 1, date(2024, 6, 1))
            )

        assert exc_info.value.code == ErrorCode.INVALID_NEGOTIATION


class TestSplit:

    def test_configurar_split_substitui_anterior(self, parcelas, pagamento_repo, uow):
        split_repo = InMemorySplitPagamentoRepository()
        service = ConfigurarSplitService(split_repo, pagamento_repo, uow)
        service.execute(ConfigurarSplitInputDTO(parcelas[0].id, (
            {"recipient_id": "polo-1", "recipient_type": "polo", "percentage": 50},
        )))

        saida = service.execute(ConfigurarSplitInputDTO(parcelas[0].id, (
            {"recipient_id": "polo-2", "recipient_type": "polo", "percentage": 30},
        )))

        assert len(split_repo.list_by_payment(parcelas[0].id)) == 1
        assert saida[0].amount == Decimal("99.99")


class TestObterResumoFinanceiroService:
    """Dashboard: receitas, pendentes e atrasados por mês."""

    @pytest.fixture
    def carteira(self, pagamento_repo):
        pago = PagamentoEntity.criar("mat-1", 1, "300", date(2024, 5, 10))
        pago.registrar_pagamento(date(2024, 5, 10))
        a_vencer = PagamentoEntity.criar("mat-1", 2, "200", date(2024, 6, 20))
        vencido = PagamentoEntity.criar("mat-1", 3, "100", date(2024, 6, 1))
        pagamento_repo.save_many([pago, a_vencer, vencido])
        return pagamento_repo

    def test_metricas(self, carteira):
        resumo = ObterResumoFinanceiroService(carteira).execute(hoje=date(2024, 6, 15), meses=3)

        assert [m["mes"] for m in resumo["mensal"]] == ["04/2024", "05/2024", "06/2024"]
        assert resumo["mensal"][1]["receitas"] == "300.00"
        junho = resumo["mensal"][2]
        assert junho["pendentes"] == "200.00"
        assert junho["atrasados"] == "100.00"
        assert resumo["metricas"]["taxa_inadimplencia"] == "16.67"
        assert len(resumo["pagamentos_recentes"]) == 1

    def test_resultado_em_cache(self, carteira, cache):
        service = ObterResumoFinanceiroService(carteira, cache=cache, ttl=300)
        primeiro = service.execute(hoje=date(2024, 6, 15), meses=3)

        carteira.save(PagamentoEntity.criar("mat-9", 1, "999", date(2024, 6, 25)))
        segundo = service.execute(hoje=date(2024, 6, 15), meses=3)

        assert segundo == primeiro

    @pytest.mark.parametrize("meses", [0, 121, 100000])
    def test_meses_fora_do_intervalo(self, pagamento_repo, meses):
        with pytest.raises(ValidationError) as exc_info:
            ObterResumoFinanceiroService(pagamento_repo).execute(meses=meses)

        assert exc_info.value.field == "months"

"""
Use Cases (Application Services) do Domínio Financeiro.

Use Cases implementados:
- GerarPagamentosService: gera parcelas de uma matrícula
- RegistrarPagamentoService / CancelarPagamentoService
- ObterPagamentoService / ListarPagamentosService
- ProcessarPagamentoService: cobrança via gateway
- ProcessarWebhookService: callbacks do gateway
- VerificarPagamentosVencidosService / VerificarPagamentosProximosService
- CriarDescontoService / ListarDescontosService / ValidarDescontoService
- CriarNegociacaoService / AprovarNegociacaoService /
  RejeitarNegociacaoService / CancelarNegociacaoService
- ConfigurarSplitService / ObterSplitService
- ObterResumoFinanceiroService: dados do dashboard

Todos os valores monetários são Decimal; a soma das parcelas geradas
é sempre igual ao total (com desconto, quando houver).
"""

import logging
import time
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from src.core.seguranca.assinatura import TOLERANCIA_SEGUNDOS, verificar_assinatura
from src.core.seguranca.entities import TransactionStatus
from src.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
    ExternalServiceError,
    ValidationError,
)
from src.core.shared.interfaces import UnitOfWork

from .calculos import (
    adicionar_meses,
    calcular_split,
    dividir_em_parcelas,
    gerar_vencimentos,
    para_decimal,
)
from .dtos import (
    CancelarPagamentoInputDTO,
    ConfigurarSplitInputDTO,
    CriarDescontoInputDTO,
    CriarNegociacaoInputDTO,
    DecidirNegociacaoInputDTO,
    DescontoAplicadoDTO,
    DescontoOutputDTO,
    GerarPagamentosInputDTO,
    NegociacaoOutputDTO,
    PagamentoOutputDTO,
    ProcessamentoOutputDTO,
    ProcessarPagamentoInputDTO,
    RegistrarPagamentoInputDTO,
    SplitOutputDTO,
    ValidarDescontoInputDTO,
    WebhookInputDTO,
)
from .entities import (
    DescontoEntity,
    FormaPagamento,
    NegociacaoEntity,
    PagamentoEntity,
    PaymentStatus,
    SplitPagamentoEntity,
    TipoDesconto,
    TipoTransacao,
    TransacaoFinanceiraEntity,
)
from .events import (
    LembretePagamentoEvent,
    NegociacaoAprovadaEvent,
    NegociacaoCriadaEvent,
    PagamentoCanceladoEvent,
    PagamentoEstornadoEvent,
    PagamentoFalhouEvent,
    PagamentoRegistradoEvent,
    PagamentoVencidoEvent,
)
from .ports import (
    Cache,
    DescontoRepository,
    NegociacaoRepository,
    PagamentoRepository,
    PaymentGateway,
    SplitPagamentoRepository,
    TransacaoRepository,
)


logger = logging.getLogger(__name__)

CACHE_RESUMO_PREFIXO = "financeiro:resumo"
MAX_MESES_RESUMO = 120
MAX_DIAS_LEMBRETE = 365


# =============================================================================
# Helpers
# =============================================================================

def obter_pagamento_ou_erro(repo: PagamentoRepository, pagamento_id: str) -> PagamentoEntity:
    pagamento = repo.get_by_id(pagamento_id)
    if not pagamento:
        raise EntityNotFoundError(
            "Pagamento não encontrado",
            entity_type="Pagamento",
            entity_id=pagamento_id,
        )
    return pagamento


def gerar_parcelas(
    matricula_id: str,
    valor_total,
    numero_parcelas: int,
    forma_pagamento: FormaPagamento,
    primeiro_vencimento: date,
    negociacao_id: Optional[str] = None,
) -> List[PagamentoEntity]:
    """
    Cria as entidades de parcela para um total.

    A soma dos valores é exatamente ``valor_total``; vencimentos mensais
    a partir de ``primeiro_vencimento``.
    """
    valores = dividir_em_parcelas(valor_total, numero_parcelas)
    vencimentos = gerar_vencimentos(primeiro_vencimento, numero_parcelas)
    return [
        PagamentoEntity.criar(
            matricula_id=matricula_id,
            numero_parcela=numero,
            valor=valor,
            data_vencimento=vencimento,
            forma_pagamento=forma_pagamento,
            negociacao_id=negociacao_id,
        )
        for numero, (valor, vencimento) in enumerate(zip(valores, vencimentos), start=1)
    ]


def resolver_desconto(
    desconto_repo: DescontoRepository,
    desconto_id: Optional[str],
    valor_total,
    curso_id: Optional[str] = None,
    hoje: Optional[date] = None,
) -> Tuple[Decimal, Optional[DescontoEntity]]:
    """
    Valida e aplica desconto opcional.

    Returns:
        Tupla (valor final, desconto aplicado ou None)
    """
    valor_total = para_decimal(valor_total, "valor_total")
    if not desconto_id:
        return valor_total, None

    desconto = desconto_repo.get_by_id(desconto_id)
    if not desconto:
        raise EntityNotFoundError(
            "Desconto não encontrado",
            entity_type="Desconto",
            entity_id=desconto_id,
        )
    desconto.validar_uso(curso_id=curso_id, hoje=hoje)
    return desconto.aplicar(valor_total), desconto


def consumir_desconto(desconto_repo: DescontoRepository, desconto: DescontoEntity) -> None:
    """
    Registra um uso do desconto de forma atômica no repositório.

    Chamado dentro do Unit of Work: se o limite foi atingido por outra
    matrícula desde ``validar_uso``, a operação inteira é desfeita.

    Raises:
        BusinessRuleViolationError: INVALID_DISCOUNT se o limite de usos
            já foi atingido
    """
    if not desconto_repo.registrar_uso(desconto.id):
        raise BusinessRuleViolationError(
            "Limite de usos do desconto atingido",
            rule="desconto_invalido",
            code=ErrorCode.INVALID_DISCOUNT,
        )


def invalidar_resumo(cache: Optional[Cache]) -> None:
    if cache is None:
        return
    try:
        cache.delete_by_pattern(f"{CACHE_RESUMO_PREFIXO}:*")
    except Exception as e:
        logger.warning(f"Falha ao invalidar cache do resumo financeiro: {e}")


def _evento_pagamento(classe, pagamento: PagamentoEntity, **extra):
    return classe(
        aggregate_id=pagamento.id,
        matricula_id=pagamento.matricula_id,
        numero_parcela=pagamento.numero_parcela,
        valor=pagamento.valor,
        **extra,
    )


# =============================================================================
# Pagamentos
# =============================================================================

class GerarPagamentosService:
    """
    Use Case: Gerar parcelas de uma matrícula.

    Fluxo:
    1. Garantir que a matrícula ainda não tem parcelas
    2. Validar e aplicar desconto opcional
    3. Dividir o total em parcelas mensais
    4. Persistir parcelas

    Example:
        service = GerarPagamentosService(pagamento_repo, desconto_repo, uow)
        parcelas = service.execute(GerarPagamentosInputDTO(
            matricula_id="m1",
            valor_total="1000",
            numero_parcelas=3,
            forma_pagamento="boleto",
            data_primeiro_vencimento=date(2024, 3, 10),
        ))
        sum(p.valor for p in parcelas)  # Decimal("1000.00")
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        desconto_repo: DescontoRepository,
        uow: UnitOfWork,
        matricula_repo=None,
    ):
        self.pagamento_repo = pagamento_repo
        self.desconto_repo = desconto_repo
        self.uow = uow
        self.matricula_repo = matricula_repo

    def execute(self, input_dto: GerarPagamentosInputDTO) -> List[PagamentoOutputDTO]:
        with self.uow:
            if self.pagamento_repo.list_by_matricula(input_dto.matricula_id):
                raise BusinessRuleViolationError(
                    "Esta matrícula já possui parcelas geradas",
                    rule="parcelas_ja_geradas",
                    code=ErrorCode.ALREADY_EXISTS,
                )

            valor_final, desconto = resolver_desconto(
                self.desconto_repo,
                input_dto.desconto_id,
                input_dto.valor_total,
                curso_id=input_dto.curso_id,
            )
            parcelas = gerar_parcelas(
                matricula_id=input_dto.matricula_id,
                valor_total=valor_final,
                numero_parcelas=input_dto.numero_parcelas,
                forma_pagamento=FormaPagamento.from_string(input_dto.forma_pagamento),
                primeiro_vencimento=input_dto.data_primeiro_vencimento,
            )
            self.pagamento_repo.save_many(parcelas)

            self._atualizar_matricula(input_dto, valor_final, desconto)

            if desconto:
                consumir_desconto(self.desconto_repo, desconto)

        logger.info(
            f"{len(parcelas)} parcelas geradas para matrícula {input_dto.matricula_id}"
        )
        return [PagamentoOutputDTO.from_entity(p) for p in parcelas]

    def _atualizar_matricula(self, input_dto, valor_final, desconto) -> None:
        """Grava as condições de pagamento na matrícula, quando conhecida."""
        if self.matricula_repo is None:
            return
        matricula = self.matricula_repo.get_by_id(input_dto.matricula_id)
        if not matricula:
            return
        matricula.definir_condicoes_pagamento(
            forma_pagamento=FormaPagamento.from_string(input_dto.forma_pagamento),
            numero_parcelas=input_dto.numero_parcelas,
            valor_total=input_dto.valor_total,
            valor_com_desconto=valor_final,
            desconto_id=desconto.id if desconto else None,
        )
        self.matricula_repo.save(matricula)


class RegistrarPagamentoService:
    """
    Use Case: Registrar pagamento manual de uma parcela.

    Lança receita no fluxo de caixa e dispara PagamentoRegistradoEvent.
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        transacao_repo: TransacaoRepository,
        uow: UnitOfWork,
        cache: Optional[Cache] = None,
    ):
        self.pagamento_repo = pagamento_repo
        self.transacao_repo = transacao_repo
        self.uow = uow
        self.cache = cache

    def execute(self, input_dto: RegistrarPagamentoInputDTO) -> PagamentoOutputDTO:
        with self.uow:
            pagamento = obter_pagamento_ou_erro(self.pagamento_repo, input_dto.pagamento_id)
            pagamento.registrar_pagamento(
                data_pagamento=input_dto.data_pagamento,
                comprovante_url=input_dto.comprovante_url,
                observacoes=input_dto.observacoes,
            )
            self.pagamento_repo.save(pagamento)
            self.transacao_repo.save(TransacaoFinanceiraEntity.de_pagamento(pagamento))
            self.uow.publish_event(
                _evento_pagamento(
                    PagamentoRegistradoEvent,
                    pagamento,
                    data_pagamento=pagamento.data_pagamento,
                    forma_pagamento=pagamento.forma_pagamento.value,
                )
            )

        invalidar_resumo(self.cache)
        return PagamentoOutputDTO.from_entity(pagamento)


class CancelarPagamentoService:
    """
    Use Case: Cancelar parcela.

    Idempotente: cancelar parcela já cancelada devolve a parcela
    inalterada, sem evento.
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        uow: UnitOfWork,
        cache: Optional[Cache] = None,
    ):
        self.pagamento_repo = pagamento_repo
        self.uow = uow
        self.cache = cache

    def execute(self, input_dto: CancelarPagamentoInputDTO) -> PagamentoOutputDTO:
        with self.uow:
            pagamento = obter_pagamento_ou_erro(self.pagamento_repo, input_dto.pagamento_id)
            if pagamento.cancelar(input_dto.motivo):
                self.pagamento_repo.save(pagamento)
                self.uow.publish_event(
                    _evento_pagamento(
                        PagamentoCanceladoEvent, pagamento, motivo=input_dto.motivo
                    )
                )

        invalidar_resumo(self.cache)
        return PagamentoOutputDTO.from_entity(pagamento)


class ObterPagamentoService:
    def __init__(self, pagamento_repo: PagamentoRepository):
        self.pagamento_repo = pagamento_repo

    def execute(self, pagamento_id: str) -> PagamentoOutputDTO:
        return PagamentoOutputDTO.from_entity(
            obter_pagamento_ou_erro(self.pagamento_repo, pagamento_id)
        )


class ListarPagamentosService:
    """
    Lista parcelas de uma matrícula e/ou por status.

    Raises:
        ValidationError: Nenhum filtro informado
    """

    def __init__(self, pagamento_repo: PagamentoRepository):
        self.pagamento_repo = pagamento_repo

    def execute(
        self, matricula_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[PagamentoOutputDTO]:
        status_enum = PaymentStatus.from_string(status) if status else None
        if matricula_id:
            pagamentos = self.pagamento_repo.list_by_matricula(matricula_id)
            if status_enum:
                pagamentos = [p for p in pagamentos if p.status == status_enum]
        elif status_enum:
            pagamentos = self.pagamento_repo.list_by_status(status_enum)
        else:
            raise ValidationError("Informe matricula_id ou status", field="matricula_id")
        return [PagamentoOutputDTO.from_entity(p) for p in pagamentos]


class ProcessarPagamentoService:
    """
    Use Case: Processar pagamento no gateway.

    Fluxo:
    1. Validar parcela (existe, está em aberto)
    2. Criar cobrança no gateway (fora da transação)
    3. Aprovação imediata quita a parcela; falha mantém pendente
    4. Registrar log de transação

    Raises:
        BusinessRuleViolationError: ALREADY_PAID, INVALID_STATUS,
            INVALID_PAYMENT_METHOD ou PAYMENT_FAILED
        ExternalServiceError: Gateway indisponível
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        transacao_repo: TransacaoRepository,
        gateway: PaymentGateway,
        transaction_logger,
        uow: UnitOfWork,
        cache: Optional[Cache] = None,
    ):
        self.pagamento_repo = pagamento_repo
        self.transacao_repo = transacao_repo
        self.gateway = gateway
        self.transaction_logger = transaction_logger
        self.uow = uow
        self.cache = cache

    def execute(
        self,
        input_dto: ProcessarPagamentoInputDTO,
        user_id: Optional[str] = None,
        request_info: Optional[Dict[str, str]] = None,
    ) -> ProcessamentoOutputDTO:
        pagamento = obter_pagamento_ou_erro(self.pagamento_repo, input_dto.pagamento_id)

        if pagamento.status == PaymentStatus.PAGO:
            raise BusinessRuleViolationError(
                "Este pagamento já foi registrado",
                rule="pagamento_ja_pago",
                code=ErrorCode.ALREADY_PAID,
            )
        if not pagamento.em_aberto:
            raise BusinessRuleViolationError(
                f"Pagamento com status {pagamento.status.value} não pode ser processado",
                rule="pagamento_nao_processavel",
                code=ErrorCode.INVALID_STATUS,
            )

        forma = (
            FormaPagamento.from_string(input_dto.forma_pagamento)
            if input_dto.forma_pagamento
            else pagamento.forma_pagamento
        )
        detalhes_log = {
            "id": pagamento.id,
            "matricula_id": pagamento.matricula_id,
            "valor": str(pagamento.valor),
            "forma_pagamento": forma.value,
        }

        try:
            resultado = self.gateway.criar_cobranca(
                pagamento, forma.value, dict(input_dto.dados_cliente)
            )
        except ExternalServiceError as e:
            self.transaction_logger.log_payment(
                {**detalhes_log, "erro": e.message},
                TransactionStatus.FAILURE,
                user_id=user_id,
                request_info=request_info,
            )
            raise

        with self.uow:
            pagamento.forma_pagamento = forma
            pagamento.vincular_gateway(
                resultado.gateway_id,
                {"status": resultado.status, "payment_url": resultado.payment_url},
            )
            if resultado.aprovado:
                pagamento.registrar_pagamento(date.today())
                self.transacao_repo.save(TransacaoFinanceiraEntity.de_pagamento(pagamento))
                self.uow.publish_event(
                    _evento_pagamento(
                        PagamentoRegistradoEvent,
                        pagamento,
                        data_pagamento=pagamento.data_pagamento,
                        forma_pagamento=forma.value,
                    )
                )
            elif resultado.falhou:
                pagamento.registrar_falha(resultado.mensagem or "Motivo desconhecido")
                self.uow.publish_event(
                    _evento_pagamento(
                        PagamentoFalhouEvent, pagamento, motivo=resultado.mensagem
                    )
                )
            self.pagamento_repo.save(pagamento)

        status_log = {
            "approved": TransactionStatus.SUCCESS,
            "failed": TransactionStatus.FAILURE,
        }.get(resultado.status, TransactionStatus.PENDING)
        self.transaction_logger.log_payment(
            {**detalhes_log, "gateway_id": resultado.gateway_id, "gateway_status": resultado.status},
            status_log,
            user_id=user_id,
            request_info=request_info,
        )
        invalidar_resumo(self.cache)

        if resultado.falhou:
            raise BusinessRuleViolationError(
                resultado.mensagem or "Falha no processamento do pagamento",
                rule="gateway_recusou",
                code=ErrorCode.PAYMENT_FAILED,
            )

        return ProcessamentoOutputDTO(
            pagamento=PagamentoOutputDTO.from_entity(pagamento),
            gateway_id=resultado.gateway_id,
            gateway_status=resultado.status,
            payment_url=resultado.payment_url,
        )


class ProcessarWebhookService:
    """
    Use Case: Processar webhook do gateway de pagamentos.

    Eventos suportados:
        payment.created   → vincula o ID do gateway à parcela
        payment.approved  → quita a parcela
        boleto.paid       → quita a parcela
        payment.failed    → mantém pendente com motivo nas observações
        payment.refunded  → estorno
        payment.chargeback→ estorno
        boleto.expired    → parcela atrasada

    A assinatura HMAC-SHA256 é verificada antes de qualquer alteração.
    """

    EVENTOS = (
        "payment.created",
        "payment.approved",
        "payment.failed",
        "payment.refunded",
        "payment.chargeback",
        "boleto.expired",
        "boleto.paid",
    )

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        transacao_repo: TransacaoRepository,
        transaction_logger,
        uow: UnitOfWork,
        webhook_secret: str,
        cache: Optional[Cache] = None,
        tolerancia_segundos: int = TOLERANCIA_SEGUNDOS,
        relogio: Callable[[], float] = time.time,
    ):
        self.pagamento_repo = pagamento_repo
        self.transacao_repo = transacao_repo
        self.transaction_logger = transaction_logger
        self.uow = uow
        self.webhook_secret = webhook_secret
        self.cache = cache
        self.tolerancia_segundos = tolerancia_segundos
        self.relogio = relogio

    def execute(
        self, input_dto: WebhookInputDTO, request_info: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        webhook_log = {"event": input_dto.evento, **input_dto.dados}

        if not verificar_assinatura(
            self.webhook_secret,
            input_dto.timestamp,
            input_dto.dados,
            input_dto.assinatura,
            agora=self.relogio(),
            tolerancia=self.tolerancia_segundos,
        ):
            self.transaction_logger.log_webhook(
                {**webhook_log, "erro": "assinatura inválida ou expirada"},
                TransactionStatus.FAILURE,
                request_info=request_info,
            )
            raise AuthorizationError("Assinatura do webhook inválida ou expirada")

        if input_dto.evento not in self.EVENTOS:
            raise ValidationError(
                f"Evento de webhook não suportado: {input_dto.evento}", field="event"
            )

        with self.uow:
            pagamento = self._localizar_pagamento(input_dto.dados)
            status_anterior = pagamento.status
            handler = getattr(self, "_on_" + input_dto.evento.replace(".", "_"))
            handler(pagamento, input_dto.dados)
            self.pagamento_repo.save(pagamento)

        self.transaction_logger.log_webhook(
            webhook_log, TransactionStatus.SUCCESS, request_info=request_info
        )
        invalidar_resumo(self.cache)
        logger.info(
            f"Webhook {input_dto.evento} aplicado ao pagamento {pagamento.id}: "
            f"{status_anterior.value} → {pagamento.status.value}"
        )
        return {
            "evento": input_dto.evento,
            "pagamento_id": pagamento.id,
            "status": pagamento.status.value,
        }

    def _localizar_pagamento(self, dados: Dict[str, Any]) -> PagamentoEntity:
        pagamento = None
        if dados.get("payment_id"):
            pagamento = self.pagamento_repo.get_by_id(dados["payment_id"])
        if not pagamento and dados.get("id"):
            pagamento = self.pagamento_repo.get_by_gateway_id(dados["id"])
        if not pagamento:
            raise EntityNotFoundError(
                "Pagamento do webhook não encontrado",
                entity_type="Pagamento",
                entity_id=dados.get("payment_id") or dados.get("id"),
            )
        return pagamento

    def _on_payment_created(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        pagamento.vincular_gateway(dados.get("id") or pagamento.gateway_id, dados)

    def _on_payment_approved(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        # Reentrega do mesmo evento não deve falhar
        if pagamento.status == PaymentStatus.PAGO:
            return
        pagamento.vincular_gateway(dados.get("id") or pagamento.gateway_id, dados)
        pagamento.registrar_pagamento(date.today())
        self.transacao_repo.save(TransacaoFinanceiraEntity.de_pagamento(pagamento))
        self.uow.publish_event(
            _evento_pagamento(
                PagamentoRegistradoEvent,
                pagamento,
                data_pagamento=pagamento.data_pagamento,
                forma_pagamento=pagamento.forma_pagamento.value,
            )
        )

    _on_boleto_paid = _on_payment_approved

    def _on_payment_failed(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        motivo = dados.get("failure_reason") or "Motivo desconhecido"
        pagamento.registrar_falha(motivo)
        pagamento.gateway_data = {**pagamento.gateway_data, **dados}
        self.uow.publish_event(
            _evento_pagamento(PagamentoFalhouEvent, pagamento, motivo=motivo)
        )

    def _estornar(self, pagamento: PagamentoEntity, motivo: str) -> None:
        if pagamento.status == PaymentStatus.REEMBOLSADO:
            return
        pagamento.estornar(motivo)
        self.transacao_repo.save(
            TransacaoFinanceiraEntity.de_pagamento(pagamento, TipoTransacao.REFUND)
        )
        self.uow.publish_event(
            _evento_pagamento(PagamentoEstornadoEvent, pagamento, motivo=motivo)
        )

    def _on_payment_refunded(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        self._estornar(pagamento, "Pagamento reembolsado")

    def _on_payment_chargeback(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        self._estornar(pagamento, "Chargeback")

    def _on_boleto_expired(self, pagamento: PagamentoEntity, dados: Dict[str, Any]) -> None:
        pagamento.expirar_boleto()


class VerificarPagamentosVencidosService:
    """
    Use Case: Marcar parcelas vencidas como atrasadas.

    Executado diariamente (Celery beat ou endpoint de cron). Cada parcela
    marcada gera PagamentoVencidoEvent (notificação payment_overdue).
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        uow: UnitOfWork,
        cache: Optional[Cache] = None,
    ):
        self.pagamento_repo = pagamento_repo
        self.uow = uow
        self.cache = cache

    def execute(self, hoje: Optional[date] = None) -> Dict[str, Any]:
        hoje = hoje or date.today()
        processados = []

        with self.uow:
            for pagamento in self.pagamento_repo.list_vencidos(hoje):
                if not pagamento.marcar_atrasado(hoje):
                    continue
                self.pagamento_repo.save(pagamento)
                self.uow.publish_event(
                    _evento_pagamento(
                        PagamentoVencidoEvent,
                        pagamento,
                        data_vencimento=pagamento.data_vencimento,
                        dias_atraso=pagamento.dias_atraso(hoje),
                    )
                )
                processados.append(pagamento.id)

        if processados:
            invalidar_resumo(self.cache)
        logger.info(f"Verificação de vencidos: {len(processados)} parcelas atrasadas")
        return {"processados": len(processados), "pagamentos": processados}


class VerificarPagamentosProximosService:
    """Use Case: Lembrete para parcelas que vencem em ``dias_antes`` dias."""

    def __init__(self, pagamento_repo: PagamentoRepository, uow: UnitOfWork):
        self.pagamento_repo = pagamento_repo
        self.uow = uow

    def execute(self, dias_antes: int = 3, hoje: Optional[date] = None) -> Dict[str, Any]:
        if not 0 <= dias_antes <= MAX_DIAS_LEMBRETE:
            raise ValidationError(
                f"daysBeforeDue deve estar entre 0 e {MAX_DIAS_LEMBRETE}", field="daysBeforeDue"
            )
        hoje = hoje or date.today()
        alvo = hoje + timedelta(days=dias_antes)
        lembretes = []

        with self.uow:
            for pagamento in self.pagamento_repo.list_vencendo(alvo, alvo):
                self.uow.publish_event(
                    _evento_pagamento(
                        LembretePagamentoEvent,
                        pagamento,
                        data_vencimento=pagamento.data_vencimento,
                        dias_para_vencimento=dias_antes,
                    )
                )
                lembretes.append(pagamento.id)

        return {
            "lembretes": len(lembretes),
            "pagamentos": lembretes,
            "data_vencimento": alvo.isoformat(),
        }


# =============================================================================
# Descontos
# =============================================================================

class CriarDescontoService:
    def __init__(self, desconto_repo: DescontoRepository, uow: UnitOfWork):
        self.desconto_repo = desconto_repo
        self.uow = uow

    def execute(self, input_dto: CriarDescontoInputDTO) -> DescontoOutputDTO:
        with self.uow:
            desconto = DescontoEntity.criar(
                nome=input_dto.nome,
                codigo=input_dto.codigo,
                tipo=TipoDesconto.from_string(input_dto.tipo),
                valor=input_dto.valor,
                data_inicio=input_dto.data_inicio,
                data_fim=input_dto.data_fim,
                cursos_aplicaveis=list(input_dto.cursos_aplicaveis),
                limite_usos=input_dto.limite_usos,
                descricao=input_dto.descricao,
            )
            if self.desconto_repo.get_by_codigo(desconto.codigo):
                raise BusinessRuleViolationError(
                    f"Já existe desconto com o código {desconto.codigo}",
                    rule="codigo_desconto_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )
            self.desconto_repo.save(desconto)

        return DescontoOutputDTO.from_entity(desconto)


class ListarDescontosService:
    def __init__(self, desconto_repo: DescontoRepository):
        self.desconto_repo = desconto_repo

    def execute(self, apenas_ativos: bool = False) -> List[DescontoOutputDTO]:
        return [
            DescontoOutputDTO.from_entity(d)
            for d in self.desconto_repo.list_all(apenas_ativos=apenas_ativos)
        ]


class ValidarDescontoService:
    """
    Use Case: Validar cupom e calcular o valor com desconto.

    Não registra uso; apenas simula a aplicação.
    """

    def __init__(self, desconto_repo: DescontoRepository):
        self.desconto_repo = desconto_repo

    def execute(
        self, input_dto: ValidarDescontoInputDTO, hoje: Optional[date] = None
    ) -> DescontoAplicadoDTO:
        desconto = self.desconto_repo.get_by_codigo(input_dto.codigo.strip())
        if not desconto:
            raise BusinessRuleViolationError(
                "Código de desconto inválido",
                rule="desconto_inexistente",
                code=ErrorCode.INVALID_DISCOUNT,
            )
        desconto.validar_uso(curso_id=input_dto.curso_id, hoje=hoje)
        valor_original = para_decimal(input_dto.valor_total, "valor_total")
        return DescontoAplicadoDTO(
            desconto_id=desconto.id,
            codigo=desconto.codigo,
            valor_original=valor_original,
            valor_com_desconto=desconto.aplicar(valor_original),
        )


# =============================================================================
# Negociações
# =============================================================================

class CriarNegociacaoService:
    """
    Use Case: Propor negociação de parcelas em aberto.

    Todas as parcelas devem pertencer à mesma matrícula.
    """

    def __init__(
        self,
        negociacao_repo: NegociacaoRepository,
        pagamento_repo: PagamentoRepository,
        uow: UnitOfWork,
    ):
        self.negociacao_repo = negociacao_repo
        self.pagamento_repo = pagamento_repo
        self.uow = uow

    def execute(self, input_dto: CriarNegociacaoInputDTO) -> NegociacaoOutputDTO:
        with self.uow:
            ids = list(dict.fromkeys(input_dto.pagamento_ids))
            pagamentos = self.pagamento_repo.list_by_ids(ids)
            encontrados = {p.id for p in pagamentos}
            faltantes = [i for i in ids if i not in encontrados]
            if faltantes:
                raise EntityNotFoundError(
                    "Pagamento não encontrado",
                    entity_type="Pagamento",
                    entity_id=faltantes[0],
                )

            matriculas = {p.matricula_id for p in pagamentos}
            if len(matriculas) > 1:
                raise BusinessRuleViolationError(
                    "As parcelas negociadas devem ser da mesma matrícula",
                    rule="negociacao_multiplas_matriculas",
                    code=ErrorCode.INVALID_NEGOTIATION,
                )

            negociacao = NegociacaoEntity.criar(
                aluno_id=input_dto.aluno_id,
                matricula_id=next(iter(matriculas), ""),
                pagamentos=pagamentos,
                valor_negociado=input_dto.valor_negociado,
                numero_parcelas=input_dto.numero_parcelas,
                data_primeira_parcela=input_dto.data_primeira_parcela,
                observacoes=input_dto.observacoes,
            )
            self.negociacao_repo.save(negociacao)
            self.uow.publish_event(
                NegociacaoCriadaEvent(
                    aggregate_id=negociacao.id,
                    aluno_id=negociacao.aluno_id,
                    valor_original=negociacao.valor_original,
                    valor_negociado=negociacao.valor_negociado,
                    numero_parcelas=negociacao.numero_parcelas,
                )
            )

        return NegociacaoOutputDTO.from_entity(negociacao)


def _obter_negociacao_ou_erro(repo: NegociacaoRepository, negociacao_id: str) -> NegociacaoEntity:
    negociacao = repo.get_by_id(negociacao_id)
    if not negociacao:
        raise EntityNotFoundError(
            "Negociação não encontrada",
            entity_type="Negociacao",
            entity_id=negociacao_id,
        )
    return negociacao


class AprovarNegociacaoService:
    """
    Use Case: Aprovar negociação.

    Cancela as parcelas originais (motivo "Renegociado") e gera as
    novas parcelas vinculadas à negociação, que passa a ``concluida``
    após a geração.
    """

    MOTIVO_CANCELAMENTO = "Renegociado"

    def __init__(
        self,
        negociacao_repo: NegociacaoRepository,
        pagamento_repo: PagamentoRepository,
        uow: UnitOfWork,
        cache: Optional[Cache] = None,
    ):
        self.negociacao_repo = negociacao_repo
        self.pagamento_repo = pagamento_repo
        self.uow = uow
        self.cache = cache

    def execute(self, input_dto: DecidirNegociacaoInputDTO) -> Dict[str, Any]:
        with self.uow:
            negociacao = _obter_negociacao_ou_erro(self.negociacao_repo, input_dto.negociacao_id)
            negociacao.aprovar(input_dto.responsavel_id)

            originais = self.pagamento_repo.list_by_ids(negociacao.pagamento_ids)
            if any(not p.em_aberto for p in originais):
                raise BusinessRuleViolationError(
                    "Parcelas da negociação não estão mais em aberto",
                    rule="negociacao_parcela_fechada",
                    code=ErrorCode.INVALID_NEGOTIATION,
                )
            forma = originais[0].forma_pagamento if originais else FormaPagamento.BOLETO
            for pagamento in originais:
                pagamento.cancelar(self.MOTIVO_CANCELAMENTO)
            self.pagamento_repo.save_many(originais)

            novas = gerar_parcelas(
                matricula_id=negociacao.matricula_id,
                valor_total=negociacao.valor_negociado,
                numero_parcelas=negociacao.numero_parcelas,
                forma_pagamento=forma,
                primeiro_vencimento=negociacao.data_primeira_parcela,
                negociacao_id=negociacao.id,
            )
            ultimo_numero = max(
                (p.numero_parcela for p in self.pagamento_repo.list_by_matricula(negociacao.matricula_id)),
                default=0,
            )
            for deslocamento, parcela in enumerate(novas, start=1):
                parcela.numero_parcela = ultimo_numero + deslocamento
            self.pagamento_repo.save_many(novas)

            negociacao.concluir()
            self.negociacao_repo.save(negociacao)
            self.uow.publish_event(
                NegociacaoAprovadaEvent(
                    aggregate_id=negociacao.id,
                    aluno_id=negociacao.aluno_id,
                    pagamentos_cancelados=[p.id for p in originais],
                    pagamentos_gerados=[p.id for p in novas],
                )
            )

        invalidar_resumo(self.cache)
        return {
            "negociacao": NegociacaoOutputDTO.from_entity(negociacao).to_dict(),
            "pagamentos": [PagamentoOutputDTO.from_entity(p).to_dict() for p in novas],
        }


class RejeitarNegociacaoService:
    def __init__(self, negociacao_repo: NegociacaoRepository, uow: UnitOfWork):
        self.negociacao_repo = negociacao_repo
        self.uow = uow

    def execute(self, input_dto: DecidirNegociacaoInputDTO) -> NegociacaoOutputDTO:
        with self.uow:
            negociacao = _obter_negociacao_ou_erro(self.negociacao_repo, input_dto.negociacao_id)
            negociacao.rejeitar(input_dto.responsavel_id, input_dto.motivo)
            self.negociacao_repo.save(negociacao)
        return NegociacaoOutputDTO.from_entity(negociacao)


class CancelarNegociacaoService:
    def __init__(self, negociacao_repo: NegociacaoRepository, uow: UnitOfWork):
        self.negociacao_repo = negociacao_repo
        self.uow = uow

    def execute(self, input_dto: DecidirNegociacaoInputDTO) -> NegociacaoOutputDTO:
        with self.uow:
            negociacao = _obter_negociacao_ou_erro(self.negociacao_repo, input_dto.negociacao_id)
            negociacao.cancelar(input_dto.motivo)
            self.negociacao_repo.save(negociacao)
        return NegociacaoOutputDTO.from_entity(negociacao)


class ListarNegociacoesService:
    def __init__(self, negociacao_repo: NegociacaoRepository):
        self.negociacao_repo = negociacao_repo

    def execute(self, aluno_id: Optional[str] = None) -> List[NegociacaoOutputDTO]:
        negociacoes = (
            self.negociacao_repo.list_by_aluno(aluno_id)
            if aluno_id
            else self.negociacao_repo.list_all()
        )
        return [NegociacaoOutputDTO.from_entity(n) for n in negociacoes]


# =============================================================================
# Split de pagamento
# =============================================================================

class ConfigurarSplitService:
    """
    Use Case: Configurar divisão de um pagamento entre recebedores.

    Substitui qualquer configuração anterior do pagamento.

    Raises:
        EntityNotFoundError: Pagamento inexistente
        BusinessRuleViolationError: INVALID_STATUS se já pago
        ValidationError: Percentuais acima de 100% ou valores acima
            do pagamento
    """

    def __init__(
        self,
        split_repo: SplitPagamentoRepository,
        pagamento_repo: PagamentoRepository,
        uow: UnitOfWork,
    ):
        self.split_repo = split_repo
        self.pagamento_repo = pagamento_repo
        self.uow = uow

    def execute(self, input_dto: ConfigurarSplitInputDTO) -> List[SplitOutputDTO]:
        with self.uow:
            pagamento = obter_pagamento_ou_erro(self.pagamento_repo, input_dto.payment_id)
            if pagamento.status == PaymentStatus.PAGO:
                raise BusinessRuleViolationError(
                    "Não é possível configurar split para um pagamento já realizado",
                    rule="split_pagamento_pago",
                    code=ErrorCode.INVALID_STATUS,
                )

            divisoes = calcular_split(pagamento.valor, input_dto.recipients)
            splits = [
                SplitPagamentoEntity(
                    payment_id=pagamento.id,
                    recipient_id=d["recipient_id"],
                    recipient_type=d["recipient_type"],
                    amount=d["amount"],
                    percentage=d["percentage"],
                )
                for d in divisoes
            ]
            self.split_repo.replace(pagamento.id, splits)

        return [SplitOutputDTO.from_entity(s) for s in splits]


class ObterSplitService:
    def __init__(self, split_repo: SplitPagamentoRepository):
        self.split_repo = split_repo

    def execute(self, payment_id: str) -> List[SplitOutputDTO]:
        return [SplitOutputDTO.from_entity(s) for s in self.split_repo.list_by_payment(payment_id)]


# =============================================================================
# Dashboard
# =============================================================================

class ObterResumoFinanceiroService:
    """
    Use Case: Resumo financeiro dos últimos meses (dashboard).

    Para cada mês:
    - receitas: parcelas pagas, pela data de pagamento
    - pendentes: parcelas pendentes a vencer, pela data de vencimento
    - atrasados: parcelas atrasadas ou pendentes já vencidas

    O resultado é armazenado no cache por ``ttl`` segundos e invalidado
    quando um pagamento muda de status.
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        cache: Optional[Cache] = None,
        ttl: int = 300,
    ):
        self.pagamento_repo = pagamento_repo
        self.cache = cache
        self.ttl = ttl

    def execute(self, hoje: Optional[date] = None, meses: int = 6) -> Dict[str, Any]:
        hoje = hoje or date.today()
        if not 1 <= meses <= MAX_MESES_RESUMO:
            raise ValidationError(
                f"Número de meses deve estar entre 1 e {MAX_MESES_RESUMO}", field="months"
            )
        if self.cache is None:
            return self._calcular(hoje, meses)
        chave = f"{CACHE_RESUMO_PREFIXO}:{hoje.isoformat()}:{meses}"
        return self.cache.get_or_set(chave, lambda: self._calcular(hoje, meses), self.ttl)

    def _calcular(self, hoje: date, meses: int) -> Dict[str, Any]:
        inicio_mes_atual = hoje.replace(day=1)
        inicio = adicionar_meses(inicio_mes_atual, -(meses - 1))
        fim = adicionar_meses(inicio_mes_atual, 1) - timedelta(days=1)

        zero = Decimal("0.00")
        por_mes = {}
        for i in range(meses):
            mes = adicionar_meses(inicio, i)
            por_mes[(mes.year, mes.month)] = {
                "mes": f"{mes.month:02d}/{mes.year}",
                "receitas": zero,
                "pendentes": zero,
                "atrasados": zero,
            }

        pagos = self.pagamento_repo.list_pagos_entre(inicio, fim)
        for pagamento in pagos:
            chave = (pagamento.data_pagamento.year, pagamento.data_pagamento.month)
            por_mes[chave]["receitas"] += pagamento.valor

        for pagamento in self.pagamento_repo.list_by_vencimento(inicio, fim):
            chave = (pagamento.data_vencimento.year, pagamento.data_vencimento.month)
            if pagamento.status == PaymentStatus.ATRASADO or (
                pagamento.status == PaymentStatus.PENDENTE
                and pagamento.data_vencimento < hoje
            ):
                por_mes[chave]["atrasados"] += pagamento.valor
            elif pagamento.status == PaymentStatus.PENDENTE:
                por_mes[chave]["pendentes"] += pagamento.valor

        mensal = []
        for dados in por_mes.values():
            total = dados["receitas"] + dados["pendentes"] + dados["atrasados"]
            mensal.append({
                "mes": dados["mes"],
                "receitas": str(dados["receitas"]),
                "pendentes": str(dados["pendentes"]),
                "atrasados": str(dados["atrasados"]),
                "total": str(total),
            })

        total_receitas = sum((d["receitas"] for d in por_mes.values()), zero)
        total_pendentes = sum((d["pendentes"] for d in por_mes.values()), zero)
        total_atrasados = sum((d["atrasados"] for d in por_mes.values()), zero)
        total_geral = total_receitas + total_pendentes + total_atrasados
        taxa = (
            (total_atrasados / total_geral * 100).quantize(Decimal("0.01"))
            if total_geral > 0
            else zero
        )

        recentes = sorted(pagos, key=lambda p: p.data_pagamento, reverse=True)[:5]
        return {
            "mensal": mensal,
            "metricas": {
                "total_receitas": str(total_receitas),
                "total_pendentes": str(total_pendentes),
                "total_atrasados": str(total_atrasados),
                "taxa_inadimplencia": str(taxa),
            },
            "pagamentos_recentes": [
                {
                    "id": p.id,
                    "matricula_id": p.matricula_id,
                    "valor": str(p.valor),
                    "data_pagamento": p.data_pagamento.isoformat(),
                    "forma_pagamento": p.forma_pagamento.value,
                }
                for p in recentes
            ],
            "gerado_em": datetime.now().isoformat(),
        }

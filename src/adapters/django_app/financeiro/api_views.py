"""
API JSON do domínio Financeiro.

Endpoints de integração (raiz ``/api/``):
- POST /api/payments/process - Cobrança de uma parcela no gateway
- GET /api/cron/overdue-payments - Marca parcelas vencidas (Bearer CRON_SECRET)
- POST /api/cron/overdue-payments - Lembretes de vencimento (Bearer CRON_SECRET)
- POST /api/reports/financial - Relatório em arquivo ou por e-mail (Bearer REPORT_SECRET)
- POST /api/webhooks/payments - Callbacks do gateway (HMAC)
- GET /api/dashboard/financial-summary - Resumo do dashboard

Recursos (``/financeiro/api/``):
- pagamentos: listar, obter, gerar, registrar, cancelar
- descontos: listar, criar, validar
- negociacoes: listar, criar, aprovar, rejeitar, cancelar
- pagamentos/<id>/split: obter e configurar
"""

import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse

from src.core.financeiro.dtos import (
    CancelarPagamentoInputDTO,
    ConfigurarSplitInputDTO,
    CriarDescontoInputDTO,
    CriarNegociacaoInputDTO,
    DecidirNegociacaoInputDTO,
    GerarPagamentosInputDTO,
    GerarRelatorioInputDTO,
    ProcessarPagamentoInputDTO,
    RegistrarPagamentoInputDTO,
    ValidarDescontoInputDTO,
    WebhookInputDTO,
)
from src.core.shared.exceptions import ValidationError

from ..shared.api import (
    BaseAPIView,
    get_request_info,
    get_user_id,
    json_response,
    parse_date,
    parse_decimal,
    parse_int,
    verificar_bearer,
)
from .relatorios import renderizar_relatorio

logger = logging.getLogger(__name__)


def _obrigatorios(data: dict, *campos: str) -> None:
    for campo in campos:
        if data.get(campo) in (None, ''):
            raise ValidationError(f"{campo} é obrigatório", field=campo)


# =============================================================================
# Integração
# =============================================================================

class ProcessarPagamentoAPIView(BaseAPIView):
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"pagamento_id", "forma_pagamento"?, "dados_cliente"?}
        """
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'pagamento_id')
            dados_cliente = data.get('dados_cliente') or {}
            if not isinstance(dados_cliente, dict):
                raise ValidationError("dados_cliente deve ser um objeto", field="dados_cliente")

            resultado = self.get_service('processar_pagamento_service').execute(
                ProcessarPagamentoInputDTO(
                    pagamento_id=data['pagamento_id'],
                    forma_pagamento=data.get('forma_pagamento') or None,
                    dados_cliente=dados_cliente,
                ),
                user_id=get_user_id(request),
                request_info=get_request_info(request),
            )
            return json_response(success=True, data=resultado.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class CronPagamentosVencidosAPIView(BaseAPIView):
    """GET marca os vencidos; POST envia lembretes (``daysBeforeDue``, padrão 3)."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            verificar_bearer(request, settings.CRON_SECRET)
            resultado = self.get_service('verificar_pagamentos_vencidos_service').execute()
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            verificar_bearer(request, settings.CRON_SECRET)
            data = self.parse_body(request)
            dias = parse_int(data.get('daysBeforeDue'), 'daysBeforeDue', padrao=3)
            resultado = self.get_service('verificar_pagamentos_proximos_service').execute(dias_antes=dias)
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)


class RelatorioFinanceiroAPIView(BaseAPIView):
    def post(self, request: HttpRequest) -> HttpResponse:
        """
        Body:
            {"type": "overdue|cash_flow|projection", "format"?: "csv|pdf",
             "start_date"?, "end_date"?, "months"?, "email"?}

        Com ``email`` o relatório é gerado e enviado em background (202).
        """
        try:
            verificar_bearer(request, settings.REPORT_SECRET)
            data = self.parse_body(request)
            _obrigatorios(data, 'type')
            input_dto = GerarRelatorioInputDTO(
                tipo=data['type'],
                formato=data.get('format') or 'csv',
                inicio=parse_date(data.get('start_date'), 'start_date'),
                fim=parse_date(data.get('end_date'), 'end_date'),
                meses=parse_int(data.get('months'), 'months', padrao=6),
            )

            if data.get('email'):
                from src.adapters.django_app.events.handlers import enviar_relatorio_financeiro

                # Valida os parâmetros antes de enfileirar
                relatorio = self.get_service('gerar_relatorio_financeiro_service').execute(input_dto)
                enviar_relatorio_financeiro.delay(
                    email=data['email'],
                    tipo=input_dto.tipo,
                    formato=input_dto.formato,
                    inicio=input_dto.inicio.isoformat() if input_dto.inicio else None,
                    fim=input_dto.fim.isoformat() if input_dto.fim else None,
                    meses=input_dto.meses,
                )
                return json_response(
                    success=True,
                    data={'enviado_para': data['email'], 'titulo': relatorio.titulo},
                    status=202,
                )

            relatorio = self.get_service('gerar_relatorio_financeiro_service').execute(input_dto)
            arquivo = renderizar_relatorio(relatorio, input_dto.formato)
            response = HttpResponse(arquivo.conteudo, content_type=arquivo.content_type)
            response['Content-Disposition'] = f'attachment; filename="{arquivo.nome}"'
            return response
        except Exception as e:
            return self.handle_exception(e)


class WebhookPagamentosAPIView(BaseAPIView):
    """
    Body:
        {"event", "data", "timestamp"?, "signature"?}

    Assinatura e timestamp podem vir nos headers ``X-Webhook-Signature`` e
    ``X-Webhook-Timestamp`` (prioritários) ou no corpo.
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'event')
            dados = data.get('data')
            if not isinstance(dados, dict):
                raise ValidationError("data deve ser um objeto", field="data")

            resultado = self.get_service('processar_webhook_service').execute(
                WebhookInputDTO(
                    evento=data['event'],
                    dados=dados,
                    timestamp=str(request.META.get('HTTP_X_WEBHOOK_TIMESTAMP') or data.get('timestamp') or ''),
                    assinatura=request.META.get('HTTP_X_WEBHOOK_SIGNATURE') or data.get('signature') or '',
                ),
                request_info=get_request_info(request),
            )
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)


class ResumoFinanceiroAPIView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            meses = parse_int(request.GET.get('months'), 'months', padrao=6)
            resumo = self.get_service('obter_resumo_financeiro_service').execute(meses=meses)
            return json_response(success=True, data=resumo)
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Pagamentos
# =============================================================================

class PagamentoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        """Filtro obrigatório: ``?matricula_id=`` ou ``?status=``."""
        try:
            pagamentos = self.get_service('listar_pagamentos_service').execute(
                matricula_id=request.GET.get('matricula_id') or None,
                status=request.GET.get('status') or None,
            )
            return json_response(
                success=True,
                data=[p.to_dict() for p in pagamentos],
                meta={'total': len(pagamentos)},
            )
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Gera as parcelas de uma matrícula.

        Body:
            {"matricula_id", "valor_total", "numero_parcelas",
             "forma_pagamento", "data_primeiro_vencimento",
             "desconto_id"?, "curso_id"?}
        """
        try:
            data = self.parse_body(request)
            _obrigatorios(
                data, 'matricula_id', 'valor_total', 'numero_parcelas',
                'forma_pagamento', 'data_primeiro_vencimento',
            )
            pagamentos = self.get_service('gerar_pagamentos_service').execute(
                GerarPagamentosInputDTO(
                    matricula_id=data['matricula_id'],
                    valor_total=parse_decimal(data['valor_total'], 'valor_total'),
                    numero_parcelas=parse_int(data['numero_parcelas'], 'numero_parcelas'),
                    forma_pagamento=data['forma_pagamento'],
                    data_primeiro_vencimento=parse_date(
                        data['data_primeiro_vencimento'], 'data_primeiro_vencimento', obrigatorio=True
                    ),
                    desconto_id=data.get('desconto_id') or None,
                    curso_id=data.get('curso_id') or None,
                )
            )
            return json_response(success=True, data=[p.to_dict() for p in pagamentos], status=201)
        except Exception as e:
            return self.handle_exception(e)


class PagamentoAPIDetailView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            pagamento = self.get_service('obter_pagamento_service').execute(pk)
            return json_response(success=True, data=pagamento.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class PagamentoAPIRegistrarView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            pagamento = self.get_service('registrar_pagamento_service').execute(
                RegistrarPagamentoInputDTO(
                    pagamento_id=pk,
                    data_pagamento=parse_date(data.get('data_pagamento'), 'data_pagamento'),
                    comprovante_url=data.get('comprovante_url') or None,
                    observacoes=data.get('observacoes') or None,
                )
            )
            return json_response(success=True, data=pagamento.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class PagamentoAPICancelarView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            pagamento = self.get_service('cancelar_pagamento_service').execute(
                CancelarPagamentoInputDTO(pagamento_id=pk, motivo=data.get('motivo', ''))
            )
            return json_response(success=True, data=pagamento.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class SplitAPIView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            splits = self.get_service('obter_split_service').execute(pk)
            return json_response(success=True, data=[s.to_dict() for s in splits])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body:
            {"recipients": [{"recipient_id", "recipient_type",
                             "amount"? | "percentage"?}, ...]}
        """
        try:
            data = self.parse_body(request)
            recipients = data.get('recipients')
            if not isinstance(recipients, list) or not recipients:
                raise ValidationError("recipients deve ser uma lista não vazia", field="recipients")

            splits = self.get_service('configurar_split_service').execute(
                ConfigurarSplitInputDTO(payment_id=pk, recipients=tuple(recipients))
            )
            return json_response(success=True, data=[s.to_dict() for s in splits], status=201)
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Descontos
# =============================================================================

class DescontoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            descontos = self.get_service('listar_descontos_service').execute(
                apenas_ativos=request.GET.get('ativos') in ('1', 'true')
            )
            return json_response(success=True, data=[d.to_dict() for d in descontos])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"nome", "codigo", "tipo": "percentual|valor_fixo", "valor",
             "data_inicio"?, "data_fim"?, "cursos_aplicaveis"?,
             "limite_usos"?, "descricao"?}
        """
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'nome', 'codigo', 'tipo', 'valor')
            desconto = self.get_service('criar_desconto_service').execute(
                CriarDescontoInputDTO(
                    nome=data['nome'],
                    codigo=data['codigo'],
                    tipo=data['tipo'],
                    valor=parse_decimal(data['valor'], 'valor'),
                    data_inicio=parse_date(data.get('data_inicio'), 'data_inicio'),
                    data_fim=parse_date(data.get('data_fim'), 'data_fim'),
                    cursos_aplicaveis=tuple(data.get('cursos_aplicaveis') or ()),
                    limite_usos=parse_int(data.get('limite_usos'), 'limite_usos'),
                    descricao=data.get('descricao', ''),
                )
            )
            return json_response(success=True, data=desconto.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class DescontoAPIValidarView(BaseAPIView):
    def post(self, request: HttpRequest) -> JsonResponse:
        """Body: {"codigo", "valor_total", "curso_id"?}"""
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'codigo', 'valor_total')
            aplicado = self.get_service('validar_desconto_service').execute(
                ValidarDescontoInputDTO(
                    codigo=data['codigo'],
                    valor_total=parse_decimal(data['valor_total'], 'valor_total'),
                    curso_id=data.get('curso_id') or None,
                )
            )
            return json_response(success=True, data=aplicado.to_dict())
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Negociações
# =============================================================================

class NegociacaoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            negociacoes = self.get_service('listar_negociacoes_service').execute(
                aluno_id=request.GET.get('aluno_id') or None
            )
            return json_response(success=True, data=[n.to_dict() for n in negociacoes])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"aluno_id", "pagamento_ids": [...], "valor_negociado",
             "numero_parcelas", "data_primeira_parcela", "observacoes"?}
        """
        try:
            data = self.parse_body(request)
            _obrigatorios(
                data, 'aluno_id', 'pagamento_ids', 'valor_negociado',
                'numero_parcelas', 'data_primeira_parcela',
            )
            if not isinstance(data['pagamento_ids'], list):
                raise ValidationError("pagamento_ids deve ser uma lista", field="pagamento_ids")

            negociacao = self.get_service('criar_negociacao_service').execute(
                CriarNegociacaoInputDTO(
                    aluno_id=data['aluno_id'],
                    pagamento_ids=tuple(data['pagamento_ids']),
                    valor_negociado=parse_decimal(data['valor_negociado'], 'valor_negociado'),
                    numero_parcelas=parse_int(data['numero_parcelas'], 'numero_parcelas'),
                    data_primeira_parcela=parse_date(
                        data['data_primeira_parcela'], 'data_primeira_parcela', obrigatorio=True
                    ),
                    observacoes=data.get('observacoes', ''),
                )
            )
            return json_response(success=True, data=negociacao.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class NegociacaoAPIDecisaoView(BaseAPIView):
    """POST /negociacoes/<id>/<acao>/ com acao em aprovar, rejeitar, cancelar."""

    SERVICOS = {
        'aprovar': 'aprovar_negociacao_service',
        'rejeitar': 'rejeitar_negociacao_service',
        'cancelar': 'cancelar_negociacao_service',
    }

    def post(self, request: HttpRequest, pk: str, acao: str) -> JsonResponse:
        try:
            if acao not in self.SERVICOS:
                raise ValidationError(f"Ação inválida: {acao}", field="acao")
            data = self.parse_body(request)
            resultado = self.get_service(self.SERVICOS[acao]).execute(
                DecidirNegociacaoInputDTO(
                    negociacao_id=pk,
                    responsavel_id=get_user_id(request) or data.get('responsavel_id'),
                    motivo=data.get('motivo', ''),
                )
            )
            if not isinstance(resultado, dict):
                resultado = resultado.to_dict()
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)

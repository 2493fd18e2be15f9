"""
API JSON de conformidade (LGPD) e monitoramento.

Endpoints:
- POST /api/lgpd/consentimentos/ - Registrar consentimento ou revogação
- GET /api/lgpd/consentimentos/<user_id>/?purpose= - Consultar consentimento
- POST /api/lgpd/esquecimento/<aluno_id>/ - Direito ao esquecimento
- GET /api/lgpd/logs/<user_id>/ - Trilha de auditoria do titular
- GET /api/monitoring/metrics?type=&start_date=&end_date=&endpoint=
- GET /api/monitoring/alerts?severity=&limit=
- POST /api/feedback/ - Enviar feedback (usuário autenticado)
- GET /api/feedback/?type=&module=&feature=&status=&priority=&start_date=&end_date=
- GET /api/feedback/stats/?start_date=&end_date= - Estatísticas (staff)
- PATCH /api/feedback/<id>/ - Atualizar status e prioridade (staff)
- GET /health/ - Health check (banco de dados)
"""

from datetime import datetime, time
from typing import Any, Optional
import logging

from django.http import HttpRequest, JsonResponse

from src.core.monitoramento.entities import (
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
    MetricType,
    SatisfactionLevel,
)
from src.core.monitoramento.ports import FeedbackFilters
from src.core.seguranca.entities import ConsentRecord, DataPurpose
from src.core.shared.exceptions import AuthorizationError, ErrorCode, ValidationError

from ..shared.api import (
    BaseAPIView,
    error_response,
    get_request_info,
    get_user_id,
    json_response,
    parse_int,
)
from ..shared.database import health_check

logger = logging.getLogger(__name__)


def parse_datetime(valor: Any, campo: str, fim_do_dia: bool = False) -> Optional[datetime]:
    """
    ISO 8601 com ou sem horário; data sem horário vira início do dia
    (ou fim do dia com ``fim_do_dia``).
    """
    if valor in (None, ''):
        return None
    texto = str(valor)
    try:
        if len(texto) == 10:
            dia = datetime.fromisoformat(texto).date()
            return datetime.combine(dia, time.max if fim_do_dia else time.min)
        convertido = datetime.fromisoformat(texto.replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f"Data inválida em {campo}: {valor}", field=campo)
    if convertido.tzinfo is not None:
        convertido = convertido.astimezone().replace(tzinfo=None)
    return convertido


# =============================================================================
# LGPD
# =============================================================================

class ConsentimentoAPIView(BaseAPIView):
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"user_id", "purpose", "granted": bool, "expiration"?, "details"?}
        """
        try:
            data = self.parse_body(request)
            if data.get('granted') is None or not isinstance(data['granted'], bool):
                raise ValidationError("granted deve ser true ou false", field="granted")

            record = ConsentRecord(
                user_id=data.get('user_id') or '',
                purpose=DataPurpose.from_string(data.get('purpose')),
                granted=data['granted'],
                expiration=parse_datetime(data.get('expiration'), 'expiration'),
                details={**(data.get('details') or {}), **get_request_info(request)},
            )
            resultado = self.get_service('lgpd_service').register_consent(record)
            if not resultado['success']:
                return error_response(ErrorCode.UNEXPECTED_ERROR, 'Falha ao registrar consentimento', status=500)
            return json_response(
                success=True,
                data={
                    'id': resultado['id'],
                    'user_id': record.user_id,
                    'purpose': record.purpose.value,
                    'granted': record.granted,
                },
                status=201,
            )
        except Exception as e:
            return self.handle_exception(e)


class ConsentimentoDetailAPIView(BaseAPIView):
    def get(self, request: HttpRequest, user_id: str) -> JsonResponse:
        try:
            purpose = DataPurpose.from_string(request.GET.get('purpose'))
            service = self.get_service('lgpd_service')
            consentimento = service.get_consent(user_id, purpose)
            return json_response(
                success=True,
                data={
                    'user_id': user_id,
                    'purpose': purpose.value,
                    'has_consent': service.has_consent(user_id, purpose),
                    'granted': consentimento.granted if consentimento else None,
                    'timestamp': consentimento.timestamp.isoformat() if consentimento else None,
                    'expiration': (
                        consentimento.expiration.isoformat()
                        if consentimento and consentimento.expiration else None
                    ),
                },
            )
        except Exception as e:
            return self.handle_exception(e)


class EsquecimentoAPIView(BaseAPIView):
    def post(self, request: HttpRequest, aluno_id: str) -> JsonResponse:
        try:
            resultado = self.get_service('lgpd_service').implement_right_to_be_forgotten(
                aluno_id, solicitado_por=get_user_id(request)
            )
            return json_response(success=True, data={'aluno_id': resultado['aluno_id']})
        except Exception as e:
            return self.handle_exception(e)


class TransactionLogsAPIView(BaseAPIView):
    def get(self, request: HttpRequest, user_id: str) -> JsonResponse:
        try:
            limit = parse_int(request.GET.get('limit'), 'limit', padrao=50)
            offset = parse_int(request.GET.get('offset'), 'offset', padrao=0)
            if limit < 1 or offset < 0:
                raise ValidationError("limit e offset devem ser positivos", field="limit")
            resultado = self.get_service('transaction_logger').get_user_transaction_logs(
                user_id, limit=min(limit, 200), offset=offset
            )
            if not resultado['success']:
                return error_response(ErrorCode.UNEXPECTED_ERROR, 'Falha ao consultar logs', status=500)
            return json_response(success=True, data=resultado['data'])
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Monitoramento
# =============================================================================

class MetricasAPIView(BaseAPIView):
    """Estatísticas (count, min, max, avg, p95, p99) de um tipo de métrica."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            params = request.GET
            for campo in ('type', 'start_date', 'end_date'):
                if not params.get(campo):
                    raise ValidationError(f"Parâmetro {campo} é obrigatório", field=campo)

            metric_type = MetricType.from_string(params['type'])
            inicio = parse_datetime(params['start_date'], 'start_date')
            fim = parse_datetime(params['end_date'], 'end_date', fim_do_dia=True)
            endpoint = params.get('endpoint') or None

            stats = self.get_service('monitoring_service').get_metric_stats(
                metric_type, inicio, fim, endpoint
            )
            return json_response(
                success=True,
                data={
                    'type': metric_type.value,
                    'start_date': inicio.isoformat(),
                    'end_date': fim.isoformat(),
                    'endpoint': endpoint,
                    'stats': stats,
                },
            )
        except Exception as e:
            return self.handle_exception(e)


class AlertasAPIView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            limit = parse_int(request.GET.get('limit'), 'limit', padrao=50)
            alertas = self.get_service('monitoring_service').list_alerts(
                limit=max(1, min(limit, 500)),
                severity=request.GET.get('severity') or None,
            )
            return json_response(success=True, data=alertas, meta={'total': len(alertas)})
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Feedback
# =============================================================================

def usuario_autenticado(request: HttpRequest) -> str:
    user_id = get_user_id(request)
    if not user_id:
        raise AuthorizationError("Autenticação necessária")
    return user_id


def is_staff(request: HttpRequest) -> bool:
    return bool(getattr(request.user, 'is_staff', False))


class FeedbackAPIView(BaseAPIView):
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"type", "message", "module", "satisfactionLevel"?, "feature"?, "metadata"?}
        """
        try:
            user_id = usuario_autenticado(request)
            data = self.parse_body(request)
            nivel = data.get('satisfactionLevel')
            feedback = self.get_service('feedback_service').submit_feedback(
                user_id=user_id,
                feedback_type=FeedbackType.from_string(data.get('type')),
                message=data.get('message') or '',
                module=data.get('module') or '',
                satisfaction_level=SatisfactionLevel.from_value(nivel) if nivel is not None else None,
                feature=data.get('feature'),
                metadata=data.get('metadata'),
            )
            return json_response(success=True, data=feedback.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)

    def get(self, request: HttpRequest) -> JsonResponse:
        """Usuários comuns veem apenas o próprio feedback."""
        try:
            user_id = usuario_autenticado(request)
            params = request.GET
            filters = FeedbackFilters(
                type=FeedbackType.from_string(params['type']) if params.get('type') else None,
                module=params.get('module') or None,
                feature=params.get('feature') or None,
                status=FeedbackStatus.from_string(params['status']) if params.get('status') else None,
                priority=(
                    FeedbackPriority.from_string(params['priority']) if params.get('priority') else None
                ),
                start_date=parse_datetime(params.get('start_date'), 'start_date'),
                end_date=parse_datetime(params.get('end_date'), 'end_date', fim_do_dia=True),
                user_id=None if is_staff(request) else user_id,
            )
            feedbacks = self.get_service('feedback_service').list_feedback(filters)
            return json_response(success=True, data=feedbacks, meta={'total': len(feedbacks)})
        except Exception as e:
            return self.handle_exception(e)


class FeedbackStatsAPIView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            usuario_autenticado(request)
            if not is_staff(request):
                return error_response(ErrorCode.FORBIDDEN, status=403)
            params = request.GET
            for campo in ('start_date', 'end_date'):
                if not params.get(campo):
                    raise ValidationError(f"Parâmetro {campo} é obrigatório", field=campo)
            inicio = parse_datetime(params['start_date'], 'start_date')
            fim = parse_datetime(params['end_date'], 'end_date', fim_do_dia=True)
            stats = self.get_service('feedback_service').get_stats(inicio, fim)
            return json_response(success=True, data=stats)
        except Exception as e:
            return self.handle_exception(e)


class FeedbackDetailAPIView(BaseAPIView):
    def patch(self, request: HttpRequest, feedback_id: str) -> JsonResponse:
        """
        Body:
            {"status", "priority"?}
        """
        try:
            usuario_autenticado(request)
            if not is_staff(request):
                return error_response(ErrorCode.FORBIDDEN, status=403)
            data = self.parse_body(request)
            feedback = self.get_service('feedback_service').update_status(
                feedback_id,
                FeedbackStatus.from_string(data.get('status')),
                priority=FeedbackPriority.from_string(data['priority']) if data.get('priority') else None,
            )
            return json_response(success=True, data=feedback.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class HealthCheckView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        database = health_check()
        saudavel = database['status'] == 'ok'
        if saudavel:
            return json_response(success=True, data={'status': 'ok', 'database': database})
        return json_response(
            success=False,
            error={'code': ErrorCode.SERVICE_UNAVAILABLE, 'message': 'Banco de dados indisponível'},
            meta={'database': database},
            status=503,
        )

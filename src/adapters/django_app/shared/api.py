"""
Helpers das APIs JSON.

Todas as respostas seguem o envelope:
    {"success": true, "data": ...}
    {"success": false, "error": {"code": ..., "message": ...}}

Mapeamento de exceções para HTTP:
- ValidationError / JSON inválido -> 400
- AuthorizationError -> 401
- EntityNotFoundError -> 404
- BusinessRuleViolationError -> 422
- ExternalServiceError -> 502
- demais -> 500 (UNEXPECTED_ERROR)
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
import hmac
import json
import logging

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ExternalServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_response(
    success: bool,
    data: Any = None,
    error: Optional[Dict[str, Any]] = None,
    status: int = 200,
    meta: Optional[Dict[str, Any]] = None,
) -> JsonResponse:
    """Cria resposta JSON padronizada."""
    response: Dict[str, Any] = {"success": success}
    if data is not None:
        response["data"] = data
    if error is not None:
        response["error"] = error
    if meta is not None:
        response["meta"] = meta
    return JsonResponse(response, status=status)


def error_response(code: str, message: Optional[str] = None, status: int = 400, **extra) -> JsonResponse:
    return json_response(
        success=False,
        error={"code": code, "message": message or ErrorCode.mensagem_padrao(code), **extra},
        status=status,
    )


def parse_json_body(request: HttpRequest) -> Dict[str, Any]:
    """
    Raises:
        ValidationError: Corpo não é um objeto JSON
    """
    if not request.body:
        return {}
    try:
        dados = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido: {e}")
    if not isinstance(dados, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return dados


def parse_date(valor: Any, campo: str, obrigatorio: bool = False) -> Optional[date]:
    """Converte string ISO (YYYY-MM-DD) em date."""
    if valor in (None, ""):
        if obrigatorio:
            raise ValidationError(f"{campo} é obrigatório", field=campo)
        return None
    try:
        return date.fromisoformat(str(valor)[:10])
    except ValueError:
        raise ValidationError(f"Data inválida em {campo}: {valor}", field=campo)


def parse_decimal(valor: Any, campo: str) -> Decimal:
    try:
        return Decimal(str(valor))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Valor numérico inválido em {campo}", field=campo)


def parse_int(valor: Any, campo: str, padrao: Optional[int] = None) -> Optional[int]:
    if valor in (None, ""):
        return padrao
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError(f"Número inteiro inválido em {campo}", field=campo)


def get_user_id(request: HttpRequest) -> Optional[str]:
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return str(user.id)
    return None


def get_request_info(request: HttpRequest) -> Dict[str, Optional[str]]:
    """IP (considerando proxy) e user agent da requisição."""
    encaminhado = request.META.get("HTTP_X_FORWARDED_FOR", "")
    ip = encaminhado.split(",")[0].strip() if encaminhado else request.META.get("REMOTE_ADDR")
    return {"ip": ip, "user_agent": request.META.get("HTTP_USER_AGENT", "")}


def verificar_bearer(request: HttpRequest, segredo: Optional[str]) -> None:
    """
    Exige ``Authorization: Bearer <segredo>``.

    Raises:
        AuthorizationError: Segredo não configurado, header ausente ou
            token diferente
    """
    header = request.META.get("HTTP_AUTHORIZATION", "")
    if not segredo or not header.startswith("Bearer "):
        raise AuthorizationError()
    if not hmac.compare_digest(header[len("Bearer "):].encode(), segredo.encode()):
        raise AuthorizationError()


@method_decorator(csrf_exempt, name="dispatch")
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        from src.config.container import get_container
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service (ou repositório) do container pelo nome do provider."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict[str, Any]:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        if isinstance(e, ValidationError):
            return json_response(success=False, error=e.to_dict(), status=400)

        if isinstance(e, AuthorizationError):
            return json_response(success=False, error=e.to_dict(), status=401)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=e.to_dict(), status=404)

        if isinstance(e, BusinessRuleViolationError):
            return json_response(success=False, error=e.to_dict(), status=422)

        if isinstance(e, ExternalServiceError):
            logger.error(f"Falha em serviço externo: {e}")
            return json_response(success=False, error=e.to_dict(), status=502)

        if isinstance(e, DomainException):
            logger.error(f"Erro de domínio na API: {e}")
            return json_response(success=False, error=e.to_dict(), status=500)

        logger.exception(f"Erro inesperado na API: {e}")
        return error_response(ErrorCode.UNEXPECTED_ERROR, status=500)

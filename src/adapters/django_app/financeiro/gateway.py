"""
Adapters do port PaymentGateway.

- SimulatedPaymentGateway: desenvolvimento e testes. Cartão de crédito é
  aprovado na hora; boleto, PIX e transferência ficam pendentes com link
  de pagamento e são confirmados por webhook.
- HttpPaymentGateway: gateway real via API REST (requests).

``get_payment_gateway()`` escolhe pelo ``PAYMENT_GATEWAY_MODE``.
"""

from typing import Any, Dict, Optional
import logging
import uuid

import requests
from django.conf import settings

from src.core.financeiro.entities import PagamentoEntity
from src.core.financeiro.ports import ResultadoCobranca
from src.core.shared.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

STATUS_APROVADO = ("approved", "paid")
STATUS_FALHA = ("failed", "refused", "canceled")


class SimulatedPaymentGateway:
    """
    Example:
        gateway = SimulatedPaymentGateway(recusar_acima=Decimal("5000"))
        gateway.criar_cobranca(parcela, "cartao_credito", {})
    """

    def __init__(self, base_url: str = "https://pagamentos.exemplo.com", recusar_acima=None):
        self.base_url = base_url.rstrip("/")
        self.recusar_acima = recusar_acima

    def criar_cobranca(
        self, pagamento: PagamentoEntity, forma_pagamento: str, dados_cliente: Dict[str, Any]
    ) -> ResultadoCobranca:
        gateway_id = f"sim_{uuid.uuid4().hex[:16]}"

        if self.recusar_acima is not None and pagamento.valor > self.recusar_acima:
            return ResultadoCobranca(
                gateway_id=gateway_id,
                status="failed",
                mensagem="Limite do cartão excedido",
            )

        if forma_pagamento == "cartao_credito":
            logger.info(f"[GATEWAY] Cobrança {gateway_id} aprovada (simulada)")
            return ResultadoCobranca(gateway_id=gateway_id, status="approved")

        url = f"{self.base_url}/{forma_pagamento}/{gateway_id}"
        logger.info(f"[GATEWAY] Cobrança {gateway_id} pendente via {forma_pagamento} (simulada)")
        return ResultadoCobranca(
            gateway_id=gateway_id,
            status="pending",
            payment_url=url,
            dados={"due_date": pagamento.data_vencimento.isoformat()},
        )


class HttpPaymentGateway:
    """
    Cliente REST do gateway.

    POST {base_url}/charges com Bearer token. Erros de rede e respostas
    5xx viram ExternalServiceError; 4xx é recusa (status failed).
    """

    def __init__(self, base_url: str, api_key: str, timeout: int = 30, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _payload(self, pagamento: PagamentoEntity, forma_pagamento: str, dados_cliente: Dict[str, Any]) -> dict:
        return {
            "reference": pagamento.id,
            "amount": str(pagamento.valor),
            "method": forma_pagamento,
            "due_date": pagamento.data_vencimento.isoformat(),
            "description": f"Parcela {pagamento.numero_parcela}",
            "customer": dados_cliente,
        }

    def criar_cobranca(
        self, pagamento: PagamentoEntity, forma_pagamento: str, dados_cliente: Dict[str, Any]
    ) -> ResultadoCobranca:
        url = f"{self.base_url}/charges"
        try:
            logger.info(f"[GATEWAY] POST {url} (pagamento {pagamento.id})")
            response = self.session.post(
                url,
                json=self._payload(pagamento, forma_pagamento, dados_cliente),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"[GATEWAY] Falha de comunicação: {e}")
            raise ExternalServiceError("Gateway de pagamento indisponível", service="payment_gateway")

        if response.status_code >= 500:
            logger.error(f"[GATEWAY] Erro {response.status_code}: {response.text[:500]}")
            raise ExternalServiceError(
                f"Gateway de pagamento retornou erro {response.status_code}",
                service="payment_gateway",
            )

        try:
            dados = response.json()
        except ValueError:
            raise ExternalServiceError("Resposta inválida do gateway", service="payment_gateway")
        if not isinstance(dados, dict):
            logger.error(f"[GATEWAY] Resposta não é um objeto: {response.text[:500]}")
            raise ExternalServiceError("Resposta inválida do gateway", service="payment_gateway")

        if response.status_code >= 400:
            return ResultadoCobranca(
                gateway_id=str(dados.get("id", "")),
                status="failed",
                mensagem=dados.get("message") or dados.get("error") or "Cobrança recusada",
                dados=dados,
            )

        if not dados.get("id"):
            logger.error(f"[GATEWAY] Cobrança sem id (pagamento {pagamento.id}), campos: {sorted(dados)}")
            raise ExternalServiceError("Resposta inválida do gateway", service="payment_gateway")

        status = str(dados.get("status", "pending")).lower()
        if status in STATUS_APROVADO:
            status = "approved"
        elif status in STATUS_FALHA:
            status = "failed"
        else:
            status = "pending"

        return ResultadoCobranca(
            gateway_id=str(dados["id"]),
            status=status,
            payment_url=dados.get("payment_url"),
            mensagem=dados.get("message", ""),
            dados=dados,
        )


def get_payment_gateway():
    modo = getattr(settings, "PAYMENT_GATEWAY_MODE", "simulado")
    if modo == "http":
        return HttpPaymentGateway(
            base_url=settings.PAYMENT_GATEWAY_URL,
            api_key=settings.PAYMENT_GATEWAY_API_KEY,
            timeout=getattr(settings, "PAYMENT_GATEWAY_TIMEOUT", 30),
        )
    return SimulatedPaymentGateway()

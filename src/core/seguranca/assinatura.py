"""
Assinatura HMAC-SHA256 de webhooks.

A mensagem assinada é ``"{timestamp}.{json_canonico(dados)}"``, onde o
JSON canônico usa chaves ordenadas e separadores compactos. O gateway
envia a assinatura em hexadecimal e o timestamp em segundos Unix.

Webhooks com timestamp fora da janela de tolerância são recusados,
mesmo com assinatura correta (reenvio de requisição capturada).
"""

import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

TOLERANCIA_SEGUNDOS = 300


def json_canonico(dados: Dict[str, Any]) -> str:
    return json.dumps(dados, sort_keys=True, separators=(",", ":"), default=str)


def assinar_payload(segredo: str, timestamp: str, dados: Dict[str, Any]) -> str:
    mensagem = f"{timestamp}.{json_canonico(dados)}".encode("utf-8")
    return hmac.new(segredo.encode("utf-8"), mensagem, hashlib.sha256).hexdigest()


def timestamp_recente(
    timestamp: str, agora: Optional[float] = None, tolerancia: int = TOLERANCIA_SEGUNDOS
) -> bool:
    """True se ``timestamp`` (segundos Unix) está a até ``tolerancia`` de ``agora``."""
    try:
        enviado = int(timestamp)
    except (TypeError, ValueError):
        return False
    if agora is None:
        agora = time.time()
    return abs(agora - enviado) <= tolerancia


def verificar_assinatura(
    segredo: str,
    timestamp: str,
    dados: Dict[str, Any],
    assinatura: str,
    agora: Optional[float] = None,
    tolerancia: int = TOLERANCIA_SEGUNDOS,
) -> bool:
    """Compara em tempo constante; assinatura vazia ou timestamp expirado é inválido."""
    if not segredo or not assinatura:
        return False
    if not timestamp_recente(timestamp, agora, tolerancia):
        return False
    esperada = assinar_payload(segredo, timestamp, dados)
    return hmac.compare_digest(esperada, assinatura)

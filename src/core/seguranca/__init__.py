"""
Domínio de Segurança - auditoria e LGPD.

- TransactionLogger: logs de transação com mascaramento de segredos
- LGPDComplianceService: anonimização, consentimento, esquecimento
- Assinatura HMAC de webhooks
"""

from .entities import (
    ConsentRecord,
    DataPurpose,
    TransactionLogEntry,
    TransactionStatus,
    TransactionType,
)
from .ports import Encryptor, TransactionLogRepository
from .services import LGPDComplianceService, TransactionLogger

__all__ = [
    "ConsentRecord",
    "DataPurpose",
    "TransactionLogEntry",
    "TransactionStatus",
    "TransactionType",
    "Encryptor",
    "TransactionLogRepository",
    "LGPDComplianceService",
    "TransactionLogger",
]

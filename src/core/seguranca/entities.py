"""
Entidades de Segurança e Conformidade (LGPD).

- TransactionLogEntry: registro de auditoria de uma operação
- TransactionType / TransactionStatus: classificação do registro
- DataPurpose: finalidades de tratamento de dados pessoais
- ConsentRecord: consentimento do titular para uma finalidade
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from src.core.shared.exceptions import ValidationError


class TransactionType(Enum):
    PAYMENT = "payment"
    REFUND = "refund"
    CANCELLATION = "cancellation"
    WEBHOOK = "webhook"
    CREDIT_ANALYSIS = "credit_analysis"
    AUTHENTICATION = "authentication"
    DATA_ACCESS = "data_access"
    DATA_MODIFICATION = "data_modification"
    SYSTEM = "system"


class TransactionStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    CANCELLED = "cancelled"


class DataPurpose(Enum):
    """Finalidades de tratamento (art. 6º, I da LGPD)."""

    REGISTRATION = "registration"
    PAYMENT = "payment"
    COMMUNICATION = "communication"
    MARKETING = "marketing"
    ANALYTICS = "analytics"
    LEGAL = "legal"

    @classmethod
    def from_string(cls, value: str) -> "DataPurpose":
        for purpose in cls:
            if purpose.value == (value or "").strip().lower():
                return purpose
        raise ValidationError(f"Finalidade inválida: {value}", field="purpose")


@dataclass
class TransactionLogEntry:
    """
    Registro de auditoria.

    Attributes:
        transaction_id: ID do objeto da operação (pagamento, evento...)
        details: Dados livres; campos sensíveis são mascarados antes
            de persistir
    """

    transaction_type: TransactionType
    status: TransactionStatus
    details: Dict[str, Any] = field(default_factory=dict)
    transaction_id: Optional[str] = None
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "transaction_type": self.transaction_type.value,
            "status": self.status.value,
            "user_id": self.user_id,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "details": self.details,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class ConsentRecord:
    """
    Consentimento do titular.

    ``expiration`` None significa consentimento sem prazo.
    """

    user_id: str
    purpose: DataPurpose
    granted: bool
    timestamp: datetime = field(default_factory=datetime.now)
    expiration: Optional[datetime] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.user_id:
            raise ValidationError("Usuário é obrigatório", field="user_id")

    def expirado(self, agora: Optional[datetime] = None) -> bool:
        agora = agora or datetime.now()
        return self.expiration is not None and self.expiration < agora

"""
Serviços de Segurança e Conformidade.

- TransactionLogger: auditoria de operações com mascaramento de segredos
- LGPDComplianceService: anonimização, consentimento e direito ao
  esquecimento
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.academico.events import AlunoAnonimizadoEvent
from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.interfaces import UnitOfWork

from .entities import (
    ConsentRecord,
    DataPurpose,
    TransactionLogEntry,
    TransactionStatus,
    TransactionType,
)
from .ports import Encryptor, TransactionLogRepository
from .sanitizacao import anonimizar_dados, campo_sensivel, redigir_sensiveis


logger = logging.getLogger(__name__)


class TransactionLogger:
    """
    Registro de transações para auditoria.

    Os métodos ``log_*`` nunca lançam exceção: uma falha ao gravar o
    log não pode interromper a operação auditada. O retorno indica
    se o registro foi gravado.

    Example:
        logger = TransactionLogger(repo)
        logger.log_payment({"id": pagamento.id, "valor": "100.00"},
                           TransactionStatus.SUCCESS, user_id=aluno_id)
    """

    def __init__(self, repository: TransactionLogRepository):
        self.repository = repository

    def log_transaction(self, entry: TransactionLogEntry) -> Dict[str, Any]:
        entry.details = redigir_sensiveis(entry.details)
        try:
            self.repository.save(entry)
        except Exception as e:
            logger.exception(f"Erro ao registrar log de transação: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True, "id": entry.id}

    def log_payment(
        self,
        payment_data: Dict[str, Any],
        status: TransactionStatus,
        user_id: Optional[str] = None,
        request_info: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_info = request_info or {}
        return self.log_transaction(
            TransactionLogEntry(
                transaction_id=payment_data.get("id") or payment_data.get("payment_id"),
                transaction_type=TransactionType.PAYMENT,
                status=status,
                user_id=user_id,
                ip_address=request_info.get("ip"),
                user_agent=request_info.get("user_agent"),
                details=payment_data,
            )
        )

    def log_webhook(
        self,
        webhook_data: Dict[str, Any],
        status: TransactionStatus,
        request_info: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_info = request_info or {}
        return self.log_transaction(
            TransactionLogEntry(
                transaction_id=webhook_data.get("id") or webhook_data.get("event_id"),
                transaction_type=TransactionType.WEBHOOK,
                status=status,
                ip_address=request_info.get("ip"),
                user_agent=request_info.get("user_agent"),
                details=webhook_data,
            )
        )

    def log_data_access(
        self,
        resource: str,
        action: str,
        user_id: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        request_info: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_info = request_info or {}
        return self.log_transaction(
            TransactionLogEntry(
                transaction_type=TransactionType.DATA_ACCESS,
                status=TransactionStatus.SUCCESS,
                user_id=user_id,
                ip_address=request_info.get("ip"),
                user_agent=request_info.get("user_agent"),
                details={
                    "resource": resource,
                    "action": action,
                    "resource_id": resource_id,
                    **(details or {}),
                },
            )
        )

    def get_user_transaction_logs(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> Dict[str, Any]:
        try:
            registros = self.repository.list_by_user(user_id, limit=limit, offset=offset)
        except Exception as e:
            logger.exception(f"Erro ao buscar logs do usuário {user_id}: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True, "data": [r.to_dict() for r in registros]}


class LGPDComplianceService:
    """
    Conformidade com a LGPD (Lei 13.709/2018).

    Consentimentos são gravados como registros ``data_access`` com
    ``action = "consent"``; o registro mais recente para a finalidade
    prevalece.
    """

    ACAO_CONSENTIMENTO = "consent"
    ACAO_ESQUECIMENTO = "right_to_be_forgotten"

    def __init__(
        self,
        transaction_logger: TransactionLogger,
        encryptor: Optional[Encryptor] = None,
        aluno_repo=None,
        uow: Optional[UnitOfWork] = None,
    ):
        self.transaction_logger = transaction_logger
        self.encryptor = encryptor
        self.aluno_repo = aluno_repo
        self.uow = uow

    def anonymize_data(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        return anonimizar_dados(dados)

    def _campos_sensiveis(self, dados: Dict[str, Any]) -> List[str]:
        return [campo for campo in dados if campo_sensivel(campo)]

    def encrypt_sensitive_data(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        """Criptografa apenas os campos pessoais sensíveis."""
        if not self.encryptor:
            raise ValidationError("Serviço de criptografia não configurado")
        return self.encryptor.encrypt_sensitive_fields(dados, self._campos_sensiveis(dados))

    def decrypt_sensitive_data(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        if not self.encryptor:
            raise ValidationError("Serviço de criptografia não configurado")
        return self.encryptor.decrypt_sensitive_fields(dados, self._campos_sensiveis(dados))

    def register_consent(self, record: ConsentRecord) -> Dict[str, Any]:
        """Registra concessão ou revogação de consentimento."""
        return self.transaction_logger.log_transaction(
            TransactionLogEntry(
                transaction_type=TransactionType.DATA_ACCESS,
                status=TransactionStatus.SUCCESS,
                user_id=record.user_id,
                created_at=record.timestamp,
                details={
                    "action": self.ACAO_CONSENTIMENTO,
                    "purpose": record.purpose.value,
                    "granted": record.granted,
                    "timestamp": record.timestamp.isoformat(),
                    "expiration": (
                        record.expiration.isoformat() if record.expiration else None
                    ),
                    **record.details,
                },
            )
        )

    def get_consent(self, user_id: str, purpose: DataPurpose) -> Optional[ConsentRecord]:
        """Consentimento mais recente do usuário para a finalidade."""
        registros = self.transaction_logger.repository.list_by_user(
            user_id, limit=1000, transaction_type=TransactionType.DATA_ACCESS
        )
        for registro in registros:
            details = registro.details
            if details.get("action") != self.ACAO_CONSENTIMENTO:
                continue
            if details.get("purpose") != purpose.value:
                continue
            expiration = details.get("expiration")
            return ConsentRecord(
                user_id=user_id,
                purpose=purpose,
                granted=bool(details.get("granted")),
                timestamp=registro.created_at,
                expiration=datetime.fromisoformat(expiration) if expiration else None,
            )
        return None

    def has_consent(
        self, user_id: str, purpose: DataPurpose, agora: Optional[datetime] = None
    ) -> bool:
        consentimento = self.get_consent(user_id, purpose)
        if not consentimento or not consentimento.granted:
            return False
        return not consentimento.expirado(agora)

    def implement_right_to_be_forgotten(
        self, aluno_id: str, solicitado_por: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Atende solicitação de esquecimento: anonimiza o cadastro do aluno.

        Histórico financeiro é mantido (obrigação legal), apenas os dados
        pessoais do cadastro são substituídos.

        Raises:
            EntityNotFoundError: Se o aluno não existe
        """
        if self.aluno_repo is None or self.uow is None:
            raise ValidationError("Repositório de alunos não configurado")

        with self.uow:
            aluno = self.aluno_repo.get_by_id(aluno_id)
            if not aluno:
                raise EntityNotFoundError(
                    f"Aluno {aluno_id} não encontrado",
                    entity_type="Aluno",
                    entity_id=aluno_id,
                )

            anonimizados = anonimizar_dados({
                "nome": aluno.nome,
                "email": aluno.email,
                "cpf": aluno.cpf,
                "telefone": aluno.telefone,
                "endereco": aluno.endereco,
            })
            aluno.anonimizar(anonimizados)
            self.aluno_repo.save(aluno)
            self.uow.publish_event(
                AlunoAnonimizadoEvent(aggregate_id=aluno.id, motivo="direito_ao_esquecimento")
            )

        self.transaction_logger.log_transaction(
            TransactionLogEntry(
                transaction_type=TransactionType.DATA_MODIFICATION,
                status=TransactionStatus.SUCCESS,
                user_id=aluno_id,
                details={
                    "action": self.ACAO_ESQUECIMENTO,
                    "solicitado_por": solicitado_por,
                    "timestamp": datetime.now().isoformat(),
                },
            )
        )
        logger.info(f"Direito ao esquecimento atendido para aluno {aluno_id}")
        return {"success": True, "aluno_id": aluno_id, "dados": anonimizados}

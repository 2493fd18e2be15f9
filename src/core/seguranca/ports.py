"""
Ports (Interfaces) de Segurança.

- TransactionLogRepository: persistência dos registros de auditoria
- Encryptor: criptografia simétrica de campos sensíveis
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from .entities import TransactionLogEntry, TransactionType


@runtime_checkable
class TransactionLogRepository(Protocol):
    def save(self, entry: TransactionLogEntry) -> None:
        ...

    def list_by_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[TransactionLogEntry]:
        """Registros do usuário, mais recentes primeiro."""
        ...


@runtime_checkable
class Encryptor(Protocol):
    def encrypt(self, texto: str) -> str:
        ...

    def decrypt(self, cifrado: str) -> str:
        ...

    def encrypt_sensitive_fields(
        self, dados: Dict[str, Any], campos: Iterable[str]
    ) -> Dict[str, Any]:
        ...

    def decrypt_sensitive_fields(
        self, dados: Dict[str, Any], campos: Iterable[str]
    ) -> Dict[str, Any]:
        ...


class InMemoryTransactionLogRepository:
    """Implementação em memória (testes)."""

    def __init__(self):
        self.registros: List[TransactionLogEntry] = []

    def save(self, entry: TransactionLogEntry) -> None:
        self.registros.append(entry)

    def list_by_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[TransactionLogEntry]:
        registros = [r for r in self.registros if r.user_id == user_id]
        if transaction_type:
            registros = [r for r in registros if r.transaction_type == transaction_type]
        registros.sort(key=lambda r: r.created_at, reverse=True)
        return registros[offset:offset + limit]

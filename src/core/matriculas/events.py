"""
Domain Events do Domínio de Matrículas.

Cada evento carrega o necessário para o handler de notificações
montar a mensagem sem consultar novamente o banco.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from src.core.shared.events import DomainEvent


@dataclass
class MatriculaCriadaEvent(DomainEvent):
    """
    Evento: Matrícula criada.

    Handlers típicos:
    - Notificar aluno (matricula_criada)
    """

    aluno_id: str = ""
    curso_id: str = ""
    valor_total: Decimal = Decimal("0.00")
    numero_parcelas: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Matricula"


@dataclass
class MatriculaStatusAlteradoEvent(DomainEvent):
    """
    Evento: Status da matrícula mudou.

    ``notificacao`` é a chave do template (matricula_aprovada,
    matricula_rejeitada, matricula_ativada, matricula_cancelada ou
    matricula_status_alterado).
    """

    aluno_id: str = ""
    status_anterior: str = ""
    status_novo: str = ""
    observacoes: str = ""
    notificacao: str = "matricula_status_alterado"

    @property
    def aggregate_type(self) -> str:
        return "Matricula"


@dataclass
class DocumentoEnviadoEvent(DomainEvent):
    matricula_id: str = ""
    aluno_id: str = ""
    tipo: str = ""
    nome_arquivo: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Documento"


@dataclass
class DocumentoAvaliadoEvent(DomainEvent):
    matricula_id: str = ""
    aluno_id: str = ""
    tipo: str = ""
    status: str = ""
    observacoes: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Documento"


@dataclass
class ContratoGeradoEvent(DomainEvent):
    matricula_id: str = ""
    aluno_id: str = ""
    url: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Contrato"


@dataclass
class ContratoAssinadoEvent(DomainEvent):
    """Notifica aluno (contrato_assinado) e secretaria (contrato_assinado_admin)."""

    matricula_id: str = ""
    aluno_id: str = ""
    assinado_por: str = ""
    ip: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Contrato"

"""
Domain Events do Domínio Financeiro.

Eventos:
- PagamentoRegistradoEvent: parcela paga (notificação pagamento_confirmado)
- PagamentoCanceladoEvent: parcela cancelada
- PagamentoEstornadoEvent: reembolso ou chargeback
- PagamentoFalhouEvent: gateway recusou a cobrança
- PagamentoVencidoEvent: parcela passou do vencimento (payment_overdue)
- LembretePagamentoEvent: vencimento próximo (payment_reminder)
- NegociacaoCriadaEvent / NegociacaoAprovadaEvent
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class PagamentoEventBase(DomainEvent):
    matricula_id: str = ""
    numero_parcela: int = 0
    valor: Decimal = Decimal("0.00")

    @property
    def aggregate_type(self) -> str:
        return "Pagamento"


@dataclass
class PagamentoRegistradoEvent(PagamentoEventBase):
    """
    Evento: Parcela foi paga.

    Handlers típicos:
    - Notificar aluno (pagamento_confirmado)
    - Lançar receita no fluxo de caixa
    """

    data_pagamento: Optional[date] = None
    forma_pagamento: str = ""


@dataclass
class PagamentoCanceladoEvent(PagamentoEventBase):
    motivo: str = ""


@dataclass
class PagamentoEstornadoEvent(PagamentoEventBase):
    motivo: str = ""


@dataclass
class PagamentoFalhouEvent(PagamentoEventBase):
    motivo: str = ""


@dataclass
class PagamentoVencidoEvent(PagamentoEventBase):
    """Evento: parcela pendente passou do vencimento."""

    data_vencimento: Optional[date] = None
    dias_atraso: int = 0


@dataclass
class LembretePagamentoEvent(PagamentoEventBase):
    data_vencimento: Optional[date] = None
    dias_para_vencimento: int = 0


@dataclass
class NegociacaoCriadaEvent(DomainEvent):
    aluno_id: str = ""
    valor_original: Decimal = Decimal("0.00")
    valor_negociado: Decimal = Decimal("0.00")
    numero_parcelas: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Negociacao"


@dataclass
class NegociacaoAprovadaEvent(DomainEvent):
    aluno_id: str = ""
    pagamentos_cancelados: List[str] = field(default_factory=list)
    pagamentos_gerados: List[str] = field(default_factory=list)

    @property
    def aggregate_type(self) -> str:
        return "Negociacao"

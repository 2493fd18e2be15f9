"""
Ports (Interfaces) do Domínio Financeiro.

Tipos de Ports:
- Repositórios: pagamentos, descontos, negociações, splits e transações
- PaymentGateway: cobrança em gateway externo
- Cache: cache de consultas agregadas (dashboard)

Implementações em memória ficam neste módulo para uso nos testes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    DescontoEntity,
    NegociacaoEntity,
    PagamentoEntity,
    PaymentStatus,
    SplitPagamentoEntity,
    TransacaoFinanceiraEntity,
)


@runtime_checkable
class PagamentoRepository(Protocol):
    """
    Interface para persistência de pagamentos (parcelas).

    Methods:
        save / save_many: Persiste uma ou várias parcelas
        get_by_id / get_by_gateway_id: Busca unitária
        list_by_matricula: Parcelas de uma matrícula, por número
        list_by_ids: Parcelas pelos IDs informados
        list_vencidos: Pendentes com vencimento anterior a ``hoje``
        list_vencendo: Pendentes com vencimento no intervalo
        list_by_vencimento: Todas as parcelas com vencimento no intervalo
        list_pagos_entre: Pagas com data_pagamento no intervalo
    """

    def save(self, pagamento: PagamentoEntity) -> None:
        ...

    def save_many(self, pagamentos: List[PagamentoEntity]) -> None:
        ...

    def get_by_id(self, pagamento_id: str) -> Optional[PagamentoEntity]:
        ...

    def get_by_gateway_id(self, gateway_id: str) -> Optional[PagamentoEntity]:
        ...

    def list_by_matricula(self, matricula_id: str) -> List[PagamentoEntity]:
        ...

    def list_by_ids(self, pagamento_ids: List[str]) -> List[PagamentoEntity]:
        ...

    def list_by_status(self, status: PaymentStatus) -> List[PagamentoEntity]:
        ...

    def list_vencidos(self, hoje: date) -> List[PagamentoEntity]:
        ...

    def list_vencendo(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        ...

    def list_by_vencimento(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        ...

    def list_pagos_entre(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        ...


@runtime_checkable
class DescontoRepository(Protocol):
    def save(self, desconto: DescontoEntity) -> None:
        ...

    def get_by_id(self, desconto_id: str) -> Optional[DescontoEntity]:
        ...

    def get_by_codigo(self, codigo: str) -> Optional[DescontoEntity]:
        ...

    def list_all(self, apenas_ativos: bool = False) -> List[DescontoEntity]:
        ...

    def registrar_uso(self, desconto_id: str) -> bool:
        """
        Incrementa ``usos`` atomicamente, respeitando ``limite_usos``.

        Returns:
            False se o desconto não existe ou o limite já foi atingido
        """
        ...


@runtime_checkable
class NegociacaoRepository(Protocol):
    def save(self, negociacao: NegociacaoEntity) -> None:
        ...

    def get_by_id(self, negociacao_id: str) -> Optional[NegociacaoEntity]:
        ...

    def list_by_aluno(self, aluno_id: str) -> List[NegociacaoEntity]:
        ...

    def list_all(self) -> List[NegociacaoEntity]:
        ...


@runtime_checkable
class SplitPagamentoRepository(Protocol):
    def replace(self, payment_id: str, splits: List[SplitPagamentoEntity]) -> None:
        """Substitui toda a configuração de split do pagamento."""
        ...

    def list_by_payment(self, payment_id: str) -> List[SplitPagamentoEntity]:
        ...


@runtime_checkable
class TransacaoRepository(Protocol):
    def save(self, transacao: TransacaoFinanceiraEntity) -> None:
        ...

    def list_entre(self, inicio: datetime, fim: datetime) -> List[TransacaoFinanceiraEntity]:
        ...

    def list_by_reference(self, reference_id: str) -> List[TransacaoFinanceiraEntity]:
        ...


@dataclass
class ResultadoCobranca:
    """
    Resposta do gateway ao criar uma cobrança.

    Attributes:
        gateway_id: Identificador da cobrança no gateway
        status: "approved", "pending" ou "failed"
        payment_url: Link de pagamento (boleto/pix), se houver
        dados: Payload bruto retornado pelo gateway
    """

    gateway_id: str
    status: str
    payment_url: Optional[str] = None
    mensagem: str = ""
    dados: Dict[str, Any] = field(default_factory=dict)

    @property
    def aprovado(self) -> bool:
        return self.status == "approved"

    @property
    def falhou(self) -> bool:
        return self.status == "failed"


@runtime_checkable
class PaymentGateway(Protocol):
    """Port para o gateway de pagamentos."""

    def criar_cobranca(
        self, pagamento: PagamentoEntity, forma_pagamento: str, dados_cliente: Dict[str, Any]
    ) -> ResultadoCobranca:
        """
        Cria cobrança para a parcela.

        Raises:
            ExternalServiceError: Se o gateway estiver indisponível
        """
        ...


@runtime_checkable
class Cache(Protocol):
    """Port mínimo de cache usado pelos use cases."""

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        ...

    def delete_by_pattern(self, pattern: str) -> int:
        ...


# =============================================================================
# Implementações em memória (testes)
# =============================================================================

class InMemoryPagamentoRepository:
    """Implementação em memória do PagamentoRepository."""

    def __init__(self):
        self._pagamentos: Dict[str, PagamentoEntity] = {}

    def save(self, pagamento: PagamentoEntity) -> None:
        self._pagamentos[pagamento.id] = pagamento

    def save_many(self, pagamentos: List[PagamentoEntity]) -> None:
        for pagamento in pagamentos:
            self.save(pagamento)

    def get_by_id(self, pagamento_id: str) -> Optional[PagamentoEntity]:
        return self._pagamentos.get(pagamento_id)

    def get_by_gateway_id(self, gateway_id: str) -> Optional[PagamentoEntity]:
        return next(
            (p for p in self._pagamentos.values() if p.gateway_id == gateway_id),
            None,
        )

    def list_by_matricula(self, matricula_id: str) -> List[PagamentoEntity]:
        return sorted(
            (p for p in self._pagamentos.values() if p.matricula_id == matricula_id),
            key=lambda p: (p.data_vencimento, p.numero_parcela),
        )

    def list_by_ids(self, pagamento_ids: List[str]) -> List[PagamentoEntity]:
        return [self._pagamentos[i] for i in pagamento_ids if i in self._pagamentos]

    def list_by_status(self, status: PaymentStatus) -> List[PagamentoEntity]:
        return [p for p in self._pagamentos.values() if p.status == status]

    def list_vencidos(self, hoje: date) -> List[PagamentoEntity]:
        return sorted(
            (
                p for p in self._pagamentos.values()
                if p.status == PaymentStatus.PENDENTE and p.data_vencimento < hoje
            ),
            key=lambda p: p.data_vencimento,
        )

    def list_vencendo(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return [
            p for p in self.list_by_vencimento(inicio, fim)
            if p.status == PaymentStatus.PENDENTE
        ]

    def list_by_vencimento(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return sorted(
            (
                p for p in self._pagamentos.values()
                if inicio <= p.data_vencimento <= fim
            ),
            key=lambda p: p.data_vencimento,
        )

    def list_pagos_entre(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return [
            p for p in self._pagamentos.values()
            if p.status == PaymentStatus.PAGO
            and p.data_pagamento
            and inicio <= p.data_pagamento <= fim
        ]

    def list_all(self) -> List[PagamentoEntity]:
        return list(self._pagamentos.values())

    def clear(self) -> None:
        self._pagamentos.clear()


class InMemoryDescontoRepository:
    def __init__(self):
        self._descontos: Dict[str, DescontoEntity] = {}

    def save(self, desconto: DescontoEntity) -> None:
        self._descontos[desconto.id] = desconto

    def get_by_id(self, desconto_id: str) -> Optional[DescontoEntity]:
        return self._descontos.get(desconto_id)

    def get_by_codigo(self, codigo: str) -> Optional[DescontoEntity]:
        codigo = codigo.upper()
        return next((d for d in self._descontos.values() if d.codigo == codigo), None)

    def list_all(self, apenas_ativos: bool = False) -> List[DescontoEntity]:
        descontos = list(self._descontos.values())
        if apenas_ativos:
            descontos = [d for d in descontos if d.ativo]
        return descontos

    def registrar_uso(self, desconto_id: str) -> bool:
        desconto = self._descontos.get(desconto_id)
        if desconto is None:
            return False
        if desconto.limite_usos is not None and desconto.usos >= desconto.limite_usos:
            return False
        desconto.registrar_uso()
        return True


class InMemoryNegociacaoRepository:
    def __init__(self):
        self._negociacoes: Dict[str, NegociacaoEntity] = {}

    def save(self, negociacao: NegociacaoEntity) -> None:
        self._negociacoes[negociacao.id] = negociacao

    def get_by_id(self, negociacao_id: str) -> Optional[NegociacaoEntity]:
        return self._negociacoes.get(negociacao_id)

    def list_by_aluno(self, aluno_id: str) -> List[NegociacaoEntity]:
        return [n for n in self._negociacoes.values() if n.aluno_id == aluno_id]

    def list_all(self) -> List[NegociacaoEntity]:
        return list(self._negociacoes.values())


class InMemorySplitPagamentoRepository:
    def __init__(self):
        self._splits: Dict[str, List[SplitPagamentoEntity]] = {}

    def replace(self, payment_id: str, splits: List[SplitPagamentoEntity]) -> None:
        self._splits[payment_id] = list(splits)

    def list_by_payment(self, payment_id: str) -> List[SplitPagamentoEntity]:
        return list(self._splits.get(payment_id, []))


class InMemoryTransacaoRepository:
    def __init__(self):
        self._transacoes: List[TransacaoFinanceiraEntity] = []

    def save(self, transacao: TransacaoFinanceiraEntity) -> None:
        self._transacoes.append(transacao)

    def list_entre(self, inicio: datetime, fim: datetime) -> List[TransacaoFinanceiraEntity]:
        return sorted(
            (t for t in self._transacoes if inicio <= t.criado_em <= fim),
            key=lambda t: t.criado_em,
        )

    def list_by_reference(self, reference_id: str) -> List[TransacaoFinanceiraEntity]:
        return [t for t in self._transacoes if t.reference_id == reference_id]

    def list_all(self) -> List[TransacaoFinanceiraEntity]:
        return list(self._transacoes)

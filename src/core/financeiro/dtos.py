"""
Data Transfer Objects (DTOs) do Domínio Financeiro.

Valores monetários saem como string ("333.33") para não perder
centavos na serialização JSON.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .entities import (
    DescontoEntity,
    NegociacaoEntity,
    PagamentoEntity,
    SplitPagamentoEntity,
)


def _iso(valor: Optional[date]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class GerarPagamentosInputDTO:
    """
    DTO de entrada para gerar parcelas de uma matrícula.

    Attributes:
        valor_total: Valor antes do desconto
        desconto_id: Desconto opcional aplicado ao total
        curso_id: Curso da matrícula (validação do desconto)
    """

    matricula_id: str
    valor_total: Any
    numero_parcelas: int
    forma_pagamento: str
    data_primeiro_vencimento: date
    desconto_id: Optional[str] = None
    curso_id: Optional[str] = None


@dataclass(frozen=True)
class RegistrarPagamentoInputDTO:
    pagamento_id: str
    data_pagamento: Optional[date] = None
    comprovante_url: Optional[str] = None
    observacoes: Optional[str] = None


@dataclass(frozen=True)
class CancelarPagamentoInputDTO:
    pagamento_id: str
    motivo: str = ""


@dataclass(frozen=True)
class ProcessarPagamentoInputDTO:
    """
    Attributes:
        forma_pagamento: Sobrescreve a forma cadastrada na parcela
        dados_cliente: Nome, e-mail e documento enviados ao gateway
    """

    pagamento_id: str
    forma_pagamento: Optional[str] = None
    dados_cliente: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookInputDTO:
    """Payload recebido do gateway: evento, dados, timestamp e assinatura."""

    evento: str
    dados: Dict[str, Any]
    timestamp: str = ""
    assinatura: str = ""


@dataclass(frozen=True)
class CriarDescontoInputDTO:
    nome: str
    codigo: str
    tipo: str
    valor: Any
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    cursos_aplicaveis: Tuple[str, ...] = field(default_factory=tuple)
    limite_usos: Optional[int] = None
    descricao: str = ""


@dataclass(frozen=True)
class ValidarDescontoInputDTO:
    codigo: str
    valor_total: Any
    curso_id: Optional[str] = None


@dataclass(frozen=True)
class CriarNegociacaoInputDTO:
    aluno_id: str
    pagamento_ids: Tuple[str, ...]
    valor_negociado: Any
    numero_parcelas: int
    data_primeira_parcela: date
    observacoes: str = ""


@dataclass(frozen=True)
class DecidirNegociacaoInputDTO:
    negociacao_id: str
    responsavel_id: Optional[str] = None
    motivo: str = ""


@dataclass(frozen=True)
class ConfigurarSplitInputDTO:
    payment_id: str
    recipients: Tuple[Dict[str, Any], ...]


@dataclass(frozen=True)
class GerarRelatorioInputDTO:
    """
    Attributes:
        tipo: overdue, cash_flow ou projection
        formato: csv ou pdf
        inicio/fim: Período (obrigatório para cash_flow)
        meses: Horizonte da projeção
    """

    tipo: str
    formato: str = "csv"
    inicio: Optional[date] = None
    fim: Optional[date] = None
    meses: int = 6


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class PagamentoOutputDTO:
    id: str
    matricula_id: str
    numero_parcela: int
    valor: Decimal
    data_vencimento: date
    data_pagamento: Optional[date]
    status: str
    forma_pagamento: str
    gateway_id: Optional[str]
    comprovante_url: Optional[str]
    observacoes: str
    negociacao_id: Optional[str]
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: PagamentoEntity) -> "PagamentoOutputDTO":
        return cls(
            id=entity.id,
            matricula_id=entity.matricula_id,
            numero_parcela=entity.numero_parcela,
            valor=entity.valor,
            data_vencimento=entity.data_vencimento,
            data_pagamento=entity.data_pagamento,
            status=entity.status.value,
            forma_pagamento=entity.forma_pagamento.value,
            gateway_id=entity.gateway_id,
            comprovante_url=entity.comprovante_url,
            observacoes=entity.observacoes,
            negociacao_id=entity.negociacao_id,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "matricula_id": self.matricula_id,
            "numero_parcela": self.numero_parcela,
            "valor": str(self.valor),
            "data_vencimento": _iso(self.data_vencimento),
            "data_pagamento": _iso(self.data_pagamento),
            "status": self.status,
            "forma_pagamento": self.forma_pagamento,
            "gateway_id": self.gateway_id,
            "comprovante_url": self.comprovante_url,
            "observacoes": self.observacoes,
            "negociacao_id": self.negociacao_id,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class DescontoOutputDTO:
    id: str
    nome: str
    codigo: str
    descricao: str
    tipo: str
    valor: Decimal
    data_inicio: Optional[date]
    data_fim: Optional[date]
    cursos_aplicaveis: List[str]
    limite_usos: Optional[int]
    usos: int
    ativo: bool

    @classmethod
    def from_entity(cls, entity: DescontoEntity) -> "DescontoOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            codigo=entity.codigo,
            descricao=entity.descricao,
            tipo=entity.tipo.value,
            valor=entity.valor,
            data_inicio=entity.data_inicio,
            data_fim=entity.data_fim,
            cursos_aplicaveis=list(entity.cursos_aplicaveis),
            limite_usos=entity.limite_usos,
            usos=entity.usos,
            ativo=entity.ativo,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "codigo": self.codigo,
            "descricao": self.descricao,
            "tipo": self.tipo,
            "valor": str(self.valor),
            "data_inicio": _iso(self.data_inicio),
            "data_fim": _iso(self.data_fim),
            "cursos_aplicaveis": self.cursos_aplicaveis,
            "limite_usos": self.limite_usos,
            "usos": self.usos,
            "ativo": self.ativo,
        }


@dataclass
class DescontoAplicadoDTO:
    """Resultado da validação de um cupom."""

    desconto_id: str
    codigo: str
    valor_original: Decimal
    valor_com_desconto: Decimal

    @property
    def economia(self) -> Decimal:
        return self.valor_original - self.valor_com_desconto

    def to_dict(self) -> dict:
        return {
            "desconto_id": self.desconto_id,
            "codigo": self.codigo,
            "valor_original": str(self.valor_original),
            "valor_com_desconto": str(self.valor_com_desconto),
            "economia": str(self.economia),
        }


@dataclass
class NegociacaoOutputDTO:
    id: str
    aluno_id: str
    matricula_id: str
    responsavel_id: Optional[str]
    status: str
    valor_original: Decimal
    valor_negociado: Decimal
    numero_parcelas: int
    data_primeira_parcela: Optional[date]
    observacoes: str
    pagamento_ids: List[str]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: NegociacaoEntity) -> "NegociacaoOutputDTO":
        return cls(
            id=entity.id,
            aluno_id=entity.aluno_id,
            matricula_id=entity.matricula_id,
            responsavel_id=entity.responsavel_id,
            status=entity.status.value,
            valor_original=entity.valor_original,
            valor_negociado=entity.valor_negociado,
            numero_parcelas=entity.numero_parcelas,
            data_primeira_parcela=entity.data_primeira_parcela,
            observacoes=entity.observacoes,
            pagamento_ids=list(entity.pagamento_ids),
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "aluno_id": self.aluno_id,
            "matricula_id": self.matricula_id,
            "responsavel_id": self.responsavel_id,
            "status": self.status,
            "valor_original": str(self.valor_original),
            "valor_negociado": str(self.valor_negociado),
            "numero_parcelas": self.numero_parcelas,
            "data_primeira_parcela": _iso(self.data_primeira_parcela),
            "observacoes": self.observacoes,
            "pagamento_ids": self.pagamento_ids,
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class SplitOutputDTO:
    recipient_id: str
    recipient_type: str
    amount: Decimal
    percentage: Optional[Decimal]
    status: str

    @classmethod
    def from_entity(cls, entity: SplitPagamentoEntity) -> "SplitOutputDTO":
        return cls(
            recipient_id=entity.recipient_id,
            recipient_type=entity.recipient_type,
            amount=entity.amount,
            percentage=entity.percentage,
            status=entity.status.value,
        )

    def to_dict(self) -> dict:
        return {
            "recipient_id": self.recipient_id,
            "recipient_type": self.recipient_type,
            "amount": str(self.amount),
            "percentage": str(self.percentage) if self.percentage is not None else None,
            "status": self.status,
        }


@dataclass
class ProcessamentoOutputDTO:
    """Resultado de ProcessarPagamento."""

    pagamento: PagamentoOutputDTO
    gateway_id: str
    gateway_status: str
    payment_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "pagamento": self.pagamento.to_dict(),
            "gateway_id": self.gateway_id,
            "gateway_status": self.gateway_status,
            "payment_url": self.payment_url,
        }


@dataclass
class RelatorioDTO:
    """
    Relatório tabular independente de formato.

    Os adapters convertem para CSV ou PDF.

    Attributes:
        resumo: Pares (métrica, valor) exibidos antes da tabela
    """

    tipo: str
    titulo: str
    colunas: List[str]
    linhas: List[List[Any]]
    resumo: List[Tuple[str, Any]] = field(default_factory=list)
    gerado_em: datetime = field(default_factory=datetime.now)

    @property
    def nome_arquivo_base(self) -> str:
        return f"relatorio_{self.tipo}_{self.gerado_em.strftime('%Y%m%d_%H%M%S')}"

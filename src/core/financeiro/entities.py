"""
Entidades do Domínio Financeiro.

Entidades:
- PagamentoEntity: parcela de uma matrícula
- DescontoEntity: cupom de desconto (percentual ou valor fixo)
- NegociacaoEntity: renegociação de parcelas em aberto
- SplitPagamentoEntity: parte de um pagamento destinada a um recebedor
- TransacaoFinanceiraEntity: lançamento de receita, despesa ou estorno

Regras de Negócio Encapsuladas:
- Pagamento já pago não pode ser pago nem cancelado novamente
- Cancelamento é idempotente
- Transições de status de negociação controladas
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ErrorCode,
    ValidationError,
)

from .calculos import aplicar_desconto, para_decimal


class _EnumPorValor(Enum):
    """Enum cuja conversão a partir de string usa o valor."""

    @classmethod
    def from_string(cls, value: str):
        for membro in cls:
            if membro.value == (value or "").strip().lower():
                return membro
        raise ValidationError(
            f"{cls.__name__} inválido: {value}", field=cls._campo()
        )

    @classmethod
    def _campo(cls) -> str:
        return "status"

    @classmethod
    def valores(cls) -> List[str]:
        return [m.value for m in cls]


class PaymentStatus(_EnumPorValor):
    """
    Estados de um pagamento.

    Fluxo:
        pendente → pago → reembolsado
        pendente → atrasado → pago
        pendente/atrasado → cancelado
    """

    PENDENTE = "pendente"
    PAGO = "pago"
    ATRASADO = "atrasado"
    CANCELADO = "cancelado"
    REEMBOLSADO = "reembolsado"


class FormaPagamento(_EnumPorValor):
    CARTAO_CREDITO = "cartao_credito"
    BOLETO = "boleto"
    PIX = "pix"
    TRANSFERENCIA = "transferencia"

    @classmethod
    def from_string(cls, value: str) -> "FormaPagamento":
        for membro in cls:
            if membro.value == (value or "").strip().lower():
                return membro
        raise BusinessRuleViolationError(
            f"Método de pagamento inválido: {value}",
            rule="forma_pagamento",
            code=ErrorCode.INVALID_PAYMENT_METHOD,
        )


class TipoDesconto(_EnumPorValor):
    PERCENTUAL = "percentual"
    VALOR_FIXO = "valor_fixo"

    @classmethod
    def _campo(cls) -> str:
        return "tipo"


class NegociacaoStatus(_EnumPorValor):
    """
    Estados de uma negociação.

    Fluxo:
        pendente → aprovada → concluida
        pendente → rejeitada / cancelada
        aprovada → cancelada
    """

    PENDENTE = "pendente"
    APROVADA = "aprovada"
    REJEITADA = "rejeitada"
    CANCELADA = "cancelada"
    CONCLUIDA = "concluida"


class TipoTransacao(_EnumPorValor):
    INCOME = "income"
    EXPENSE = "expense"
    REFUND = "refund"

    @classmethod
    def _campo(cls) -> str:
        return "type"


@dataclass
class PagamentoEntity:
    """
    Entidade de Domínio: Pagamento (parcela).

    Invariantes:
    - numero_parcela >= 1
    - valor > 0
    - Pagamento pago não volta a pendente (apenas estorno)

    Example:
        parcela = PagamentoEntity.criar(
            matricula_id="m1",
            numero_parcela=1,
            valor=Decimal("333.33"),
            data_vencimento=date(2024, 2, 10),
            forma_pagamento=FormaPagamento.BOLETO,
        )
        parcela.registrar_pagamento(date(2024, 2, 9))
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    matricula_id: str = ""
    numero_parcela: int = 1
    valor: Decimal = Decimal("0.00")
    data_vencimento: Optional[date] = None
    data_pagamento: Optional[date] = None
    status: PaymentStatus = PaymentStatus.PENDENTE
    forma_pagamento: FormaPagamento = FormaPagamento.BOLETO
    gateway_id: Optional[str] = None
    gateway_data: Dict[str, Any] = field(default_factory=dict)
    comprovante_url: Optional[str] = None
    observacoes: str = ""
    negociacao_id: Optional[str] = None

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls,
        matricula_id: str,
        numero_parcela: int,
        valor,
        data_vencimento: date,
        forma_pagamento: FormaPagamento = FormaPagamento.BOLETO,
        negociacao_id: Optional[str] = None,
    ) -> "PagamentoEntity":
        """
        Factory method para criar parcela pendente.

        Raises:
            ValidationError: Se dados inválidos
        """
        if not matricula_id:
            raise ValidationError("Matrícula é obrigatória", field="matricula_id")
        if numero_parcela < 1:
            raise ValidationError(
                "Número da parcela deve ser maior que zero", field="numero_parcela"
            )
        valor = para_decimal(valor)
        if valor <= 0:
            raise ValidationError("Valor deve ser positivo", field="valor")
        if not data_vencimento:
            raise ValidationError(
                "Data de vencimento é obrigatória", field="data_vencimento"
            )

        return cls(
            matricula_id=matricula_id,
            numero_parcela=numero_parcela,
            valor=valor,
            data_vencimento=data_vencimento,
            forma_pagamento=forma_pagamento,
            negociacao_id=negociacao_id,
        )

    def registrar_pagamento(
        self,
        data_pagamento: Optional[date] = None,
        comprovante_url: Optional[str] = None,
        observacoes: Optional[str] = None,
    ) -> None:
        """
        Registra o pagamento da parcela.

        Raises:
            BusinessRuleViolationError: ALREADY_PAID se já pago,
                INVALID_STATUS se cancelado ou reembolsado
        """
        if self.status == PaymentStatus.PAGO:
            raise BusinessRuleViolationError(
                "Este pagamento já foi registrado",
                rule="pagamento_ja_pago",
                code=ErrorCode.ALREADY_PAID,
            )
        if self.status in (PaymentStatus.CANCELADO, PaymentStatus.REEMBOLSADO):
            raise BusinessRuleViolationError(
                f"Não é possível registrar pagamento com status {self.status.value}",
                rule="pagamento_status_invalido",
                code=ErrorCode.INVALID_STATUS,
            )

        self.status = PaymentStatus.PAGO
        self.data_pagamento = data_pagamento or date.today()
        if comprovante_url:
            self.comprovante_url = comprovante_url
        if observacoes:
            self.observacoes = observacoes
        self._atualizar_timestamp()

    def cancelar(self, motivo: str = "") -> bool:
        """
        Cancela a parcela.

        Idempotente: cancelar parcela já cancelada não altera nada.

        Returns:
            True se houve mudança de status, False se já estava cancelada

        Raises:
            BusinessRuleViolationError: INVALID_STATUS se pago ou reembolsado
        """
        if self.status == PaymentStatus.CANCELADO:
            return False
        if self.status in (PaymentStatus.PAGO, PaymentStatus.REEMBOLSADO):
            raise BusinessRuleViolationError(
                "Não é possível cancelar um pagamento já realizado",
                rule="cancelar_pagamento_pago",
                code=ErrorCode.INVALID_STATUS,
            )

        self.status = PaymentStatus.CANCELADO
        if motivo:
            self.observacoes = motivo
        self._atualizar_timestamp()
        return True

    def marcar_atrasado(self, hoje: Optional[date] = None) -> bool:
        """
        Marca como atrasado se pendente e vencido.

        Returns:
            True se o status mudou
        """
        hoje = hoje or date.today()
        if self.status != PaymentStatus.PENDENTE:
            return False
        if not self.data_vencimento or self.data_vencimento >= hoje:
            return False
        self.status = PaymentStatus.ATRASADO
        self._atualizar_timestamp()
        return True

    def estornar(self, motivo: str = "") -> None:
        """Estorna pagamento realizado (reembolso ou chargeback)."""
        if self.status != PaymentStatus.PAGO:
            raise BusinessRuleViolationError(
                "Apenas pagamentos realizados podem ser estornados",
                rule="estorno_sem_pagamento",
                code=ErrorCode.INVALID_STATUS,
            )
        self.status = PaymentStatus.REEMBOLSADO
        if motivo:
            self.observacoes = motivo
        self._atualizar_timestamp()

    def expirar_boleto(self) -> bool:
        """Boleto expirado no gateway: parcela em aberto vira atrasada."""
        if not self.em_aberto:
            return False
        self.status = PaymentStatus.ATRASADO
        self.observacoes = "Boleto expirado"
        self._atualizar_timestamp()
        return True

    def registrar_falha(self, motivo: str) -> None:
        """Falha no gateway: mantém pendente e guarda o motivo."""
        self.observacoes = f"Falha no pagamento: {motivo}"
        self._atualizar_timestamp()

    def vincular_gateway(self, gateway_id: str, dados: Optional[dict] = None) -> None:
        self.gateway_id = gateway_id
        self.gateway_data = {**self.gateway_data, **(dados or {})}
        self._atualizar_timestamp()

    def dias_atraso(self, hoje: Optional[date] = None) -> int:
        hoje = hoje or date.today()
        if not self.data_vencimento or self.data_vencimento >= hoje:
            return 0
        return (hoje - self.data_vencimento).days

    @property
    def em_aberto(self) -> bool:
        return self.status in (PaymentStatus.PENDENTE, PaymentStatus.ATRASADO)

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    def __repr__(self) -> str:
        return (
            f"PagamentoEntity(id={self.id[:8]}..., parcela={self.numero_parcela}, "
            f"valor={self.valor}, status={self.status.value})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PagamentoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class DescontoEntity:
    """
    Entidade de Domínio: Desconto.

    Attributes:
        codigo: Código promocional em maiúsculas
        tipo: percentual ou valor_fixo
        valor: Percentual (0-100] ou valor absoluto
        cursos_aplicaveis: IDs de cursos (vazio = todos)
        limite_usos: Máximo de aplicações (None = ilimitado)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    codigo: str = ""
    descricao: str = ""
    tipo: TipoDesconto = TipoDesconto.PERCENTUAL
    valor: Decimal = Decimal("0.00")
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    cursos_aplicaveis: List[str] = field(default_factory=list)
    limite_usos: Optional[int] = None
    usos: int = 0
    ativo: bool = True

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls,
        nome: str,
        codigo: str,
        tipo: TipoDesconto,
        valor,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        cursos_aplicaveis: Optional[List[str]] = None,
        limite_usos: Optional[int] = None,
        descricao: str = "",
    ) -> "DescontoEntity":
        if not nome or len(nome.strip()) < 3:
            raise ValidationError(
                "Nome deve ter pelo menos 3 caracteres", field="nome"
            )
        if not codigo or len(codigo.strip()) < 3:
            raise ValidationError(
                "Código deve ter pelo menos 3 caracteres", field="codigo"
            )
        valor = para_decimal(valor)
        if valor <= 0:
            raise ValidationError("Valor deve ser positivo", field="valor")
        if tipo == TipoDesconto.PERCENTUAL and valor > 100:
            raise ValidationError(
                "Desconto percentual não pode exceder 100%", field="valor"
            )
        if data_inicio and data_fim and data_fim < data_inicio:
            raise ValidationError(
                "Data final deve ser posterior à data inicial", field="data_fim"
            )
        if limite_usos is not None and limite_usos < 1:
            raise ValidationError(
                "Limite de usos deve ser maior que zero", field="limite_usos"
            )

        return cls(
            nome=nome.strip(),
            codigo=codigo.strip().upper(),
            descricao=(descricao or "").strip(),
            tipo=tipo,
            valor=valor,
            data_inicio=data_inicio,
            data_fim=data_fim,
            cursos_aplicaveis=list(cursos_aplicaveis or []),
            limite_usos=limite_usos,
        )

    def aplicar(self, total) -> Decimal:
        """Retorna o total com desconto, arredondado em centavos."""
        return aplicar_desconto(total, self.tipo.value, self.valor)

    def validar_uso(self, curso_id: Optional[str] = None, hoje: Optional[date] = None) -> None:
        """
        Verifica se o desconto pode ser usado.

        Raises:
            BusinessRuleViolationError: INVALID_DISCOUNT se inativo, fora do
                período, não aplicável ao curso ou com limite esgotado
        """
        hoje = hoje or date.today()
        motivo = None
        if not self.ativo:
            motivo = "Desconto inativo"
        elif self.data_inicio and hoje < self.data_inicio:
            motivo = "Desconto ainda não está vigente"
        elif self.data_fim and hoje > self.data_fim:
            motivo = "Desconto expirado"
        elif curso_id and self.cursos_aplicaveis and curso_id not in self.cursos_aplicaveis:
            motivo = "Desconto não aplicável a este curso"
        elif self.limite_usos is not None and self.usos >= self.limite_usos:
            motivo = "Limite de usos do desconto atingido"

        if motivo:
            raise BusinessRuleViolationError(
                motivo, rule="desconto_invalido", code=ErrorCode.INVALID_DISCOUNT
            )

    def registrar_uso(self) -> None:
        self.usos += 1
        self.atualizado_em = datetime.now()

    def desativar(self) -> None:
        self.ativo = False
        self.atualizado_em = datetime.now()


@dataclass
class NegociacaoEntity:
    """
    Entidade de Domínio: Negociação de débitos.

    Agrupa parcelas em aberto de um aluno e propõe novo valor
    e número de parcelas. Ao ser aprovada, as parcelas originais
    são canceladas e novas parcelas são geradas.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aluno_id: str = ""
    matricula_id: str = ""
    responsavel_id: Optional[str] = None
    status: NegociacaoStatus = NegociacaoStatus.PENDENTE
    valor_original: Decimal = Decimal("0.00")
    valor_negociado: Decimal = Decimal("0.00")
    numero_parcelas: int = 1
    data_primeira_parcela: Optional[date] = None
    observacoes: str = ""
    pagamento_ids: List[str] = field(default_factory=list)

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    TRANSICOES = {
        NegociacaoStatus.PENDENTE: (
            NegociacaoStatus.APROVADA,
            NegociacaoStatus.REJEITADA,
            NegociacaoStatus.CANCELADA,
        ),
        NegociacaoStatus.APROVADA: (
            NegociacaoStatus.CONCLUIDA,
            NegociacaoStatus.CANCELADA,
        ),
        NegociacaoStatus.REJEITADA: (),
        NegociacaoStatus.CANCELADA: (),
        NegociacaoStatus.CONCLUIDA: (),
    }

    @classmethod
    def criar(
        cls,
        aluno_id: str,
        matricula_id: str,
        pagamentos: List[PagamentoEntity],
        valor_negociado,
        numero_parcelas: int,
        data_primeira_parcela: date,
        observacoes: str = "",
    ) -> "NegociacaoEntity":
        """
        Cria negociação a partir de parcelas em aberto.

        Raises:
            ValidationError: Dados numéricos inválidos
            BusinessRuleViolationError: INVALID_NEGOTIATION se alguma
                parcela não estiver em aberto
        """
        if not aluno_id:
            raise ValidationError("Aluno é obrigatório", field="aluno_id")
        if not pagamentos:
            raise BusinessRuleViolationError(
                "Selecione ao menos uma parcela para negociar",
                rule="negociacao_sem_parcelas",
                code=ErrorCode.INVALID_NEGOTIATION,
            )
        fechadas = [p for p in pagamentos if not p.em_aberto]
        if fechadas:
            raise BusinessRuleViolationError(
                "Apenas parcelas pendentes ou atrasadas podem ser negociadas",
                rule="negociacao_parcela_fechada",
                code=ErrorCode.INVALID_NEGOTIATION,
            )
        valor_negociado = para_decimal(valor_negociado, "valor_negociado")
        if valor_negociado <= 0:
            raise ValidationError(
                "Valor negociado deve ser positivo", field="valor_negociado"
            )
        if numero_parcelas < 1:
            raise ValidationError(
                "Número de parcelas deve ser maior que zero", field="numero_parcelas"
            )
        if not data_primeira_parcela:
            raise ValidationError(
                "Data da primeira parcela é obrigatória",
                field="data_primeira_parcela",
            )

        return cls(
            aluno_id=aluno_id,
            matricula_id=matricula_id,
            valor_original=sum((p.valor for p in pagamentos), Decimal("0.00")),
            valor_negociado=valor_negociado,
            numero_parcelas=numero_parcelas,
            data_primeira_parcela=data_primeira_parcela,
            observacoes=(observacoes or "").strip(),
            pagamento_ids=[p.id for p in pagamentos],
        )

    def _transicionar(self, novo_status: NegociacaoStatus) -> None:
        if novo_status not in self.TRANSICOES[self.status]:
            raise BusinessRuleViolationError(
                f"Transição inválida: {self.status.value} → {novo_status.value}",
                rule="negociacao_transicao",
                code=ErrorCode.INVALID_NEGOTIATION,
            )
        self.status = novo_status
        self.atualizado_em = datetime.now()

    def aprovar(self, responsavel_id: Optional[str] = None) -> None:
        self._transicionar(NegociacaoStatus.APROVADA)
        self.responsavel_id = responsavel_id

    def rejeitar(self, responsavel_id: Optional[str] = None, motivo: str = "") -> None:
        self._transicionar(NegociacaoStatus.REJEITADA)
        self.responsavel_id = responsavel_id
        if motivo:
            self.observacoes = motivo

    def cancelar(self, motivo: str = "") -> None:
        self._transicionar(NegociacaoStatus.CANCELADA)
        if motivo:
            self.observacoes = motivo

    def concluir(self) -> None:
        self._transicionar(NegociacaoStatus.CONCLUIDA)

    @property
    def desconto_concedido(self) -> Decimal:
        return max(Decimal("0.00"), self.valor_original - self.valor_negociado)


@dataclass
class SplitPagamentoEntity:
    """Parte de um pagamento destinada a um recebedor (polo, parceiro)."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    payment_id: str = ""
    recipient_id: str = ""
    recipient_type: str = ""
    amount: Decimal = Decimal("0.00")
    percentage: Optional[Decimal] = None
    status: PaymentStatus = PaymentStatus.PENDENTE
    criado_em: datetime = field(default_factory=datetime.now)


@dataclass
class TransacaoFinanceiraEntity:
    """
    Lançamento financeiro (fluxo de caixa).

    Attributes:
        reference_id: ID do objeto de origem (ex: pagamento)
        reference_type: Tipo do objeto de origem (ex: "payment")
        type: income, expense ou refund
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    reference_id: str = ""
    reference_type: str = "payment"
    amount: Decimal = Decimal("0.00")
    type: TipoTransacao = TipoTransacao.INCOME
    status: str = "completed"
    payment_method: Optional[str] = None
    description: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    criado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def de_pagamento(
        cls, pagamento: PagamentoEntity, tipo: TipoTransacao = TipoTransacao.INCOME
    ) -> "TransacaoFinanceiraEntity":
        return cls(
            reference_id=pagamento.id,
            reference_type="payment",
            amount=pagamento.valor,
            type=tipo,
            payment_method=pagamento.forma_pagamento.value,
            description=f"Parcela {pagamento.numero_parcela}",
            metadata={
                "matricula_id": pagamento.matricula_id,
                "numero_parcela": pagamento.numero_parcela,
            },
        )

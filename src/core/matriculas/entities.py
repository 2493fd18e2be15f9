"""
Entidades do Domínio de Matrículas.

Entidades:
- MatriculaEntity: vínculo aluno × curso com condições financeiras
- DocumentoEntity: documento enviado para análise da secretaria
- ContratoEntity: contrato de matrícula (PDF) e sua assinatura

Regras de Negócio Encapsuladas:
- Transições de status da matrícula controladas por mapa
- Histórico de status gravado em metadata["status_history"]
- Documento só aceita status pendente, aprovado ou rejeitado
- Contrato assinado não pode ser assinado novamente
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from src.core.financeiro.calculos import para_decimal
from src.core.financeiro.entities import FormaPagamento
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ErrorCode,
    ValidationError,
)


class MatriculaStatus(Enum):
    """
    Estados de uma matrícula.

    Fluxo:
        pendente → aprovado → ativo → concluido
        ativo ⇄ trancado
        pendente/aprovado → rejeitado → pendente
        qualquer estado não terminal → cancelado
    """

    PENDENTE = "pendente"
    APROVADO = "aprovado"
    REJEITADO = "rejeitado"
    ATIVO = "ativo"
    TRANCADO = "trancado"
    CANCELADO = "cancelado"
    CONCLUIDO = "concluido"

    @classmethod
    def from_string(cls, value: str) -> "MatriculaStatus":
        for status in cls:
            if status.value == (value or "").strip().lower():
                return status
        raise ValidationError(f"Status de matrícula inválido: {value}", field="status")


class TipoDocumento(Enum):
    RG = "rg"
    CPF = "cpf"
    COMPROVANTE_RESIDENCIA = "comprovante_residencia"
    HISTORICO_ESCOLAR = "historico_escolar"
    DIPLOMA = "diploma"
    FOTO = "foto"
    OUTRO = "outro"

    @classmethod
    def from_string(cls, value: str) -> "TipoDocumento":
        for tipo in cls:
            if tipo.value == (value or "").strip().lower():
                return tipo
        raise ValidationError(f"Tipo de documento inválido: {value}", field="tipo")


class DocumentoStatus(Enum):
    PENDENTE = "pendente"
    APROVADO = "aprovado"
    REJEITADO = "rejeitado"

    @classmethod
    def from_string(cls, value: str) -> "DocumentoStatus":
        """
        Raises:
            ValidationError: Para qualquer valor fora de
                pendente, aprovado e rejeitado
        """
        for status in cls:
            if status.value == (value or "").strip().lower():
                return status
        raise ValidationError(
            f"Status de documento inválido: {value}. "
            f"Use pendente, aprovado ou rejeitado",
            field="status",
        )


class ContratoStatus(Enum):
    PENDENTE = "pendente"
    ASSINADO = "assinado"
    REJEITADO = "rejeitado"


@dataclass
class MatriculaEntity:
    """
    Entidade de Domínio: Matrícula.

    Invariantes:
    - Aluno e curso obrigatórios
    - valor_total > 0 e numero_parcelas >= 1
    - data_termino, se informada, não é anterior a data_inicio
    - Mudanças de status seguem TRANSICOES

    Example:
        matricula = MatriculaEntity.criar(
            aluno_id="a1",
            curso_id="c1",
            data_inicio=date(2024, 2, 1),
            valor_total=Decimal("1000"),
            forma_pagamento=FormaPagamento.BOLETO,
            numero_parcelas=3,
        )
        matricula.alterar_status(MatriculaStatus.APROVADO, "Documentos ok")
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aluno_id: str = ""
    curso_id: str = ""
    status: MatriculaStatus = MatriculaStatus.PENDENTE
    data_inicio: Optional[date] = None
    data_termino: Optional[date] = None
    valor_total: Decimal = Decimal("0.00")
    valor_com_desconto: Optional[Decimal] = None
    desconto_id: Optional[str] = None
    forma_pagamento: FormaPagamento = FormaPagamento.BOLETO
    numero_parcelas: int = 1
    observacoes: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    TRANSICOES = {
        MatriculaStatus.PENDENTE: (
            MatriculaStatus.APROVADO,
            MatriculaStatus.REJEITADO,
            MatriculaStatus.CANCELADO,
        ),
        MatriculaStatus.APROVADO: (
            MatriculaStatus.ATIVO,
            MatriculaStatus.REJEITADO,
            MatriculaStatus.CANCELADO,
        ),
        MatriculaStatus.ATIVO: (
            MatriculaStatus.TRANCADO,
            MatriculaStatus.CANCELADO,
            MatriculaStatus.CONCLUIDO,
        ),
        MatriculaStatus.TRANCADO: (
            MatriculaStatus.ATIVO,
            MatriculaStatus.CANCELADO,
        ),
        MatriculaStatus.REJEITADO: (MatriculaStatus.PENDENTE,),
        MatriculaStatus.CANCELADO: (),
        MatriculaStatus.CONCLUIDO: (),
    }

    @classmethod
    def criar(
        cls,
        aluno_id: str,
        curso_id: str,
        data_inicio: date,
        valor_total,
        forma_pagamento: FormaPagamento,
        numero_parcelas: int,
        data_termino: Optional[date] = None,
        desconto_id: Optional[str] = None,
        valor_com_desconto=None,
        observacoes: str = "",
    ) -> "MatriculaEntity":
        """
        Factory method para criar matrícula pendente.

        Raises:
            ValidationError: Se dados inválidos
        """
        if not aluno_id:
            raise ValidationError("Aluno é obrigatório", field="aluno_id")
        if not curso_id:
            raise ValidationError("Curso é obrigatório", field="curso_id")
        if not data_inicio:
            raise ValidationError("Data de início é obrigatória", field="data_inicio")
        if data_termino and data_termino < data_inicio:
            raise ValidationError(
                "Data de término deve ser posterior à data de início",
                field="data_termino",
            )
        valor_total = para_decimal(valor_total, "valor_total")
        if valor_total <= 0:
            raise ValidationError("Valor total deve ser positivo", field="valor_total")
        if numero_parcelas < 1:
            raise ValidationError(
                "Número de parcelas deve ser maior que zero", field="numero_parcelas"
            )

        return cls(
            aluno_id=aluno_id,
            curso_id=curso_id,
            data_inicio=data_inicio,
            data_termino=data_termino,
            valor_total=valor_total,
            valor_com_desconto=(
                para_decimal(valor_com_desconto, "valor_com_desconto")
                if valor_com_desconto is not None
                else None
            ),
            desconto_id=desconto_id,
            forma_pagamento=forma_pagamento,
            numero_parcelas=numero_parcelas,
            observacoes=(observacoes or "").strip(),
            metadata={"status_history": []},
        )

    def pode_transicionar_para(self, novo_status: MatriculaStatus) -> bool:
        return novo_status in self.TRANSICOES[self.status]

    def alterar_status(
        self,
        novo_status: MatriculaStatus,
        observacoes: str = "",
        agora: Optional[datetime] = None,
    ) -> MatriculaStatus:
        """
        Altera status registrando a transição no histórico.

        Returns:
            Status anterior

        Raises:
            BusinessRuleViolationError: INVALID_STATUS se a transição
                não for permitida
        """
        if not self.pode_transicionar_para(novo_status):
            raise BusinessRuleViolationError(
                f"Transição inválida: {self.status.value} → {novo_status.value}",
                rule="matricula_transicao",
                code=ErrorCode.INVALID_STATUS,
            )

        anterior = self.status
        agora = agora or datetime.now()
        self.metadata.setdefault("status_history", []).append({
            "from": anterior.value,
            "to": novo_status.value,
            "date": agora.isoformat(),
            "observacoes": observacoes or "",
        })
        self.status = novo_status
        self.atualizado_em = agora
        return anterior

    def definir_condicoes_pagamento(
        self,
        forma_pagamento: FormaPagamento,
        numero_parcelas: int,
        valor_total,
        valor_com_desconto,
        desconto_id: Optional[str] = None,
    ) -> None:
        self.forma_pagamento = forma_pagamento
        self.numero_parcelas = numero_parcelas
        self.valor_total = para_decimal(valor_total, "valor_total")
        self.valor_com_desconto = para_decimal(valor_com_desconto, "valor_com_desconto")
        self.desconto_id = desconto_id
        self.atualizado_em = datetime.now()

    @property
    def historico_status(self) -> List[Dict[str, Any]]:
        return list(self.metadata.get("status_history", []))

    @property
    def valor_final(self) -> Decimal:
        """Valor efetivamente cobrado (com desconto, quando houver)."""
        if self.valor_com_desconto is not None:
            return self.valor_com_desconto
        return self.valor_total

    def __repr__(self) -> str:
        return (
            f"MatriculaEntity(id={self.id[:8]}..., aluno={self.aluno_id[:8]}, "
            f"status={self.status.value})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatriculaEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class DocumentoEntity:
    """
    Entidade de Domínio: Documento da matrícula.

    Enviado com status pendente; avaliado pela secretaria.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    matricula_id: str = ""
    tipo: TipoDocumento = TipoDocumento.OUTRO
    nome_arquivo: str = ""
    url: str = ""
    status: DocumentoStatus = DocumentoStatus.PENDENTE
    observacoes: str = ""
    avaliado_por: Optional[str] = None
    avaliado_em: Optional[datetime] = None

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls, matricula_id: str, tipo: TipoDocumento, nome_arquivo: str, url: str
    ) -> "DocumentoEntity":
        if not matricula_id:
            raise ValidationError("Matrícula é obrigatória", field="matricula_id")
        if not nome_arquivo or not nome_arquivo.strip():
            raise ValidationError("Nome do arquivo é obrigatório", field="nome_arquivo")
        return cls(
            matricula_id=matricula_id,
            tipo=tipo,
            nome_arquivo=nome_arquivo.strip(),
            url=url,
        )

    def avaliar(
        self,
        status: DocumentoStatus,
        observacoes: str = "",
        avaliado_por: Optional[str] = None,
    ) -> DocumentoStatus:
        """Registra avaliação; retorna o status anterior."""
        anterior = self.status
        self.status = status
        self.observacoes = (observacoes or "").strip()
        self.avaliado_por = avaliado_por
        self.avaliado_em = datetime.now()
        self.atualizado_em = self.avaliado_em
        return anterior


@dataclass
class ContratoEntity:
    """
    Entidade de Domínio: Contrato de matrícula.

    Attributes:
        assinatura_metadata: ip, user_agent e timestamp da assinatura
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    matricula_id: str = ""
    titulo: str = ""
    versao: str = "1.0"
    url: str = ""
    status: ContratoStatus = ContratoStatus.PENDENTE
    data_assinatura: Optional[datetime] = None
    assinado_por: Optional[str] = None
    assinatura_metadata: Dict[str, Any] = field(default_factory=dict)

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(cls, matricula_id: str, nome_curso: str, url: str) -> "ContratoEntity":
        if not matricula_id:
            raise ValidationError("Matrícula é obrigatória", field="matricula_id")
        return cls(
            matricula_id=matricula_id,
            titulo=f"Contrato de Matrícula - {nome_curso}",
            url=url,
        )

    @property
    def assinado(self) -> bool:
        return self.status == ContratoStatus.ASSINADO

    def assinar(
        self,
        assinado_por: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        agora: Optional[datetime] = None,
    ) -> None:
        """
        Raises:
            BusinessRuleViolationError: ALREADY_SIGNED se já assinado
        """
        if self.assinado:
            raise BusinessRuleViolationError(
                "Este contrato já foi assinado",
                rule="contrato_ja_assinado",
                code=ErrorCode.ALREADY_SIGNED,
            )
        if not assinado_por:
            raise ValidationError("Assinante é obrigatório", field="assinado_por")

        agora = agora or datetime.now()
        self.status = ContratoStatus.ASSINADO
        self.assinado_por = assinado_por
        self.data_assinatura = agora
        self.assinatura_metadata = {
            "ip": ip,
            "user_agent": user_agent,
            "timestamp": agora.isoformat(),
        }
        self.atualizado_em = agora

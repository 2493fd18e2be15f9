"""
Data Transfer Objects (DTOs) do Domínio de Matrículas.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .entities import ContratoEntity, DocumentoEntity, MatriculaEntity


def _iso(valor) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarMatriculaInputDTO:
    """
    DTO de entrada para criar matrícula.

    Attributes:
        data_primeiro_vencimento: Padrão é a data de início
        desconto_id: Desconto opcional validado contra o curso
    """

    aluno_id: str
    curso_id: str
    data_inicio: date
    valor_total: Any
    forma_pagamento: str
    numero_parcelas: int
    data_termino: Optional[date] = None
    data_primeiro_vencimento: Optional[date] = None
    desconto_id: Optional[str] = None
    observacoes: str = ""


@dataclass(frozen=True)
class AtualizarStatusMatriculaInputDTO:
    matricula_id: str
    status: str
    observacoes: str = ""


@dataclass(frozen=True)
class ListarMatriculasQueryDTO:
    aluno_id: Optional[str] = None
    curso_id: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class EnviarDocumentoInputDTO:
    """
    Attributes:
        conteudo: Bytes do arquivo enviado
    """

    matricula_id: str
    tipo: str
    nome_arquivo: str
    conteudo: bytes


@dataclass(frozen=True)
class AvaliarDocumentoInputDTO:
    documento_id: str
    status: str
    observacoes: str = ""
    avaliado_por: Optional[str] = None


@dataclass(frozen=True)
class AssinarContratoInputDTO:
    contrato_id: str
    assinado_por: str
    ip: Optional[str] = None
    user_agent: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class MatriculaOutputDTO:
    id: str
    aluno_id: str
    curso_id: str
    status: str
    data_inicio: Optional[date]
    data_termino: Optional[date]
    valor_total: Decimal
    valor_com_desconto: Optional[Decimal]
    desconto_id: Optional[str]
    forma_pagamento: str
    numero_parcelas: int
    observacoes: str
    status_history: List[Dict[str, Any]]
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: MatriculaEntity) -> "MatriculaOutputDTO":
        return cls(
            id=entity.id,
            aluno_id=entity.aluno_id,
            curso_id=entity.curso_id,
            status=entity.status.value,
            data_inicio=entity.data_inicio,
            data_termino=entity.data_termino,
            valor_total=entity.valor_total,
            valor_com_desconto=entity.valor_com_desconto,
            desconto_id=entity.desconto_id,
            forma_pagamento=entity.forma_pagamento.value,
            numero_parcelas=entity.numero_parcelas,
            observacoes=entity.observacoes,
            status_history=entity.historico_status,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "aluno_id": self.aluno_id,
            "curso_id": self.curso_id,
            "status": self.status,
            "data_inicio": _iso(self.data_inicio),
            "data_termino": _iso(self.data_termino),
            "valor_total": str(self.valor_total),
            "valor_com_desconto": (
                str(self.valor_com_desconto) if self.valor_com_desconto is not None else None
            ),
            "desconto_id": self.desconto_id,
            "forma_pagamento": self.forma_pagamento,
            "numero_parcelas": self.numero_parcelas,
            "observacoes": self.observacoes,
            "status_history": self.status_history,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class MatriculaCriadaOutputDTO:
    """Matrícula recém-criada com as parcelas geradas."""

    matricula: MatriculaOutputDTO
    pagamentos: List[Any]

    def to_dict(self) -> dict:
        return {
            "matricula": self.matricula.to_dict(),
            "pagamentos": [p.to_dict() for p in self.pagamentos],
        }


@dataclass
class DocumentoOutputDTO:
    id: str
    matricula_id: str
    tipo: str
    nome_arquivo: str
    url: str
    status: str
    observacoes: str
    avaliado_por: Optional[str]
    avaliado_em: Optional[datetime]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: DocumentoEntity) -> "DocumentoOutputDTO":
        return cls(
            id=entity.id,
            matricula_id=entity.matricula_id,
            tipo=entity.tipo.value,
            nome_arquivo=entity.nome_arquivo,
            url=entity.url,
            status=entity.status.value,
            observacoes=entity.observacoes,
            avaliado_por=entity.avaliado_por,
            avaliado_em=entity.avaliado_em,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "matricula_id": self.matricula_id,
            "tipo": self.tipo,
            "nome_arquivo": self.nome_arquivo,
            "url": self.url,
            "status": self.status,
            "observacoes": self.observacoes,
            "avaliado_por": self.avaliado_por,
            "avaliado_em": _iso(self.avaliado_em),
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class ContratoOutputDTO:
    id: str
    matricula_id: str
    titulo: str
    versao: str
    url: str
    status: str
    data_assinatura: Optional[datetime]
    assinado_por: Optional[str]
    assinatura_metadata: Dict[str, Any]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: ContratoEntity) -> "ContratoOutputDTO":
        return cls(
            id=entity.id,
            matricula_id=entity.matricula_id,
            titulo=entity.titulo,
            versao=entity.versao,
            url=entity.url,
            status=entity.status.value,
            data_assinatura=entity.data_assinatura,
            assinado_por=entity.assinado_por,
            assinatura_metadata=dict(entity.assinatura_metadata),
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "matricula_id": self.matricula_id,
            "titulo": self.titulo,
            "versao": self.versao,
            "url": self.url,
            "status": self.status,
            "data_assinatura": _iso(self.data_assinatura),
            "assinado_por": self.assinado_por,
            "assinatura_metadata": self.assinatura_metadata,
            "criado_em": self.criado_em.isoformat(),
        }

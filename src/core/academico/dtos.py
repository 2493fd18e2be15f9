"""
Data Transfer Objects (DTOs) do Domínio Acadêmico.

- Input DTOs: dados de entrada vindos de Forms/APIs (imutáveis)
- Output DTOs: formatação para Views/APIs
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .entities import AlunoEntity, CursoEntity, GradeCurricularEntity, TurmaEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarAlunoInputDTO:
    """
    DTO de entrada para cadastrar aluno.

    Attributes:
        nome: Nome completo
        email: E-mail de contato
        cpf: CPF com ou sem pontuação
        telefone: Telefone (opcional)
        data_nascimento: Data de nascimento (opcional)
        endereco: Endereço (opcional)
    """

    nome: str
    email: str
    cpf: str
    telefone: str = ""
    data_nascimento: Optional[date] = None
    endereco: str = ""


@dataclass(frozen=True)
class AtualizarAlunoInputDTO:
    """Campos ausentes (None) não são alterados."""

    aluno_id: str
    nome: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    telefone: Optional[str] = None
    endereco: Optional[str] = None
    ativo: Optional[bool] = None

    def alteracoes(self) -> Dict[str, Any]:
        campos = ("nome", "email", "cpf", "telefone", "endereco", "ativo")
        return {
            campo: getattr(self, campo)
            for campo in campos
            if getattr(self, campo) is not None
        }


@dataclass(frozen=True)
class ListarAlunosQueryDTO:
    busca: Optional[str] = None
    ativo: Optional[bool] = None


@dataclass(frozen=True)
class CriarCursoInputDTO:
    """
    DTO de entrada para cadastrar curso.

    Attributes:
        modalidade: "presencial", "ead" ou "hibrido"
        valor: Valor total (string ou Decimal)
    """

    nome: str
    codigo: str
    carga_horaria: int
    valor: Any
    modalidade: str = "presencial"
    descricao: str = ""
    vagas: Optional[int] = None


@dataclass(frozen=True)
class AtualizarCursoInputDTO:
    curso_id: str
    dados: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CriarTurmaInputDTO:
    curso_id: str
    nome: str
    codigo: str
    vagas: int
    turno: str = ""
    data_inicio: Optional[date] = None


@dataclass(frozen=True)
class CriarDisciplinaInputDTO:
    curso_id: str
    codigo: str
    nome: str
    semestre: int
    carga_horaria: int


@dataclass(frozen=True)
class AlocarTurmaInputDTO:
    matricula_id: str
    turma_id: str
    observacoes: str = ""


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class AlunoOutputDTO:
    id: str
    nome: str
    email: str
    cpf: str
    telefone: str
    data_nascimento: Optional[date]
    endereco: str
    ativo: bool
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: AlunoEntity) -> "AlunoOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            email=entity.email,
            cpf=entity.cpf,
            telefone=entity.telefone,
            data_nascimento=entity.data_nascimento,
            endereco=entity.endereco,
            ativo=entity.ativo,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "cpf": self.cpf,
            "telefone": self.telefone,
            "data_nascimento": (
                self.data_nascimento.isoformat() if self.data_nascimento else None
            ),
            "endereco": self.endereco,
            "ativo": self.ativo,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class CursoOutputDTO:
    id: str
    nome: str
    codigo: str
    descricao: str
    carga_horaria: int
    modalidade: str
    valor: str
    vagas: Optional[int]
    ativo: bool
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: CursoEntity) -> "CursoOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            codigo=entity.codigo,
            descricao=entity.descricao,
            carga_horaria=entity.carga_horaria,
            modalidade=entity.modalidade.value,
            valor=str(entity.valor),
            vagas=entity.vagas,
            ativo=entity.ativo,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "codigo": self.codigo,
            "descricao": self.descricao,
            "carga_horaria": self.carga_horaria,
            "modalidade": self.modalidade,
            "valor": self.valor,
            "vagas": self.vagas,
            "ativo": self.ativo,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class TurmaOutputDTO:
    id: str
    curso_id: str
    nome: str
    codigo: str
    turno: str
    data_inicio: Optional[date]
    vagas: int
    alunos_alocados: int
    vagas_disponiveis: int
    ativo: bool

    @classmethod
    def from_entity(cls, entity: TurmaEntity) -> "TurmaOutputDTO":
        return cls(
            id=entity.id,
            curso_id=entity.curso_id,
            nome=entity.nome,
            codigo=entity.codigo,
            turno=entity.turno,
            data_inicio=entity.data_inicio,
            vagas=entity.vagas,
            alunos_alocados=entity.alunos_alocados,
            vagas_disponiveis=entity.vagas_disponiveis,
            ativo=entity.ativo,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "curso_id": self.curso_id,
            "nome": self.nome,
            "codigo": self.codigo,
            "turno": self.turno,
            "data_inicio": self.data_inicio.isoformat() if self.data_inicio else None,
            "vagas": self.vagas,
            "alunos_alocados": self.alunos_alocados,
            "vagas_disponiveis": self.vagas_disponiveis,
            "ativo": self.ativo,
        }


@dataclass
class RequisitosAcademicosOutputDTO:
    """``pendencias`` vazio quando ``aprovado``."""

    matricula_id: str
    aprovado: bool
    pendencias: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "matricula_id": self.matricula_id,
            "approved": self.aprovado,
            "reasons": self.pendencias,
        }


@dataclass
class GradeCurricularOutputDTO:
    id: str
    matricula_id: str
    aluno_id: str
    curso_id: str
    status: str
    disciplinas: List[Dict[str, Any]]
    carga_horaria_total: int
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: GradeCurricularEntity) -> "GradeCurricularOutputDTO":
        return cls(
            id=entity.id,
            matricula_id=entity.matricula_id,
            aluno_id=entity.aluno_id,
            curso_id=entity.curso_id,
            status=entity.status,
            disciplinas=list(entity.disciplinas),
            carga_horaria_total=entity.carga_horaria_total,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "curriculum_id": self.id,
            "matricula_id": self.matricula_id,
            "aluno_id": self.aluno_id,
            "curso_id": self.curso_id,
            "status": self.status,
            "disciplinas": self.disciplinas,
            "carga_horaria_total": self.carga_horaria_total,
            "criado_em": self.criado_em.isoformat(),
        }

"""
Domain Events do Domínio Acadêmico.

- AlunoCadastradoEvent: novo aluno cadastrado
- AlunoAnonimizadoEvent: dados do aluno anonimizados (LGPD)
- CursoCriadoEvent: novo curso disponível
- AlunoAlocadoTurmaEvent: aluno ocupou vaga em uma turma
- GradeCurricularGeradaEvent: grade do aluno criada a partir da matrícula
"""

from dataclasses import dataclass

from src.core.shared.events import DomainEvent


@dataclass
class AlunoCadastradoEvent(DomainEvent):
    nome: str = ""
    email: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Aluno"


@dataclass
class AlunoAnonimizadoEvent(DomainEvent):
    """Disparado ao atender solicitação de direito ao esquecimento."""

    motivo: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Aluno"


@dataclass
class CursoCriadoEvent(DomainEvent):
    codigo: str = ""
    nome: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Curso"


@dataclass
class AlunoAlocadoTurmaEvent(DomainEvent):
    matricula_id: str = ""
    aluno_id: str = ""
    vagas_restantes: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Turma"


@dataclass
class GradeCurricularGeradaEvent(DomainEvent):
    matricula_id: str = ""
    aluno_id: str = ""
    curso_id: str = ""
    total_disciplinas: int = 0

    @property
    def aggregate_type(self) -> str:
        return "GradeCurricular"

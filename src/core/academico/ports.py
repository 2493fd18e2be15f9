"""
Ports (Interfaces) do Domínio Acadêmico.

Implementações:
- DjangoAlunoRepository / DjangoCursoRepository (ORM)
- InMemoryAlunoRepository / InMemoryCursoRepository (testes)
- Turmas, alocações, disciplinas e grades: Django* e InMemory* equivalentes
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    AlocacaoTurmaEntity,
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    TurmaEntity,
)


@runtime_checkable
class AlunoRepository(Protocol):
    """Interface para persistência de alunos."""

    def save(self, aluno: AlunoEntity) -> None:
        """Persiste aluno (create ou update)."""
        ...

    def get_by_id(self, aluno_id: str) -> Optional[AlunoEntity]:
        ...

    def get_by_cpf(self, cpf: str) -> Optional[AlunoEntity]:
        """Busca aluno pelo CPF (apenas dígitos)."""
        ...

    def get_by_email(self, email: str) -> Optional[AlunoEntity]:
        ...

    def list_all(self) -> List[AlunoEntity]:
        ...

    def buscar(
        self, termo: Optional[str] = None, ativo: Optional[bool] = None
    ) -> List[AlunoEntity]:
        """
        Busca alunos por nome, e-mail ou CPF.

        Args:
            termo: Trecho procurado (case-insensitive)
            ativo: Filtra por situação, se informado
        """
        ...


@runtime_checkable
class CursoRepository(Protocol):
    """Interface para persistência de cursos."""

    def save(self, curso: CursoEntity) -> None:
        ...

    def get_by_id(self, curso_id: str) -> Optional[CursoEntity]:
        ...

    def get_by_codigo(self, codigo: str) -> Optional[CursoEntity]:
        ...

    def list_all(self, apenas_ativos: bool = False) -> List[CursoEntity]:
        ...


@runtime_checkable
class TurmaRepository(Protocol):
    def save(self, turma: TurmaEntity) -> None:
        ...

    def get_by_id(self, turma_id: str) -> Optional[TurmaEntity]:
        ...

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[TurmaEntity]:
        ...

    def list_by_curso(self, curso_id: str, apenas_ativas: bool = False) -> List[TurmaEntity]:
        ...

    def ocupar_vaga(self, turma_id: str) -> bool:
        """
        Incrementa ``alunos_alocados`` de forma atômica se ainda houver vaga.

        Returns:
            False se a turma não existe ou está cheia
        """
        ...


@runtime_checkable
class AlocacaoTurmaRepository(Protocol):
    def save(self, alocacao: AlocacaoTurmaEntity) -> None:
        ...

    def existe(self, aluno_id: str, turma_id: str) -> bool:
        ...

    def list_by_matricula(self, matricula_id: str) -> List[AlocacaoTurmaEntity]:
        ...


@runtime_checkable
class DisciplinaCursoRepository(Protocol):
    def save(self, disciplina: DisciplinaCursoEntity) -> None:
        ...

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[DisciplinaCursoEntity]:
        ...

    def list_by_curso(self, curso_id: str) -> List[DisciplinaCursoEntity]:
        """Ordenadas por semestre e código."""
        ...


@runtime_checkable
class GradeCurricularRepository(Protocol):
    def save(self, grade: GradeCurricularEntity) -> None:
        ...

    def get_by_aluno_curso(self, aluno_id: str, curso_id: str) -> Optional[GradeCurricularEntity]:
        ...

    def get_by_matricula(self, matricula_id: str) -> Optional[GradeCurricularEntity]:
        ...


class InMemoryAlunoRepository:
    """Implementação em memória do AlunoRepository (testes)."""

    def __init__(self):
        self._alunos: Dict[str, AlunoEntity] = {}

    def save(self, aluno: AlunoEntity) -> None:
        self._alunos[aluno.id] = aluno

    def get_by_id(self, aluno_id: str) -> Optional[AlunoEntity]:
        return self._alunos.get(aluno_id)

    def get_by_cpf(self, cpf: str) -> Optional[AlunoEntity]:
        return next((a for a in self._alunos.values() if a.cpf == cpf), None)

    def get_by_email(self, email: str) -> Optional[AlunoEntity]:
        email = email.lower()
        return next((a for a in self._alunos.values() if a.email == email), None)

    def list_all(self) -> List[AlunoEntity]:
        return list(self._alunos.values())

    def buscar(
        self, termo: Optional[str] = None, ativo: Optional[bool] = None
    ) -> List[AlunoEntity]:
        resultado = self.list_all()
        if termo:
            termo = termo.lower()
            resultado = [
                a for a in resultado
                if termo in a.nome.lower() or termo in a.email or termo in a.cpf
            ]
        if ativo is not None:
            resultado = [a for a in resultado if a.ativo == ativo]
        return sorted(resultado, key=lambda a: a.nome)

    def clear(self) -> None:
        self._alunos.clear()


class InMemoryCursoRepository:
    """Implementação em memória do CursoRepository (testes)."""

    def __init__(self):
        self._cursos: Dict[str, CursoEntity] = {}

    def save(self, curso: CursoEntity) -> None:
        self._cursos[curso.id] = curso

    def get_by_id(self, curso_id: str) -> Optional[CursoEntity]:
        return self._cursos.get(curso_id)

    def get_by_codigo(self, codigo: str) -> Optional[CursoEntity]:
        codigo = codigo.upper()
        return next((c for c in self._cursos.values() if c.codigo == codigo), None)

    def list_all(self, apenas_ativos: bool = False) -> List[CursoEntity]:
        cursos = sorted(self._cursos.values(), key=lambda c: c.nome)
        if apenas_ativos:
            return [c for c in cursos if c.ativo]
        return cursos

    def clear(self) -> None:
        self._cursos.clear()


class InMemoryTurmaRepository:
    def __init__(self):
        self._turmas: Dict[str, TurmaEntity] = {}

    def save(self, turma: TurmaEntity) -> None:
        self._turmas[turma.id] = turma

    def get_by_id(self, turma_id: str) -> Optional[TurmaEntity]:
        return self._turmas.get(turma_id)

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[TurmaEntity]:
        codigo = codigo.upper()
        return next(
            (t for t in self._turmas.values() if t.curso_id == curso_id and t.codigo == codigo),
            None,
        )

    def list_by_curso(self, curso_id: str, apenas_ativas: bool = False) -> List[TurmaEntity]:
        turmas = [t for t in self._turmas.values() if t.curso_id == curso_id]
        if apenas_ativas:
            turmas = [t for t in turmas if t.ativo]
        return sorted(turmas, key=lambda t: t.codigo)

    def ocupar_vaga(self, turma_id: str) -> bool:
        turma = self._turmas.get(turma_id)
        if turma is None or turma.alunos_alocados >= turma.vagas:
            return False
        turma.alunos_alocados += 1
        return True


class InMemoryAlocacaoTurmaRepository:
    def __init__(self):
        self.alocacoes: List[AlocacaoTurmaEntity] = []

    def save(self, alocacao: AlocacaoTurmaEntity) -> None:
        self.alocacoes = [a for a in self.alocacoes if a.id != alocacao.id] + [alocacao]

    def existe(self, aluno_id: str, turma_id: str) -> bool:
        return any(a.aluno_id == aluno_id and a.turma_id == turma_id for a in self.alocacoes)

    def list_by_matricula(self, matricula_id: str) -> List[AlocacaoTurmaEntity]:
        return [a for a in self.alocacoes if a.matricula_id == matricula_id]


class InMemoryDisciplinaCursoRepository:
    def __init__(self):
        self._disciplinas: Dict[str, DisciplinaCursoEntity] = {}

    def save(self, disciplina: DisciplinaCursoEntity) -> None:
        self._disciplinas[disciplina.id] = disciplina

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[DisciplinaCursoEntity]:
        codigo = codigo.upper()
        return next(
            (d for d in self._disciplinas.values() if d.curso_id == curso_id and d.codigo == codigo),
            None,
        )

    def list_by_curso(self, curso_id: str) -> List[DisciplinaCursoEntity]:
        return sorted(
            (d for d in self._disciplinas.values() if d.curso_id == curso_id),
            key=lambda d: (d.semestre, d.codigo),
        )


class InMemoryGradeCurricularRepository:
    def __init__(self):
        self._grades: Dict[str, GradeCurricularEntity] = {}

    def save(self, grade: GradeCurricularEntity) -> None:
        self._grades[grade.id] = grade

    def get_by_aluno_curso(self, aluno_id: str, curso_id: str) -> Optional[GradeCurricularEntity]:
        return next(
            (g for g in self._grades.values() if g.aluno_id == aluno_id and g.curso_id == curso_id),
            None,
        )

    def get_by_matricula(self, matricula_id: str) -> Optional[GradeCurricularEntity]:
        return next((g for g in self._grades.values() if g.matricula_id == matricula_id), None)

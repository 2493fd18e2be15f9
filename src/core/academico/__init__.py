"""
Domínio Acadêmico - alunos, cursos, turmas e disciplinas.

Este módulo contém:
- Entidades (AlunoEntity, CursoEntity, TurmaEntity, DisciplinaCursoEntity...)
- Use Cases de cadastro, consulta e atualização
- Ports (repositórios de alunos, cursos, turmas, alocações, disciplinas e grades)
"""

from .entities import (
    AlocacaoTurmaEntity,
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    Modalidade,
    TurmaEntity,
    cpf_valido,
)
from .events import (
    AlunoAlocadoTurmaEvent,
    AlunoAnonimizadoEvent,
    AlunoCadastradoEvent,
    CursoCriadoEvent,
    GradeCurricularGeradaEvent,
)
from .dtos import (
    CriarAlunoInputDTO,
    AtualizarAlunoInputDTO,
    ListarAlunosQueryDTO,
    CriarCursoInputDTO,
    AtualizarCursoInputDTO,
    CriarTurmaInputDTO,
    CriarDisciplinaInputDTO,
    AlocarTurmaInputDTO,
    AlunoOutputDTO,
    CursoOutputDTO,
    TurmaOutputDTO,
    RequisitosAcademicosOutputDTO,
    GradeCurricularOutputDTO,
)
from .ports import (
    AlocacaoTurmaRepository,
    AlunoRepository,
    CursoRepository,
    DisciplinaCursoRepository,
    GradeCurricularRepository,
    TurmaRepository,
)
from .use_cases import (
    CriarAlunoService,
    AtualizarAlunoService,
    ObterAlunoService,
    ListarAlunosService,
    CriarCursoService,
    AtualizarCursoService,
    ObterCursoService,
    ListarCursosService,
    CriarTurmaService,
    ListarTurmasService,
    AdicionarDisciplinaService,
    ListarDisciplinasService,
)

__all__ = [
    # Entities
    "AlunoEntity",
    "CursoEntity",
    "Modalidade",
    "cpf_valido",
    "TurmaEntity",
    "AlocacaoTurmaEntity",
    "DisciplinaCursoEntity",
    "GradeCurricularEntity",
    # Events
    "AlunoCadastradoEvent",
    "AlunoAnonimizadoEvent",
    "CursoCriadoEvent",
    "AlunoAlocadoTurmaEvent",
    "GradeCurricularGeradaEvent",
    # DTOs
    "CriarAlunoInputDTO",
    "AtualizarAlunoInputDTO",
    "ListarAlunosQueryDTO",
    "CriarCursoInputDTO",
    "AtualizarCursoInputDTO",
    "AlunoOutputDTO",
    "CursoOutputDTO",
    "CriarTurmaInputDTO",
    "CriarDisciplinaInputDTO",
    "AlocarTurmaInputDTO",
    "TurmaOutputDTO",
    "RequisitosAcademicosOutputDTO",
    "GradeCurricularOutputDTO",
    # Ports
    "AlunoRepository",
    "CursoRepository",
    "TurmaRepository",
    "AlocacaoTurmaRepository",
    "DisciplinaCursoRepository",
    "GradeCurricularRepository",
    # Use Cases
    "CriarAlunoService",
    "AtualizarAlunoService",
    "ObterAlunoService",
    "ListarAlunosService",
    "CriarCursoService",
    "AtualizarCursoService",
    "ObterCursoService",
    "ListarCursosService",
    "CriarTurmaService",
    "ListarTurmasService",
    "AdicionarDisciplinaService",
    "ListarDisciplinasService",
]

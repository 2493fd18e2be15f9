"""
Use Cases (Application Services) do Domínio Acadêmico.

Use Cases implementados:
- CriarAlunoService / AtualizarAlunoService / ObterAlunoService / ListarAlunosService
- CriarCursoService / AtualizarCursoService / ObterCursoService / ListarCursosService
- CriarTurmaService / ListarTurmasService
- AdicionarDisciplinaService / ListarDisciplinasService
"""

import logging
from typing import List

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
)
from src.core.shared.interfaces import UnitOfWork

from .dtos import (
    AlunoOutputDTO,
    AtualizarAlunoInputDTO,
    AtualizarCursoInputDTO,
    CriarAlunoInputDTO,
    CriarCursoInputDTO,
    CriarDisciplinaInputDTO,
    CriarTurmaInputDTO,
    CursoOutputDTO,
    ListarAlunosQueryDTO,
    TurmaOutputDTO,
)
from .entities import (
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    Modalidade,
    TurmaEntity,
    somente_digitos,
)
from .events import AlunoCadastradoEvent, CursoCriadoEvent
from .ports import (
    AlunoRepository,
    CursoRepository,
    DisciplinaCursoRepository,
    TurmaRepository,
)


logger = logging.getLogger(__name__)


def obter_aluno_ou_erro(aluno_repo: AlunoRepository, aluno_id: str) -> AlunoEntity:
    aluno = aluno_repo.get_by_id(aluno_id)
    if not aluno:
        raise EntityNotFoundError(
            f"Aluno {aluno_id} não encontrado",
            entity_type="Aluno",
            entity_id=aluno_id,
        )
    return aluno


def obter_curso_ou_erro(curso_repo: CursoRepository, curso_id: str) -> CursoEntity:
    curso = curso_repo.get_by_id(curso_id)
    if not curso:
        raise EntityNotFoundError(
            f"Curso {curso_id} não encontrado",
            entity_type="Curso",
            entity_id=curso_id,
        )
    return curso


def obter_turma_ou_erro(turma_repo: TurmaRepository, turma_id: str) -> TurmaEntity:
    turma = turma_repo.get_by_id(turma_id)
    if not turma:
        raise EntityNotFoundError(
            "Turma não encontrada",
            entity_type="Turma",
            entity_id=turma_id,
        )
    return turma


class CriarAlunoService:
    """
    Use Case: Cadastrar aluno.

    Fluxo:
    1. Validar unicidade de CPF e e-mail
    2. Criar entidade (validações de formato)
    3. Persistir e disparar AlunoCadastradoEvent
    """

    def __init__(self, aluno_repo: AlunoRepository, uow: UnitOfWork):
        self.aluno_repo = aluno_repo
        self.uow = uow

    def execute(self, input_dto: CriarAlunoInputDTO) -> AlunoOutputDTO:
        with self.uow:
            aluno = AlunoEntity.criar(
                nome=input_dto.nome,
                email=input_dto.email,
                cpf=input_dto.cpf,
                telefone=input_dto.telefone,
                data_nascimento=input_dto.data_nascimento,
                endereco=input_dto.endereco,
            )

            if self.aluno_repo.get_by_cpf(aluno.cpf):
                raise BusinessRuleViolationError(
                    "Já existe aluno cadastrado com este CPF",
                    rule="cpf_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )
            if self.aluno_repo.get_by_email(aluno.email):
                raise BusinessRuleViolationError(
                    "Já existe aluno cadastrado com este e-mail",
                    rule="email_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )

            self.aluno_repo.save(aluno)
            self.uow.publish_event(
                AlunoCadastradoEvent(
                    aggregate_id=aluno.id,
                    nome=aluno.nome,
                    email=aluno.email,
                )
            )

        logger.info(f"Aluno cadastrado: {aluno.id}")
        return AlunoOutputDTO.from_entity(aluno)


class AtualizarAlunoService:
    """Use Case: Atualizar dados cadastrais do aluno."""

    def __init__(self, aluno_repo: AlunoRepository, uow: UnitOfWork):
        self.aluno_repo = aluno_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarAlunoInputDTO) -> AlunoOutputDTO:
        with self.uow:
            aluno = obter_aluno_ou_erro(self.aluno_repo, input_dto.aluno_id)
            alteracoes = input_dto.alteracoes()

            if "cpf" in alteracoes:
                existente = self.aluno_repo.get_by_cpf(
                    somente_digitos(alteracoes["cpf"])
                )
                if existente and existente.id != aluno.id:
                    raise BusinessRuleViolationError(
                        "Já existe aluno cadastrado com este CPF",
                        rule="cpf_unico",
                        code=ErrorCode.ALREADY_EXISTS,
                    )
            if "email" in alteracoes:
                existente = self.aluno_repo.get_by_email(alteracoes["email"].strip())
                if existente and existente.id != aluno.id:
                    raise BusinessRuleViolationError(
                        "Já existe aluno cadastrado com este e-mail",
                        rule="email_unico",
                        code=ErrorCode.ALREADY_EXISTS,
                    )

            aluno.atualizar(**alteracoes)
            self.aluno_repo.save(aluno)

        return AlunoOutputDTO.from_entity(aluno)


class ObterAlunoService:
    def __init__(self, aluno_repo: AlunoRepository):
        self.aluno_repo = aluno_repo

    def execute(self, aluno_id: str) -> AlunoOutputDTO:
        return AlunoOutputDTO.from_entity(
            obter_aluno_ou_erro(self.aluno_repo, aluno_id)
        )


class ListarAlunosService:
    """Use Case: Listar alunos com busca por nome, e-mail ou CPF."""

    def __init__(self, aluno_repo: AlunoRepository):
        self.aluno_repo = aluno_repo

    def execute(self, query: ListarAlunosQueryDTO = None) -> List[AlunoOutputDTO]:
        query = query or ListarAlunosQueryDTO()
        alunos = self.aluno_repo.buscar(termo=query.busca, ativo=query.ativo)
        return [AlunoOutputDTO.from_entity(a) for a in alunos]


class CriarCursoService:
    """
    Use Case: Cadastrar curso.

    O código do curso é único (comparação em maiúsculas).
    """

    def __init__(self, curso_repo: CursoRepository, uow: UnitOfWork):
        self.curso_repo = curso_repo
        self.uow = uow

    def execute(self, input_dto: CriarCursoInputDTO) -> CursoOutputDTO:
        with self.uow:
            curso = CursoEntity.criar(
                nome=input_dto.nome,
                codigo=input_dto.codigo,
                carga_horaria=input_dto.carga_horaria,
                valor=input_dto.valor,
                modalidade=Modalidade.from_string(input_dto.modalidade),
                descricao=input_dto.descricao,
                vagas=input_dto.vagas,
            )

            if self.curso_repo.get_by_codigo(curso.codigo):
                raise BusinessRuleViolationError(
                    f"Já existe curso com o código {curso.codigo}",
                    rule="codigo_curso_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )

            self.curso_repo.save(curso)
            self.uow.publish_event(
                CursoCriadoEvent(
                    aggregate_id=curso.id,
                    codigo=curso.codigo,
                    nome=curso.nome,
                )
            )

        logger.info(f"Curso criado: {curso.codigo}")
        return CursoOutputDTO.from_entity(curso)


class AtualizarCursoService:
    def __init__(self, curso_repo: CursoRepository, uow: UnitOfWork):
        self.curso_repo = curso_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarCursoInputDTO) -> CursoOutputDTO:
        with self.uow:
            curso = obter_curso_ou_erro(self.curso_repo, input_dto.curso_id)

            codigo = input_dto.dados.get("codigo")
            if codigo:
                existente = self.curso_repo.get_by_codigo(codigo.strip())
                if existente and existente.id != curso.id:
                    raise BusinessRuleViolationError(
                        f"Já existe curso com o código {codigo.upper()}",
                        rule="codigo_curso_unico",
                        code=ErrorCode.ALREADY_EXISTS,
                    )

            curso.atualizar(**input_dto.dados)
            self.curso_repo.save(curso)

        return CursoOutputDTO.from_entity(curso)


class ObterCursoService:
    def __init__(self, curso_repo: CursoRepository):
        self.curso_repo = curso_repo

    def execute(self, curso_id: str) -> CursoOutputDTO:
        return CursoOutputDTO.from_entity(
            obter_curso_ou_erro(self.curso_repo, curso_id)
        )


class ListarCursosService:
    def __init__(self, curso_repo: CursoRepository):
        self.curso_repo = curso_repo

    def execute(self, apenas_ativos: bool = False) -> List[CursoOutputDTO]:
        return [
            CursoOutputDTO.from_entity(c)
            for c in self.curso_repo.list_all(apenas_ativos=apenas_ativos)
        ]


class CriarTurmaService:
    """
    Use Case: Abrir turma de um curso.

    O código da turma é único dentro do curso.
    """

    def __init__(self, turma_repo: TurmaRepository, curso_repo: CursoRepository, uow: UnitOfWork):
        self.turma_repo = turma_repo
        self.curso_repo = curso_repo
        self.uow = uow

    def execute(self, input_dto: CriarTurmaInputDTO) -> TurmaOutputDTO:
        with self.uow:
            curso = obter_curso_ou_erro(self.curso_repo, input_dto.curso_id)
            turma = TurmaEntity.criar(
                curso_id=curso.id,
                nome=input_dto.nome,
                codigo=input_dto.codigo,
                vagas=input_dto.vagas,
                turno=input_dto.turno,
                data_inicio=input_dto.data_inicio,
            )
            if self.turma_repo.get_by_codigo(curso.id, turma.codigo):
                raise BusinessRuleViolationError(
                    f"Já existe turma {turma.codigo} neste curso",
                    rule="codigo_turma_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )
            self.turma_repo.save(turma)

        logger.info(f"Turma {turma.codigo} aberta no curso {curso.codigo}")
        return TurmaOutputDTO.from_entity(turma)


class ListarTurmasService:
    def __init__(self, turma_repo: TurmaRepository, curso_repo: CursoRepository):
        self.turma_repo = turma_repo
        self.curso_repo = curso_repo

    def execute(self, curso_id: str, apenas_ativas: bool = False) -> List[TurmaOutputDTO]:
        obter_curso_ou_erro(self.curso_repo, curso_id)
        return [
            TurmaOutputDTO.from_entity(t)
            for t in self.turma_repo.list_by_curso(curso_id, apenas_ativas=apenas_ativas)
        ]


class AdicionarDisciplinaService:
    """Use Case: Incluir disciplina na matriz curricular do curso."""

    def __init__(
        self,
        disciplina_repo: DisciplinaCursoRepository,
        curso_repo: CursoRepository,
        uow: UnitOfWork,
    ):
        self.disciplina_repo = disciplina_repo
        self.curso_repo = curso_repo
        self.uow = uow

    def execute(self, input_dto: CriarDisciplinaInputDTO) -> DisciplinaCursoEntity:
        with self.uow:
            curso = obter_curso_ou_erro(self.curso_repo, input_dto.curso_id)
            disciplina = DisciplinaCursoEntity.criar(
                curso_id=curso.id,
                codigo=input_dto.codigo,
                nome=input_dto.nome,
                semestre=input_dto.semestre,
                carga_horaria=input_dto.carga_horaria,
            )
            if self.disciplina_repo.get_by_codigo(curso.id, disciplina.codigo):
                raise BusinessRuleViolationError(
                    f"Disciplina {disciplina.codigo} já faz parte do curso",
                    rule="codigo_disciplina_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )
            self.disciplina_repo.save(disciplina)
        return disciplina


class ListarDisciplinasService:
    def __init__(self, disciplina_repo: DisciplinaCursoRepository, curso_repo: CursoRepository):
        self.disciplina_repo = disciplina_repo
        self.curso_repo = curso_repo

    def execute(self, curso_id: str) -> List[DisciplinaCursoEntity]:
        obter_curso_ou_erro(self.curso_repo, curso_id)
        return self.disciplina_repo.list_by_curso(curso_id)

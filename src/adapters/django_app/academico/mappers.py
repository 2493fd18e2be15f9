"""
Mappers Entity ⇄ Model do domínio Acadêmico.

Conversão sem validação: dados carregados do banco já foram
validados na criação (``criar()``).
"""

from src.core.academico.entities import (
    AlocacaoTurmaEntity,
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    Modalidade,
    TurmaEntity,
)

from ..shared.repository import do_banco, para_banco
from .models import (
    AlocacaoTurmaModel,
    AlunoModel,
    CursoModel,
    DisciplinaCursoModel,
    GradeCurricularModel,
    TurmaModel,
)


class AlunoMapper:
    @staticmethod
    def to_model(entity: AlunoEntity) -> AlunoModel:
        return AlunoModel(
            id=entity.id,
            nome=entity.nome,
            email=entity.email,
            cpf=entity.cpf,
            telefone=entity.telefone or '',
            data_nascimento=entity.data_nascimento,
            endereco=entity.endereco or '',
            ativo=entity.ativo,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: AlunoModel) -> AlunoEntity:
        return AlunoEntity(
            id=model.id,
            nome=model.nome,
            email=model.email,
            cpf=model.cpf,
            telefone=model.telefone,
            data_nascimento=model.data_nascimento,
            endereco=model.endereco,
            ativo=model.ativo,
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class CursoMapper:
    @staticmethod
    def to_model(entity: CursoEntity) -> CursoModel:
        return CursoModel(
            id=entity.id,
            nome=entity.nome,
            codigo=entity.codigo,
            descricao=entity.descricao or '',
            carga_horaria=entity.carga_horaria,
            modalidade=entity.modalidade.value,
            valor=entity.valor,
            vagas=entity.vagas,
            ativo=entity.ativo,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: CursoModel) -> CursoEntity:
        return CursoEntity(
            id=model.id,
            nome=model.nome,
            codigo=model.codigo,
            descricao=model.descricao,
            carga_horaria=model.carga_horaria,
            modalidade=Modalidade(model.modalidade),
            valor=model.valor,
            vagas=model.vagas,
            ativo=model.ativo,
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class TurmaMapper:
    @staticmethod
    def to_model(entity: TurmaEntity) -> TurmaModel:
        return TurmaModel(
            id=entity.id,
            curso_id=entity.curso_id,
            nome=entity.nome,
            codigo=entity.codigo,
            turno=entity.turno or '',
            data_inicio=entity.data_inicio,
            vagas=entity.vagas,
            alunos_alocados=entity.alunos_alocados,
            ativo=entity.ativo,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: TurmaModel) -> TurmaEntity:
        return TurmaEntity(
            id=model.id,
            curso_id=model.curso_id,
            nome=model.nome,
            codigo=model.codigo,
            turno=model.turno,
            data_inicio=model.data_inicio,
            vagas=model.vagas,
            alunos_alocados=model.alunos_alocados,
            ativo=model.ativo,
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class AlocacaoTurmaMapper:
    @staticmethod
    def to_model(entity: AlocacaoTurmaEntity) -> AlocacaoTurmaModel:
        return AlocacaoTurmaModel(
            id=entity.id,
            turma_id=entity.turma_id,
            matricula_id=entity.matricula_id,
            aluno_id=entity.aluno_id,
            status=entity.status,
            observacoes=entity.observacoes or '',
            alocado_em=para_banco(entity.alocado_em),
        )

    @staticmethod
    def to_entity(model: AlocacaoTurmaModel) -> AlocacaoTurmaEntity:
        return AlocacaoTurmaEntity(
            id=model.id,
            turma_id=model.turma_id,
            matricula_id=model.matricula_id,
            aluno_id=model.aluno_id,
            status=model.status,
            observacoes=model.observacoes,
            alocado_em=do_banco(model.alocado_em),
        )


class DisciplinaCursoMapper:
    @staticmethod
    def to_model(entity: DisciplinaCursoEntity) -> DisciplinaCursoModel:
        return DisciplinaCursoModel(
            id=entity.id,
            curso_id=entity.curso_id,
            codigo=entity.codigo,
            nome=entity.nome,
            semestre=entity.semestre,
            carga_horaria=entity.carga_horaria,
        )

    @staticmethod
    def to_entity(model: DisciplinaCursoModel) -> DisciplinaCursoEntity:
        return DisciplinaCursoEntity(
            id=model.id,
            curso_id=model.curso_id,
            codigo=model.codigo,
            nome=model.nome,
            semestre=model.semestre,
            carga_horaria=model.carga_horaria,
        )


class GradeCurricularMapper:
    @staticmethod
    def to_model(entity: GradeCurricularEntity) -> GradeCurricularModel:
        return GradeCurricularModel(
            id=entity.id,
            matricula_id=entity.matricula_id,
            aluno_id=entity.aluno_id,
            curso_id=entity.curso_id,
            status=entity.status,
            disciplinas=entity.disciplinas,
            criado_em=para_banco(entity.criado_em),
        )

    @staticmethod
    def to_entity(model: GradeCurricularModel) -> GradeCurricularEntity:
        return GradeCurricularEntity(
            id=model.id,
            matricula_id=model.matricula_id,
            aluno_id=model.aluno_id,
            curso_id=model.curso_id,
            status=model.status,
            disciplinas=list(model.disciplinas or []),
            criado_em=do_banco(model.criado_em),
        )

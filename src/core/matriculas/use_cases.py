"""
Use Cases (Application Services) do Domínio de Matrículas.

Use Cases implementados:
- CriarMatriculaService: matrícula + parcelas em uma única transação
- AtualizarStatusMatriculaService
- ObterMatriculaService / ListarMatriculasService
- EnviarDocumentoService / AvaliarDocumentoService / ListarDocumentosService
- GerarContratoService / AssinarContratoService / ObterContratoService
"""

import logging
import os
from datetime import date, datetime
from typing import List, Optional

from src.core.academico.use_cases import obter_aluno_ou_erro, obter_curso_ou_erro
from src.core.financeiro.calculos import dividir_em_parcelas
from src.core.financeiro.dtos import PagamentoOutputDTO
from src.core.financeiro.entities import FormaPagamento, TipoDesconto
from src.core.financeiro.use_cases import consumir_desconto, gerar_parcelas, resolver_desconto
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from src.core.shared.interfaces import FileStorage, UnitOfWork

from .dtos import (
    AssinarContratoInputDTO,
    AtualizarStatusMatriculaInputDTO,
    AvaliarDocumentoInputDTO,
    ContratoOutputDTO,
    CriarMatriculaInputDTO,
    DocumentoOutputDTO,
    EnviarDocumentoInputDTO,
    ListarMatriculasQueryDTO,
    MatriculaCriadaOutputDTO,
    MatriculaOutputDTO,
)
from .entities import (
    ContratoEntity,
    DocumentoEntity,
    DocumentoStatus,
    MatriculaEntity,
    MatriculaStatus,
    TipoDocumento,
)
from .events import (
    ContratoAssinadoEvent,
    ContratoGeradoEvent,
    DocumentoAvaliadoEvent,
    DocumentoEnviadoEvent,
    MatriculaCriadaEvent,
    MatriculaStatusAlteradoEvent,
)
from .ports import (
    ContratoPdfRenderer,
    ContratoRepository,
    DadosContrato,
    DocumentoRepository,
    MatriculaRepository,
)


logger = logging.getLogger(__name__)

BUCKET_DOCUMENTOS = "matricula_documentos"
BUCKET_CONTRATOS = "matricula_contratos"

NOTIFICACOES_STATUS = {
    MatriculaStatus.APROVADO: "matricula_aprovada",
    MatriculaStatus.REJEITADO: "matricula_rejeitada",
    MatriculaStatus.ATIVO: "matricula_ativada",
    MatriculaStatus.CANCELADO: "matricula_cancelada",
}


def obter_matricula_ou_erro(repo: MatriculaRepository, matricula_id: str) -> MatriculaEntity:
    matricula = repo.get_by_id(matricula_id)
    if not matricula:
        raise EntityNotFoundError(
            "Matrícula não encontrada",
            entity_type="Matricula",
            entity_id=matricula_id,
        )
    return matricula


def _timestamp_ms(agora: Optional[datetime] = None) -> int:
    return int((agora or datetime.now()).timestamp() * 1000)


# =============================================================================
# Matrículas
# =============================================================================

class CriarMatriculaService:
    """
    Use Case: Criar matrícula.

    Fluxo:
    1. Validar aluno e curso
    2. Validar e aplicar desconto opcional
    3. Criar matrícula pendente
    4. Gerar parcelas (soma exata do valor com desconto)
    5. Publicar MatriculaCriadaEvent

    Tudo ocorre em uma única transação: se a geração das parcelas
    falhar, a matrícula não é gravada.

    Example:
        service = CriarMatriculaService(
            matricula_repo, aluno_repo, curso_repo,
            pagamento_repo, desconto_repo, uow,
        )
        output = service.execute(CriarMatriculaInputDTO(
            aluno_id=aluno.id,
            curso_id=curso.id,
            data_inicio=date(2024, 2, 1),
            valor_total="1000",
            forma_pagamento="boleto",
            numero_parcelas=3,
        ))
    """

    def __init__(
        self,
        matricula_repo: MatriculaRepository,
        aluno_repo,
        curso_repo,
        pagamento_repo,
        desconto_repo,
        uow: UnitOfWork,
    ):
        self.matricula_repo = matricula_repo
        self.aluno_repo = aluno_repo
        self.curso_repo = curso_repo
        self.pagamento_repo = pagamento_repo
        self.desconto_repo = desconto_repo
        self.uow = uow

    def execute(self, input_dto: CriarMatriculaInputDTO) -> MatriculaCriadaOutputDTO:
        with self.uow:
            aluno = obter_aluno_ou_erro(self.aluno_repo, input_dto.aluno_id)
            curso = obter_curso_ou_erro(self.curso_repo, input_dto.curso_id)
            forma = FormaPagamento.from_string(input_dto.forma_pagamento)

            valor_final, desconto = resolver_desconto(
                self.desconto_repo,
                input_dto.desconto_id,
                input_dto.valor_total,
                curso_id=curso.id,
            )

            matricula = MatriculaEntity.criar(
                aluno_id=aluno.id,
                curso_id=curso.id,
                data_inicio=input_dto.data_inicio,
                data_termino=input_dto.data_termino,
                valor_total=input_dto.valor_total,
                forma_pagamento=forma,
                numero_parcelas=input_dto.numero_parcelas,
                desconto_id=desconto.id if desconto else None,
                valor_com_desconto=valor_final if desconto else None,
                observacoes=input_dto.observacoes,
            )
            self.matricula_repo.save(matricula)

            parcelas = gerar_parcelas(
                matricula_id=matricula.id,
                valor_total=valor_final,
                numero_parcelas=matricula.numero_parcelas,
                forma_pagamento=forma,
                primeiro_vencimento=(
                    input_dto.data_primeiro_vencimento or input_dto.data_inicio
                ),
            )
            self.pagamento_repo.save_many(parcelas)

            if desconto:
                consumir_desconto(self.desconto_repo, desconto)

            self.uow.publish_event(
                MatriculaCriadaEvent(
                    aggregate_id=matricula.id,
                    aluno_id=aluno.id,
                    curso_id=curso.id,
                    valor_total=valor_final,
                    numero_parcelas=matricula.numero_parcelas,
                )
            )

        logger.info(
            f"Matrícula {matricula.id} criada para aluno {aluno.id} "
            f"com {len(parcelas)} parcelas"
        )
        return MatriculaCriadaOutputDTO(
            matricula=MatriculaOutputDTO.from_entity(matricula),
            pagamentos=[PagamentoOutputDTO.from_entity(p) for p in parcelas],
        )


class AtualizarStatusMatriculaService:
    """
    Use Case: Alterar status da matrícula.

    A transição é registrada em metadata["status_history"] e o evento
    indica qual notificação enviar ao aluno.

    Raises:
        EntityNotFoundError: Matrícula inexistente
        ValidationError: Status desconhecido
        BusinessRuleViolationError: INVALID_STATUS para transição proibida
    """

    def __init__(self, matricula_repo: MatriculaRepository, uow: UnitOfWork):
        self.matricula_repo = matricula_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarStatusMatriculaInputDTO) -> MatriculaOutputDTO:
        novo_status = MatriculaStatus.from_string(input_dto.status)

        with self.uow:
            matricula = obter_matricula_ou_erro(self.matricula_repo, input_dto.matricula_id)
            anterior = matricula.alterar_status(novo_status, input_dto.observacoes)
            self.matricula_repo.save(matricula)
            self.uow.publish_event(
                MatriculaStatusAlteradoEvent(
                    aggregate_id=matricula.id,
                    aluno_id=matricula.aluno_id,
                    status_anterior=anterior.value,
                    status_novo=novo_status.value,
                    observacoes=input_dto.observacoes,
                    notificacao=NOTIFICACOES_STATUS.get(
                        novo_status, "matricula_status_alterado"
                    ),
                )
            )

        logger.info(
            f"Matrícula {matricula.id}: {anterior.value} → {novo_status.value}"
        )
        return MatriculaOutputDTO.from_entity(matricula)


class ObterMatriculaService:
    def __init__(self, matricula_repo: MatriculaRepository):
        self.matricula_repo = matricula_repo

    def execute(self, matricula_id: str) -> MatriculaOutputDTO:
        return MatriculaOutputDTO.from_entity(
            obter_matricula_ou_erro(self.matricula_repo, matricula_id)
        )


class ListarMatriculasService:
    def __init__(self, matricula_repo: MatriculaRepository):
        self.matricula_repo = matricula_repo

    def execute(self, query: Optional[ListarMatriculasQueryDTO] = None) -> List[MatriculaOutputDTO]:
        query = query or ListarMatriculasQueryDTO()
        status = MatriculaStatus.from_string(query.status) if query.status else None
        matriculas = self.matricula_repo.list_all(
            aluno_id=query.aluno_id, curso_id=query.curso_id, status=status
        )
        return [MatriculaOutputDTO.from_entity(m) for m in matriculas]


# =============================================================================
# Documentos
# =============================================================================

class EnviarDocumentoService:
    """
    Use Case: Enviar documento da matrícula.

    O arquivo é gravado em
    ``matricula_documentos/{matricula_id}/{tipo}_{timestamp}.{ext}``.

    Raises:
        EntityNotFoundError: Matrícula inexistente
        ValidationError: Tipo inválido ou arquivo vazio
        DomainException: UPLOAD_FAILED se o armazenamento falhar
    """

    def __init__(
        self,
        documento_repo: DocumentoRepository,
        matricula_repo: MatriculaRepository,
        storage: FileStorage,
        uow: UnitOfWork,
    ):
        self.documento_repo = documento_repo
        self.matricula_repo = matricula_repo
        self.storage = storage
        self.uow = uow

    def execute(self, input_dto: EnviarDocumentoInputDTO) -> DocumentoOutputDTO:
        tipo = TipoDocumento.from_string(input_dto.tipo)
        if not input_dto.conteudo:
            raise ValidationError("Arquivo vazio", field="arquivo")

        with self.uow:
            matricula = obter_matricula_ou_erro(self.matricula_repo, input_dto.matricula_id)

            extensao = os.path.splitext(input_dto.nome_arquivo)[1].lstrip(".").lower() or "bin"
            caminho = (
                f"{BUCKET_DOCUMENTOS}/{matricula.id}/"
                f"{tipo.value}_{_timestamp_ms()}.{extensao}"
            )
            try:
                url = self.storage.save(caminho, input_dto.conteudo)
            except OSError as e:
                logger.error(f"Erro ao fazer upload do arquivo {caminho}: {e}")
                raise DomainException("Erro ao fazer upload do arquivo", ErrorCode.UPLOAD_FAILED)

            documento = DocumentoEntity.criar(
                matricula_id=matricula.id,
                tipo=tipo,
                nome_arquivo=input_dto.nome_arquivo,
                url=url,
            )
            self.documento_repo.save(documento)
            self.uow.publish_event(
                DocumentoEnviadoEvent(
                    aggregate_id=documento.id,
                    matricula_id=matricula.id,
                    aluno_id=matricula.aluno_id,
                    tipo=tipo.value,
                    nome_arquivo=documento.nome_arquivo,
                )
            )

        return DocumentoOutputDTO.from_entity(documento)


class AvaliarDocumentoService:
    """
    Use Case: Avaliar documento.

    Status aceitos: pendente, aprovado e rejeitado. Qualquer outro
    valor gera VALIDATION_ERROR.
    """

    def __init__(
        self,
        documento_repo: DocumentoRepository,
        matricula_repo: MatriculaRepository,
        uow: UnitOfWork,
    ):
        self.documento_repo = documento_repo
        self.matricula_repo = matricula_repo
        self.uow = uow

    def execute(self, input_dto: AvaliarDocumentoInputDTO) -> DocumentoOutputDTO:
        status = DocumentoStatus.from_string(input_dto.status)

        with self.uow:
            documento = self.documento_repo.get_by_id(input_dto.documento_id)
            if not documento:
                raise EntityNotFoundError(
                    "Documento não encontrado",
                    entity_type="Documento",
                    entity_id=input_dto.documento_id,
                )
            documento.avaliar(status, input_dto.observacoes, input_dto.avaliado_por)
            self.documento_repo.save(documento)

            matricula = self.matricula_repo.get_by_id(documento.matricula_id)
            if status != DocumentoStatus.PENDENTE:
                self.uow.publish_event(
                    DocumentoAvaliadoEvent(
                        aggregate_id=documento.id,
                        matricula_id=documento.matricula_id,
                        aluno_id=matricula.aluno_id if matricula else "",
                        tipo=documento.tipo.value,
                        status=status.value,
                        observacoes=documento.observacoes,
                    )
                )

        return DocumentoOutputDTO.from_entity(documento)


class ListarDocumentosService:
    def __init__(self, documento_repo: DocumentoRepository, matricula_repo: MatriculaRepository):
        self.documento_repo = documento_repo
        self.matricula_repo = matricula_repo

    def execute(self, matricula_id: str) -> List[DocumentoOutputDTO]:
        obter_matricula_ou_erro(self.matricula_repo, matricula_id)
        return [
            DocumentoOutputDTO.from_entity(d)
            for d in self.documento_repo.list_by_matricula(matricula_id)
        ]


# =============================================================================
# Contratos
# =============================================================================

class GerarContratoService:
    """
    Use Case: Gerar contrato de matrícula em PDF.

    Fluxo:
    1. Verificar que a matrícula ainda não tem contrato
    2. Montar DadosContrato (aluno, curso, condições financeiras)
    3. Renderizar PDF e gravar em
       ``matricula_contratos/contrato_{matricula_id}_{timestamp}.pdf``
    4. Criar contrato pendente e publicar ContratoGeradoEvent

    Raises:
        BusinessRuleViolationError: ALREADY_EXISTS se já houver contrato
    """

    def __init__(
        self,
        contrato_repo: ContratoRepository,
        matricula_repo: MatriculaRepository,
        aluno_repo,
        curso_repo,
        desconto_repo,
        storage: FileStorage,
        renderer: ContratoPdfRenderer,
        uow: UnitOfWork,
    ):
        self.contrato_repo = contrato_repo
        self.matricula_repo = matricula_repo
        self.aluno_repo = aluno_repo
        self.curso_repo = curso_repo
        self.desconto_repo = desconto_repo
        self.storage = storage
        self.renderer = renderer
        self.uow = uow

    def _descricao_desconto(self, matricula: MatriculaEntity) -> str:
        if not matricula.desconto_id:
            return ""
        desconto = self.desconto_repo.get_by_id(matricula.desconto_id)
        if not desconto:
            return ""
        if desconto.tipo == TipoDesconto.PERCENTUAL:
            return f"{desconto.nome} ({desconto.valor}%)"
        return f"{desconto.nome} (R$ {desconto.valor})"

    def montar_dados(self, matricula: MatriculaEntity, hoje: Optional[date] = None) -> DadosContrato:
        aluno = obter_aluno_ou_erro(self.aluno_repo, matricula.aluno_id)
        curso = obter_curso_ou_erro(self.curso_repo, matricula.curso_id)
        valor_final = matricula.valor_final
        return DadosContrato(
            matricula_id=matricula.id,
            data_emissao=hoje or date.today(),
            aluno_nome=aluno.nome,
            aluno_cpf=aluno.cpf_formatado,
            aluno_email=aluno.email,
            aluno_endereco=aluno.endereco,
            curso_nome=curso.nome,
            curso_codigo=curso.codigo,
            carga_horaria=curso.carga_horaria,
            modalidade=curso.modalidade.value,
            prazo_meses=curso.prazo_meses,
            data_inicio=matricula.data_inicio,
            valor_total=matricula.valor_total,
            valor_com_desconto=valor_final,
            numero_parcelas=matricula.numero_parcelas,
            valor_parcela=dividir_em_parcelas(valor_final, matricula.numero_parcelas)[0],
            forma_pagamento=matricula.forma_pagamento.value,
            desconto_descricao=self._descricao_desconto(matricula),
        )

    def execute(self, matricula_id: str) -> ContratoOutputDTO:
        with self.uow:
            matricula = obter_matricula_ou_erro(self.matricula_repo, matricula_id)
            if self.contrato_repo.get_by_matricula(matricula.id):
                raise BusinessRuleViolationError(
                    "Esta matrícula já possui um contrato gerado",
                    rule="contrato_unico",
                    code=ErrorCode.ALREADY_EXISTS,
                )

            dados = self.montar_dados(matricula)
            pdf = self.renderer.render(dados)
            caminho = f"{BUCKET_CONTRATOS}/contrato_{matricula.id}_{_timestamp_ms()}.pdf"
            try:
                url = self.storage.save(caminho, pdf)
            except OSError as e:
                logger.error(f"Erro ao gravar contrato {caminho}: {e}")
                raise DomainException("Erro ao gerar contrato", ErrorCode.UPLOAD_FAILED)

            contrato = ContratoEntity.criar(
                matricula_id=matricula.id, nome_curso=dados.curso_nome, url=url
            )
            self.contrato_repo.save(contrato)
            self.uow.publish_event(
                ContratoGeradoEvent(
                    aggregate_id=contrato.id,
                    matricula_id=matricula.id,
                    aluno_id=matricula.aluno_id,
                    url=url,
                )
            )

        logger.info(f"Contrato {contrato.id} gerado para matrícula {matricula.id}")
        return ContratoOutputDTO.from_entity(contrato)


class AssinarContratoService:
    """
    Use Case: Assinar contrato.

    Raises:
        EntityNotFoundError: Contrato inexistente
        BusinessRuleViolationError: ALREADY_SIGNED
    """

    def __init__(
        self,
        contrato_repo: ContratoRepository,
        matricula_repo: MatriculaRepository,
        uow: UnitOfWork,
    ):
        self.contrato_repo = contrato_repo
        self.matricula_repo = matricula_repo
        self.uow = uow

    def execute(self, input_dto: AssinarContratoInputDTO) -> ContratoOutputDTO:
        with self.uow:
            contrato = self.contrato_repo.get_by_id(input_dto.contrato_id)
            if not contrato:
                raise EntityNotFoundError(
                    "Contrato não encontrado",
                    entity_type="Contrato",
                    entity_id=input_dto.contrato_id,
                )
            contrato.assinar(
                assinado_por=input_dto.assinado_por,
                ip=input_dto.ip,
                user_agent=input_dto.user_agent,
            )
            self.contrato_repo.save(contrato)

            matricula = self.matricula_repo.get_by_id(contrato.matricula_id)
            self.uow.publish_event(
                ContratoAssinadoEvent(
                    aggregate_id=contrato.id,
                    matricula_id=contrato.matricula_id,
                    aluno_id=matricula.aluno_id if matricula else "",
                    assinado_por=input_dto.assinado_por,
                    ip=input_dto.ip,
                )
            )

        return ContratoOutputDTO.from_entity(contrato)


class ObterContratoService:
    def __init__(self, contrato_repo: ContratoRepository):
        self.contrato_repo = contrato_repo

    def execute(self, contrato_id: str) -> ContratoOutputDTO:
        contrato = self.contrato_repo.get_by_id(contrato_id)
        if not contrato:
            raise EntityNotFoundError(
                "Contrato não encontrado",
                entity_type="Contrato",
                entity_id=contrato_id,
            )
        return ContratoOutputDTO.from_entity(contrato)

    def por_matricula(self, matricula_id: str) -> Optional[ContratoOutputDTO]:
        contrato = self.contrato_repo.get_by_matricula(matricula_id)
        return ContratoOutputDTO.from_entity(contrato) if contrato else None

"""
Domínio de Matrículas.

Este módulo contém:
- Entidades (MatriculaEntity, DocumentoEntity, ContratoEntity)
- Use Cases de matrícula, documentos e contratos
- Integração acadêmica (turma, requisitos e grade curricular)
- Ports (repositórios e renderer de PDF do contrato)
"""

from .entities import (
    ContratoEntity,
    ContratoStatus,
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
from .ports import (
    ContratoPdfRenderer,
    ContratoRepository,
    DadosContrato,
    DocumentoRepository,
    MatriculaRepository,
)
from .use_cases import (
    AssinarContratoService,
    AtualizarStatusMatriculaService,
    AvaliarDocumentoService,
    CriarMatriculaService,
    EnviarDocumentoService,
    GerarContratoService,
    ListarDocumentosService,
    ListarMatriculasService,
    ObterContratoService,
    ObterMatriculaService,
)
from .integracao import (
    AlocarTurmaService,
    GerarGradeCurricularService,
    ObterGradeCurricularService,
    VerificarRequisitosAcademicosService,
)

__all__ = [
    # Entities
    "ContratoEntity",
    "ContratoStatus",
    "DocumentoEntity",
    "DocumentoStatus",
    "MatriculaEntity",
    "MatriculaStatus",
    "TipoDocumento",
    # Events
    "ContratoAssinadoEvent",
    "ContratoGeradoEvent",
    "DocumentoAvaliadoEvent",
    "DocumentoEnviadoEvent",
    "MatriculaCriadaEvent",
    "MatriculaStatusAlteradoEvent",
    # DTOs
    "AssinarContratoInputDTO",
    "AtualizarStatusMatriculaInputDTO",
    "AvaliarDocumentoInputDTO",
    "ContratoOutputDTO",
    "CriarMatriculaInputDTO",
    "DocumentoOutputDTO",
    "EnviarDocumentoInputDTO",
    "ListarMatriculasQueryDTO",
    "MatriculaCriadaOutputDTO",
    "MatriculaOutputDTO",
    # Ports
    "ContratoPdfRenderer",
    "ContratoRepository",
    "DadosContrato",
    "DocumentoRepository",
    "MatriculaRepository",
    # Use Cases
    "AssinarContratoService",
    "AtualizarStatusMatriculaService",
    "AvaliarDocumentoService",
    "CriarMatriculaService",
    "EnviarDocumentoService",
    "GerarContratoService",
    "ListarDocumentosService",
    "ListarMatriculasService",
    "ObterContratoService",
    "ObterMatriculaService",
    # Integração acadêmica
    "AlocarTurmaService",
    "GerarGradeCurricularService",
    "ObterGradeCurricularService",
    "VerificarRequisitosAcademicosService",
]

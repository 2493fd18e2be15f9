"""
Ports (Interfaces) do Domínio de Matrículas.

Tipos de Ports:
- Repositórios: matrículas, documentos e contratos
- ContratoPdfRenderer: geração do PDF do contrato
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    ContratoEntity,
    DocumentoEntity,
    MatriculaEntity,
    MatriculaStatus,
)


@runtime_checkable
class MatriculaRepository(Protocol):
    def save(self, matricula: MatriculaEntity) -> None:
        ...

    def get_by_id(self, matricula_id: str) -> Optional[MatriculaEntity]:
        ...

    def list_all(
        self,
        aluno_id: Optional[str] = None,
        curso_id: Optional[str] = None,
        status: Optional[MatriculaStatus] = None,
    ) -> List[MatriculaEntity]:
        """Matrículas filtradas, mais recentes primeiro."""
        ...


@runtime_checkable
class DocumentoRepository(Protocol):
    def save(self, documento: DocumentoEntity) -> None:
        ...

    def get_by_id(self, documento_id: str) -> Optional[DocumentoEntity]:
        ...

    def list_by_matricula(self, matricula_id: str) -> List[DocumentoEntity]:
        ...


@runtime_checkable
class ContratoRepository(Protocol):
    def save(self, contrato: ContratoEntity) -> None:
        ...

    def get_by_id(self, contrato_id: str) -> Optional[ContratoEntity]:
        ...

    def get_by_matricula(self, matricula_id: str) -> Optional[ContratoEntity]:
        ...


@dataclass
class DadosContrato:
    """Dados já resolvidos que o renderer imprime no contrato."""

    matricula_id: str
    data_emissao: date
    aluno_nome: str
    aluno_cpf: str
    aluno_email: str
    aluno_endereco: str
    curso_nome: str
    curso_codigo: str
    carga_horaria: int
    modalidade: str
    prazo_meses: int
    data_inicio: Optional[date]
    valor_total: Decimal
    valor_com_desconto: Decimal
    numero_parcelas: int
    valor_parcela: Decimal
    forma_pagamento: str
    desconto_descricao: str = ""
    extras: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class ContratoPdfRenderer(Protocol):
    def render(self, dados: DadosContrato) -> bytes:
        """Retorna os bytes do PDF."""
        ...


# =============================================================================
# Implementações em memória (testes)
# =============================================================================

class InMemoryMatriculaRepository:
    def __init__(self):
        self._matriculas: Dict[str, MatriculaEntity] = {}

    def save(self, matricula: MatriculaEntity) -> None:
        self._matriculas[matricula.id] = matricula

    def get_by_id(self, matricula_id: str) -> Optional[MatriculaEntity]:
        return self._matriculas.get(matricula_id)

    def list_all(
        self,
        aluno_id: Optional[str] = None,
        curso_id: Optional[str] = None,
        status: Optional[MatriculaStatus] = None,
    ) -> List[MatriculaEntity]:
        matriculas = list(self._matriculas.values())
        if aluno_id:
            matriculas = [m for m in matriculas if m.aluno_id == aluno_id]
        if curso_id:
            matriculas = [m for m in matriculas if m.curso_id == curso_id]
        if status:
            matriculas = [m for m in matriculas if m.status == status]
        return sorted(matriculas, key=lambda m: m.criado_em, reverse=True)


class InMemoryDocumentoRepository:
    def __init__(self):
        self._documentos: Dict[str, DocumentoEntity] = {}

    def save(self, documento: DocumentoEntity) -> None:
        self._documentos[documento.id] = documento

    def get_by_id(self, documento_id: str) -> Optional[DocumentoEntity]:
        return self._documentos.get(documento_id)

    def list_by_matricula(self, matricula_id: str) -> List[DocumentoEntity]:
        return sorted(
            (d for d in self._documentos.values() if d.matricula_id == matricula_id),
            key=lambda d: d.criado_em,
        )


class InMemoryContratoRepository:
    def __init__(self):
        self._contratos: Dict[str, ContratoEntity] = {}

    def save(self, contrato: ContratoEntity) -> None:
        self._contratos[contrato.id] = contrato

    def get_by_id(self, contrato_id: str) -> Optional[ContratoEntity]:
        return self._contratos.get(contrato_id)

    def get_by_matricula(self, matricula_id: str) -> Optional[ContratoEntity]:
        for contrato in self._contratos.values():
            if contrato.matricula_id == matricula_id:
                return contrato
        return None


class FakeContratoPdfRenderer:
    """Renderer de testes: devolve um PDF mínimo e guarda os dados."""

    def __init__(self):
        self.renderizados: List[DadosContrato] = []

    def render(self, dados: DadosContrato) -> bytes:
        self.renderizados.append(dados)
        return b"%PDF-1.4\n% contrato " + dados.matricula_id.encode("utf-8")

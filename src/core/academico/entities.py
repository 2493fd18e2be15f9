"""
Entidades do Domínio Acadêmico.

Entidades:
- AlunoEntity: pessoa que solicita matrícula
- CursoEntity: curso ofertado pela instituição
- Modalidade: formas de oferta do curso
- TurmaEntity / AlocacaoTurmaEntity: turmas do curso e alunos alocados
- DisciplinaCursoEntity / GradeCurricularEntity: disciplinas e grade do aluno

Regras de Negócio Encapsuladas:
- CPF com 11 dígitos e dígitos verificadores válidos
- E-mail em formato válido
- Código do curso sempre em maiúsculas
- Valor e carga horária positivos
- Turma nunca ultrapassa o número de vagas
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional
import re
import uuid

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ErrorCode,
    ValidationError,
)


EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# Limite das colunas monetárias (12 dígitos, 2 decimais)
VALOR_MAXIMO = Decimal("9999999999.99")


def somente_digitos(valor: str) -> str:
    """Remove pontuação, mantendo apenas dígitos."""
    return re.sub(r"\D", "", valor or "")


def cpf_valido(cpf: str) -> bool:
    """
    Verifica os dígitos verificadores de um CPF.

    Args:
        cpf: CPF com ou sem pontuação

    Returns:
        True se o CPF tem 11 dígitos e os verificadores conferem
    """
    digitos = somente_digitos(cpf)
    if len(digitos) != 11 or digitos == digitos[0] * 11:
        return False

    for tamanho in (9, 10):
        soma = sum(
            int(digitos[i]) * (tamanho + 1 - i) for i in range(tamanho)
        )
        verificador = (soma * 10) % 11 % 10
        if verificador != int(digitos[tamanho]):
            return False
    return True


class Modalidade(Enum):
    """Modalidades de oferta de curso."""

    PRESENCIAL = "presencial"
    EAD = "ead"
    HIBRIDO = "hibrido"

    @classmethod
    def from_string(cls, value: str) -> "Modalidade":
        for modalidade in cls:
            if modalidade.value == (value or "").lower():
                return modalidade
        raise ValidationError(f"Modalidade inválida: {value}", field="modalidade")


@dataclass
class AlunoEntity:
    """
    Entidade de Domínio: Aluno.

    Invariantes:
    - Nome com pelo menos 3 caracteres
    - E-mail válido (armazenado em minúsculas)
    - CPF armazenado apenas com dígitos

    Example:
        aluno = AlunoEntity.criar(
            nome="Maria Souza",
            email="maria@exemplo.com",
            cpf="529.982.247-25",
        )
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    email: str = ""
    cpf: str = ""
    telefone: str = ""
    data_nascimento: Optional[date] = None
    endereco: str = ""
    ativo: bool = True

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    NOME_MIN_LENGTH: int = 3
    NOME_MAX_LENGTH: int = 200

    @classmethod
    def criar(
        cls,
        nome: str,
        email: str,
        cpf: str,
        telefone: str = "",
        data_nascimento: Optional[date] = None,
        endereco: str = "",
    ) -> "AlunoEntity":
        """
        Factory method para criar aluno com validações.

        Raises:
            ValidationError: Se nome, e-mail ou CPF inválidos
        """
        cls._validar_nome(nome)
        cls._validar_email(email)
        cls._validar_cpf(cpf)
        cls._validar_data_nascimento(data_nascimento)

        return cls(
            nome=nome.strip(),
            email=email.strip().lower(),
            cpf=somente_digitos(cpf),
            telefone=(telefone or "").strip(),
            data_nascimento=data_nascimento,
            endereco=(endereco or "").strip(),
        )

    @classmethod
    def _validar_nome(cls, nome: str) -> None:
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")
        if len(nome.strip()) < cls.NOME_MIN_LENGTH:
            raise ValidationError(
                f"Nome deve ter pelo menos {cls.NOME_MIN_LENGTH} caracteres",
                field="nome",
            )
        if len(nome.strip()) > cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter no máximo {cls.NOME_MAX_LENGTH} caracteres",
                field="nome",
            )

    @staticmethod
    def _validar_email(email: str) -> None:
        if not email or not EMAIL_REGEX.match(email.strip()):
            raise ValidationError("E-mail inválido", field="email")

    @staticmethod
    def _validar_cpf(cpf: str) -> None:
        if len(somente_digitos(cpf)) != 11:
            raise ValidationError("CPF deve conter 11 dígitos", field="cpf")
        if not cpf_valido(cpf):
            raise ValidationError("CPF inválido", field="cpf")

    @staticmethod
    def _validar_data_nascimento(data_nascimento: Optional[date]) -> None:
        if data_nascimento and data_nascimento > date.today():
            raise ValidationError(
                "Data de nascimento não pode estar no futuro",
                field="data_nascimento",
            )

    def atualizar(self, **dados) -> None:
        """
        Atualiza campos editáveis, revalidando cada um.

        Campos desconhecidos são ignorados.
        """
        if "nome" in dados and dados["nome"] is not None:
            self._validar_nome(dados["nome"])
            self.nome = dados["nome"].strip()
        if "email" in dados and dados["email"] is not None:
            self._validar_email(dados["email"])
            self.email = dados["email"].strip().lower()
        if "cpf" in dados and dados["cpf"] is not None:
            self._validar_cpf(dados["cpf"])
            self.cpf = somente_digitos(dados["cpf"])
        if "data_nascimento" in dados:
            self._validar_data_nascimento(dados["data_nascimento"])
            self.data_nascimento = dados["data_nascimento"]
        for campo in ("telefone", "endereco"):
            if campo in dados and dados[campo] is not None:
                setattr(self, campo, dados[campo].strip())
        if "ativo" in dados and dados["ativo"] is not None:
            self.ativo = bool(dados["ativo"])
        self._atualizar_timestamp()

    def anonimizar(self, dados_anonimizados: dict) -> None:
        """Substitui dados pessoais pelos valores anonimizados (LGPD)."""
        for campo in ("nome", "email", "cpf", "telefone", "endereco"):
            if campo in dados_anonimizados:
                setattr(self, campo, dados_anonimizados[campo])
        self.data_nascimento = None
        self.ativo = False
        self._atualizar_timestamp()

    @property
    def cpf_formatado(self) -> str:
        if len(self.cpf) != 11:
            return self.cpf
        return f"{self.cpf[:3]}.{self.cpf[3:6]}.{self.cpf[6:9]}-{self.cpf[9:]}"

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    def __repr__(self) -> str:
        return f"AlunoEntity(id={self.id[:8]}..., nome={self.nome!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AlunoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class CursoEntity:
    """
    Entidade de Domínio: Curso.

    Attributes:
        codigo: Código único em maiúsculas (ex: "ADS")
        carga_horaria: Total de horas do curso
        modalidade: presencial, ead ou hibrido
        valor: Valor total do curso (Decimal)
        vagas: Limite de vagas (None = ilimitado)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    codigo: str = ""
    descricao: str = ""
    carga_horaria: int = 0
    modalidade: Modalidade = Modalidade.PRESENCIAL
    valor: Decimal = Decimal("0.00")
    vagas: Optional[int] = None
    ativo: bool = True

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls,
        nome: str,
        codigo: str,
        carga_horaria: int,
        valor,
        modalidade: Modalidade = Modalidade.PRESENCIAL,
        descricao: str = "",
        vagas: Optional[int] = None,
    ) -> "CursoEntity":
        """
        Factory method para criar curso com validações.

        Raises:
            ValidationError: Se algum campo for inválido
        """
        cls._validar_nome(nome)
        cls._validar_codigo(codigo)
        cls._validar_carga_horaria(carga_horaria)
        valor_decimal = cls._validar_valor(valor)
        cls._validar_vagas(vagas)

        return cls(
            nome=nome.strip(),
            codigo=codigo.strip().upper(),
            descricao=(descricao or "").strip(),
            carga_horaria=int(carga_horaria),
            modalidade=modalidade,
            valor=valor_decimal,
            vagas=vagas,
        )

    @staticmethod
    def _validar_nome(nome: str) -> None:
        if not nome or len(nome.strip()) < 3:
            raise ValidationError(
                "Nome do curso deve ter pelo menos 3 caracteres", field="nome"
            )

    @staticmethod
    def _validar_codigo(codigo: str) -> None:
        if not codigo or len(codigo.strip()) < 2:
            raise ValidationError(
                "Código deve ter pelo menos 2 caracteres", field="codigo"
            )

    @staticmethod
    def _validar_carga_horaria(carga_horaria) -> None:
        try:
            horas = int(carga_horaria)
        except (TypeError, ValueError):
            raise ValidationError("Carga horária inválida", field="carga_horaria")
        if horas <= 0:
            raise ValidationError(
                "Carga horária deve ser positiva", field="carga_horaria"
            )

    @staticmethod
    def _validar_valor(valor) -> Decimal:
        try:
            valor_decimal = Decimal(str(valor)).quantize(Decimal("0.01"))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("Valor inválido", field="valor")
        if valor_decimal <= 0:
            raise ValidationError("Valor deve ser positivo", field="valor")
        if valor_decimal > VALOR_MAXIMO:
            raise ValidationError("Valor excede o máximo permitido", field="valor")
        return valor_decimal

    @staticmethod
    def _validar_vagas(vagas: Optional[int]) -> None:
        if vagas is not None and vagas < 0:
            raise ValidationError("Vagas não pode ser negativo", field="vagas")

    def atualizar(self, **dados) -> None:
        """Atualiza campos editáveis, revalidando cada um."""
        if dados.get("nome") is not None:
            self._validar_nome(dados["nome"])
            self.nome = dados["nome"].strip()
        if dados.get("codigo") is not None:
            self._validar_codigo(dados["codigo"])
            self.codigo = dados["codigo"].strip().upper()
        if dados.get("descricao") is not None:
            self.descricao = dados["descricao"].strip()
        if dados.get("carga_horaria") is not None:
            self._validar_carga_horaria(dados["carga_horaria"])
            self.carga_horaria = int(dados["carga_horaria"])
        if dados.get("valor") is not None:
            self.valor = self._validar_valor(dados["valor"])
        if dados.get("modalidade") is not None:
            modalidade = dados["modalidade"]
            if not isinstance(modalidade, Modalidade):
                modalidade = Modalidade.from_string(modalidade)
            self.modalidade = modalidade
        if "vagas" in dados:
            self._validar_vagas(dados["vagas"])
            self.vagas = dados["vagas"]
        if dados.get("ativo") is not None:
            self.ativo = bool(dados["ativo"])
        self.atualizado_em = datetime.now()

    @property
    def prazo_meses(self) -> int:
        """Duração estimada em meses (80 horas por mês)."""
        if self.carga_horaria <= 0:
            return 24
        return -(-self.carga_horaria // 80)

    def __repr__(self) -> str:
        return f"CursoEntity(codigo={self.codigo}, nome={self.nome!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CursoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class TurmaEntity:
    """
    Entidade de Domínio: Turma de um curso.

    Invariantes:
    - 0 <= alunos_alocados <= vagas
    - Código em maiúsculas, único dentro do curso
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    curso_id: str = ""
    nome: str = ""
    codigo: str = ""
    turno: str = ""
    data_inicio: Optional[date] = None
    vagas: int = 0
    alunos_alocados: int = 0
    ativo: bool = True

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls,
        curso_id: str,
        nome: str,
        codigo: str,
        vagas: int,
        turno: str = "",
        data_inicio: Optional[date] = None,
    ) -> "TurmaEntity":
        if not curso_id:
            raise ValidationError("Curso é obrigatório", field="curso_id")
        if not nome or len(nome.strip()) < 2:
            raise ValidationError("Nome da turma deve ter pelo menos 2 caracteres", field="nome")
        if not codigo or not codigo.strip():
            raise ValidationError("Código da turma é obrigatório", field="codigo")
        try:
            vagas = int(vagas)
        except (TypeError, ValueError):
            raise ValidationError("Vagas inválidas", field="vagas")
        if vagas <= 0:
            raise ValidationError("Turma deve ter pelo menos uma vaga", field="vagas")

        return cls(
            curso_id=curso_id,
            nome=nome.strip(),
            codigo=codigo.strip().upper(),
            turno=(turno or "").strip(),
            data_inicio=data_inicio,
            vagas=vagas,
        )

    @property
    def vagas_disponiveis(self) -> int:
        return max(0, self.vagas - self.alunos_alocados)

    def exigir_vaga(self) -> None:
        """
        A vaga é ocupada pelo repositório (``TurmaRepository.ocupar_vaga``).

        Raises:
            BusinessRuleViolationError: NO_VACANCIES se a turma está cheia
        """
        if self.vagas_disponiveis <= 0:
            raise BusinessRuleViolationError(
                "Não há vagas disponíveis nesta turma",
                rule="turma_lotada",
                code=ErrorCode.NO_VACANCIES,
            )

    def __repr__(self) -> str:
        return f"TurmaEntity(codigo={self.codigo}, {self.alunos_alocados}/{self.vagas})"


@dataclass
class AlocacaoTurmaEntity:
    """Aluno alocado em uma turma a partir de uma matrícula."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    turma_id: str = ""
    matricula_id: str = ""
    aluno_id: str = ""
    status: str = "ativa"
    observacoes: str = ""
    alocado_em: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "turma_id": self.turma_id,
            "matricula_id": self.matricula_id,
            "aluno_id": self.aluno_id,
            "status": self.status,
            "observacoes": self.observacoes,
            "alocado_em": self.alocado_em.isoformat(),
        }


@dataclass
class DisciplinaCursoEntity:
    """Disciplina da matriz curricular do curso, oferecida em um semestre."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    curso_id: str = ""
    codigo: str = ""
    nome: str = ""
    semestre: int = 1
    carga_horaria: int = 0

    @classmethod
    def criar(
        cls, curso_id: str, codigo: str, nome: str, semestre: int, carga_horaria: int
    ) -> "DisciplinaCursoEntity":
        if not curso_id:
            raise ValidationError("Curso é obrigatório", field="curso_id")
        if not codigo or not codigo.strip():
            raise ValidationError("Código da disciplina é obrigatório", field="codigo")
        if not nome or len(nome.strip()) < 3:
            raise ValidationError(
                "Nome da disciplina deve ter pelo menos 3 caracteres", field="nome"
            )
        try:
            semestre = int(semestre)
            carga_horaria = int(carga_horaria)
        except (TypeError, ValueError):
            raise ValidationError("Semestre e carga horária devem ser inteiros", field="semestre")
        if semestre < 1:
            raise ValidationError("Semestre deve ser maior que zero", field="semestre")
        if carga_horaria <= 0:
            raise ValidationError("Carga horária deve ser positiva", field="carga_horaria")

        return cls(
            curso_id=curso_id,
            codigo=codigo.strip().upper(),
            nome=nome.strip(),
            semestre=semestre,
            carga_horaria=carga_horaria,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "curso_id": self.curso_id,
            "codigo": self.codigo,
            "nome": self.nome,
            "semestre": self.semestre,
            "carga_horaria": self.carga_horaria,
        }


@dataclass
class GradeCurricularEntity:
    """
    Grade curricular do aluno em um curso.

    Cada item de ``disciplinas`` copia a disciplina do curso no momento
    da geração, com status ``pendente``. Há no máximo uma grade por
    aluno e curso.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    matricula_id: str = ""
    aluno_id: str = ""
    curso_id: str = ""
    status: str = "ativa"
    disciplinas: List[Dict[str, Any]] = field(default_factory=list)
    criado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def gerar(
        cls,
        matricula_id: str,
        aluno_id: str,
        curso_id: str,
        disciplinas: List[DisciplinaCursoEntity],
    ) -> "GradeCurricularEntity":
        ordenadas = sorted(disciplinas, key=lambda d: (d.semestre, d.codigo))
        return cls(
            matricula_id=matricula_id,
            aluno_id=aluno_id,
            curso_id=curso_id,
            disciplinas=[
                {
                    "disciplina_id": d.id,
                    "codigo": d.codigo,
                    "nome": d.nome,
                    "semestre": d.semestre,
                    "carga_horaria": d.carga_horaria,
                    "status": "pendente",
                }
                for d in ordenadas
            ],
        )

    @property
    def carga_horaria_total(self) -> int:
        return sum(d["carga_horaria"] for d in self.disciplinas)

"""
Exceções de Domínio do Portal de Matrículas.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Todo erro carrega uma mensagem e um código string (ex: ``NOT_FOUND``).
As views JSON convertem a exceção no envelope
``{"success": false, "error": {"code": ..., "message": ...}}``.

Hierarquia:
    DomainException (base, equivalente ao AppError)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    ├── AuthorizationError (credencial ausente ou inválida)
    └── ExternalServiceError (gateway/serviço externo falhou)
"""


class ErrorCode:
    """
    Códigos de erro conhecidos pela aplicação.

    Os valores são strings estáveis, consumidas pelo frontend
    para exibir mensagens (toasts) apropriadas.
    """

    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_STATUS = "INVALID_STATUS"
    ALREADY_SIGNED = "ALREADY_SIGNED"
    ALREADY_PAID = "ALREADY_PAID"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    INVALID_PAYMENT_METHOD = "INVALID_PAYMENT_METHOD"
    INVALID_DISCOUNT = "INVALID_DISCOUNT"
    INVALID_NEGOTIATION = "INVALID_NEGOTIATION"
    ALREADY_ALLOCATED = "ALREADY_ALLOCATED"
    NO_VACANCIES = "NO_VACANCIES"
    INVALID_CLASS = "INVALID_CLASS"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    MENSAGENS = {
        UNEXPECTED_ERROR: "Erro inesperado",
        NOT_FOUND: "Recurso não encontrado",
        UNAUTHORIZED: "Não autorizado",
        FORBIDDEN: "Acesso negado",
        VALIDATION_ERROR: "Erro de validação",
        ALREADY_EXISTS: "Recurso já existe",
        INVALID_STATUS: "Status inválido",
        ALREADY_SIGNED: "Já assinado",
        ALREADY_PAID: "Este pagamento já foi registrado",
        ALREADY_CANCELLED: "Este pagamento já foi cancelado",
        UPLOAD_FAILED: "Falha no upload",
        PAYMENT_FAILED: "Falha no processamento do pagamento",
        GATEWAY_ERROR: "Erro de comunicação com serviço externo",
        INVALID_PAYMENT_METHOD: "Método de pagamento inválido",
        INVALID_DISCOUNT: "Desconto inválido",
        INVALID_NEGOTIATION: "Negociação inválida",
        ALREADY_ALLOCATED: "Aluno já está alocado nesta turma",
        NO_VACANCIES: "Não há vagas disponíveis nesta turma",
        INVALID_CLASS: "Turma inválida para esta matrícula",
        SERVICE_UNAVAILABLE: "Serviço indisponível",
    }

    @classmethod
    def mensagem_padrao(cls, code: str) -> str:
        """Retorna mensagem padrão para o código (ou a genérica)."""
        return cls.MENSAGENS.get(code, cls.MENSAGENS[cls.UNEXPECTED_ERROR])


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            pagamento.registrar_pagamento()
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str = None, code: str = None):
        self.code = code or ErrorCode.UNEXPECTED_ERROR
        self.message = message or ErrorCode.mensagem_padrao(self.code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (usado no envelope de erro)."""
        return {
            "code": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento.

    Example:
        if valor <= 0:
            raise ValidationError("Valor deve ser positivo", field="valor")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, ErrorCode.VALIDATION_ERROR)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        matricula = repo.get_by_id(matricula_id)
        if not matricula:
            raise EntityNotFoundError(
                "Matrícula não encontrada",
                entity_type="Matricula",
                entity_id=matricula_id,
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, ErrorCode.NOT_FOUND)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    O ``code`` identifica a regra para o cliente (ALREADY_PAID,
    ALREADY_SIGNED, INVALID_STATUS...). O ``rule`` é um identificador
    interno mais detalhado, útil em logs.

    Example:
        if contrato.status == ContratoStatus.ASSINADO:
            raise BusinessRuleViolationError(
                "Este contrato já foi assinado",
                rule="contrato_ja_assinado",
                code=ErrorCode.ALREADY_SIGNED,
            )
    """

    def __init__(self, message: str, rule: str = None, code: str = None):
        self.rule = rule
        super().__init__(message, code or ErrorCode.BUSINESS_RULE_VIOLATION)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class AuthorizationError(DomainException):
    """Credencial ausente ou inválida (tokens de cron, relatórios, webhooks)."""

    def __init__(self, message: str = "Não autorizado"):
        super().__init__(message, ErrorCode.UNAUTHORIZED)


class ExternalServiceError(DomainException):
    """
    Falha em serviço externo (gateway de pagamento, storage).

    Attributes:
        service: Nome do serviço que falhou
    """

    def __init__(self, message: str, service: str = None):
        self.service = service
        super().__init__(message, ErrorCode.GATEWAY_ERROR)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.service:
            result["service"] = self.service
        return result

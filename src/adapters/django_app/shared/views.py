"""
Mixins das views HTML.

Views são THIN: obtêm o use case no container, convertem o form em
DTO e exibem o resultado ou o erro de domínio.
"""

from typing import Optional

from django.contrib import messages
from django.http import HttpRequest

from src.core.shared.exceptions import DomainException, ValidationError


class ContainerMixin:
    """Acesso ao DI Container."""

    def get_container(self):
        from src.config.container import get_container
        return get_container()

    def get_service(self, service_name: str):
        return getattr(self.get_container(), service_name)()


class FlashMessageMixin:
    def success_message(self, request: HttpRequest, message: str) -> None:
        messages.success(request, message)

    def error_message(self, request: HttpRequest, message: str) -> None:
        messages.error(request, message)


class UserContextMixin:
    def get_user_id(self, request: HttpRequest) -> Optional[str]:
        if request.user.is_authenticated:
            return str(request.user.id)
        return None


def erro_no_form(form, erro: DomainException) -> None:
    """Anexa o erro de domínio ao campo correspondente (ou ao form)."""
    campo = erro.field if isinstance(erro, ValidationError) else None
    if campo not in form.fields:
        campo = None
    form.add_error(campo, erro.message)

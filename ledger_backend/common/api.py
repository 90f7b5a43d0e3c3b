# common/api.py

"""
Shared API plumbing for ledger endpoints.

- Tenant is taken from the X-Tenant-ID header and must be one the
  authenticated user is a member of (403 otherwise).
- Ledger errors map to HTTP: not found -> 404, validation -> 400.
  Model validation errors (full_clean) are reported as 400 too.
  Integrity errors are programming errors and propagate (500).
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.response import Response

from catalog.models import Tenant
from common.exceptions import LedgerError, LedgerNotFoundError, LedgerValidationError

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-ID"

# Errors a client can fix; anything else propagates.
LEDGER_CLIENT_ERRORS = (LedgerValidationError, LedgerNotFoundError, DjangoValidationError)


def resolve_tenant(request) -> Tenant | None:
    raw = (request.headers.get(TENANT_HEADER) or "").strip()
    if not raw:
        return None

    user = request.user
    try:
        return Tenant.objects.filter(is_active=True, members=user).get(id=raw)
    except (Tenant.DoesNotExist, DjangoValidationError, ValueError):
        return None


class IsTenantMember(BasePermission):
    """
    Allows access only when X-Tenant-ID names an active tenant the user belongs to.
    Stores the tenant on request.tenant.
    """

    message = f"A valid {TENANT_HEADER} header for a tenant you belong to is required."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        tenant = resolve_tenant(request)
        if tenant is None:
            return False
        request.tenant = tenant
        return True


class TenantAPIView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsTenantMember]

    @property
    def tenant(self) -> Tenant:
        return self.request.tenant


def ledger_error_response(exc: LedgerError | DjangoValidationError) -> Response:
    if isinstance(exc, DjangoValidationError):
        # model full_clean() rejected a value the serializer let through
        exc = LedgerValidationError.from_model_error(exc)

    if isinstance(exc, LedgerNotFoundError):
        return Response(exc.as_dict(), status=status.HTTP_404_NOT_FOUND)

    logger.info(
        "Ledger request rejected",
        extra={"code": exc.code, "detail": exc.message},
    )
    return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)

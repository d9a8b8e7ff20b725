# inventory/api/errors.py

"""
LEDGER ERROR → HTTP RESPONSE

Single translation point used by every ledger-backed view (inventory,
purchases, sales). Business errors answer with their own message;
infrastructure-class errors with a generic retry message (the detail was
already logged where it was raised).
"""

from __future__ import annotations

from rest_framework.response import Response

from inventory.services.exceptions import LedgerError


def ledger_error_response(exc: LedgerError) -> Response:
    return Response({"detail": exc.user_message}, status=exc.status_code)

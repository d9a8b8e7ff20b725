# shops/scope.py
"""
SHOP SCOPE RESOLUTION

Every shop-scoped request names its tenant in the X-Shop-Id header.
The header is only trusted after it is matched against the caller's
ShopMembership; the resolved shop and role are cached on the request:

    request.shop       -> shops.Shop
    request.shop_role  -> "OWNER" | "MANAGER" | "STAFF"

Errors:
- missing / malformed header -> 400 (ParseError)
- no membership (or inactive shop) -> 403 (PermissionDenied)
"""

from __future__ import annotations

import logging
import uuid

from rest_framework.exceptions import ParseError, PermissionDenied

from shops.models import ShopMembership

logger = logging.getLogger(__name__)

SHOP_HEADER = "X-Shop-Id"


def resolve_shop_scope(request) -> ShopMembership:
    cached = getattr(request, "shop_membership", None)
    if cached is not None:
        return cached

    raw = (request.headers.get(SHOP_HEADER) or "").strip()
    if not raw:
        raise ParseError(f"{SHOP_HEADER} header is required")

    try:
        shop_id = uuid.UUID(raw)
    except ValueError:
        raise ParseError(f"{SHOP_HEADER} header must be a valid UUID")

    membership = (
        ShopMembership.objects.select_related("shop")
        .filter(user=request.user, shop_id=shop_id, shop__is_active=True)
        .first()
    )
    if membership is None:
        logger.warning(
            "Shop access denied",
            extra={"user_id": str(request.user.pk), "shop_id": str(shop_id)},
        )
        raise PermissionDenied("Access to this shop is forbidden")

    request.shop_membership = membership
    request.shop = membership.shop
    request.shop_role = membership.role
    return membership

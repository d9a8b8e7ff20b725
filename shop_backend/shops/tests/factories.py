# shops/tests/factories.py

"""
Shared test builders: users, shops, memberships, stocked products.
"""

from decimal import Decimal

from django.contrib.auth import get_user_model

from inventory.models import StockMovement
from inventory.services.items import create_item
from inventory.services.ledger import adjust_stock
from shops.models import Shop, ShopMembership

User = get_user_model()


def make_user(email="owner@example.com", password="pass12345"):
    return User.objects.create_user(email=email, password=password)


def make_shop(name="Corner Shop"):
    return Shop.objects.create(name=name)


def add_member(user, shop, role=ShopMembership.Role.OWNER):
    return ShopMembership.objects.create(user=user, shop=shop, role=role)


def make_item(shop, actor, *, sku="SKU-1", name="Rice 1kg", quantity=0, reorder_level=0,
              cost_price="5.00", selling_price="20.00"):
    """create_item() with sensible defaults; returns the projected item dict."""
    return create_item(
        shop=shop,
        actor=actor,
        data={
            "name": name,
            "sku": sku,
            "quantity": quantity,
            "cost_price": Decimal(cost_price),
            "selling_price": Decimal(selling_price),
            "reorder_level": reorder_level,
        },
    )


def stock_in(shop, actor, product_id, quantity):
    return adjust_stock(
        shop=shop,
        actor=actor,
        product_id=product_id,
        quantity=quantity,
        movement_type=StockMovement.MovementType.IN,
        source=StockMovement.Source.MANUAL,
    )

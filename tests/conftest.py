from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.common.constants import UserRole
from apps.menus.models import Category, MenuItem
from apps.users.models import User


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(email="counter@example.com", password="pass12345", role=UserRole.STAFF)


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(email="owner@example.com", password="pass12345")


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def category(db):
    return Category.objects.create(name="Noodles", display_order=1)


@pytest.fixture
def pad_thai(category):
    return MenuItem.objects.create(category=category, name="Pad Thai", price=Decimal("60.00"))


@pytest.fixture
def iced_tea(category):
    return MenuItem.objects.create(category=category, name="Thai Iced Tea", price=Decimal("30.00"))


@pytest.fixture
def checkout_payload(pad_thai, iced_tea):
    # 2 x 60 + 1 x 30 = 150
    return {
        "customer_name": "Somchai",
        "items": [
            {"menu_item_id": str(pad_thai.id), "quantity": 2},
            {"menu_item_id": str(iced_tea.id), "quantity": 1, "notes": "less sugar"},
        ],
    }

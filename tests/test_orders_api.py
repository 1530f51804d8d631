import pytest

from apps.common.constants import OrderStatus
from apps.orders.models import Order
from apps.queues.services import create_walk_in_ticket
from apps.shop.models import ShopSettings

pytestmark = pytest.mark.django_db


@pytest.fixture
def table_payload(checkout_payload):
    return {**checkout_payload, "table_number": "T4"}


class TestTableCheckout:
    def test_anyone_can_order_to_a_table(self, api_client, table_payload):
        response = api_client.post("/orders/", table_payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["mode"] == "restaurant"
        assert data["table_number"] == "T4"
        assert data["queue_number"] is None
        assert data["ticket"] is None
        assert data["total_amount"] == "150.00"
        assert len(data["order_no"]) == 6

    def test_table_number_required(self, api_client, checkout_payload):
        assert api_client.post("/orders/", checkout_payload, format="json").status_code == 400

    def test_disabled_table_ordering(self, api_client, table_payload):
        settings = ShopSettings.load()
        settings.enable_table_ordering = False
        settings.save()

        assert api_client.post("/orders/", table_payload, format="json").status_code == 400


class TestOrderList:
    def test_staff_lists_and_filters(self, staff_client, api_client, table_payload):
        api_client.post("/orders/", table_payload, format="json")
        create_walk_in_ticket()

        everything = staff_client.get("/orders/").json()
        market = staff_client.get("/orders/", {"mode": "market"}).json()

        assert everything["count"] == 2
        assert market["count"] == 1
        assert market["results"][0]["queue_label"] == "Q001"

    def test_filter_by_status(self, staff_client):
        create_walk_in_ticket()
        create_walk_in_ticket().soft_delete()

        data = staff_client.get("/orders/", {"status": "pending"}).json()
        assert data["count"] == 1

    def test_anonymous_cannot_list(self, api_client):
        assert api_client.get("/orders/").status_code == 401


class TestOrderLookup:
    def test_detail(self, staff_client):
        order = create_walk_in_ticket()

        data = staff_client.get(f"/orders/{order.id}").json()
        assert data["order_no"] == order.order_no
        assert data["next_status"] == "confirmed"

    def test_find_by_order_no(self, staff_client):
        order = create_walk_in_ticket()

        response = staff_client.get(f"/orders/find/{order.order_no}")
        assert response.status_code == 200
        assert response.json()["id"] == str(order.id)

    def test_find_unknown(self, staff_client):
        assert staff_client.get("/orders/find/ZZZZZZ").status_code == 404


class TestGuidedActions:
    def test_cancel_pending(self, staff_client):
        order = create_walk_in_ticket()

        response = staff_client.post(f"/orders/{order.id}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["next_status"] is None
        assert response.json()["can_cancel"] is False

    def test_cancel_refused_after_confirm(self, staff_client):
        order = create_walk_in_ticket()
        staff_client.post(f"/orders/{order.id}/advance")

        response = staff_client.post(f"/orders/{order.id}/cancel")

        assert response.status_code == 400
        order.refresh_from_db()
        assert order.status == OrderStatus.CONFIRMED

    def test_unknown_order(self, staff_client):
        response = staff_client.post("/orders/00000000-0000-0000-0000-000000000000/advance")
        assert response.status_code == 404


class TestRawStatusOverride:
    def test_override_from_any_state(self, staff_client):
        order = create_walk_in_ticket()
        Order.objects.filter(pk=order.pk).update(status=OrderStatus.COMPLETED)

        response = staff_client.patch(f"/orders/{order.id}/status", {"status": "cancelled"}, format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_invalid_status(self, staff_client):
        order = create_walk_in_ticket()

        response = staff_client.patch(f"/orders/{order.id}/status", {"status": "lost"}, format="json")

        assert response.status_code == 400
        assert "pending" in response.json()["error"]

from unittest import mock

import pytest
from django.core.cache import cache

from apps.common.constants import OrderStatus
from apps.common.throttling import CheckoutRateThrottle, DisplayBoardThrottle, TicketPollingThrottle
from apps.orders.models import Order
from apps.queues import codec
from apps.queues.exceptions import AllocationError
from apps.queues.services import create_walk_in_ticket
from apps.shop.models import ShopSettings

pytestmark = pytest.mark.django_db


def _checkout(client, payload):
    return client.post("/queue/", payload, format="json")


class TestCheckout:
    def test_checkout_returns_ticket(self, api_client, checkout_payload):
        response = _checkout(api_client, checkout_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["queue_number"] == 1
        assert data["queue_label"] == "Q001"
        assert data["total_amount"] == "150.00"
        assert data["path"] == f"/queue/Q001-{data['hash']}"
        assert data["url"] == f"http://testserver/queue/Q001-{data['hash']}"
        assert data["ticket"] == f"Q001-{data['hash']}"
        assert data["qr_code"]

    def test_checkout_prices_from_menu(self, api_client, checkout_payload, pad_thai):
        _checkout(api_client, checkout_payload)
        line = Order.objects.get().items.get(menu_item=pad_thai)
        assert str(line.unit_price) == "60.00"

    def test_empty_cart_rejected(self, api_client):
        response = _checkout(api_client, {"items": []})
        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_sold_out_item_rejected(self, api_client, checkout_payload, pad_thai):
        pad_thai.is_available = False
        pad_thai.save()

        response = _checkout(api_client, checkout_payload)
        assert response.status_code == 400

    def test_zero_quantity_rejected(self, api_client, pad_thai):
        payload = {"items": [{"menu_item_id": str(pad_thai.id), "quantity": 0}]}
        assert _checkout(api_client, payload).status_code == 400

    def test_disabled_queue_refuses_checkout(self, api_client, checkout_payload):
        settings = ShopSettings.load()
        settings.enable_queue_system = False
        settings.save()

        assert _checkout(api_client, checkout_payload).status_code == 400

    def test_counter_outage_is_503(self, api_client, checkout_payload):
        with mock.patch("apps.queues.services.next_queue_number", side_effect=AllocationError("down")):
            response = _checkout(api_client, checkout_payload)

        assert response.status_code == 503
        assert not Order.objects.exists()


class TestTicketLookup:
    def test_poll_ticket(self, api_client, checkout_payload):
        ticket = _checkout(api_client, checkout_payload).json()["ticket"]

        response = api_client.get(f"/queue/{ticket}")

        assert response.status_code == 200
        data = response.json()
        assert data["queue_label"] == "Q001"
        assert data["orders_ahead"] == 0
        assert data["estimated_wait_minutes"] == 0
        assert len(data["items"]) == 2

    def test_poll_reports_position(self, api_client, checkout_payload):
        _checkout(api_client, checkout_payload)
        _checkout(api_client, checkout_payload)
        ticket = _checkout(api_client, checkout_payload).json()["ticket"]

        data = api_client.get(f"/queue/{ticket}").json()
        assert data["orders_ahead"] == 2
        assert data["estimated_wait_minutes"] == 2 * ShopSettings.load().estimated_wait_per_queue

    @pytest.mark.parametrize(
        "ticket, status_code",
        [("garbage", 400), ("Q007", 400), ("Q007-XYZ", 400), ("Q999-1a2b3c4d", 404)],
    )
    def test_lookup_failures_share_one_message(self, api_client, ticket, status_code):
        response = api_client.get(f"/queue/{ticket}")

        assert response.status_code == status_code
        assert response.json() == {"error": "Ticket not found."}

    def test_wrong_hash_is_403_with_same_message(self, api_client):
        order = create_walk_in_ticket()
        wrong = "0" * 8 if codec.queue_digest(order.id) != "0" * 8 else "1" * 8

        response = api_client.get(f"/queue/{order.queue_label}-{wrong}")

        assert response.status_code == 403
        assert response.json() == {"error": "Ticket not found."}

    def test_qr_png(self, api_client):
        order = create_walk_in_ticket()

        response = api_client.get(f"/queue/{order.ticket}/qr")

        assert response.status_code == 200
        assert response["Content-Type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_qr_for_unknown_ticket(self, api_client):
        assert api_client.get("/queue/Q999-1a2b3c4d/qr").status_code == 404


class TestTicketStatusUpdate:
    def test_staff_sets_status(self, staff_client):
        order = create_walk_in_ticket()

        response = staff_client.patch(f"/queue/{order.ticket}", {"status": "preparing"}, format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "preparing"
        order.refresh_from_db()
        assert order.status == OrderStatus.PREPARING

    def test_invalid_status(self, staff_client):
        order = create_walk_in_ticket()

        response = staff_client.patch(f"/queue/{order.ticket}", {"status": "shipped"}, format="json")

        assert response.status_code == 400
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_unknown_ticket(self, staff_client):
        response = staff_client.patch("/queue/Q999-1a2b3c4d", {"status": "ready"}, format="json")
        assert response.status_code == 404

    def test_malformed_ticket(self, staff_client):
        response = staff_client.patch("/queue/garbage", {"status": "ready"}, format="json")
        assert response.status_code == 400

    def test_anonymous_cannot_update(self, api_client):
        order = create_walk_in_ticket()
        response = api_client.patch(f"/queue/{order.ticket}", {"status": "ready"}, format="json")
        assert response.status_code == 401


class TestWalkIn:
    def test_staff_admits_walk_in(self, staff_client):
        response = staff_client.post("/queue/walk-in", {}, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["queue_label"] == "Q001"
        assert data["total_amount"] == "0.00"

    def test_anonymous_refused(self, api_client):
        assert api_client.post("/queue/walk-in", {}, format="json").status_code == 401


class TestBoards:
    def test_public_display_hides_customer_data(self, api_client, checkout_payload):
        _checkout(api_client, checkout_payload)

        response = api_client.get("/queue/active")

        assert response.status_code == 200
        assert response.json() == [{"queue_number": 1, "queue_label": "Q001", "status": "pending"}]

    def test_display_omits_finished_orders(self, api_client):
        done = create_walk_in_ticket()
        done.status = OrderStatus.COMPLETED
        done.save()
        create_walk_in_ticket()

        labels = [row["queue_label"] for row in api_client.get("/queue/active").json()]
        assert labels == ["Q002"]

    def test_staff_board_has_positions_and_actions(self, staff_client):
        create_walk_in_ticket()
        create_walk_in_ticket()

        response = staff_client.get("/queue/board")

        assert response.status_code == 200
        rows = response.json()
        assert [row["orders_ahead"] for row in rows] == [0, 1]
        assert rows[0]["next_status"] == "confirmed"
        assert rows[0]["can_cancel"] is True

    def test_board_requires_staff(self, api_client):
        assert api_client.get("/queue/board").status_code == 401


class TestPublicThrottlingAtDefaultRates:
    """Customers behind one shop IP, at the production throttle rates."""

    SHOP_IP = "203.0.113.7"

    @pytest.fixture(autouse=True)
    def default_rates(self, settings, monkeypatch):
        for throttle in (CheckoutRateThrottle, DisplayBoardThrottle, TicketPollingThrottle):
            monkeypatch.setattr(throttle, "THROTTLE_RATES", settings.PUBLIC_THROTTLE_RATES)
        cache.clear()
        yield
        cache.clear()

    def _poll(self, client, ticket):
        return client.get(f"/queue/{ticket}", REMOTE_ADDR=self.SHOP_IP)

    def test_many_phones_polling_from_one_ip(self, api_client):
        tickets = [create_walk_in_ticket().ticket for _ in range(11)]

        codes = [self._poll(api_client, ticket).status_code for _ in range(12) for ticket in tickets]

        assert len(codes) == 132
        assert set(codes) == {200}

    def test_ticket_limit_is_per_ticket(self, api_client):
        hammered = create_walk_in_ticket().ticket
        neighbour = create_walk_in_ticket().ticket
        allowed = TicketPollingThrottle().num_requests

        codes = [self._poll(api_client, hammered).status_code for _ in range(allowed + 1)]

        assert codes[:allowed] == [200] * allowed
        assert codes[-1] == 429
        assert self._poll(api_client, neighbour).status_code == 200

    def test_display_board_refreshing_on_the_shop_screen(self, api_client):
        create_walk_in_ticket()

        # three minutes of the board refreshing every 2.5 s
        codes = {api_client.get("/queue/active", REMOTE_ADDR=self.SHOP_IP).status_code for _ in range(72)}

        assert codes == {200}

    def test_lunch_rush_checkouts_from_one_ip(self, api_client, checkout_payload):
        codes = {
            api_client.post("/queue/", checkout_payload, format="json", REMOTE_ADDR=self.SHOP_IP).status_code
            for _ in range(40)
        }

        assert codes == {201}
        assert Order.objects.count() == 40


class TestResetCounter:
    def test_admin_resets_idle_counter(self, admin_client):
        order = create_walk_in_ticket()
        order.status = OrderStatus.COMPLETED
        order.save()

        response = admin_client.post("/queue/reset-counter", {}, format="json")

        assert response.status_code == 200
        assert response.json()["next_queue"] == "Q001"
        assert create_walk_in_ticket().queue_number == 1

    def test_refused_while_orders_active(self, admin_client):
        create_walk_in_ticket()

        response = admin_client.post("/queue/reset-counter", {}, format="json")

        assert response.status_code == 409
        assert create_walk_in_ticket().queue_number == 2

    def test_force_resets_anyway(self, admin_client):
        create_walk_in_ticket()

        response = admin_client.post("/queue/reset-counter", {"force": True}, format="json")

        assert response.status_code == 200
        assert response.json()["queue_counter"] == 0

    def test_staff_cannot_reset(self, staff_client):
        assert staff_client.post("/queue/reset-counter", {}, format="json").status_code == 403


def test_checkout_to_pickup(api_client, staff_client, checkout_payload):
    created = _checkout(api_client, checkout_payload).json()
    assert created["status"] == "pending"
    k = created["queue_number"]
    assert created["path"] == f"/queue/{codec.format_queue_number(k)}-{created['hash']}"

    order_id = created["order_id"]
    for expected in ["confirmed", "preparing", "ready", "completed"]:
        response = staff_client.post(f"/orders/{order_id}/advance")
        assert response.status_code == 200
        assert response.json()["status"] == expected

        polled = api_client.get(created["path"])
        assert polled.status_code == 200
        assert polled.json()["status"] == expected

    response = staff_client.post(f"/orders/{order_id}/advance")
    assert response.status_code == 400
    assert api_client.get(created["path"]).json()["status"] == "completed"

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bookings.models import Booking
from listings.models import Car
from payments.api import PaymentProcessView, PaymentVerifyView
from payments.models import Payment
from payments.services.flutterwave import GatewayError

User = get_user_model()


class FakeGateway:
    """Stands in for FlutterwaveClient; tests set the class-level replies."""

    charge_result = None
    verify_result = None
    error = None
    calls = []

    @classmethod
    def from_settings(cls):
        return cls()

    def charge(self, payload):
        self.calls.append(("charge", payload))
        if self.error:
            raise self.error
        return self.charge_result

    def verify(self, *, tx_ref=None, transaction_id=None):
        self.calls.append(("verify", tx_ref, transaction_id))
        if self.error:
            raise self.error
        return self.verify_result


class RecordingNotifier:
    calls = []

    @classmethod
    def from_settings(cls):
        return cls()

    def payment_confirmation(self, payment):
        self.calls.append(("payment-confirmation", payment.tx_ref))
        return True


@pytest.fixture
def gateway(monkeypatch):
    FakeGateway.charge_result = None
    FakeGateway.verify_result = None
    FakeGateway.error = None
    FakeGateway.calls = []
    monkeypatch.setattr(PaymentProcessView, "gateway_class", FakeGateway)
    monkeypatch.setattr(PaymentVerifyView, "gateway_class", FakeGateway)
    return FakeGateway


@pytest.fixture
def notifier(monkeypatch):
    RecordingNotifier.calls = []
    monkeypatch.setattr(PaymentVerifyView, "notifier_class", RecordingNotifier)
    return RecordingNotifier


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def renter(db):
    return User.objects.create_user(
        username="renter@example.com",
        email="renter@example.com",
        password="examplepass",
        display_name="Ada Renter",
        driver_license_verified=True,
    )


@pytest.fixture
def car(db):
    host = User.objects.create_user(
        username="host@example.com",
        email="host@example.com",
        password="examplepass",
        role=User.ROLE_HOST,
    )
    return Car.objects.create(
        host=host,
        title="Toyota Camry 2021",
        location="Lekki, Lagos",
        price_per_day=Decimal("20000.00"),
    )


def _booking(user, car, total="40000.00"):
    return Booking.objects.create(
        user=user,
        booking_type=Booking.CAR,
        car=car,
        start_date="2025-06-01",
        end_date="2025-06-03",
        total_amount=Decimal(total),
    )


@pytest.fixture
def booking(renter, car):
    return _booking(renter, car)


@pytest.fixture
def payment(booking, renter):
    return Payment.objects.create(
        booking=booking,
        user=renter,
        amount=Decimal("40000.00"),
        currency="NGN",
        tx_ref="X",
    )


def _process_payload(**overrides):
    payload = {
        "tx_ref": "X",
        "amount": "40000.00",
        "customer": {"email": "renter@example.com", "name": "Ada Renter"},
        "type": "bank_transfer",
        "bank": {"code": "044", "account_number": "0690000031"},
    }
    payload.update(overrides)
    # None drops a default key
    return {key: value for key, value in payload.items() if value is not None}


# Initialize


def test_initialize_creates_pending_payment_with_generated_reference(db, client, renter, booking):
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": "40000.00"},
        format="json",
    )

    assert response.status_code == 201
    body = response.json()["payment"]
    assert body["status"] == "pending"
    assert body["currency"] == "NGN"
    assert body["booking_id"] == booking.id
    assert body["tx_ref"].startswith("CARRRS_")
    payment = Payment.objects.get(tx_ref=body["tx_ref"])
    assert payment.user == renter
    assert payment.amount == Decimal("40000.00")


def test_initialize_keeps_client_reference(db, client, renter, booking):
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": 40000, "tx_ref": "CLIENT-REF-1", "currency": "ngn"},
        format="json",
    )

    assert response.status_code == 201
    assert response.json()["payment"]["tx_ref"] == "CLIENT-REF-1"
    assert Payment.objects.get().currency == "NGN"


def test_initialize_rejects_amount_that_differs_from_booking_total(db, client, renter, booking):
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": "100.00"},
        format="json",
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Payment amount does not match the booking total."
    assert Payment.objects.count() == 0


def test_initialize_rejects_duplicate_reference(db, client, renter, booking, payment):
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": "40000.00", "tx_ref": "X"},
        format="json",
    )

    assert response.status_code == 400
    assert "tx_ref" in response.json()["details"]
    assert Payment.objects.count() == 1


def test_initialize_for_someone_elses_booking_is_not_found(db, client, booking):
    stranger = User.objects.create_user(
        username="stranger@example.com", email="stranger@example.com", password="examplepass"
    )
    client.force_authenticate(user=stranger)

    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": "40000.00"},
        format="json",
    )

    assert response.status_code == 404
    assert "error" in response.json()


def test_initialize_requires_authentication(db, client, booking):
    response = client.post(
        "/api/payments/initialize/",
        {"booking_id": booking.id, "amount": "40000.00"},
        format="json",
    )

    assert response.status_code == 401


# Process


def test_process_pending_bank_transfer_returns_instructions(db, client, gateway, renter, payment):
    gateway.charge_result = {
        "status": "success",
        "message": "Charge initiated",
        "data": {
            "id": 998877,
            "status": "pending",
            "amount": "40000.00",
            "account_number": "0067100155",
            "bank_name": "Mock Bank",
            "tx_ref": "X",
        },
    }
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/process/", _process_payload(), format="json")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "pending"
    assert "Account: 0067100155" in body["message"]
    assert "Reference: X" in body["message"]

    payment.refresh_from_db()
    assert payment.status == "pending"
    assert payment.flutterwave_id == "998877"
    assert payment.payment_type == "bank_transfer"
    assert payment.response_data["bank_name"] == "Mock Bank"

    _, sent = gateway.calls[0]
    assert sent["type"] == "bank_transfer"
    assert sent["bank"] == {"code": "044", "account_number": "0690000031"}
    assert sent["currency"] == "NGN"
    assert sent["redirect_url"].endswith("/payment/verify")


def test_process_successful_card_charge(db, client, gateway, renter, payment):
    gateway.charge_result = {"status": "success", "data": {"id": 1, "status": "successful"}}
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/process/",
        _process_payload(
            type="card",
            bank=None,
            card={
                "card_number": "5531886652142950",
                "cvv": "564",
                "expiry_month": "09",
                "expiry_year": "32",
            },
        ),
        format="json",
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Payment completed successfully"
    payment.refresh_from_db()
    assert payment.status == "successful"


def test_process_gateway_rejection_never_marks_payment_successful(db, client, gateway, renter, payment):
    gateway.error = GatewayError("Invalid card number", status_code=400)
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/process/", _process_payload(), format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid card number"}
    payment.refresh_from_db()
    assert payment.status == "pending"
    assert payment.flutterwave_id == ""
    assert payment.response_data is None


def test_process_requires_customer(db, client, gateway, renter, payment):
    client.force_authenticate(user=renter)
    payload = _process_payload()
    payload.pop("customer")

    response = client.post("/api/payments/process/", payload, format="json")

    assert response.status_code == 400
    assert "customer" in response.json()["details"]
    assert gateway.calls == []


def test_process_requires_method_details_for_type(db, client, gateway, renter, payment):
    client.force_authenticate(user=renter)

    response = client.post(
        "/api/payments/process/",
        _process_payload(type="ussd", bank=None),
        format="json",
    )

    assert response.status_code == 400
    assert "ussd" in response.json()["details"]


def test_process_unknown_reference_is_not_found(db, client, gateway, renter, payment):
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/process/", _process_payload(tx_ref="NOPE"), format="json")

    assert response.status_code == 404
    assert gateway.calls == []


# Verify


def _successful_transaction(**overrides):
    data = {
        "id": 4455,
        "tx_ref": "X",
        "status": "successful",
        "amount": 40000,
        "currency": "NGN",
    }
    data.update(overrides)
    return {"status": "success", "message": "Transaction fetched", "data": data}


def test_verify_successful_confirms_only_its_booking(
    db, client, gateway, notifier, renter, car, booking, payment
):
    other = _booking(renter, car, total="20000.00")
    gateway.verify_result = _successful_transaction()
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "successful"
    assert body["payment"]["flutterwave_id"] == "4455"
    assert body["transaction"]["tx_ref"] == "X"

    payment.refresh_from_db()
    booking.refresh_from_db()
    other.refresh_from_db()
    assert payment.status == Payment.SUCCESSFUL
    assert booking.status == Booking.CONFIRMED
    assert other.status == Booking.PENDING
    assert notifier.calls == [("payment-confirmation", "X")]
    assert gateway.calls == [("verify", "X", None)]


def test_verify_without_amount_details_still_confirms(
    db, client, gateway, notifier, renter, booking, payment
):
    gateway.verify_result = {"status": "success", "data": {"status": "successful", "tx_ref": "X"}}
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 200
    booking.refresh_from_db()
    assert booking.status == Booking.CONFIRMED


def test_reverification_is_idempotent(db, client, gateway, notifier, renter, booking, payment):
    gateway.verify_result = _successful_transaction()
    client.force_authenticate(user=renter)

    first = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")
    second = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert first.status_code == 200
    assert second.status_code == 200
    booking.refresh_from_db()
    payment.refresh_from_db()
    assert booking.status == Booking.CONFIRMED
    assert payment.status == Payment.SUCCESSFUL
    assert len(notifier.calls) == 1


def test_verify_failed_transaction_leaves_booking_pending(
    db, client, gateway, notifier, renter, booking, payment
):
    gateway.verify_result = _successful_transaction(status="failed")
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 200
    assert response.json()["status"] == "failed"
    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == "failed"
    assert booking.status == Booking.PENDING
    assert notifier.calls == []


def test_verify_amount_mismatch_does_not_confirm(db, client, gateway, notifier, renter, booking, payment):
    gateway.verify_result = _successful_transaction(amount=100)
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 200
    assert response.json()["status"] == "failed"
    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == Payment.FAILED
    assert booking.status == Booking.PENDING
    assert notifier.calls == []


def test_verify_currency_mismatch_does_not_confirm(db, client, gateway, notifier, renter, booking, payment):
    gateway.verify_result = _successful_transaction(currency="USD")
    client.force_authenticate(user=renter)

    client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    booking.refresh_from_db()
    assert booking.status == Booking.PENDING


def test_verify_redirect_get_is_public_and_uses_transaction_id(
    db, client, gateway, notifier, booking, payment
):
    gateway.verify_result = _successful_transaction()

    response = client.get("/api/payments/verify/", {"transaction_id": "4455", "tx_ref": "X"})

    assert response.status_code == 200
    assert gateway.calls == [("verify", "X", "4455")]
    booking.refresh_from_db()
    assert booking.status == Booking.CONFIRMED


def test_verify_post_requires_authentication(db, client, gateway, notifier, payment):
    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 401
    assert gateway.calls == []


def test_verify_needs_a_reference(db, client, gateway, notifier, renter):
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {}, format="json")

    assert response.status_code == 400
    assert gateway.calls == []


def test_verify_gateway_error_reports_failure(db, client, gateway, notifier, renter, booking, payment):
    gateway.error = GatewayError("No transaction was found for this id", status_code=400)
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Transaction verification failed"}
    payment.refresh_from_db()
    assert payment.status == Payment.PENDING


def test_verify_non_success_body_reports_failure(db, client, gateway, notifier, renter, payment):
    gateway.verify_result = {"status": "error", "message": "Transaction not found", "data": None}
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Transaction verification failed"}


def test_verify_unknown_payment_is_not_found(db, client, gateway, notifier, renter):
    gateway.verify_result = _successful_transaction(tx_ref="UNKNOWN")
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/verify/", {"tx_ref": "UNKNOWN"}, format="json")

    assert response.status_code == 404
    assert response.json() == {"error": "Payment not found"}


def test_immediate_card_success_sends_one_confirmation_on_verify(
    db, client, gateway, notifier, renter, booking, payment
):
    gateway.charge_result = {"status": "success", "data": {"id": 4455, "status": "successful"}}
    gateway.verify_result = _successful_transaction()
    client.force_authenticate(user=renter)

    processed = client.post(
        "/api/payments/process/",
        _process_payload(type="card", bank=None, card={"card_number": "5531886652142950"}),
        format="json",
    )
    verified = client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")
    client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert processed.json()["status"] == "successful"
    assert verified.status_code == 200
    booking.refresh_from_db()
    assert booking.status == Booking.CONFIRMED
    assert notifier.calls == [("payment-confirmation", "X")]


def test_process_refuses_to_recharge_settled_payment(
    db, client, gateway, notifier, renter, booking, payment
):
    gateway.verify_result = _successful_transaction()
    gateway.charge_result = {"status": "success", "data": {"id": 9, "status": "pending"}}
    client.force_authenticate(user=renter)
    client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    response = client.post("/api/payments/process/", _process_payload(), format="json")
    client.post("/api/payments/verify/", {"tx_ref": "X"}, format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Payment is already successful."}
    assert [call[0] for call in gateway.calls] == ["verify", "verify"]
    payment.refresh_from_db()
    assert payment.status == Payment.SUCCESSFUL
    assert len(notifier.calls) == 1


def test_process_rejects_amount_that_differs_from_payment(db, client, gateway, renter, payment):
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/process/", _process_payload(amount="100.00"), format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Payment amount does not match the payment record."}
    assert gateway.calls == []
    payment.refresh_from_db()
    assert payment.status == Payment.PENDING


def test_process_rejects_currency_that_differs_from_payment(db, client, gateway, renter, payment):
    client.force_authenticate(user=renter)

    response = client.post("/api/payments/process/", _process_payload(currency="USD"), format="json")

    assert response.status_code == 400
    assert gateway.calls == []

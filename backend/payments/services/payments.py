from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction

from payments.models import Payment

logger = logging.getLogger(__name__)

TX_REF_PREFIX = "CARRRS"
_BASE36 = string.digits + string.ascii_lowercase

CARD = "card"
BANK_TRANSFER = "bank_transfer"
USSD = "ussd"
MOBILE_MONEY_NIGERIA = "mobile_money_nigeria"
PAYMENT_TYPES = (CARD, BANK_TRANSFER, USSD, MOBILE_MONEY_NIGERIA)


def generate_tx_ref() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{TX_REF_PREFIX}_{int(time.time() * 1000)}_{suffix}"


def _method_data(payment_type: Optional[str], data: Dict[str, Any]) -> Dict[str, Any]:
    if payment_type == CARD:
        card = data.get("card") or {}
        return {
            "type": CARD,
            "card": {
                "card_number": card.get("card_number"),
                "cvv": card.get("cvv"),
                "expiry_month": card.get("expiry_month"),
                "expiry_year": card.get("expiry_year"),
                "pin": card.get("pin"),
            },
        }
    if payment_type == BANK_TRANSFER:
        bank = data.get("bank") or {}
        return {
            "type": BANK_TRANSFER,
            "bank": {
                "code": bank.get("code"),
                "account_number": bank.get("account_number"),
            },
        }
    if payment_type == USSD:
        ussd = data.get("ussd") or {}
        return {"type": USSD, "ussd": {"code": ussd.get("code")}}
    if payment_type == MOBILE_MONEY_NIGERIA:
        mobile_money = data.get("mobile_money") or {}
        return {
            "type": MOBILE_MONEY_NIGERIA,
            "mobile_money": {
                "phone": mobile_money.get("phone"),
                "network": mobile_money.get("network"),
                "voucher": mobile_money.get("voucher"),
            },
        }
    return {}


def build_charge_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a validated process request into the body expected by ``POST /v3/charges``."""

    amount = data["amount"]
    payload = {
        "tx_ref": data["tx_ref"],
        "amount": str(amount) if isinstance(amount, Decimal) else amount,
        "currency": data.get("currency") or settings.DEFAULT_CURRENCY,
        "redirect_url": f"{settings.FRONTEND_URL.rstrip('/')}/payment/verify",
        "customer": data["customer"],
    }
    if data.get("customizations"):
        payload["customizations"] = data["customizations"]
    payload.update(_method_data(data.get("type"), data))
    return payload


CURRENCY_SYMBOLS = {"NGN": "₦"}


def _format_money(amount: Any, currency: str) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{amount}"
    return f"{currency.upper()} {amount}"


def payment_instructions(
    payment_type: Optional[str], data: Dict[str, Any], *, currency: Optional[str] = None
) -> str:
    """Human-readable next step for charges that complete asynchronously."""

    if payment_type == BANK_TRANSFER:
        money = _format_money(
            data.get("amount"), currency or data.get("currency") or settings.DEFAULT_CURRENCY
        )
        return (
            f"Transfer {money} to Account: {data.get('account_number')}, "
            f"Bank: {data.get('bank_name')}. Reference: {data.get('tx_ref')}"
        )
    if payment_type == USSD:
        return f"Dial {data.get('ussd_code')} on your phone and follow the prompts to complete payment."
    if payment_type == MOBILE_MONEY_NIGERIA:
        return "You will receive an SMS with payment instructions shortly."
    return "Please complete the payment as instructed."


def record_charge(payment: Payment, result: Dict[str, Any], *, payment_type: Optional[str] = None) -> Payment:
    """Copy the gateway's charge result onto the local payment row."""

    data = result.get("data") or {}
    payment.flutterwave_id = str(data.get("id") or payment.flutterwave_id or "")
    payment.status = data.get("status") or Payment.PENDING
    payment.response_data = data
    if payment_type:
        payment.payment_type = payment_type
    payment.save(update_fields=["flutterwave_id", "status", "response_data", "payment_type", "updated_at"])
    return payment


def _amount_mismatch(payment: Payment, data: Dict[str, Any]) -> bool:
    reported_amount = data.get("amount")
    if reported_amount not in (None, ""):
        try:
            if Decimal(str(reported_amount)) != payment.amount:
                return True
        except InvalidOperation:
            return True
    reported_currency = data.get("currency")
    if reported_currency and str(reported_currency).upper() != payment.currency.upper():
        return True
    return False


@dataclass
class VerificationOutcome:
    payment: Payment
    status: str
    booking_confirmed: bool


def apply_verification(data: Dict[str, Any]) -> VerificationOutcome:
    """
    Store a verified transaction on its payment and confirm the booking on success.

    Raises ``Payment.DoesNotExist`` when no local payment carries the reported
    ``tx_ref``. A ``successful`` report whose amount or currency disagrees with
    the payment row is stored as ``failed`` and leaves the booking untouched.
    """

    tx_ref = data.get("tx_ref")
    reported_status = data.get("status") or Payment.FAILED

    with transaction.atomic():
        payment = Payment.objects.select_for_update().select_related("booking").get(tx_ref=tx_ref)

        if reported_status == Payment.SUCCESSFUL and _amount_mismatch(payment, data):
            logger.warning(
                "Gateway reported %s %s for payment %s (expected %s %s); not confirming booking %s",
                data.get("amount"),
                data.get("currency"),
                payment.tx_ref,
                payment.amount,
                payment.currency,
                payment.booking_id,
            )
            reported_status = Payment.FAILED

        if data.get("id"):
            payment.flutterwave_id = str(data["id"])
        payment.status = reported_status
        payment.response_data = data
        payment.save(update_fields=["flutterwave_id", "status", "response_data", "updated_at"])

        booking_confirmed = False
        if reported_status == Payment.SUCCESSFUL:
            booking_confirmed = payment.booking.confirm()

    if booking_confirmed:
        logger.info("Booking %s confirmed by payment %s", payment.booking_id, payment.tx_ref)

    return VerificationOutcome(
        payment=payment,
        status=reported_status,
        booking_confirmed=booking_confirmed,
    )

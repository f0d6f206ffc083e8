from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from common.errors import ExpiredError, InvalidStateError, ValidationError
from common.persistence import Store
from insurance.calculations import installment_amount
from insurance.models import Policy, Quote
from insurance.transforms import prepare_policy_fields, prepare_quote_fields
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Quote.Status.DRAFT: frozenset((Quote.Status.PENDING, Quote.Status.DECLINED)),
    Quote.Status.PENDING: frozenset(
        (
            Quote.Status.APPROVED,
            Quote.Status.CONVERTED,
            Quote.Status.DECLINED,
            Quote.Status.EXPIRED,
        )
    ),
    Quote.Status.APPROVED: frozenset(),
    Quote.Status.CONVERTED: frozenset(),
    Quote.Status.DECLINED: frozenset(),
    Quote.Status.EXPIRED: frozenset(),
}

_EDITABLE_STATUSES = frozenset((Quote.Status.DRAFT, Quote.Status.PENDING))

# Policy fields a caller may set when converting; everything else comes from the quote.
CONVERSION_OVERRIDES = (
    "down_payment",
    "installment_frequency",
    "total_installments",
    "policy_end_date",
    "is_valued",
)


class QuoteService:
    def __init__(self, *, store: Store, clock: Callable[[], datetime] = timezone.now):
        self.store = store
        self.clock = clock

    def create(self, *, actor, data: dict, request=None) -> Quote:
        fields = prepare_quote_fields(data, now=self.clock())
        fields.setdefault("status", Quote.Status.DRAFT)

        def _create():
            quote = self.store.create(Quote, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.quote.create",
                instance=quote,
                request=request,
            )
            return quote

        return self.store.transaction(_create)

    def update(self, *, actor, quote: Quote, data: dict, request=None) -> Quote:
        if quote.status not in _EDITABLE_STATUSES:
            raise InvalidStateError.for_action(
                entity="quote", current_status=quote.status, action="update"
            )
        fields = prepare_quote_fields(data, now=self.clock(), existing=quote)
        fields.pop("status", None)
        before = snapshot(quote)

        def _update():
            updated = self.store.update(quote, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.quote.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def is_valid(self, quote: Quote, now: datetime | None = None) -> bool:
        return quote.is_valid(now or self.clock())

    def submit(self, *, actor, quote: Quote, request=None) -> Quote:
        return self._transition(
            actor=actor, quote=quote, to_status=Quote.Status.PENDING, action="submit", request=request
        )

    def approve(self, *, actor, quote: Quote, request=None) -> Quote:
        return self._transition(
            actor=actor,
            quote=quote,
            to_status=Quote.Status.APPROVED,
            action="approve",
            request=request,
            changes={"approved_at": self.clock(), "approved_by": actor},
        )

    def decline(self, *, actor, quote: Quote, reason: str, request=None) -> Quote:
        self._ensure_allowed(quote, Quote.Status.DECLINED, "decline")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": "A decline reason is required."})
        return self._transition(
            actor=actor,
            quote=quote,
            to_status=Quote.Status.DECLINED,
            action="decline",
            request=request,
            changes={"decline_reason": reason},
        )

    def expire(self, *, actor, quote: Quote, request=None) -> Quote:
        return self._transition(
            actor=actor, quote=quote, to_status=Quote.Status.EXPIRED, action="expire", request=request
        )

    def expire_stale(self, *, actor=None, now: datetime | None = None) -> int:
        """Move pending quotes whose validity window has closed to EXPIRED."""

        now = now or self.clock()
        stale = self.store.find_all(
            Quote, {"status": Quote.Status.PENDING, "valid_to__lt": now}, order_by=("id",)
        )
        expired = 0
        for quote in stale:
            self.expire(actor=actor, quote=quote)
            expired += 1
        if expired:
            logger.info("Expired %s stale quote(s)", expired)
        return expired

    def convert_to_policy(
        self,
        *,
        actor,
        quote: Quote,
        request=None,
        policy_data: dict | None = None,
    ) -> Policy:
        """Bind a pending, in-window quote into an ACTIVE policy.

        The policy insert and the quote update commit together or not at all.
        """

        if quote.status != Quote.Status.PENDING:
            raise InvalidStateError.for_action(
                entity="quote", current_status=quote.status, action="convert"
            )

        now = self.clock()
        if not quote.is_valid(now):
            raise ExpiredError(
                f"Quote {quote.quote_number} is outside its validity window "
                f"({quote.valid_from:%Y-%m-%d} to {quote.valid_to:%Y-%m-%d}).",
                valid_from=quote.valid_from.isoformat(),
                valid_to=quote.valid_to.isoformat(),
            )

        start_date = timezone.localdate(now)
        end_date = timezone.localdate(quote.valid_to)
        # A window closing later today still needs a policy that ends after it starts.
        if end_date <= start_date:
            end_date = start_date + relativedelta(days=1)
        overrides = {
            key: value
            for key, value in (policy_data or {}).items()
            if key in CONVERSION_OVERRIDES and value is not None
        }
        policy_fields = {
            "policy_number": f"POL-{quote.quote_number}",
            "quote": quote,
            "client": quote.client,
            "product": quote.product,
            "intermediary": quote.intermediary,
            "sum_insured": quote.sum_insured,
            "annual_premium": quote.total_premium,
            "policy_start_date": start_date,
            "policy_end_date": end_date,
            "status": Policy.Status.ACTIVE,
            **overrides,
        }
        policy_fields["installment_amount"] = installment_amount(
            policy_fields["annual_premium"],
            policy_fields.get("down_payment", 0),
            policy_fields.get("total_installments", 12),
        )
        policy_fields = prepare_policy_fields(policy_fields)
        quote_before = snapshot(quote)

        def _convert():
            policy = self.store.create(Policy, actor=actor, **policy_fields)
            self.store.update(
                quote,
                actor=actor,
                status=Quote.Status.CONVERTED,
                converted_at=now,
                converted_by=actor,
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.policy.create",
                instance=policy,
                request=request,
                metadata={"quote_id": quote.pk},
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type="insurance.quote.convert",
                instance=quote,
                request=request,
                data_before=quote_before,
                metadata={"policy_id": policy.pk},
            )
            return policy

        policy = self.store.transaction(_convert)
        logger.info("Quote %s converted to policy %s", quote.pk, policy.pk)
        return policy

    def _ensure_allowed(self, quote: Quote, to_status: str, action: str) -> None:
        if to_status not in _ALLOWED_TRANSITIONS.get(quote.status, frozenset()):
            raise InvalidStateError.for_action(
                entity="quote", current_status=quote.status, action=action
            )

    def _transition(
        self,
        *,
        actor,
        quote: Quote,
        to_status: str,
        action: str,
        request=None,
        changes: dict | None = None,
    ) -> Quote:
        self._ensure_allowed(quote, to_status, action)
        from_status = quote.status
        before = snapshot(quote)

        def _apply():
            updated = self.store.update(quote, actor=actor, status=to_status, **(changes or {}))
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type=f"insurance.quote.{action}",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"from_status": from_status, "to_status": to_status},
            )
            return updated

        return self.store.transaction(_apply)

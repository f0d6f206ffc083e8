from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import SimpleTestCase

from common.errors import ConstraintError, ExpiredError, InvalidStateError, NotFoundError
from common.exceptions import api_exception_handler


class DomainErrorTests(SimpleTestCase):
    def test_invalid_state_carries_status_and_action(self):
        exc = InvalidStateError.for_action(entity="claim", current_status="DRAFT", action="approve")
        self.assertEqual(exc.status_code, 409)
        self.assertEqual(exc.current_status, "DRAFT")
        self.assertEqual(exc.action, "approve")
        payload = exc.as_payload()
        self.assertEqual(payload["code"], "invalid_state")
        self.assertEqual(payload["current_status"], "DRAFT")

    def test_expired_has_its_own_code(self):
        exc = ExpiredError("Quote expired.")
        self.assertEqual(exc.status_code, 409)
        self.assertEqual(exc.as_payload()["code"], "expired")

    def test_not_found(self):
        exc = NotFoundError("Missing.", resource="insurance.Quote", pk=7)
        self.assertEqual(exc.status_code, 404)
        self.assertEqual(exc.as_payload()["pk"], "7")

    def test_constraint_error_from_sqlite_unique_message(self):
        exc = ConstraintError.from_integrity_error(
            IntegrityError("UNIQUE constraint failed: EASY_CLAIM.CLAIM_NUMBER")
        )
        self.assertEqual(exc.field, "claim_number")
        self.assertEqual(exc.message, "Duplicate field value for claim_number.")
        self.assertEqual(exc.as_payload()["errors"], {"claim_number": [exc.message]})

    def test_constraint_error_from_postgres_unique_message(self):
        exc = ConstraintError.from_integrity_error(
            IntegrityError(
                'duplicate key value violates unique constraint "x"\n'
                "DETAIL:  Key (\"EMAIL\")=(a@b.com) already exists."
            )
        )
        self.assertEqual(exc.status_code, 400)
        self.assertEqual(exc.field, "email")

    def test_constraint_error_for_foreign_keys(self):
        exc = ConstraintError.from_integrity_error(IntegrityError("FOREIGN KEY constraint failed"))
        self.assertEqual(exc.message, "Referenced record does not exist.")


class ExceptionHandlerTests(SimpleTestCase):
    def test_validation_error_maps_to_400_with_field_errors(self):
        response = api_exception_handler(
            ValidationError({"reason": "A rejection reason is required."}), {}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "invalid")
        self.assertIn("reason", response.data["errors"])

    def test_integrity_error_maps_to_constraint(self):
        response = api_exception_handler(IntegrityError("FOREIGN KEY constraint failed"), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "constraint")

    def test_domain_error_uses_its_status(self):
        response = api_exception_handler(
            InvalidStateError.for_action(entity="quote", current_status="DRAFT", action="convert"),
            {},
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["action"], "convert")

import logging

from django.test import SimpleTestCase

from common.context import reset_current_request_id, set_current_request_id
from common.logging import MaskPIIFilter, RequestIdFilter, mask_pii


def _record(msg, *args):
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )


class MaskPIITests(SimpleTestCase):
    def test_masks_email_and_phone(self):
        masked = mask_pii("contact jane.doe@example.com or +254712345678")
        self.assertNotIn("jane.doe@example.com", masked)
        self.assertNotIn("712345678", masked)
        self.assertIn("***EMAIL***", masked)
        self.assertIn("***PHONE***", masked)

    def test_short_numbers_are_left_alone(self):
        self.assertEqual(mask_pii("claim 1234 paid"), "claim 1234 paid")

    def test_logging_filter_masks_message(self):
        record = _record("client email=%s", "jane@example.com")
        MaskPIIFilter().filter(record)
        self.assertIn("***EMAIL***", record.msg)
        self.assertEqual(record.args, ())

    def test_request_id_filter_uses_current_context(self):
        token = set_current_request_id("abc-123")
        try:
            record = _record("hello")
            RequestIdFilter().filter(record)
        finally:
            reset_current_request_id(token)
        self.assertEqual(record.request_id, "abc-123")

    def test_request_id_filter_defaults_to_dash(self):
        record = _record("hello")
        RequestIdFilter().filter(record)
        self.assertEqual(record.request_id, "-")

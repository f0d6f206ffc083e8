from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from insurance.tests.factories import make_client, make_user
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import append_ledger_entry, verify_chain


class LedgerChainTests(TestCase):
    def setUp(self):
        self.actor = make_user(role="agent")

    def _append(self, pk="1", action=LedgerEntry.ACTION_CREATE):
        return append_ledger_entry(
            actor=self.actor,
            action=action,
            resource_label="clients.Client",
            resource_pk=pk,
            data_after={"id": pk},
        )

    def test_entries_link_to_previous_hash(self):
        first = self._append("1")
        second = self._append("2")
        self.assertEqual(first.prev_hash, "")
        self.assertEqual(second.prev_hash, first.entry_hash)
        self.assertEqual(first.chain_id, "clients")
        self.assertEqual(first.actor_role, "agent")
        self.assertEqual(first.event_type, "clients.Client.create")

    def test_intact_chain_verifies(self):
        for pk in ("1", "2", "3"):
            self._append(pk)
        self.assertIsNone(verify_chain("clients"))

    def test_tampering_is_detected(self):
        self._append("1")
        second = self._append("2")
        self._append("3")
        LedgerEntry.objects.filter(pk=second.pk).update(data_after={"id": "999"})
        self.assertEqual(verify_chain("clients").pk, second.pk)

    def test_entries_are_immutable(self):
        entry = self._append()
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()

    def test_publish_event_snapshots_instance(self):
        client = make_client(first_name="Baraka")
        entry = publish_event(
            actor=None,
            action=LedgerEntry.ACTION_UPDATE,
            event_type="clients.client.update",
            instance=client,
            data_before={"first_name": "Old"},
        )
        self.assertIsNone(entry.actor)
        self.assertEqual(entry.data_after["first_name"], "Baraka")
        self.assertEqual(entry.data_before, {"first_name": "Old"})


class LedgerAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_admin_only(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        self.assertEqual(self.client.get("/api/ledger/").status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=make_user(role="admin"))
        append_ledger_entry(
            actor=None, action=LedgerEntry.ACTION_SYSTEM, resource_label="insurance.Quote", resource_pk="7"
        )
        response = self.client.get("/api/ledger/", {"chain_id": "insurance"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        response = self.client.get("/api/ledger/verify/insurance/")
        self.assertTrue(response.data["intact"])

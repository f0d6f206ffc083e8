from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from clients.models import Client
from clients.transforms import normalize_client_fields
from insurance.tests.factories import make_client, make_user
from ledger.models import LedgerEntry


class NormalizeClientFieldsTests(SimpleTestCase):
    def test_contact_fields(self):
        fields = normalize_client_fields(
            {"email": " Jane@Example.COM ", "phone": "+254 (712) 345-678", "first_name": " Jane "}
        )
        self.assertEqual(fields["email"], "jane@example.com")
        self.assertEqual(fields["phone"], "+254712345678")
        self.assertEqual(fields["first_name"], "Jane")

    def test_partial_payload_stays_partial(self):
        self.assertEqual(normalize_client_fields({"city": "Mombasa"}), {"city": "Mombasa"})

    @override_settings(DEFAULT_CLIENT_COUNTRY="Uganda")
    def test_blank_country_gets_default(self):
        self.assertEqual(normalize_client_fields({"country": ""})["country"], "Uganda")


class ClientAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.agent = make_user(role="agent")
        self.client.force_authenticate(user=self.agent)

    def _payload(self, **extra):
        payload = {
            "first_name": "Jane",
            "last_name": "Mwangi",
            "email": "JANE@example.com",
            "phone": "0712 345 678",
            "id_number": "12345678",
        }
        payload.update(extra)
        return payload

    def test_create_normalizes_and_records_ledger(self):
        response = self.client.post("/api/clients/", self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["email"], "jane@example.com")
        self.assertEqual(response.data["phone"], "0712345678")
        self.assertTrue(
            LedgerEntry.objects.filter(
                resource_label="clients.Client", resource_pk=str(response.data["id"])
            ).exists()
        )

    def test_duplicate_email_after_normalization_is_rejected(self):
        make_client(email="jane@example.com")
        response = self.client.post("/api/clients/", self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data["errors"])

    def test_short_phone_is_rejected(self):
        response = self.client.post("/api/clients/", self._payload(phone="123"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search_and_soft_delete(self):
        target = make_client(last_name="Achieng")
        make_client(last_name="Kiprop")
        response = self.client.get("/api/clients/", {"q": "achi"})
        self.assertEqual([row["id"] for row in response.data], [target.pk])

        self.client.force_authenticate(user=make_user(role="admin"))
        response = self.client.delete(f"/api/clients/{target.pk}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Client.objects.filter(pk=target.pk).exists())
        self.assertTrue(Client.all_objects.filter(pk=target.pk).exists())

    def test_client_role_cannot_browse_clients(self):
        holder = make_user(role="client")
        make_client(user=holder)
        self.client.force_authenticate(user=holder)
        response = self.client.get("/api/clients/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

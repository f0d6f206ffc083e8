from django.core.exceptions import ValidationError
from django.db.models import Q
from django.test import TestCase

from clients.models import Client
from common.errors import NotFoundError
from common.persistence import DjangoStore
from insurance.tests.factories import make_client, make_user


class DjangoStoreTests(TestCase):
    def setUp(self):
        self.store = DjangoStore()
        self.actor = make_user(role="agent")

    def test_create_sets_audit_fields(self):
        client = self.store.create(
            Client,
            actor=self.actor,
            first_name="Amina",
            last_name="Otieno",
            email="amina@example.com",
            phone="+254700000001",
            id_number="A100",
        )
        self.assertIsNotNone(client.pk)
        self.assertEqual(client.created_by, self.actor)
        self.assertEqual(client.updated_by, self.actor)

    def test_create_validates_before_writing(self):
        with self.assertRaises(ValidationError):
            self.store.create(
                Client,
                first_name="A",
                last_name="Otieno",
                email="not-an-email",
                phone="+254700000001",
                id_number="A101",
            )
        self.assertFalse(Client.all_objects.filter(id_number="A101").exists())

    def test_find_by_id_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.store.find_by_id(Client, 999999)
        self.assertEqual(ctx.exception.resource, "clients.Client")

    def test_find_by_id_hides_soft_deleted_rows(self):
        client = make_client()
        client.soft_delete()
        with self.assertRaises(NotFoundError):
            self.store.find_by_id(Client, client.pk)
        self.assertEqual(self.store.find_by_id(Client, client.pk, include_deleted=True), client)

    def test_failed_update_leaves_instance_untouched(self):
        client = make_client(first_name="Grace")
        with self.assertRaises(ValidationError):
            self.store.update(client, first_name="G")
        self.assertEqual(client.first_name, "Grace")
        client.refresh_from_db()
        self.assertEqual(client.first_name, "Grace")

    def test_find_all_accepts_q_and_dict(self):
        make_client(last_name="Mwangi")
        make_client(last_name="Njoroge")
        by_q = self.store.find_all(Client, Q(last_name="Mwangi"))
        by_dict = self.store.find_all(Client, {"last_name": "Njoroge"})
        self.assertEqual(by_q.count(), 1)
        self.assertEqual(by_dict.count(), 1)

    def test_transaction_rolls_back_all_writes(self):
        def _work():
            make_client(id_number="TX-1")
            raise ValidationError("boom")

        with self.assertRaises(ValidationError):
            self.store.transaction(_work)
        self.assertFalse(Client.all_objects.filter(id_number="TX-1").exists())

"""Persistence adapter used by the service layer.

Services never reach for the ORM directly for writes: they receive a store
instance in their constructor and go through ``create``/``update``/
``transaction``. ``DjangoStore`` is the production implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, TypeVar

from django.db import IntegrityError, models, transaction as db_transaction

from common.errors import ConstraintError, NotFoundError, ValidationError

T = TypeVar("T")


class Store(ABC):
    @abstractmethod
    def create(self, model: type[models.Model], *, actor=None, **fields) -> models.Model:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, model: type[models.Model], pk: Any, *, include_deleted: bool = False):
        raise NotImplementedError

    @abstractmethod
    def update(self, instance: models.Model, *, actor=None, **patch) -> models.Model:
        raise NotImplementedError

    @abstractmethod
    def find_all(
        self,
        model: type[models.Model],
        filters: models.Q | dict | None = None,
        *,
        order_by: Iterable[str] = (),
    ) -> models.QuerySet:
        raise NotImplementedError

    @abstractmethod
    def transaction(self, fn: Callable[[], T]) -> T:
        raise NotImplementedError


class DjangoStore(Store):
    """ORM-backed store. Validates with ``full_clean()`` before every write."""

    def __init__(self, using: str = "default"):
        self.using = using

    def create(self, model, *, actor=None, **fields):
        instance = model(**fields)
        if actor is not None and getattr(actor, "is_authenticated", False):
            instance.created_by = actor
            instance.updated_by = actor
        instance.full_clean()
        self._save(instance, force_insert=True)
        return instance

    def find_by_id(self, model, pk, *, include_deleted=False):
        manager = model.all_objects if include_deleted else model._default_manager
        try:
            return manager.db_manager(self.using).get(pk=pk)
        except (model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(
                f"{model._meta.verbose_name.title()} {pk} not found.",
                resource=model._meta.label,
                pk=pk,
            ) from None

    def update(self, instance, *, actor=None, **patch):
        if actor is not None and getattr(actor, "is_authenticated", False):
            patch["updated_by"] = actor
        previous = {key: getattr(instance, key) for key in patch}
        for key, value in patch.items():
            setattr(instance, key, value)
        try:
            instance.full_clean()
            self._save(instance)
        except (ValidationError, ConstraintError):
            # Failed writes leave the in-memory instance as it was.
            for key, value in previous.items():
                setattr(instance, key, value)
            raise
        return instance

    def find_all(self, model, filters=None, *, order_by=()):
        queryset = model._default_manager.db_manager(self.using).all()
        if isinstance(filters, models.Q):
            queryset = queryset.filter(filters)
        elif filters:
            queryset = queryset.filter(**filters)
        if order_by:
            queryset = queryset.order_by(*order_by)
        return queryset

    def transaction(self, fn):
        with db_transaction.atomic(using=self.using):
            return fn()

    def _save(self, instance, **kwargs):
        try:
            with db_transaction.atomic(using=self.using):
                instance.save(using=self.using, **kwargs)
        except IntegrityError as exc:
            raise ConstraintError.from_integrity_error(exc) from exc

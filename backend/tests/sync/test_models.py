"""
Tests for the sync ledger model.
"""

import pytest
from django.db import IntegrityError

from apps.sync.models import SyncState
from tests.sync.factories import SyncStateFactory


@pytest.mark.django_db
class TestSyncState:
    def test_str(self):
        state = SyncStateFactory.create(entity_id="5", external_id="kc-org-5")

        assert str(state) == "organization:5 -> kc-org-5 (synced)"

    def test_one_row_per_entity(self):
        SyncStateFactory.create(entity_id="5")

        with pytest.raises(IntegrityError):
            SyncStateFactory.create(entity_id="5")

    def test_same_id_allowed_across_entity_types(self):
        SyncStateFactory.create(entity_id="5")
        member = SyncStateFactory.create(entity_type=SyncState.EntityType.MEMBER, entity_id="5")

        assert member.pk is not None

    def test_defaults_to_pending(self):
        state = SyncState(entity_type=SyncState.EntityType.USER, entity_id="1")

        assert state.sync_status == SyncState.Status.PENDING

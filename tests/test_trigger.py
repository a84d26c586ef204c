"""
Tests for the Noloco polling trigger.
"""

from datetime import datetime, timezone

import pytest

from noloco_engine.triggers.noloco_trigger import (
    NolocoTrigger,
    PollResult,
    parse_timestamp,
)


def _record(record_id, created, updated=None):
    record = {"id": record_id, "createdAt": created}
    if updated is not None:
        record["updatedAt"] = updated
    return record


NEWEST_FIRST = [
    _record(3, "2025-03-03T10:00:00.000Z"),
    _record(2, "2025-03-02T10:00:00.000Z"),
    _record(1, "2025-03-01T10:00:00.000Z"),
]


@pytest.fixture
def make_trigger(mock_noloco_client):
    def _make(**config):
        trigger_config = {"app": {"mode": "list", "value": "acme"}, "dataType": "project", **config}
        return NolocoTrigger("wf-1", trigger_config, mock_noloco_client)

    return _make


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2025-03-01T10:00:00.000Z") == datetime(
            2025, 3, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_naive_is_utc(self):
        assert parse_timestamp("2025-03-01T10:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "yesterday"])
    def test_unreadable(self, value):
        assert parse_timestamp(value) is None


class TestNolocoTrigger:
    def test_configuration(self, make_trigger):
        trigger = make_trigger(event="recordUpdated", options={"include": "owner, tasks"})

        assert trigger.trigger_type == "NOLOCO"
        assert trigger.project == "acme"
        assert trigger.sort_field == "updatedAt"
        assert trigger.include == ["owner", "tasks"]

    def test_requires_table(self, mock_noloco_client):
        with pytest.raises(ValueError, match="app and a table"):
            NolocoTrigger("wf-1", {"app": "acme"}, mock_noloco_client)

    def test_rejects_unknown_event(self, make_trigger):
        with pytest.raises(ValueError, match="recordDeleted"):
            make_trigger(event="recordDeleted")

    @pytest.mark.asyncio
    async def test_fetches_newest_page(self, make_trigger, mock_noloco_client):
        await make_trigger(options={"include": "owner"}).poll(None)

        args = mock_noloco_client.list_records.await_args.args
        assert args[:2] == ("acme", "project")
        params = args[2]
        assert (params.sort_by, params.order_by, params.first) == ("createdAt", "DESC", 100)
        assert params.include == ["owner"]

    @pytest.mark.asyncio
    async def test_empty_table_keeps_checkpoint(self, make_trigger):
        result = await make_trigger().poll("2025-03-01T10:00:00.000Z")

        assert result == PollResult(records=[], checkpoint="2025-03-01T10:00:00.000Z")
        assert not result.has_records

    @pytest.mark.asyncio
    async def test_scheduled_first_run_sets_baseline_only(
        self, make_trigger, mock_noloco_client, records_page
    ):
        mock_noloco_client.list_records.return_value = records_page(NEWEST_FIRST)

        result = await make_trigger().poll(None)

        assert result.records == []
        assert result.checkpoint == "2025-03-03T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_manual_first_run_returns_sample(
        self, make_trigger, mock_noloco_client, records_page
    ):
        records = [_record(i, f"2025-03-{i:02d}T10:00:00Z") for i in range(9, 0, -1)]
        mock_noloco_client.list_records.return_value = records_page(records)

        result = await make_trigger().poll(None, manual=True)

        assert [r["id"] for r in result.records] == [9, 8, 7, 6, 5]
        assert result.checkpoint == "2025-03-09T10:00:00Z"

    @pytest.mark.asyncio
    async def test_only_strictly_newer_records(self, make_trigger, mock_noloco_client, records_page):
        mock_noloco_client.list_records.return_value = records_page(NEWEST_FIRST)

        result = await make_trigger().poll("2025-03-02T10:00:00.000Z")

        assert [r["id"] for r in result.records] == [3]
        assert result.checkpoint == "2025-03-03T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_nothing_new(self, make_trigger, mock_noloco_client, records_page):
        mock_noloco_client.list_records.return_value = records_page(NEWEST_FIRST)

        result = await make_trigger().poll("2025-03-03T10:00:00.000Z")

        assert result.records == []
        assert result.checkpoint == "2025-03-03T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_updated_event_falls_back_to_created(
        self, make_trigger, mock_noloco_client, records_page
    ):
        mock_noloco_client.list_records.return_value = records_page(
            [
                _record(1, "2025-01-01T00:00:00Z", updated="2025-03-05T00:00:00Z"),
                _record(2, "2025-03-04T00:00:00Z"),
                _record(3, "2025-01-02T00:00:00Z", updated="2025-03-01T00:00:00Z"),
            ]
        )

        result = await make_trigger(event="recordUpdated").poll("2025-03-02T00:00:00Z")

        assert [r["id"] for r in result.records] == [1, 2]
        assert result.checkpoint == "2025-03-05T00:00:00Z"

    @pytest.mark.asyncio
    async def test_unreadable_checkpoint_emits_nothing(
        self, make_trigger, mock_noloco_client, records_page
    ):
        mock_noloco_client.list_records.return_value = records_page(NEWEST_FIRST)

        result = await make_trigger().poll("not-a-date")

        assert result.records == []
        assert result.checkpoint == "2025-03-03T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_disabled_trigger_does_not_poll(self, make_trigger, mock_noloco_client):
        result = await make_trigger(enabled=False).poll("cp")

        assert result == PollResult(records=[], checkpoint="cp")
        mock_noloco_client.list_records.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_trigger_holds_no_state(self, make_trigger, mock_noloco_client, records_page):
        mock_noloco_client.list_records.return_value = records_page(NEWEST_FIRST)
        trigger = make_trigger()

        first = await trigger.poll("2025-03-01T10:00:00.000Z")
        second = await trigger.poll("2025-03-01T10:00:00.000Z")

        assert first == second

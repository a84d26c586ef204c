"""
Tests for cursor-paginated record fetching.
"""

import logging

import pytest

from noloco_engine.core.config import reset_settings
from noloco_engine.runners.pagination import RecordQuery, fetch_all_records


def _records(start, count):
    return [{"id": i, "name": f"Record {i}"} for i in range(start, start + count)]


def _sent_params(client):
    return [call.args[2] for call in client.list_records.call_args_list]


class TestRecordQuery:
    def test_defaults_come_from_settings(self):
        query = RecordQuery(project="acme", table="project")

        assert query.limit == 50
        assert query.page_size_cap == 100
        assert query.order_by == "DESC"
        assert query.include == ["*"]

    def test_only_timestamps_are_sortable(self):
        assert RecordQuery(project="a", table="t", sort_by="name").sort_by is None
        assert RecordQuery(project="a", table="t", sort_by="updatedAt").sort_by == "updatedAt"

    def test_order_is_normalised(self):
        assert RecordQuery(project="a", table="t", order_by="asc").order_by == "ASC"
        with pytest.raises(ValueError, match="order_by"):
            RecordQuery(project="a", table="t", order_by="sideways")

    def test_limit_must_be_positive_without_return_all(self):
        with pytest.raises(ValueError, match="limit"):
            RecordQuery(project="a", table="t", limit=0)
        assert RecordQuery(project="a", table="t", limit=0, return_all=True).return_all

    def test_page_size_cap_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOLOCO_PAGE_SIZE_CAP", "20")
        reset_settings()

        assert RecordQuery(project="a", table="t").page_size_cap == 20


class TestFetchAllRecords:
    @pytest.mark.asyncio
    async def test_limit_below_cap_takes_one_request(self, mock_noloco_client, records_page):
        mock_noloco_client.list_records.return_value = records_page(
            _records(1, 50), has_next_page=True, end_cursor="c1"
        )

        records = await fetch_all_records(
            mock_noloco_client, RecordQuery(project="acme", table="project", limit=50)
        )

        assert len(records) == 50
        assert mock_noloco_client.list_records.call_count == 1
        params = _sent_params(mock_noloco_client)[0]
        assert params.first == 50
        assert params.after is None
        assert params.order_by == "DESC"

    @pytest.mark.asyncio
    async def test_limit_above_cap_asks_for_the_remainder(self, mock_noloco_client, records_page):
        mock_noloco_client.list_records.side_effect = [
            records_page(_records(1, 100), has_next_page=True, end_cursor="c1"),
            records_page(_records(101, 50), has_next_page=True, end_cursor="c2"),
        ]

        records = await fetch_all_records(
            mock_noloco_client, RecordQuery(project="acme", table="project", limit=150)
        )

        assert [r["id"] for r in records] == list(range(1, 151))
        assert [(p.first, p.after) for p in _sent_params(mock_noloco_client)] == [
            (100, None),
            (50, "c1"),
        ]

    @pytest.mark.asyncio
    async def test_oversized_page_is_truncated(self, mock_noloco_client, records_page):
        mock_noloco_client.list_records.return_value = records_page(_records(1, 20))

        records = await fetch_all_records(
            mock_noloco_client, RecordQuery(project="acme", table="project", limit=5)
        )

        assert [r["id"] for r in records] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_return_all_follows_cursors(self, mock_noloco_client, records_page):
        mock_noloco_client.list_records.side_effect = [
            records_page(_records(1, 100), has_next_page=True, end_cursor="c1"),
            records_page(_records(101, 100), has_next_page=True, end_cursor="c2"),
            records_page(_records(201, 30), has_next_page=False, end_cursor="c3"),
        ]

        records = await fetch_all_records(
            mock_noloco_client,
            RecordQuery(project="acme", table="project", return_all=True, filter={"status": {"equals": "DONE"}}),
        )

        assert len(records) == 230
        params = _sent_params(mock_noloco_client)
        assert [(p.first, p.after) for p in params] == [(100, None), (100, "c1"), (100, "c2")]
        assert all(p.filter == {"status": {"equals": "DONE"}} for p in params)

    @pytest.mark.asyncio
    async def test_next_page_without_cursor_ends_stream(
        self, mock_noloco_client, records_page, caplog
    ):
        mock_noloco_client.list_records.return_value = records_page(
            _records(1, 100), has_next_page=True, end_cursor=None
        )

        with caplog.at_level(logging.WARNING):
            records = await fetch_all_records(
                mock_noloco_client, RecordQuery(project="acme", table="project", return_all=True)
            )

        assert len(records) == 100
        assert mock_noloco_client.list_records.call_count == 1
        assert "without a cursor" in caplog.text

    @pytest.mark.asyncio
    async def test_repeated_cursor_ends_stream(self, mock_noloco_client, records_page, caplog):
        mock_noloco_client.list_records.return_value = records_page(
            _records(1, 100), has_next_page=True, end_cursor="same"
        )

        with caplog.at_level(logging.WARNING):
            records = await fetch_all_records(
                mock_noloco_client, RecordQuery(project="acme", table="project", return_all=True)
            )

        assert mock_noloco_client.list_records.call_count == 2
        assert len(records) == 200
        assert "did not advance" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_table(self, mock_noloco_client):
        records = await fetch_all_records(
            mock_noloco_client, RecordQuery(project="acme", table="project", return_all=True)
        )

        assert records == []
        assert mock_noloco_client.list_records.call_count == 1

"""Unit tests for paginated record retrieval."""

import pytest

from kintone_export.core.exceptions import AuthenticationError
from kintone_export.services.record_fetcher import PAGE_SIZE, RecordFetcher


@pytest.fixture
def records(make_record):
    """1001 plain records."""
    return [make_record(i + 1) for i in range(1001)]


class TestDefaultPaging:
    """Tests for queries without a limit."""

    def test_page_size(self):
        """Test export page size."""
        assert PAGE_SIZE == 500

    def test_offsets_until_short_page(self, make_client, records):
        """Test successive offsets stop on the first short page."""
        client = make_client(records=records)
        pages = list(RecordFetcher(client).iter_pages())

        assert [len(page) for page in pages] == [500, 500, 1]
        assert client.queries == [
            " limit 500 offset 0",
            " limit 500 offset 500",
            " limit 500 offset 1000",
        ]

    def test_query_is_extended(self, make_client, make_record):
        """Test the caller's filter keeps its place before limit/offset."""
        client = make_client(records=[make_record(1)])
        records, is_last = RecordFetcher(client, query='Name = "Bob"').fetch(0)

        assert len(records) == 1
        assert is_last
        assert client.queries == ['Name = "Bob" limit 500 offset 0']

    def test_exact_multiple_fetches_empty_page(self, make_client, make_record):
        """Test a full last page is followed by one empty page."""
        client = make_client(records=[make_record(i + 1) for i in range(500)])
        pages = list(RecordFetcher(client).iter_pages())

        assert [len(page) for page in pages] == [500, 0]

    def test_empty_result(self, make_client):
        """Test no records yields one empty page."""
        client = make_client()
        assert list(RecordFetcher(client).iter_pages()) == [[]]

    def test_fields_passed_through(self, make_client):
        """Test requested field codes reach the client."""
        client = make_client()
        list(RecordFetcher(client, fields=("Name", "$id")).iter_pages())
        assert client.requested_fields == [["Name", "$id"]]


class TestCallerLimit:
    """Tests for queries carrying their own limit."""

    def test_single_fetch(self, make_client, records):
        """Test a caller limit issues exactly one unmodified request."""
        client = make_client(records=records)
        fetcher = RecordFetcher(client, query="order by $id asc limit 500")

        pages = list(fetcher.iter_pages())

        assert fetcher.has_caller_limit
        assert len(pages) == 1
        assert len(pages[0]) == 500
        assert client.queries == ["order by $id asc limit 500"]

    def test_short_limit_is_last(self, make_client, records):
        """Test the page counts as last regardless of size."""
        client = make_client(records=records)
        records, is_last = RecordFetcher(client, query="limit 3").fetch(0)
        assert len(records) == 3
        assert is_last

    def test_limit_match_is_case_sensitive(self):
        """Test only lowercase limit clauses are detected."""
        assert not RecordFetcher(client=None, query="LIMIT 10").has_caller_limit
        assert not RecordFetcher(client=None, query="limited").has_caller_limit


class TestErrors:
    """Tests for error propagation."""

    def test_client_error_aborts(self, make_client):
        """Test client errors propagate without retry."""
        client = make_client()

        def fail(fields, query):
            client.queries.append(query)
            raise AuthenticationError("denied", status_code=401)

        client.get_records = fail
        with pytest.raises(AuthenticationError):
            list(RecordFetcher(client).iter_pages())
        assert len(client.queries) == 1

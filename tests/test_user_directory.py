from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from fabtrack.core.exceptions import BackingServiceFailure
from fabtrack.services.directory.user_directory import UserDirectory, parse_directory_rows

from conftest import ALICE, make_sheets_service


def test_parse_skips_header_blank_and_duplicate_rows():
    rows = [
        ["Id", "Name", "Email"],
        ["1", "Alice", "alice@example.com"],
        ["2", "Alice again", "ALICE@example.com"],
        ["3", "No email"],
        ["4", "", "carol@example.com"],
    ]
    clients = parse_directory_rows(rows)

    assert [c.email for c in clients] == ["alice@example.com", "carol@example.com"]
    assert clients[1].name == "carol"


async def test_find_client_is_case_insensitive(directory):
    client = await directory.find_client("  Alice@Example.com ")

    assert client is not None
    assert client.email == ALICE
    assert client.name == "Alice Fabricators"
    assert await directory.find_client("mallory@example.com") is None


async def test_directory_is_cached_until_refresh(directory, sheets_service):
    await directory.list_clients()
    await directory.list_clients()
    await directory.client_names()

    values = sheets_service.spreadsheets.return_value.values.return_value
    assert values.get.call_count == 1

    await directory.list_clients(refresh=True)
    assert values.get.call_count == 2


async def test_client_names_keyed_by_lowercase_email():
    directory = UserDirectory(
        "sheet",
        service=make_sheets_service([["h"], ["1", "Dee", "Dee@Example.com"]]),
    )
    assert await directory.client_names() == {"dee@example.com": "Dee"}


async def test_unconfigured_directory_fails():
    with pytest.raises(BackingServiceFailure):
        await UserDirectory(None).list_clients()


async def test_sheets_error_becomes_backing_service_failure():
    service = make_sheets_service()
    values = service.spreadsheets.return_value.values.return_value
    values.get.return_value.execute.side_effect = HttpError(
        MagicMock(status=500, reason="boom"), b"boom"
    )

    with pytest.raises(BackingServiceFailure) as exc:
        await UserDirectory("sheet", service=service).list_clients()
    assert exc.value.status_code == 503

from __future__ import annotations

import pytest

from dynaframe import AwsError, NotFoundError, SimpleRegion, ValidationError
from dynaframe.mocks import FakeCredentials, FakeDynamoDBClient
from dynaframe.schema import build_create_table_request, delete_table, describe_table, ensure_table
from dynaframe.testkit import client_error, describe_response, no_sleep


def _region() -> tuple[FakeDynamoDBClient, SimpleRegion]:
    client = FakeDynamoDBClient()
    return client, SimpleRegion(FakeCredentials(client))


def test_build_create_table_request_with_range_key() -> None:
    req = build_create_table_request("posts", "id", "rank", range_type="N")

    assert req == {
        "TableName": "posts",
        "BillingMode": "PAY_PER_REQUEST",
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
            {"AttributeName": "rank", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "rank", "AttributeType": "N"},
        ],
    }


def test_build_create_table_request_provisioned() -> None:
    req = build_create_table_request(
        "users",
        "id",
        billing_mode="PROVISIONED",
        provisioned_throughput={"ReadCapacityUnits": 1, "WriteCapacityUnits": 1},
    )
    assert req["KeySchema"] == [{"AttributeName": "id", "KeyType": "HASH"}]
    assert req["ProvisionedThroughput"] == {"ReadCapacityUnits": 1, "WriteCapacityUnits": 1}


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"name": "ab", "hash_key": "id"}, "invalid table name"),
        ({"name": "users", "hash_key": ""}, "hash_key is required"),
        ({"name": "users", "hash_key": "id", "hash_type": "BOOL"}, "must be S/N/B"),
        ({"name": "users", "hash_key": "id", "range_key": "r", "range_type": "M"}, "must be S/N/B"),
        ({"name": "users", "hash_key": "id", "range_key": "id"}, "must differ"),
        ({"name": "users", "hash_key": "id", "billing_mode": "ON_DEMAND"}, "unsupported billing_mode"),
        ({"name": "users", "hash_key": "id", "billing_mode": "PROVISIONED"}, "provisioned_throughput is required"),
    ],
)
def test_build_create_table_request_validation(kwargs: dict, match: str) -> None:
    with pytest.raises(ValidationError, match=match):
        build_create_table_request(**kwargs)


def test_ensure_table_creates_missing_table_and_waits() -> None:
    client, region = _region()
    req = build_create_table_request("posts", "id")
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))
    client.expect("create_table", req)
    client.expect("describe_table", response=describe_response("id", status="CREATING"))
    client.expect("describe_table", response=describe_response("id"))

    ensure_table(region, req, sleep=no_sleep)

    client.assert_no_pending()
    assert client.closed == 4


def test_ensure_table_tolerates_existing_table() -> None:
    client, region = _region()
    client.expect("describe_table", response=describe_response("id"))

    ensure_table(region, build_create_table_request("posts", "id"), wait_for_active=False)

    client.assert_no_pending()


def test_ensure_table_propagates_other_errors() -> None:
    client, region = _region()
    client.expect("describe_table", error=client_error("AccessDeniedException", "nope"))

    with pytest.raises(AwsError, match="AccessDeniedException"):
        ensure_table(region, build_create_table_request("posts", "id"))


def test_ensure_table_times_out() -> None:
    client, region = _region()
    client.expect("describe_table", response=describe_response("id", status="CREATING"))

    with pytest.raises(ValidationError, match="timed out waiting for table ACTIVE"):
        ensure_table(region, build_create_table_request("posts", "id"), wait_timeout_seconds=0.0)


def test_delete_table_waits_until_gone() -> None:
    client, region = _region()
    client.expect("delete_table", {"TableName": "posts"})
    client.expect("describe_table", response=describe_response("id", status="DELETING"))
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))

    delete_table(region, "posts", sleep=no_sleep)

    client.assert_no_pending()


def test_delete_table_ignore_missing() -> None:
    client, region = _region()
    client.expect("delete_table", error=client_error("ResourceNotFoundException"))
    delete_table(region, "posts", ignore_missing=True)

    client.expect("delete_table", error=client_error("ResourceNotFoundException", "gone"))
    with pytest.raises(NotFoundError, match="gone"):
        delete_table(region, "posts")


def test_describe_table_returns_plain_dict() -> None:
    client, region = _region()
    client.expect("describe_table", {"TableName": "posts"}, response=describe_response("id"))

    assert describe_table(region, "posts")["Table"]["TableStatus"] == "ACTIVE"

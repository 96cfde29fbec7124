from __future__ import annotations

from typing import Any

from botocore.exceptions import ClientError

from .attributes import Attributes
from .mocks import ANY, FakeCredentials, FakeDynamoDBClient


def client_error(code: str, message: str = "", *, operation: str = "DynamoDB") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


def describe_response(hash_key: str, range_key: str | None = None, *, status: str = "ACTIVE") -> dict[str, Any]:
    schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    if range_key is not None:
        schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
    return {"Table": {"KeySchema": schema, "TableStatus": status}}


def wire(**values: Any) -> dict[str, Any]:
    return Attributes(values).to_wire()


def no_sleep(_: float) -> None:
    return None


__all__ = [
    "ANY",
    "FakeCredentials",
    "FakeDynamoDBClient",
    "client_error",
    "describe_response",
    "no_sleep",
    "wire",
]

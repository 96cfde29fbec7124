from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from .errors import (
    AwsError,
    ConditionFailedError,
    NotFoundError,
    ValidationError,
)


def map_client_error(err: ClientError) -> Exception:
    code = str(err.response.get("Error", {}).get("Code", ""))
    message = str(err.response.get("Error", {}).get("Message", ""))

    if code == "ConditionalCheckFailedException":
        return ConditionFailedError(message or "conditional check failed")
    if code == "ValidationException":
        return ValidationError(message)
    if code == "ResourceNotFoundException":
        return NotFoundError(message)

    return AwsError(code=code or "UnknownError", message=message or str(err))


def map_transport_error(err: BotoCoreError) -> Exception:
    return AwsError(code=type(err).__name__, message=str(err))


def invoke(aws: Any, operation: str, request: Mapping[str, Any]) -> Mapping[str, Any]:
    try:
        return getattr(aws, operation)(**request)
    except ClientError as err:
        raise map_client_error(err) from err
    except BotoCoreError as err:
        raise map_transport_error(err) from err


def consumed_units(resp: Mapping[str, Any]) -> float:
    capacity = resp.get("ConsumedCapacity") or {}
    if not isinstance(capacity, Mapping):
        return 0.0
    return float(capacity.get("CapacityUnits") or 0.0)

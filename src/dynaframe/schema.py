from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .aws_errors import invoke
from .credentials import connect
from .errors import NotFoundError, ValidationError
from .region import Region, validate_table_name

logger = logging.getLogger(__name__)

BillingMode = str  # "PAY_PER_REQUEST" | "PROVISIONED"

_KEY_TYPES = frozenset({"S", "N", "B"})


def build_create_table_request(
    name: str,
    hash_key: str,
    range_key: str | None = None,
    *,
    hash_type: str = "S",
    range_type: str = "S",
    billing_mode: BillingMode = "PAY_PER_REQUEST",
    provisioned_throughput: dict[str, int] | None = None,
) -> dict[str, Any]:
    validate_table_name(name)
    if not hash_key:
        raise ValidationError("hash_key is required")
    if hash_type not in _KEY_TYPES:
        raise ValidationError(f"key attribute must be S/N/B: {hash_key} (got {hash_type})")
    if range_key is not None and range_type not in _KEY_TYPES:
        raise ValidationError(f"key attribute must be S/N/B: {range_key} (got {range_type})")
    if range_key is not None and range_key == hash_key:
        raise ValidationError("range_key must differ from hash_key")

    billing_mode = (billing_mode or "PAY_PER_REQUEST").strip() or "PAY_PER_REQUEST"
    if billing_mode not in {"PAY_PER_REQUEST", "PROVISIONED"}:
        raise ValidationError(f"unsupported billing_mode: {billing_mode}")
    if billing_mode == "PROVISIONED" and provisioned_throughput is None:
        raise ValidationError("provisioned_throughput is required when billing_mode=PROVISIONED")

    key_schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    definitions = [{"AttributeName": hash_key, "AttributeType": hash_type}]
    if range_key is not None:
        key_schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
        definitions.append({"AttributeName": range_key, "AttributeType": range_type})

    req: dict[str, Any] = {
        "TableName": name,
        "BillingMode": billing_mode,
        "KeySchema": key_schema,
        "AttributeDefinitions": definitions,
    }
    if billing_mode == "PROVISIONED" and provisioned_throughput is not None:
        req["ProvisionedThroughput"] = dict(provisioned_throughput)
    return req


def describe_table(region: Region, name: str) -> dict[str, Any]:
    with connect(region) as aws:
        return dict(invoke(aws, "describe_table", {"TableName": name}))


def ensure_table(
    region: Region,
    request: dict[str, Any],
    *,
    wait_for_active: bool = True,
    wait_timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    name = str(request["TableName"])
    try:
        describe_table(region, name)
    except NotFoundError:
        with connect(region) as aws:
            invoke(aws, "create_table", request)
        logger.info("table '%s' created", name)

    if wait_for_active:
        _wait_for_table_active(
            region,
            name,
            timeout_seconds=wait_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            sleep=sleep,
        )


def delete_table(
    region: Region,
    name: str,
    *,
    ignore_missing: bool = False,
    wait_for_delete: bool = True,
    wait_timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    try:
        with connect(region) as aws:
            invoke(aws, "delete_table", {"TableName": name})
    except NotFoundError:
        if ignore_missing:
            return
        raise
    logger.info("table '%s' deleted", name)

    if wait_for_delete:
        _wait_for_table_deleted(
            region,
            name,
            timeout_seconds=wait_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            sleep=sleep,
        )


def _wait_for_table_active(
    region: Region,
    name: str,
    *,
    timeout_seconds: float,
    poll_interval_seconds: float,
    sleep: Callable[[float], None],
) -> None:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        try:
            resp = describe_table(region, name)
        except NotFoundError:
            resp = {}

        status = str(resp.get("Table", {}).get("TableStatus", ""))
        if status == "ACTIVE":
            return
        logger.debug("table '%s' is %s, waiting", name, status or "missing")
        sleep(poll_interval_seconds)

    raise ValidationError(f"timed out waiting for table ACTIVE: {name}")


def _wait_for_table_deleted(
    region: Region,
    name: str,
    *,
    timeout_seconds: float,
    poll_interval_seconds: float,
    sleep: Callable[[float], None],
) -> None:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        try:
            describe_table(region, name)
        except NotFoundError:
            return
        sleep(poll_interval_seconds)

    raise ValidationError(f"timed out waiting for table deletion: {name}")

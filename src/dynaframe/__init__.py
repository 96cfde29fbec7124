from __future__ import annotations

import json
import logging
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .attributes import Attributes, Value
from .conditions import KEY_OPERATORS, Condition, Conditions
from .credentials import (
    AssumedCredentials,
    BorrowedCredentials,
    Credentials,
    LocalCredentials,
    StaticCredentials,
    connect,
)
from .cursor import Cursor, decode_cursor, encode_cursor
from .errors import (
    AwsError,
    ConditionFailedError,
    DynaframeError,
    NoSuchAttributeError,
    NotFoundError,
    UsageError,
    ValidationError,
)
from .frame import AwsFrame
from .item import AwsItem, Item
from .iterator import AwsIterator
from .query_valve import QueryValve
from .region import PrefixedRegion, Region, SimpleRegion
from .scan_valve import ScanValve
from .table import AwsTable
from .valve import Dosage, Valve

if TYPE_CHECKING:
    from .config import Settings, create_boto3_config
    from .schema import build_create_table_request, delete_table, describe_table, ensure_table

logging.getLogger(__name__).addHandler(logging.NullHandler())


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


def __getattr__(name: str) -> Any:
    if name in {"Settings", "create_boto3_config"}:
        from . import config

        return getattr(config, name)
    if name in {"build_create_table_request", "delete_table", "describe_table", "ensure_table"}:
        from . import schema

        return getattr(schema, name)
    raise AttributeError(name)


__all__ = [
    "AssumedCredentials",
    "Attributes",
    "AwsError",
    "AwsFrame",
    "AwsItem",
    "AwsIterator",
    "AwsTable",
    "BorrowedCredentials",
    "build_create_table_request",
    "Condition",
    "ConditionFailedError",
    "Conditions",
    "connect",
    "create_boto3_config",
    "Credentials",
    "Cursor",
    "decode_cursor",
    "delete_table",
    "describe_table",
    "Dosage",
    "DynaframeError",
    "encode_cursor",
    "ensure_table",
    "Item",
    "KEY_OPERATORS",
    "LocalCredentials",
    "NoSuchAttributeError",
    "NotFoundError",
    "PrefixedRegion",
    "QueryValve",
    "Region",
    "ScanValve",
    "Settings",
    "SimpleRegion",
    "StaticCredentials",
    "UsageError",
    "ValidationError",
    "Valve",
    "Value",
    "__version__",
]

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Protocol

from .credentials import Credentials
from .errors import ValidationError
from .table import AwsTable

_TABLE_NAME = re.compile(r"[a-zA-Z0-9_.-]{3,255}")


def validate_table_name(name: str) -> str:
    if not isinstance(name, str) or not _TABLE_NAME.fullmatch(name):
        raise ValidationError(f"invalid table name: {name!r}")
    return name


class Region(Protocol):
    def aws(self) -> Any: ...

    def table(self, name: str) -> AwsTable: ...


@dataclass(frozen=True)
class SimpleRegion:
    credentials: Credentials

    def aws(self) -> Any:
        return self.credentials.aws()

    def table(self, name: str) -> AwsTable:
        return AwsTable(self.credentials, self, validate_table_name(name))


@dataclass(frozen=True)
class PrefixedRegion:
    origin: Region
    prefix: str

    def aws(self) -> Any:
        return self.origin.aws()

    def table(self, name: str) -> AwsTable:
        return self.origin.table(f"{self.prefix}{name}")

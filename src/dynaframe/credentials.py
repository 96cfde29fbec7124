from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

import boto3
from botocore.config import Config

from .errors import ValidationError

_KEY = re.compile(r"[A-Z0-9]{20}")
_SECRET = re.compile(r"[a-zA-Z0-9+/=]{40}")
_REGION = re.compile(r"[-a-z0-9]+")

DEFAULT_REGION = "us-east-1"


class Credentials(Protocol):
    def aws(self) -> Any: ...


@contextmanager
def connect(source: Credentials) -> Iterator[Any]:
    aws = source.aws()
    try:
        yield aws
    finally:
        close = getattr(aws, "close", None)
        if callable(close):
            close()


def _check_region(region: str) -> str:
    if not isinstance(region, str) or not _REGION.fullmatch(region):
        raise ValidationError(f"invalid AWS region name: {region!r}")
    return region


@dataclass(frozen=True)
class StaticCredentials:
    key: str
    secret: str = field(repr=False)
    region: str = DEFAULT_REGION
    config: Config | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not _KEY.fullmatch(self.key):
            raise ValidationError(f"invalid AWS key: {self.key!r}")
        if not isinstance(self.secret, str) or not _SECRET.fullmatch(self.secret):
            raise ValidationError("invalid AWS secret key")
        _check_region(self.region)

    def __str__(self) -> str:
        return f"{self.region}/{self.key}"

    def aws(self) -> Any:
        session = boto3.session.Session(
            aws_access_key_id=self.key,
            aws_secret_access_key=self.secret,
            region_name=self.region,
        )
        return session.client("dynamodb", config=self.config)


@dataclass(frozen=True)
class AssumedCredentials:
    region: str = DEFAULT_REGION
    config: Config | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _check_region(self.region)

    def __str__(self) -> str:
        return self.region

    def aws(self) -> Any:
        return boto3.session.Session(region_name=self.region).client("dynamodb", config=self.config)


@dataclass(frozen=True)
class LocalCredentials:
    endpoint_url: str
    region: str = DEFAULT_REGION
    key: str = "dummy"
    secret: str = field(default="dummy", repr=False)
    config: Config | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.endpoint_url:
            raise ValidationError("endpoint_url is required")
        _check_region(self.region)

    def __str__(self) -> str:
        return f"{self.endpoint_url} ({self.region})"

    def aws(self) -> Any:
        session = boto3.session.Session(
            aws_access_key_id=self.key,
            aws_secret_access_key=self.secret,
            region_name=self.region,
        )
        return session.client("dynamodb", endpoint_url=self.endpoint_url, config=self.config)


class _Borrowed:
    def __init__(self, client: Any) -> None:
        self._client = client

    def __getattr__(self, name: str) -> Any:
        return getattr(self._client, name)

    def close(self) -> None:
        return None


class BorrowedCredentials:
    def __init__(self, client: Any) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"BorrowedCredentials({type(self._client).__name__})"

    def aws(self) -> Any:
        return _Borrowed(self._client)

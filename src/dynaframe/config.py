from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from botocore.config import Config

from .credentials import AssumedCredentials, Credentials, LocalCredentials, StaticCredentials
from .errors import ValidationError
from .region import PrefixedRegion, Region, SimpleRegion


def create_boto3_config(
    *,
    connect_timeout: float = 1.0,
    read_timeout: float = 3.0,
    max_attempts: int = 3,
) -> Config:
    return Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"max_attempts": max_attempts, "mode": "standard"},
    )


@dataclass(frozen=True)
class Settings:
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    table_prefix: str = ""
    connect_timeout: float = 1.0
    read_timeout: float = 3.0
    max_attempts: int = 3

    def __post_init__(self) -> None:
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValidationError("timeouts must be > 0")
        if self.max_attempts <= 0:
            raise ValidationError("max_attempts must be > 0")
        if (self.access_key is None) != (self.secret_key is None):
            raise ValidationError("access_key and secret_key must be provided together")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> Settings:
        values: dict[str, Any] = {}
        region = environ.get("DYNAFRAME_REGION") or environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION")
        if region:
            values["region"] = region
        endpoint = environ.get("DYNAFRAME_ENDPOINT") or environ.get("DYNAMODB_ENDPOINT")
        if endpoint:
            values["endpoint_url"] = endpoint
        if environ.get("AWS_ACCESS_KEY_ID"):
            values["access_key"] = environ["AWS_ACCESS_KEY_ID"]
        if environ.get("AWS_SECRET_ACCESS_KEY"):
            values["secret_key"] = environ["AWS_SECRET_ACCESS_KEY"]
        if environ.get("DYNAFRAME_TABLE_PREFIX"):
            values["table_prefix"] = environ["DYNAFRAME_TABLE_PREFIX"]
        for name, env in (
            ("connect_timeout", "DYNAFRAME_CONNECT_TIMEOUT"),
            ("read_timeout", "DYNAFRAME_READ_TIMEOUT"),
            ("max_attempts", "DYNAFRAME_MAX_ATTEMPTS"),
        ):
            raw = environ.get(env)
            if raw:
                values[name] = raw
        return cls._from_mapping(values)

    @classmethod
    def from_yaml(cls, raw: str) -> Settings:
        try:
            parsed = yaml.safe_load(raw)
        except yaml.YAMLError as err:
            raise ValidationError("invalid settings YAML") from err

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ValidationError("settings document must be a map")
        return cls._from_mapping(parsed)

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> Settings:
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data).difference(known))
        if unknown:
            raise ValidationError(f"unknown settings: {unknown}")

        values: dict[str, Any] = {}
        for name, raw in data.items():
            if raw is None:
                continue
            default = known[name].default
            try:
                if isinstance(default, float):
                    values[name] = float(raw)
                elif isinstance(default, int):
                    values[name] = int(raw)
                elif isinstance(raw, str):
                    values[name] = raw
                else:
                    raise TypeError(type(raw).__name__)
            except (TypeError, ValueError) as err:
                raise ValidationError(f"invalid value for setting '{name}': {raw!r}") from err
        return cls(**values)

    def boto3_config(self) -> Config:
        return create_boto3_config(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_attempts=self.max_attempts,
        )

    def credentials(self) -> Credentials:
        config = self.boto3_config()
        if self.endpoint_url:
            if self.access_key and self.secret_key:
                return LocalCredentials(
                    self.endpoint_url,
                    region=self.region,
                    key=self.access_key,
                    secret=self.secret_key,
                    config=config,
                )
            return LocalCredentials(self.endpoint_url, region=self.region, config=config)
        if self.access_key and self.secret_key:
            return StaticCredentials(self.access_key, self.secret_key, region=self.region, config=config)
        return AssumedCredentials(self.region, config=config)

    def build_region(self) -> Region:
        region: Region = SimpleRegion(self.credentials())
        if self.table_prefix:
            region = PrefixedRegion(region, self.table_prefix)
        return region

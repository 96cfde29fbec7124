from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .attributes import Attributes
from .aws_errors import consumed_units, invoke
from .credentials import Credentials, connect
from .frame import AwsFrame
from .item import AwsItem

if TYPE_CHECKING:
    from .region import Region

logger = logging.getLogger(__name__)

_KEY_TYPE_ORDER = {"HASH": 0, "RANGE": 1}


class AwsTable:
    def __init__(self, credentials: Credentials, region: Region, name: str) -> None:
        self._credentials = credentials
        self._region = region
        self._name = name

    def __repr__(self) -> str:
        return f"AwsTable('{self._name}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AwsTable):
            return NotImplemented
        return (
            self._credentials == other._credentials
            and self._region == other._region
            and self._name == other._name
        )

    def __hash__(self) -> int:
        return hash(self._name)

    @property
    def name(self) -> str:
        return self._name

    def region(self) -> Region:
        return self._region

    def frame(self) -> AwsFrame:
        return AwsFrame(self._credentials, self, self._name)

    def put(self, attributes: Mapping[str, Any]) -> AwsItem:
        attrs = Attributes(attributes)
        keys = self.keys()
        req = {
            "TableName": self._name,
            "Item": attrs.to_wire(),
            "ReturnValues": "NONE",
            "ReturnConsumedCapacity": "TOTAL",
        }
        with connect(self._credentials) as aws:
            resp = invoke(aws, "put_item", req)
        logger.debug(
            "put(%s): created item in '%s', %.2f units",
            ", ".join(attrs.keys()),
            self._name,
            consumed_units(resp),
        )
        return AwsItem(self._credentials, self.frame(), self._name, attrs.only(keys), keys)

    def keys(self) -> tuple[str, ...]:
        with connect(self._credentials) as aws:
            resp = invoke(aws, "describe_table", {"TableName": self._name})
        schema = (resp.get("Table") or {}).get("KeySchema") or []
        ordered = sorted(schema, key=lambda element: _KEY_TYPE_ORDER.get(str(element.get("KeyType")), 2))
        return tuple(str(element["AttributeName"]) for element in ordered)

from __future__ import annotations

import logging
import os
import uuid

from dynaframe import Condition, QueryValve, Settings
from dynaframe.schema import build_create_table_request, delete_table, ensure_table


def main() -> None:
    logging.basicConfig(level=logging.DEBUG if os.environ.get("DYNAFRAME_DEBUG") else logging.INFO)

    os.environ.setdefault("DYNAMODB_ENDPOINT", "http://localhost:8000")
    region = Settings.from_env().build_region()
    table_name = f"dynaframe_example_{uuid.uuid4().hex[:12]}"

    ensure_table(region, build_create_table_request(table_name, "pk", "sk"))
    try:
        table = region.table(table_name)
        table.put({"pk": "A", "sk": "001", "value": 1})
        table.put({"pk": "A", "sk": "010", "value": 10})
        table.put({"pk": "A", "sk": "100", "value": 100})

        frame = (
            table.frame()
            .where("pk", Condition.eq("A"))
            .where("sk", Condition.begins_with("0"))
            .through(QueryValve().with_attribute_to_get("value"))
        )
        for item in frame:
            print("query begins_with('0'):", dict(item.key()), item.get("value"))

        iterator = frame.iterator()
        next(iterator)
        iterator.remove()
        print("after remove:", frame.count())
    finally:
        delete_table(region, table_name)


if __name__ == "__main__":
    main()

from __future__ import annotations


class DynaframeError(Exception):
    pass


class ConditionFailedError(DynaframeError):
    pass


class NotFoundError(DynaframeError):
    pass


class NoSuchAttributeError(DynaframeError, KeyError):
    def __init__(self, *, table: str, attribute: str) -> None:
        super().__init__(f"attribute '{attribute}' is absent in the item of '{table}'")
        self.table = table
        self.attribute = attribute

    def __str__(self) -> str:
        return str(self.args[0])


class ValidationError(DynaframeError):
    pass


class UsageError(DynaframeError, RuntimeError):
    pass


class AwsError(DynaframeError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message

from enum import Enum


class BaseEnum(Enum):
    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class Subscription(BaseEnum):
    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"

from enum import Enum


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def _missing_(cls, value):
        # accept ?order=asc / ?order=Desc
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class StorageBackend(str, Enum):
    MONGO = "mongo"
    CSV = "csv"

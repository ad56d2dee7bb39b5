from enum import Enum


class Category(str, Enum):
    """Closed set of expense categories; anything unknown files under OTHER."""

    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    UTILITIES = "Utilities"
    TRAVEL = "Travel"
    EDUCATION = "Education"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return _LABELS.get(self, self.value)

    @classmethod
    def normalize(cls, raw) -> "Category":
        if isinstance(raw, Category):
            return raw
        key = (raw or "").strip().lower()
        return _BY_KEY.get(key, cls.OTHER)

    @classmethod
    def choices(cls):
        return [(c.value, c.label) for c in cls]


_LABELS = {
    Category.FOOD: "Food & Dining",
    Category.HEALTH: "Health & Medical",
    Category.UTILITIES: "Utilities & Bills",
}

_BY_KEY = {c.value.lower(): c for c in Category}

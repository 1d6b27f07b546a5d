"""
Record schemas, one pair per collection.

`<Kind>In`     validates the body of POST /api/{collection}.
`<Kind>Patch`  validates the body of PUT /api/{collection}/{id}; every field
               is optional and only the supplied ones are merged.

Field names follow the browser client (camelCase). Unknown fields are
dropped, and any `id` in a body is ignored: ids are assigned by the store.
"""
from __future__ import annotations

import enum
from typing import Annotated, Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models import Collection, normalize_diaper_type


class FeedMethod(str, enum.Enum):
    breast = "breast"
    bottle_breastmilk = "bottle-breastmilk"
    formula = "formula"


class BreastSide(str, enum.Enum):
    left = "left"
    right = "right"
    both = "both"
    na = "na"


class DiaperType(str, enum.Enum):
    wet = "wet"
    dirty = "dirty"
    mixed = "mixed"


class MedicationName(str, enum.Enum):
    ibuprofen = "ibuprofen"
    acetaminophen = "acetaminophen"


# Non-negative quantity; ints stay ints so values round-trip unchanged.
Amount = Union[Annotated[int, Field(ge=0)], Annotated[float, Field(ge=0)]]


class _RecordIn(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    def to_record(self) -> dict[str, Any]:
        """Fields the client actually sent, enums flattened to strings."""
        return self.model_dump(exclude_unset=True)


class _RecordPatch(_RecordIn):
    # Fields that are mandatory on create and so may not be nulled out.
    required_on_create: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def no_null_required(self):
        for name in self.required_on_create:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# ---------------------------------------------------------------------------
# feedings
# ---------------------------------------------------------------------------

class FeedingIn(_RecordIn):
    datetime: str = Field(min_length=1, description="ISO timestamp of the feed.")
    method: FeedMethod
    side: Optional[BreastSide] = None
    durationMin: Optional[Amount] = None
    amountMl: Optional[Amount] = None
    notes: Optional[str] = None


class FeedingPatch(_RecordPatch):
    required_on_create = ("datetime", "method")

    datetime: Optional[str] = Field(default=None, min_length=1)
    method: Optional[FeedMethod] = None
    side: Optional[BreastSide] = None
    durationMin: Optional[Amount] = None
    amountMl: Optional[Amount] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# diapers
# ---------------------------------------------------------------------------

class DiaperIn(_RecordIn):
    datetime: str = Field(min_length=1)
    type: DiaperType = Field(description="wet, dirty or mixed. poop/stool are stored as dirty.")
    color: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def legacy_type(cls, v):
        return normalize_diaper_type(v)


class DiaperPatch(_RecordPatch):
    required_on_create = ("datetime", "type")

    datetime: Optional[str] = Field(default=None, min_length=1)
    type: Optional[DiaperType] = None
    color: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def legacy_type(cls, v):
        return normalize_diaper_type(v)


# ---------------------------------------------------------------------------
# sleeps
# ---------------------------------------------------------------------------

class SleepIn(_RecordIn):
    start: str = Field(min_length=1)
    end: Optional[str] = None
    notes: Optional[str] = None


class SleepPatch(_RecordPatch):
    required_on_create = ("start",)

    start: Optional[str] = Field(default=None, min_length=1)
    end: Optional[str] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# growth
# ---------------------------------------------------------------------------

class GrowthIn(_RecordIn):
    datetime: str = Field(min_length=1)
    weightGrams: Optional[Amount] = None
    lengthCm: Optional[Amount] = None
    headCm: Optional[Amount] = None
    notes: Optional[str] = None


class GrowthPatch(_RecordPatch):
    required_on_create = ("datetime",)

    datetime: Optional[str] = Field(default=None, min_length=1)
    weightGrams: Optional[Amount] = None
    lengthCm: Optional[Amount] = None
    headCm: Optional[Amount] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# medications
# ---------------------------------------------------------------------------

class MedicationIn(_RecordIn):
    datetime: str = Field(min_length=1)
    name: MedicationName
    doseMg: Optional[Amount] = None
    notes: Optional[str] = None


class MedicationPatch(_RecordPatch):
    required_on_create = ("datetime", "name")

    datetime: Optional[str] = Field(default=None, min_length=1)
    name: Optional[MedicationName] = None
    doseMg: Optional[Amount] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# baby (singleton profile)
# ---------------------------------------------------------------------------

class BabyIn(_RecordIn):
    name: str = Field(min_length=1)
    birthIso: str = Field(min_length=1, description="Birth date and time, ISO 8601.")
    timezone: Optional[str] = None


class BabyPatch(_RecordPatch):
    required_on_create = ("name", "birthIso")

    name: Optional[str] = Field(default=None, min_length=1)
    birthIso: Optional[str] = Field(default=None, min_length=1)
    timezone: Optional[str] = None


CREATE_SCHEMAS: dict[Collection, type[_RecordIn]] = {
    Collection.feedings: FeedingIn,
    Collection.diapers: DiaperIn,
    Collection.sleeps: SleepIn,
    Collection.growth: GrowthIn,
    Collection.medications: MedicationIn,
    Collection.baby: BabyIn,
}

PATCH_SCHEMAS: dict[Collection, type[_RecordPatch]] = {
    Collection.feedings: FeedingPatch,
    Collection.diapers: DiaperPatch,
    Collection.sleeps: SleepPatch,
    Collection.growth: GrowthPatch,
    Collection.medications: MedicationPatch,
    Collection.baby: BabyPatch,
}

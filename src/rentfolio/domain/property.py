# src/rentfolio/domain/property.py
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class PropertyVariant(str, Enum):
    LTR = "LTR"
    STR = "STR"


class ExpenseTiming(str, Enum):
    IMMEDIATE = "IMMEDIATE"  # pre-closing / immediate
    YEAR_1 = "YEAR_1"        # spread over year one


class BuildingType(str, Enum):
    SFH = "SFH"
    DUPLEX = "DUPLEX"
    TRIPLEX = "TRIPLEX"
    QUADPLEX = "QUADPLEX"
    SIXPLEX = "SIXPLEX"
    OCTOPLEX = "OCTOPLEX"
    DECAPLEX = "DECAPLEX"
    DODECAPLEX = "DODECAPLEX"


BUILDING_TYPE_UNITS: dict[BuildingType, int] = {
    BuildingType.SFH: 1,
    BuildingType.DUPLEX: 2,
    BuildingType.TRIPLEX: 3,
    BuildingType.QUADPLEX: 4,
    BuildingType.SIXPLEX: 6,
    BuildingType.OCTOPLEX: 8,
    BuildingType.DECAPLEX: 10,
    BuildingType.DODECAPLEX: 12,
}


def _new_id() -> str:
    return str(uuid4())


def _to_num(val: Any) -> Any:
    """
    Coerce dashboard-style inputs like:
      - "250000"
      - "$250,000"
      - "6.5%"
    into float. Anything that isn't a string is left for pydantic to judge.
    """
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            return float(s)
        except ValueError:
            return val
    return val


class _InputModel(BaseModel):
    """
    Inputs are immutable once handed to the engine.

    Accepts both snake_case and the camelCase keys the dashboard stores.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


Money = Annotated[float, Field(ge=0)]
Percent = Annotated[float, Field(ge=0, le=100)]


class SharedDetails(_InputModel):
    id: str = Field(default_factory=_new_id)
    name: str = ""
    market_value: Money = 0.0

    purchase_price: Money = 0.0
    down_payment: Money = 0.0
    loan_amount: Money = Field(default=0.0, description="Original loan amount")
    loan_remaining: Money = Field(default=0.0, description="Remaining balance; 0 means use loan_amount")
    interest_rate: Percent = Field(default=0.0, description="Annual %, e.g. 6.5")
    loan_term_years: int = Field(default=30, gt=0)
    closing_costs: Money = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_gets_fresh_one(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return _new_id()
        return v

    @field_validator(
        "market_value",
        "purchase_price",
        "down_payment",
        "loan_amount",
        "loan_remaining",
        "interest_rate",
        "loan_term_years",
        "closing_costs",
        mode="before",
    )
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        return _to_num(v)


class LTRDetails(_InputModel):
    kind: Literal["LTR"] = "LTR"

    gross_rent_per_month: Money = Field(default=0.0, description="Rent per unit per month")
    building_type: BuildingType = BuildingType.SFH
    number_of_units: int = Field(default=1, ge=0)
    pm_fee_percent: Percent = 9.0
    annual_property_tax: Money = 0.0
    annual_insurance: Money = 0.0
    monthly_repair_reserve: Money = 50.0
    target_veteran_occupancy_percent: Percent = 50.0
    current_veteran_occupancy_percent: Percent | None = None

    @model_validator(mode="before")
    @classmethod
    def _units_from_building_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "number_of_units" in data or "numberOfUnits" in data:
            return data
        building = data.get("building_type", data.get("buildingType"))
        if building is None:
            return data
        try:
            units = BUILDING_TYPE_UNITS[BuildingType(building)]
        except ValueError:
            # let field validation report the bad building type
            return data
        return {**data, "number_of_units": units}

    @field_validator(
        "gross_rent_per_month",
        "number_of_units",
        "pm_fee_percent",
        "annual_property_tax",
        "annual_insurance",
        "monthly_repair_reserve",
        "target_veteran_occupancy_percent",
        "current_veteran_occupancy_percent",
        mode="before",
    )
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        return _to_num(v)


class STRDetails(_InputModel):
    kind: Literal["STR"] = "STR"

    daily_rate: Money = 0.0
    days_in_month: float = Field(default=30.0, ge=0, le=31)
    occupancy_rate: Percent = 0.0
    co_host_fee_percent: Percent = 0.0
    cleaning_fee_per_stay: Money = 0.0
    avg_stays_per_month: float = Field(default=0.0, ge=0)
    monthly_utilities: Money = 0.0
    annual_property_tax: Money = 0.0
    annual_insurance: Money = 0.0

    @field_validator(
        "daily_rate",
        "days_in_month",
        "occupancy_rate",
        "co_host_fee_percent",
        "cleaning_fee_per_stay",
        "avg_stays_per_month",
        "monthly_utilities",
        "annual_property_tax",
        "annual_insurance",
        mode="before",
    )
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        return _to_num(v)


class ManualExpense(_InputModel):
    """One-off repair/improvement item entered after a walkthrough."""
    id: str = Field(default_factory=_new_id)
    name: str = ""
    estimated_cost: Money = 0.0
    timing: ExpenseTiming = ExpenseTiming.IMMEDIATE

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        return _to_num(v)


VariantDetails = Annotated[LTRDetails | STRDetails, Field(discriminator="kind")]


class Property(_InputModel):
    shared: SharedDetails = Field(default_factory=SharedDetails)
    details: VariantDetails
    manual_expenses: tuple[ManualExpense, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _fold_dashboard_payload(cls, data: Any) -> Any:
        """
        The dashboard stores properties as:
            {"type": "LTR", "shared": {...}, "ltr": {...}, "str": None, "manualExpenses": [...]}

        Fold the sibling ltr/str blocks into the tagged `details` field.
        Exactly one variant block must be present.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        shared = data.get("shared")
        if isinstance(shared, dict) and "downpayment" in shared:
            shared = dict(shared)
            shared.setdefault("down_payment", shared.pop("downpayment"))
            data["shared"] = shared

        if "details" in data:
            return data

        kind = str(data.pop("type", "") or "").strip().upper()
        ltr = data.pop("ltr", None)
        str_ = data.pop("str", None)

        if not kind:
            if ltr is not None and str_ is None:
                kind = "LTR"
            elif str_ is not None and ltr is None:
                kind = "STR"

        if kind == "LTR" and isinstance(ltr, dict):
            data["details"] = {**ltr, "kind": "LTR"}
        elif kind == "STR" and isinstance(str_, dict):
            data["details"] = {**str_, "kind": "STR"}
        else:
            raise ValueError(
                "Property payload must carry exactly one variant block: 'ltr' or 'str'"
            )
        return data

    @property
    def id(self) -> str:
        return self.shared.id

    @property
    def variant(self) -> PropertyVariant:
        return PropertyVariant(self.details.kind)

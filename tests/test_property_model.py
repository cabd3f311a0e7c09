import pytest
from pydantic import ValidationError

from rentfolio.analysis.finance import calculate_metrics
from rentfolio.domain.property import (
    BuildingType,
    ExpenseTiming,
    LTRDetails,
    Property,
    PropertyVariant,
    SharedDetails,
    STRDetails,
)

from tests.fixtures.properties import dashboard_ltr_payload, ltr_duplex


def test_percent_and_currency_strings_are_parsed():
    shared = SharedDetails(purchase_price="$250,000", interest_rate="6.5%", closing_costs="1,200")

    assert shared.purchase_price == 250_000.0
    assert shared.interest_rate == 6.5
    assert shared.closing_costs == 1_200.0


def test_camel_case_keys_are_accepted():
    shared = SharedDetails.model_validate(
        {"purchasePrice": 100_000, "loanAmount": 80_000, "loanTermYears": 15}
    )
    assert shared.loan_amount == 80_000
    assert shared.loan_term_years == 15


@pytest.mark.parametrize(
    "field,value",
    [
        ("purchase_price", -1),
        ("loan_amount", -500),
        ("interest_rate", 101),
        ("interest_rate", -0.5),
        ("loan_term_years", 0),
        ("purchase_price", float("inf")),
        ("purchase_price", float("nan")),
    ],
)
def test_bad_shared_inputs_are_rejected(field, value):
    with pytest.raises(ValidationError):
        SharedDetails(**{field: value})


def test_unparseable_string_is_rejected():
    with pytest.raises(ValidationError):
        SharedDetails(purchase_price="lots")


def test_blank_id_gets_a_fresh_one():
    a = SharedDetails(id="")
    b = SharedDetails(id="   ")
    assert a.id and b.id and a.id != b.id


def test_building_type_sets_unit_count():
    assert LTRDetails(building_type=BuildingType.QUADPLEX).number_of_units == 4
    assert LTRDetails(building_type="DODECAPLEX").number_of_units == 12
    assert LTRDetails().number_of_units == 1


def test_explicit_unit_count_wins_over_building_type():
    assert LTRDetails(building_type="SIXPLEX", number_of_units=5).number_of_units == 5


def test_unknown_building_type_is_rejected():
    with pytest.raises(ValidationError):
        LTRDetails(building_type="CASTLE")


def test_ltr_defaults():
    ltr = LTRDetails()
    assert ltr.pm_fee_percent == 9.0
    assert ltr.monthly_repair_reserve == 50.0
    assert ltr.target_veteran_occupancy_percent == 50.0
    assert ltr.current_veteran_occupancy_percent is None


def test_str_days_in_month_is_bounded():
    with pytest.raises(ValidationError):
        STRDetails(days_in_month=32)


def test_inputs_are_frozen():
    prop = ltr_duplex()
    with pytest.raises(ValidationError):
        prop.shared.purchase_price = 1.0


def test_variant_is_derived_from_details():
    prop = ltr_duplex()
    assert prop.variant is PropertyVariant.LTR
    assert prop.id == "ltr-duplex"


def test_dashboard_payload_is_folded():
    prop = Property.model_validate(dashboard_ltr_payload())

    assert prop.variant is PropertyVariant.LTR
    assert prop.id == "dash-1"
    assert prop.shared.purchase_price == 400_000.0
    assert prop.shared.down_payment == 80_000.0
    assert prop.shared.interest_rate == 6.5
    assert prop.details.number_of_units == 3
    assert prop.details.current_veteran_occupancy_percent == 33
    assert len(prop.manual_expenses) == 1
    assert prop.manual_expenses[0].timing is ExpenseTiming.IMMEDIATE


def test_dashboard_payload_metrics():
    m = calculate_metrics(Property.model_validate(dashboard_ltr_payload()))

    # 3 units * 1,400
    assert m.gross_monthly_income == 4_200.00
    # 378 PM + 400 tax + 150 insurance + 150 repairs
    assert m.total_monthly_expenses == 1_078.00
    # 80,000 down + 8,000 closing + 6,000 immediate HVAC
    assert m.initial_cash_invested == 94_000.00


def test_variant_inferred_from_single_block():
    payload = dashboard_ltr_payload()
    del payload["type"]
    assert Property.model_validate(payload).variant is PropertyVariant.LTR


def test_null_sibling_block_is_ignored():
    payload = dashboard_ltr_payload()
    payload["str"] = None
    assert Property.model_validate(payload).variant is PropertyVariant.LTR


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("ltr"),
        lambda p: p.update(type="STR"),
        lambda p: (p.pop("type"), p.update(str={"dailyRate": 100})),
    ],
    ids=["no-variant-block", "type-without-matching-block", "ambiguous-blocks"],
)
def test_payload_without_exactly_one_variant_is_rejected(mutate):
    payload = dashboard_ltr_payload()
    mutate(payload)
    with pytest.raises(ValidationError):
        Property.model_validate(payload)


def test_details_must_be_tagged():
    with pytest.raises(ValidationError):
        Property.model_validate({"shared": {}, "details": {"gross_rent_per_month": 1000}})


def test_manual_expense_timing_must_be_known():
    payload = dashboard_ltr_payload()
    payload["manualExpenses"][0]["timing"] = "SOMEDAY"
    with pytest.raises(ValidationError):
        Property.model_validate(payload)

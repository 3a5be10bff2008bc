from datetime import timedelta
from textwrap import dedent

import pytest

from ev_charge_costing.tariffs.loader import (
    extract_numeric_cost,
    load_cdr,
    load_charge_record,
    load_document,
    load_record,
    load_tariff,
)
from ev_charge_costing.tariffs.types import Cdr, ChargeRecord

TARIFF = {
    "id": "TARIFF-001",
    "currency": "gbp",
    "elements": [
        {"price_components": [{"type": "ENERGY", "price": 0.35, "step_size": 1, "vat": 20}]},
        {
            "price_components": [{"type": "parking_time", "price": 0.10, "step_size": 60}],
            "restrictions": {
                "start_time": "9:00",
                "end_time": "18:00",
                "day_of_week": ["monday", "Friday"],
                "min_duration": 1800,
            },
        },
    ],
}

SESSION = {
    "start_date_time": "2025-12-26T10:00:00Z",
    "end_date_time": "2025-12-26T10:45:00Z",
    "kwh": 45.5,
    "charging_periods": [
        {
            "start_date_time": "2025-12-26T10:00:00Z",
            "dimensions": [{"type": "ENERGY", "volume": 45.5}, {"type": "TIME", "volume": 45}],
        }
    ],
}


def test_load_tariff_normalizes_fields():
    tariff = load_tariff(TARIFF)

    assert tariff.id == "TARIFF-001"
    assert tariff.currency == "GBP"
    assert len(tariff.elements) == 2
    energy = tariff.elements[0].price_components[0]
    assert (energy.type, energy.price, energy.step_size, energy.vat) == ("ENERGY", 0.35, 1.0, 20.0)
    assert tariff.elements[0].restrictions is None

    parking = tariff.elements[1]
    assert parking.price_components[0].type == "PARKING_TIME"
    assert parking.price_components[0].vat is None
    assert parking.restrictions.start_time == "09:00"
    assert parking.restrictions.end_time == "18:00"
    assert parking.restrictions.day_of_week == ("MONDAY", "FRIDAY")
    assert parking.restrictions.min_duration == 1800


def test_load_tariff_rejects_missing_price():
    bad = {"elements": [{"price_components": [{"type": "ENERGY"}]}]}
    with pytest.raises(ValueError, match=r"price.*elements\[0\]\.price_components\[0\]"):
        load_tariff(bad)


def test_load_tariff_rejects_unknown_dimension():
    bad = {"elements": [{"price_components": [{"type": "VOLTAGE", "price": 1}]}]}
    with pytest.raises(ValueError, match="Unknown dimension type"):
        load_tariff(bad)


def test_load_tariff_rejects_bad_clock():
    bad = {"elements": [{"price_components": [], "restrictions": {"start_time": "noon"}}]}
    with pytest.raises(ValueError, match="HH:MM"):
        load_tariff(bad)


def test_load_charge_record():
    record = load_charge_record(SESSION)

    assert isinstance(record, ChargeRecord)
    assert record.start_date_time.utcoffset() == timedelta(0)
    assert record.end_date_time - record.start_date_time == timedelta(minutes=45)
    assert record.kwh == 45.5
    assert record.charging_periods[0].dimensions[1].volume == 45.0


def test_load_charge_record_requires_timestamps():
    with pytest.raises(ValueError, match="end_date_time"):
        load_charge_record({"start_date_time": "2025-12-26T10:00:00Z"})


def test_load_charge_record_rejects_bad_timestamp():
    with pytest.raises(ValueError, match="timestamp"):
        load_charge_record({"start_date_time": "yesterday", "end_date_time": "today"})


def test_extract_numeric_cost():
    assert extract_numeric_cost(None) is None
    assert extract_numeric_cost(5) == 5.0
    assert extract_numeric_cost({"excl_vat": 10.0, "incl_vat": 12.0}) == 12.0
    assert extract_numeric_cost({"excl_vat": 10.0}) == 10.0


def test_load_cdr_reads_price_objects_and_tariffs():
    payload = dict(
        SESSION,
        id="CDR-42",
        currency="EUR",
        total_cost={"excl_vat": 16.0, "incl_vat": 19.2},
        total_energy_cost={"excl_vat": 15.0},
        total_fixed_cost=1.0,
        tariffs=[TARIFF],
        last_updated="2025-12-26T11:00:00Z",
    )

    cdr = load_cdr(payload)

    assert cdr.id == "CDR-42"
    assert cdr.currency == "EUR"
    assert cdr.total_cost == 19.2
    assert cdr.total_vat == pytest.approx(3.2)
    assert cdr.total_energy_cost == 15.0
    assert cdr.total_fixed_cost == 1.0
    assert cdr.total_time_cost is None
    assert cdr.tariffs[0].id == "TARIFF-001"
    assert cdr.last_updated is not None


def test_load_record_detects_cdr_payloads():
    assert type(load_record(SESSION)) is ChargeRecord
    assert isinstance(load_record(dict(SESSION, total_energy_cost=3.0)), Cdr)


def test_load_document_yaml_with_unquoted_clock_times(tmp_path):
    path = tmp_path / "tariff.yaml"
    path.write_text(
        dedent(
            """
            currency: GBP
            elements:
              - price_components:
                  - type: ENERGY
                    price: 0.20
                restrictions:
                  start_time: 22:00
                  end_time: "06:00"
            """
        ),
        encoding="utf-8",
    )

    tariff = load_tariff(load_document(path))

    assert tariff.elements[0].restrictions.start_time == "22:00"
    assert tariff.elements[0].restrictions.end_time == "06:00"


def test_load_document_rejects_unknown_suffix_and_non_objects(tmp_path, write_json):
    txt = tmp_path / "tariff.txt"
    txt.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        load_document(txt)

    with pytest.raises(ValueError, match="must be an object"):
        load_document(write_json("list.json", [1, 2]))


def test_load_record_treats_minimal_cdr_as_cdr():
    minimal = dict(
        SESSION,
        id="CDR-7",
        currency="GBP",
        total_cost={"excl_vat": 10.0, "incl_vat": 12.0},
    )

    cdr = load_record(minimal)

    assert isinstance(cdr, Cdr)
    assert cdr.total_cost == 12.0
    assert type(load_record(dict(SESSION, total_cost=12.0))) is ChargeRecord
    assert type(load_record(dict(SESSION, last_updated="2025-12-26T11:00:00Z"))) is ChargeRecord


def test_load_charge_record_rejects_mixed_timezone_awareness():
    mixed = {"start_date_time": "2025-12-26T10:00:00", "end_date_time": "2025-12-26T10:30:00Z"}
    with pytest.raises(ValueError, match="UTC offset.*record"):
        load_charge_record(mixed)

    naive = load_charge_record({"start_date_time": "2025-12-26T10:00:00", "end_date_time": "2025-12-26T10:30:00"})
    assert naive.end_date_time - naive.start_date_time == timedelta(minutes=30)


@pytest.mark.parametrize("price", ["cheap", {"amount": 1}, [1, 2]])
def test_load_tariff_rejects_non_numeric_price(price):
    bad = {"elements": [{"price_components": [{"type": "ENERGY", "price": price}]}]}
    with pytest.raises(ValueError, match=r"'price' must be a number in tariff\.elements\[0\]\.price_components\[0\]"):
        load_tariff(bad)


@pytest.mark.parametrize("clock", ["25:00", "12:99", 24 * 60 * 60])
def test_load_tariff_rejects_out_of_range_clock(clock):
    bad = {"elements": [{"price_components": [], "restrictions": {"start_time": clock}}]}
    with pytest.raises(ValueError, match=r"tariff\.elements\[0\]\.restrictions: out of range"):
        load_tariff(bad)


def test_load_document_yaml_with_unquoted_clock_seconds(tmp_path):
    path = tmp_path / "tariff.yaml"
    path.write_text(
        dedent(
            """
            elements:
              - price_components: []
                restrictions:
                  start_time: 22:00:00
                  end_time: 06:30:00
            """
        ),
        encoding="utf-8",
    )

    restrictions = load_tariff(load_document(path)).elements[0].restrictions

    assert restrictions.start_time == "22:00"
    assert restrictions.end_time == "06:30"

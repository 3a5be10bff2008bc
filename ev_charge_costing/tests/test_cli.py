import json

import pytest

from ev_charge_costing.cli import main

SESSION = {
    "start_date_time": "2025-12-26T10:00:00Z",
    "end_date_time": "2025-12-26T10:30:00Z",
    "kwh": 10,
}

TARIFF = {
    "currency": "GBP",
    "elements": [{"price_components": [{"type": "ENERGY", "price": 0.30, "step_size": 0}]}],
}


def test_session_with_tariff_prints_markdown(write_json, capsys):
    main(["--record", str(write_json("session.json", SESSION)), "--tariff", str(write_json("tariff.json", TARIFF))])

    out = capsys.readouterr().out
    assert "## Charging cost (GBP, tariff)" in out
    assert "| Energy | £3.00 |" in out
    assert "| VAT | £0.60 |" in out
    assert "| Total | £3.60 |" in out


def test_json_output_uses_currency_symbol(write_json, capsys):
    tariff = dict(TARIFF, currency="EUR")
    main(
        [
            "--record",
            str(write_json("session.json", SESSION)),
            "--tariff",
            str(write_json("tariff.json", tariff)),
            "--output-format",
            "json",
        ]
    )

    doc = json.loads(capsys.readouterr().out)
    assert doc["currency"] == "EUR"
    assert doc["mode"] == "tariff"
    assert doc["breakdown"]["total_amount"] == {"pence": 360, "amount": 3.6, "formatted": "€3.60"}


def test_cdr_totals_and_recalculation(write_json, capsys):
    cdr = dict(
        SESSION,
        id="CDR-1",
        currency="GBP",
        total_energy_cost=2.50,
        total_cost=3.00,
        tariffs=[TARIFF],
    )
    path = str(write_json("cdr.json", cdr))

    main(["--record", path, "--output-format", "json"])
    totals = json.loads(capsys.readouterr().out)
    assert totals["mode"] == "cdr totals"
    assert totals["breakdown"]["energy_cost"]["pence"] == 250
    assert totals["breakdown"]["vat_amount"]["pence"] == 50

    main(["--record", path, "--recalculate", "--output-format", "json"])
    repriced = json.loads(capsys.readouterr().out)
    assert repriced["mode"] == "recalculated"
    assert repriced["breakdown"]["energy_cost"]["pence"] == 300
    assert repriced["breakdown"]["total_amount"]["pence"] == 360


def test_session_without_tariff_exits_with_error(write_json, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--record", str(write_json("session.json", SESSION))])

    assert exc.value.code == 2
    assert "tariff is required" in capsys.readouterr().out


def test_missing_record_file_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--record", str(tmp_path / "nope.json")])
    assert exc.value.code == 2


def test_minimal_cdr_is_summarized_from_total_cost(write_json, capsys):
    cdr = dict(SESSION, id="CDR-2", currency="GBP", total_cost={"excl_vat": 10.0, "incl_vat": 12.0})

    main(["--record", str(write_json("cdr.json", cdr)), "--output-format", "json"])

    doc = json.loads(capsys.readouterr().out)
    assert doc["mode"] == "cdr totals"
    assert doc["breakdown"]["subtotal"]["pence"] == 1200
    assert doc["breakdown"]["vat_amount"]["pence"] == 0
    assert doc["breakdown"]["total_amount"]["pence"] == 1200


def test_mixed_timezone_timestamps_exit_with_error(write_json, capsys):
    session = dict(SESSION, start_date_time="2025-12-26T10:00:00")

    with pytest.raises(SystemExit) as exc:
        main(["--record", str(write_json("session.json", session)), "--tariff", str(write_json("tariff.json", TARIFF))])

    assert exc.value.code == 2
    assert "UTC offset" in capsys.readouterr().out

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from rclookup.identifier import normalize
from rclookup.models.record import RcRecord
from rclookup.models.transaction import Transaction, TransactionKind
from rclookup.render.document import document_fields, document_filename, format_date, render_document
from rclookup.render.table import (
    TransactionRow,
    export_filename,
    format_datetime,
    paginate,
    to_csv,
    to_table,
)

IST = ZoneInfo("Asia/Kolkata")


def _topup(txn_id: int, amount: int, hour: int = 10) -> Transaction:
    return Transaction(
        id=txn_id,
        timestamp=datetime(2026, 1, 5, hour, 0, tzinfo=UTC),
        kind=TransactionKind.TOPUP,
        amount=amount,
    )


def _debit(txn_id: int, vehicle: str, hour: int = 11) -> Transaction:
    return Transaction(
        id=txn_id,
        timestamp=datetime(2026, 1, 5, hour, 30, tzinfo=UTC),
        kind=TransactionKind.DEBIT,
        cost=5,
        vehicle_number=vehicle,
    )


def test_document_fields_are_ordered_with_placeholders() -> None:
    record = RcRecord.model_validate(
        {
            "vehicleNumber": "TN 01 AB 1234",
            "ownerName": "Ravi Kumar",
            "registrationDate": "2019-04-12T00:00:00Z",
            "insuranceValidTill": "11-04-2026",
        }
    )

    fields = document_fields(record)

    assert [label for label, _ in fields] == [
        "1. Registration Number:",
        "2. Owner Name:",
        "3. Vehicle Class:",
        "4. Fuel Type:",
        "5. Chassis Number:",
        "6. Engine Number:",
        "7. Manufacturer:",
        "8. Model:",
        "9. Registration Date:",
        "10. Insurance Valid Till:",
        "11. RTO Office:",
        "12. Address of Owner:",
    ]
    values = dict(fields)
    assert values["1. Registration Number:"] == "TN 01 AB 1234"
    assert values["3. Vehicle Class:"] == "N/A"
    assert values["9. Registration Date:"] == "12 Apr 2019"
    assert values["10. Insurance Valid Till:"] == "11 Apr 2026"
    assert values["12. Address of Owner:"] == "N/A"


def test_registration_number_falls_back_to_identifier() -> None:
    fields = document_fields(RcRecord(), normalize("KA05MH0001"))
    assert fields[0][1] == "KA05MH0001"


def test_format_date_variants() -> None:
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date("2024-01-05") == "05 Jan 2024"
    assert format_date("5/1/2024") == "05 Jan 2024"
    assert format_date("05-Jan-2024") == "05 Jan 2024"
    assert format_date("sometime soon") == "sometime soon"


def test_document_filename_strips_separators() -> None:
    record = RcRecord.model_validate({"vehicleNumber": "TN 01 AB 1234"})

    assert document_filename(record) == "TN01AB1234_RC.pdf"
    assert document_filename(record, normalize("tn-01-ab-1234")) == "TN01AB1234_RC.pdf"
    assert document_filename(RcRecord()) == "RC_RC.pdf"


def test_render_document_is_deterministic_pdf() -> None:
    record = RcRecord.model_validate({"vehicleNumber": "TN01AB1234", "ownerName": "Ravi Kumar"})

    first = render_document(record)
    second = render_document(record)

    assert first.startswith(b"%PDF")
    assert first == second


def test_format_datetime_uses_time_zone_and_12_hour_clock() -> None:
    assert format_datetime(datetime(2026, 1, 5, 10, 0, tzinfo=UTC), IST) == "05 Jan 2026, 03:30 pm"
    assert format_datetime(datetime(2026, 1, 5, 18, 45, tzinfo=UTC), IST) == "06 Jan 2026, 12:15 am"


def test_to_table_is_latest_first_with_placeholders() -> None:
    rows = to_table([_topup(1, 100), _debit(2, "TN01AB1234")], tz=IST)

    assert rows == [
        TransactionRow("05 Jan 2026, 05:00 pm", "debit", "TN01AB1234", "-", "5"),
        TransactionRow("05 Jan 2026, 03:30 pm", "topup", "-", "100", "-"),
    ]


def test_to_table_filter_is_case_insensitive_over_vehicle_and_kind() -> None:
    log = [_topup(1, 100), _debit(2, "TN01AB1234"), _debit(3, "KA05MH0001")]

    assert [r.vehicle_number for r in to_table(log, "tn01", tz=IST)] == ["TN01AB1234"]
    assert [r.kind for r in to_table(log, "TOPUP", tz=IST)] == ["topup"]
    assert len(to_table(log, "DeBiT", tz=IST)) == 2
    assert to_table(log, "zz", tz=IST) == []
    assert len(to_table(log, "  ", tz=IST)) == 3


def test_paginate_clamps_pages() -> None:
    rows = to_table([_topup(i, i) for i in range(1, 24)], tz=IST)

    first = paginate(rows, 1, 10)
    last = paginate(rows, 99, 10)

    assert first.total_pages == 3
    assert first.rows[0].amount == "23"
    assert len(last.rows) == 3
    assert last.page == 3
    assert paginate([], 1, 10).total_pages == 1


def test_csv_export_of_empty_log_is_header_only() -> None:
    assert to_csv([]) == "Date,Type,Vehicle Number,Amount,Cost\n"


def test_csv_export_quotes_formatted_dates() -> None:
    content = to_csv([_debit(1, "TN01AB1234")], tz=IST)

    assert content.splitlines() == [
        "Date,Type,Vehicle Number,Amount,Cost",
        '"05 Jan 2026, 05:00 pm",debit,TN01AB1234,-,5',
    ]


def test_export_filename() -> None:
    assert export_filename(date(2026, 10, 19)) == "transactions_2026-10-19.csv"

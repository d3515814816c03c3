from datetime import datetime
from decimal import Decimal
from io import BytesIO
from types import SimpleNamespace

import pandas as pd

from bpay.models.charge import ChargeStatus
from bpay.services.export import COLUMNS, charges_dataframe, to_csv, to_xlsx


def _charge(**overrides):
    data = dict(
        id="c1",
        student_name="Ana Paula Silva",
        campus_name="Bonfim",
        amount=Decimal("899.00"),
        due_date=datetime(2025, 3, 10),
        status=ChargeStatus.PENDING,
        paid_at=None,
        paid_amount=None,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_csv_rows_use_brazilian_labels_and_dates():
    paid = _charge(
        id="c2",
        status=ChargeStatus.PAID,
        paid_at=datetime(2025, 3, 8, 14, 0),
        paid_amount=Decimal("899.00"),
    )
    csv = to_csv(charges_dataframe([_charge(), paid]))
    lines = csv.strip().splitlines()

    assert lines[0] == ",".join(COLUMNS)
    assert lines[1] == "c1,Ana Paula Silva,Bonfim,899.00,10/03/2025,Em Aberto,-,-"
    assert lines[2] == "c2,Ana Paula Silva,Bonfim,899.00,10/03/2025,Pago,08/03/2025,899.00"


def test_empty_export_keeps_header():
    assert to_csv(charges_dataframe([])).strip() == ",".join(COLUMNS)


def test_xlsx_round_trips_through_pandas():
    data = to_xlsx(charges_dataframe([_charge(status=ChargeStatus.OVERDUE)]))
    df = pd.read_excel(BytesIO(data), dtype=str)

    assert list(df.columns) == COLUMNS
    assert df.iloc[0]["Status"] == "Atrasado"

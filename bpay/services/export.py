"""CSV / Excel export of charge listings."""
import io
from typing import Iterable

import pandas as pd

from bpay.models.charge import Charge, ChargeStatus

STATUS_LABELS = {
    ChargeStatus.PAID: "Pago",
    ChargeStatus.PENDING: "Em Aberto",
    ChargeStatus.OVERDUE: "Atrasado",
    ChargeStatus.CANCELLED: "Cancelado",
}

COLUMNS = ["ID", "Estudante", "Sede", "Valor", "Vencimento", "Status", "Pago em", "Valor Pago"]


def charges_dataframe(charges: Iterable[Charge]) -> pd.DataFrame:
    data = [
        {
            "ID": str(c.id),
            "Estudante": c.student_name,
            "Sede": c.campus_name,
            "Valor": f"{c.amount:.2f}",
            "Vencimento": c.due_date.strftime("%d/%m/%Y"),
            "Status": STATUS_LABELS[c.status],
            "Pago em": c.paid_at.strftime("%d/%m/%Y") if c.paid_at else "-",
            "Valor Pago": f"{c.paid_amount:.2f}" if c.paid_amount is not None else "-",
        }
        for c in charges
    ]
    return pd.DataFrame(data, columns=COLUMNS)


def to_csv(df: pd.DataFrame) -> str:
    stream = io.StringIO()
    df.to_csv(stream, index=False)
    return stream.getvalue()


def to_xlsx(df: pd.DataFrame) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Cobranças")
    return output.getvalue()

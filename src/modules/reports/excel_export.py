"""Export report data to Excel (XLSX)."""

from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

from src.shared.utils.money import format_rupiah


def _write_table(ws: Any, rows: list[list[Any]], start_row: int = 1) -> None:
    """Write list of rows to sheet starting at start_row."""
    for i, row in enumerate(rows, start=start_row):
        for j, val in enumerate(row, start=1):
            ws.cell(row=i, column=j, value=val)


def _section(ws: Any, row: int, title: str, headers: list[str], rows: list[list[Any]]) -> int:
    """Write a titled table; return the row after it."""
    ws.cell(row, 1, title).font = Font(bold=True)
    _write_table(ws, [headers], row + 1)
    for c in range(1, len(headers) + 1):
        ws.cell(row + 1, c).font = Font(bold=True)
    _write_table(ws, rows, row + 2)
    return row + 2 + len(rows) + 1


def export_monthly_report(data: dict) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Laporan"
    ws.cell(1, 1, f"Laporan Keuangan {data['institution_name']}")
    ws.cell(1, 1).font = Font(bold=True, size=12)
    ws.cell(2, 1, f"Periode: {data['period_label']}")

    net = data["total_spp"] + data["total_donations"] - data["total_expenses"]
    summary = [
        ["Total Pemasukan SPP", format_rupiah(data["total_spp"])],
        ["Total Donasi ZISWAF", format_rupiah(data["total_donations"])],
        ["Total Pengeluaran", format_rupiah(data["total_expenses"])],
        ["Saldo Bersih", format_rupiah(net)],
        ["Total Tabungan Santri", format_rupiah(data["total_savings"])],
        ["Jumlah Santri Aktif", data["active_students"]],
    ]
    row = _section(ws, 4, "Ringkasan", ["Keterangan", "Jumlah"], summary)

    row = _section(
        ws,
        row,
        "Pembayaran SPP",
        ["Tanggal", "No. Kwitansi", "Santri", "Jumlah", "Metode"],
        [
            [t["transaction_date"], t["receipt_number"] or "-", t["student_name"] or "-",
             t["amount"], t["payment_method"] or "-"]
            for t in data["spp_transactions"]
        ],
    )
    row = _section(
        ws,
        row,
        "Donasi ZISWAF",
        ["Tanggal", "Jenis", "Donatur", "Jumlah"],
        [
            [d["donation_date"], d["donation_type"], d["donor_name"], d["amount"]]
            for d in data["donations"]
        ],
    )
    _section(
        ws,
        row,
        "Pengeluaran",
        ["Tanggal", "Kategori", "Deskripsi", "Jumlah"],
        [
            [e["expense_date"], e["expense_category"], e["description"], e["amount"]]
            for e in data["expenses"]
        ],
    )

    ws.column_dimensions["A"].width = 24
    ws.column_dimensions["B"].width = 22
    ws.column_dimensions["C"].width = 30
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()

"""Reading receivables import files."""

import csv
from pathlib import Path

from debtsync.domain.errors import ValidationError
from debtsync.domain.normalizer import ImportRow

# Header spellings per field, compared case-insensitively. The Turkish ones
# match the import template handed to customers.
HEADER_ALIASES = {
    "customer_name": ("customer", "customer name", "müşteri"),
    "due_date": ("due date", "due_date", "vade tarihi", "vade tarihi (gg.aa.yyyy)"),
    "amount": ("amount", "tutar"),
    "currency": ("currency", "para birimi", "para birimi (try/usd/eur)"),
    "debt_type": ("debt type", "debt_type", "borç tipi", "borç tipi (cari/çek/senet)"),
    "sales_rep_name": ("sales rep", "sales_rep", "satış temsilcisi"),
    "transaction_date": (
        "transaction date",
        "transaction_date",
        "işlem tarihi",
        "işlem tarihi (opsiyonel)",
    ),
}

REQUIRED_FIELDS = ("customer_name", "due_date", "amount")


def read_import_file(csv_file_path: str) -> list[ImportRow]:
    """Read import rows from a CSV file with a header row.

    Blank lines and rows with neither a customer name nor an amount are
    dropped.

    Args:
        csv_file_path: Path to CSV file

    Returns:
        Import rows in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If required columns are missing
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Import file not found: {csv_file_path}")

    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValidationError("Import file has no columns")

        columns = _map_columns(reader.fieldnames)
        missing = [name for name in REQUIRED_FIELDS if name not in columns]
        if missing:
            raise ValidationError(f"Import file missing required columns: {', '.join(missing)}")

        rows = []
        for record in reader:
            values = {
                field_name: (record.get(column) or "").strip() or None
                for field_name, column in columns.items()
            }
            if not values.get("customer_name") and not values.get("amount"):
                continue
            rows.append(ImportRow.from_mapping(values))
        return rows


def _map_columns(fieldnames: list[str]) -> dict[str, str]:
    """Map field names to the file's column headers."""
    columns = {}
    for header in fieldnames:
        # "İ".lower() keeps a combining dot
        normalized = (header or "").strip().lower().replace("i\u0307", "i")
        for field_name, aliases in HEADER_ALIASES.items():
            if normalized in aliases and field_name not in columns:
                columns[field_name] = header
    return columns

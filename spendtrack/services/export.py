import csv
from io import StringIO

HEADER = ["Date", "Category", "Description", "Amount"]


def expenses_to_csv(records) -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(HEADER)
    for exp in records:
        writer.writerow([exp.date.isoformat(), exp.category, exp.description or "", f"{exp.amount:.2f}"])
    return output.getvalue()


def export_filename(year, month) -> str:
    return f"expenses-{year:04d}-{month:02d}.csv"

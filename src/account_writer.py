import csv
from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from typing import Dict, TextIO

from models import AccountSnapshot

AMOUNT_PRECISION = Decimal("0.0001")
FRACTION_DIGITS = 4
OUTPUT_HEADER = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places, at any magnitude."""
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the fraction
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + FRACTION_DIGITS)
        return f"{value.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_EVEN):f}"


def write_accounts(accounts: Dict[int, AccountSnapshot], stream: TextIO) -> None:
    """Write one CSV row per account, ordered by client ID."""
    rows = [
        [
            client_id,
            format_decimal(accounts[client_id].available),
            format_decimal(accounts[client_id].held),
            format_decimal(accounts[client_id].total),
            str(accounts[client_id].locked).lower(),
        ]
        for client_id in sorted(accounts.keys())
    ]

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    writer.writerows(rows)

"""
Amortization schedule export (CSV).
"""

import csv
import io
from typing import Dict, List


def schedule_totals(rows: List[Dict]) -> Dict:
    """Sum payments, interest and principal over a schedule."""
    return {
        'months': len(rows),
        'total_payment': round(sum(r['payment'] for r in rows), 2),
        'total_interest': round(sum(r['interest'] for r in rows), 2),
        'total_principal': round(sum(r['principal'] for r in rows), 2),
    }


def schedule_to_csv(rows: List[Dict]) -> str:
    """Export schedule rows as a CSV string with a totals line."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['Month', 'Payment', 'Interest', 'Principal', 'Remaining Balance'])

    for row in rows:
        writer.writerow([
            row['month'],
            f"{row['payment']:.2f}",
            f"{row['interest']:.2f}",
            f"{row['principal']:.2f}",
            f"{row['balance']:.2f}",
        ])

    totals = schedule_totals(rows)
    writer.writerow([
        'TOTAL',
        f"{totals['total_payment']:.2f}",
        f"{totals['total_interest']:.2f}",
        f"{totals['total_principal']:.2f}",
        '',
    ])

    return output.getvalue()

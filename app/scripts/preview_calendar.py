#!/usr/bin/env python3
"""
Command-line script to preview the job calendar.

Usage:
    python app/scripts/preview_calendar.py [--month YYYY-MM] [--propose-start YYYY-MM-DD]
                                           [--days N] [--include-weekends] [--horizon-days N]

Options:
    --month YYYY-MM              Month to show (defaults to the current month)
    --propose-start YYYY-MM-DD   Check a proposed booking and print the next available start
    --days N                     Proposed duration in working days (default 1)
    --include-weekends           Count Saturdays and Sundays as working days
    --horizon-days N             How far ahead to search (default 365)
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app import create_app
from app.scheduling.preview import run_preview_script
import argparse


def main():
    parser = argparse.ArgumentParser(
        description='Preview the job calendar without updating the database'
    )
    parser.add_argument('--month', type=str, help='Month to show (YYYY-MM)')
    parser.add_argument('--propose-start', type=str, help='Proposed start date (YYYY-MM-DD)')
    parser.add_argument('--days', type=int, default=1, help='Proposed duration in working days')
    parser.add_argument(
        '--include-weekends',
        action='store_true',
        help='Count Saturdays and Sundays as working days for the proposal'
    )
    parser.add_argument('--horizon-days', type=int, default=365, help='Search horizon in days')

    args = parser.parse_args()

    app = create_app()

    with app.app_context():
        try:
            run_preview_script(
                month_str=args.month,
                propose_start_str=args.propose_start,
                days=args.days,
                include_weekends=args.include_weekends,
                horizon_days=args.horizon_days,
            )
            sys.exit(0)
        except Exception as e:
            print(f"\nFatal error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()

import csv
import sys
import logging
from typing import List, Optional

from account_writer import write_accounts
from payments_engine import PaymentsEngine
from transaction_reader import TransactionParseError


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python main.py <transactions.csv> > accounts.csv", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, csv.Error, UnicodeDecodeError, TransactionParseError) as e:
        print(f"Error processing transactions: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts.values(), sys.stdout)
    return 0


def run() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(main())


if __name__ == "__main__":
    run()

import sys
import logging
from typing import List, Optional

from account_writer import write_accounts
from payments_engine import PaymentsEngine
from transaction_reader import RecordParseError

logger = logging.getLogger(__name__)

USAGE = "Usage: payments-ledger <input.csv>"


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except RecordParseError as e:
        logger.error(f"Malformed input in {filepath}, {e}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())

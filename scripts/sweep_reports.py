from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

from riskscan.adapters.sqlite_storage import SQLiteStorage
from riskscan.services.retention_service import RetentionService
from riskscan.settings import LOG_LEVEL, RETENTION_MINUTES, SQLITE_PATH, SWEEP_BATCH_SIZE


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Flag reports whose images are past the bucket retention window."
    )
    parser.add_argument("--sqlite", default=SQLITE_PATH, help="SQLite DB path.")
    parser.add_argument("--retention-minutes", type=int, default=RETENTION_MINUTES)
    parser.add_argument("--batch-size", type=int, default=SWEEP_BATCH_SIZE)
    args = parser.parse_args()

    logging.basicConfig(stream=sys.stdout, level=LOG_LEVEL.upper(), format="%(message)s")
    service = RetentionService(
        SQLiteStorage(args.sqlite),
        retention_minutes=args.retention_minutes,
        batch_size=args.batch_size,
    )
    result = service.sweep()
    print(json.dumps({"swept": result.examined, "flagged": result.flagged}))


if __name__ == "__main__":
    main()

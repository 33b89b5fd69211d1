from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)


def main() -> None:
    db_path = os.getenv("SQLITE_PATH", "riskscan.db")
    conn = sqlite3.connect(db_path)
    try:
        print("DB:", db_path)
        print("Tables:")
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        ):
            print("-", row[0])

        print("\nJobs by status:")
        for row in conn.execute(
            "SELECT status, COUNT(*) FROM jobs GROUP BY status ORDER BY status"
        ):
            print(row)

        print("\nRecent jobs:")
        for row in conn.execute(
            """
            SELECT job_id, plan, status, report_id, error_json, warn
            FROM jobs ORDER BY updated_at DESC LIMIT 10
            """
        ):
            print(row)

        print("\nReports awaiting purge:")
        row = conn.execute("SELECT COUNT(*) FROM reports WHERE images_deleted = 0").fetchone()
        print("count:", row[0] if row else 0)
    finally:
        conn.close()


if __name__ == "__main__":
    main()

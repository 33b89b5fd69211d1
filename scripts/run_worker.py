from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

import uvicorn

from riskscan.settings import LOG_LEVEL, WORKER_HOST, WORKER_PORT


def main() -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(
        "riskscan.worker_api:create_app",
        factory=True,
        host=WORKER_HOST,
        port=WORKER_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

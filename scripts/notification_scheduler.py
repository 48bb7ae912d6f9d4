# file: scripts/notification_scheduler.py

import argparse
import asyncio
import logging

from quorumflow.config import LOG_LEVEL
from quorumflow.services.notification_scheduler import main_scheduler_loop, run_once

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger("notification_scheduler")


def main():
    parser = argparse.ArgumentParser(description="QuorumFlow daily notification job")
    parser.add_argument("--once", action="store_true", help="run the job a single time and exit")
    args = parser.parse_args()

    if args.once:
        count = asyncio.run(run_once())
        logger.info("Notification job finished with %d notifications.", count)
    else:
        logger.info("Starting notification scheduler...")
        asyncio.run(main_scheduler_loop())


if __name__ == "__main__":
    main()

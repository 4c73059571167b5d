#!/usr/bin/env python3
"""
Start-of-day reset for a clinic's doctors.

For every doctor of the clinic this zeroes completed_today, recounts
total_patients_today from the bookings already on the date, sets the status
back to not_arrived and re-seeds the displayed tokens. Token sequences are
date-scoped and are not touched.

Usage:
    python scripts/reset_daily_counters.py --clinic-id clinic_1
    python scripts/reset_daily_counters.py --clinic-id clinic_1 --date 2024-06-01
"""

import argparse
import asyncio
import logging
import sys

# Add the src directory to the Python path
sys.path.insert(0, "src")

from clinicqueue.adapters.db.mongo.client import init_database
from clinicqueue.adapters.db.mongo.repositories.doctor_repository import MongoDoctorRepository
from clinicqueue.adapters.db.mongo.repositories.visit_repository import MongoVisitRepository
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.reset_daily_counters import ResetDailyCountersUseCase
from clinicqueue.core.config import get_settings
from clinicqueue.core.exceptions import ConfigurationError
from clinicqueue.core.structured_logger import configure_logging
from clinicqueue.core.utils.datetime_utils import clinic_today, parse_service_date

logger = logging.getLogger("clinicqueue.scripts.reset_daily_counters")


async def run(clinic_id: str, on_date_str: str = None) -> int:
    settings = get_settings()
    configure_logging(settings.logging)

    if settings.database.backend != "mongo":
        raise ConfigurationError(
            "The reset job needs shared storage; set MONGO_BACKEND=mongo and MONGO_URI."
        )

    on_date = parse_service_date(on_date_str) if on_date_str else clinic_today(settings.queue.timezone)
    client = await init_database(settings.database)
    try:
        use_case = ResetDailyCountersUseCase(
            MongoDoctorRepository(), MongoVisitRepository(), ScopeLockRegistry()
        )
        doctors = await use_case.execute(clinic_id, on_date)
    finally:
        client.close()

    for doctor in doctors:
        logger.info(
            f"{doctor.doctor_id}: status={doctor.status.value} tokens={doctor.current_token}/"
            f"{doctor.next_token} booked={doctor.total_patients_today}"
        )
    return len(doctors)


def main() -> None:
    parser = argparse.ArgumentParser(description="Reset a clinic's daily doctor counters")
    parser.add_argument("--clinic-id", required=True, help="Clinic whose doctors are reset")
    parser.add_argument("--date", default=None, help="Service date YYYY-MM-DD (default: today)")
    args = parser.parse_args()

    try:
        count = asyncio.run(run(args.clinic_id, args.date))
    except (ConfigurationError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"Reset {count} doctor(s) in clinic {args.clinic_id}")


if __name__ == "__main__":
    main()

"""
Unified Ingestion Orchestrator

Single entry point for reference data ingestion.
Coordinates the calendar import (GTFS directory) and the stop import
(NaPTAN archive) into one shared model, optionally persisting it.

Usage:
    python -m transit_refdata.ingest --naptan NaPTANcsv.zip --gtfs ./gtfs
    python -m transit_refdata.ingest --naptan NaPTANcsv.zip --persist --reset-db
"""

import argparse
import logging
import sys
from datetime import datetime

from transit_refdata.config.config_main import ingestion_config, LOG_FORMAT
from transit_refdata.data.db_broker import ConnectionBroker
from transit_refdata.data.model import Collections

from .calendars import manage_calendars
from .naptan import read_naptan
from .projection import PlanarProjector
from .schema import initialize_database, persist_collections

logger = logging.getLogger(__name__)


def run_full_ingestion(
    naptan_path: str = None,
    gtfs_path: str = None,
    collections: Collections = None,
    projector: PlanarProjector = None,
    persist: bool = False,
    reset_db: bool = False,
    engine=None,
) -> Collections:
    """
    Execute complete ingestion pipeline.

    Args:
        naptan_path: NaPTAN CSV archive (default from NAPTAN_PATH)
        gtfs_path: GTFS directory holding calendar files (default from GTFS_PATH)
        collections: Destination model (a new one when omitted)
        projector: Planar to geographic converter for stop areas
        persist: Write the finished model to the database
        reset_db: Drop and recreate all tables before persisting
        engine: SQLAlchemy engine (default from DATABASE_URL)

    Returns:
        The populated model
    """
    print(f"\n{'#'*70}")
    print(f"# TRANSIT REFERENCE DATA INGESTION")
    print(f"# Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"{'#'*70}\n")

    overall_start = datetime.now()

    if naptan_path is None:
        naptan_path = ingestion_config.naptan_path or None
    if gtfs_path is None:
        gtfs_path = ingestion_config.gtfs_path or None
    if collections is None:
        collections = Collections()

    try:
        # ================================================================
        # CALENDARS
        # ================================================================

        if gtfs_path:
            print(f"\n{'='*70}")
            print(f"CALENDARS: {gtfs_path}")
            print(f"{'='*70}\n")
            manage_calendars(collections, gtfs_path)
        else:
            print("\n⚠️  No GTFS directory configured, skipping calendars\n")

        # ================================================================
        # STOPS
        # ================================================================

        if naptan_path:
            print(f"\n{'='*70}")
            print(f"STOPS: {naptan_path}")
            print(f"{'='*70}\n")
            read_naptan(naptan_path, collections, projector)
        else:
            print("\n⚠️  No NaPTAN archive configured, skipping stops\n")

        summary = collections.summary()
        print(f"\n{'='*70}")
        print("MODEL COMPLETE")
        print(f"{'='*70}")
        print(f"  ✓ {summary['stop_areas']} stop areas")
        print(f"  ✓ {summary['stop_points']} stop points")
        print(f"  ✓ {summary['calendars']} calendars")
        print(f"  ✓ {summary['calendar_dates']} calendar exceptions")
        print(f"{'='*70}\n")

        # ================================================================
        # PERSISTENCE
        # ================================================================

        if persist:
            if engine is None:
                engine = ConnectionBroker.get_engine()
            initialize_database(engine, drop_existing=reset_db)
            with ConnectionBroker.get_session(engine) as session:
                persist_collections(session, collections)

        overall_duration = (datetime.now() - overall_start).total_seconds()

        print(f"\n{'#'*70}")
        print(f"# INGESTION COMPLETE")
        print(f"# Total duration: {overall_duration:.2f} seconds")
        print(f"# Finished at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"{'#'*70}\n")

        return collections

    except Exception as e:
        print(f"\n{'!'*70}")
        print(f"! INGESTION FAILED")
        print(f"! Error: {e}")
        print(f"{'!'*70}\n")
        raise


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Transit reference data ingestion (NaPTAN stops, GTFS calendars)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Stops and calendars, in memory only
  python -m transit_refdata.ingest --naptan NaPTANcsv.zip --gtfs ./gtfs

  # Write the model to the configured database, recreating tables
  python -m transit_refdata.ingest --naptan NaPTANcsv.zip --persist --reset-db
        """
    )

    parser.add_argument(
        '--naptan',
        type=str,
        default=None,
        help='NaPTAN CSV zip archive (default: NAPTAN_PATH env var)'
    )

    parser.add_argument(
        '--gtfs',
        type=str,
        default=None,
        help='GTFS directory with calendar.txt (default: GTFS_PATH env var)'
    )

    parser.add_argument(
        '--persist',
        action='store_true',
        help='Write the model to DATABASE_URL'
    )

    parser.add_argument(
        '--reset-db',
        action='store_true',
        help='Drop and recreate all tables before persisting (DESTRUCTIVE)'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=ingestion_config.log_level, format=LOG_FORMAT)

    if args.no_progress:
        ingestion_config.show_progress = False

    if args.reset_db and not args.persist:
        parser.error('--reset-db requires --persist')

    # Confirm destructive operation
    if args.reset_db:
        print("\n⚠️  WARNING: --reset-db will DELETE ALL EXISTING DATA!")
        response = input("Are you sure you want to continue? (yes/no): ")
        if response.lower() != 'yes':
            print("Aborted.")
            sys.exit(0)

    run_full_ingestion(
        naptan_path=args.naptan,
        gtfs_path=args.gtfs,
        persist=args.persist,
        reset_db=args.reset_db,
    )


if __name__ == "__main__":
    main()

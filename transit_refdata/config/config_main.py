from dotenv import load_dotenv
import os

load_dotenv()

class DBConfig():
    url: str = os.getenv("DATABASE_URL", "sqlite:///transit_refdata.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"

db_config = DBConfig()

class IngestionConfig():
    """Configuration for reference data ingestion."""
    naptan_path: str = os.getenv("NAPTAN_PATH", "")
    gtfs_path: str = os.getenv("GTFS_PATH", "")
    show_progress: bool = os.getenv("SHOW_PROGRESS", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

ingestion_config = IngestionConfig()

class ProjectionConfig():
    # British National Grid to WGS84
    source_crs: str = os.getenv("SOURCE_CRS", "EPSG:27700")
    target_crs: str = os.getenv("TARGET_CRS", "EPSG:4326")

projection_config = ProjectionConfig()

# Entries inside the NaPTAN CSV archive
STOP_AREAS_FILENAME = "StopAreas.csv"
STOPS_IN_AREA_FILENAME = "StopsInArea.csv"
STOPS_FILENAME = "Stops.csv"

# GTFS calendar files
CALENDAR_FILENAME = "calendar.txt"
CALENDAR_DATES_FILENAME = "calendar_dates.txt"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

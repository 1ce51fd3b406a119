from pathlib import Path

APP_PATH: Path = (Path(__file__).resolve().parent / '..').resolve()
ROOT_PATH: Path = APP_PATH.parent
GEO_PATH: Path = (ROOT_PATH / 'geo').resolve()
GEO_DATABASE_PATH: Path = GEO_PATH / 'GeoLite2-City.mmdb'
LOGS_PATH: Path = (ROOT_PATH / 'logs').resolve()
TESTS_PATH: Path = (ROOT_PATH / 'tests').resolve()

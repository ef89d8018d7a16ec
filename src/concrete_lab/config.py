import os
from pathlib import Path

# Package directory (src/concrete_lab/)
PACKAGE_DIR = Path(__file__).parent
# Root directory of the project
ROOT_DIR = PACKAGE_DIR.parent.parent

# Data paths
DATA_DIR = Path(os.environ.get("CONCRETE_LAB_DATA_DIR", ROOT_DIR / "data"))
DATA_FILE = DATA_DIR / "concrete_tests.json"
BACKUP_DIR = DATA_DIR / "backups"
MAX_BACKUPS = 50

# Application Settings
APP_NAME = "Laboratoire Béton - Suivi des éprouvettes"
VERSION = "1.0.0"

# Logging
LOG_DIR = Path(os.environ.get("CONCRETE_LAB_LOG_DIR", ROOT_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_FILE = LOG_DIR / "concrete_lab.log"

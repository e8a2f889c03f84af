from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumStorageBackend(str, Enum):
    MEMORY = "memory"
    MONGO = "mongo"


# Durable key-value storage keys
CACHE_STORAGE_KEY = "dashboard_analytics_cache"
CACHE_BACKUP_KEY = "dashboard_analytics_backup"
ALERT_THRESHOLDS_KEY = "analytics_alert_thresholds"
ALERT_HISTORY_KEY = "analytics_alerts_history"

# Wildcard station selector meaning "no station filter"
ALL_STATIONS = "ALL"

"""Constants shared across the mediastore system."""

# Seconds allowed for any single statement
QUERY_TIMEOUT = 60

# Seconds allowed to establish a connection
CONNECT_TIMEOUT = 30

DEFAULT_DATABASE_NAME = "mediastore"

EMBEDDED_SUFFIX = " (Embedded)"

# Formats applied to UTC timestamps rendered as SQL literals
DATE_FORMAT_DERBY = "%Y%m%d%H%M%S"
DATE_FORMAT_DMY = "%d-%m-%Y %H:%M:%S"
DATE_FORMAT_ISO = "%Y-%m-%d %H:%M:%S"

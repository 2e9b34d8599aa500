# Air Quality Service Configuration
# Copy this file to .env and adjust values as needed

# InfluxDB Configuration
INFLUXDB_URL=http://localhost:8086
INFLUXDB_TOKEN=your-influxdb-token-here
INFLUXDB_BUCKET=airquality-bucket
INFLUXDB_ORG=airquality-org
INFLUXDB_MEASUREMENT=air_quality
INFLUXDB_LOOKBACK=-10m

# Device to follow (leave empty to follow the most recent reporter)
DEVICE_NAME=

# Monitor Configuration
HISTORY_SIZE=10
POLL_INTERVAL_SECONDS=5
MONITOR_AUTOSTART=true
RECENT_ALERTS_LIMIT=50

# Alert Thresholds
CO2_WARNING_THRESHOLD=1000
CO2_DANGER_THRESHOLD=2000
TVOC_WARNING_THRESHOLD=1000
TVOC_DANGER_THRESHOLD=2000

# Redis Configuration
REDIS_ENABLED=false
REDIS_HOST=localhost
REDIS_PORT=6379
REDIS_PASSWORD=
REDIS_DB=0
CACHE_DEFAULT_TTL=300

# Server Configuration
HOST=0.0.0.0
PORT=8000
RELOAD=true

# GraphQL Configuration
GRAPHQL_PLAYGROUND_ENABLED=true

# Logging Configuration
LOG_LEVEL=info

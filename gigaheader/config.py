PORT = 8080
HOST = "0.0.0.0"

LOG_LEVEL = "info"

# Seconds to wait for the server thread to come up, and for open
# connections to finish once shutdown is requested.
STARTUP_TIMEOUT = 5.0
SHUTDOWN_TIMEOUT = 5

TEMP_DIR = "/tmp/c_converter"

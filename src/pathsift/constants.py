"""
Project-wide constants for the pathsift extraction pipeline
"""

# ==============================================================================
# Path Validation
# ==============================================================================

# Windows MAX_PATH; raw character count, not unicode-aware
MAX_PATH_LENGTH = 260

WINDOWS_RESERVED_NAMES = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)},
)

# Rooted prefixes rejected by the security classifier (compared lower-cased,
# forward-slash form)
SENSITIVE_PATH_PREFIXES = (
    "/etc/",
    "/sys/",
    "/proc/",
    "/dev/",
    "/boot/",
    "/root/",
    "/private/etc/",
    "c:/windows/",
)

# ==============================================================================
# Safety Gate
# ==============================================================================

PATH_COUNT_WARNING_THRESHOLD = 1000
COMPLEX_PATTERN_WARNING_THRESHOLD = 100
DEFAULT_CANCEL_TIMEOUT_MS = 30_000

# ==============================================================================
# Configuration Defaults and Floors
# ==============================================================================

_MB = 1024 * 1024

DEFAULT_FILE_SIZE_WARN_BYTES = 1_000_000
DEFAULT_LARGE_OUTPUT_LINES = 50_000
DEFAULT_MANY_DOCUMENTS = 8
DEFAULT_MAX_DURATION_MS = 5000
DEFAULT_MAX_MEMORY_BYTES = 100 * _MB
DEFAULT_MAX_CPU_USAGE = 1_000_000
DEFAULT_MIN_THROUGHPUT = 1000
DEFAULT_MAX_CACHE_SIZE = 1000

# Effective value is max(configured, floor)
CONFIG_FLOORS = {
    "safety_file_size_warn_bytes": 1000,
    "safety_large_output_lines_threshold": 100,
    "safety_many_documents_threshold": 1,
    "performance_max_duration": 1000,
    "performance_max_memory_usage": _MB,
    "performance_max_cpu_usage": 100_000,
    "performance_min_throughput": 100,
    "performance_max_cache_size": 100,
}

# ==============================================================================
# Error Recovery
# ==============================================================================

FILE_SYSTEM_MAX_RETRIES = 3
FILE_SYSTEM_RETRY_DELAY_MS = 1000
OPERATIONAL_MAX_RETRIES = 2
OPERATIONAL_RETRY_DELAY_MS = 2000

LOG_PREFIX = "[pathsift]"

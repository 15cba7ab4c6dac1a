"""tempograph constants.

All magic numbers live here. No exceptions.
"""

# Time
OPEN_ENDED = 2**31 - 1  # "valid until closed"; also the unreachable arrival
INF_TOKEN = "inf"
SOURCE_ARRIVAL = 0

# Input layout
TIME_DIR_PREFIX = "time="
SHARD_FILENAME = "part-00000.txt"
SHARD_READ_WORKERS = 1

# Output
OUTPUT_DIR = "output"
OUTPUT_FILE_TEMPLATE = "vertices-{step}.csv"
WRITE_EVERY = 10

# Compute
COMPUTE_MAX_SETTLED = None  # None = unbounded

# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Constants for the serial shell."""

# Command response status codes
STATUS_OK = 0
STATUS_ERROR = 1  # Operational or transport failure, unknown command
STATUS_PRECONDITION = 2  # Connection is in the wrong state

# Hook names published by the lifecycle commands
HOOK_SET = "set"
HOOK_OPEN = "open"
HOOK_CLOSE = "close"
HOOK_WRITE = "write"
HOOK_READ = "read"
HOOK_ERROR = "error"

# Transport event names
EVENT_DATA = "data"
EVENT_ERROR = "error"
TRANSPORT_EVENTS = (EVENT_DATA, EVENT_ERROR)

# Serial defaults
DEFAULT_BAUDRATE = 9600
READ_TIMEOUT = 0.1  # seconds, bounds how long the reader thread blocks
READ_CHUNK_SIZE = 1024

PROMPT = "> "

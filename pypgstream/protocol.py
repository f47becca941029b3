"""Constants for the libpq protocol used by the streaming driver.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

# pylint: disable=bad-whitespace

# Result status codes (ExecStatusType)
EMPTY_QUERY                       = 0
COMMAND_OK                        = 1
TUPLES_OK                         = 2
COPY_OUT                          = 3
COPY_IN                           = 4
BAD_RESPONSE                      = 5
NONFATAL_ERROR                    = 6
FATAL_ERROR                       = 7
COPY_BOTH                         = 8
SINGLE_TUPLE                      = 9
PIPELINE_SYNC                     = 10
PIPELINE_ABORTED                  = 11
TUPLES_CHUNK                      = 12

# Transaction status (PGTransactionStatusType)
TRANS_IDLE                        = 0
TRANS_ACTIVE                      = 1
TRANS_INTRANS                     = 2
TRANS_INERROR                     = 3
TRANS_UNKNOWN                     = 4

# Parameter and result formats
FORMAT_TEXT                       = 0
FORMAT_BINARY                     = 1

# Backend type identifiers (pg_type.oid)
BOOLOID                           = 16
BYTEAOID                          = 17
CHAROID                           = 18
NAMEOID                           = 19
INT8OID                           = 20
INT2OID                           = 21
INT4OID                           = 23
TEXTOID                           = 25
OIDOID                            = 26
FLOAT4OID                         = 700
FLOAT8OID                         = 701
UNKNOWNOID                        = 705
MONEYOID                          = 790
BPCHAROID                         = 1042
VARCHAROID                        = 1043
DATEOID                           = 1082
TIMEOID                           = 1083
TIMESTAMPOID                      = 1114
TIMESTAMPTZOID                    = 1184
INTERVALOID                       = 1186
TIMETZOID                         = 1266
NUMERICOID                        = 1700
VOIDOID                           = 2278
UUIDOID                           = 2950

# The unnamed prepared statement
ANONYMOUS                         = b''

# Seconds between cancellation checks while waiting for data
POLL_INTERVAL                     = 1.0

# Result objects allowed after a terminal status before the NULL sentinel
MAX_TRAILING_RESULTS              = 16

# Initial column capacity for unbounded fetches
DEFAULT_CHUNK_SIZE                = 100

stringifyStatus = {
    EMPTY_QUERY: "EMPTY_QUERY",
    COMMAND_OK: "COMMAND_OK",
    TUPLES_OK: "TUPLES_OK",
    COPY_OUT: "COPY_OUT",
    COPY_IN: "COPY_IN",
    BAD_RESPONSE: "BAD_RESPONSE",
    NONFATAL_ERROR: "NONFATAL_ERROR",
    FATAL_ERROR: "FATAL_ERROR",
    COPY_BOTH: "COPY_BOTH",
    SINGLE_TUPLE: "SINGLE_TUPLE",
    PIPELINE_SYNC: "PIPELINE_SYNC",
    PIPELINE_ABORTED: "PIPELINE_ABORTED",
    TUPLES_CHUNK: "TUPLES_CHUNK",
}


def lookup_status(status):
    # type: (int) -> str
    """Return a printable name for a result status."""
    return stringifyStatus.get(status, "UNKNOWN(%d)" % (status))

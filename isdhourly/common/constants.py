"""Application constants."""

USER_AGENT = "isdhourly/0.3 (+research; contact: configured-email)"
STAGES = (
    "catalog",
    "fetch",
    "extract",
    "decode",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
EARLIEST_ISD_YEAR = 1892
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "station",
    "source",
    "event",
    "status",
    "attempt",
    "line",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)

# Sentinels written at the output boundary in place of missing values.
MISSING_WIND_DIR = 999
MISSING_VALUE = 999.9
NO_PRECIP_CODE = 9999

OBSERVATION_HEADERS = [
    "USAFID",
    "WBAN",
    "YR",
    "M",
    "D",
    "HR",
    "MIN",
    "LAT",
    "LONG",
    "ELEV",
    "WIND.DIR",
    "WIND.SPD",
    "CEIL.HGT",
    "TEMP",
    "DEW.POINT",
    "ATM.PRES",
    "PRECIP.RATE",
    "RH",
    "PRECIP.CODE",
]
STATION_HEADERS = ["USAFID", "WBAN", "YR", "LAT", "LONG", "ELEV"]
FILE_REPORT_HEADERS = ["USAFID", "WBAN", "NAME", "YEAR", "FILE", "STATUS"]

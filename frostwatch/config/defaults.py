"""Default upstream endpoints, NOAA data types and token variable names."""

CDO_BASE_URL = "https://www.ncdc.noaa.gov/cdo-web/api/v2"
NWS_BASE_URL = "https://api.weather.gov"
DEFAULT_USER_AGENT = "frostwatch/0.1.0 (contact: support@frostwatch.example)"

NORMALS_DATASET_ID = "NORMAL_ANN"
# Normals are not dated; CDO still requires a range, so a single fixed day anchors it.
NORMALS_ANCHOR_DATE = "2010-01-01"

SPRING_FROST_DATATYPE = "ANN-TMIN-PRBLST-T28FP30"
FALL_FROST_DATATYPE = "ANN-TMIN-PRBFST-T28FP30"
WINTER_TMIN_DATATYPE = "DJF-TMIN-NORMAL"

DEFAULT_DATATYPES: list[str] = [
    SPRING_FROST_DATATYPE,
    FALL_FROST_DATATYPE,
    WINTER_TMIN_DATATYPE,
]

DEFAULT_TOKEN_ENV_VARS: list[str] = [
    "NOAA_TOKEN",
    "NOAA_API_TOKEN",
    "NOAA_CDO_TOKEN",
]

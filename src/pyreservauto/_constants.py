"""Internal constants shared across the library."""

BASE_URL = "https://www.reservauto.net"
AVAILABLE_VEHICLES_ENDPOINT = "/WCF/LSI/LSIBookingServiceV3.svc/GetAvailableVehicles"
USER_AGENT = "pyreservauto"

#: ``LanguageID`` query parameter sent with every feed request.
LANGUAGE_ID = 2

#: Mean Earth radius used by the haversine formula, in meters.
EARTH_RADIUS_M = 6_371_000

# ------------------------------------------------------------------
# Search radius ladder (meters, widest first)
# ------------------------------------------------------------------

DEFAULT_RADIUS_LADDER: tuple[float, ...] = (
    10000,
    8000,
    6000,
    5000,
    4000,
    3000,
    2000,
    1500,
    1000,
    900,
    800,
    700,
    600,
    500,
    400,
    300,
    200,
)

# ------------------------------------------------------------------
# Location lookup
# ------------------------------------------------------------------

GEOCLUE_WHERE_AM_I = "/usr/libexec/geoclue-2.0/demos/where-am-i"
GEOCLUE_TIMEOUT_S = 6
PUBLIC_IP_URL = "https://api.ipify.org"
IP_GEOLOCATION_URL = "http://ip-api.com/json/{ip}"

# ------------------------------------------------------------------
# Desktop notification
# ------------------------------------------------------------------

NOTIFY_SEND = "notify-send"
NOTIFY_URGENCY = "critical"
NOTIFY_EXPIRE_MS = 6000

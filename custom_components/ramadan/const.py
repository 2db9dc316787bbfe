"""Constants for the Ramadan integration."""

from types import MappingProxyType

DOMAIN = "ramadan"

# Config keys
CONF_CITY = "city"
CONF_COUNTRY = "country"
CONF_METHOD = "method"
CONF_HIJRI_OFFSET = "hijri_date_offset"
CONF_TIME_FORMAT = "time_format"

# Time display formats
TIME_FORMAT_SYSTEM = "system"
TIME_FORMAT_12HR = "12hr"
TIME_FORMAT_24HR = "24hr"

TIME_FORMATS = {
    TIME_FORMAT_SYSTEM: "System default",
    TIME_FORMAT_12HR: "12-hour (5:30 PM)",
    TIME_FORMAT_24HR: "24-hour (17:30)",
}

# Fasting states
STATUS_BEFORE_SUHOOR = "before-suhoor"
STATUS_FASTING = "fasting"
STATUS_AFTER_IFTAR = "after-iftar"

FASTING_STATES = [STATUS_BEFORE_SUHOOR, STATUS_FASTING, STATUS_AFTER_IFTAR]

RAMADAN_MONTH = 9

# Rough average length of a Hijri month, used for the days-until-Ramadan estimate
AVERAGE_HIJRI_MONTH_DAYS = 29.5

HIJRI_MONTHS = MappingProxyType(
    {
        1: "Muḥarram",
        2: "Ṣafar",
        3: "Rabīʿ al-Awwal",
        4: "Rabīʿ al-Thānī",
        5: "Jumādá al-Ūlá",
        6: "Jumādá al-Ākhirah",
        7: "Rajab",
        8: "Shaʿbān",
        9: "Ramadan",
        10: "Shawwāl",
        11: "Dhū al-Qaʿdah",
        12: "Dhū al-Ḥijjah",
    }
)

ICONS = {
    "Suhoor": "mdi:weather-night",
    "Iftar": "mdi:weather-sunset-down",
    "Countdown": "mdi:timer-sand",
    "Hijri": "mdi:calendar-star",
    "Ramadan": "mdi:moon-waning-crescent",
    "Calendar": "mdi:calendar-month",
    "Title": "mdi:silverware-fork-knife",
}

# Fasting progress icons, from not started to complete
PROGRESS_ICONS = [
    "mdi:circle-outline",
    "mdi:circle-slice-2",
    "mdi:circle-slice-4",
    "mdi:circle-slice-6",
    "mdi:circle-slice-8",
]

ALADHAN_BASE = "https://api.aladhan.com/v1"

# AlAdhan calculation methods
CALC_METHODS = {
    1: "University of Islamic Sciences, Karachi",
    2: "Islamic Society of North America",
    3: "Muslim World League",
    4: "Umm Al-Qura University, Makkah",
    5: "Egyptian General Authority of Survey",
    7: "Institute of Geophysics, University of Tehran",
    8: "Gulf Region",
    9: "Kuwait",
    10: "Qatar",
    11: "Majlis Ugama Islam Singapura",
    13: "Diyanet Isleri Baskanligi, Turkey",
    14: "Spiritual Administration of Muslims of Russia",
    15: "Moonsighting Committee Worldwide",
}

# Defaults
DEFAULT_CITY = "Doha"
DEFAULT_COUNTRY = "Qatar"
DEFAULT_METHOD = 2  # ISNA
DEFAULT_HIJRI_OFFSET = 0
DEFAULT_TIME_FORMAT = TIME_FORMAT_SYSTEM

MIN_HIJRI_OFFSET = -3
MAX_HIJRI_OFFSET = 3

SERVICE_REFRESH = "refresh"

"""WMO weather code → (description, icon) lookup, split by day/night."""

UNKNOWN_DESCRIPTION = "Unknown"

# code: (description, day icon, night icon)
WMO_CODES: dict[int, tuple[str, str, str]] = {
    0: ("Clear sky", "clear-day", "clear-night"),
    1: ("Mainly clear", "mostly-clear-day", "mostly-clear-night"),
    2: ("Partly cloudy", "partly-cloudy-day", "partly-cloudy-night"),
    3: ("Overcast", "overcast", "overcast"),
    45: ("Fog", "fog", "fog"),
    48: ("Depositing rime fog", "fog", "fog"),
    51: ("Light drizzle", "drizzle", "drizzle"),
    53: ("Drizzle", "drizzle", "drizzle"),
    55: ("Dense drizzle", "drizzle", "drizzle"),
    56: ("Light freezing drizzle", "sleet", "sleet"),
    57: ("Freezing drizzle", "sleet", "sleet"),
    61: ("Light rain", "rain-day", "rain-night"),
    63: ("Rain", "rain", "rain"),
    65: ("Heavy rain", "heavy-rain", "heavy-rain"),
    66: ("Light freezing rain", "sleet", "sleet"),
    67: ("Freezing rain", "sleet", "sleet"),
    71: ("Light snow", "snow-day", "snow-night"),
    73: ("Snow", "snow", "snow"),
    75: ("Heavy snow", "heavy-snow", "heavy-snow"),
    77: ("Snow grains", "snow", "snow"),
    80: ("Light showers", "showers-day", "showers-night"),
    81: ("Showers", "showers", "showers"),
    82: ("Violent showers", "heavy-rain", "heavy-rain"),
    85: ("Light snow showers", "snow-day", "snow-night"),
    86: ("Snow showers", "heavy-snow", "heavy-snow"),
    95: ("Thunderstorm", "thunderstorm", "thunderstorm"),
    96: ("Thunderstorm with hail", "thunderstorm-hail", "thunderstorm-hail"),
    99: ("Thunderstorm with heavy hail", "thunderstorm-hail", "thunderstorm-hail"),
}


def describe(code, is_day=True) -> tuple[str, str]:
    """Return (description, icon reference). Unmapped codes give (UNKNOWN_DESCRIPTION, "")."""
    try:
        entry = WMO_CODES.get(int(code))
    except (TypeError, ValueError):
        entry = None
    if entry is None:
        return UNKNOWN_DESCRIPTION, ""
    desc, day_icon, night_icon = entry
    icon = day_icon if is_day or is_day is None else night_icon
    return desc, f"weather/{icon}.png"

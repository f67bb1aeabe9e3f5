# utils/weather_api.py
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from datetime import date, timedelta
import logging

import requests

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"

# Open-Meteo only forecasts this far ahead
FORECAST_WINDOW_DAYS = 16

# Open-Meteo weather codes → short text + emoji
_WEATHER_CODE = {
    0:  ("Céu limpo", "☀️"),
    1:  ("Predominantemente limpo", "🌤️"),
    2:  ("Parcialmente nublado", "⛅"),
    3:  ("Nublado", "☁️"),
    45: ("Neblina", "🌫️"),
    48: ("Neblina com geada", "🌫️"),
    51: ("Garoa fraca", "🌦️"),
    53: ("Garoa", "🌦️"),
    55: ("Garoa intensa", "🌦️"),
    61: ("Chuva fraca", "🌧️"),
    63: ("Chuva", "🌧️"),
    65: ("Chuva forte", "🌧️"),
    80: ("Pancadas de chuva", "🌧️"),
    81: ("Pancadas fortes", "🌧️"),
    82: ("Temporal", "🌧️"),
    95: ("Trovoadas", "⛈️"),
    96: ("Trovoadas com granizo", "⛈️"),
    99: ("Trovoadas com granizo forte", "⛈️"),
}


def _code_text_emoji(code: Optional[int]) -> Tuple[str, str]:
    if code is None:
        return ("", "")
    return _WEATHER_CODE.get(int(code), ("", ""))


def _http_get(url: str, params: Dict[str, Any]) -> Dict[str, Any]:
    try:
        r = requests.get(url, params=params, timeout=15)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("GET %s failed: %s", url, e)
        return {}


def _round1(x: Any) -> Optional[float]:
    try:
        return None if x is None else round(float(x), 1)
    except (TypeError, ValueError):
        return None


def city_from_location(location: str) -> str:
    """
    The event address is free text such as "Rua das Flores, 123 - Apt 42, São Paulo";
    the city is taken to be its last comma-separated part.
    """
    parts = [p.strip() for p in (location or "").split(",") if p.strip()]
    if not parts:
        return ""
    city = parts[-1]
    # "São Paulo - SP" → "São Paulo"
    return city.split(" - ")[0].strip()


def geocode_city(city: str, language: str = "pt") -> Optional[Tuple[float, float]]:
    if not city:
        return None
    data = _http_get(OPEN_METEO_GEOCODE_URL, {"name": city, "count": 1, "language": language, "format": "json"})
    results = data.get("results") or []
    if not results:
        return None
    try:
        return float(results[0]["latitude"]), float(results[0]["longitude"])
    except (KeyError, TypeError, ValueError):
        return None


def _value_at_hour(day_str: str, hour: int, times: list, values: list) -> Optional[float]:
    """Value at `${day_str}T{HH}:00`, or the nearest hour of the same day."""
    best_idx, best_diff = None, 99
    for i, t in enumerate(times):
        if i >= len(values) or not isinstance(t, str) or not t.startswith(day_str):
            continue
        try:
            diff = abs(int(t[11:13]) - hour)
        except ValueError:
            continue
        if diff < best_diff:
            best_idx, best_diff = i, diff
    return None if best_idx is None else _round1(values[best_idx])


def get_forecast_for_date(
    city: str,
    when: date,
    target_hour_local: int = 18,
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """
    Forecast for `city` on `when`:
      {'date', 'lat', 'lng', 't_min_c', 't_max_c', 't_expected_c',
       'weathercode', 'weather_text', 'weather_emoji', 'source'}
    None when the date is outside the forecast window or any lookup fails.
    """
    today = today or date.today()
    if not city or when < today or when > today + timedelta(days=FORECAST_WINDOW_DAYS):
        return None

    coords = geocode_city(city)
    if not coords:
        return None
    lat, lng = coords
    day_str = when.isoformat()

    data = _http_get(OPEN_METEO_URL, {
        "latitude": lat,
        "longitude": lng,
        "timezone": "auto",
        "start_date": day_str,
        "end_date": day_str,
        "daily": "temperature_2m_max,temperature_2m_min,weathercode",
        "hourly": "temperature_2m",
    })
    if not data:
        return None

    daily = data.get("daily") or {}
    hourly = data.get("hourly") or {}

    tmin = tmax = wcode = None
    if (daily.get("time") or [None])[0] == day_str:
        tmin = _round1((daily.get("temperature_2m_min") or [None])[0])
        tmax = _round1((daily.get("temperature_2m_max") or [None])[0])
        code = (daily.get("weathercode") or [None])[0]
        wcode = int(code) if code is not None else None

    hour = max(0, min(23, target_hour_local))
    texp = _value_at_hour(day_str, hour, list(hourly.get("time") or []), list(hourly.get("temperature_2m") or []))
    if texp is None and tmin is not None and tmax is not None:
        texp = _round1((tmin + tmax) / 2.0)

    if all(v is None for v in (tmin, tmax, texp, wcode)):
        return None

    wtext, wemoji = _code_text_emoji(wcode)
    return {
        "date": day_str,
        "lat": lat,
        "lng": lng,
        "t_min_c": tmin,
        "t_max_c": tmax,
        "t_expected_c": texp,
        "weathercode": wcode,
        "weather_text": wtext,
        "weather_emoji": wemoji,
        "source": "open-meteo",
    }


def format_weather_line(location: str, when: date, target_hour_local: int = 18, today: Optional[date] = None) -> Optional[str]:
    """One sentence for the event page, or None when there is nothing to show."""
    city = city_from_location(location)
    w = get_forecast_for_date(city, when, target_hour_local=target_hour_local, today=today)
    if not w:
        return None
    parts = []
    head = f"{w['weather_emoji']} {w['weather_text']}".strip()
    if head:
        parts.append(head)
    if w["t_expected_c"] is not None:
        parts.append(f"~{w['t_expected_c']}°C")
    if w["t_min_c"] is not None and w["t_max_c"] is not None:
        parts.append(f"(mín {w['t_min_c']}°C / máx {w['t_max_c']}°C)")
    tail = ", ".join(parts) if parts else "sem detalhes"
    return f"Previsão para {when.strftime('%d/%m/%Y')} em {city}: {tail}."

"""
Hjälpfunktioner för löparruttplaneraren
"""

import re
from typing import Optional

from models import RouteStats

_PACE_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


def parse_pace(pace_str: str) -> Optional[int]:
    """
    Konvertera tempo-sträng till sekunder per km

    Args:
        pace_str: Tempo som "5:30"

    Returns:
        Sekunder per km, eller None om strängen inte är ett tempo
    """
    match = _PACE_RE.match((pace_str or "").strip())
    if not match:
        return None
    seconds = int(match.group(1)) * 60 + int(match.group(2))
    return seconds or None


def pace_to_str(seconds_per_km: Optional[float]) -> str:
    """Formatera tempo som "m:ss/km" """
    if not seconds_per_km or seconds_per_km <= 0:
        return "-"
    minutes = int(seconds_per_km // 60)
    secs = round(seconds_per_km % 60)
    if secs == 60:
        minutes, secs = minutes + 1, 0
    return f"{minutes}:{secs:02d}/km"


def format_km(meters: Optional[float]) -> str:
    if not meters:
        return "0.00 Km"
    return f"{meters / 1000:.2f} Km"


def format_hms(total_seconds: float) -> str:
    """
    Formatera tid från sekunder till sträng

    Args:
        total_seconds: Antal sekunder

    Returns:
        "H:MM:SS" eller "M:SS"
    """
    s = max(0, round(total_seconds))
    hours = s // 3600
    mins = (s % 3600) // 60
    secs = s % 60

    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def estimate_calories(distance_m: float, pace_sec_per_km: float, weight_kg: float) -> float:
    """
    Uppskatta energiförbrukning för löpning på plan mark

    VO2 (ml/kg/min) ≈ 0.2 * fart (m/min) + 3.5, MET = VO2 / 3.5,
    kcal/min ≈ MET * 3.5 * vikt (kg) / 200.

    Args:
        distance_m: Distans i meter
        pace_sec_per_km: Tempo i sekunder per km
        weight_kg: Kroppsvikt i kg

    Returns:
        Kilokalorier, 0 om någon indata inte är positiv
    """
    if pace_sec_per_km <= 0 or weight_kg <= 0 or distance_m <= 0:
        return 0.0

    duration_min = (distance_m / 1000) * pace_sec_per_km / 60
    speed_m_per_min = 60000 / pace_sec_per_km
    met = (0.2 * speed_m_per_min + 3.5) / 3.5
    kcal_per_min = met * 3.5 * weight_kg / 200
    return kcal_per_min * duration_min


def compute_stats(
    distance_m: float,
    pace_sec_per_km: Optional[float] = None,
    weight_kg: Optional[float] = None,
    elevation_gain: Optional[float] = None,
    elevation_loss: Optional[float] = None,
    elevation_pending: bool = False
) -> RouteStats:
    """
    Bygg RouteStats från distans, tempo och vikt

    ETA kräver tempo, kalorier kräver både tempo och vikt.
    """
    stats = RouteStats(
        distance=max(0.0, distance_m),
        elevation_gain=elevation_gain,
        elevation_loss=elevation_loss,
        elevation_pending=elevation_pending
    )

    if pace_sec_per_km and pace_sec_per_km > 0:
        stats.eta_seconds = (stats.distance / 1000) * pace_sec_per_km
        if weight_kg and weight_kg > 0:
            stats.calories = estimate_calories(stats.distance, pace_sec_per_km, weight_kg)

    return stats

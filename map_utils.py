"""
Kartfunktioner för visualisering
"""

import folium
from typing import List, Optional, Sequence

from models import KmMarker, LatLng


def create_map(
    center: List[float],
    waypoints: Sequence[LatLng] = (),
    labels: Sequence[str] = (),
    polyline: Optional[Sequence[LatLng]] = None,
    km_markers: Sequence[KmMarker] = (),
    provider: Optional[str] = None
) -> folium.Map:
    """
    Skapa Folium-karta med rutt, planeringspunkter och kilometermarkeringar

    Args:
        center: Kartans centrum [lat, lon]
        waypoints: Planeringspunkter (lat, lon)
        labels: Etikett per planeringspunkt, samma index
        polyline: Ruttens polylinje (lat, lon)
        km_markers: Kilometermarkeringar
        provider: Provider som beräknade rutten

    Returns:
        Folium Map-objekt
    """
    m = folium.Map(
        location=center,
        zoom_start=13,
        control_scale=True
    )

    # Planeringspunkter, numrerade efter position
    for idx, (lat, lon) in enumerate(waypoints):
        label = labels[idx] if idx < len(labels) else str(idx + 1)
        folium.Marker(
            [lat, lon],
            tooltip=folium.Tooltip(label, permanent=True, direction="top"),
            icon=folium.Icon(color="green" if idx == 0 else "blue", icon="flag")
        ).add_to(m)

    # Rita rutt
    if polyline:
        # Olika färger beroende på provider
        color_map = {
            "osrm": "blue",
            "ors": "red",
            "graphhopper": "purple"
        }
        folium.PolyLine(
            [[lat, lon] for lat, lon in polyline],
            color=color_map.get(provider, "blue"),
            weight=5,
            opacity=0.9
        ).add_to(m)

        for marker in km_markers:
            folium.Marker(
                list(marker.position),
                icon=folium.DivIcon(
                    html=f"<div style='font-size: 10px; font-weight: bold; white-space: nowrap;'>{marker.label}</div>"
                )
            ).add_to(m)

        # Anpassa zoom för att visa hela rutten
        if len(polyline) > 1:
            bounds = [[min(p[0] for p in polyline), min(p[1] for p in polyline)],
                      [max(p[0] for p in polyline), max(p[1] for p in polyline)]]
            m.fit_bounds(bounds)

    return m

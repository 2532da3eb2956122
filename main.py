"""
Huvudapplikation för Streamlit löparruttplanerare
"""

import asyncio
from datetime import datetime

import streamlit as st
from streamlit_folium import st_folium

from config import DEFAULT_CENTER, DEFAULT_PACE, DEFAULT_LOG_LEVEL, PREMIUM_PROVIDERS
from credentials import CredentialStore
from elevation import ElevationEstimator
from errors import CodecError
from logging_config import setup_logging
from map_utils import create_map
from route_session import RouteSession
from routing import RoutingGateway
from routing_providers import GraphHopperProvider, OpenRouteServiceProvider, OSRMProvider
from utils import format_hms, format_km

PROVIDER_LABELS = {
    "osrm": "OSRM (bil, ingen nyckel)",
    "ors": "OpenRouteService",
    "graphhopper": "GraphHopper",
}


def create_session() -> RouteSession:
    """Bygg en ny ruttsession med providers och nycklar från st.secrets"""
    gateway = RoutingGateway(
        baseline=OSRMProvider(),
        premium=[OpenRouteServiceProvider(), GraphHopperProvider()],
        credentials=CredentialStore.from_secrets()
    )
    return RouteSession(gateway, ElevationEstimator(), pace=DEFAULT_PACE)


def run(session: RouteSession, operation):
    """Kör en asynkron sessionsoperation klart, inklusive höjddata"""
    async def _run():
        update = await operation
        await session.wait_for_elevation()
        return update
    return asyncio.run(_run())


def init_session_state():
    """Initiera session state"""
    if "route_session" not in st.session_state:
        st.session_state.route_session = create_session()
    if "last_click" not in st.session_state:
        st.session_state.last_click = None
    if "last_upload" not in st.session_state:
        st.session_state.last_upload = None


def render_sidebar(session: RouteSession):
    with st.sidebar:
        st.header("Inställningar")

        # Routingmotor
        options = ["osrm", *PREMIUM_PROVIDERS]
        engine = st.radio(
            "Routingmotor",
            options,
            index=options.index(session.gateway.selected or "osrm"),
            format_func=lambda x: PROVIDER_LABELS.get(x, x)
        )
        session.gateway.select(engine)

        for provider in PREMIUM_PROVIDERS:
            key = st.text_input(
                f"{PROVIDER_LABELS[provider]} API-nyckel",
                value=session.gateway.credentials.get(provider) or "",
                type="password",
                key=f"key_{provider}"
            )
            if (key.strip() or None) != session.gateway.credentials.get(provider):
                session.gateway.set_credential(provider, key)

        if engine != "osrm":
            available, note = session.gateway.availability(engine)
            if available:
                st.success(note)
            else:
                st.warning(note)

        st.divider()

        loop = st.checkbox("Rundslinga (tillbaka till start)", value=session.loop)
        if loop != session.loop:
            run(session, session.set_loop(loop))

        pace = st.text_input("Tempo (min:sek per km)", value=DEFAULT_PACE)
        session.set_pace(pace)

        weight = st.number_input("Vikt (kg)", min_value=0.0, max_value=250.0, value=0.0, step=1.0)
        session.set_weight(weight or None)

        st.divider()

        col1, col2, col3 = st.columns(3)
        with col1:
            if st.button("Ångra", use_container_width=True):
                run(session, session.undo_last_waypoint())
        with col2:
            if st.button("Vänd", use_container_width=True):
                run(session, session.reverse())
        with col3:
            if st.button("Rensa", use_container_width=True):
                session.clear_all()


def render_stats(session: RouteSession):
    st.subheader("Sammanfattning")

    if session.error:
        st.error(session.error)
        return

    stats = session.stats
    if stats is None:
        st.info("Klicka på kartan för att lägga till minst två punkter")
        return

    st.metric("Distans", format_km(stats.distance))
    if stats.elevation_gain is not None:
        st.metric("Höjd", f"+{stats.elevation_gain:.0f} / -{stats.elevation_loss:.0f} m")
    else:
        st.metric("Höjd", "..." if stats.elevation_pending else "-")
    st.metric("Uppskattad tid", format_hms(stats.eta_seconds) if stats.eta_seconds is not None else "-")
    st.metric("Kalorier", f"{stats.calories:.0f}" if stats.calories is not None else "-")


def render_export(session: RouteSession):
    st.subheader("Export")

    if session.polyline:
        gpx_name = st.text_input(
            "Ruttnamn",
            value=f"Löprunda {datetime.now().strftime('%Y-%m-%d')}",
            key="gpx_name"
        )
        laps = st.number_input("Varv", min_value=1, max_value=20, value=1, step=1)
        st.download_button(
            label="Ladda ner GPX",
            data=session.export_gpx(gpx_name, int(laps)),
            file_name=f"{gpx_name.replace(' ', '_')}.gpx",
            mime="application/gpx+xml",
            use_container_width=True
        )

    uploaded = st.file_uploader("Läs in GPX", type=["gpx"])
    if uploaded is not None:
        upload_id = (uploaded.name, uploaded.size)
        if upload_id != st.session_state.last_upload:
            st.session_state.last_upload = upload_id
            try:
                run(session, session.import_gpx(uploaded.getvalue().decode("utf-8")))
                st.rerun()
            except (CodecError, UnicodeDecodeError) as e:
                st.error(f"Kunde inte läsa GPX: {e}")


def main():
    """Huvudfunktion för Streamlit-appen"""
    st.set_page_config(
        page_title="Löparruttplanerare",
        page_icon="🏃",
        layout="wide"
    )

    setup_logging(DEFAULT_LOG_LEVEL)
    init_session_state()
    session = st.session_state.route_session

    st.title("Löparruttplanerare")
    st.markdown("Klicka på kartan för att bygga din runda, exportera som GPX")

    render_sidebar(session)

    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("Karta")

        waypoints = session.waypoint_latlngs()
        center = list(waypoints[-1]) if waypoints else DEFAULT_CENTER
        m = create_map(
            center,
            waypoints,
            session.marker_labels(),
            session.polyline,
            session.km_markers,
            session.provider
        )

        map_state = st_folium(m, key="map", width=None, height=550)

        click = (map_state or {}).get("last_clicked")
        if click and click != st.session_state.last_click:
            st.session_state.last_click = click
            run(session, session.add_waypoint(click["lat"], click["lng"]))
            st.rerun()

    with col2:
        render_stats(session)
        st.divider()
        render_export(session)

    # Footer
    st.divider()
    st.markdown(
        """
        <div style='text-align: center; color: gray; font-size: 0.8em;'>
        Skapad för löpare |
        Använder OSRM, OpenRouteService, GraphHopper & Open-Elevation
        </div>
        """,
        unsafe_allow_html=True
    )


if __name__ == "__main__":
    main()

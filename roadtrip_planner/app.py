import argparse
import logging
import os

import keyring
from keyring.errors import KeyringError
import streamlit as st
from pydantic import ValidationError
from streamlit_folium import st_folium

from roadtrip_planner.agents import ClaudeAgent, GeminiAgent, OpenAIAgent
from roadtrip_planner.agents.base import PlannerAgent
from roadtrip_planner.config import (
    ENV_VAR_KEYS,
    KEYRING_KEYS,
    KEYRING_SERVICE,
    PROVIDER_MODELS,
    PROVIDERS,
    InvocationMode,
    configure_logging,
    get_data_dir,
    get_debug_dir,
    get_invocation_mode,
)
from roadtrip_planner.errors import PlanGenerationError
from roadtrip_planner.models import AMENITY_OPTIONS, TripItinerary
from roadtrip_planner.services import (
    UnsplashService,
    build_route_map,
    generate_trip,
    itinerary_to_ical,
    user_message_for,
)
from roadtrip_planner.services.calendar_export import calendar_filename
from roadtrip_planner.services.trip_planner import GENERIC_ERROR_MESSAGE
from roadtrip_planner.services.segment_styles import (
    format_duration,
    segment_heading,
    segment_subtitle,
    style_for,
)
from roadtrip_planner.services.unsplash import banner_query
from roadtrip_planner.storage import TripStore

logger = logging.getLogger(__name__)


def parse_args():
    """Parse command-line arguments passed after -- in streamlit run."""
    parser = argparse.ArgumentParser(description="Road Trip Planner")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Run in local mode: load API keys from keyring/environment",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode: save raw planner responses and log verbosely",
    )
    # Filter out streamlit arguments and parse only our app arguments
    args, _ = parser.parse_known_args()
    return args


# Parse arguments at module load time
APP_ARGS = parse_args()
LOCAL_MODE = APP_ARGS.local
DEBUG_MODE = APP_ARGS.debug

configure_logging(DEBUG_MODE)


def get_api_key(provider: str) -> str:
    """Get API key based on deployment mode.

    Local mode: Load from keyring, fall back to environment variables.
    Remote mode: Load from Streamlit secrets, fall back to environment variables,
                 then session (user-entered keys).
    """
    env_var = ENV_VAR_KEYS.get(provider, "")

    if not LOCAL_MODE:
        try:
            if env_var in st.secrets:
                return st.secrets[env_var]
        except FileNotFoundError:
            # No secrets.toml configured
            pass

        env_key = os.getenv(env_var, "")
        if env_key:
            return env_key

        return st.session_state.get("api_keys", {}).get(provider, "")

    key_name = KEYRING_KEYS.get(provider, "")
    try:
        key = keyring.get_password(KEYRING_SERVICE, key_name)
        if key:
            return key
    except KeyringError as e:
        logger.warning("Keyring lookup for %s failed: %s", provider, e)

    return os.getenv(env_var, "")


def save_api_key(provider: str, api_key: str) -> bool:
    """Save API key based on deployment mode.

    Local mode: Save to keyring.
    Remote mode: Save to the browser session only.
    """
    if not api_key:
        return False

    if not LOCAL_MODE:
        st.session_state.setdefault("api_keys", {})[provider] = api_key
        return True

    try:
        keyring.set_password(KEYRING_SERVICE, KEYRING_KEYS[provider], api_key)
        return True
    except KeyringError as e:
        logger.error("Could not save %s key to keyring: %s", provider, e)
        return False


def get_agent(provider: str, api_key: str, model: str, mode: InvocationMode) -> PlannerAgent | None:
    """Create an agent for the selected provider."""
    kwargs = {"mode": mode, "debug_dir": get_debug_dir() if DEBUG_MODE else None}
    if provider == "Gemini":
        return GeminiAgent(api_key, model=model, **kwargs)
    elif provider == "Claude":
        return ClaudeAgent(api_key, model=model, **kwargs)
    elif provider == "OpenAI":
        return OpenAIAgent(api_key, model=model, **kwargs)
    return None


def init_session_state():
    """Initialize session state variables."""
    if "store" not in st.session_state:
        st.session_state.store = TripStore(get_data_dir())
    if "generating" not in st.session_state:
        st.session_state.generating = False
    if "error" not in st.session_state:
        st.session_state.error = None
    if "provider" not in st.session_state:
        st.session_state.provider = next((p for p in PROVIDERS if get_api_key(p)), PROVIDERS[0])
    if "mode" not in st.session_state:
        st.session_state.mode = get_invocation_mode()


@st.cache_data(show_spinner=False)
def get_banner_url(query: str, access_key: str) -> str:
    return UnsplashService(access_key).banner_url(query)


def render_sidebar():
    """Render provider settings and the reset button."""
    store: TripStore = st.session_state.store

    with st.sidebar:
        st.header("⚙️ Planner")

        provider = st.selectbox(
            "AI Provider",
            PROVIDERS,
            index=PROVIDERS.index(st.session_state.provider),
        )
        st.session_state.provider = provider
        st.session_state.model = st.selectbox("Model", PROVIDER_MODELS[provider])

        use_tools = st.toggle(
            "Use live map data",
            value=st.session_state.mode == InvocationMode.TOOL_AUGMENTED,
            help="Let the model look up real places and distances. Output is less strictly structured.",
        )
        st.session_state.mode = InvocationMode.TOOL_AUGMENTED if use_tools else InvocationMode.STRICT_SCHEMA

        if not get_api_key(provider):
            key = st.text_input(f"{provider} API key", type="password")
            if st.button("Save key") and not save_api_key(provider, key):
                st.error("Failed to save")

        st.markdown("---")
        if st.button("🔄 Start a new trip", use_container_width=True):
            st.session_state.confirm_reset = True

        if st.session_state.get("confirm_reset"):
            st.warning("This will clear your current itinerary and settings.")
            col1, col2 = st.columns(2)
            if col1.button("Clear", type="primary"):
                failed = store.reset()
                if failed:
                    st.error(f"Could not clear saved data for: {', '.join(failed)}")
                st.session_state.error = None
                st.session_state.confirm_reset = False
                st.rerun()
            if col2.button("Cancel"):
                st.session_state.confirm_reset = False
                st.rerun()


def render_trip_inputs():
    """Render the start city, destinations and preferences."""
    store: TripStore = st.session_state.store
    prefs = store.preferences

    st.subheader("🗺️ Trip Details")

    start_city = st.text_input("Starting city", value=prefs.start_city, placeholder="Where are you starting?")
    if start_city != prefs.start_city:
        store.update_preferences(start_city=start_city)

    st.markdown("**Destinations**")
    destinations = store.destinations
    if not destinations:
        st.caption("No stops added yet.")
    for idx, dest in enumerate(destinations):
        col_name, col_days, col_remove = st.columns([3, 2, 1])
        col_name.markdown(f"{idx + 1}. {dest.name}")
        days = col_days.number_input(
            "Days", min_value=1, max_value=30, value=dest.duration_days,
            key=f"dest_days_{idx}_{dest.name}", label_visibility="collapsed",
        )
        if days != dest.duration_days:
            store.update_destination_duration(idx, int(days))
        if col_remove.button("✕", key=f"remove_dest_{idx}_{dest.name}"):
            store.remove_destination(idx)
            st.rerun()

    with st.form("add_destination", clear_on_submit=True):
        new_dest = st.text_input("Add a destination...", label_visibility="collapsed", placeholder="Add a destination...")
        if st.form_submit_button("➕ Add") and new_dest.strip():
            store.add_destination(new_dest)
            st.rerun()

    start_date = st.date_input("Start date", value=prefs.start_date)
    round_trip = st.checkbox("Round trip (return to start)", value=prefs.round_trip)
    changes = {}
    if start_date != prefs.start_date:
        changes["start_date"] = start_date
    if round_trip != prefs.round_trip:
        changes["round_trip"] = round_trip

    if round_trip:
        styles = ["loop", "retrace"]
        style = st.radio(
            "Return route",
            styles,
            index=styles.index(prefs.return_route_style),
            format_func=lambda s: "Loop (different roads back)" if s == "loop" else "Retrace (fastest way back)",
            horizontal=True,
        )
        if style != prefs.return_route_style:
            changes["return_route_style"] = style

    with st.expander("Preferences (Driving, Stops, Amenities)"):
        max_hours = st.slider(
            "Max drive / day (hours)", min_value=2, max_value=12, step=1,
            value=int(prefs.max_drive_hours_per_day),
        )
        frequencies = ["low", "medium", "high"]
        frequency = st.radio(
            "Stop frequency",
            frequencies,
            index=frequencies.index(prefs.stops_frequency),
            format_func=lambda f: "Minimal" if f == "low" else f.title(),
            horizontal=True,
        )
        amenity_values = list(AMENITY_OPTIONS)
        if prefs.amenity_type not in amenity_values:
            amenity_values.append(prefs.amenity_type)
        amenity = st.selectbox(
            "Stop preference",
            amenity_values,
            index=amenity_values.index(prefs.amenity_type),
            format_func=lambda a: AMENITY_OPTIONS.get(a, a),
        )
        if max_hours != prefs.max_drive_hours_per_day:
            changes["max_drive_hours_per_day"] = max_hours
        if frequency != prefs.stops_frequency:
            changes["stops_frequency"] = frequency
        if amenity != prefs.amenity_type:
            changes["amenity_type"] = amenity

    if changes:
        try:
            store.update_preferences(**changes)
        except ValidationError as e:
            st.error(f"Invalid preference: {e.errors()[0]['msg']}")

    can_generate = bool(store.preferences.start_city.strip()) and bool(store.destinations)
    if st.button(
        "Planning Trip..." if st.session_state.generating else "Create Itinerary ➜",
        type="primary",
        use_container_width=True,
        disabled=st.session_state.generating or not can_generate,
    ):
        st.session_state.generating = True
        st.session_state.error = None
        st.rerun()


def run_generation():
    """Run the pending generation request, if any."""
    if not st.session_state.generating:
        return

    store: TripStore = st.session_state.store
    provider = st.session_state.provider
    try:
        agent = get_agent(provider, get_api_key(provider), st.session_state.model, st.session_state.mode)
        with st.spinner("Planning your route..."):
            generate_trip(agent, store)
    except PlanGenerationError as e:
        st.session_state.error = user_message_for(e)
    except Exception:
        # SDK construction errors (e.g. a missing key) land here
        logger.exception("Could not start trip generation")
        st.session_state.error = GENERIC_ERROR_MESSAGE
    finally:
        st.session_state.generating = False
    st.rerun()


def render_trip_header(itinerary: TripItinerary):
    store: TripStore = st.session_state.store

    st.image(get_banner_url(banner_query(itinerary), get_api_key("Unsplash")), use_container_width=True)
    st.caption("ROAD TRIP PLAN")
    st.header(itinerary.trip_name)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Duration", f"{itinerary.total_days} Days")
    col2.metric("Distance", f"~{itinerary.total_distance_estimate_km:,.0f} km")
    if itinerary.start_location:
        col3.metric("Start", itinerary.start_location.name)
    col4.download_button(
        "📅 Save to Calendar",
        data=itinerary_to_ical(itinerary, store.preferences.start_date),
        file_name=calendar_filename(itinerary),
        mime="text/calendar",
    )


def render_timeline(itinerary: TripItinerary):
    for day in itinerary.days:
        with st.container(border=True):
            st.markdown(f"### Day {day.day_number}: {day.title}")
            st.caption(f"{day.total_drive_hours:g}h driving")
            for segment in day.segments:
                style = style_for(segment.type)
                col_icon, col_body, col_time = st.columns([1, 8, 2])
                col_icon.markdown(f"## {style.icon}", help=style.label)
                col_body.markdown(f"**{segment_heading(segment)}**")
                subtitle = segment_subtitle(segment)
                if subtitle:
                    col_body.write(subtitle)
                if segment.notes:
                    col_body.info(f'"{segment.notes}"')
                col_time.markdown(f"`{format_duration(segment.duration_hours)}`")

    st.caption("End of Itinerary")


def render_results():
    store: TripStore = st.session_state.store

    if st.session_state.error:
        st.error(st.session_state.error, icon="⚠️")

    itinerary = store.itinerary
    if itinerary is None:
        if not st.session_state.generating:
            st.subheader("🧭 Where is your next adventure?")
            st.write(
                "Enter your starting point and your dream destinations. "
                "We'll craft the perfect route, so you can focus on the playlist."
            )
        return

    render_trip_header(itinerary)

    tab_timeline, tab_map = st.tabs(["📋 Timeline", "🗺️ Map View"])
    with tab_timeline:
        render_timeline(itinerary)
    with tab_map:
        st_folium(build_route_map(itinerary), height=600, use_container_width=True, returned_objects=[])


def main():
    """Main application entry point."""
    st.set_page_config(page_title="Road Trip Planner", page_icon="🚗", layout="wide")
    init_session_state()
    render_sidebar()

    col_inputs, col_results = st.columns([1, 2])
    with col_inputs:
        render_trip_inputs()
    with col_results:
        run_generation()
        render_results()


if __name__ == "__main__":
    main()

"""
Estate Nexus - Real estate feasibility dashboard.

Single-page Streamlit application: pick or edit a Dubai plot, review the
derived financials and unit mix, and request an AI investment memo.
"""

import logging
from dataclasses import replace

import pandas as pd
import pydeck as pdk
import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

load_dotenv()

# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(
    page_title="Estate Nexus",
    page_icon="🏗️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# ═══════════════════════════════════════════════════════════════════════════
# IMPORTS
# ═══════════════════════════════════════════════════════════════════════════
from core.advisor import NarrativeCache, NarrativeRequest, get_narrative_analyst
from core.charts import (
    benchmark_chart,
    cost_composition_chart,
    projection_chart,
    score_gauge,
    sentiment_chart,
    yield_structure_chart,
)
from core.config import get_settings
from core.models import DevelopmentType
from core.pipeline import FeasibilityPipeline
from core.presets import default_preset, get_preset, list_presets, short_label
from core.proforma import get_feasibility_engine
from core.scenarios import scenarios_to_frame
from core.theme import format_area, format_compact, format_full, inject_theme, section_header
from loaders.location import build_embed_url, get_location_resolver

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("app")

inject_theme()
CUR = settings.currency


@st.cache_resource
def load_analyst():
    return get_narrative_analyst(settings)


@st.cache_data(ttl=3600, show_spinner=False)
def resolve_location(address: str):
    if not settings.geocoder_enabled:
        return None
    location = get_location_resolver().resolve(address)
    return location.to_dict() if location else None


# ═══════════════════════════════════════════════════════════════════════════
# STATE
# ═══════════════════════════════════════════════════════════════════════════
if "pipeline" not in st.session_state:
    st.session_state.pipeline = FeasibilityPipeline()
    st.session_state.pipeline.submit(default_preset())
    log.info(f"Session started with preset {default_preset().id}")
if "narrative" not in st.session_state:
    st.session_state.narrative = NarrativeCache()

pipeline: FeasibilityPipeline = st.session_state.pipeline


def select_preset():
    log.info(f"Preset selected: {st.session_state.preset_id}")
    pipeline.submit(get_preset(st.session_state.preset_id))


# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════════════════════════
presets = list_presets()
preset_ids = [p.id for p in presets]
base_id = pipeline.current.project.id.removesuffix("-custom")

st.sidebar.markdown("<h1>ESTATE<span class='accent'>NEXUS</span></h1>", unsafe_allow_html=True)
st.sidebar.selectbox(
    "Dubai Plots",
    options=preset_ids,
    index=preset_ids.index(base_id) if base_id in preset_ids else 0,
    format_func=lambda pid: short_label(get_preset(pid)),
    key="preset_id",
    on_change=select_preset,
)

project = pipeline.current.project

with st.sidebar.form(f"parameters_{abs(hash(project))}"):
    address = st.text_input("Dubai Location", value=project.address)
    col1, col2 = st.columns(2)
    plot_size = col1.number_input("Plot Size (m²)", value=float(project.plot_size), step=100.0)
    build_factor = col2.number_input("Build Factor (FAR)", value=float(project.build_factor), step=0.1)
    type_options = list(DevelopmentType)
    development_type = st.selectbox(
        "Project Category",
        options=type_options,
        index=type_options.index(project.development_type),
        format_func=lambda t: t.label,
    )
    plot_cost = st.number_input(f"Plot Acquisition ({CUR})", value=float(project.plot_cost), step=100_000.0)
    construction_cost = st.number_input(
        f"Construction / m² ({CUR})", value=float(project.construction_cost_per_m2), step=100.0
    )
    additional_expenses = st.number_input(
        f"DLD & Consultant Fees ({CUR})", value=float(project.additional_expenses), step=10_000.0
    )
    sale_price = st.number_input(
        f"Target Sale / m² ({CUR})", value=float(project.expected_selling_price_per_m2), step=100.0
    )
    if st.form_submit_button("Recalculate", width="stretch"):
        edited = replace(
            project,
            id=f"{base_id}-custom",
            address=address,
            plot_size=plot_size,
            build_factor=build_factor,
            plot_cost=plot_cost,
            construction_cost_per_m2=construction_cost,
            additional_expenses=additional_expenses,
            expected_selling_price_per_m2=sale_price,
            development_type=development_type,
        )
        if edited != project:
            log.info(f"Recalculating {edited.id}")
            pipeline.submit(edited)
            st.rerun()

for issue in project.validation_issues():
    st.sidebar.warning(issue)

st.sidebar.metric("GFA Capacity", format_area(pipeline.current.results.buildable_area))
st.sidebar.caption("Max Gross Floor Area based on Dubai FAR rules")

with st.sidebar.expander("📋 Live Market Scenarios"):
    for preset in presets:
        marker = "🟠 " if preset.id == base_id else ""
        st.markdown(
            f"{marker}**{preset.address}**  \n"
            f"{preset.development_type.value} · {preset.plot_size:,.0f} m²"
        )

if st.sidebar.button("💾 Save Data", width="stretch"):
    st.sidebar.info(
        "In a real-world application, this button would save user-generated plots "
        "to the database, automatically updating the dashboard list in real-time."
    )

with st.sidebar.expander("❓ How to use"):
    st.markdown(
        "1. **Select a scenario** from the Dubai Plots list.\n"
        "2. **Review parameters** such as plot size, acquisition cost and target sale price. "
        "Edit them and press *Recalculate* to run your own case.\n"
        "3. **AI analysis**: press *Generate Feasibility Study* to get a verdict on the numbers."
    )

# ═══════════════════════════════════════════════════════════════════════════
# HEADER
# ═══════════════════════════════════════════════════════════════════════════
snapshot = pipeline.current
project, results, scenarios = snapshot.project, snapshot.results, snapshot.scenarios
engine = get_feasibility_engine()

col1, col2 = st.columns([4, 1])
with col1:
    st.caption(f"📍 {project.address}")
with col2:
    st.success(f"Yield: {results.roi:.1f}%")

# ═══════════════════════════════════════════════════════════════════════════
# KEY METRICS
# ═══════════════════════════════════════════════════════════════════════════
col1, col2, col3, col4 = st.columns(4)
col1.metric("Total Revenue", format_full(results.total_revenue, CUR))
col1.caption(f"Target: {format_compact(project.expected_selling_price_per_m2, CUR)}/m²")
col2.metric("Total Profit", format_full(results.total_profit, CUR))
col2.caption(f"{format_full(results.profit_per_m2, CUR)} per buildable m²")
col3.metric("Project ROI", f"{results.roi:.2f}%")
col3.caption(
    f"Project Cost: {format_compact(results.total_project_cost, CUR)} · "
    f"Breakeven: {format_compact(engine.breakeven_price_per_m2(project), CUR)}/m²"
)
col4.metric("Buildable Area", format_area(results.buildable_area))
col4.caption(f"Plot: {project.plot_size:,.0f} m²")

# ═══════════════════════════════════════════════════════════════════════════
# AI ANALYSIS
# ═══════════════════════════════════════════════════════════════════════════
st.markdown("---")
col1, col2 = st.columns([4, 1])
with col1:
    section_header("✨ Dubai Strategic AI", "Generative market intelligence")

narrative = st.session_state.narrative.get(project)
with col2:
    if narrative and narrative.ok:
        if st.button("✖ Close Report"):
            st.session_state.narrative.clear()
            st.rerun()
    elif st.button("✨ Generate Feasibility Study", type="primary"):
        with st.spinner("Synthesizing market data..."):
            request = NarrativeRequest.from_project(project, results, currency=CUR)
            log.info(f"Narrative requested for {project.id}")
            narrative = load_analyst().analyze(request)
        st.session_state.narrative.put(project, narrative)

if narrative is None:
    st.info("AI Engine Standing By. Ready to ingest plot metrics.")
elif not narrative.ok:
    st.error(narrative.failure.message)
else:
    report = narrative.report
    st.markdown(f"#### 📄 Investment Memo: {project.address}")

    col1, col2 = st.columns([2, 1])
    with col1:
        st.markdown("**Executive Summary**")
        st.markdown(report.executive_summary)
    with col2:
        st.markdown("**Feasibility Score**")
        st.plotly_chart(score_gauge(report.project_score), width="stretch")

    col1, col2 = st.columns([2, 1])
    with col1:
        st.markdown("**📈 5-Year Capital Appreciation** (Index Base: 100)")
        st.plotly_chart(projection_chart(report.projection_data), width="stretch")
    with col2:
        st.markdown("**Market Drivers**")
        st.plotly_chart(sentiment_chart(report.market_sentiment), width="stretch")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**📊 Performance vs Market**")
        st.plotly_chart(benchmark_chart(report.competitor_comparison), width="stretch")
    with col2:
        st.markdown("**Strategic Verdict**")
        st.markdown(f"<div class='verdict'>\"{report.verdict}\"</div>", unsafe_allow_html=True)

# ═══════════════════════════════════════════════════════════════════════════
# COST & YIELD
# ═══════════════════════════════════════════════════════════════════════════
st.markdown("---")
col1, col2 = st.columns([1, 2])
with col1:
    st.subheader("📦 Cost Composition")
    st.plotly_chart(cost_composition_chart(results), width="stretch")
    for name, share in results.cost_shares():
        st.caption(f"{name}: **{share:.1f}%**")
with col2:
    st.subheader("💹 Financial Yield Structure")
    st.plotly_chart(yield_structure_chart(results, CUR), width="stretch")

# ═══════════════════════════════════════════════════════════════════════════
# LOCATION & UNIT MIX
# ═══════════════════════════════════════════════════════════════════════════
st.markdown("---")
col1, col2 = st.columns(2)
with col1:
    st.subheader("🗺️ Dubai Parcel Location")
    location = resolve_location(project.address)
    if location:
        view = pdk.ViewState(
            latitude=location["latitude"],
            longitude=location["longitude"],
            zoom=settings.map_zoom,
        )
        layer = pdk.Layer(
            "ScatterplotLayer",
            pd.DataFrame([location]),
            get_position=["longitude", "latitude"],
            get_radius=40,
            get_fill_color=[217, 119, 6, 220],
            pickable=True,
        )
        st.pydeck_chart(pdk.Deck(
            layers=[layer],
            initial_view_state=view,
            map_style="https://basemaps.cartocdn.com/gl/positron-gl-style/style.json",
            tooltip={"text": "{display_name}"},
        ), height=350)
    else:
        components.iframe(build_embed_url(project.address, settings.map_zoom), height=350)

with col2:
    st.subheader("🏘️ Unit Distribution Scenarios")
    st.caption(f"{format_area(results.buildable_area)} GFA")
    frame = scenarios_to_frame(scenarios)
    st.dataframe(
        frame,
        hide_index=True,
        width="stretch",
        column_config={
            "Avg Size (m²)": st.column_config.NumberColumn(format="%.0f"),
            "Value / Unit": st.column_config.NumberColumn(f"Value / Unit ({CUR})", format="%.0f"),
        },
    )
    st.caption("* DLD Regulatory Projection")

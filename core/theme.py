"""
Shared theme and styling for the dashboard.

Provides consistent CSS, color palettes, and number formatting helpers.
"""

# Color palette
COLORS = {
    'primary': '#d97706',      # Amber
    'secondary': '#64748b',    # Slate gray
    'accent': '#2563eb',       # Blue
    'success': '#10b981',      # Emerald
    'danger': '#ef4444',       # Red
    'ink': '#0f172a',          # Near-black panels
    'grid': '#334155',
    'text': '#1e293b',
    'muted': '#64748b',
}

# Chart palettes
COST_COLORS = ['#d4af37', '#10b981', '#6366f1', '#ef4444']
YIELD_COLORS = ['#334155', '#10b981']
AI_CHART_COLORS = ['#f59e0b', '#10b981', '#3b82f6']

SHARED_CSS = """
<style>
    /* Hide Streamlit chrome */
    #MainMenu, footer, .stDeployButton {
        visibility: hidden;
        display: none;
    }

    .block-container {
        padding: 1rem 2rem;
    }

    h1 {
        font-weight: 800;
        color: #1e293b;
        letter-spacing: -0.04em;
    }
    h1 span.accent { color: #d97706; }

    [data-testid="stMetricValue"] {
        font-weight: 800;
        letter-spacing: -0.02em;
    }
    [data-testid="stMetricLabel"] {
        text-transform: uppercase;
        letter-spacing: 0.15em;
        font-size: 0.7rem;
    }

    .stButton > button {
        font-weight: 600;
        border-radius: 8px;
    }

    /* Strategic verdict card */
    .verdict {
        border: 1px solid rgba(245, 158, 11, 0.3);
        background: rgba(245, 158, 11, 0.08);
        border-radius: 16px;
        padding: 1rem 1.25rem;
        font-style: italic;
    }
</style>
"""


def format_compact(value: float, currency: str = "AED") -> str:
    """Short currency label: 'AED 1.2M', 'AED 950k', 'AED 12'."""
    magnitude = abs(value)
    sign = "-" if value < 0 else ""
    if magnitude >= 1_000_000:
        return f"{currency} {sign}{magnitude / 1_000_000:.1f}M"
    if magnitude >= 1_000:
        return f"{currency} {sign}{magnitude / 1_000:.0f}k"
    return f"{currency} {sign}{magnitude:,.0f}"


def format_full(value: float, currency: str = "AED") -> str:
    """Whole-unit currency amount with thousands separators."""
    return f"{currency} {value:,.0f}"


def format_area(value: float) -> str:
    return f"{value:,.0f} m²"


def inject_theme():
    """Inject shared CSS into the page."""
    import streamlit as st
    st.markdown(SHARED_CSS, unsafe_allow_html=True)


def section_header(title: str, description: str = None):
    """Render a consistent section header."""
    import streamlit as st
    st.subheader(title)
    if description:
        st.caption(description)

"""Goalline - Competition Standings Dashboard.

Read-only view over the ledger database: roster, standings, event log.
All changes go through scripts/ledger_cli.py.

Usage:
    streamlit run app/streamlit_app.py
"""

import os
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pandas as pd
import streamlit as st

from goalline.config import DEFAULT_DB_PATH, FLAT_TOP10_REWARD, REWARD_RANK_CUTOFF
from goalline.data import LedgerReader

# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------

DB_PATH = os.environ.get("GOALLINE_DB_PATH", DEFAULT_DB_PATH)

st.set_page_config(
    page_title="Goalline",
    page_icon="⚽",
    layout="wide",
    initial_sidebar_state="expanded",
)

if not Path(DB_PATH).exists():
    st.error("⚽ **Ledger database not found**")
    st.markdown("""
    No competition has been set up yet.

    **To fix this**, initialize the ledger:
    ```
    PYTHONPATH=src python scripts/ledger_cli.py init --admin <you>
    ```

    Then refresh this page.
    """)
    st.stop()

reader = LedgerReader(DB_PATH)

# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

st.sidebar.title("⚽ Goalline")
st.sidebar.caption("Three players. One announcement. Top ten get paid.")

page = st.sidebar.radio(
    "Navigate",
    ["🏆 Standings", "👥 Roster", "📜 Events"],
    index=0,
)

meta = reader.get_meta()
state = meta.get("state", "open")
st.sidebar.divider()
if state == "closed":
    st.sidebar.success("✅ Result announced")
else:
    st.sidebar.info("📝 Accepting teams")
st.sidebar.metric("Reserve", f"{int(meta.get('reserve_balance', 0)):,}")

# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------

def render_standings_page():
    st.header("🏆 Standings")
    st.caption(
        f"Ranks 1-{REWARD_RANK_CUTOFF} can claim {FLAT_TOP10_REWARD:,}. "
        "Ties go to the team registered first."
    )

    df = reader.get_standings()
    if df.empty:
        st.warning("No teams registered yet.")
        return

    if state != "closed":
        st.info("Points and ranks appear once the result is announced.")

    col1, col2, col3 = st.columns(3)
    col1.metric("Teams", len(df))
    col2.metric("Top score", int(df["points"].max()))
    col3.metric("Rewards claimed", int(df["reward_claimed"].sum()))

    st.dataframe(df, use_container_width=True, hide_index=True)


def render_roster_page():
    st.header("👥 Roster")
    players = pd.DataFrame(reader.get_players())
    if players.empty:
        st.warning("Ledger not initialized.")
        return
    st.dataframe(players, use_container_width=True, hide_index=True)


def render_events_page():
    st.header("📜 Event Log")
    kind = st.selectbox("Kind", ["all", "team_created", "result_announced", "reward_claimed"])
    rows = reader.get_events(kind=None if kind == "all" else kind)
    if not rows:
        st.info("No events yet.")
        return
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


if page == "🏆 Standings":
    render_standings_page()
elif page == "👥 Roster":
    render_roster_page()
else:
    render_events_page()

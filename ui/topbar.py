import streamlit as st
from core.version import __version__


def render_topbar():
    """Render the page header with title and version."""
    st.markdown(
        """
        <style>
        .dscr-topbar {padding:4px 8px; border-bottom:1px solid #ddd; margin-bottom:8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    with st.container():
        st.markdown('<div class="dscr-topbar">', unsafe_allow_html=True)
        left, right = st.columns([4, 1])
        with left:
            st.title("DSCR Loan Calculator")
            st.caption("Evaluate your investment property's financial viability")
        with right:
            st.markdown(f"**v{__version__}**")
        st.markdown("</div>", unsafe_allow_html=True)

"""Client application for the crowdfund API: HTTP wrapper, UI state and Streamlit views."""

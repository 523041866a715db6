"""Streamlit admin console.

Run with: streamlit run backoffice/console/app.py
"""

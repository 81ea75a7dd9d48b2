# src/currency_converter/interfaces/app.py
# Streamlit form for the currency converter
# - From / To select boxes populated from the currency catalog
# - Amount input + Convert button
# - Converted amount panel and a table of the last 5 conversions

from __future__ import annotations

import asyncio

import pandas as pd
import streamlit as st

from currency_converter.config import configure_logging, load_settings, use_system_locale
from currency_converter.services.converter import ConverterController


# -----------------------------
# Page config
# -----------------------------
st.set_page_config(page_title="Currency Converter", layout="centered")
st.title("💱 Currency Converter")

configure_logging(load_settings().log_level)
use_system_locale()


# -----------------------------
# Session state (one controller per browser session)
# -----------------------------
if "controller" not in st.session_state:
    controller = ConverterController()
    with st.spinner("Loading currencies..."):
        asyncio.run(controller.load_catalog())
    st.session_state["controller"] = controller

controller: ConverterController = st.session_state["controller"]
options = controller.currency_options()
labels = dict(options)
codes = [code for code, _ in options]

if not codes:
    st.warning("Could not load the currency list from either source.")


# -----------------------------
# Form
# -----------------------------
with st.form("convert_form"):
    from_code = st.selectbox(
        "From:",
        codes,
        index=None,
        format_func=lambda c: labels.get(c, c),
        placeholder="Select currency",
    )
    to_code = st.selectbox(
        "To:",
        codes,
        index=None,
        format_func=lambda c: labels.get(c, c),
        placeholder="Select currency",
    )
    amount = st.number_input("Amount:", value=float(controller.state.amount), step=1.0)
    submitted = st.form_submit_button("Convert", width="stretch")

if submitted:
    controller.select_from(from_code or "")
    controller.select_to(to_code or "")
    controller.set_amount(amount)
    with st.spinner("Fetching rate..."):
        asyncio.run(controller.request_conversion())

if controller.state.converted is not None:
    st.info(controller.converted_label())


# -----------------------------
# History
# -----------------------------
st.subheader("Last 5 Conversions:")
txs = controller.state.transactions
if not txs:
    st.caption("No conversions yet.")
else:
    df = pd.DataFrame(
        [
            {
                "date": t.date,
                "from": t.from_code.upper(),
                "to": t.to_code.upper(),
                "amount": t.amount,
                "result": t.result,
            }
            for t in txs
        ]
    )
    st.dataframe(df, width="stretch", hide_index=True)

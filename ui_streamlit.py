"""
Temporary Streamlit UI for Hydro Search Params (test only).
Launch with: streamlit run ui_streamlit.py
"""
from __future__ import annotations
import pandas as pd
import streamlit as st

from pipeline.catalog import load_catalog_entries
from pipeline.config import load_config
from pipeline.errors import HydroSearchError
from pipeline.main import search
from pipeline.schema import MODEL_ALIASES


st.title("Hydro Search Params (Test UI)")
query = st.text_input("Describe the data you are looking for", "Lakes water level in July 2023 over France")
model = st.selectbox("Model", list(MODEL_ALIASES))

if st.button("Extract parameters"):
    if not query.strip():
        st.warning("Please enter a query.")
    else:
        try:
            config = load_config()
            result = search(query, config, model=model)
        except HydroSearchError as exc:
            st.error(str(exc))
        else:
            payload = result.to_response()
            st.success("Parameters extracted.")

            st.subheader("Collections")
            entries = load_catalog_entries(config.catalog_path)
            rows = [
                {"id": cid, "title": entries.get(cid, {}).get("title", "(not in catalog)")}
                for cid in payload["collections"]
            ]
            if rows:
                st.dataframe(pd.DataFrame(rows))
            else:
                st.write("No matching collection.")

            st.subheader("Dates")
            st.write(f"Start: {payload['startDate'] or 'N/A'}")
            st.write(f"End: {payload['endDate'] or 'N/A'}")

            st.subheader("Bounding box")
            st.json(payload["boundingBox"] or {})

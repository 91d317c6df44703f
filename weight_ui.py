from __future__ import annotations

import logging
import os
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

import pandas as pd
import streamlit as st

from part_weight.config import WeightServiceConfig
from part_weight.errors import ConfigurationError
from part_weight.handler import handle_weight_request

BATCH_OUTPUT_COLUMNS: List[str] = [
    "part",
    "qty",
    "status_code",
    "unitWeightG",
    "unitWeightLbs",
    "totalWeightLbs",
    "source",
    "estimated",
    "manufacturer",
    "manufacturerPartNumber",
    "vendorPartNumber",
    "description",
    "rawWeight",
    "parsedFrom",
    "error",
]


def _parse_batch_lines(text: str) -> List[Dict[str, Any]]:
    """Accept "PART", "PART,QTY", "PART QTY" or "PART<TAB>QTY" per line."""
    rows: List[Dict[str, Any]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = [p for p in re.split(r"[,;\t ]+", line) if p]
        rows.append({"part": parts[0], "qty": parts[1] if len(parts) > 1 else None})
    return rows


def _resolve_rows(
    rows: List[Dict[str, Any]],
    environ: Optional[Mapping[str, str]] = None,
    on_progress: Optional[Callable[[int, Dict[str, Any]], None]] = None,
) -> pd.DataFrame:
    # No resolver is passed in: the handler reads config and opens new HTTP sessions per row.
    results: List[Dict[str, Any]] = []
    for i, row in enumerate(rows, start=1):
        if on_progress is not None:
            on_progress(i, row)
        response = handle_weight_request(row, environ=environ)
        results.append({"part": row["part"], "status_code": response.status_code, **response.body})
    return pd.DataFrame(results).reindex(columns=BATCH_OUTPUT_COLUMNS)


def _single_tab() -> None:
    part = st.text_input("Part number")
    qty = st.number_input("Quantity", min_value=1, value=1, step=1)

    if st.button("Resolve weight", use_container_width=True, type="primary"):
        with st.spinner(f"Looking up {part.strip() or 'part'}..."):
            response = handle_weight_request({"part": part, "qty": int(qty)})
        body = response.body
        if response.status_code != 200:
            st.error(f"HTTP {response.status_code}: {body.get('error') or 'Lookup failed'}")
        elif body.get("weight") is None:
            st.warning(body.get("error") or "Weight not found")
        else:
            cols = st.columns(3)
            cols[0].metric("Unit weight (g)", f"{body['unitWeightG']:.6g}")
            cols[1].metric("Unit weight (lb)", f"{body['unitWeightLbs']:.6g}")
            cols[2].metric("Total (lb)", f"{body['totalWeightLbs']:.6g}")
            if body.get("estimated"):
                st.info(f"Estimated from package size: {body['source']}")
            else:
                st.caption(f"Source: {body['source']}")
        st.json(body)


def _batch_tab() -> None:
    text = st.text_area("One part per line, optional quantity after a comma", height=200)
    if not st.button("Resolve batch", use_container_width=True):
        return
    rows = _parse_batch_lines(text)
    if not rows:
        st.error("Enter at least one part number.")
        return

    bar = st.progress(0.0, text="Starting batch")

    def on_progress(i: int, row: Dict[str, Any]) -> None:
        bar.progress(i / len(rows), text=f"{row['part']} ({i}/{len(rows)})")

    df = _resolve_rows(rows, on_progress=on_progress)
    bar.empty()

    st.dataframe(df, use_container_width=True)
    resolved = int(df["totalWeightLbs"].notna().sum())
    st.caption(
        f"Resolved {resolved} of {len(df)} parts. "
        f"Batch total: {df['totalWeightLbs'].fillna(0).sum():.4f} lb"
    )
    st.download_button(
        "Download CSV",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name="part_weights.csv",
        mime="text/csv",
    )


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("PART_WEIGHT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(page_title="Part Weight", page_icon="PW", layout="wide")
    st.title("Part Weight Lookup")
    st.caption("Shipping weight for electronic components from Mouser data. Measured weights win over package-size estimates.")

    # Checked on every rerun so a key set after startup is picked up without a restart.
    try:
        WeightServiceConfig.from_env()
    except ConfigurationError as e:
        st.error(e.message)
        return

    single, batch = st.tabs(["Single part", "Batch"])
    with single:
        _single_tab()
    with batch:
        _batch_tab()


if __name__ == "__main__":
    main()

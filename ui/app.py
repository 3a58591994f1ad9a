import time
from pathlib import Path

import orjson
import pandas as pd
import streamlit as st

from dmcd.data.generator import generate_sample_card
from dmcd.decoder import DmcParser
from dmcd.export import card_to_dict, features_to_arrow, features_to_arrow_file
from dmcd.manifest import load_manifest, validate_manifest
from dmcd.reporting.report import card_summary


def _features_frame(card) -> pd.DataFrame:
    return features_to_arrow(card).to_pandas()


def main() -> None:
    st.title("DMC Card Viewer")
    st.caption("Upload a Data Management Card to inspect machine data, revisions and spec codes.")
    st.session_state.setdefault("parse_logs", [])

    tabs = st.tabs(["Parse", "Validate"])

    with tabs[0]:
        st.subheader("Parse card")
        encoding = st.text_input("Encoding", "utf-8")
        use_sample = st.checkbox("Use a generated sample card instead of an upload", value=False)
        uploaded = st.file_uploader("Upload DMC file", type=["dmc", "txt"], key="parse_file")

        lines: list[str] | None = None
        if use_sample:
            seed = st.number_input("Seed", min_value=0, value=1234, step=1)
            lines, _meta = generate_sample_card(seed=int(seed), drift_rate=0.1)
        elif uploaded:
            lines = uploaded.read().decode(encoding).splitlines()

        if lines is not None:
            start = time.time()
            card = DmcParser().parse(lines)
            elapsed = time.time() - start
            summary = card_summary(card)
            st.success(f"Parsed {len(lines)} lines in {elapsed:.3f}s")
            st.json(summary)

            st.markdown("**Machine**")
            st.json(card_to_dict(card)["machine"])

            if card.revisions:
                st.markdown("**Revisions**")
                st.dataframe(
                    pd.DataFrame(
                        [
                            {
                                "id": r.identifier,
                                "date": r.production_date,
                                "sales_order": r.sales_order,
                                "project": r.project_number,
                            }
                            for r in card.revisions
                        ]
                    )
                )

            frame = _features_frame(card)
            if not frame.empty:
                st.markdown("**Spec codes**")
                section = st.selectbox("Section", sorted(frame["section"].unique()))
                st.dataframe(frame[frame["section"] == section], height=300)
                enabled = frame.groupby("section")["enabled"].sum()
                st.bar_chart(enabled)

            if card.diagnostics:
                st.markdown("**Diagnostics**")
                for message in card.diagnostics:
                    st.warning(message)

            st.session_state["parse_logs"].append(
                {"lines": len(lines), "seconds": elapsed, **summary}
            )
            st.markdown("**Recent parses**")
            st.dataframe(pd.DataFrame(st.session_state["parse_logs"]).tail(5))

            st.download_button(
                "Download JSON",
                orjson.dumps(card_to_dict(card), option=orjson.OPT_INDENT_2),
                file_name="card.json",
            )
            arrow_path = Path("tmp_features.arrow")
            features_to_arrow_file(card, arrow_path)
            st.download_button("Download Arrow", arrow_path.read_bytes(), file_name="features.arrow")

    with tabs[1]:
        st.subheader("Validate manifest")
        st.write("Manifest describes the card path, encoding, hash and optional checks.")
        manifest_file = st.file_uploader("Upload manifest (json/yaml)", type=["json", "yml", "yaml"])
        if manifest_file:
            suffix = Path(manifest_file.name).suffix or ".json"
            tmp_path = Path(f"uploaded_manifest{suffix}")
            tmp_path.write_bytes(manifest_file.read())
            result = validate_manifest(load_manifest(tmp_path))
            st.json(result)
            if not result["exists"]:
                st.warning("Manifest card path does not exist; validation incomplete.")


if __name__ == "__main__":
    main()

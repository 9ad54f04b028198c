# DocBatch — Streamlit App (PyMuPDF + Drawable Canvas)
# -----------------------------------------------------------------
# Batch document filler that:
#  • Loads a template (PNG/JPG image or page 1 of a PDF).
#  • Lets you DRAW placeholder rectangles on the preview, or asks Gemini to detect them.
#  • Takes one data row per output document (typed in, or extracted by Gemini from OCR'd PDFs).
#  • Generates one single‑page PDF per row and bundles them into a ZIP.
#
# How to run locally:
#   pip install -e .
#   streamlit run app.py
#
# Note: Placeholder coordinates are stored in template page-space (PDF points or
# image pixels, origin top-left). The canvas shows a scaled preview; rectangles
# drawn on it are converted back to page-space.

import io

from PIL import Image
import streamlit as st
from streamlit_drawable_canvas import st_canvas

from docbatch import ai
from docbatch.canvas import canvas_size, last_rect_from_canvas_json, overlay_drawing
from docbatch.config import get_logger, settings
from docbatch.credentials import load_api_key, save_api_key
from docbatch.errors import DocBatchError
from docbatch.geometry import screen_to_native
from docbatch.models import layout_from_json, layout_to_json
from docbatch.ocr import OcrProgress, extract_text_from_pdfs
from docbatch.pipeline import ARCHIVE_NAME, generate_archive
from docbatch.session import SessionState
from docbatch.template_loader import load_template

logger = get_logger("docbatch.app")

STEPS = {1: "Upload Template", 2: "Define Placeholders", 3: "Provide Data", 4: "Generate & Download"}


def show_error(prefix: str, e: Exception):
    logger.error(f"{prefix}: {e}")
    st.error(f"{prefix}: {e}")

# -------------------------------
# Streamlit UI
# -------------------------------

st.set_page_config(page_title=f"📄 {settings.PROJECT_NAME}", layout="wide")
st.title(f"📄 {settings.PROJECT_NAME} — Template Document Generator")

if 'session' not in st.session_state:
    st.session_state.session = SessionState()
    st.session_state.step = 1
    st.session_state.extracted_text = ""
    st.session_state.archive = None

session: SessionState = st.session_state.session

with st.sidebar:
    st.header("Google AI")
    api_key = st.text_input("Gemini API key (saved locally)", value=load_api_key(), type="password")
    if api_key != load_api_key():
        save_api_key(api_key)
    st.caption(f"Step {st.session_state.step} of {len(STEPS)}: {STEPS[st.session_state.step]}")

step = st.session_state.step

# -------------------------------
# Step 1 — Upload template
# -------------------------------
if step == 1:
    st.subheader("Step 1: Upload Template")
    up = st.file_uploader("Upload a PDF, PNG, or JPG file.", type=["png", "jpg", "jpeg", "pdf"], key="template")
    if up is not None and (session.template is None or session.template.filename != up.name):
        with st.spinner("Processing Template..."):
            try:
                session.set_template(load_template(up.getvalue(), up.type, filename=up.name))
                st.session_state.archive = None
                st.session_state.step = 2
                st.rerun()
            except DocBatchError as e:
                show_error("Could not process the template file", e)
    if session.template is not None:
        st.image(session.template.preview_png, caption=session.template.filename)

# -------------------------------
# Step 2 — Placeholders
# -------------------------------
elif step == 2:
    st.subheader("Step 2: Define Placeholders")
    tmpl = session.template
    col_canvas, col_list = st.columns([3, 2])

    with col_canvas:
        st.markdown("**Draw a rectangle, then click Add.**")
        size = canvas_size(tmpl)
        bg = Image.open(io.BytesIO(tmpl.preview_png)).resize(size)
        c = st_canvas(
            fill_color="rgba(34,197,94,0.25)",
            stroke_width=2,
            stroke_color="#22C55E",
            background_image=bg,
            initial_drawing=overlay_drawing(session.placeholders, tmpl.native_size, size),
            update_streamlit=True,
            height=size[1],
            width=size[0],
            drawing_mode="rect",
            key=f"canvas_{len(session.placeholders)}",
        )
        new_name = st.text_input("Placeholder name", value=session.default_name())
        if st.button("➕ Add last drawn rectangle"):
            drawn = last_rect_from_canvas_json(c.json_data, len(session.placeholders))
            if drawn is None:
                st.error("Draw a rectangle first.")
            else:
                try:
                    session.add_placeholder(screen_to_native(drawn, size, tmpl.native_size), name=new_name)
                    st.rerun()
                except DocBatchError as e:
                    show_error("Could not add placeholder", e)

    with col_list:
        if st.button("✨ Auto-Detect Placeholders", disabled=not api_key):
            with st.spinner("Analyzing..."):
                try:
                    added = session.add_detected_placeholders(ai.detect_placeholders(api_key, tmpl))
                    st.success(f"{len(added)} placeholders detected!")
                except DocBatchError as e:
                    show_error("Detection failed", e)

        for p in list(session.placeholders):
            with st.container(border=True):
                c1, c2, c3, c4 = st.columns([3, 2, 1, 1])
                c1.markdown(f"**{p.name}**")
                font_size = c2.number_input("Font", value=float(p.font_size), min_value=1.0, step=1.0, key=f"fs_{p.id}")
                color = c3.color_picker("Color", value=p.color, key=f"col_{p.id}")
                if c4.button("✖", key=f"del_{p.id}"):
                    session.delete_placeholder(p.id)
                    st.rerun()
                if font_size != p.font_size or color != p.color:
                    session.update_placeholder(p.id, font_size=font_size, color=color)

        st.divider()
        if session.placeholders:
            st.download_button("💾 Download layout.json", data=layout_to_json(session.placeholders, tmpl.native_size),
                               file_name="layout.json", mime="application/json")
        up_layout = st.file_uploader("Load layout (JSON)", type=["json"], key="layout")
        if up_layout is not None and st.button("Apply layout"):
            try:
                placeholders, native_size = layout_from_json(up_layout.getvalue().decode("utf-8", errors="replace"))
                if any(abs(a - b) > 1 for a, b in zip(native_size, tmpl.native_size)):
                    st.warning("Layout was saved for a template of a different size.")
                session.apply_layout(placeholders)
                st.rerun()
            except DocBatchError as e:
                show_error("Could not apply layout", e)

# -------------------------------
# Step 3 — Data
# -------------------------------
elif step == 3:
    st.subheader("Step 3: Provide Data")
    TAB_MANUAL, TAB_AI = st.tabs(["Manual", "AI"])

    with TAB_MANUAL:
        for idx, row in enumerate(list(session.rows), start=1):
            with st.expander(f"Document {idx}", expanded=True):
                for p in session.placeholders:
                    value = st.text_input(p.key, value=row.value_for(p.key), key=f"v_{row.id}_{p.id}")
                    if value != row.value_for(p.key):
                        session.set_value(row.id, p.key, value)
                if st.button("Remove row", key=f"rm_{row.id}"):
                    session.remove_row(row.id)
                    st.rerun()
        if st.button("Add Row"):
            session.add_row()
            st.rerun()

    with TAB_AI:
        sources = st.file_uploader("1. Knowledge Source (PDFs)", type=["pdf"], accept_multiple_files=True)
        if st.button("Extract Text with OCR", disabled=not sources):
            bar = st.progress(0, text="")

            def on_ocr(progress: OcrProgress):
                bar.progress(progress.percent, text=progress.status)

            try:
                st.session_state.extracted_text = extract_text_from_pdfs([f.getvalue() for f in sources], on_ocr)
            except DocBatchError as e:
                show_error("OCR failed", e)

        if st.session_state.extracted_text:
            st.text_area("Extracted text", value=st.session_state.extracted_text, height=160, disabled=True)
            prompt = st.text_area("2. Instructions for AI",
                                  placeholder="e.g., 'Extract the full name, address, and total amount...'")
            if st.button("Generate Data with AI", disabled=not api_key):
                with st.spinner("Generating data..."):
                    try:
                        records = ai.generate_rows(api_key, st.session_state.extracted_text, prompt, session.keys)
                        session.replace_rows(records)
                        st.success(f"{len(records)} data rows generated!")
                    except DocBatchError as e:
                        show_error("AI Error", e)

# -------------------------------
# Step 4 — Generate
# -------------------------------
elif step == 4:
    st.subheader("Step 4: Generate & Download")
    st.write(f"You will generate **{len(session.rows)}** document(s).")
    if st.button("🧾 Generate Documents", disabled=session.busy or not session.rows):
        bar = st.progress(0, text="Generating...")
        st.session_state.archive = None
        try:
            with session.generating() as job:
                st.session_state.archive = generate_archive(
                    job, lambda percent: bar.progress(percent, text=f"Generating... {percent}%"))
            st.success("Documents generated.")
        except DocBatchError as e:
            show_error("Generation Error", e)

    if st.session_state.archive:
        st.download_button(f"⬇️ Download {ARCHIVE_NAME}", data=st.session_state.archive,
                           file_name=ARCHIVE_NAME, mime="application/zip")

# -------------------------------
# Wizard navigation
# -------------------------------
st.divider()
nav_back, nav_info, nav_next = st.columns([1, 2, 1])
if nav_back.button("Back", disabled=step == 1):
    st.session_state.step = max(1, step - 1)
    st.rerun()
nav_info.caption(f"Step {step} of {len(STEPS)}")
if nav_next.button("Next", disabled=step == len(STEPS) or not session.can_proceed(step)):
    st.session_state.step = min(len(STEPS), step + 1)
    st.rerun()

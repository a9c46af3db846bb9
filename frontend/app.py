import asyncio
import datetime
import logging

import requests
import streamlit as st

from config.settings import settings
from frontend.downloads import fetch_image, result_filename
from frontend.progress import stage_label
from frontend.selection import accept_uploads
from frontend.studio import Studio

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@st.cache_data(show_spinner=False)
def load_result_bytes(image_url: str):
    try:
        _, data = fetch_image(image_url)
        return data
    except (requests.RequestException, OSError):
        return None


def show_notices(studio: Studio):
    for notice in studio.drain_notices():
        if notice.level == "error":
            st.error(notice.message)
        elif notice.level == "success":
            st.success(notice.message)
        else:
            st.info(notice.message)


# ==========================
# Page
# ==========================
st.set_page_config(page_title="Image Studio", page_icon="🎨", layout="wide")

st.title("🎨 Image Studio")
st.caption("Edit images with nano-banana or generate new ones with Gemini 2.5 Flash")

# ==========================
# State
# ==========================
if "studio" not in st.session_state:
    st.session_state["studio"] = Studio(clipboard=lambda ref: st.session_state.update(copied_url=ref))

studio: Studio = st.session_state["studio"]

left, right = st.columns(2)

# ==========================
# Upload & controls
# ==========================
with left:
    mode_option = st.radio("Mode", ["🖌️ Edit Images", "✨ Generate Image"], horizontal=True)
    mode = "edit" if mode_option.startswith("🖌️") else "generate"

    sources = []
    if mode == "edit":
        uploads = st.file_uploader(
            f"Drag & drop images (max {settings.MAX_IMAGES} images, 10MB each)",
            type=["jpeg", "jpg", "png", "webp"],
            accept_multiple_files=True,
        )
        selection = accept_uploads(uploads or [])
        for reason in selection.rejected:
            st.warning(reason)
        sources = selection.accepted

        if sources:
            cols = st.columns(min(len(sources), 3))
            for i, source in enumerate(sources):
                with cols[i % len(cols)]:
                    st.image(source.read(), caption=str(i + 1), use_container_width=True)
            st.caption(f"{len(sources)} image(s) selected")

    prompt = st.text_area(
        "Prompt",
        placeholder="Describe how you want to edit the image(s)..." if mode == "edit"
        else "Describe the image you want to generate...",
        height=100,
    )
    if mode == "generate":
        st.caption('Example: "a tiger fighting with a lion in a city, realistic photo 8k"')

    if mode == "edit":
        label = f"Edit {len(sources)} Image(s)" if sources else "Edit Images"
        ready = bool(sources) and bool(prompt.strip())
    else:
        label = "Generate Image"
        ready = bool(prompt.strip())

    if st.button(label, disabled=not ready or studio.busy, use_container_width=True, type="primary"):
        bar = st.progress(0, text=stage_label(0))
        studio.progress.on_change = lambda v: bar.progress(v, text=stage_label(v))
        try:
            asyncio.run(studio.submit(mode, prompt, sources, settle=True))
        finally:
            studio.progress.on_change = None

    show_notices(studio)

# ==========================
# Results
# ==========================
with right:
    results = studio.results()
    header, action = st.columns([3, 1])
    header.subheader(f"Results ({len(results)})")
    if results and action.button("Clear"):
        studio.clear_history()
        st.rerun()

    if not results:
        st.info("No results yet. Upload images and process them to see results here")

    for index, result in enumerate(results, start=1):
        with st.container(border=True):
            ts = datetime.datetime.fromtimestamp(result.timestamp).strftime("%H:%M:%S")
            st.markdown(f"**{result.label}** · {ts}")
            st.image(result.url, use_container_width=True)
            st.caption(result.prompt)

            data = load_result_bytes(result.url)
            c1, c2 = st.columns(2)
            if data:
                c1.download_button(
                    "⬇️ Download",
                    data=data,
                    file_name=result_filename(index),
                    mime="image/png",
                    key=f"download_{result.timestamp}",
                )
            else:
                c1.warning("Failed to download image")
            if c2.button("Copy URL", key=f"copy_{result.timestamp}"):
                studio.copy_reference(result.url)

    if st.session_state.get("copied_url"):
        st.code(st.session_state["copied_url"], language=None)
        show_notices(studio)

    st.markdown("---")
    st.write("🔗 Backend:", settings.BACKEND_URL)

import streamlit as st
import httpx
import base64
import asyncio
import time

from app.core.config import settings
from app.core.constants import LANGUAGES, TONES
from app.core.exceptions import RemoteGenerationError
from app.models.content import ContentType, GenerationRequest
from app.services.generation_client import ApiGenerationClient

# --- PAGE CONFIG ---
st.set_page_config(
    page_title="CopyCraft AI Content Studio",
    page_icon="✍️",
    layout="wide",
    initial_sidebar_state="expanded"
)

API_ROOT = f"{settings.API_BASE_URL.rstrip('/')}{settings.API_V1_STR}"
TONE_LABELS = {t["value"]: t["label"] for t in TONES}
LANGUAGE_LABELS = {l["value"]: l["label"] for l in LANGUAGES}

# --- SESSION STATE ---
if "access_token" not in st.session_state:
    st.session_state.access_token = ""
if "generated" not in st.session_state:
    st.session_state.generated = None
if "bulk_job" not in st.session_state:
    st.session_state.bulk_job = None


def auth_headers():
    if st.session_state.access_token:
        return {"Authorization": f"Bearer {st.session_state.access_token}"}
    return {}


def fetch_usage():
    try:
        resp = httpx.get(f"{API_ROOT}/auth/me", headers=auth_headers(), timeout=10.0)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        st.sidebar.error(f"Could not load account status: {e}")
        return None


def error_message(resp: httpx.Response) -> str:
    try:
        return resp.json().get("error") or resp.json().get("detail") or resp.text
    except ValueError:
        return f"Request failed with status: {resp.status_code}"


# --- SIDEBAR: ACCOUNT ---
with st.sidebar:
    st.header("👤 Account")
    email = st.text_input("Email for a magic sign-in link")
    if st.button("📧 Send magic link") and email:
        resp = httpx.post(f"{API_ROOT}/auth/magic-link", json={"email": email}, timeout=15.0)
        if resp.is_success:
            st.success("Check your inbox for the sign-in link.")
        else:
            st.error(error_message(resp))

    st.session_state.access_token = st.text_input(
        "Access token", value=st.session_state.access_token, type="password"
    )
    usage = fetch_usage()
    if usage and usage["state"] != "unauthenticated":
        st.metric("Usage", f"{usage['usage_count']}/{usage['usage_limit']} uses")
        if usage["is_limit_reached"]:
            st.warning("You have reached your free usage limit for this account.")
    else:
        st.info("Please sign up or log in to generate content.")

is_limit_reached = usage["is_limit_reached"] if usage else True

st.title("✍️ CopyCraft AI Content Studio")
st.markdown("### Product descriptions, SEO metadata and social posts in seconds")

single_tab, bulk_tab, contact_tab = st.tabs(["Single product", "Bulk upload", "Contact"])

# --- SINGLE PRODUCT ---
with single_tab:
    with st.form("single"):
        product_name = st.text_input("Product name")
        description = st.text_area("Description, details or keywords")
        col1, col2, col3 = st.columns(3)
        with col1:
            tone = st.selectbox("Tone of voice", list(TONE_LABELS), format_func=TONE_LABELS.get)
        with col2:
            language = st.selectbox("Language", list(LANGUAGE_LABELS), format_func=LANGUAGE_LABELS.get)
        with col3:
            content_type = st.selectbox("Content type", [c.value for c in ContentType])
        image = st.file_uploader("Product image (optional)", type=["jpg", "jpeg", "png", "webp"])
        submitted = st.form_submit_button("🚀 Generate", disabled=is_limit_reached)

    if submitted:
        if not product_name or not description:
            st.error("Please fill in the product name and description.")
        else:
            request = GenerationRequest(
                productName=product_name,
                description=description,
                tone=tone,
                language=language,
                contentType=content_type,
                imageData=base64.b64encode(image.getvalue()).decode("utf-8") if image else None,
                imageMimeType=image.type if image else None,
            )
            client = ApiGenerationClient(access_token=st.session_state.access_token)
            with st.spinner("Generating content..."):
                try:
                    st.session_state.generated = asyncio.run(client.generate(request))
                except RemoteGenerationError as e:
                    st.error(e.message)

    result = st.session_state.generated
    if result is not None:
        st.write("---")
        if result.socialMediaPosts:
            st.subheader("📣 Social media posts")
            for post in result.socialMediaPosts:
                st.info(post)
        for idx, text in enumerate(result.descriptions or []):
            st.subheader(f"📝 Description {idx + 1}")
            st.write(text)
        if result.seo:
            st.subheader("🔎 SEO")
            st.write(f"**Meta title:** {result.seo.metaTitle}")
            st.write(f"**Meta description:** {result.seo.metaDescription}")
            st.write(f"**Keywords:** {', '.join(result.seo.keywords)}")
        if result.featureBullets:
            st.subheader("✅ Feature bullets")
            st.markdown("\n".join(f"- {b}" for b in result.featureBullets))
        if result.targetAudience:
            st.subheader("🎯 Target audience")
            st.write(result.targetAudience)
        if result.callToActions:
            st.subheader("👉 Calls to action")
            st.markdown("\n".join(f"- {c}" for c in result.callToActions))
        if result.hashtags:
            st.subheader("#️⃣ Hashtags")
            st.write(" ".join(f"#{h}" for h in result.hashtags))

# --- BULK UPLOAD ---
with bulk_tab:
    st.write("Upload a CSV or XLSX file with `product_name` and `description` columns.")
    bulk_tone = st.selectbox("Tone of voice (for all products)", list(TONE_LABELS),
                             format_func=TONE_LABELS.get, key="bulk_tone")
    bulk_file = st.file_uploader("Products file", type=["csv", "xlsx"], key="bulk_file")

    template = httpx.get(f"{API_ROOT}/bulk/template", timeout=10.0)
    if template.is_success:
        st.download_button("📄 Download CSV Template", template.content, "template.csv", "text/csv")

    if st.button("⚙️ Process File", disabled=is_limit_reached or bulk_file is None):
        resp = httpx.post(
            f"{API_ROOT}/bulk/upload",
            headers=auth_headers(),
            files={"file": (bulk_file.name, bulk_file.getvalue())},
            data={"tone": bulk_tone, "language": settings.BULK_DEFAULT_LANGUAGE},
            timeout=60.0,
        )
        if not resp.is_success:
            st.error(error_message(resp))
        else:
            job_id = resp.json()["job_id"]
            progress_bar = st.progress(0)
            status_text = st.empty()

            while True:
                job = httpx.get(f"{API_ROOT}/bulk/status/{job_id}", timeout=10.0).json()
                progress = job["progress"]
                if progress["total"]:
                    progress_bar.progress(progress["current"] / progress["total"])
                status_text.info(
                    f"Generating content for: **{progress['current_label']}** "
                    f"({progress['current']}/{progress['total']})"
                )
                if job["status"] in ("completed", "failed"):
                    break
                time.sleep(1)

            status_text.empty()
            st.session_state.bulk_job = job

    job = st.session_state.bulk_job
    if job:
        if job["status"] == "failed":
            st.error(job.get("error", "Failed to parse or process file."))
        else:
            total = job["success_count"] + job["failure_count"]
            st.success(f"Successfully generated descriptions for {job['success_count']} of {total} products.")
            for fmt, label in (("csv", "📥 Download CSV"), ("xlsx", "📥 Download Excel (.xlsx)")):
                export = httpx.get(f"{API_ROOT}/bulk/download/{job['job_id']}", params={"format": fmt}, timeout=30.0)
                if export.is_success:
                    st.download_button(label, export.content, f"generated_products.{fmt}", key=f"dl_{fmt}")
            if job["failures"]:
                st.subheader(f"Failed Products ({len(job['failures'])}):")
                for fail in job["failures"]:
                    st.markdown(f"**{fail['product_name']}**: _{fail['error']}_")
        if st.button("🔄 Start Over"):
            st.session_state.bulk_job = None
            st.rerun()

# --- CONTACT ---
with contact_tab:
    with st.form("contact"):
        name = st.text_input("Name")
        contact_email = st.text_input("Email")
        message = st.text_area("Message")
        sent = st.form_submit_button("Send")
    if sent:
        resp = httpx.post(
            f"{API_ROOT}/contact",
            json={"name": name, "email": contact_email, "message": message},
            timeout=15.0,
        )
        if resp.is_success:
            st.success("Thanks! Your message has been sent.")
        else:
            st.error(error_message(resp))

st.markdown("---")
st.caption("Powered by Gemini AI | Built with Streamlit")

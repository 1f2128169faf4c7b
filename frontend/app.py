# frontend/app.py

import json
import requests
import streamlit as st

DEFAULT_BACKEND_URL = "http://localhost:8000/scan"


def call_backend(backend_url: str, image_bytes: bytes, filename: str, mime: str = "image/jpeg"):
    """Send the photo to the FastAPI backend and return the JSON response."""
    files = {"file": (filename, image_bytes, mime)}
    try:
        resp = requests.post(backend_url, files=files, timeout=60)
    except requests.exceptions.RequestException as e:
        st.error(f"Error calling backend: {e}")
        return None

    try:
        return resp.json()
    except ValueError as e:
        st.error(f"Error parsing backend response as JSON: {e}")
        return None


def reset():
    for key in ("scan_result", "camera"):
        st.session_state.pop(key, None)


def show_history(data: dict):
    summary = data.get("summary", {})
    c1, c2, c3 = st.columns(3)
    c1.metric("Visits", summary.get("total_visits", 0))
    c2.metric("Total spent", f"₱{summary.get('total_spent', 0):,.0f}")
    c3.metric("Services", summary.get("total_services", 0))

    for visit in data.get("history", []):
        title = f"Visit #{visit['visit_number']} · {visit['date']} · ₱{visit['total_cost']:,.0f}"
        with st.expander(title, expanded=visit["visit_number"] == 1):
            for repair in visit.get("repairs", []):
                st.markdown(f"**{repair['service']}** ({repair['status']})")
                st.write(
                    f"Invoice {repair['invoice_number']} · {repair['timestamp']} · "
                    f"{repair['technician']} · ₱{repair['cost']:,.0f}"
                )
                if repair.get("parts"):
                    st.caption(", ".join(repair["parts"]))
                details = repair.get("vehicle_details")
                if details:
                    st.caption(
                        f"{details['year']} {details['make']} {details['model']} ({details['color']})"
                    )


def main():
    st.set_page_config(page_title="Plate Scanner", layout="centered")

    st.title("Plate Scanner")
    st.write("Take a photo of a vehicle's front to read its plate and show its service history.")

    with st.sidebar:
        st.header("Backend Settings")
        backend_url = st.text_input(
            "Backend /scan URL",
            value=DEFAULT_BACKEND_URL,
            help="Make sure your FastAPI backend is running on this URL.",
        )
        st.markdown("---")
        st.button("Reset", on_click=reset)

    photo = st.camera_input("Point the camera at the plate", key="camera")

    if photo is None:
        st.info("Enable the camera and take a photo to begin.")
        return

    if st.button("Scan plate"):
        with st.spinner("Reading plate..."):
            st.session_state["scan_result"] = call_backend(
                backend_url.strip(), photo.getvalue(), photo.name or "capture.jpg", photo.type or "image/jpeg"
            )

    result = st.session_state.get("scan_result")
    if result is None:
        return

    status = result.get("status")
    data = result.get("data", {})

    if status == "error":
        st.error(f"Backend returned an error: {result.get('detail')}")
    elif status == "no_plate":
        st.warning("No plate detected")
    elif status == "ok":
        st.success(f"Plate: {data.get('plate')}")
        st.subheader("Service History")
        show_history(data)
    else:
        st.error(f"Unexpected backend response: {result}")

    with st.expander("Raw JSON response (debug)"):
        if data.get("ocr_text") is not None:
            st.write(f'OCR returned: "{data["ocr_text"][:100]}"')
        st.code(json.dumps(result, indent=2), language="json")


if __name__ == "__main__":
    main()

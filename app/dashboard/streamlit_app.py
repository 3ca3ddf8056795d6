"""Admin dashboard for the Real Estate API.

Requires: API server running (see API_BASE_URL)
Start API: cd app && python cli.py server
Start Dashboard: streamlit run app/dashboard/streamlit_app.py
"""

from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from config import get_settings
from dashboard.api_client import LISTING_KINDS, AdminApiClient, ApiError
from dashboard.forms import (
    HOUSE_TYPES,
    LAND_TYPES,
    RENT_PERIODS,
    build_listing_payload,
    status_options,
    validate_listing_form,
)

API_BASE_URL = get_settings().api_base_url

st.set_page_config(
    page_title="Real Estate Admin",
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)


# =============================================================================
# Session helpers
# =============================================================================


def get_client() -> AdminApiClient:
    if "client" not in st.session_state:
        st.session_state.client = AdminApiClient(API_BASE_URL)
    return st.session_state.client


def call(fn, *args, **kwargs) -> Optional[Any]:
    """Run a client call and surface API errors in the page."""
    try:
        return fn(*args, **kwargs)
    except ApiError as e:
        if e.status_code == 401:
            get_client().logout()
            st.session_state.pop("admin", None)
        st.error(f"API Error: {e.message}")
        return None


def to_frame(rows: List[Dict[str, Any]], columns: List[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    available = [c for c in columns if c in df.columns]
    return df[available] if available else df


# =============================================================================
# Login
# =============================================================================


def render_login() -> None:
    st.title("🏠 Real Estate Admin")
    client = get_client()
    if not client.health():
        st.warning(f"⚠️ API is not reachable at {API_BASE_URL}")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted:
        admin = call(client.login, email, password)
        if admin:
            st.session_state.admin = admin
            st.rerun()


def render_sidebar() -> str:
    with st.sidebar:
        st.title("🏠 Real Estate Admin")
        admin = st.session_state.get("admin", {})
        st.caption(f"Signed in as {admin.get('name', '')}")
        page = st.radio(
            "Navigate",
            [
                "Dashboard",
                "Manage Lands",
                "Manage Houses",
                "Manage Apartments",
                "Manage Payments",
                "Manage Users",
                "Teams",
                "Announcements",
                "Inspections",
            ],
        )
        st.divider()
        if st.button("Sign out"):
            get_client().logout()
            st.session_state.pop("admin", None)
            st.rerun()
    return page


# =============================================================================
# Dashboard
# =============================================================================


def render_dashboard() -> None:
    st.header("📊 Dashboard")
    client = get_client()
    data = call(client.dashboard)
    if not data:
        return

    counts = data.get("counts", {})
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Users", counts.get("users", 0))
    col2.metric("Properties", counts.get("properties", 0))
    col3.metric("Payments", counts.get("payments", 0))
    col4.metric("Revenue", f"${data.get('totalRevenue', 0):,.2f}")

    st.subheader("Property distribution")
    distribution = data.get("propertyDistribution", {})
    if distribution:
        st.bar_chart(pd.Series(distribution, name="listings"))

    left, right = st.columns(2)
    with left:
        st.subheader("Recent payments")
        payments = data.get("recentPayments", [])
        if payments:
            rows = [
                {
                    "id": p["id"],
                    "user": (p.get("user") or {}).get("name"),
                    "property": ((p.get("property") or p.get("land")) or {}).get("title"),
                    "amount": p["amount"],
                    "status": p["status"],
                    "paymentDate": p.get("paymentDate"),
                }
                for p in payments
            ]
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        else:
            st.info("No payments yet")
    with right:
        st.subheader("Recent users")
        users = data.get("recentUsers", [])
        if users:
            st.dataframe(
                to_frame(users, ["id", "name", "email", "role", "createdAt"]),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.info("No users yet")

    stats = call(client.stats)
    if stats:
        st.subheader("Status by kind")
        st.dataframe(pd.DataFrame(stats.get("propertyStatus", {})).fillna(0), use_container_width=True)


# =============================================================================
# Listings
# =============================================================================


def listing_form(kind: str, key: str, current: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Render the add/edit form and return the submitted values."""
    current = current or {}
    statuses = status_options(kind)
    with st.form(key, clear_on_submit=current == {}):
        values: Dict[str, Any] = {
            "title": st.text_input("Title", current.get("title", "")),
            "location": st.text_input("Location", current.get("location", "")),
            "price": st.number_input("Price", min_value=0.0, value=float(current.get("price", 0.0))),
            "size": st.text_input("Size", current.get("size", "")),
            "description": st.text_area("Description", current.get("description", "")),
            "status": st.selectbox(
                "Status",
                statuses,
                index=statuses.index(current["status"]) if current.get("status") in statuses else 0,
            ),
            "images": st.text_area("Image URLs (one per line)", "\n".join(current.get("images", []))),
            "features": st.text_area("Features (one per line)", "\n".join(current.get("features", []))),
            "video": st.text_input("Video URL", current.get("video") or ""),
            "brochure_url": st.text_input("Brochure URL", current.get("brochureUrl") or ""),
        }

        if kind == "lands":
            land_type = current.get("type") or LAND_TYPES[0]
            values["land_type"] = st.selectbox("Type", LAND_TYPES, index=LAND_TYPES.index(land_type))
        else:
            col1, col2, col3 = st.columns(3)
            values["bedrooms"] = col1.number_input("Bedrooms", min_value=0, value=int(current.get("bedrooms") or 0))
            values["bathrooms"] = col2.number_input("Bathrooms", min_value=0, value=int(current.get("bathrooms") or 0))
            values["year_built"] = col3.number_input("Year built", min_value=0, value=int(current.get("yearBuilt") or 0))
            values["rent_price"] = st.number_input("Rent price", min_value=0.0, value=float(current.get("rentPrice") or 0.0))
            values["rent_period"] = st.selectbox("Rent period", [""] + RENT_PERIODS)

        if kind == "houses":
            values["property_type"] = st.selectbox("Property type", HOUSE_TYPES)
            values["garage"] = st.checkbox("Garage", bool(current.get("garage")))
            values["garage_capacity"] = st.number_input("Garage capacity", min_value=0, value=int(current.get("garageCapacity") or 0))
            values["has_garden"] = st.checkbox("Garden", bool(current.get("hasGarden")))
            values["has_pool"] = st.checkbox("Pool", bool(current.get("hasPool")))
        elif kind == "apartments":
            values["floor"] = st.number_input("Floor", value=int(current.get("floor") or 0))
            values["unit"] = st.text_input("Unit", current.get("unit") or "")
            values["has_balcony"] = st.checkbox("Balcony", bool(current.get("hasBalcony")))
            values["has_parking_space"] = st.checkbox("Parking space", bool(current.get("hasParkingSpace")))
            values["has_elevator"] = st.checkbox("Elevator", bool(current.get("hasElevator")))
            values["building_amenities"] = st.text_area(
                "Building amenities (one per line)", "\n".join(current.get("buildingAmenities", []))
            )

        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return None
    errors = validate_listing_form(kind, values)
    for error in errors:
        st.error(error)
    return None if errors else values


def render_listings(kind: str) -> None:
    st.header(f"🏘️ Manage {kind.capitalize()}")
    client = get_client()

    col1, col2 = st.columns([1, 3])
    page = col1.number_input("Page", min_value=1, value=1, key=f"{kind}_page")
    result = call(client.list_listings, kind, page=int(page), limit=20)
    listings = (result or {}).get("data", [])
    if result:
        pagination = result.get("pagination", {})
        col2.caption(f"{pagination.get('total', 0)} {kind} · page {pagination.get('page')} of {pagination.get('pages')}")

    if listings:
        st.dataframe(
            to_frame(listings, ["id", "title", "location", "price", "size", "status", "createdAt"]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info(f"No {kind} yet")

    add_tab, edit_tab, delete_tab = st.tabs(["➕ Add", "✏️ Edit", "🗑️ Delete"])

    with add_tab:
        values = listing_form(kind, f"add_{kind}")
        if values and call(client.create_listing, kind, build_listing_payload(kind, values)):
            st.success("Listing created")

    by_id = {listing["id"]: listing for listing in listings}
    with edit_tab:
        if by_id:
            listing_id = st.selectbox("Listing", list(by_id), format_func=lambda i: f"{i} · {by_id[i]['title']}", key=f"edit_{kind}_id")
            values = listing_form(kind, f"edit_{kind}", by_id[listing_id])
            if values and call(client.update_listing, kind, listing_id, build_listing_payload(kind, values)):
                st.success("Listing updated")

    with delete_tab:
        if by_id:
            listing_id = st.selectbox("Listing", list(by_id), format_func=lambda i: f"{i} · {by_id[i]['title']}", key=f"delete_{kind}_id")
            if st.button("Delete", type="primary", key=f"delete_{kind}"):
                if call(client.delete_listing, kind, listing_id):
                    st.success("Listing deleted")
                    st.rerun()


# =============================================================================
# Payments & users
# =============================================================================


def render_payments() -> None:
    st.header("💳 Manage Payments")
    client = get_client()
    status = st.selectbox("Status", ["", "Pending", "Completed", "Failed"])
    result = call(client.list_payments, page=1, limit=100, status=status or None)
    payments = (result or {}).get("data", [])
    if not payments:
        st.info("No payments found")
        return

    st.dataframe(
        to_frame(payments, ["id", "userId", "amount", "method", "status", "propertyId", "landId", "paymentDate"]),
        use_container_width=True,
        hide_index=True,
    )

    pending = [p["id"] for p in payments if p["status"] == "Pending"]
    if pending:
        payment_id = st.selectbox("Pending payment", pending)
        col1, col2 = st.columns(2)
        if col1.button("Mark completed", type="primary") and call(client.complete_payment, payment_id):
            st.success(f"Payment {payment_id} completed")
            st.rerun()
        if col2.button("Mark failed") and call(client.fail_payment, payment_id):
            st.warning(f"Payment {payment_id} failed")
            st.rerun()


def render_users() -> None:
    st.header("👥 Manage Users")
    client = get_client()
    result = call(client.list_users, page=1, limit=100)
    users = (result or {}).get("data", [])
    if not users:
        st.info("No users found")
        return

    st.dataframe(
        to_frame(users, ["id", "name", "email", "phone", "role", "createdAt"]),
        use_container_width=True,
        hide_index=True,
    )

    by_id = {u["id"]: u for u in users}
    user_id = st.selectbox("User", list(by_id), format_func=lambda i: f"{by_id[i]['name']} <{by_id[i]['email']}>")

    details = call(client.user_details, user_id)
    if details:
        owned = sum(len(v) for v in details.get("properties", {}).values())
        st.caption(f"{owned} purchased properties · {len(details.get('payments', []))} payments")

    col1, col2 = st.columns(2)
    role = col1.selectbox("Role", ["user", "admin"], index=0 if by_id[user_id]["role"] == "user" else 1)
    if col1.button("Update role") and call(client.update_user_role, user_id, role):
        st.success("Role updated")
        st.rerun()
    if col2.button("Delete user", type="primary") and call(client.delete_user, user_id):
        st.success("User deleted")
        st.rerun()


def render_placeholder(resource: str) -> None:
    st.header(resource.capitalize())
    items = call(get_client().list_placeholder, resource)
    st.info(f"{resource.capitalize()} are coming soon.")
    if items:
        st.dataframe(pd.DataFrame(items), use_container_width=True, hide_index=True)


def main() -> None:
    if "admin" not in st.session_state:
        render_login()
        return

    page = render_sidebar()
    if page == "Dashboard":
        render_dashboard()
    elif page.startswith("Manage ") and page.split(" ", 1)[1].lower() in LISTING_KINDS:
        render_listings(page.split(" ", 1)[1].lower())
    elif page == "Manage Payments":
        render_payments()
    elif page == "Manage Users":
        render_users()
    else:
        render_placeholder(page.lower())


if __name__ == "__main__":
    main()

# crowdfund_client/streamlit_app.py
#
#   streamlit run crowdfund_client/streamlit_app.py

import streamlit as st

from crowdfund_client.api import ApiError, CrowdfundClient
from crowdfund_client.state import (
    ClientState,
    add_tag,
    format_currency,
    progress_percentage,
    remove_tag,
    validate_event_form,
    validate_registration,
)

# ---------------- Page config ----------------
st.set_page_config(page_title="Sahayog - Crowdfunding", layout="wide", page_icon="💚")

PAGES = ["Home", "Campaigns", "Start a campaign", "My campaigns", "About"]


# ---------------- Session ----------------
def init_session():
    if "client" not in st.session_state:
        st.session_state.client = CrowdfundClient()
    if "ui" not in st.session_state:
        st.session_state.ui = ClientState()
    st.session_state.setdefault("page", "Home")
    st.session_state.setdefault("edit_event_id", None)
    st.session_state.setdefault("form_tags", [])


def go(page):
    st.session_state.page = page
    st.rerun()


def navigate():
    st.session_state.page = st.session_state.nav
    st.session_state.edit_event_id = None
    st.session_state.form_tags = []


def image_src(event):
    client = st.session_state.client
    if event.get("imageUrl"):
        return event["imageUrl"]
    if event.get("uploadedImage"):
        return client.url(event["uploadedImage"])
    return None


# ---------------- Sidebar ----------------
def sidebar():
    ui = st.session_state.ui
    client = st.session_state.client
    with st.sidebar:
        st.title("💚 Sahayog")
        st.radio("Navigate", PAGES, key="nav", on_change=navigate)

        st.divider()
        if ui.logged_in:
            st.write(f"Signed in as **{ui.user.get('firstName')} {ui.user.get('lastName')}**")
            if st.button("Log out"):
                try:
                    client.logout()
                except ApiError as e:
                    st.error(e.message)
                ui.clear_user()
                go("Home")
        else:
            if st.button("Log in"):
                go("Login")
            if st.button("Register"):
                go("Register")


# ---------------- Pages ----------------
def landing_page():
    st.header("Small contributions, big change")
    st.write("Start a fundraising campaign in minutes or back a cause you care about.")
    col1, col2 = st.columns(2)
    if col1.button("Browse campaigns"):
        go("Campaigns")
    if col2.button("Start a campaign"):
        go("Start a campaign")


def contribution_widget(event):
    client = st.session_state.client
    ui = st.session_state.ui
    with st.form(f"contribute_{event['id']}", clear_on_submit=True):
        amount = st.number_input("Amount (₹)", min_value=0.0, step=100.0, key=f"amount_{event['id']}")
        if st.form_submit_button("Contribute"):
            try:
                result = client.contribute(event["id"], amount)
                ui.record_contribution(event["id"], result["currentAmount"])
                st.success(f"{result['message']} ({result['progress']:.1f}% of goal)")
            except ApiError as e:
                st.error(e.message)


def event_card(event, show_contribute):
    with st.container(border=True):
        src = image_src(event)
        if src:
            st.image(src, width="stretch")
        st.subheader(event["title"])
        st.write(event["description"])
        if event.get("tags"):
            st.caption(" · ".join(event["tags"][:3]) + (f" +{len(event['tags']) - 3} more" if len(event["tags"]) > 3 else ""))

        progress = progress_percentage(event["currentAmount"], event["amountToRaise"])
        st.progress(progress / 100)
        st.caption(
            f"Raised {format_currency(event['currentAmount'])} of {format_currency(event['amountToRaise'])}"
            f" · {progress:.1f}% funded"
        )
        owner = event.get("createdBy") or {}
        st.caption(f"By {owner.get('firstName', '')} {owner.get('lastName', '')}")
        if show_contribute:
            contribution_widget(event)


def events_page():
    client = st.session_state.client
    ui = st.session_state.ui
    st.header("Campaigns")

    col1, col2, col3 = st.columns([2, 2, 1])
    tags = col1.text_input("Tags (comma-separated)", value=ui.tags)
    search = col2.text_input("Search", value=ui.search)
    is_active = col3.checkbox("Active only", value=ui.is_active)
    ui.set_filters(tags=tags, is_active=is_active, search=search)

    params = ui.query_params()
    try:
        ui.apply_page(client.list_events(**params))
    except ApiError:
        st.error("Failed to fetch events")
        if st.button("Try again"):
            st.rerun()
        return

    events = ui.visible_events()
    if not events:
        st.info("No campaigns found.")
    columns = st.columns(3)
    for i, event in enumerate(events):
        with columns[i % 3]:
            event_card(event, show_contribute=ui.logged_in)

    prev_col, info_col, next_col = st.columns([1, 2, 1])
    if prev_col.button("Previous", disabled=ui.current_page <= 1):
        ui.prev_page()
        st.rerun()
    info_col.write(f"Page {ui.current_page} of {ui.total_pages} ({ui.total} campaigns)")
    if next_col.button("Next", disabled=ui.current_page >= ui.total_pages):
        ui.next_page()
        st.rerun()


def event_form_page():
    client = st.session_state.client
    ui = st.session_state.ui
    if not ui.logged_in:
        st.warning("Please log in to manage campaigns.")
        if st.button("Log in"):
            go("Login")
        return

    event_id = st.session_state.edit_event_id
    existing = {}
    if event_id:
        try:
            existing = client.get_event(event_id)
        except ApiError:
            st.error("Could not load event data for editing.")
            return
        if st.session_state.get("form_tags_for") != event_id:
            st.session_state.form_tags = list(existing.get("tags", []))
            st.session_state.form_tags_for = event_id

    st.header("Edit campaign" if event_id else "Start a campaign")

    tag_col, btn_col = st.columns([3, 1])
    new_tag = tag_col.text_input("Add a tag")
    if btn_col.button("Add tag"):
        st.session_state.form_tags = add_tag(st.session_state.form_tags, new_tag)
    for tag in st.session_state.form_tags:
        if st.button(f"✕ {tag}", key=f"rm_{tag}"):
            st.session_state.form_tags = remove_tag(st.session_state.form_tags, tag)
            st.rerun()

    with st.form("event_form"):
        title = st.text_input("Title", value=existing.get("title", ""))
        description = st.text_area("Description", value=existing.get("description", ""))
        amount = st.number_input("Amount to raise (₹)", min_value=0.0, step=500.0,
                                 value=float(existing.get("amountToRaise", 0.0)))
        image_url = st.text_input("Image URL", value=existing.get("imageUrl") or "")
        upload = None if event_id else st.file_uploader("Or upload an image", type=["png", "jpg", "jpeg", "gif", "webp"])
        is_active = st.checkbox("Active", value=existing.get("isActive", True)) if event_id else True
        submitted = st.form_submit_button("Update campaign" if event_id else "Create campaign")

    if not submitted:
        return

    error = validate_event_form(title, description, amount, image_size=upload.size if upload else None)
    if error:
        st.error(error)
        return

    try:
        if event_id:
            client.update_event(
                event_id,
                title=title,
                description=description,
                amountToRaise=amount,
                tags=st.session_state.form_tags,
                imageUrl=image_url,
                isActive=is_active,
            )
        else:
            image = (upload.name, upload, upload.type) if upload else None
            client.create_event(
                title,
                description,
                amount,
                tags=st.session_state.form_tags,
                image_url=None if upload else image_url,
                image=image,
            )
    except ApiError as e:
        st.error(e.message)
        return

    st.session_state.edit_event_id = None
    st.session_state.form_tags = []
    go("My campaigns")


def my_campaigns_page():
    client = st.session_state.client
    ui = st.session_state.ui
    st.header("My campaigns")
    if not ui.logged_in:
        st.warning("Please log in to see your campaigns.")
        return

    try:
        campaigns = client.my_events()
    except ApiError:
        st.error("Failed to fetch your campaigns. Please try again later.")
        if st.button("Try again"):
            st.rerun()
        return

    if not campaigns:
        st.info("You have not started any campaigns yet.")
    for event in campaigns:
        with st.container(border=True):
            st.subheader(event["title"])
            progress = progress_percentage(event["currentAmount"], event["amountToRaise"])
            st.progress(progress / 100)
            st.caption(f"{format_currency(event['currentAmount'])} raised of {format_currency(event['amountToRaise'])}"
                       f" · {'Active' if event['isActive'] else 'Inactive'}")
            edit_col, delete_col = st.columns(2)
            if edit_col.button("Edit", key=f"edit_{event['id']}"):
                st.session_state.edit_event_id = event["id"]
                go("Start a campaign")
            confirm = delete_col.checkbox("Confirm delete", key=f"confirm_{event['id']}")
            if delete_col.button("Delete", key=f"delete_{event['id']}", disabled=not confirm):
                try:
                    client.delete_event(event["id"])
                    ui.remove_event(event["id"])
                    st.rerun()
                except ApiError as e:
                    st.error(e.message)


def login_page():
    client = st.session_state.client
    ui = st.session_state.ui
    st.header("Log in")
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")
    if submitted:
        try:
            ui.set_user(client.login(email, password))
            go("Home")
        except ApiError as e:
            st.error(e.message)


def register_page():
    client = st.session_state.client
    ui = st.session_state.ui
    st.header("Create an account")
    with st.form("register"):
        first_name = st.text_input("First name")
        last_name = st.text_input("Last name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        avatar = st.text_input("Avatar URL (optional)")
        submitted = st.form_submit_button("Register")
    if not submitted:
        return

    errors = validate_registration(first_name, last_name, email, password)
    if errors:
        for message in errors.values():
            st.error(message)
        return
    try:
        client.register(first_name, last_name, email, password, avatar=avatar or None)
        # Registration does not open a session; log in to get the cookie
        ui.set_user(client.login(email, password))
        st.success(f"Welcome to Sahayog, {first_name}!")
        go("Home")
    except ApiError as e:
        st.error(e.message)


def about_page():
    st.header("About us")
    st.write(
        "Sahayog connects people who want to raise money for a cause with people who want to help. "
        "Anyone can browse campaigns and contribute; an account is needed to start one."
    )


ROUTES = {
    "Home": landing_page,
    "Campaigns": events_page,
    "Start a campaign": event_form_page,
    "My campaigns": my_campaigns_page,
    "Login": login_page,
    "Register": register_page,
    "About": about_page,
}


init_session()
sidebar()
ROUTES.get(st.session_state.page, landing_page)()

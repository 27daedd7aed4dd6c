"""Admin UI blueprint for the Offers service.

This module mounts the offers administration page at `/admin`. The page
talks to the Offers Service only through OfferAdminView and OffersClient;
it does not touch the database directly. With OFFERS_SERVICE_URL set the
client calls that service over HTTP, otherwise it calls this app's own
`/offers` routes in-process.

Each browser keeps its own draft and form mode in the Flask session, so any
worker can serve any request. The list of offers is fetched from the service
every time the page is displayed.
"""

from flask import Blueprint, abort, current_app, g, redirect, render_template, request, session, url_for

from service.common import status
from service.models import CONTENT_FIELDS
from service.ui.client import OffersClient
from service.ui.state import Composing, Draft, Editing
from service.ui.view import OfferAdminView

CLIENT_KEY = "offers_client"
DRAFT_KEY = "offer_draft"
EDITING_KEY = "offer_editing"

# Serve templates from service/templates
ui_bp = Blueprint(
    "ui",
    __name__,
    template_folder="../templates",
)


def _go_home():
    """Navigation collaborator: send the browser to the default route."""
    g.next_url = current_app.config.get("HOME_URL", "/")


def offers_client() -> OffersClient:
    """Return the app's OffersClient, creating it on first use."""
    client = current_app.extensions.get(CLIENT_KEY)
    if client is None:
        base_url = current_app.config.get("OFFERS_SERVICE_URL")
        if base_url:
            current_app.logger.info("Admin page uses the Offers Service at %s", base_url)
            client = OffersClient(base_url, timeout=current_app.config.get("OFFERS_SERVICE_TIMEOUT"))
        else:
            current_app.logger.info("Admin page uses this app's /offers in-process")
            client = OffersClient.in_process(current_app._get_current_object())  # pylint: disable=protected-access
        current_app.extensions[CLIENT_KEY] = client
    return client


def _remember(view: OfferAdminView):
    """Keep the browser's draft and mode in its session."""
    session[DRAFT_KEY] = view.draft.to_payload()
    session[EDITING_KEY] = view.editing_id


def admin_view() -> OfferAdminView:
    """Return this request's OfferAdminView, restored from the session."""
    if "offer_admin" not in g:
        saved = session.get(DRAFT_KEY) or {}
        draft = Draft(**{name: str(saved.get(name, "")) for name in CONTENT_FIELDS})
        editing = session.get(EDITING_KEY)
        mode = Editing(editing) if editing else Composing()
        view = OfferAdminView(offers_client(), navigate=_go_home, draft=draft, mode=mode)
        view.subscribe(_remember)
        g.offer_admin = view
    return g.offer_admin


def _stage_form(view: OfferAdminView):
    """Copy posted form fields into the draft."""
    for name in CONTENT_FIELDS:
        if name in request.form:
            view.edit_field(name, request.form[name])


def _back_to_page():
    return redirect(url_for("ui.index"), code=status.HTTP_303_SEE_OTHER)


@ui_bp.route("/admin", methods=["GET"])
def index():
    """Admin page: the offer form and the current offers."""
    view = admin_view()
    view.load()
    return render_template("admin.html", title="Offers Admin", view=view)


@ui_bp.route("/admin/draft", methods=["POST"])
def edit_draft():
    """Stage field edits without saving anything."""
    _stage_form(admin_view())
    return "", status.HTTP_204_NO_CONTENT


@ui_bp.route("/admin/submit", methods=["POST"])
def submit():
    """Add a new offer or update the one being edited."""
    view = admin_view()
    _stage_form(view)
    view.submit()
    return _back_to_page()


@ui_bp.route("/admin/offers/<offer_id>/edit", methods=["POST"])
def edit_offer(offer_id):
    """Load an offer into the form for editing."""
    view = admin_view()
    view.load()
    offer = view.find(offer_id)
    if offer is None:
        abort(status.HTTP_404_NOT_FOUND, f"Offer with id '{offer_id}' is not on the page.")
    view.begin_edit(offer)
    return _back_to_page()


@ui_bp.route("/admin/offers/<offer_id>/delete", methods=["POST"])
def delete_offer(offer_id):
    """Delete an offer."""
    admin_view().delete(offer_id)
    return _back_to_page()


@ui_bp.route("/admin/home", methods=["POST"])
def home():
    """Back to Home."""
    admin_view().navigate_home()
    return redirect(g.get("next_url", current_app.config.get("HOME_URL", "/")), code=status.HTTP_303_SEE_OTHER)

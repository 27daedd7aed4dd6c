"""
Package: service
Create and configure the Flask app, logging, and database
"""

import sys
from flask import Flask
from service import config
from service.common import log_handlers

# -----------------------------------------------------------------------------
# One global Flask app so `from service import app` gets the instance with all
# routes registered; create_app() returns the same app for tests and wsgi.py
# -----------------------------------------------------------------------------
app = Flask(__name__)
app.config.from_object(config)

# Bind the database plugin
from service.models import db  # pylint: disable=wrong-import-position
db.init_app(app)

# Offers admin page
from service.ui import ui_bp  # pylint: disable=wrong-import-position
app.register_blueprint(ui_bp)

with app.app_context():
    # Routes use current_app, so they must be imported inside the context
    from service import routes, models  # noqa: F401  pylint: disable=unused-import, wrong-import-position
    from service.common import error_handlers, cli_commands  # noqa: F401  pylint: disable=unused-import, wrong-import-position

    try:
        db.create_all()
    except Exception as err:  # pylint: disable=broad-except
        app.logger.critical("%s: Cannot continue", err)
        sys.exit(4)

    log_handlers.init_logging(app, "gunicorn.error")

    app.logger.info(70 * "*")
    app.logger.info("  O F F E R S   S E R V I C E   I N I T  ".center(70, "*"))
    app.logger.info(70 * "*")


def create_app():
    """Factory-style accessor to the (already created) global app."""
    return app

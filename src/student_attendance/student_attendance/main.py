from __future__ import annotations

import atexit
import logging

from flask import Flask, jsonify

from config import load_settings

from .container import build_container
from .core.exceptions import ValidationError
from .attendance.controller import register as register_attendance
from .directory.controller import register as register_directory
from .mail.controller import register as register_mail
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)


def create_app(settings=None) -> Flask:
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings=settings)
    app.extensions["container"] = container
    logger.info(
        "Loaded %s (groups=%d, students=%d)",
        container.store.path,
        len(container.directory.list_groups()),
        len(container.directory.list_students()),
    )

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    register_attendance(app, container)
    register_schedules(app, container)
    register_directory(app, container)
    register_mail(app, container)

    if getattr(settings, "MAIL_POLL_ENABLED", False):
        container.mail_poller.start()
        atexit.register(container.mail_poller.stop)

    return app

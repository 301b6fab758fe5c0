from __future__ import annotations

from flask import Flask, jsonify

from ..core.enums import IngestionStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/mail/check", methods=["POST"], endpoint="mail_check")
    def mail_check():
        result = container.mail_service.check_mail()
        if result.created:
            container.store.save(container.directory)

        status_code = 502 if result.status == IngestionStatus.FAILED else 200
        return jsonify(result.to_dict()), status_code

    @app.route("/mail/status", methods=["GET"], endpoint="mail_status")
    def mail_status():
        last = container.mail_service.last_result
        data = last.to_dict() if last else {"status": "IDLE"}
        data["running"] = container.mail_service.is_running
        return jsonify(data)

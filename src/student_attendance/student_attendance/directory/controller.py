from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/students/<student_id>/emails", methods=["POST"], endpoint="student_email_bind")
    def student_email_bind(student_id: str):
        payload = request.get_json(silent=True) or {}
        mapping = container.directory_service.bind_email(student_id=student_id, email=payload.get("email") or "")
        container.store.save(container.directory)
        return jsonify({"email": mapping.email, "student_id": mapping.student_id}), 201

    @app.route("/students/<student_id>", methods=["DELETE"], endpoint="student_delete")
    def student_delete(student_id: str):
        removed = container.directory_service.remove_student(student_id)
        if removed:
            container.store.save(container.directory)
        return jsonify({"removed": removed})

    @app.route("/submissions", methods=["GET"], endpoint="submissions_list")
    def submissions_list():
        rows = [
            {
                "id": s.submission_id,
                "student_id": s.student_id,
                "title": s.title,
                "received_date": s.received_date.isoformat(timespec="seconds"),
                "file_path": s.file_path,
                "message_id": s.message_id,
            }
            for s in container.directory.list_submissions(request.args.get("student_id"))
        ]
        return jsonify(rows)

    @app.route("/submissions/purge-orphans", methods=["POST"], endpoint="submissions_purge_orphans")
    def submissions_purge_orphans():
        removed = container.directory_service.purge_orphan_submissions()
        if removed:
            container.store.save(container.directory)
        return jsonify({"removed": removed})

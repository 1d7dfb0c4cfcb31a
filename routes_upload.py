from flask import Blueprint, request, jsonify, current_app, send_from_directory

from services import save_images

bp = Blueprint("upload", __name__)


@bp.post("/api/upload")
def upload():
    files = request.files.getlist("files")
    if not files:
        return jsonify({"error": "No files provided"}), 400
    try:
        urls = save_images(files, current_app.config["UPLOAD_FOLDER"])
    except OSError:
        current_app.logger.exception("Upload error")
        return jsonify({"error": "Upload failed"}), 500
    return jsonify({"urls": urls})


@bp.get("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)

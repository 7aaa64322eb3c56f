import logging
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from ..ingest.pipeline import ALLOWED, IngestError, IngestWriteError, ingest_file

logger = logging.getLogger(__name__)

bp = Blueprint("ingest", __name__)


@bp.post("/upload")
def upload():
    if "file" not in request.files:
        return jsonify({"error": "no file"}), 400
    f = request.files["file"]
    suffix = Path(f.filename or "").suffix.lower()
    if not f.filename or suffix not in ALLOWED:
        return jsonify({"error": "invalid format"}), 400

    updir = Path(current_app.config["UPLOAD_DIR"])
    updir.mkdir(parents=True, exist_ok=True)
    p = updir / secure_filename(f.filename)
    f.save(p)

    try:
        result = ingest_file(p)
    except IngestWriteError as e:
        logger.error(f"Ingest of {p.name} failed: {e}")
        return jsonify({"error": "ingest failed"}), 500
    except IngestError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Unreadable upload {p.name}: {e}")
        return jsonify({"error": f"ingest failed: {e}"}), 400
    finally:
        p.unlink(missing_ok=True)
    return jsonify({"message": "ingested", "rows": result.rows, "skipped": result.skipped})

"""Font detection web service."""

from __future__ import annotations

import logging
import os

from flask import Flask, jsonify, request

from font_grabber.acquisition import STATIC, make_acquirer
from font_grabber.catalog import detect_fonts
from font_grabber.errors import MissingURLError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ACQUISITION = os.environ.get("FONT_GRABBER_ACQUISITION", STATIC)

app = Flask(__name__)


def normalize_url(url: str) -> str:
    return url if url.startswith("http") else f"https://{url}"


@app.route("/api/detect-fonts", methods=["GET", "POST"])
def detect():
    payload = request.get_json(silent=True) or {}
    url = (payload.get("url") or request.form.get("url") or request.args.get("url") or "").strip()

    if not url:
        return jsonify({"error": "URL is required"}), 400

    try:
        catalog = detect_fonts(normalize_url(url), make_acquirer(app.config.get("ACQUISITION", ACQUISITION)))
    except MissingURLError:
        return jsonify({"error": "URL is required"}), 400
    except Exception as exc:
        logger.exception("Font detection failed for %s", url)
        return jsonify({"error": f"Failed to detect fonts: {exc}"}), 500
    return jsonify({"fonts": catalog.to_dict()})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000, debug=False)

"""
Local dev server for the signup functions.
Set env: KLAVIYO_API_KEY, KLAVIYO_LIST_ID, APP_ENV (optional, "development" echoes errors).
Run: python server.py  →  http://127.0.0.1:5001/api/quick-alert
"""
import importlib
import logging
import os
import pathlib

from dotenv import load_dotenv

load_dotenv(dotenv_path=pathlib.Path(__file__).resolve().parent / ".env")

from flask import Flask, Response, request

from api.config import Settings

logging.basicConfig(
    level=logging.DEBUG if os.environ.get("FLASK_DEBUG", "false").lower() == "true" else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Function files are named after their URL paths, so import them by string.
FUNCTIONS = {
    name: importlib.import_module(f"api.{name}")
    for name in ("quick-alert", "custom-alert", "newsletter")
}

SETTINGS = Settings.from_env()

app = Flask(__name__)


# ── Security headers ──

@app.after_request
def add_security_headers(response):
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


def event_from_request() -> dict:
    raw = request.get_data(as_text=True)
    return {
        "httpMethod": request.method,
        "path": request.path,
        "headers": {k.lower(): v for k, v in request.headers.items()},
        "body": raw or None,
    }


ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@app.route("/api/<name>", methods=ALL_METHODS)
@app.route("/.netlify/functions/<name>", methods=ALL_METHODS)
def run_function(name):
    """Alias paths keep frontends built against the old function URLs working."""
    module = FUNCTIONS.get(name)
    if module is None:
        return Response('{"error": "Not found"}', 404, content_type="application/json")
    result = module.handle(event_from_request(), SETTINGS)
    return Response(result["body"], result["statusCode"], headers=result["headers"])


@app.route("/health")
def health():
    return {"ok": True, "configured": SETTINGS.is_configured}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5001))
    print(f"Signup functions running at http://127.0.0.1:{port}/api/")
    if not SETTINGS.is_configured:
        logger.warning("KLAVIYO_API_KEY / KLAVIYO_LIST_ID not set in .env — every signup will return 500.")
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true")

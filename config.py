import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Invoice defaults
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "USD")

    # PDF rendering
    PDF_PAGE_SIZE = data.get("PDF_PAGE_SIZE", "A4")  # A4, LETTER or LEGAL
    PDF_MARGIN_PT = data.get("PDF_MARGIN_PT", 56.7)  # 20mm
    PDF_FONT_PATH = data.get("PDF_FONT_PATH", None)  # TTF; Helvetica when unset
    PDF_BOLD_FONT_PATH = data.get("PDF_BOLD_FONT_PATH", None)
    PDF_FOOTER_TEXT = data.get(
        "PDF_FOOTER_TEXT", "THIS IS A COMPUTER GENERATED INVOICE. NO SIGNATURE IS REQUIRED."
    )
    PDF_DOCUMENT_TITLE = data.get("PDF_DOCUMENT_TITLE", "Invoice App")

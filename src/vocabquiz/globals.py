import os

from fastapi.templating import Jinja2Templates

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATE_DIR = os.path.join(PACKAGE_DIR, "templates")
STATIC_DIR = os.path.join(PACKAGE_DIR, "static")

templates = Jinja2Templates(directory=TEMPLATE_DIR)

from pathlib import Path
from typing import Any, Dict

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, template_name: str, data_bag: Dict[str, Any], status_code: int = 200):
    """Render a template; the data bag keys are what the templates read."""
    return templates.TemplateResponse(request, template_name, data_bag, status_code=status_code)

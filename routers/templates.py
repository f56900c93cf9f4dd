from typing import List

from fastapi import APIRouter

from schemas.template import TemplateRead
from services.templates import TEMPLATES

router = APIRouter(prefix="/templates", tags=["templates"])


# /templates без слэша иначе перехватит /{username}
@router.get("", response_model=List[TemplateRead], include_in_schema=False)
@router.get(
    "/",
    response_model=List[TemplateRead],
    summary="Список шаблонов портфолио",
)
async def list_templates() -> List[TemplateRead]:
    return TEMPLATES

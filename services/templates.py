"""
Реестр шаблонов портфолио.

Сами шаблоны рендерит фронтенд; бэкенд хранит только выбранный id
и отдаёт метаданные для селектора в дашборде.
"""
from typing import Dict, List, Optional

from schemas.template import TemplateRead

DEFAULT_TEMPLATE = "elysian"

TEMPLATES: List[TemplateRead] = [
    TemplateRead(
        id="elysian",
        name="Elysian",
        description="Soft, warm 3-column gallery with feminine elegance",
        is_premium=False,
        accent_color="#FF7AA2",
        layout="hero-split",
        gallery_style="grid-3",
        industry_focus="Commercial/Lifestyle",
    ),
    TemplateRead(
        id="altar",
        name="Altar",
        description="Minimalist sophistication with clean 3-column grid",
        is_premium=False,
        accent_color="#C4A484",
        layout="hero-fullscreen",
        gallery_style="grid-3",
        industry_focus="Bridal/Luxury",
    ),
    TemplateRead(
        id="solstice",
        name="Solstice",
        description="Dynamic cinematic filmstrip with raw energy",
        is_premium=False,
        accent_color="#D4A574",
        layout="filmstrip",
        gallery_style="filmstrip",
        industry_focus="Fitness/Athletic",
    ),
    TemplateRead(
        id="obsidian",
        name="Obsidian",
        description="Moody high-contrast editorial layout",
        is_premium=True,
        accent_color="#1A1A1A",
        layout="editorial",
        gallery_style="masonry",
        industry_focus="Editorial/Fashion",
    ),
]

_BY_ID: Dict[str, TemplateRead] = {t.id: t for t in TEMPLATES}


def get_template(template_id: Optional[str]) -> Optional[TemplateRead]:
    if not template_id:
        return None
    return _BY_ID.get(template_id.strip().lower())


def is_known_template(template_id: Optional[str]) -> bool:
    return get_template(template_id) is not None


def resolve_template_id(template_id: Optional[str]) -> str:
    """Неизвестный или пустой id -> шаблон по умолчанию."""
    template = get_template(template_id)
    return template.id if template else DEFAULT_TEMPLATE

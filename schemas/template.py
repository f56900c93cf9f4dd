from pydantic import BaseModel, Field


class TemplateRead(BaseModel):
    id: str = Field(..., description="Идентификатор шаблона")
    name: str
    description: str
    is_premium: bool = False
    accent_color: str
    layout: str
    gallery_style: str
    industry_focus: str


class TemplateSelect(BaseModel):
    template_id: str = Field(..., min_length=1, max_length=32)

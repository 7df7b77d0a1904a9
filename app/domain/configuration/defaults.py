"""Built-in configuration profiles seeded into an empty store."""

from app.domain.configuration.schemas import (
    AIModelConfig,
    KnowledgeBaseConfig,
    ResponseFormattingConfig,
    WidgetAppearance,
)

DEFAULT_PROFILE_NAME = "Default Configuration"


def default_sections() -> dict[str, dict]:
    """Section values a new profile starts from."""
    return {
        "widget_appearance": WidgetAppearance().model_dump(),
        "knowledge_base": KnowledgeBaseConfig().model_dump(),
        "ai_model": AIModelConfig().model_dump(),
        "response_formatting": ResponseFormattingConfig().model_dump(),
    }


# Seed profiles: id, metadata and the section fields that differ from defaults
SEED_PROFILES: list[dict] = [
    {
        "id": "default",
        "name": DEFAULT_PROFILE_NAME,
        "description": "The default AI assistant configuration",
        "is_active": True,
    },
    {
        "id": "customer-support",
        "name": "Customer Support",
        "description": "Optimized for customer support interactions",
        "ai_model": {
            "model_type": "gemini",
            "temperature": 0.5,
            "max_tokens": 800,
            "top_p": 0.95,
        },
        "response_formatting": {
            "include_title": False,
            "include_faq": True,
            "include_disclaimer": True,
            "default_disclaimer": "For additional assistance, please contact our support team.",
            "heading_style": "question",
            "content_style": "steps",
            "max_length": 600,
        },
    },
    {
        "id": "sales-assistant",
        "name": "Sales Assistant",
        "description": "Configured for product inquiries and sales",
        "widget_appearance": {
            "primary_color": "#10b981",
            "font_family": "Poppins",
            "initial_message": (
                "Hello! I can help you find the perfect product for your needs. "
                "What are you looking for today?"
            ),
            "title": "Sales Assistant",
            "subtitle": "Product recommendations & more",
            "avatar_url": "https://api.dicebear.com/7.x/avataaars/svg?seed=sales",
        },
        "ai_model": {
            "temperature": 0.8,
            "max_tokens": 1200,
        },
    },
]

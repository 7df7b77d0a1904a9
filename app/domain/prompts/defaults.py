"""Built-in prompt templates, variable catalog and intent routing table."""

from datetime import timedelta

# Intent label -> template id
INTENT_TEMPLATE_MAP: dict[str, str] = {
    "general inquiry": "general",
    "technical support": "technical",
    "product information": "product",
    "complaint": "complaint",
}

DEFAULT_TEMPLATES: list[dict] = [
    {
        "id": "general",
        "name": "General Inquiry",
        "template": "Answer the following question: {{user_query}}. Be concise and helpful.",
        "category": "Customer Service",
        "description": "A general-purpose template for answering customer questions",
        "version": "1.0.0",
        "is_default": True,
        "tags": ["general", "customer service", "inquiry"],
        "created_by": "System",
        "status": "published",
        "age": timedelta(days=30),
    },
    {
        "id": "technical",
        "name": "Technical Support",
        "template": (
            "Provide technical support for the following issue: {{user_query}}. "
            "Include step-by-step instructions."
        ),
        "category": "Support",
        "description": "Specialized template for technical troubleshooting with step-by-step guidance",
        "version": "1.2.1",
        "tags": ["technical", "support", "troubleshooting"],
        "created_by": "System",
        "status": "published",
        "age": timedelta(days=45),
    },
    {
        "id": "product",
        "name": "Product Information",
        "template": (
            "Provide detailed information about our products based on this query: {{user_query}}. "
            "Highlight key features and benefits."
        ),
        "category": "Sales",
        "description": "Template for product inquiries that highlights features and benefits",
        "version": "1.1.0",
        "tags": ["product", "sales", "features"],
        "created_by": "System",
        "status": "published",
        "age": timedelta(days=60),
    },
    {
        "id": "complaint",
        "name": "Complaint Handling",
        "template": (
            "Address the following customer complaint with empathy: {{user_query}}. "
            "Offer a solution and next steps."
        ),
        "category": "Customer Service",
        "description": "Empathetic template for handling customer complaints and offering solutions",
        "version": "1.0.2",
        "tags": ["complaint", "customer service", "resolution"],
        "created_by": "System",
        "status": "published",
        "age": timedelta(days=15),
    },
    {
        "id": "onboarding",
        "name": "New User Onboarding",
        "template": (
            "Welcome to our platform! I see you're asking about: {{user_query}}. "
            "Let me help you get started with our service."
        ),
        "category": "Customer Service",
        "description": "Friendly onboarding template for new users",
        "version": "0.9.1",
        "tags": ["onboarding", "welcome", "new user"],
        "created_by": "Admin",
        "status": "draft",
        "age": timedelta(days=5),
    },
]

DEFAULT_VARIABLES: list[dict] = [
    {"name": "user_query", "description": "The user's question or input"},
    {"name": "business_name", "description": "Your company or organization name"},
    {"name": "context", "description": "Additional context from the conversation"},
    {"name": "current_date", "description": "Today's date"},
    {"name": "user_name", "description": "The user's name if available"},
]

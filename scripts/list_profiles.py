"""List configuration profiles and prompt templates."""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.persistence.database import AsyncSessionLocal
from app.domain.services.configuration_service import ConfigurationService
from app.domain.services.template_registry import TemplateRegistry


async def list_all():
    """Print every profile and template with its flags."""
    print("=" * 80)
    print("CONFIGURATION PROFILES")
    print("=" * 80)

    async with AsyncSessionLocal() as db:
        profiles = await ConfigurationService(db).list_all()
        print(f"{'ID':<24} {'Name':<28} {'Active':<8} {'Version':<8} {'Model':<12}")
        print("-" * 80)
        for profile in profiles:
            print(
                f"{profile.id[:22]:<24} {profile.name[:26]:<28} {str(profile.is_active):<8} "
                f"{profile.version:<8} {profile.ai_model.model_type:<12}"
            )

        print()
        print("=" * 80)
        print("PROMPT TEMPLATES")
        print("=" * 80)
        templates = await TemplateRegistry(db).list()
        print(f"{'ID':<24} {'Name':<28} {'Default':<8} {'Status':<10} {'Uses':<6}")
        print("-" * 80)
        for template in templates:
            print(
                f"{template.id[:22]:<24} {template.name[:26]:<28} {str(template.is_default):<8} "
                f"{template.status:<10} {template.usage_count:<6}"
            )

        print()
        print(f"Total profiles: {len(profiles)}")
        print(f"Total templates: {len(templates)}")


if __name__ == "__main__":
    asyncio.run(list_all())

"""
Tortoise ORM configuration
"""
from ..config import get_settings

MODELS_MODULE = "src.infra.tortoise_client.models"


def build_tortoise_config(database_url: str, include_aerich: bool = True) -> dict:
    models = [MODELS_MODULE]
    if include_aerich:
        models.append("aerich.models")
    return {
        "connections": {
            "default": database_url
        },
        "apps": {
            "models": {
                "models": models,
                "default_connection": "default",
            },
        },
    }


# aerichから参照される設定
TORTOISE_ORM = build_tortoise_config(get_settings().database_url)

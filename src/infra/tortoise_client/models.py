"""
Tortoise ORM models for the users service
"""
from tortoise.models import Model
from tortoise import fields


class User(Model):
    id = fields.UUIDField(pk=True)
    login = fields.CharField(max_length=255, index=True)
    first_name = fields.CharField(max_length=255, default="")
    last_name = fields.CharField(max_length=255, default="")
    current_game_id = fields.UUIDField(null=True)

    class Meta:
        table = "user"

from django.apps import AppConfig


class SchematicConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.schematic'
    verbose_name = 'Well Schematic Volumes'

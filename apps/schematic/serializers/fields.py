from rest_framework import serializers

from apps.schematic.services.units import parse_number


class LocaleFloatField(serializers.Field):
    """
    Numeric input tolerant of locale formatting ("3277,5", " 4 065 ").

    Never rejects a value: anything unparseable becomes None and the engine
    treats it as absent.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        kwargs.setdefault("default", None)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return parse_number(data)

    def to_representation(self, value):
        return value

from rest_framework import serializers


class TextField(serializers.CharField):
    """A CharField that only takes JSON strings; numbers and booleans are not coerced."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class NotificationCreateSerializer(serializers.Serializer):
    # Values are taken verbatim; only missing, null or empty strings count as missing.
    recipient = TextField(trim_whitespace=False)
    subject = TextField(trim_whitespace=False)
    body = TextField(trim_whitespace=False)
    type = TextField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)

from rest_framework import serializers

MISSING_CODES = {'required', 'blank', 'null'}


class EmailMessageSerializer(serializers.Serializer):
    """Transactional email request. All three fields are required."""
    to = serializers.CharField(max_length=320)
    subject = serializers.CharField(max_length=255)
    text = serializers.CharField()

    def _single_line(self, value):
        if '\n' in value or '\r' in value:
            raise serializers.ValidationError('Header values can not contain newlines.')
        return value

    def validate_to(self, value):
        return self._single_line(value)

    def validate_subject(self, value):
        return self._single_line(value)

    def has_missing_fields(self):
        return any(
            getattr(error, 'code', None) in MISSING_CODES
            for field_errors in self.errors.values()
            for error in field_errors
        )

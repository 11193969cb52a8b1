import logging
import smtplib

from django.conf import settings
from django.core.mail import BadHeaderError, send_mail
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import EmailMessageSerializer

logger = logging.getLogger(__name__)


class SendEmailView(APIView):
    """
    Relay a transactional email through the configured SMTP transport.

    Expected payload:
    {
        "to": "customer@example.com",
        "subject": "Your download",
        "text": "Thanks for your purchase"
    }
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = EmailMessageSerializer(data=request.data)
        if not serializer.is_valid():
            if serializer.has_missing_fields():
                message = 'Missing required fields'
            else:
                message = 'Invalid email fields'
            return Response(
                {'message': message, 'errors': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            send_mail(
                subject=data['subject'],
                message=data['text'],
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[data['to']],
            )
        except (smtplib.SMTPException, OSError, BadHeaderError):
            logger.exception("Error sending email to %s", data['to'])
            return Response(
                {'message': 'Error sending email'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        logger.info("Email sent to %s", data['to'])
        return Response({'message': 'Email sent successfully'})

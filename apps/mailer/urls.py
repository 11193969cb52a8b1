from django.urls import path

from .views import SendEmailView

app_name = 'mailer'

urlpatterns = [
    path('send-email/', SendEmailView.as_view(), name='send_email'),
]

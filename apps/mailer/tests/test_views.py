"""
Tests for the send-email endpoint.
"""

import smtplib
from unittest import mock

from django.core import mail
from django.core.mail import BadHeaderError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient


@override_settings(DEFAULT_FROM_EMAIL='Shop <shop@example.com>')
class SendEmailViewTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.url = reverse('mailer:send_email')

    def test_missing_fields(self):
        response = self.client.post(self.url, {'to': 'a@b.com'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Missing required fields')
        self.assertEqual(set(response.json()['errors']), {'subject', 'text'})
        self.assertEqual(len(mail.outbox), 0)

    def test_blank_fields_count_as_missing(self):
        response = self.client.post(self.url, {'to': 'a@b.com', 'subject': '', 'text': 'hi'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Missing required fields')

    def test_sends_email(self):
        payload = {'to': 'a@b.com', 'subject': 'Your download', 'text': 'Thanks!'}
        with self.assertLogs('apps.mailer.views', level='INFO'):
            response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'message': 'Email sent successfully'})

        self.assertEqual(len(mail.outbox), 1)
        sent = mail.outbox[0]
        self.assertEqual(sent.to, ['a@b.com'])
        self.assertEqual(sent.subject, 'Your download')
        self.assertEqual(sent.body, 'Thanks!')
        self.assertEqual(sent.from_email, 'Shop <shop@example.com>')

    def test_transport_failure(self):
        payload = {'to': 'a@b.com', 'subject': 'Hello', 'text': 'Body'}
        with mock.patch(
            'apps.mailer.views.send_mail',
            side_effect=smtplib.SMTPAuthenticationError(535, b'bad credentials'),
        ), self.assertLogs('apps.mailer.views', level='ERROR'):
            response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Error sending email'})

    def test_connection_refused(self):
        payload = {'to': 'a@b.com', 'subject': 'Hello', 'text': 'Body'}
        with mock.patch('apps.mailer.views.send_mail', side_effect=ConnectionRefusedError()), \
                self.assertLogs('apps.mailer.views', level='ERROR'):
            response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 500)

    def test_newline_in_subject_is_rejected(self):
        payload = {'to': 'a@b.com', 'subject': 'Hi\nBcc: x@y.com', 'text': 'Body'}
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Invalid email fields')
        self.assertEqual(set(response.json()['errors']), {'subject'})
        self.assertEqual(len(mail.outbox), 0)

    def test_overlong_recipient_is_invalid_not_missing(self):
        payload = {'to': 'a' * 320 + '@b.com', 'subject': 'Hello', 'text': 'Body'}
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Invalid email fields')

    def test_header_error_from_transport(self):
        payload = {'to': 'a@b.com', 'subject': 'Hello', 'text': 'Body'}
        with mock.patch('apps.mailer.views.send_mail', side_effect=BadHeaderError('bad header')), \
                self.assertLogs('apps.mailer.views', level='ERROR'):
            response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Error sending email'})

    def test_only_post_allowed(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)

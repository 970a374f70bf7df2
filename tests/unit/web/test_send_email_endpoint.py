#!/usr/bin/env python3
"""
Tests for the send-email webhook endpoint.

Runs the full application (routing, dependencies, dispatcher, repository)
over an in-memory SQLite database with the gateway mocked out.
"""

import unittest
import uuid
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

from database.models import EmailTemplate, Notification, NotificationPreference, Profile
from database.repositories import NotificationRepository
from notification import ResendEmailChannel, SimulatedEmailChannel, ValidationError
from tests import create_test_database
from tests.mocks.notification_mocks import make_event, make_record
from web.backend.app import create_app
from web.backend.config import AppConfig
from web.backend.dependencies import get_dispatcher

WEBHOOK_PATH = "/functions/v1/send-email"


class EndpointTestCase(unittest.TestCase):

    channel = None

    def setUp(self):
        self.database = create_test_database()
        self.user_id = uuid.uuid4()
        self.notification_id = uuid.uuid4()

        with self.database.session_scope() as session:
            session.add(Profile(id=self.user_id, email='donor@example.com', full_name=None))
            session.add(NotificationPreference(user_id=self.user_id))
            session.add(Notification(
                id=self.notification_id,
                user_id=self.user_id,
                type='donation_received',
                title='Donation received',
                message='Thanks for your donation.',
                metadata_={'amount': '100'},
            ))

        self.app = create_app(
            config=AppConfig(),
            database=self.database,
            email_channel=self.channel or SimulatedEmailChannel()
        )
        self.client = TestClient(self.app)

    def tearDown(self):
        self.database.dispose()

    def event(self, **record_overrides):
        record = make_record(
            id=str(self.notification_id),
            user_id=str(self.user_id),
            metadata={'amount': '100'},
            **record_overrides
        )
        return make_event(record)

    def stored_notification(self):
        with self.database.session_scope() as session:
            row = NotificationRepository(session).get_notification(self.notification_id)
            return bool(row.email_sent), row.email_sent_at

    def set_preferences(self, **values):
        with self.database.session_scope() as session:
            prefs = NotificationRepository(session).get_preferences(self.user_id)
            for key, value in values.items():
                setattr(prefs, key, value)


class TestSendEmailEndpoint(EndpointTestCase):

    def test_simulated_delivery_marks_notification(self):
        response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True})
        email_sent, sent_at = self.stored_notification()
        self.assertTrue(email_sent)
        self.assertIsNotNone(sent_at)

    def test_alias_route(self):
        response = self.client.post("/webhooks/notifications", json=self.event())
        self.assertEqual(response.json(), {'success': True})

    def test_non_insert_event_is_ignored(self):
        event = self.event()
        event['type'] = 'UPDATE'

        response = self.client.post(WEBHOOK_PATH, json=event)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, 'Ignored')
        self.assertFalse(self.stored_notification()[0])

    def test_invalid_json_is_ignored(self):
        response = self.client.post(
            WEBHOOK_PATH, content=b'{not json', headers={'Content-Type': 'application/json'}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, 'Ignored')

    def test_unknown_user_returns_400(self):
        event = self.event()
        event['record']['user_id'] = str(uuid.uuid4())

        response = self.client.post(WEBHOOK_PATH, json=event)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.text, 'User email not found')

    def test_global_opt_out_is_suppressed(self):
        self.set_preferences(email_enabled=False)

        response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, 'Email disabled')
        self.assertFalse(self.stored_notification()[0])

    def test_category_opt_out_is_suppressed(self):
        self.set_preferences(email_review_moderated=False)

        response = self.client.post(WEBHOOK_PATH, json=self.event(type='review_approved'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, 'Email type disabled')

    def test_health_reports_delivery_mode(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['delivery_mode'], 'simulated')

    def test_cors_preflight(self):
        response = self.client.options(
            WEBHOOK_PATH,
            headers={
                'Origin': 'http://localhost:5173',
                'Access-Control-Request-Method': 'POST',
                'Access-Control-Request-Headers': 'content-type',
            }
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['access-control-allow-origin'], '*')

    def test_bare_options_request(self):
        for path in (WEBHOOK_PATH, "/webhooks/notifications"):
            with self.subTest(path=path):
                response = self.client.options(path)

                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.text, 'ok')
                self.assertEqual(response.headers['access-control-allow-origin'], '*')
                self.assertIn('content-type', response.headers['access-control-allow-headers'])


class TestResendDelivery(EndpointTestCase):

    channel = ResendEmailChannel(api_key='re_test_key')

    def setUp(self):
        super().setUp()
        with self.database.session_scope() as session:
            session.add(EmailTemplate(
                type='donation_received',
                subject='Thanks for {{amount}}, {{donorName}}',
                html_body='<p>{{appName}} received {{amount}}</p>',
                text_body='{{appName}} received {{amount}}',
            ))

    @patch('notification.channels.requests.post')
    def test_renders_template_and_posts_to_gateway(self, mock_post):
        mock_post.return_value = Mock(ok=True, status_code=200, json=Mock(return_value={'id': 'email_1'}))

        response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.json(), {'success': True})
        payload = mock_post.call_args[1]['json']
        self.assertEqual(payload['to'], ['donor@example.com'])
        self.assertEqual(payload['subject'], 'Thanks for 100, Donor')
        self.assertEqual(payload['text'], 'ClearCause received 100')
        self.assertTrue(self.stored_notification()[0])

    @patch('notification.channels.requests.post')
    def test_gateway_rejection_returns_unsuccessful_200(self, mock_post):
        mock_post.return_value = Mock(
            ok=False, status_code=403, json=Mock(return_value={'message': 'API key is invalid'})
        )

        response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': False})
        self.assertFalse(self.stored_notification()[0])

    @patch('notification.channels.requests.post')
    def test_redirect_from_gateway_leaves_notification_unmarked(self, mock_post):
        mock_post.return_value = Mock(ok=True, status_code=307, text='', json=Mock(side_effect=ValueError))

        response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.json(), {'success': False})
        self.assertFalse(self.stored_notification()[0])

    def test_health_reports_resend_mode(self):
        self.assertEqual(self.client.get("/health").json()['delivery_mode'], 'resend')


class TestInternalFailure(EndpointTestCase):

    def test_store_failure_returns_500(self):
        with patch.object(NotificationRepository, 'get_profile', side_effect=RuntimeError('db down')):
            response = self.client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'db down'})

    def test_pipeline_error_outside_dispatcher_is_a_generic_500(self):
        def broken_dispatcher():
            raise ValidationError("raised while building the dispatcher")

        self.app.dependency_overrides[get_dispatcher] = broken_dispatcher
        client = TestClient(self.app, raise_server_exceptions=False)

        response = client.post(WEBHOOK_PATH, json=self.event())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Internal server error')


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Tests for template resolution and variable substitution.
"""

import unittest

from notification import (
    EmailTemplate,
    NotificationMessageBuilder,
    RecipientProfile,
    TemplateResolver,
    build_fallback_template,
    parse_event,
)
from tests.mocks.notification_mocks import (
    USER_ID,
    InMemoryNotificationRepository,
    make_event,
    make_record,
    make_template_row,
)


def _notification(**overrides):
    return parse_event(make_event(make_record(**overrides)))


def _recipient(full_name=None):
    return RecipientProfile(user_id=USER_ID, email='donor@example.com', full_name=full_name)


class TestBuildVariables(unittest.TestCase):

    def test_defaults_fill_gaps(self):
        variables = NotificationMessageBuilder.build_variables(
            _notification(metadata={'amount': '100'}), _recipient('Maria Santos')
        )
        self.assertEqual(variables, {'amount': '100', 'donorName': 'Maria Santos', 'appName': 'ClearCause'})

    def test_empty_display_name_falls_back_to_donor(self):
        for full_name in (None, ''):
            with self.subTest(full_name=full_name):
                variables = NotificationMessageBuilder.build_variables(_notification(), _recipient(full_name))
                self.assertEqual(variables['donorName'], 'Donor')

    def test_metadata_wins_over_defaults(self):
        variables = NotificationMessageBuilder.build_variables(
            _notification(metadata={'donorName': 'Anonymous', 'appName': 'Custom'}),
            _recipient('Maria Santos'),
            app_name='ClearCause',
        )
        self.assertEqual(variables['donorName'], 'Anonymous')
        self.assertEqual(variables['appName'], 'Custom')

    def test_app_name_is_configurable(self):
        variables = NotificationMessageBuilder.build_variables(_notification(), _recipient(), app_name='Staging')
        self.assertEqual(variables['appName'], 'Staging')


class TestSubstitute(unittest.TestCase):

    def test_thanks_example(self):
        variables = NotificationMessageBuilder.build_variables(
            _notification(metadata={'amount': '100'}), _recipient()
        )
        result = NotificationMessageBuilder.substitute("Thanks for {{amount}}, {{donorName}}", variables)
        self.assertEqual(result, "Thanks for 100, Donor")

    def test_every_occurrence_is_replaced(self):
        result = NotificationMessageBuilder.substitute("{{a}}-{{a}}-{{a}}", {'a': 'x'})
        self.assertEqual(result, "x-x-x")

    def test_unresolved_tokens_are_left_verbatim(self):
        result = NotificationMessageBuilder.substitute("Hi {{donorName}}, see {{campaignTitle}}", {'donorName': 'Ana'})
        self.assertEqual(result, "Hi Ana, see {{campaignTitle}}")

    def test_tokens_with_spaces_do_not_match(self):
        result = NotificationMessageBuilder.substitute("{{ amount }}", {'amount': '5'})
        self.assertEqual(result, "{{ amount }}")

    def test_replacement_values_are_not_rescanned(self):
        variables = {'first': '{{second}}', 'second': 'boom'}
        result = NotificationMessageBuilder.substitute("{{first}} {{second}}", variables)
        self.assertEqual(result, "{{second}} boom")

    def test_keys_with_regex_characters_are_literal(self):
        result = NotificationMessageBuilder.substitute("{{a.b}} {{axb}}", {'a.b': '1'})
        self.assertEqual(result, "1 {{axb}}")

    def test_prefix_keys_do_not_collide(self):
        result = NotificationMessageBuilder.substitute("{{amount}} {{amountRaised}}", {'amount': '1', 'amountRaised': '2'})
        self.assertEqual(result, "1 2")

    def test_values_are_stringified(self):
        result = NotificationMessageBuilder.substitute(
            "{{n}} {{f}} {{b}} {{none}} {{items}}",
            {'n': 100, 'f': 2.5, 'b': True, 'none': None, 'items': [1, 2]},
        )
        self.assertEqual(result, "100 2.5 true  [1, 2]")

    def test_no_variables_returns_text_unchanged(self):
        self.assertEqual(NotificationMessageBuilder.substitute("{{x}}", {}), "{{x}}")


class TestRender(unittest.TestCase):

    def test_renders_all_three_parts(self):
        template = EmailTemplate(
            type='donation_received',
            subject='{{appName}}: thanks {{donorName}}',
            html_body='<p>{{amount}} for {{campaign}}</p>',
            text_body='{{amount}} for {{campaign}}',
        )
        email = NotificationMessageBuilder.build_email(
            template,
            _notification(metadata={'amount': 'PHP 500', 'campaign': 'Clean Water'}),
            _recipient('Maria Santos'),
        )

        self.assertEqual(email.subject, 'ClearCause: thanks Maria Santos')
        self.assertEqual(email.html_body, '<p>PHP 500 for Clean Water</p>')
        self.assertEqual(email.text_body, 'PHP 500 for Clean Water')


class TestTemplateResolver(unittest.TestCase):

    def test_uses_stored_template(self):
        repo = InMemoryNotificationRepository(templates=[make_template_row()])
        template = TemplateResolver(repo).resolve(_notification())

        self.assertFalse(template.is_fallback)
        self.assertEqual(template.subject, 'Thanks {{donorName}}')

    def test_missing_template_falls_back_to_notification_text(self):
        repo = InMemoryNotificationRepository()
        notification = _notification(title='Milestone verified', message='Your milestone was verified.')

        template = TemplateResolver(repo).resolve(notification)

        self.assertTrue(template.is_fallback)
        self.assertEqual(template.subject, 'Milestone verified')
        self.assertEqual(template.html_body, '<p>Your milestone was verified.</p>')
        self.assertEqual(template.text_body, 'Your milestone was verified.')

    def test_inactive_template_falls_back(self):
        repo = InMemoryNotificationRepository(templates=[make_template_row(is_active=False)])
        template = TemplateResolver(repo).resolve(_notification())
        self.assertTrue(template.is_fallback)

    def test_blank_template_fields_fall_back_individually(self):
        repo = InMemoryNotificationRepository(templates=[make_template_row(subject='', text_body='')])
        notification = _notification(title='Donation received', message='Got it.')

        template = TemplateResolver(repo).resolve(notification)

        self.assertEqual(template.subject, 'Donation received')
        self.assertEqual(template.html_body, '<p>{{amount}} received</p>')
        self.assertEqual(template.text_body, 'Got it.')

    def test_fallback_template_renders_title_and_message(self):
        notification = _notification(title='Hello {{donorName}}', message='Body text')
        email = NotificationMessageBuilder.build_email(
            build_fallback_template(notification), notification, _recipient()
        )
        self.assertEqual(email.subject, 'Hello Donor')
        self.assertIn('Body text', email.html_body)
        self.assertIn('Body text', email.text_body)


if __name__ == '__main__':
    unittest.main()

"""Tests for the JSON log formatter."""

import json
import logging
import sys
import unittest

from utils.logging import JSONFormatter, setup_structured_logging


def _record(msg='User logged in', level=logging.INFO, extra=None, exc_info=None):
    record = logging.LogRecord('services.auth_service', level, __file__, 1, msg, None, exc_info)
    for key, value in (extra or {}).items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def test_basic_fields(self):
        """Records carry timestamp, level, logger and message."""
        data = json.loads(JSONFormatter().format(_record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.auth_service')
        self.assertEqual(data['message'], 'User logged in')
        self.assertTrue(data['timestamp'].endswith('Z'))
        self.assertNotIn('service', data)

    def test_extra_fields_are_included(self):
        """extra fields are copied into the JSON."""
        data = json.loads(JSONFormatter().format(_record(extra={'userId': 'u-1', 'email': 'a@x.com'})))

        self.assertEqual(data['userId'], 'u-1')
        self.assertEqual(data['email'], 'a@x.com')

    def test_service_name(self):
        """The service name is included when set."""
        data = json.loads(JSONFormatter(service='GiftLink Auth API').format(_record()))

        self.assertEqual(data['service'], 'GiftLink Auth API')

    def test_exception_is_formatted(self):
        """Exceptions are rendered into the record."""
        try:
            raise RuntimeError('boom')
        except RuntimeError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        self.assertIn('RuntimeError: boom', data['exception'])

    def test_non_serializable_extra_falls_back_to_str(self):
        """Values json cannot encode are stringified."""
        data = json.loads(JSONFormatter().format(_record(extra={'fields': {'firstName'}})))

        self.assertEqual(data['fields'], "{'firstName'}")


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler_with_level(self):
        """setup_structured_logging() installs one JSON handler."""
        setup_structured_logging(service='svc', level='debug')

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)


if __name__ == '__main__':
    unittest.main()

# api/tests.py
"""
Envelope and Error Handler Tests
================================

Tests for the shared response envelope, the taxonomy-to-status mapping,
and the health endpoint.
"""

from django.test import SimpleTestCase, override_settings
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.test import APITestCase

from .envelope import error_body, success_response
from .exceptions import (
    ConfigurationError,
    InternalError,
    NotFound,
    UpstreamAuthError,
    UpstreamParseError,
    UpstreamQuotaError,
    ValidationError,
)
from .handlers import envelope_exception_handler, flatten_errors


class EnvelopeTest(SimpleTestCase):
    def test_success_shape(self):
        response = success_response({'id': 1}, message='Created', status=201, count=1)

        self.assertEqual(response.status_code, 201)
        self.assertEqual(
            response.data,
            {'success': True, 'message': 'Created', 'count': 1, 'data': {'id': 1}},
        )

    def test_success_without_message(self):
        response = success_response([])

        self.assertEqual(response.data, {'success': True, 'data': []})

    @override_settings(EXPOSE_ERROR_DETAILS=True)
    def test_error_details_outside_production(self):
        self.assertEqual(
            error_body('Boom', 'stack'),
            {'success': False, 'error': 'Boom', 'details': 'stack'},
        )

    @override_settings(EXPOSE_ERROR_DETAILS=False)
    def test_error_details_hidden_in_production(self):
        self.assertEqual(error_body('Boom', 'stack'), {'success': False, 'error': 'Boom'})


class ExceptionHandlerTest(SimpleTestCase):
    def handle(self, exc):
        return envelope_exception_handler(exc, {'view': None})

    def test_taxonomy_status_codes(self):
        expected = {
            ValidationError: 400,
            NotFound: 404,
            ConfigurationError: 500,
            UpstreamAuthError: 401,
            UpstreamQuotaError: 429,
            UpstreamParseError: 500,
            InternalError: 500,
        }
        for error_class, code in expected.items():
            with self.subTest(error=error_class.__name__):
                response = self.handle(error_class())

                self.assertEqual(response.status_code, code)
                self.assertFalse(response.data['success'])
                self.assertEqual(response.data['error'], error_class.default_message)

    @override_settings(EXPOSE_ERROR_DETAILS=True)
    def test_serializer_errors_are_flattened(self):
        exc = drf_exceptions.ValidationError({'task': {'title': ['This field is required.']}})

        response = self.handle(exc)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data['error'], 'Validation Error: task.title: This field is required.'
        )
        self.assertEqual(response.data['details'], ['task.title: This field is required.'])

    def test_method_not_allowed_keeps_status(self):
        response = self.handle(drf_exceptions.MethodNotAllowed('PATCH'))

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    @override_settings(EXPOSE_ERROR_DETAILS=False)
    def test_unexpected_exception_is_generic(self):
        with self.assertLogs('api.handlers', level='ERROR'):
            response = self.handle(RuntimeError('secret internals'))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'error': 'Internal server error'})


class FlattenErrorsTest(SimpleTestCase):
    def test_nested_list_positions(self):
        detail = {'tasks': [{}, {'title': ['Required.']}]}

        self.assertEqual(flatten_errors(detail), ['tasks[1].title: Required.'])

    def test_non_field_errors_use_parent_prefix(self):
        detail = {'non_field_errors': ['Bad body.']}

        self.assertEqual(flatten_errors(detail), ['Bad body.'])


class HealthEndpointTest(APITestCase):
    @override_settings(OPENAI_API_KEY=None)
    def test_health_without_ai(self):
        response = self.client.get('/api/health')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['status'], 'OK')
        self.assertFalse(data['aiConfigured'])
        self.assertIn('timestamp', data)

    @override_settings(OPENAI_API_KEY='sk-test')
    def test_health_with_ai(self):
        response = self.client.get('/api/health')

        self.assertTrue(response.json()['data']['aiConfigured'])

"""Tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from gotcha import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestConfigureLogging:

    def test_json_output(self, capsys):
        configure_logging(level='INFO', json=True)

        structlog.get_logger('gotcha.tests').info('request_completed', status_code=200)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record['event'] == 'request_completed'
        assert record['status_code'] == 200
        assert record['level'] == 'info'
        assert record['logger'] == 'gotcha.tests'
        assert 'timestamp' in record

    def test_level_filters_records(self, capsys):
        configure_logging(level='WARNING', json=True)

        logger = structlog.get_logger('gotcha.tests')
        logger.info('hidden_event')
        logger.warning('shown_event')

        out = capsys.readouterr().out
        assert 'hidden_event' not in out
        assert 'shown_event' in out

    def test_console_renderer(self, capsys):
        configure_logging(level='DEBUG', json=False)

        structlog.get_logger('gotcha.tests').debug('debug_event', url='http://h/')

        out = capsys.readouterr().out
        assert 'debug_event' in out
        assert 'http://h/' in out

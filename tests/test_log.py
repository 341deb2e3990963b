import json
import logging

from frontdesk.config import Settings
from frontdesk.log import FrontDeskJsonFormatter, build_logging_config


def test_json_formatter_adds_standard_fields():
    formatter = FrontDeskJsonFormatter('%(message)s')
    record = logging.LogRecord('frontdesk.service', logging.INFO, __file__, 1,
                               "Stay %s checked out", ('s1',), None)

    line = json.loads(formatter.format(record))

    assert line['message'] == "Stay s1 checked out"
    assert line['level'] == 'INFO'
    assert line['logger'] == 'frontdesk.service'
    assert 'timestamp' in line


def test_json_handler_selected_by_settings():
    plain = build_logging_config(Settings(log_json=False, log_level='debug'))
    shipped = build_logging_config(Settings(log_json=True))

    assert plain['handlers']['console']['formatter'] == 'standard'
    assert plain['loggers']['frontdesk']['level'] == 'DEBUG'
    assert shipped['handlers']['console']['formatter'] == 'json'
    assert shipped['formatters']['json']['()'] is FrontDeskJsonFormatter

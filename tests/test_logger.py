import logging

from shoalsim import logger


def test_add_log_returns_same_logger():
    a = logger.addLog('test_addlog')
    b = logger.addLog('test_addlog')
    assert a is b
    assert a.name == 'test_addlog'
    assert a.level == logger.DEBUG
    logger.removeLog('test_addlog')


def test_set_sim_time_format():
    logger.setSimTime(3.14159)
    assert logger.simTime == '3.14'
    record = logger.customRecordFactory('x', logging.INFO, __file__, 1, 'm',
                                        None, None)
    assert record.simTime == '3.14'
    logger.setSimTime(0.0)


def test_formatter_brackets_function_name():
    fmt = logger.CustomFormatter('%(funcName)s%(message)s')
    record = logging.makeLogRecord({'msg': 'hello', 'funcName': 'advance'})
    out = fmt.format(record)
    assert out.startswith('[advance]')
    assert out.endswith('hello')


def test_formatter_prefixes_each_line():
    fmt = logger.CustomFormatter('%(name)s | %(message)s')
    record = logging.makeLogRecord({'name': 'env', 'msg': 'one\ntwo',
                                    'funcName': 'f'})
    assert fmt.format(record) == 'env | one\nenv | two'


def test_formatter_non_string_message():
    fmt = logger.CustomFormatter('%(message)s')
    record = logging.makeLogRecord({'msg': 42, 'funcName': 'f'})
    assert fmt.format(record) == '42'


def test_none_log_has_no_handlers():
    thisLog = logging.getLogger('test_nonelog')
    thisLog.addHandler(logging.NullHandler())
    out = logger.noneLog('test_nonelog')
    assert out is thisLog
    assert out.handlers == []
    assert out.level == logger.WARNING
    logger.removeLog('test_nonelog')


def test_remove_log():
    logger.addLog('test_removelog')
    logger.removeLog('test_removelog')
    assert 'test_removelog' not in logging.Logger.manager.loggerDict


def test_setup_main_shares_handlers(tmp_path):
    logFile = tmp_path / 'run.log'
    if (logger.log is not None):
        logger.removeLog(logger.MAIN_LOG)
    main = logger.setupMain(fileName=str(logFile), outFormat=None)
    try:
        assert main.name == logger.MAIN_LOG
        assert logger.fileHandler in main.handlers
        sub = logger.addLog('test_sublog')
        assert logger.fileHandler in sub.handlers
        sub.info('written to file')
        logger.fileHandler.flush()
        assert 'written to file' in logFile.read_text()
    finally:
        logger.removeLog('test_sublog')
        logger.deepRemoveHandler(logger.fileHandler)
        logger.removeLog(logger.MAIN_LOG)
    assert logger.log is None
    assert logger.fileHandler is None

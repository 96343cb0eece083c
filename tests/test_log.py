from cairn.log import Level, Log


def make_log(**kwargs):
    messages = []
    log = Log(publisher=lambda level, msg: messages.append((level, msg)), **kwargs)
    return log, messages


def test_default_level_filters_debug():
    log, messages = make_log()
    log.debug("hidden {}", 1)
    assert messages == []
    assert log.is_level_enabled(Level.VERBOSE)
    assert not log.is_level_enabled(Level.DEBUG)


def test_prefixes():
    log, messages = make_log()
    log.error("bad {}", "thing")
    log.warning("careful")
    log.verbose("step {} of {}", 1, 2)
    assert messages == [
        (Level.ERROR, "!ERR bad thing"),
        (Level.WARNING, "WARN careful"),
        (Level.VERBOSE, "step 1 of 2"),
    ]


def test_set_level_enables_debug():
    log, messages = make_log()
    log.set_level(Level.DEBUG)
    log.debug("x={}", 5)
    assert messages == [(Level.DEBUG, "debug x=5")]


def test_lazy_argument_only_evaluated_when_enabled():
    calls = []

    def expensive():
        calls.append(1)
        return "value"

    log, messages = make_log()
    log.debug("{}", expensive)
    assert calls == []
    log.verbose("{}", expensive)
    assert calls == [1]
    assert messages == [(Level.VERBOSE, "value")]


def test_formatters():
    log, messages = make_log()
    log.set_formatter(None, lambda level, text: text + "!")
    log.error("done")
    assert messages == [(Level.ERROR, "done!")]


def test_set_publisher():
    log, first = make_log()
    second = []
    log.set_publisher(lambda level, msg: second.append(msg))
    log.warning("moved")
    assert first == []
    assert second == ["WARN moved"]


def test_error_level_blocks_warning():
    log, messages = make_log(level=Level.ERROR)
    log.warning("nope")
    log.error("yes")
    assert messages == [(Level.ERROR, "!ERR yes")]
"""
wikifreq/errors.py

Every failure in a run is fatal. Each error carries the stage that raised it
so the CLI can print one line saying where the batch stopped:

    config      input files missing / not derivable
    vocabulary  wiktionary index line without a second ':'
    index       dump index line not splittable into offset:id:title
    decompress  seek / read / bz2 / utf-8 failures on the dump
    extract     block XML that does not parse
    output      frequency list write failures
"""


def _rebuild(cls, stage, message):
    err = cls.__new__(cls)
    WikiFreqError.__init__(err, stage, message)
    return err


class WikiFreqError(RuntimeError):
    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message

    def __reduce__(self):
        # subclasses take different constructor args; keep them picklable for process pools
        return _rebuild, (self.__class__, self.stage, self.message)


class ConfigError(WikiFreqError):
    def __init__(self, message: str):
        super().__init__("config", message)


class FormatError(WikiFreqError):
    """Malformed index/vocabulary line or unparsable block content."""


class StreamError(WikiFreqError):
    """Seek, read, decompression or write failure."""


class DesyncError(WikiFreqError):
    """An offset group grew past the safety threshold."""

    def __init__(self, message: str):
        super().__init__("index", message)

from datetime import datetime, timezone as dt_timezone

from weighments.services.operations import WeightReading


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


def stable(weight):
    return WeightReading(live_weight=weight, is_stable=True)


def unstable(weight):
    return WeightReading(live_weight=weight, is_stable=False)

# core/serial_numbers.py
"""
Ticket / bill serial numbers of the form ``WB-2025-001``.

The counter lives in the ``serial_number_config`` AppSetting row as JSON.
``peek()`` shows what the next identifier will be without touching the
counter; ``commit()`` locks the row, issues the identifier and advances the
counter. Callers that commit inside ``transaction.atomic`` get the counter
rolled back together with the rest of their work when they fail.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from core.models import AppSetting

logger = logging.getLogger(__name__)

YEAR_FORMATS = ("YY", "YYYY")
RESET_FREQUENCIES = ("yearly", "monthly", "never")


@dataclass
class SerialNumberConfig:
    prefix: str = "WB"
    separator: str = "-"
    include_year: bool = True
    include_month: bool = False
    year_format: str = "YYYY"
    counter_start: int = 1
    counter_padding: int = 3
    current_counter: int = 1
    reset_frequency: str = "yearly"
    last_reset_date: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.prefix, str) or not isinstance(self.separator, str):
            raise ValueError("prefix and separator must be strings")
        if self.year_format not in YEAR_FORMATS:
            raise ValueError(f"year_format must be one of {YEAR_FORMATS}")
        if self.reset_frequency not in RESET_FREQUENCIES:
            raise ValueError(f"reset_frequency must be one of {RESET_FREQUENCIES}")
        for name in ("counter_start", "counter_padding", "current_counter"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
        if self.last_reset_date is not None:
            # Raises ValueError on garbage
            datetime.fromisoformat(self.last_reset_date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SerialNumberConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def default_config() -> SerialNumberConfig:
    defaults = dict(settings.WEIGHBRIDGE.get("DEFAULT_SERIAL_CONFIG", {}))
    config = SerialNumberConfig.from_dict(defaults)
    config.current_counter = config.counter_start
    return config


def format_serial(config: SerialNumberConfig, when: datetime) -> str:
    """Render ``config.current_counter`` as an identifier for the period of ``when``."""
    parts = [config.prefix]
    if config.include_year:
        year = str(when.year)
        parts.append(year[-2:] if config.year_format == "YY" else year)
    if config.include_month:
        parts.append(f"{when.month:02d}")
    parts.append(str(config.current_counter).zfill(config.counter_padding))
    return config.separator.join(parts)


class SerialNumberGenerator:
    """Issues year-scoped serial numbers backed by an AppSetting row."""

    def __init__(
        self,
        clock: Callable[[], datetime] = timezone.now,
        in_use: Optional[Callable[[str], bool]] = None,
    ):
        self.clock = clock
        if in_use is None:
            path = settings.WEIGHBRIDGE.get("SERIAL_IN_USE")
            in_use = import_string(path) if path else (lambda serial_no: False)
        self.in_use = in_use

    # ---------- persistence ----------
    def _now(self) -> datetime:
        return timezone.localtime(self.clock())

    def _parse(self, raw: Optional[str]) -> SerialNumberConfig:
        if raw is None:
            return default_config()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("serial number config is not an object")
            merged = default_config().to_dict()
            merged.update(data)
            return SerialNumberConfig.from_dict(merged)
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Corrupt serial number config, resetting counter: {e}")
            config = default_config()
            config.last_reset_date = self._now().isoformat()
            return config

    def _read_row(self, for_update: bool = False) -> Optional[AppSetting]:
        qs = AppSetting.objects.filter(key=AppSetting.SERIAL_NUMBER_CONFIG)
        if for_update:
            qs = qs.select_for_update()
        return qs.first()

    def _write(self, config: SerialNumberConfig) -> None:
        AppSetting.objects.update_or_create(
            key=AppSetting.SERIAL_NUMBER_CONFIG,
            defaults={"value": json.dumps(config.to_dict())},
        )

    def get_config(self) -> SerialNumberConfig:
        row = self._read_row()
        return self._parse(row.value if row else None)

    # ---------- period reset ----------
    def _apply_reset(self, config: SerialNumberConfig, now: datetime) -> SerialNumberConfig:
        if config.last_reset_date is None:
            return dataclasses.replace(config, last_reset_date=now.isoformat())
        if config.reset_frequency == "never":
            return config

        last = datetime.fromisoformat(config.last_reset_date)
        if timezone.is_aware(last):
            last = timezone.localtime(last)

        if config.reset_frequency == "yearly":
            should_reset = now.year > last.year
        else:
            should_reset = (now.year, now.month) > (last.year, last.month)

        if should_reset:
            logger.info(
                f"Serial counter reset from {config.current_counter} to {config.counter_start} "
                f"({config.reset_frequency})"
            )
            return dataclasses.replace(
                config,
                current_counter=config.counter_start,
                last_reset_date=now.isoformat(),
            )
        return config

    def _first_free(self, config: SerialNumberConfig, now: datetime) -> str:
        """
        Advance ``config.current_counter`` past identifiers already on a
        ticket or bill (left behind by a manual reset or a repaired config).
        """
        serial_no = format_serial(config, now)
        skipped = 0
        while self.in_use(serial_no):
            config.current_counter += 1
            skipped += 1
            serial_no = format_serial(config, now)
        if skipped:
            logger.warning(f"Skipped {skipped} serial number(s) already in use, next is {serial_no}")
        return serial_no

    # ---------- public API ----------
    def peek(self) -> str:
        """Identifier the next ``commit()`` would issue. Does not advance the counter."""
        now = self._now()
        config = self._apply_reset(self.get_config(), now)
        return self._first_free(config, now)

    def commit(self) -> str:
        """Issue the current identifier and advance the counter."""
        now = self._now()
        with transaction.atomic():
            row = self._read_row(for_update=True)
            config = self._apply_reset(self._parse(row.value if row else None), now)
            serial_no = self._first_free(config, now)
            config.current_counter += 1
            self._write(config)

        logger.debug(f"Serial number issued: {serial_no}")
        return serial_no

    next = commit

    def update_config(self, reset_counter_now: bool = False, **changes) -> SerialNumberConfig:
        with transaction.atomic():
            row = self._read_row(for_update=True)
            current = self._parse(row.value if row else None).to_dict()
            current.update(changes)
            config = SerialNumberConfig.from_dict(current)
            if reset_counter_now:
                config.current_counter = config.counter_start
                config.last_reset_date = self._now().isoformat()
            self._write(config)

        logger.info(f"Serial number config updated (reset={reset_counter_now})")
        return config

    def reset(self) -> SerialNumberConfig:
        return self.update_config(reset_counter_now=True)

    def preview(self, **overrides) -> str:
        """Render a format with ``overrides`` applied, without persisting anything."""
        data = self.get_config().to_dict()
        data.update(overrides)
        return format_serial(SerialNumberConfig.from_dict(data), self._now())

"""EventComposer — turns one log call into one or more ``LogEvent`` values.

Payload layout (canonical JSON)::

    {
      "message": "...",
      "metadata": {"file": "...", "function": "...", "line": "...", ...},
      "userInfo": {"log_type": "...", ...}
    }

With ``SINGLE_EVENT`` every record of the error's cause chain is folded into
one event using ``ENCAPSULATE_FLATTEN``, so colliding keys are kept under
numbered names.  With ``MULTIPLE_EVENTS`` the error is first split into its
independent parts and each part gets its own event, folded with
``OVERRIDE``.
"""

from __future__ import annotations

import logging
from pathlib import PureWindowsPath
from typing import Any

from pydantic import BaseModel, ConfigDict

from logcourier.core.error_chain import cause_chain, disassociate
from logcourier.core.merge import flatten, merge
from logcourier.core.platform_info import PlatformInfo, SystemPlatformInfo
from logcourier.core.serializer import canonical_json
from logcourier.errors import CompositionError
from logcourier.models.config import EventLoggingPolicy, LoggerConfig, MergePolicy
from logcourier.models.events import CallSite, ErrorRecord, LogEvent, LogLevel

logger = logging.getLogger(__name__)

MESSAGE_KEY = "message"
METADATA_KEY = "metadata"
USER_INFO_KEY = "userInfo"


class CompositionResult(BaseModel):
    """Events produced by one log call, plus any payloads that failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    events: list[LogEvent] = []
    errors: list[CompositionError] = []

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise the first ``CompositionError``, if any payload failed."""
        if self.errors:
            raise self.errors[0]


def file_basename(path: str) -> str:
    """Last path component of *path*, for both ``/`` and ``\\`` separators."""
    return PureWindowsPath(path).name or path


class EventComposer:
    """Builds structured events from log calls.

    Parameters
    ----------
    config:
        Key names, default userInfo and the default event logging policy.
    platform_info:
        Source of app/OS metadata.  Queried for every event.
    """

    def __init__(
        self,
        config: LoggerConfig,
        platform_info: PlatformInfo | None = None,
    ) -> None:
        self._config = config
        self._platform = platform_info or SystemPlatformInfo()

    @property
    def config(self) -> LoggerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compose(
        self,
        level: LogLevel,
        message: str,
        *,
        call_site: CallSite,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        policy: EventLoggingPolicy | None = None,
    ) -> CompositionResult:
        """Compose the events for a single log call.

        Never raises for malformed errors or userInfo.  Payloads that cannot
        be serialized are reported in ``CompositionResult.errors`` while the
        remaining events are still returned.
        """
        keys = self._config.keys
        policy = policy or self._config.event_logging_policy

        metadata = self.build_metadata(call_site)
        options = merge(self._config.default_user_info, user_info or {}, MergePolicy.OVERRIDE)
        options[keys.log_type] = level.value

        if error is None:
            variants = [options]
        elif policy is EventLoggingPolicy.SINGLE_EVENT:
            variants = [self._fold(options, cause_chain(error), policy.merge_policy)]
        else:
            variants = [
                self._fold(options, cause_chain(part), policy.merge_policy)
                for part in disassociate(error)
            ]
            if not variants:
                logger.warning(
                    "Error %r has no independent parts; emitting the message alone.",
                    error,
                )
                variants = [options]

        events: list[LogEvent] = []
        errors: list[CompositionError] = []
        for variant in variants:
            try:
                events.append(self._build_event(level, message, metadata, variant))
            except CompositionError as exc:
                logger.error("Dropping unserializable %s event: %s", level.value, exc)
                errors.append(exc)
        return CompositionResult(events=events, errors=errors)

    def build_metadata(self, call_site: CallSite) -> dict[str, str]:
        """Call-site and platform metadata for one event."""
        keys = self._config.keys
        metadata = {
            keys.file: file_basename(call_site.file),
            keys.function: call_site.function,
            keys.line: str(call_site.line),
        }

        version = self._platform.app_version()
        build = self._platform.app_build()
        if version and build:
            metadata[keys.app_version] = f"{version} ({build})"
        elif version:
            metadata[keys.app_version] = version

        os_version = self._platform.os_version()
        if os_version:
            metadata[keys.os_version] = os_version
        device_type = self._platform.device_type()
        if device_type:
            metadata[keys.device_type] = device_type
        return metadata

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fold(
        self,
        options: dict[str, Any],
        records: list[ErrorRecord],
        policy: MergePolicy,
    ) -> dict[str, Any]:
        keys = self._config.keys
        folded = dict(options)
        for record in records:
            identity = {keys.error_domain: record.domain, keys.error_code: record.code}
            folded = merge(folded, identity, policy)
            folded = merge(folded, flatten(record.user_info), policy)
        return folded

    def _build_event(
        self,
        level: LogLevel,
        message: str,
        metadata: dict[str, str],
        options: dict[str, Any],
    ) -> LogEvent:
        payload = canonical_json(
            {MESSAGE_KEY: message, METADATA_KEY: metadata, USER_INFO_KEY: options}
        )
        return LogEvent(level=level, payload=payload)

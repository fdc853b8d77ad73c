"""Display-value to wire-value tables, grouped into parameter profiles."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .normalization_outcomes import ParameterError
from .run_configuration import EnvironmentKind


@dataclass(frozen=True)
class EnumTable:
    """Closed set of accepted display values for one configuration field."""

    field_name: str
    label: str
    entries: Mapping[str, str]

    def to_wire(self, display_value: str) -> str:
        """Return the wire token for an exact display-value match."""
        try:
            return self.entries[display_value]
        except KeyError:
            raise ParameterError(
                self.field_name, f"{self.label} should be {self.describe_accepted()}"
            ) from None

    def describe_accepted(self) -> str:
        quoted = [f"'{value}'" for value in self.entries]
        if len(quoted) == 1:
            return quoted[0]
        if len(quoted) == 2:
            return f"{quoted[0]} or {quoted[1]}"
        return f"either of {', '.join(quoted[:-1])} or {quoted[-1]}"


def _table(field_name: str, label: str, *pairs: tuple[str, str]) -> EnumTable:
    return EnumTable(field_name=field_name, label=label, entries=MappingProxyType(dict(pairs)))


@dataclass(frozen=True)
class ParameterProfile:
    """Enum tables accepted by one deployment of the remote service."""

    name: str
    environment: EnumTable
    app_type: EnumTable
    capture_type: EnumTable
    device_language: EnumTable
    device_region: EnumTable | None = None


ENVIRONMENT_KINDS: Mapping[str, EnvironmentKind] = MappingProxyType(
    {
        "magic_pod": EnvironmentKind.CLOUD,
        "remote_testkit": EnvironmentKind.REMOTE_HOSTED,
        "remote_testkit_onpremise": EnvironmentKind.ON_PREMISE,
    }
)

_MAGIC_POD = ("Magic Pod", "magic_pod")
_REMOTE_TESTKIT = ("Remote TestKit", "remote_testkit")
_REMOTE_TESTKIT_ONPREMISE = ("Remote TestKit Onpremise", "remote_testkit_onpremise")

APP_TYPE_TABLE = _table(
    "app_type",
    "App type",
    ("App file (cloud upload)", "app_file"),
    ("App file (URL)", "app_url"),
    ("Installed app", "installed"),
)

CAPTURE_TYPE_TABLE = _table(
    "capture_type",
    "Capture type",
    ("Every step", "on_each_step"),
    ("Every UI transit", "on_ui_transit"),
    ("Failure capture only", "on_error"),
)

_LANGUAGES = (("English", "en"), ("Japanese", "ja"))

DEVICE_REGION_TABLE = _table(
    "device_region",
    "Device region",
    ("Default", "Default"),
    ("Australia", "AU"),
    ("Brazil", "BR"),
    ("Canada", "CA"),
    ("China mainland", "CN"),
    ("France", "FR"),
    ("Germany", "DE"),
    ("India", "IN"),
    ("Indonesia", "ID"),
    ("Italy", "IT"),
    ("Japan", "JP"),
    ("Mexico", "MX"),
    ("Netherlands", "NL"),
    ("Russia", "RU"),
    ("Saudi Arabia", "SA"),
    ("South Korea", "KR"),
    ("Spain", "ES"),
    ("Switzerland", "CH"),
    ("Taiwan", "TW"),
    ("Turkey", "TR"),
    ("United Kingdom", "GB"),
    ("United States", "US"),
)

CLOUD_ONLY_PROFILE = ParameterProfile(
    name="cloud-only",
    environment=_table("environment", "Environment", _MAGIC_POD),
    app_type=APP_TYPE_TABLE,
    capture_type=CAPTURE_TYPE_TABLE,
    device_language=_table("device_language", "Device language", *_LANGUAGES),
)

REMOTE_TESTKIT_PROFILE = ParameterProfile(
    name="remote-testkit",
    environment=_table("environment", "Environment", _MAGIC_POD, _REMOTE_TESTKIT),
    app_type=APP_TYPE_TABLE,
    capture_type=CAPTURE_TYPE_TABLE,
    device_language=_table("device_language", "Device language", *_LANGUAGES),
)

STANDARD_PROFILE = ParameterProfile(
    name="standard",
    environment=_table(
        "environment", "Environment", _MAGIC_POD, _REMOTE_TESTKIT, _REMOTE_TESTKIT_ONPREMISE
    ),
    app_type=APP_TYPE_TABLE,
    capture_type=CAPTURE_TYPE_TABLE,
    device_language=_table(
        "device_language", "Device language", ("Default", "default"), *_LANGUAGES
    ),
    device_region=DEVICE_REGION_TABLE,
)

PARAMETER_PROFILES: Mapping[str, ParameterProfile] = MappingProxyType(
    {
        profile.name: profile
        for profile in (STANDARD_PROFILE, REMOTE_TESTKIT_PROFILE, CLOUD_ONLY_PROFILE)
    }
)


def get_parameter_profile(name: str) -> ParameterProfile:
    """Look up a built-in parameter profile by name."""
    try:
        return PARAMETER_PROFILES[name]
    except KeyError:
        accepted = ", ".join(f"'{profile}'" for profile in PARAMETER_PROFILES)
        raise ParameterError(
            "parameter_profile", f"Parameter profile should be one of {accepted}"
        ) from None

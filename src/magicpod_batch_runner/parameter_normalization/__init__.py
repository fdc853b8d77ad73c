"""Parameter normalization domain exports."""

from .enum_tables import (
    ENVIRONMENT_KINDS,
    PARAMETER_PROFILES,
    STANDARD_PROFILE,
    EnumTable,
    ParameterProfile,
    get_parameter_profile,
)
from .normalization_outcomes import (
    NormalizationResult,
    ParameterError,
    ParameterValidationError,
)
from .parameter_normalizer import convert_to_snake_case, normalize_run_settings
from .run_configuration import (
    AppSource,
    AppSourceKind,
    EnvironmentKind,
    ExternalServiceCredentials,
    InstalledAndroidApp,
    InstalledIosApp,
    RemoteAppUrl,
    RunConfiguration,
    UploadedAppFile,
)

__all__ = [
    "ENVIRONMENT_KINDS",
    "PARAMETER_PROFILES",
    "STANDARD_PROFILE",
    "EnumTable",
    "ParameterProfile",
    "get_parameter_profile",
    "NormalizationResult",
    "ParameterError",
    "ParameterValidationError",
    "convert_to_snake_case",
    "normalize_run_settings",
    "AppSource",
    "AppSourceKind",
    "EnvironmentKind",
    "ExternalServiceCredentials",
    "InstalledAndroidApp",
    "InstalledIosApp",
    "RemoteAppUrl",
    "RunConfiguration",
    "UploadedAppFile",
]

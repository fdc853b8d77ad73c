"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "magicpod.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Batch run configuration for magicpod-batch-runner.
# Replace every <REQUIRED> placeholder before running `run`.
# Replace <OPTIONAL> placeholders only when your setup needs them, otherwise delete them.
# Every setting can also be supplied (and overridden) by an environment variable
# with the same lowercase name, e.g. magic_pod_api_token.

base_url: "https://app.magicpod.com/api/v1.0"
# Prefer the magic_pod_api_token environment variable over storing the token here.
magic_pod_api_token: "<REQUIRED>"
organization_name: "<REQUIRED>"
project_name: "<REQUIRED>"

# One of 'Magic Pod', 'Remote TestKit' or 'Remote TestKit Onpremise'.
environment: "Magic Pod"
# Remote TestKit only.
external_service_token: "<OPTIONAL>"
# Remote TestKit Onpremise only.
external_service_server_url: "<OPTIONAL>"
external_service_user_name: "<OPTIONAL>"
external_service_password: "<OPTIONAL>"

# Free text, folded to snake case (e.g. 'iOS' -> ios, 'Real Device' -> real_device).
os: "<REQUIRED>"
device_type: "<REQUIRED>"
version: "<REQUIRED>"  # keep quoted, e.g. "12.10"
model: "<REQUIRED>"

# One of 'App file (cloud upload)', 'App file (URL)' or 'Installed app'.
app_type: "<REQUIRED>"
# App file (cloud upload): path to .apk/.ipa/.zip or an .app directory (zipped before upload).
app_path: "<OPTIONAL>"
# App file (URL)
app_url: "<OPTIONAL>"
# Installed iOS apps, and iOS app files on Remote TestKit environments.
bundle_id: "<OPTIONAL>"
# Installed apps on other operating systems.
app_package: "<OPTIONAL>"
app_activity: "<OPTIONAL>"

# One of 'Every step', 'Every UI transit' or 'Failure capture only'.
capture_type: "Every UI transit"
# 'Default', 'English' or 'Japanese'.
device_language: "Default"
# 'Default' or a region name such as 'Japan' or 'United States'.
device_region: "Default"
# Multi-language shared data, sent as shared_data_pattern.multi_lang_data.
multi_lang_data: "<OPTIONAL>"
send_mail: false
retry_count: 0

wait_for_result: true
# 0 waits until the batch run finishes.
max_wait_seconds: 0
poll_interval_seconds: 15
request_timeout_seconds: 60

# One of 'standard', 'remote-testkit' or 'cloud-only'.
parameter_profile: "standard"
# One of 'envman', 'file' or 'none'.
result_sink: "envman"
# Required when result_sink is 'file'.
result_file: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML batch run configuration with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
